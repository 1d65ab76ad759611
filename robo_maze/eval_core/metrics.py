from typing import Dict


class Metrics:
    def __init__(self, size: int):
        self.size = size
        # larger maps put more weight on route quality
        if size <= 8:
            self.w = {'S': 0.5, 'Q': 0.2, 'O': 0.15, 'E': 0.1, 'A': 0.05}
        else:
            self.w = {'S': 0.45, 'Q': 0.25, 'O': 0.15, 'E': 0.1, 'A': 0.05}

    def score(self, result: Dict, adherent: bool = True) -> Dict:
        # S: Success (reached the goal)
        S = 1.0 if result.get('ok') else 0.0
        # Q: Optimality (as many moves as the planner's route)
        Q = 1.0 if result.get('ok') and result.get('optimal') else 0.0
        # O: Overlap of visited cells with the planner's route (0-1)
        O = float(result.get('overlap') or 0.0)
        # E: Efficiency, share of commands that were not blocked
        steps = int(result.get('steps') or 0)
        E = 1.0 - (int(result.get('blocked') or 0) / steps) if steps else 0.0
        # A: Adherence to the arrows-only output format
        A = 1.0 if adherent else 0.0
        total = self.w['S']*S + self.w['Q']*Q + self.w['O']*O + self.w['E']*E + self.w['A']*A
        return {'S': S, 'Q': Q, 'O': round(O, 3), 'E': round(E, 3), 'A': A, 'total': round(total*100, 1)}
