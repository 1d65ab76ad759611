from typing import Optional

from .base import ModelAdapter
from robo_maze.eval_core.pathfinder import find_path
from robo_maze.maze_gen.grid import path_to_arrows
from robo_maze.maze_gen.map_loader import MapSpec


class MockAdapter(ModelAdapter):
    """
    CI-friendly oracle: answers with the planner's route for the map it was
    given, written as arrows. Without a map, or when no route exists, it
    answers with prose that contains no commands.
    """
    def __init__(self, model: str = 'mock', map_spec: Optional[MapSpec] = None):
        self._model = model
        self.map_spec = map_spec
        self.calls = 0

    def name(self) -> str:
        return f'mock:{self._model}'

    def generate(self, prompt: str, system: Optional[str] = None) -> str:
        self.calls += 1
        if self.map_spec is None:
            return 'I cannot see the map.'
        result = find_path(self.map_spec.grid, self.map_spec.start, self.map_spec.goal)
        if not result:
            return 'There is no safe way to the goal.'
        return path_to_arrows(result.path)
