import logging
import re
from typing import Optional
from dataclasses import dataclass

from robo_maze.maze_gen.grid import Direction, Path
from robo_maze.model_gateways.base import ModelAdapter, OracleError

logger = logging.getLogger(__name__)

ARROWS = '↑↓←→'

_LETTERS = re.compile(r"[\s,\[\]()'\"`]*([UDLR][\s,\[\]()'\"`]*)+", flags=re.IGNORECASE)
_WORDS = re.compile(r"\b(up|down|left|right)\b", flags=re.IGNORECASE)
_SEPARATORS = re.compile(r"[\s,\[\]()'\"`.;-]+")


class EmptyCommandSequence(OracleError):
    """The oracle answered, but nothing in the answer is a movement command."""


@dataclass
class ParseResult:
    path: Path
    raw: str
    mode: str

    @property
    def adherent(self) -> bool:
        # the answer was nothing but arrows (whitespace aside)
        return self.mode == 'arrows' and sanitize_output(self.raw) == ''.join(self.raw.split())


def sanitize_output(text: str) -> str:
    """Strip every character that is not a movement arrow."""
    return ''.join(ch for ch in text if ch in ARROWS)


class CommandParser:
    def parse(self, text: str) -> ParseResult:
        raw = (text or '').strip()
        # Arrow glyphs: anything else in the answer is discarded
        arrows = sanitize_output(raw)
        if arrows:
            return ParseResult(path=[Direction.from_token(ch) for ch in arrows], raw=raw, mode='arrows')
        # Bare letter codes: "RRDDL", "R, R, D", "['U','L']"
        if raw and _LETTERS.fullmatch(raw):
            letters = re.findall(r"[UDLR]", raw, flags=re.IGNORECASE)
            return ParseResult(path=[Direction.from_token(ch) for ch in letters], raw=raw, mode='letters')
        # Spelled-out words, only when nothing else is in the answer
        words = _WORDS.findall(raw)
        if words and not _SEPARATORS.sub('', _WORDS.sub('', raw)):
            return ParseResult(path=[Direction[w.upper()] for w in words], raw=raw, mode='words')
        return ParseResult(path=[], raw=raw, mode='empty')

    def parse_with_fallback(self, text: str, adapter: Optional[ModelAdapter] = None, prompt: Optional[str] = None) -> ParseResult:
        res = self.parse(text)
        if res.mode != 'empty' or adapter is None:
            return res
        if prompt is None:
            prompt = f"Answer again using only the characters {ARROWS}, with no explanation."
        logger.info(f"{adapter.name()} returned no usable commands, asking once more")
        try:
            new_text = adapter.generate(prompt)
        except OracleError as e:
            logger.warning(f"Retry request failed: {e}")
            return res
        return self.parse(new_text)


def parse_commands(text: str) -> Path:
    """Direction sequence from an oracle answer.

    Raises:
        EmptyCommandSequence: no movement command could be extracted
    """
    res = CommandParser().parse(text)
    if not res.path:
        raise EmptyCommandSequence(f"no movement commands in oracle output: {res.raw[:80]!r}")
    return res.path
