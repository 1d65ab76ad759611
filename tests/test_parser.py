"""Tests for extracting movement commands from oracle answers."""

import pytest

from robo_maze.eval_core.parser import (
    CommandParser,
    EmptyCommandSequence,
    parse_commands,
    sanitize_output,
)
from robo_maze.maze_gen.grid import Direction
from robo_maze.model_gateways.base import ModelAdapter, OracleError

R, L, D, U = Direction.RIGHT, Direction.LEFT, Direction.DOWN, Direction.UP


class ScriptedAdapter(ModelAdapter):
    """Returns canned answers in order."""

    def __init__(self, answers):
        self.answers = list(answers)
        self.prompts = []

    def generate(self, prompt, system=None):
        self.prompts.append(prompt)
        answer = self.answers.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return answer


class TestParse:
    def test_pure_arrows(self):
        res = CommandParser().parse("→→↓↓←↑")
        assert res.mode == "arrows"
        assert res.path == [R, R, D, D, L, U]
        assert res.adherent

    def test_arrows_inside_prose_are_kept_and_the_rest_stripped(self):
        res = CommandParser().parse("Sure! Here you go: →→↓ (3 moves)")
        assert res.mode == "arrows"
        assert res.path == [R, R, D]
        assert not res.adherent

    def test_arrows_across_lines(self):
        res = CommandParser().parse("↓↓↓\n→→")
        assert res.path == [D, D, D, R, R]
        assert res.adherent

    @pytest.mark.parametrize("text,expected", [
        ("RRDDL", [R, R, D, D, L]),
        ("r, r, d", [R, R, D]),
        ("['U', 'L']", [U, L]),
    ])
    def test_letter_codes(self, text, expected):
        res = CommandParser().parse(text)
        assert res.mode == "letters"
        assert res.path == expected

    def test_words(self):
        res = CommandParser().parse("up, up, Left right")
        assert res.mode == "words"
        assert res.path == [U, U, L, R]

    @pytest.mark.parametrize("text", [
        "",
        "I don't know the way.",
        "Go right",
        "Right 3 times",
    ])
    def test_nothing_usable(self, text):
        res = CommandParser().parse(text)
        assert res.mode == "empty"
        assert res.path == []

    def test_none_is_empty(self):
        assert CommandParser().parse(None).mode == "empty"


class TestSanitize:
    def test_strips_everything_but_arrows(self):
        assert sanitize_output("a→b↓ c ←1↑!") == "→↓←↑"


class TestParseCommands:
    def test_returns_path(self):
        assert parse_commands("↑←") == [U, L]

    def test_empty_sequence_is_a_distinct_failure(self):
        with pytest.raises(EmptyCommandSequence):
            parse_commands("Sorry, I cannot help with that.")

    def test_empty_sequence_is_an_oracle_error(self):
        assert issubclass(EmptyCommandSequence, OracleError)


class TestFallback:
    def test_no_retry_when_answer_is_usable(self):
        adapter = ScriptedAdapter([])
        res = CommandParser().parse_with_fallback("→", adapter=adapter)
        assert res.path == [R]
        assert adapter.prompts == []

    def test_retries_once(self):
        adapter = ScriptedAdapter(["↓→"])
        res = CommandParser().parse_with_fallback("no idea", adapter=adapter, prompt="arrows please")
        assert res.path == [D, R]
        assert adapter.prompts == ["arrows please"]

    def test_retry_failure_keeps_empty_result(self):
        adapter = ScriptedAdapter([OracleError("timeout")])
        res = CommandParser().parse_with_fallback("no idea", adapter=adapter)
        assert res.mode == "empty"
        assert res.raw == "no idea"

    def test_without_adapter(self):
        res = CommandParser().parse_with_fallback("no idea")
        assert res.mode == "empty"
