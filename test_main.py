# test_main.py

import math

import pytest

import main
from calc_config import CalcSettings
from main import REPL, format_tokens, format_value, format_var_table
from calc_tokenizer import tokenize


class ScriptedSession:
    """Stands in for a PromptSession: hands out lines, then EOF."""

    def __init__(self, lines):
        self.lines = list(lines)
        self.prompts = []

    def prompt(self, message):
        self.prompts.append(message)
        if not self.lines:
            raise EOFError()
        line = self.lines.pop(0)
        if isinstance(line, BaseException):
            raise line
        return line


# ---------------------------
# Formatting
# ---------------------------

@pytest.mark.parametrize("value, expected", [
    (14.0, "14.0"),
    (9.0, "9.0"),
    (-4.0, "-4.0"),
    (0.5, "0.5"),
    (0.1 + 0.2, "0.30000000000000004"),
    (1e-7, "0.0000001"),
    (1e20, "100000000000000000000"),
    (math.inf, "inf"),
    (-math.inf, "-inf"),
    (math.nan, "nan"),
])
def test_format_value(value, expected):
    assert format_value(value) == expected


def test_format_tokens():
    assert format_tokens(tokenize("a+1")) == "Token(VariableName, 'a')\nToken(Add)\nToken(Number, 1.0)"


def test_format_var_table():
    assert format_var_table({"a": 1.0, "b": 2.5}) == "a: 1.0\nb: 2.5"


# ---------------------------
# evaluate_line
# ---------------------------

def test_evaluate_value(repl):
    assert repl.evaluate_line("(1 + 2) * 3") == (True, "9.0")
    assert repl.evaluate_line("2^3^2") == (True, "64.0")


def test_evaluate_assignment_has_no_output(repl):
    assert repl.evaluate_line("x = 3 + 4") == (True, None)
    assert repl.parser.get_var_table() == {"x": 7.0}
    assert repl.evaluate_line("x * 2") == (True, "14.0")


def test_evaluate_blank_line_is_ignored(repl):
    assert repl.evaluate_line("") == (True, None)
    assert repl.evaluate_line("   ") == (True, None)
    assert repl.running


def test_evaluate_quit_stops_session(repl):
    assert repl.evaluate_line("quit") == (True, None)
    assert not repl.running


def test_evaluate_errors_are_reported(repl):
    ok, out = repl.evaluate_line("y")
    assert not ok and out == "Error: Undefined variable: y"
    ok, out = repl.evaluate_line("(1 + 2")
    assert not ok and out == "Error: Expected RightParen but found end of input"
    ok, out = repl.evaluate_line("1.2.3 + 1")
    assert not ok and "Invalid numeric literal" in out
    assert repl.running
    assert dict(repl.parser.get_var_table()) == {}


def test_evaluate_division_by_zero_prints_inf(repl):
    assert repl.evaluate_line("1 / 0") == (True, "inf")
    assert repl.evaluate_line("0 / 0") == (True, "nan")


def test_debug_prints_tokens_and_table(debug_repl):
    ok, out = debug_repl.evaluate_line("x = 2")
    assert ok
    assert out == "Token(VariableName, 'x')\nToken(Equals)\nToken(Number, 2.0)\nx: 2.0"
    ok, out = debug_repl.evaluate_line("x")
    assert out == "Token(VariableName, 'x')\n2.0"


def test_debug_quit_message(debug_repl):
    assert debug_repl.evaluate_line("quit") == (True, "Token(Quit)\nQuitting")


def test_debug_error_keeps_tokens(debug_repl):
    ok, out = debug_repl.evaluate_line("z")
    assert not ok
    assert out == "Token(VariableName, 'z')\nError: Undefined variable: z"


# ---------------------------
# repl_loop
# ---------------------------

def test_repl_loop_scenario(capsys):
    session = ScriptedSession(["x = 3 + 4", "x * 2", "y", "quit", "1 + 1"])
    repl = REPL(CalcSettings(history_file=None), session=session)
    repl.repl_loop()
    out = capsys.readouterr().out
    assert out == "14.0\nError: Undefined variable: y\n"
    assert session.lines == ["1 + 1"]
    assert session.prompts == ["> "] * 4


def test_repl_loop_ends_on_eof(capsys):
    session = ScriptedSession(["2 * 21"])
    repl = REPL(CalcSettings(history_file=None, prompt="calc> "), session=session)
    repl.repl_loop()
    assert capsys.readouterr().out == "42.0\n"
    assert session.prompts == ["calc> ", "calc> "]


def test_repl_loop_survives_keyboard_interrupt(capsys):
    session = ScriptedSession([KeyboardInterrupt(), "1 + 1", "quit"])
    repl = REPL(CalcSettings(history_file=None), session=session)
    repl.repl_loop()
    assert capsys.readouterr().out == "^C\n2.0\n"


def test_repl_sessions_do_not_share_tables():
    first = REPL(CalcSettings(history_file=None))
    second = REPL(CalcSettings(history_file=None))
    first.evaluate_line("a = 1")
    ok, out = second.evaluate_line("a")
    assert not ok


# ---------------------------
# main
# ---------------------------

def test_main_runs_loop(monkeypatch):
    calls = []
    monkeypatch.setattr(REPL, "repl_loop", lambda self: calls.append(self.settings))
    assert main.main(["--no-history", "--debug"]) == 0
    assert calls[0].debug is True
    assert calls[0].history_file is None


def test_main_rejects_bad_config(capsys):
    assert main.main(["--log-level", "loud"]) == 2
    assert "Invalid configuration" in capsys.readouterr().err
