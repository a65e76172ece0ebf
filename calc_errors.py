# calc_errors.py
"""
Exceptions raised while tokenizing and parsing a calculator line.

Every error is scoped to a single input line: the REPL catches
CalculatorError, reports it and moves on to the next line.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from calc_tokenizer import Token, TokenKind


class CalculatorError(Exception):
    """Base class for calculator errors."""
    pass


class LexerError(CalculatorError):
    """Raised for a digit/decimal-point run that is not a valid number."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Invalid numeric literal: {text!r}")


class ParseError(CalculatorError):
    """Raised for grammar errors."""
    pass


class UnexpectedTokenError(ParseError):
    """Raised when the current token is not one of the expected kinds."""

    def __init__(self, expected: Sequence["TokenKind"], found: "Token"):
        self.expected = tuple(expected)
        self.found = found
        super().__init__(
            f"Expected {_join_kinds(self.expected)} but found {found.describe()}"
        )


class UnboundVariableError(CalculatorError):
    """Raised when an expression reads a variable that was never assigned."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Undefined variable: {name}")


def _join_kinds(kinds: Sequence["TokenKind"]) -> str:
    names = [kind.describe() for kind in kinds]
    if len(names) == 1:
        return names[0]
    return ", ".join(names[:-1]) + " or " + names[-1]
