# calc_tokenizer.py
"""
Tokenizer for calculator lines.

The scan is character based: the eight operator/punctuation symbols are
tokens of their own, everything between two symbols is collected into a
span and classified once the span closes (number, the word ``quit``, or a
variable name).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Optional, Tuple

from calc_errors import LexerError


class TokenKind(Enum):
    """Enumeration of token kinds."""
    INVALID = 'Invalid'
    VARIABLE_NAME = 'VariableName'
    NUMBER = 'Number'
    EQUALS = 'Equals'
    ADD = 'Add'
    SUBTRACT = 'Subtract'
    MULTIPLY = 'Multiply'
    DIVIDE = 'Divide'
    POWER = 'Power'
    LEFT_PAREN = 'LeftParen'
    RIGHT_PAREN = 'RightParen'
    QUIT = 'Quit'

    def describe(self) -> str:
        # INVALID is what the parser sees once every token has been consumed
        if self is TokenKind.INVALID:
            return "end of input"
        return self.value


SYMBOLS = {
    '=': TokenKind.EQUALS,
    '+': TokenKind.ADD,
    '-': TokenKind.SUBTRACT,
    '*': TokenKind.MULTIPLY,
    '/': TokenKind.DIVIDE,
    '^': TokenKind.POWER,
    '(': TokenKind.LEFT_PAREN,
    ')': TokenKind.RIGHT_PAREN,
}

QUIT_WORD = 'quit'

_NUMBER_CHARS = frozenset('0123456789.')


@dataclass(frozen=True)
class Token:
    """A lexical token. Only VARIABLE_NAME and NUMBER carry a value."""
    kind: TokenKind
    value: Any = None

    def same_kind(self, other: "Token") -> bool:
        """Compare tags only, ignoring the payload."""
        return self.kind is other.kind

    def describe(self) -> str:
        if self.value is None:
            return self.kind.describe()
        return f"{self.kind.value}({self.value!r})"

    def __repr__(self) -> str:
        if self.value is None:
            return f"Token({self.kind.value})"
        return f"Token({self.kind.value}, {self.value!r})"


def tokenize(chars: Iterable[str]) -> Tuple[Token, ...]:
    """Convert one line of input into a tuple of tokens.

    An empty line, or a line that produces no tokens at all, yields a single
    INVALID token which the parser treats as nothing to parse.

    Raises:
        LexerError: if a run of digits and decimal points is not a number.
    """
    text = chars if isinstance(chars, str) else ''.join(chars)
    tokens: List[Token] = []
    span_start: Optional[int] = None

    for i, ch in enumerate(text):
        kind = SYMBOLS.get(ch)
        if kind is None:
            if span_start is None:
                span_start = i
            continue
        if span_start is not None:
            _flush_span(tokens, text[span_start:i])
            span_start = None
        tokens.append(Token(kind))

    if span_start is not None:
        _flush_span(tokens, text[span_start:])

    if not tokens:
        tokens.append(Token(TokenKind.INVALID))
    return tuple(tokens)


def _flush_span(tokens: List[Token], span: str) -> None:
    """Classify a closed multi-character span and append its token."""
    spelling = span.strip()
    if not spelling:
        return
    if _is_number(spelling):
        try:
            value = float(spelling)
        except ValueError:
            raise LexerError(spelling)
        tokens.append(Token(TokenKind.NUMBER, value))
    elif spelling == QUIT_WORD:
        tokens.append(Token(TokenKind.QUIT))
    else:
        tokens.append(Token(TokenKind.VARIABLE_NAME, spelling))


def _is_number(spelling: str) -> bool:
    return all(ch in _NUMBER_CHARS for ch in spelling)
