# calc_parser.py
"""
Recursive descent parser and evaluator for calculator lines.

Grammar (lowest to highest precedence):
    translation_unit := 'quit' | var_expr | val_expr
    var_expr         := VAR_NAME '=' val_expr
    val_expr         := add_sub_expr
    add_sub_expr     := mul_div_expr (('+' | '-') mul_div_expr)*
    mul_div_expr     := unary_expr (('*' | '/') unary_expr)*
    unary_expr       := '-'? exp_expr
    exp_expr         := atom ('^' atom)*
    atom             := NUMBER | VAR_NAME | bracket_expr
    bracket_expr     := '(' val_expr ')'

Values are computed while parsing; no AST is built. Note that '^' is left
associative (2^3^2 == 64) and a leading '-' negates the whole exponential
(-2^2 == -4).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Sequence, Tuple, Union

from calc_errors import UnboundVariableError, UnexpectedTokenError
from calc_tokenizer import Token, TokenKind

logger = logging.getLogger(__name__)

_END = Token(TokenKind.INVALID)

# --------------------------
# Parse results
# --------------------------

@dataclass(frozen=True)
class Value:
    """The line was an expression; value is its result."""
    value: float


@dataclass(frozen=True)
class VarAssign:
    """The line bound name to value in the variable table."""
    name: str
    value: float


@dataclass(frozen=True)
class Quit:
    """The line asked to end the session."""
    pass


ParseResult = Union[Value, VarAssign, Quit]

# --------------------------
# Float arithmetic
# --------------------------

def _is_odd_integer(x: float) -> bool:
    return math.isfinite(x) and x.is_integer() and x % 2 == 1


def float_divide(left: float, right: float) -> float:
    """Divide with IEEE-754 results for a zero divisor instead of raising."""
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def float_pow(base: float, exponent: float) -> float:
    """Raise base to exponent, returning inf/nan where math.pow would raise."""
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf
    except ValueError:
        # zero to a negative power is a pole, anything else is a domain error
        if base == 0 and exponent < 0:
            if _is_odd_integer(exponent):
                return math.copysign(math.inf, base)
            return math.inf
        return math.nan

# --------------------------
# Parser
# --------------------------

class Parser:
    """Recursive descent parser that evaluates one line at a time.

    The variable table is the only state kept between lines. Pass a dict to
    share a table owned elsewhere; otherwise the parser creates its own.
    """

    def __init__(self, var_table: Optional[Dict[str, float]] = None):
        self.var_table: Dict[str, float] = {} if var_table is None else var_table
        self.tokens: Tuple[Token, ...] = ()
        self.pos = 0

    def set_tokens(self, tokens: Sequence[Token]) -> None:
        self.tokens = tuple(tokens)
        self.pos = 0

    @property
    def current(self) -> Token:
        return self.peek(0)

    def peek(self, offset: int = 1) -> Token:
        """Look ahead without consuming. Past the end this is an INVALID token."""
        i = self.pos + offset
        if i < len(self.tokens):
            return self.tokens[i]
        return _END

    def _accept(self, *expected: TokenKind) -> Token:
        """Consume the current token if its kind is one of expected."""
        tok = self.current
        if tok.kind not in expected:
            raise UnexpectedTokenError(expected, tok)
        return self._accept_it()

    def _accept_it(self) -> Token:
        tok = self.current
        self.pos += 1
        return tok

    def _expect_end(self) -> None:
        if self.current.kind is not TokenKind.INVALID:
            raise UnexpectedTokenError((TokenKind.INVALID,), self.current)

    def get_var_table(self) -> Mapping[str, float]:
        """Read-only view of the variable table."""
        return MappingProxyType(self.var_table)

    def parse_line(self, tokens: Sequence[Token]) -> ParseResult:
        self.set_tokens(tokens)
        return self.parse_translation_unit()

    def parse_translation_unit(self) -> ParseResult:
        tok = self.current
        if tok.kind is TokenKind.QUIT:
            return Quit()
        if tok.kind is TokenKind.VARIABLE_NAME and self.peek().kind is TokenKind.EQUALS:
            return self.parse_var_assignment()
        value = self.parse_val_expr()
        self._expect_end()
        return Value(value)

    def parse_var_assignment(self) -> VarAssign:
        name = self._accept(TokenKind.VARIABLE_NAME).value
        self._accept(TokenKind.EQUALS)
        value = self.parse_val_expr()
        self._expect_end()
        # only bind once the whole right-hand side parsed
        self.register_variable(name, value)
        return VarAssign(name, value)

    def parse_val_expr(self) -> float:
        return self.parse_add_sub_expr()

    def parse_add_sub_expr(self) -> float:
        result = self.parse_mul_div_expr()
        while self.current.kind in (TokenKind.ADD, TokenKind.SUBTRACT):
            op = self._accept_it()
            if op.kind is TokenKind.ADD:
                result += self.parse_mul_div_expr()
            else:
                result -= self.parse_mul_div_expr()
        return result

    def parse_mul_div_expr(self) -> float:
        result = self.parse_unary_expr()
        while self.current.kind in (TokenKind.MULTIPLY, TokenKind.DIVIDE):
            op = self._accept_it()
            if op.kind is TokenKind.MULTIPLY:
                result *= self.parse_unary_expr()
            else:
                result = float_divide(result, self.parse_unary_expr())
        return result

    def parse_unary_expr(self) -> float:
        if self.current.kind is TokenKind.SUBTRACT:
            self._accept_it()
            return -self.parse_exp_expr()
        return self.parse_exp_expr()

    def parse_exp_expr(self) -> float:
        result = self.parse_atom()
        while self.current.kind is TokenKind.POWER:
            self._accept_it()
            result = float_pow(result, self.parse_atom())
        return result

    def parse_atom(self) -> float:
        tok = self.current
        if tok.kind is TokenKind.NUMBER:
            self._accept_it()
            return tok.value
        if tok.kind is TokenKind.VARIABLE_NAME:
            if tok.value not in self.var_table:
                raise UnboundVariableError(tok.value)
            self._accept_it()
            return self.var_table[tok.value]
        if tok.kind is TokenKind.LEFT_PAREN:
            return self.parse_bracket_expr()
        raise UnexpectedTokenError(
            (TokenKind.NUMBER, TokenKind.VARIABLE_NAME, TokenKind.LEFT_PAREN), tok
        )

    def parse_bracket_expr(self) -> float:
        self._accept(TokenKind.LEFT_PAREN)
        result = self.parse_val_expr()
        self._accept(TokenKind.RIGHT_PAREN)
        return result

    def register_variable(self, name: str, value: float) -> None:
        self.var_table[name] = value
        logger.debug(f"Assigned {name} = {value!r}")
