# main.py
"""
Interactive shell for the line calculator.

Each line is tokenized and parsed on its own; the only state that survives
between lines is the variable table owned by the session's Parser.

    > x = 3 + 4
    > x * 2
    14.0
    > y
    Error: Undefined variable: y
    > quit

Errors never end the session. The session ends on 'quit' or Ctrl-D.
"""

from __future__ import annotations

import logging
import math
import sys
from decimal import Decimal
from typing import Any, List, Optional, Sequence, Tuple

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory, InMemoryHistory
from pydantic import ValidationError

from calc_config import CalcSettings, load_settings
from calc_errors import CalculatorError
from calc_parser import Parser, Quit, Value, VarAssign
from calc_tokenizer import Token, tokenize

logger = logging.getLogger(__name__)

# --------------------------
# Output formatting
# --------------------------

def format_value(value: float) -> str:
    """Format a result as a plain decimal, never in exponent notation."""
    if math.isnan(value):
        return "nan"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return format(Decimal(repr(value)), 'f')


def format_tokens(tokens: Sequence[Token]) -> str:
    return "\n".join(repr(tok) for tok in tokens)


def format_var_table(table) -> str:
    return "\n".join(f"{name}: {format_value(value)}" for name, value in table.items())

# --------------------------
# REPL
# --------------------------

class REPL:
    """Read-Eval-Print Loop for the calculator."""

    def __init__(self, settings: Optional[CalcSettings] = None, session: Any = None):
        self.settings = settings or CalcSettings()
        self.parser = Parser()
        self.session = session
        self.running = True

    def _make_session(self) -> PromptSession:
        if self.settings.history_file:
            history = FileHistory(self.settings.history_file)
        else:
            history = InMemoryHistory()
        return PromptSession(history=history)

    def evaluate_line(self, line: str) -> Tuple[bool, Optional[str]]:
        """Evaluate a single line. Returns (ok, output); output is None when there is nothing to print."""
        text = line.strip()
        if not text:
            return True, None

        out_lines: List[str] = []
        try:
            tokens = tokenize(text)
            if self.settings.debug:
                out_lines.append(format_tokens(tokens))
            result = self.parser.parse_line(tokens)
        except CalculatorError as e:
            logger.debug(f"Line {text!r} failed: {e}")
            return False, "\n".join(out_lines + [f"Error: {e}"])

        if isinstance(result, Value):
            out_lines.append(format_value(result.value))
        elif isinstance(result, VarAssign):
            if self.settings.debug:
                out_lines.append(format_var_table(self.parser.get_var_table()))
        elif isinstance(result, Quit):
            self.running = False
            if self.settings.debug:
                out_lines.append("Quitting")
        return True, "\n".join(out_lines) if out_lines else None

    def repl_loop(self) -> None:
        """Prompt for lines until 'quit' or end of input."""
        if self.session is None:
            self.session = self._make_session()
        logger.info("Calculator session started")
        while self.running:
            try:
                line = self.session.prompt(self.settings.prompt)
            except KeyboardInterrupt:
                print("^C")
                continue
            except EOFError:
                break
            ok, out = self.evaluate_line(line)
            if out is not None:
                print(out)
        logger.info(f"Calculator session ended with {len(self.parser.var_table)} variables")

# --------------------------
# Entry point
# --------------------------

def main(argv: Optional[List[str]] = None) -> int:
    try:
        settings = load_settings(argv)
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=settings.log_level_value,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    REPL(settings).repl_loop()
    return 0


if __name__ == '__main__':
    sys.exit(main())
