# calc_config.py
"""
Runtime configuration for the calculator shell.

Settings are read from a .env file and LINECALC_* environment variables,
then overridden by command line flags.
"""

from __future__ import annotations

import argparse
import logging
import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

DEFAULT_HISTORY_FILE = os.path.expanduser("~/.linecalc_history")

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class CalcSettings(BaseModel):
    """Settings for one calculator session."""
    debug: bool = False
    prompt: str = "> "
    history_file: Optional[str] = DEFAULT_HISTORY_FILE
    log_level: str = "WARNING"

    @field_validator('history_file')
    @classmethod
    def empty_history_file_means_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return os.path.expanduser(v.strip())

    @field_validator('log_level')
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return level

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linecalc",
        description="Line-oriented calculator with variables. Type 'quit' to exit.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=None,
        help="Print tokens of each line and the variable table after assignments.",
    )
    parser.add_argument(
        "--prompt",
        type=str,
        help="Prompt shown before each line (default: '> ').",
    )
    parser.add_argument(
        "--history-file",
        type=str,
        help="File used to keep the line history (default: ~/.linecalc_history).",
    )
    parser.add_argument(
        "--no-history",
        action="store_true",
        help="Keep line history in memory only.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        help="Logging level (default: WARNING).",
    )
    return parser


def load_settings(argv: Optional[List[str]] = None) -> CalcSettings:
    """
    Build settings from .env, the environment and the command line.

    Args:
        argv: Command line arguments, without the program name

    Returns:
        Validated CalcSettings

    Raises:
        pydantic.ValidationError: If a value does not validate
    """
    load_dotenv()
    values = {}

    debug = os.getenv("LINECALC_DEBUG")
    if debug is not None:
        values["debug"] = debug.strip().lower() in ("1", "true", "yes", "on")
    prompt = os.getenv("LINECALC_PROMPT")
    if prompt is not None:
        values["prompt"] = prompt
    history_file = os.getenv("LINECALC_HISTORY_FILE")
    if history_file is not None:
        values["history_file"] = history_file
    log_level = os.getenv("LINECALC_LOG_LEVEL")
    if log_level is not None:
        values["log_level"] = log_level

    args = _build_arg_parser().parse_args(argv)
    if args.debug is not None:
        values["debug"] = args.debug
    if args.prompt is not None:
        values["prompt"] = args.prompt
    if args.history_file is not None:
        values["history_file"] = args.history_file
    if args.no_history:
        values["history_file"] = None
    if args.log_level is not None:
        values["log_level"] = args.log_level

    return CalcSettings(**values)
