import pytest

from calc_config import CalcSettings
from calc_parser import Parser
from main import REPL


@pytest.fixture
def parser():
    return Parser()


@pytest.fixture
def repl():
    return REPL(CalcSettings(history_file=None))


@pytest.fixture
def debug_repl():
    return REPL(CalcSettings(debug=True, history_file=None))


@pytest.fixture(autouse=True)
def clean_linecalc_env(monkeypatch):
    for name in ("LINECALC_DEBUG", "LINECALC_PROMPT", "LINECALC_HISTORY_FILE", "LINECALC_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    outcome = yield
    report = outcome.get_result()
    if report.when == "call":
        print(f"TEST: {item.name} - {'PASSED' if report.passed else 'FAILED'}")
