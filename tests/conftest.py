import pytest

from unilisp.interpreter import Interpreter
from unilisp.printer import stringify

# Most tests need a fresh interpreter with the bundled prelude (for `and`).
# `run` evaluates one expression and renders the result the way a REPL would.


@pytest.fixture
def interp():
    return Interpreter()


@pytest.fixture
def bare_interp():
    return Interpreter(prelude=None)


@pytest.fixture
def run(interp):
    def _run(code: str) -> str:
        return stringify(interp.eval(code))
    return _run
