import pytest

from gosp.interpreter import new_state
from gosp.reader.parser import Parser


@pytest.fixture
def state():
    """Fresh interpreter state with builtins registered."""
    return new_state()


@pytest.fixture
def parse(state):
    """Parse one expression from `source` against the `state` fixture."""

    def _parse(source, name="test"):
        parser = Parser()
        parser.add_named_source(name, source)
        return parser.parse_expression(state)

    return _parse
