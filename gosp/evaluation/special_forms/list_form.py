from __future__ import annotations

from typing import Optional, TYPE_CHECKING

from gosp import Expression
from gosp.errors import GospSyntaxError
from gosp.reader.lexer import Token, TokenKind
from gosp.types.environment import InterpreterState
from gosp.types.expr_type import ExprType
from gosp.types.expression import infer_type

if TYPE_CHECKING:
    from gosp.reader.parser import Parser


def list_form(parser: Parser, state: InterpreterState, opener: Token) -> list[Expression]:
    """
    [item ...]
    The first item fixes the element type; every later item must have the same type.
    """
    items: list[Expression] = []
    element: Optional[ExprType] = None
    while True:
        upcoming = parser.peek_token()
        if upcoming.kind is TokenKind.NONE:
            raise GospSyntaxError("unclosed bracket", opener.location)
        if upcoming.kind is TokenKind.CLOSE_BRACKET:
            parser.get_token()
            return items
        if element is None:
            item = parser.parse_expression(state)
            element = infer_type(item, state).simplify()
        else:
            item = parser.parse_typed(state, element, "list", strict=True)
        items.append(item)
