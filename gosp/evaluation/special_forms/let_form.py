from __future__ import annotations

from typing import Optional, TYPE_CHECKING

from gosp import Expression
from gosp.reader.lexer import Token, TokenKind
from gosp.types.environment import InterpreterState
from gosp.types.expression import Let, infer_type, zero_value

if TYPE_CHECKING:
    from gosp.reader.parser import Parser


def let_form(parser: Parser, state: InterpreterState, opener: Token) -> Optional[Expression]:
    """
    (let name bound body)
    The bound expression is type-checked once; the body is checked against a
    placeholder of that type, so nothing runs until evaluation.
    """
    if not parser.next_is_keyword("let"):
        return None
    parser.get_token()

    name = parser.expect_next(TokenKind.ID)
    state.ensure_unique(name.value, name.location)

    bound = parser.parse_expression(state)
    bound_type = infer_type(bound, state).simplify()

    with state.bound(name.value, zero_value(bound_type)):
        body = parser.parse_expression(state)
        value_type = infer_type(body, state).simplify()

    parser.expect_close(opener)
    return Let(name.value, bound, body, value_type)
