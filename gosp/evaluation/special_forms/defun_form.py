from __future__ import annotations

from typing import Optional, TYPE_CHECKING

from gosp import Expression
from gosp.errors import GospNameError, GospSyntaxError
from gosp.reader.lexer import Token, TokenKind
from gosp.types.environment import InterpreterState
from gosp.types.expr_type import TYPE_NAMES, ExprType, Signature
from gosp.types.expression import infer_type, zero_value
from gosp.types.function import Function, UserFunction
from gosp.types.undefined import Undefined

if TYPE_CHECKING:
    from gosp.reader.parser import Parser


def _parse_params(
    parser: Parser, state: InterpreterState, fn_name: str
) -> tuple[list[str], list[ExprType]]:
    """(name type name type ...)"""
    params_open = parser.expect_next(TokenKind.OPEN_PAREN)
    names: list[str] = []
    types: list[ExprType] = []
    while True:
        token = parser.get_token()
        if token.kind is TokenKind.CLOSE_PAREN:
            return names, types
        if token.kind is TokenKind.NONE:
            raise GospSyntaxError("unclosed parens", params_open.location)
        parser.expect(TokenKind.ID)

        name = token.value
        if name in names or name == fn_name:
            raise GospNameError(f"duplicate parameter '{name}'", token.location)
        state.ensure_unique(name, token.location)

        type_token = parser.expect_next(TokenKind.ID)
        param_type = TYPE_NAMES.get(type_token.value)
        if param_type is None:
            raise GospSyntaxError(f"Unknown type '{type_token.value}'", type_token.location)

        names.append(name)
        types.append(param_type)


def defun_form(parser: Parser, state: InterpreterState, opener: Token) -> Optional[Expression]:
    """
    (defun name (param type ...) body)
    Registers the function while parsing; the form itself has no value.
    """
    if not parser.next_is_keyword("defun"):
        return None
    parser.get_token()

    name = parser.expect_next(TokenKind.ID)
    state.ensure_unique(name.value, name.location)

    params, types = _parse_params(parser, state, name.value)

    # Parameters are visible only while the body is checked.
    with state.bound_all((p, zero_value(t)) for p, t in zip(params, types)):
        body = parser.parse_expression(state)
        returns = infer_type(body, state).simplify()

    parser.expect_close(opener)

    fn = Function(
        name.value,
        Signature(tuple(types), None, returns),
        UserFunction(params, body),
        location=name.location,
    )
    state.define_function(fn, name.location)
    return Undefined
