from __future__ import annotations

from typing import Optional, TYPE_CHECKING

from gosp import Expression
from gosp.errors import GospArityError, GospError, GospNameError, GospSyntaxError
from gosp.reader.lexer import Token, TokenKind
from gosp.types.environment import InterpreterState
from gosp.types.expression import Call

if TYPE_CHECKING:
    from gosp.reader.parser import Parser


def call_form(parser: Parser, state: InterpreterState, opener: Token) -> Optional[Expression]:
    """
    (name arg ...)
    Fixed parameters are matched positionally, then a variadic tail is
    consumed greedily while the arguments keep fitting its type.
    """
    head = parser.expect_next(TokenKind.ID)
    fn = state.find_function(head.value)
    if fn is None:
        raise GospNameError(f"Unknown function '{head.value}'", head.location)

    signature = fn.signature
    args: list[Expression] = []

    for param in signature.fixed:
        upcoming = parser.peek_token()
        if upcoming.kind is TokenKind.NONE:
            raise GospSyntaxError("unclosed parens", opener.location)
        if upcoming.kind is TokenKind.CLOSE_PAREN:
            raise GospArityError(
                f"{fn.id}: too few arguments, expected {len(signature.fixed)}, got {len(args)}",
                upcoming.location,
            )
        args.append(parser.parse_typed(state, param, fn.id))

    # A rejected variadic argument is reported only if nothing else explains
    # the leftover input.
    rejected: Optional[GospError] = None
    if signature.variadic is not None:
        while parser.peek_token().kind not in (TokenKind.NONE, TokenKind.CLOSE_PAREN):
            try:
                args.append(parser.parse_typed(state, signature.variadic, fn.id))
            except GospError as err:
                rejected = err
                break

    closing = parser.peek_token()
    if closing.kind is TokenKind.NONE:
        raise GospSyntaxError("unclosed parens", opener.location)
    if closing.kind is not TokenKind.CLOSE_PAREN:
        if rejected is not None:
            raise rejected
        raise GospArityError(
            f"{fn.id}: too many arguments, expected {len(signature.fixed)}",
            closing.location,
        )
    parser.get_token()
    return Call(fn, args)
