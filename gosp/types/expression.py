"""Compound expressions and type inference over the expression tree.

Scalars are plain Python values (str, int, float), identifiers are Symbols,
lists are Python lists. Only function calls and let forms need node classes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from gosp import Expression, Value
from gosp.types import expr_type as T
from gosp.types.expr_type import ExprKind, ExprType
from gosp.types.function import Function
from gosp.types.symbol import Symbol
from gosp.types.undefined import Undefined, UndefinedType

if TYPE_CHECKING:
    from gosp.types.environment import InterpreterState


@dataclass
class Call:
    function: Function
    args: list[Expression] = field(default_factory=list)

    def __repr__(self) -> str:
        inner = " ".join([self.function.id, *(repr(a) for a in self.args)])
        return f"({inner})"


@dataclass
class Let:
    name: str
    bound: Expression
    body: Expression
    # Simplified body type, computed while the placeholder binding was live.
    value_type: ExprType = field(default=T.NONE, compare=False)

    def __repr__(self) -> str:
        return f"(let {self.name} {self.bound!r} {self.body!r})"


def infer_type(expr: Expression, state: InterpreterState) -> ExprType:
    """Structural type of an expression against the live bindings."""
    if isinstance(expr, Symbol):
        value = state.resolve(expr)
        if isinstance(value, Symbol):
            return T.ID
        return infer_type(value, state)
    if isinstance(expr, Call):
        return expr.function.type
    if isinstance(expr, Let):
        return expr.value_type
    if isinstance(expr, list):
        if not expr:
            return T.LIST
        return T.list_of(infer_type(expr[0], state).simplify())
    if isinstance(expr, UndefinedType):
        return T.NONE
    if isinstance(expr, bool):
        raise TypeError(f"Not a Gosp expression: {expr!r}")
    if isinstance(expr, str):
        return T.STR
    if isinstance(expr, int):
        return T.INT
    if isinstance(expr, float):
        return T.DOUBLE
    raise TypeError(f"Not a Gosp expression: {expr!r}")


def zero_value(t: ExprType) -> Value:
    """Representative value of a type, bound while a body is type-checked."""
    kind = t.kind
    if kind is ExprKind.DOUBLE:
        return 0.0
    if kind is ExprKind.INT:
        return 0
    if kind is ExprKind.STR:
        return ""
    if kind is ExprKind.ID:
        return Symbol("")
    if kind is ExprKind.LIST:
        # Keep the element type visible to the body.
        return [] if t.element is None else [zero_value(t.element)]
    if kind is ExprKind.FUNCTION:
        return zero_value(t.simplify())
    return Undefined
