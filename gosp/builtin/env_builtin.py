"""Built-in functions for the Gosp runtime.

Builtins receive their arguments unevaluated and evaluate each one inside
their own loop. Arithmetic works on doubles; int arguments are widened.
"""
from __future__ import annotations

from gosp import Expression, Value
from gosp.errors import GospRuntimeError
from gosp.evaluation.evaluator import as_double, evaluate
from gosp.types import expr_type as T
from gosp.types.environment import InterpreterState
from gosp.types.expr_type import Signature
from gosp.types.function import Function
from gosp.types.symbol import Symbol


# -------------------------------
# Arithmetic
# -------------------------------
def add(state: InterpreterState, args: list[Expression]) -> Value:
    """Sum of all arguments; (+) is 0.0."""
    result = 0.0
    for arg in args:
        result += as_double(evaluate(state, arg), "+")
    return result


def mul(state: InterpreterState, args: list[Expression]) -> Value:
    """Product of all arguments; (*) is 1.0."""
    result = 1.0
    for arg in args:
        result *= as_double(evaluate(state, arg), "*")
    return result


def sub(state: InterpreterState, args: list[Expression]) -> Value:
    a, b = (as_double(evaluate(state, arg), "-") for arg in args)
    return a - b


def div(state: InterpreterState, args: list[Expression]) -> Value:
    """a / b, with division by zero defined as 0.0."""
    a, b = (as_double(evaluate(state, arg), "/") for arg in args)
    if b == 0.0:
        return 0.0
    return a / b


# -------------------------------
# Lists
# -------------------------------
def map_builtin(state: InterpreterState, args: list[Expression]) -> Value:
    """(map fn xs): apply the unary function named fn to each element of xs.

    An unknown function name yields an empty list.
    """
    name_expr, items_expr = args
    target = evaluate(state, name_expr)
    items = evaluate(state, items_expr)
    fn = state.find_function(target.id) if isinstance(target, Symbol) else None
    if fn is None:
        return []
    if not fn.is_unary():
        raise GospRuntimeError(f"map: '{fn.id}' is not a unary function")
    return [evaluate(state, fn.implementation(state, [item])) for item in items]


BUILTINS = (
    Function("+", Signature((), T.DOUBLE, T.DOUBLE), add),
    Function("-", Signature((T.DOUBLE, T.DOUBLE), None, T.DOUBLE), sub),
    Function("*", Signature((), T.DOUBLE, T.DOUBLE), mul),
    Function("/", Signature((T.DOUBLE, T.DOUBLE), None, T.DOUBLE), div),
    Function("map", Signature((T.ID, T.LIST), None, T.LIST), map_builtin),
)


def register(state: InterpreterState) -> None:
    """Register all builtin functions into the given state."""
    for fn in BUILTINS:
        state.define_function(fn)
