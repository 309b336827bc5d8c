"""Tree-walking evaluator for Gosp.

Parsing has already type-checked every expression, so evaluation is a plain
reduction. Bindings are dynamically scoped: a let binding is visible to
everything evaluated while it is on the stack, including the bodies of
functions called from inside it.
"""

from __future__ import annotations

from gosp import Expression, Value
from gosp.errors import GospRuntimeError
from gosp.types.environment import InterpreterState
from gosp.types.expression import Call, Let
from gosp.types.symbol import Symbol
from gosp.types.undefined import UndefinedType


def evaluate(state: InterpreterState, expr: Expression) -> Value:
    """Reduce an expression to a value."""
    if isinstance(expr, Call):
        result = expr.function.implementation(state, expr.args)
        return evaluate(state, result)

    if isinstance(expr, Symbol):
        value = state.resolve(expr)
        if isinstance(value, Symbol):
            # Unbound identifiers, and identifiers bound in a cycle, are
            # uninterpreted symbols.
            return value
        return evaluate(state, value)

    if isinstance(expr, list):
        # New list: parsed bodies are re-executed on every call.
        return [evaluate(state, item) for item in expr]

    if isinstance(expr, Let):
        value = evaluate(state, expr.bound)
        with state.bound(expr.name, value):
            return evaluate(state, expr.body)

    if isinstance(expr, (str, int, float, UndefinedType)):
        return expr

    raise GospRuntimeError(f"cannot evaluate {expr!r}")


def as_double(value: Value, context: str) -> float:
    """Numeric argument as a float; ints are widened."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    raise GospRuntimeError(f"{context}: Expected double, got {render(value)}")


def render(value: Value) -> str:
    """Display form of an already evaluated value."""
    if isinstance(value, list):
        return "[" + " ".join(render(item) for item in value) + "]"
    if isinstance(value, float):
        return f"{value:f}"
    if isinstance(value, UndefinedType):
        return "undefined"
    return str(value)


def to_display_string(state: InterpreterState, expr: Expression) -> str:
    """Evaluate, then render: lists as [a b], doubles as %f, undefined as `undefined`."""
    return render(evaluate(state, expr))
