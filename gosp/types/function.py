"""Named functions: builtins and `defun` definitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from io import StringIO
from typing import Optional, TYPE_CHECKING

from gosp import Expression, Implementation, Value
from gosp.types.expr_type import ExprKind, ExprType, Signature

if TYPE_CHECKING:
    from gosp.reader.source import Location
    from gosp.types.environment import InterpreterState


@dataclass(eq=False)
class Function:
    id: str
    signature: Signature
    implementation: Implementation = field(repr=False)
    # Definition site of user functions; None for builtins.
    location: Optional[Location] = field(default=None, repr=False)

    @property
    def type(self) -> ExprType:
        return ExprType(ExprKind.FUNCTION, signature=self.signature)

    def is_unary(self) -> bool:
        fixed = len(self.signature.fixed)
        return fixed == 1 or (fixed == 0 and self.signature.variadic is not None)

    def describe(self) -> str:
        """Lisp-style signature, e.g. `(sq x:double) -> double`."""
        impl = self.implementation
        if isinstance(impl, UserFunction):
            params = [f"{p}:{t}" for p, t in zip(impl.params, self.signature.fixed)]
            returns = self.signature.returns or ExprKind.NONE
            return f"({' '.join([self.id, *params])}) -> {returns}"
        return f"{self.id} {self.signature}"


class UserFunction:
    """Implementation of a `defun` function.

    Arguments are evaluated in the caller's bindings, then pushed on top of
    them for the duration of the body, so the body sees its parameters plus
    whatever the caller had bound.
    """

    __slots__ = ("params", "body")

    def __init__(self, params: list[str], body: Expression):
        self.params: list[str] = params
        self.body: Expression = body

    def __call__(self, state: InterpreterState, args: list[Expression]) -> Value:
        from gosp.evaluation.evaluator import evaluate

        values = [evaluate(state, arg) for arg in args]
        with state.bound_all(zip(self.params, values)):
            return evaluate(state, self.body)

    def __str__(self) -> str:
        with StringIO() as buffer:
            buffer.write("(λ (")
            buffer.write(" ".join(self.params))
            buffer.write(") ")
            buffer.write(repr(self.body))
            buffer.write(")")
            return buffer.getvalue()

    def __repr__(self) -> str:
        return str(self)
