"""Structural types.

Types are compared by shape: the kind, plus the element type for lists. A
list whose element type is unknown (an empty literal, a declared `list`
parameter) matches any other list.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ExprKind(Enum):
    FUNCTION = "function"
    ID = "id"
    STR = "str"
    INT = "int"
    DOUBLE = "double"
    LIST = "list"
    NONE = "none"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Signature:
    fixed: tuple[ExprType, ...] = ()
    variadic: Optional[ExprType] = None
    returns: Optional[ExprType] = None

    def __str__(self) -> str:
        params = [str(t) for t in self.fixed]
        if self.variadic is not None:
            params.append(f"&rest {self.variadic}")
        returns = self.returns if self.returns is not None else ExprKind.NONE
        return f"({' '.join(params)}) -> {returns}"


@dataclass(frozen=True)
class ExprType:
    kind: ExprKind
    element: Optional[ExprType] = None
    signature: Optional[Signature] = field(default=None, compare=False)

    def same(self, other: ExprType) -> bool:
        if self.kind is not other.kind:
            return False
        if self.kind is ExprKind.LIST:
            if self.element is None or other.element is None:
                return True
            return self.element.same(other.element)
        return True

    def simplify(self) -> ExprType:
        """The type of the value an expression of this type reduces to."""
        if self.kind is ExprKind.FUNCTION:
            returns = self.signature.returns if self.signature else None
            return returns.simplify() if returns is not None else NONE
        if self.kind is ExprKind.LIST:
            if self.element is None:
                return self
            return ExprType(ExprKind.LIST, self.element.simplify())
        return self

    def __str__(self) -> str:
        if self.kind is ExprKind.LIST and self.element is not None:
            return f"list[{self.element}]"
        return str(self.kind)


FUNCTION = ExprType(ExprKind.FUNCTION)
ID = ExprType(ExprKind.ID)
STR = ExprType(ExprKind.STR)
INT = ExprType(ExprKind.INT)
DOUBLE = ExprType(ExprKind.DOUBLE)
LIST = ExprType(ExprKind.LIST)
NONE = ExprType(ExprKind.NONE)

# Parameter type names accepted by defun
TYPE_NAMES: dict[str, ExprType] = {
    "function": FUNCTION,
    "list": LIST,
    "id": ID,
    "str": STR,
    "int": INT,
    "double": DOUBLE,
}


def list_of(element: Optional[ExprType]) -> ExprType:
    return ExprType(ExprKind.LIST, element)


def accepts(param: ExprType, arg: ExprType) -> bool:
    """Whether an argument of type `arg` may fill a parameter of type `param`.

    Structural sameness, plus int arguments for double parameters.
    """
    if param.kind is ExprKind.DOUBLE and arg.kind is ExprKind.INT:
        return True
    if param.kind is ExprKind.LIST and arg.kind is ExprKind.LIST:
        if param.element is None or arg.element is None:
            return True
        return accepts(param.element, arg.element)
    return param.same(arg)
