"""Interpreter state for Gosp.

The state is a registry of named functions plus a stack of name/value
bindings. Bindings are pushed for the extent of a lexical construct (a let
body, a function call, a body being type-checked) and popped on every exit
path. Names are unique across both registries among the live entries.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from io import StringIO
from typing import Iterable, Iterator, Optional, TYPE_CHECKING

from gosp import Value
from gosp.errors import GospNameError
from gosp.types.function import Function
from gosp.types.symbol import Symbol

if TYPE_CHECKING:
    from gosp.reader.source import Location

RESERVED_WORDS = frozenset({"let", "defun"})


@dataclass
class Binding:
    id: str
    value: Value


class InterpreterState:
    """Functions (append-only) and the binding stack."""

    __slots__ = ("functions", "bindings")

    def __init__(self, functions: Optional[Iterable[Function]] = None):
        self.functions: list[Function] = list(functions or [])
        self.bindings: list[Binding] = []

    # --- bindings ---
    def push(self, name: str, value: Value) -> None:
        self.bindings.append(Binding(name, value))

    def pop(self) -> Binding:
        return self.bindings.pop()

    def truncate(self, count: int) -> None:
        """Drop every binding above the first `count`."""
        del self.bindings[count:]

    @contextmanager
    def bound(self, name: str, value: Value) -> Iterator[None]:
        with self.bound_all([(name, value)]):
            yield

    @contextmanager
    def bound_all(self, pairs: Iterable[tuple[str, Value]]) -> Iterator[None]:
        """Push the pairs for the extent of the block, then pop exactly those."""
        depth = len(self.bindings)
        for name, value in pairs:
            self.push(name, value)
        try:
            yield
        finally:
            self.truncate(depth)

    def lookup(self, name: str) -> Optional[Binding]:
        """Innermost binding for `name`."""
        for binding in reversed(self.bindings):
            if binding.id == name:
                return binding
        return None

    def resolve(self, symbol: Symbol) -> Value:
        """Follow identifier-valued bindings until a non-identifier or an unbound name."""
        value: Value = symbol
        seen: set[str] = set()
        while isinstance(value, Symbol) and value.id not in seen:
            seen.add(value.id)
            binding = self.lookup(value.id)
            if binding is None:
                break
            value = binding.value
        return value

    # --- functions ---
    def find_function(self, name: str) -> Optional[Function]:
        for fn in self.functions:
            if fn.id == name:
                return fn
        return None

    def define_function(self, fn: Function, location: Optional[Location] = None) -> None:
        self.ensure_unique(fn.id, location)
        self.functions.append(fn)

    def forget_functions(self, count: int) -> None:
        """Drop every function registered after the first `count`."""
        del self.functions[count:]

    def is_defined(self, name: str) -> bool:
        return self.find_function(name) is not None or self.lookup(name) is not None

    def ensure_unique(self, name: str, location: Optional[Location] = None) -> None:
        """Raise GospNameError unless `name` is free in both registries."""
        if name in RESERVED_WORDS:
            raise GospNameError(f"'{name}' is a reserved word", location)
        if self.find_function(name) is not None:
            raise GospNameError(f"'{name}' is already defined as a function", location)
        if self.lookup(name) is not None:
            raise GospNameError(f"'{name}' is already bound", location)

    def __repr__(self) -> str:
        with StringIO() as buffer:
            buffer.write("<InterpreterState functions=[")
            buffer.write(" ".join(fn.id for fn in self.functions))
            buffer.write("] bindings={")
            buffer.write(", ".join(f"{b.id}: {b.value!r}" for b in self.bindings))
            buffer.write("}>")
            return buffer.getvalue()
