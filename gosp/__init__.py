# Core type aliases for Gosp's data model.
# Parsed syntax and runtime values share one representation:
# - Undefined -> gosp.types.undefined.Undefined
# - Id        -> gosp.types.symbol.Symbol
# - Str       -> str
# - Int       -> int (signed 64-bit range)
# - Double    -> float
# - List      -> list
# - Func      -> gosp.types.expression.Call
# - Let       -> gosp.types.expression.Let
#
# Naming guidance:
# - Expression: use in reader/parser code for syntax trees.
# - Value:      use in evaluator code for reduced results.
# Both resolve to `Any` and are interchangeable.

from typing import Any, Callable

Value = Any
Expression = Value

# Function implementation: (state, unevaluated args) -> Expression
Implementation = Callable[..., Expression]
