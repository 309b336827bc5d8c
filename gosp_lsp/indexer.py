from __future__ import annotations

"""
Document indexer for the Gosp language server.

Runs the real parser over a document against a fresh builtins-only state.
Nothing is evaluated: parsing alone type-checks every form and registers each
defun, which is everything the editor features need.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from gosp.builtin.env_builtin import BUILTINS
from gosp.errors import GospError
from gosp.evaluation.special_forms import KEYWORD_FORMS
from gosp.interpreter import check_source, new_state
from gosp.reader.source import Location
from gosp.types.function import Function


@dataclass
class DocumentIndex:
    errors: List[GospError] = field(default_factory=list)
    functions: Dict[str, Function] = field(default_factory=dict)  # user defuns by name


def build_index(text: str, source_name: str = "document") -> DocumentIndex:
    state = new_state()
    errors = check_source(state, source_name, text)
    functions = {fn.id: fn for fn in state.functions if fn.location is not None}
    return DocumentIndex(errors=errors, functions=functions)


def lsp_position(location: Optional[Location]) -> Tuple[int, int]:
    """(line, character), 0-based, for a 1-based Location."""
    if location is None:
        return 0, 0
    return max(location.line - 1, 0), max(location.column - 1, 0)


# Builtin signatures for hover/completion without a parse
BUILTIN_SIGNATURES: Dict[str, str] = {fn.id: fn.describe() for fn in BUILTINS}

# First docstring line of each keyword form, e.g. "(let name bound body)"
KEYWORD_SIGNATURES: Dict[str, str] = {
    name: (form.__doc__ or name).strip().splitlines()[0]
    for name, form in KEYWORD_FORMS.items()
}


def signature_for(name: str, index: Optional[DocumentIndex] = None) -> Optional[str]:
    if name in KEYWORD_SIGNATURES:
        return KEYWORD_SIGNATURES[name]
    if name in BUILTIN_SIGNATURES:
        return BUILTIN_SIGNATURES[name]
    if index is not None and name in index.functions:
        return index.functions[name].describe()
    return None
