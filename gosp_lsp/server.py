from __future__ import annotations

"""
A pygls-based Language Server for Gosp.

Features:
- Full text synchronization and document store
- Diagnostics: every lexical, syntax and type error the parser reports
- Hover: keyword, builtin and defun signatures
- Completion: keywords, builtins, functions defined in the document, type names
- Document Symbols: defun definitions

Note: We never evaluate the buffer. Parsing alone type-checks it.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from pygls.server import LanguageServer
from lsprotocol.types import (
    TextDocumentSyncKind,
    DidOpenTextDocumentParams,
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    Diagnostic,
    DiagnosticSeverity,
    Position,
    Range,
    Hover,
    MarkupContent,
    MarkupKind,
    CompletionItem,
    CompletionOptions,
    CompletionItemKind,
    CompletionList,
    CompletionParams,
    HoverParams,
    DocumentSymbolParams,
    DocumentSymbol,
    SymbolKind,
)

from gosp.errors import GospError, GospLexError, GospTypeError
from gosp.reader.lexer import is_id
from gosp.types.expr_type import TYPE_NAMES
from gosp_lsp.indexer import (
    BUILTIN_SIGNATURES,
    KEYWORD_SIGNATURES,
    DocumentIndex,
    build_index,
    lsp_position,
    signature_for,
)

logger = logging.getLogger(__name__)


@dataclass
class DocumentState:
    text: str
    index: DocumentIndex


class GospLanguageServer(LanguageServer):
    CMD_NAME = "gosp-ls"

    def __init__(self):
        super().__init__(self.CMD_NAME, "v0.1", text_document_sync_kind=TextDocumentSyncKind.Full)
        self.documents: Dict[str, DocumentState] = {}


ls = GospLanguageServer()


# --- Text sync ---
def _reindex(uri: str, text: str) -> None:
    idx = build_index(text, source_name=uri)
    ls.documents[uri] = DocumentState(text=text, index=idx)
    logger.debug("indexed %s: %d error(s)", uri, len(idx.errors))
    _publish_diagnostics(uri, idx)


@ls.feature("textDocument/didOpen")
def did_open(params: DidOpenTextDocumentParams):
    _reindex(params.text_document.uri, params.text_document.text or "")


@ls.feature("textDocument/didChange")
def did_change(params: DidChangeTextDocumentParams):
    uri = params.text_document.uri
    if params.content_changes:
        text = params.content_changes[-1].text
    else:
        text = ls.documents[uri].text if uri in ls.documents else ""
    _reindex(uri, text)


@ls.feature("textDocument/didClose")
def did_close(params: DidCloseTextDocumentParams):
    uri = params.text_document.uri
    if uri in ls.documents:
        del ls.documents[uri]
    ls.publish_diagnostics(uri, [])


# --- Diagnostics ---
def _mk_range(line: int, col: int, width: int = 1) -> Range:
    return Range(start=Position(line=line, character=col), end=Position(line=line, character=col + width))


def _error_code(err: GospError) -> str:
    if isinstance(err, GospLexError):
        return "lexical"
    if isinstance(err, GospTypeError):
        return "type"
    return "syntax"


def make_diagnostics(idx: DocumentIndex) -> List[Diagnostic]:
    diags: List[Diagnostic] = []
    for err in idx.errors:
        line, col = lsp_position(err.location)
        diags.append(
            Diagnostic(
                range=_mk_range(line, col),
                message=err.message,
                severity=DiagnosticSeverity.Error,
                code=_error_code(err),
                source="gosp-ls",
            )
        )
    return diags


def _publish_diagnostics(uri: str, idx: DocumentIndex):
    ls.publish_diagnostics(uri, make_diagnostics(idx))


# --- Hover ---
@ls.feature("textDocument/hover")
def on_hover(params: HoverParams) -> Optional[Hover]:
    uri = params.text_document.uri
    state = ls.documents.get(uri)
    if not state:
        return None

    word = _extract_word_at(state.text, params.position)
    if not word:
        return None

    contents = signature_for(word, state.index)
    if contents is None:
        return None
    return Hover(contents=MarkupContent(kind=MarkupKind.PlainText, value=contents))


# --- Completion ---
@ls.feature("textDocument/completion", CompletionOptions(trigger_characters=["("]))
def on_completion(params: CompletionParams) -> CompletionList:
    uri = params.text_document.uri
    state = ls.documents.get(uri)
    items: List[CompletionItem] = []

    for name, sig in KEYWORD_SIGNATURES.items():
        items.append(CompletionItem(label=name, kind=CompletionItemKind.Keyword, detail=sig))
    for name, sig in BUILTIN_SIGNATURES.items():
        items.append(CompletionItem(label=name, kind=CompletionItemKind.Function, detail=sig))
    for name in TYPE_NAMES:
        items.append(CompletionItem(label=name, kind=CompletionItemKind.TypeParameter))
    if state:
        for name, fn in state.index.functions.items():
            items.append(CompletionItem(label=name, kind=CompletionItemKind.Function, detail=fn.describe()))

    return CompletionList(is_incomplete=False, items=items)


# --- Document Symbols ---
@ls.feature("textDocument/documentSymbol")
def on_document_symbols(params: DocumentSymbolParams) -> Optional[List[DocumentSymbol]]:
    uri = params.text_document.uri
    state = ls.documents.get(uri)
    if not state:
        return None
    symbols: List[DocumentSymbol] = []
    for name, fn in state.index.functions.items():
        line, col = lsp_position(fn.location)
        rng = _mk_range(line, col, len(name))
        symbols.append(
            DocumentSymbol(
                name=name,
                detail=fn.describe(),
                kind=SymbolKind.Function,
                range=rng,
                selection_range=rng,
            )
        )
    return symbols


# --- Helpers ---

def _extract_word_at(text: str, pos: Position) -> Optional[str]:
    lines = text.split("\n")
    if pos.line >= len(lines):
        return None
    line = lines[pos.line]
    start = min(pos.character, len(line))
    while start > 0 and is_id(line[start - 1]):
        start -= 1
    end = pos.character
    while end < len(line) and is_id(line[end]):
        end += 1
    word = line[start:end]
    return word or None


if __name__ == "__main__":
    # Run the language server over stdio
    ls.start_io()
