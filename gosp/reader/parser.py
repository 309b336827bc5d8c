"""
  Gosp Parser

Single-pass recursive descent that type-checks while it parses.

- literals and identifiers become expressions directly
- '(' tries the paren forms in order (let, defun, call); each attempt runs
  against a snapshot of the cursor and the binding stack and is rolled back
  when it fails or does not recognise its keyword
- '[' parses a homogeneously typed list literal

A form that recognised its keyword and then fails raises; the error
propagates instead of falling through to the next alternative.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, Optional

from gosp import Expression
from gosp.errors import GospError, GospLexError, GospSyntaxError, GospTypeError
from gosp.evaluation.special_forms import PAREN_FORMS, list_form
from gosp.reader.lexer import Lexer, Token, TokenKind
from gosp.reader.source import Location
from gosp.types.environment import InterpreterState
from gosp.types.expr_type import ExprType, accepts
from gosp.types.expression import infer_type
from gosp.types.symbol import Symbol


@dataclass(frozen=True)
class Snapshot:
    cursor: Location
    depth: int
    functions: int


class Parser:
    def __init__(self, lexer: Optional[Lexer] = None):
        self.lexer = lexer if lexer is not None else Lexer()

    # --- sources ---
    def add_named_source(self, name: str, text: str) -> None:
        self.lexer.add_named_source(name, text)

    def add_source_file(self, path: str | Path) -> None:
        self.lexer.add_source_file(path)

    @property
    def token(self) -> Token:
        """The last token produced by get_token."""
        return self.lexer.token

    # --- tokens ---
    def peek_token(self) -> Token:
        """Lex the next token without consuming it."""
        saved = self.lexer.save()
        last = self.lexer.token
        token = self.lexer.next_token()
        self.lexer.restore(saved)
        self.lexer.token = last
        if token.kind is TokenKind.ERROR:
            raise GospLexError(token.value, token.location)
        return token

    def get_token(self) -> Token:
        token = self.lexer.next_token()
        if token.kind is TokenKind.ERROR:
            raise GospLexError(token.value, token.location)
        return token

    def expect(self, kind: TokenKind) -> Token:
        token = self.lexer.token
        if token.kind is not kind:
            raise GospSyntaxError(f"Expected {kind}, got {token.kind}", token.location)
        return token

    def expect_next(self, kind: TokenKind) -> Token:
        token = self.get_token()
        if token.kind is TokenKind.NONE:
            raise GospSyntaxError(f"Expected {kind}, got nothing", token.location)
        return self.expect(kind)

    def expect_close(self, opener: Token, kind: TokenKind = TokenKind.CLOSE_PAREN) -> Token:
        token = self.get_token()
        if token.kind is TokenKind.NONE:
            what = "bracket" if opener.kind is TokenKind.OPEN_BRACKET else "parens"
            raise GospSyntaxError(f"unclosed {what}", opener.location)
        return self.expect(kind)

    def next_is_keyword(self, word: str) -> bool:
        token = self.peek_token()
        return token.kind is TokenKind.ID and token.value == word

    # --- transactions ---
    def snapshot(self, state: InterpreterState) -> Snapshot:
        return Snapshot(self.lexer.save(), len(state.bindings), len(state.functions))

    def restore(self, snapshot: Snapshot, state: InterpreterState) -> None:
        self.lexer.restore(snapshot.cursor)
        state.truncate(snapshot.depth)
        state.forget_functions(snapshot.functions)

    @contextmanager
    def transaction(self, state: InterpreterState) -> Iterator[Snapshot]:
        """Roll the cursor, bindings and function registry back if the block raises."""
        snapshot = self.snapshot(state)
        try:
            yield snapshot
        except GospError:
            self.restore(snapshot, state)
            raise

    def attempt(
        self,
        form: Callable[[Parser, InterpreterState, Token], Optional[Expression]],
        state: InterpreterState,
        opener: Token,
    ) -> Optional[Expression]:
        """Run one grammar alternative. None means it did not match and nothing was consumed."""
        with self.transaction(state) as snapshot:
            result = form(self, state, opener)
        if result is None:
            self.restore(snapshot, state)
        return result

    # --- grammar ---
    def parse_expression(self, state: InterpreterState) -> Expression:
        with self.transaction(state):
            token = self.get_token()
            kind = token.kind
            if kind is TokenKind.NONE:
                raise GospSyntaxError("no token found", token.location)
            if kind is TokenKind.ID:
                return Symbol(token.value)
            if kind in (TokenKind.STR, TokenKind.INT, TokenKind.DOUBLE):
                return token.value
            if kind is TokenKind.OPEN_PAREN:
                for form in PAREN_FORMS[:-1]:
                    result = self.attempt(form, state, token)
                    if result is not None:
                        return result
                # A call matches any list head.
                return PAREN_FORMS[-1](self, state, token)
            if kind is TokenKind.OPEN_BRACKET:
                return list_form(self, state, token)
            raise GospSyntaxError(f"Unknown token: {kind}", token.location)

    def parse_typed(
        self,
        state: InterpreterState,
        expected: ExprType,
        context: str,
        strict: bool = False,
    ) -> Expression:
        """Parse an expression whose simplified type must fit `expected`.

        On a mismatch the cursor and bindings are put back to where the
        expression started before GospTypeError is raised.
        """
        snapshot = self.snapshot(state)
        start = self.peek_token().location
        expr = self.parse_expression(state)
        actual = infer_type(expr, state).simplify()
        fits = expected.same(actual) if strict else accepts(expected, actual)
        if not fits:
            self.restore(snapshot, state)
            raise GospTypeError(f"{context}: Expected {expected}, got {actual}", start)
        return expr
