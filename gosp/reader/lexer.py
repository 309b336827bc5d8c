"""
  Gosp Lexer

Hand-written tokenizer over the buffers of a SourceReader.

- punctuation: ( ) { } [ ] ,
- strings: "..." on a single line, escapes \\" \\\\ \\r \\n
- numbers: optional '-', digits, optional '.' and digits (1. -> 1.0, .5 -> 0.5)
- identifiers: letters, digits, '_' and the operator characters +-/*.:_=!<>|&

Whitespace may be skipped across buffer boundaries; numbers and identifiers
end at a boundary. Lexing never raises: failures produce an ERROR token that
carries the message and the location where the bad token began.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from gosp.reader.source import Location, ReadStatus, SourceReader

ID_CHARS_SPECIAL = frozenset("+-/*.:_=!<>|&")

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

ESCAPES = {
    '"': '"',
    "\\": "\\",
    "r": "\r",
    "n": "\n",
}


class TokenKind(Enum):
    NONE = "none"
    ID = "id"
    STR = "str"
    OPEN_PAREN = "("
    CLOSE_PAREN = ")"
    OPEN_BRACE = "{"
    CLOSE_BRACE = "}"
    OPEN_BRACKET = "["
    CLOSE_BRACKET = "]"
    COMMA = ","
    INT = "int"
    DOUBLE = "double"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value


PUNCTUATION = {
    "(": TokenKind.OPEN_PAREN,
    ")": TokenKind.CLOSE_PAREN,
    "{": TokenKind.OPEN_BRACE,
    "}": TokenKind.CLOSE_BRACE,
    "[": TokenKind.OPEN_BRACKET,
    "]": TokenKind.CLOSE_BRACKET,
    ",": TokenKind.COMMA,
}

OPENERS = frozenset({TokenKind.OPEN_PAREN, TokenKind.OPEN_BRACE, TokenKind.OPEN_BRACKET})
CLOSERS = frozenset({TokenKind.CLOSE_PAREN, TokenKind.CLOSE_BRACE, TokenKind.CLOSE_BRACKET})


def is_id_first(ch: str) -> bool:
    return ch.isalpha() or ch in ID_CHARS_SPECIAL


def is_id(ch: str) -> bool:
    return is_id_first(ch) or ch.isdecimal()


@dataclass
class Token:
    kind: TokenKind
    value: Any = None
    location: Optional[Location] = None

    def __repr__(self) -> str:
        if self.value is None:
            return f"Token({self.kind})"
        return f"Token({self.kind}, {self.value!r})"


class Lexer(SourceReader):
    """Produces tokens from the cursor of its SourceReader."""

    def __init__(self):
        super().__init__()
        self.token = Token(TokenKind.NONE)

    def skip_spaces(self, cross_buffers: bool = True) -> bool:
        """Skip whitespace. Returns True if a character is available afterwards."""
        while True:
            ch, status = self.peek()
            if status is ReadStatus.AVAILABLE:
                if not ch.isspace():
                    return True
                self.skip()
            elif status is ReadStatus.BUFFER_END and cross_buffers:
                self.skip()
            else:
                return False

    def next_token(self) -> Token:
        """Lex one token; NONE when the input is exhausted."""
        if not self.skip_spaces():
            self.token = Token(TokenKind.NONE, location=self.save())
            return self.token
        start = self.save()
        ch, _ = self.peek()

        if ch in PUNCTUATION:
            self.skip()
            self.token = Token(PUNCTUATION[ch], ch, start)
        elif ch == '"':
            self.token = self._lex_string(start)
        else:
            self.token = (
                self._lex_number(start)
                or self._lex_id(start)
                or self._unknown(ch, start)
            )
        return self.token

    # ----------------------
    # Token scanners
    # ----------------------
    def _error(self, message: str, start: Location) -> Token:
        return Token(TokenKind.ERROR, message, start)

    def _unknown(self, ch: str, start: Location) -> Token:
        self.skip()
        return self._error(f"{ch!r} does not start any known token", start)

    def _lex_string(self, start: Location) -> Token:
        self.skip()  # opening quote
        chars: list[str] = []
        while True:
            ch, status = self.peek()
            if status is not ReadStatus.AVAILABLE:
                return self._error("unclosed string literal", start)
            self.skip()
            if ch == '"':
                break
            if ch == "\n":
                return self._error("unclosed string literal", start)
            if ch == "\\":
                esc, status = self.peek()
                if status is not ReadStatus.AVAILABLE or esc == "\n":
                    return self._error("unclosed string literal", start)
                self.skip()
                if esc not in ESCAPES:
                    return self._error(f"{esc!r} unknown escape character", start)
                ch = ESCAPES[esc]
            chars.append(ch)
        return Token(TokenKind.STR, "".join(chars), start)

    def _lex_number(self, start: Location) -> Optional[Token]:
        saved = self.save()
        negative = False
        floating = False
        before: list[str] = []
        after: list[str] = []

        ch, status = self.peek()
        if status is ReadStatus.AVAILABLE and ch == "-":
            negative = True
            self.skip()
            ch, status = self.peek()
        while status is ReadStatus.AVAILABLE:
            if ch == ".":
                if floating:
                    self.restore(saved)
                    return None
                floating = True
            elif ch.isdecimal():
                (after if floating else before).append(ch)
            else:
                break
            self.skip()
            ch, status = self.peek()

        if not before and not after:
            self.restore(saved)
            return None

        text = ("-" if negative else "") + ("".join(before) or "0")
        if floating:
            text += "." + ("".join(after) or "0")
            return Token(TokenKind.DOUBLE, float(text), start)
        value = int(text)
        if not INT64_MIN <= value <= INT64_MAX:
            return self._error("integer literal out of range", start)
        return Token(TokenKind.INT, value, start)

    def _lex_id(self, start: Location) -> Optional[Token]:
        ch, status = self.peek()
        if status is not ReadStatus.AVAILABLE or not is_id_first(ch):
            return None
        chars: list[str] = []
        while status is ReadStatus.AVAILABLE and is_id(ch):
            chars.append(ch)
            self.skip()
            ch, status = self.peek()
        return Token(TokenKind.ID, "".join(chars), start)

    # ----------------------
    # Error recovery
    # ----------------------
    def skip_expression(self) -> None:
        """Skip one balanced expression, stopping at end of line or buffer.

        Always consumes at least one token when one is available on the
        current buffer.
        """
        depth = 0
        start_line: Optional[int] = None
        while True:
            saved = self.save()
            if not self.skip_spaces(cross_buffers=False):
                return
            if start_line is None:
                start_line = self.cursor.line
            elif self.cursor.line != start_line:
                self.restore(saved)
                return
            token = self.next_token()
            if token.kind in OPENERS:
                depth += 1
            elif token.kind in CLOSERS:
                depth -= 1
            if depth <= 0:
                return
