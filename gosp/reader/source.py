"""Source buffers and the character cursor.

A SourceReader owns an ordered list of named buffers (files or inline
snippets) and a single cursor. The cursor walks the buffers as if they were
concatenated, but reports buffer boundaries so the lexer can decide whether a
token may continue into the next buffer.

Locations are value objects: `save()` hands out an independent copy and
`restore()` installs one, which is all the parser needs for backtracking.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Optional


class ReadStatus(Enum):
    AVAILABLE = "available"
    END = "end"
    BUFFER_END = "buffer-end"


@dataclass
class Location:
    source: str = ""
    line: int = 0
    column: int = 0
    # Used only for fragment extraction.
    source_index: int = field(default=-1, repr=False)
    raw: int = field(default=0, repr=False)

    def copy(self) -> Location:
        return replace(self)

    def to_json(self) -> dict:
        return {"source": self.source, "line": self.line, "column": self.column}

    def __str__(self) -> str:
        return f"{self.source}:{self.line}:{self.column}"


@dataclass
class Source:
    name: str
    text: str


class SourceReader:
    """Ordered named buffers plus one cursor moving across them."""

    def __init__(self):
        self.sources: list[Source] = []
        self.cursor = Location()

    # --- buffers ---
    def add_named_source(self, name: str, text: str) -> None:
        self.sources.append(Source(name, text))
        if self.cursor.source_index == -1:
            self.cursor = Location(source=name, line=1, column=1, source_index=0, raw=0)

    def add_source_file(self, path: str | Path) -> None:
        path = Path(path)
        self.add_named_source(str(path), path.read_text(encoding="utf-8"))

    def current_source(self) -> Optional[Source]:
        idx = self.cursor.source_index
        if 0 <= idx < len(self.sources):
            return self.sources[idx]
        return None

    # --- cursor ---
    def save(self) -> Location:
        return self.cursor.copy()

    def restore(self, location: Location) -> None:
        self.cursor = location.copy()

    def peek(self) -> tuple[str, ReadStatus]:
        """Next character without consuming it."""
        src = self.current_source()
        if src is None:
            return "", ReadStatus.END
        if self.cursor.raw < len(src.text):
            return src.text[self.cursor.raw], ReadStatus.AVAILABLE
        if self.cursor.source_index + 1 < len(self.sources):
            return "", ReadStatus.BUFFER_END
        return "", ReadStatus.END

    def skip(self) -> bool:
        """Consume one character. Returns True when the cursor crossed into the next buffer."""
        ch, status = self.peek()
        if status is ReadStatus.AVAILABLE:
            if ch == "\n":
                self.cursor.line += 1
                self.cursor.column = 1
            else:
                self.cursor.column += 1
            self.cursor.raw += 1
            return False
        if status is ReadStatus.BUFFER_END:
            idx = self.cursor.source_index + 1
            self.cursor = Location(
                source=self.sources[idx].name, line=1, column=1, source_index=idx, raw=0
            )
            return True
        return False

    def get(self) -> tuple[str, ReadStatus]:
        ch, status = self.peek()
        if status is ReadStatus.AVAILABLE:
            self.skip()
        return ch, status

    # --- text extraction ---
    def fragment(self, start: Location, end: Location) -> str:
        """Raw text between two locations, concatenating buffers when they differ."""
        if start.source_index < 0 or end.source_index < 0:
            return ""
        if (start.source_index, start.raw) >= (end.source_index, end.raw):
            return ""
        if start.source_index == end.source_index:
            return self.sources[start.source_index].text[start.raw:end.raw]
        parts = [self.sources[start.source_index].text[start.raw:]]
        for idx in range(start.source_index + 1, end.source_index):
            parts.append(self.sources[idx].text)
        parts.append(self.sources[end.source_index].text[:end.raw])
        return "".join(parts)

    def line_text(self, location: Location) -> Optional[str]:
        """The full source line containing `location`, without its newline."""
        if not 0 <= location.source_index < len(self.sources):
            return None
        lines = self.sources[location.source_index].text.split("\n")
        if 1 <= location.line <= len(lines):
            return lines[location.line - 1]
        return None
