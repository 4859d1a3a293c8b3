"""Source text and span tracking for Sprig diagnostics."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Span:
    """A range within a source file. Lines and columns are 1-based."""

    file: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int

    def __str__(self) -> str:
        return f"{self.file}:{self.start_line}:{self.start_col}"

    def to(self, end: Span) -> Span:
        """Span from the start of this span to the end of *end*."""
        return Span(
            self.file,
            self.start_line, self.start_col,
            end.end_line, end.end_col,
        )

    def start(self) -> Span:
        """Zero-width span at the start of this one."""
        return Span(
            self.file,
            self.start_line, self.start_col,
            self.start_line, self.start_col,
        )


BUILTIN_SPAN = Span("<builtin>", 0, 0, 0, 0)


class SourceFile:
    """Source text with line access, keyed by the name used in spans."""

    def __init__(self, name: str, text: str) -> None:
        self.name = name
        self.text = text
        self.lines = text.splitlines()

    @classmethod
    def read(cls, path: Path) -> SourceFile:
        return cls(str(path), path.read_text())

    def line_at(self, n: int) -> str | None:
        """Return the 1-indexed line, or None if out of range."""
        if 1 <= n <= len(self.lines):
            return self.lines[n - 1]
        return None

    def span_text(self, span: Span) -> str:
        """Extract the text covered by a single-line or multi-line span."""
        if span.start_line == span.end_line:
            line = self.line_at(span.start_line) or ""
            return line[span.start_col - 1 : span.end_col]
        parts = []
        for ln in range(span.start_line, span.end_line + 1):
            line = self.line_at(ln) or ""
            if ln == span.start_line:
                parts.append(line[span.start_col - 1 :])
            elif ln == span.end_line:
                parts.append(line[: span.end_col])
            else:
                parts.append(line)
        return "\n".join(parts)
