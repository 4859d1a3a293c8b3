"""Diagnostics, typed compile errors, and Rust-style rendering."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from sprig.source import SourceFile, Span

if TYPE_CHECKING:
    from sprig.tokens import Token, TokenKind


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"


class ErrorCode(str, Enum):
    """Diagnostic codes.

    - E1xx: lexical errors
    - E2xx: syntax errors
    - E3xx: name resolution errors
    """

    UNEXPECTED_CHARACTER = "E100"
    UNEXPECTED_TOKEN = "E200"
    UNDEFINED_REFERENCE = "E300"
    DUPLICATE_DECLARATION = "E301"
    NOT_A_TYPE = "E302"

    def __str__(self) -> str:
        return self.value


# ANSI color codes
_COLORS = {
    Severity.ERROR: "\033[1;31m",    # bold red
    Severity.WARNING: "\033[1;33m",  # bold yellow
    Severity.NOTE: "\033[1;36m",     # bold cyan
}
_BOLD = "\033[1m"
_BLUE = "\033[1;34m"
_RESET = "\033[0m"


@dataclass(frozen=True)
class DiagnosticLabel:
    """Points to a specific source location."""

    span: Span
    message: str
    style: str = "primary"  # "primary" or "secondary"


@dataclass
class Diagnostic:
    """A single diagnostic message with optional labels and notes."""

    severity: Severity
    code: str
    message: str
    labels: list[DiagnosticLabel] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)

    @classmethod
    def error(
        cls, code: ErrorCode, message: str, span: Span, label: str = "",
    ) -> Diagnostic:
        return cls(
            severity=Severity.ERROR,
            code=code.value,
            message=message,
            labels=[DiagnosticLabel(span=span, message=label)],
        )

    @property
    def span(self) -> Span | None:
        return self.labels[0].span if self.labels else None


DiagnosticSink = Callable[[Diagnostic], None]


class DiagnosticCollector:
    """A sink that keeps every diagnostic it receives, in order."""

    def __init__(self) -> None:
        self.diagnostics: list[Diagnostic] = []

    def __call__(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    def __len__(self) -> int:
        return len(self.diagnostics)

    def codes(self) -> list[str]:
        return [d.code for d in self.diagnostics]


class DiagnosticRenderer:
    """Renders diagnostics in Rust-style format with colors."""

    def __init__(self, *, color: bool = True) -> None:
        self.color = color
        self._sources: dict[str, SourceFile | None] = {}

    def _c(self, code: str) -> str:
        return code if self.color else ""

    def add_source(self, source: SourceFile) -> None:
        """Register in-memory source so spans naming it can be quoted."""
        self._sources[source.name] = source

    def _get_source_line(self, filename: str, line_num: int) -> str | None:
        """Load and cache the source file, return the 1-indexed line."""
        if filename not in self._sources:
            try:
                path = Path(filename)
                self._sources[filename] = SourceFile.read(path) if path.is_file() else None
            except OSError:
                self._sources[filename] = None
        source = self._sources[filename]
        return source.line_at(line_num) if source is not None else None

    def render(self, diag: Diagnostic) -> str:
        lines: list[str] = []
        color = _COLORS[diag.severity]

        # Header: error[E200]: message
        lines.append(
            f"{self._c(color)}{diag.severity.value}[{diag.code}]{self._c(_RESET)}"
            f"{self._c(_BOLD)}: {diag.message}{self._c(_RESET)}"
        )

        for label in diag.labels:
            span = label.span
            lines.append(f"  {self._c(_BLUE)}-->{self._c(_RESET)} {span}")
            gutter = f"{span.start_line:>4}"
            lines.append(f"  {self._c(_BLUE)}   |{self._c(_RESET)}")

            source_line = self._get_source_line(span.file, span.start_line)
            if source_line is not None:
                lines.append(
                    f"  {self._c(_BLUE)}{gutter} |{self._c(_RESET)} {source_line}"
                )
                if span.start_line == span.end_line:
                    caret_len = max(1, span.end_col - span.start_col + 1)
                    padding = " " * (span.start_col - 1)
                    lines.append(
                        f"  {self._c(_BLUE)}   |{self._c(_RESET)} "
                        f"{padding}{self._c(color)}{'^' * caret_len}{self._c(_RESET)}"
                    )

            if label.message:
                lines.append(
                    f"  {self._c(_BLUE)}   |{self._c(_RESET)}   "
                    f"{self._c(color)}{label.message}{self._c(_RESET)}"
                )

        for note in diag.notes:
            lines.append(f"  {self._c(_BLUE)}={self._c(_RESET)} note: {note}")

        return "\n".join(lines)


# ── Exceptions ───────────────────────────────────────────────────


class CompileError(Exception):
    """Compilation error carrying the diagnostics that caused it."""

    def __init__(self, diagnostics: list[Diagnostic]) -> None:
        self.diagnostics = diagnostics
        messages = [d.message for d in diagnostics]
        super().__init__(f"{len(diagnostics)} error(s): {'; '.join(messages)}")

    @property
    def diagnostic(self) -> Diagnostic:
        """The first (and for fail-fast stages, only) diagnostic."""
        return self.diagnostics[0]


class LexError(CompileError):
    """The source contains a character no token starts with."""

    def __init__(self, diagnostic: Diagnostic, character: str) -> None:
        super().__init__([diagnostic])
        self.character = character


class ParseError(CompileError):
    """The lookahead token does not fit the grammar production."""

    def __init__(
        self,
        diagnostic: Diagnostic,
        token: Token,
        expected: tuple[TokenKind, ...],
    ) -> None:
        super().__init__([diagnostic])
        self.token = token
        self.expected = expected


class SemanticError(CompileError):
    """A well-formed program refers to names incorrectly."""

    code = ErrorCode.UNDEFINED_REFERENCE

    def __init__(self, diagnostic: Diagnostic, name: str) -> None:
        super().__init__([diagnostic])
        self.name = name


class UndefinedReferenceError(SemanticError):
    code = ErrorCode.UNDEFINED_REFERENCE


class DuplicateDeclarationError(SemanticError):
    code = ErrorCode.DUPLICATE_DECLARATION


class NotATypeError(SemanticError):
    code = ErrorCode.NOT_A_TYPE
