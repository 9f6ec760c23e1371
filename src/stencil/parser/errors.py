"""Parser diagnostics for stencil.

Malformed directives never abort a parse. Each one becomes a
``SyntaxIssue`` value carrying its code, location and severity, and the
offending text stays in the tree as literal data.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from stencil.environment import terminal
from stencil.environment.exceptions import ErrorCode, build_source_snippet


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True, slots=True)
class SyntaxIssue:
    """A problem found while tokenizing or parsing a template.

    Attributes:
        code: Searchable diagnostic code
        message: Human-readable description
        lineno: 1-based line of the offending directive
        col_offset: 0-based column of the offending directive
        severity: ERROR for malformed structure, WARNING for suspicious input
    """

    code: ErrorCode
    message: str
    lineno: int
    col_offset: int
    severity: Severity = Severity.ERROR

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def format(self, source: str | None = None) -> str:
        """Format the issue like a compiler diagnostic, with a snippet if source is given."""
        paint = terminal.error_code if self.is_error else terminal.warning_code
        header = f"{paint(self.code.value)}: {self.message} at line {self.lineno}"
        if not source:
            return header
        snippet = build_source_snippet(source, self.lineno, column=self.col_offset)
        return f"{header}\n{snippet.format()}"
