"""Exceptions and diagnostic codes for stencil.

Exception Hierarchy:
TemplateError (base)
└── TemplateArgumentError     # API misuse, e.g. a None template

Rendering itself never raises for template content: unresolved variables,
malformed directives and exhausted pass limits all degrade to verbatim
output. Those conditions are reported as values (``SyntaxIssue``) through
the validation entry points, tagged with an ``ErrorCode``.

Example:
    ```
    S-PAR-002: Unclosed 'if' block (no matching endif) at line 3
       |
    >  3 | {% if show_footer %}
       |    ^
       |
    ```

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from stencil.environment import terminal


class ErrorCode(Enum):
    """Searchable codes for stencil diagnostics.

    Format: S-{CATEGORY}-{NUMBER}
    Categories: LEX (lexer), PAR (parser), API (caller misuse)
    """

    # Lexer (S-LEX-xxx)
    UNCLOSED_VARIABLE = "S-LEX-001"
    UNCLOSED_TAG = "S-LEX-002"

    # Parser (S-PAR-xxx)
    UNEXPECTED_END_TAG = "S-PAR-001"
    UNCLOSED_BLOCK = "S-PAR-002"
    UNKNOWN_TAG = "S-PAR-003"
    INVALID_FOR_HEADER = "S-PAR-004"
    EMPTY_VARIABLE = "S-PAR-005"
    INVALID_VARIABLE_NAME = "S-PAR-006"
    NESTING_TOO_DEEP = "S-PAR-007"

    # API misuse (S-API-xxx)
    INVALID_TEMPLATE_ARGUMENT = "S-API-001"

    @property
    def category(self) -> str:
        """Error category ('lexer', 'parser', 'api')."""
        prefix = self.value.split("-")[1]
        return {
            "LEX": "lexer",
            "PAR": "parser",
            "API": "api",
        }.get(prefix, "unknown")


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    """Template source context around a diagnostic line.

    Attributes:
        lines: Tuple of (line_number, line_content) pairs around the error.
        error_line: The 1-based line number of the diagnostic.
        column: Optional column offset for a caret pointer.
    """

    lines: tuple[tuple[int, str], ...]
    error_line: int
    column: int | None = None

    def format(self) -> str:
        """Format the snippet in compiler-diagnostic style."""
        parts: list[str] = [terminal.dim_text("   |")]
        for lineno, content in self.lines:
            parts.append(
                terminal.format_source_line(lineno, content, is_error=lineno == self.error_line)
            )
        if self.column is not None:
            caret = " " * self.column + "^"
            parts.append(f"{terminal.dim_text('   |')} {terminal.error_line(caret)}")
        parts.append(terminal.dim_text("   |"))
        return "\n".join(parts)


def build_source_snippet(
    source: str,
    error_line: int,
    *,
    context_lines: int = 1,
    column: int | None = None,
) -> SourceSnippet:
    """Build a SourceSnippet from template source.

    Args:
        source: Full template source text.
        error_line: 1-based line number of the diagnostic.
        context_lines: Number of lines to show before/after the error line.
        column: Optional column offset for a caret pointer.
    """
    all_lines = source.splitlines()
    start = max(0, error_line - 1 - context_lines)
    end = min(len(all_lines), error_line + context_lines)
    lines = tuple((i + 1, all_lines[i]) for i in range(start, end))
    return SourceSnippet(lines=lines, error_line=error_line, column=column)


class TemplateError(Exception):
    """Base exception for all stencil errors.

    Attributes:
        code: Optional ErrorCode for searchable error identification.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format the error as a one-line summary prefixed with its code."""
        header = str(self)
        if self.code and self.code.value not in header:
            header = f"{self.code.value}: {header}"
        return header


class TemplateArgumentError(TemplateError, TypeError):
    """A render or validation entry point was called with a non-string template.

    This is a caller bug, not a template problem, so it is the one
    condition the engine raises.

    Example:
        >>> renderer.render(None, {})
        TemplateArgumentError: template must be a str, got NoneType
    """

    code: ErrorCode | None = ErrorCode.INVALID_TEMPLATE_ARGUMENT

    def __init__(self, value: object, argument: str = "template"):
        self.value = value
        self.argument = argument
        super().__init__(f"{argument} must be a str, got {type(value).__name__}")


def require_source(value: object, argument: str = "template") -> str:
    """Return ``value`` if it is a str, else raise TemplateArgumentError."""
    if not isinstance(value, str):
        raise TemplateArgumentError(value, argument)
    return value
