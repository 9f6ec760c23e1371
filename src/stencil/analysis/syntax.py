"""Syntax checking for template sources.

``check_syntax`` runs the lexer and parser over a template and turns what
they find into a report: plain-text errors and warnings for callers that
just print them, and the underlying ``SyntaxIssue`` values for callers
that want codes and positions.
"""

from __future__ import annotations

from dataclasses import dataclass

from stencil._types import TokenType
from stencil.environment import terminal
from stencil.environment.exceptions import ErrorCode
from stencil.environment.options import ANALYSIS_MAX_DEPTH
from stencil.lexer import BLOCK_BEGIN, VARIABLE_BEGIN, tokenize
from stencil.nodes import Data, If, Node
from stencil.parser.blocks.control_flow import (
    BAD_FOR,
    ENDFOR,
    ENDIF,
    FOR,
    IF,
    UNKNOWN,
    classify_tag,
)
from stencil.parser.core import Parser
from stencil.parser.errors import Severity, SyntaxIssue

# Conditional nesting beyond this draws a warning
MAX_CONDITIONAL_DEPTH = 10

_STRUCTURE_CODES = frozenset({ErrorCode.UNCLOSED_BLOCK, ErrorCode.UNEXPECTED_END_TAG})
_NAME_CODES = frozenset({ErrorCode.EMPTY_VARIABLE, ErrorCode.INVALID_VARIABLE_NAME})


@dataclass(frozen=True, slots=True)
class SyntaxReport:
    """Outcome of :func:`check_syntax`.

    Attributes:
        is_valid: True when there are no errors (warnings are allowed)
        errors: Human-readable error lines
        warnings: Human-readable warning lines
        issues: Every located issue, in source order
    """

    is_valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    issues: tuple[SyntaxIssue, ...] = ()

    def format(self, source: str | None = None) -> str:
        """Render the report for a terminal, with snippets when ``source`` is given."""
        if self.is_valid and not self.warnings:
            return terminal.colorize("Template syntax OK", "green")

        lines: list[str] = []
        for message in self.errors:
            lines.append(f"{terminal.error_code('error')}: {message}")
        for message in self.warnings:
            lines.append(f"{terminal.warning_code('warning')}: {message}")
        if source is not None:
            for issue in self.issues:
                lines.append(issue.format(source))
        return "\n".join(lines)


def _scan_unclosed(tokens: list) -> list[SyntaxIssue]:
    """Find directive openers the lexer left inside literal text."""
    issues: list[SyntaxIssue] = []
    for token in tokens:
        if token.type is not TokenType.DATA:
            continue
        for opener, code, label in (
            (VARIABLE_BEGIN, ErrorCode.UNCLOSED_VARIABLE, "variable"),
            (BLOCK_BEGIN, ErrorCode.UNCLOSED_TAG, "block"),
        ):
            start = token.value.find(opener)
            while start != -1:
                before = token.value[:start]
                newlines = before.count("\n")
                col = start - (before.rfind("\n") + 1) if newlines else token.col_offset + start
                issues.append(
                    SyntaxIssue(
                        code=code,
                        message=f"Unclosed {label} tag '{opener}'",
                        lineno=token.lineno + newlines,
                        col_offset=col,
                    )
                )
                start = token.value.find(opener, start + len(opener))
    return issues


def _conditional_depth(nodes: tuple[Node, ...] | list[Node], depth: int = 0) -> int:
    deepest = depth
    for node in nodes:
        body = getattr(node, "body", None)
        if body is None:
            continue
        child_depth = depth + 1 if isinstance(node, If) else depth
        deepest = max(deepest, _conditional_depth(body, child_depth))
    return deepest


def _is_blank(nodes) -> bool:
    return all(isinstance(node, Data) and not node.value.strip() for node in nodes)


def check_syntax(source: str) -> SyntaxReport:
    """Check a template for malformed or suspicious directives.

    Errors:
        - unbalanced ``if``/``endif`` or ``for``/``endfor`` tags
        - tags that are neither ``if``, ``for`` nor an end tag
        - empty ``{{ }}`` and invalid variable names
        - ``{{`` or ``{%`` with no closing delimiter

    Warnings:
        - variable paths starting or ending with a dot
        - conditionals nested more than ten deep
        - ``if`` blocks with nothing in them

    Example:
        >>> check_syntax("{% if a %}x").errors
        ('Mismatched if/endif blocks: 1 if blocks, 0 endif blocks',)
    """
    tokens = tokenize(source)
    parser = Parser(tokens, source, max_depth=ANALYSIS_MAX_DEPTH)
    tree = parser.parse()

    issues = sorted(
        [*parser.issues, *_scan_unclosed(tokens)],
        key=lambda issue: (issue.lineno, issue.col_offset),
    )
    errors: list[str] = []
    warnings: list[str] = []

    counts = {IF: 0, ENDIF: 0, FOR: 0, ENDFOR: 0}
    malformed: list[str] = []
    for token in tokens:
        if token.type is not TokenType.BLOCK:
            continue
        kind = classify_tag(token.value)[0]
        if kind in counts:
            counts[kind] += 1
        elif kind in (BAD_FOR, UNKNOWN):
            malformed.append(token.source)

    balanced = True
    for open_tag, end_tag in ((IF, ENDIF), (FOR, ENDFOR)):
        if counts[open_tag] != counts[end_tag]:
            balanced = False
            errors.append(
                f"Mismatched {open_tag}/{end_tag} blocks: "
                f"{counts[open_tag]} {open_tag} blocks, {counts[end_tag]} {end_tag} blocks"
            )
    if malformed:
        errors.append(f"Malformed conditional syntax: {', '.join(malformed)}")

    for issue in issues:
        if issue.code in _STRUCTURE_CODES:
            # Counts already describe unbalanced tags; only misordered ones need a line
            if balanced:
                errors.append(f"{issue.message} at line {issue.lineno}")
        elif issue.code in _NAME_CODES or issue.code in (
            ErrorCode.UNCLOSED_VARIABLE,
            ErrorCode.UNCLOSED_TAG,
        ):
            target = errors if issue.severity is Severity.ERROR else warnings
            target.append(f"{issue.message} at line {issue.lineno}")
        elif issue.severity is Severity.WARNING:
            warnings.append(f"{issue.message} at line {issue.lineno}")

    depth = _conditional_depth(tree.body)
    if depth > MAX_CONDITIONAL_DEPTH:
        warnings.append(
            f"Deep conditional nesting detected (depth: {depth}), consider simplifying"
        )

    empty = sum(1 for node in tree.walk() if isinstance(node, If) and _is_blank(node.body))
    if empty:
        warnings.append(f"Empty conditional blocks detected: {empty} blocks")

    return SyntaxReport(
        is_valid=not errors,
        errors=tuple(errors),
        warnings=tuple(warnings),
        issues=tuple(issues),
    )
