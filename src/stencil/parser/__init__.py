"""Stencil parser: token stream to template tree.

Malformed input never raises; see ``Parser.issues`` for what was found.
"""

from stencil.parser.core import Parser, parse, parse_with_issues
from stencil.parser.errors import Severity, SyntaxIssue

__all__ = ["Parser", "Severity", "SyntaxIssue", "parse", "parse_with_issues"]
