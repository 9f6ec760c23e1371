"""Static analysis of stencil templates: variable references and syntax checks."""

from stencil.analysis.dependencies import DependencyWalker, Reference, ReferenceKind
from stencil.analysis.syntax import SyntaxReport, check_syntax

__all__ = [
    "DependencyWalker",
    "Reference",
    "ReferenceKind",
    "SyntaxReport",
    "check_syntax",
]
