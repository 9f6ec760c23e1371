"""Template introspection mixin.

Adds variable listing, validation and syntax checking to
``TemplateRenderer`` via mixin inheritance. All of it is static: templates
are parsed, never rendered.

"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from stencil.environment.exceptions import require_source
from stencil.environment.options import ANALYSIS_MAX_DEPTH
from stencil.parser import parse
from stencil.template.helpers import UNDEFINED, resolve

if TYPE_CHECKING:
    from stencil.analysis import Reference, SyntaxReport
    from stencil.environment.options import RenderOptions


def _unique(paths) -> list[str]:
    return list(dict.fromkeys(paths))


class TemplateIntrospectionMixin:
    """Mixin adding static analysis to TemplateRenderer.

    Requires the host class to define:
        options: RenderOptions

    """

    if TYPE_CHECKING:
        options: RenderOptions

    def _references(self, source: str) -> list[Reference]:
        from stencil.analysis import DependencyWalker

        tree = parse(source, max_depth=ANALYSIS_MAX_DEPTH)
        return DependencyWalker().analyze(tree)

    def list_template_variables(self, source: str) -> list[str]:
        """Every ``{{ path }}`` in ``source``, unique, in order of first use.

        Example:
            >>> renderer.list_template_variables("Hi {{ name }}, bye {{ name }}")
            ['name']
        """
        from stencil.analysis import ReferenceKind

        source = require_source(source)
        return _unique(
            ref.path for ref in self._references(source) if ref.kind is ReferenceKind.OUTPUT
        )

    def list_conditional_variables(self, source: str) -> list[str]:
        """Bare identifier operands of every ``{% if %}`` test.

        Keywords, quoted literals and numbers are skipped.

        Example:
            >>> renderer.list_conditional_variables("{% if isActive and not isHidden %}x{% endif %}")
            ['isActive', 'isHidden']
        """
        from stencil.analysis import ReferenceKind

        source = require_source(source)
        return _unique(
            ref.path for ref in self._references(source) if ref.kind is ReferenceKind.CONDITION
        )

    def validate_variables(self, source: str, context: Mapping[str, Any]) -> list[str]:
        """Paths ``source`` reads that ``context`` does not supply.

        Covers interpolations, ``if`` operands and ``for`` collections.
        Paths rooted at an enclosing loop variable or ``loop`` are skipped,
        since they only exist while the loop runs. A path counts as
        supplied when it resolves, even to a falsy value.

        Example:
            >>> renderer.validate_variables("{{ user.name }} {{ user.role }}", {"user": {"name": "A"}})
            ['user.role']
        """
        source = require_source(source)
        missing = (
            ref.path
            for ref in self._references(source)
            if not ref.local and resolve(context, ref.path) is UNDEFINED
        )
        return _unique(missing)

    def check_syntax(self, source: str) -> SyntaxReport:
        """Check ``source`` for malformed directives. See :func:`stencil.analysis.check_syntax`."""
        from stencil.analysis import check_syntax

        return check_syntax(require_source(source))
