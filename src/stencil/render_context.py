"""Per-render state, kept apart from the caller's context.

One ``RenderContext`` is created for each ``TemplateRenderer.render`` call
and threaded through the interpreter explicitly, so concurrent renders on
one renderer never see each other's counters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stencil.cache.render_cache import RenderCache
    from stencil.environment.options import RenderOptions


@dataclass
class RenderContext:
    """State for one render call.

    Attributes:
        options: Effective options for this call
        cache: The renderer's cache when caching is enabled, else None
        passes: Structural passes run so far
        loops_expanded: ``for`` blocks expanded, across all passes
        conditions_evaluated: ``if`` tests evaluated, across all passes
        warnings: Messages logged for this render, for callers that want them
    """

    options: RenderOptions
    cache: RenderCache | None = None

    passes: int = 0
    loops_expanded: int = 0
    conditions_evaluated: int = 0

    warnings: list[str] = field(default_factory=list)

    @property
    def max_depth(self) -> int:
        return self.options.max_loop_nesting_depth

    @property
    def passes_exhausted(self) -> bool:
        return self.passes >= self.options.max_loop_passes
