"""Stencil TemplateRenderer: template source + context -> rendered text.

Rendering interprets the parsed tree directly; nothing is compiled.

Pipeline:
    ```
    render(source, context)
    ├── output cache lookup            (enable_cache only)
    ├── structural passes              (at most max_loop_passes)
    │   ├── parse(text)
    │   ├── if   -> body or ""
    │   ├── for  -> one body copy per item, interpolated against
    │   │           the iteration's derived scope
    │   └── top-level {{ }} left as written
    ├── final interpolation            {{ path }} -> value, or kept
    │                                  verbatim when absent
    └── output cache store             (enable_cache only)
    ```

A pass stops early once the text has no ``if``/``for`` blocks left or a
pass leaves it unchanged. Blocks still present when the pass limit is
reached (or nested past ``max_loop_nesting_depth``) are emitted as written.

Thread-Safety:
- ``render()`` keeps all per-call state in a ``RenderContext``
- The only shared state is the ``RenderCache``, which locks internally
- Contexts are read, never written

"""

from __future__ import annotations

import logging
import time
import tracemalloc
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from stencil.cache.keys import UnkeyableValue
from stencil.cache.lru import MISS
from stencil.cache.render_cache import RenderCache
from stencil.environment.exceptions import require_source
from stencil.environment.options import RenderOptions
from stencil.lexer import has_directives
from stencil.nodes import Data, For, If, Node, Output
from stencil.parser import parse
from stencil.render_context import RenderContext
from stencil.template.conditions import ConditionEvaluator
from stencil.template.helpers import UNDEFINED, is_sequence, stringify
from stencil.template.introspection import TemplateIntrospectionMixin
from stencil.template.loop_context import LoopContext
from stencil.template.scope import Scope

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RenderResult:
    """Rendered text plus metadata about how it was produced.

    Attributes:
        content: The rendered text
        render_time_ms: Wall-clock time spent in ``render``
        cache_hit: True when ``content`` came from the output cache
        iterations: Structural passes run (0 for a cache hit or a
            template without blocks)
        memory_delta_bytes: Traced allocation change, or None unless
            ``tracemalloc`` is tracing
    """

    content: str
    render_time_ms: float
    cache_hit: bool = False
    iterations: int = 0
    memory_delta_bytes: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """The result as the file generator consumes it (camelCase keys)."""
        return {
            "content": self.content,
            "renderTimeMs": self.render_time_ms,
            "cacheHit": self.cache_hit,
            "iterations": self.iterations,
            "memoryDeltaBytes": self.memory_delta_bytes,
        }

    def __str__(self) -> str:
        return self.content


class TemplateRenderer(TemplateIntrospectionMixin):
    """Render stencil templates against binding contexts.

    Each renderer owns its cache; two renderers never share results
    unless handed the same ``RenderCache``.

    Attributes:
        cache: The renderer's condition, value and output caches
        options: Defaults for calls that pass no options
        evaluator: Evaluates ``{% if %}`` tests

    Example:
            >>> renderer = TemplateRenderer()
            >>> renderer.render("Hello {{name}}!", {"name": "World"}).content
            'Hello World!'

            >>> renderer.render("{{ missing }}", {}).content
            '{{ missing }}'

    """

    def __init__(
        self,
        cache: RenderCache | None = None,
        options: RenderOptions | Mapping[str, Any] | None = None,
    ):
        self.cache = cache if cache is not None else RenderCache()
        self.options = RenderOptions.coerce(options) or RenderOptions()
        self.evaluator = ConditionEvaluator()

    def render(
        self,
        source: str,
        context: Mapping[str, Any] | None = None,
        options: RenderOptions | Mapping[str, Any] | None = None,
    ) -> RenderResult:
        """Render ``source`` against ``context``.

        Malformed directives and unresolved variables never raise; they
        are left in the output as written.

        Raises:
            TemplateArgumentError: ``source`` is not a str
        """
        source = require_source(source)
        opts = RenderOptions.coerce(options) or self.options
        bindings = {} if context is None else context
        state = RenderContext(options=opts, cache=self.cache if opts.enable_cache else None)

        started = time.perf_counter()
        memory_before = tracemalloc.get_traced_memory()[0] if tracemalloc.is_tracing() else None

        root = Scope(bindings, state.cache)
        key = None
        if state.cache is not None:
            try:
                fingerprint = root.fingerprint
            except UnkeyableValue as e:
                logger.debug("Rendering without cache: %s", e)
                state.cache = None
                root = Scope(bindings)
            else:
                key = state.cache.output_key(source, fingerprint)

        if state.cache is not None and key is not None:
            cached = state.cache.outputs.get(key)
            if cached is not MISS:
                logger.debug("Output cache hit for %s", key[:12])
                return self._result(cached, started, memory_before, cache_hit=True)
            logger.debug("Output cache miss for %s", key[:12])

        content = self._render(source, root, state)

        if state.cache is not None and key is not None:
            state.cache.outputs.set(key, content)
        return self._result(content, started, memory_before, iterations=state.passes)

    def evaluate_condition(self, expression: str, context: Mapping[str, Any]) -> bool:
        """Evaluate an ``if`` test outside of any template.

        Example:
            >>> renderer.evaluate_condition("lang == 'python'", {"lang": "python"})
            True
        """
        return self.evaluator.evaluate(expression, Scope(context))

    def scope_for(self, context: Mapping[str, Any], *, cached: bool = False) -> Scope:
        """Root scope for ``context``, wired to this renderer's cache if ``cached``."""
        return Scope(context, self.cache if cached else None)

    @staticmethod
    def _result(
        content: str,
        started: float,
        memory_before: int | None,
        *,
        cache_hit: bool = False,
        iterations: int = 0,
    ) -> RenderResult:
        memory_delta = None
        if memory_before is not None and tracemalloc.is_tracing():
            memory_delta = tracemalloc.get_traced_memory()[0] - memory_before
        return RenderResult(
            content=content,
            render_time_ms=(time.perf_counter() - started) * 1000,
            cache_hit=cache_hit,
            iterations=iterations,
            memory_delta_bytes=memory_delta,
        )

    # Interpretation

    def _render(self, source: str, root: Scope, state: RenderContext) -> str:
        if state.options.optimize_string_ops and not has_directives(source):
            return source

        text = source
        while not state.passes_exhausted:
            tree = parse(text, max_depth=state.max_depth)
            if not tree.has_blocks:
                break
            state.passes += 1
            expanded = self._expand(tree.body, root, state, in_loop=False)
            if expanded == text:
                break
            text = expanded

        tree = parse(text, max_depth=state.max_depth)
        if tree.has_blocks and state.passes_exhausted:
            limit = state.options.max_loop_passes
            state.warnings.append(f"Pass limit ({limit}) reached with directives left unexpanded")
            logger.warning("Pass limit (%d) reached with directives left unexpanded", limit)
        return self._interpolate(tree.body, root)

    def _expand(self, nodes, scope: Scope, state: RenderContext, *, in_loop: bool) -> str:
        """One structural pass over ``nodes``.

        Outside loops, interpolations are left as written for the final
        pass. Inside loops they are resolved against the iteration scope,
        and kept as written when absent there.
        """
        parts: list[str] = []
        for node in nodes:
            if isinstance(node, Data):
                parts.append(node.value)
            elif isinstance(node, Output):
                parts.append(self._output(node, scope) if in_loop else node.source)
            elif isinstance(node, If):
                state.conditions_evaluated += 1
                if self.evaluator.evaluate(node.test, scope):
                    parts.append(self._expand(node.body, scope, state, in_loop=in_loop))
            elif isinstance(node, For):
                parts.append(self._expand_for(node, scope, state))
        return "".join(parts)

    def _expand_for(self, node: For, scope: Scope, state: RenderContext) -> str:
        items = scope.lookup(node.iter)
        if not is_sequence(items):
            return ""
        state.loops_expanded += 1
        length = len(items)
        return "".join(
            self._expand(
                node.body,
                scope.derive(node.target, item, LoopContext(index, length)),
                state,
                in_loop=True,
            )
            for index, item in enumerate(items)
        )

    def _interpolate(self, nodes: list[Node] | tuple[Node, ...], scope: Scope) -> str:
        parts: list[str] = []
        for node in nodes:
            if isinstance(node, Data):
                parts.append(node.value)
            elif isinstance(node, Output):
                parts.append(self._output(node, scope))
            elif isinstance(node, (If, For)):
                parts.append(node.source)
        return "".join(parts)

    @staticmethod
    def _output(node: Output, scope: Scope) -> str:
        value = scope.lookup(node.path)
        if value is UNDEFINED:
            return node.source
        return stringify(value)

    def __repr__(self) -> str:
        return f"<TemplateRenderer cache={self.cache!r}>"
