"""Control flow nodes for the stencil template tree."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from stencil.nodes.base import Node


@dataclass(frozen=True, slots=True)
class If(Node):
    """Conditional: {% if expr %}...{% endif %}

    ``test`` is kept as text; the evaluator classifies it at render time.
    ``source`` is the full span, open tag through ``endif``.
    """

    test: str
    body: Sequence[Node]
    source: str


@dataclass(frozen=True, slots=True)
class For(Node):
    """For loop: {% for target in iter %}...{% endfor %}"""

    target: str
    iter: str
    body: Sequence[Node]
    source: str
