"""Output nodes for the stencil template tree."""

from __future__ import annotations

from dataclasses import dataclass

from stencil.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Data(Node):
    """Literal text between directives (and malformed directives kept verbatim)."""

    value: str


@dataclass(frozen=True, slots=True)
class Output(Node):
    """Interpolation: {{ path.to.value }}"""

    path: str
    source: str
