"""Template structure nodes for the stencil template tree."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from stencil.nodes.base import Node
from stencil.nodes.control_flow import For, If


@dataclass(frozen=True, slots=True)
class Template(Node):
    """Root node: the parsed body of one template source."""

    body: Sequence[Node]

    @property
    def has_blocks(self) -> bool:
        """True if any ``if``/``for`` block survived parsing."""
        return any(isinstance(node, (If, For)) for node in self.body)

    def walk(self) -> Iterator[Node]:
        """Yield every node depth-first, in document order."""
        stack: list[Node] = list(reversed(self.body))
        while stack:
            node = stack.pop()
            yield node
            body = getattr(node, "body", None)
            if body:
                stack.extend(reversed(body))
