"""Base node class for the stencil template tree."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all tree nodes.

    All nodes track their source location for diagnostics.
    Nodes are immutable, so a parsed tree can be shared across threads.

    """

    lineno: int
    col_offset: int
