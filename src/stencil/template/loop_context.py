"""Loop iteration metadata for stencil ``{% for %}`` blocks."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

_KEYS = ("index", "index0", "first", "last", "length", "revindex", "revindex0")


class LoopContext(Mapping[str, Any]):
    """Loop iteration metadata bound as ``loop`` inside ``{% for %}`` bodies.

    A read-only mapping, so dotted paths like ``loop.index`` resolve through
    the same code as any other context value. All keys are computed on
    access from the current position and the sequence length.

    Keys:
        index: 1-based iteration count (1, 2, 3, ...)
        index0: 0-based iteration count (0, 1, 2, ...)
        first: True on the first iteration
        last: True on the final iteration
        length: Total number of items in the sequence
        revindex: Reverse 1-based index (counts down to 1)
        revindex0: Reverse 0-based index (counts down to 0)

    Example:
            ```
            {% for item in items %}{{ loop.index }}/{{ loop.length }}: {{ item }}
            {% if loop.last %}(end){% endif %}{% endfor %}
            ```

    Output:
            ```
            1/2: Apple
            2/2: Banana
            (end)
            ```

    """

    __slots__ = ("_index", "_length")

    def __init__(self, index0: int, length: int) -> None:
        if not 0 <= index0 < length:
            raise ValueError(f"index0 {index0} out of range for length {length}")
        self._index = index0
        self._length = length

    @property
    def index(self) -> int:
        """1-based iteration count."""
        return self._index + 1

    @property
    def index0(self) -> int:
        """0-based iteration count."""
        return self._index

    @property
    def first(self) -> bool:
        """True if this is the first iteration."""
        return self._index == 0

    @property
    def last(self) -> bool:
        """True if this is the last iteration."""
        return self._index == self._length - 1

    @property
    def length(self) -> int:
        """Total number of items in the sequence."""
        return self._length

    @property
    def revindex(self) -> int:
        """Reverse 1-based index (counts down to 1)."""
        return self._length - self._index

    @property
    def revindex0(self) -> int:
        """Reverse 0-based index (counts down to 0)."""
        return self._length - self._index - 1

    def __getitem__(self, key: str) -> Any:
        if key not in _KEYS:
            raise KeyError(key)
        return getattr(self, key)

    def __iter__(self) -> Iterator[str]:
        return iter(_KEYS)

    def __len__(self) -> int:
        return len(_KEYS)

    def __repr__(self) -> str:
        return f"<LoopContext {self.index}/{self.length}>"
