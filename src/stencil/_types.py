"""Token types shared by the lexer and parser."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
    """Kinds of token produced by the lexer.

    The lexer only recognizes delimiters; the inner text of a
    ``{{ ... }}`` or ``{% ... %}`` directive is carried as the token value
    and interpreted by the parser.
    """

    DATA = "data"
    VARIABLE = "variable"  # {{ ... }}
    BLOCK = "block"  # {% ... %}
    EOF = "eof"


@dataclass(frozen=True, slots=True)
class Token:
    """A lexed token with its source position.

    Attributes:
        type: Token kind
        value: Inner text for directives (delimiters removed, not stripped),
            literal text for DATA
        source: Exact source text of the token, delimiters included
        pos: 0-based offset of the token in the template source
        lineno: 1-based line number
        col_offset: 0-based column
    """

    type: TokenType
    value: str
    source: str
    pos: int
    lineno: int
    col_offset: int

    @property
    def end(self) -> int:
        """Offset just past the token."""
        return self.pos + len(self.source)

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.lineno}:{self.col_offset})"
