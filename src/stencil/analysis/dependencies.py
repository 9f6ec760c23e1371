"""Variable reference extraction for template validation.

Walks a parsed tree and records every context path a render could read:
interpolations, ``if`` operands and ``for`` collections. Paths rooted at
an enclosing loop variable (or at ``loop``) are marked local, since the
caller's context never supplies them.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from stencil.template.conditions import extract_identifiers

if TYPE_CHECKING:
    from stencil.nodes import For, If, Node, Output, Template


class ReferenceKind(Enum):
    OUTPUT = "output"
    CONDITION = "condition"
    ITERABLE = "iterable"


@dataclass(frozen=True, slots=True)
class Reference:
    """One path read by the template.

    Attributes:
        path: Dotted path as written
        kind: Where the path appears
        lineno: Line of the directive that reads it
        local: True if rooted at a loop variable or ``loop``
    """

    path: str
    kind: ReferenceKind
    lineno: int
    local: bool = False

    @property
    def root(self) -> str:
        return self.path.split(".", 1)[0]


class DependencyWalker:
    """Collect the context paths a template reads, in document order.

    Thread-safe: creates new state for each analyze() call.

    Example:
            >>> walker = DependencyWalker()
            >>> [r.path for r in walker.analyze(parse("{{ a }}{% for x in xs %}{{ x.n }}{% endfor %}"))]
            ['a', 'xs', 'x.n']

    Scope Handling:
        - Loop variables ({% for x in items %}) and ``loop`` are local
          inside the body
        - The collection path of a loop is read in the enclosing scope

    """

    def __init__(self) -> None:
        self._scope_stack: list[set[str]] = []
        self._references: list[Reference] = []
        self._dispatch: dict[str, Callable[..., None]] = {}
        for name in dir(self):
            if name.startswith("_visit_"):
                method = getattr(self, name)
                if callable(method):
                    self._dispatch[name[7:]] = method

    def analyze(self, node: Node) -> list[Reference]:
        self._scope_stack = [set()]
        self._references = []
        self._visit(node)
        return list(self._references)

    def _visit(self, node: Node) -> None:
        handler = self._dispatch.get(type(node).__name__.lower())
        if handler:
            handler(node)

    def _visit_template(self, node: Template) -> None:
        for child in node.body:
            self._visit(child)

    def _visit_output(self, node: Output) -> None:
        self._add(node.path, ReferenceKind.OUTPUT, node.lineno)

    def _visit_if(self, node: If) -> None:
        for name in extract_identifiers(node.test):
            self._add(name, ReferenceKind.CONDITION, node.lineno)
        for child in node.body:
            self._visit(child)

    def _visit_for(self, node: For) -> None:
        self._add(node.iter, ReferenceKind.ITERABLE, node.lineno)

        self._scope_stack.append({node.target, "loop"})
        for child in node.body:
            self._visit(child)
        self._scope_stack.pop()

    def _add(self, path: str, kind: ReferenceKind, lineno: int) -> None:
        root = path.split(".", 1)[0]
        self._references.append(Reference(path, kind, lineno, local=self._is_local(root)))

    def _is_local(self, name: str) -> bool:
        return any(name in scope for scope in self._scope_stack)
