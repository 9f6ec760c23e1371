"""Binding scopes for one render call."""

from __future__ import annotations

from collections.abc import Collection, Mapping
from typing import TYPE_CHECKING, Any

from stencil.cache.keys import content_hash, context_fingerprint, serialize_value
from stencil.cache.lru import MISS
from stencil.template.helpers import UNDEFINED, resolve
from stencil.template.loop_context import LoopContext

if TYPE_CHECKING:
    from stencil.cache.render_cache import RenderCache


class Scope:
    """Immutable view of the bindings visible at one point of a render.

    The root scope wraps the caller's context; each loop iteration gets a
    derived scope holding a shallow copy plus the loop variable and
    ``loop``. The caller's mapping is never written to.

    The fingerprint is computed on first use only, so renders without a
    cache never pay for it. A root scope hashes its serialized bindings.
    A derived scope hashes its parent's fingerprint with the loop variable,
    the item and its position, so an iteration costs the size of its item
    rather than the size of the whole context.

    Paths not rooted at the loop variable or ``loop`` are looked up through
    the parent, so iterations share the parent's value cache entries.
    """

    __slots__ = ("_bindings", "_cache", "_fingerprint", "_parent", "_target", "_item", "_loop")

    def __init__(self, bindings: Mapping[str, Any], cache: RenderCache | None = None):
        self._bindings = bindings
        self._cache = cache
        self._fingerprint: str | None = None
        self._parent: Scope | None = None
        self._target: str | None = None
        self._item: Any = None
        self._loop: LoopContext | None = None

    @property
    def bindings(self) -> Mapping[str, Any]:
        return self._bindings

    @property
    def cache(self) -> RenderCache | None:
        return self._cache

    @property
    def parent(self) -> Scope | None:
        return self._parent

    @property
    def fingerprint(self) -> str:
        if self._fingerprint is None:
            if self._parent is None:
                self._fingerprint = context_fingerprint(self._bindings)
            else:
                loop = self._loop
                self._fingerprint = content_hash(
                    f"{self._parent.fingerprint}|{self._target}|"
                    f"{loop.index0}/{loop.length}|{serialize_value(self._item)}"
                )
        return self._fingerprint

    def derive(self, target: str, item: Any, loop: LoopContext) -> Scope:
        """Scope for one iteration: parent bindings + ``target`` + ``loop``."""
        child = Scope({**self._bindings, target: item, "loop": loop}, self._cache)
        child._parent = self
        child._target = target
        child._item = item
        child._loop = loop
        return child

    def _is_local(self, path: str) -> bool:
        root = path.split(".", 1)[0]
        return root == self._target or root == "loop"

    def owner(self, roots: Collection[str]) -> Scope:
        """Nearest scope, this one or an ancestor, that binds any of ``roots`` itself.

        Paths with none of ``roots`` resolve the same in the returned scope
        as in this one.
        """
        scope = self
        while scope._parent is not None and "loop" not in roots and scope._target not in roots:
            scope = scope._parent
        return scope

    def lookup(self, path: str) -> Any:
        """Resolve ``path``, going through the value cache when there is one."""
        if self._parent is not None and not self._is_local(path):
            return self._parent.lookup(path)
        if self._cache is None:
            return resolve(self._bindings, path)
        key = self._cache.value_key(self.fingerprint, path)
        value = self._cache.values.get(key)
        if value is MISS:
            value = resolve(self._bindings, path)
            self._cache.values.set(key, value)
        return value

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and resolve(self._bindings, path) is not UNDEFINED

    def __repr__(self) -> str:
        return f"<Scope {list(self._bindings)!r}>"
