"""Plugin emitter registry.

Plugins can supply their own markup for a component kind, per target.
The core asks the registry first; a non-None result replaces the
built-in emitter and is wrapped in the uniform component ``div``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from sitexport._types import RenderFunc, Target
    from sitexport.tree.nodes import ComponentInstance


@runtime_checkable
class EmitterRegistry(Protocol):
    """What the emitter core needs from a plugin registry."""

    def has(self, kind: str, plugin_id: str) -> bool: ...

    def render(
        self,
        component: ComponentInstance,
        children_markup: str,
        target: Target,
    ) -> str | None: ...


@dataclass(frozen=True, slots=True)
class _Entry:
    static: RenderFunc | None
    server: RenderFunc | None


class PluginEmitterRegistry:
    """In-memory registry keyed by ``(plugin_id, kind)``.

    An entry registered without a plugin id matches the kind for any
    plugin; an exact ``(plugin_id, kind)`` entry wins over it.

    Example::

        registry = PluginEmitterRegistry()
        registry.register(
            "Chart",
            plugin_id="charts",
            static=lambda c, children: f"<canvas data-kind={c.kind!r}></canvas>",
        )

    """

    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: dict[tuple[str | None, str], _Entry] = {}

    def register(
        self,
        kind: str,
        *,
        plugin_id: str | None = None,
        static: RenderFunc | None = None,
        server: RenderFunc | None = None,
    ) -> None:
        """Register render callbacks for *kind*.

        Each callback receives ``(component, children_markup)`` and returns
        markup, or None to fall back to the built-in emitter.
        """
        self._entries[(plugin_id, kind)] = _Entry(static=static, server=server)

    def _lookup(self, kind: str, plugin_id: str) -> _Entry | None:
        return self._entries.get((plugin_id, kind)) or self._entries.get((None, kind))

    def has(self, kind: str, plugin_id: str) -> bool:
        return self._lookup(kind, plugin_id) is not None

    def render(
        self,
        component: ComponentInstance,
        children_markup: str,
        target: Target,
    ) -> str | None:
        entry = self._lookup(component.kind, component.plugin_id)
        if entry is None:
            return None
        func = entry.static if target == "static" else entry.server
        if func is None:
            return None
        return func(component, children_markup)

    def __len__(self) -> int:
        return len(self._entries)
