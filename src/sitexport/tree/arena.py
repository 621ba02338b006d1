"""Id-indexed arena over one page's component forest.

Children stay owned by their parent as ordered tuples; the arena adds an
index from instance id to node and from child to parent, and validates
the tree invariants once, up front.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from sitexport._errors import TreeError

if TYPE_CHECKING:
    from sitexport.tree.nodes import ComponentInstance, PageDefinition


class ComponentTree:
    """Validated, indexed view of a component forest.

    Args:
        roots: Root components in page order.

    Raises:
        TreeError: If an instance id appears twice in the forest.

    """

    __slots__ = ("_nodes", "_parents", "_roots")

    def __init__(self, roots: tuple[ComponentInstance, ...]) -> None:
        self._roots = roots
        self._nodes: dict[str, ComponentInstance] = {}
        self._parents: dict[str, str | None] = {}
        stack: list[tuple[ComponentInstance, str | None]] = [(r, None) for r in reversed(roots)]
        while stack:
            node, parent = stack.pop()
            if node.instance_id in self._nodes:
                msg = f"Duplicate component instance id {node.instance_id!r}"
                raise TreeError(msg)
            self._nodes[node.instance_id] = node
            self._parents[node.instance_id] = parent
            stack.extend((c, node.instance_id) for c in reversed(node.children))

    @classmethod
    def from_page(cls, page: PageDefinition) -> ComponentTree:
        try:
            return cls(page.components)
        except TreeError as exc:
            msg = f"Page {page.page_name!r}: {exc}"
            raise TreeError(msg) from exc

    @property
    def roots(self) -> tuple[ComponentInstance, ...]:
        return self._roots

    def get(self, instance_id: str) -> ComponentInstance:
        """Return the component with *instance_id* (``KeyError`` if absent)."""
        return self._nodes[instance_id]

    def parent(self, instance_id: str) -> ComponentInstance | None:
        """Return the enclosing component, or None for a root."""
        parent_id = self._parents[instance_id]
        return self._nodes[parent_id] if parent_id is not None else None

    def has_parent(self, instance_id: str) -> bool:
        return self._parents.get(instance_id) is not None

    def depth(self, instance_id: str) -> int:
        """Number of ancestors above *instance_id*."""
        depth = 0
        current = self._parents[instance_id]
        while current is not None:
            depth += 1
            current = self._parents[current]
        return depth

    def walk(self) -> Iterator[tuple[ComponentInstance, int]]:
        """Yield ``(component, depth)`` in depth-first pre-order."""
        stack: list[tuple[ComponentInstance, int]] = [(r, 0) for r in reversed(self._roots)]
        while stack:
            node, depth = stack.pop()
            yield node, depth
            stack.extend((c, depth + 1) for c in reversed(node.children))

    def __contains__(self, instance_id: object) -> bool:
        return instance_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[ComponentInstance]:
        for node, _ in self.walk():
            yield node
