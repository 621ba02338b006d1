"""Shared type definitions for sitexport."""

from collections.abc import Callable
from typing import Literal

# Tagged union of every value a component prop may hold
type PropValue = (
    str | int | float | bool | None | list[PropValue] | dict[str, PropValue]
)

# camelCase CSS property -> value, in insertion order
type StyleMap = dict[str, str]

# Export target
type Target = Literal["static", "server"]

# Component instance identifier (unique within a page)
type InstanceID = str

# Route path as authored (e.g., "/", "/about", "#pricing")
type RoutePath = str

# Archive-relative path using forward slashes
type ArchivePath = str

# Plugin render callback: (component, children_markup) -> markup or None
type RenderFunc = Callable[..., str | None]
