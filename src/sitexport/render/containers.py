"""Container and ScrollableContainer emitters."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sitexport.render.emitters import base_attrs, render_component, wrap_block
from sitexport.render.styles import effective_layout, is_row_layout, resolve_container_styles

if TYPE_CHECKING:
    from sitexport.render.context import RenderContext
    from sitexport.tree.nodes import ComponentInstance


def emit_container(component: ComponentInstance, depth: int, ctx: RenderContext) -> str:
    """Render a layout container.

    Layout children are wrapped so they fill their track: ``width: 100%``
    in column and grid layouts, ``flex: 1`` in row layouts.
    """
    nesting = ctx.tree.depth(component.instance_id)
    styles = resolve_container_styles(component, nesting)
    wrapper = "flex: 1" if is_row_layout(effective_layout(component)) else "width: 100%"

    child_indent = ctx.dialect.indent(depth + 1)
    blocks: list[str] = []
    for child in component.children:
        if child.is_layout:
            inner = render_component(child, depth + 2, ctx)
            blocks.append(f'{child_indent}<div style="{wrapper}">\n{inner}\n{child_indent}</div>')
        else:
            blocks.append(render_component(child, depth + 1, ctx))

    classes = "component container"
    if component.kind == "ScrollableContainer":
        classes += " scrollable-container"
    return wrap_block("div", base_attrs(component, ctx, classes, styles), "\n".join(blocks), depth, ctx)
