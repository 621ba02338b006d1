"""Image emitter."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sitexport.render.dialect import PLACEHOLDER_IMAGE
from sitexport.render.emitters import base_attrs
from sitexport.render.markup import style_attr
from sitexport.render.styles import resolve_image_styles
from sitexport.tree.values import as_str

if TYPE_CHECKING:
    from sitexport.render.context import RenderContext
    from sitexport.tree.nodes import ComponentInstance

_ONERROR = f"this.onerror=null; this.src='{PLACEHOLDER_IMAGE}';"


def emit_image(component: ComponentInstance, depth: int, ctx: RenderContext) -> str:
    """Render an image as container > wrapper > img, like the editor preview."""
    styles = resolve_image_styles(component, has_parent=ctx.tree.has_parent(component.instance_id))
    source = component.template_bindings.get("src") or as_str(component.prop("src", "url"))
    src_attr = ctx.dialect.image_src(source, component, ctx)
    alt_attr = ctx.dialect.bind_attr("alt", as_str(component.props.get("alt")), component, ctx)

    dialect = ctx.dialect
    outer, mid, inner = dialect.indent(depth), dialect.indent(depth + 1), dialect.indent(depth + 2)
    attrs = base_attrs(component, ctx, "component image image-container", styles.container)
    return (
        f"{outer}<div{attrs}>\n"
        f'{mid}<div class="image-wrapper"{style_attr(styles.wrapper)}>\n'
        f'{inner}<img {src_attr}{alt_attr}{style_attr(styles.img)} loading="lazy" onerror="{_ONERROR}" />\n'
        f"{mid}</div>\n"
        f"{outer}</div>"
    )
