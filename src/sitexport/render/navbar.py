"""Navbar emitter (every navbar variant shares one structure)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sitexport.render.emitters import base_attrs
from sitexport.render.markup import escape, style_attr
from sitexport.render.styles import resolve_navbar_styles
from sitexport.tree.values import as_bool, as_list, as_str

if TYPE_CHECKING:
    from sitexport.render.context import RenderContext
    from sitexport.tree.nodes import ComponentInstance

NAVBAR_KINDS = (
    "Navbar",
    "NavbarDefault",
    "NavbarCentered",
    "NavbarMinimal",
    "NavbarDark",
    "NavbarGlass",
    "NavbarSticky",
)


def emit_navbar(component: ComponentInstance, depth: int, ctx: RenderContext) -> str:
    """Render brand, nav list and the mobile toggle.

    ``navItems`` may be a list or a JSON-encoded list; anything else is
    reported and treated as empty.
    """
    styles = resolve_navbar_styles(component)
    dialect = ctx.dialect
    i0, i1, i2 = (dialect.indent(depth + n) for n in range(3))

    brand_text = as_str(component.prop("brandText", "brandName", "brand"), "Brand")
    brand_link = as_str(component.props.get("brandLink"), "/")
    brand_image = as_str(component.props.get("brandImageUrl"))
    items = as_list(
        component.prop("navItems", "items"),
        collector=ctx.collector,
        path=ctx.diagnostic_path(component.instance_id),
        field="navItems",
    )

    brand_html = ""
    if brand_image:
        src = dialect.image_src(brand_image, component, ctx)
        brand_html += f'<img {src} alt="{escape(brand_text)}"{style_attr(styles.brand_image)} />'
    brand_html += f"<span>{escape(brand_text)}</span>"

    lines = [
        f"{i0}<nav{base_attrs(component, ctx, 'component navbar', styles.container)}>",
        f'{i1}<a{dialect.href(brand_link)} class="navbar-brand"{style_attr(styles.brand)}>{brand_html}</a>',
    ]
    if styles.layout == "split":
        lines.append(f'{i1}<div style="flex: 1"></div>')
    lines.append(f'{i1}<ul class="navbar-nav"{style_attr(styles.list)}>')
    for item in items:
        if not isinstance(item, dict):
            ctx.collector.record_recovery(
                ctx.diagnostic_path(component.instance_id), "navItems", "the item skipped",
            )
            continue
        label = as_str(item.get("label")) or as_str(item.get("text"))
        href = as_str(item.get("href"), "#")
        link_style = styles.active_link if as_bool(item.get("active")) else styles.link
        lines.append(
            f"{i2}<li{style_attr(styles.item)}>"
            f"<a{dialect.href(href)}{style_attr(link_style)}>{escape(label)}</a></li>"
        )
    lines.append(f"{i1}</ul>")
    lines.append(
        f'{i1}<button class="navbar-toggle"{style_attr(styles.toggle)} '
        f'aria-label="Toggle navigation menu">'
    )
    lines.extend(f"{i2}<span{style_attr(styles.toggle_bar)}></span>" for _ in range(3))
    lines.append(f"{i1}</button>")
    lines.append(f"{i0}</nav>")
    return "\n".join(lines)
