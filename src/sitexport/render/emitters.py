"""Component emitters — the shared core of both export targets.

``render_component`` walks a component subtree depth-first, pre-order,
and returns indented markup.  Plugin emitters are consulted first; the
built-in emitters below cover the core kinds; anything else goes through
the generic emitter.  An emitter that raises is reported and replaced by
an HTML comment so the rest of the page still renders.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from functools import cache
from typing import TYPE_CHECKING

from sitexport.observability import DiagnosticCollector
from sitexport.render.markup import escape, style_attr
from sitexport.render.styles import button_size, button_variant, resolve_button_styles
from sitexport.tree.values import as_bool, as_str

if TYPE_CHECKING:
    from sitexport._types import StyleMap
    from sitexport.render.context import RenderContext
    from sitexport.tree.nodes import ComponentInstance

type Emitter = Callable[[ComponentInstance, int, RenderContext], str]

LABEL_TAGS: dict[str, str] = {
    "h1": "h1", "h2": "h2", "h3": "h3", "h4": "h4", "h5": "h5", "h6": "h6",
    "paragraph": "p", "span": "span", "label": "label",
}


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


def render_component(component: ComponentInstance, depth: int, ctx: RenderContext) -> str:
    """Render *component* and its subtree at indentation *depth*."""
    if ctx.registry is not None and ctx.registry.has(component.kind, component.plugin_id):
        markup = _render_plugin(component, depth, ctx)
        if markup is not None:
            return markup

    emitter = builtin_emitters().get(component.kind, emit_generic)
    try:
        return emitter(component, depth, ctx)
    except Exception as exc:
        ctx.collector.record_component_failure(
            ctx.diagnostic_path(component.instance_id), component.kind, exc,
        )
        indent = ctx.dialect.indent(depth)
        return f"{indent}<!-- {escape(component.kind)} {escape(component.instance_id)} could not be rendered -->"


def render_children(
    children: tuple[ComponentInstance, ...],
    depth: int,
    ctx: RenderContext,
) -> str:
    """Render sibling components, one per line block."""
    return "\n".join(render_component(child, depth, ctx) for child in children)


def _render_plugin(component: ComponentInstance, depth: int, ctx: RenderContext) -> str | None:
    # Child diagnostics are kept only when the plugin's markup is used;
    # on fallback the built-in emitter renders (and reports) the children.
    scratch = DiagnosticCollector()
    children = render_children(component.children, depth + 1, replace(ctx, collector=scratch))
    try:
        markup = ctx.registry.render(component, children, ctx.dialect.target)  # type: ignore[union-attr]
    except Exception as exc:
        ctx.collector.record_component_failure(
            ctx.diagnostic_path(component.instance_id), component.kind, exc, source="plugin",
        )
        return None
    if markup is None:
        return None
    ctx.collector.log.extend(scratch.log.all())
    indent = ctx.dialect.indent(depth)
    return (
        f'{indent}<div id="{escape(ctx.element_id(component.instance_id))}" '
        f'class="component {escape(component.kind.lower())}">{markup}</div>'
    )


def wrap_block(
    tag: str,
    opening_attrs: str,
    inner: str,
    depth: int,
    ctx: RenderContext,
) -> str:
    """``<tag attrs>`` + inner lines + ``</tag>`` (collapsed when empty)."""
    indent = ctx.dialect.indent(depth)
    if not inner:
        return f"{indent}<{tag}{opening_attrs}></{tag}>"
    return f"{indent}<{tag}{opening_attrs}>\n{inner}\n{indent}</{tag}>"


def base_attrs(
    component: ComponentInstance,
    ctx: RenderContext,
    classes: str,
    styles: StyleMap,
) -> str:
    """`` id="component-<id>" class="..." style="..."`` for an element."""
    return f' id="{escape(ctx.element_id(component.instance_id))}" class="{escape(classes)}"{style_attr(styles)}'


# ---------------------------------------------------------------------------
# Built-in emitters
# ---------------------------------------------------------------------------


def emit_label(component: ComponentInstance, depth: int, ctx: RenderContext) -> str:
    tag = LABEL_TAGS.get(as_str(component.props.get("variant"), "span"), "span")
    text = as_str(component.props.get("text"))
    content, binding = ctx.dialect.bind_text(
        text, component, ctx, component.template_bindings.get("text", ""),
    )
    attrs = base_attrs(component, ctx, "component label", component.styles)
    return f"{ctx.dialect.indent(depth)}<{tag}{attrs}{binding}>{content}</{tag}>"


def emit_button(component: ComponentInstance, depth: int, ctx: RenderContext) -> str:
    """A button; a click-navigate event turns it into a link in the dialect's form."""
    variant = button_variant(component)
    size = button_size(component)
    text = as_str(component.props.get("text"), "Click Me")
    content, binding = ctx.dialect.bind_text(
        text, component, ctx, component.template_bindings.get("text", ""),
    )

    route = component.navigate_url
    tag, navigation = ctx.dialect.navigate(route) if route else ("button", "")
    disabled = " disabled" if tag == "button" and as_bool(component.props.get("disabled")) else ""

    attrs = base_attrs(
        component, ctx,
        f"component button btn-{variant} btn-{size}",
        resolve_button_styles(component),
    )
    return f"{ctx.dialect.indent(depth)}<{tag}{attrs}{disabled}{navigation}{binding}>{content}</{tag}>"


def emit_textbox(component: ComponentInstance, depth: int, ctx: RenderContext) -> str:
    # Rich text: authored HTML passes through unescaped
    html = as_str(component.prop("content", "text"))
    content, binding = ctx.dialect.bind_html(
        html, component, ctx, component.template_bindings.get("content", ""),
    )
    attrs = base_attrs(component, ctx, "component textbox", component.styles)
    return f"{ctx.dialect.indent(depth)}<div{attrs}{binding}>{content}</div>"


def emit_generic(component: ComponentInstance, depth: int, ctx: RenderContext) -> str:
    """Unknown kinds: wrap the children, or echo ``text``/``content``."""
    attrs = base_attrs(
        component, ctx, f"component {component.kind.lower()}", component.styles,
    )
    if component.children:
        return wrap_block("div", attrs, render_children(component.children, depth + 1, ctx), depth, ctx)
    text = as_str(component.prop("text", "content"))
    content, binding = ctx.dialect.bind_text(
        text, component, ctx, component.template_bindings.get("text", ""),
    )
    return f"{ctx.dialect.indent(depth)}<div{attrs}{binding}>{content}</div>"


@cache
def builtin_emitters() -> dict[str, Emitter]:
    """Kind -> built-in emitter (resolved on first use)."""
    from sitexport.render.containers import emit_container
    from sitexport.render.data import emit_repeater
    from sitexport.render.media import emit_image
    from sitexport.render.navbar import NAVBAR_KINDS, emit_navbar

    emitters: dict[str, Emitter] = {
        "Label": emit_label,
        "Button": emit_button,
        "Textbox": emit_textbox,
        "Image": emit_image,
        "Container": emit_container,
        "ScrollableContainer": emit_container,
        "Repeater": emit_repeater,
        "DataList": emit_repeater,
    }
    emitters.update(dict.fromkeys(NAVBAR_KINDS, emit_navbar))
    return emitters

