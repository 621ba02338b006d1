"""Target dialects.

Both exporters share one emitter core.  Everything that differs between
the static site and the Thymeleaf project (indentation, link rewriting,
navigation, text binding, image sources) lives in a ``Dialect`` value,
selected once per export.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sitexport.render.expressions import (
    has_placeholders,
    resolve_static,
    server_binding,
    to_server_expression,
)
from sitexport.render.links import (
    is_external,
    route_to_file_link,
    route_to_server_path,
    server_href,
    static_href,
)
from sitexport.render.markup import escape, escape_expression

if TYPE_CHECKING:
    from sitexport._types import Target
    from sitexport.render.context import RenderContext
    from sitexport.tree.nodes import ComponentInstance

# Shown when an image has no usable source
PLACEHOLDER_IMAGE = (
    "data:image/svg+xml,<svg xmlns=%22http://www.w3.org/2000/svg%22 width=%22200%22 "
    "height=%22150%22><rect fill=%22%23ddd%22 width=%22200%22 height=%22150%22/>"
    "<text fill=%22%23999%22 x=%2250%25%22 y=%2250%25%22 text-anchor=%22middle%22 "
    "dy=%22.3em%22>Image not found</text></svg>"
)

# (visible content, extra attributes)
type Binding = tuple[str, str]


@dataclass(frozen=True, slots=True)
class Dialect:
    """How one export target spells the constructs emitters produce.

    Attributes:
        target: ``"static"`` or ``"server"``.
        indent_unit: One indentation level.
        href: Route -> link attribute (with leading space).
        navigate: Route -> (tag, attribute) for a navigating button.
        bind_text: Text binding for element content (escaped).
        bind_html: Text binding for rich-text content (not escaped).
        bind_attr: ``(name, text)`` binding for a plain attribute.
        image_src: Source attribute of an image.

    """

    target: Target
    indent_unit: str
    href: Callable[[str], str]
    navigate: Callable[[str], tuple[str, str]]
    bind_text: Callable[[str, ComponentInstance, RenderContext, str], Binding]
    bind_html: Callable[[str, ComponentInstance, RenderContext, str], Binding]
    bind_attr: Callable[[str, str, ComponentInstance, RenderContext], str]
    image_src: Callable[[str, ComponentInstance, RenderContext], str]

    def indent(self, depth: int) -> str:
        return self.indent_unit * depth


# ---------------------------------------------------------------------------
# Static site
# ---------------------------------------------------------------------------


def _static_navigate(route: str) -> tuple[str, str]:
    target = route_to_file_link(route).replace("'", "\\'")
    return "button", f" onclick=\"window.location.href='{escape(target)}'\""


def _static_resolve(text: str, component: ComponentInstance, ctx: RenderContext) -> str:
    ctx.warn_malformed(component.instance_id, text)
    result = resolve_static(text, ctx.scope)
    ctx.warn_unresolved(component.instance_id, result.unresolved)
    return result.text


def _static_text(text: str, component: ComponentInstance, ctx: RenderContext, binding: str) -> Binding:
    source = binding or text
    return escape(_static_resolve(source, component, ctx)), ""


def _static_html(text: str, component: ComponentInstance, ctx: RenderContext, binding: str) -> Binding:
    return _static_resolve(binding or text, component, ctx), ""


def _static_attr(name: str, text: str, component: ComponentInstance, ctx: RenderContext) -> str:
    return f' {name}="{escape(_static_resolve(text, component, ctx))}"'


def _static_image_src(source: str, component: ComponentInstance, ctx: RenderContext) -> str:
    ctx.warn_malformed(component.instance_id, source)
    if has_placeholders(source):
        result = resolve_static(source, ctx.scope)
        if result.unresolved or not result.text:
            ctx.collector.record_warning(
                "dynamic-image",
                f"image source {source!r} is only known at runtime; using a placeholder",
                path=ctx.diagnostic_path(component.instance_id),
            )
            return f'src="{PLACEHOLDER_IMAGE}"'
        source = result.text
    if not source:
        return f'src="{PLACEHOLDER_IMAGE}"'
    return f'src="{escape(source)}"'


STATIC = Dialect(
    target="static",
    indent_unit="  ",
    href=static_href,
    navigate=_static_navigate,
    bind_text=_static_text,
    bind_html=_static_html,
    bind_attr=_static_attr,
    image_src=_static_image_src,
)


# ---------------------------------------------------------------------------
# Spring Boot / Thymeleaf
# ---------------------------------------------------------------------------


def _server_navigate(route: str) -> tuple[str, str]:
    return "a", server_href(route)


def _server_text(text: str, component: ComponentInstance, ctx: RenderContext, binding: str) -> Binding:
    source = binding or text
    ctx.warn_malformed(component.instance_id, source)
    if has_placeholders(source):
        return escape(text), f' th:text="{escape_expression(server_binding(source))}"'
    return escape(text), ""


def _server_html(text: str, component: ComponentInstance, ctx: RenderContext, binding: str) -> Binding:
    source = binding or text
    ctx.warn_malformed(component.instance_id, source)
    if has_placeholders(source):
        return text, f' th:utext="{escape_expression(server_binding(source))}"'
    return text, ""


def _server_attr(name: str, text: str, component: ComponentInstance, ctx: RenderContext) -> str:
    ctx.warn_malformed(component.instance_id, text)
    if has_placeholders(text):
        return f' th:{name}="{escape_expression(server_binding(text))}"'
    return f' {name}="{escape(text)}"'


def _server_image_src(source: str, component: ComponentInstance, ctx: RenderContext) -> str:
    ctx.warn_malformed(component.instance_id, source)
    if has_placeholders(source):
        expr = to_server_expression(source)
        return f'th:src="{escape_expression("${@imageUrlResolver.resolve(" + expr + ")}")}"'
    if not source:
        return 'th:src="@{/images/placeholder.svg}"'
    if is_external(source):
        return f'src="{escape(source)}"'
    if source.startswith("/"):
        return f'th:src="@{{{escape(route_to_server_path(source))}}}"'
    return f'src="{escape(source)}"'


SERVER = Dialect(
    target="server",
    indent_unit="    ",
    href=server_href,
    navigate=_server_navigate,
    bind_text=_server_text,
    bind_html=_server_html,
    bind_attr=_server_attr,
    image_src=_server_image_src,
)

DIALECTS: dict[str, Dialect] = {"static": STATIC, "server": SERVER}
