"""Repeater / DataList emitter and the static data helpers it shares
with the exporters."""

from __future__ import annotations

import json
from dataclasses import replace
from typing import TYPE_CHECKING

from sitexport.render.emitters import base_attrs, render_children, wrap_block
from sitexport.render.expressions import quote_literal
from sitexport.render.markup import escape, escape_expression
from sitexport.render.styles import resolve_container_styles
from sitexport.tree.nodes import IteratorConfig
from sitexport.tree.values import as_str, lookup_path, normalize

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sitexport._types import PropValue
    from sitexport.render.context import RenderContext
    from sitexport.tree.nodes import ComponentInstance, DataSource

DEFAULT_EMPTY_MESSAGE = "No items to display"
DEFAULT_GAP = "16px"


def repeater_key(component: ComponentInstance) -> str:
    """Name under which the page data carries this repeater's items."""
    return f"repeater_{component.instance_id}"


def iterator_settings(component: ComponentInstance) -> IteratorConfig:
    """Iterator config with ``itemAlias``/``indexAlias``/``dataPath`` props applied."""
    base = component.iterator or IteratorConfig()
    source_path = component.data_source.data_path if component.data_source else ""
    return IteratorConfig(
        data_path=as_str(component.props.get("dataPath")) or base.data_path or source_path,
        item_alias=as_str(component.props.get("itemAlias")) or base.item_alias,
        index_alias=as_str(component.props.get("indexAlias")) or base.index_alias,
    )


def apply_field_mapping(item: PropValue, mapping: Mapping[str, PropValue]) -> PropValue:
    """Expose mapped fields (``{target: sourcePath}``) alongside the originals."""
    if not mapping or not isinstance(item, dict):
        return item
    mapped = dict(item)
    for target, source in mapping.items():
        value, found = lookup_path(item, as_str(source))
        if found:
            mapped[target] = value
    return mapped


def static_value(source: DataSource) -> PropValue:
    """Inline data of a static source, after its own ``dataPath``.

    JSON-encoded strings are decoded; a path that does not resolve gives
    ``None``.
    """
    data = source.static_data
    if isinstance(data, str):
        try:
            data = normalize(json.loads(data))[0]
        except json.JSONDecodeError:
            return data
    if source.data_path:
        data, found = lookup_path(data, source.data_path)
        if not found:
            return None
    return data


def static_items(
    source: DataSource | None,
    data_path: str,
    scope: Mapping[str, object],
) -> list[PropValue] | None:
    """Items a data component iterates over, when known at generation time.

    Returns ``None`` for sources only the running backend can evaluate
    (``api`` sources, or ``context`` paths with nothing in *scope*).
    """
    if source is not None and source.type == "api":
        return None

    if source is not None and source.type == "static":
        data = static_value(source)
        if data_path and data_path != source.data_path and not isinstance(data, list):
            data, found = lookup_path(data, data_path)
            if not found:
                return []
    else:
        if not data_path:
            return [] if source is None else None
        root, _, rest = data_path.partition(".")
        if root not in scope:
            return None
        data, _ = normalize(scope[root])
        if rest:
            data, found = lookup_path(data, rest)
            if not found:
                return None

    items = data if isinstance(data, list) else []
    mapping = source.field_mapping if source is not None else {}
    return [apply_field_mapping(item, mapping) for item in items]


def emit_repeater(component: ComponentInstance, depth: int, ctx: RenderContext) -> str:
    """Render a data component.

    The static target expands the items now; the server target emits a
    ``th:each`` loop over ``dataSources['repeater_<id>']``.
    """
    settings = iterator_settings(component)
    styles = resolve_container_styles(component, ctx.tree.depth(component.instance_id))
    styles.setdefault("gap", DEFAULT_GAP)
    empty_message = as_str(component.props.get("emptyMessage"), DEFAULT_EMPTY_MESSAGE)
    attrs = base_attrs(component, ctx, f"component {component.kind.lower()}", styles)

    if ctx.dialect.target == "server":
        inner = _server_items(component, depth, ctx, settings, empty_message)
    else:
        inner = _static_items(component, depth, ctx, settings, empty_message)
    return wrap_block("div", attrs, inner, depth, ctx)


def _static_items(
    component: ComponentInstance,
    depth: int,
    ctx: RenderContext,
    settings: IteratorConfig,
    empty_message: str,
) -> str:
    indent = ctx.dialect.indent(depth + 1)
    items = static_items(component.data_source, settings.data_path, ctx.scope)
    if items is None:
        ctx.collector.record_warning(
            "dynamic-data-source",
            "data is only available from a running backend; rendering the empty state",
            path=ctx.diagnostic_path(component.instance_id),
        )
        items = []
    if not items:
        return f'{indent}<div class="repeater-empty">{escape(empty_message)}</div>'

    blocks = []
    for index, item in enumerate(items):
        item_ctx = replace(
            ctx.with_scope(**{settings.item_alias: item, settings.index_alias: index}),
            id_suffix=f"{ctx.id_suffix}-{index}",
        )
        children = render_children(component.children, depth + 2, item_ctx)
        blocks.append(wrap_block("div", ' class="repeater-item"', children, depth + 1, ctx))
    return "\n".join(blocks)


def _server_items(
    component: ComponentInstance,
    depth: int,
    ctx: RenderContext,
    settings: IteratorConfig,
    empty_message: str,
) -> str:
    source = f"dataSources[{quote_literal(repeater_key(component))}]"
    alias = settings.item_alias
    loop = escape_expression(f"{alias}, {alias}Stat : ${{{source}}}")
    index = escape_expression(f"{settings.index_alias}=${{{alias}Stat.index}}")
    empty = escape_expression(f"${{#lists.isEmpty({source})}}")

    item = wrap_block(
        "div",
        f' class="repeater-item" th:each="{loop}" th:with="{index}"',
        render_children(component.children, depth + 2, ctx),
        depth + 1,
        ctx,
    )
    indent = ctx.dialect.indent(depth + 1)
    return f'{item}\n{indent}<div class="repeater-empty" th:if="{empty}">{escape(empty_message)}</div>'
