"""Data model for authored page trees.

Every type is a frozen dataclass built once per export from the editor's
camelCase JSON via ``from_dict``.  Parsing is lenient per value: a
malformed field is replaced by a defined fallback and reported on the
collector, so one bad prop never aborts an export.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from sitexport._errors import TreeError
from sitexport.tree.values import as_str, css_length, normalize

if TYPE_CHECKING:
    from sitexport._types import PropValue, RoutePath, StyleMap
    from sitexport.observability import DiagnosticCollector

CORE_PLUGIN = "core"

type Category = Literal["layout", "ui", "data", "form", "navbar", "general"]
type DataSourceType = Literal["api", "static", "context"]

_CATEGORIES: frozenset[str] = frozenset({"layout", "ui", "data", "form", "navbar", "general"})
_SOURCE_TYPES: frozenset[str] = frozenset({"api", "static", "context"})
_CLICK_EVENTS = frozenset({"onClick", "click"})


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Action:
    """What happens when an event fires (e.g. ``navigate`` with ``{"url": "/contact"}``)."""

    type: str
    config: dict[str, PropValue] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class EventBinding:
    """An event name bound to an action."""

    event_type: str
    action: Action

    @property
    def navigate_url(self) -> str | None:
        """Target route when this is a click that navigates, else None."""
        if self.event_type not in _CLICK_EVENTS or self.action.type != "navigate":
            return None
        return as_str(self.action.config.get("url")) or None


# ---------------------------------------------------------------------------
# Data binding
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DataSource:
    """Where a data component gets its items from.

    Attributes:
        type: ``api`` (fetched by the generated backend), ``static`` (inline
            data), or ``context`` (provided by the page).
        endpoint: API path or URL for ``api`` sources.
        method: HTTP method for ``api`` sources.
        headers: Extra request headers for ``api`` sources.
        static_data: Inline data for ``static`` sources.
        field_mapping: Item field renames applied by the editor preview.
        data_path: Dotted path to the item list inside the response or data.

    """

    type: DataSourceType
    endpoint: str = ""
    method: str = "GET"
    headers: dict[str, PropValue] = field(default_factory=dict)
    static_data: PropValue = None
    field_mapping: dict[str, PropValue] = field(default_factory=dict)
    data_path: str = ""

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, object],
        *,
        collector: DiagnosticCollector | None = None,
        path: str = "",
    ) -> DataSource:
        raw_type = str(data.get("type", "static"))
        if raw_type not in _SOURCE_TYPES:
            if collector is not None:
                collector.record_recovery(path, "dataSource.type", "'static'")
            raw_type = "static"
        static_data, _ = normalize(data.get("staticData"))
        headers, _ = normalize(data.get("headers") or {})
        mapping, _ = normalize(data.get("fieldMapping") or {})
        return cls(
            type=raw_type,  # type: ignore[arg-type]
            endpoint=str(data.get("apiEndpoint") or data.get("endpoint") or ""),
            method=str(data.get("method") or "GET").upper(),
            headers=headers if isinstance(headers, dict) else {},
            static_data=static_data,
            field_mapping=mapping if isinstance(mapping, dict) else {},
            data_path=str(data.get("dataPath") or ""),
        )


@dataclass(frozen=True, slots=True)
class IteratorConfig:
    """How a data component exposes each item to its children."""

    data_path: str = ""
    item_alias: str = "item"
    index_alias: str = "index"


# ---------------------------------------------------------------------------
# Components and pages
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ComponentInstance:
    """One node of an authored component tree.

    ``children`` are owned, ordered and immutable.  ``parent_id`` is kept
    only as a lookup key; the nesting of the document is authoritative.
    """

    instance_id: str
    component_id: str
    plugin_id: str = CORE_PLUGIN
    category: Category = "general"
    props: dict[str, PropValue] = field(default_factory=dict)
    styles: StyleMap = field(default_factory=dict)
    children: tuple[ComponentInstance, ...] = ()
    parent_id: str | None = None
    events: tuple[EventBinding, ...] = ()
    data_source: DataSource | None = None
    template_bindings: dict[str, str] = field(default_factory=dict)
    size: dict[str, str] = field(default_factory=dict)
    position: dict[str, PropValue] = field(default_factory=dict)
    iterator: IteratorConfig | None = None

    @property
    def kind(self) -> str:
        """Component type tag (``Label``, ``Container``, ...)."""
        return self.component_id

    @property
    def is_layout(self) -> bool:
        return self.category == "layout"

    @property
    def navigate_url(self) -> str | None:
        """Route of the first click-navigate event, if any."""
        for binding in self.events:
            url = binding.navigate_url
            if url:
                return url
        return None

    def prop(self, *names: str, default: PropValue = None) -> PropValue:
        """First non-blank prop among *names* (aliases are checked in order)."""
        for name in names:
            value = self.props.get(name)
            if value is not None and value != "":
                return value
        return default

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, object],
        *,
        collector: DiagnosticCollector | None = None,
        parent_id: str | None = None,
        _ancestors: frozenset[int] = frozenset(),
    ) -> ComponentInstance:
        """Build a component (and its subtree) from editor JSON.

        Raises:
            TreeError: If the instance id is missing or the document nests
                a component inside itself.

        """
        if id(data) in _ancestors:
            msg = f"Component {data.get('instanceId')!r} contains itself"
            raise TreeError(msg)
        instance_id = data.get("instanceId")
        if not isinstance(instance_id, str | int) or instance_id == "":
            msg = f"Component of kind {data.get('componentId')!r} has no instanceId"
            raise TreeError(msg)
        instance_id = str(instance_id)
        component_id = str(data.get("componentId") or "Unknown")

        declared_parent = data.get("parentId")
        if declared_parent is not None and str(declared_parent) != (parent_id or ""):
            if collector is not None:
                collector.record_recovery(instance_id, "parentId", "the enclosing component")

        raw_category = str(data.get("componentCategory") or data.get("category") or "general").lower()
        if raw_category not in _CATEGORIES:
            raw_category = "general"

        props = _mapping_field(data, "props", instance_id, collector)
        styles = {
            str(k): as_str(v)
            for k, v in _mapping_field(data, "styles", instance_id, collector).items()
            if as_str(v) != ""
        }

        ancestors = _ancestors | {id(data)}
        raw_children = data.get("children") or []
        if not isinstance(raw_children, list):
            if collector is not None:
                collector.record_recovery(instance_id, "children", "no children")
            raw_children = []
        children = tuple(
            cls.from_dict(child, collector=collector, parent_id=instance_id, _ancestors=ancestors)
            for child in raw_children
            if isinstance(child, Mapping)
        )

        raw_events = data.get("events")
        if raw_events is None:
            raw_events = props.get("events")

        bindings = {
            str(k): str(v)
            for k, v in _mapping_field(data, "templateBindings", instance_id, collector).items()
            if isinstance(v, str)
        }
        size = {
            str(k): css_length(v)  # type: ignore[arg-type]
            for k, v in _mapping_field(data, "size", instance_id, collector).items()
            if css_length(v) not in ("", "0px")  # type: ignore[arg-type]
        }

        return cls(
            instance_id=instance_id,
            component_id=component_id,
            plugin_id=str(data.get("pluginId") or CORE_PLUGIN),
            category=raw_category,  # type: ignore[arg-type]
            props=props,
            styles=styles,
            children=children,
            parent_id=parent_id,
            events=_parse_events(raw_events, instance_id, collector),
            data_source=_parse_data_source(data.get("dataSource"), instance_id, collector),
            template_bindings=bindings,
            size=size,
            position=_mapping_field(data, "position", instance_id, collector),
            iterator=_parse_iterator(data.get("iteratorConfig")),
        )


@dataclass(frozen=True, slots=True)
class GlobalStyles:
    """Page-wide CSS (custom stylesheet text and ``:root`` variables)."""

    custom_css: str = ""
    css_variables: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class PageDefinition:
    """An authored page: ordered root components plus page-scoped data."""

    page_name: str
    components: tuple[ComponentInstance, ...] = ()
    global_styles: GlobalStyles = field(default_factory=GlobalStyles)
    data_context: dict[str, DataSource] = field(default_factory=dict)

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, object],
        *,
        collector: DiagnosticCollector | None = None,
    ) -> PageDefinition:
        page_name = str(data.get("pageName") or "Untitled")
        raw_components = data.get("components") or []
        if not isinstance(raw_components, list):
            if collector is not None:
                collector.record_recovery(page_name, "components", "no components")
            raw_components = []
        components = tuple(
            ComponentInstance.from_dict(c, collector=collector)
            for c in raw_components
            if isinstance(c, Mapping)
        )

        raw_styles = data.get("globalStyles")
        global_styles = GlobalStyles()
        if isinstance(raw_styles, Mapping):
            variables = raw_styles.get("cssVariables")
            global_styles = GlobalStyles(
                custom_css=str(raw_styles.get("customCSS") or ""),
                css_variables=(
                    {str(k): str(v) for k, v in variables.items()}
                    if isinstance(variables, Mapping) else {}
                ),
            )

        return cls(
            page_name=page_name,
            components=components,
            global_styles=global_styles,
            data_context=_parse_data_context(data.get("dataContext"), page_name, collector),
        )


@dataclass(frozen=True, slots=True)
class SitePage:
    """A page definition together with its place in the site."""

    definition: PageDefinition
    route_path: RoutePath = "/"
    slug: str = ""

    def __post_init__(self) -> None:
        if not self.slug:
            object.__setattr__(self, "slug", slugify(self.definition.page_name))

    @property
    def page_name(self) -> str:
        return self.definition.page_name

    @property
    def is_home(self) -> bool:
        route = self.route_path.strip()
        return route in ("", "/", "/home", "home")

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, object],
        *,
        collector: DiagnosticCollector | None = None,
    ) -> SitePage:
        """Accept ``{"page": meta, "definition": def}`` or a flat definition.

        Flat definitions may carry ``routePath`` and ``pageSlug`` beside the
        usual definition keys.
        """
        definition_data = data.get("definition")
        meta = data.get("page")
        if isinstance(definition_data, Mapping):
            meta = meta if isinstance(meta, Mapping) else {}
        else:
            definition_data, meta = data, data
        definition = PageDefinition.from_dict(definition_data, collector=collector)
        if isinstance(meta.get("pageName"), str) and meta is not definition_data:
            definition = PageDefinition(
                page_name=str(meta["pageName"]),
                components=definition.components,
                global_styles=definition.global_styles,
                data_context=definition.data_context,
            )
        return cls(
            definition=definition,
            route_path=str(meta.get("routePath") or meta.get("path") or "/"),
            slug=str(meta.get("pageSlug") or meta.get("slug") or ""),
        )


def slugify(name: str) -> str:
    """``"About Us!"`` -> ``"about-us"``."""
    slug = re.sub(r"\s+", "-", name.strip().lower())
    slug = re.sub(r"[^a-z0-9-]", "", slug)
    return slug.strip("-") or "page"


# ---------------------------------------------------------------------------
# Field parsers
# ---------------------------------------------------------------------------


def _mapping_field(
    data: Mapping[str, object],
    key: str,
    path: str,
    collector: DiagnosticCollector | None,
) -> dict[str, PropValue]:
    raw = data.get(key)
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        if collector is not None:
            collector.record_recovery(path, key, "an empty mapping")
        return {}
    value, coerced = normalize(raw)
    if coerced and collector is not None:
        collector.record_recovery(path, key, "string forms of non-JSON values")
    return value  # type: ignore[return-value]


def _parse_events(
    raw: object,
    path: str,
    collector: DiagnosticCollector | None,
) -> tuple[EventBinding, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        if collector is not None:
            collector.record_recovery(path, "events", "no events")
        return ()
    bindings: list[EventBinding] = []
    for entry in raw:
        action = entry.get("action") if isinstance(entry, Mapping) else None
        if not isinstance(action, Mapping) or not entry.get("eventType"):
            if collector is not None:
                collector.record_recovery(path, "events", "the entry skipped")
            continue
        config, _ = normalize(action.get("config") or {})
        bindings.append(
            EventBinding(
                event_type=str(entry["eventType"]),
                action=Action(
                    type=str(action.get("type") or ""),
                    config=config if isinstance(config, dict) else {},
                ),
            )
        )
    return tuple(bindings)


def _parse_data_source(
    raw: object,
    path: str,
    collector: DiagnosticCollector | None,
) -> DataSource | None:
    if raw is None:
        return None
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            raw = None
    if not isinstance(raw, Mapping):
        if collector is not None:
            collector.record_recovery(path, "dataSource", "no data source")
        return None
    return DataSource.from_dict(raw, collector=collector, path=path)


def _parse_iterator(raw: object) -> IteratorConfig | None:
    if not isinstance(raw, Mapping):
        return None
    return IteratorConfig(
        data_path=str(raw.get("dataPath") or ""),
        item_alias=str(raw.get("itemAlias") or "item"),
        index_alias=str(raw.get("indexAlias") or "index"),
    )


def _parse_data_context(
    raw: object,
    path: str,
    collector: DiagnosticCollector | None,
) -> dict[str, DataSource]:
    """Page-scoped sources; a bare value is treated as static data."""
    if not isinstance(raw, Mapping):
        return {}
    sources = raw.get("dataSources", raw)
    if not isinstance(sources, Mapping):
        return {}
    context: dict[str, DataSource] = {}
    for name, value in sources.items():
        if isinstance(value, Mapping) and value.get("type") in _SOURCE_TYPES:
            context[str(name)] = DataSource.from_dict(value, collector=collector, path=path)
        else:
            data, _ = normalize(value)
            context[str(name)] = DataSource(type="static", static_data=data)
    return context
