"""Backend scaffold synthesis for the server-project target.

Derives, from the authored pages, the runtime routes the generated Spring
Boot project needs: one page handler per page, and one data handler per
distinct api data source.  All names are pure functions of their inputs;
collisions are resolved by numeric suffixes in input order and reported.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from sitexport.render.links import route_to_server_path
from sitexport.tree.arena import ComponentTree

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from sitexport._types import PropValue
    from sitexport.observability import DiagnosticCollector
    from sitexport.tree.nodes import DataSource, SitePage

DEFAULT_DATA_PATH = "items"

_WORD_SPLIT_RE = re.compile(r"[-_\s]+")
_NON_ALNUM_RE = re.compile(r"[^A-Za-z0-9]")
_NON_LOWER_ALNUM_RE = re.compile(r"[^a-z0-9]")

# Keywords and literals javac rejects as method names
JAVA_RESERVED = frozenset({
    "abstract", "assert", "boolean", "break", "byte", "case", "catch", "char",
    "class", "const", "continue", "default", "do", "double", "else", "enum",
    "extends", "false", "final", "finally", "float", "for", "goto", "if",
    "implements", "import", "instanceof", "int", "interface", "long", "native",
    "new", "null", "package", "private", "protected", "public", "return",
    "short", "static", "strictfp", "super", "switch", "synchronized", "this",
    "throw", "throws", "transient", "true", "try", "void", "volatile", "while",
})


def pascal_case(text: str) -> str:
    """``team-members`` -> ``TeamMembers`` (non-alphanumerics dropped)."""
    parts = (_NON_ALNUM_RE.sub("", part) for part in _WORD_SPLIT_RE.split(text))
    return "".join(part[:1].upper() + part[1:].lower() for part in parts if part)


# ---------------------------------------------------------------------------
# Data endpoints
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ApiEndpointConfig:
    """One generated data route.

    Attributes:
        endpoint: The endpoint as authored.
        data_path: Key the response wraps the item list under.
        controller_name: Controller class derived from the path.
        method_name: Handler method name.
        route_path: Request mapping path (scheme, host and query removed).

    """

    endpoint: str
    data_path: str
    controller_name: str
    method_name: str
    route_path: str


def parse_endpoint(endpoint: str, data_path: str = "") -> ApiEndpointConfig:
    """Derive controller, handler and route names from an endpoint.

    ``/api/team/members`` gives ``TeamController.getMembers``; endpoints
    with fewer than two path segments use ``DataController.getData``.
    """
    try:
        path = urlsplit(endpoint).path
    except ValueError:
        path = endpoint.split("?", 1)[0]
    segments = [s for s in path.strip("/").split("/") if s]
    route_path = "/" + "/".join(segments)

    controller_name, method_name = "DataController", "getData"
    if len(segments) >= 2:
        controller_name = (pascal_case(segments[1]) or "Data") + "Controller"
        method_name = "get" + (pascal_case(segments[-1]) or "Data")
    return ApiEndpointConfig(
        endpoint=endpoint,
        data_path=data_path or DEFAULT_DATA_PATH,
        controller_name=controller_name,
        method_name=method_name,
        route_path=route_path,
    )


def collect_api_endpoints(
    pages: Iterable[SitePage],
    *,
    collector: DiagnosticCollector | None = None,
) -> tuple[ApiEndpointConfig, ...]:
    """Every distinct api endpoint across *pages*, first seen wins.

    A later endpoint whose handler name is taken gets a numeric suffix;
    one whose route path is taken is served by the existing handler.
    Both cases are reported as warnings.
    """
    by_endpoint: dict[str, ApiEndpointConfig] = {}
    methods: set[str] = set()
    routes: set[str] = set()
    for page in pages:
        for source, data_path in _api_sources(page):
            if source.endpoint in by_endpoint:
                continue
            config = parse_endpoint(source.endpoint, data_path)

            if config.route_path in routes:
                _warn(
                    collector, "duplicate-route",
                    f"{source.endpoint!r} maps to {config.route_path}, which is already served",
                    page.page_name,
                )
                by_endpoint[source.endpoint] = next(
                    c for c in by_endpoint.values() if c.route_path == config.route_path
                )
                continue

            method = config.method_name
            if method in methods:
                n = 2
                while f"{method}{n}" in methods:
                    n += 1
                _warn(
                    collector, "duplicate-handler",
                    f"handler {method} already exists; {source.endpoint!r} uses {method}{n}",
                    page.page_name,
                )
                method = f"{method}{n}"
                config = ApiEndpointConfig(
                    endpoint=config.endpoint,
                    data_path=config.data_path,
                    controller_name=config.controller_name,
                    method_name=method,
                    route_path=config.route_path,
                )
            methods.add(method)
            routes.add(config.route_path)
            by_endpoint[source.endpoint] = config

    unique: dict[str, ApiEndpointConfig] = {}
    for config in by_endpoint.values():
        unique.setdefault(config.method_name, config)
    return tuple(unique.values())


def _api_sources(page: SitePage) -> Iterator[tuple[DataSource, str]]:
    """``(source, data path)`` of every api source on *page*: page-level first, then components."""
    for source in page.definition.data_context.values():
        if source.type == "api" and source.endpoint:
            yield source, source.data_path
    for component in ComponentTree.from_page(page.definition):
        source = component.data_source
        if source is None or source.type != "api" or not source.endpoint:
            continue
        yield source, source.data_path or (component.iterator.data_path if component.iterator else "")


# ---------------------------------------------------------------------------
# Stub payloads
# ---------------------------------------------------------------------------

_PLACEHOLDER_300 = "https://via.placeholder.com/300x200"
_PLACEHOLDER_100 = "https://via.placeholder.com/100x100"

SAMPLE_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("product", ("product",)),
    ("team", ("team", "member", "staff")),
    ("post", ("post", "blog", "article", "news")),
    ("testimonial", ("testimonial", "review")),
    ("service", ("service",)),
)

_SAMPLES: dict[str, list[dict[str, PropValue]]] = {
    "product": [
        {"id": 1, "name": "Sample Product 1", "description": "Description for product 1",
         "price": 29.99, "image": _PLACEHOLDER_300},
        {"id": 2, "name": "Sample Product 2", "description": "Description for product 2",
         "price": 49.99, "image": _PLACEHOLDER_300},
        {"id": 3, "name": "Sample Product 3", "description": "Description for product 3",
         "price": 79.99, "image": _PLACEHOLDER_300},
    ],
    "team": [
        {"id": 1, "name": "John Doe", "role": "CEO", "avatar": _PLACEHOLDER_100,
         "email": "john@example.com"},
        {"id": 2, "name": "Jane Smith", "role": "CTO", "avatar": _PLACEHOLDER_100,
         "email": "jane@example.com"},
    ],
    "post": [
        {"id": 1, "title": "Sample Blog Post", "excerpt": "This is a sample blog post excerpt",
         "category": "Technology", "date": "2024-01-15"},
        {"id": 2, "title": "Another Post", "excerpt": "Another sample post excerpt",
         "category": "Design", "date": "2024-01-10"},
    ],
    "testimonial": [
        {"id": 1, "quote": "Great product!", "name": "John Smith", "title": "CEO, TechCorp", "rating": 5},
        {"id": 2, "quote": "Highly recommended!", "name": "Jane Doe", "title": "Designer", "rating": 5},
    ],
    "service": [
        {"id": 1, "name": "Web Development", "description": "Custom web applications", "icon": ""},
        {"id": 2, "name": "Mobile Apps", "description": "iOS and Android development", "icon": ""},
    ],
    "generic": [
        {"id": 1, "name": "Sample Item 1", "description": "Sample description", "price": 0.0, "image": ""},
        {"id": 2, "name": "Sample Item 2", "description": "Sample description", "price": 0.0, "image": ""},
    ],
}


def sample_kind(method_name: str) -> str:
    """Stub payload family for a handler, chosen by keyword."""
    lowered = method_name.lower()
    for kind, keywords in SAMPLE_KEYWORDS:
        if any(word in lowered for word in keywords):
            return kind
    return "generic"


def sample_items(method_name: str) -> list[dict[str, PropValue]]:
    """Stub items the generated handler returns until real data is wired in."""
    return [dict(item) for item in _SAMPLES[sample_kind(method_name)]]


def sample_response(config: ApiEndpointConfig) -> dict[str, PropValue]:
    """Response body shape of a generated data handler."""
    items = sample_items(config.method_name)
    return {config.data_path: items, "total": len(items)}  # type: ignore[dict-item]


# ---------------------------------------------------------------------------
# Page routes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PageRoute:
    """One generated page handler.

    Attributes:
        page_name: Authored page name.
        title: Page title shown in ``<title>``.
        template_name: Template (and page data) file stem.
        method_name: Handler method name.
        paths: Request mappings; the home page has ``/`` and ``/home``.

    """

    page_name: str
    title: str
    template_name: str
    method_name: str
    paths: tuple[str, ...]

    @property
    def template_path(self) -> str:
        return f"src/main/resources/templates/{self.template_name}.html"

    @property
    def data_path(self) -> str:
        return f"src/main/resources/pages/{self.template_name}.json"


def template_name_for(page_name: str) -> str:
    """``About Us`` -> ``about-us``."""
    return _NON_LOWER_ALNUM_RE.sub("-", page_name.lower()) or "page"


def method_name_for(page_name: str) -> str:
    """``About Us`` -> ``aboutus``; ``home`` when nothing usable remains.

    Names that start with a digit or are Java keywords get a ``page`` prefix.
    """
    name = _NON_LOWER_ALNUM_RE.sub("", page_name.lower()) or "home"
    return f"page{name}" if name[0].isdigit() or name in JAVA_RESERVED else name


def page_routes(
    pages: Iterable[SitePage],
    *,
    collector: DiagnosticCollector | None = None,
) -> tuple[PageRoute, ...]:
    """One route per page, names and paths deduplicated in page order."""
    routes: list[PageRoute] = []
    templates: set[str] = set()
    methods: set[str] = set()
    paths_taken: set[str] = set()

    for page in pages:
        template = _unique(template_name_for(page.page_name), templates, "-")
        method = _unique(method_name_for(page.page_name), methods, "")
        if template != template_name_for(page.page_name) or method != method_name_for(page.page_name):
            _warn(
                collector, "duplicate-page",
                f"page name {page.page_name!r} is already used; generated as {template}",
                page.page_name,
            )
        templates.add(template)
        methods.add(method)

        wanted = ("/", "/home") if page.is_home else (route_to_server_path(page.route_path),)
        paths = tuple(p for p in wanted if p not in paths_taken)
        if len(paths) != len(wanted):
            if not paths:
                paths = (_unique(f"/{template}", paths_taken, "-"),)
            _warn(
                collector, "duplicate-route",
                f"route {page.route_path!r} is already mapped; page served at {paths[0]}",
                page.page_name,
            )
        paths_taken.update(paths)

        routes.append(
            PageRoute(
                page_name=page.page_name,
                title=page.page_name,
                template_name=template,
                method_name=method,
                paths=paths,
            )
        )
    return tuple(routes)


def _unique(name: str, taken: set[str], sep: str) -> str:
    if name not in taken:
        return name
    n = 2
    while f"{name}{sep}{n}" in taken:
        n += 1
    return f"{name}{sep}{n}"


def _warn(collector: DiagnosticCollector | None, code: str, message: str, path: str) -> None:
    if collector is not None:
        collector.record_warning(code, message, path=path)


# ---------------------------------------------------------------------------
# Scaffold
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class BackendScaffold:
    """Everything the Java sources are generated from."""

    pages: tuple[PageRoute, ...]
    endpoints: tuple[ApiEndpointConfig, ...]

    @property
    def has_api_endpoints(self) -> bool:
        return bool(self.endpoints)

    def endpoint_for(self, endpoint: str) -> ApiEndpointConfig | None:
        """Config of the handler serving *endpoint* as authored."""
        for config in self.endpoints:
            if config.endpoint == endpoint:
                return config
        route = parse_endpoint(endpoint).route_path
        return next((c for c in self.endpoints if c.route_path == route), None)


def synthesize(
    pages: Iterable[SitePage],
    *,
    collector: DiagnosticCollector | None = None,
) -> BackendScaffold:
    """Derive page and data routes for a whole site."""
    pages = tuple(pages)
    return BackendScaffold(
        pages=page_routes(pages, collector=collector),
        endpoints=collect_api_endpoints(pages, collector=collector),
    )
