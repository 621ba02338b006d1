"""Shared test fixtures for sitexport."""

from __future__ import annotations

from typing import Any

import pytest

from sitexport.observability import DiagnosticCollector
from sitexport.render.context import RenderContext
from sitexport.render.dialect import DIALECTS
from sitexport.render.emitters import render_component
from sitexport.tree.arena import ComponentTree
from sitexport.tree.loader import Site, parse_site
from sitexport.tree.nodes import PageDefinition

# 1x1 transparent PNG
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000154a24f5d0000000049454e44ae426082"
)


def component(
    kind: str,
    instance_id: str,
    *,
    props: dict[str, Any] | None = None,
    styles: dict[str, Any] | None = None,
    children: list[dict[str, Any]] | None = None,
    category: str | None = None,
    **extra: Any,
) -> dict[str, Any]:
    """Editor JSON for one component.

    Containers default to the ``layout`` category, everything else to ``ui``.
    Extra keyword arguments are copied verbatim (``events``, ``dataSource``,
    ``templateBindings``, ...).
    """
    if category is None:
        category = "layout" if kind in ("Container", "ScrollableContainer") else "ui"
    data: dict[str, Any] = {
        "instanceId": instance_id,
        "componentId": kind,
        "componentCategory": category,
        "props": props or {},
        "styles": styles or {},
        "children": children or [],
    }
    data.update(extra)
    return data


def navigate(url: str) -> list[dict[str, Any]]:
    """``events`` list with a single click-navigate binding."""
    return [{"eventType": "onClick", "action": {"type": "navigate", "config": {"url": url}}}]


def page(
    name: str,
    *components: dict[str, Any],
    route: str = "/",
    data_context: dict[str, Any] | None = None,
    global_styles: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Flat page document with routing metadata."""
    data: dict[str, Any] = {
        "pageName": name,
        "routePath": route,
        "components": list(components),
    }
    if data_context is not None:
        data["dataContext"] = data_context
    if global_styles is not None:
        data["globalStyles"] = global_styles
    return data


def make_site(*pages: dict[str, Any], name: str | None = None) -> Site:
    """Parse page documents into a Site."""
    if name is None:
        return parse_site(list(pages))
    return parse_site({"siteName": name, "pages": list(pages)})


def render(
    *components: dict[str, Any],
    target: str = "static",
    scope: dict[str, Any] | None = None,
    collector: DiagnosticCollector | None = None,
    registry: Any = None,
) -> str:
    """Render root components at depth 0, one block per root."""
    definition = PageDefinition.from_dict({"pageName": "Test", "components": list(components)})
    tree = ComponentTree.from_page(definition)
    ctx = RenderContext(
        dialect=DIALECTS[target],
        tree=tree,
        collector=collector if collector is not None else DiagnosticCollector(),
        page_name="Test",
        registry=registry,
        scope=scope or {},
    )
    return "\n".join(render_component(root, 0, ctx) for root in tree.roots)


class StubFetcher:
    """In-memory AssetFetcher: known URLs return bytes, others raise."""

    def __init__(self, assets: dict[str, bytes] | None = None) -> None:
        self.assets = assets or {}
        self.requested: list[str] = []

    async def fetch(self, url: str) -> bytes:
        self.requested.append(url)
        if url not in self.assets:
            msg = f"no asset at {url}"
            raise ConnectionError(msg)
        return self.assets[url]


@pytest.fixture
def collector() -> DiagnosticCollector:
    return DiagnosticCollector()


@pytest.fixture
def fetcher() -> StubFetcher:
    return StubFetcher({
        "https://cdn.example.com/logo.png": PNG_BYTES,
        "/uploads/hero.jpg": b"jpeg-bytes",
    })


@pytest.fixture
def pages_file(tmp_path):
    """A two-page document on disk, with no images to fetch."""
    import json

    document = {
        "siteName": "Acme",
        "pages": [
            page(
                "Home",
                component(
                    "Container", "c1",
                    children=[
                        component("Label", "l1", props={"text": "Welcome", "variant": "h1"}),
                        component("Button", "b1", props={"text": "About"}, events=navigate("/about")),
                    ],
                ),
            ),
            page(
                "About",
                component("Label", "l2", props={"text": "About us"}),
                route="/about",
            ),
        ],
    }
    path = tmp_path / "pages.json"
    path.write_text(json.dumps(document), encoding="utf-8")
    return path
