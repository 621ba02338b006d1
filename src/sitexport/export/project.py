"""Server-project export — compile pages to a Spring Boot / Thymeleaf project.

Every page becomes a Thymeleaf template plus a page data file that the
generated ``PageDataService`` loads per request.  Static images are
packaged; data-bound images are left to ``ImageProxyController`` and
``ImageUrlResolver`` at runtime.
"""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING

from sitexport.assets import rewrite_urls
from sitexport.export import boilerplate
from sitexport.export.archive import Archive, Category
from sitexport.export.base import BaseExporter
from sitexport.export.scaffold import BackendScaffold, sample_items, synthesize
from sitexport.render.data import iterator_settings, repeater_key, static_items, static_value
from sitexport.render.markup import escape_expression
from sitexport.tree.arena import ComponentTree

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sitexport._types import PropValue
    from sitexport.assets import AssetManifest
    from sitexport.export.scaffold import PageRoute
    from sitexport.tree.nodes import DataSource, SitePage

RESOURCES = "src/main/resources"
STATIC_IMAGES = f"{RESOURCES}/static/images"

_DATA_KINDS = frozenset({"Repeater", "DataList"})
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class ServerProjectExporter(BaseExporter):
    """Exports a site as a Spring Boot project."""

    target = "server"
    image_prefix = STATIC_IMAGES

    def build(self, archive: Archive, manifest: AssetManifest, fetched: Mapping[str, bytes]) -> None:
        scaffold = synthesize(self._site.pages, collector=self._collector)
        context = self._template_context(scaffold, image_count=sum(1 for r in manifest.static if r.url in fetched))

        # Build
        archive.add("pom.xml", boilerplate.render("project/pom.xml.j2", **context), Category.BUILD)
        archive.add("Dockerfile", boilerplate.render("project/Dockerfile.j2", **context), Category.BUILD)

        # Sources
        src = self._config.project.java_source_dir
        sources = [
            ("Application.java", "project/Application.java.j2"),
            ("controller/PageController.java", "project/PageController.java.j2"),
            ("controller/ImageProxyController.java", "project/ImageProxyController.java.j2"),
            ("service/PageDataService.java", "project/PageDataService.java.j2"),
            ("service/ImageUrlResolver.java", "project/ImageUrlResolver.java.j2"),
        ]
        if scaffold.has_api_endpoints:
            sources += [
                ("controller/ApiDataController.java", "project/ApiDataController.java.j2"),
                ("service/DataService.java", "project/DataService.java.j2"),
            ]
        for path, template in sources:
            archive.add(f"{src}/{path}", boilerplate.render(template, **context), Category.SOURCE)

        # Configuration
        archive.add(
            f"{RESOURCES}/application.properties",
            boilerplate.render("project/application.properties.j2", **context),
            Category.CONFIG,
        )

        # Static resources
        archive.add(f"{RESOURCES}/static/css/styles.css", boilerplate.base_css(), Category.ASSET)
        archive.add(f"{RESOURCES}/static/js/main.js", boilerplate.base_js(), Category.ASSET)
        archive.add(
            f"{STATIC_IMAGES}/placeholder.svg",
            boilerplate.render("project/placeholder.svg.j2"),
            Category.ASSET,
        )
        packaged = self.add_images(archive, manifest, fetched, STATIC_IMAGES)
        served = {url: "/" + path.removeprefix(f"{RESOURCES}/static/") for url, path in packaged.items()}

        # Templates and page data
        for page, route in zip(self._site.pages, scaffold.pages, strict=True):
            archive.add(
                f"{RESOURCES}/templates/{route.template_name}.html",
                rewrite_urls(self._render_template(page), served),
                Category.DOCUMENT,
            )
            archive.add(
                f"{RESOURCES}/pages/{route.template_name}.json",
                json.dumps(self.page_data(page, route, scaffold), indent=2, ensure_ascii=False) + "\n",
                Category.DOCUMENT,
            )

        archive.add("README.md", boilerplate.render("project/README.md.j2", **context), Category.DOCS)

    # ------------------------------------------------------------------
    # Page data
    # ------------------------------------------------------------------

    def page_data(self, page: SitePage, route: PageRoute, scaffold: BackendScaffold) -> dict[str, PropValue]:
        """Content of ``pages/<name>.json`` for *page*.

        ``dataSources`` holds data known now (page-level static sources and
        static repeater items).  ``apiSources`` maps a key to the data route
        the running backend fetches it from.
        """
        data_sources: dict[str, PropValue] = {}
        api_sources: dict[str, PropValue] = {}

        for name, source in page.definition.data_context.items():
            if source.type == "static":
                data_sources[name] = static_value(source)
            elif source.type == "api":
                self._add_api_source(api_sources, name, source, source.data_path, scaffold)

        scope = dict(data_sources)
        for component in ComponentTree.from_page(page.definition):
            if component.kind not in _DATA_KINDS:
                continue
            key = repeater_key(component)
            source = component.data_source
            settings = iterator_settings(component)
            if source is not None and source.type == "api":
                self._add_api_source(api_sources, key, source, settings.data_path, scaffold)
                continue
            items = static_items(source, settings.data_path, scope)
            if items is not None:
                data_sources[key] = items

        data: dict[str, PropValue] = {
            "pageName": page.page_name,
            "title": route.title,
            "description": "",
            "dataSources": data_sources,
        }
        if api_sources:
            data["apiSources"] = api_sources
        return data

    def _add_api_source(
        self,
        api_sources: dict[str, PropValue],
        key: str,
        source: DataSource,
        data_path: str,
        scaffold: BackendScaffold,
    ) -> None:
        config = scaffold.endpoint_for(source.endpoint) if source.endpoint else None
        if config is None:
            self._collector.record_warning(
                "missing-endpoint",
                f"api data source {key!r} has no endpoint; it will render empty",
                path=key,
            )
            return
        api_sources[key] = {"endpoint": config.route_path, "dataPath": config.data_path}

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------

    def _render_template(self, page: SitePage) -> str:
        styles = page.definition.global_styles
        return boilerplate.render(
            "project/page.html.j2",
            title=page.page_name,
            custom_css=boilerplate.custom_css(styles.css_variables, styles.custom_css),
            main_attrs=self._main_attrs(page),
            body=self.render_body(page),
        )

    def _main_attrs(self, page: SitePage) -> str:
        """``th:with`` exposing page-level data sources under their own names."""
        bindings: list[str] = []
        for name in page.definition.data_context:
            if not _IDENTIFIER_RE.match(name):
                self._collector.record_warning(
                    "invalid-source-name",
                    f"data source {name!r} is not a valid expression name and is only "
                    f"reachable as dataSources['{name}']",
                    path=page.page_name,
                )
                continue
            bindings.append(f"{name}=${{dataSources['{name}']}}")
        if not bindings:
            return ""
        return f' th:with="{escape_expression(",".join(bindings))}"'

    def _template_context(self, scaffold: BackendScaffold, *, image_count: int) -> dict[str, object]:
        return {
            "project": self._config.project,
            "site_name": self.site_name,
            "asset_base_url": self._config.asset_base_url,
            "fetch_timeout_ms": self._config.fetch_timeout_ms,
            "routes": scaffold.pages,
            "endpoints": scaffold.endpoints,
            "samples": {e.method_name: sample_items(e.method_name) for e in scaffold.endpoints},
            "has_api": scaffold.has_api_endpoints,
            "lombok": scaffold.has_api_endpoints,
            "image_count": image_count,
        }
