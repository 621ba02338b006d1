"""Static export — compile pages to a self-contained HTML/CSS/JS bundle.

Layout of the deliverable::

    index.html            home page (route ``/`` or ``/home``)
    <slug>.html           every other page
    css/styles.css        unless stylesheets are inlined
    js/main.js            unless scripts are inlined
    images/<file>         every image that could be fetched
    README.md

With ``single_page`` the deliverable is one ``index.html`` with the
stylesheet, script and images embedded.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sitexport._errors import ExportError
from sitexport.assets import data_url, rewrite_urls
from sitexport.export import boilerplate
from sitexport.export.archive import Archive, Category
from sitexport.export.base import BaseExporter
from sitexport.render.data import static_value

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from sitexport.assets import AssetManifest
    from sitexport.tree.nodes import SitePage


def page_scope(page: SitePage) -> dict[str, object]:
    """Static data visible to placeholders on *page* (its static sources)."""
    return {
        name: static_value(source)
        for name, source in page.definition.data_context.items()
        if source.type == "static"
    }


class StaticSiteExporter(BaseExporter):
    """Exports a site as static files."""

    target = "static"
    image_prefix = "images"

    def build(self, archive: Archive, manifest: AssetManifest, fetched: Mapping[str, bytes]) -> None:
        options = self._config.options
        if options.single_page:
            self._build_single_page(archive, manifest, fetched)
            return

        if options.include_css:
            archive.add("css/styles.css", boilerplate.base_css(), Category.ASSET)
        if options.include_js:
            archive.add("js/main.js", boilerplate.base_js(), Category.ASSET)
        local_paths = self.add_images(archive, manifest, fetched, self.image_prefix)

        listing: list[dict[str, str]] = []
        for page, filename in zip(self._site.pages, self.page_filenames(), strict=True):
            html = self._render_page(page, inline_css=not options.include_css, inline_js=not options.include_js)
            archive.add(filename, rewrite_urls(html, local_paths), Category.DOCUMENT)
            listing.append({"path": filename, "title": page.page_name})

        archive.add(
            "README.md",
            boilerplate.render(
                "static/README.md.j2",
                site_name=self.site_name,
                pages=listing,
                image_count=len(local_paths),
            ),
            Category.DOCS,
        )

    def write(self, archive: Archive) -> Path:
        """An ``.html`` output path receives the single-page document itself."""
        path = self._config.output_path
        if self._config.options.single_page and path.suffix == ".html":
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_bytes(archive["index.html"].data)
            except OSError as exc:
                msg = f"Cannot write {path}: {exc}"
                raise ExportError(msg) from exc
            return path
        return super().write(archive)

    def asset_pages(self) -> tuple[SitePage, ...]:
        if self._config.options.single_page:
            return self._site.pages[:1]
        return self._site.pages

    def page_filenames(self) -> list[str]:
        """Output file of each page, in page order.

        The first home page is ``index.html``; others use their slug.
        Names already taken get a ``-2``, ``-3``, ... suffix and a warning.
        """
        taken: set[str] = set()
        names: list[str] = []
        for page in self._site.pages:
            base = "index" if page.is_home and "index.html" not in taken else page.slug
            name = f"{base}.html"
            n = 2
            while name in taken:
                name = f"{base}-{n}.html"
                n += 1
            if name != f"{base}.html":
                self._collector.record_warning(
                    "duplicate-page",
                    f"{base}.html is already used; page written as {name}",
                    path=page.page_name,
                )
            taken.add(name)
            names.append(name)
        return names

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _build_single_page(
        self,
        archive: Archive,
        manifest: AssetManifest,
        fetched: Mapping[str, bytes],
    ) -> None:
        page, *rest = self._site.pages
        for other in rest:
            self._collector.record_warning(
                "single-page",
                "single-page export includes only the first page",
                path=other.page_name,
            )
        embedded = {
            ref.url: data_url(fetched[ref.url], ref.filename)
            for ref in manifest.static
            if ref.url in fetched
        }
        html = self._render_page(page, inline_css=True, inline_js=True)
        archive.add("index.html", rewrite_urls(html, embedded), Category.DOCUMENT)

    def _render_page(self, page: SitePage, *, inline_css: bool, inline_js: bool) -> str:
        styles = page.definition.global_styles
        return boilerplate.render(
            "static/page.html.j2",
            title=page.page_name,
            inline_css=inline_css,
            inline_js=inline_js,
            base_css=boilerplate.base_css(),
            base_js=boilerplate.base_js(),
            custom_css=boilerplate.custom_css(styles.css_variables, styles.custom_css),
            body=self.render_body(page, page_scope(page)),
        )
