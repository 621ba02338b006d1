"""Shared export pipeline.

Both targets run the same steps:

1. Collect image references across all pages
2. Fetch static images concurrently (the only awaited step)
3. Render pages and boilerplate into an ``Archive`` (synchronous)
4. Write the archive as a zip file or a directory

Subclasses provide step 3.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from sitexport.assets import HttpxFetcher, collect_assets, fetch_assets
from sitexport.export.archive import Archive, Category
from sitexport.observability import DiagnosticCollector
from sitexport.render.context import RenderContext
from sitexport.render.dialect import DIALECTS
from sitexport.render.emitters import render_component
from sitexport.tree.arena import ComponentTree

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from sitexport._types import Target
    from sitexport.assets import AssetFetcher, AssetManifest
    from sitexport.config import ExportConfig
    from sitexport.render.registry import EmitterRegistry
    from sitexport.tree.loader import Site
    from sitexport.tree.nodes import SitePage

# Indentation depth of root components inside <main>
PAGE_BODY_DEPTH = 2


@dataclass(frozen=True, slots=True)
class ExportedFile:
    """Record of a single file in the deliverable.

    Attributes:
        path: Archive-relative path.
        category: Archive section the file belongs to.
        size_bytes: Size of the file in bytes.

    """

    path: str
    category: str
    size_bytes: int


@dataclass(frozen=True, slots=True)
class ExportResult:
    """Aggregate result of one export run.

    Attributes:
        target: ``"static"`` or ``"server"``.
        archive: The assembled deliverable.
        files: One record per archive entry, in archive order.
        total_pages: Number of pages exported.
        total_assets: Number of images packaged.
        duration_ms: Wall-clock time of the run.
        output: Where the deliverable was written, or None.
        diagnostics: Collector holding every diagnostic of the run.

    """

    target: Target
    archive: Archive
    files: tuple[ExportedFile, ...]
    total_pages: int
    total_assets: int
    duration_ms: float
    output: Path | None
    diagnostics: DiagnosticCollector

    def to_zip(self) -> bytes:
        return self.archive.to_zip()


class BaseExporter:
    """Runs the export pipeline for one target.

    Args:
        site: Pages to export, in order.
        config: Frozen export configuration.
        registry: Plugin emitter registry consulted before built-ins.
        fetcher: Asset fetcher; defaults to an ``HttpxFetcher`` on
            ``config.asset_base_url``.
        collector: Diagnostic sink; a fresh one is created when omitted.

    """

    target: ClassVar[Target]
    image_prefix: ClassVar[str]

    def __init__(
        self,
        site: Site,
        config: ExportConfig,
        *,
        registry: EmitterRegistry | None = None,
        fetcher: AssetFetcher | None = None,
        collector: DiagnosticCollector | None = None,
    ) -> None:
        self._site = site
        self._config = config
        self._registry = registry
        self._fetcher = fetcher
        self._collector = collector if collector is not None else DiagnosticCollector()

    @property
    def collector(self) -> DiagnosticCollector:
        return self._collector

    @property
    def site_name(self) -> str:
        return self._site.name or self._config.site_name

    async def export_async(self, *, write: bool = True) -> ExportResult:
        """Run the pipeline.

        Args:
            write: Write the deliverable to ``config.output_path``.

        Raises:
            TreeError: If a page violates a tree invariant.
            ExportError: If the deliverable cannot be assembled or written.

        """
        start = time.perf_counter()
        manifest = collect_assets(page.definition for page in self.asset_pages())
        fetched = await self._fetch(manifest)

        archive = Archive(self._collector)
        self.build(archive, manifest, fetched)

        output = self.write(archive) if write else None
        return ExportResult(
            target=self.target,
            archive=archive,
            files=tuple(
                ExportedFile(path=e.path, category=e.category.name.lower(), size_bytes=e.size_bytes)
                for e in archive.entries()
            ),
            total_pages=len(self._site.pages),
            total_assets=sum(1 for ref in manifest.static if ref.url in fetched),
            duration_ms=(time.perf_counter() - start) * 1000,
            output=output,
            diagnostics=self._collector,
        )

    def export(self, *, write: bool = True) -> ExportResult:
        """Synchronous wrapper around :meth:`export_async`."""
        return asyncio.run(self.export_async(write=write))

    # ------------------------------------------------------------------
    # Pipeline steps
    # ------------------------------------------------------------------

    def asset_pages(self) -> tuple[SitePage, ...]:
        """Pages whose images are packaged."""
        return self._site.pages

    async def _fetch(self, manifest: AssetManifest) -> dict[str, bytes]:
        if not manifest.static:
            return {}
        if self._fetcher is not None:
            return await fetch_assets(
                manifest.static, self._fetcher,
                collector=self._collector, target=self.image_prefix,
            )
        async with HttpxFetcher(
            self._config.asset_base_url, timeout=self._config.fetch_timeout,
        ) as fetcher:
            return await fetch_assets(
                manifest.static, fetcher,
                collector=self._collector, target=self.image_prefix,
            )

    def build(self, archive: Archive, manifest: AssetManifest, fetched: Mapping[str, bytes]) -> None:
        """Add every file of the deliverable to *archive*."""
        raise NotImplementedError

    def write(self, archive: Archive) -> Path:
        """Write *archive* as a zip file or a directory tree."""
        path = self._config.output_path
        if self._config.writes_archive:
            archive.write_zip(path)
        else:
            archive.write_tree(path)
        return path

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def render_body(self, page: SitePage, scope: Mapping[str, object] | None = None) -> str:
        """Markup of a page's root components, separated by blank lines."""
        tree = ComponentTree.from_page(page.definition)
        ctx = RenderContext(
            dialect=DIALECTS[self.target],
            tree=tree,
            collector=self._collector,
            page_name=page.page_name,
            registry=self._registry,
            scope=dict(scope or {}),
        )
        return "\n\n".join(render_component(root, PAGE_BODY_DEPTH, ctx) for root in tree.roots)

    def add_images(
        self,
        archive: Archive,
        manifest: AssetManifest,
        fetched: Mapping[str, bytes],
        prefix: str,
    ) -> dict[str, str]:
        """Add fetched images under *prefix*; returns ``url -> archive path``."""
        paths: dict[str, str] = {}
        for ref in manifest.static:
            data = fetched.get(ref.url)
            if data is None:
                continue
            path = ref.local_path(prefix)
            archive.add(path, data, Category.ASSET)
            paths[ref.url] = path
        return paths
