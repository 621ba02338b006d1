"""Public entry points — export a page document to either target.

Both functions read the page document, load ``sitexport.yaml`` /
``sitexport.toml`` from the document's directory, run the exporter and
print a summary to stderr::

    sitexport.export_static("pages.json", output="site.zip")
    sitexport.export_project("pages.json", output="project.zip", group_id="org.acme")

"""

from __future__ import annotations

import time
from pathlib import Path
from typing import TYPE_CHECKING

from sitexport.config_loader import load_config
from sitexport.observability import DiagnosticCollector
from sitexport.tree.loader import load_site

if TYPE_CHECKING:
    from sitexport.assets import AssetFetcher
    from sitexport.export.base import BaseExporter, ExportResult
    from sitexport.render.registry import EmitterRegistry


def export_static(
    pages: str | Path,
    *,
    registry: EmitterRegistry | None = None,
    fetcher: AssetFetcher | None = None,
    quiet: bool = False,
    **kwargs: object,
) -> ExportResult:
    """Export *pages* as a static HTML/CSS/JS site.

    Args:
        pages: Path to the JSON page document.
        registry: Plugin emitter registry.
        fetcher: Asset fetcher replacing the default HTTP client.
        quiet: Suppress the summary on stderr.
        **kwargs: Override ExportConfig, ExportOptions or ProjectOptions fields.

    Raises:
        SitexportError: If the configuration, the document or the export fails.

    """
    from sitexport.export.static import StaticSiteExporter

    return _run(StaticSiteExporter, pages, registry=registry, fetcher=fetcher, quiet=quiet, **kwargs)


def export_project(
    pages: str | Path,
    *,
    registry: EmitterRegistry | None = None,
    fetcher: AssetFetcher | None = None,
    quiet: bool = False,
    **kwargs: object,
) -> ExportResult:
    """Export *pages* as a Spring Boot / Thymeleaf project.

    Accepts the same arguments as :func:`export_static`.
    """
    from sitexport.export.project import ServerProjectExporter

    return _run(ServerProjectExporter, pages, registry=registry, fetcher=fetcher, quiet=quiet, **kwargs)


def _run(
    exporter_cls: type[BaseExporter],
    pages: str | Path,
    *,
    registry: EmitterRegistry | None,
    fetcher: AssetFetcher | None,
    quiet: bool,
    **kwargs: object,
) -> ExportResult:
    from sitexport.banner import print_export_summary

    pages_path = Path(pages).resolve()
    # An explicit output is relative to the caller, not to the document
    if kwargs.get("output") is not None:
        kwargs["output"] = Path(str(kwargs["output"])).resolve()
    config = load_config(pages_path.parent, **kwargs)

    t0 = time.perf_counter()
    collector = DiagnosticCollector()
    site = load_site(pages_path, collector=collector)
    load_ms = (time.perf_counter() - t0) * 1000

    exporter = exporter_cls(site, config, registry=registry, fetcher=fetcher, collector=collector)
    result = exporter.export()

    if not quiet:
        print_export_summary(result, load_ms=load_ms)
    return result
