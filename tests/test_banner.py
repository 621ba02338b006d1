"""Tests for sitexport.banner — export summary output."""

from __future__ import annotations

import io
import sys
from pathlib import Path
from unittest.mock import patch

from sitexport import __version__
from sitexport.banner import print_error, print_export_summary
from sitexport.export import Archive, ExportedFile, ExportResult
from sitexport.observability import DiagnosticCollector


def make_result(
    *,
    target: str = "static",
    pages: int = 3,
    files: int = 5,
    assets: int = 2,
    output: Path | None = Path("/tmp/site"),
    collector: DiagnosticCollector | None = None,
) -> ExportResult:
    return ExportResult(
        target=target,  # type: ignore[arg-type]
        archive=Archive(),
        files=tuple(ExportedFile(f"f{i}.html", "document", 10) for i in range(files)),
        total_pages=pages,
        total_assets=assets,
        duration_ms=12.0,
        output=output,
        diagnostics=collector if collector is not None else DiagnosticCollector(),
    )


class TestPrintExportSummary:
    """Tests for the export summary."""

    def _capture(self, result: ExportResult, **kwargs: object) -> str:
        buf = io.StringIO()
        print_export_summary(result, file=buf, **kwargs)  # type: ignore[arg-type]
        return buf.getvalue()

    def test_static_summary(self) -> None:
        output = self._capture(make_result(), load_ms=42.5)

        assert "sitexport" in output
        assert f"v{__version__}" in output
        assert "[static]" in output
        assert "3 pages loaded" in output
        assert "42ms" in output
        assert "5 files generated" in output
        assert "2 images packaged" in output
        assert "output:" in output
        assert str(Path("/tmp/site")) in output
        assert "done in 12ms" in output

    def test_project_badge(self) -> None:
        assert "[project]" in self._capture(make_result(target="server"))

    def test_singular_counts(self) -> None:
        output = self._capture(make_result(pages=1, files=1, assets=1))
        assert "1 page loaded" in output
        assert "1 file generated" in output
        assert "1 image packaged" in output

    def test_no_images_line_when_none_packaged(self) -> None:
        assert "packaged" not in self._capture(make_result(assets=0))

    def test_without_output(self) -> None:
        output = self._capture(make_result(output=None))
        assert "output:" not in output
        assert "done in 12ms" in output

    def test_diagnostics_listed(self) -> None:
        collector = DiagnosticCollector()
        collector.record_warning("dynamic-image", "image is only known at runtime", path="Home#i1")
        collector.record_asset_failed("https://cdn.example.com/a.png", "HTTP 404")
        output = self._capture(make_result(collector=collector))

        assert "1 image omitted" in output
        assert "Home#i1: image is only known at runtime [dynamic-image]" in output
        assert "asset https://cdn.example.com/a.png omitted (HTTP 404)" in output

    def test_defaults_to_stderr(self) -> None:
        buf = io.StringIO()
        with patch.object(sys, "stderr", buf):
            print_export_summary(make_result())
        assert "3 pages loaded" in buf.getvalue()


class TestPrintError:
    def test_error_line(self) -> None:
        buf = io.StringIO()
        print_error("Cannot read pages.json", file=buf)
        assert "error:" in buf.getvalue()
        assert buf.getvalue().rstrip().endswith("Cannot read pages.json")
