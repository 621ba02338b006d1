"""Tests for sitexport.export.static — StaticSiteExporter end to end."""

from __future__ import annotations

import io
import zipfile
from pathlib import Path

import pytest

from sitexport.config import ExportConfig, ExportOptions
from sitexport.export import ExportedFile, ExportResult, StaticSiteExporter
from sitexport.tree.loader import Site

from .conftest import PNG_BYTES, StubFetcher, component, make_site, navigate, page

LOGO = "https://cdn.example.com/logo.png"


def acme() -> Site:
    return make_site(
        page(
            "Home",
            component("Label", "l1", props={"text": "Welcome", "variant": "h1"}),
            component("Image", "i1", props={"src": LOGO, "alt": "Logo"}),
            component("Button", "b1", props={"text": "About"}, events=navigate("/about")),
        ),
        page(
            "About",
            component("Image", "i2", props={"src": "/uploads/hero.jpg"}),
            route="/about",
        ),
        name="Acme",
    )


def export(
    site: Site,
    tmp_path: Path,
    fetcher: StubFetcher,
    *,
    options: ExportOptions | None = None,
    output: str = "dist",
    write: bool = False,
) -> ExportResult:
    config = ExportConfig(root=tmp_path, output=Path(output), options=options or ExportOptions())
    return StaticSiteExporter(site, config, fetcher=fetcher).export(write=write)


# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------


class TestExportedFile:
    """ExportedFile — frozen record of one archive entry."""

    def test_frozen(self) -> None:
        ef = ExportedFile(path="index.html", category="document", size_bytes=10)
        with pytest.raises(AttributeError):
            ef.path = "other.html"  # type: ignore[misc]

    def test_equality(self) -> None:
        assert ExportedFile("a", "asset", 1) == ExportedFile("a", "asset", 1)


# ---------------------------------------------------------------------------
# Multi-page export
# ---------------------------------------------------------------------------


class TestStaticExport:
    """StaticSiteExporter — files, links and images."""

    def test_file_layout(self, tmp_path: Path, fetcher: StubFetcher) -> None:
        result = export(acme(), tmp_path, fetcher)
        assert result.archive.paths() == (
            "index.html",
            "about.html",
            "css/styles.css",
            "js/main.js",
            "images/logo.png",
            "images/hero.jpg",
            "README.md",
        )
        assert result.target == "static"
        assert result.total_pages == 2
        assert result.total_assets == 2
        assert result.output is None
        assert [f.path for f in result.files] == list(result.archive.paths())

    def test_page_shell(self, tmp_path: Path, fetcher: StubFetcher) -> None:
        html = export(acme(), tmp_path, fetcher).archive.text("index.html")
        assert html.startswith("<!DOCTYPE html>\n")
        assert "<title>Home</title>" in html
        assert '<link rel="stylesheet" href="css/styles.css">' in html
        assert '<script src="js/main.js" defer></script>' in html
        assert '    <h1 id="component-l1" class="component label">Welcome</h1>' in html

    def test_links_and_images_relinked(self, tmp_path: Path, fetcher: StubFetcher) -> None:
        archive = export(acme(), tmp_path, fetcher).archive
        index = archive.text("index.html")
        assert "window.location.href='about.html'" in index
        assert '<img src="images/logo.png" alt="Logo"' in index
        assert LOGO not in index
        assert '<img src="images/hero.jpg"' in archive.text("about.html")

    def test_failed_image_keeps_remote_url(self, tmp_path: Path) -> None:
        result = export(acme(), tmp_path, StubFetcher())
        assert f'<img src="{LOGO}"' in result.archive.text("index.html")
        assert "images/logo.png" not in result.archive
        assert result.total_assets == 0
        assert len(result.diagnostics.failures) == 2

    def test_dot_segment_image_url_exported(self, tmp_path: Path) -> None:
        url = "https://cdn.example.com/img/.."
        site = make_site(page("Home", component("Image", "i1", props={"src": url})))
        result = export(site, tmp_path, StubFetcher({url: PNG_BYTES}))
        [image] = [p for p in result.archive.paths() if p.startswith("images/")]
        assert image.startswith("images/image_")
        assert f'<img src="{image}"' in result.archive.text("index.html")

    def test_readme(self, tmp_path: Path, fetcher: StubFetcher) -> None:
        readme = export(acme(), tmp_path, fetcher).archive.text("README.md")
        assert readme.startswith("# Acme\n")
        assert "- index.html - Home\n" in readme
        assert "- about.html - About\n" in readme
        assert "2 image(s) included" in readme

    def test_site_name_from_config_when_document_has_none(self, tmp_path: Path, fetcher: StubFetcher) -> None:
        readme = export(make_site(page("Home")), tmp_path, fetcher).archive.text("README.md")
        assert readme.startswith("# My Site\n")
        assert "## Images" not in readme

    def test_inline_css_and_js(self, tmp_path: Path, fetcher: StubFetcher) -> None:
        result = export(acme(), tmp_path, fetcher, options=ExportOptions(include_css=False, include_js=False))
        assert "css/styles.css" not in result.archive
        assert "js/main.js" not in result.archive
        html = result.archive.text("index.html")
        assert "  <style>\n" in html
        assert "  <script>\n" in html
        assert 'href="css/styles.css"' not in html

    def test_custom_css(self, tmp_path: Path, fetcher: StubFetcher) -> None:
        site = make_site(page(
            "Home",
            global_styles={"customCSS": ".hero { color: red; }", "cssVariables": {"brand": "#f00"}},
        ))
        html = export(site, tmp_path, fetcher).archive.text("index.html")
        assert ":root {\n  --brand: #f00;\n}\n\n.hero { color: red; }" in html

    def test_page_scope_resolves_placeholders(self, tmp_path: Path, fetcher: StubFetcher) -> None:
        site = make_site(page(
            "Home",
            component("Label", "l1", props={"text": "Hi {{user.name}}"}),
            data_context={"user": {"name": "Ana"}},
        ))
        result = export(site, tmp_path, fetcher)
        assert ">Hi Ana</span>" in result.archive.text("index.html")
        assert result.diagnostics.warnings == []

    def test_duplicate_page_names(self, tmp_path: Path, fetcher: StubFetcher) -> None:
        site = make_site(
            page("Home"),
            page("Start", route="/home"),
            page("Team", route="/team"),
            page("Team", route="/people"),
        )
        result = export(site, tmp_path, fetcher)
        documents = [f.path for f in result.files if f.category == "document"]
        assert documents == ["index.html", "start.html", "team.html", "team-2.html"]
        assert [w.code for w in result.diagnostics.warnings] == ["duplicate-page"]

    def test_deterministic(self, tmp_path: Path) -> None:
        first = export(acme(), tmp_path, StubFetcher({LOGO: b"png"}))
        second = export(acme(), tmp_path, StubFetcher({LOGO: b"png"}))
        assert first.to_zip() == second.to_zip()


# ---------------------------------------------------------------------------
# Single-page export
# ---------------------------------------------------------------------------


class TestSinglePage:
    """single_page — one self-contained document."""

    def test_embeds_everything(self, tmp_path: Path, fetcher: StubFetcher) -> None:
        result = export(acme(), tmp_path, fetcher, options=ExportOptions(single_page=True))
        assert result.archive.paths() == ("index.html",)
        html = result.archive.text("index.html")
        assert '<img src="data:image/png;base64,' in html
        assert "<style>" in html
        assert "<script>" in html

    def test_only_first_page(self, tmp_path: Path, fetcher: StubFetcher) -> None:
        result = export(acme(), tmp_path, fetcher, options=ExportOptions(single_page=True))
        assert fetcher.requested == [LOGO]
        [warning] = result.diagnostics.warnings
        assert warning.code == "single-page"
        assert warning.path == "About"

    def test_html_output_written_directly(self, tmp_path: Path, fetcher: StubFetcher) -> None:
        result = export(
            acme(), tmp_path, fetcher,
            options=ExportOptions(single_page=True), output="site.html", write=True,
        )
        assert result.output == tmp_path / "site.html"
        assert (tmp_path / "site.html").read_text(encoding="utf-8").startswith("<!DOCTYPE html>")


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


class TestWrite:
    """Output as a directory tree or a zip file."""

    def test_directory(self, tmp_path: Path, fetcher: StubFetcher) -> None:
        result = export(acme(), tmp_path, fetcher, write=True)
        assert result.output == tmp_path / "dist"
        assert (tmp_path / "dist" / "index.html").is_file()
        assert (tmp_path / "dist" / "images" / "logo.png").is_file()

    def test_zip(self, tmp_path: Path, fetcher: StubFetcher) -> None:
        result = export(acme(), tmp_path, fetcher, output="site.zip", write=True)
        assert result.output == tmp_path / "site.zip"
        with zipfile.ZipFile(io.BytesIO((tmp_path / "site.zip").read_bytes())) as zf:
            assert zf.namelist()[0] == "index.html"
            assert "README.md" in zf.namelist()
