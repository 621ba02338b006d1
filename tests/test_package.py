"""Tests for sitexport package exports and metadata."""

import sitexport


class TestPackageMetadata:
    """Package-level exports and metadata."""

    def test_version_string(self) -> None:
        assert isinstance(sitexport.__version__, str)
        assert "0.1.0" in sitexport.__version__

    def test_all_exports_resolvable(self) -> None:
        for name in sitexport.__all__:
            getattr(sitexport, name)

    def test_lazy_exports_are_the_real_objects(self) -> None:
        from sitexport.app import export_static
        from sitexport.export.static import StaticSiteExporter

        assert sitexport.export_static is export_static
        assert sitexport.StaticSiteExporter is StaticSiteExporter

    def test_invalid_attribute_raises(self) -> None:
        import pytest

        with pytest.raises(AttributeError, match="no attribute"):
            sitexport.nonexistent_thing  # type: ignore[attr-defined]  # noqa: B018
