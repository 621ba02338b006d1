"""Tests for sitexport._errors."""

from sitexport._errors import (
    ConfigError,
    ExportError,
    SitexportError,
    TreeError,
)


class TestErrorHierarchy:
    """All sitexport errors inherit from SitexportError."""

    def test_sitexport_error_is_exception(self) -> None:
        assert issubclass(SitexportError, Exception)

    def test_config_error_inherits(self) -> None:
        assert issubclass(ConfigError, SitexportError)

    def test_tree_error_inherits(self) -> None:
        assert issubclass(TreeError, SitexportError)

    def test_export_error_inherits(self) -> None:
        assert issubclass(ExportError, SitexportError)

    def test_catch_all_sitexport_errors(self) -> None:
        """All specific errors are catchable via SitexportError."""
        for error_cls in (ConfigError, TreeError, ExportError):
            try:
                raise error_cls("test")
            except SitexportError:
                pass  # Expected — all caught by base class
