"""Sitexport error hierarchy.

All sitexport-specific errors inherit from SitexportError for easy catching.
Recoverable problems (malformed props, failed asset fetches, dynamic
expressions in a static export) are never raised; they are recorded as
diagnostics on the collector instead.
"""


class SitexportError(Exception):
    """Base error for all sitexport operations."""


class ConfigError(SitexportError):
    """Invalid or missing configuration."""


class TreeError(SitexportError):
    """The component tree violates a structural invariant (duplicate id, cycle)."""


class ExportError(SitexportError):
    """Error while assembling or writing an export artifact."""
