"""Export layer — turn a parsed site into a deliverable.

Two targets share one pipeline (``BaseExporter``): a static HTML/CSS/JS
bundle and a Spring Boot / Thymeleaf project.  Both assemble an in-memory
``Archive`` that is written as a zip file or a directory tree.
"""

from sitexport.export.archive import Archive, ArchiveEntry, Category
from sitexport.export.base import BaseExporter, ExportedFile, ExportResult
from sitexport.export.project import ServerProjectExporter
from sitexport.export.scaffold import ApiEndpointConfig, BackendScaffold, PageRoute, synthesize
from sitexport.export.static import StaticSiteExporter

__all__ = [
    "ApiEndpointConfig",
    "Archive",
    "ArchiveEntry",
    "BackendScaffold",
    "BaseExporter",
    "Category",
    "ExportResult",
    "ExportedFile",
    "PageRoute",
    "ServerProjectExporter",
    "StaticSiteExporter",
    "synthesize",
]
