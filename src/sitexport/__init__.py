"""Sitexport — compile visual page-builder trees into deployable output.

A page is a tree of typed components with props, styles, events and data
bindings.  Sitexport turns a set of pages into one of two deliverables:

- a static HTML/CSS/JS site with every fixed-URL image packaged, or
- a Spring Boot / Thymeleaf project whose data-bound content is evaluated
  by the generated backend at request time.

Quick start::

    import sitexport

    sitexport.export_static("pages.json", output="site.zip")
    sitexport.export_project("pages.json", output="project.zip")

Both return an ``ExportResult`` carrying the archive and every diagnostic
recorded on the way (see ``sitexport.observability``).

"""

__version__ = "0.1.0.dev0"
__all__ = [
    "ExportConfig",
    "PluginEmitterRegistry",
    "ServerProjectExporter",
    "StaticSiteExporter",
    "__version__",
    "export_project",
    "export_static",
    "load_site",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import sitexport`` fast while providing a clean top-level API.
    """
    if name == "ExportConfig":
        from sitexport.config import ExportConfig

        return ExportConfig

    if name == "export_static":
        from sitexport.app import export_static

        return export_static

    if name == "export_project":
        from sitexport.app import export_project

        return export_project

    if name == "StaticSiteExporter":
        from sitexport.export.static import StaticSiteExporter

        return StaticSiteExporter

    if name == "ServerProjectExporter":
        from sitexport.export.project import ServerProjectExporter

        return ServerProjectExporter

    if name == "PluginEmitterRegistry":
        from sitexport.render.registry import PluginEmitterRegistry

        return PluginEmitterRegistry

    if name == "load_site":
        from sitexport.tree.loader import load_site

        return load_site

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
