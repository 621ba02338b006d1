"""Page tree model — parsing, validation and traversal of authored pages."""

from sitexport.tree.arena import ComponentTree
from sitexport.tree.loader import Site, load_site, parse_site
from sitexport.tree.nodes import (
    CORE_PLUGIN,
    Action,
    ComponentInstance,
    DataSource,
    EventBinding,
    GlobalStyles,
    IteratorConfig,
    PageDefinition,
    SitePage,
    slugify,
)

__all__ = [
    "CORE_PLUGIN",
    "Action",
    "ComponentInstance",
    "ComponentTree",
    "DataSource",
    "EventBinding",
    "GlobalStyles",
    "IteratorConfig",
    "PageDefinition",
    "Site",
    "SitePage",
    "load_site",
    "parse_site",
    "slugify",
]
