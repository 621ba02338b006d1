"""Read page documents from JSON.

An input document is one of:

- a single page definition (``{"pageName": ..., "components": [...]}``),
- a list of pages (definitions or ``{"page": meta, "definition": def}``),
- a site (``{"siteName": ..., "pages": [...]}``).
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from sitexport._errors import ExportError, TreeError
from sitexport.tree.arena import ComponentTree
from sitexport.tree.nodes import SitePage

if TYPE_CHECKING:
    from sitexport.observability import DiagnosticCollector


@dataclass(frozen=True, slots=True)
class Site:
    """Ordered pages of one export run.

    Attributes:
        name: Site name from the document, or None when it has none.
        pages: Pages in input order.

    """

    name: str | None
    pages: tuple[SitePage, ...]


def parse_site(
    document: object,
    *,
    collector: DiagnosticCollector | None = None,
) -> Site:
    """Build a validated Site from a decoded JSON document.

    Raises:
        TreeError: If the document has no pages or a page violates a tree
            invariant.

    """
    name: str | None = None
    if isinstance(document, Mapping) and "pages" in document:
        name = str(document["siteName"]) if document.get("siteName") else None
        raw_pages = document["pages"]
    elif isinstance(document, list):
        raw_pages = document
    elif isinstance(document, Mapping):
        raw_pages = [document]
    else:
        msg = f"Expected a page, a list of pages, or a site; got {type(document).__name__}"
        raise TreeError(msg)

    if not isinstance(raw_pages, list) or not raw_pages:
        msg = "The document contains no pages"
        raise TreeError(msg)

    pages: list[SitePage] = []
    for raw in raw_pages:
        if not isinstance(raw, Mapping):
            msg = f"Each page must be an object, got {type(raw).__name__}"
            raise TreeError(msg)
        page = SitePage.from_dict(raw, collector=collector)
        ComponentTree.from_page(page.definition)
        pages.append(page)
    return Site(name=name, pages=tuple(pages))


def load_site(path: Path, *, collector: DiagnosticCollector | None = None) -> Site:
    """Read and parse a JSON page document from *path*.

    Raises:
        ExportError: If the file cannot be read or is not valid JSON.
        TreeError: If the document is structurally invalid.

    """
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        msg = f"Cannot read {path}: {exc}"
        raise ExportError(msg) from exc
    except json.JSONDecodeError as exc:
        msg = f"{path} is not valid JSON: {exc}"
        raise ExportError(msg) from exc
    return parse_site(document, collector=collector)
