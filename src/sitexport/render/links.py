"""Route to link mapping.

Authored links are site routes (``/``, ``/about``, ``#pricing``,
``https://...``).  The static target turns routes into page file names;
the server target keeps routes and lets Thymeleaf resolve them against
the context path.
"""

from __future__ import annotations

import re

from sitexport.render.markup import escape

_PASSTHROUGH_RE = re.compile(r"^(?:[a-zA-Z][a-zA-Z0-9+.-]*:|//)")
_HOME_ROUTES = frozenset({"", "home"})


def is_external(route: str) -> bool:
    """True for URLs with a scheme (``https:``, ``mailto:``) or protocol-relative ones."""
    return bool(_PASSTHROUGH_RE.match(route))


def route_to_file_link(route: str) -> str:
    """Map a route to the static page file it is written to.

    ``/``, ``/home`` and ``home`` map to ``index.html``; ``/about`` maps to
    ``about.html``.  Empty routes and ``#`` give ``#``; anchors and
    external URLs are returned unchanged.  A query string or fragment is
    carried over.  The mapping is total and idempotent.
    """
    route = route.strip()
    if not route or route == "#":
        return "#"
    if route.startswith("#") or is_external(route):
        return route

    cut = min((i for i in (route.find("?"), route.find("#")) if i >= 0), default=len(route))
    path, suffix = route[:cut], route[cut:]
    if path.endswith(".html"):
        return route

    name = path.strip("/")
    if name in _HOME_ROUTES:
        return "index.html" + suffix
    return f"{name}.html{suffix}"


def route_to_server_path(route: str) -> str:
    """Normalise a route for ``@{...}`` link expressions (leading slash, no trailing one)."""
    route = route.strip()
    cut = min((i for i in (route.find("?"), route.find("#")) if i >= 0), default=len(route))
    path, suffix = route[:cut], route[cut:]
    path = "/" + path.strip("/")
    return path + suffix


def static_href(route: str) -> str:
    """`` href="..."`` attribute for the static target."""
    return f' href="{escape(route_to_file_link(route))}"'


def server_href(route: str) -> str:
    """Link attribute for the server target.

    Site routes become ``th:href="@{/route}"``; anchors, placeholders and
    external URLs stay plain ``href`` attributes.
    """
    route = route.strip()
    if not route or route.startswith("#"):
        return f' href="{escape(route or "#")}"'
    if is_external(route):
        return f' href="{escape(route)}"'
    return f' th:href="@{{{escape(route_to_server_path(route))}}}"'
