"""Asset collector — find, fetch, and relink the images a site references.

References are gathered from every component's ``src``/``url`` props, the
navbar brand image, and ``url(...)`` inside background styles.  Static
references are deduplicated in first-seen order, assigned collision-free
file names, and fetched concurrently.  The finished markup is relinked in
a single substitution pass, so output depends only on the input tree and
on which fetches succeeded.

Fetching goes through an ``AssetFetcher``; the default is ``HttpxFetcher``,
which resolves root-relative paths against the configured image base URL.
"""

from __future__ import annotations

import asyncio
import base64
import hashlib
import mimetypes
import re
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, Protocol, Self
from urllib.parse import urlsplit

import httpx

from sitexport.render.expressions import has_placeholders
from sitexport.render.markup import escape
from sitexport.tree.arena import ComponentTree
from sitexport.tree.values import as_str

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping
    from types import TracebackType

    from sitexport.observability import DiagnosticCollector
    from sitexport.tree.nodes import ComponentInstance, PageDefinition

type AssetKind = Literal["static", "dynamic", "ignored"]

_SOURCE_PROPS = ("src", "url", "brandImageUrl")
_BACKGROUND_STYLES = ("backgroundImage", "background")
_CSS_URL_RE = re.compile(r"""url\(\s*['"]?([^'")\s]+)['"]?\s*\)""")
_UNSAFE_RE = re.compile(r"[^A-Za-z0-9._-]")


# ---------------------------------------------------------------------------
# Collection
# ---------------------------------------------------------------------------


def classify(url: str) -> AssetKind:
    """Classify an image reference.

    Token-containing references are dynamic (resolved by the generated
    backend at runtime).  ``http(s)://`` and root-relative references are
    static.  Anything else (data URLs, relative paths, empty) is ignored.
    """
    if not url:
        return "ignored"
    if has_placeholders(url):
        return "dynamic"
    if url.startswith(("http://", "https://")) or (url.startswith("/") and not url.startswith("//")):
        return "static"
    return "ignored"


def component_references(component: ComponentInstance) -> Iterator[str]:
    """Image references held by one component, in a fixed order."""
    for name in _SOURCE_PROPS:
        value = as_str(component.props.get(name))
        if value:
            yield value
    binding = component.template_bindings.get("src")
    if binding:
        yield binding
    for name in _BACKGROUND_STYLES:
        for match in _CSS_URL_RE.finditer(component.styles.get(name, "")):
            yield match.group(1)


def asset_filename(url: str) -> str:
    """Sanitized file name for *url* (last path segment, ``.png`` if bare)."""
    try:
        path = urlsplit(url).path
    except ValueError:
        return _hashed_filename(url)
    name = path.rsplit("/", 1)[-1] or "image"
    if not name.strip("."):
        return _hashed_filename(url)
    if "." not in name:
        name += ".png"
    return _UNSAFE_RE.sub("_", name)


def _hashed_filename(url: str) -> str:
    digest = hashlib.sha1(url.encode()).hexdigest()[:10]
    return f"image_{digest}.png"


def _dedupe_filename(name: str, taken: set[str]) -> str:
    if name not in taken:
        return name
    stem, dot, ext = name.rpartition(".")
    if not stem:
        stem, dot, ext = name, "", ""
    n = 2
    while True:
        candidate = f"{stem}-{n}{dot}{ext}"
        if candidate not in taken:
            return candidate
        n += 1


@dataclass(frozen=True, slots=True)
class AssetRef:
    """A static image reference and the file it is stored as."""

    url: str
    filename: str

    def local_path(self, prefix: str = "images") -> str:
        return f"{prefix}/{self.filename}"


@dataclass(frozen=True, slots=True)
class AssetManifest:
    """Every image reference of a site, classified.

    Attributes:
        static: Downloadable references in first-seen order, with unique
            file names.
        dynamic: Token-containing references left for the runtime proxy.

    """

    static: tuple[AssetRef, ...] = ()
    dynamic: tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.static)


def collect_assets(pages: Iterable[PageDefinition]) -> AssetManifest:
    """Walk every page in order and build the asset manifest."""
    seen: dict[str, AssetRef] = {}
    dynamic: dict[str, None] = {}
    taken: set[str] = set()
    for page in pages:
        for component, _depth in ComponentTree.from_page(page).walk():
            for url in component_references(component):
                match classify(url):
                    case "static" if url not in seen:
                        filename = _dedupe_filename(asset_filename(url), taken)
                        taken.add(filename)
                        seen[url] = AssetRef(url=url, filename=filename)
                    case "dynamic":
                        dynamic.setdefault(url)
    return AssetManifest(static=tuple(seen.values()), dynamic=tuple(dynamic))


# ---------------------------------------------------------------------------
# Fetching
# ---------------------------------------------------------------------------


class AssetFetcher(Protocol):
    """Anything that can download one asset."""

    async def fetch(self, url: str) -> bytes:
        """Return the body of *url*, raising on any failure."""
        ...


class HttpxFetcher:
    """Fetches assets with a shared ``httpx.AsyncClient``.

    Root-relative URLs are resolved against *base_url*.  Non-2xx responses
    raise ``httpx.HTTPStatusError``.

    Args:
        base_url: Image repository base URL.
        timeout: Per-request timeout in seconds.
        transport: Optional transport (tests pass ``httpx.MockTransport``).

    """

    __slots__ = ("_client",)

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            follow_redirects=True,
        )

    async def fetch(self, url: str) -> bytes:
        response = await self._client.get(url)
        response.raise_for_status()
        return response.content

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


async def fetch_assets(
    refs: Iterable[AssetRef],
    fetcher: AssetFetcher,
    *,
    collector: DiagnosticCollector,
    target: str = "images",
) -> dict[str, bytes]:
    """Fetch every reference concurrently.

    Returns ``url -> body`` for the fetches that succeeded, in manifest
    order.  A failed fetch is omitted and recorded as ``AssetFetchFailed``.
    """
    refs = tuple(refs)

    async def fetch_one(ref: AssetRef) -> bytes | None:
        start = time.perf_counter_ns()
        try:
            data = await fetcher.fetch(ref.url)
        except Exception as exc:
            collector.record_asset_failed(ref.url, _failure_reason(exc))
            return None
        collector.record_asset_fetched(
            ref.url,
            ref.local_path(target),
            size_bytes=len(data),
            duration_ms=(time.perf_counter_ns() - start) / 1_000_000,
        )
        return data

    results = await asyncio.gather(*(fetch_one(ref) for ref in refs))
    return {
        ref.url: data
        for ref, data in zip(refs, results, strict=True)
        if data is not None
    }


def _failure_reason(exc: Exception) -> str:
    if isinstance(exc, httpx.HTTPStatusError):
        return f"HTTP {exc.response.status_code}"
    return f"{type(exc).__name__}: {exc}" if str(exc) else type(exc).__name__


# ---------------------------------------------------------------------------
# Relinking
# ---------------------------------------------------------------------------


def data_url(data: bytes, filename: str) -> str:
    """Embed *data* as a ``data:`` URL, typed from the file name."""
    mime = mimetypes.guess_type(filename)[0] or "application/octet-stream"
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def rewrite_urls(markup: str, mapping: Mapping[str, str]) -> str:
    """Replace every mapped URL in *markup* in one pass.

    Longer URLs win over their prefixes, and a URL only matches where it
    stands alone: after a quote, ``(``, ``{``, ``;`` or whitespace, and
    before a quote (raw or as an entity), ``)``, ``}`` or whitespace.  Both
    the raw and the HTML-escaped spelling of each URL are recognised.
    """
    if not mapping:
        return markup
    spellings: dict[str, str] = {}
    for url, replacement in mapping.items():
        spellings.setdefault(url, replacement)
        spellings.setdefault(escape(url), replacement)
    alternatives = "|".join(re.escape(url) for url in sorted(spellings, key=lambda u: (-len(u), u)))
    pattern = re.compile(
        rf"""(?<![^\s"'({{;])(?:{alternatives})(?=[\s"')}}]|&quot;|&#x27;|$)"""
    )
    return pattern.sub(lambda m: spellings[m.group(0)], markup)
