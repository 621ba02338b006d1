"""Expression translation for ``{{property.path}}`` placeholders.

Authored text may embed placeholders such as ``Hello {{user.name}}``.
The server target turns them into SpEL for Thymeleaf attributes; the
static target resolves them at generation time against whatever static
data is in scope.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass

from sitexport.tree.values import lookup_path

_TOKEN_RE = re.compile(r"\{\{\s*([^{}]*?)\s*\}\}")
_IDENT_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")


@dataclass(frozen=True, slots=True)
class TextRun:
    """Literal text between placeholders."""

    text: str


@dataclass(frozen=True, slots=True)
class PathRef:
    """A ``{{a.b.c}}`` placeholder."""

    path: str

    @property
    def segments(self) -> tuple[str, ...]:
        return tuple(self.path.split("."))

    @property
    def root(self) -> str:
        return self.segments[0]


type Segment = TextRun | PathRef


def parse_template(text: str) -> tuple[Segment, ...]:
    """Split *text* into literal runs and path references.

    Empty placeholders (``{{ }}``) and placeholders that are not a dotted
    property path (``{{price * 2}}``) are kept as literal text.
    """
    parts: list[Segment] = []
    last = 0
    for match in _TOKEN_RE.finditer(text):
        path = match.group(1)
        if not is_property_path(path):
            continue
        if match.start() > last:
            parts.append(TextRun(text[last:match.start()]))
        parts.append(PathRef(path))
        last = match.end()
    if last < len(text):
        parts.append(TextRun(text[last:]))
    return tuple(_merge_runs(parts))


def is_property_path(path: str) -> bool:
    """``user.name`` or ``items.0.title``: an identifier, then identifiers or indexes."""
    head, *rest = path.split(".")
    return bool(_IDENT_RE.fullmatch(head)) and all(
        seg.isdigit() or _IDENT_RE.fullmatch(seg) for seg in rest
    )


def malformed_placeholders(text: str) -> tuple[str, ...]:
    """Non-empty ``{{...}}`` bodies that are not property paths, in order."""
    return tuple(
        body for body in (m.group(1) for m in _TOKEN_RE.finditer(text))
        if body and not is_property_path(body)
    )


def has_placeholders(text: str) -> bool:
    """True if *text* contains at least one non-empty ``{{...}}`` placeholder."""
    return any(isinstance(s, PathRef) for s in parse_template(text))


def paths(text: str) -> tuple[str, ...]:
    """Every placeholder path in *text*, in order."""
    return tuple(s.path for s in parse_template(text) if isinstance(s, PathRef))


# ---------------------------------------------------------------------------
# Server target (SpEL)
# ---------------------------------------------------------------------------


def to_map_access(path: str) -> str:
    """``item.name.first`` -> ``item['name']['first']``.

    The first segment stays a bare variable; numeric segments become list
    indexes.
    """
    head, *rest = path.split(".")
    accessors = "".join(
        f"[{seg}]" if seg.isdigit() else f"[{quote_literal(seg)}]" for seg in rest
    )
    return head + accessors


def quote_literal(text: str) -> str:
    """Quote *text* as a SpEL string literal (``'`` doubles to ``''``)."""
    return "'" + text.replace("'", "''") + "'"


def to_server_expression(text: str) -> str:
    """Translate authored text to a SpEL expression body.

    - no placeholders: a single quoted literal,
    - exactly one placeholder and nothing else: the bare map access,
    - otherwise literal and path parts joined with `` + ``.
    """
    segments = parse_template(text)
    if len(segments) == 1 and isinstance(segments[0], PathRef):
        return to_map_access(segments[0].path)
    if not any(isinstance(s, PathRef) for s in segments):
        return quote_literal(text)
    return " + ".join(
        to_map_access(s.path) if isinstance(s, PathRef) else quote_literal(s.text)
        for s in segments
    )


def server_binding(text: str) -> str:
    """The full ``${...}`` form used in ``th:text`` and friends."""
    return "${" + to_server_expression(text) + "}"


# ---------------------------------------------------------------------------
# Static target
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class StaticResolution:
    """Result of resolving placeholders against static data.

    Attributes:
        text: Text with resolved values substituted and unresolved
            placeholders removed.
        unresolved: Paths that had no value in scope.

    """

    text: str
    unresolved: tuple[str, ...] = ()


def resolve_static(text: str, scope: Mapping[str, object]) -> StaticResolution:
    """Substitute placeholders whose root variable is bound in *scope*.

    Literal runs are always kept.  A placeholder that cannot be resolved
    becomes the empty string and is listed in ``unresolved``.
    """
    out: list[str] = []
    missing: list[str] = []
    for segment in parse_template(text):
        if isinstance(segment, TextRun):
            out.append(segment.text)
            continue
        root, _, rest = segment.path.partition(".")
        if root not in scope:
            missing.append(segment.path)
            continue
        value, found = (scope[root], True) if not rest else lookup_path(scope[root], rest)  # type: ignore[arg-type]
        if not found:
            missing.append(segment.path)
            continue
        out.append(display_value(value))
    return StaticResolution(text="".join(out), unresolved=tuple(missing))


def display_value(value: object) -> str:
    """Text form of a resolved value (JSON for containers, ``""`` for null)."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, dict)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return str(value)


def _merge_runs(parts: list[Segment]) -> list[Segment]:
    merged: list[Segment] = []
    for part in parts:
        if isinstance(part, TextRun) and merged and isinstance(merged[-1], TextRun):
            merged[-1] = TextRun(merged[-1].text + part.text)
        else:
            merged.append(part)
    return merged
