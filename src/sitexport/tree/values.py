"""Coercion helpers for the tagged prop-value union.

Props arrive from the editor as loosely typed JSON.  Emitters never
inspect raw values directly; they go through these helpers, which
return a defined fallback for every shape they do not expect.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sitexport._types import PropValue
    from sitexport.observability import DiagnosticCollector


def normalize(value: object) -> tuple[PropValue, bool]:
    """Fold an arbitrary decoded value into the PropValue union.

    Returns the normalised value and whether anything had to be coerced.
    Values outside the union are replaced by their ``str()`` form.
    """
    if value is None or isinstance(value, (str, bool, int, float)):
        return value, False
    if isinstance(value, (list, tuple)):
        items: list[PropValue] = []
        coerced = False
        for item in value:
            norm, changed = normalize(item)
            items.append(norm)
            coerced = coerced or changed
        return items, coerced
    if isinstance(value, Mapping):
        mapping: dict[str, PropValue] = {}
        coerced = False
        for k, v in value.items():
            norm, changed = normalize(v)
            mapping[str(k)] = norm
            coerced = coerced or changed or not isinstance(k, str)
        return mapping, coerced
    return str(value), True


def is_blank(value: PropValue) -> bool:
    """True for values the editor treats as unset (``None``, ``""``, ``False``)."""
    return value is None or value == "" or value is False


def as_str(value: PropValue, default: str = "") -> str:
    """Render a scalar prop as text; containers and blanks give *default*."""
    if value is None or isinstance(value, (list, dict)) or value is False or value == "":
        return default
    if value is True:
        return "true"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def as_bool(value: PropValue) -> bool:
    """Truthiness as the editor sees it (``"false"`` and ``"0"`` are false)."""
    if isinstance(value, str):
        return value.strip().lower() not in ("", "false", "0", "no", "off")
    return bool(value)


def as_list(
    value: PropValue,
    *,
    collector: DiagnosticCollector | None = None,
    path: str = "",
    field: str = "",
) -> list[PropValue]:
    """Return a list prop, decoding JSON-encoded strings.

    A string that does not decode to a list yields ``[]`` and, when a
    collector is given, an ``InputRecovered`` diagnostic.
    """
    if isinstance(value, list):
        return value
    if value is None or value == "":
        return []
    if isinstance(value, str):
        try:
            decoded = json.loads(value)
        except json.JSONDecodeError:
            decoded = None
        if isinstance(decoded, list):
            return normalize(decoded)[0]  # type: ignore[return-value]
    if collector is not None:
        collector.record_recovery(path, field, "an empty list")
    return []


def as_mapping(value: PropValue) -> dict[str, PropValue]:
    """Return a mapping prop, or an empty dict for anything else."""
    if isinstance(value, dict):
        return value
    return {}


def css_length(value: PropValue) -> str:
    """Express a size prop as a CSS length (numbers become pixels)."""
    if isinstance(value, bool) or value is None:
        return ""
    if isinstance(value, (int, float)):
        return f"{as_str(value)}px"
    return as_str(value)


def lookup_path(data: PropValue, path: str) -> tuple[PropValue, bool]:
    """Walk a dotted path through nested mappings and lists.

    Returns ``(value, found)``.  Numeric segments index into lists.
    """
    current = data
    for segment in path.split("."):
        if isinstance(current, dict) and segment in current:
            current = current[segment]
        elif isinstance(current, list) and segment.isdigit() and int(segment) < len(current):
            current = current[int(segment)]
        else:
            return None, False
    return current, True
