"""Escaping and inline-style serialization shared by every emitter."""

from __future__ import annotations

import html
import re
from collections.abc import Mapping

_UPPER_RE = re.compile(r"([A-Z])")


def escape(text: str) -> str:
    """Escape ``& < > " '`` for element content and attribute values."""
    return html.escape(text, quote=True)


def camel_to_kebab(name: str) -> str:
    """``backgroundColor`` -> ``background-color``."""
    return _UPPER_RE.sub(r"-\1", name).lower()


def inline_style(styles: Mapping[str, str]) -> str:
    """Serialize a style map to ``prop: value; prop: value``.

    Empty values are skipped.  Double quotes in values are escaped so they
    cannot terminate the ``style`` attribute; single quotes (``url('...')``)
    are left alone.
    """
    return "; ".join(
        f"{camel_to_kebab(key)}: {_attr_value(value)}"
        for key, value in styles.items()
        if value != ""
    )


def style_attr(styles: Mapping[str, str]) -> str:
    """`` style="..."`` with a leading space, or ``""`` when there is nothing to set."""
    css = inline_style(styles)
    return f' style="{css}"' if css else ""


def _attr_value(value: str) -> str:
    return value.replace('"', "&quot;")


def escape_expression(expr: str) -> str:
    """Escape an expression for a double-quoted attribute.

    Single quotes are SpEL string delimiters and stay readable; only
    ``& < > "`` are replaced.
    """
    return (
        expr.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )
