"""Export summary — target-aware status output.

Prints what an export produced, followed by its diagnostics.  Detects
``NO_COLOR`` / ``TERM`` for safe fallback.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING, TextIO

from sitexport.observability import AssetFetchFailed

if TYPE_CHECKING:
    from sitexport.export.base import ExportResult


# ---------------------------------------------------------------------------
# ANSI helpers; respect NO_COLOR (https://no-color.org)
# ---------------------------------------------------------------------------

def _supports_color() -> bool:
    """Return True if the terminal supports ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


_COLOR = _supports_color()

_RESET = "\033[0m" if _COLOR else ""
_BOLD = "\033[1m" if _COLOR else ""
_DIM = "\033[2m" if _COLOR else ""
_CYAN = "\033[36m" if _COLOR else ""
_GREEN = "\033[32m" if _COLOR else ""
_YELLOW = "\033[33m" if _COLOR else ""
_RED = "\033[31m" if _COLOR else ""


# ---------------------------------------------------------------------------
# Target badges
# ---------------------------------------------------------------------------

_TARGET_STYLES: dict[str, tuple[str, str]] = {
    "static": (_GREEN, "static"),
    "server": (_CYAN, "project"),
}


def _target_badge(target: str) -> str:
    """Return a styled [target] badge."""
    color, label = _TARGET_STYLES.get(target, (_DIM, target))
    return f"{color}[{label}]{_RESET}"


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def print_export_summary(
    result: ExportResult,
    *,
    load_ms: float = 0.0,
    file: TextIO | None = None,
) -> None:
    """Print the export summary to stderr.

    Args:
        result: Result of the export run.
        load_ms: Time spent reading the page document in milliseconds.
        file: Stream to write to instead of stderr.

    """
    from sitexport import __version__

    diagnostics = result.diagnostics
    warnings = diagnostics.summary_lines()

    lines: list[str] = [
        "",
        f"  {_BOLD}sitexport{_RESET} {_DIM}v{__version__}{_RESET}  {_target_badge(result.target)}",
        f"  {_DIM}{'─' * 43}{_RESET}",
    ]

    timing = f" {_DIM}in {load_ms:.0f}ms{_RESET}" if load_ms > 0 else ""
    lines.append(f"  {_DIM}├─{_RESET} {_plural(result.total_pages, 'page')} loaded{timing}")
    lines.append(f"  {_DIM}├─{_RESET} {_plural(len(result.files), 'file')} generated")
    if result.total_assets > 0:
        lines.append(f"  {_DIM}├─{_RESET} {_plural(result.total_assets, 'image')} packaged")
    omitted = sum(1 for e in diagnostics.failures if isinstance(e, AssetFetchFailed))
    if omitted:
        lines.append(f"  {_DIM}├─{_RESET} {_YELLOW}{_plural(omitted, 'image')} omitted{_RESET}")

    done = f"done in {result.duration_ms:.0f}ms"
    if result.output is not None:
        lines.append(f"  {_DIM}└─{_RESET} output: {_DIM}{result.output}{_RESET} {_DIM}({done}){_RESET}")
    else:
        lines.append(f"  {_DIM}└─{_RESET} {_DIM}{done}{_RESET}")

    if warnings:
        lines.append("")
        lines.extend(f"  {_YELLOW}!{_RESET} {w}" for w in warnings)

    lines.append("")

    print("\n".join(lines), file=file if file is not None else sys.stderr)


def print_error(message: str, *, file: TextIO | None = None) -> None:
    """Print a fatal error line to stderr."""
    print(f"{_RED}error:{_RESET} {message}", file=file if file is not None else sys.stderr)
