"""Diagnostic event model for an export run.

Every recoverable problem and every produced artifact is described by a
frozen dataclass carrying:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import Literal


# ---------------------------------------------------------------------------
# Generation events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class GenerationWarning:
    """A construct could not be fully honoured by the chosen target.

    Attributes:
        code: Short machine-readable identifier (e.g. ``"unresolved-expression"``).
        message: Human-readable explanation.
        path: Page name or component id the warning refers to.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    code: str
    message: str
    path: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class InputRecovered:
    """Malformed input was replaced by a defined fallback.

    Attributes:
        path: Component id (or page name) holding the bad value.
        field: Name of the offending prop or field.
        fallback: Description of the value used instead.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    field: str
    fallback: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class ComponentFailed:
    """An emitter raised while rendering one component.

    Attributes:
        path: Component id.
        kind: Component kind tag.
        error: ``repr`` of the exception.
        source: ``"plugin"`` or ``"builtin"``.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    kind: str
    error: str
    source: Literal["plugin", "builtin"]
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Asset events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AssetFetched:
    """An external asset was downloaded.

    Attributes:
        path: Original URL.
        target: Local path assigned to the asset.
        size_bytes: Payload size.
        duration_ms: Time spent fetching.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    target: str
    size_bytes: int
    duration_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class AssetFetchFailed:
    """An external asset could not be downloaded and was omitted.

    Attributes:
        path: Original URL.
        reason: Transport error or HTTP status description.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    reason: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Packaging events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FileEmitted:
    """A file was added to the export archive.

    Attributes:
        path: Archive-relative path.
        category: Packaging category name.
        size_bytes: Encoded size.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    category: str
    size_bytes: int
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

type ExportEvent = (
    GenerationWarning
    | InputRecovered
    | ComponentFailed
    | AssetFetched
    | AssetFetchFailed
    | FileEmitted
)


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
