"""Diagnostic collector — the single sink every export stage reports into.

Emitters, the asset collector, the scaffold synthesizer, and the packager
each receive the same collector and call its ``record_*`` methods instead
of raising for recoverable problems.

Thread Safety:
    The collector delegates to ``EventLog`` which is internally locked.
    Safe to share across concurrent fetch tasks.

"""

from __future__ import annotations

from typing import Literal

from sitexport.observability.events import (
    AssetFetched,
    AssetFetchFailed,
    ComponentFailed,
    ExportEvent,
    FileEmitted,
    GenerationWarning,
    InputRecovered,
    now_ns,
)
from sitexport.observability.log import EventLog


class DiagnosticCollector:
    """Records diagnostics for one export run.

    Args:
        log: The EventLog to store events in.

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    def record(self, event: ExportEvent) -> None:
        """Record a pre-built event."""
        self._log.append(event)

    # ----- Generation -----

    def record_warning(self, code: str, message: str, *, path: str = "") -> None:
        """Record a target constraint that could not be honoured."""
        self._log.append(
            GenerationWarning(
                code=code,
                message=message,
                path=path,
                timestamp_ns=now_ns(),
            )
        )

    def record_recovery(self, path: str, field: str, fallback: str) -> None:
        """Record malformed input replaced by a fallback value."""
        self._log.append(
            InputRecovered(
                path=path,
                field=field,
                fallback=fallback,
                timestamp_ns=now_ns(),
            )
        )

    def record_component_failure(
        self,
        path: str,
        kind: str,
        exc: BaseException,
        *,
        source: Literal["plugin", "builtin"] = "builtin",
    ) -> None:
        """Record an emitter exception."""
        self._log.append(
            ComponentFailed(
                path=path,
                kind=kind,
                error=repr(exc),
                source=source,
                timestamp_ns=now_ns(),
            )
        )

    # ----- Assets -----

    def record_asset_fetched(
        self,
        url: str,
        target: str,
        *,
        size_bytes: int = 0,
        duration_ms: float = 0.0,
    ) -> None:
        """Record a successful asset download."""
        self._log.append(
            AssetFetched(
                path=url,
                target=target,
                size_bytes=size_bytes,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_asset_failed(self, url: str, reason: str) -> None:
        """Record an asset that was omitted from the export."""
        self._log.append(
            AssetFetchFailed(path=url, reason=reason, timestamp_ns=now_ns())
        )

    # ----- Packaging -----

    def record_file(self, path: str, category: str, size_bytes: int) -> None:
        """Record a file added to the archive."""
        self._log.append(
            FileEmitted(
                path=path,
                category=category,
                size_bytes=size_bytes,
                timestamp_ns=now_ns(),
            )
        )

    # ----- Inspection -----

    @property
    def warnings(self) -> list[GenerationWarning]:
        """Generation warnings in the order they were recorded."""
        return self._log.query(event_type=GenerationWarning)  # type: ignore[return-value]

    @property
    def recoveries(self) -> list[InputRecovered]:
        """Input recoveries in the order they were recorded."""
        return self._log.query(event_type=InputRecovered)  # type: ignore[return-value]

    @property
    def failures(self) -> list[AssetFetchFailed | ComponentFailed]:
        """Asset and component failures in the order they were recorded."""
        return self._log.query(event_type=(AssetFetchFailed, ComponentFailed))  # type: ignore[return-value]

    def summary_lines(self) -> list[str]:
        """One human-readable line per non-informational diagnostic."""
        lines: list[str] = []
        for event in self._log.all():
            match event:
                case GenerationWarning(code=code, message=message, path=path):
                    lines.append(f"{path}: {message} [{code}]" if path else f"{message} [{code}]")
                case InputRecovered(path=path, field=field, fallback=fallback):
                    lines.append(f"{path}: malformed {field!r}, using {fallback}")
                case ComponentFailed(path=path, kind=kind, error=error, source=source):
                    lines.append(f"{path}: {source} emitter for {kind} failed ({error})")
                case AssetFetchFailed(path=path, reason=reason):
                    lines.append(f"asset {path} omitted ({reason})")
        return lines
