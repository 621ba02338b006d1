"""Event log — ordered, thread-safe store for one export run.

Nothing is evicted: an export run produces a bounded number of events and
the summary must list every one of them.  Queries return events in the
order they were recorded so diagnostics read the same on every run.

Thread Safety:
    All methods are protected by a ``threading.Lock``.  Asset fetch tasks
    and the render step may append concurrently.

"""

import threading
from collections import Counter
from collections.abc import Iterable
from typing import Any

from sitexport.observability.events import ExportEvent


class EventLog:
    """Append-only event store with filtering."""

    __slots__ = ("_events", "_lock")

    def __init__(self) -> None:
        self._events: list[ExportEvent] = []
        self._lock = threading.Lock()

    def append(self, event: ExportEvent) -> None:
        """Record one event."""
        with self._lock:
            self._events.append(event)

    def extend(self, events: Iterable[ExportEvent]) -> None:
        """Record several events, keeping their order."""
        with self._lock:
            self._events.extend(events)

    def query(
        self,
        *,
        event_type: type | tuple[type, ...] | None = None,
        path: str | None = None,
        since_ns: int = 0,
    ) -> list[ExportEvent]:
        """Events matching every given filter, oldest first.

        Args:
            event_type: Event class (or tuple of classes) to keep.
            path: Keep events whose ``path`` starts with this prefix
                (a page name selects that page's components).
            since_ns: Keep events recorded at or after this timestamp.

        """
        with self._lock:
            events = list(self._events)
        return [
            e for e in events
            if (event_type is None or isinstance(e, event_type))
            and (path is None or e.path.startswith(path))
            and e.timestamp_ns >= since_ns
        ]

    def all(self) -> list[ExportEvent]:
        """Every event, oldest first."""
        with self._lock:
            return list(self._events)

    def clear(self) -> int:
        """Drop every event; returns how many there were."""
        with self._lock:
            count = len(self._events)
            self._events.clear()
        return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def stats(self) -> dict[str, Any]:
        """Event counts, in total and per event class."""
        with self._lock:
            by_type = Counter(type(e).__name__ for e in self._events)
            total = len(self._events)
        return {"total": total, "by_type": dict(by_type)}
