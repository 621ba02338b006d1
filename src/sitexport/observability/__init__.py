"""Export diagnostics — a unified event model for one export run.

Aggregates events from:
- **Emitters**: malformed props, failed components, target constraints
- **Asset collector**: fetched and omitted assets
- **Packager**: files written to the archive

All events are frozen dataclasses with nanosecond timestamps, safe for
concurrent production from the asset fetch tasks.

Quick Start:
    >>> from sitexport.observability import DiagnosticCollector, EventLog
    >>> log = EventLog()
    >>> collector = DiagnosticCollector(log)
    >>> collector.record_warning("dynamic-data-source", "api source skipped")

"""

from sitexport.observability.collector import DiagnosticCollector
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

__all__ = [
    "AssetFetchFailed",
    "AssetFetched",
    "ComponentFailed",
    "DiagnosticCollector",
    "EventLog",
    "ExportEvent",
    "FileEmitted",
    "GenerationWarning",
    "InputRecovered",
    "now_ns",
]
