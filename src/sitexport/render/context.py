"""Per-page render state threaded through the emitters."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from sitexport.render.expressions import malformed_placeholders

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sitexport.observability import DiagnosticCollector
    from sitexport.render.dialect import Dialect
    from sitexport.render.registry import EmitterRegistry
    from sitexport.tree.arena import ComponentTree


@dataclass(frozen=True, slots=True)
class RenderContext:
    """Everything an emitter may consult besides the component itself.

    Attributes:
        dialect: Target dialect (static or server).
        tree: Indexed tree of the page being rendered.
        collector: Diagnostic sink for the run.
        page_name: Name of the page, used as diagnostic path prefix.
        registry: Plugin emitter registry, if any.
        scope: Static data visible to placeholders (page sources and the
            current repeater item).
        id_suffix: Appended to element ids inside expanded repeater items
            so repeated children keep unique ids.

    """

    dialect: Dialect
    tree: ComponentTree
    collector: DiagnosticCollector
    page_name: str = ""
    registry: EmitterRegistry | None = None
    scope: Mapping[str, object] = field(default_factory=dict)
    id_suffix: str = ""

    def with_scope(self, **bindings: object) -> RenderContext:
        """Return a copy with *bindings* layered over the current scope."""
        return replace(self, scope={**self.scope, **bindings})

    def element_id(self, instance_id: str) -> str:
        return f"component-{instance_id}{self.id_suffix}"

    def diagnostic_path(self, instance_id: str) -> str:
        return f"{self.page_name}#{instance_id}" if self.page_name else instance_id

    def warn_unresolved(self, instance_id: str, unresolved: tuple[str, ...]) -> None:
        """Report placeholders the static target could not evaluate."""
        for path in unresolved:
            self.collector.record_warning(
                "unresolved-expression",
                f"{{{{{path}}}}} has no static value and was left empty",
                path=self.diagnostic_path(instance_id),
            )

    def warn_malformed(self, instance_id: str, text: str) -> None:
        """Report placeholders that are not property paths (kept as literal text)."""
        for body in malformed_placeholders(text):
            self.collector.record_warning(
                "malformed-expression",
                f"{{{{{body}}}}} is not a property path and was kept as text",
                path=self.diagnostic_path(instance_id),
            )
