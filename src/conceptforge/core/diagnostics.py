"""
Diagnostics sink shared by every pipeline stage.

Anything that goes wrong with *data* (a conditional without a condition, an
unknown event, a prop conflict) is recorded here instead of raised.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .node_ids import ROOT_NODE_ID

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    """Diagnostic severity levels."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


_SEVERITY_MARKERS = {
    Severity.ERROR: "  [error]",
    Severity.WARNING: "  [warning]",
    Severity.INFO: "  [info]",
}


class ProcessingError(BaseModel):
    """One diagnostic entry."""

    model_config = ConfigDict(frozen=True)

    message: str
    node_id: str = Field(default=ROOT_NODE_ID, description="Address of the offending node")
    extension: str | None = Field(default=None, description="Stage or extension that reported it")
    severity: Severity = Severity.ERROR
    context: dict[str, Any] | None = None


class ErrorCollector:
    """
    Ordered collection of diagnostics.

    One collector is shared by the stages of a single call. Long-lived owners
    (the engine, the pipeline) must ``clear()`` it between independent calls.
    """

    def __init__(self) -> None:
        self._errors: list[ProcessingError] = []

    def add_error(self, error: ProcessingError) -> None:
        self._errors.append(error)
        logger.debug(
            "%s at %s [%s]: %s", error.severity.value, error.node_id, error.extension, error.message
        )

    def add_simple_error(
        self,
        message: str,
        node_id: str = ROOT_NODE_ID,
        extension: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.add_error(
            ProcessingError(
                message=message,
                node_id=node_id,
                extension=extension,
                severity=Severity.ERROR,
                context=context,
            )
        )

    def add_warning(
        self,
        message: str,
        node_id: str = ROOT_NODE_ID,
        extension: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.add_error(
            ProcessingError(
                message=message,
                node_id=node_id,
                extension=extension,
                severity=Severity.WARNING,
                context=context,
            )
        )

    def add_info(
        self,
        message: str,
        node_id: str = ROOT_NODE_ID,
        extension: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.add_error(
            ProcessingError(
                message=message,
                node_id=node_id,
                extension=extension,
                severity=Severity.INFO,
                context=context,
            )
        )

    def extend(self, other: ErrorCollector) -> None:
        """Append every diagnostic of ``other``, preserving order."""
        for error in other.get_errors():
            self.add_error(error)

    def get_errors(self) -> list[ProcessingError]:
        """Return a copy of all diagnostics in insertion order."""
        return list(self._errors)

    def get_errors_by_severity(self, severity: Severity | str) -> list[ProcessingError]:
        severity = Severity(severity)
        return [e for e in self._errors if e.severity == severity]

    def has_errors(self) -> bool:
        return any(e.severity == Severity.ERROR for e in self._errors)

    def has_warnings(self) -> bool:
        return any(e.severity == Severity.WARNING for e in self._errors)

    def clear(self) -> None:
        self._errors.clear()

    def get_error_count(self, severity: Severity | str | None = None) -> int:
        if severity is None:
            return len(self._errors)
        return len(self.get_errors_by_severity(severity))

    def __len__(self) -> int:
        return len(self._errors)

    def format_errors(self) -> str:
        """Render diagnostics grouped by node for terminal output."""
        if not self._errors:
            return "No errors or warnings"

        by_node: dict[str, list[ProcessingError]] = {}
        for error in self._errors:
            by_node.setdefault(error.node_id, []).append(error)

        lines: list[str] = []
        for node_id, node_errors in by_node.items():
            lines.append(f"\nNode: {node_id}")
            for error in node_errors:
                extension = f" [{error.extension}]" if error.extension else ""
                lines.append(f"{_SEVERITY_MARKERS[error.severity]} {error.message}{extension}")
                if error.context:
                    rendered = json.dumps(error.context, indent=2, default=str)
                    lines.append("     Context: " + rendered.replace("\n", "\n     "))

        return "\n".join(lines)
