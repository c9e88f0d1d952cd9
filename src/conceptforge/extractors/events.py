"""
Event extraction with cross-framework normalization and validation.

Richer than the analyzer's event pass: counts which dialect each event was
written in, checks handlers and dialect/framework mismatches, and can run
the normalizer over the result.
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field

from conceptforge.analyzer.event_syntax import DEFAULT_EVENT_PREFIXES, split_event_attribute
from conceptforge.analyzer.template_analyzer import addressable_children
from conceptforge.core.diagnostics import ErrorCollector, Severity
from conceptforge.core.node_ids import generate_node_id
from conceptforge.normalization.events import (
    EventNormalizationOptions,
    EventNormalizer,
    NormalizedEvent,
)
from conceptforge.specs.concepts import EventConcept
from conceptforge.specs.template import ElementNode, TemplateNode, parse_template
from conceptforge.specs.validation import ValidationSeverity, ValidationWarning

logger = logging.getLogger(__name__)

EVENT_EXTRACTOR_EXTENSION = "event-extractor"

_FUNCTION_CALL_RE = re.compile(r"\w+\s*\(([^)]*)\)")
_ARROW_PARAMS_RE = re.compile(r"\(([^)]*)\)\s*=>")
_EVENT_LIKE_RE = re.compile(r"^(on|@|v-on:|bind:)")

PREFIX_DIALECTS = {
    "on": "react",
    "@": "vue",
    "v-on:": "vue",
    "on:": "svelte",
    "bind:": "svelte",
}

_FRAMEWORK_STYLES = {
    "react": "React (onClick, onSubmit, etc.)",
    "vue": "Vue (@click, @submit, etc.)",
    "svelte": "Svelte (on:click, on:submit, etc.)",
}

_VUE_MODIFIERS = ("stop", "prevent", "capture", "self", "once", "passive")
_SVELTE_MODIFIERS = ("preventDefault", "stopPropagation", "passive", "capture", "once")


@dataclass
class EventExtractionOptions:
    framework: str | None = "react"
    event_prefixes: list[str] = field(default_factory=lambda: list(DEFAULT_EVENT_PREFIXES))
    normalize_events: bool = True
    validate_events: bool = True
    extract_modifiers: bool = True
    extract_parameters: bool = True
    custom_patterns: list[re.Pattern[str]] = field(default_factory=list)


class EventExtractionMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    nodes_processed: int = 0
    events_found: int = 0
    processing_time: float = Field(default=0.0, description="Milliseconds")
    framework_patterns: dict[str, int] = Field(default_factory=dict)
    warnings: list[ValidationWarning] = Field(default_factory=list)


class EventExtractionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    events: list[EventConcept] = Field(default_factory=list)
    normalized: list[NormalizedEvent] = Field(default_factory=list)
    normalized_count: int = 0
    metadata: EventExtractionMetadata = Field(default_factory=EventExtractionMetadata)


class EventExtractor:
    """Extract, validate and normalize events from template trees."""

    def __init__(
        self,
        errors: ErrorCollector | None = None,
        normalizer: EventNormalizer | None = None,
    ) -> None:
        self.errors = errors if errors is not None else ErrorCollector()
        self.normalizer = normalizer or EventNormalizer(errors=ErrorCollector())

    def extract_events(
        self,
        template: list[TemplateNode] | list[dict],
        options: EventExtractionOptions | None = None,
    ) -> EventExtractionResult:
        options = options or EventExtractionOptions()
        started = time.perf_counter()
        nodes = parse_template(list(template))

        events: list[EventConcept] = []
        patterns: dict[str, int] = {}
        warnings: list[ValidationWarning] = []
        nodes_processed = self._walk(nodes, [], options, events, patterns, warnings)

        if options.validate_events and options.framework:
            warnings.extend(self._validate_events(events, options.framework))

        normalized: list[NormalizedEvent] = []
        if options.normalize_events and options.framework:
            sink = self.normalizer.get_errors()
            seen = len(sink)
            normalized = self.normalizer.normalize_events(
                events,
                EventNormalizationOptions(
                    framework=options.framework,
                    validate_events=options.validate_events,
                    preserve_modifiers=options.extract_modifiers,
                ),
            )
            events = [n.as_event() if n.was_normalized else n.original for n in normalized]
            fresh = sink.get_errors()[seen:]
            for warning in (e for e in fresh if e.severity == Severity.WARNING):
                warnings.append(
                    ValidationWarning(
                        severity=ValidationSeverity.WARNING,
                        message=warning.message,
                        source=warning.node_id,
                        suggestion="Check event normalization for framework compatibility",
                    )
                )
                if sink is not self.errors:
                    self.errors.add_error(warning)

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug("Extracted %d events from %d nodes", len(events), nodes_processed)

        return EventExtractionResult(
            events=events,
            normalized=normalized,
            normalized_count=sum(1 for n in normalized if n.was_normalized),
            metadata=EventExtractionMetadata(
                nodes_processed=nodes_processed,
                events_found=len(events),
                processing_time=elapsed_ms,
                framework_patterns=patterns,
                warnings=warnings,
            ),
        )

    def extract_events_from_node(
        self,
        node: TemplateNode,
        node_id: str,
        options: EventExtractionOptions | None = None,
    ) -> list[EventConcept]:
        """Events declared directly on one node; children are not visited."""
        options = options or EventExtractionOptions()
        return self._node_events(node, node_id, options, {}, [])

    def validate_event_for_framework(self, event: EventConcept, framework: str) -> list[str]:
        """Modifier compatibility problems for ``framework``."""
        if framework == "react":
            if event.modifiers:
                return [f"React doesn't support event modifiers: {', '.join(event.modifiers)}"]
            return []
        if framework == "vue":
            invalid = [m for m in event.modifiers if m not in _VUE_MODIFIERS]
            return [f"Invalid Vue modifiers: {', '.join(invalid)}"] if invalid else []
        if framework == "svelte":
            invalid = [m for m in event.modifiers if m not in _SVELTE_MODIFIERS]
            return [f"Invalid Svelte modifiers: {', '.join(invalid)}"] if invalid else []
        return []

    def get_errors(self) -> ErrorCollector:
        return self.errors

    def clear_errors(self) -> None:
        self.errors.clear()
        self.normalizer.clear_errors()

    # -------------------------------------------------------------------------

    def _walk(
        self,
        nodes: list[TemplateNode],
        path: list[int],
        options: EventExtractionOptions,
        events: list[EventConcept],
        patterns: dict[str, int],
        warnings: list[ValidationWarning],
    ) -> int:
        count = 0
        for index, node in enumerate(nodes):
            current = [*path, index]
            count += 1
            events.extend(
                self._node_events(node, generate_node_id(current), options, patterns, warnings)
            )
            count += self._walk(
                addressable_children(node), current, options, events, patterns, warnings
            )
        return count

    def _node_events(
        self,
        node: TemplateNode,
        node_id: str,
        options: EventExtractionOptions,
        patterns: dict[str, int],
        warnings: list[ValidationWarning],
    ) -> list[EventConcept]:
        if not isinstance(node, ElementNode):
            return []

        events = []
        merged = {**node.attributes, **node.expression_attributes}
        for attribute, value in merged.items():
            handler = str(value)
            dialect, name, modifiers = self._parse_attribute(attribute, options)
            if name is None:
                if self._could_be_event_attribute(attribute):
                    self._warn(
                        warnings,
                        f"Invalid event attribute: {attribute}",
                        node_id,
                        "Use valid event attribute names",
                    )
                continue

            patterns[dialect] = patterns.get(dialect, 0) + 1
            events.append(
                EventConcept(
                    node_id=node_id,
                    name=name.lower(),
                    handler=handler,
                    modifiers=modifiers if options.extract_modifiers else [],
                    parameters=(
                        self._extract_parameters(handler) if options.extract_parameters else []
                    ),
                    source_attribute=attribute,
                )
            )
        return events

    def _parse_attribute(
        self, attribute: str, options: EventExtractionOptions
    ) -> tuple[str, str | None, list[str]]:
        for pattern in options.custom_patterns:
            if pattern.search(attribute):
                return "custom", attribute, []
        parsed = split_event_attribute(attribute, options.event_prefixes)
        if parsed is None:
            return "unknown", None, []
        return PREFIX_DIALECTS.get(parsed.prefix, "unknown"), parsed.name, list(parsed.modifiers)

    @staticmethod
    def _could_be_event_attribute(attribute: str) -> bool:
        lowered = attribute.lower()
        if any(marker in lowered for marker in ("event", "click", "handler")):
            return True
        # ``on`` followed by nothing event-like is an ordinary attribute.
        return bool(_EVENT_LIKE_RE.match(attribute)) and not attribute.startswith("on")

    @staticmethod
    def _extract_parameters(handler: str) -> list[str]:
        parameters: list[str] = []
        for regex in (_FUNCTION_CALL_RE, _ARROW_PARAMS_RE):
            match = regex.search(handler)
            if match and match.group(1):
                parameters.extend(p.strip() for p in match.group(1).split(",") if p.strip())
        return parameters

    def _validate_events(
        self, events: list[EventConcept], framework: str
    ) -> list[ValidationWarning]:
        warnings: list[ValidationWarning] = []
        for event in events:
            if not event.handler.strip():
                self._warn(
                    warnings,
                    f"Event {event.name} has empty handler",
                    event.node_id,
                    "Provide a valid handler function",
                )
            attribute = event.source_attribute
            if attribute and framework in _FRAMEWORK_STYLES and not _matches_dialect(
                attribute, framework
            ):
                style = _FRAMEWORK_STYLES[framework]
                self._warn(
                    warnings,
                    f"Event {attribute} is not {style} syntax - framework mismatch",
                    event.node_id,
                    f"Use {style} syntax for this framework",
                )
        return warnings

    def _warn(
        self, warnings: list[ValidationWarning], message: str, node_id: str, suggestion: str
    ) -> None:
        warnings.append(
            ValidationWarning(
                severity=ValidationSeverity.WARNING,
                message=message,
                source=node_id,
                suggestion=suggestion,
            )
        )
        self.errors.add_warning(message, node_id, EVENT_EXTRACTOR_EXTENSION)


def _matches_dialect(attribute: str, framework: str) -> bool:
    if framework == "react":
        return attribute.startswith("on") and not attribute.startswith("on:")
    if framework == "vue":
        return attribute.startswith(("@", "v-on:"))
    return attribute.startswith("on:")
