"""
Cross-framework event normalization.

Every event is joined through its canonical name: ``@click``, ``onClick``
and ``on:click`` all normalize to ``click``, which then maps back out to the
target framework's attribute spelling. Normalization never fails; unknown
events pass through unchanged with a warning.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from conceptforge.analyzer.event_syntax import KNOWN_DOM_EVENTS
from conceptforge.core.diagnostics import ErrorCollector
from conceptforge.specs.concepts import EventConcept

logger = logging.getLogger(__name__)

NORMALIZER_EXTENSION = "event-normalizer"


@dataclass(frozen=True)
class FrameworkEventMapping:
    """Attribute spelling of one canonical event in each framework."""

    vue: str
    react: str
    svelte: str

    def for_framework(self, framework: str) -> str | None:
        return getattr(self, framework, None) if framework in ("vue", "react", "svelte") else None


def _mapping(common: str, react: str) -> FrameworkEventMapping:
    return FrameworkEventMapping(vue=f"@{common}", react=react, svelte=f"on:{common}")


EVENT_NORMALIZATION: dict[str, FrameworkEventMapping] = {
    "click": _mapping("click", "onClick"),
    "change": _mapping("change", "onChange"),
    "submit": _mapping("submit", "onSubmit"),
    "input": _mapping("input", "onInput"),
    "focus": _mapping("focus", "onFocus"),
    "blur": _mapping("blur", "onBlur"),
    "keydown": _mapping("keydown", "onKeyDown"),
    "keyup": _mapping("keyup", "onKeyUp"),
    "mousedown": _mapping("mousedown", "onMouseDown"),
    "mouseup": _mapping("mouseup", "onMouseUp"),
    "mouseover": _mapping("mouseover", "onMouseOver"),
    "mouseout": _mapping("mouseout", "onMouseOut"),
    "mouseenter": _mapping("mouseenter", "onMouseEnter"),
    "mouseleave": _mapping("mouseleave", "onMouseLeave"),
    "load": _mapping("load", "onLoad"),
    "error": _mapping("error", "onError"),
    "resize": _mapping("resize", "onResize"),
    "scroll": _mapping("scroll", "onScroll"),
}

VUE_EVENT_MODIFIERS = frozenset(
    {
        "stop",
        "prevent",
        "capture",
        "self",
        "once",
        "passive",
        "left",
        "right",
        "middle",
        "ctrl",
        "alt",
        "shift",
        "meta",
    }
)
SVELTE_EVENT_MODIFIERS = frozenset(
    {"preventDefault", "stopPropagation", "passive", "capture", "once", "self", "trusted"}
)

# Checked longest first so ``on:click`` never strips as ``on`` + ``:click``.
_PREFIXES = ("v-on:", "on:", "@", "on")


@dataclass
class EventNormalizationOptions:
    framework: str = "react"
    preserve_modifiers: bool = True
    validate_events: bool = True
    custom_mappings: dict[str, FrameworkEventMapping] = field(default_factory=dict)


@dataclass(frozen=True)
class NormalizedEvent:
    """An event resolved to its canonical name and target attribute."""

    original: EventConcept
    common_name: str
    framework_attribute: str
    modifiers: list[str]
    was_normalized: bool

    def as_event(self) -> EventConcept:
        """The original event renamed to its canonical name."""
        return self.original.model_copy(
            update={"name": self.common_name, "modifiers": list(self.modifiers)}
        )


class EventNormalizer:
    """
    Table-driven event name translation.

    Each instance owns its own copy of the table, so custom mappings added
    to one normalizer never leak into another.
    """

    def __init__(
        self,
        custom_mappings: dict[str, FrameworkEventMapping] | None = None,
        errors: ErrorCollector | None = None,
    ) -> None:
        self.errors = errors if errors is not None else ErrorCollector()
        self._mappings: dict[str, FrameworkEventMapping] = {
            **EVENT_NORMALIZATION,
            **(custom_mappings or {}),
        }

    def normalize_events(
        self, events: list[EventConcept], options: EventNormalizationOptions
    ) -> list[NormalizedEvent]:
        return [self.normalize_event(event, options) for event in events]

    def normalize_event(
        self, event: EventConcept | NormalizedEvent, options: EventNormalizationOptions
    ) -> NormalizedEvent:
        if isinstance(event, NormalizedEvent):
            event = event.as_event()

        common_name = self.extract_common_event_name(event.name)
        mapping = self.find_event_mapping(common_name, options.custom_mappings)

        if mapping is None:
            if options.validate_events:
                self.errors.add_warning(
                    f"No normalization mapping found for event: {common_name}",
                    event.node_id,
                    NORMALIZER_EXTENSION,
                )
            return NormalizedEvent(
                original=event,
                common_name=common_name,
                framework_attribute=event.name,
                modifiers=list(event.modifiers),
                was_normalized=False,
            )

        framework_attribute = mapping.for_framework(options.framework) or event.name
        modifiers = list(event.modifiers) if options.preserve_modifiers else []

        if options.validate_events:
            self._validate_for_framework(event, options.framework)

        return NormalizedEvent(
            original=event,
            common_name=common_name,
            framework_attribute=framework_attribute,
            modifiers=modifiers,
            was_normalized=True,
        )

    def extract_common_event_name(self, event_name: str) -> str:
        """
        Strip a framework prefix and modifier suffixes, then lower-case.

        The bare ``on`` prefix is only stripped when what follows looks like
        an event (``onClick``, ``onclick``), so ``online`` stays ``online``.
        """
        name = event_name
        for prefix in _PREFIXES:
            if not name.startswith(prefix) or len(name) == len(prefix):
                continue
            rest = name[len(prefix) :]
            if prefix == "on" and not (
                rest[0].isupper() or _base_name(rest).lower() in self._known_names()
            ):
                continue
            name = rest
            break
        return _base_name(name).lower()

    def find_event_mapping(
        self,
        common_name: str,
        custom_mappings: dict[str, FrameworkEventMapping] | None = None,
    ) -> FrameworkEventMapping | None:
        if custom_mappings and common_name in custom_mappings:
            return custom_mappings[common_name]
        return self._mappings.get(common_name)

    def find_common_name_from_framework(self, framework_event: str, framework: str) -> str | None:
        for common_name, mapping in self._mappings.items():
            if mapping.for_framework(framework) == framework_event:
                return common_name
        return None

    def get_supported_events(self, framework: str) -> list[str]:
        return [
            attribute
            for attribute in (m.for_framework(framework) for m in self._mappings.values())
            if attribute
        ]

    def get_common_event_names(self) -> list[str]:
        return list(self._mappings)

    def add_custom_mapping(self, common_name: str, mapping: FrameworkEventMapping) -> None:
        self._mappings[common_name] = mapping
        logger.debug("Added event mapping for %s", common_name)

    def remove_mapping(self, common_name: str) -> None:
        self._mappings.pop(common_name, None)

    def get_mappings(self) -> dict[str, FrameworkEventMapping]:
        return dict(self._mappings)

    def validate_modifiers(self, event: EventConcept, framework: str) -> list[str]:
        """Return modifier problems of ``event`` for ``framework`` without recording them."""
        if framework == "react":
            if event.modifiers:
                return [
                    "React doesn't support event modifiers directly: " + ", ".join(event.modifiers)
                ]
            return []
        if framework == "vue":
            return [
                f"Unknown Vue event modifier: {m}"
                for m in event.modifiers
                if m not in VUE_EVENT_MODIFIERS
            ]
        if framework == "svelte":
            return [
                f"Unknown Svelte event modifier: {m}"
                for m in event.modifiers
                if m not in SVELTE_EVENT_MODIFIERS
            ]
        return []

    def _validate_for_framework(self, event: EventConcept, framework: str) -> None:
        for message in self.validate_modifiers(event, framework):
            self.errors.add_warning(message, event.node_id, NORMALIZER_EXTENSION)

    def _known_names(self) -> frozenset[str]:
        return KNOWN_DOM_EVENTS | frozenset(self._mappings)

    def get_errors(self) -> ErrorCollector:
        return self.errors

    def clear_errors(self) -> None:
        self.errors.clear()


def _base_name(name: str) -> str:
    return name.split(".", 1)[0].split("|", 1)[0]
