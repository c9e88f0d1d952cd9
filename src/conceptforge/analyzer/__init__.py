"""Concept extraction from template trees."""

from .event_syntax import (
    DEFAULT_EVENT_PREFIXES,
    KNOWN_DOM_EVENTS,
    EventAttribute,
    extract_call_parameters,
    split_event_attribute,
)
from .style_syntax import parse_inline_styles
from .template_analyzer import AnalyzerOptions, TemplateAnalyzer, addressable_children

__all__ = [
    "DEFAULT_EVENT_PREFIXES",
    "KNOWN_DOM_EVENTS",
    "AnalyzerOptions",
    "EventAttribute",
    "TemplateAnalyzer",
    "addressable_children",
    "extract_call_parameters",
    "parse_inline_styles",
    "split_event_attribute",
]
