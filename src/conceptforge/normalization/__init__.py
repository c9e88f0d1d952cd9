"""Cross-framework event normalization."""

from .events import (
    EVENT_NORMALIZATION,
    SVELTE_EVENT_MODIFIERS,
    VUE_EVENT_MODIFIERS,
    EventNormalizationOptions,
    EventNormalizer,
    FrameworkEventMapping,
    NormalizedEvent,
)

__all__ = [
    "EVENT_NORMALIZATION",
    "SVELTE_EVENT_MODIFIERS",
    "VUE_EVENT_MODIFIERS",
    "EventNormalizationOptions",
    "EventNormalizer",
    "FrameworkEventMapping",
    "NormalizedEvent",
]
