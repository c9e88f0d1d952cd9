"""Specialized event and styling extractors."""

from .events import (
    EventExtractionMetadata,
    EventExtractionOptions,
    EventExtractionResult,
    EventExtractor,
)
from .styling import (
    CSS_FRAMEWORK_PATTERNS,
    CSSValidationResult,
    StylingExtractionMetadata,
    StylingExtractionOptions,
    StylingExtractionResult,
    StylingExtractor,
)

__all__ = [
    "CSS_FRAMEWORK_PATTERNS",
    "CSSValidationResult",
    "EventExtractionMetadata",
    "EventExtractionOptions",
    "EventExtractionResult",
    "EventExtractor",
    "StylingExtractionMetadata",
    "StylingExtractionOptions",
    "StylingExtractionResult",
    "StylingExtractor",
]
