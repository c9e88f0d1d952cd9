"""Concept validation and cross-framework consistency checks."""

from .concepts import ConceptValidator, ValidationOptions, ValidationRule
from .consistency import (
    FRAMEWORK_CONSTRAINTS,
    ConsistencyRecommendation,
    ConsistencyReport,
    FrameworkConsistencyChecker,
    FrameworkConstraints,
    FrameworkReport,
)
from .plugins import (
    AccessibilityPlugin,
    FrameworkCompatibilityPlugin,
    PerformancePlugin,
    ValidationPlugin,
)

__all__ = [
    "FRAMEWORK_CONSTRAINTS",
    "AccessibilityPlugin",
    "ConceptValidator",
    "ConsistencyRecommendation",
    "ConsistencyReport",
    "FrameworkCompatibilityPlugin",
    "FrameworkConsistencyChecker",
    "FrameworkConstraints",
    "FrameworkReport",
    "PerformancePlugin",
    "ValidationOptions",
    "ValidationPlugin",
    "ValidationRule",
]
