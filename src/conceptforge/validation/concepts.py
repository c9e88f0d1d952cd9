"""
Per-concept validation with warnings, suggestions and a score.

Validation never blocks output. Each concept kind starts at a score of 1.0
and loses a fixed penalty per issue; the component score is the minimum of
the per-kind scores. A result is invalid only when it carries an
ERROR-severity warning.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from conceptforge.analyzer.style_syntax import camel_to_kebab
from conceptforge.core.diagnostics import ErrorCollector
from conceptforge.specs.concepts import (
    AttributeConcept,
    ComponentConcept,
    ConditionalConcept,
    EventConcept,
    IterationConcept,
    SlotConcept,
    StylingConcept,
)
from conceptforge.specs.validation import (
    ValidationResult,
    ValidationSeverity,
    ValidationSuggestion,
    ValidationWarning,
)

if TYPE_CHECKING:
    from conceptforge.validation.plugins import ValidationPlugin

logger = logging.getLogger(__name__)

VALIDATOR_EXTENSION = "concept-validator"

COMMON_EVENTS = frozenset(
    {
        "click",
        "dblclick",
        "change",
        "submit",
        "input",
        "focus",
        "blur",
        "keydown",
        "keyup",
        "keypress",
        "mousedown",
        "mouseup",
        "mouseover",
        "mouseout",
        "mouseenter",
        "mouseleave",
        "load",
        "error",
        "resize",
        "scroll",
    }
)

KNOWN_CSS_PROPERTIES = frozenset(
    {
        "align-items",
        "animation",
        "background",
        "background-color",
        "background-image",
        "border",
        "border-color",
        "border-radius",
        "border-style",
        "border-width",
        "bottom",
        "box-shadow",
        "box-sizing",
        "clear",
        "color",
        "cursor",
        "display",
        "flex",
        "flex-direction",
        "flex-wrap",
        "float",
        "font-family",
        "font-size",
        "font-style",
        "font-weight",
        "gap",
        "grid-template-columns",
        "height",
        "justify-content",
        "left",
        "letter-spacing",
        "line-height",
        "margin",
        "margin-bottom",
        "margin-left",
        "margin-right",
        "margin-top",
        "max-height",
        "max-width",
        "min-height",
        "min-width",
        "opacity",
        "outline",
        "overflow",
        "padding",
        "padding-bottom",
        "padding-left",
        "padding-right",
        "padding-top",
        "pointer-events",
        "position",
        "right",
        "text-align",
        "text-decoration",
        "text-transform",
        "top",
        "transform",
        "transition",
        "visibility",
        "white-space",
        "width",
        "word-spacing",
        "z-index",
    }
)

_COLOR_PROPERTIES = frozenset({"color", "background-color"})
_COLOR_KEYWORDS = frozenset({"transparent", "currentcolor", "inherit", "initial", "unset"})

_CLASS_NAME_RE = re.compile(r"^[a-zA-Z_-][a-zA-Z0-9_-]*$")
_ATTRIBUTE_NAME_RE = re.compile(r"^[a-zA-Z_:@][-a-zA-Z0-9_:.@]*$")
_HEX_COLOR_RE = re.compile(r"^#([A-Fa-f0-9]{3}|[A-Fa-f0-9]{4}|[A-Fa-f0-9]{6}|[A-Fa-f0-9]{8})$")
_FUNCTION_COLOR_RE = re.compile(r"^(rgba?|hsla?)\([^)]*\)$")
_NAMED_COLOR_RE = re.compile(r"^[a-zA-Z]+$")
_VENDOR_PREFIX_RE = re.compile(r"^-(webkit|moz|ms|o)-")

ValidationRule = Callable[[ComponentConcept, "ValidationOptions"], list[ValidationWarning]]


@dataclass
class ValidationOptions:
    framework: str | None = None
    check_accessibility: bool = False
    check_performance: bool = False
    check_best_practices: bool = False
    enable_cross_concept_validation: bool = False
    custom_rules: list[ValidationRule] = field(default_factory=list)
    plugins: list[ValidationPlugin] = field(default_factory=list)


@dataclass
class _Check:
    """Mutable accumulator for one concept kind."""

    warnings: list[ValidationWarning] = field(default_factory=list)
    suggestions: list[ValidationSuggestion] = field(default_factory=list)
    score: float = 1.0

    def issue(
        self,
        severity: ValidationSeverity,
        message: str,
        source: str,
        penalty: float = 0.0,
        suggestion: str | None = None,
    ) -> None:
        self.warnings.append(
            ValidationWarning(
                severity=severity, message=message, source=source, suggestion=suggestion
            )
        )
        self.score -= penalty

    def suggest(self, type_: str, message: str, target: str, priority: int) -> None:
        self.suggestions.append(
            ValidationSuggestion(type=type_, message=message, target=target, priority=priority)
        )

    def result(self) -> ValidationResult:
        return ValidationResult(
            is_valid=not any(w.severity == ValidationSeverity.ERROR for w in self.warnings),
            warnings=self.warnings,
            suggestions=self.suggestions,
            score=max(0.0, min(1.0, self.score)),
        )


class ConceptValidator:
    """Validate extracted concepts and score them."""

    def __init__(self, errors: ErrorCollector | None = None) -> None:
        self.errors = errors if errors is not None else ErrorCollector()

    def validate_component(
        self, concepts: ComponentConcept, options: ValidationOptions | None = None
    ) -> ValidationResult:
        options = options or ValidationOptions()
        results = [
            self._events(concepts.events, options),
            self._styling(concepts.styling, options),
            self._conditionals(concepts.conditionals),
            self._iterations(concepts.iterations, options),
            self._slots(concepts.slots),
            self._attributes(concepts.attributes, options),
        ]
        if options.enable_cross_concept_validation:
            results.append(self.validate_concept_consistency(concepts, options))
        for plugin in options.plugins:
            logger.debug("Running validation plugin %s", plugin.name)
            results.append(plugin.check(concepts, options))

        warnings = [w for r in results for w in r.warnings]
        suggestions = [s for r in results for s in r.suggestions]
        for rule in options.custom_rules:
            warnings.extend(rule(concepts, options))

        score = min(r.score for r in results)
        self._report(warnings)
        logger.debug("Validated component: score=%.2f, %d warnings", score, len(warnings))

        return ValidationResult(
            is_valid=not any(w.severity == ValidationSeverity.ERROR for w in warnings),
            warnings=warnings,
            suggestions=suggestions,
            score=max(0.0, score),
        )

    def validate_events(
        self, events: list[EventConcept], options: ValidationOptions | None = None
    ) -> ValidationResult:
        return self._reported(self._events(events, options or ValidationOptions()))

    def validate_styling(
        self, styling: StylingConcept, options: ValidationOptions | None = None
    ) -> ValidationResult:
        return self._reported(self._styling(styling, options or ValidationOptions()))

    def validate_conditionals(
        self, conditionals: list[ConditionalConcept], options: ValidationOptions | None = None
    ) -> ValidationResult:
        return self._reported(self._conditionals(conditionals))

    def validate_iterations(
        self, iterations: list[IterationConcept], options: ValidationOptions | None = None
    ) -> ValidationResult:
        return self._reported(self._iterations(iterations, options or ValidationOptions()))

    def validate_slots(
        self, slots: list[SlotConcept], options: ValidationOptions | None = None
    ) -> ValidationResult:
        return self._reported(self._slots(slots))

    def validate_attributes(
        self, attributes: list[AttributeConcept], options: ValidationOptions | None = None
    ) -> ValidationResult:
        return self._reported(self._attributes(attributes, options or ValidationOptions()))

    def validate_concept_consistency(
        self, concepts: ComponentConcept, options: ValidationOptions | None = None
    ) -> ValidationResult:
        """Heuristic smells spanning more than one concept kind."""
        options = options or ValidationOptions()
        check = _Check()
        styling = concepts.styling

        if styling.inline_styles and styling.static_classes:
            check.suggest(
                "best-practice",
                "Mixing inline styles and CSS classes can impact maintainability",
                "component",
                2,
            )

        if options.check_accessibility:
            has_click = any(event.name == "click" for event in concepts.events)
            has_role = any(attr.name == "role" for attr in concepts.attributes)
            if has_click and not has_role:
                check.suggest(
                    "accessibility",
                    "Interactive elements should have appropriate ARIA roles",
                    "component",
                    4,
                )

        cancels = [e for e in concepts.events if "cancel" in e.handler.lower()]
        successes = [c for c in styling.static_classes if "success" in c]
        if cancels and successes:
            check.suggest(
                "best-practice",
                "Potential semantic mismatch: cancel action with success styling",
                "component",
                3,
            )

        return check.result()

    def get_errors(self) -> ErrorCollector:
        return self.errors

    def clear_errors(self) -> None:
        self.errors.clear()

    # -------------------------------------------------------------------------
    # Per-kind checks
    # -------------------------------------------------------------------------

    def _events(self, events: list[EventConcept], options: ValidationOptions) -> ValidationResult:
        check = _Check()
        for event in events:
            if event.name.lower() not in COMMON_EVENTS:
                check.issue(
                    ValidationSeverity.WARNING,
                    f"Invalid or uncommon event name: {event.name}",
                    event.node_id,
                    0.05,
                    "Use standard HTML event names (click, change, submit, etc.)",
                )
            if not event.handler.strip():
                check.issue(
                    ValidationSeverity.ERROR,
                    "Event has empty handler",
                    event.node_id,
                    0.25,
                    "Provide a valid handler function",
                )
            if options.framework == "react" and event.modifiers:
                check.issue(
                    ValidationSeverity.WARNING,
                    "React does not support event modifiers directly",
                    event.node_id,
                    suggestion="Handle modifiers in the event handler function",
                )
            if options.check_accessibility and event.name == "click":
                check.suggest(
                    "accessibility", "Add keyboard support for click events", event.node_id, 3
                )

        if options.check_performance and len(events) > 10:
            check.suggest(
                "performance",
                "Consider event delegation for multiple similar events",
                "component",
                3,
            )
        return check.result()

    def _styling(self, styling: StylingConcept, options: ValidationOptions) -> ValidationResult:
        check = _Check()
        source = styling.node_id

        for class_name in styling.static_classes:
            if not _CLASS_NAME_RE.match(class_name):
                check.issue(
                    ValidationSeverity.WARNING,
                    f"Invalid CSS class name: {class_name}",
                    source,
                    0.03,
                    "Use valid CSS identifiers (alphanumeric, hyphen, underscore)",
                )

        for prop, value in styling.inline_styles.items():
            kebab = camel_to_kebab(prop) if not prop.startswith("--") else prop
            if not is_known_css_property(kebab):
                check.issue(
                    ValidationSeverity.WARNING,
                    f"Invalid CSS property: {prop}",
                    source,
                    0.05,
                    "Check CSS property spelling and browser support",
                )
            if not value or not value.strip():
                check.issue(
                    ValidationSeverity.ERROR,
                    f"Empty CSS value for property: {prop}",
                    source,
                    0.08,
                )
            elif kebab in _COLOR_PROPERTIES and not is_valid_color(value):
                check.issue(
                    ValidationSeverity.WARNING,
                    f"Invalid color value: {value}",
                    source,
                    0.05,
                    "Use valid CSS color values (hex, rgb, named colors)",
                )

        if options.check_performance and len(styling.inline_styles) > 5:
            check.suggest(
                "performance", "Consider external CSS for better performance", source, 3
            )

        if options.check_best_practices and len(styling.static_classes) > 8:
            check.suggest(
                "best-practice", "Consider using fewer, more semantic CSS classes", source, 2
            )

        if options.check_accessibility:
            foreground = _style_value(styling, "color")
            background = _style_value(styling, "background-color")
            if foreground and background and foreground.lower() == background.lower():
                check.issue(
                    ValidationSeverity.WARNING,
                    "Insufficient color contrast: text and background colors are identical",
                    source,
                    suggestion="Choose text and background colors with sufficient contrast",
                )
        return check.result()

    def _conditionals(self, conditionals: list[ConditionalConcept]) -> ValidationResult:
        check = _Check()
        for conditional in conditionals:
            condition = conditional.condition.strip()
            if not condition:
                check.issue(
                    ValidationSeverity.ERROR,
                    "Conditional missing condition expression",
                    conditional.node_id,
                    0.15,
                )
            elif any(token in condition for token in ("&&", "||", "(")):
                message = (
                    "Consider using optional chaining (?.) for safer property access"
                    if "&&" in condition
                    else "Consider extracting complex condition to a computed property"
                )
                check.suggest("best-practice", message, conditional.node_id, 2)

            if not conditional.then_nodes:
                check.issue(
                    ValidationSeverity.WARNING,
                    "Conditional has empty then branch",
                    conditional.node_id,
                    0.05,
                    "Provide content for when condition is true",
                )
        return check.result()

    def _iterations(
        self, iterations: list[IterationConcept], options: ValidationOptions
    ) -> ValidationResult:
        check = _Check()
        for iteration in iterations:
            if not iteration.items.strip():
                check.issue(
                    ValidationSeverity.ERROR,
                    "Iteration missing items expression",
                    iteration.node_id,
                    0.15,
                )
            if not iteration.item_variable.strip():
                check.issue(
                    ValidationSeverity.ERROR,
                    "Iteration missing item variable name",
                    iteration.node_id,
                    0.15,
                )
            if options.framework == "react" and not iteration.key_expression:
                check.issue(
                    ValidationSeverity.WARNING,
                    "React iterations should have a key expression for performance",
                    iteration.node_id,
                    0.08,
                    "Add a unique key expression (e.g., item.id)",
                )
            if iteration.key_expression and iteration.key_expression in (
                "index",
                iteration.index_variable,
            ):
                check.suggest(
                    "best-practice",
                    "Avoid using index as key - use unique item property instead",
                    iteration.node_id,
                    4,
                )
            if options.check_performance and not iteration.key_expression:
                check.suggest(
                    "performance",
                    "Add key expression for better rendering performance",
                    iteration.node_id,
                    4,
                )
        return check.result()

    def _slots(self, slots: list[SlotConcept]) -> ValidationResult:
        check = _Check()
        seen: set[str] = set()
        for slot in slots:
            if slot.name in seen:
                check.issue(
                    ValidationSeverity.WARNING,
                    f"Duplicate slot name: {slot.name}",
                    slot.node_id,
                    0.05,
                    "Use unique slot names within a component",
                )
            seen.add(slot.name)
            if slot.fallback is None:
                check.suggest(
                    "best-practice",
                    "Consider providing fallback content for slots",
                    slot.node_id,
                    2,
                )
        return check.result()

    def _attributes(
        self, attributes: list[AttributeConcept], options: ValidationOptions
    ) -> ValidationResult:
        check = _Check()
        seen: set[tuple[str, str]] = set()
        alt_nodes = {attr.node_id for attr in attributes if attr.name == "alt"}

        for attr in attributes:
            if not attr.name.strip():
                check.issue(ValidationSeverity.ERROR, "Attribute missing name", attr.node_id, 0.1)
                continue

            key = (attr.node_id, attr.name)
            if key in seen:
                check.issue(
                    ValidationSeverity.WARNING,
                    f"Duplicate attribute: {attr.name}",
                    attr.node_id,
                    0.03,
                )
            seen.add(key)

            if not _ATTRIBUTE_NAME_RE.match(attr.name):
                check.issue(
                    ValidationSeverity.WARNING,
                    f"Invalid HTML attribute name: {attr.name}",
                    attr.node_id,
                    0.05,
                    "Use valid HTML attribute names",
                )

            missing_alt = attr.name == "src" and attr.node_id not in alt_nodes
            if options.check_accessibility and missing_alt:
                check.issue(
                    ValidationSeverity.WARNING,
                    "Images should have alt text for accessibility",
                    attr.node_id,
                    suggestion="Add alt attribute to describe the image",
                )
        return check.result()

    # -------------------------------------------------------------------------

    def _reported(self, result: ValidationResult) -> ValidationResult:
        self._report(result.warnings)
        return result

    def _report(self, warnings: list[ValidationWarning]) -> None:
        for warning in warnings:
            if warning.severity == ValidationSeverity.ERROR:
                self.errors.add_simple_error(warning.message, warning.source, VALIDATOR_EXTENSION)
            elif warning.severity == ValidationSeverity.WARNING:
                self.errors.add_warning(warning.message, warning.source, VALIDATOR_EXTENSION)
            else:
                self.errors.add_info(warning.message, warning.source, VALIDATOR_EXTENSION)


def is_known_css_property(prop: str) -> bool:
    if prop.startswith("--"):
        return len(prop) > 2
    return _VENDOR_PREFIX_RE.sub("", prop) in KNOWN_CSS_PROPERTIES


def is_valid_color(value: str) -> bool:
    value = value.strip()
    if not value:
        return False
    if value.lower() in _COLOR_KEYWORDS or value.startswith("var("):
        return True
    return bool(
        _HEX_COLOR_RE.match(value)
        or _FUNCTION_COLOR_RE.match(value)
        or _NAMED_COLOR_RE.match(value)
    )


def _style_value(styling: StylingConcept, prop: str) -> str | None:
    for name, value in styling.inline_styles.items():
        if name == prop or camel_to_kebab(name) == prop:
            return value.strip()
    return None
