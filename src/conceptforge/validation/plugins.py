"""
Pluggable validation passes.

A plugin looks at the whole component and returns a ``ValidationResult``.
``ConceptValidator.validate_component`` runs every plugin listed in
``ValidationOptions.plugins`` next to its built-in per-kind checks, so a
plugin's score takes part in the component minimum and its warnings reach
the diagnostics sink.

    options = ValidationOptions(plugins=[AccessibilityPlugin(), PerformancePlugin()])
    result = ConceptValidator(errors).validate_component(concepts, options)
"""

from __future__ import annotations

import logging

from conceptforge.core.diagnostics import ErrorCollector
from conceptforge.specs.concepts import ComponentConcept
from conceptforge.specs.extension import SUPPORTED_FRAMEWORKS
from conceptforge.specs.validation import ValidationResult, ValidationSeverity
from conceptforge.validation.concepts import ValidationOptions, _Check, _style_value
from conceptforge.validation.consistency import FrameworkConsistencyChecker

logger = logging.getLogger(__name__)

KEYBOARD_EVENTS = frozenset({"keydown", "keyup", "keypress"})


class ValidationPlugin:
    """Base class; subclasses implement ``check``."""

    name = "validation-plugin"

    def check(self, concepts: ComponentConcept, options: ValidationOptions) -> ValidationResult:
        raise NotImplementedError


class AccessibilityPlugin(ValidationPlugin):
    """Keyboard access, image alt text, roles and colour contrast."""

    name = "accessibility"

    def check(self, concepts: ComponentConcept, options: ValidationOptions) -> ValidationResult:
        return self.check_accessibility(concepts)

    def check_accessibility(self, concepts: ComponentConcept) -> ValidationResult:
        check = _Check()
        keyboard_nodes = {e.node_id for e in concepts.events if e.name in KEYBOARD_EVENTS}
        attributes_by_node: dict[str, set[str]] = {}
        for attr in concepts.attributes:
            attributes_by_node.setdefault(attr.node_id, set()).add(attr.name)

        for event in concepts.events:
            if event.name != "click":
                continue
            if event.node_id not in keyboard_nodes:
                check.issue(
                    ValidationSeverity.WARNING,
                    "Click handler without keyboard support",
                    event.node_id,
                    0.05,
                    "Add a keydown handler so the element works without a mouse",
                )
            if "role" not in attributes_by_node.get(event.node_id, set()):
                check.suggest(
                    "accessibility",
                    "Interactive elements should have appropriate ARIA roles",
                    event.node_id,
                    4,
                )

        for node_id, names in attributes_by_node.items():
            if "src" in names and "alt" not in names:
                check.issue(
                    ValidationSeverity.WARNING,
                    "Images should have alt text for accessibility",
                    node_id,
                    0.05,
                    "Add alt attribute to describe the image",
                )

        styling = concepts.styling
        foreground = _style_value(styling, "color")
        background = _style_value(styling, "background-color")
        if foreground and background and foreground.lower() == background.lower():
            check.issue(
                ValidationSeverity.WARNING,
                "Insufficient color contrast: text and background colors are identical",
                styling.node_id,
                0.1,
                "Choose text and background colors with sufficient contrast",
            )
        return check.result()


class FrameworkCompatibilityPlugin(ValidationPlugin):
    """
    Turn consistency-checker findings into validation warnings.

    Checks ``options.framework`` when it is set, otherwise the frameworks
    given at construction (all supported frameworks by default). The
    score is the lowest framework score rescaled from 0-100 to 0-1.
    """

    name = "framework-compatibility"

    def __init__(self, frameworks: list[str] | None = None) -> None:
        self.frameworks = frameworks or list(SUPPORTED_FRAMEWORKS)
        self.checker = FrameworkConsistencyChecker(ErrorCollector())

    def check(self, concepts: ComponentConcept, options: ValidationOptions) -> ValidationResult:
        frameworks = [options.framework] if options.framework else self.frameworks
        return self.check_framework_compatibility(concepts, frameworks)

    def check_framework_compatibility(
        self, concepts: ComponentConcept, frameworks: list[str] | None = None
    ) -> ValidationResult:
        report = self.checker.check_consistency(concepts, frameworks or self.frameworks)
        check = _Check()
        for framework, framework_report in report.frameworks.items():
            for warning in framework_report.warnings:
                check.issue(ValidationSeverity.WARNING, f"[{framework}] {warning}", "component")
            for alternative in framework_report.alternatives:
                check.suggest("compatibility", alternative, framework, 2)
        if report.frameworks:
            check.score = min(r.score for r in report.frameworks.values()) / 100
        logger.debug(
            "Framework compatibility for %s: %.2f", ", ".join(report.frameworks), check.score
        )
        return check.result()


class PerformancePlugin(ValidationPlugin):
    """Event counts, inline styles, unkeyed and nested iterations, inline handlers."""

    name = "performance"

    def __init__(self, max_events: int = 10, max_inline_styles: int = 5) -> None:
        self.max_events = max_events
        self.max_inline_styles = max_inline_styles

    def check(self, concepts: ComponentConcept, options: ValidationOptions) -> ValidationResult:
        return self.check_performance(concepts)

    def check_performance(self, concepts: ComponentConcept) -> ValidationResult:
        check = _Check()
        if len(concepts.events) > self.max_events:
            check.suggest(
                "performance",
                "Consider event delegation for multiple similar events",
                "component",
                3,
            )
        for event in concepts.events:
            if "=>" in event.handler:
                check.suggest(
                    "performance",
                    f"Inline arrow handler for {event.name} is recreated on every render",
                    event.node_id,
                    2,
                )

        if len(concepts.styling.inline_styles) > self.max_inline_styles:
            check.suggest(
                "performance",
                "Consider external CSS for better performance",
                concepts.styling.node_id,
                3,
            )

        for iteration in concepts.iterations:
            if not iteration.key_expression:
                check.issue(
                    ValidationSeverity.WARNING,
                    f"Iteration over {iteration.items} has no key expression",
                    iteration.node_id,
                    0.08,
                    "Add a unique key expression (e.g., item.id)",
                )
            nested = [
                other
                for other in concepts.iterations
                if other.node_id.startswith(f"{iteration.node_id}.")
            ]
            if nested:
                check.suggest(
                    "performance",
                    f"Nested iteration inside {iteration.items}; consider flattening the data",
                    iteration.node_id,
                    3,
                )
        return check.result()
