"""
Cross-framework consistency scoring.

Scores a concept set against each target framework using static constraint
tables. Scores are on a 0-100 scale: a framework's score is the minimum of
its per-kind sub-scores and the overall score is the mean across frameworks.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

from conceptforge.analyzer.style_syntax import kebab_to_camel
from conceptforge.core.diagnostics import ErrorCollector
from conceptforge.core.node_ids import ROOT_NODE_ID
from conceptforge.normalization.events import EventNormalizationOptions, EventNormalizer
from conceptforge.specs.concepts import (
    AttributeConcept,
    ComponentConcept,
    ConditionalConcept,
    EventConcept,
    IterationConcept,
    SlotConcept,
    StylingConcept,
)
from conceptforge.specs.extension import SUPPORTED_FRAMEWORKS

logger = logging.getLogger(__name__)

CONSISTENCY_EXTENSION = "framework-consistency"

_PHRASE_SPLIT_RE = re.compile(r"[,.:;]")


@dataclass(frozen=True)
class FrameworkConstraints:
    """What one framework can express and how it spells it."""

    supported_modifiers: tuple[str, ...]
    event_prefix: str
    class_attribute: str
    style_binding: str
    conditional_syntax: str
    supports_else: bool
    iteration_syntax: str
    requires_key: bool
    slot_mechanism: str
    named_slots: str


FRAMEWORK_CONSTRAINTS: dict[str, FrameworkConstraints] = {
    "react": FrameworkConstraints(
        supported_modifiers=(),
        event_prefix="on",
        class_attribute="className",
        style_binding="style",
        conditional_syntax="{condition && <Component />}",
        supports_else=False,
        iteration_syntax="{items.map((item, index) => <Component key={item.id} />)}",
        requires_key=True,
        slot_mechanism="children",
        named_slots="props",
    ),
    "vue": FrameworkConstraints(
        supported_modifiers=("stop", "prevent", "capture", "self", "once", "passive"),
        event_prefix="@",
        class_attribute="class",
        style_binding=":style",
        conditional_syntax='v-if="condition"',
        supports_else=True,
        iteration_syntax='v-for="item in items" :key="item.id"',
        requires_key=False,
        slot_mechanism="slot",
        named_slots="template #slotName",
    ),
    "svelte": FrameworkConstraints(
        supported_modifiers=("preventDefault", "stopPropagation", "passive", "capture", "once"),
        event_prefix="on:",
        class_attribute="class",
        style_binding="style:",
        conditional_syntax="{#if condition}",
        supports_else=True,
        iteration_syntax="{#each items as item (item.id)}",
        requires_key=False,
        slot_mechanism="slot",
        named_slots='slot name="slotName"',
    ),
}


class FrameworkReport(BaseModel):
    framework: str
    is_compatible: bool = True
    score: float = Field(default=100.0, ge=0, le=100)
    warnings: list[str] = Field(default_factory=list)
    alternatives: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class ConsistencyRecommendation(BaseModel):
    type: str = Field(description="portability, optimization, best-practice or compatibility")
    message: str
    frameworks: list[str] = Field(default_factory=list)
    priority: int = Field(default=3, ge=1, le=5)
    steps: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class ConsistencyReport(BaseModel):
    frameworks: dict[str, FrameworkReport] = Field(default_factory=dict)
    overall_score: float = 100.0
    recommendations: list[ConsistencyRecommendation] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


@dataclass
class _Part:
    warnings: list[str]
    alternatives: list[str]
    score: float = 100.0


class FrameworkConsistencyChecker:
    """Check how portably a concept set maps onto each framework."""

    def __init__(
        self, errors: ErrorCollector | None = None, normalizer: EventNormalizer | None = None
    ) -> None:
        self.errors = errors if errors is not None else ErrorCollector()
        self.normalizer = normalizer or EventNormalizer(errors=ErrorCollector())

    def check_consistency(
        self, concepts: ComponentConcept, frameworks: list[str] | None = None
    ) -> ConsistencyReport:
        targets = [fw for fw in (frameworks or SUPPORTED_FRAMEWORKS) if fw in FRAMEWORK_CONSTRAINTS]
        reports = {fw: self.check_framework_compatibility(concepts, fw) for fw in targets}
        overall = sum(r.score for r in reports.values()) / len(reports) if reports else 100.0

        for report in reports.values():
            for warning in report.warnings:
                self.errors.add_info(
                    f"[{report.framework}] {warning}", ROOT_NODE_ID, CONSISTENCY_EXTENSION
                )

        logger.debug("Consistency score %.1f across %s", overall, ", ".join(targets))
        return ConsistencyReport(
            frameworks=reports,
            overall_score=overall,
            recommendations=self._recommendations(concepts, reports),
        )

    def check_framework_compatibility(
        self, concepts: ComponentConcept, framework: str
    ) -> FrameworkReport:
        constraints = FRAMEWORK_CONSTRAINTS[framework]
        parts = [
            self._events(concepts.events, framework, constraints),
            self._styling(concepts.styling, framework),
            self._conditionals(concepts.conditionals, framework),
            self._iterations(concepts.iterations, framework, constraints),
            self._slots(concepts.slots, framework),
            self._attributes(concepts.attributes, framework),
        ]
        warnings = [w for part in parts for w in part.warnings]
        return FrameworkReport(
            framework=framework,
            is_compatible=not warnings,
            score=max(0.0, min(part.score for part in parts)),
            warnings=warnings,
            alternatives=list(dict.fromkeys(a for part in parts for a in part.alternatives)),
        )

    def suggest_event_alternatives(self, event: EventConcept, framework: str) -> list[str]:
        alternatives = []
        mapping = self.normalizer.find_event_mapping(
            self.normalizer.extract_common_event_name(event.name)
        )
        if mapping:
            alternatives.append(f"Use {mapping.for_framework(framework)} for {framework}")

        constraints = FRAMEWORK_CONSTRAINTS.get(framework)
        if constraints and event.modifiers:
            supported = [m for m in event.modifiers if m in constraints.supported_modifiers]
            if supported:
                alternatives.append(f"Supported modifiers for {framework}: {', '.join(supported)}")
        return alternatives

    @staticmethod
    def validate_attribute_compatibility(attr: AttributeConcept, framework: str) -> bool:
        """React rejects the raw ``class`` and ``for`` attribute names."""
        if framework == "react":
            return attr.name not in ("for", "class")
        return True

    def normalize_concepts_for_framework(
        self, concepts: ComponentConcept, framework: str
    ) -> ComponentConcept:
        normalized = self.normalizer.normalize_events(
            concepts.events,
            EventNormalizationOptions(framework=framework, validate_events=False),
        )
        return concepts.model_copy(update={"events": [n.as_event() for n in normalized]})

    def get_errors(self) -> ErrorCollector:
        return self.errors

    def clear_errors(self) -> None:
        self.errors.clear()

    # -------------------------------------------------------------------------

    def _events(
        self, events: list[EventConcept], framework: str, constraints: FrameworkConstraints
    ) -> _Part:
        part = _Part([], [])
        for event in events:
            unsupported = [m for m in event.modifiers if m not in constraints.supported_modifiers]
            if unsupported:
                part.warnings.append(
                    f"{framework} doesn't support modifiers: {', '.join(unsupported)} "
                    f"for event {event.name}"
                )
                if framework == "react":
                    part.alternatives.append("Handle modifiers in the event handler function")
                else:
                    part.alternatives.append(
                        f"Use supported {framework.capitalize()} modifiers: "
                        + ", ".join(constraints.supported_modifiers)
                    )
                part.score -= 10

            mapping = self.normalizer.find_event_mapping(
                self.normalizer.extract_common_event_name(event.name)
            )
            written = event.source_attribute or event.name
            target = mapping.for_framework(framework) if mapping else None
            if target and _base_attribute(written) != target:
                part.alternatives.append(f"Use {target} instead of {written} for {framework}")
        return part

    @staticmethod
    def _styling(styling: StylingConcept, framework: str) -> _Part:
        part = _Part([], [])
        if framework == "react" and styling.static_classes:
            part.alternatives.append("Use className instead of class for React")
        if styling.style_bindings:
            part.alternatives.append(
                {
                    "react": "Use style prop with object syntax for React",
                    "vue": "Use :style directive for Vue dynamic styles",
                    "svelte": "Use style: directives for Svelte dynamic styles",
                }[framework]
            )
        return part

    @staticmethod
    def _conditionals(conditionals: list[ConditionalConcept], framework: str) -> _Part:
        part = _Part([], [])
        for conditional in conditionals:
            if framework == "react":
                part.alternatives.append("Use {condition && <Component />} syntax for React")
                if conditional.else_nodes is not None:
                    part.alternatives.append(
                        "Use ternary operator for React if-else: "
                        "{condition ? <Then /> : <Else />}"
                    )
            elif framework == "vue":
                part.alternatives.append("Use v-if directive for Vue conditionals")
                if conditional.else_nodes is not None:
                    part.alternatives.append("Use v-else directive for Vue else branches")
            else:
                part.alternatives.append("Use {#if condition} syntax for Svelte")
                if conditional.else_nodes is not None:
                    part.alternatives.append("Use {:else} syntax for Svelte else branches")
        return part

    @staticmethod
    def _iterations(
        iterations: list[IterationConcept], framework: str, constraints: FrameworkConstraints
    ) -> _Part:
        part = _Part([], [])
        for iteration in iterations:
            if constraints.requires_key and not iteration.key_expression:
                part.warnings.append(f"{framework} requires key expression for iterations")
                part.alternatives.append("Add unique key expression for better performance")
                part.score -= 15
            part.alternatives.append(f"Use {constraints.iteration_syntax} for {framework}")
        return part

    @staticmethod
    def _slots(slots: list[SlotConcept], framework: str) -> _Part:
        part = _Part([], [])
        if not slots:
            return part
        if framework == "react":
            part.alternatives += [
                "Use children prop for React content projection",
                "Use named props for React named slots",
            ]
        elif framework == "vue":
            part.alternatives += [
                "Use <slot> elements for Vue content projection",
                "Use <template #slotName> for Vue named slots",
            ]
        else:
            part.alternatives += [
                "Use <slot> elements for Svelte content projection",
                'Use <slot name="slotName"> for Svelte named slots',
            ]
        return part

    @staticmethod
    def _attributes(attributes: list[AttributeConcept], framework: str) -> _Part:
        part = _Part([], [])
        for attr in attributes:
            if not attr.is_expression:
                continue
            if framework == "react" and "-" in attr.name:
                part.warnings.append(f"React prefers camelCase for attributes: {attr.name}")
                part.alternatives.append(f"Use {kebab_to_camel(attr.name)} instead")
                part.score -= 5
            elif framework == "vue":
                part.alternatives.append(
                    f"Use v-bind:{attr.name} or :{attr.name} for Vue dynamic attributes"
                )
        return part

    @staticmethod
    def _recommendations(
        concepts: ComponentConcept, reports: dict[str, FrameworkReport]
    ) -> list[ConsistencyRecommendation]:
        frameworks = list(reports)
        recommendations = [
            ConsistencyRecommendation(
                type="portability",
                message=f"Common issue across frameworks: {phrase}",
                frameworks=affected,
                priority=4,
            )
            for phrase, affected in _recurring_phrases(reports).items()
        ]

        if concepts.events:
            recommendations.append(
                ConsistencyRecommendation(
                    type="optimization",
                    message="Use framework-specific event normalization for better performance",
                    frameworks=frameworks,
                    priority=3,
                    steps=[
                        "Implement event name normalization",
                        "Use framework-appropriate event modifiers",
                        "Consider event delegation for multiple events",
                    ],
                )
            )

        if concepts.styling.static_classes or concepts.styling.inline_styles:
            recommendations.append(
                ConsistencyRecommendation(
                    type="best-practice",
                    message="Maintain consistent styling approach across frameworks",
                    frameworks=frameworks,
                    priority=2,
                    steps=[
                        "Use CSS classes over inline styles when possible",
                        "Implement consistent class naming conventions",
                        "Consider CSS-in-JS solutions for React, scoped styles for Vue/Svelte",
                    ],
                )
            )
        return recommendations


def _recurring_phrases(reports: dict[str, FrameworkReport]) -> dict[str, list[str]]:
    """Warning phrases longer than 10 characters mapped to the frameworks raising them.

    Only phrases raised by two or more frameworks are kept; repeats within
    one framework count once.
    """
    seen: dict[str, list[str]] = {}
    for framework, report in reports.items():
        for warning in report.warnings:
            for phrase in _PHRASE_SPLIT_RE.split(warning):
                phrase = phrase.strip()
                if len(phrase) <= 10:
                    continue
                affected = seen.setdefault(phrase, [])
                if framework not in affected:
                    affected.append(framework)
    return {phrase: affected for phrase, affected in seen.items() if len(affected) > 1}


def _base_attribute(attribute: str) -> str:
    return re.split(r"[.|]", attribute, maxsplit=1)[0]
