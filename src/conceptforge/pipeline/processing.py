"""
Processing pipeline.

Fixed stage order, each stage optional:

1. Component property merge (when component metadata is supplied)
2. Concept extraction, standard or with the specialized extractors
3. Event normalization
4. Concept validation
5. Cross-framework consistency check
6. Base assembly (see ``assembly.py``)
7. Merge of the stage diagnostics into the assembly diagnostics

Stages 1-5 report into their own sink. If any of them raises, the failure is
recorded as a pipeline diagnostic and the template is assembled again from a
standard extraction; the result is marked ``processing=False``. The same
mark is set when a lifecycle hook fails during assembly, or when assembly
itself raises, in which case the output is empty. ``process`` never raises.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from typing import Any

from conceptforge.analyzer.template_analyzer import TemplateAnalyzer
from conceptforge.core.diagnostics import ErrorCollector
from conceptforge.core.metrics import PerformanceMetrics, PerformanceTracker
from conceptforge.core.node_ids import ROOT_NODE_ID
from conceptforge.extensions.base import RenderContext, StyleOutput
from conceptforge.extensions.registry import ExtensionRegistry
from conceptforge.extractors.events import EventExtractionOptions, EventExtractor
from conceptforge.extractors.styling import StylingExtractionOptions, StylingExtractor
from conceptforge.normalization.events import EventNormalizationOptions, EventNormalizer
from conceptforge.processors.properties import ComponentPropertyProcessor
from conceptforge.processors.strategies import DEFAULT_MERGE_STRATEGIES, ComponentResolutionStrategy
from conceptforge.specs.component import ComponentOptions, ComponentProperties
from conceptforge.specs.concepts import ComponentConcept
from conceptforge.specs.template import TemplateNode, parse_template
from conceptforge.specs.validation import ValidationResult
from conceptforge.validation.concepts import ConceptValidator, ValidationOptions
from conceptforge.validation.consistency import ConsistencyReport, FrameworkConsistencyChecker

from .assembly import AssemblyResult, AssemblyStage

logger = logging.getLogger(__name__)

PIPELINE_EXTENSION = "enhanced-pipeline"

_EVENT_MARKERS = ("@", "on:", "onClick")
_STYLING_MARKERS = ("class", "style", "className")


# =============================================================================
# Options and results
# =============================================================================


@dataclass
class ExtractionOptions:
    use_event_extractor: bool = False
    use_styling_extractor: bool = False
    normalize_events: bool = False
    validate_concepts: bool = False


@dataclass
class ProcessingOptions:
    """
    Options for one pipeline run.

    Attributes:
        framework: Framework extension key to render with (None renders nothing)
        component: Component metadata; enables the property-merge stage
        component_name: Explicit component name, beats every other source
        language: ``javascript`` or ``typescript``
        styling: Styling extension key
        utilities: Utility extension keys (None means every registered one)
        backend_options: Passed to the framework extension via RenderContext
    """

    framework: str | None = None
    component: ComponentOptions | None = None
    component_name: str | None = None
    language: str = "javascript"
    styling: str | None = None
    utilities: list[str] | None = None
    backend_options: dict[str, Any] = field(default_factory=dict)
    merge_strategies: ComponentResolutionStrategy | None = None
    extraction: ExtractionOptions = field(default_factory=ExtractionOptions)
    validation: ValidationOptions | None = None
    event_normalization: EventNormalizationOptions | None = None
    check_consistency: bool = False
    consistency_frameworks: list[str] | None = None


@dataclass
class ProcessingMetadata:
    processing: bool = True
    processors_used: list[str] = field(default_factory=list)
    validation_score: float | None = None
    events_normalized: int = 0
    properties_merged: bool = False


@dataclass
class ProcessingResult:
    """Output text plus everything the stages learned about the template."""

    output: str
    concepts: ComponentConcept
    errors: ErrorCollector
    metrics: PerformanceMetrics
    metadata: ProcessingMetadata
    validation: ValidationResult | None = None
    component_properties: ComponentProperties | None = None
    consistency_report: ConsistencyReport | None = None
    style_output: StyleOutput | None = None

    @property
    def success(self) -> bool:
        return not self.errors.has_errors()


# =============================================================================
# Pipeline
# =============================================================================


class ProcessingPipeline:
    """
    Orchestrates extraction, normalization, validation and assembly.

    Example:
        registry = ExtensionRegistry()
        registry.register_framework(ReactFrameworkExtension())
        pipeline = ProcessingPipeline(registry)
        result = pipeline.process(template, ProcessingOptions(framework="react"))
        print(result.output)
    """

    def __init__(
        self,
        registry: ExtensionRegistry,
        analyzer: TemplateAnalyzer | None = None,
        errors: ErrorCollector | None = None,
    ) -> None:
        self.registry = registry
        self.errors = errors if errors is not None else ErrorCollector()
        self.analyzer = analyzer or TemplateAnalyzer(errors=self.errors)
        self.tracker = PerformanceTracker()

        self.stage_errors = ErrorCollector()
        self.property_processor = ComponentPropertyProcessor(
            DEFAULT_MERGE_STRATEGIES, self.stage_errors
        )
        self.event_normalizer = EventNormalizer(errors=self.stage_errors)
        self.event_extractor = EventExtractor(self.stage_errors)
        self.styling_extractor = StylingExtractor(self.stage_errors)
        self.validator = ConceptValidator(self.stage_errors)
        self.consistency_checker = FrameworkConsistencyChecker(self.stage_errors)

    def process(
        self,
        template: list[TemplateNode] | list[dict],
        options: ProcessingOptions | None = None,
    ) -> ProcessingResult:
        options = options or ProcessingOptions()
        self.tracker.start()
        self.stage_errors.clear()
        metadata = ProcessingMetadata()

        try:
            nodes = parse_template(list(template))
            component_properties = self._merge_properties(options, metadata)
            concepts = self._extract(nodes, options, metadata)
            concepts = self._normalize(concepts, options, metadata)
            validation = self._validate(concepts, options, metadata)
            consistency = self._check_consistency(concepts, options, metadata)
        except Exception as exc:
            logger.warning("Enhanced pipeline processing failed: %s", exc)
            self.stage_errors.add_simple_error(
                f"Enhanced pipeline processing failed: {exc}", ROOT_NODE_ID, PIPELINE_EXTENSION
            )
            return self._fallback(template, options, metadata)

        context = self._render_context(options, component_properties)
        assembled = self._assemble(nodes, concepts, context, options)
        if assembled is None:
            return self._failed_result(metadata)

        metadata.validation_score = validation.score if validation else None
        if assembled.failed_hooks:
            metadata.processing = False
        return ProcessingResult(
            output=assembled.output,
            concepts=assembled.concepts,
            errors=self._merged_errors(),
            metrics=self._metrics(assembled.concepts),
            metadata=metadata,
            validation=validation,
            component_properties=component_properties,
            consistency_report=consistency,
            style_output=assembled.style_output,
        )

    def process_with_auto_enhancement(
        self,
        template: list[TemplateNode] | list[dict],
        options: ProcessingOptions | None = None,
    ) -> ProcessingResult:
        """Enable the specialized extractors when the template looks like it needs them."""
        options = options or ProcessingOptions()
        text = _template_text(template)
        options = replace(
            options,
            extraction=ExtractionOptions(
                use_event_extractor=any(marker in text for marker in _EVENT_MARKERS),
                use_styling_extractor=any(marker in text for marker in _STYLING_MARKERS),
                normalize_events=bool(options.framework),
                validate_concepts=True,
            ),
            validation=ValidationOptions(
                framework=options.framework,
                check_accessibility=True,
                check_performance=True,
                check_best_practices=True,
                enable_cross_concept_validation=True,
            ),
            check_consistency=True,
        )
        return self.process(template, options)

    def get_errors(self) -> ErrorCollector:
        return self.errors

    def clear_errors(self) -> None:
        self.errors.clear()
        self.stage_errors.clear()

    # -------------------------------------------------------------------------
    # Stages
    # -------------------------------------------------------------------------

    def _merge_properties(
        self, options: ProcessingOptions, metadata: ProcessingMetadata
    ) -> ComponentProperties | None:
        if options.component is None:
            return None
        self.tracker.start_extension("component-property-processor")
        metadata.processors_used.append("ComponentPropertyProcessor")
        if options.merge_strategies is not None:
            self.property_processor = ComponentPropertyProcessor(
                options.merge_strategies, self.stage_errors
            )
        properties = self.property_processor.merge_component_properties(
            options.component, options.framework or "react", options.component_name
        )
        metadata.properties_merged = True
        self.tracker.end_extension("component-property-processor")
        return properties

    def _extract(
        self,
        nodes: list[TemplateNode],
        options: ProcessingOptions,
        metadata: ProcessingMetadata,
    ) -> ComponentConcept:
        extraction = options.extraction
        concepts = self.analyzer.extract_concepts(nodes)
        if not (extraction.use_event_extractor or extraction.use_styling_extractor):
            return concepts

        self.tracker.start_extension("enhanced-extraction")
        update: dict[str, Any] = {}
        if extraction.use_event_extractor:
            metadata.processors_used.append("EventExtractor")
            result = self.event_extractor.extract_events(
                nodes,
                EventExtractionOptions(
                    framework=options.framework,
                    normalize_events=extraction.normalize_events,
                    validate_events=extraction.validate_concepts,
                ),
            )
            update["events"] = result.events
            metadata.events_normalized = result.normalized_count
        if extraction.use_styling_extractor:
            metadata.processors_used.append("StylingExtractor")
            result_styling = self.styling_extractor.extract_styling(
                nodes,
                StylingExtractionOptions(
                    framework=options.framework,
                    validate_css=extraction.validate_concepts,
                    css_framework_detection=True,
                ),
            )
            update["styling"] = result_styling.styling.model_copy(
                update={"extension_data": concepts.styling.extension_data}
            )
        self.tracker.end_extension("enhanced-extraction")
        return concepts.model_copy(update=update)

    def _normalize(
        self, concepts: ComponentConcept, options: ProcessingOptions, metadata: ProcessingMetadata
    ) -> ComponentConcept:
        if not (options.extraction.normalize_events and options.framework):
            return concepts
        self.tracker.start_extension("event-normalization")
        metadata.processors_used.append("EventNormalizer")
        normalization = replace(
            options.event_normalization or EventNormalizationOptions(), framework=options.framework
        )
        normalized = self.event_normalizer.normalize_events(concepts.events, normalization)
        metadata.events_normalized += sum(1 for n in normalized if n.was_normalized)
        self.tracker.end_extension("event-normalization")
        return concepts.model_copy(update={"events": [n.as_event() for n in normalized]})

    def _validate(
        self, concepts: ComponentConcept, options: ProcessingOptions, metadata: ProcessingMetadata
    ) -> ValidationResult | None:
        if not options.extraction.validate_concepts:
            return None
        self.tracker.start_extension("concept-validation")
        metadata.processors_used.append("ConceptValidator")
        validation_options = options.validation or ValidationOptions(
            framework=options.framework,
            check_accessibility=True,
            check_performance=True,
            check_best_practices=True,
            enable_cross_concept_validation=True,
        )
        result = self.validator.validate_component(concepts, validation_options)
        self.tracker.end_extension("concept-validation")
        return result

    def _check_consistency(
        self, concepts: ComponentConcept, options: ProcessingOptions, metadata: ProcessingMetadata
    ) -> ConsistencyReport | None:
        enabled = options.check_consistency or (
            options.validation is not None and options.validation.enable_cross_concept_validation
        )
        if not enabled:
            return None
        self.tracker.start_extension("consistency-check")
        metadata.processors_used.append("FrameworkConsistencyChecker")
        report = self.consistency_checker.check_consistency(
            concepts, options.consistency_frameworks
        )
        self.tracker.end_extension("consistency-check")
        return report

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _fallback(
        self,
        template: list[TemplateNode] | list[dict],
        options: ProcessingOptions,
        metadata: ProcessingMetadata,
    ) -> ProcessingResult:
        failed = ProcessingMetadata(processing=False, processors_used=metadata.processors_used)
        context = self._render_context(options, None)
        try:
            nodes = parse_template(list(template))
            concepts = self.analyzer.extract_concepts(nodes)
        except Exception as exc:
            self.errors.add_simple_error(
                f"Template could not be processed: {exc}", ROOT_NODE_ID, PIPELINE_EXTENSION
            )
            return self._failed_result(failed)

        assembled = self._assemble(nodes, concepts, context, options)
        if assembled is None:
            return self._failed_result(failed)
        return ProcessingResult(
            output=assembled.output,
            concepts=assembled.concepts,
            errors=self._merged_errors(),
            metrics=self._metrics(assembled.concepts),
            metadata=failed,
            style_output=assembled.style_output,
        )

    def _assemble(
        self,
        nodes: list[TemplateNode],
        concepts: ComponentConcept,
        context: RenderContext,
        options: ProcessingOptions,
    ) -> AssemblyResult | None:
        assembly = AssemblyStage(self.registry, self.analyzer, self.errors, self.tracker)
        try:
            return assembly.assemble(nodes, concepts, context, options.styling, options.utilities)
        except Exception as exc:
            logger.warning("Assembly failed: %s", exc)
            message = f"Assembly failed: {exc}"
            self.errors.add_simple_error(message, ROOT_NODE_ID, PIPELINE_EXTENSION)
            return None

    def _failed_result(self, metadata: ProcessingMetadata) -> ProcessingResult:
        metadata.processing = False
        return ProcessingResult(
            output="",
            concepts=ComponentConcept(),
            errors=self._merged_errors(),
            metrics=self._metrics(None),
            metadata=metadata,
        )

    @staticmethod
    def _render_context(
        options: ProcessingOptions, properties: ComponentProperties | None
    ) -> RenderContext:
        name = options.component_name or (properties.name if properties else None)
        return RenderContext(
            component=options.component,
            framework=options.framework,
            component_name=name,
            language=options.language,
            options=dict(options.backend_options),
        )

    def _merged_errors(self) -> ErrorCollector:
        merged = ErrorCollector()
        merged.extend(self.errors)
        merged.extend(self.stage_errors)
        return merged

    def _metrics(self, concepts: ComponentConcept | None) -> PerformanceMetrics:
        if concepts is not None:
            self.tracker.increment_concept_count(concepts.total_concepts())
        return self.tracker.get_metrics()


def _template_text(template: list[Any]) -> str:
    parts = []
    for node in template:
        if hasattr(node, "model_dump_json"):
            parts.append(node.model_dump_json(by_alias=True))
        else:
            parts.append(json.dumps(node, default=str))
    return " ".join(parts)
