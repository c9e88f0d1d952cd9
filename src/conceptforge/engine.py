"""
ConceptEngine: the high-level entry point.

Owns an extension registry, a template analyzer, a processing pipeline and
the default render settings. Render calls fill unset options from those
defaults and hand the template to the pipeline.

Example:
    engine = ConceptEngine(EngineOptions(default_framework="react"))
    engine.register_framework(ReactFrameworkExtension())
    result = engine.render(
        [{"tag": "div", "attributes": {"class": "btn"}, "children": [...]}],
        ProcessingOptions(component=ComponentOptions(name="Btn")),
    )
    print(result.output)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any

from pydantic import ValidationError

from conceptforge.analyzer.template_analyzer import AnalyzerOptions, TemplateAnalyzer
from conceptforge.core.diagnostics import ErrorCollector
from conceptforge.core.errors import (
    ErrorContext,
    ExtensionError,
    RenderError,
    TemplateValidationError,
)
from conceptforge.core.metrics import PerformanceMetrics, PerformanceTracker
from conceptforge.core.node_ids import ROOT_NODE_ID
from conceptforge.extensions.base import (
    Extension,
    FrameworkExtension,
    StylingExtension,
    UtilityExtension,
)
from conceptforge.extensions.registry import (
    ExtensionRegistry,
    ExtensionType,
    RegistrationResult,
)
from conceptforge.normalization.events import EventNormalizationOptions
from conceptforge.pipeline.processing import (
    ExtractionOptions,
    ProcessingOptions,
    ProcessingPipeline,
    ProcessingResult,
)
from conceptforge.processors.strategies import ComponentResolutionStrategy
from conceptforge.specs.component import ComponentOptions
from conceptforge.specs.concepts import ComponentConcept
from conceptforge.specs.template import TemplateNode
from conceptforge.validation.concepts import ValidationOptions

logger = logging.getLogger(__name__)

SUPPORTED_LANGUAGES = ("javascript", "typescript")

TemplateInput = list[TemplateNode] | list[dict[str, Any]] | dict[str, Any]


@dataclass
class EngineOptions:
    """
    Engine-wide defaults.

    Attributes:
        default_framework: Framework key used when a render call names none
        default_styling: Styling key used when a render call names none
        default_utilities: Utility keys used when a render call names none
        verbose_errors: Log a summary of diagnostics after every render
        analyzer_options: Options for the standard template analyzer
        merge_strategies: Default component property merge strategies
        validation: Default concept validation options
        event_normalization: Default event normalization options
        extraction: Default extractor selection
    """

    default_framework: str | None = None
    default_styling: str | None = None
    default_utilities: list[str] = field(default_factory=list)
    verbose_errors: bool = False
    analyzer_options: AnalyzerOptions = field(default_factory=AnalyzerOptions)
    merge_strategies: ComponentResolutionStrategy | None = None
    validation: ValidationOptions | None = None
    event_normalization: EventNormalizationOptions | None = None
    extraction: ExtractionOptions | None = None


@dataclass
class EngineStatus:
    frameworks: list[str]
    styling: list[str]
    utilities: list[str]
    config: EngineOptions


@dataclass
class AnalysisResult:
    """Concepts extracted without rendering. ``concepts`` is None when analysis failed."""

    concepts: ComponentConcept | None
    errors: ErrorCollector
    performance: PerformanceMetrics


class ConceptEngine:
    """Register extensions, set defaults, render templates."""

    def __init__(self, options: EngineOptions | None = None) -> None:
        self.options = options or EngineOptions()
        self.registry = ExtensionRegistry()
        self.errors = ErrorCollector()
        self.analyzer = TemplateAnalyzer(self.options.analyzer_options, self.errors)
        self.pipeline = ProcessingPipeline(self.registry, self.analyzer, self.errors)

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register_framework(self, extension: FrameworkExtension) -> None:
        self._check_registration("framework", extension, self.registry.register_framework)

    def register_styling(self, extension: StylingExtension) -> None:
        self._check_registration("styling", extension, self.registry.register_styling)

    def register_utility(self, extension: UtilityExtension) -> None:
        self._check_registration("utility", extension, self.registry.register_utility)

    def _check_registration(self, kind: str, extension: Any, register: Any) -> None:
        result: RegistrationResult = register(extension)
        key = getattr(getattr(extension, "metadata", None), "key", "?")
        if not result.is_valid:
            raise ExtensionError(
                f"Failed to register {kind} extension '{key}': {', '.join(result.errors)}",
                ErrorContext(extension=key),
            )
        for warning in result.warnings:
            logger.warning("Extension %s: %s", key, warning)
        logger.debug("Registered %s extension %s", kind, key)

    def validate_extension(self, extension: Extension) -> RegistrationResult:
        """Validate without registering."""
        return self.registry.validate_extension(extension)

    # -------------------------------------------------------------------------
    # Defaults
    # -------------------------------------------------------------------------

    def set_default_framework(self, framework: str) -> None:
        if not self.registry.has_extension(framework, "framework"):
            raise ExtensionError(f"Framework extension '{framework}' is not registered")
        self.options.default_framework = framework

    def set_default_styling(self, styling: str) -> None:
        if not self.registry.has_extension(styling, "styling"):
            raise ExtensionError(f"Styling extension '{styling}' is not registered")
        self.options.default_styling = styling

    def set_default_utilities(self, utilities: list[str]) -> None:
        for utility in utilities:
            if not self.registry.has_extension(utility, "utility"):
                raise ExtensionError(f"Utility extension '{utility}' is not registered")
        self.options.default_utilities = list(utilities)

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def render(
        self, template: TemplateInput, options: ProcessingOptions | None = None
    ) -> ProcessingResult:
        """
        Render a template through the pipeline.

        ``template`` may be a node list or a ``{"template": [...], "component": {...}}``
        wrapper. A wrapper's component is used unless ``options`` carries one.

        Raises:
            TemplateValidationError: If the input is not a template at all
            RenderError: If the pipeline itself raised
        """
        nodes, component = unwrap_template(template)
        processing = self._processing_options(options, component)

        self.errors.clear()
        self.analyzer.clear_errors()
        try:
            result = self.pipeline.process(nodes, processing)
        except Exception as exc:
            raise RenderError(f"Template rendering failed: {exc}") from exc

        has_issues = result.errors.has_errors() or result.errors.has_warnings()
        if self.options.verbose_errors and has_issues:
            logger.warning("Processing completed with issues:\n%s", result.errors.format_errors())
        return result

    def render_with_auto_enhancement(
        self, template: TemplateInput, options: ProcessingOptions | None = None
    ) -> ProcessingResult:
        """Render with extractors, validation and consistency checks picked from the template."""
        nodes, component = unwrap_template(template)
        processing = self._processing_options(options, component)

        self.errors.clear()
        self.analyzer.clear_errors()
        try:
            return self.pipeline.process_with_auto_enhancement(nodes, processing)
        except Exception as exc:
            raise RenderError(f"Template rendering failed: {exc}") from exc

    def render_strict(
        self, template: TemplateInput, options: ProcessingOptions | None = None
    ) -> ProcessingResult:
        """
        Render and raise instead of returning a result with error diagnostics.

        Raises:
            RenderError: If no framework is selected, the language is unknown,
                or the result carries error diagnostics
        """
        nodes, component = unwrap_template(template)
        processing = self._processing_options(options, component)
        if not processing.framework:
            raise RenderError("No framework extension selected")
        if processing.language not in SUPPORTED_LANGUAGES:
            raise RenderError(f"Unknown target language '{processing.language}'")

        result = self.render(nodes, processing)
        if result.errors.has_errors():
            raise RenderError(
                "Rendering produced errors:\n" + result.errors.format_errors(),
                ErrorContext(extension=processing.framework),
            )
        return result

    def analyze(self, template: TemplateInput) -> AnalysisResult:
        """Extract concepts without rendering."""
        nodes, _ = unwrap_template(template)
        self.errors.clear()
        self.analyzer.clear_errors()
        tracker = self.get_performance_tracker()
        tracker.start()

        try:
            concepts = self.analyzer.extract_concepts(nodes)
        except Exception as exc:
            logger.warning("Template analysis failed: %s", exc)
            self.errors.add_simple_error(
                f"Template analysis failed: {exc}", ROOT_NODE_ID, "analyzer"
            )
            return AnalysisResult(None, self.errors, tracker.get_metrics())

        tracker.increment_concept_count(concepts.total_concepts())
        return AnalysisResult(concepts, self.errors, tracker.get_metrics())

    def _processing_options(
        self, options: ProcessingOptions | None, component: ComponentOptions | None
    ) -> ProcessingOptions:
        options = options or ProcessingOptions()
        defaults = self.options
        update: dict[str, Any] = {
            "framework": options.framework or defaults.default_framework,
            "styling": options.styling or defaults.default_styling,
            "utilities": options.utilities
            if options.utilities is not None
            else (list(defaults.default_utilities) or None),
            "component": options.component or component,
            "merge_strategies": options.merge_strategies or defaults.merge_strategies,
            "validation": options.validation or defaults.validation,
            "event_normalization": options.event_normalization or defaults.event_normalization,
        }
        if defaults.extraction is not None and options.extraction == ExtractionOptions():
            update["extraction"] = defaults.extraction
        return replace(options, **update)

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    def get_status(self) -> EngineStatus:
        return EngineStatus(
            frameworks=self.registry.get_available_frameworks(),
            styling=self.registry.get_available_styling(),
            utilities=self.registry.get_available_utilities(),
            config=self.options,
        )

    def has_extension(self, key: str, kind: ExtensionType | None = None) -> bool:
        return self.registry.has_extension(key, kind)

    def get_framework_extension(self, key: str) -> FrameworkExtension | None:
        return self.registry.get_framework(key)

    def get_styling_extension(self, key: str) -> StylingExtension | None:
        return self.registry.get_styling(key)

    def get_utility_extension(self, key: str) -> UtilityExtension | None:
        return self.registry.get_utility(key)

    def remove_extension(self, key: str, kind: ExtensionType) -> bool:
        removed = self.registry.remove_extension(key, kind)
        if removed and kind == "framework" and self.options.default_framework == key:
            self.options.default_framework = None
        if removed and kind == "styling" and self.options.default_styling == key:
            self.options.default_styling = None
        if removed and kind == "utility" and key in self.options.default_utilities:
            self.options.default_utilities.remove(key)
        return removed

    def clear_extensions(self, kind: ExtensionType | None = None) -> None:
        self.registry.clear_extensions(kind)

    def get_extension_count(self, kind: ExtensionType | None = None) -> int:
        return self.registry.get_extension_count(kind)

    def get_error_collector(self) -> ErrorCollector:
        return self.errors

    def get_performance_tracker(self) -> PerformanceTracker:
        return self.pipeline.tracker

    def clone(self, **overrides: Any) -> ConceptEngine:
        """New engine with the same extensions and defaults, overridden by keyword."""
        options = replace(
            self.options, default_utilities=list(self.options.default_utilities), **overrides
        )
        engine = ConceptEngine(options)
        for key in self.registry.get_available_frameworks():
            engine.register_framework(self.registry.get_framework(key))  # type: ignore[arg-type]
        for key in self.registry.get_available_styling():
            engine.register_styling(self.registry.get_styling(key))  # type: ignore[arg-type]
        for key in self.registry.get_available_utilities():
            engine.register_utility(self.registry.get_utility(key))  # type: ignore[arg-type]
        return engine


def unwrap_template(
    template: TemplateInput,
) -> tuple[list[TemplateNode] | list[dict[str, Any]], ComponentOptions | None]:
    """
    Split render input into the node list and optional component metadata.

    Raises:
        TemplateValidationError: If the input is neither a list nor a wrapper object
    """
    if isinstance(template, list):
        return template, None
    if isinstance(template, dict) and isinstance(template.get("template"), list):
        raw_component = template.get("component")
        if raw_component is None:
            return template["template"], None
        try:
            return template["template"], ComponentOptions.model_validate(raw_component)
        except ValidationError as exc:
            raise TemplateValidationError(f"Invalid component metadata: {exc}") from exc
    raise TemplateValidationError(
        "Template must be a list of nodes or an object with a 'template' list"
    )
