"""
conceptforge: a retargetable UI-component compiler.

Templates are analyzed into framework-neutral concepts (events, styling,
conditionals, iterations, slots, attributes), optionally normalized and
validated, then rendered by a framework backend extension.

Example:
    from conceptforge import ConceptEngine, EngineOptions
    from conceptforge.backends import ReactFrameworkExtension

    engine = ConceptEngine(EngineOptions(default_framework="react"))
    engine.register_framework(ReactFrameworkExtension())
    print(engine.render(template).output)
"""

from conceptforge._version import get_version
from conceptforge.core.diagnostics import ErrorCollector, ProcessingError
from conceptforge.core.errors import (
    ConceptForgeError,
    ConfigError,
    ExtensionError,
    FileOutputError,
    RenderError,
    TemplateValidationError,
)
from conceptforge.engine import AnalysisResult, ConceptEngine, EngineOptions, EngineStatus
from conceptforge.pipeline import ProcessingOptions, ProcessingPipeline, ProcessingResult
from conceptforge.specs import ComponentConcept, ComponentOptions

__version__ = get_version()

__all__ = [
    "AnalysisResult",
    "ComponentConcept",
    "ComponentOptions",
    "ConceptEngine",
    "ConceptForgeError",
    "ConfigError",
    "EngineOptions",
    "EngineStatus",
    "ErrorCollector",
    "ExtensionError",
    "FileOutputError",
    "ProcessingError",
    "ProcessingOptions",
    "ProcessingPipeline",
    "ProcessingResult",
    "RenderError",
    "TemplateValidationError",
    "__version__",
]
