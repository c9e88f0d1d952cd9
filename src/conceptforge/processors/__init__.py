"""Resolution processors: component name, imports, scripts and props."""

from .imports import (
    DEFAULT_IMPORT_OPTIONS,
    ImportProcessingOptions,
    ImportProcessor,
    ImportValidationResult,
    ParsedImport,
)
from .names import (
    DEFAULT_COMPONENT_NAME,
    ComponentNameResolver,
    NameResolutionPriority,
    NameResolutionResult,
)
from .properties import ComponentPropertyProcessor, definition_from_options
from .scripts import (
    ScriptAnalysis,
    ScriptConflict,
    ScriptElement,
    ScriptMergeProcessor,
    ScriptMergeResult,
)
from .strategies import (
    DEFAULT_MERGE_STRATEGIES,
    ComponentResolutionStrategy,
    ImportMergeStrategy,
    PropMergeStrategy,
    ScriptMergeStrategy,
)

__all__ = [
    "DEFAULT_COMPONENT_NAME",
    "DEFAULT_IMPORT_OPTIONS",
    "DEFAULT_MERGE_STRATEGIES",
    "ComponentNameResolver",
    "ComponentPropertyProcessor",
    "ComponentResolutionStrategy",
    "ImportMergeStrategy",
    "ImportProcessingOptions",
    "ImportProcessor",
    "ImportValidationResult",
    "NameResolutionPriority",
    "NameResolutionResult",
    "ParsedImport",
    "PropMergeStrategy",
    "ScriptAnalysis",
    "ScriptConflict",
    "ScriptElement",
    "ScriptMergeProcessor",
    "ScriptMergeResult",
    "ScriptMergeStrategy",
    "definition_from_options",
]
