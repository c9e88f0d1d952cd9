"""
Component property merging.

Combines the common half of a component definition with its
framework-specific half into one resolved ``{name, props, imports, script}``.
"""

from __future__ import annotations

import logging

from conceptforge.core.diagnostics import ErrorCollector
from conceptforge.core.node_ids import ROOT_NODE_ID
from conceptforge.specs.component import (
    ComponentDefinition,
    ComponentOptions,
    ComponentProperties,
    ImportDefinition,
    ImportInput,
    PartialComponentProperties,
)

from .imports import ImportProcessingOptions, ImportProcessor
from .names import DEFAULT_COMPONENT_NAME, ComponentNameResolver
from .scripts import ScriptMergeProcessor
from .strategies import (
    DEFAULT_MERGE_STRATEGIES,
    ComponentResolutionStrategy,
    ImportMergeStrategy,
    PropMergeStrategy,
    ScriptMergeStrategy,
)

logger = logging.getLogger(__name__)

PROPERTY_PROCESSOR_EXTENSION = "component-processor"


def definition_from_options(
    component: ComponentOptions, framework: str | None
) -> ComponentDefinition:
    """Split component options into common and framework-specific halves."""
    override = component.framework_override(framework)
    return ComponentDefinition(
        common=PartialComponentProperties(
            name=component.name,
            props=component.props,
            imports=component.imports,
            script=component.script,
        ),
        framework=PartialComponentProperties(
            name=override.get("name"),
            props=override.get("props") or {},
            imports=override.get("imports") or [],
            script=override.get("script") or "",
        ),
    )


class ComponentPropertyProcessor:
    """Merge component properties with configurable strategies."""

    def __init__(
        self,
        strategy: ComponentResolutionStrategy | None = None,
        errors: ErrorCollector | None = None,
    ) -> None:
        self.strategy = strategy or DEFAULT_MERGE_STRATEGIES
        self.errors = errors if errors is not None else ErrorCollector()
        self.name_resolver = ComponentNameResolver(self.errors)
        self.import_processor = ImportProcessor(self.errors)
        self.script_processor = ScriptMergeProcessor(self.errors)

    def merge_component_properties(
        self,
        component: ComponentOptions,
        framework: str | None,
        options_name: str | None = None,
        default_name: str = DEFAULT_COMPONENT_NAME,
    ) -> ComponentProperties:
        definition = definition_from_options(component, framework)
        common, specific = definition.common, definition.framework
        return ComponentProperties(
            name=self.resolve_component_name(component, framework, options_name, default_name),
            props=self.merge_props(common.props, specific.props),
            imports=self.merge_imports(common.imports, specific.imports),
            script=self.merge_script(common.script, specific.script),
        )

    def resolve_component_name(
        self,
        component: ComponentOptions,
        framework: str | None,
        options_name: str | None = None,
        default_name: str = DEFAULT_COMPONENT_NAME,
    ) -> str:
        return self.name_resolver.resolve_simple(component, framework, options_name, default_name)

    def merge_props(
        self,
        common: dict[str, str],
        framework: dict[str, str],
        strategy: PropMergeStrategy | None = None,
    ) -> dict[str, str]:
        strategy = strategy or self.strategy.props
        if strategy.mode == "override":
            return dict(framework)
        if strategy.mode == "framework-first":
            return {**common, **framework}
        if strategy.mode == "common-first":
            return {**framework, **common}
        return self._merge_props_with_conflicts(common, framework, strategy)

    def _merge_props_with_conflicts(
        self, common: dict[str, str], framework: dict[str, str], strategy: PropMergeStrategy
    ) -> dict[str, str]:
        result = {**common, **framework}
        conflicts = [
            key for key, value in framework.items() if key in common and common[key] != value
        ]
        if not conflicts:
            return result

        message = f"Props conflicts detected: {', '.join(conflicts)}"
        policy = strategy.conflict_resolution
        if policy == "error":
            self.errors.add_simple_error(message, ROOT_NODE_ID, PROPERTY_PROCESSOR_EXTENSION)
        elif policy == "warn":
            self.errors.add_warning(message, ROOT_NODE_ID, PROPERTY_PROCESSOR_EXTENSION)
        elif policy == "framework-wins":
            self.errors.add_warning(
                f"{message} (framework values used)", ROOT_NODE_ID, PROPERTY_PROCESSOR_EXTENSION
            )
        else:
            for key in conflicts:
                result[key] = common[key]
            self.errors.add_warning(
                f"{message} (common values used)", ROOT_NODE_ID, PROPERTY_PROCESSOR_EXTENSION
            )
        return result

    def merge_imports(
        self,
        common: list[ImportInput],
        framework: list[ImportInput],
        strategy: ImportMergeStrategy | None = None,
    ) -> list[ImportDefinition]:
        options = ImportProcessingOptions(strategy=strategy or self.strategy.imports)
        return self.import_processor.merge_imports(common, framework, options)

    def merge_script(
        self, common: str, framework: str, strategy: ScriptMergeStrategy | None = None
    ) -> str:
        result = self.script_processor.merge_scripts(
            common, framework, strategy or self.strategy.script
        )
        for conflict in result.conflicts:
            self.errors.add_warning(
                f"Script conflict on '{conflict.element}': {conflict.suggestion}",
                ROOT_NODE_ID,
                PROPERTY_PROCESSOR_EXTENSION,
            )
        return result.content

    def get_errors(self) -> ErrorCollector:
        return self.errors

    def clear_errors(self) -> None:
        self.errors.clear()
