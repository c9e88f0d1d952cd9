"""
Base assembly stage.

Turns a concept aggregate into output text using the registered extensions:

1. Template hooks: ``before_render`` then ``node_handler`` over every node.
   When the hooks change the tree, concepts are re-extracted from it.
2. Utility extensions fold over the concepts in registration order.
3. The selected styling extension renders the styling concept.
4. The selected framework extension renders the component, then
   ``root_handler`` and ``after_render`` fold over its output.

With no framework selected the output is empty and an info diagnostic is
recorded. A failing extension or lifecycle hook is reported and skipped;
assembly never raises.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from conceptforge.analyzer.template_analyzer import TemplateAnalyzer
from conceptforge.core.diagnostics import ErrorCollector
from conceptforge.core.metrics import PerformanceTracker
from conceptforge.core.node_ids import ROOT_NODE_ID
from conceptforge.extensions.base import (
    Extension,
    FrameworkExtension,
    HookChain,
    RenderContext,
    StyleOutput,
    StylingExtension,
    UtilityExtension,
)
from conceptforge.extensions.registry import ExtensionRegistry
from conceptforge.specs.concepts import ComponentConcept
from conceptforge.specs.template import TemplateNode

logger = logging.getLogger(__name__)

ASSEMBLY_EXTENSION = "assembly"


@dataclass
class AssemblyResult:
    output: str
    concepts: ComponentConcept
    template: list[TemplateNode]
    style_output: StyleOutput | None = None
    used_framework: str | None = None
    failed_hooks: list[str] = field(default_factory=list)


class AssemblyStage:
    """Render concepts through the utility, styling and framework extensions."""

    def __init__(
        self,
        registry: ExtensionRegistry,
        analyzer: TemplateAnalyzer,
        errors: ErrorCollector,
        tracker: PerformanceTracker | None = None,
    ) -> None:
        self.registry = registry
        self.analyzer = analyzer
        self.errors = errors
        self.tracker = tracker or PerformanceTracker()

    def active_extensions(
        self,
        framework: str | None,
        styling: str | None,
        utilities: list[str] | None = None,
    ) -> tuple[list[UtilityExtension], StylingExtension | None, FrameworkExtension | None]:
        """Resolve selected keys to extensions, reporting unknown ones."""
        if utilities is None:
            selected_utilities = [
                self.registry.get_utility(key) for key in self.registry.get_available_utilities()
            ]
        else:
            selected_utilities = []
            for key in utilities:
                utility = self.registry.get_utility(key)
                if utility is None:
                    self._warn(f"Utility extension '{key}' is not registered")
                else:
                    selected_utilities.append(utility)

        styling_ext = None
        if styling:
            styling_ext = self.registry.get_styling(styling)
            if styling_ext is None:
                self._warn(f"Styling extension '{styling}' is not registered")

        framework_ext = None
        if framework:
            framework_ext = self.registry.get_framework(framework)
            if framework_ext is None:
                self.errors.add_simple_error(
                    f"Framework extension '{framework}' is not registered",
                    ROOT_NODE_ID,
                    ASSEMBLY_EXTENSION,
                )

        return selected_utilities, styling_ext, framework_ext

    def assemble(
        self,
        template: list[TemplateNode],
        concepts: ComponentConcept,
        context: RenderContext,
        styling: str | None = None,
        utilities: list[str] | None = None,
    ) -> AssemblyResult:
        utility_exts, styling_ext, framework_ext = self.active_extensions(
            context.framework, styling, utilities
        )
        chain_members: list[Extension] = [*utility_exts]
        if styling_ext is not None:
            chain_members.append(styling_ext)
        if framework_ext is not None:
            chain_members.append(framework_ext)
        hooks = HookChain(chain_members, self.errors)
        if context.errors is None:
            context.errors = self.errors

        template, concepts = self._apply_template_hooks(hooks, template, concepts, context)

        for utility in utility_exts:
            concepts = self._run_utility(utility, concepts)

        style_output = None
        if styling_ext is not None:
            style_output = self._run_styling(styling_ext, concepts)
            if style_output is not None and style_output.updated_styling is not None:
                concepts = concepts.model_copy(update={"styling": style_output.updated_styling})
        context.style_output = style_output

        if framework_ext is None:
            if not context.framework:
                self.errors.add_info(
                    "No framework extension selected; output is empty",
                    ROOT_NODE_ID,
                    ASSEMBLY_EXTENSION,
                )
            return AssemblyResult(
                output="",
                concepts=concepts,
                template=template,
                style_output=style_output,
                failed_hooks=hooks.failures,
            )

        output = self._run_framework(framework_ext, concepts, context)
        output = hooks.root_handler(output, context)
        output = hooks.after_render(output, context)

        return AssemblyResult(
            output=output,
            concepts=concepts,
            template=template,
            style_output=style_output,
            used_framework=framework_ext.metadata.key,
            failed_hooks=hooks.failures,
        )

    # -------------------------------------------------------------------------

    def _apply_template_hooks(
        self,
        hooks: HookChain,
        template: list[TemplateNode],
        concepts: ComponentConcept,
        context: RenderContext,
    ) -> tuple[list[TemplateNode], ComponentConcept]:
        if not hooks:
            return template, concepts
        transformed = hooks.transform_tree(hooks.before_render(template, context), context)
        if transformed == template:
            return template, concepts
        logger.debug("Template changed by lifecycle hooks, re-extracting concepts")
        return transformed, self.analyzer.extract_concepts(transformed)

    def _run_utility(
        self, utility: UtilityExtension, concepts: ComponentConcept
    ) -> ComponentConcept:
        key = utility.metadata.key
        self.tracker.start_extension(key)
        try:
            return utility.process(concepts)
        except Exception as exc:
            logger.warning("Utility extension %s failed: %s", key, exc)
            self.errors.add_simple_error(
                f"Utility extension '{key}' failed: {exc}", ROOT_NODE_ID, key
            )
            return concepts
        finally:
            self.tracker.end_extension(key)

    def _run_styling(
        self, styling: StylingExtension, concepts: ComponentConcept
    ) -> StyleOutput | None:
        key = styling.metadata.key
        self.tracker.start_extension(key)
        try:
            return styling.process_styles(concepts.styling)
        except Exception as exc:
            logger.warning("Styling extension %s failed: %s", key, exc)
            self.errors.add_simple_error(
                f"Styling extension '{key}' failed: {exc}", ROOT_NODE_ID, key
            )
            return None
        finally:
            self.tracker.end_extension(key)

    def _run_framework(
        self, framework: FrameworkExtension, concepts: ComponentConcept, context: RenderContext
    ) -> str:
        key = framework.metadata.key
        self.tracker.start_extension(key)
        try:
            return framework.render_component(concepts, context)
        except Exception as exc:
            logger.warning("Framework extension %s failed: %s", key, exc)
            self.errors.add_simple_error(
                f"Framework extension '{key}' failed to render: {exc}", ROOT_NODE_ID, key
            )
            return ""
        finally:
            self.tracker.end_extension(key)

    def _warn(self, message: str) -> None:
        self.errors.add_warning(message, ROOT_NODE_ID, ASSEMBLY_EXTENSION)
