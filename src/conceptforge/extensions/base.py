"""
Extension contract for backends and plugins.

Three kinds of extension plug into the pipeline:
- Framework: turns concepts into one target framework's component source
- Styling: turns the merged styling concept into stylesheet text
- Utility: rewrites the concept aggregate before rendering

Every extension is also a ``LifecycleHooks`` provider. The hook methods are
identity transforms by default; an extension overrides only the ones it
needs, and ``HookChain`` folds them left to right in registration order.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from conceptforge.core.diagnostics import ErrorCollector
from conceptforge.core.node_ids import ROOT_NODE_ID
from conceptforge.specs.component import ComponentOptions
from conceptforge.specs.concepts import (
    AttributeConcept,
    ComponentConcept,
    ConditionalConcept,
    EventConcept,
    IterationConcept,
    SlotConcept,
    StylingConcept,
)
from conceptforge.specs.extension import ExtensionMetadata
from conceptforge.specs.template import TemplateNode

logger = logging.getLogger(__name__)

STYLING_APPROACHES = frozenset({"bem", "tailwind", "css-modules", "styled-components"})


# =============================================================================
# Render context and outputs
# =============================================================================


@dataclass
class RenderContext:
    """
    Everything a backend needs besides the concepts.

    Attributes:
        component: Component metadata from the input wrapper
        framework: Target framework key
        component_name: Explicit name from render options (highest priority)
        language: ``javascript`` or ``typescript``
        options: Free-form backend options
        style_output: Stylesheet produced by the styling extension, if any
        errors: Diagnostics sink for this render; backends report
            warnings about dropped or rewritten syntax here
    """

    component: ComponentOptions | None = None
    framework: str | None = None
    component_name: str | None = None
    language: str = "javascript"
    options: dict[str, Any] = field(default_factory=dict)
    style_output: StyleOutput | None = None
    errors: ErrorCollector | None = None

    @property
    def typescript(self) -> bool:
        if self.language == "typescript":
            return True
        return bool(self.component and self.component.typescript)


class FrameworkEventOutput(BaseModel):
    attributes: dict[str, str] = Field(default_factory=dict)
    imports: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class FrameworkConditionalOutput(BaseModel):
    syntax: str = ""
    imports: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class FrameworkIterationOutput(BaseModel):
    syntax: str = ""
    imports: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class FrameworkSlotOutput(BaseModel):
    syntax: str = ""
    props: dict[str, str] = Field(default_factory=dict, description="Prop name to type")
    imports: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class FrameworkAttributeOutput(BaseModel):
    attributes: dict[str, str] = Field(default_factory=dict)
    imports: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class StyleOutput(BaseModel):
    """Stylesheet text plus imports and the styling concept after rewriting."""

    styles: str = ""
    imports: list[str] = Field(default_factory=list)
    updated_styling: StylingConcept | None = None

    model_config = ConfigDict(frozen=True)


# =============================================================================
# Lifecycle hooks
# =============================================================================


class LifecycleHooks:
    """
    Optional render-time transforms.

    Each method returns its first argument unchanged. Subclasses override
    the ones they care about.
    """

    def before_render(
        self, template: list[TemplateNode], context: RenderContext
    ) -> list[TemplateNode]:
        return template

    def node_handler(self, node: TemplateNode, context: RenderContext) -> TemplateNode:
        return node

    def root_handler(self, output: str, context: RenderContext) -> str:
        """Transform the rendered component body."""
        return output

    def after_render(self, output: str, context: RenderContext) -> str:
        return output

    def on_output_write(self, output: str, context: RenderContext) -> str:
        """Last chance to change the text before it is written to disk."""
        return output


class HookChain:
    """
    Ordered fold over LifecycleHooks providers.

    With an ``errors`` sink a failing hook is recorded and skipped: its phase
    continues with the value the hook received. Without one, hook exceptions
    propagate to the caller.

    Example:
        chain = HookChain([utility, styling, framework], errors)
        nodes = chain.before_render(nodes, context)
    """

    def __init__(
        self,
        hooks: list[LifecycleHooks] | None = None,
        errors: ErrorCollector | None = None,
    ) -> None:
        self.hooks = [hook for hook in hooks or [] if isinstance(hook, LifecycleHooks)]
        self.errors = errors
        self.failures: list[str] = []

    def __len__(self) -> int:
        return len(self.hooks)

    def before_render(
        self, template: list[TemplateNode], context: RenderContext
    ) -> list[TemplateNode]:
        return self._fold("before_render", template, context)

    def node_handler(self, node: TemplateNode, context: RenderContext) -> TemplateNode:
        return self._fold("node_handler", node, context)

    def transform_tree(
        self, template: list[TemplateNode], context: RenderContext
    ) -> list[TemplateNode]:
        """Apply ``node_handler`` to every node, parents before children.

        Each hook walks the whole tree in turn, so a hook that fails part way
        leaves the tree exactly as the previous hook returned it.
        """
        for hook in self.hooks:
            try:
                template = [_transform_node(hook, node, context) for node in template]
            except Exception as exc:
                self._record(hook, "node_handler", exc)
        return template

    def root_handler(self, output: str, context: RenderContext) -> str:
        return self._fold("root_handler", output, context)

    def after_render(self, output: str, context: RenderContext) -> str:
        return self._fold("after_render", output, context)

    def on_output_write(self, output: str, context: RenderContext) -> str:
        return self._fold("on_output_write", output, context)

    def _fold(self, phase: str, value: Any, context: RenderContext) -> Any:
        for hook in self.hooks:
            try:
                value = getattr(hook, phase)(value, context)
            except Exception as exc:
                self._record(hook, phase, exc)
        return value

    def _record(self, hook: LifecycleHooks, phase: str, exc: Exception) -> None:
        if self.errors is None:
            raise
        metadata = getattr(hook, "metadata", None)
        key = metadata.key if metadata is not None else type(hook).__name__
        logger.warning("Lifecycle hook %s of %s failed: %s", phase, key, exc)
        self.failures.append(key)
        self.errors.add_simple_error(
            f"Lifecycle hook {phase} of '{key}' failed: {exc}", ROOT_NODE_ID, key
        )


def _transform_node(
    hook: LifecycleHooks, node: TemplateNode, context: RenderContext
) -> TemplateNode:
    node = hook.node_handler(node, context)
    update: dict[str, Any] = {}
    for name in ("children", "then", "else_", "fallback"):
        value = getattr(node, name, None)
        if value:
            update[name] = [_transform_node(hook, child, context) for child in value]
    return node.model_copy(update=update) if update else node


# =============================================================================
# Extension base classes
# =============================================================================


class Extension(LifecycleHooks, ABC):
    """Base class for every extension: identity metadata plus hooks."""

    metadata: ExtensionMetadata

    @property
    def key(self) -> str:
        return self.metadata.key

    def __str__(self) -> str:
        return f"{self.metadata.name} ({self.metadata.type}:{self.metadata.key})"


class FrameworkExtension(Extension):
    """
    Backend that renders a ComponentConcept as one framework's source file.

    Example:
        class SolidExtension(FrameworkExtension):
            metadata = ExtensionMetadata(
                type="framework", key="solid", name="Solid", version="0.1.0"
            )
            framework = "solid"
            ...
    """

    framework: str

    @abstractmethod
    def process_events(self, events: list[EventConcept]) -> FrameworkEventOutput:
        pass

    @abstractmethod
    def process_conditionals(
        self, conditionals: list[ConditionalConcept]
    ) -> FrameworkConditionalOutput:
        pass

    @abstractmethod
    def process_iterations(self, iterations: list[IterationConcept]) -> FrameworkIterationOutput:
        pass

    @abstractmethod
    def process_slots(self, slots: list[SlotConcept]) -> FrameworkSlotOutput:
        pass

    @abstractmethod
    def process_attributes(self, attributes: list[AttributeConcept]) -> FrameworkAttributeOutput:
        pass

    @abstractmethod
    def render_component(self, concepts: ComponentConcept, context: RenderContext) -> str:
        """Return one complete source file for the component."""
        pass


class StylingExtension(Extension):
    """Turns the merged styling concept into stylesheet text."""

    styling: str

    @abstractmethod
    def process_styles(self, styling: StylingConcept) -> StyleOutput:
        pass

    def convert_format(self, source: str, target: str) -> StyleOutput | None:
        return None


class UtilityExtension(Extension):
    """Rewrites the concept aggregate before rendering."""

    utility: str

    @abstractmethod
    def process(self, concepts: ComponentConcept) -> ComponentConcept:
        pass


FRAMEWORK_METHODS = (
    "process_events",
    "process_conditionals",
    "process_iterations",
    "process_slots",
    "process_attributes",
    "render_component",
)
