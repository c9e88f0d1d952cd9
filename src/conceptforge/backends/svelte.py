"""
Svelte framework backend.

Renders a ComponentConcept as a Svelte component: a ``<script>`` block with
the imports and ``export let`` props, the markup, then an optional
``<style>`` block. Control flow uses ``{#if}``, ``{#each}`` and ``<slot>``.

Reactive statements (lines starting with ``$:``) from the component script
are moved after the other script lines so they see every declaration.
"""

from __future__ import annotations

import logging
from typing import Any

from conceptforge.analyzer.style_syntax import (
    CLASS_DIRECTIVE_PREFIX,
    CLASS_EXPRESSION_ATTRIBUTES,
    STYLE_DIRECTIVE_PREFIX,
    STYLE_EXPRESSION_ATTRIBUTES,
    split_classes,
)
from conceptforge.backends.markup import (
    ConceptTreeRenderer,
    html_attribute,
    indent,
    translate_modifiers,
)
from conceptforge.core.diagnostics import ErrorCollector
from conceptforge.extensions.base import (
    FrameworkAttributeOutput,
    FrameworkConditionalOutput,
    FrameworkEventOutput,
    FrameworkExtension,
    FrameworkIterationOutput,
    FrameworkSlotOutput,
    RenderContext,
)
from conceptforge.normalization.events import EventNormalizationOptions, EventNormalizer
from conceptforge.processors.imports import ImportProcessingOptions
from conceptforge.processors.properties import ComponentPropertyProcessor
from conceptforge.processors.strategies import ComponentResolutionStrategy
from conceptforge.specs.component import ComponentOptions
from conceptforge.specs.concepts import (
    AttributeConcept,
    ComponentConcept,
    ConditionalConcept,
    ElementConcept,
    EventConcept,
    IterationConcept,
    SlotConcept,
    StructuralConcept,
)
from conceptforge.specs.extension import ExtensionMetadata
from conceptforge.specs.template import ElementNode, TemplateNode

logger = logging.getLogger(__name__)

_BINDING_PREFIXES = ("v-bind:", ":")
_VUE_DIRECTIVE_PREFIX = "v-"
_REACTIVE_PREFIX = "$:"


def each_block(iteration: IterationConcept, content: str) -> str:
    header = f"{{#each {iteration.items} as {iteration.item_variable}"
    if iteration.index_variable:
        header += f", {iteration.index_variable}"
    if iteration.key_expression:
        header += f" ({iteration.key_expression})"
    return f"{header}}}\n{indent(content)}\n{{/each}}"


def split_reactive(script: str) -> tuple[list[str], list[str]]:
    """Separate ``$:`` statements from the rest of a script."""
    plain: list[str] = []
    reactive: list[str] = []
    for line in script.strip().split("\n"):
        (reactive if line.strip().startswith(_REACTIVE_PREFIX) else plain).append(line)
    return plain, reactive


class SvelteTemplateRenderer(ConceptTreeRenderer):
    """Render structural concepts to Svelte markup."""

    framework = "svelte"

    def __init__(
        self,
        events: list[EventConcept] | None = None,
        conditionals: list[ConditionalConcept] | None = None,
        iterations: list[IterationConcept] | None = None,
        slots: list[SlotConcept] | None = None,
        normalizer: EventNormalizer | None = None,
        errors: ErrorCollector | None = None,
    ) -> None:
        super().__init__(events, conditionals, iterations, slots, errors)
        self.normalizer = normalizer or EventNormalizer(errors=ErrorCollector())

    def render_root(self, structure: list[StructuralConcept]) -> str:
        parts = [part for part in (self.render_node(node) for node in structure) if part.strip()]
        return "\n".join(parts)

    def render_element(self, node: ElementConcept) -> str:
        attributes = self.class_attributes(node) + self.style_attributes(node)
        for name, value in node.attributes.items():
            if _is_folded(name):
                continue
            if name.startswith(_VUE_DIRECTIVE_PREFIX):
                self.warn_dropped(node, name)
                continue
            attributes += html_attribute(name, value)
        for name, expression in node.expression_attributes.items():
            if _is_folded(name):
                continue
            if name.startswith(_BINDING_PREFIXES):
                name = _strip_binding(name)
            elif name.startswith(_VUE_DIRECTIVE_PREFIX):
                self.warn_dropped(node, name)
                continue
            attributes += f" {name}={{{expression}}}"
        for event in self.events.get(node.node_id, []):
            attributes += f" {self.event_attribute(event)}={{{event.handler}}}"
        return self.close_element(node, attributes)

    def class_attributes(self, node: ElementConcept) -> str:
        """
        A single ``class`` attribute plus any ``class:name`` directives.

        Bound class expressions are interpolated after the static classes.
        """
        static_classes: list[str] = []
        for name in ("class", "className"):
            value = node.attributes.get(name)
            if isinstance(value, str):
                static_classes.extend(split_classes(value))
        bound: list[str] = []
        directives = ""
        for name, value in node.attributes.items():
            if name.startswith(CLASS_DIRECTIVE_PREFIX):
                directives += html_attribute(name, value) if value is True else ""
        for name, expression in node.expression_attributes.items():
            if name == "class" or name in CLASS_EXPRESSION_ATTRIBUTES:
                bound.append(expression)
            elif name.startswith(CLASS_DIRECTIVE_PREFIX):
                directives += f" {name}={{{expression}}}"

        if not bound:
            result = html_attribute("class", " ".join(static_classes)) if static_classes else ""
        elif not static_classes and len(bound) == 1:
            result = f" class={{{bound[0]}}}"
        else:
            parts = static_classes + [f"{{{expression}}}" for expression in bound]
            result = ' class="{}"'.format(" ".join(parts))
        return result + directives

    def style_attributes(self, node: ElementConcept) -> str:
        static = node.attributes.get("style")
        static_text = static.strip().rstrip(";") if isinstance(static, str) else ""
        bound = [
            expression
            for name, expression in node.expression_attributes.items()
            if name in STYLE_EXPRESSION_ATTRIBUTES
        ]
        if not bound:
            result = html_attribute("style", static_text) if static_text else ""
        elif not static_text and len(bound) == 1:
            result = f" style={{{bound[0]}}}"
        else:
            parts = ([f"{static_text};"] if static_text else []) + [f"{{{e}}}" for e in bound]
            result = ' style="{}"'.format(" ".join(parts))

        for name, value in node.attributes.items():
            if name.startswith(STYLE_DIRECTIVE_PREFIX) and not isinstance(value, bool):
                result += html_attribute(name, value)
        for name, expression in node.expression_attributes.items():
            if name.startswith(STYLE_DIRECTIVE_PREFIX):
                result += f" {name}={{{expression}}}"
        return result

    def event_attribute(self, event: EventConcept) -> str:
        """``on:click|preventDefault``; two-way bindings stay ``bind:``."""
        if event.source_attribute and event.source_attribute.startswith("bind:"):
            return event.source_attribute
        normalized = self.normalizer.normalize_event(
            event, EventNormalizationOptions(framework="svelte", validate_events=False)
        )
        attribute = (
            normalized.framework_attribute
            if normalized.was_normalized
            else f"on:{normalized.common_name}"
        )
        modifiers = translate_modifiers(normalized.modifiers, "svelte")
        return attribute + "".join(f"|{modifier}" for modifier in modifiers)

    def render_conditional(self, conditional: ConditionalConcept) -> str:
        then_content = indent(self.render_nodes(conditional.then_nodes))
        result = f"{{#if {conditional.condition}}}\n{then_content}"
        if conditional.else_nodes is not None:
            result += f"\n{{:else}}\n{indent(self.render_nodes(conditional.else_nodes))}"
        return result + "\n{/if}"

    def render_iteration(self, iteration: IterationConcept) -> str:
        return each_block(iteration, self.render_nodes(iteration.child_nodes))

    def render_slot(self, slot: SlotConcept) -> str:
        name = "" if slot.name == "default" else html_attribute("name", slot.name)
        if not slot.fallback:
            return f"<slot{name} />"
        return f"<slot{name}>\n{indent(self.render_nodes(slot.fallback))}\n</slot>"


def _is_folded(name: str) -> bool:
    if name in ("class", "className", "style"):
        return True
    if name in CLASS_EXPRESSION_ATTRIBUTES or name in STYLE_EXPRESSION_ATTRIBUTES:
        return True
    return name.startswith((CLASS_DIRECTIVE_PREFIX, STYLE_DIRECTIVE_PREFIX))


def _strip_binding(name: str) -> str:
    for prefix in _BINDING_PREFIXES:
        if name.startswith(prefix):
            return name[len(prefix) :]
    return name


# =============================================================================
# Extension
# =============================================================================


class SvelteFrameworkExtension(FrameworkExtension):
    """Concept-driven Svelte backend."""

    metadata = ExtensionMetadata(
        type="framework", key="svelte", name="Svelte Framework Extension", version="1.0.0"
    )
    framework = "svelte"

    def __init__(
        self,
        strategy: ComponentResolutionStrategy | None = None,
        errors: ErrorCollector | None = None,
    ) -> None:
        self.errors = errors if errors is not None else ErrorCollector()
        self.property_processor = ComponentPropertyProcessor(strategy, self.errors)
        self.normalizer = EventNormalizer(errors=self.errors)

    @property
    def strategy(self) -> ComponentResolutionStrategy:
        return self.property_processor.strategy

    def node_handler(self, node: TemplateNode, context: RenderContext) -> TemplateNode:
        if not isinstance(node, ElementNode):
            return node
        overrides: dict[str, Any] = node.extensions.get("svelte") or {}
        update: dict[str, Any] = {}
        if overrides.get("tag"):
            update["tag"] = overrides["tag"]
        if overrides.get("attributes"):
            update["attributes"] = {**node.attributes, **overrides["attributes"]}
        expression_attributes = overrides.get("expressionAttributes") or overrides.get(
            "expression_attributes"
        )
        if expression_attributes:
            update["expression_attributes"] = {
                **node.expression_attributes,
                **{name: str(value) for name, value in expression_attributes.items()},
            }
        return node.model_copy(update=update) if update else node

    # -------------------------------------------------------------------------
    # Concept transforms
    # -------------------------------------------------------------------------

    def process_events(self, events: list[EventConcept]) -> FrameworkEventOutput:
        renderer = SvelteTemplateRenderer(normalizer=self.normalizer)
        return FrameworkEventOutput(
            attributes={renderer.event_attribute(event): event.handler for event in events}
        )

    def process_conditionals(
        self, conditionals: list[ConditionalConcept]
    ) -> FrameworkConditionalOutput:
        renderer = SvelteTemplateRenderer(conditionals=conditionals)
        return FrameworkConditionalOutput(
            syntax="\n".join(renderer.render_conditional(c) for c in conditionals)
        )

    def process_iterations(self, iterations: list[IterationConcept]) -> FrameworkIterationOutput:
        renderer = SvelteTemplateRenderer(iterations=iterations)
        return FrameworkIterationOutput(
            syntax="\n".join(renderer.render_iteration(i) for i in iterations)
        )

    def process_slots(self, slots: list[SlotConcept]) -> FrameworkSlotOutput:
        renderer = SvelteTemplateRenderer(slots=slots)
        return FrameworkSlotOutput(syntax="\n".join(renderer.render_slot(s) for s in slots))

    def process_attributes(self, attributes: list[AttributeConcept]) -> FrameworkAttributeOutput:
        result: dict[str, str] = {}
        for attr in attributes:
            name = _strip_binding(attr.name)
            if isinstance(attr.value, bool):
                if attr.value:
                    result[name] = "true"
            elif attr.is_expression:
                result[name] = f"{{{attr.value}}}"
            else:
                result[name] = str(attr.value)
        return FrameworkAttributeOutput(attributes=result)

    # -------------------------------------------------------------------------
    # Component assembly
    # -------------------------------------------------------------------------

    def render_component(self, concepts: ComponentConcept, context: RenderContext) -> str:
        component = context.component or ComponentOptions()
        properties = self.property_processor.merge_component_properties(
            component, self.framework, context.component_name
        )
        typescript = context.typescript

        imports = self.property_processor.import_processor.merge_imports(
            [],
            list(properties.imports),
            ImportProcessingOptions(strategy=self.strategy.imports),
        )
        import_lines = self.property_processor.import_processor.generate_import_strings(imports)
        if context.style_output is not None:
            import_lines += context.style_output.imports

        errors = context.errors if context.errors is not None else self.errors
        renderer = SvelteTemplateRenderer.for_component(
            concepts, normalizer=self.normalizer, errors=errors
        )
        body = renderer.render_root(concepts.structure)

        sections = [
            self._script_block(properties.props, properties.script, import_lines, typescript),
            body,
            self._style_block(context),
        ]
        logger.debug(
            "Rendered Svelte component %s (%d props)", properties.name, len(properties.props)
        )
        return "\n\n".join(section for section in sections if section)

    @staticmethod
    def _script_block(
        props: dict[str, str], script: str, import_lines: list[str], typescript: bool
    ) -> str:
        declarations = [
            f"export let {name}: {type_};" if typescript else f"export let {name};"
            for name, type_ in props.items()
        ]
        plain, reactive = split_reactive(script) if script.strip() else ([], [])
        groups = [import_lines, declarations, plain, reactive]
        content = "\n\n".join("\n".join(group) for group in groups if group)
        if not content:
            return ""
        lang = ' lang="ts"' if typescript else ""
        return f"<script{lang}>\n{indent(content)}\n</script>"

    @staticmethod
    def _style_block(context: RenderContext) -> str:
        style_output = context.style_output
        if style_output is None or not style_output.styles.strip():
            return ""
        lang = context.options.get("style_lang")
        attributes = f' lang="{lang}"' if lang and lang != "css" else ""
        if context.options.get("global_styles"):
            attributes += " global"
        return f"<style{attributes}>\n{indent(style_output.styles.strip())}\n</style>"

    def get_errors(self) -> ErrorCollector:
        return self.errors

    def clear_errors(self) -> None:
        self.errors.clear()
