"""
Vue framework backend.

Renders a ComponentConcept as a single-file component:

    <template>
      <div class="btn">Hi</div>
    </template>

    <script>
    export default {
      name: 'Btn',
    };
    </script>

Conditionals and iterations become ``<template v-if>`` and
``<template v-for>`` wrappers so they work around any content. A template
node may carry an ``extensions.vue`` block whose ``tag``, ``attributes`` and
``expressionAttributes`` replace or extend the node before analysis.
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
    SVELTE_ONLY_PREFIXES,
    ConceptTreeRenderer,
    html_attribute,
    indent,
    quote_expression,
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
from conceptforge.specs.component import ComponentOptions, ImportDefinition
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

# TypeScript type expression prefix -> Vue runtime prop constructor.
_PROP_CONSTRUCTORS = (
    ("string", "String"),
    ("number", "Number"),
    ("boolean", "Boolean"),
    ("Record", "Object"),
    ("object", "Object"),
    ("{", "Object"),
    ("Array", "Array"),
)


def vue_prop_type(type_expression: str) -> str:
    """Best-effort runtime constructor for a TypeScript prop type."""
    text = type_expression.strip()
    if text.endswith("[]"):
        return "Array"
    if "=>" in text or text == "Function":
        return "Function"
    for prefix, constructor in _PROP_CONSTRUCTORS:
        if text.startswith(prefix):
            return constructor
    return "null"


def v_for_expression(iteration: IterationConcept) -> tuple[str, str]:
    """``(alias in items, key)``; unkeyed loops key on the index."""
    index = iteration.index_variable
    key = iteration.key_expression or index or "index"
    if index or key == "index":
        alias = f"({iteration.item_variable}, {index or 'index'})"
    else:
        alias = iteration.item_variable
    return f"{alias} in {iteration.items}", key


class VueTemplateRenderer(ConceptTreeRenderer):
    """Render structural concepts to Vue template markup."""

    framework = "vue"

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
            if _is_styling(name):
                continue
            if name.startswith(SVELTE_ONLY_PREFIXES):
                self.warn_dropped(node, name)
                continue
            attributes += html_attribute(name, value)
        for name, expression in node.expression_attributes.items():
            if _is_styling(name):
                continue
            if name.startswith(SVELTE_ONLY_PREFIXES):
                self.warn_dropped(node, name)
                continue
            if not name.startswith((*_BINDING_PREFIXES, _VUE_DIRECTIVE_PREFIX)):
                name = f":{name}"
            attributes += f' {name}="{quote_expression(expression)}"'
        for event in self.events.get(node.node_id, []):
            attributes += f' {self.event_attribute(event)}="{quote_expression(event.handler)}"'
        return self.close_element(node, attributes)

    def class_attributes(self, node: ElementConcept) -> str:
        static_classes: list[str] = []
        for name in ("class", "className"):
            value = node.attributes.get(name)
            if isinstance(value, str):
                static_classes.extend(split_classes(value))
        bound: list[str] = []
        for name, value in node.attributes.items():
            if name.startswith(CLASS_DIRECTIVE_PREFIX) and value is True:
                class_name = name[len(CLASS_DIRECTIVE_PREFIX) :]
                bound.append(f"{{ '{class_name}': {class_name} }}")
        for name, expression in node.expression_attributes.items():
            if name == "class" or name in CLASS_EXPRESSION_ATTRIBUTES:
                bound.append(expression)
            elif name.startswith(CLASS_DIRECTIVE_PREFIX):
                class_name = name[len(CLASS_DIRECTIVE_PREFIX) :]
                bound.append(f"{{ '{class_name}': {expression} }}")

        result = html_attribute("class", " ".join(static_classes)) if static_classes else ""
        return result + _bound_attribute(":class", bound)

    def style_attributes(self, node: ElementConcept) -> str:
        static = node.attributes.get("style")
        result = html_attribute("style", static) if isinstance(static, str) else ""
        bound: list[str] = []
        for name, value in node.attributes.items():
            if name.startswith(STYLE_DIRECTIVE_PREFIX) and not isinstance(value, bool):
                prop = name[len(STYLE_DIRECTIVE_PREFIX) :]
                bound.append(f"{{ '{prop}': '{value}' }}")
        for name, expression in node.expression_attributes.items():
            if name in STYLE_EXPRESSION_ATTRIBUTES:
                bound.append(expression)
            elif name.startswith(STYLE_DIRECTIVE_PREFIX):
                prop = name[len(STYLE_DIRECTIVE_PREFIX) :]
                bound.append(f"{{ '{prop}': {expression} }}")
        return result + _bound_attribute(":style", bound)

    def event_attribute(self, event: EventConcept) -> str:
        """``@click.prevent``; Svelte ``bind:`` events become ``v-model``."""
        if event.source_attribute and event.source_attribute.startswith("bind:"):
            return "v-model" if event.name in ("value", "checked") else f"v-model:{event.name}"
        normalized = self.normalizer.normalize_event(
            event, EventNormalizationOptions(framework="vue", validate_events=False)
        )
        attribute = (
            normalized.framework_attribute
            if normalized.was_normalized
            else f"@{normalized.common_name}"
        )
        modifiers = translate_modifiers(normalized.modifiers, "vue")
        return attribute + "".join(f".{modifier}" for modifier in modifiers)

    def render_conditional(self, conditional: ConditionalConcept) -> str:
        then_content = self.render_nodes(conditional.then_nodes)
        condition = quote_expression(conditional.condition)
        result = f'<template v-if="{condition}">{then_content}</template>'
        if conditional.else_nodes is not None:
            result += f"<template v-else>{self.render_nodes(conditional.else_nodes)}</template>"
        return result

    def render_iteration(self, iteration: IterationConcept) -> str:
        expression, key = v_for_expression(iteration)
        children = self.render_nodes(iteration.child_nodes)
        return (
            f'<template v-for="{quote_expression(expression)}" :key="{quote_expression(key)}">'
            f"{children}</template>"
        )

    def render_slot(self, slot: SlotConcept) -> str:
        name = "" if slot.name == "default" else html_attribute("name", slot.name)
        if not slot.fallback:
            return f"<slot{name} />"
        return f"<slot{name}>{self.render_nodes(slot.fallback)}</slot>"


def _is_styling(name: str) -> bool:
    if name in ("class", "className", "style"):
        return True
    if name in CLASS_EXPRESSION_ATTRIBUTES or name in STYLE_EXPRESSION_ATTRIBUTES:
        return True
    return name.startswith((CLASS_DIRECTIVE_PREFIX, STYLE_DIRECTIVE_PREFIX))


def _bound_attribute(name: str, expressions: list[str]) -> str:
    if not expressions:
        return ""
    value = expressions[0] if len(expressions) == 1 else f"[{', '.join(expressions)}]"
    return f' {name}="{quote_expression(value)}"'


# =============================================================================
# Extension
# =============================================================================


class VueFrameworkExtension(FrameworkExtension):
    """Concept-driven Vue backend producing Options API single-file components."""

    metadata = ExtensionMetadata(
        type="framework", key="vue", name="Vue Framework Extension", version="1.0.0"
    )
    framework = "vue"

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
        overrides: dict[str, Any] = node.extensions.get("vue") or {}
        if not overrides:
            return node
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
        renderer = VueTemplateRenderer(normalizer=self.normalizer)
        return FrameworkEventOutput(
            attributes={renderer.event_attribute(event): event.handler for event in events}
        )

    def process_conditionals(
        self, conditionals: list[ConditionalConcept]
    ) -> FrameworkConditionalOutput:
        renderer = VueTemplateRenderer(conditionals=conditionals)
        return FrameworkConditionalOutput(
            syntax="\n".join(renderer.render_conditional(c) for c in conditionals)
        )

    def process_iterations(self, iterations: list[IterationConcept]) -> FrameworkIterationOutput:
        renderer = VueTemplateRenderer(iterations=iterations)
        return FrameworkIterationOutput(
            syntax="\n".join(renderer.render_iteration(i) for i in iterations)
        )

    def process_slots(self, slots: list[SlotConcept]) -> FrameworkSlotOutput:
        renderer = VueTemplateRenderer(slots=slots)
        return FrameworkSlotOutput(syntax="\n".join(renderer.render_slot(s) for s in slots))

    def process_attributes(self, attributes: list[AttributeConcept]) -> FrameworkAttributeOutput:
        result: dict[str, str] = {}
        for attr in attributes:
            if isinstance(attr.value, bool):
                if attr.value:
                    result[attr.name] = "true"
            elif attr.is_expression and not attr.name.startswith(
                (*_BINDING_PREFIXES, _VUE_DIRECTIVE_PREFIX)
            ):
                result[f":{attr.name}"] = str(attr.value)
            else:
                result[attr.name] = str(attr.value)
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

        defaults = [ImportDefinition(from_="vue", named=["defineComponent"])] if typescript else []
        imports = self.property_processor.import_processor.merge_imports(
            defaults,
            list(properties.imports),
            ImportProcessingOptions(strategy=self.strategy.imports),
        )
        import_lines = self.property_processor.import_processor.generate_import_strings(imports)
        if context.style_output is not None:
            import_lines += context.style_output.imports

        errors = context.errors if context.errors is not None else self.errors
        renderer = VueTemplateRenderer.for_component(
            concepts, normalizer=self.normalizer, errors=errors
        )
        body = renderer.render_root(concepts.structure)

        sections = [
            f"<template>\n{indent(body)}\n</template>" if body else "<template>\n</template>",
            self._script_block(
                properties.name, properties.props, properties.script, import_lines, typescript
            ),
            self._style_block(context),
        ]
        logger.debug("Rendered Vue component %s (%d props)", properties.name, len(properties.props))
        return "\n\n".join(section for section in sections if section)

    @staticmethod
    def _script_block(
        name: str, props: dict[str, str], script: str, import_lines: list[str], typescript: bool
    ) -> str:
        members = [f"name: '{name}',"]
        if props:
            entries = "\n".join(f"  {key}: {vue_prop_type(type_)}," for key, type_ in props.items())
            members.append(f"props: {{\n{entries}\n}},")
        if script.strip():
            members.append(script.strip())
        body = indent("\n".join(members))
        if typescript:
            export = f"export default defineComponent({{\n{body}\n}});"
        else:
            export = f"export default {{\n{body}\n}};"

        lang = ' lang="ts"' if typescript else ""
        content = "\n\n".join(part for part in ("\n".join(import_lines), export) if part)
        return f"<script{lang}>\n{content}\n</script>"

    @staticmethod
    def _style_block(context: RenderContext) -> str:
        style_output = context.style_output
        if style_output is None or not style_output.styles.strip():
            return ""
        lang = context.options.get("style_lang")
        attributes = f' lang="{lang}"' if lang and lang != "css" else ""
        if context.options.get("scoped"):
            attributes += " scoped"
        return f"<style{attributes}>\n{style_output.styles.strip()}\n</style>"

    def get_errors(self) -> ErrorCollector:
        return self.errors

    def clear_errors(self) -> None:
        self.errors.clear()
