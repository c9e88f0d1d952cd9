"""
React framework backend.

Renders a ComponentConcept as a function component:

    import React from 'react';

    const Btn = () => {
      return (
        <div className="btn">Hi</div>
      );
    };

    export default Btn;

The JSX body is rendered from the structural concept tree. Events,
conditionals, iterations and slots are looked up by NodeId while walking it.
"""

from __future__ import annotations

import json
import logging
import re

from conceptforge.analyzer.style_syntax import (
    CLASS_DIRECTIVE_PREFIX,
    CLASS_EXPRESSION_ATTRIBUTES,
    STYLE_DIRECTIVE_PREFIX,
    STYLE_EXPRESSION_ATTRIBUTES,
    kebab_to_camel,
    parse_inline_styles,
    split_classes,
)
from conceptforge.backends.markup import SVELTE_ONLY_PREFIXES, ConceptTreeRenderer
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
    CommentConcept,
    ComponentConcept,
    ConditionalConcept,
    ElementConcept,
    EventConcept,
    FragmentConcept,
    IterationConcept,
    SlotConcept,
    StructuralConcept,
)
from conceptforge.specs.extension import ExtensionMetadata

logger = logging.getLogger(__name__)

REACT_ATTRIBUTE_NAMES: dict[str, str] = {
    "class": "className",
    "for": "htmlFor",
    "tabindex": "tabIndex",
    "contenteditable": "contentEditable",
    "spellcheck": "spellCheck",
    "readonly": "readOnly",
    "maxlength": "maxLength",
    "minlength": "minLength",
    "formaction": "formAction",
    "formenctype": "formEncType",
    "formmethod": "formMethod",
    "formnovalidate": "formNoValidate",
    "formtarget": "formTarget",
    "novalidate": "noValidate",
    "autofocus": "autoFocus",
    "autocomplete": "autoComplete",
    "autoplay": "autoPlay",
    "cellpadding": "cellPadding",
    "cellspacing": "cellSpacing",
    "rowspan": "rowSpan",
    "colspan": "colSpan",
    "crossorigin": "crossOrigin",
    "usemap": "useMap",
    "allowfullscreen": "allowFullScreen",
    "datetime": "dateTime",
    "frameborder": "frameBorder",
    "marginheight": "marginHeight",
    "marginwidth": "marginWidth",
    "mediagroup": "mediaGroup",
    "radiogroup": "radioGroup",
    "srcdoc": "srcDoc",
    "srclang": "srcLang",
    "srcset": "srcSet",
    "accesskey": "accessKey",
    "enctype": "encType",
    "hreflang": "hrefLang",
    "inputmode": "inputMode",
    "itemprop": "itemProp",
    "referrerpolicy": "referrerPolicy",
    "playsinline": "playsInline",
}

JS_RESERVED_WORDS = frozenset(
    {
        "break", "case", "catch", "class", "const", "continue", "debugger", "default",
        "delete", "do", "else", "export", "extends", "finally", "for", "function", "if",
        "import", "in", "instanceof", "new", "return", "super", "switch", "this", "throw",
        "try", "typeof", "var", "void", "while", "with", "yield",
    }
)  # fmt: skip

MODIFIER_STATEMENTS = {
    "prevent": "e.preventDefault();",
    "stop": "e.stopPropagation();",
    "self": "if (e.target !== e.currentTarget) return;",
    "once": (
        "if (e.currentTarget.dataset.handlerExecuted) return; "
        'e.currentTarget.dataset.handlerExecuted = "true";'
    ),
}

_BINDING_PREFIXES = ("v-bind:", ":")
_DIRECTIVE_PREFIXES = ("v-", "bind:", *SVELTE_ONLY_PREFIXES)
_SLOT_SEPARATOR_RE = re.compile(r"[^a-zA-Z0-9]+(.)")
_INVALID_IDENTIFIER_CHARS_RE = re.compile(r"[^a-zA-Z0-9_$]")
_IDENTIFIER_START_RE = re.compile(r"^[a-zA-Z_$]")
_INLINE_ELEMENT_LIMIT = 80


# =============================================================================
# Pure syntax helpers
# =============================================================================


def react_attribute_name(name: str) -> str:
    """``class`` -> ``className``; ``aria-*``/``data-*`` pass through lower-cased."""
    lower = name.lower()
    if lower in REACT_ATTRIBUTE_NAMES:
        return REACT_ATTRIBUTE_NAMES[lower]
    if lower.startswith(("aria-", "data-")):
        return lower
    return name


def normalize_slot_name(name: str) -> str:
    """Turn a slot name into a prop name; the default slot becomes ``children``."""
    if name == "default":
        return "children"

    normalized = _SLOT_SEPARATOR_RE.sub(lambda m: m.group(1).upper(), name.lower())
    if not _IDENTIFIER_START_RE.match(normalized):
        normalized = "_" + normalized
    normalized = _INVALID_IDENTIFIER_CHARS_RE.sub("", normalized)
    if normalized in JS_RESERVED_WORDS:
        normalized += "Prop"
    return normalized or "slotProp"


def css_text_to_object(css_text: str) -> dict[str, str]:
    return {kebab_to_camel(prop): value for prop, value in parse_inline_styles(css_text).items()}


def style_object_literal(styles: dict[str, str]) -> str:
    return json.dumps(styles, separators=(",", ":"))


def modifier_statements(modifiers: list[str]) -> str:
    return " ".join(MODIFIER_STATEMENTS.get(m, f"/* modifier: {m} */") for m in modifiers)


def format_handler(handler: str, parameters: list[str], modifiers: list[str]) -> str:
    """
    Event handler expression for a JSX attribute.

    ``save`` stays ``save``. A call such as ``select(item)`` or any modifier
    wraps the handler in an arrow function; ``$event`` becomes ``e``.
    """
    call = handler.replace("$event", "e") if "(" in handler else None

    if modifiers:
        body = call or f"{handler}(e)"
        return f"(e) => {{ {modifier_statements(modifiers)} {body}; }}"
    if call is not None:
        takes_event = "e" in [p.strip().replace("$event", "e") for p in parameters]
        return f"(e) => {call}" if takes_event else f"() => {call}"
    return handler


def clean_jsx(content: str) -> str:
    return re.sub(r"\n\s*", "\n    ", content.strip())


def is_single_element(content: str) -> bool:
    trimmed = content.strip()
    return (
        trimmed.startswith("<")
        and trimmed.endswith(">")
        and "\n" not in trimmed
        and len(trimmed) < _INLINE_ELEMENT_LIMIT
    )


def conditional_syntax(condition: str, then_content: str, else_content: str | None) -> str:
    then_clean = clean_jsx(then_content) or "null"
    if else_content is not None:
        else_clean = clean_jsx(else_content) or "null"
        if is_single_element(then_clean) and is_single_element(else_clean):
            return f"{{{condition} ? {then_clean} : {else_clean}}}"
        return f"{{{condition} ? (\n    {then_clean}\n  ) : (\n    {else_clean}\n  )}}"
    if is_single_element(then_clean):
        return f"{{{condition} && {then_clean}}}"
    return f"{{{condition} && (\n    {then_clean}\n  )}}"


def iteration_syntax(iteration: IterationConcept, child_content: str) -> str:
    key = iteration.key_expression or iteration.index_variable or "index"
    if iteration.index_variable:
        params = f"({iteration.item_variable}, {iteration.index_variable})"
    elif key == "index":
        params = f"({iteration.item_variable}, index)"
    else:
        params = iteration.item_variable
    return (
        f"{{{iteration.items}.map({params} => (\n"
        f"    <React.Fragment key={{{key}}}>\n"
        f"      {clean_jsx(child_content)}\n"
        f"    </React.Fragment>\n"
        f"  ))}}"
    )


def slot_syntax(prop_name: str, fallback: str | None) -> str:
    if not fallback:
        return f"{{props.{prop_name}}}"
    clean = clean_jsx(fallback)
    if is_single_element(clean):
        return f"{{props.{prop_name} || {clean}}}"
    return f"{{props.{prop_name} || (\n    {clean}\n  )}}"


def attribute_syntax(name: str, value: str | bool | int | float, is_expression: bool) -> str:
    if isinstance(value, bool):
        return f" {name}" if value else ""
    if is_expression:
        return f" {name}={{{value}}}"
    text = str(value)
    if name == "style" and ":" in text:
        return f" style={{{style_object_literal(css_text_to_object(text))}}}"
    return ' {}="{}"'.format(name, text.replace('"', "&quot;"))


# =============================================================================
# JSX tree renderer
# =============================================================================


class JsxRenderer(ConceptTreeRenderer):
    """Render structural concepts to JSX, resolving control flow by NodeId."""

    framework = "react"

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
        if not parts:
            return "null"
        if len(parts) == 1:
            return parts[0]
        return "<>\n      " + "\n      ".join(parts) + "\n    </>"

    def render_comment(self, node: CommentConcept) -> str:
        return f"{{/* {node.content} */}}"

    def render_fragment(self, node: FragmentConcept) -> str:
        if node.origin == "fragment":
            return f"<React.Fragment>{self.render_nodes(node.children)}</React.Fragment>"
        return super().render_fragment(node)

    def render_conditional(self, conditional: ConditionalConcept) -> str:
        else_content = (
            self.render_nodes(conditional.else_nodes)
            if conditional.else_nodes is not None
            else None
        )
        return conditional_syntax(
            conditional.condition, self.render_nodes(conditional.then_nodes), else_content
        )

    def render_iteration(self, iteration: IterationConcept) -> str:
        return iteration_syntax(iteration, self.render_nodes(iteration.child_nodes))

    def render_slot(self, slot: SlotConcept) -> str:
        fallback = self.render_nodes(slot.fallback) if slot.fallback is not None else None
        return slot_syntax(normalize_slot_name(slot.name), fallback)

    def render_element(self, node: ElementConcept) -> str:
        attributes = self.class_attribute(node) + self.style_attribute(node)
        for name, value in node.attributes.items():
            if self._folded_or_dropped(node, name):
                continue
            attributes += attribute_syntax(react_attribute_name(name), value, False)
        for name, expression in node.expression_attributes.items():
            if self._folded_or_dropped(node, name):
                continue
            react_name = react_attribute_name(_strip_binding(name))
            attributes += attribute_syntax(react_name, expression, True)
        for event in self.events.get(node.node_id, []):
            attribute = self.event_attribute(event)
            handler = format_handler(event.handler, event.parameters, event.modifiers)
            attributes += f" {attribute}={{{handler}}}"

        return self.close_element(node, attributes)

    def class_attribute(self, node: ElementConcept) -> str:
        """
        One ``className`` for every class source on the element.

        Static text and bound expressions, ``class:name`` directives included,
        are joined at runtime when more than one is present.
        """
        static_classes: list[str] = []
        for name in ("class", "className"):
            value = node.attributes.get(name)
            if isinstance(value, str):
                static_classes.extend(split_classes(value))
        static_text = " ".join(static_classes)
        expressions: list[str] = []
        for name, value in node.attributes.items():
            if name.startswith(CLASS_DIRECTIVE_PREFIX) and value is True:
                class_name = name[len(CLASS_DIRECTIVE_PREFIX) :]
                expressions.append(f"{class_name} ? '{class_name}' : ''")
        for name, expression in node.expression_attributes.items():
            if name == "class" or name in CLASS_EXPRESSION_ATTRIBUTES:
                expressions.append(expression)
            elif name.startswith(CLASS_DIRECTIVE_PREFIX):
                class_name = name[len(CLASS_DIRECTIVE_PREFIX) :]
                expressions.append(f"{expression} ? '{class_name}' : ''")

        if not expressions:
            return attribute_syntax("className", static_text, False) if static_text else ""
        if not static_text and len(expressions) == 1:
            return f" className={{{expressions[0]}}}"
        items = ([f"'{static_text}'"] if static_text else []) + expressions
        return f" className={{[{', '.join(items)}].filter(Boolean).join(' ')}}"

    def style_attribute(self, node: ElementConcept) -> str:
        """One ``style`` object from static styles, bound objects and ``style:prop``."""
        entries: list[str] = []
        bound: list[str] = []
        static = node.attributes.get("style")
        if isinstance(static, str):
            entries.extend(
                f"{json.dumps(prop)}:{json.dumps(value)}"
                for prop, value in css_text_to_object(static).items()
            )
        for name, value in node.attributes.items():
            if name.startswith(STYLE_DIRECTIVE_PREFIX) and not isinstance(value, bool):
                prop = kebab_to_camel(name[len(STYLE_DIRECTIVE_PREFIX) :])
                entries.append(f"{json.dumps(prop)}:{json.dumps(str(value))}")
        for name, expression in node.expression_attributes.items():
            if name in STYLE_EXPRESSION_ATTRIBUTES:
                bound.append(expression)
            elif name.startswith(STYLE_DIRECTIVE_PREFIX):
                prop = kebab_to_camel(name[len(STYLE_DIRECTIVE_PREFIX) :])
                entries.append(f"{json.dumps(prop)}:{expression}")

        if not entries and len(bound) == 1:
            return f" style={{{bound[0]}}}"
        if not entries and not bound:
            return ""
        spread = [f"...({expression})" for expression in bound]
        return f" style={{{{{','.join(spread + entries)}}}}}"

    def _folded_or_dropped(self, node: ElementConcept, name: str) -> bool:
        if name in ("class", "style") or name in CLASS_EXPRESSION_ATTRIBUTES:
            return True
        if name in STYLE_EXPRESSION_ATTRIBUTES:
            return True
        if name.startswith((CLASS_DIRECTIVE_PREFIX, STYLE_DIRECTIVE_PREFIX)):
            return True
        if name.startswith(_BINDING_PREFIXES) or not name.startswith(_DIRECTIVE_PREFIXES):
            return False
        self.warn_dropped(node, name)
        return True

    def event_attribute(self, event: EventConcept) -> str:
        """React prop name for an event; unmapped events become ``on`` + capitalized name."""
        normalized = self.normalizer.normalize_event(
            event, EventNormalizationOptions(framework="react", validate_events=False)
        )
        if normalized.was_normalized:
            return normalized.framework_attribute
        name = normalized.common_name
        return "on" + name[:1].upper() + name[1:]


def _strip_binding(name: str) -> str:
    for prefix in _BINDING_PREFIXES:
        if name.startswith(prefix):
            return name[len(prefix) :]
    return name


# =============================================================================
# Extension
# =============================================================================


class ReactFrameworkExtension(FrameworkExtension):
    """Concept-driven React backend producing JSX or TSX function components."""

    metadata = ExtensionMetadata(
        type="framework", key="react", name="React Framework Extension", version="1.0.0"
    )
    framework = "react"

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

    # -------------------------------------------------------------------------
    # Concept transforms
    # -------------------------------------------------------------------------

    def process_events(self, events: list[EventConcept]) -> FrameworkEventOutput:
        renderer = JsxRenderer(normalizer=self.normalizer)
        attributes = {}
        for event in events:
            attributes[renderer.event_attribute(event)] = format_handler(
                event.handler, event.parameters, event.modifiers
            )
        return FrameworkEventOutput(attributes=attributes)

    def process_conditionals(
        self, conditionals: list[ConditionalConcept]
    ) -> FrameworkConditionalOutput:
        renderer = JsxRenderer(conditionals=conditionals)
        return FrameworkConditionalOutput(
            syntax="\n".join(renderer.render_conditional(c) for c in conditionals)
        )

    def process_iterations(self, iterations: list[IterationConcept]) -> FrameworkIterationOutput:
        renderer = JsxRenderer(iterations=iterations)
        return FrameworkIterationOutput(
            syntax="\n".join(renderer.render_iteration(i) for i in iterations),
            imports=["React"],
        )

    def process_slots(self, slots: list[SlotConcept]) -> FrameworkSlotOutput:
        renderer = JsxRenderer(slots=slots)
        return FrameworkSlotOutput(
            syntax="\n".join(renderer.render_slot(s) for s in slots),
            props={normalize_slot_name(s.name): "React.ReactNode" for s in slots},
            imports=["React"],
        )

    def process_attributes(self, attributes: list[AttributeConcept]) -> FrameworkAttributeOutput:
        result: dict[str, str] = {}
        for attr in attributes:
            name = react_attribute_name(_strip_binding(attr.name))
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
        name = properties.name

        imports = self.property_processor.import_processor.merge_imports(
            [ImportDefinition(from_="react", default="React")],
            list(properties.imports),
            ImportProcessingOptions(strategy=self.strategy.imports),
        )
        slot_props = {normalize_slot_name(s.name): "React.ReactNode" for s in concepts.slots}
        props = self.property_processor.merge_props(properties.props, slot_props)

        import_lines = self.property_processor.import_processor.generate_import_strings(imports)
        import_lines += self._style_imports(name, context)

        errors = context.errors if context.errors is not None else self.errors
        renderer = JsxRenderer.for_component(concepts, normalizer=self.normalizer, errors=errors)
        body = renderer.render_root(concepts.structure)
        typescript = context.typescript

        sections = [
            "\n".join(import_lines),
            self._props_interface(name, props) if typescript and props else "",
            self._component_function(name, props, properties.script, body, typescript),
            self._export(name, context),
        ]
        logger.debug("Rendered React component %s (%d props)", name, len(props))
        return "\n\n".join(section for section in sections if section)

    @staticmethod
    def _style_imports(name: str, context: RenderContext) -> list[str]:
        lines = []
        style_output = context.style_output
        if style_output is not None:
            lines.extend(style_output.imports)
        style_file = context.options.get("style_file")
        if not style_file and style_output is not None and style_output.styles:
            style_file = f"./{name}.css"
        if style_file:
            lines.append(f"import '{style_file}';")
        return lines

    @staticmethod
    def _props_interface(name: str, props: dict[str, str]) -> str:
        entries = "\n".join(f"  {key}?: {type_};" for key, type_ in props.items())
        return f"interface {name}Props {{\n{entries}\n}}"

    @staticmethod
    def _component_function(
        name: str, props: dict[str, str], script: str, body: str, typescript: bool
    ) -> str:
        params = "(props)" if props else "()"
        if typescript:
            component_type = f"React.FC<{name}Props>" if props else "React.FC"
            signature = f"const {name}: {component_type} = {params} => {{"
        else:
            signature = f"const {name} = {params} => {{"

        script_section = ""
        if script.strip():
            indented = "\n".join(f"  {line}" if line.strip() else "" for line in script.split("\n"))
            script_section = f"{indented}\n\n"

        return f"{signature}\n{script_section}  return (\n    {body}\n  );\n}};"

    @staticmethod
    def _export(name: str, context: RenderContext) -> str:
        if context.options.get("export_type") == "named":
            return f"export {{ {name} }};"
        return f"export default {name};"

    def get_errors(self) -> ErrorCollector:
        return self.errors

    def clear_errors(self) -> None:
        self.errors.clear()
