"""
Template analyzer: template tree -> ComponentConcept.

Two passes over the same tree:

1. Structural pass builds a parallel tree of element/text/comment/fragment
   concepts. ``if``/``for``/``slot`` nodes become fragments that remember
   their origin.
2. Behavioral pass walks the tree again with an index-path stack and pulls
   out events, attributes, styling, conditionals, iterations and slots.

Branches of an ``if`` node are addressed as its children: then-nodes first,
else-nodes continuing the index sequence. Nothing here raises on bad input;
anomalies are reported to the ErrorCollector and the node is skipped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from conceptforge.core.diagnostics import ErrorCollector
from conceptforge.core.node_ids import generate_node_id
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
    StyleExtensionEntry,
    StylingConcept,
    TextConcept,
)
from conceptforge.specs.template import (
    CommentNode,
    ElementNode,
    ForNode,
    FragmentNode,
    IfNode,
    SlotNode,
    TemplateNode,
    TextNode,
    parse_template,
)

from .event_syntax import DEFAULT_EVENT_PREFIXES, extract_call_parameters, split_event_attribute
from .style_syntax import (
    CLASS_DIRECTIVE_PREFIX,
    CLASS_EXPRESSION_ATTRIBUTES,
    STYLE_DIRECTIVE_PREFIX,
    STYLE_EXPRESSION_ATTRIBUTES,
    is_self_closing,
    is_styling_attribute,
    parse_inline_styles,
    split_classes,
)

logger = logging.getLogger(__name__)

ANALYZER_EXTENSION = "analyzer"


@dataclass
class AnalyzerOptions:
    """Which concept kinds to extract and how to recognize events."""

    extract_styling: bool = True
    extract_events: bool = True
    extract_conditionals: bool = True
    extract_iterations: bool = True
    extract_slots: bool = True
    extract_attributes: bool = True
    event_prefixes: list[str] = field(default_factory=lambda: list(DEFAULT_EVENT_PREFIXES))
    ignore_attributes: list[str] = field(default_factory=lambda: ["key", "ref"])


@dataclass
class _Collected:
    events: list[EventConcept] = field(default_factory=list)
    styling: StylingConcept = field(default_factory=StylingConcept)
    conditionals: list[ConditionalConcept] = field(default_factory=list)
    iterations: list[IterationConcept] = field(default_factory=list)
    slots: list[SlotConcept] = field(default_factory=list)
    attributes: list[AttributeConcept] = field(default_factory=list)
    node_count: int = 0


def addressable_children(node: TemplateNode) -> list[TemplateNode]:
    """Children in NodeId order: ``if`` branches, slot fallback, or plain children."""
    if isinstance(node, IfNode):
        return list(node.then) + list(node.else_ or [])
    if isinstance(node, SlotNode):
        return list(node.fallback or [])
    return list(getattr(node, "children", None) or [])


class TemplateAnalyzer:
    """Extract concepts from template trees."""

    def __init__(
        self, options: AnalyzerOptions | None = None, errors: ErrorCollector | None = None
    ) -> None:
        self.options = options or AnalyzerOptions()
        self.errors = errors if errors is not None else ErrorCollector()

    def extract_concepts(self, template: list[TemplateNode] | list[dict]) -> ComponentConcept:
        nodes = parse_template(list(template))
        structure = self._extract_structure(nodes, [])

        collected = _Collected()
        self._traverse(nodes, structure, [], collected)

        logger.debug(
            "Extracted %d events, %d conditionals, %d iterations, %d slots from %d nodes",
            len(collected.events),
            len(collected.conditionals),
            len(collected.iterations),
            len(collected.slots),
            collected.node_count,
        )

        return ComponentConcept(
            structure=structure,
            events=collected.events,
            styling=collected.styling,
            conditionals=collected.conditionals,
            iterations=collected.iterations,
            slots=collected.slots,
            attributes=collected.attributes,
            metadata={"node_count": collected.node_count},
        )

    def get_errors(self) -> ErrorCollector:
        return self.errors

    def clear_errors(self) -> None:
        self.errors.clear()

    # -------------------------------------------------------------------------
    # Structural pass
    # -------------------------------------------------------------------------

    def _extract_structure(
        self, nodes: list[TemplateNode], path: list[int]
    ) -> list[StructuralConcept]:
        result: list[StructuralConcept] = []
        for index, node in enumerate(nodes):
            current = [*path, index]
            result.append(self._structure_node(node, current))
        return result

    def _structure_node(self, node: TemplateNode, path: list[int]) -> StructuralConcept:
        node_id = generate_node_id(path)

        if isinstance(node, TextNode):
            return TextConcept(node_id=node_id, content=node.content)
        if isinstance(node, CommentNode):
            return CommentConcept(node_id=node_id, content=node.content)

        children = self._extract_structure(addressable_children(node), path)

        if isinstance(node, ElementNode):
            tag = node.tag or "div"
            return ElementConcept(
                node_id=node_id,
                tag=tag,
                attributes={
                    name: value
                    for name, value in node.attributes.items()
                    if not self._is_structurally_ignored(name)
                },
                expression_attributes={
                    name: str(value)
                    for name, value in node.expression_attributes.items()
                    if not self._is_structurally_ignored(name)
                },
                children=children,
                is_self_closing=is_self_closing(tag),
            )
        if isinstance(node, (FragmentNode, IfNode, ForNode, SlotNode)):
            return FragmentConcept(node_id=node_id, children=children, origin=node.type)

        self.errors.add_warning(
            f"Unknown node type for structural extraction: {node.type}",
            node_id,
            ANALYZER_EXTENSION,
        )
        return FragmentConcept(node_id=node_id, children=children, origin=node.type)

    # -------------------------------------------------------------------------
    # Behavioral pass
    # -------------------------------------------------------------------------

    def _traverse(
        self,
        nodes: list[TemplateNode],
        structures: list[StructuralConcept],
        path: list[int],
        collected: _Collected,
    ) -> None:
        for index, (node, structure) in enumerate(zip(nodes, structures)):
            current = [*path, index]
            node_id = generate_node_id(current)
            collected.node_count += 1
            try:
                self._extract_node(node, structure, node_id, collected)
                child_structures = getattr(structure, "children", [])
                self._traverse(addressable_children(node), child_structures, current, collected)
            except Exception as exc:
                logger.warning("Error processing node %s: %s", node_id, exc)
                self.errors.add_simple_error(
                    f"Error processing node: {exc}", node_id, ANALYZER_EXTENSION
                )

    def _extract_node(
        self,
        node: TemplateNode,
        structure: StructuralConcept,
        node_id: str,
        collected: _Collected,
    ) -> None:
        options = self.options
        if isinstance(node, IfNode):
            if options.extract_conditionals:
                conditional = self._extract_conditional(node, structure, node_id)
                if conditional:
                    collected.conditionals.append(conditional)
        elif isinstance(node, ForNode):
            if options.extract_iterations:
                iteration = self._extract_iteration(node, structure, node_id)
                if iteration:
                    collected.iterations.append(iteration)
        elif isinstance(node, SlotNode):
            if options.extract_slots:
                slot = self._extract_slot(node, structure, node_id)
                if slot:
                    collected.slots.append(slot)
        elif isinstance(node, ElementNode):
            if options.extract_events:
                collected.events.extend(self._extract_events(node, node_id))
            if options.extract_attributes:
                collected.attributes.extend(self._extract_attributes(node, node_id))
            if options.extract_styling:
                collected.styling = collected.styling.merge(self._extract_styling(node, node_id))
        elif isinstance(node, (TextNode, CommentNode, FragmentNode)):
            pass
        else:
            self.errors.add_warning(
                f"Unknown node type: {node.type}", node_id, ANALYZER_EXTENSION
            )

    def _extract_events(self, node: ElementNode, node_id: str) -> list[EventConcept]:
        events = []
        merged = {**node.attributes, **node.expression_attributes}
        for name, value in merged.items():
            parsed = split_event_attribute(name, self.options.event_prefixes)
            if parsed is None:
                continue
            handler = str(value)
            events.append(
                EventConcept(
                    node_id=node_id,
                    name=parsed.name,
                    handler=handler,
                    modifiers=parsed.modifiers,
                    parameters=extract_call_parameters(handler),
                    source_attribute=name,
                )
            )
        return events

    def _extract_attributes(self, node: ElementNode, node_id: str) -> list[AttributeConcept]:
        attributes = []
        for name, value in node.attributes.items():
            if self._is_behaviorally_ignored(name):
                continue
            attributes.append(
                AttributeConcept(node_id=node_id, name=name, value=value, is_expression=False)
            )
        for name, value in node.expression_attributes.items():
            if self._is_behaviorally_ignored(name):
                continue
            attributes.append(
                AttributeConcept(node_id=node_id, name=name, value=str(value), is_expression=True)
            )
        return attributes

    def _extract_styling(self, node: ElementNode, node_id: str) -> StylingConcept:
        static_classes: list[str] = []
        dynamic_classes: list[str] = []
        inline_styles: dict[str, str] = {}
        style_bindings: dict[str, str] = {}

        class_value = node.attributes.get("class")
        if isinstance(class_value, str):
            static_classes.extend(split_classes(class_value))

        style_value = node.attributes.get("style")
        if isinstance(style_value, str):
            inline_styles.update(parse_inline_styles(style_value))

        for name, value in node.attributes.items():
            if name.startswith(CLASS_DIRECTIVE_PREFIX) and value is True:
                class_name = name[len(CLASS_DIRECTIVE_PREFIX) :]
                dynamic_classes.append(f"{class_name} ? '{class_name}' : ''")

        for name, expression in node.expression_attributes.items():
            if name in CLASS_EXPRESSION_ATTRIBUTES:
                dynamic_classes.append(expression)
            elif name.startswith(CLASS_DIRECTIVE_PREFIX):
                class_name = name[len(CLASS_DIRECTIVE_PREFIX) :]
                dynamic_classes.append(f"{expression} ? '{class_name}' : ''")
            elif name in STYLE_EXPRESSION_ATTRIBUTES:
                style_bindings["style"] = expression
            elif name.startswith(STYLE_DIRECTIVE_PREFIX):
                style_bindings[name[len(STYLE_DIRECTIVE_PREFIX) :]] = expression

        extension_data = {
            key: [StyleExtensionEntry(node_id=node_id, data=data)]
            for key, data in node.extensions.items()
        }

        return StylingConcept(
            static_classes=static_classes,
            dynamic_classes=dynamic_classes,
            inline_styles=inline_styles,
            style_bindings=style_bindings,
            extension_data=extension_data,
        )

    def _extract_conditional(
        self, node: IfNode, structure: StructuralConcept, node_id: str
    ) -> ConditionalConcept | None:
        if not node.condition:
            self.errors.add_warning(
                "Conditional node missing condition", node_id, ANALYZER_EXTENSION
            )
            return None
        branches = list(getattr(structure, "children", []))
        split = len(node.then)
        return ConditionalConcept(
            node_id=node_id,
            condition=node.condition,
            then_nodes=branches[:split],
            else_nodes=branches[split:] if node.else_ is not None else None,
        )

    def _extract_iteration(
        self, node: ForNode, structure: StructuralConcept, node_id: str
    ) -> IterationConcept | None:
        if not node.items or not node.item:
            self.errors.add_warning(
                "Iteration node missing required properties (items, item)",
                node_id,
                ANALYZER_EXTENSION,
            )
            return None
        return IterationConcept(
            node_id=node_id,
            items=node.items,
            item_variable=node.item,
            index_variable=node.index,
            key_expression=node.key,
            child_nodes=list(getattr(structure, "children", [])),
        )

    def _extract_slot(
        self, node: SlotNode, structure: StructuralConcept, node_id: str
    ) -> SlotConcept | None:
        if not node.name:
            self.errors.add_warning("Slot node missing name", node_id, ANALYZER_EXTENSION)
            return None
        fallback = None
        if node.fallback is not None:
            fallback = list(getattr(structure, "children", []))
        return SlotConcept(node_id=node_id, name=node.name, fallback=fallback)

    # -------------------------------------------------------------------------
    # Attribute classification
    # -------------------------------------------------------------------------

    def _is_event_attribute(self, name: str) -> bool:
        return split_event_attribute(name, self.options.event_prefixes) is not None

    def _is_structurally_ignored(self, name: str) -> bool:
        return name in self.options.ignore_attributes or self._is_event_attribute(name)

    def _is_behaviorally_ignored(self, name: str) -> bool:
        return self._is_structurally_ignored(name) or is_styling_attribute(name)
