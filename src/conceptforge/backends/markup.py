"""
Shared tree walking for framework backends.

Every backend renders the structural concept tree and resolves control flow
by NodeId: a fragment that came from an ``if``, ``for`` or ``slot`` node is
replaced by the matching behavioral concept. Subclasses supply the syntax.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from conceptforge.core.diagnostics import ErrorCollector
from conceptforge.specs.concepts import (
    CommentConcept,
    ComponentConcept,
    ConditionalConcept,
    ElementConcept,
    EventConcept,
    FragmentConcept,
    IterationConcept,
    SlotConcept,
    StructuralConcept,
    TextConcept,
)

# Directive families with no portable meaning outside their own framework.
SVELTE_ONLY_PREFIXES = ("use:", "transition:", "in:", "out:", "animate:")


def indent(content: str, prefix: str = "  ") -> str:
    """Indent every non-blank line of ``content``."""
    return "\n".join(prefix + line if line.strip() else line for line in content.split("\n"))


def html_attribute(name: str, value: Any) -> str:
    """Static attribute text; ``True`` renders bare, ``False`` is omitted."""
    if isinstance(value, bool):
        return f" {name}" if value else ""
    return ' {}="{}"'.format(name, str(value).replace('"', "&quot;"))


def quote_expression(expression: str) -> str:
    """An expression placed inside a double-quoted attribute."""
    return expression.replace('"', "'")


class ConceptTreeRenderer(ABC):
    """
    Walk structural concepts, looking up behavior by NodeId.

    ``errors`` receives warnings about syntax the target cannot express.
    """

    framework: str = ""

    def __init__(
        self,
        events: list[EventConcept] | None = None,
        conditionals: list[ConditionalConcept] | None = None,
        iterations: list[IterationConcept] | None = None,
        slots: list[SlotConcept] | None = None,
        errors: ErrorCollector | None = None,
    ) -> None:
        self.events: dict[str, list[EventConcept]] = {}
        for event in events or []:
            self.events.setdefault(event.node_id, []).append(event)
        self.conditionals = {c.node_id: c for c in conditionals or []}
        self.iterations = {i.node_id: i for i in iterations or []}
        self.slots = {s.node_id: s for s in slots or []}
        self.errors = errors

    @classmethod
    def for_component(cls, concepts: ComponentConcept, **kwargs: Any) -> ConceptTreeRenderer:
        return cls(
            concepts.events,
            concepts.conditionals,
            concepts.iterations,
            concepts.slots,
            **kwargs,
        )

    def render_nodes(self, nodes: list[StructuralConcept] | None) -> str:
        return "".join(self.render_node(node) for node in nodes or [])

    def render_node(self, node: StructuralConcept) -> str:
        if isinstance(node, TextConcept):
            return node.content
        if isinstance(node, CommentConcept):
            return self.render_comment(node)
        if isinstance(node, ElementConcept):
            return self.render_element(node)
        if isinstance(node, FragmentConcept):
            return self.render_fragment(node)
        return ""

    def render_fragment(self, node: FragmentConcept) -> str:
        if node.origin == "if" and node.node_id in self.conditionals:
            return self.render_conditional(self.conditionals[node.node_id])
        if node.origin == "for" and node.node_id in self.iterations:
            return self.render_iteration(self.iterations[node.node_id])
        if node.origin == "slot" and node.node_id in self.slots:
            return self.render_slot(self.slots[node.node_id])
        return self.render_nodes(node.children)

    def render_comment(self, node: CommentConcept) -> str:
        return f"<!-- {node.content} -->"

    @abstractmethod
    def render_element(self, node: ElementConcept) -> str: ...

    @abstractmethod
    def render_conditional(self, conditional: ConditionalConcept) -> str: ...

    @abstractmethod
    def render_iteration(self, iteration: IterationConcept) -> str: ...

    @abstractmethod
    def render_slot(self, slot: SlotConcept) -> str: ...

    def close_element(self, node: ElementConcept, attributes: str) -> str:
        children = self.render_nodes(node.children)
        if node.is_self_closing and not children:
            return f"<{node.tag}{attributes} />"
        return f"<{node.tag}{attributes}>{children}</{node.tag}>"

    def warn_dropped(self, node: ElementConcept, name: str) -> None:
        if self.errors is not None:
            self.errors.add_warning(
                f"Directive '{name}' on <{node.tag}> has no "
                f"{self.framework.capitalize()} equivalent and was dropped",
                node.node_id,
                self.framework,
            )


# Vue and Svelte spell the same event modifiers differently.
_MODIFIER_SPELLINGS = {
    "vue": {"preventDefault": "prevent", "stopPropagation": "stop"},
    "svelte": {"prevent": "preventDefault", "stop": "stopPropagation"},
}


def translate_modifiers(modifiers: list[str], framework: str) -> list[str]:
    spellings = _MODIFIER_SPELLINGS.get(framework, {})
    return [spellings.get(modifier, modifier) for modifier in modifiers]
