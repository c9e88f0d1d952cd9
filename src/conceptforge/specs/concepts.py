"""
Concept types: the compiler's intermediate representation.

A concept is a framework-agnostic description of one semantic aspect of a
template node. Every concept carries the NodeId of the node it came from.
All concept models are frozen; stages derive new values with ``model_copy``.
"""

from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from conceptforge.core.node_ids import ROOT_NODE_ID

from .template import AttributeValue

# =============================================================================
# Structural Concepts
# =============================================================================


class ElementConcept(BaseModel):
    """
    Element in the structural tree.

    ``attributes`` and ``expression_attributes`` hold everything except event
    attributes and ignored attributes (``key``, ``ref`` by default).
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["element"] = "element"
    node_id: str
    tag: str = "div"
    attributes: dict[str, AttributeValue] = Field(default_factory=dict)
    expression_attributes: dict[str, str] = Field(default_factory=dict)
    children: list["StructuralConcept"] = Field(default_factory=list)
    is_self_closing: bool = False


class TextConcept(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    node_id: str
    content: str = ""


class CommentConcept(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["comment"] = "comment"
    node_id: str
    content: str = ""


class FragmentConcept(BaseModel):
    """
    Grouping without markup.

    ``origin`` records which template node type the fragment stands in for
    (``fragment``, ``if``, ``for``, ``slot`` or an unknown type). Backends use
    it together with ``node_id`` to find the matching behavioral concept.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["fragment"] = "fragment"
    node_id: str
    children: list["StructuralConcept"] = Field(default_factory=list)
    origin: str = "fragment"


StructuralConcept = Union[ElementConcept, TextConcept, CommentConcept, FragmentConcept]

# =============================================================================
# Behavioral Concepts
# =============================================================================


class EventConcept(BaseModel):
    """
    Event binding.

    Example:
        EventConcept(node_id="root.children[0]", name="click",
                     handler="save", modifiers=["prevent"])
    """

    model_config = ConfigDict(frozen=True)

    node_id: str
    name: str = Field(description="Canonical (prefix-free) event name")
    handler: str
    modifiers: list[str] = Field(default_factory=list)
    parameters: list[str] = Field(default_factory=list)
    source_attribute: str | None = Field(
        default=None, description="Attribute the event was read from, e.g. '@click.prevent'"
    )


class StyleExtensionEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    node_id: str
    data: Any = None


class StylingConcept(BaseModel):
    """Styling of the whole component, accumulated across nodes by merge."""

    model_config = ConfigDict(frozen=True)

    node_id: str = ROOT_NODE_ID
    static_classes: list[str] = Field(default_factory=list)
    dynamic_classes: list[str] = Field(default_factory=list)
    inline_styles: dict[str, str] = Field(default_factory=dict)
    style_bindings: dict[str, str] = Field(default_factory=dict)
    extension_data: dict[str, list[StyleExtensionEntry]] = Field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not (
            self.static_classes
            or self.dynamic_classes
            or self.inline_styles
            or self.style_bindings
        )

    def merge(self, other: "StylingConcept") -> "StylingConcept":
        """Combine two styling values; classes keep first-seen order without duplicates."""
        extension_data = {key: list(entries) for key, entries in self.extension_data.items()}
        for key, entries in other.extension_data.items():
            extension_data.setdefault(key, []).extend(entries)
        return StylingConcept(
            node_id=self.node_id,
            static_classes=_unique(self.static_classes + other.static_classes),
            dynamic_classes=_unique(self.dynamic_classes + other.dynamic_classes),
            inline_styles={**self.inline_styles, **other.inline_styles},
            style_bindings={**self.style_bindings, **other.style_bindings},
            extension_data=extension_data,
        )


class ConditionalConcept(BaseModel):
    model_config = ConfigDict(frozen=True)

    node_id: str
    condition: str
    then_nodes: list[StructuralConcept] = Field(default_factory=list)
    else_nodes: list[StructuralConcept] | None = None


class IterationConcept(BaseModel):
    model_config = ConfigDict(frozen=True)

    node_id: str
    items: str
    item_variable: str
    index_variable: str | None = None
    key_expression: str | None = None
    child_nodes: list[StructuralConcept] = Field(default_factory=list)


class SlotConcept(BaseModel):
    model_config = ConfigDict(frozen=True)

    node_id: str
    name: str
    fallback: list[StructuralConcept] | None = None


class AttributeConcept(BaseModel):
    model_config = ConfigDict(frozen=True)

    node_id: str
    name: str
    value: AttributeValue
    is_expression: bool = False


# =============================================================================
# Aggregate
# =============================================================================


class ComponentConcept(BaseModel):
    """All concepts extracted from one template."""

    model_config = ConfigDict(frozen=True)

    structure: list[StructuralConcept] = Field(default_factory=list)
    events: list[EventConcept] = Field(default_factory=list)
    styling: StylingConcept = Field(default_factory=StylingConcept)
    conditionals: list[ConditionalConcept] = Field(default_factory=list)
    iterations: list[IterationConcept] = Field(default_factory=list)
    slots: list[SlotConcept] = Field(default_factory=list)
    attributes: list[AttributeConcept] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)

    def concept_counts(self) -> dict[str, int | bool]:
        """Summary used in result metadata."""
        return {
            "events": len(self.events),
            "styling": not self.styling.is_empty,
            "conditionals": len(self.conditionals),
            "iterations": len(self.iterations),
            "slots": len(self.slots),
            "attributes": len(self.attributes),
        }

    def total_concepts(self) -> int:
        return (
            len(self.events)
            + len(self.conditionals)
            + len(self.iterations)
            + len(self.slots)
            + len(self.attributes)
            + (0 if self.styling.is_empty else 1)
        )


def _unique(values: list[str]) -> list[str]:
    return list(dict.fromkeys(values))


for _model in (ElementConcept, FragmentConcept):
    _model.model_rebuild()
