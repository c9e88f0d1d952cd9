"""
Template node types.

The template tree is the compiler's input: a framework-agnostic description of
markup, control flow and slots. Nodes are frozen so no stage can modify the
caller's tree.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

AttributeValue = str | bool | int | float


def _coerce_nodes(value: Any) -> Any:
    """Accept raw dicts anywhere a list of nodes is expected."""
    if value is None:
        return None
    return [parse_node(item) if isinstance(item, dict) else item for item in value]


NodeList = Annotated[list["TemplateNode"], BeforeValidator(_coerce_nodes)]

# =============================================================================
# Nodes
# =============================================================================


class ElementNode(BaseModel):
    """
    Markup element.

    Example:
        ElementNode(
            tag="button",
            attributes={"class": "btn", "onClick": "save"},
            children=[TextNode(content="Save")],
        )
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Literal["element"] = "element"
    tag: str = "div"
    attributes: dict[str, AttributeValue] = Field(default_factory=dict)
    expression_attributes: dict[str, str] = Field(
        default_factory=dict,
        alias="expressionAttributes",
        description="Attributes whose values are expressions, not literals",
    )
    children: NodeList = Field(default_factory=list)
    extensions: dict[str, Any] = Field(
        default_factory=dict, description="Per-extension data keyed by extension key"
    )


class TextNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    content: str = ""


class CommentNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["comment"] = "comment"
    content: str = ""


class FragmentNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["fragment"] = "fragment"
    children: NodeList = Field(default_factory=list)


class IfNode(BaseModel):
    """
    Conditional rendering.

    Example:
        IfNode(condition="isOpen", then=[...], else_=[...])
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Literal["if"] = "if"
    condition: str = ""
    then: NodeList = Field(default_factory=list)
    else_: NodeList | None = Field(default=None, alias="else")
    children: NodeList = Field(default_factory=list)


class ForNode(BaseModel):
    """
    Iteration over a collection expression.

    Example:
        ForNode(items="todos", item="todo", key="todo.id", children=[...])
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["for"] = "for"
    items: str = ""
    item: str = ""
    index: str | None = None
    key: str | None = None
    children: NodeList = Field(default_factory=list)


class SlotNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["slot"] = "slot"
    name: str = ""
    fallback: NodeList | None = None


class UnknownNode(BaseModel):
    """Node with an unrecognized ``type``; kept so extraction can warn about it."""

    model_config = ConfigDict(frozen=True)

    type: str
    children: NodeList = Field(default_factory=list)
    raw: dict[str, Any] = Field(default_factory=dict)


TemplateNode = Union[
    ElementNode, TextNode, CommentNode, FragmentNode, IfNode, ForNode, SlotNode, UnknownNode
]

_NODE_TYPES: dict[str, type[BaseModel]] = {
    "element": ElementNode,
    "text": TextNode,
    "comment": CommentNode,
    "fragment": FragmentNode,
    "if": IfNode,
    "for": ForNode,
    "slot": SlotNode,
}


def parse_node(data: dict[str, Any]) -> TemplateNode:
    """Build a typed node from raw template data. Missing ``type`` means element."""
    node_type = data.get("type") or "element"
    node_class = _NODE_TYPES.get(node_type)
    if node_class is None:
        return UnknownNode(type=str(node_type), children=data.get("children") or [], raw=data)
    payload = {k: v for k, v in data.items() if v is not None or k == "else"}
    payload["type"] = node_type
    return node_class.model_validate(payload)  # type: ignore[return-value]


def parse_template(data: list[Any]) -> list[TemplateNode]:
    """Build typed nodes from a raw template list, leaving typed nodes as they are."""
    return [parse_node(item) if isinstance(item, dict) else item for item in data]


for _model in (ElementNode, FragmentNode, IfNode, ForNode, SlotNode, UnknownNode):
    _model.model_rebuild()
