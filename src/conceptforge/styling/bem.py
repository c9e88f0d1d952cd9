"""
BEM styling extension.

Template nodes opt in with an ``extensions.bem`` block:

    {"tag": "button", "extensions": {"bem": {"element": "action", "modifiers": ["primary"]}}}

Before rendering, every such node gets its ``block__element--modifier``
classes added to its ``class`` attribute. A node without its own ``block``
uses the nearest ancestor's. ``styles`` entries in the same block are
collected into nested SCSS by ``process_styles``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from conceptforge.analyzer.style_syntax import camel_to_kebab, split_classes
from conceptforge.core.diagnostics import ErrorCollector
from conceptforge.extensions.base import RenderContext, StyleOutput, StylingExtension
from conceptforge.specs.concepts import StylingConcept
from conceptforge.specs.extension import ExtensionMetadata
from conceptforge.specs.template import ElementNode, TemplateNode

logger = logging.getLogger(__name__)

BEM_KEY = "bem"
_CHILD_FIELDS = ("children", "then", "else_", "fallback")


@dataclass
class BemOptions:
    element_separator: str = "__"
    modifier_separator: str = "--"


def bem_modifiers(data: dict[str, Any]) -> list[str]:
    """``modifiers`` list plus the single ``modifier`` shortcut."""
    modifiers = list(data.get("modifiers") or [])
    if data.get("modifier"):
        modifiers.append(data["modifier"])
    return modifiers


class BemStylingExtension(StylingExtension):
    """Block, element, modifier class names and nested SCSS."""

    metadata = ExtensionMetadata(
        type="styling", key="bem", name="BEM Styling Extension", version="1.0.0"
    )
    styling = "bem"

    def __init__(self, options: BemOptions | None = None, errors: ErrorCollector | None = None):
        self.options = options or BemOptions()
        self.errors = errors if errors is not None else ErrorCollector()

    def class_names(self, block: str, element: str | None, modifiers: list[str]) -> list[str]:
        base = f"{block}{self.options.element_separator}{element}" if element else block
        return [base] + [f"{base}{self.options.modifier_separator}{m}" for m in modifiers]

    # -------------------------------------------------------------------------
    # Template rewriting
    # -------------------------------------------------------------------------

    def before_render(
        self, template: list[TemplateNode], context: RenderContext
    ) -> list[TemplateNode]:
        return [self._apply(node, None) for node in template]

    def _apply(self, node: TemplateNode, block: str | None) -> TemplateNode:
        update: dict[str, Any] = {}
        if isinstance(node, ElementNode):
            data = node.extensions.get(BEM_KEY)
            if isinstance(data, dict) and not data.get("ignore"):
                block = data.get("block") or block
                if block:
                    update.update(self._classes_for(node, data, block))
                else:
                    logger.debug("BEM data on <%s> without a block in scope", node.tag)

        for name in _CHILD_FIELDS:
            children = getattr(node, name, None)
            if children:
                update[name] = [self._apply(child, block) for child in children]
        return node.model_copy(update=update) if update else node

    def _classes_for(self, node: ElementNode, data: dict[str, Any], block: str) -> dict[str, Any]:
        classes = self.class_names(block, data.get("element"), bem_modifiers(data))
        existing = node.attributes.get("class")
        existing_classes = split_classes(existing) if isinstance(existing, str) else []
        merged = list(dict.fromkeys(existing_classes + classes))
        logger.debug("Applied BEM classes to <%s>: %s", node.tag, " ".join(merged))
        return {
            "attributes": {**node.attributes, "class": " ".join(merged)},
            # The resolved block travels with the node so the styling concept sees it.
            "extensions": {**node.extensions, BEM_KEY: {**data, "block": block}},
        }

    # -------------------------------------------------------------------------
    # Stylesheet
    # -------------------------------------------------------------------------

    def process_styles(self, styling: StylingConcept) -> StyleOutput:
        tree: dict[str, dict[str, Any]] = {}
        for entry in styling.extension_data.get(BEM_KEY, []):
            data = entry.data if isinstance(entry.data, dict) else {}
            block = data.get("block")
            if not block:
                continue
            self._add_selector(tree.setdefault(block, {}), data)
        scss = "\n\n".join(self.format_scss(block, rules) for block, rules in tree.items())
        return StyleOutput(styles=scss)

    def _add_selector(self, rules: dict[str, Any], data: dict[str, Any]) -> None:
        styles = data.get("styles") or {}
        # Only the single ``modifier`` scopes styles; ``modifiers`` are class names.
        modifier = data.get("modifier")
        if data.get("element"):
            rules = rules.setdefault(f"&{self.options.element_separator}{data['element']}", {})
        if modifier:
            rules.setdefault(f"&{self.options.modifier_separator}{modifier}", {}).update(styles)
        else:
            rules.update(styles)

    def format_scss(self, block: str, rules: dict[str, Any], depth: int = 0) -> str:
        """Nested SCSS for one block; ``&``-prefixed keys become nested rules."""
        pad = " " * depth
        lines = [f"{pad}.{block} {{"]
        lines.extend(_rule_lines(rules, depth + 2))
        lines.append(f"{pad}}}")
        return "\n".join(lines)

    def get_errors(self) -> ErrorCollector:
        return self.errors


def _rule_lines(rules: dict[str, Any], depth: int) -> list[str]:
    pad = " " * depth
    lines: list[str] = []
    for key, value in rules.items():
        if isinstance(value, dict):
            lines.append(f"{pad}{key} {{")
            lines.extend(_rule_lines(value, depth + 2))
            lines.append(f"{pad}}}")
        else:
            lines.append(f"{pad}{camel_to_kebab(key)}: {value};")
    return lines
