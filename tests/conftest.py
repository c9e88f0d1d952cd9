"""Shared pytest fixtures for conceptforge tests."""

from __future__ import annotations

from typing import Any

import pytest

from conceptforge.backends.react import ReactFrameworkExtension
from conceptforge.engine import ConceptEngine, EngineOptions
from conceptforge.extensions.base import (
    RenderContext,
    StyleOutput,
    StylingExtension,
    UtilityExtension,
)
from conceptforge.extensions.registry import ExtensionRegistry
from conceptforge.specs.concepts import ComponentConcept, StylingConcept
from conceptforge.specs.extension import ExtensionMetadata


class PlainCssExtension(StylingExtension):
    """Styling extension that turns static classes into empty CSS rules."""

    metadata = ExtensionMetadata(type="styling", key="plain-css", name="Plain CSS", version="1.0.0")
    styling = "css-modules"

    def process_styles(self, styling: StylingConcept) -> StyleOutput:
        rules = "\n".join(f".{cls} {{}}" for cls in styling.static_classes)
        return StyleOutput(styles=rules)


class MarkerUtility(UtilityExtension):
    """Utility that stamps the concept metadata and appends a banner after rendering."""

    metadata = ExtensionMetadata(type="utility", key="marker", name="Marker", version="1.0.0")
    utility = "marker"

    def process(self, concepts: ComponentConcept) -> ComponentConcept:
        return concepts.model_copy(update={"metadata": {**concepts.metadata, "marked": True}})

    def after_render(self, output: str, context: RenderContext) -> str:
        return "// generated\n" + output


class FailingUtility(UtilityExtension):
    metadata = ExtensionMetadata(type="utility", key="broken", name="Broken", version="1.0.0")
    utility = "broken"

    def process(self, concepts: ComponentConcept) -> ComponentConcept:
        raise RuntimeError("boom")


@pytest.fixture
def button_template() -> list[dict[str, Any]]:
    """A div with a class and a text child."""
    return [
        {
            "type": "element",
            "tag": "div",
            "attributes": {"class": "btn"},
            "children": [{"type": "text", "content": "Hi"}],
        }
    ]


@pytest.fixture
def interactive_template() -> list[dict[str, Any]]:
    """A template touching every concept kind."""
    return [
        {
            "tag": "div",
            "attributes": {"class": "card", "style": "color: red; font-size: 12px"},
            "children": [
                {
                    "tag": "button",
                    "attributes": {"@click.prevent": "save", "type": "submit"},
                    "children": [{"type": "text", "content": "Save"}],
                },
                {
                    "type": "if",
                    "condition": "visible",
                    "then": [{"tag": "span", "children": [{"type": "text", "content": "On"}]}],
                    "else": [{"tag": "span", "children": [{"type": "text", "content": "Off"}]}],
                },
                {
                    "type": "for",
                    "items": "items",
                    "item": "item",
                    "key": "item.id",
                    "children": [{"tag": "li", "children": [{"type": "text", "content": "x"}]}],
                },
                {"type": "slot", "name": "footer"},
            ],
        }
    ]


@pytest.fixture
def react_extension() -> ReactFrameworkExtension:
    return ReactFrameworkExtension()


@pytest.fixture
def registry(react_extension: ReactFrameworkExtension) -> ExtensionRegistry:
    """Registry with the React backend registered."""
    registry = ExtensionRegistry()
    registry.register_framework(react_extension)
    return registry


@pytest.fixture
def engine() -> ConceptEngine:
    """Engine with React registered as the default framework."""
    engine = ConceptEngine(EngineOptions())
    engine.register_framework(ReactFrameworkExtension())
    engine.set_default_framework("react")
    return engine


@pytest.fixture
def plain_css() -> PlainCssExtension:
    return PlainCssExtension()


@pytest.fixture
def marker_utility() -> MarkerUtility:
    return MarkerUtility()


@pytest.fixture
def failing_utility() -> FailingUtility:
    return FailingUtility()
