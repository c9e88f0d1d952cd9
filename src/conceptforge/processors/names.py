"""
Component name resolution.

Candidates are tried in priority order and the first *valid* one wins:

1. the render options' component name
2. ``component.extensions.<framework>.name``
3. ``component.name``
4. the default name

Invalid candidates are skipped with a warning rather than used.
"""

from __future__ import annotations

import logging
import re
from enum import IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from conceptforge.core.diagnostics import ErrorCollector
from conceptforge.core.node_ids import ROOT_NODE_ID
from conceptforge.specs.component import ComponentOptions

logger = logging.getLogger(__name__)

NAME_RESOLVER_EXTENSION = "component-name-resolver"
DEFAULT_COMPONENT_NAME = "Component"

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_PASCAL_SEPARATOR_RE = re.compile(r"[-_\s]+(.)?")

RESERVED_WORDS = frozenset(
    {
        "break",
        "case",
        "catch",
        "class",
        "const",
        "continue",
        "debugger",
        "default",
        "delete",
        "do",
        "else",
        "enum",
        "export",
        "extends",
        "false",
        "finally",
        "for",
        "function",
        "if",
        "import",
        "in",
        "instanceof",
        "new",
        "null",
        "return",
        "super",
        "switch",
        "this",
        "throw",
        "true",
        "try",
        "typeof",
        "var",
        "void",
        "while",
        "with",
        "yield",
        "let",
        "static",
        "implements",
        "interface",
        "package",
        "private",
        "protected",
        "public",
    }
)

_FRAMEWORK_SUGGESTIONS = {
    "react": ["ReactComponent", "Component"],
    "vue": ["VueComponent", "Component"],
    "svelte": ["SvelteComponent", "Component"],
}


class NameResolutionPriority(IntEnum):
    OPTIONS_OVERRIDE = 1
    FRAMEWORK_SPECIFIC = 2
    COMMON_NAME = 3
    DEFAULT_FALLBACK = 4


class NameResolutionResult(BaseModel):
    """Resolved name plus where it came from."""

    name: str
    priority: NameResolutionPriority
    source: str = Field(description="Dotted path of the winning candidate")
    used_fallback: bool = False
    alternatives: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


def _as_component(component: ComponentOptions | dict[str, Any] | None) -> ComponentOptions:
    if component is None:
        return ComponentOptions()
    if isinstance(component, ComponentOptions):
        return component
    return ComponentOptions.model_validate(component)


class ComponentNameResolver:
    """Pick the component name for one render call."""

    def __init__(self, errors: ErrorCollector | None = None) -> None:
        self.errors = errors if errors is not None else ErrorCollector()

    def resolve_component_name(
        self,
        component: ComponentOptions | dict[str, Any] | None,
        framework: str | None,
        options_name: str | None = None,
        default_name: str = DEFAULT_COMPONENT_NAME,
    ) -> NameResolutionResult:
        component = _as_component(component)
        warnings: list[str] = []
        framework_name = component.framework_override(framework).get("name")

        candidates = [
            (
                options_name,
                NameResolutionPriority.OPTIONS_OVERRIDE,
                "options.component.name",
                "Invalid component name in options",
            ),
            (
                framework_name,
                NameResolutionPriority.FRAMEWORK_SPECIFIC,
                f"component.extensions.{framework}.name",
                "Invalid framework-specific component name",
            ),
            (
                component.name,
                NameResolutionPriority.COMMON_NAME,
                "component.name",
                "Invalid common component name",
            ),
        ]

        for candidate, priority, source, invalid_message in candidates:
            if not candidate:
                continue
            if self.is_valid_component_name(candidate):
                return NameResolutionResult(
                    name=candidate,
                    priority=priority,
                    source=source,
                    alternatives=self._alternatives(
                        [framework_name, component.name, default_name], exclude=candidate
                    ),
                    warnings=warnings,
                )
            message = f'{invalid_message}: "{candidate}"'
            warnings.append(message)
            self.errors.add_warning(message, ROOT_NODE_ID, NAME_RESOLVER_EXTENSION)

        if default_name != DEFAULT_COMPONENT_NAME:
            warnings.append(f'Using fallback component name: "{default_name}"')

        return NameResolutionResult(
            name=default_name,
            priority=NameResolutionPriority.DEFAULT_FALLBACK,
            source="default_name",
            used_fallback=True,
            alternatives=self._alternatives(
                [component.name, framework_name], exclude=default_name
            ),
            warnings=warnings,
        )

    def resolve_simple(
        self,
        component: ComponentOptions | dict[str, Any] | None,
        framework: str | None,
        options_name: str | None = None,
        default_name: str = DEFAULT_COMPONENT_NAME,
    ) -> str:
        return self.resolve_component_name(component, framework, options_name, default_name).name

    @staticmethod
    def is_valid_component_name(name: str | None) -> bool:
        """PascalCase JavaScript identifier that is not a reserved word."""
        if not name or not isinstance(name, str):
            return False
        if not name[0].isupper() or not name[0].isascii():
            return False
        if not _IDENTIFIER_RE.match(name):
            return False
        return name.lower() not in RESERVED_WORDS

    def generate_suggestions(
        self, component: ComponentOptions | dict[str, Any] | None, framework: str | None
    ) -> list[str]:
        component = _as_component(component)
        suggestions: list[str] = []
        if component.name:
            suggestions.append(self.to_pascal_case(component.name))
        suggestions.extend(_FRAMEWORK_SUGGESTIONS.get(framework or "", ["Component"]))
        return [name for name in dict.fromkeys(suggestions) if self.is_valid_component_name(name)]

    @staticmethod
    def to_pascal_case(value: str) -> str:
        """``my-button`` / ``my_button`` / ``my button`` -> ``MyButton``."""
        result = _PASCAL_SEPARATOR_RE.sub(
            lambda m: m.group(1).upper() if m.group(1) else "", value
        )
        return result[:1].upper() + result[1:]

    def _alternatives(self, candidates: list[str | None], exclude: str) -> list[str]:
        return [
            name
            for name in dict.fromkeys(c for c in candidates if c)
            if name != exclude and self.is_valid_component_name(name)
        ]

    def get_errors(self) -> ErrorCollector:
        return self.errors

    def clear_errors(self) -> None:
        self.errors.clear()
