"""
Styling extraction with CSS validation and CSS-framework detection.

Unlike the analyzer's styling pass, dynamic class and style bindings are read
only in the dialect of the target framework (``className`` for React,
``:class`` for Vue, ``class:*`` for Svelte).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field

from conceptforge.analyzer.style_syntax import (
    CLASS_DIRECTIVE_PREFIX,
    STYLE_DIRECTIVE_PREFIX,
    parse_inline_styles,
    split_classes,
)
from conceptforge.analyzer.template_analyzer import addressable_children
from conceptforge.core.diagnostics import ErrorCollector
from conceptforge.core.node_ids import ROOT_NODE_ID
from conceptforge.specs.concepts import StylingConcept
from conceptforge.specs.template import ElementNode, TemplateNode, parse_template

logger = logging.getLogger(__name__)

STYLING_EXTRACTOR_EXTENSION = "styling-extractor"

CSS_FRAMEWORK_PATTERNS: dict[str, re.Pattern[str]] = {
    "tailwind": re.compile(r"^(bg-|text-|p-|m-|w-|h-|flex|grid|rounded|shadow|border)"),
    "bootstrap": re.compile(r"^(btn|card|container|row|col|alert|badge|navbar)"),
    "bulma": re.compile(r"^(button|box|content|title|subtitle|section|hero)"),
    "foundation": re.compile(r"^(button|callout|grid-|cell|top-bar|menu)"),
    "bem": re.compile(r"^[a-z]+(-[a-z]+)*(__[a-z]+(-[a-z]+)*)?(--[a-z]+(-[a-z]+)*)?$"),
}

CSS_PROPERTY_TYPOS = {
    "colour": "color",
    "boarder": "border",
    "postion": "position",
    "heigth": "height",
    "widht": "width",
    "margain": "margin",
    "paddng": "padding",
}

DEPRECATED_CSS_PROPERTIES = (
    "text-decoration-line",
    "text-decoration-style",
    "text-decoration-color",
)

_VENDOR_PREFIX_RE = re.compile(r"^-(webkit|moz|ms)-")
_CSS_VAR_RE = re.compile(r"var\(\s*([^,)]+)")
_UPPER_RE = re.compile(r"[A-Z]")

_CLASS_ATTRIBUTES = {
    "react": ("className",),
    "vue": (":class", "v-bind:class"),
}
_STYLE_ATTRIBUTES = {
    "react": ("style",),
    "vue": (":style", "v-bind:style"),
}


@dataclass
class StylingExtractionOptions:
    framework: str | None = "react"
    normalize_class_names: bool = True
    validate_css: bool = True
    extract_css_variables: bool = True
    merge_duplicate_classes: bool = True
    css_framework_detection: bool = True
    custom_class_patterns: list[re.Pattern[str]] = field(default_factory=list)


@dataclass
class CSSValidationResult:
    is_valid: bool
    property: str
    value: str
    warnings: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)


class StylingExtractionMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    nodes_processed: int = 0
    styling_attributes_found: int = 0
    classes_found: int = 0
    inline_styles_found: int = 0
    detected_frameworks: list[str] = Field(default_factory=list)
    css_variables: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class StylingExtractionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    styling: StylingConcept
    metadata: StylingExtractionMetadata


@dataclass
class _Accumulator:
    static_classes: list[str] = field(default_factory=list)
    dynamic_classes: list[str] = field(default_factory=list)
    inline_styles: dict[str, str] = field(default_factory=dict)
    style_bindings: dict[str, str] = field(default_factory=dict)
    nodes_processed: int = 0
    attributes_found: int = 0
    warnings: list[str] = field(default_factory=list)


class StylingExtractor:
    """Collect one merged StylingConcept from a whole template."""

    def __init__(self, errors: ErrorCollector | None = None) -> None:
        self.errors = errors if errors is not None else ErrorCollector()

    def extract_styling(
        self,
        template: list[TemplateNode] | list[dict],
        options: StylingExtractionOptions | None = None,
    ) -> StylingExtractionResult:
        options = options or StylingExtractionOptions()
        nodes = parse_template(list(template))

        acc = _Accumulator()
        self._walk(nodes, acc, options)

        static_classes = acc.static_classes
        if options.merge_duplicate_classes:
            static_classes = list(dict.fromkeys(static_classes))
        if options.normalize_class_names:
            static_classes = self.normalize_class_names(static_classes, options.framework)

        detected = (
            self.detect_css_frameworks(static_classes) if options.css_framework_detection else []
        )
        css_variables = (
            self.extract_css_variables(acc.inline_styles) if options.extract_css_variables else []
        )

        for warning in acc.warnings:
            self.errors.add_warning(warning, ROOT_NODE_ID, STYLING_EXTRACTOR_EXTENSION)

        styling = StylingConcept(
            static_classes=static_classes,
            dynamic_classes=acc.dynamic_classes,
            inline_styles=acc.inline_styles,
            style_bindings=acc.style_bindings,
        )
        logger.debug(
            "Extracted %d classes and %d inline styles from %d nodes",
            len(static_classes),
            len(acc.inline_styles),
            acc.nodes_processed,
        )
        return StylingExtractionResult(
            styling=styling,
            metadata=StylingExtractionMetadata(
                nodes_processed=acc.nodes_processed,
                styling_attributes_found=acc.attributes_found,
                classes_found=len(static_classes),
                inline_styles_found=len(acc.inline_styles),
                detected_frameworks=detected,
                css_variables=css_variables,
                warnings=acc.warnings,
            ),
        )

    def extract_styling_from_node(
        self,
        node: TemplateNode,
        node_id: str,
        options: StylingExtractionOptions | None = None,
    ) -> StylingConcept:
        """Styling declared directly on one node, tagged with its NodeId."""
        acc = _Accumulator()
        self._collect(node, acc, options or StylingExtractionOptions())
        return StylingConcept(
            node_id=node_id,
            static_classes=acc.static_classes,
            dynamic_classes=acc.dynamic_classes,
            inline_styles=acc.inline_styles,
            style_bindings=acc.style_bindings,
        )

    def validate_css_property(self, prop: str, value: str) -> CSSValidationResult:
        result = CSSValidationResult(is_valid=True, property=prop, value=value)

        if prop in CSS_PROPERTY_TYPOS:
            correct = CSS_PROPERTY_TYPOS[prop]
            result.warnings.append(f"Did you mean '{correct}'?")
            result.suggestions.append(correct)
            result.is_valid = False

        if _VENDOR_PREFIX_RE.match(prop):
            standard = _VENDOR_PREFIX_RE.sub("", prop)
            result.suggestions.append(f"Consider adding standard property: {standard}")

        if prop in DEPRECATED_CSS_PROPERTIES:
            result.warnings.append(f"Property '{prop}' is deprecated")
            result.suggestions.append("text-decoration")

        if not value or not value.strip():
            result.warnings.append("Empty CSS value")
            result.is_valid = False

        return result

    @staticmethod
    def normalize_class_names(classes: list[str], framework: str | None) -> list[str]:
        """camelCase class names become kebab-case outside React."""
        if framework == "react":
            return list(classes)
        return [_UPPER_RE.sub(lambda m: "-" + m.group(0).lower(), name) for name in classes]

    @staticmethod
    def detect_css_frameworks(classes: list[str]) -> list[str]:
        return [
            name
            for name, pattern in CSS_FRAMEWORK_PATTERNS.items()
            if any(pattern.search(cls) for cls in classes)
        ]

    @staticmethod
    def extract_css_variables(styles: dict[str, str]) -> list[str]:
        """Custom properties declared (``--x``) or referenced (``var(--x)``), first-seen order."""
        found: list[str] = []
        for prop, value in styles.items():
            if prop.startswith("--"):
                found.append(prop)
            for match in _CSS_VAR_RE.finditer(value):
                name = match.group(1).strip()
                if name not in found:
                    found.append(name)
        return found

    def merge_styling(self, base: StylingConcept, additional: StylingConcept) -> StylingConcept:
        return base.merge(additional)

    def get_errors(self) -> ErrorCollector:
        return self.errors

    def clear_errors(self) -> None:
        self.errors.clear()

    # -------------------------------------------------------------------------

    def _walk(
        self, nodes: list[TemplateNode], acc: _Accumulator, options: StylingExtractionOptions
    ) -> None:
        for node in nodes:
            acc.nodes_processed += 1
            self._collect(node, acc, options)
            self._walk(addressable_children(node), acc, options)

    def _collect(
        self, node: TemplateNode, acc: _Accumulator, options: StylingExtractionOptions
    ) -> None:
        if not isinstance(node, ElementNode):
            return

        class_value = node.attributes.get("class")
        if class_value:
            acc.attributes_found += 1
            acc.static_classes.extend(split_classes(str(class_value)))

        expressions = node.expression_attributes
        for name in self._class_attributes(expressions, options.framework):
            acc.attributes_found += 1
            acc.dynamic_classes.append(str(expressions[name]))
        for name in self._style_attributes(expressions, options.framework):
            acc.attributes_found += 1
            acc.style_bindings[name] = str(expressions[name])

        style_value = node.attributes.get("style")
        if style_value:
            acc.attributes_found += 1
            styles = parse_inline_styles(str(style_value))
            if options.validate_css:
                for prop, value in styles.items():
                    check = self.validate_css_property(prop, value)
                    if not check.is_valid:
                        acc.warnings.append(f"Invalid CSS: {prop}: {value}")
                    acc.warnings.extend(check.warnings)
            acc.inline_styles.update(styles)

    @staticmethod
    def _class_attributes(expressions: dict[str, str], framework: str | None) -> list[str]:
        if framework == "svelte":
            return [name for name in expressions if name.startswith(CLASS_DIRECTIVE_PREFIX)]
        return [name for name in _CLASS_ATTRIBUTES.get(framework or "", ()) if name in expressions]

    @staticmethod
    def _style_attributes(expressions: dict[str, str], framework: str | None) -> list[str]:
        if framework == "svelte":
            return [name for name in expressions if name.startswith(STYLE_DIRECTIVE_PREFIX)]
        return [name for name in _STYLE_ATTRIBUTES.get(framework or "", ()) if name in expressions]
