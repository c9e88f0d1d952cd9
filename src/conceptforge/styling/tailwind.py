"""
Tailwind styling extension.

Nodes may carry utilities in an ``extensions.tailwind`` block:

    {"tag": "div", "extensions": {"tailwind": {
        "class": "p-4 bg-white",
        "responsive": {"md": "p-8"},
        "variants": {"hover": "bg-gray-500"},
    }}}

Before rendering the block is expanded into the node's ``class`` attribute
(``md:p-8``, ``hover:bg-gray-500``). ``process_styles`` then turns the
component's static classes into a stylesheet using one of three output
strategies:

- ``css``: plain rules for a ``.component`` selector from a built-in token table
- ``scss-apply``: ``@apply`` directives grouped by variant and breakpoint
- ``pass-through``: the class list itself, for builds that run Tailwind
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Literal

from conceptforge.analyzer.style_syntax import split_classes
from conceptforge.core.diagnostics import ErrorCollector
from conceptforge.core.node_ids import ROOT_NODE_ID
from conceptforge.extensions.base import RenderContext, StyleOutput, StylingExtension
from conceptforge.specs.concepts import StylingConcept
from conceptforge.specs.extension import ExtensionMetadata
from conceptforge.specs.template import ElementNode, TemplateNode

logger = logging.getLogger(__name__)

TAILWIND_KEY = "tailwind"

DEFAULT_BREAKPOINTS = {
    "sm": "640px",
    "md": "768px",
    "lg": "1024px",
    "xl": "1280px",
    "2xl": "1536px",
}

VALID_VARIANTS = frozenset(
    {
        "hover", "focus", "active", "disabled", "first", "last", "odd", "even",
        "visited", "checked", "invalid", "required", "group-hover", "group-focus",
        "focus-within", "focus-visible", "motion-safe", "motion-reduce", "dark",
        "print", "portrait", "landscape", "first-letter", "first-line", "selection",
        "file", "marker", "before", "after",
    }
)  # fmt: skip

UTILITY_PREFIXES = frozenset(
    {
        "bg", "text", "border", "rounded", "shadow", "p", "px", "py", "pt", "pr", "pb",
        "pl", "m", "mx", "my", "mt", "mr", "mb", "ml", "w", "h", "max", "min", "flex",
        "grid", "block", "hidden", "inline", "absolute", "relative", "fixed", "sticky",
        "top", "right", "bottom", "left", "z", "opacity", "scale", "rotate", "translate",
        "skew", "origin", "overflow", "cursor", "pointer", "select", "resize", "font",
        "tracking", "leading", "list", "placeholder", "caret", "accent", "appearance",
        "scroll", "snap", "touch", "will", "outline", "ring", "space", "divide",
        "decoration", "underline", "overline", "line", "uppercase", "lowercase",
        "capitalize", "normal", "truncate", "break", "whitespace", "align", "vertical",
        "float", "clear", "object", "filter", "backdrop", "transition", "duration",
        "ease", "delay", "animate", "gap", "items", "justify", "self", "content",
    }
)  # fmt: skip

COLOR_TOKENS = {
    "red-500": "#ef4444",
    "blue-500": "#3b82f6",
    "blue-600": "#2563eb",
    "green-500": "#10b981",
    "yellow-500": "#eab308",
    "purple-500": "#a855f7",
    "pink-500": "#ec4899",
    "indigo-500": "#6366f1",
    "gray-500": "#6b7280",
    "gray-800": "#1f2937",
    "white": "#ffffff",
    "black": "#000000",
}

SPACING_TOKENS = {
    "0": "0px",
    "1": "0.25rem",
    "2": "0.5rem",
    "3": "0.75rem",
    "4": "1rem",
    "5": "1.25rem",
    "6": "1.5rem",
    "8": "2rem",
    "10": "2.5rem",
    "12": "3rem",
}

FONT_SIZE_TOKENS = {
    "xs": "0.75rem",
    "sm": "0.875rem",
    "base": "1rem",
    "lg": "1.125rem",
    "xl": "1.25rem",
    "2xl": "1.5rem",
}

_WIDTHS = {
    "auto": "auto",
    "full": "100%",
    "1/2": "50%",
    "1/3": "33.333333%",
    "2/3": "66.666667%",
    "1/4": "25%",
    "3/4": "75%",
}
_HEIGHTS = {"auto": "auto", "full": "100%", "screen": "100vh"}
_FLEX = {
    "": "display: flex;",
    "col": "display: flex; flex-direction: column;",
    "row": "display: flex; flex-direction: row;",
    "wrap": "flex-wrap: wrap;",
    "1": "flex: 1 1 0%;",
}
_RADII = {
    "": "0.25rem",
    "sm": "0.125rem",
    "md": "0.375rem",
    "lg": "0.5rem",
    "xl": "0.75rem",
    "full": "9999px",
}
_SHADOWS = {
    "": "0 1px 3px 0 rgb(0 0 0 / 0.1), 0 1px 2px -1px rgb(0 0 0 / 0.1)",
    "sm": "0 1px 2px 0 rgb(0 0 0 / 0.05)",
    "md": "0 4px 6px -1px rgb(0 0 0 / 0.1), 0 2px 4px -2px rgb(0 0 0 / 0.1)",
    "lg": "0 10px 15px -3px rgb(0 0 0 / 0.1), 0 4px 6px -4px rgb(0 0 0 / 0.1)",
}
_BREAKPOINT_LIKE_RE = re.compile(r"^(xs|sm|md|lg|xl|2xl)$|breakpoint")

OutputStrategy = Literal["css", "scss-apply", "pass-through"]


# =============================================================================
# Utility parsing
# =============================================================================


@dataclass(frozen=True)
class ParsedUtility:
    base: str
    original: str
    responsive: str | None = None
    variants: tuple[str, ...] = ()


@dataclass(frozen=True)
class UtilityValidation:
    valid: bool
    error: str | None = None


class UtilityParser:
    """Split ``md:hover:bg-blue-500`` into breakpoint, variants and base."""

    def __init__(self, breakpoints: dict[str, str] | None = None) -> None:
        self.breakpoints = breakpoints or DEFAULT_BREAKPOINTS

    def parse(self, class_name: str) -> ParsedUtility:
        *prefixes, base = class_name.split(":")
        responsive = None
        variants: list[str] = []
        # Rightmost breakpoint wins; everything else is a variant.
        for prefix in reversed(prefixes):
            if prefix in self.breakpoints and responsive is None:
                responsive = prefix
            else:
                variants.insert(0, prefix)
        return ParsedUtility(
            base=base, original=class_name, responsive=responsive, variants=tuple(variants)
        )

    def parse_all(self, classes: str | list[str]) -> list[ParsedUtility]:
        names = split_classes(classes) if isinstance(classes, str) else classes
        return [self.parse(name.strip()) for name in names if name.strip()]

    def validate(self, class_name: str) -> UtilityValidation:
        parsed = self.parse(class_name)
        prefix = parsed.base.split("-")[0]
        if prefix not in UTILITY_PREFIXES:
            return UtilityValidation(False, f"Unknown utility prefix: {prefix}")
        for variant in parsed.variants:
            if variant in VALID_VARIANTS:
                continue
            if _BREAKPOINT_LIKE_RE.search(variant):
                return UtilityValidation(False, f"Unknown breakpoint: {variant}")
            return UtilityValidation(False, f"Unknown variant: {variant}")
        return UtilityValidation(True)


# =============================================================================
# CSS generation
# =============================================================================


def utility_to_css(base: str) -> str | None:
    """Declarations for one base utility, or None when it has no table entry."""
    prefix, _, value = base.partition("-")
    if prefix == "bg":
        return f"background-color: {COLOR_TOKENS[value]};" if value in COLOR_TOKENS else None
    if prefix == "text":
        if value in COLOR_TOKENS:
            return f"color: {COLOR_TOKENS[value]};"
        return f"font-size: {FONT_SIZE_TOKENS[value]};" if value in FONT_SIZE_TOKENS else None
    if prefix in ("p", "m", "px", "py", "mx", "my"):
        if prefix == "mx" and value == "auto":
            return "margin-left: auto; margin-right: auto;"
        if value not in SPACING_TOKENS:
            return None
        size = SPACING_TOKENS[value]
        sides = {"x": ("left", "right"), "y": ("top", "bottom")}.get(prefix[1:])
        prop = "padding" if prefix[0] == "p" else "margin"
        if sides is None:
            return f"{prop}: {size};"
        return " ".join(f"{prop}-{side}: {size};" for side in sides)
    if prefix == "w":
        width = SPACING_TOKENS.get(value) or _WIDTHS.get(value)
        return f"width: {width};" if width else None
    if prefix == "h":
        height = SPACING_TOKENS.get(value) or _HEIGHTS.get(value)
        if height:
            return f"height: {height};"
        return f"height: {int(value) * 0.25:g}rem;" if value.isdigit() else None
    if prefix == "flex":
        return _FLEX.get(value, "display: flex;")
    if base in ("hidden", "block", "inline"):
        return "display: none;" if base == "hidden" else f"display: {base};"
    if prefix == "rounded":
        return f"border-radius: {_RADII.get(value, _RADII[''])};"
    if prefix == "border":
        if not value:
            return "border-width: 1px;"
        return f"border-color: {COLOR_TOKENS[value]};" if value in COLOR_TOKENS else None
    if prefix == "shadow":
        return f"box-shadow: {_SHADOWS.get(value, _SHADOWS[''])};"
    if prefix == "outline":
        return "outline: none;" if value == "none" else None
    return None


@dataclass
class _Groups:
    base: list[ParsedUtility] = field(default_factory=list)
    variants: dict[str, list[ParsedUtility]] = field(default_factory=dict)
    responsive: dict[str, list[ParsedUtility]] = field(default_factory=dict)


def group_utilities(utilities: list[ParsedUtility]) -> _Groups:
    groups = _Groups()
    for utility in utilities:
        if utility.responsive:
            groups.responsive.setdefault(utility.responsive, []).append(utility)
        elif utility.variants:
            for variant in utility.variants:
                groups.variants.setdefault(variant, []).append(utility)
        else:
            groups.base.append(utility)
    return groups


class CssGenerator:
    """Turn parsed utilities into stylesheet text."""

    def __init__(self, breakpoints: dict[str, str] | None = None) -> None:
        self.breakpoints = breakpoints or DEFAULT_BREAKPOINTS

    def generate(
        self,
        utilities: list[ParsedUtility],
        strategy: OutputStrategy = "css",
        selector: str = "component",
    ) -> str:
        if strategy == "pass-through":
            return " ".join(utility.original for utility in utilities)
        if strategy == "scss-apply":
            return self.scss_apply(utilities)
        return self.css(utilities, selector)

    def scss_apply(self, utilities: list[ParsedUtility]) -> str:
        groups = group_utilities(utilities)
        lines: list[str] = []
        if groups.base:
            lines.append(f"@apply {_originals(groups.base)};")
        for variant, members in groups.variants.items():
            lines.extend([f"&:{variant} {{", f"  @apply {_originals(members)};", "}"])
        for breakpoint, members in groups.responsive.items():
            media = f"@media (min-width: {self._min_width(breakpoint)}) {{"
            lines.extend([media, f"  @apply {_originals(members)};", "}"])
        return "\n".join(lines)

    def css(self, utilities: list[ParsedUtility], selector: str = "component") -> str:
        groups = group_utilities(utilities)
        rules: list[str] = []
        if groups.base:
            rules.append(_rule(f".{selector}", groups.base))
        for variant, members in groups.variants.items():
            rules.append(_rule(f".{selector}:{variant}", members))
        for breakpoint, members in groups.responsive.items():
            min_width = self._min_width(breakpoint)
            plain = [u for u in members if not u.variants]
            if plain:
                rules.append(_media(min_width, _rule(f".{selector}", plain)))
            for utility in members:
                for variant in utility.variants:
                    rules.append(_media(min_width, _rule(f".{selector}:{variant}", [utility])))
        return "\n\n".join(rule for rule in rules if rule)

    def _min_width(self, breakpoint: str) -> str:
        return self.breakpoints.get(breakpoint, "768px")


def _originals(utilities: list[ParsedUtility]) -> str:
    return " ".join(utility.original for utility in utilities)


def _rule(selector: str, utilities: list[ParsedUtility]) -> str:
    declarations = [css for css in (utility_to_css(u.base) for u in utilities) if css]
    if not declarations:
        return ""
    body = "\n".join(f"  {css}" for css in declarations)
    return f"{selector} {{\n{body}\n}}"


def _media(min_width: str, rule: str) -> str:
    if not rule:
        return ""
    inner = "\n".join(f"  {line}" for line in rule.split("\n"))
    return f"@media (min-width: {min_width}) {{\n{inner}\n}}"


# =============================================================================
# Extension
# =============================================================================


@dataclass
class TailwindOptions:
    output_strategy: OutputStrategy = "css"
    unknown_class_handling: Literal["warn", "error", "ignore"] = "warn"
    custom_class_prefix: str = "component"
    breakpoints: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_BREAKPOINTS))


_REVERSE_MAP: dict[str, dict[str, str]] = {
    "background-color": {hex_: f"bg-{name}" for name, hex_ in COLOR_TOKENS.items()},
    "color": {hex_: f"text-{name}" for name, hex_ in COLOR_TOKENS.items()},
    "display": {"flex": "flex", "block": "block", "inline": "inline", "none": "hidden"},
    "padding": {size: f"p-{name}" for name, size in SPACING_TOKENS.items()},
    "margin": {size: f"m-{name}" for name, size in SPACING_TOKENS.items()},
}


class TailwindStylingExtension(StylingExtension):
    """Tailwind utility expansion, validation and CSS generation."""

    metadata = ExtensionMetadata(
        type="styling", key="tailwind", name="Tailwind Styling Extension", version="1.0.0"
    )
    styling = "tailwind"

    def __init__(
        self, options: TailwindOptions | None = None, errors: ErrorCollector | None = None
    ) -> None:
        self.options = options or TailwindOptions()
        self.errors = errors if errors is not None else ErrorCollector()
        self.parser = UtilityParser(self.options.breakpoints)
        self.generator = CssGenerator(self.options.breakpoints)

    def node_handler(self, node: TemplateNode, context: RenderContext) -> TemplateNode:
        if not isinstance(node, ElementNode):
            return node
        data = node.extensions.get(TAILWIND_KEY)
        if not isinstance(data, dict):
            return node
        utilities = expand_node_utilities(data)
        existing = node.attributes.get("class")
        classes = split_classes(existing) if isinstance(existing, str) else []
        merged = " ".join(dict.fromkeys(classes + utilities))
        return node.model_copy(update={"attributes": {**node.attributes, "class": merged}})

    def process_styles(self, styling: StylingConcept) -> StyleOutput:
        classes = self.known_classes(styling.static_classes)
        utilities = self.parser.parse_all(classes)
        styles = self.generator.generate(
            utilities, self.options.output_strategy, self.options.custom_class_prefix
        )
        logger.debug(
            "Generated %s output for %d utilities", self.options.output_strategy, len(utilities)
        )
        return StyleOutput(styles=styles)

    def known_classes(self, classes: list[str]) -> list[str]:
        """Validate classes, reporting unknown ones per ``unknown_class_handling``."""
        handling = self.options.unknown_class_handling
        known: list[str] = []
        for class_name in classes:
            result = self.parser.validate(class_name)
            if result.valid:
                known.append(class_name)
                continue
            message = f"Unknown Tailwind class '{class_name}': {result.error}"
            if handling == "error":
                self.errors.add_simple_error(message, ROOT_NODE_ID, TAILWIND_KEY)
            elif handling == "warn":
                self.errors.add_warning(message, ROOT_NODE_ID, TAILWIND_KEY)
        return known

    def convert_format(self, source: str, target: str) -> StyleOutput | None:
        """Convert a utility class list to ``css`` or ``scss-apply`` text."""
        if target not in ("css", "scss-apply", "pass-through"):
            return None
        utilities = self.parser.parse_all(source)
        return StyleOutput(
            styles=self.generator.generate(utilities, target, self.options.custom_class_prefix)
        )

    @staticmethod
    def convert_css_to_tailwind(styles: dict[str, str]) -> tuple[list[str], dict[str, str]]:
        """Map CSS declarations to utilities; unmapped declarations are returned as-is."""
        classes: list[str] = []
        remaining: dict[str, str] = {}
        for prop, value in styles.items():
            utility = _REVERSE_MAP.get(prop, {}).get(value.strip().lower())
            if utility:
                classes.append(utility)
            else:
                remaining[prop] = value
        return classes, remaining

    def get_errors(self) -> ErrorCollector:
        return self.errors


def expand_node_utilities(data: dict[str, Any]) -> list[str]:
    """Flatten a node's ``class``/``responsive``/``variants`` block into class names."""
    classes = _as_list(data.get("class"))
    for group in ("responsive", "variants"):
        for prefix, value in (data.get(group) or {}).items():
            classes.extend(f"{prefix}:{name}" for name in _as_list(value))
    return classes


def _as_list(value: str | list[str] | None) -> list[str]:
    if not value:
        return []
    return split_classes(value) if isinstance(value, str) else [str(v) for v in value]
