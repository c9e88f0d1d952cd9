"""
Recognition of class and style attributes across framework dialects.
"""

import re

SELF_CLOSING_TAGS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

CLASS_EXPRESSION_ATTRIBUTES = ("className", ":class", "v-bind:class")
STYLE_EXPRESSION_ATTRIBUTES = ("style", ":style", "v-bind:style")
STYLING_ATTRIBUTES = frozenset(
    {"class", "className", "style", ":class", ":style", "v-bind:class", "v-bind:style"}
)
CLASS_DIRECTIVE_PREFIX = "class:"
STYLE_DIRECTIVE_PREFIX = "style:"

_CAMEL_BOUNDARY_RE = re.compile(r"([a-z0-9])([A-Z])")
_KEBAB_RE = re.compile(r"-([a-z])")


def is_styling_attribute(name: str) -> bool:
    return (
        name in STYLING_ATTRIBUTES
        or name.startswith(CLASS_DIRECTIVE_PREFIX)
        or name.startswith(STYLE_DIRECTIVE_PREFIX)
    )


def split_classes(value: str) -> list[str]:
    return [token for token in value.split() if token]


def parse_inline_styles(style_text: str) -> dict[str, str]:
    """
    Parse ``"color: red; margin: 0"`` into ``{"color": "red", "margin": "0"}``.

    Only the first colon separates property from value, so values such as
    ``url(http://x)`` survive. Declarations without a value are dropped.
    """
    styles: dict[str, str] = {}
    for declaration in style_text.split(";"):
        if ":" not in declaration:
            continue
        prop, value = declaration.split(":", 1)
        prop, value = prop.strip(), value.strip()
        if prop and value:
            styles[prop] = value
    return styles


def kebab_to_camel(name: str) -> str:
    """``background-color`` -> ``backgroundColor``; custom properties are left alone."""
    if name.startswith("--"):
        return name
    return _KEBAB_RE.sub(lambda m: m.group(1).upper(), name)


def camel_to_kebab(name: str) -> str:
    """``isActive`` -> ``is-active``."""
    return _CAMEL_BOUNDARY_RE.sub(r"\1-\2", name).lower()


def is_self_closing(tag: str) -> bool:
    return tag.lower() in SELF_CLOSING_TAGS
