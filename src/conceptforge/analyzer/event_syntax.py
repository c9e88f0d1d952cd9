"""
Recognition of event attributes across framework dialects.

``onClick``, ``@click.prevent``, ``v-on:submit``, ``on:click|once`` and
``bind:value`` all name an event (or binding) plus optional modifiers.
Shared by the analyzer, the event extractor and the normalizer.
"""

import re
from dataclasses import dataclass, field

DEFAULT_EVENT_PREFIXES = ("on", "@", "v-on:", "on:", "bind:")

# Canonical DOM events, used to decide whether a lowercase ``on...`` attribute
# is an event (``onclick``) or an ordinary attribute (``one``, ``online``).
KNOWN_DOM_EVENTS = frozenset(
    {
        "click",
        "dblclick",
        "change",
        "submit",
        "input",
        "focus",
        "blur",
        "keydown",
        "keyup",
        "keypress",
        "mousedown",
        "mouseup",
        "mouseover",
        "mouseout",
        "mouseenter",
        "mouseleave",
        "mousemove",
        "contextmenu",
        "load",
        "error",
        "resize",
        "scroll",
        "touchstart",
        "touchend",
        "touchmove",
        "wheel",
        "drag",
        "drop",
        "reset",
        "select",
    }
)

_MODIFIER_SPLIT_RE = re.compile(r"[.|]")
_CALL_ARGS_RE = re.compile(r"\(([^)]+)\)")


@dataclass(frozen=True)
class EventAttribute:
    """An attribute name decomposed into prefix, event name and modifiers."""

    attribute: str
    prefix: str
    name: str
    modifiers: list[str] = field(default_factory=list)


def _looks_like_on_event(rest: str) -> bool:
    if not rest:
        return False
    if rest[0].isupper():
        return True
    base = _MODIFIER_SPLIT_RE.split(rest, maxsplit=1)[0]
    return base.lower() in KNOWN_DOM_EVENTS


def split_event_attribute(
    attribute: str, prefixes: list[str] | tuple[str, ...] = DEFAULT_EVENT_PREFIXES
) -> EventAttribute | None:
    """
    Decompose ``attribute`` if it is an event attribute.

    Prefixes are tried longest first so ``on:click`` is never read as the
    React-style ``on`` prefix followed by ``:click``.
    """
    for prefix in sorted(prefixes, key=len, reverse=True):
        if not attribute.startswith(prefix):
            continue
        rest = attribute[len(prefix) :]
        if prefix == "on" and not _looks_like_on_event(rest):
            continue
        segments = _MODIFIER_SPLIT_RE.split(rest)
        name = segments[0]
        if not name:
            continue
        modifiers = [segment for segment in segments[1:] if segment]
        return EventAttribute(
            attribute=attribute, prefix=prefix, name=name.lower(), modifiers=modifiers
        )
    return None


def extract_call_parameters(handler: str) -> list[str]:
    """``handle($event, index)`` -> ``['$event', 'index']``."""
    match = _CALL_ARGS_RE.search(handler)
    if not match:
        return []
    return [part.strip() for part in match.group(1).split(",") if part.strip()]
