"""Styling extensions."""

from .bem import BemOptions, BemStylingExtension
from .tailwind import TailwindOptions, TailwindStylingExtension

__all__ = [
    "BemOptions",
    "BemStylingExtension",
    "TailwindOptions",
    "TailwindStylingExtension",
]
