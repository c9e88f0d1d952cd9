"""Framework backends."""

from .react import JsxRenderer, ReactFrameworkExtension
from .svelte import SvelteFrameworkExtension, SvelteTemplateRenderer
from .vue import VueFrameworkExtension, VueTemplateRenderer

__all__ = [
    "JsxRenderer",
    "ReactFrameworkExtension",
    "SvelteFrameworkExtension",
    "SvelteTemplateRenderer",
    "VueFrameworkExtension",
    "VueTemplateRenderer",
]
