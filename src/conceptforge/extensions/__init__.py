"""Extension contract, lifecycle hooks and the extension registry."""

from .base import (
    FRAMEWORK_METHODS,
    Extension,
    FrameworkAttributeOutput,
    FrameworkConditionalOutput,
    FrameworkEventOutput,
    FrameworkExtension,
    FrameworkIterationOutput,
    FrameworkSlotOutput,
    HookChain,
    LifecycleHooks,
    RenderContext,
    StyleOutput,
    StylingExtension,
    UtilityExtension,
)
from .registry import ExtensionRegistry, RegistrationResult

__all__ = [
    "FRAMEWORK_METHODS",
    "Extension",
    "ExtensionRegistry",
    "FrameworkAttributeOutput",
    "FrameworkConditionalOutput",
    "FrameworkEventOutput",
    "FrameworkExtension",
    "FrameworkIterationOutput",
    "FrameworkSlotOutput",
    "HookChain",
    "LifecycleHooks",
    "RegistrationResult",
    "RenderContext",
    "StyleOutput",
    "StylingExtension",
    "UtilityExtension",
]
