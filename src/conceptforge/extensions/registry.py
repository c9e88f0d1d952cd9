"""
Extension registry.

Three independent stores keyed by ``ExtensionMetadata.key``. Registration
never raises and never overwrites: invalid extensions and duplicate keys come
back as a RegistrationResult with ``is_valid=False`` and the registry is left
unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal

from conceptforge.specs.extension import SUPPORTED_FRAMEWORKS, validate_extension_metadata

from .base import (
    FRAMEWORK_METHODS,
    STYLING_APPROACHES,
    Extension,
    FrameworkExtension,
    StylingExtension,
    UtilityExtension,
)

logger = logging.getLogger(__name__)

ExtensionType = Literal["framework", "styling", "utility"]


@dataclass
class RegistrationResult:
    """Outcome of validating or registering one extension."""

    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.is_valid


class ExtensionRegistry:
    """
    Keyed store for framework, styling and utility extensions.

    Example:
        registry = ExtensionRegistry()
        result = registry.register_framework(ReactFrameworkExtension())
        if not result.is_valid:
            print(result.errors)
    """

    def __init__(self) -> None:
        self._stores: dict[str, dict[str, Extension]] = {
            "framework": {},
            "styling": {},
            "utility": {},
        }

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register_framework(self, extension: FrameworkExtension) -> RegistrationResult:
        return self._register("framework", extension)

    def register_styling(self, extension: StylingExtension) -> RegistrationResult:
        return self._register("styling", extension)

    def register_utility(self, extension: UtilityExtension) -> RegistrationResult:
        return self._register("utility", extension)

    def _register(self, kind: ExtensionType, extension: Extension) -> RegistrationResult:
        validation = self.validate_extension(extension)
        if validation.is_valid and extension.metadata.type != kind:
            validation = RegistrationResult(
                is_valid=False,
                errors=[
                    f"Extension '{extension.metadata.key}' has type "
                    f"'{extension.metadata.type}', expected '{kind}'"
                ],
                warnings=validation.warnings,
            )
        if not validation.is_valid:
            logger.debug("Rejected %s extension: %s", kind, "; ".join(validation.errors))
            return validation

        key = extension.metadata.key
        store = self._stores[kind]
        if key in store:
            return RegistrationResult(
                is_valid=False,
                errors=[f"{kind.capitalize()} extension with key '{key}' already registered"],
            )

        store[key] = extension
        logger.debug("Registered %s extension '%s'", kind, key)
        return RegistrationResult(is_valid=True, warnings=validation.warnings)

    def validate_extension(self, extension: Extension) -> RegistrationResult:
        """Check metadata shape, then the shape required by the extension's type."""
        metadata = getattr(extension, "metadata", None)
        if metadata is None:
            return RegistrationResult(is_valid=False, errors=["Extension metadata is required"])

        errors = validate_extension_metadata(metadata)
        warnings: list[str] = []

        if metadata.type == "framework":
            framework = getattr(extension, "framework", None)
            if framework not in SUPPORTED_FRAMEWORKS:
                errors.append(
                    "Framework extension must specify a valid framework: "
                    '"react", "vue", or "svelte"'
                )
            for method in FRAMEWORK_METHODS:
                if not callable(getattr(extension, method, None)):
                    errors.append(f"Framework extension must implement method: {method}")

        elif metadata.type == "styling":
            if getattr(extension, "styling", None) not in STYLING_APPROACHES:
                warnings.append("Styling extension should specify a valid styling approach")
            if not callable(getattr(extension, "process_styles", None)):
                errors.append("Styling extension must implement process_styles method")

        elif metadata.type == "utility":
            if not callable(getattr(extension, "process", None)):
                errors.append("Utility extension must implement process method")

        return RegistrationResult(is_valid=not errors, errors=errors, warnings=warnings)

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get_framework(self, key: str) -> FrameworkExtension | None:
        return self._stores["framework"].get(key)  # type: ignore[return-value]

    def get_styling(self, key: str) -> StylingExtension | None:
        return self._stores["styling"].get(key)  # type: ignore[return-value]

    def get_utility(self, key: str) -> UtilityExtension | None:
        return self._stores["utility"].get(key)  # type: ignore[return-value]

    def get_available_frameworks(self) -> list[str]:
        return list(self._stores["framework"])

    def get_available_styling(self) -> list[str]:
        return list(self._stores["styling"])

    def get_available_utilities(self) -> list[str]:
        return list(self._stores["utility"])

    def get_extensions_by_type(self, kind: str) -> list[Extension]:
        """Extensions of one type in registration order; unknown types give []."""
        return list(self._stores.get(kind, {}).values())

    def has_extension(self, key: str, kind: ExtensionType | None = None) -> bool:
        if kind is not None:
            return key in self._stores.get(kind, {})
        return any(key in store for store in self._stores.values())

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def remove_extension(self, key: str, kind: ExtensionType) -> bool:
        store = self._stores.get(kind)
        if store is None or key not in store:
            return False
        del store[key]
        return True

    def clear_extensions(self, kind: ExtensionType | None = None) -> None:
        if kind is None:
            for store in self._stores.values():
                store.clear()
        elif kind in self._stores:
            self._stores[kind].clear()

    def get_extension_count(self, kind: ExtensionType | None = None) -> int:
        if kind is not None:
            return len(self._stores.get(kind, {}))
        return sum(len(store) for store in self._stores.values())
