"""
Extension metadata and its validation rules.

Metadata fields are plain strings at construction time;
``validate_extension_metadata`` reports every rule violation in one pass.
"""

import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

EXTENSION_TYPES = frozenset({"framework", "styling", "utility"})

_KEY_RE = re.compile(r"^[a-z][a-z0-9\-]*[a-z0-9]$|^[a-z]$")
_VERSION_RE = re.compile(r"^\d+\.\d+\.\d+$")


class ExtensionMetadata(BaseModel):
    """
    Identity of an extension.

    Example:
        ExtensionMetadata(type="framework", key="react",
                          name="React Framework Extension", version="1.0.0")
    """

    model_config = ConfigDict(frozen=True)

    type: str = Field(description="framework, styling or utility")
    key: str = Field(description="Registry key, lowercase with hyphens")
    name: str = Field(description="Human-readable name")
    version: str = Field(description="Semantic version X.Y.Z")


def validate_extension_metadata(metadata: ExtensionMetadata) -> list[str]:
    """Return every metadata problem; an empty list means valid."""
    errors: list[str] = []

    if not metadata.key:
        errors.append("Extension key is required and must be a string")
    elif not _KEY_RE.match(metadata.key):
        errors.append(
            "Extension key must be lowercase alphanumeric with hyphens, starting with a letter"
        )

    if not metadata.name:
        errors.append("Extension name is required and must be a string")

    if not metadata.version:
        errors.append("Extension version is required and must be a string")
    elif not _VERSION_RE.match(metadata.version):
        errors.append('Extension version must follow semantic versioning (e.g., "1.0.0")')

    if metadata.type not in EXTENSION_TYPES:
        errors.append("Extension type must be one of: framework, styling, utility")

    return errors


Framework = Literal["react", "vue", "svelte"]

SUPPORTED_FRAMEWORKS: tuple[str, ...] = ("react", "vue", "svelte")
