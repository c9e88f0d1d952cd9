"""
Scaffold configuration.

A scaffold config describes a UI kit: which frameworks and styling approaches
it targets, per-component overrides, and how file conflicts are resolved.
It is read from YAML or JSON:

    name: my-kit
    version: 1.0.0
    capabilities:
      frameworks: [react, vue]
      styling: [css, bem]
      typescript: true
    components:
      button:
        frameworks: [react]
    conflictResolution:
      default: prompt

``validate_config`` checks raw data and reports every problem at once;
``load_config`` reads a file, validates it and returns a ``ScaffoldConfig``.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from conceptforge.core.errors import ConfigError

logger = logging.getLogger(__name__)

VALID_FRAMEWORKS = ("react", "vue", "svelte")
VALID_STYLING = ("css", "scss", "inline", "bem", "tailwind")
VALID_CONFLICT_DEFAULTS = ("prompt", "overwrite", "skip")
CONFLICT_FLAGS = ("allowDiff", "allowMerge", "createBackups")

_SEMVER_RE = re.compile(r"^\d+\.\d+\.\d+")
_COMPONENT_NAME_RE = re.compile(r"^[a-z][a-z0-9-]*$")


# =============================================================================
# Models
# =============================================================================


class Capabilities(BaseModel):
    frameworks: list[str]
    styling: list[str]
    typescript: bool = False

    model_config = ConfigDict(frozen=True)


class ComponentConfig(BaseModel):
    frameworks: list[str] | None = None
    styling: list[str] | None = None
    description: str | None = None

    model_config = ConfigDict(frozen=True)


class ConflictResolution(BaseModel):
    default: Literal["prompt", "overwrite", "skip"] = "prompt"
    allow_diff: bool = Field(default=False, alias="allowDiff")
    allow_merge: bool = Field(default=False, alias="allowMerge")
    create_backups: bool = Field(default=False, alias="createBackups")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class ScaffoldConfig(BaseModel):
    """A validated UI-kit scaffold configuration."""

    name: str
    version: str
    capabilities: Capabilities
    components: dict[str, ComponentConfig | None] = Field(default_factory=dict)
    conflict_resolution: ConflictResolution | None = Field(
        default=None, alias="conflictResolution"
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True)


@dataclass
class ConfigValidationResult:
    is_valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


# =============================================================================
# Validation
# =============================================================================


def validate_config(data: Any) -> ConfigValidationResult:
    """Check raw config data, collecting every error and warning."""
    result = ConfigValidationResult()
    if not data:
        result.errors.append("Configuration is required")
        result.is_valid = False
        return result
    if not isinstance(data, dict):
        result.errors.append("Configuration must be an object")
        result.is_valid = False
        return result

    _check_basic_structure(data, result)
    if not result.errors:
        _check_capabilities(data.get("capabilities"), result)
        _check_components(data.get("components"), result)
        _check_conflict_resolution(data.get("conflictResolution"), result)

    result.is_valid = not result.errors
    return result


def _check_basic_structure(data: dict[str, Any], result: ConfigValidationResult) -> None:
    name = data.get("name")
    if name is None:
        result.errors.append("Config missing required field: name")
    elif not isinstance(name, str):
        result.errors.append("Config name must be a string")
    elif not name:
        result.errors.append("Config name cannot be empty")

    version = data.get("version")
    if not version:
        result.errors.append("Config missing required field: version")
    elif not isinstance(version, str):
        result.errors.append("Config version must be a string")
    elif not _SEMVER_RE.match(version):
        result.warnings.append('Config version should follow semver format (e.g., "1.0.0")')

    capabilities = data.get("capabilities")
    if not capabilities:
        result.errors.append("Config missing required field: capabilities")
    elif not isinstance(capabilities, dict):
        result.errors.append("Config capabilities must be an object")

    if data.get("components") and not isinstance(data["components"], dict):
        result.errors.append("Config components must be an object")
    if data.get("conflictResolution") and not isinstance(data["conflictResolution"], dict):
        result.errors.append("Config conflictResolution must be an object")


def _invalid_choices(values: list[Any], valid: tuple[str, ...]) -> list[str]:
    return [str(value) for value in values if not isinstance(value, str) or value not in valid]


def _check_choice_list(
    capabilities: dict[str, Any],
    field_name: str,
    valid: tuple[str, ...],
    empty_message: str,
    invalid_label: str,
    result: ConfigValidationResult,
) -> None:
    values = capabilities.get(field_name)
    if values is None:
        result.errors.append(f"Capabilities missing required field: {field_name}")
    elif not isinstance(values, list):
        result.errors.append(f"Capabilities {field_name} must be an array")
    elif not values:
        result.errors.append(empty_message)
    else:
        invalid = _invalid_choices(values, valid)
        if invalid:
            result.errors.append(
                f"Invalid {invalid_label}: {', '.join(invalid)}. "
                f"Valid options: {', '.join(valid)}"
            )


def _check_capabilities(
    capabilities: dict[str, Any] | None, result: ConfigValidationResult
) -> None:
    if not capabilities:
        return
    _check_choice_list(
        capabilities,
        "frameworks",
        VALID_FRAMEWORKS,
        "At least one framework must be specified",
        "frameworks",
        result,
    )
    _check_choice_list(
        capabilities,
        "styling",
        VALID_STYLING,
        "At least one styling approach must be specified",
        "styling options",
        result,
    )
    typescript = capabilities.get("typescript")
    if typescript is not None and not isinstance(typescript, bool):
        result.errors.append("Capabilities typescript must be a boolean")


def _check_components(components: Any, result: ConfigValidationResult) -> None:
    if not components or not isinstance(components, dict):
        return
    for name, component in components.items():
        if not _COMPONENT_NAME_RE.match(str(name)):
            result.errors.append(f'Component name "{name}" must be lowercase and kebab-case')
        if not isinstance(component, dict):
            continue

        for field_name, valid in (("frameworks", VALID_FRAMEWORKS), ("styling", VALID_STYLING)):
            values = component.get(field_name)
            if values is None:
                continue
            if not isinstance(values, list):
                result.errors.append(f'Component "{name}" {field_name} must be an array')
                continue
            invalid = _invalid_choices(values, valid)
            if invalid:
                result.errors.append(
                    f'Component "{name}" has invalid {field_name}: {", ".join(invalid)}'
                )

        description = component.get("description")
        if description is not None and not isinstance(description, str):
            result.errors.append(f'Component "{name}" description must be a string')


def _check_conflict_resolution(conflict: Any, result: ConfigValidationResult) -> None:
    if not conflict or not isinstance(conflict, dict):
        return
    default = conflict.get("default")
    if default and default not in VALID_CONFLICT_DEFAULTS:
        result.errors.append(
            f"ConflictResolution default must be one of: {', '.join(VALID_CONFLICT_DEFAULTS)}"
        )
    for flag in CONFLICT_FLAGS:
        if flag in conflict and not isinstance(conflict[flag], bool):
            result.errors.append(f"ConflictResolution {flag} must be a boolean")


def validate_config_file(path: Path, data: Any) -> ConfigValidationResult:
    """Like ``validate_config`` with every message prefixed by the file path."""
    result = validate_config(data)
    result.errors = [f"In {path}: {error}" for error in result.errors]
    result.warnings = [f"In {path}: {warning}" for warning in result.warnings]
    return result


# =============================================================================
# Loading
# =============================================================================


def read_config_data(path: Path) -> Any:
    """Read raw config data from a ``.json``, ``.yaml`` or ``.yml`` file.

    Raises:
        ConfigError: If the file is missing or cannot be parsed.
    """
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    content = path.read_text(encoding="utf-8")
    try:
        if path.suffix == ".json":
            return json.loads(content)
        return yaml.safe_load(content)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e


def load_config(path: Path) -> ScaffoldConfig:
    """Load and validate a scaffold config file.

    Raises:
        ConfigError: If the file cannot be read or fails validation.
    """
    data = read_config_data(path)
    result = validate_config_file(path, data)
    if not result.is_valid:
        raise ConfigError("Configuration validation failed:\n" + "\n".join(result.errors))
    for warning in result.warnings:
        logger.warning(warning)

    try:
        return ScaffoldConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid scaffold config schema in {path}: {e}") from e
