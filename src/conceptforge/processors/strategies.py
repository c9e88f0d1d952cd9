"""
Merge strategy types for component properties.

A strategy says how the common part of a component definition and its
framework-specific part are combined, separately for script, props and
imports.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

MergeMode = Literal["merge", "override", "framework-first", "common-first"]


class ScriptMergeStrategy(BaseModel):
    """How two script blocks are combined."""

    mode: Literal["prepend", "append", "replace", "merge"] = "append"
    separator: str = "\n\n"
    include_comments: bool = False

    model_config = ConfigDict(frozen=True)


class PropMergeStrategy(BaseModel):
    """How prop declarations are combined and what a conflict produces."""

    mode: MergeMode = "merge"
    conflict_resolution: Literal["error", "warn", "framework-wins", "common-wins"] = "warn"

    model_config = ConfigDict(frozen=True)


class ImportMergeStrategy(BaseModel):
    mode: MergeMode = "merge"
    deduplication: bool = True
    grouping: bool = True

    model_config = ConfigDict(frozen=True)


class ComponentResolutionStrategy(BaseModel):
    """One strategy per mergeable property."""

    script: ScriptMergeStrategy = Field(default_factory=ScriptMergeStrategy)
    props: PropMergeStrategy = Field(default_factory=PropMergeStrategy)
    imports: ImportMergeStrategy = Field(default_factory=ImportMergeStrategy)

    model_config = ConfigDict(frozen=True)


DEFAULT_MERGE_STRATEGIES = ComponentResolutionStrategy()
