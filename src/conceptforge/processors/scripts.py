"""
Script merging.

``merge`` mode runs a line-oriented structural scan (no JS parser): import
lines are pooled and deduplicated, identifiers declared in both scripts are
reported as conflicts, and the two bodies are concatenated.
"""

from __future__ import annotations

import logging
import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from conceptforge.core.diagnostics import ErrorCollector

from .strategies import ScriptMergeStrategy

logger = logging.getLogger(__name__)

SCRIPT_PROCESSOR_EXTENSION = "script-processor"

_IMPORT_SOURCE_RE = re.compile(r"from\s+['\"`]([^'\"`]+)['\"`]")
_EXPORT_NAME_RE = re.compile(r"export\s+(?:default\s+)?(?:function\s+)?(\w+)")
_VARIABLE_RE = re.compile(r"^\s*(?:const|let|var)\s+(\w+)")
_FUNCTION_RE = re.compile(r"^\s*function\s+(\w+)")

ScriptElementType = Literal["import", "variable", "function", "export", "expression", "comment"]


class ScriptElement(BaseModel):
    """One classified line of a script."""

    type: ScriptElementType
    content: str
    start: int
    end: int
    name: str | None = None

    model_config = ConfigDict(frozen=True)


class ScriptAnalysis(BaseModel):
    original: str
    elements: list[ScriptElement] = Field(default_factory=list)
    imports: list[str] = Field(default_factory=list)
    exports: list[str] = Field(default_factory=list)
    variables: list[str] = Field(default_factory=list)
    functions: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class ScriptConflict(BaseModel):
    type: Literal["duplicate", "naming", "dependency"]
    element: str
    common_value: str
    framework_value: str
    suggestion: str | None = None

    model_config = ConfigDict(frozen=True)


class ScriptMergeResult(BaseModel):
    content: str
    conflicts: list[ScriptConflict] = Field(default_factory=list)
    strategy: ScriptMergeStrategy
    elements_count: int = 0
    intelligent_merge: bool = False

    model_config = ConfigDict(frozen=True)


class ScriptMergeProcessor:
    """Combine a common script with a framework-specific script."""

    def __init__(self, errors: ErrorCollector | None = None) -> None:
        self.errors = errors if errors is not None else ErrorCollector()

    def merge_scripts(
        self, common: str, framework: str, strategy: ScriptMergeStrategy | None = None
    ) -> ScriptMergeResult:
        strategy = strategy or ScriptMergeStrategy()

        if strategy.mode == "prepend":
            content = self._concatenate(framework, common, strategy)
        elif strategy.mode == "append":
            content = self._concatenate(common, framework, strategy)
        elif strategy.mode == "replace":
            content = framework
        else:
            return self._structural_merge(common, framework, strategy)

        return ScriptMergeResult(content=content, strategy=strategy)

    def analyze_script(self, script: str) -> ScriptAnalysis:
        """Classify each non-blank line and collect declared names."""
        elements: list[ScriptElement] = []
        buckets: dict[str, list[str]] = {
            "import": [],
            "export": [],
            "variable": [],
            "function": [],
        }

        position = 0
        for raw in script.split("\n"):
            line = raw.strip()
            start, end = position, position + len(raw)
            position = end + 1
            if not line:
                continue

            element = self._classify(line, start, end)
            elements.append(element)
            if element.name and element.type in buckets:
                buckets[element.type].append(element.name)

        return ScriptAnalysis(
            original=script,
            elements=elements,
            imports=buckets["import"],
            exports=buckets["export"],
            variables=buckets["variable"],
            functions=buckets["function"],
        )

    def detect_conflicts(
        self, common: ScriptAnalysis, framework: ScriptAnalysis
    ) -> list[ScriptConflict]:
        conflicts = [
            ScriptConflict(
                type="duplicate",
                element=source,
                common_value="present",
                framework_value="present",
                suggestion="Remove duplicate import",
            )
            for source in common.imports
            if source in framework.imports
        ]
        for kind, common_names, framework_names in (
            ("variable", common.variables, framework.variables),
            ("function", common.functions, framework.functions),
        ):
            conflicts.extend(
                ScriptConflict(
                    type="naming",
                    element=name,
                    common_value="defined",
                    framework_value="defined",
                    suggestion=f"Rename {kind} {name} to avoid conflict",
                )
                for name in common_names
                if name in framework_names
            )
        return conflicts

    def get_errors(self) -> ErrorCollector:
        return self.errors

    def clear_errors(self) -> None:
        self.errors.clear()

    # -------------------------------------------------------------------------

    @staticmethod
    def _concatenate(first: str, second: str, strategy: ScriptMergeStrategy) -> str:
        if not first.strip():
            return second
        if not second.strip():
            return first
        comment = f"\n// Merged: {strategy.mode}\n" if strategy.include_comments else ""
        return first + strategy.separator + comment + second

    def _structural_merge(
        self, common: str, framework: str, strategy: ScriptMergeStrategy
    ) -> ScriptMergeResult:
        if not common.strip() or not framework.strip():
            return ScriptMergeResult(
                content=framework if not common.strip() else common,
                strategy=strategy,
                intelligent_merge=True,
            )

        common_analysis = self.analyze_script(common)
        framework_analysis = self.analyze_script(framework)
        conflicts = self.detect_conflicts(common_analysis, framework_analysis)
        for conflict in conflicts:
            logger.debug("Script conflict on %s: %s", conflict.element, conflict.suggestion)

        imports = list(
            dict.fromkeys(
                element.content
                for element in common_analysis.elements + framework_analysis.elements
                if element.type == "import"
            )
        )

        sections: list[str] = []
        if imports:
            sections.append("\n".join(imports))
        if strategy.include_comments:
            sections.append(f"// Merged: {strategy.mode} (intelligent)")
        for analysis in (common_analysis, framework_analysis):
            body = [e.content for e in analysis.elements if e.type != "import"]
            if body:
                sections.append("\n".join(body))

        return ScriptMergeResult(
            content=strategy.separator.join(sections),
            conflicts=conflicts,
            strategy=strategy,
            elements_count=len(common_analysis.elements) + len(framework_analysis.elements),
            intelligent_merge=True,
        )

    @staticmethod
    def _classify(line: str, start: int, end: int) -> ScriptElement:
        if line.startswith("import "):
            match = _IMPORT_SOURCE_RE.search(line)
            return ScriptElement(
                type="import", content=line, start=start, end=end, name=match and match.group(1)
            )
        if line.startswith("export "):
            match = _EXPORT_NAME_RE.search(line)
            return ScriptElement(
                type="export", content=line, start=start, end=end, name=match and match.group(1)
            )
        match = _VARIABLE_RE.match(line)
        if match:
            return ScriptElement(
                type="variable", content=line, start=start, end=end, name=match.group(1)
            )
        match = _FUNCTION_RE.match(line)
        if match:
            return ScriptElement(
                type="function", content=line, start=start, end=end, name=match.group(1)
            )
        if line.startswith(("//", "/*")):
            return ScriptElement(type="comment", content=line, start=start, end=end)
        return ScriptElement(type="expression", content=line, start=start, end=end)
