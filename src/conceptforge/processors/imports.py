"""
Import parsing, merging, deduplication and code generation.

Imports arrive either as structured ``ImportDefinition`` values or as raw
``import ... from '...'`` strings; everything is normalized to
``ImportDefinition`` before merging.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field

from conceptforge.core.diagnostics import ErrorCollector
from conceptforge.core.node_ids import ROOT_NODE_ID
from conceptforge.specs.component import ImportDefinition, ImportInput

from .strategies import ImportMergeStrategy

logger = logging.getLogger(__name__)

IMPORT_PROCESSOR_EXTENSION = "import-processor"

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_$][a-zA-Z0-9_$]*$")
_FROM_RE = re.compile(r"\s+from\s+['\"`]([^'\"`]+)['\"`]")
_NAMESPACE_RE = re.compile(r"\*\s+as\s+(\w+)")
_BRACES_RE = re.compile(r"\{([^}]+)\}")
_LEADING_DEFAULT_RE = re.compile(r"(\w+),?\s*$")
_DEFAULT_ONLY_RE = re.compile(r"^(\w+)$")

ImportSortKey = Callable[[ImportDefinition], object]


@dataclass
class ImportProcessingOptions:
    strategy: ImportMergeStrategy = field(default_factory=ImportMergeStrategy)
    validate_imports: bool = True
    sort_key: ImportSortKey | None = None


@dataclass
class ParsedImport:
    original: str
    definition: ImportDefinition
    errors: list[str] = field(default_factory=list)


@dataclass
class ImportValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


DEFAULT_IMPORT_OPTIONS = ImportProcessingOptions()


class ImportProcessor:
    """Normalize and combine import declarations."""

    def __init__(self, errors: ErrorCollector | None = None) -> None:
        self.errors = errors if errors is not None else ErrorCollector()

    def merge_imports(
        self,
        common_imports: list[ImportInput],
        framework_imports: list[ImportInput],
        options: ImportProcessingOptions | None = None,
    ) -> list[ImportDefinition]:
        options = options or DEFAULT_IMPORT_OPTIONS
        common = self.parse_imports(common_imports)
        framework = self.parse_imports(framework_imports)

        mode = options.strategy.mode
        if mode == "override":
            combined = framework
        elif mode == "framework-first":
            combined = framework + common
        else:
            combined = common + framework

        return self.process_imports(combined, options)

    def process_imports(
        self, imports: list[ImportDefinition], options: ImportProcessingOptions | None = None
    ) -> list[ImportDefinition]:
        """Validate, deduplicate and group according to ``options``."""
        options = options or DEFAULT_IMPORT_OPTIONS
        result = list(imports)
        if options.validate_imports:
            result = self.validate_and_filter_imports(result)
        if options.strategy.deduplication:
            result = self.deduplicate_imports(result)
        if options.strategy.grouping:
            result = self.group_and_sort_imports(result, options.sort_key)
        return result

    def parse_imports(self, imports: list[ImportInput]) -> list[ImportDefinition]:
        parsed: list[ImportDefinition] = []
        for item in imports:
            if isinstance(item, ImportDefinition):
                parsed.append(item)
                continue
            if isinstance(item, dict):
                parsed.append(ImportDefinition.model_validate(item))
                continue
            result = self.parse_import_string(item)
            for error in result.errors:
                self.errors.add_warning(
                    f"Import parse error: {error}", ROOT_NODE_ID, IMPORT_PROCESSOR_EXTENSION
                )
            parsed.append(result.definition)
        return parsed

    def parse_import_string(self, statement: str) -> ParsedImport:
        """
        Parse one ``import`` statement.

        Handles default, named, mixed default+named, namespace and
        ``import type`` forms. Side-effect imports (``import 'x.css'``) have no
        ``from`` clause and are reported as a parse error.
        """
        cleaned = re.sub(r"^import\s+", "", statement.strip())
        cleaned = cleaned.removesuffix(";").strip()

        type_only = cleaned.startswith("type ")
        if type_only:
            cleaned = cleaned[len("type ") :].strip()

        from_match = _FROM_RE.search(cleaned)
        if not from_match:
            return ParsedImport(
                original=statement,
                definition=ImportDefinition(from_="", type_only=type_only),
                errors=["Missing or invalid from clause"],
            )

        source = from_match.group(1)
        clause = cleaned.replace(from_match.group(0), "").strip()
        default = namespace = None
        named: list[str] | None = None

        if "* as " in clause:
            match = _NAMESPACE_RE.search(clause)
            if match:
                namespace = match.group(1)
        elif "{" in clause and "}" in clause:
            match = _BRACES_RE.search(clause)
            if match:
                named = [item.strip() for item in match.group(1).split(",") if item.strip()]
                before = clause.split("{", 1)[0].strip()
                default_match = _LEADING_DEFAULT_RE.search(before) if before else None
                if default_match:
                    default = default_match.group(1)
        elif clause:
            match = _DEFAULT_ONLY_RE.match(clause)
            if match:
                default = match.group(1)

        return ParsedImport(
            original=statement,
            definition=ImportDefinition(
                from_=source,
                default=default,
                namespace=namespace,
                named=named,
                type_only=type_only,
            ),
        )

    def deduplicate_imports(self, imports: list[ImportDefinition]) -> list[ImportDefinition]:
        """
        Merge imports that share ``(from, type_only)``.

        Default and namespace bindings from later entries win; named bindings
        are unioned and sorted.
        """
        merged: dict[tuple[str, bool], ImportDefinition] = {}
        for item in imports:
            key = (item.from_, item.type_only)
            existing = merged.get(key)
            if existing is None:
                merged[key] = item
                continue
            names = set(existing.named or []) | set(item.named or [])
            merged[key] = ImportDefinition(
                from_=item.from_,
                type_only=item.type_only,
                default=item.default or existing.default,
                namespace=item.namespace or existing.namespace,
                named=sorted(names) if names else None,
            )
        return list(merged.values())

    def group_and_sort_imports(
        self, imports: list[ImportDefinition], sort_key: ImportSortKey | None = None
    ) -> list[ImportDefinition]:
        """Type-only imports first, then by module specifier."""
        if sort_key is not None:
            return sorted(imports, key=sort_key)
        return sorted(imports, key=lambda item: (not item.type_only, item.from_))

    def validate_and_filter_imports(
        self, imports: list[ImportDefinition]
    ) -> list[ImportDefinition]:
        valid = []
        for item in imports:
            result = self.validate_import(item)
            if result.errors:
                for error in result.errors:
                    self.errors.add_simple_error(
                        f"Invalid import from '{item.from_}': {error}",
                        ROOT_NODE_ID,
                        IMPORT_PROCESSOR_EXTENSION,
                    )
                continue
            for warning in result.warnings:
                self.errors.add_warning(
                    f"Import warning for '{item.from_}': {warning}",
                    ROOT_NODE_ID,
                    IMPORT_PROCESSOR_EXTENSION,
                )
            valid.append(item)
        return valid

    def validate_import(self, item: ImportDefinition) -> ImportValidationResult:
        errors: list[str] = []
        warnings: list[str] = []

        if not item.from_:
            errors.append("Missing or invalid from field")

        has_default = bool(item.default and item.default.strip())
        has_named = bool(item.named)
        has_namespace = bool(item.namespace and item.namespace.strip())

        if not (has_default or has_named or has_namespace):
            errors.append("Import has no default, named, or namespace imports")
        if has_namespace and (has_default or has_named):
            warnings.append("Namespace import combined with default/named imports")

        if item.default and not _IDENTIFIER_RE.match(item.default):
            errors.append(f"Invalid default import name: {item.default}")
        if item.namespace and not _IDENTIFIER_RE.match(item.namespace):
            errors.append(f"Invalid namespace import name: {item.namespace}")
        for name in item.named or []:
            if not _IDENTIFIER_RE.match(name):
                errors.append(f"Invalid named import: {name}")

        return ImportValidationResult(is_valid=not errors, errors=errors, warnings=warnings)

    def generate_import_strings(self, imports: list[ImportDefinition]) -> list[str]:
        return [self.generate_import_string(item) for item in imports]

    def generate_import_string(self, item: ImportDefinition) -> str:
        """``ImportDefinition(from_='react', default='React')`` -> ``import React from 'react';``"""
        parts = ["import"]
        if item.type_only:
            parts.append("type")

        bindings: list[str] = []
        if item.default:
            bindings.append(item.default)
        if item.named:
            bindings.append("{ " + ", ".join(item.named) + " }")
        if item.namespace:
            bindings.append(f"* as {item.namespace}")
        if bindings:
            parts.append(", ".join(bindings))

        parts.extend(["from", f"'{item.from_}'"])
        return " ".join(parts) + ";"

    def get_errors(self) -> ErrorCollector:
        return self.errors

    def clear_errors(self) -> None:
        self.errors.clear()
