"""Tests for name, import, script and prop resolution."""

from __future__ import annotations

import pytest


class TestComponentNameResolver:
    """Priority order of name candidates."""

    COMPONENT = {"name": "Common", "extensions": {"react": {"name": "ReactName"}}}

    def test_options_name_wins(self):
        from conceptforge.processors.names import ComponentNameResolver, NameResolutionPriority

        result = ComponentNameResolver().resolve_component_name(self.COMPONENT, "react", "Opt")

        assert result.name == "Opt"
        assert result.priority == NameResolutionPriority.OPTIONS_OVERRIDE
        assert result.alternatives == ["ReactName", "Common", "Component"]

    def test_framework_override_before_common(self):
        from conceptforge.processors.names import ComponentNameResolver, NameResolutionPriority

        result = ComponentNameResolver().resolve_component_name(self.COMPONENT, "react")

        assert result.name == "ReactName"
        assert result.priority == NameResolutionPriority.FRAMEWORK_SPECIFIC
        assert result.source == "component.extensions.react.name"

    def test_common_name_for_other_framework(self):
        from conceptforge.processors.names import ComponentNameResolver

        assert ComponentNameResolver().resolve_simple(self.COMPONENT, "vue") == "Common"

    def test_default_fallback(self):
        from conceptforge.processors.names import ComponentNameResolver

        result = ComponentNameResolver().resolve_component_name(None, "react")

        assert result.name == "Component"
        assert result.used_fallback

    def test_invalid_candidate_skipped_with_warning(self):
        from conceptforge.processors.names import ComponentNameResolver

        resolver = ComponentNameResolver()
        result = resolver.resolve_component_name({"name": "Common"}, "react", "lowercase")

        assert result.name == "Common"
        assert result.warnings == ['Invalid component name in options: "lowercase"']
        assert resolver.get_errors().has_warnings()

    @pytest.mark.parametrize(
        "name, valid",
        [
            ("Button", True),
            ("MyButton2", True),
            ("button", False),
            ("My-Button", False),
            ("Class", False),
            ("", False),
            (None, False),
        ],
    )
    def test_is_valid_component_name(self, name, valid):
        from conceptforge.processors.names import ComponentNameResolver

        assert ComponentNameResolver.is_valid_component_name(name) is valid

    def test_suggestions(self):
        from conceptforge.processors.names import ComponentNameResolver

        suggestions = ComponentNameResolver().generate_suggestions({"name": "my-card"}, "vue")

        assert suggestions == ["MyCard", "VueComponent", "Component"]


class TestImportProcessor:
    """Import parsing, merging and generation."""

    def test_same_module_named_imports_are_merged(self):
        from conceptforge.processors.imports import ImportProcessor

        merged = ImportProcessor().merge_imports(
            [{"from": "a", "named": ["x"]}], [{"from": "a", "named": ["y"]}]
        )

        assert len(merged) == 1
        assert merged[0].named == ["x", "y"]

    def test_type_only_imports_kept_apart_and_first(self):
        from conceptforge.processors.imports import ImportProcessor

        merged = ImportProcessor().merge_imports(
            ["import React from 'react'", "import { a } from 'b'"],
            ["import type { FC } from 'react'"],
        )

        assert [(m.from_, m.type_only) for m in merged] == [
            ("react", True),
            ("b", False),
            ("react", False),
        ]

    def test_override_mode_uses_framework_only(self):
        from conceptforge.processors.imports import ImportProcessingOptions, ImportProcessor
        from conceptforge.processors.strategies import ImportMergeStrategy

        options = ImportProcessingOptions(strategy=ImportMergeStrategy(mode="override"))
        merged = ImportProcessor().merge_imports(
            ["import A from 'a'"], ["import B from 'b'"], options
        )

        assert [m.from_ for m in merged] == ["b"]

    @pytest.mark.parametrize(
        "statement, default, named, namespace, type_only",
        [
            (
                "import React, { useState, useEffect } from 'react';",
                "React",
                ["useState", "useEffect"],
                None,
                False,
            ),
            ("import type { FC } from 'react'", None, ["FC"], None, True),
            ("import * as utils from './utils'", None, None, "utils", False),
            ('import Button from "./Button"', "Button", None, None, False),
        ],
    )
    def test_parse_import_string(self, statement, default, named, namespace, type_only):
        from conceptforge.processors.imports import ImportProcessor

        parsed = ImportProcessor().parse_import_string(statement)

        assert parsed.errors == []
        assert parsed.definition.default == default
        assert parsed.definition.named == named
        assert parsed.definition.namespace == namespace
        assert parsed.definition.type_only is type_only

    def test_side_effect_import_is_rejected(self):
        from conceptforge.processors.imports import ImportProcessor

        processor = ImportProcessor()
        merged = processor.merge_imports(["import './styles.css'"], [])

        assert merged == []
        assert processor.get_errors().has_errors()
        assert processor.get_errors().has_warnings()

    def test_invalid_identifier_filtered(self):
        from conceptforge.processors.imports import ImportProcessor

        processor = ImportProcessor()
        merged = processor.merge_imports([{"from": "x", "default": "not-valid"}], [])

        assert merged == []
        assert "Invalid default import name: not-valid" in processor.get_errors().format_errors()

    def test_generate_import_string(self):
        from conceptforge.processors.imports import ImportProcessor
        from conceptforge.specs.component import ImportDefinition

        processor = ImportProcessor()

        assert (
            processor.generate_import_string(
                ImportDefinition(from_="react", default="React", named=["useState"])
            )
            == "import React, { useState } from 'react';"
        )
        assert (
            processor.generate_import_string(
                ImportDefinition(from_="react", named=["FC"], type_only=True)
            )
            == "import type { FC } from 'react';"
        )


class TestScriptMergeProcessor:
    COMMON = "import a from 'x'\nconst count = 1"
    FRAMEWORK = "import a from 'x'\nconst count = 2\nfunction go() {}"

    def test_append_and_prepend(self):
        from conceptforge.processors.scripts import ScriptMergeProcessor
        from conceptforge.processors.strategies import ScriptMergeStrategy

        processor = ScriptMergeProcessor()
        appended = processor.merge_scripts("a()", "b()")
        prepended = processor.merge_scripts(
            "a()", "b()", ScriptMergeStrategy(mode="prepend", include_comments=True)
        )

        assert appended.content == "a()\n\nb()"
        assert prepended.content == "b()\n\n\n// Merged: prepend\na()"

    def test_empty_side_is_dropped(self):
        from conceptforge.processors.scripts import ScriptMergeProcessor

        assert ScriptMergeProcessor().merge_scripts("", "b()").content == "b()"

    def test_replace(self):
        from conceptforge.processors.scripts import ScriptMergeProcessor
        from conceptforge.processors.strategies import ScriptMergeStrategy

        result = ScriptMergeProcessor().merge_scripts(
            "a()", "b()", ScriptMergeStrategy(mode="replace")
        )

        assert result.content == "b()"

    def test_structural_merge_pools_imports_and_reports_conflicts(self):
        from conceptforge.processors.scripts import ScriptMergeProcessor
        from conceptforge.processors.strategies import ScriptMergeStrategy

        result = ScriptMergeProcessor().merge_scripts(
            self.COMMON, self.FRAMEWORK, ScriptMergeStrategy(mode="merge")
        )

        assert result.intelligent_merge
        assert result.content == (
            "import a from 'x'\n\nconst count = 1\n\nconst count = 2\nfunction go() {}"
        )
        assert {(c.type, c.element) for c in result.conflicts} == {
            ("duplicate", "x"),
            ("naming", "count"),
        }
        assert result.elements_count == 5

    def test_analyze_script(self):
        from conceptforge.processors.scripts import ScriptMergeProcessor

        analysis = ScriptMergeProcessor().analyze_script(
            "// note\nexport default function Card() {}\nlet open = false"
        )

        assert [e.type for e in analysis.elements] == ["comment", "export", "variable"]
        assert analysis.exports == ["Card"]
        assert analysis.variables == ["open"]


class TestComponentPropertyProcessor:
    """Whole-definition merging."""

    def test_prop_conflict_warns_and_framework_wins(self):
        from conceptforge.processors.properties import ComponentPropertyProcessor

        processor = ComponentPropertyProcessor()
        props = processor.merge_props({"label": "string"}, {"label": "number", "size": "number"})

        assert props == {"label": "number", "size": "number"}
        assert "Props conflicts detected: label" in processor.get_errors().format_errors()
        assert not processor.get_errors().has_errors()

    def test_prop_conflict_error_policy(self):
        from conceptforge.processors.properties import ComponentPropertyProcessor
        from conceptforge.processors.strategies import PropMergeStrategy

        processor = ComponentPropertyProcessor()
        processor.merge_props(
            {"label": "string"},
            {"label": "number"},
            PropMergeStrategy(conflict_resolution="error"),
        )

        assert processor.get_errors().has_errors()

    def test_common_wins_policy(self):
        from conceptforge.processors.properties import ComponentPropertyProcessor
        from conceptforge.processors.strategies import PropMergeStrategy

        props = ComponentPropertyProcessor().merge_props(
            {"label": "string"},
            {"label": "number"},
            PropMergeStrategy(conflict_resolution="common-wins"),
        )

        assert props == {"label": "string"}

    def test_merge_component_properties(self):
        from conceptforge.processors.properties import ComponentPropertyProcessor
        from conceptforge.specs.component import ComponentOptions

        component = ComponentOptions.model_validate(
            {
                "name": "Card",
                "props": {"title": "string"},
                "imports": ["import React from 'react'"],
                "script": "const a = 1",
                "extensions": {
                    "react": {
                        "props": {"onClose": "() => void"},
                        "imports": [{"from": "react", "named": ["useState"]}],
                        "script": "const b = 2",
                    }
                },
            }
        )
        merged = ComponentPropertyProcessor().merge_component_properties(component, "react")

        assert merged.name == "Card"
        assert merged.props == {"title": "string", "onClose": "() => void"}
        assert len(merged.imports) == 1
        assert merged.imports[0].default == "React"
        assert merged.imports[0].named == ["useState"]
        assert merged.script == "const a = 1\n\nconst b = 2"
