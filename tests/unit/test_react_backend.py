"""Tests for the React backend."""

from __future__ import annotations

import pytest


def _render(template, **context_kwargs):
    from conceptforge.analyzer.template_analyzer import TemplateAnalyzer
    from conceptforge.backends.react import ReactFrameworkExtension
    from conceptforge.extensions.base import RenderContext

    concepts = TemplateAnalyzer().extract_concepts(template)
    context = RenderContext(framework="react", **context_kwargs)
    return ReactFrameworkExtension().render_component(concepts, context)


class TestSyntaxHelpers:
    """Pure JSX string helpers."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("class", "className"),
            ("for", "htmlFor"),
            ("tabindex", "tabIndex"),
            ("aria-Label", "aria-label"),
            ("title", "title"),
        ],
    )
    def test_react_attribute_name(self, name, expected):
        from conceptforge.backends.react import react_attribute_name

        assert react_attribute_name(name) == expected

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("default", "children"),
            ("header-title", "headerTitle"),
            ("1st-slot", "_1stSlot"),
            ("class", "classProp"),
        ],
    )
    def test_normalize_slot_name(self, name, expected):
        from conceptforge.backends.react import normalize_slot_name

        assert normalize_slot_name(name) == expected

    def test_format_handler(self):
        from conceptforge.backends.react import format_handler

        assert format_handler("save", [], []) == "save"
        assert format_handler("select(item)", ["item"], []) == "() => select(item)"
        assert format_handler("select($event)", ["$event"], []) == "(e) => select(e)"
        assert (
            format_handler("save", [], ["prevent"]) == "(e) => { e.preventDefault(); save(e); }"
        )

    def test_conditional_syntax(self):
        from conceptforge.backends.react import conditional_syntax

        assert conditional_syntax("ok", "<b>y</b>", "<i>n</i>") == "{ok ? <b>y</b> : <i>n</i>}"
        assert conditional_syntax("ok", "<b>y</b>", None) == "{ok && <b>y</b>}"
        assert conditional_syntax("ok", "", None) == "{ok && (\n    null\n  )}"

    def test_iteration_syntax(self):
        from conceptforge.backends.react import iteration_syntax
        from conceptforge.specs.concepts import IterationConcept

        keyed = IterationConcept(
            node_id="root", items="items", item_variable="item", key_expression="item.id"
        )
        unkeyed = IterationConcept(node_id="root", items="items", item_variable="item")

        assert iteration_syntax(keyed, "<li>x</li>") == (
            "{items.map(item => (\n"
            "    <React.Fragment key={item.id}>\n"
            "      <li>x</li>\n"
            "    </React.Fragment>\n"
            "  ))}"
        )
        assert "items.map((item, index) =>" in iteration_syntax(unkeyed, "<li>x</li>")
        assert "key={index}" in iteration_syntax(unkeyed, "<li>x</li>")

    def test_attribute_syntax(self):
        from conceptforge.backends.react import attribute_syntax

        assert attribute_syntax("disabled", True, False) == " disabled"
        assert attribute_syntax("disabled", False, False) == ""
        assert attribute_syntax("title", "items.length", True) == " title={items.length}"
        assert attribute_syntax("alt", 'a "b"', False) == ' alt="a &quot;b&quot;"'
        assert (
            attribute_syntax("style", "color: red; font-size: 12px", False)
            == ' style={{"color":"red","fontSize":"12px"}}'
        )


class TestConceptTransforms:
    def test_process_events(self, react_extension):
        from conceptforge.specs.concepts import EventConcept

        output = react_extension.process_events(
            [
                EventConcept(node_id="root", name="click", handler="save"),
                EventConcept(node_id="root", name="swipe", handler="next"),
            ]
        )

        assert output.attributes == {"onClick": "save", "onSwipe": "next"}

    def test_process_attributes(self, react_extension):
        from conceptforge.specs.concepts import AttributeConcept

        output = react_extension.process_attributes(
            [
                AttributeConcept(node_id="root", name="for", value="email"),
                AttributeConcept(node_id="root", name=":title", value="t", is_expression=True),
                AttributeConcept(node_id="root", name="hidden", value=True),
                AttributeConcept(node_id="root", name="open", value=False),
            ]
        )

        assert output.attributes == {"htmlFor": "email", "title": "{t}", "hidden": "true"}

    def test_process_conditionals(self, react_extension):
        from conceptforge.specs.concepts import ConditionalConcept, TextConcept

        output = react_extension.process_conditionals(
            [
                ConditionalConcept(
                    node_id="root",
                    condition="ok",
                    then_nodes=[TextConcept(node_id="root.then[0]", content="yes")],
                    else_nodes=[TextConcept(node_id="root.else[0]", content="no")],
                )
            ]
        )

        assert output.syntax.startswith("{ok ? ")
        assert "yes" in output.syntax
        assert "no" in output.syntax

    def test_process_iterations(self, react_extension):
        from conceptforge.specs.concepts import IterationConcept

        output = react_extension.process_iterations(
            [IterationConcept(node_id="root", items="rows", item_variable="row")]
        )

        assert output.syntax.startswith("{rows.map((row, index) =>")
        assert output.imports == ["React"]

    def test_process_slots(self, react_extension):
        from conceptforge.specs.concepts import SlotConcept

        output = react_extension.process_slots([SlotConcept(node_id="root", name="default")])

        assert output.syntax == "{props.children}"
        assert output.props == {"children": "React.ReactNode"}


class TestRenderComponent:
    """Whole-file output."""

    def test_button(self, button_template):
        output = _render(button_template, component_name="Btn")

        assert output == (
            "import React from 'react';\n"
            "\n"
            "const Btn = () => {\n"
            "  return (\n"
            '    <div className="btn">Hi</div>\n'
            "  );\n"
            "};\n"
            "\n"
            "export default Btn;"
        )

    def test_empty_template_renders_null(self):
        output = _render([])

        assert "return (\n    null\n  );" in output
        assert "const Component = () => {" in output

    def test_interactive_template(self, interactive_template):
        output = _render(interactive_template, component_name="Card")

        assert 'style={{"color":"red","fontSize":"12px"}}' in output
        assert (
            '<button type="submit" onClick={(e) => { e.preventDefault(); save(e); }}>Save</button>'
            in output
        )
        assert "{visible ? <span>On</span> : <span>Off</span>}" in output
        assert "<React.Fragment key={item.id}>" in output
        assert "{props.footer}" in output
        assert "const Card = (props) => {" in output

    def test_typescript_slot_props(self):
        output = _render(
            [{"tag": "div", "children": [{"type": "slot", "name": "header-title"}]}],
            component_name="Panel",
            language="typescript",
        )

        assert "interface PanelProps {\n  headerTitle?: React.ReactNode;\n}" in output
        assert "const Panel: React.FC<PanelProps> = (props) => {" in output
        assert "<div>{props.headerTitle}</div>" in output

    def test_component_metadata_is_merged(self, button_template):
        from conceptforge.specs.component import ComponentOptions

        component = ComponentOptions.model_validate(
            {
                "name": "Toggle",
                "extensions": {
                    "react": {
                        "imports": [{"from": "react", "named": ["useState"]}],
                        "script": "const [open, setOpen] = useState(false);",
                    }
                },
            }
        )
        output = _render(button_template, component=component)

        assert output.startswith("import React, { useState } from 'react';")
        assert "const Toggle = () => {\n  const [open, setOpen] = useState(false);\n\n" in output
        assert output.endswith("export default Toggle;")

    def test_named_export_and_stylesheet(self, button_template):
        from conceptforge.extensions.base import StyleOutput

        output = _render(
            button_template,
            component_name="Btn",
            options={"export_type": "named"},
            style_output=StyleOutput(styles=".btn {}"),
        )

        assert "import './Btn.css';" in output
        assert output.endswith("export { Btn };")

    def test_multiple_roots_use_fragment(self):
        output = _render([{"tag": "h1"}, {"tag": "p"}])

        assert "<>\n      <h1></h1>\n      <p></p>\n    </>" in output

    def test_self_closing_tags(self):
        output = _render([{"tag": "img", "attributes": {"src": "a.png", "alt": "A"}}])

        assert '<img src="a.png" alt="A" />' in output


class TestStylingAttributes:
    """Class and style sources fold into a single JSX prop."""

    def test_static_and_bound_class_share_one_classname(self):
        output = _render(
            [
                {
                    "tag": "div",
                    "attributes": {"class": "card"},
                    "expressionAttributes": {":class": "theme", "class:active": "isActive"},
                }
            ]
        )

        assert output.count("className=") == 1
        assert (
            "<div className={['card', theme, isActive ? 'active' : ''].filter(Boolean).join(' ')}>"
            in output
        )

    def test_single_bound_class(self):
        output = _render([{"tag": "p", "expressionAttributes": {"v-bind:class": "cls"}}])

        assert "<p className={cls}></p>" in output

    def test_style_directives_merge_into_style_object(self):
        output = _render(
            [
                {
                    "tag": "div",
                    "attributes": {"style": "color: red"},
                    "expressionAttributes": {"style:font-size": "size", ":style": "extra"},
                }
            ]
        )

        assert '<div style={{...(extra),"color":"red","fontSize":size}}></div>' in output
        assert "style:" not in output

    def test_unsupported_directive_is_dropped_with_warning(self):
        from conceptforge.analyzer.template_analyzer import TemplateAnalyzer
        from conceptforge.backends.react import ReactFrameworkExtension
        from conceptforge.core.diagnostics import ErrorCollector, Severity
        from conceptforge.extensions.base import RenderContext

        errors = ErrorCollector()
        concepts = TemplateAnalyzer().extract_concepts(
            [{"tag": "input", "expressionAttributes": {"use:tooltip": "tip", ":title": "t"}}]
        )
        output = ReactFrameworkExtension().render_component(
            concepts, RenderContext(framework="react", errors=errors)
        )

        assert "<input title={t} />" in output
        warnings = errors.get_errors_by_severity(Severity.WARNING)
        assert warnings[0].message == (
            "Directive 'use:tooltip' on <input> has no React equivalent and was dropped"
        )
