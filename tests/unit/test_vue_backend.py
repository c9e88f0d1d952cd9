"""Tests for the Vue backend."""

from __future__ import annotations

import pytest


def _render(template, **context_kwargs):
    from conceptforge.analyzer.template_analyzer import TemplateAnalyzer
    from conceptforge.backends.vue import VueFrameworkExtension
    from conceptforge.extensions.base import RenderContext

    concepts = TemplateAnalyzer().extract_concepts(template)
    context = RenderContext(framework="vue", **context_kwargs)
    return VueFrameworkExtension().render_component(concepts, context)


class TestSyntaxHelpers:
    @pytest.mark.parametrize(
        "type_expression, expected",
        [
            ("string", "String"),
            ("number", "Number"),
            ("boolean", "Boolean"),
            ("string[]", "Array"),
            ("Array<Item>", "Array"),
            ("() => void", "Function"),
            ("Record<string, number>", "Object"),
            ("Item", "null"),
        ],
    )
    def test_vue_prop_type(self, type_expression, expected):
        from conceptforge.backends.vue import vue_prop_type

        assert vue_prop_type(type_expression) == expected

    def test_v_for_expression(self):
        from conceptforge.backends.vue import v_for_expression
        from conceptforge.specs.concepts import IterationConcept

        keyed = IterationConcept(
            node_id="root", items="rows", item_variable="row", key_expression="row.id"
        )
        indexed = IterationConcept(
            node_id="root", items="rows", item_variable="row", index_variable="i"
        )
        unkeyed = IterationConcept(node_id="root", items="rows", item_variable="row")

        assert v_for_expression(keyed) == ("row in rows", "row.id")
        assert v_for_expression(indexed) == ("(row, i) in rows", "i")
        assert v_for_expression(unkeyed) == ("(row, index) in rows", "index")


class TestConceptTransforms:
    def test_process_events(self):
        from conceptforge.backends.vue import VueFrameworkExtension
        from conceptforge.specs.concepts import EventConcept

        output = VueFrameworkExtension().process_events(
            [
                EventConcept(node_id="root", name="click", handler="save", modifiers=["stop"]),
                EventConcept(
                    node_id="root",
                    name="submit",
                    handler="send",
                    modifiers=["preventDefault"],
                ),
                EventConcept(node_id="root", name="swipe", handler="next"),
            ]
        )

        assert output.attributes == {
            "@click.stop": "save",
            "@submit.prevent": "send",
            "@swipe": "next",
        }

    def test_process_attributes(self):
        from conceptforge.backends.vue import VueFrameworkExtension
        from conceptforge.specs.concepts import AttributeConcept

        output = VueFrameworkExtension().process_attributes(
            [
                AttributeConcept(node_id="root", name="title", value="t", is_expression=True),
                AttributeConcept(node_id="root", name=":alt", value="a", is_expression=True),
                AttributeConcept(node_id="root", name="hidden", value=True),
                AttributeConcept(node_id="root", name="open", value=False),
                AttributeConcept(node_id="root", name="id", value="main"),
            ]
        )

        assert output.attributes == {":title": "t", ":alt": "a", "hidden": "true", "id": "main"}

    def test_process_slots(self):
        from conceptforge.backends.vue import VueFrameworkExtension
        from conceptforge.specs.concepts import SlotConcept

        output = VueFrameworkExtension().process_slots(
            [SlotConcept(node_id="root", name="default"), SlotConcept(node_id="x", name="footer")]
        )

        assert output.syntax == '<slot />\n<slot name="footer" />'


class TestRenderComponent:
    def test_button(self, button_template):
        output = _render(button_template, component_name="Btn")

        assert output == (
            "<template>\n"
            '  <div class="btn">Hi</div>\n'
            "</template>\n"
            "\n"
            "<script>\n"
            "export default {\n"
            "  name: 'Btn',\n"
            "};\n"
            "</script>"
        )

    def test_interactive_template(self, interactive_template):
        output = _render(interactive_template, component_name="Card")

        assert '<div class="card" style="color: red; font-size: 12px">' in output
        assert '<button type="submit" @click.prevent="save">Save</button>' in output
        assert (
            '<template v-if="visible"><span>On</span></template>'
            "<template v-else><span>Off</span></template>"
        ) in output
        assert '<template v-for="item in items" :key="item.id"><li>x</li></template>' in output
        assert '<slot name="footer" />' in output

    def test_typescript_props(self, button_template):
        from conceptforge.specs.component import ComponentOptions

        output = _render(
            button_template,
            component=ComponentOptions(name="Toggle", props={"label": "string", "count": "number"}),
            language="typescript",
        )

        assert output.endswith(
            '<script lang="ts">\n'
            "import { defineComponent } from 'vue';\n"
            "\n"
            "export default defineComponent({\n"
            "  name: 'Toggle',\n"
            "  props: {\n"
            "    label: String,\n"
            "    count: Number,\n"
            "  },\n"
            "});\n"
            "</script>"
        )

    def test_scoped_style_block(self, button_template):
        from conceptforge.extensions.base import StyleOutput

        output = _render(
            button_template,
            options={"scoped": True, "style_lang": "scss"},
            style_output=StyleOutput(styles=".btn {}"),
        )

        assert output.endswith('<style lang="scss" scoped>\n.btn {}\n</style>')

    def test_two_way_binding_becomes_v_model(self):
        output = _render(
            [
                {"tag": "input", "attributes": {"bind:value": "name"}},
                {"tag": "input", "attributes": {"bind:open": "isOpen"}},
            ]
        )

        assert '<input v-model="name" />' in output
        assert '<input v-model:open="isOpen" />' in output

    def test_class_and_style_bindings(self):
        output = _render(
            [
                {
                    "tag": "div",
                    "attributes": {"class": "card", "style": "color: red"},
                    "expressionAttributes": {
                        "className": "theme",
                        "class:active": "isActive",
                        "style:width": "w",
                    },
                }
            ]
        )

        assert (
            '<div class="card" :class="[theme, { \'active\': isActive }]" '
            "style=\"color: red\" :style=\"{ 'width': w }\"></div>"
        ) in output

    def test_svelte_directive_dropped_with_warning(self):
        from conceptforge.analyzer.template_analyzer import TemplateAnalyzer
        from conceptforge.backends.vue import VueFrameworkExtension
        from conceptforge.core.diagnostics import ErrorCollector, Severity
        from conceptforge.extensions.base import RenderContext

        errors = ErrorCollector()
        concepts = TemplateAnalyzer().extract_concepts(
            [{"tag": "p", "expressionAttributes": {"use:tooltip": "tip", "title": "t"}}]
        )
        output = VueFrameworkExtension().render_component(
            concepts, RenderContext(framework="vue", errors=errors)
        )

        assert '<p :title="t"></p>' in output
        warnings = errors.get_errors_by_severity(Severity.WARNING)
        assert warnings[0].message == (
            "Directive 'use:tooltip' on <p> has no Vue equivalent and was dropped"
        )


class TestEngineIntegration:
    def test_node_extension_overrides_through_engine(self, engine):
        from conceptforge.backends.vue import VueFrameworkExtension
        from conceptforge.pipeline.processing import ProcessingOptions

        engine.register_framework(VueFrameworkExtension())
        result = engine.render(
            [
                {
                    "tag": "a",
                    "attributes": {"href": "/home"},
                    "extensions": {
                        "vue": {"tag": "router-link", "expressionAttributes": {":to": "route"}}
                    },
                }
            ],
            ProcessingOptions(framework="vue"),
        )

        assert result.success
        assert '<router-link href="/home" :to="route"></router-link>' in result.output
