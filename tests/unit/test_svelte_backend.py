"""Tests for the Svelte backend."""

from __future__ import annotations


def _render(template, **context_kwargs):
    from conceptforge.analyzer.template_analyzer import TemplateAnalyzer
    from conceptforge.backends.svelte import SvelteFrameworkExtension
    from conceptforge.extensions.base import RenderContext

    concepts = TemplateAnalyzer().extract_concepts(template)
    context = RenderContext(framework="svelte", **context_kwargs)
    return SvelteFrameworkExtension().render_component(concepts, context)


class TestSyntaxHelpers:
    def test_each_block(self):
        from conceptforge.backends.svelte import each_block
        from conceptforge.specs.concepts import IterationConcept

        iteration = IterationConcept(
            node_id="root",
            items="rows",
            item_variable="row",
            index_variable="i",
            key_expression="row.id",
        )

        assert each_block(iteration, "<li>x</li>") == (
            "{#each rows as row, i (row.id)}\n  <li>x</li>\n{/each}"
        )

    def test_split_reactive(self):
        from conceptforge.backends.svelte import split_reactive

        plain, reactive = split_reactive("$: doubled = count * 2;\nlet count = 0;")

        assert plain == ["let count = 0;"]
        assert reactive == ["$: doubled = count * 2;"]


class TestConceptTransforms:
    def test_process_events(self):
        from conceptforge.backends.svelte import SvelteFrameworkExtension
        from conceptforge.specs.concepts import EventConcept

        output = SvelteFrameworkExtension().process_events(
            [
                EventConcept(node_id="root", name="click", handler="save", modifiers=["prevent"]),
                EventConcept(
                    node_id="root", name="value", handler="name", source_attribute="bind:value"
                ),
            ]
        )

        assert output.attributes == {"on:click|preventDefault": "save", "bind:value": "name"}

    def test_process_attributes(self):
        from conceptforge.backends.svelte import SvelteFrameworkExtension
        from conceptforge.specs.concepts import AttributeConcept

        output = SvelteFrameworkExtension().process_attributes(
            [
                AttributeConcept(node_id="root", name=":title", value="t", is_expression=True),
                AttributeConcept(node_id="root", name="disabled", value=True),
                AttributeConcept(node_id="root", name="id", value="main"),
            ]
        )

        assert output.attributes == {"title": "{t}", "disabled": "true", "id": "main"}

    def test_process_conditionals(self):
        from conceptforge.backends.svelte import SvelteFrameworkExtension
        from conceptforge.specs.concepts import ConditionalConcept, TextConcept

        output = SvelteFrameworkExtension().process_conditionals(
            [
                ConditionalConcept(
                    node_id="root",
                    condition="ok",
                    then_nodes=[TextConcept(node_id="root.then[0]", content="yes")],
                )
            ]
        )

        assert output.syntax == "{#if ok}\n  yes\n{/if}"


class TestRenderComponent:
    def test_button_is_markup_only(self, button_template):
        assert _render(button_template) == '<div class="btn">Hi</div>'

    def test_interactive_template(self, interactive_template):
        output = _render(interactive_template)

        assert '<div class="card" style="color: red; font-size: 12px">' in output
        assert '<button type="submit" on:click|preventDefault={save}>Save</button>' in output
        assert "{#if visible}\n  <span>On</span>\n{:else}\n  <span>Off</span>\n{/if}" in output
        assert "{#each items as item (item.id)}\n  <li>x</li>\n{/each}" in output
        assert '<slot name="footer" />' in output

    def test_script_block_with_props_and_reactive_statements(self, button_template):
        from conceptforge.specs.component import ComponentOptions

        component = ComponentOptions(
            name="Counter",
            props={"start": "number"},
            script="$: doubled = count * 2;\nlet count = start;",
        )
        output = _render(button_template, component=component, language="typescript")

        assert output.startswith('<script lang="ts">\n  export let start: number;\n')
        assert output.index("let count = start;") < output.index("$: doubled = count * 2;")
        assert output.endswith('</script>\n\n<div class="btn">Hi</div>')

    def test_style_block(self, button_template):
        from conceptforge.extensions.base import StyleOutput

        output = _render(
            button_template,
            options={"global_styles": True},
            style_output=StyleOutput(styles=".btn { color: red; }"),
        )

        assert output.endswith("<style global>\n  .btn { color: red; }\n</style>")

    def test_class_sources_and_directives(self):
        output = _render(
            [
                {
                    "tag": "div",
                    "attributes": {"class": "card"},
                    "expressionAttributes": {":class": "theme", "class:active": "isActive"},
                }
            ]
        )

        assert output == '<div class="card {theme}" class:active={isActive}></div>'

    def test_static_and_bound_style(self):
        output = _render(
            [
                {
                    "tag": "p",
                    "attributes": {"style": "color: red;"},
                    "expressionAttributes": {":style": "extra", "style:width": "w"},
                }
            ]
        )

        assert output == '<p style="color: red; {extra}" style:width={w}></p>'

    def test_two_way_binding(self):
        assert _render([{"tag": "input", "attributes": {"bind:value": "name"}}]) == (
            "<input bind:value={name} />"
        )

    def test_vue_directive_dropped_with_warning(self):
        from conceptforge.analyzer.template_analyzer import TemplateAnalyzer
        from conceptforge.backends.svelte import SvelteFrameworkExtension
        from conceptforge.core.diagnostics import ErrorCollector, Severity
        from conceptforge.extensions.base import RenderContext

        errors = ErrorCollector()
        concepts = TemplateAnalyzer().extract_concepts(
            [{"tag": "p", "expressionAttributes": {"v-show": "open", ":title": "t"}}]
        )
        output = SvelteFrameworkExtension().render_component(
            concepts, RenderContext(framework="svelte", errors=errors)
        )

        assert output == "<p title={t}></p>"
        warnings = errors.get_errors_by_severity(Severity.WARNING)
        assert warnings[0].message == (
            "Directive 'v-show' on <p> has no Svelte equivalent and was dropped"
        )
