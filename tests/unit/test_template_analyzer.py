"""Tests for template parsing and concept extraction."""

from __future__ import annotations


class TestParseTemplate:
    """Raw template data to typed nodes."""

    def test_missing_type_means_element(self):
        from conceptforge.specs.template import ElementNode, parse_template

        nodes = parse_template([{"tag": "span"}])

        assert isinstance(nodes[0], ElementNode)
        assert nodes[0].tag == "span"

    def test_camel_case_aliases(self):
        from conceptforge.specs.template import IfNode, parse_template

        nodes = parse_template(
            [
                {"tag": "a", "expressionAttributes": {"href": "url"}},
                {"type": "if", "condition": "ok", "then": [], "else": [{"type": "text"}]},
            ]
        )

        assert nodes[0].expression_attributes == {"href": "url"}
        assert isinstance(nodes[1], IfNode)
        assert nodes[1].else_ is not None

    def test_unknown_type_is_kept(self):
        from conceptforge.specs.template import UnknownNode, parse_template

        nodes = parse_template([{"type": "portal", "children": [{"tag": "p"}]}])

        assert isinstance(nodes[0], UnknownNode)
        assert nodes[0].type == "portal"
        assert len(nodes[0].children) == 1


class TestTemplateAnalyzer:
    """Concept extraction from a whole template."""

    def test_structure_mirrors_tree(self, button_template):
        from conceptforge.analyzer.template_analyzer import TemplateAnalyzer
        from conceptforge.specs.concepts import ElementConcept, TextConcept

        concepts = TemplateAnalyzer().extract_concepts(button_template)

        root = concepts.structure[0]
        assert isinstance(root, ElementConcept)
        assert root.node_id == "root.children[0]"
        assert root.attributes == {"class": "btn"}
        assert isinstance(root.children[0], TextConcept)
        assert root.children[0].node_id == "root.children[0].children[0]"

    def test_styling_is_merged(self, interactive_template):
        from conceptforge.analyzer.template_analyzer import TemplateAnalyzer

        concepts = TemplateAnalyzer().extract_concepts(interactive_template)

        assert concepts.styling.static_classes == ["card"]
        assert concepts.styling.inline_styles == {"color": "red", "font-size": "12px"}

    def test_events_with_modifiers(self, interactive_template):
        from conceptforge.analyzer.template_analyzer import TemplateAnalyzer

        concepts = TemplateAnalyzer().extract_concepts(interactive_template)

        assert len(concepts.events) == 1
        event = concepts.events[0]
        assert event.name == "click"
        assert event.handler == "save"
        assert event.modifiers == ["prevent"]
        assert event.node_id == "root.children[0].children[0]"
        assert event.source_attribute == "@click.prevent"

    def test_event_attributes_are_not_plain_attributes(self, interactive_template):
        from conceptforge.analyzer.template_analyzer import TemplateAnalyzer

        concepts = TemplateAnalyzer().extract_concepts(interactive_template)

        names = [attr.name for attr in concepts.attributes]
        assert "type" in names
        assert "@click.prevent" not in names
        assert "class" not in names

    def test_control_flow_concepts(self, interactive_template):
        from conceptforge.analyzer.template_analyzer import TemplateAnalyzer

        concepts = TemplateAnalyzer().extract_concepts(interactive_template)

        conditional = concepts.conditionals[0]
        assert conditional.condition == "visible"
        assert len(conditional.then_nodes) == 1
        assert len(conditional.else_nodes) == 1
        assert conditional.else_nodes[0].node_id == "root.children[0].children[1].children[1]"

        iteration = concepts.iterations[0]
        assert iteration.items == "items"
        assert iteration.item_variable == "item"
        assert iteration.key_expression == "item.id"

        assert concepts.slots[0].name == "footer"
        assert concepts.slots[0].fallback is None

    def test_call_parameters(self):
        from conceptforge.analyzer.template_analyzer import TemplateAnalyzer

        concepts = TemplateAnalyzer().extract_concepts(
            [{"tag": "button", "attributes": {"onClick": "select($event, index)"}}]
        )

        assert concepts.events[0].parameters == ["$event", "index"]

    def test_unknown_node_warns_without_failing(self):
        from conceptforge.analyzer.template_analyzer import TemplateAnalyzer

        analyzer = TemplateAnalyzer()
        concepts = analyzer.extract_concepts([{"type": "portal", "children": [{"tag": "p"}]}])

        assert concepts.structure[0].origin == "portal"
        assert analyzer.get_errors().has_warnings()
        assert not analyzer.get_errors().has_errors()

    def test_missing_condition_is_skipped(self):
        from conceptforge.analyzer.template_analyzer import TemplateAnalyzer

        analyzer = TemplateAnalyzer()
        concepts = analyzer.extract_concepts([{"type": "if", "condition": "", "then": []}])

        assert concepts.conditionals == []
        assert "Conditional node missing condition" in analyzer.get_errors().format_errors()

    def test_options_disable_kinds(self, interactive_template):
        from conceptforge.analyzer.template_analyzer import AnalyzerOptions, TemplateAnalyzer

        options = AnalyzerOptions(extract_events=False, extract_iterations=False)
        concepts = TemplateAnalyzer(options).extract_concepts(interactive_template)

        assert concepts.events == []
        assert concepts.iterations == []
        assert concepts.conditionals

    def test_input_is_not_mutated(self, button_template):
        import copy

        from conceptforge.analyzer.template_analyzer import TemplateAnalyzer

        before = copy.deepcopy(button_template)
        TemplateAnalyzer().extract_concepts(button_template)

        assert button_template == before


class TestSyntaxHelpers:
    def test_split_event_attribute(self):
        from conceptforge.analyzer.event_syntax import split_event_attribute

        parsed = split_event_attribute("on:click|preventDefault")
        assert parsed is not None
        assert parsed.name == "click"
        assert parsed.modifiers == ["preventDefault"]

        assert split_event_attribute("online") is None
        assert split_event_attribute("title") is None

    def test_parse_inline_styles(self):
        from conceptforge.analyzer.style_syntax import parse_inline_styles

        assert parse_inline_styles("color: red; margin:0;") == {"color": "red", "margin": "0"}
