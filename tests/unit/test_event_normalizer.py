"""Tests for cross-framework event normalization."""

from __future__ import annotations

import pytest


def _event(name: str, modifiers: list[str] | None = None):
    from conceptforge.specs.concepts import EventConcept

    return EventConcept(
        node_id="root.children[0]", name=name, handler="go", modifiers=modifiers or []
    )


class TestCommonNames:
    """Prefix and modifier stripping."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("@click", "click"),
            ("onClick", "click"),
            ("on:click", "click"),
            ("v-on:submit", "submit"),
            ("@keydown.enter", "keydown"),
            ("on:click|once", "click"),
            ("online", "online"),
        ],
    )
    def test_extract_common_event_name(self, raw, expected):
        from conceptforge.normalization.events import EventNormalizer

        assert EventNormalizer().extract_common_event_name(raw) == expected

    def test_reverse_lookup(self):
        from conceptforge.normalization.events import EventNormalizer

        normalizer = EventNormalizer()

        assert normalizer.find_common_name_from_framework("onKeyDown", "react") == "keydown"
        assert normalizer.find_common_name_from_framework("@blur", "vue") == "blur"
        assert normalizer.find_common_name_from_framework("onNothing", "react") is None


class TestNormalizeEvent:
    def test_maps_to_target_framework(self):
        from conceptforge.normalization.events import EventNormalizationOptions, EventNormalizer

        normalizer = EventNormalizer()
        result = normalizer.normalize_event(
            _event("click"), EventNormalizationOptions(framework="svelte")
        )

        assert result.common_name == "click"
        assert result.framework_attribute == "on:click"
        assert result.was_normalized

    def test_unknown_event_passes_through_with_warning(self):
        from conceptforge.normalization.events import EventNormalizationOptions, EventNormalizer

        normalizer = EventNormalizer()
        result = normalizer.normalize_event(_event("swipe"), EventNormalizationOptions())

        assert not result.was_normalized
        assert result.framework_attribute == "swipe"
        assert normalizer.get_errors().has_warnings()
        assert not normalizer.get_errors().has_errors()

    def test_normalizing_twice_is_stable(self):
        from conceptforge.normalization.events import EventNormalizationOptions, EventNormalizer

        normalizer = EventNormalizer()
        options = EventNormalizationOptions(framework="react")
        once = normalizer.normalize_event(_event("@click", ["prevent"]), options)
        twice = normalizer.normalize_event(once, options)

        assert twice.common_name == once.common_name
        assert twice.framework_attribute == once.framework_attribute
        assert twice.modifiers == once.modifiers

    def test_modifiers_dropped_when_not_preserved(self):
        from conceptforge.normalization.events import EventNormalizationOptions, EventNormalizer

        options = EventNormalizationOptions(
            framework="vue", preserve_modifiers=False, validate_events=False
        )
        result = EventNormalizer().normalize_event(_event("click", ["stop"]), options)

        assert result.modifiers == []

    def test_react_modifiers_warn(self):
        from conceptforge.normalization.events import EventNormalizationOptions, EventNormalizer

        normalizer = EventNormalizer()
        normalizer.normalize_event(_event("click", ["prevent"]), EventNormalizationOptions())

        warnings = normalizer.get_errors().get_errors_by_severity("warning")
        assert any("React doesn't support event modifiers" in w.message for w in warnings)

    def test_unknown_vue_modifier(self):
        from conceptforge.normalization.events import EventNormalizer

        problems = EventNormalizer().validate_modifiers(_event("click", ["sideways"]), "vue")

        assert problems == ["Unknown Vue event modifier: sideways"]


class TestCustomMappings:
    def test_instances_do_not_share_mappings(self):
        from conceptforge.normalization.events import EventNormalizer, FrameworkEventMapping

        first = EventNormalizer()
        first.add_custom_mapping(
            "swipe", FrameworkEventMapping(vue="@swipe", react="onSwipe", svelte="on:swipe")
        )

        assert "swipe" in first.get_common_event_names()
        assert "swipe" not in EventNormalizer().get_common_event_names()

    def test_per_call_mapping_wins(self):
        from conceptforge.normalization.events import (
            EventNormalizationOptions,
            EventNormalizer,
            FrameworkEventMapping,
        )

        custom = {"click": FrameworkEventMapping(vue="@tap", react="onTap", svelte="on:tap")}
        result = EventNormalizer().normalize_event(
            _event("click"), EventNormalizationOptions(custom_mappings=custom)
        )

        assert result.framework_attribute == "onTap"

    def test_remove_mapping(self):
        from conceptforge.normalization.events import EventNormalizer

        normalizer = EventNormalizer()
        normalizer.remove_mapping("scroll")

        assert normalizer.find_event_mapping("scroll") is None
        assert "onScroll" not in normalizer.get_supported_events("react")
