"""Tests for extraction/attributes.py.

Python 3.13+.
"""

from __future__ import annotations

import pytest

from i18npreprocess.enums import AttributeShape
from i18npreprocess.extraction import classify_attribute_value
from i18npreprocess.markup import get_attribute, query, serialize
from i18npreprocess.registry import AttributeRegistry
from tests.documents import extract

# ============================================================================
# Classification
# ============================================================================


class TestClassifyAttributeValue:
    """Value shapes, first match wins."""

    @pytest.mark.parametrize(
        ("value", "shape"),
        [
            ("", AttributeShape.EMPTY),
            ("{{foo}}", AttributeShape.BOUND),
            ("[[a]] {{b}}", AttributeShape.BOUND),
            ('{"a": 1}', AttributeShape.JSON),
            ('[\n  "x",\n  "y"\n]', AttributeShape.JSON),
            ("Has [[x.value]] in it", AttributeShape.COMPOUND),
            ('{"a": "{{b}}"}', AttributeShape.COMPOUND),
            ("Plain text", AttributeShape.PLAIN),
        ],
    )
    def test_shapes(self, value: str, shape: AttributeShape) -> None:
        assert classify_attribute_value(value) is shape


# ============================================================================
# Extraction
# ============================================================================


class TestExtractAttributes:
    """Bundle contents and rewritten attribute values."""

    def test_plain(self, registry: AttributeRegistry) -> None:
        context, template = extract('<paper-input label="Name"></paper-input>', registry, rewrite=True)
        node = query(template, lambda n: n.name == "paper-input")

        assert context.bundle.get_value("model.paper-input.label") == "Name"
        assert get_attribute(node, "label") == "{{model.paper-input.label}}"

    def test_json(self, registry: AttributeRegistry) -> None:
        """JSON attribute values are stored parsed."""
        context, template = extract("<google-chart data='{\"a\":1}'></google-chart>", registry, rewrite=True)
        node = query(template, lambda n: n.name == "google-chart")

        assert context.bundle.get_value("model.google-chart.data") == {"a": 1}
        assert get_attribute(node, "data") == "{{model.google-chart.data}}"

    def test_json_spanning_lines(self, registry: AttributeRegistry) -> None:
        """Line breaks are folded to spaces before parsing."""
        body = '<google-chart options=\'{"title": "a\nb",\n  "width": 3}\'></google-chart>'
        context, _ = extract(body, registry)

        assert context.bundle.get_value("model.google-chart.options") == {"title": "a b", "width": 3}
        assert context.warnings == []

    def test_invalid_json_warns(self, registry: AttributeRegistry) -> None:
        """Malformed JSON is reported and left untouched."""
        body = '<google-chart options="{not json}"></google-chart>'
        context, template = extract(body, registry, rewrite=True)
        node = query(template, lambda n: n.name == "google-chart")

        assert get_attribute(node, "options") == "{not json}"
        assert "model.google-chart" not in context.bundle
        assert [w.code for w in context.warnings] == ["INVALID_JSON_ATTRIBUTE"]
        assert context.warnings[0].message_id == "google-chart"

    def test_compound_parameterized(self, registry: AttributeRegistry) -> None:
        context, template = extract('<x-el attr="Has [[x.value]] in it"></x-el>', registry, rewrite=True)
        node = query(template, lambda n: n.name == "x-el")

        assert context.bundle.get_value("model.x-el.attr") == ["Has {1} in it", "[[x.value]]"]
        assert get_attribute(node, "attr") == "{{i18nFormat(model.x-el.attr.0,x.value)}}"

    def test_compound_several_bindings(self, registry: AttributeRegistry) -> None:
        context, template = extract('<x-el attr="{{a}} of {{b}}"></x-el>', registry, rewrite=True)
        node = query(template, lambda n: n.name == "x-el")

        assert context.bundle.get_value("model.x-el.attr") == ["{1} of {2}", "{{a}}", "{{b}}"]
        assert get_attribute(node, "attr") == "{{i18nFormat(model.x-el.attr.0,a,b)}}"

    def test_compound_with_function_call(self, registry: AttributeRegistry) -> None:
        """Literals become indexed lookups; bindings stay in place."""
        context, template = extract(
            '<x-el attr="Total {{format(count)}} items"></x-el>', registry, rewrite=True
        )
        node = query(template, lambda n: n.name == "x-el")

        assert context.bundle.get_value("model.x-el.attr") == ["Total ", "{{format(count)}}", " items"]
        assert get_attribute(node, "attr") == "{{model.x-el.attr.0}}{{format(count)}}{{model.x-el.attr.2}}"

    def test_single_binding_skipped(self, registry: AttributeRegistry) -> None:
        """A value that is already a binding is neither stored nor changed."""
        body = '<x-el attr="{{foo}}" message="[[bar]]"></x-el>'
        context, template = extract(body, registry, rewrite=True)

        assert context.bundle.is_empty
        assert serialize(template) == f'<template id="greeting">{body}</template>'

    def test_excluded_attributes(self) -> None:
        registry = AttributeRegistry.from_mapping({"x-el": {"any-attributes": True}})
        context, _ = extract('<x-el value="v" lang="en" class="c" label="L"></x-el>', registry)

        assert context.bundle.to_dict()["model"] == {"x-el": {"label": "L"}}

    def test_unknown_attribute_ignored(self, registry: AttributeRegistry) -> None:
        context, _ = extract('<x-el unknown="Text"></x-el>', registry)
        assert context.bundle.is_empty

    def test_explicit_id(self, registry: AttributeRegistry) -> None:
        context, _ = extract('<div id="intro" title="Welcome"></div>', registry)
        assert context.bundle.get_value("model.intro.title") == "Welcome"

    def test_two_way_marker_renames(self, registry: AttributeRegistry) -> None:
        """The "$" type tag renames the attribute in place."""
        context, template = extract('<iron-icon alt="Icon" src="x.png"></iron-icon>', registry, rewrite=True)
        node = query(template, lambda n: n.name == "iron-icon")

        assert context.bundle.get_value("model.iron-icon.alt") == "Icon"
        assert list(node.attrs) == ["alt$", "src"]
        assert get_attribute(node, "alt$") == "{{model.iron-icon.alt}}"

    def test_extract_only_keeps_markup(self, registry: AttributeRegistry) -> None:
        body = '<paper-input label="Name"></paper-input>'
        context, template = extract(body, registry)

        assert context.bundle.get_value("model.paper-input.label") == "Name"
        assert serialize(template) == f'<template id="greeting">{body}</template>'
