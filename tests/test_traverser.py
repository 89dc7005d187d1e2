"""Tests for extraction/traverser.py.

Covers leaf text, sibling indexing, inline collapse into i18n-format,
explicit formatting directives and template wrappers.

Python 3.13+.
"""

from __future__ import annotations

import pytest

from i18npreprocess.diagnostics import DepthLimitExceededError
from i18npreprocess.markup import get_attribute, get_text_content, query, serialize
from i18npreprocess.registry import AttributeRegistry
from tests.documents import extract

# ============================================================================
# Leaf text
# ============================================================================


class TestLeafText:
    """Elements holding a single text child."""

    def test_simple_text(self) -> None:
        context, template = extract("<span>Hello World</span>", rewrite=True)

        assert context.bundle.get_value("span") == "Hello World"
        assert serialize(template) == '<template id="greeting"><span>{{text.span}}</span></template>'

    def test_whitespace_normalized(self) -> None:
        context, _ = extract("<p>\n    Hello\n  </p>")
        assert context.bundle.get_value("p") == " Hello "

    def test_siblings_indexed(self) -> None:
        """Whitespace between siblings does not shift the index."""
        context, _ = extract("<p>First</p>\n  <p>Second</p>")

        assert context.bundle.get_value("p") == "First"
        assert context.bundle.get_value("p_1") == "Second"

    def test_comments_not_counted(self) -> None:
        context, _ = extract("<!-- note --><span>A</span>")
        assert context.bundle.get_value("span") == "A"

    def test_id_anchors_message(self) -> None:
        context, _ = extract('<div id="nav"><a>Home</a><a>About</a></div>')

        assert context.bundle.get_value("nav:a") == "Home"
        assert context.bundle.get_value("nav:a_1") == "About"

    def test_bound_only_not_extracted(self) -> None:
        body = "<span>{{title}}</span><span> [[a]] {{b}} </span>"
        context, template = extract(body, rewrite=True)

        assert context.bundle.is_empty
        assert serialize(template) == f'<template id="greeting">{body}</template>'

    def test_skipped_tags(self) -> None:
        context, _ = extract("<style>.x { color: red; }</style><script>var a;</script><span>Hi</span>")
        assert context.bundle.to_dict() == {"meta": {}, "model": {}, "span_2": "Hi"}

    def test_raw_data(self) -> None:
        context, template = extract('<json-data id="cfg">{"k": [1, 2]}</json-data>', rewrite=True)
        node = query(template, lambda n: n.name == "json-data")

        assert context.bundle.get_value("cfg") == {"k": [1, 2]}
        assert node is not None
        assert get_text_content(node) == "{{text.cfg}}"

    def test_invalid_raw_data_warns(self) -> None:
        context, _ = extract('<json-data id="cfg">{"k": }</json-data>')

        assert "cfg" not in context.bundle
        assert [w.code for w in context.warnings] == ["INVALID_JSON_TEXT"]

    def test_lang_added_to_number(self) -> None:
        _, template = extract("<i18n-number>{{n}}</i18n-number>", rewrite=True)
        node = query(template, lambda n: n.name == "i18n-number")
        assert get_attribute(node, "lang") == "{{effectiveLang}}"

    def test_existing_lang_kept(self) -> None:
        _, template = extract('<i18n-datetime lang="fr">{{d}}</i18n-datetime>', rewrite=True)
        node = query(template, lambda n: n.name == "i18n-datetime")
        assert get_attribute(node, "lang") == "fr"

    def test_extract_only_leaves_tree(self) -> None:
        body = "<span>Hello</span><p>Hi <b>there</b></p>"
        context, template = extract(body)

        assert not context.bundle.is_empty
        assert serialize(template) == f'<template id="greeting">{body}</template>'

    def test_nested_elements(self) -> None:
        """Mixed content that cannot collapse is visited child by child."""
        context, _ = extract("<div>Hello {{name}}<p>x</p><ul><li>a</li></ul></div>")

        assert context.bundle.get_value("div:text") == ["Hello {1}", "{{name}}"]
        assert context.bundle.get_value("div:p_1") == "x"
        assert context.bundle.get_value("div:ul_2:li") == "a"

    def test_depth_limit(self) -> None:
        body = "<div>" * 120 + "deep" + "</div>" * 120
        with pytest.raises(DepthLimitExceededError):
            extract(body)


# ============================================================================
# Inline collapse
# ============================================================================


class TestInlineCollapse:
    """Text interleaved with simple elements becomes one message."""

    def test_inline_element(self) -> None:
        context, template = extract("<p>Hello <b>World</b>!</p>", rewrite=True)

        assert context.bundle.get_value("p") == ["Hello {1}!", "World"]
        assert serialize(template) == (
            '<template id="greeting"><p><i18n-format lang="{{effectiveLang}}">'
            '<span>{{text.p.0}}</span><b param="1">{{text.p.1}}</b>'
            "</i18n-format></p></template>"
        )

    def test_compound_text(self) -> None:
        context, template = extract("<div>Hello {{name}}!</div>", rewrite=True)

        assert context.bundle.get_value("div") == ["Hello {1}!", "{{name}}"]
        assert serialize(template) == (
            '<template id="greeting"><div><i18n-format lang="{{effectiveLang}}">'
            '<span>{{text.div.0}}</span><span param="1">{{name}}</span>'
            "</i18n-format></div></template>"
        )

    def test_empty_element_placeholder(self) -> None:
        context, _ = extract("<p>Line one<br>line two</p>")
        assert context.bundle.get_value("p") == ["Line one{1}line two", "<br>"]

    def test_text_id(self) -> None:
        """text-id allows collapse without surrounding text."""
        context, _ = extract('<p text-id="msg"><b>Bold</b></p>')
        assert context.bundle.get_value("msg") == ["{1}", "Bold"]

    def test_parameter_attributes(self, registry: AttributeRegistry) -> None:
        """Parameter attributes are keyed under the parameter position."""
        context, _ = extract('<p>Go <a title="Home page">home</a> now</p>', registry)

        assert context.bundle.get_value("p") == ["Go {1} now", "home"]
        assert context.bundle.get_value("model.p:1.title") == "Home page"

    def test_compound_child_prevents_collapse(self) -> None:
        context, _ = extract("<p>Hi <b>{{a}} b</b></p>")

        assert "p" not in context.bundle
        assert context.bundle.get_value("p:text") == "Hi "
        assert context.bundle.get_value("p:b_1") == ["{1} b", "{{a}}"]

    def test_wrapped_element(self) -> None:
        """A dom-if wrapper is judged by its content."""
        body = '<p>Hello <template is="dom-if" if="{{x}}"><b>World</b></template></p>'
        context, template = extract(body, rewrite=True)

        assert context.bundle.get_value("p") == ["Hello {1}", "World"]
        wrapper = query(template, lambda n: n.name == "template" and get_attribute(n, "is") == "dom-if")
        assert wrapper is not None
        assert wrapper.parent is not None
        assert wrapper.parent.name == "i18n-format"

    def test_wrapped_text(self) -> None:
        body = '<p>You have <b>3</b> messages<template is="dom-if" if="{{unread}}">new</template></p>'
        context, template = extract(body, rewrite=True)

        assert context.bundle.get_value("p") == ["You have {1} messages{2}", "3", "new"]
        span = query(template, lambda n: get_attribute(n, "param") == "2")
        assert span is not None
        assert span.name == "span"
        assert get_text_content(span) == "{{text.p.2}}"


# ============================================================================
# Templates
# ============================================================================


class TestTemplates:
    """Nested templates contribute their own segment."""

    def test_dom_if_content(self) -> None:
        context, _ = extract('<template is="dom-if" if="{{x}}"><span>Shown</span></template>')
        assert context.bundle.get_value("template:span") == "Shown"

    def test_embedded_bundle_skipped(self) -> None:
        context, _ = extract('<template id="localizable-text"><json-data>{"a": "b"}</json-data></template>')
        assert context.bundle.is_empty


# ============================================================================
# Formatting directive
# ============================================================================


class TestFormatDirective:
    """Explicit <i18n-format> messages."""

    DIRECTIVE = (
        '<i18n-format id="fmt">'
        "<span>{1} has {2} items {3}</span>"
        "<span>{{user}}</span>"
        '<i18n-number offset="1">{{count}}</i18n-number>'
        "<b>literal</b>"
        "</i18n-format>"
    )

    def test_values(self) -> None:
        context, _ = extract(self.DIRECTIVE)
        assert context.bundle.get_value("fmt") == [
            "{1} has {2} items {3}",
            "{{user}}",
            "{{count - 1}}",
            "literal",
        ]

    def test_rewrite(self) -> None:
        _, template = extract(self.DIRECTIVE, rewrite=True)
        directive = query(template, lambda n: n.name == "i18n-format")
        assert directive is not None
        first, user, number, literal = directive.find_all(recursive=False)

        assert get_attribute(directive, "lang") == "{{effectiveLang}}"
        assert get_text_content(first) == "{{text.fmt.0}}"
        assert get_attribute(user, "param") == "1"
        assert get_text_content(user) == "{{user}}"
        assert get_attribute(number, "param") == "2"
        assert get_attribute(number, "lang") == "{{effectiveLang}}"
        assert get_attribute(literal, "param") == "3"
        assert get_text_content(literal) == "{{text.fmt.3}}"

    def test_raw_data_template(self) -> None:
        body = '<i18n-format id="chart"><json-data>{"a": 1}</json-data><span>{{x}}</span></i18n-format>'
        context, template = extract(body, rewrite=True)
        data = query(template, lambda n: n.name == "json-data")

        assert context.bundle.get_value("chart") == [{"a": 1}, "{{x}}"]
        assert data is not None
        assert get_text_content(data) == "{{serialize(text.chart.0)}}"

    def test_already_bound(self) -> None:
        body = (
            '<i18n-format id="fmt" lang="en"><span>{{text.fmt.0}}</span>'
            '<span param="1">{{user}}</span></i18n-format>'
        )
        context, template = extract(body, rewrite=True)

        assert context.bundle.is_empty
        assert serialize(template) == f'<template id="greeting">{body}</template>'

    def test_bound_raw_data_serialized(self) -> None:
        body = '<i18n-format lang="en"><json-data>{{data}}</json-data></i18n-format>'
        _, template = extract(body, rewrite=True)
        data = query(template, lambda n: n.name == "json-data")

        assert data is not None
        assert get_text_content(data) == "{{serialize(data)}}"

    def test_empty_directive(self) -> None:
        context, _ = extract("<i18n-format></i18n-format>")
        assert context.bundle.is_empty
