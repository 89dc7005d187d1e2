"""Enumerations for i18n-preprocess type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class NodeKind(StrEnum):
    """Closed set of markup node kinds seen by the traverser.

    Template content has no node of its own: a <template> element is an
    ELEMENT whose children the traverser visits as a document fragment.

    StrEnum provides automatic string conversion: str(NodeKind.TEXT) == "text"
    """

    ELEMENT = "element"
    """Tag with attributes and children: <span title="x">...</span>"""

    TEXT = "text"
    """Character data between tags"""

    COMMENT = "comment"
    """<!-- comment -->"""

    DOCUMENT = "document"
    """Parsed document root"""

    OTHER = "other"
    """Doctype, CDATA, processing instructions"""


class TokenKind(StrEnum):
    """Kind of token produced by splitting compound annotated text."""

    LITERAL = "literal"
    """Plain text run: Hello """

    BINDING = "binding"
    """Binding expression run: {{user.name}} or [[user.name]]"""


class AttributeShape(StrEnum):
    """Classification of a localizable attribute value."""

    EMPTY = "empty"
    """attr="" - nothing to extract"""

    BOUND = "bound"
    """attr="{{path}}" - already a binding"""

    JSON = "json"
    """attr='{"a": 1}' - structured data"""

    COMPOUND = "compound"
    """attr="Has [[x]] in it" - literal text mixed with bindings"""

    PLAIN = "plain"
    """attr="Some text" - plain string"""


class RegistryPrecedence(StrEnum):
    """Lookup order between tag-specific and any-elements registry rules."""

    TAG_FIRST = "tag-first"
    """Exact tag rule wins; any-elements is the fallback"""

    WILDCARD_FIRST = "wildcard-first"
    """any-elements rule wins; exact tag rule is the fallback"""


__all__ = [
    "AttributeShape",
    "NodeKind",
    "RegistryPrecedence",
    "TokenKind",
]
