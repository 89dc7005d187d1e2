"""Markup tree capability used by the extraction core.

A thin functional layer over BeautifulSoup: parse and serialize text,
classify nodes into the closed NodeKind set, read and write attributes
and text content, and construct or move nodes. The extraction code only
talks to markup through these functions.

Text content is computed by walking descendants rather than with
Tag.get_text(): BeautifulSoup stores strings found inside <template> as a
dedicated string subclass that get_text() filters out by exact type.

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator

from bs4 import BeautifulSoup
from bs4.element import Comment, NavigableString, PageElement, PreformattedString, Tag

from i18npreprocess.enums import NodeKind

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Types
    "Document",
    "Node",
    # Parse / serialize
    "parse",
    "serialize",
    # Classification
    "node_kind",
    "node_name",
    "is_element",
    "is_text",
    # Queries
    "children",
    "element_children",
    "parent_name",
    "query",
    "query_all",
    # Attributes
    "get_attribute",
    "has_attribute",
    "set_attribute",
    "rename_attribute",
    "attribute_items",
    # Text
    "text_value",
    "get_text_content",
    "set_text_content",
    # Construction and mutation
    "new_element",
    "new_text",
    "append",
    "remove",
    "replace",
    "remove_children",
]

type Document = BeautifulSoup
type Node = PageElement

_PARSER = "html.parser"


# ============================================================================
# PARSE / SERIALIZE
# ============================================================================


def parse(text: str) -> Document:
    """Parse markup text into a document tree.

    Attribute values are kept as plain strings (no class-list splitting)
    so they serialize back exactly as read.
    """
    return BeautifulSoup(text, _PARSER, multi_valued_attributes=None)


def serialize(document: Document) -> str:
    """Serialize a document tree back to markup text."""
    return document.decode(formatter="minimal")


# ============================================================================
# CLASSIFICATION
# ============================================================================


def node_kind(node: Node) -> NodeKind:
    """Classify a node into the closed NodeKind set."""
    match node:
        case BeautifulSoup():
            return NodeKind.DOCUMENT
        case Tag():
            return NodeKind.ELEMENT
        case Comment():
            return NodeKind.COMMENT
        case PreformattedString():
            return NodeKind.OTHER
        case NavigableString():
            return NodeKind.TEXT
        case _:
            return NodeKind.OTHER


def node_name(node: Node) -> str:
    """Lower-cased node name: the tag name, or "#text", "#comment", "#document"."""
    match node_kind(node):
        case NodeKind.ELEMENT:
            return node.name.lower()  # type: ignore[union-attr]
        case NodeKind.TEXT:
            return "#text"
        case NodeKind.COMMENT:
            return "#comment"
        case NodeKind.DOCUMENT:
            return "#document"
        case _:
            return "#other"


def is_element(node: Node | None, name: str | None = None) -> bool:
    """True for element nodes, optionally restricted to one tag name."""
    if node is None or node_kind(node) is not NodeKind.ELEMENT:
        return False
    return name is None or node_name(node) == name


def is_text(node: Node | None) -> bool:
    """True for text nodes (comments and doctypes excluded)."""
    return node is not None and node_kind(node) is NodeKind.TEXT


# ============================================================================
# QUERIES
# ============================================================================


def children(node: Node) -> list[Node]:
    """Snapshot of a node's child list (empty for non-containers)."""
    if isinstance(node, Tag):
        return list(node.contents)
    return []


def element_children(node: Node) -> list[Tag]:
    """Element children of a node, in document order."""
    return [child for child in children(node) if isinstance(child, Tag)]


def parent_name(node: Node) -> str | None:
    """Lower-cased name of the parent, "[document]" for top-level nodes."""
    parent = node.parent
    if parent is None:
        return None
    return parent.name.lower() if parent.name else None


def _walk(node: Node) -> Iterator[Node]:
    if isinstance(node, Tag):
        yield from node.descendants


def query(node: Node, predicate: Callable[[Tag], bool]) -> Tag | None:
    """First descendant element matching predicate, in document order."""
    for descendant in _walk(node):
        if isinstance(descendant, Tag) and predicate(descendant):
            return descendant
    return None


def query_all(node: Node, predicate: Callable[[Tag], bool]) -> list[Tag]:
    """All descendant elements matching predicate, in document order."""
    return [
        descendant
        for descendant in _walk(node)
        if isinstance(descendant, Tag) and predicate(descendant)
    ]


# ============================================================================
# ATTRIBUTES
# ============================================================================


def get_attribute(node: Node, name: str) -> str | None:
    """Attribute value, or None when absent or node is not an element."""
    if isinstance(node, Tag):
        value = node.attrs.get(name)
        if value is None:
            return None
        return value if isinstance(value, str) else " ".join(value)
    return None


def has_attribute(node: Node, name: str) -> bool:
    """True when the element carries the attribute (even with empty value)."""
    return isinstance(node, Tag) and name in node.attrs


def set_attribute(node: Tag, name: str, value: str) -> None:
    """Set an attribute value, appending it when new."""
    node.attrs[name] = value


def rename_attribute(node: Tag, old: str, new: str) -> None:
    """Rename an attribute in place, keeping attribute order."""
    node.attrs = {new if key == old else key: value for key, value in node.attrs.items()}


def attribute_items(node: Node) -> list[tuple[str, str]]:
    """Snapshot of (name, value) pairs in document order."""
    if not isinstance(node, Tag):
        return []
    return [
        (name, value if isinstance(value, str) else " ".join(value))
        for name, value in node.attrs.items()
    ]


# ============================================================================
# TEXT
# ============================================================================


def text_value(node: Node) -> str:
    """Character data of a text node."""
    return str(node)


def get_text_content(node: Node) -> str:
    """Concatenated text of a node and all its descendant text nodes."""
    if is_text(node):
        return str(node)
    return "".join(
        str(descendant) for descendant in _walk(node) if node_kind(descendant) is NodeKind.TEXT
    )


def set_text_content(node: Node, text: str) -> Node:
    """Replace a node's content with a single text node.

    For an element the children are replaced. Text nodes are immutable
    strings, so a text node is swapped for a new one; the node now in the
    tree is returned.
    """
    if isinstance(node, Tag):
        node.clear()
        node.append(NavigableString(text))
        return node
    replacement = NavigableString(text)
    node.replace_with(replacement)
    return replacement


# ============================================================================
# CONSTRUCTION AND MUTATION
# ============================================================================


def new_element(document: Document, name: str) -> Tag:
    """Create a detached element owned by document."""
    return document.new_tag(name)


def new_text(text: str) -> NavigableString:
    """Create a detached text node."""
    return NavigableString(text)


def append(parent: Tag, child: Node) -> None:
    """Append child to parent, detaching it from any previous parent."""
    parent.append(child)


def remove(node: Node) -> None:
    """Detach node from its parent."""
    node.extract()


def replace(old: Node, new: Node) -> None:
    """Put new where old is; old becomes detached."""
    old.replace_with(new)


def remove_children(node: Tag) -> None:
    """Detach every child of node."""
    node.clear()
