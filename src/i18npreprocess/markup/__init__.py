"""Markup tree adapter.

The extraction core consumes markup through this capability interface
(parse, serialize, classify, query, attribute and text accessors, node
construction). Backed by BeautifulSoup with the stdlib html.parser.

Python 3.13+.
"""

from .tree import (
    Document,
    Node,
    append,
    attribute_items,
    children,
    element_children,
    get_attribute,
    get_text_content,
    has_attribute,
    is_element,
    is_text,
    new_element,
    new_text,
    node_kind,
    node_name,
    parent_name,
    parse,
    query,
    query_all,
    remove,
    remove_children,
    rename_attribute,
    replace,
    serialize,
    set_attribute,
    set_text_content,
    text_value,
)

__all__ = [
    "Document",
    "Node",
    "append",
    "attribute_items",
    "children",
    "element_children",
    "get_attribute",
    "get_text_content",
    "has_attribute",
    "is_element",
    "is_text",
    "new_element",
    "new_text",
    "node_kind",
    "node_name",
    "parent_name",
    "parse",
    "query",
    "query_all",
    "remove",
    "remove_children",
    "rename_attribute",
    "replace",
    "serialize",
    "set_attribute",
    "set_text_content",
    "text_value",
]
