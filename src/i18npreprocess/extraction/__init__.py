"""Text and attribute extraction from component templates.

Python 3.13+.
"""

from .annotations import (
    Token,
    annotation_nodes,
    has_binding,
    is_bound_only,
    is_compound_annotated,
    normalize_whitespace,
    parse_binding,
    split_annotations,
)
from .attributes import classify_attribute_value, extract_attributes
from .bundle import Bundle, BundleValue
from .context import ExtractionContext
from .message_id import generate_message_id
from .traverser import TemplateTreeTraverser

__all__ = [
    "Bundle",
    "BundleValue",
    "ExtractionContext",
    "TemplateTreeTraverser",
    "Token",
    "annotation_nodes",
    "classify_attribute_value",
    "extract_attributes",
    "generate_message_id",
    "has_binding",
    "is_bound_only",
    "is_compound_annotated",
    "normalize_whitespace",
    "parse_binding",
    "split_annotations",
]
