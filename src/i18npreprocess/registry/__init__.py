"""Attribute localizability registry.

Rules are built once (from repository documents, inline template
declarations or a JSON mapping) and then queried read-only during
extraction.

Python 3.13+.
"""

from .loading import load_repository, load_repository_document, register_template_rules
from .rules import (
    Conditional,
    Localizable,
    Resolution,
    Rule,
    Selector,
    merge_rules,
    parse_rule_text,
    resolve_rule,
    rule_from_json,
    rule_to_json,
)
from .store import AttributeRegistry

__all__ = [
    "AttributeRegistry",
    "Conditional",
    "Localizable",
    "Resolution",
    "Rule",
    "Selector",
    "load_repository",
    "load_repository_document",
    "merge_rules",
    "parse_rule_text",
    "register_template_rules",
    "resolve_rule",
    "rule_from_json",
    "rule_to_json",
]
