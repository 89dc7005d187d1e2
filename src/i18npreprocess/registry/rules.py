"""Localizable-attribute rules.

A rule is either a leaf (the attribute is localizable, optionally with a
type tag) or a conditional tree keyed by selectors over the element's
other attributes. Resolution walks the tree against a live element.

Selector forms:
    attr=value   the element's attr matches value (anchored regex)
    !attr        the element does not carry attr
    attr         the element carries attr
    ""           default branch, always tried last

Resolution returns False (not localizable), True (localizable) or a type
tag string (localizable with a hint such as "$" or "json").

Python 3.13+.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING

from i18npreprocess.diagnostics import ErrorTemplate
from i18npreprocess.markup import get_attribute, has_attribute

if TYPE_CHECKING:
    from i18npreprocess.markup import Node

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Types
    "Localizable",
    "Conditional",
    "Rule",
    "Resolution",
    "Selector",
    # Operations
    "parse_rule_text",
    "merge_rules",
    "resolve_rule",
    "rule_from_json",
    "rule_to_json",
    "rules_from_mapping",
]

type Resolution = bool | str

_SELECTOR_PATTERN = re.compile(r"!?[A-Za-z_][\w.:-]*|[A-Za-z_][\w.:-]*=.*", re.DOTALL)


class _SelectorForm(IntEnum):
    """Selector form, ordered as selectors sort within one attribute."""

    EQUALS = 0
    ABSENT = 1
    PRESENT = 2
    DEFAULT = 3


@dataclass(frozen=True, slots=True)
class Selector:
    """Condition on one attribute of the element being resolved.

    Attributes:
        text: Selector as written ("type=text", "!disabled", "raised", "")
        attribute: Attribute the selector tests ("" for the default)
        value: Pattern for the attr=value form, else None
    """

    text: str
    attribute: str
    value: str | None = None

    @classmethod
    def parse(cls, text: str) -> Selector:
        """Parse a selector token."""
        text = text.strip()
        if not text:
            return cls(text="", attribute="")
        if text.startswith("!"):
            return cls(text=text, attribute=text[1:].lower())
        name, sep, value = text.partition("=")
        if sep:
            return cls(text=text, attribute=name.strip().lower(), value=value)
        return cls(text=text, attribute=name.lower())

    @property
    def form(self) -> _SelectorForm:
        if not self.attribute:
            return _SelectorForm.DEFAULT
        if self.value is not None:
            return _SelectorForm.EQUALS
        if self.text.startswith("!"):
            return _SelectorForm.ABSENT
        return _SelectorForm.PRESENT

    @property
    def is_default(self) -> bool:
        return not self.attribute

    def sort_key(self) -> tuple[int, str, int, str]:
        """Order by attribute name, then form, then text; default last."""
        return (int(self.is_default), self.attribute, self.form, self.text)

    def matches(self, element: Node) -> bool:
        """Test the selector against a live element."""
        match self.form:
            case _SelectorForm.DEFAULT:
                return True
            case _SelectorForm.ABSENT:
                return not has_attribute(element, self.attribute)
            case _SelectorForm.PRESENT:
                return has_attribute(element, self.attribute)
            case _SelectorForm.EQUALS:
                actual = get_attribute(element, self.attribute)
                if actual is None:
                    return False
                return _value_matches(self.value or "", actual)


def _value_matches(pattern: str, actual: str) -> bool:
    try:
        return re.fullmatch(f"(?:{pattern})", actual) is not None
    except re.error:
        return pattern == actual


@dataclass(frozen=True, slots=True)
class Localizable:
    """Leaf rule: the attribute is localizable.

    Attributes:
        type_tag: Optional hint for extraction ("$" renames the attribute to
            a native binding on rewrite)
    """

    type_tag: str | None = None


@dataclass(frozen=True, slots=True)
class Conditional:
    """Selector tree. Branches are kept in selector sort order.

    Attributes:
        branches: (selector, subrule) pairs tried in order
        default: Rule used when no branch resolves
    """

    branches: tuple[tuple[Selector, Rule], ...] = ()
    default: Rule | None = None

    def __post_init__(self) -> None:
        ordered = tuple(sorted(self.branches, key=lambda branch: branch[0].sort_key()))
        object.__setattr__(self, "branches", ordered)


type Rule = Localizable | Conditional


def resolve_rule(rule: Rule, element: Node) -> Resolution:
    """Resolve a rule against an element.

    Branches are tried in order; a branch whose selector matches but whose
    subtree does not resolve falls through to the next branch. An
    unmatched tree without a default resolves to False.
    """
    match rule:
        case Localizable(type_tag=None):
            return True
        case Localizable(type_tag=type_tag):
            return type_tag
        case Conditional(branches=branches, default=default):
            for selector, subrule in branches:
                if selector.matches(element):
                    result = resolve_rule(subrule, element)
                    if result:
                        return result
            if default is not None:
                return resolve_rule(default, element)
            return False


def merge_rules(existing: Rule | None, incoming: Rule) -> Rule:
    """Combine two rules registered for the same tag and attribute.

    leaf + tree: the tree, with the leaf as its default
    tree + tree: branches merged recursively by selector
    leaf + leaf: the incoming leaf
    """
    match existing, incoming:
        case None, _:
            return incoming
        case Localizable(), Localizable():
            return incoming
        case Localizable(), Conditional(branches=branches, default=default):
            if default is not None:
                return Conditional(branches, merge_rules(existing, default))
            return Conditional(branches, existing)
        case Conditional(branches=branches, default=default), Localizable():
            return Conditional(branches, merge_rules(default, incoming))
        case Conditional(), Conditional():
            merged: dict[Selector, Rule] = dict(existing.branches)
            for selector, subrule in incoming.branches:
                merged[selector] = merge_rules(merged.get(selector), subrule)
            default = existing.default
            if incoming.default is not None:
                default = merge_rules(default, incoming.default)
            return Conditional(tuple(merged.items()), default)
    msg = f"Cannot merge {existing!r} with {incoming!r}"
    raise TypeError(msg)


def _is_selector(token: str) -> bool:
    return _SELECTOR_PATTERN.fullmatch(token) is not None


def parse_rule_text(value: str) -> Rule:
    """Parse the comma-separated rule grammar used in registry documents.

    "" -> localizable; "$" -> localizable with the "$" type tag;
    "type=text,!disabled,$" -> nested selectors ending in a "$" leaf.
    The last token is a type tag unless it is selector-shaped, so tags
    that look like attribute names are only expressible in the JSON form.
    """
    tokens = [token.strip() for token in value.split(",")]
    tokens = [token for token in tokens if token]
    type_tag: str | None = None
    if tokens and not _is_selector(tokens[-1]):
        type_tag = tokens.pop()
    rule: Rule = Localizable(type_tag)
    selectors = sorted((Selector.parse(token) for token in tokens), key=Selector.sort_key)
    for selector in reversed(selectors):
        rule = Conditional(((selector, rule),))
    return rule


def rule_from_json(value: object) -> Rule | None:
    """Build a rule from its JSON form: true, a type string, or a selector map.

    False and null mean "not localizable" and yield None.
    """
    match value:
        case True:
            return Localizable()
        case False | None:
            return None
        case str():
            return Localizable(value or None)
        case dict():
            branches: list[tuple[Selector, Rule]] = []
            default: Rule | None = None
            for key, sub in value.items():
                subrule = rule_from_json(sub)
                if subrule is None:
                    continue
                selector = Selector.parse(str(key))
                if selector.is_default:
                    default = subrule
                else:
                    branches.append((selector, subrule))
            return Conditional(tuple(branches), default)
    msg = f"Unsupported rule value: {value!r}"
    raise TypeError(msg)


def rule_to_json(rule: Rule) -> bool | str | dict[str, object]:
    """Inverse of rule_from_json; the default branch is written under ""."""
    match rule:
        case Localizable(type_tag=None):
            return True
        case Localizable(type_tag=type_tag):
            return type_tag
        case Conditional(branches=branches, default=default):
            result: dict[str, object] = {
                selector.text: rule_to_json(subrule) for selector, subrule in branches
            }
            if default is not None:
                result[""] = rule_to_json(default)
            return result


def rules_from_mapping(mapping: Mapping[str, Mapping[str, object]]) -> dict[str, dict[str, Rule]]:
    """Convert a {tag: {attribute: json-rule}} mapping.

    Raises:
        TypeError: If the mapping or a tag's attributes are not objects,
            or a rule value has an unsupported type.
    """
    if not isinstance(mapping, Mapping):
        msg = ErrorTemplate.registry_mapping_invalid("registry", mapping).message
        raise TypeError(msg)
    rules: dict[str, dict[str, Rule]] = {}
    for tag, attributes in mapping.items():
        if not isinstance(attributes, Mapping):
            msg = ErrorTemplate.registry_mapping_invalid(f"<{tag}>", attributes).message
            raise TypeError(msg)
        tag_rules = rules.setdefault(tag.lower(), {})
        for attribute, value in attributes.items():
            rule = rule_from_json(value)
            if rule is not None:
                tag_rules[attribute.lower()] = rule
    return rules
