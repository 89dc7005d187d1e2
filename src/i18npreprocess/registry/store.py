"""Attribute localizability registry.

Maps lower-cased tag names (or "any-elements") to per-attribute rules and
answers "is this attribute of this element localizable?".

Thread-safety: registration mutates in place and is not synchronized.
Build the registry first, then share it read-only.

Python 3.13+.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from i18npreprocess.constants import ANY_ATTRIBUTES, ANY_ELEMENTS, TWO_WAY_MARKER
from i18npreprocess.enums import RegistryPrecedence
from i18npreprocess.markup import node_name

from .rules import (
    Localizable,
    merge_rules,
    parse_rule_text,
    resolve_rule,
    rule_to_json,
    rules_from_mapping,
)

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from i18npreprocess.markup import Node

    from .rules import Resolution, Rule

__all__ = ["AttributeRegistry"]

logger = logging.getLogger(__name__)


class AttributeRegistry:
    """Registry of localizable attributes keyed by tag and attribute name.

    Lookup order is controlled by ``precedence``:

    TAG_FIRST
        the tag's rule for the attribute, then the tag's any-attributes
        rule, then the any-elements rule for the attribute.
    WILDCARD_FIRST
        the any-elements rule first, then the two tag rules.

    The first rule present decides; a conditional rule that matches
    nothing yields False without consulting later candidates.

    Example:
        >>> registry = AttributeRegistry.from_mapping({"paper-input": {"label": True}})
        >>> registry.rule_for("paper-input", "label")
        Localizable(type_tag=None)
    """

    __slots__ = ("_rules", "precedence")

    def __init__(self, precedence: RegistryPrecedence = RegistryPrecedence.TAG_FIRST) -> None:
        self._rules: dict[str, dict[str, Rule]] = {}
        self.precedence = precedence

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[str, Mapping[str, object]],
        *,
        precedence: RegistryPrecedence = RegistryPrecedence.TAG_FIRST,
    ) -> AttributeRegistry:
        """Build a registry from its JSON form ({tag: {attribute: rule}})."""
        registry = cls(precedence)
        for tag, attributes in rules_from_mapping(mapping).items():
            for attribute, rule in attributes.items():
                registry.register(tag, attribute, rule)
            registry._rules.setdefault(tag, {})
        return registry

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, tag: str, attribute: str, rule: Rule) -> None:
        """Register a rule, merging with any rule already present."""
        tag_rules = self._rules.setdefault(tag.lower(), {})
        name = attribute.lower()
        tag_rules[name] = merge_rules(tag_rules.get(name), rule)

    def register_text(self, tag: str, attribute: str, value: str | None) -> None:
        """Register a rule written in the comma-separated text grammar."""
        rule = parse_rule_text(value) if value else Localizable()
        logger.debug("Registering <%s %s> = %r", tag, attribute, value)
        self.register(tag, attribute, rule)

    def register_tag(self, tag: str) -> None:
        """Record a tag with no attribute rules yet."""
        self._rules.setdefault(tag.lower(), {})

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def rule_for(self, tag: str, attribute: str) -> Rule | None:
        """Rule registered for exactly this tag and attribute, if any."""
        return self._rules.get(tag.lower(), {}).get(attribute.lower())

    def _candidates(self, tag: str, attribute: str) -> Iterator[Rule | None]:
        tag_rules = self._rules.get(tag, {})
        wildcard = self._rules.get(ANY_ELEMENTS, {})
        if self.precedence is RegistryPrecedence.WILDCARD_FIRST:
            yield wildcard.get(attribute)
        yield tag_rules.get(attribute)
        yield tag_rules.get(ANY_ATTRIBUTES)
        if self.precedence is RegistryPrecedence.TAG_FIRST:
            yield wildcard.get(attribute)

    def is_localizable(self, element: Node, attribute: str) -> Resolution:
        """Resolve an attribute of a live element.

        A trailing "$" on the attribute name is ignored, so an attribute
        already renamed by a previous rewrite resolves like the original.

        Returns:
            False, True, or the type tag string of the matching rule
        """
        name = attribute.lower().removesuffix(TWO_WAY_MARKER)
        for rule in self._candidates(node_name(element), name):
            if rule is not None:
                return resolve_rule(rule, element)
        return False

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, dict[str, object]]:
        """Export in the JSON form accepted by from_mapping."""
        return {
            tag: {attribute: rule_to_json(rule) for attribute, rule in attributes.items()}
            for tag, attributes in self._rules.items()
        }

    def tags(self) -> tuple[str, ...]:
        """Registered tag names, in registration order."""
        return tuple(self._rules)

    def __contains__(self, tag: object) -> bool:
        return isinstance(tag, str) and tag.lower() in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"AttributeRegistry(tags={len(self._rules)}, precedence={self.precedence!s})"
