"""Registry construction from repository documents and inline templates.

Repository documents declare localizable attributes by example:

    <dom-module id="i18n-attr-repo">
      <template id="standard">
        <paper-input label placeholder error-message></paper-input>
        <input placeholder="type=text,$">
      </template>
    </dom-module>

Every attribute of every element under the repository templates is
registered; its value is a rule in the comma-separated text grammar.

Python 3.13+.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from i18npreprocess.constants import (
    REGISTRY_CONTAINER_ID,
    TEMPLATE_RULE_EXCLUDED_ATTRIBUTES,
    TEMPLATE_TAG,
)
from i18npreprocess.diagnostics import ErrorTemplate
from i18npreprocess.markup import (
    attribute_items,
    element_children,
    get_attribute,
    is_element,
    node_name,
    parse,
    query,
    query_all,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from i18npreprocess.markup import Document, Node

    from .store import AttributeRegistry

__all__ = [
    "load_repository",
    "load_repository_document",
    "register_template_rules",
]

logger = logging.getLogger(__name__)


def _is_repository_container(element: Node) -> bool:
    return is_element(element, "dom-module") and get_attribute(element, "id") == REGISTRY_CONTAINER_ID


def load_repository_document(registry: AttributeRegistry, document: Document) -> int | None:
    """Register every attribute declared in one parsed repository document.

    Returns:
        Number of attributes registered, or None when the document has
        no repository container
    """
    container = query(document, _is_repository_container)
    if container is None:
        return None
    count = 0
    for template in element_children(container):
        if not is_element(template, TEMPLATE_TAG):
            continue
        for element in query_all(template, lambda node: not is_element(node, TEMPLATE_TAG)):
            tag = node_name(element)
            registry.register_tag(tag)
            for attribute, value in attribute_items(element):
                registry.register_text(tag, attribute, value)
                count += 1
    return count


def load_repository(registry: AttributeRegistry, paths: Iterable[str | Path]) -> int:
    """Load repository documents into a registry.

    Unreadable sources and sources without a repository container are
    skipped; each skip is logged at debug level.

    Args:
        registry: Registry to populate
        paths: Repository document paths

    Returns:
        Number of sources that contributed rules
    """
    loaded = 0
    for path in paths:
        source = Path(path)
        try:
            contents = source.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("%s", ErrorTemplate.registry_source_unreadable(str(source), str(e)))
            continue
        if load_repository_document(registry, parse(contents)) is None:
            logger.debug("%s", ErrorTemplate.registry_container_missing(str(source), REGISTRY_CONTAINER_ID))
            continue
        logger.debug("Loaded attributes repository %s", source)
        loaded += 1
    return loaded


def register_template_rules(registry: AttributeRegistry, element_name: str | None, template: Node) -> bool:
    """Register rules declared inline on a component template.

    Two forms are recognized:

        <template text-attr="label tooltip">
        <template text-attr label tooltip="type=text">

    Names listed in text-attr are always localizable. Any other attribute
    of a template carrying text-attr registers its value as the rule for
    that attribute name.

    Args:
        registry: Registry to populate
        element_name: Custom element the template belongs to; defaults to
            the template id
        template: The <template> element

    Returns:
        True if the template carried text-attr
    """
    text_attr = get_attribute(template, "text-attr")
    if text_attr is None:
        return False
    element_name = element_name or get_attribute(template, "id")
    if not element_name:
        return False
    for name in text_attr.split():
        registry.register_text(element_name, name, None)
    for attribute, value in attribute_items(template):
        if attribute in TEMPLATE_RULE_EXCLUDED_ATTRIBUTES:
            continue
        registry.register_text(element_name, attribute, value)
    return True
