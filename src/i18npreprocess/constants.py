"""Shared constants for i18n-preprocess.

This module provides centralized names and limits used across the
markup, registry and extraction packages. Placing constants here avoids
circular imports and provides a single source of truth.

Constants are grouped by domain:
- Depth limits: Recursion protection for template traversal
- Markup vocabulary: Tag and attribute names with special meaning
- Binding syntax: Prefixes and helper names used in rewritten bindings

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Depth limits
    "MAX_DEPTH",
    # Plugin identity
    "PLUGIN_NAME",
    # Markup vocabulary
    "BEHAVIOR_IMPORT_PATH",
    "TEMPLATE_CONTAINER_TAGS",
    "DOM_BIND_TEMPLATE",
    "SKIPPED_TAGS",
    "FORMAT_DIRECTIVE_TAG",
    "NUMBER_DIRECTIVE_TAG",
    "LANG_DIRECTIVE_TAGS",
    "RAW_DATA_TAG",
    "TEMPLATE_TAG",
    "FRAGMENT_SEGMENT",
    "EXCLUDED_ATTRIBUTES",
    "TEMPLATE_RULE_EXCLUDED_ATTRIBUTES",
    "EMBEDDED_BUNDLE_ID",
    "EMBEDDED_MARKER",
    # Registry vocabulary
    "REGISTRY_CONTAINER_ID",
    "ANY_ELEMENTS",
    "ANY_ATTRIBUTES",
    "TWO_WAY_MARKER",
    # Binding syntax
    "TEXT_PREFIX",
    "MODEL_PREFIX",
    "FORMAT_FUNCTION",
    "SERIALIZE_FUNCTION",
    "LANG_BINDING",
]

# ============================================================================
# DEPTH LIMITS
# ============================================================================

# Maximum template nesting depth followed by the traverser.
# Each level costs several Python frames; 100 levels of element nesting is
# far beyond hand-written templates and keeps clear of RecursionError.
MAX_DEPTH: int = 100

# ============================================================================
# PLUGIN IDENTITY
# ============================================================================

PLUGIN_NAME: str = "i18n-preprocess"

# ============================================================================
# MARKUP VOCABULARY
# ============================================================================

# A document opts in by importing the behavior module with this file name.
BEHAVIOR_IMPORT_PATH: str = "i18n-behavior.html"

# Parents under which a <template> is a component template.
# "[document]" is the name BeautifulSoup gives the document root.
TEMPLATE_CONTAINER_TAGS: frozenset[str] = frozenset(
    {"dom-module", "body", "head", "html", "[document]"}
)

# <template is="i18n-dom-bind"> qualifies wherever it appears.
DOM_BIND_TEMPLATE: str = "i18n-dom-bind"

SKIPPED_TAGS: frozenset[str] = frozenset({"style", "script", "meta"})

FORMAT_DIRECTIVE_TAG: str = "i18n-format"
NUMBER_DIRECTIVE_TAG: str = "i18n-number"
LANG_DIRECTIVE_TAGS: frozenset[str] = frozenset({"i18n-number", "i18n-datetime"})
RAW_DATA_TAG: str = "json-data"
TEMPLATE_TAG: str = "template"

# Path segment standing for template content.
FRAGMENT_SEGMENT: str = "#document-fragment"

# Attributes never extracted, whatever the registry says.
EXCLUDED_ATTRIBUTES: frozenset[str] = frozenset(
    {
        "id",
        "text-id",
        "is",
        "lang",
        "class",
        "href",
        "src",
        "style",
        "url",
        "value",
        "selected",
        "assetpath",
        "param",
        "localizable-text",
        "text-attr",
    }
)

# Template attributes that are never read as inline registry rules.
TEMPLATE_RULE_EXCLUDED_ATTRIBUTES: frozenset[str] = frozenset(
    {"id", "is", "lang", "localizable-text", "assetpath", "text-attr"}
)

# <template id="localizable-text"> holds a bundle embedded by a previous run.
EMBEDDED_BUNDLE_ID: str = "localizable-text"
EMBEDDED_MARKER: str = "embedded"

# ============================================================================
# REGISTRY VOCABULARY
# ============================================================================

REGISTRY_CONTAINER_ID: str = "i18n-attr-repo"
ANY_ELEMENTS: str = "any-elements"
ANY_ATTRIBUTES: str = "any-attributes"

# Type tag requesting a native attribute binding, written as name$="{{...}}".
TWO_WAY_MARKER: str = "$"

# ============================================================================
# BINDING SYNTAX
# ============================================================================

TEXT_PREFIX: str = "text"
MODEL_PREFIX: str = "model"
FORMAT_FUNCTION: str = "i18nFormat"
SERIALIZE_FUNCTION: str = "serialize"
LANG_BINDING: str = "{{effectiveLang}}"
