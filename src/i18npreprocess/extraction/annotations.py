"""Binding-expression detection and compound annotation splitting.

Two binding syntaxes are recognized: {{expr}} (no braces inside) and
[[expr]] (no square brackets inside). Text mixing literal runs with
bindings is "compound annotated".

Python 3.13+.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from i18npreprocess.enums import TokenKind
from i18npreprocess.markup import append, new_element, new_text

if TYPE_CHECKING:
    from i18npreprocess.markup import Document, Node

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Types
    "Token",
    # Predicates
    "has_binding",
    "is_bound_only",
    "is_compound_annotated",
    "calls_function",
    # Splitting
    "split_annotations",
    "annotation_nodes",
    "parse_binding",
    # Whitespace
    "normalize_whitespace",
]

_BINDING = r"\{\{[^{}]*\}\}|\[\[[^\[\]]*\]\]"
_BINDING_RE = re.compile(_BINDING)
_TOKEN_RE = re.compile(rf"{_BINDING}|[^{{}}\[\]]+|[{{}}\[\]]+")
_DELIMITED_RE = re.compile(r"(\{\{)([^{}]*)(\}\})|(\[\[)([^\[\]]*)(\]\])")
_LEADING_WS_RE = re.compile(r"^\s+")
_TRAILING_WS_RE = re.compile(r"\s+\Z")


@dataclass(frozen=True, slots=True)
class Token:
    """One run of compound annotated text."""

    kind: TokenKind
    text: str

    @property
    def is_binding(self) -> bool:
        return self.kind is TokenKind.BINDING


# ============================================================================
# PREDICATES
# ============================================================================


def has_binding(text: str) -> bool:
    """True if text contains at least one binding expression."""
    return _BINDING_RE.search(text) is not None


def is_bound_only(text: str) -> bool:
    """True if text is made of bindings and whitespace only."""
    return has_binding(text) and not _BINDING_RE.sub("", text).strip()


def is_compound_annotated(text: str) -> bool:
    """True if text mixes literal (non-whitespace) text with bindings."""
    return has_binding(text) and not is_bound_only(text)


def calls_function(binding: str) -> bool:
    """True if a binding expression is a function call: {{fn(a)}}."""
    return "(" in binding


# ============================================================================
# SPLITTING
# ============================================================================


def split_annotations(text: str) -> tuple[Token, ...]:
    """Split text into alternating literal and binding tokens.

    Adjacent literal runs are merged, so stray braces stay literal. Two
    bindings in a row are separated by an empty literal; a trailing empty
    literal is dropped.

    Example:
        >>> [t.text for t in split_annotations("Has [[x.value]] in it")]
        ['Has ', '[[x.value]]', ' in it']
    """
    if not has_binding(text):
        return (Token(TokenKind.LITERAL, text),)
    parts: list[str] = []
    kinds: list[TokenKind] = []
    for match in _TOKEN_RE.finditer(text):
        chunk = match.group(0)
        if _BINDING_RE.fullmatch(chunk):
            parts.extend((chunk, ""))
            kinds.extend((TokenKind.BINDING, TokenKind.LITERAL))
        elif parts:
            parts[-1] += chunk
        else:
            parts.append(chunk)
            kinds.append(TokenKind.LITERAL)
    if parts and not parts[-1]:
        parts.pop()
        kinds.pop()
    return tuple(Token(kind, part) for kind, part in zip(kinds, parts, strict=True))


def annotation_nodes(document: Document, text: str) -> list[Node]:
    """Materialize split text: bindings become <span> elements, literals text nodes."""
    nodes: list[Node] = []
    for token in split_annotations(text):
        if token.is_binding:
            span = new_element(document, "span")
            append(span, new_text(token.text))
            nodes.append(span)
        else:
            nodes.append(new_text(token.text))
    return nodes


def parse_binding(text: str) -> tuple[str, str, str] | None:
    """Split a single binding into (open, expression, close).

    Example:
        >>> parse_binding("{{count}}")
        ('{{', 'count', '}}')
    """
    match = _DELIMITED_RE.fullmatch(text)
    if match is None:
        return None
    if match.group(1):
        return match.group(1), match.group(2), match.group(3)
    return match.group(4), match.group(5), match.group(6)


# ============================================================================
# WHITESPACE
# ============================================================================


def normalize_whitespace(text: str) -> str:
    """Collapse a leading and a trailing whitespace run to one space each.

    Interior whitespace is kept, and padding is reduced rather than
    trimmed: "\\n  Hello\\n" becomes " Hello ".
    """
    text = _LEADING_WS_RE.sub(" ", text, count=1)
    return _TRAILING_WS_RE.sub(" ", text, count=1)
