"""Template tree traversal: the text extraction state machine.

Each visited node pushes one path segment. Visiting a node returns True
when it counts as whitespace (blank text, comments, doctypes); the parent
does not advance its sibling index for those, so formatting changes do
not shift message ids.

Element handling:
    style, script, meta         ignored
    i18n-format                 explicit multi-parameter message
    i18n-number, i18n-datetime  gain lang="{{effectiveLang}}", then default
    template                    attributes, then content as a fragment
    anything else               attributes, then leaf text or structure

A structured element whose children are plain text interleaved with
simple elements (one text child each) collapses into one message with
{n} placeholders; otherwise its children are visited one by one.

Python 3.13+.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from i18npreprocess.constants import (
    EMBEDDED_BUNDLE_ID,
    FORMAT_DIRECTIVE_TAG,
    FRAGMENT_SEGMENT,
    LANG_BINDING,
    LANG_DIRECTIVE_TAGS,
    NUMBER_DIRECTIVE_TAG,
    RAW_DATA_TAG,
    SERIALIZE_FUNCTION,
    SKIPPED_TAGS,
    TEMPLATE_TAG,
    TEXT_PREFIX,
)
from i18npreprocess.core import node_segment
from i18npreprocess.diagnostics import ErrorTemplate
from i18npreprocess.enums import NodeKind
from i18npreprocess.markup import (
    append,
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
    remove,
    remove_children,
    replace,
    set_attribute,
    set_text_content,
    text_value,
)

from .annotations import (
    annotation_nodes,
    has_binding,
    is_bound_only,
    is_compound_annotated,
    normalize_whitespace,
    parse_binding,
)
from .attributes import explicit_id, extract_attributes

if TYPE_CHECKING:
    from i18npreprocess.markup import Node

    from .bundle import Bundle, BundleValue
    from .context import ExtractionContext

__all__ = ["TemplateTreeTraverser"]

logger = logging.getLogger(__name__)


def _is_blank(text: str) -> bool:
    return not text.strip()


def _is_simple_element(node: Node) -> bool:
    """Element with no children or a single text child."""
    kids = children(node)
    return not kids or (len(kids) == 1 and is_text(kids[0]))


def _template_content(template: Node) -> list[Node]:
    """Children of a template that are neither comments nor blank text."""
    content: list[Node] = []
    for child in children(template):
        kind = node_kind(child)
        if kind is NodeKind.COMMENT:
            continue
        if kind is NodeKind.TEXT and _is_blank(text_value(child)):
            continue
        content.append(child)
    return content


@dataclass(frozen=True, slots=True)
class _ChildShape:
    """Flags describing one child of a structured element."""

    text: bool = False
    compound_text: bool = False
    simple_element: bool = False
    compound_element: bool = False
    nested: bool = False

    def __or__(self, other: _ChildShape) -> _ChildShape:
        return _ChildShape(
            text=self.text or other.text,
            compound_text=self.compound_text or other.compound_text,
            simple_element=self.simple_element or other.simple_element,
            compound_element=self.compound_element or other.compound_element,
            nested=self.nested or other.nested,
        )

    @classmethod
    def of(cls, child: Node) -> _ChildShape:
        if is_element(child, TEMPLATE_TAG):
            return cls._of_template(child)
        if is_text(child):
            text = text_value(child)
            return cls(text=not _is_blank(text), compound_text=is_compound_annotated(text))
        if is_element(child):
            simple = _is_simple_element(child)
            return cls(
                simple_element=simple,
                compound_element=simple and is_compound_annotated(get_text_content(child)),
                nested=not simple,
            )
        return cls()

    @classmethod
    def _of_template(cls, template: Node) -> _ChildShape:
        # dom-if / dom-repeat wrappers are judged by their content
        content = _template_content(template)
        if not content:
            return cls()
        first, rest = content[0], content[1:]
        if is_text(first):
            text = text_value(first)
            return cls(
                text=not rest,
                compound_text=is_compound_annotated(text),
                nested=bool(rest) or is_compound_annotated(text),
            )
        if is_element(first):
            simple = _is_simple_element(first)
            return cls(
                simple_element=simple and not rest,
                compound_element=simple and is_compound_annotated(get_text_content(first)),
                nested=bool(rest) or not simple,
            )
        return cls(nested=bool(rest))


@dataclass(frozen=True, slots=True)
class _Part:
    """One child of a collapsing element, in document order.

    Attributes:
        node: The node contributing text or a parameter
        wrapper: <template> wrapping node, if any
        text: Literal text contributed to the message
    """

    node: Node
    wrapper: Node | None = None
    text: str | None = None


class TemplateTreeTraverser:
    """Extracts the text of one template into its bundle.

    Usage:
        context = ExtractionContext(document, registry, rewrite=True)
        TemplateTreeTraverser(context).traverse(template)
        context.bundle.to_dict()
    """

    __slots__ = ("_context",)

    def __init__(self, context: ExtractionContext) -> None:
        self._context = context

    @property
    def bundle(self) -> Bundle:
        return self._context.bundle

    def traverse(self, root: Node) -> Bundle:
        """Visit root and everything below it; return the bundle."""
        self.visit(root, 0)
        return self._context.bundle

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def visit(self, node: Node, index: int) -> bool:
        """Visit one node at a sibling index; return True for whitespace."""
        kind = node_kind(node)
        node_id = explicit_id(node) if kind is NodeKind.ELEMENT else None
        with self._context.path.enter(node_segment(node_name(node), node_id, index)):
            match kind:
                case NodeKind.ELEMENT:
                    self._visit_element(node, node_id)
                    return False
                case NodeKind.TEXT:
                    return self._visit_text(node)
                case NodeKind.DOCUMENT:
                    self._visit_children(node)
                    return False
                case _:
                    return True

    def _visit_children(self, node: Node) -> None:
        whitespace = 0
        for position, child in enumerate(children(node)):
            if self.visit(child, position - whitespace):
                whitespace += 1

    def _visit_element(self, node: Node, node_id: str | None) -> None:
        name = node_name(node)
        if name in SKIPPED_TAGS:
            return
        if name == FORMAT_DIRECTIVE_TAG:
            self._visit_format_directive(node, node_id)
            return
        if name == TEMPLATE_TAG:
            if get_attribute(node, "id") == EMBEDDED_BUNDLE_ID:
                return
            extract_attributes(node, self._context)
            with self._context.path.enter(FRAGMENT_SEGMENT):
                self._visit_children(node)
            return
        if name in LANG_DIRECTIVE_TAGS:
            self._ensure_lang(node)
        extract_attributes(node, self._context)
        self._visit_content(node, name, node_id)

    def _ensure_lang(self, node: Node) -> None:
        if self._context.rewrite and not has_attribute(node, "lang"):
            set_attribute(node, "lang", LANG_BINDING)

    # ------------------------------------------------------------------
    # Element content
    # ------------------------------------------------------------------

    def _visit_content(self, node: Node, name: str, node_id: str | None) -> None:
        text_child: Node | None = None
        structured = False
        for child in children(node):
            kind = node_kind(child)
            if kind is NodeKind.ELEMENT or (kind is NodeKind.TEXT and text_child is not None):
                structured = True
                break
            if kind is NodeKind.TEXT:
                text_child = child
        if text_child is not None and is_compound_annotated(text_value(text_child)):
            structured = True
        if not structured:
            if text_child is not None:
                self._extract_leaf(node, name, text_child, node_id)
            return
        if self._qualifies_for_collapse(node):
            self._collapse_element(node, node_id)
        else:
            self._visit_children(node)

    def _extract_leaf(self, node: Node, name: str, text_child: Node, node_id: str | None) -> None:
        text = text_value(text_child)
        if _is_blank(text) or is_bound_only(text):
            return
        context = self._context
        message_id = context.message_id(node_id)
        normalized = normalize_whitespace(text)
        value: BundleValue = normalized
        if name == RAW_DATA_TAG:
            try:
                value = json.loads(normalized)
            except ValueError as e:
                context.warn(ErrorTemplate.invalid_json_text(name, normalized, str(e)), message_id)
                return
        context.bundle.set_value(message_id, value)
        if context.rewrite:
            set_text_content(text_child, f"{{{{{TEXT_PREFIX}.{message_id}}}}}")

    def _qualifies_for_collapse(self, node: Node) -> bool:
        shape = _ChildShape()
        for child in children(node):
            shape |= _ChildShape.of(child)
        return (
            (shape.text or bool(get_attribute(node, "text-id")))
            and (shape.simple_element or shape.compound_text)
            and not shape.nested
            and not shape.compound_element
        )

    def _visit_text(self, node: Node) -> bool:
        text = text_value(node)
        if _is_blank(text):
            return True
        if is_bound_only(text):
            return False
        context = self._context
        message_id = context.message_id()
        if is_compound_annotated(text):
            parts = [_Part(piece, text=_text_of(piece)) for piece in annotation_nodes(context.document, text)]
            directive = self._collapse(parts, message_id)
            if directive is not None:
                replace(node, directive)
            return False
        context.bundle.set_value(message_id, normalize_whitespace(text))
        if context.rewrite:
            set_text_content(node, f"{{{{{TEXT_PREFIX}.{message_id}}}}}")
        return False

    # ------------------------------------------------------------------
    # Inline collapse
    # ------------------------------------------------------------------

    def _collapse_element(self, node: Node, node_id: str | None) -> None:
        context = self._context
        message_id = context.message_id(node_id)
        parts: list[_Part] = []
        for child in children(node):
            if is_text(child) and has_binding(text_value(child)):
                parts.extend(
                    _Part(piece, text=_text_of(piece))
                    for piece in annotation_nodes(context.document, text_value(child))
                )
            elif is_element(child, TEMPLATE_TAG):
                content = _template_content(child)
                if content:
                    parts.append(_Part(content[0], wrapper=child))
                else:
                    parts.append(_Part(child))
            else:
                parts.append(_Part(child, text=_text_of(child)))
        directive = self._collapse(parts, message_id)
        if directive is not None:
            remove_children(node)
            append(node, directive)

    def _collapse(self, parts: list[_Part], message_id: str) -> Node | None:
        """Store parts as one message; return the replacement directive when rewriting."""
        context = self._context
        rewrite = context.rewrite
        literal = ""
        values: list[BundleValue] = []
        params: list[Node] = []
        for part in parts:
            if part.text:
                literal += part.text
            if is_element(part.node):
                position = len(params) + 1
                literal += f"{{{position}}}"
                with context.path.enter(str(position)):
                    extract_attributes(part.node, context)
                values.append(self._parameter_value(part.node, message_id, position))
                if rewrite:
                    set_attribute(part.node, "param", str(position))
                params.append(part.wrapper or part.node)
            elif part.wrapper is not None and is_text(part.node):
                position = len(params) + 1
                literal += f"{{{position}}}"
                values.append(self._wrapped_text_value(part, message_id, position))
                params.append(part.wrapper)
        context.bundle.set_value(message_id, [normalize_whitespace(literal), *values])
        logger.debug("Inline message %s with %d parameters", message_id, len(params))
        if not rewrite:
            return None
        directive = new_element(context.document, FORMAT_DIRECTIVE_TAG)
        set_attribute(directive, "lang", LANG_BINDING)
        template = new_element(context.document, "span")
        append(template, new_text(f"{{{{{TEXT_PREFIX}.{message_id}.0}}}}"))
        append(directive, template)
        for param in params:
            append(directive, param)
        return directive

    def _parameter_value(self, element: Node, message_id: str, position: int) -> BundleValue:
        rewrite = self._context.rewrite
        placeholder = f"<{node_name(element)}>"
        if not children(element):
            return placeholder
        content = get_text_content(element)
        if content == "":
            if rewrite:
                set_text_content(element, "")
            return placeholder
        if _is_blank(content):
            if rewrite:
                set_text_content(element, " ")
            return placeholder
        if is_bound_only(content):
            return content
        if rewrite:
            set_text_content(element, f"{{{{{TEXT_PREFIX}.{message_id}.{position}}}}}")
        return normalize_whitespace(content)

    def _wrapped_text_value(self, part: _Part, message_id: str, position: int) -> BundleValue:
        """Parameter for a template wrapping a bare text node (dom-if text)."""
        content = text_value(part.node)
        if is_bound_only(content):
            value: BundleValue = content
            replacement = content
        else:
            value = normalize_whitespace(content)
            replacement = f"{{{{{TEXT_PREFIX}.{message_id}.{position}}}}}"
        if self._context.rewrite and part.wrapper is not None:
            span = new_element(self._context.document, "span")
            set_attribute(span, "param", str(position))
            append(span, new_text(replacement))
            remove(part.node)
            append(part.wrapper, span)
        return value

    # ------------------------------------------------------------------
    # Formatting directive
    # ------------------------------------------------------------------

    def _visit_format_directive(self, node: Node, node_id: str | None) -> None:
        context = self._context
        extract_attributes(node, context)
        self._ensure_lang(node)
        elements = element_children(node)
        if not elements:
            return
        message_id = context.message_id(node_id)
        template, params = elements[0], elements[1:]
        template_text = get_text_content(template)
        raw_data = node_name(template) == RAW_DATA_TAG

        if is_bound_only(template_text):
            # already localized
            if raw_data and context.rewrite:
                self._serialize_raw_data(template, template_text)
            return

        values: list[BundleValue] = []
        if raw_data:
            try:
                values.append(json.loads(template_text))
            except ValueError as e:
                context.warn(ErrorTemplate.invalid_json_text(RAW_DATA_TAG, template_text, str(e)), message_id)
                return
            template_binding = f"{{{{{SERIALIZE_FUNCTION}({TEXT_PREFIX}.{message_id}.0)}}}}"
        else:
            values.append(template_text)
            template_binding = f"{{{{{TEXT_PREFIX}.{message_id}.0}}}}"

        for position, param in enumerate(params, start=1):
            values.append(self._directive_parameter(param, message_id, position))
        if context.rewrite:
            set_text_content(template, template_binding)
        context.bundle.set_value(message_id, values)

    def _directive_parameter(self, param: Node, message_id: str, position: int) -> BundleValue:
        rewrite = self._context.rewrite
        value = get_text_content(param)
        binding = parse_binding(value)
        if rewrite and not has_attribute(param, "param"):
            set_attribute(param, "param", str(position))
        if node_name(param) == NUMBER_DIRECTIVE_TAG:
            self._ensure_lang(param)
            offset = get_attribute(param, "offset")
            if binding is not None and offset:
                opening, expression, closing = binding
                return f"{opening}{expression} - {offset}{closing}"
        if binding is None and rewrite:
            set_text_content(param, f"{{{{{TEXT_PREFIX}.{message_id}.{position}}}}}")
        return value

    def _serialize_raw_data(self, template: Node, text: str) -> None:
        binding = parse_binding(text.strip())
        if binding is None or binding[1].startswith(f"{SERIALIZE_FUNCTION}("):
            return
        opening, expression, closing = binding
        set_text_content(template, f"{opening}{SERIALIZE_FUNCTION}({expression}){closing}")


def _text_of(node: Node) -> str | None:
    return text_value(node) if is_text(node) else None
