"""Localizable attribute extraction.

For each attribute the registry marks localizable, the value is stored in
the bundle under model.<messageId>.<attribute> and, when rewriting,
replaced by a binding to that model path.

Python 3.13+.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from i18npreprocess.constants import (
    EXCLUDED_ATTRIBUTES,
    FORMAT_FUNCTION,
    MODEL_PREFIX,
    TWO_WAY_MARKER,
)
from i18npreprocess.diagnostics import ErrorTemplate
from i18npreprocess.enums import AttributeShape
from i18npreprocess.markup import (
    attribute_items,
    get_attribute,
    node_name,
    rename_attribute,
    set_attribute,
)

from .annotations import calls_function, has_binding, is_bound_only, parse_binding, split_annotations

if TYPE_CHECKING:
    from i18npreprocess.markup import Node

    from .context import ExtractionContext

__all__ = ["classify_attribute_value", "explicit_id", "extract_attributes"]


def explicit_id(node: Node) -> str | None:
    """text-id, else id, of an element."""
    return get_attribute(node, "text-id") or get_attribute(node, "id")


def _fold_newlines(value: str) -> str:
    return value.replace("\n", " ")


def _looks_like_json(value: str) -> bool:
    folded = _fold_newlines(value).strip()
    return (folded.startswith("{") and folded.endswith("}")) or (
        folded.startswith("[") and folded.endswith("]")
    )


def classify_attribute_value(value: str) -> AttributeShape:
    """Classify an attribute value; the first matching shape wins.

    Example:
        >>> classify_attribute_value("Has [[x.value]] in it")
        <AttributeShape.COMPOUND: 'compound'>
    """
    if not value:
        return AttributeShape.EMPTY
    if is_bound_only(value):
        return AttributeShape.BOUND
    if _looks_like_json(value) and not has_binding(value):
        return AttributeShape.JSON
    if has_binding(value):
        return AttributeShape.COMPOUND
    return AttributeShape.PLAIN


def extract_attributes(node: Node, context: ExtractionContext) -> None:
    """Extract every localizable attribute of node into the bundle.

    Excluded attributes, values that are already bindings and attributes
    the registry does not know are left alone. Invalid JSON values are
    reported as warnings and left untouched.
    """
    message_id: str | None = None
    for name, value in attribute_items(node):
        base_name = name.lower().removesuffix(TWO_WAY_MARKER)
        if base_name in EXCLUDED_ATTRIBUTES:
            continue
        resolution = context.registry.is_localizable(node, base_name)
        if not resolution:
            continue
        shape = classify_attribute_value(value)
        if shape in (AttributeShape.EMPTY, AttributeShape.BOUND):
            continue
        if message_id is None:
            message_id = context.message_id(explicit_id(node))
        model_path = f"{MODEL_PREFIX}.{message_id}.{base_name}"
        match shape:
            case AttributeShape.JSON:
                try:
                    parsed = json.loads(_fold_newlines(value))
                except ValueError as e:
                    context.warn(
                        ErrorTemplate.invalid_json_attribute(node_name(node), name, value, str(e)),
                        message_id,
                    )
                    continue
                context.bundle.set_value(model_path, parsed)
                rewritten = f"{{{{{model_path}}}}}"
            case AttributeShape.COMPOUND:
                rewritten = _extract_compound(value, model_path, context)
            case _:
                context.bundle.set_value(model_path, value)
                rewritten = f"{{{{{model_path}}}}}"
        if context.rewrite:
            set_attribute(node, name, rewritten)
            if resolution == TWO_WAY_MARKER and not name.endswith(TWO_WAY_MARKER):
                rename_attribute(node, name, name + TWO_WAY_MARKER)


def _extract_compound(value: str, model_path: str, context: ExtractionContext) -> str:
    """Store a compound value and return its rewritten form.

    With a function call among the bindings the token list is stored as
    is and each literal becomes an indexed lookup next to the untouched
    bindings. Otherwise the bindings become {n} placeholders of a single
    format string passed to the format function.
    """
    tokens = split_annotations(value)
    if any(token.is_binding and calls_function(token.text) for token in tokens):
        context.bundle.set_value(model_path, [token.text for token in tokens])
        return "".join(
            token.text if token.is_binding else f"{{{{{model_path}.{index}}}}}"
            for index, token in enumerate(tokens)
            if token.is_binding or token.text
        )
    literal = ""
    params: list[str] = []
    expressions: list[str] = []
    for token in tokens:
        if token.is_binding:
            params.append(token.text)
            literal += f"{{{len(params)}}}"
            parsed = parse_binding(token.text)
            expressions.append(parsed[1] if parsed else token.text)
        else:
            literal += token.text
    context.bundle.set_value(model_path, [literal, *params])
    arguments = ",".join([f"{model_path}.0", *expressions])
    return f"{{{{{FORMAT_FUNCTION}({arguments})}}}}"
