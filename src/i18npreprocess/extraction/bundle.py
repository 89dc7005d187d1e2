"""Per-template message bundle.

A bundle is a JSON tree with two reserved top-level keys: "meta" and
"model". Text messages live at the top level under their message id;
attribute messages live under "model.<messageId>.<attribute>".

Python 3.13+.
"""

from __future__ import annotations

import json
from typing import Any

__all__ = ["Bundle", "BundleValue"]

type BundleValue = str | int | float | bool | list[Any] | dict[str, Any] | None


class Bundle:
    """Mutable message bundle for one template.

    Keys are dotted paths; intermediate objects are created on demand.

    Example:
        >>> bundle = Bundle()
        >>> bundle.set_value("model.my-input.label", "Name")
        >>> bundle.to_dict()
        {'meta': {}, 'model': {'my-input': {'label': 'Name'}}}
    """

    __slots__ = ("_data",)

    def __init__(self) -> None:
        self._data: dict[str, Any] = {"meta": {}, "model": {}}

    def set_value(self, key: str, value: BundleValue) -> None:
        """Store value at a dotted key, replacing any non-object on the way."""
        *parents, leaf = key.split(".")
        cursor = self._data
        for part in parents:
            child = cursor.get(part)
            if not isinstance(child, dict):
                child = cursor[part] = {}
            cursor = child
        cursor[leaf] = value

    def get_value(self, key: str) -> BundleValue:
        """Value at a dotted key.

        Raises:
            KeyError: If any part of the key is missing
        """
        cursor: Any = self._data
        for part in key.split("."):
            if not isinstance(cursor, dict):
                raise KeyError(key)
            cursor = cursor[part]
        return cursor

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        try:
            self.get_value(key)
        except KeyError:
            return False
        return True

    @property
    def is_empty(self) -> bool:
        """True when nothing beyond the reserved keys was stored."""
        return self._data == {"meta": {}, "model": {}}

    def to_dict(self) -> dict[str, Any]:
        """The bundle tree (live, not a copy)."""
        return self._data

    def dumps(self, indent: int | None = 2) -> str:
        """Serialize to JSON text, keeping non-ASCII characters.

        An indent of 0 or None gives compact single-line output.
        """
        return json.dumps(self._data, indent=indent or None, ensure_ascii=False)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Bundle):
            return NotImplemented
        return self._data == other._data

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Bundle({self._data!r})"
