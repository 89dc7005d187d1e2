"""Message id generation from traversal paths.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from i18npreprocess.constants import FRAGMENT_SEGMENT

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = ["generate_message_id"]


def generate_message_id(path: Sequence[str], explicit_id: str | None = None) -> str:
    """Derive a stable message id for the node at the end of path.

    The first segment (the template itself) and fragment segments are
    skipped. An id segment ("#name") restarts the id from that name, so
    the nearest element with an id anchors everything below it. A "#text"
    segment is the exception: it extends an existing id instead.

    Args:
        path: Path segments, root first
        explicit_id: text-id or id of the node itself; used verbatim

    Returns:
        The message id ("" for a path with nothing after the root)

    Example:
        >>> generate_message_id(["#greeting", "#document-fragment", "div", "span_1"])
        'div:span_1'
        >>> generate_message_id(["#app", "#document-fragment", "#nav", "a_2"])
        'nav:a_2'
    """
    if explicit_id:
        return explicit_id
    message_id = ""
    for segment in path[1:]:
        if segment == FRAGMENT_SEGMENT:
            continue
        if segment.startswith("#"):
            if message_id and segment.startswith("#text"):
                message_id += ":" + segment[1:]
            else:
                message_id = segment[1:]
        elif message_id:
            message_id += ":" + segment
        else:
            message_id = segment
    return message_id
