"""Traversal path with scoped push/pop and depth limiting.

The path records one segment per visited markup node and is the input of
message id generation. Segments are pushed through a context manager so
the matching pop runs on every exit path, including early returns and
exceptions.

Thread-safe: uses explicit state, no thread-local storage.
Each template traversal owns its own TraversalPath.
Python 3.13+.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from i18npreprocess.constants import MAX_DEPTH
from i18npreprocess.diagnostics import DepthLimitExceededError, ErrorTemplate

if TYPE_CHECKING:
    from collections.abc import Generator, Iterator

__all__ = ["TraversalPath", "node_segment"]


def node_segment(name: str, explicit_id: str | None, index: int) -> str:
    """Build the path segment for one node.

    Args:
        name: Lower-cased node name (tag name, "#text", "#comment", ...)
        explicit_id: text-id or id attribute value, if any
        index: Sibling index among non-whitespace siblings

    Returns:
        "#<id>" when an id is present, else the name with "_<index>"
        appended for any sibling after the first.
    """
    if explicit_id:
        return f"#{explicit_id}"
    if index > 0:
        return f"{name}_{index}"
    return name


@dataclass(slots=True)
class TraversalPath:
    """Stack of path segments, one per node currently being visited.

    Usage:
        path = TraversalPath()
        with path.enter("#my-element"):
            with path.enter("#document-fragment"):
                message_id = generate_message_id(path.segments, None)

    Attributes:
        max_depth: Maximum number of segments (default: MAX_DEPTH)
    """

    max_depth: int = MAX_DEPTH
    _segments: list[str] = field(default_factory=list, init=False)

    @contextmanager
    def enter(self, segment: str) -> Generator[TraversalPath]:
        """Push a segment for the duration of the with-block.

        Raises:
            DepthLimitExceededError: If pushing would exceed max_depth
        """
        if len(self._segments) >= self.max_depth:
            raise DepthLimitExceededError(ErrorTemplate.depth_exceeded(self.max_depth))
        self._segments.append(segment)
        try:
            yield self
        finally:
            self._segments.pop()

    @property
    def segments(self) -> tuple[str, ...]:
        """Snapshot of the current segments, root first."""
        return tuple(self._segments)

    @property
    def depth(self) -> int:
        """Current number of segments."""
        return len(self._segments)

    def __iter__(self) -> Iterator[str]:
        return iter(self._segments)

    def __len__(self) -> int:
        return len(self._segments)

    def __str__(self) -> str:
        return ":".join(self._segments)
