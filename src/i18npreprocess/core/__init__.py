"""Core infrastructure shared by the registry and extraction layers.

Python 3.13+.
"""

from .path import TraversalPath, node_segment

__all__ = ["TraversalPath", "node_segment"]
