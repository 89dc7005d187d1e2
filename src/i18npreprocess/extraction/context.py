"""State shared by one template traversal.

Python 3.13+.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from i18npreprocess.core import TraversalPath
from i18npreprocess.diagnostics import ExtractionWarning

from .bundle import Bundle
from .message_id import generate_message_id

if TYPE_CHECKING:
    from i18npreprocess.diagnostics import Diagnostic
    from i18npreprocess.markup import Document
    from i18npreprocess.registry import AttributeRegistry

__all__ = ["ExtractionContext"]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ExtractionContext:
    """Everything a traversal reads or writes besides the tree itself.

    Attributes:
        document: Document the template belongs to (node factory)
        registry: Localizable attribute rules (read-only here)
        rewrite: Replace extracted values with bindings when True
        bundle: Messages collected so far
        path: Segments of the node being visited
        warnings: Non-fatal problems found so far
    """

    document: Document
    registry: AttributeRegistry
    rewrite: bool = False
    bundle: Bundle = field(default_factory=Bundle)
    path: TraversalPath = field(default_factory=TraversalPath)
    warnings: list[ExtractionWarning] = field(default_factory=list)

    def message_id(self, explicit_id: str | None = None) -> str:
        """Message id for the node at the current path."""
        return generate_message_id(self.path.segments, explicit_id)

    def warn(self, diagnostic: Diagnostic, message_id: str | None = None) -> None:
        """Record and log a non-fatal problem."""
        warning = ExtractionWarning(diagnostic, message_id)
        self.warnings.append(warning)
        logger.warning("%s", warning.format())
