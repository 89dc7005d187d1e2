"""Non-fatal findings collected while processing a document.

Python 3.13+.
"""

from dataclasses import dataclass

from .codes import Diagnostic

__all__ = ["ExtractionWarning"]


@dataclass(frozen=True, slots=True)
class ExtractionWarning:
    """Structured warning from template extraction.

    The offending value is left untouched in the markup and traversal
    continues; the warning only reports it.

    Attributes:
        diagnostic: What went wrong and where
        message_id: Message id the value would have been stored under
    """

    diagnostic: Diagnostic
    message_id: str | None = None

    @property
    def code(self) -> str:
        """Diagnostic code name."""
        return self.diagnostic.code.name

    def format(self) -> str:
        """Format warning as a single line."""
        if self.message_id:
            return f"[{self.code}] {self.message_id}: {self.diagnostic.message}"
        return f"[{self.code}] {self.diagnostic.message}"
