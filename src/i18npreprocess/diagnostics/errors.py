"""Preprocessor exception hierarchy with structured diagnostics.

All exceptions may carry a Diagnostic object for rich error information.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic


class PreprocessError(Exception):
    """Base exception for all preprocessor errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize PreprocessError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class PluginError(PreprocessError):
    """Fatal error for one input item, reported under the plugin name.

    Raised for unsupported input transports (streamed contents).
    Processing of that item stops; other items are unaffected.

    Attributes:
        plugin: Name of the reporting plugin
    """

    def __init__(self, plugin: str, message: str | Diagnostic) -> None:
        """Initialize PluginError.

        Args:
            plugin: Plugin name
            message: Error message string OR Diagnostic object
        """
        super().__init__(message)
        self.plugin = plugin


class DepthLimitExceededError(PreprocessError):
    """Template nesting exceeded the traversal depth limit."""
