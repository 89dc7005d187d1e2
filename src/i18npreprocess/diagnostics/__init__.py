"""Diagnostic system for preprocessor errors and warnings.

Provides structured diagnostics with codes, locations and hints.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode
from .errors import DepthLimitExceededError, PluginError, PreprocessError
from .formatter import DiagnosticFormatter, OutputFormat
from .report import ExtractionWarning
from .templates import ErrorTemplate

__all__ = [
    "DepthLimitExceededError",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticFormatter",
    "ErrorTemplate",
    "ExtractionWarning",
    "OutputFormat",
    "PluginError",
    "PreprocessError",
]
