"""i18n-preprocess - extract localizable text from Polymer templates.

Scans component templates, collects their text and localizable attributes
into per-component JSON bundles, and optionally rewrites the markup so
every extracted value is read back through a binding.

Public API:
    Preprocessor - Processes source files into documents and bundles
    PreprocessOptions - Immutable processing options
    SourceFile - Input/output file
    preprocess - Process markup text in one call
    AttributeRegistry - Localizable attribute rules
    Bundle - Per-template message bundle

Exceptions:
    PreprocessError - Base exception class
    PluginError - Unsupported input (streams, invalid encoding)
    DepthLimitExceededError - Template nested too deeply

Submodules:
    i18npreprocess.extraction - Template traversal and message ids
    i18npreprocess.registry - Rule model, repository loading
    i18npreprocess.markup - Markup tree adapter (BeautifulSoup)
    i18npreprocess.diagnostics - Diagnostics, warnings and errors
"""

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("i18n-preprocess")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

from .diagnostics import DepthLimitExceededError, PluginError, PreprocessError  # noqa: E402
from .extraction import Bundle  # noqa: E402
from .preprocess import Preprocessor, PreprocessOptions, SourceFile, preprocess  # noqa: E402
from .registry import AttributeRegistry  # noqa: E402

__all__ = [
    "AttributeRegistry",
    "Bundle",
    "DepthLimitExceededError",
    "PluginError",
    "PreprocessError",
    "PreprocessOptions",
    "Preprocessor",
    "SourceFile",
    "__version__",
    "preprocess",
]
