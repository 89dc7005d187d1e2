"""Document preprocessing: eligibility, template discovery and outputs.

A Preprocessor turns one source file into output files: the (optionally
rewritten) document and one JSON bundle per component template.

Usage:
    preprocessor = Preprocessor(PreprocessOptions(rewrite_bindings=True))
    outputs = preprocessor.process(SourceFile("app/elements/my-el.html", data))
    # outputs: app/elements/my-el.html, app/elements/my-el.json

Thread-safety: a Preprocessor loads its registry lazily and is meant to be
driven from one thread. Separate Preprocessor instances share nothing
unless given the same shared_registry.

Python 3.13+.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import PurePath
from typing import IO, TYPE_CHECKING

from i18npreprocess.constants import (
    BEHAVIOR_IMPORT_PATH,
    DOM_BIND_TEMPLATE,
    EMBEDDED_BUNDLE_ID,
    EMBEDDED_MARKER,
    PLUGIN_NAME,
    RAW_DATA_TAG,
    TEMPLATE_CONTAINER_TAGS,
    TEMPLATE_TAG,
)
from i18npreprocess.diagnostics import ErrorTemplate, PluginError
from i18npreprocess.enums import RegistryPrecedence
from i18npreprocess.extraction import Bundle, ExtractionContext, TemplateTreeTraverser
from i18npreprocess.markup import (
    append,
    get_attribute,
    has_attribute,
    is_element,
    new_element,
    new_text,
    parent_name,
    parse,
    query,
    query_all,
    serialize,
    set_attribute,
)
from i18npreprocess.registry import AttributeRegistry, load_repository, register_template_rules

if TYPE_CHECKING:
    from collections.abc import Iterable

    from i18npreprocess.diagnostics import ExtractionWarning
    from i18npreprocess.markup import Document, Node

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Configuration
    "PreprocessOptions",
    # Input / output
    "SourceFile",
    "DocumentResult",
    # Processing
    "Preprocessor",
    "preprocess",
    # Helpers
    "is_eligible",
    "find_templates",
    "embed_bundle",
    "asset_path",
]

logger = logging.getLogger(__name__)

_DOCUMENT_ROOT = "[document]"


# ============================================================================
# CONFIGURATION
# ============================================================================


@dataclass(frozen=True, slots=True)
class PreprocessOptions:
    """Immutable preprocessing options.

    Attributes:
        rewrite_bindings: Replace extracted text and attributes with
            bindings to the bundle (default: False, extract only).
        format_width: JSON indentation of bundles; 0 or None for compact
            output (default: 2).
        source_root: Directory below cwd that asset paths are relative to
            (default: "app").
        force_processing: Process documents that do not import the i18n
            behavior (default: False).
        suppress_document_output: Do not emit the document itself.
        suppress_bundle_output: Do not emit the per-template JSON bundles.
        build_registry: Only collect inline attribute rules from templates;
            documents pass through unchanged and no bundles are produced.
        registry_source_paths: Attribute repository documents loaded into
            the registry before the first document is processed. A single
            path string is accepted.
        shared_registry: Registry to use (and accumulate into) instead of
            a fresh one. Lets several runs share rules.
        embed_bundle: In rewrite mode, also embed each bundle into its
            template as <template id="localizable-text"> (default: True).
        registry_precedence: Lookup order of a fresh registry
            (default: TAG_FIRST).
    """

    rewrite_bindings: bool = False
    format_width: int | None = 2
    source_root: str = "app"
    force_processing: bool = False
    suppress_document_output: bool = False
    suppress_bundle_output: bool = False
    build_registry: bool = False
    registry_source_paths: tuple[str, ...] | str = ()
    shared_registry: AttributeRegistry | None = None
    embed_bundle: bool = True
    registry_precedence: RegistryPrecedence = RegistryPrecedence.TAG_FIRST

    def __post_init__(self) -> None:
        """Normalize registry_source_paths and validate format_width.

        Raises:
            ValueError: If format_width is negative
        """
        if isinstance(self.registry_source_paths, str):
            object.__setattr__(self, "registry_source_paths", (self.registry_source_paths,))
        else:
            object.__setattr__(self, "registry_source_paths", tuple(self.registry_source_paths))
        if self.format_width is not None and self.format_width < 0:
            msg = f"format_width must be non-negative or None, got {self.format_width}"
            raise ValueError(msg)


# ============================================================================
# INPUT / OUTPUT
# ============================================================================


@dataclass(slots=True)
class SourceFile:
    """A file flowing through the preprocessor.

    Attributes:
        path: File path (absolute, or relative to cwd)
        contents: bytes or str for buffered files, None for a null file,
            or a binary stream (not supported)
        cwd: Working directory the path and source_root are relative to
        base: Base directory of the glob that produced the file, if any
    """

    path: str
    contents: bytes | str | IO[bytes] | None
    cwd: str = field(default_factory=os.getcwd)
    base: str | None = None

    @property
    def is_null(self) -> bool:
        return self.contents is None

    @property
    def is_stream(self) -> bool:
        return self.contents is not None and not isinstance(self.contents, (bytes, str))

    @property
    def stem(self) -> str:
        return PurePath(self.path).stem

    @property
    def dirname(self) -> str:
        return os.path.dirname(self.path)

    def text(self) -> str:
        """Buffered contents decoded as UTF-8.

        Raises:
            PluginError: If contents are not valid UTF-8
        """
        contents = self.contents
        if isinstance(contents, str):
            return contents
        if not isinstance(contents, bytes):
            raise PluginError(PLUGIN_NAME, ErrorTemplate.streaming_not_supported(self.path))
        try:
            return contents.decode("utf-8")
        except UnicodeDecodeError as e:
            raise PluginError(PLUGIN_NAME, ErrorTemplate.invalid_encoding(self.path, str(e))) from e

    def sibling(self, filename: str, contents: bytes) -> SourceFile:
        """New file in the same directory with the same cwd and base."""
        return SourceFile(
            path=os.path.join(self.dirname, filename),
            contents=contents,
            cwd=self.cwd,
            base=self.base,
        )


@dataclass(frozen=True, slots=True)
class DocumentResult:
    """Outcome of preprocessing one document's text.

    Attributes:
        localizable: The document opted in (or was forced) and was processed
        markup: Output markup (the input text when nothing was processed)
        bundles: Bundle per module id, in template order
        warnings: Non-fatal problems found while extracting
    """

    localizable: bool
    markup: str
    bundles: dict[str, Bundle] = field(default_factory=dict)
    warnings: tuple[ExtractionWarning, ...] = ()


# ============================================================================
# HELPERS
# ============================================================================


def _imports_behavior(node: Node) -> bool:
    if not is_element(node, "link") or get_attribute(node, "rel") != "import":
        return False
    href = get_attribute(node, "href") or ""
    return href == BEHAVIOR_IMPORT_PATH or f"/{BEHAVIOR_IMPORT_PATH}" in href


def is_eligible(document: Document) -> bool:
    """True if the document imports the i18n behavior."""
    return query(document, _imports_behavior) is not None


def _is_component_template(node: Node) -> bool:
    if not is_element(node, TEMPLATE_TAG):
        return False
    if get_attribute(node, "is") == DOM_BIND_TEMPLATE:
        return True
    return (parent_name(node) or _DOCUMENT_ROOT) in TEMPLATE_CONTAINER_TAGS


def find_templates(document: Document) -> list[Node]:
    """Component templates of a document, in document order.

    A template qualifies when it is an i18n-dom-bind template or sits
    directly in dom-module, body, head, html or the document root.
    """
    return query_all(document, _is_component_template)


def asset_path(source: SourceFile, source_root: str) -> str:
    """Directory of source relative to cwd/source_root, with a trailing "/"."""
    root = os.path.join(source.cwd, source_root)
    directory = os.path.join(source.cwd, source.dirname)
    relative = os.path.relpath(directory, root).replace(os.sep, "/")
    return "./" if relative == "." else relative + "/"


def _with_source(warnings: Iterable[ExtractionWarning], source: SourceFile | None) -> list[ExtractionWarning]:
    if source is None:
        return list(warnings)
    return [replace(w, diagnostic=replace(w.diagnostic, source_path=source.path)) for w in warnings]


def _is_embedded_block(node: Node) -> bool:
    return is_element(node, TEMPLATE_TAG) and get_attribute(node, "id") == EMBEDDED_BUNDLE_ID


def embed_bundle(document: Document, template: Node, bundle: Bundle, indent: int | None) -> bool:
    """Append the bundle to a template as an embedded JSON block.

    Returns:
        False if the template already carries an embedded bundle
    """
    if has_attribute(template, EMBEDDED_BUNDLE_ID):
        return False
    if query(template, _is_embedded_block):
        return False
    set_attribute(template, EMBEDDED_BUNDLE_ID, EMBEDDED_MARKER)
    wrapper = new_element(document, TEMPLATE_TAG)
    set_attribute(wrapper, "id", EMBEDDED_BUNDLE_ID)
    data = new_element(document, RAW_DATA_TAG)
    append(data, new_text("\n" + bundle.dumps(indent) + "\n"))
    append(wrapper, new_text("\n"))
    append(wrapper, data)
    append(wrapper, new_text("\n"))
    append(template, wrapper)
    append(template, new_text("\n"))
    return True


# ============================================================================
# PROCESSING
# ============================================================================


class Preprocessor:
    """Extracts bundles from documents and rewrites them.

    The registry is built on first use: repository documents named in
    options.registry_source_paths are loaded once per Preprocessor (or
    into the shared registry, when one is given).

    Usage:
        preprocessor = Preprocessor(PreprocessOptions(rewrite_bindings=True))
        for source in sources:
            for output in preprocessor.process(source):
                write(output)
    """

    __slots__ = ("_options", "_registry", "_registry_loaded", "_warnings")

    def __init__(self, options: PreprocessOptions | None = None) -> None:
        self._options = options or PreprocessOptions()
        registry = self._options.shared_registry
        if registry is None:
            registry = AttributeRegistry(self._options.registry_precedence)
        self._registry = registry
        self._registry_loaded = False
        self._warnings: list[ExtractionWarning] = []

    @property
    def options(self) -> PreprocessOptions:
        return self._options

    @property
    def registry(self) -> AttributeRegistry:
        """The attribute registry (loaded on the first eligible document)."""
        return self._registry

    @property
    def warnings(self) -> tuple[ExtractionWarning, ...]:
        """Warnings of every document processed so far, in order."""
        return tuple(self._warnings)

    def load_registry(self) -> AttributeRegistry:
        """Load repository sources into the registry, once."""
        if not self._registry_loaded:
            self._registry_loaded = True
            paths = self._options.registry_source_paths
            if paths:
                count = load_repository(self._registry, paths)
                logger.debug("Loaded %d of %d attribute repositories", count, len(paths))
        return self._registry

    def preprocess_document(self, text: str, source: SourceFile | None = None) -> DocumentResult:
        """Process one document's markup.

        Args:
            text: Document markup
            source: File the markup came from; used for asset paths and the
                fallback module id

        Returns:
            DocumentResult with the output markup and bundles
        """
        options = self._options
        document = parse(text)
        if not (options.force_processing or is_eligible(document)):
            return DocumentResult(localizable=False, markup=text)

        registry = self.load_registry()
        fallback_id = source.stem if source is not None else "document"
        bundles: dict[str, Bundle] = {}
        warnings: list[ExtractionWarning] = []
        for template in find_templates(document):
            module_id = get_attribute(template, "id")
            if module_id and source is not None:
                set_attribute(template, "assetpath", asset_path(source, options.source_root))
            module_id = module_id or get_attribute(template.parent, "id") or fallback_id
            if options.build_registry:
                register_template_rules(registry, module_id, template)
                continue
            context = ExtractionContext(document, registry, rewrite=options.rewrite_bindings)
            TemplateTreeTraverser(context).traverse(template)
            bundles[module_id] = context.bundle
            warnings.extend(_with_source(context.warnings, source))
            logger.debug("Extracted template %s", module_id)
            if options.rewrite_bindings and options.embed_bundle:
                embed_bundle(document, template, context.bundle, options.format_width)

        if options.build_registry:
            return DocumentResult(localizable=True, markup=text)
        self._warnings.extend(warnings)
        logger.info(
            "Processed %s: %d template(s), %d warning(s)",
            source.path if source is not None else "<document>",
            len(bundles),
            len(warnings),
        )
        return DocumentResult(
            localizable=True,
            markup=serialize(document),
            bundles=bundles,
            warnings=tuple(warnings),
        )

    def process(self, source: SourceFile) -> list[SourceFile]:
        """Process one source file into its output files.

        Null files pass through unchanged. Ineligible documents (and all
        documents in registry build mode) pass through as the document
        alone. Otherwise the outputs are the document followed by one
        <moduleId>.json per template, minus suppressed outputs.

        Raises:
            PluginError: If the contents are a stream or not UTF-8
        """
        if source.is_null:
            return [source]
        if source.is_stream:
            raise PluginError(PLUGIN_NAME, ErrorTemplate.streaming_not_supported(source.path))

        options = self._options
        result = self.preprocess_document(source.text(), source)
        if not result.localizable or options.build_registry:
            if options.suppress_document_output:
                return []
            return [source.sibling(os.path.basename(source.path), result.markup.encode("utf-8"))]

        outputs: list[SourceFile] = []
        if not options.suppress_document_output:
            outputs.append(source.sibling(os.path.basename(source.path), result.markup.encode("utf-8")))
        if not options.suppress_bundle_output:
            outputs.extend(
                source.sibling(f"{module_id}.json", bundle.dumps(options.format_width).encode("utf-8"))
                for module_id, bundle in result.bundles.items()
            )
        return outputs

    def process_all(self, sources: Iterable[SourceFile]) -> list[SourceFile]:
        """Process several files in order, concatenating their outputs."""
        outputs: list[SourceFile] = []
        for source in sources:
            outputs.extend(self.process(source))
        return outputs


def preprocess(text: str, options: PreprocessOptions | None = None) -> DocumentResult:
    """Process markup text with a one-off Preprocessor."""
    return Preprocessor(options).preprocess_document(text)
