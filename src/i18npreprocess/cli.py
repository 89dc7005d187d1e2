"""Command line interface.

    python -m i18npreprocess --rewrite --out-dir build app/elements/*.html
    python -m i18npreprocess --build-registry --registry-out attrs.json app/**/*.html

Python 3.13+.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from i18npreprocess import __version__
from i18npreprocess.diagnostics import DiagnosticFormatter, OutputFormat, PreprocessError
from i18npreprocess.enums import RegistryPrecedence
from i18npreprocess.preprocess import Preprocessor, PreprocessOptions, SourceFile
from i18npreprocess.registry import AttributeRegistry

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = ["main", "parse_args"]

logger = logging.getLogger(__name__)


def parse_args(args: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="i18n-preprocess",
        description="Extract localizable text from Polymer templates into JSON bundles",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument("files", type=Path, nargs="+", help="HTML documents to process")
    parser.add_argument(
        "--out-dir",
        type=Path,
        default=Path("build"),
        help="Directory outputs are written to (default: build)",
    )
    parser.add_argument(
        "--rewrite",
        action="store_true",
        help="Replace extracted text and attributes with bindings",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation of bundles; 0 or negative for compact output (default: 2)",
    )
    parser.add_argument(
        "--source-root",
        default="app",
        help="Directory asset paths are relative to (default: app)",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Process documents that do not import i18n-behavior.html",
    )
    parser.add_argument("--no-document", action="store_true", help="Do not write documents")
    parser.add_argument("--no-bundles", action="store_true", help="Do not write JSON bundles")
    parser.add_argument("--no-embed", action="store_true", help="Do not embed bundles into templates")
    parser.add_argument(
        "--registry-source",
        action="append",
        default=[],
        help="Attribute repository document (can be repeated)",
    )
    parser.add_argument(
        "--registry-json",
        type=Path,
        default=None,
        help="Seed the attribute registry from a JSON mapping",
    )
    parser.add_argument(
        "--precedence",
        choices=[precedence.value for precedence in RegistryPrecedence],
        default=RegistryPrecedence.TAG_FIRST.value,
        help="Registry lookup order (default: tag-first)",
    )
    parser.add_argument(
        "--build-registry",
        action="store_true",
        help="Only collect inline attribute rules from templates",
    )
    parser.add_argument(
        "--registry-out",
        type=Path,
        default=None,
        help="Write the attribute registry as JSON after processing",
    )
    parser.add_argument(
        "--diagnostics-format",
        choices=[output_format.value for output_format in OutputFormat],
        default=OutputFormat.RUST.value,
        help="Style of the warnings printed after processing (default: rust)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(args)


def _build_options(parsed: argparse.Namespace) -> PreprocessOptions:
    precedence = RegistryPrecedence(parsed.precedence)
    registry = None
    if parsed.registry_json is not None:
        mapping = json.loads(parsed.registry_json.read_text(encoding="utf-8"))
        registry = AttributeRegistry.from_mapping(mapping, precedence=precedence)
    return PreprocessOptions(
        rewrite_bindings=parsed.rewrite,
        format_width=parsed.indent if parsed.indent >= 0 else None,
        source_root=parsed.source_root,
        force_processing=parsed.force,
        suppress_document_output=parsed.no_document,
        suppress_bundle_output=parsed.no_bundles,
        build_registry=parsed.build_registry,
        registry_source_paths=tuple(parsed.registry_source),
        shared_registry=registry,
        embed_bundle=not parsed.no_embed,
        registry_precedence=precedence,
    )


def _write_output(out_dir: Path, output: SourceFile) -> Path:
    target = out_dir / Path(output.path).name
    contents = output.contents
    if isinstance(contents, str):
        contents = contents.encode("utf-8")
    if not isinstance(contents, bytes):
        return target
    target.write_bytes(contents)
    logger.debug("Wrote %s", target)
    return target


def main(args: Sequence[str] | None = None) -> int:
    """Main entry point.

    Args:
        args: Command line arguments (None uses sys.argv)

    Returns:
        Exit code: 0 success, 1 processing error, 2 unreadable input
    """
    parsed = parse_args(args)
    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        options = _build_options(parsed)
    except (OSError, TypeError, ValueError) as e:
        print(f"[ERROR] Cannot read registry: {e}", file=sys.stderr)
        return 2

    preprocessor = Preprocessor(options)
    parsed.out_dir.mkdir(parents=True, exist_ok=True)
    for path in parsed.files:
        try:
            contents = path.read_bytes()
        except OSError as e:
            print(f"[ERROR] Cannot read {path}: {e}", file=sys.stderr)
            return 2
        try:
            outputs = preprocessor.process(SourceFile(str(path), contents))
        except PreprocessError as e:
            print(f"[ERROR] {e}", file=sys.stderr)
            return 1
        for output in outputs:
            _write_output(parsed.out_dir, output)

    if preprocessor.warnings:
        formatter = DiagnosticFormatter(OutputFormat(parsed.diagnostics_format), sanitize=True)
        print(formatter.format_all(w.diagnostic for w in preprocessor.warnings), file=sys.stderr)

    if parsed.registry_out is not None:
        registry = preprocessor.load_registry()
        text = json.dumps(registry.to_dict(), indent=options.format_width or None, ensure_ascii=False)
        parsed.registry_out.write_text(text + "\n", encoding="utf-8")
    return 0
