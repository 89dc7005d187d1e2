"""Tests for the diagnostics package.

Python 3.13+.
"""

from __future__ import annotations

import json

import pytest

from i18npreprocess.diagnostics import (
    DepthLimitExceededError,
    Diagnostic,
    DiagnosticCode,
    DiagnosticFormatter,
    ErrorTemplate,
    ExtractionWarning,
    OutputFormat,
    PluginError,
    PreprocessError,
)


class TestDiagnosticFormatter:
    """Rust, simple and JSON output."""

    def test_rust_format(self) -> None:
        diagnostic = ErrorTemplate.invalid_json_attribute("google-chart", "data", "{a}", "bad key")
        text = DiagnosticFormatter().format(diagnostic)

        assert text.splitlines() == [
            "warning[INVALID_JSON_ATTRIBUTE]: Invalid JSON at <google-chart data> with value = {a} (bad key)",
            "  = at: <google-chart data>",
            "  = help: Use double-quoted keys and strings, or bind the value instead",
        ]

    def test_rust_format_source_path(self) -> None:
        text = DiagnosticFormatter().format(ErrorTemplate.streaming_not_supported("app/x.html"))
        assert text.splitlines()[:2] == [
            "error[STREAMING_NOT_SUPPORTED]: Streaming not supported",
            "  --> app/x.html",
        ]

    def test_simple_format(self) -> None:
        formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        assert formatter.format(ErrorTemplate.depth_exceeded(100)) == (
            "MAX_DEPTH_EXCEEDED: Maximum template nesting depth (100) exceeded"
        )

    def test_json_format(self) -> None:
        formatter = DiagnosticFormatter(output_format=OutputFormat.JSON)
        data = json.loads(formatter.format(ErrorTemplate.registry_source_unreadable("attrs.html", "missing")))

        assert data == {
            "code": "REGISTRY_SOURCE_UNREADABLE",
            "code_value": 2001,
            "message": "Cannot read attributes repository attrs.html: missing",
            "severity": "warning",
            "source_path": "attrs.html",
        }

    def test_sanitize(self) -> None:
        formatter = DiagnosticFormatter(OutputFormat.SIMPLE, sanitize=True, max_content_length=10)
        diagnostic = Diagnostic(DiagnosticCode.INVALID_JSON_TEXT, "x" * 50)
        assert formatter.format(diagnostic) == "INVALID_JSON_TEXT: " + "x" * 10 + "..."

    def test_format_all(self) -> None:
        formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        diagnostics = [ErrorTemplate.depth_exceeded(1), ErrorTemplate.depth_exceeded(2)]
        assert formatter.format_all(diagnostics).count("\n\n") == 1


class TestErrors:
    """Exception hierarchy."""

    def test_plain_message(self) -> None:
        error = PreprocessError("boom")

        assert str(error) == "boom"
        assert error.diagnostic is None

    def test_diagnostic_message(self) -> None:
        diagnostic = ErrorTemplate.depth_exceeded(5)
        error = DepthLimitExceededError(diagnostic)

        assert error.diagnostic is diagnostic
        assert str(error) == diagnostic.format_error()
        assert isinstance(error, PreprocessError)

    def test_plugin_error(self) -> None:
        with pytest.raises(PreprocessError) as exc_info:
            raise PluginError("i18n-preprocess", ErrorTemplate.streaming_not_supported("a.html"))
        assert isinstance(exc_info.value, PluginError)
        assert exc_info.value.plugin == "i18n-preprocess"


class TestExtractionWarning:
    """Warning records."""

    def test_format_with_message_id(self) -> None:
        warning = ExtractionWarning(ErrorTemplate.invalid_json_text("json-data", "{", "eof"), "cfg")

        assert warning.code == "INVALID_JSON_TEXT"
        assert warning.format() == "[INVALID_JSON_TEXT] cfg: Invalid JSON in <json-data> with text = { (eof)"

    def test_format_without_message_id(self) -> None:
        warning = ExtractionWarning(Diagnostic(DiagnosticCode.INVALID_JSON_TEXT, "bad"))
        assert warning.format() == "[INVALID_JSON_TEXT] bad"
