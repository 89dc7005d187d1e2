"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    """

    @staticmethod
    def invalid_json_attribute(tag: str, attribute: str, value: str, reason: str) -> Diagnostic:
        """Attribute value looked like JSON but did not parse.

        Args:
            tag: Element tag name
            attribute: Attribute name
            value: The raw attribute value
            reason: Parser error description

        Returns:
            Diagnostic for INVALID_JSON_ATTRIBUTE
        """
        msg = f"Invalid JSON at <{tag} {attribute}> with value = {value} ({reason})"
        return Diagnostic(
            code=DiagnosticCode.INVALID_JSON_ATTRIBUTE,
            message=msg,
            hint="Use double-quoted keys and strings, or bind the value instead",
            location=f"<{tag} {attribute}>",
            severity="warning",
        )

    @staticmethod
    def invalid_json_text(tag: str, value: str, reason: str) -> Diagnostic:
        """Raw data element text did not parse as JSON.

        Args:
            tag: Element tag name
            value: The raw text content
            reason: Parser error description

        Returns:
            Diagnostic for INVALID_JSON_TEXT
        """
        msg = f"Invalid JSON in <{tag}> with text = {value} ({reason})"
        return Diagnostic(
            code=DiagnosticCode.INVALID_JSON_TEXT,
            message=msg,
            hint=f"The content of <{tag}> must be a JSON document",
            location=f"<{tag}>",
            severity="warning",
        )

    @staticmethod
    def registry_source_unreadable(path: str, reason: str) -> Diagnostic:
        """Registry source document could not be read.

        Args:
            path: Source path
            reason: Underlying OS error description

        Returns:
            Diagnostic for REGISTRY_SOURCE_UNREADABLE
        """
        msg = f"Cannot read attributes repository {path}: {reason}"
        return Diagnostic(
            code=DiagnosticCode.REGISTRY_SOURCE_UNREADABLE,
            message=msg,
            source_path=path,
            severity="warning",
        )

    @staticmethod
    def registry_container_missing(path: str, container_id: str) -> Diagnostic:
        """Registry source has no repository container.

        Args:
            path: Source path
            container_id: Expected dom-module id

        Returns:
            Diagnostic for REGISTRY_CONTAINER_MISSING
        """
        msg = f"No <dom-module id=\"{container_id}\"> found in {path}"
        return Diagnostic(
            code=DiagnosticCode.REGISTRY_CONTAINER_MISSING,
            message=msg,
            source_path=path,
            severity="warning",
        )

    @staticmethod
    def registry_mapping_invalid(location: str, found: object) -> Diagnostic:
        """Registry JSON mapping has the wrong shape.

        Args:
            location: Where the object was expected ("registry" or a tag name)
            found: The value found instead

        Returns:
            Diagnostic for REGISTRY_MAPPING_INVALID
        """
        msg = f"Expected an object for {location}, got {type(found).__name__}"
        return Diagnostic(
            code=DiagnosticCode.REGISTRY_MAPPING_INVALID,
            message=msg,
            hint='Use {"tag": {"attribute": rule}} with true, a type string or a selector object',
            location=location,
        )

    @staticmethod
    def streaming_not_supported(path: str) -> Diagnostic:
        """Input contents are a stream instead of a buffer.

        Args:
            path: Input file path

        Returns:
            Diagnostic for STREAMING_NOT_SUPPORTED
        """
        return Diagnostic(
            code=DiagnosticCode.STREAMING_NOT_SUPPORTED,
            message="Streaming not supported",
            hint="Read the file into memory before preprocessing",
            source_path=path,
        )

    @staticmethod
    def invalid_encoding(path: str, reason: str) -> Diagnostic:
        """Input bytes are not UTF-8.

        Args:
            path: Input file path
            reason: Decoder error description

        Returns:
            Diagnostic for INVALID_ENCODING
        """
        msg = f"Cannot decode {path} as UTF-8: {reason}"
        return Diagnostic(
            code=DiagnosticCode.INVALID_ENCODING,
            message=msg,
            source_path=path,
        )

    @staticmethod
    def depth_exceeded(max_depth: int) -> Diagnostic:
        """Template nesting exceeded the traversal limit.

        Args:
            max_depth: Configured maximum depth

        Returns:
            Diagnostic for MAX_DEPTH_EXCEEDED
        """
        msg = f"Maximum template nesting depth ({max_depth}) exceeded"
        return Diagnostic(
            code=DiagnosticCode.MAX_DEPTH_EXCEEDED,
            message=msg,
            hint="Split the template into smaller components",
        )
