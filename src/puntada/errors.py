"""Exception classes for Puntada.

Provides standardized exceptions for error handling throughout Puntada.

Patch failures form their own branch under PatchError. Each subclass names
one outcome category (``kind``) and the HTTP status class a relay should
answer with, so callers can tell a stale identifier from a bad request
without parsing messages.
"""

from __future__ import annotations


class PuntadaError(Exception):
    """Base exception for all Puntada errors.

    Subclass this for specific error categories.
    """

    pass


class ParseError(PuntadaError):
    """Error during source parsing.

    Raised only in strict mode; the default parser recovers from malformed
    markup and records diagnostics instead.
    """

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        col_offset: int | None = None,
        source_file: str | None = None,
    ) -> None:
        """Initialize parse error with optional location.

        Args:
            message: Error description
            lineno: Line number where error occurred (1-indexed)
            col_offset: Column where error occurred (1-indexed)
            source_file: Path to source file (optional)
        """
        self.message = message
        self.lineno = lineno
        self.col_offset = col_offset
        self.source_file = source_file

        location = ""
        if source_file:
            location = f"{source_file}:"
        if lineno is not None:
            location += f"{lineno}:"
            if col_offset is not None:
                location += f"{col_offset}:"
        if location:
            location = location.rstrip(":") + " "

        super().__init__(f"{location}{message}")


class PatchError(PuntadaError):
    """Base class for every patch engine failure.

    Attributes:
        kind: Stable category name reported to callers
        status: HTTP-equivalent status class for the category
    """

    kind: str = "internal_failure"
    status: int = 500

    def __init__(self, message: str, *, file_path: str | None = None) -> None:
        self.message = message
        self.file_path = file_path
        super().__init__(message)


class InvalidIdentifier(PatchError):
    """The wire identifier is not ``path:line:column``."""

    kind = "invalid_identifier"
    status = 400

    def __init__(self, identifier: object, reason: str) -> None:
        self.identifier = identifier
        self.reason = reason
        super().__init__(f"Invalid identifier {identifier!r}: {reason}")


class AccessDenied(PatchError):
    """The target path escapes the project root or is excluded."""

    kind = "access_denied"
    status = 400


class NotFound(PatchError):
    """The target file cannot be read."""

    kind = "not_found"
    status = 404


class TargetNotFound(PatchError):
    """No element starts at the identifier's position.

    The usual cause is a file that changed shape after the identifier was
    stamped. Callers can recover by reloading the preview.
    """

    kind = "target_not_found"
    status = 404

    def __init__(self, file_path: str, lineno: int, col_offset: int) -> None:
        self.lineno = lineno
        self.col_offset = col_offset
        super().__init__(
            f"No element at {file_path}:{lineno}:{col_offset}",
            file_path=file_path,
        )


class NotMutable(PatchError):
    """The element was found but has no direct text child to replace."""

    kind = "not_mutable"
    status = 409


class InternalFailure(PatchError):
    """Parsing, printing or writing failed unexpectedly."""

    kind = "internal_failure"
    status = 500
