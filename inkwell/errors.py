"""Error types for Inkwell.

Every failure that should abort a build derives from BuildError so the CLI
can report it with the offending file. Filesystem problems are left as the
builtin OSError family and propagate untouched.

Classes:
    InkwellError: Root of the hierarchy.
    BuildError: Build failure tied to an optional source file.
    ParseError: Front matter could not be split or parsed as YAML.
    ValidationError: Front matter parsed but a required field is unusable.
        A ParseError, since the front matter as a whole is rejected.
    RenderError: A page template failed to render.
"""

from __future__ import annotations

from pathlib import Path


class InkwellError(Exception):
    """Base class for all Inkwell errors."""


class BuildError(InkwellError):
    """Error during site build with file context.

    Attributes:
        source_path: Path to the source file that caused the error, if known.
        message: Human-readable error message.
        original_error: The original exception that was caught.
    """

    def __init__(
        self,
        source_path: Path | None,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.original_error = original_error
        if source_path is None:
            super().__init__(message)
        else:
            super().__init__(f"{source_path}: {message}")


class ParseError(BuildError):
    """Malformed front matter or YAML."""


class ValidationError(ParseError):
    """Missing or invalid required metadata."""


class RenderError(BuildError):
    """Template rendering failed for a page."""
