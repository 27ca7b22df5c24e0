"""Exception taxonomy for podfeed.

Malformed documents and malformed templates are fatal for the call that hit
them. A template field that is missing from a record is not an error at all;
the renderer substitutes a visible `<<field>>` marker instead.
"""

from __future__ import annotations


class PodfeedError(Exception):
    """Base error for this package."""


class ConfigError(PodfeedError):
    """Raised when an environment setting cannot be parsed."""


class FetchError(PodfeedError):
    """Raised when a remote document cannot be downloaded."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class MalformedXmlError(PodfeedError):
    """Raised when a feed document is not well-formed XML or not valid UTF-8."""

    def __init__(self, message: str, line: int | None = None, column: int | None = None) -> None:
        if line is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)
        self.line = line
        self.column = column


class TemplateError(PodfeedError, ValueError):
    """Raised when a display pattern has unbalanced or nested braces."""

    def __init__(self, message: str, template: str, position: int) -> None:
        super().__init__(f"{message} at position {position} in pattern {template!r}")
        self.template = template
        self.position = position
