"""Stylesheet error types."""

from __future__ import annotations

from pathlib import Path


class StylesheetError(Exception):
    """Raised when a stylesheet cannot be loaded or is invalid."""

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
        path: Path | str | None = None,
    ):
        self.message = message
        self.line = line
        self.column = column
        self.path = Path(path) if path is not None else None
        super().__init__(message)

    def with_path(self, path: Path | str) -> StylesheetError:
        """Attach the file the error came from, unless one is already set."""
        if self.path is None:
            self.path = Path(path)
        return self

    def __str__(self) -> str:
        location = ""
        if self.path is not None:
            location = str(self.path)
        if self.line is not None:
            location += f":{self.line}"
            if self.column is not None:
                location += f":{self.column}"
        if location:
            return f"{location}: {self.message}"
        return self.message


class ParseError(StylesheetError):
    """Raised when stylesheet source is not syntactically valid."""


class SelectorError(StylesheetError):
    """Raised when selector segments are nested in an unsupported way."""


class PatternError(StylesheetError):
    """Raised when a token pattern is not a valid regular expression."""

    def __init__(self, message: str, pattern: str, **kwargs: object):
        self.pattern = pattern
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class TraceError(Exception):
    """Raised when a walk records a position beneath an already recorded leaf."""
