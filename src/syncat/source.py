"""Parse source files into syntax trees using a Lark grammar."""

from __future__ import annotations

from pathlib import Path

from lark import Lark, Tree
from lark.exceptions import LarkError, UnexpectedInput

__all__ = ["SourceParser", "SourceError"]


class SourceError(Exception):
    """Raised when a source file or its grammar cannot be parsed."""

    def __init__(
        self, message: str, line: int | None = None, column: int | None = None
    ):
        self.line = line
        self.column = column
        super().__init__(message)


class SourceParser:
    """A compiled grammar that turns source text into a full-fidelity Lark tree.

    All tokens are kept (including anonymous literals) and carry their
    source positions, so text the grammar ignores can be recovered from the
    gaps between tokens.
    """

    def __init__(self, grammar: str, start: str = "start", parser: str = "lalr") -> None:
        try:
            self._lark = Lark(
                grammar,
                start=start,
                parser=parser,
                keep_all_tokens=True,
                propagate_positions=True,
            )
        except LarkError as exc:
            raise SourceError(f"Invalid grammar: {exc}") from exc

    @classmethod
    def from_file(cls, path: Path | str, **kwargs: str) -> SourceParser:
        return cls(Path(path).read_text(encoding="utf-8"), **kwargs)

    def parse(self, source: str) -> Tree:
        try:
            return self._lark.parse(source)
        except UnexpectedInput as exc:
            raise SourceError(
                f"Cannot parse source: {exc}",
                line=getattr(exc, "line", None),
                column=getattr(exc, "column", None),
            ) from exc
        except LarkError as exc:
            raise SourceError(f"Cannot parse source: {exc}") from exc
