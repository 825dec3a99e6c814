"""Turn styled spans into terminal text."""

from __future__ import annotations

from typing import Iterable

from syncat.meta import MetaStylesheet
from syncat.walker import Span

__all__ = ["render"]


def render(
    spans: Iterable[Span],
    meta: MetaStylesheet | None = None,
    line_numbers: bool = False,
    line_endings: bool = False,
) -> str:
    """Paint *spans* and lay them out as lines.

    A span whose style overrides ``content`` is rendered as that content
    instead of its source text.
    """
    meta = meta or MetaStylesheet()
    lines: list[list[str]] = [[]]
    for span in spans:
        content = span.style.get_content()
        text = content if content is not None else span.text
        for i, part in enumerate(text.split("\n")):
            if i > 0:
                lines.append([])
            if part:
                lines[-1].append(span.style.paint(part))

    trailing_newline = len(lines) > 1 and not lines[-1]
    if trailing_newline:
        lines.pop()

    width = len(str(len(lines)))
    out: list[str] = []
    for number, pieces in enumerate(lines, start=1):
        prefix = ""
        if line_numbers:
            prefix = meta.line_number_text(number, width) + meta.margin_text()
        suffix = meta.line_ending_text() if line_endings else ""
        out.append(prefix + "".join(pieces) + suffix)
    return "\n".join(out) + ("\n" if trailing_newline else "")
