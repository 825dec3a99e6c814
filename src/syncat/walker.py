"""Walk a syntax tree, resolving the style of every leaf in visit order."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator

from lark import Token as LarkToken, Tree

from syncat.style import StyleBuilder
from syncat.stylesheet import Stylesheet, Trace
from syncat.stylesheet.trace import PathElement

__all__ = ["Span", "StyledWalk"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Span:
    """A run of source text and the style it should be rendered with."""

    text: str
    style: StyleBuilder


def _leaves(
    tree: Tree, path: tuple[PathElement, ...]
) -> Iterator[tuple[tuple[PathElement, ...], LarkToken]]:
    # Placeholders for unmatched optionals take no sibling index.
    index = 0
    for child in tree.children:
        if isinstance(child, Tree):
            yield from _leaves(child, path + ((str(child.data), index),))
        elif isinstance(child, LarkToken):
            yield path + ((child.type, index),), child
        else:
            continue
        index += 1


class StyledWalk:
    """Styles one syntax tree against a shared, read-only stylesheet.

    Each call to :meth:`spans` builds its own trace, so one stylesheet can
    serve many walks at once.
    """

    def __init__(self, stylesheet: Stylesheet) -> None:
        self.stylesheet = stylesheet

    def spans(self, tree: Tree, source: str) -> Iterator[Span]:
        """Yield styled spans covering *source* from start to end.

        Text between tokens (whitespace, ignored comments) is yielded with
        the stylesheet's base style.
        """
        trace = Trace()
        gap_style = self.stylesheet.style
        offset = 0
        count = 0
        for path, token in _leaves(tree, ((str(tree.data), 0),)):
            text = str(token)
            start = token.start_pos if token.start_pos is not None else offset
            if start > offset:
                yield Span(source[offset:start], gap_style)
            style = self.stylesheet.resolve(trace, path, text)
            yield Span(text, style)
            trace.record(path, text)
            count += 1
            if token.end_pos is not None:
                offset = max(offset, token.end_pos)
        if offset < len(source):
            yield Span(source[offset:], gap_style)
        logger.debug("styled %d tokens", count)
