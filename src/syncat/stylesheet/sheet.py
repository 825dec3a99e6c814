"""Stylesheet tree and cascade resolution.

A Stylesheet node holds a base style and a mapping from selector segment to
nested Stylesheet. Resolution starts from the base style and folds every
scope over it in canonical segment order, merging each contribution so later
entries override earlier ones attribute by attribute.
"""

from __future__ import annotations

from typing import Iterator, Sequence

from syncat.style import StyleBuilder
from syncat.stylesheet.selector import (
    BranchCheck,
    DirectChild,
    Kind,
    NoChildren,
    Segment,
    Token,
    TokenPattern,
)
from syncat.stylesheet.trace import PathElement, Trace

__all__ = ["Stylesheet"]

_EMPTY_TRACE = Trace()


def _descend(trace: Trace, depth: int) -> Trace:
    found = trace.child(depth)
    # No recorded history at this depth resolves as an empty trace.
    return found if found is not None else _EMPTY_TRACE


class Stylesheet:
    """A compiled stylesheet: a base style plus nested scoped stylesheets.

    Built once by the loader and only read afterwards, so a single instance
    may be shared by concurrent walks.
    """

    __slots__ = ("style", "_scopes")

    def __init__(
        self,
        style: StyleBuilder | None = None,
        scopes: dict[Segment, Stylesheet] | None = None,
    ) -> None:
        self.style = style if style is not None else StyleBuilder()
        self._scopes: dict[Segment, Stylesheet] = {}
        for segment, child in (scopes or {}).items():
            self._scopes[segment] = child
        self._sort()

    # --- construction -------------------------------------------------------

    def _sort(self) -> None:
        self._scopes = dict(sorted(self._scopes.items(), key=lambda item: item[0].sort_key()))

    def scope(self, segment: Segment) -> Stylesheet:
        """Return the nested stylesheet for *segment*, creating it if needed."""
        child = self._scopes.get(segment)
        if child is None:
            child = Stylesheet()
            self._scopes[segment] = child
            self._sort()
        return child

    def scope_path(self, selector: Sequence[Segment]) -> Stylesheet:
        """Return the nested stylesheet reached by following *selector*."""
        node = self
        for segment in selector:
            node = node.scope(segment)
        return node

    def declare(self, style: StyleBuilder) -> None:
        """Merge *style* over this node's base style."""
        self.style = self.style.merge_with(style)

    def merge(self, other: Stylesheet) -> Stylesheet:
        """Deep-merge *other* into this stylesheet; *other* wins on conflicts."""
        self.declare(other.style)
        for segment, child in other._scopes.items():
            self.scope(segment).merge(child)
        return self

    # --- inspection ---------------------------------------------------------

    @property
    def scopes(self) -> dict[Segment, Stylesheet]:
        return dict(self._scopes)

    def walk(self, prefix: tuple[Segment, ...] = ()) -> Iterator[tuple[tuple[Segment, ...], Stylesheet]]:
        """Yield every (selector, stylesheet) pair in the tree, depth first."""
        yield prefix, self
        for segment, child in self._scopes.items():
            yield from child.walk(prefix + (segment,))

    def __len__(self) -> int:
        return len(self._scopes)

    def __repr__(self) -> str:
        return f"Stylesheet(style={self.style!r}, scopes={list(self._scopes)!r})"

    # --- resolution ---------------------------------------------------------

    def resolve(
        self,
        trace: Trace,
        path: Sequence[PathElement],
        token: str | None = None,
    ) -> StyleBuilder:
        """Compute the cascaded style for the node at *path*.

        *path* is the (kind, sibling index) sequence from the root down to
        the node being styled, *token* its text when it is a leaf, and
        *trace* the positions recorded so far during the walk.
        """
        style = self.style
        for segment, child in self._scopes.items():
            style = child._contribute(segment, style, trace, path, token)
        return style

    def _contribute(
        self,
        segment: Segment,
        style: StyleBuilder,
        trace: Trace,
        path: Sequence[PathElement],
        token: str | None,
    ) -> StyleBuilder:
        """Merge this scope's contribution for *segment* into *style*."""
        if isinstance(segment, Kind):
            # Innermost ancestor first, so shallower matches merge later.
            for i in range(len(path) - 1, -1, -1):
                if path[i][0] == segment.name:
                    style = style.merge_with(
                        self.resolve(_descend(trace, i + 1), path[i + 1:], token)
                    )
            return style

        if isinstance(segment, (Token, TokenPattern)):
            # Leaf rules only fire once every ancestor has been consumed.
            if not path and token is not None and segment.matches(token):
                return style.merge_with(self.style)
            return style

        if isinstance(segment, BranchCheck):
            if trace.satisfies(segment.selector):
                return style.merge_with(self.resolve(trace, path, token))
            return style

        if isinstance(segment, NoChildren):
            if path and path[-1][0] == segment.inner.name:  # type: ignore[attr-defined]
                return style.merge_with(self.style)
            return style

        if isinstance(segment, DirectChild):
            return self._contribute_direct(segment.inner, style, trace, path, token)

        raise TypeError(f"Unsupported selector segment: {segment!r}")

    def _contribute_direct(
        self,
        inner: Segment,
        style: StyleBuilder,
        trace: Trace,
        path: Sequence[PathElement],
        token: str | None,
    ) -> StyleBuilder:
        if isinstance(inner, Kind):
            if path and path[0][0] == inner.name:
                return style.merge_with(self.resolve(_descend(trace, 1), path[1:], token))
            return style

        if isinstance(inner, (Token, TokenPattern)):
            if not path and token is not None and inner.matches(token):
                return style.merge_with(self.style)
            return style

        if isinstance(inner, NoChildren):
            if len(path) == 1 and path[0][0] == inner.inner.name:  # type: ignore[attr-defined]
                return style.merge_with(self.style)
            return style

        raise TypeError(f"Unsupported direct child segment: {inner!r}")
