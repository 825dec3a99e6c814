"""Context trace: a shadow of the part of the syntax tree already visited.

A walk records every leaf it renders. Branch-check selectors then ask the
trace whether some earlier position matched a selector sequence. The trace
only grows, and only sees history: positions that have not been recorded
yet do not exist as far as a query is concerned.
"""

from __future__ import annotations

from typing import Sequence

from syncat.stylesheet.errors import SelectorError, TraceError
from syncat.stylesheet.selector import (
    BranchCheck,
    DirectChild,
    Kind,
    NoChildren,
    Segment,
    Token,
    TokenPattern,
)

__all__ = ["Trace", "TraceNode", "TraceLeaf", "PathElement"]

PathElement = tuple[str, int]


class TraceLeaf:
    """A recorded leaf token."""

    __slots__ = ("token",)

    def __init__(self, token: str) -> None:
        self.token = token

    def satisfies(self, selector: Sequence[Segment]) -> bool:
        if not selector:
            return True
        segment = selector[0]
        if isinstance(segment, (Token, TokenPattern)):
            return segment.matches(self.token)
        if isinstance(segment, Kind):
            return False
        if isinstance(segment, DirectChild):
            inner = segment.inner
            if isinstance(inner, (Token, TokenPattern)):
                return inner.matches(self.token)
            if isinstance(inner, Kind):
                return False
            raise SelectorError("'.' cannot be used in a branch check")
        if isinstance(segment, BranchCheck):
            return self.satisfies(segment.selector) and self.satisfies(selector[1:])
        if isinstance(segment, NoChildren):
            raise SelectorError("'.' cannot be used in a branch check")
        raise TypeError(f"Unsupported selector segment: {segment!r}")

    def __repr__(self) -> str:
        return f"TraceLeaf({self.token!r})"


class TraceNode:
    """A recorded internal node of a given kind and its recorded children."""

    __slots__ = ("kind", "trace")

    def __init__(self, kind: str, trace: Trace) -> None:
        self.kind = kind
        self.trace = trace

    def satisfies(self, selector: Sequence[Segment]) -> bool:
        if not selector:
            return True
        segment = selector[0]
        if isinstance(segment, Kind):
            if segment.name == self.kind and self.trace.satisfies(selector[1:]):
                return True
            return self.trace.satisfies(selector)
        if isinstance(segment, (Token, TokenPattern)):
            return self.trace.satisfies(selector)
        if isinstance(segment, DirectChild):
            inner = segment.inner
            if isinstance(inner, Kind):
                return inner.name == self.kind and self.trace.satisfies(selector[1:])
            if isinstance(inner, (Token, TokenPattern)):
                return False
            raise SelectorError("'.' cannot be used in a branch check")
        if isinstance(segment, BranchCheck):
            return self.satisfies(segment.selector) and self.satisfies(selector[1:])
        if isinstance(segment, NoChildren):
            raise SelectorError("'.' cannot be used in a branch check")
        raise TypeError(f"Unsupported selector segment: {segment!r}")

    def record(self, path: Sequence[PathElement], token: str) -> None:
        self.trace.record(path, token)

    def __repr__(self) -> str:
        return f"TraceNode({self.kind!r}, {self.trace!r})"


def _branch(path: Sequence[PathElement], token: str) -> TraceNode | TraceLeaf:
    """Build a fresh chain of nodes for *path* ending in a leaf."""
    if not path:
        return TraceLeaf(token)
    kind = path[0][0]
    return TraceNode(kind, Trace([_branch(path[1:], token)]))


class Trace:
    """The ordered children recorded at one level of the visited tree."""

    __slots__ = ("children",)

    def __init__(self, children: list[TraceNode | TraceLeaf] | None = None) -> None:
        self.children: list[TraceNode | TraceLeaf] = children if children is not None else []

    def record(self, path: Sequence[PathElement], token: str) -> None:
        """Record a leaf with text *token* at the position described by *path*.

        An index already present descends into that child; any other index
        appends a new branch. Recording beneath a leaf raises TraceError.
        """
        if not path:
            self.children.append(TraceLeaf(token))
            return
        index = path[0][1]
        if index < len(self.children):
            child = self.children[index]
            if isinstance(child, TraceLeaf):
                raise TraceError(
                    f"Cannot record {token!r} beneath leaf {child.token!r}"
                )
            child.record(path[1:], token)
        else:
            self.children.append(_branch(path, token))

    def satisfies(self, selector: Sequence[Segment]) -> bool:
        """True if some recorded position satisfies the selector sequence."""
        if not selector:
            return True
        return any(child.satisfies(selector) for child in self.children)

    def child(self, depth: int) -> Trace | None:
        """The trace *depth* levels down along the most recently recorded branch."""
        trace = self
        for _ in range(depth):
            if not trace.children:
                return None
            last = trace.children[-1]
            if not isinstance(last, TraceNode):
                return None
            trace = last.trace
        return trace

    def __len__(self) -> int:
        return len(self.children)

    def __repr__(self) -> str:
        return f"Trace({self.children!r})"
