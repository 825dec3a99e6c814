"""Selector segments: the atoms and combinators of a stylesheet rule.

Segments are immutable and hashable so they can key a Stylesheet's scope
mapping. They are totally ordered (variant first, then payload) which fixes
the order in which a stylesheet's scopes are merged during resolution.

Illegal nestings are rejected when a segment is constructed:

- ``NoChildren`` only wraps ``Kind``.
- ``DirectChild`` wraps ``Kind``, ``Token``, ``TokenPattern`` or
  ``NoChildren``. ``> [x]`` must be written ``[> x]``.
- ``BranchCheck`` sequences are non-empty and contain no ``NoChildren``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from syncat.stylesheet.errors import SelectorError
from syncat.stylesheet.patterns import get_or_compile

__all__ = [
    "Segment",
    "Kind",
    "Token",
    "TokenPattern",
    "NoChildren",
    "DirectChild",
    "BranchCheck",
    "format_selector",
]


class Segment:
    """Base class for every selector segment."""

    _rank: int = -1

    def sort_key(self) -> tuple[Any, ...]:
        raise NotImplementedError

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Segment):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Segment):
            return NotImplemented
        return self.sort_key() <= other.sort_key()

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Segment):
            return NotImplemented
        return self.sort_key() > other.sort_key()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Segment):
            return NotImplemented
        return self.sort_key() >= other.sort_key()


@dataclass(frozen=True, eq=True)
class Kind(Segment):
    """Matches a node of the given grammar kind anywhere in the remaining path."""

    name: str
    _rank = 0

    def sort_key(self) -> tuple[Any, ...]:
        return (self._rank, self.name)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, eq=True)
class Token(Segment):
    """Matches a leaf whose text equals ``literal``."""

    literal: str
    _rank = 1

    def sort_key(self) -> tuple[Any, ...]:
        return (self._rank, self.literal)

    def matches(self, token: str) -> bool:
        return token == self.literal

    def __str__(self) -> str:
        escaped = self.literal.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'


@dataclass(frozen=True, eq=True)
class TokenPattern(Segment):
    """Matches a leaf whose text matches the regular expression ``pattern``."""

    pattern: str
    _rank = 2

    def __post_init__(self) -> None:
        # Compile eagerly so bad patterns fail while loading.
        get_or_compile(self.pattern)

    def sort_key(self) -> tuple[Any, ...]:
        return (self._rank, self.pattern)

    def matches(self, token: str) -> bool:
        return get_or_compile(self.pattern).search(token) is not None

    def __str__(self) -> str:
        return f"/{self.pattern}/"


@dataclass(frozen=True, eq=True)
class NoChildren(Segment):
    """Matches ``inner``'s kind only as the last element of the path."""

    inner: Segment
    _rank = 3

    def __post_init__(self) -> None:
        if not isinstance(self.inner, Kind):
            raise SelectorError(
                f"'.' can only follow a node kind, not {self.inner}"
            )

    def sort_key(self) -> tuple[Any, ...]:
        return (self._rank, self.inner.sort_key())

    def __str__(self) -> str:
        return f"{self.inner}."


@dataclass(frozen=True, eq=True)
class DirectChild(Segment):
    """Matches ``inner`` against the nearest unconsumed path element only."""

    inner: Segment
    _rank = 4

    def __post_init__(self) -> None:
        if isinstance(self.inner, BranchCheck):
            raise SelectorError(
                "'>' cannot be applied to a branch check; "
                "use `[> selector]` instead of `> [selector]` for the same effect"
            )
        if isinstance(self.inner, DirectChild):
            raise SelectorError("'>' cannot be applied twice to the same segment")
        if not isinstance(self.inner, (Kind, Token, TokenPattern, NoChildren)):
            raise SelectorError(f"'>' cannot be applied to {self.inner!r}")

    def sort_key(self) -> tuple[Any, ...]:
        return (self._rank, self.inner.sort_key())

    def __str__(self) -> str:
        return f"> {self.inner}"


@dataclass(frozen=True, eq=True, init=False)
class BranchCheck(Segment):
    """Matches when some already visited position satisfies ``selector``.

    Evaluated against the walk's trace; it does not consume the path.
    """

    selector: tuple[Segment, ...]
    _rank = 5

    def __init__(self, selector: Iterable[Segment]):
        object.__setattr__(self, "selector", tuple(selector))
        self.__post_init__()

    def __post_init__(self) -> None:
        if not self.selector:
            raise SelectorError("A branch check must contain at least one segment")
        for segment in self.selector:
            if isinstance(segment, NoChildren) or (
                isinstance(segment, DirectChild) and isinstance(segment.inner, NoChildren)
            ):
                raise SelectorError("'.' cannot be used in a branch check")

    def sort_key(self) -> tuple[Any, ...]:
        return (self._rank, tuple(segment.sort_key() for segment in self.selector))

    def __str__(self) -> str:
        return f"[{format_selector(self.selector)}]"


def format_selector(selector: Sequence[Segment]) -> str:
    """Render a segment sequence back into stylesheet syntax."""
    return " ".join(str(segment) for segment in selector)
