"""Meta stylesheet: styles for the decorations around rendered source.

Each slot has a built-in default which a user stylesheet can override with a
top-level rule named after the slot, e.g. ``line_ending { content: "¬"; }``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path

from syncat.style import Colour, StyleBuilder, setting
from syncat.stylesheet import Stylesheet, Trace, load_stylesheet

__all__ = ["MetaStylesheet", "load_meta_stylesheet"]

logger = logging.getLogger(__name__)


def _default(content: str, colour: str | None = None) -> StyleBuilder:
    foreground = setting(False, Colour.named(colour)) if colour else None
    return StyleBuilder(foreground=foreground, content=setting(False, content))


@dataclass(frozen=True)
class MetaStylesheet:
    """Resolved styles for line endings, line numbers, VCS markers and the margin."""

    line_ending: StyleBuilder = field(default_factory=lambda: _default("$"))
    line_number: StyleBuilder = field(default_factory=StyleBuilder)
    vcs_addition: StyleBuilder = field(default_factory=lambda: _default("+", "green"))
    vcs_modification: StyleBuilder = field(default_factory=lambda: _default("~", "yellow"))
    vcs_deletion_above: StyleBuilder = field(default_factory=lambda: _default("-", "red"))
    vcs_deletion_below: StyleBuilder = field(default_factory=lambda: _default("_", "red"))
    margin: StyleBuilder = field(default_factory=lambda: _default(" | "))

    @classmethod
    def from_stylesheet(cls, stylesheet: Stylesheet) -> MetaStylesheet:
        """Merge each slot's named top-level rule from *stylesheet* over the defaults."""
        meta = cls()
        updates: dict[str, StyleBuilder] = {}
        for slot in fields(cls):
            override = stylesheet.resolve(Trace(), [(slot.name, 0)], None)
            updates[slot.name] = getattr(meta, slot.name).merge_with(override)
        return replace(meta, **updates)

    def _paint(self, style: StyleBuilder, fallback: str) -> str:
        content = style.get_content()
        return style.paint(content if content is not None else fallback)

    def margin_text(self) -> str:
        return self._paint(self.margin, " | ")

    def added(self) -> str:
        return self._paint(self.vcs_addition, "+")

    def modified(self) -> str:
        return self._paint(self.vcs_modification, "~")

    def removed_above(self) -> str:
        return self._paint(self.vcs_deletion_above, "-")

    def removed_below(self) -> str:
        return self._paint(self.vcs_deletion_below, "_")

    def line_ending_text(self) -> str:
        return self._paint(self.line_ending, "$")

    def line_number_text(self, number: int, width: int) -> str:
        return self.line_number.paint(str(number).rjust(width))


def load_meta_stylesheet(path: Path | None) -> MetaStylesheet:
    """Load the meta stylesheet at *path*, or the defaults when there is none."""
    if path is None or not path.exists():
        return MetaStylesheet()
    logger.debug("loading meta stylesheet %s", path)
    return MetaStylesheet.from_stylesheet(load_stylesheet(path))
