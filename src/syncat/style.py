"""Style values: colours, settings, and the mergeable StyleBuilder."""

from __future__ import annotations

import re
from dataclasses import dataclass, fields, replace
from typing import Any

import click

__all__ = ["Colour", "Setting", "StyleBuilder", "setting", "FLAGS"]

# Stylesheet colour names -> click colour names.
_NAMED_COLOURS: dict[str, str] = {
    "black": "black",
    "red": "red",
    "green": "green",
    "yellow": "yellow",
    "blue": "blue",
    "purple": "magenta",
    "magenta": "magenta",
    "cyan": "cyan",
    "white": "white",
    "brblack": "bright_black",
    "brred": "bright_red",
    "brgreen": "bright_green",
    "bryellow": "bright_yellow",
    "brblue": "bright_blue",
    "brpurple": "bright_magenta",
    "brmagenta": "bright_magenta",
    "brcyan": "bright_cyan",
    "brwhite": "bright_white",
    "gray": "bright_black",
    "grey": "bright_black",
}

_HEX_RE = re.compile(r"^#([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")

# Boolean text attributes understood by click.style.
FLAGS = ("bold", "dim", "italic", "underline", "strikethrough", "blink", "reverse")


@dataclass(frozen=True)
class Colour:
    """A terminal colour: a named colour, a 256-palette index, or true colour."""

    value: str | int | tuple[int, int, int]

    @classmethod
    def named(cls, name: str) -> Colour:
        key = name.lower()
        if key not in _NAMED_COLOURS:
            raise ValueError(f"Unknown colour name: {name!r}")
        return cls(key)

    @classmethod
    def fixed(cls, index: int) -> Colour:
        if not 0 <= index <= 255:
            raise ValueError(f"Palette colour out of range (0-255): {index}")
        return cls(index)

    @classmethod
    def rgb(cls, red: int, green: int, blue: int) -> Colour:
        for channel in (red, green, blue):
            if not 0 <= channel <= 255:
                raise ValueError(f"RGB channel out of range (0-255): {channel}")
        return cls((red, green, blue))

    @classmethod
    def parse(cls, raw: str | int) -> Colour:
        """Build a colour from a name, a palette index, or a ``#rrggbb`` string."""
        if isinstance(raw, int):
            return cls.fixed(raw)
        match = _HEX_RE.match(raw)
        if match:
            return cls.rgb(*(int(part, 16) for part in match.groups()))
        return cls.named(raw)

    def to_click(self) -> str | int | tuple[int, int, int]:
        if isinstance(self.value, str):
            return _NAMED_COLOURS[self.value]
        return self.value


@dataclass(frozen=True)
class Setting:
    """A single declared attribute value.

    An important setting is only overridden by another important setting.
    """

    value: Any
    important: bool = False


def setting(important: bool, value: Any) -> Setting:
    return Setting(value=value, important=important)


@dataclass(frozen=True)
class StyleBuilder:
    """An overridable bag of style attributes.

    Every attribute is either unset (``None``) or a :class:`Setting`.
    """

    foreground: Setting | None = None
    background: Setting | None = None
    content: Setting | None = None
    bold: Setting | None = None
    dim: Setting | None = None
    italic: Setting | None = None
    underline: Setting | None = None
    strikethrough: Setting | None = None
    blink: Setting | None = None
    reverse: Setting | None = None

    def merge_with(self, other: StyleBuilder) -> StyleBuilder:
        """Return a builder where every attribute set on *other* overrides this one."""
        updates: dict[str, Setting] = {}
        for f in fields(self):
            theirs = getattr(other, f.name)
            if theirs is None:
                continue
            ours = getattr(self, f.name)
            if ours is not None and ours.important and not theirs.important:
                continue
            updates[f.name] = theirs
        if not updates:
            return self
        return replace(self, **updates)

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def get_content(self) -> str | None:
        """The literal content override, if any."""
        if self.content is None:
            return None
        return self.content.value

    def build(self) -> dict[str, Any]:
        """Keyword arguments for :func:`click.style`."""
        kwargs: dict[str, Any] = {}
        if self.foreground is not None:
            kwargs["fg"] = self.foreground.value.to_click()
        if self.background is not None:
            kwargs["bg"] = self.background.value.to_click()
        for flag in FLAGS:
            value = getattr(self, flag)
            if value is not None:
                kwargs[flag] = bool(value.value)
        return kwargs

    def paint(self, text: str) -> str:
        kwargs = self.build()
        if not kwargs or not text:
            return text
        return click.style(text, **kwargs)
