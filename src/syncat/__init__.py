"""syncat -- stylesheet-driven syntax highlighting for parsed source code."""

from syncat.style import Colour, Setting, StyleBuilder
from syncat.stylesheet import Stylesheet, Trace, load_stylesheet, parse_stylesheet

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Colour",
    "Setting",
    "StyleBuilder",
    "Stylesheet",
    "Trace",
    "load_stylesheet",
    "parse_stylesheet",
]
