from syncat.stylesheet.errors import (
    ParseError,
    PatternError,
    SelectorError,
    StylesheetError,
    TraceError,
)
from syncat.stylesheet.selector import (
    BranchCheck,
    DirectChild,
    Kind,
    NoChildren,
    Segment,
    Token,
    TokenPattern,
)
from syncat.stylesheet.sheet import Stylesheet
from syncat.stylesheet.trace import Trace
from syncat.stylesheet.parser import load_stylesheet, parse_stylesheet

__all__ = [
    "parse_stylesheet",
    "load_stylesheet",
    "Stylesheet",
    "Trace",
    "Segment",
    "Kind",
    "Token",
    "TokenPattern",
    "NoChildren",
    "DirectChild",
    "BranchCheck",
    "StylesheetError",
    "ParseError",
    "SelectorError",
    "PatternError",
    "TraceError",
]
