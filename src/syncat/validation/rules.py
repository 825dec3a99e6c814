"""Lint rules for compiled stylesheets.

Each rule is a function taking a Stylesheet and returning a list of
Diagnostic objects describing any issues found.
"""

from __future__ import annotations

from syncat.stylesheet import DirectChild, NoChildren, Stylesheet, Token, TokenPattern
from syncat.stylesheet.selector import Segment, format_selector
from syncat.validation.diagnostic import Diagnostic, Severity


def _is_terminal(segment: Segment) -> bool:
    """Segments that contribute only their own base style, never their scopes."""
    if isinstance(segment, DirectChild):
        segment = segment.inner
    return isinstance(segment, (Token, TokenPattern, NoChildren))


def check_unreachable_scopes(sheet: Stylesheet) -> list[Diagnostic]:
    """Rules nested under a token, pattern or '.' selector can never apply."""
    diagnostics: list[Diagnostic] = []
    for selector, node in sheet.walk():
        if not selector or not _is_terminal(selector[-1]) or not len(node):
            continue
        for segment in node.scopes:
            nested = format_selector(selector + (segment,))
            diagnostics.append(
                Diagnostic(
                    rule="check_unreachable_scopes",
                    severity=Severity.WARNING,
                    message=f"Selector '{nested}' is never matched: "
                    f"'{selector[-1]}' only matches leaves.",
                    selector=nested,
                    fix=f"Move the rule out of '{format_selector(selector)}'.",
                )
            )
    return diagnostics


def check_empty_rules(sheet: Stylesheet) -> list[Diagnostic]:
    """Rules with no declarations and no nested rules have no effect."""
    diagnostics: list[Diagnostic] = []
    for selector, node in sheet.walk():
        if selector and node.style.is_empty() and not len(node):
            text = format_selector(selector)
            diagnostics.append(
                Diagnostic(
                    rule="check_empty_rules",
                    severity=Severity.INFO,
                    message=f"Rule '{text}' declares no styles.",
                    selector=text,
                )
            )
    return diagnostics


ALL_RULES = [
    check_unreachable_scopes,
    check_empty_rules,
]
