"""Stylesheet validator: loads a stylesheet and runs all lint rules."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from syncat.stylesheet import Stylesheet, StylesheetError, load_stylesheet
from syncat.validation.diagnostic import Diagnostic, Severity
from syncat.validation.rules import ALL_RULES

RuleFunc = Callable[[Stylesheet], list[Diagnostic]]


def validate(
    sheet: Stylesheet, extra_rules: list[RuleFunc] | None = None
) -> list[Diagnostic]:
    """Run all lint rules against *sheet*.

    Returns the full list of diagnostics (errors, warnings, info).
    """
    rules: list[RuleFunc] = list(ALL_RULES)
    if extra_rules:
        rules.extend(extra_rules)
    diagnostics: list[Diagnostic] = []
    for rule in rules:
        diagnostics.extend(rule(sheet))
    return diagnostics


def validate_file(
    path: Path | str, extra_rules: list[RuleFunc] | None = None
) -> list[Diagnostic]:
    """Load the stylesheet at *path* and lint it.

    A stylesheet that fails to load yields a single ERROR diagnostic.
    """
    try:
        sheet = load_stylesheet(path)
    except StylesheetError as exc:
        return [
            Diagnostic(
                rule=type(exc).__name__,
                severity=Severity.ERROR,
                message=str(exc),
            )
        ]
    return validate(sheet, extra_rules=extra_rules)
