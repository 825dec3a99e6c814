"""CLI command: syncat check -- load and lint a stylesheet."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from syncat.validation import Severity, validate_file


@click.command()
@click.argument("stylesheet", type=click.Path(exists=True, dir_okay=False))
def check(stylesheet: str) -> None:
    """Load and lint a stylesheet file.

    Prints diagnostics (errors, warnings, info) and exits with code 0 if
    no errors are found, or code 1 if there are errors.
    """
    path = Path(stylesheet)
    diagnostics = validate_file(path)

    if not diagnostics:
        click.echo(f"OK: {path.name} is valid (0 diagnostics)")
        sys.exit(0)

    errors = [d for d in diagnostics if d.severity is Severity.ERROR]
    warnings = [d for d in diagnostics if d.severity is Severity.WARNING]
    infos = [d for d in diagnostics if d.severity is Severity.INFO]

    for diag in diagnostics:
        click.echo(str(diag))

    click.echo()
    click.echo(
        f"Summary: {len(errors)} error(s), {len(warnings)} warning(s), {len(infos)} info"
    )

    if errors:
        sys.exit(1)
    sys.exit(0)
