"""CLI command: syncat cat -- print source files with syntax highlighting."""

from __future__ import annotations

import logging
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import click

from syncat.config import SyncatConfig
from syncat.meta import MetaStylesheet, load_meta_stylesheet
from syncat.render import render
from syncat.source import SourceError, SourceParser
from syncat.stylesheet import Stylesheet, StylesheetError, load_stylesheet
from syncat.walker import StyledWalk

logger = logging.getLogger(__name__)


def _extension(path: Path) -> str:
    return path.suffix.lstrip(".") or path.name


def _highlight(
    path: Path,
    parser: SourceParser,
    stylesheet: Stylesheet,
    meta: MetaStylesheet,
    line_numbers: bool,
    line_endings: bool,
) -> str:
    source = path.read_text(encoding="utf-8")
    tree = parser.parse(source)
    spans = StyledWalk(stylesheet).spans(tree, source)
    return render(spans, meta, line_numbers=line_numbers, line_endings=line_endings)


@click.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--grammar", "-g", type=click.Path(exists=True, dir_okay=False), help="Lark grammar used to parse the files")
@click.option("--style", "-s", type=click.Path(exists=True, dir_okay=False), help="Stylesheet to apply")
@click.option("--line-numbers", "-n", is_flag=True, help="Show line numbers")
@click.option("--line-endings", "-e", is_flag=True, help="Mark the end of every line")
@click.option("--jobs", "-j", type=click.IntRange(min=1), default=None, help="Files to style in parallel")
@click.option("--color/--no-color", default=None, help="Force or disable colour output")
def cat(
    files: tuple[str, ...],
    grammar: str | None,
    style: str | None,
    line_numbers: bool,
    line_endings: bool,
    jobs: int | None,
    color: bool | None,
) -> None:
    """Print FILES with syntax highlighting.

    Each file is parsed with --grammar (or the grammar configured for its
    extension) and styled with --style (or the active stylesheet for its
    extension). Stylesheets are loaded and checked before anything is
    printed.
    """
    config = SyncatConfig.from_env()
    paths = [Path(f) for f in files]

    # Load every grammar and stylesheet up front so errors abort early.
    parsers: dict[Path, SourceParser] = {}
    sheets: dict[Path, Stylesheet] = {}
    jobs_for: list[tuple[Path, SourceParser, Stylesheet]] = []
    empty = Stylesheet()
    try:
        meta = load_meta_stylesheet(config.meta_file)
        for path in paths:
            ext = _extension(path)
            grammar_path = Path(grammar) if grammar else config.grammar_for(ext)
            if grammar_path is None:
                click.echo(f"No grammar for {path} (use --grammar)", err=True)
                sys.exit(1)
            if grammar_path not in parsers:
                parsers[grammar_path] = SourceParser.from_file(grammar_path)
            style_path = Path(style) if style else config.stylesheet_for(ext)
            sheet = empty
            if style_path is not None:
                if style_path not in sheets:
                    sheets[style_path] = load_stylesheet(style_path)
                sheet = sheets[style_path]
            jobs_for.append((path, parsers[grammar_path], sheet))
    except StylesheetError as exc:
        click.echo(f"Stylesheet error: {exc}", err=True)
        sys.exit(1)
    except SourceError as exc:
        click.echo(f"Grammar error: {exc}", err=True)
        sys.exit(1)

    def _run(job: tuple[Path, SourceParser, Stylesheet]) -> tuple[Path, str | None, str | None]:
        path, parser, sheet = job
        try:
            return path, _highlight(path, parser, sheet, meta, line_numbers, line_endings), None
        except (SourceError, OSError, UnicodeDecodeError) as exc:
            return path, None, str(exc)

    workers = jobs or config.jobs
    logger.debug("styling %d file(s) with %d worker(s)", len(jobs_for), workers)
    failed = False
    with ThreadPoolExecutor(max_workers=workers) as pool:
        for path, output, error in pool.map(_run, jobs_for):
            if error is not None:
                failed = True
                click.echo(f"{path}: {error}", err=True)
                continue
            click.echo(output, nl=False, color=color)

    if failed:
        sys.exit(1)
