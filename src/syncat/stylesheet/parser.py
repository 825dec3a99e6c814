"""Lark-based loader that compiles stylesheet source into a Stylesheet tree."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from lark import Lark, Token as LarkToken, Transformer
from lark.exceptions import LarkError, UnexpectedInput, VisitError

from syncat.style import FLAGS, Colour, Setting, StyleBuilder
from syncat.stylesheet.errors import ParseError, StylesheetError
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

__all__ = ["parse_stylesheet", "load_stylesheet", "GRAMMAR_PATH"]

logger = logging.getLogger(__name__)

GRAMMAR_PATH = Path(__file__).parent / "grammar.lark"

_COLOUR_PROPERTIES = {
    "color": "foreground",
    "colour": "foreground",
    "foreground": "foreground",
    "background": "background",
}

_RGB_RE = re.compile(r"\d+")
_ESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0"}

_parser: Lark | None = None


def _get_parser() -> Lark:
    global _parser
    if _parser is None:
        _parser = Lark(
            GRAMMAR_PATH.read_text(encoding="utf-8"),
            parser="lalr",
            start="start",
            propagate_positions=True,
        )
    return _parser


def _unquote(raw: str) -> str:
    # Single pass, so an escaped backslash never starts a second escape.
    return _ESCAPE_RE.sub(lambda m: _ESCAPES.get(m.group(1), m.group(1)), raw[1:-1])


def _build_setting(name: str, value: tuple[str, object], important: bool) -> tuple[str, Setting]:
    """Convert one declaration into the StyleBuilder field it sets."""
    kind, raw = value
    if name in _COLOUR_PROPERTIES:
        try:
            if kind == "colour":
                colour = raw
            elif kind == "int":
                colour = Colour.fixed(raw)  # type: ignore[arg-type]
            elif kind in ("name", "hex"):
                colour = Colour.parse(raw)  # type: ignore[arg-type]
            else:
                raise ValueError(f"Expected a colour for '{name}', got {raw!r}")
        except ValueError as exc:
            raise StylesheetError(str(exc)) from exc
        return _COLOUR_PROPERTIES[name], Setting(colour, important)
    if name == "content":
        if kind != "string":
            raise StylesheetError(f"Expected a quoted string for 'content', got {raw!r}")
        return "content", Setting(raw, important)
    if name in FLAGS:
        if kind != "name" or raw not in ("true", "false"):
            raise StylesheetError(f"Expected true or false for '{name}', got {raw!r}")
        return name, Setting(raw == "true", important)
    raise StylesheetError(f"Unknown style property: '{name}'")


# ---------------------------------------------------------------------------
# Intermediate objects produced by the transformer
# ---------------------------------------------------------------------------


@dataclass
class _Import:
    path: str


@dataclass
class _Declaration:
    attribute: str
    setting: Setting


@dataclass
class _Rule:
    selectors: list[tuple[Segment, ...]]
    declarations: list[_Declaration] = field(default_factory=list)
    rules: list[_Rule] = field(default_factory=list)


@dataclass
class _Document:
    imports: list[str]
    sheet: Stylesheet


class StylesheetTransformer(Transformer):  # type: ignore[type-arg]
    """Transform a Lark parse tree into a :class:`Stylesheet`."""

    # ---- values ----

    def string_value(self, items: list[LarkToken]) -> tuple[str, object]:
        return ("string", _unquote(str(items[0])))

    def int_value(self, items: list[LarkToken]) -> tuple[str, object]:
        return ("int", int(items[0]))

    def hex_value(self, items: list[LarkToken]) -> tuple[str, object]:
        return ("hex", str(items[0]))

    def rgb_value(self, items: list[LarkToken]) -> tuple[str, object]:
        red, green, blue = (int(part) for part in _RGB_RE.findall(str(items[0])))
        try:
            return ("colour", Colour.rgb(red, green, blue))
        except ValueError as exc:
            raise StylesheetError(str(exc)) from exc

    def name_value(self, items: list[LarkToken]) -> tuple[str, object]:
        return ("name", str(items[0]))

    def declaration(self, items: list[object]) -> _Declaration:
        name = str(items[0])
        value = items[1]
        important = len(items) > 2
        field_name, setting = _build_setting(name, value, important)  # type: ignore[arg-type]
        return _Declaration(field_name, setting)

    # ---- selectors ----

    def kind(self, items: list[LarkToken]) -> Segment:
        return Kind(str(items[0]))

    def no_children(self, items: list[LarkToken]) -> Segment:
        return NoChildren(Kind(str(items[0])))

    def token(self, items: list[LarkToken]) -> Segment:
        return Token(_unquote(str(items[0])))

    def token_pattern(self, items: list[LarkToken]) -> Segment:
        return TokenPattern(str(items[0])[1:-1].replace("\\/", "/"))

    def direct_child(self, items: list[Segment]) -> Segment:
        return DirectChild(items[0])

    def branch_check(self, items: list[tuple[Segment, ...]]) -> Segment:
        return BranchCheck(items[0])

    def selector(self, items: list[Segment]) -> tuple[Segment, ...]:
        return tuple(items)

    def selector_list(self, items: list[tuple[Segment, ...]]) -> list[tuple[Segment, ...]]:
        return list(items)

    # ---- structure ----

    def rule(self, items: list[object]) -> _Rule:
        rule = _Rule(selectors=items[0])  # type: ignore[arg-type]
        for item in items[1:]:
            if isinstance(item, _Declaration):
                rule.declarations.append(item)
            elif isinstance(item, _Rule):
                rule.rules.append(item)
        return rule

    def import_stmt(self, items: list[LarkToken]) -> _Import:
        return _Import(_unquote(str(items[0])))

    def start(self, items: list[object]) -> _Document:
        sheet = Stylesheet()
        imports: list[str] = []
        for item in items:
            if isinstance(item, _Import):
                imports.append(item.path)
            elif isinstance(item, _Declaration):
                sheet.declare(StyleBuilder(**{item.attribute: item.setting}))
            elif isinstance(item, _Rule):
                _apply_rule(sheet, item)
        return _Document(imports=imports, sheet=sheet)


def _apply_rule(scope: Stylesheet, rule: _Rule) -> None:
    """Apply *rule* and its nested rules beneath *scope*."""
    style = StyleBuilder()
    for declaration in rule.declarations:
        style = style.merge_with(StyleBuilder(**{declaration.attribute: declaration.setting}))
    for selector in rule.selectors:
        target = scope.scope_path(selector)
        target.declare(style)
        for nested in rule.rules:
            _apply_rule(target, nested)


def _parse_document(source: str) -> _Document:
    try:
        tree = _get_parser().parse(source)
    except UnexpectedInput as exc:
        raise ParseError(
            f"Invalid stylesheet syntax: {exc}",
            line=getattr(exc, "line", None),
            column=getattr(exc, "column", None),
        ) from exc
    except LarkError as exc:
        raise ParseError(f"Invalid stylesheet syntax: {exc}") from exc
    try:
        return StylesheetTransformer().transform(tree)
    except VisitError as exc:
        meta = getattr(exc.obj, "meta", None)
        line = getattr(meta, "line", None)
        column = getattr(meta, "column", None)
        orig = exc.orig_exc
        if isinstance(orig, StylesheetError):
            if orig.line is None:
                orig.line, orig.column = line, column
            raise orig from exc
        raise StylesheetError(str(orig), line=line, column=column) from exc


def _resolve_imports(
    document: _Document, base_dir: Path, seen: tuple[Path, ...]
) -> Stylesheet:
    """Merge imported stylesheets (in order) beneath the document's own rules."""
    if not document.imports:
        return document.sheet
    combined = Stylesheet()
    for name in document.imports:
        import_path = (base_dir / name).resolve()
        logger.debug("importing stylesheet %s", import_path)
        combined.merge(_load(import_path, seen))
    return combined.merge(document.sheet)


def _load(path: Path, seen: tuple[Path, ...]) -> Stylesheet:
    if path in seen:
        chain = " -> ".join(str(p) for p in seen + (path,))
        raise StylesheetError(f"Circular stylesheet import: {chain}", path=path)
    try:
        source = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise StylesheetError(f"Cannot read stylesheet: {exc}", path=path) from exc
    try:
        document = _parse_document(source)
    except StylesheetError as exc:
        raise exc.with_path(path)
    return _resolve_imports(document, path.parent, seen + (path,))


def parse_stylesheet(source: str, base_dir: Path | str | None = None) -> Stylesheet:
    """Compile stylesheet *source* into a :class:`Stylesheet`.

    ``@import`` paths are resolved relative to *base_dir* (default: the
    current directory). Raises :class:`StylesheetError` subclasses on
    syntax errors, illegal selectors, bad patterns, or bad declarations.
    """
    document = _parse_document(source)
    directory = Path(base_dir) if base_dir is not None else Path.cwd()
    return _resolve_imports(document, directory, ())


def load_stylesheet(path: Path | str) -> Stylesheet:
    """Load and compile the stylesheet file at *path*, following imports."""
    resolved = Path(path).resolve()
    logger.debug("loading stylesheet %s", resolved)
    return _load(resolved, ())
