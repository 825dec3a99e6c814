"""Tests for the stylesheet loader."""

from pathlib import Path

import pytest

from syncat.style import Colour, Setting
from syncat.stylesheet import (
    BranchCheck,
    DirectChild,
    Kind,
    NoChildren,
    ParseError,
    PatternError,
    SelectorError,
    StylesheetError,
    Token,
    TokenPattern,
    Trace,
    load_stylesheet,
    parse_stylesheet,
)

FIXTURES = Path(__file__).parent.parent / "fixtures"


# ---------------------------------------------------------------------------
# Selectors
# ---------------------------------------------------------------------------


class TestSelectors:
    def test_kind(self):
        sheet = parse_stylesheet("comment { color: gray; }")
        rule = sheet.scopes[Kind("comment")]
        assert rule.style.foreground == Setting(Colour.named("gray"))

    def test_descendant_sequence(self):
        sheet = parse_stylesheet("function parameter { color: cyan; }")
        assert Kind("parameter") in sheet.scopes[Kind("function")].scopes

    def test_direct_child(self):
        sheet = parse_stylesheet("function > parameter { color: cyan; }")
        assert DirectChild(Kind("parameter")) in sheet.scopes[Kind("function")].scopes

    def test_nested_rules(self):
        sheet = parse_stylesheet("function { bold: true; > parameter { color: cyan; } }")
        function = sheet.scopes[Kind("function")]
        assert function.style.bold == Setting(True)
        parameter = function.scopes[DirectChild(Kind("parameter"))]
        assert parameter.style.foreground == Setting(Colour.named("cyan"))

    def test_no_children(self):
        sheet = parse_stylesheet("identifier. { underline: true; }")
        assert NoChildren(Kind("identifier")) in sheet.scopes

    def test_direct_no_children(self):
        sheet = parse_stylesheet("call > identifier. { underline: true; }")
        assert DirectChild(NoChildren(Kind("identifier"))) in sheet.scopes[Kind("call")].scopes

    def test_token(self):
        sheet = parse_stylesheet('keyword "fn" { color: purple; }')
        assert Token("fn") in sheet.scopes[Kind("keyword")].scopes

    def test_token_escapes(self):
        sheet = parse_stylesheet(r'string "\"" { color: green; }')
        assert Token('"') in sheet.scopes[Kind("string")].scopes

    def test_escaped_backslash_is_not_an_escape(self):
        sheet = parse_stylesheet(r'a { content: "\\n"; } b { content: "x\ty\n"; }')
        assert sheet.scopes[Kind("a")].style.get_content() == "\\n"
        assert sheet.scopes[Kind("b")].style.get_content() == "x\ty\n"

    def test_pattern(self):
        sheet = parse_stylesheet("NAME /^[A-Z]/ { color: yellow; }")
        assert TokenPattern("^[A-Z]") in sheet.scopes[Kind("NAME")].scopes

    def test_pattern_escaped_slash(self):
        sheet = parse_stylesheet(r"path /a\/b/ { color: yellow; }")
        assert TokenPattern("a/b") in sheet.scopes[Kind("path")].scopes

    def test_branch_check(self):
        sheet = parse_stylesheet('[> "async"] call { italic: true; }')
        check = BranchCheck([DirectChild(Token("async"))])
        assert Kind("call") in sheet.scopes[check].scopes

    def test_selector_list(self):
        sheet = parse_stylesheet("string, char { color: green; }")
        assert Kind("string") in sheet.scopes
        assert Kind("char") in sheet.scopes

    def test_nested_rules_apply_to_every_selector(self):
        sheet = parse_stylesheet("a, b { c { bold: true; } }")
        assert Kind("c") in sheet.scopes[Kind("a")].scopes
        assert Kind("c") in sheet.scopes[Kind("b")].scopes


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------


class TestDeclarations:
    def _style(self, body: str):
        return parse_stylesheet(f"x {{ {body} }}").scopes[Kind("x")].style

    def test_named_colour(self):
        assert self._style("color: red;").foreground == Setting(Colour.named("red"))

    def test_colour_aliases(self):
        assert self._style("foreground: red;").foreground is not None
        assert self._style("colour: red;").foreground is not None

    def test_palette_colour(self):
        assert self._style("color: 208;").foreground == Setting(Colour.fixed(208))

    def test_hex_colour(self):
        assert self._style("background: #ff8800;").background == Setting(Colour.rgb(255, 136, 0))

    def test_rgb_colour(self):
        assert self._style("color: rgb(1, 2, 3);").foreground == Setting(Colour.rgb(1, 2, 3))

    def test_content(self):
        assert self._style('content: "$";').content == Setting("$")

    def test_flags(self):
        style = self._style("bold: true; italic: false;")
        assert style.bold == Setting(True)
        assert style.italic == Setting(False)

    def test_important(self):
        assert self._style("color: red !important;").foreground == Setting(Colour.named("red"), True)

    def test_top_level_declaration_sets_base_style(self):
        sheet = parse_stylesheet("color: white; comment { color: gray; }")
        assert sheet.style.foreground == Setting(Colour.named("white"))

    def test_repeated_rule_merges(self):
        sheet = parse_stylesheet("a { color: red; } a { bold: true; }")
        style = sheet.scopes[Kind("a")].style
        assert style.foreground == Setting(Colour.named("red"))
        assert style.bold == Setting(True)

    def test_important_survives_later_rule(self):
        sheet = parse_stylesheet("a { color: red !important; } a { color: blue; }")
        assert sheet.scopes[Kind("a")].style.foreground.value == Colour.named("red")

    def test_comments_ignored(self):
        sheet = parse_stylesheet("/* leading */ a { /* inner */ color: red; }")
        assert Kind("a") in sheet.scopes


# ---------------------------------------------------------------------------
# End to end
# ---------------------------------------------------------------------------


class TestResolveParsed:
    def test_comment_over_default(self):
        sheet = parse_stylesheet("color: white; comment { color: gray; }")
        style = sheet.resolve(Trace(), [("function", 0), ("comment", 2)], None)
        assert style.foreground.value == Colour.named("gray")

    def test_branch_check_from_source(self):
        sheet = parse_stylesheet('["async"] { color: magenta; }')
        trace = Trace()
        trace.record([("function", 0), ("keyword", 0)], "async")
        style = sheet.resolve(trace, [("function", 0), ("name", 1)], "f")
        assert style.foreground.value == Colour.named("magenta")


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestErrors:
    def test_syntax_error(self):
        with pytest.raises(ParseError) as info:
            parse_stylesheet("comment { color: red; ")
        assert isinstance(info.value, StylesheetError)

    def test_syntax_error_position(self):
        with pytest.raises(ParseError) as info:
            parse_stylesheet("a { color: red; }\nb { color }")
        assert info.value.line == 2

    def test_direct_child_branch_check(self):
        with pytest.raises(SelectorError, match=r"\[> selector\]") as info:
            parse_stylesheet("> [x] { color: red; }")
        assert info.value.line == 1

    def test_no_children_inside_branch_check(self):
        with pytest.raises(SelectorError):
            parse_stylesheet("[x.] y { color: red; }")

    def test_bad_pattern(self):
        with pytest.raises(PatternError):
            parse_stylesheet("/(/ { bold: true; }")

    def test_unknown_property(self):
        with pytest.raises(StylesheetError, match="Unknown style property"):
            parse_stylesheet("a { size: 3; }")

    def test_unknown_colour(self):
        with pytest.raises(StylesheetError, match="colour"):
            parse_stylesheet("a { color: nope; }")

    def test_palette_out_of_range(self):
        with pytest.raises(StylesheetError):
            parse_stylesheet("a { color: 300; }")

    def test_content_needs_string(self):
        with pytest.raises(StylesheetError):
            parse_stylesheet("a { content: red; }")

    def test_flag_needs_boolean(self):
        with pytest.raises(StylesheetError):
            parse_stylesheet('a { bold: "yes"; }')


# ---------------------------------------------------------------------------
# Files and imports
# ---------------------------------------------------------------------------


class TestLoad:
    def test_fixture_with_import(self):
        sheet = load_stylesheet(FIXTURES / "arith.syncat")
        assert sheet.style.foreground == Setting(Colour.named("white"))
        assert Kind("NAME") in sheet.scopes
        assert Kind("LET") in sheet.scopes

    def test_importing_file_overrides_import(self, tmp_path: Path):
        (tmp_path / "base.syncat").write_text("comment { color: gray; bold: true; }")
        main = tmp_path / "main.syncat"
        main.write_text('@import "base.syncat";\ncomment { color: red; }')
        style = load_stylesheet(main).scopes[Kind("comment")].style
        assert style.foreground.value == Colour.named("red")
        assert style.bold == Setting(True)

    def test_import_relative_to_base_dir(self, tmp_path: Path):
        (tmp_path / "base.syncat").write_text("a { bold: true; }")
        sheet = parse_stylesheet('@import "base.syncat";', base_dir=tmp_path)
        assert Kind("a") in sheet.scopes

    def test_circular_import(self, tmp_path: Path):
        (tmp_path / "a.syncat").write_text('@import "b.syncat";')
        (tmp_path / "b.syncat").write_text('@import "a.syncat";')
        with pytest.raises(StylesheetError, match="Circular"):
            load_stylesheet(tmp_path / "a.syncat")

    def test_missing_import(self, tmp_path: Path):
        main = tmp_path / "main.syncat"
        main.write_text('@import "nope.syncat";')
        with pytest.raises(StylesheetError, match="Cannot read"):
            load_stylesheet(main)

    def test_error_carries_path(self, tmp_path: Path):
        bad = tmp_path / "bad.syncat"
        bad.write_text("a { color: ; }")
        with pytest.raises(ParseError) as info:
            load_stylesheet(bad)
        assert info.value.path == bad.resolve()
        assert str(bad.resolve()) in str(info.value)
