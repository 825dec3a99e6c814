"""Tests for the syncat CLI commands."""
from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from syncat.cli.main import cli
from syncat.config import ENV_CONFIG_DIR

FIXTURES = Path(__file__).parent.parent / "fixtures"
GRAMMAR = str(FIXTURES / "arith.lark")
STYLE = str(FIXTURES / "arith.syncat")
SAMPLE = str(FIXTURES / "sample.arith")


@pytest.fixture()
def runner(tmp_path: Path) -> CliRunner:
    # Point configuration at an empty directory so user files are never read.
    return CliRunner(env={ENV_CONFIG_DIR: str(tmp_path)})


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


class TestCLIGroup:
    def test_help_lists_commands(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "cat" in result.output
        assert "check" in result.output

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


# ---------------------------------------------------------------------------
# cat command
# ---------------------------------------------------------------------------


class TestCatCommand:
    def test_plain_output_matches_source(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["cat", "-g", GRAMMAR, "-s", STYLE, SAMPLE])
        assert result.exit_code == 0, result.output
        assert result.output == Path(SAMPLE).read_text()

    def test_colour_output(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["cat", "-g", GRAMMAR, "-s", STYLE, "--color", SAMPLE])
        assert result.exit_code == 0
        assert "\x1b[" in result.output

    def test_line_numbers(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["cat", "-g", GRAMMAR, "-n", SAMPLE])
        assert result.exit_code == 0
        assert result.output.splitlines()[0] == "1 | let x = 1 + 2;"

    def test_line_endings(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["cat", "-g", GRAMMAR, "-e", SAMPLE])
        assert result.exit_code == 0
        assert result.output.splitlines()[0].endswith(";$")

    def test_meta_stylesheet_from_config(self, tmp_path: Path) -> None:
        style_dir = tmp_path / "style" / "active"
        style_dir.mkdir(parents=True)
        (style_dir / ".syncat").write_text('line_ending { content: "<"; }')
        runner = CliRunner(env={ENV_CONFIG_DIR: str(tmp_path)})
        result = runner.invoke(cli, ["cat", "-g", GRAMMAR, "-e", SAMPLE])
        assert result.exit_code == 0
        assert result.output.splitlines()[0].endswith(";<")

    def test_grammar_from_config(self, tmp_path: Path) -> None:
        grammar_dir = tmp_path / "grammar"
        grammar_dir.mkdir()
        (grammar_dir / "arith.lark").write_text(Path(GRAMMAR).read_text())
        runner = CliRunner(env={ENV_CONFIG_DIR: str(tmp_path)})
        result = runner.invoke(cli, ["cat", SAMPLE])
        assert result.exit_code == 0, result.output
        assert result.output == Path(SAMPLE).read_text()

    def test_multiple_files_keep_order(self, runner: CliRunner, tmp_path: Path) -> None:
        first = tmp_path / "one.arith"
        second = tmp_path / "two.arith"
        first.write_text("let a = 1;\n")
        second.write_text("let b = 2;\n")
        result = runner.invoke(
            cli, ["cat", "-g", GRAMMAR, "-j", "2", str(first), str(second)]
        )
        assert result.exit_code == 0
        assert result.output == "let a = 1;\nlet b = 2;\n"

    def test_missing_grammar(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["cat", SAMPLE])
        assert result.exit_code == 1
        assert "No grammar" in result.output

    def test_invalid_stylesheet_reported_before_output(
        self, runner: CliRunner, tmp_path: Path
    ) -> None:
        bad = tmp_path / "bad.syncat"
        bad.write_text("> [x] { color: red; }")
        result = runner.invoke(cli, ["cat", "-g", GRAMMAR, "-s", str(bad), SAMPLE])
        assert result.exit_code == 1
        assert "Stylesheet error" in result.output
        assert "let x" not in result.output

    def test_unparseable_source(self, runner: CliRunner, tmp_path: Path) -> None:
        broken = tmp_path / "broken.arith"
        broken.write_text("let = ;\n")
        result = runner.invoke(cli, ["cat", "-g", GRAMMAR, str(broken), SAMPLE])
        assert result.exit_code == 1
        assert "broken.arith" in result.output
        assert "let y = max(x, 3);" in result.output


# ---------------------------------------------------------------------------
# check command
# ---------------------------------------------------------------------------


class TestCheckCommand:
    def test_valid_stylesheet(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["check", STYLE])
        assert result.exit_code == 0
        assert "OK: arith.syncat is valid" in result.output

    def test_warnings_do_not_fail(self, runner: CliRunner, tmp_path: Path) -> None:
        sheet = tmp_path / "warn.syncat"
        sheet.write_text("NAME. { bold: true; NUMBER { color: red; } }")
        result = runner.invoke(cli, ["check", str(sheet)])
        assert result.exit_code == 0
        assert "WARNING" in result.output
        assert "0 error(s), 1 warning(s)" in result.output

    def test_errors_fail(self, runner: CliRunner, tmp_path: Path) -> None:
        sheet = tmp_path / "bad.syncat"
        sheet.write_text("a { color: ; }")
        result = runner.invoke(cli, ["check", str(sheet)])
        assert result.exit_code == 1
        assert "ERROR" in result.output
