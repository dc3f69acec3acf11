"""Tests for the CLI module: arg parsing, exit codes, directions, end-to-end."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from reserializer.cli import CliOptions, build_parser, convert, main

# ---------------------------------------------------------------------------
# Arg parsing via build_parser
# ---------------------------------------------------------------------------


class TestArgParsing:
    def test_input_only(self) -> None:
        ns = build_parser().parse_args(["msg.md"])
        assert ns.input == "msg.md"
        assert ns.output is None
        assert ns.to == "component"
        assert ns.escape is None
        assert ns.masked_links is None

    def test_direction(self) -> None:
        ns = build_parser().parse_args(["msg.json", "--to", "markdown"])
        assert ns.to == "markdown"

    def test_escape_flags(self) -> None:
        assert build_parser().parse_args(["x", "--escape"]).escape is True
        assert build_parser().parse_args(["x", "--no-escape"]).escape is False

    def test_escape_flags_exclusive(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["x", "--escape", "--no-escape"])
        assert exc_info.value.code == 2

    def test_unknown_direction(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["x", "--to", "html"])
        assert exc_info.value.code == 2

    def test_indent(self) -> None:
        assert build_parser().parse_args(["x", "--indent", "2"]).indent == 2


# ---------------------------------------------------------------------------
# convert
# ---------------------------------------------------------------------------


def _options(direction: str = "component", **kwargs: object) -> CliOptions:
    values: dict[str, object] = {
        "input_file": None,
        "output_file": None,
        "direction": direction,
        "escape_markdown": True,
        "masked_links": False,
        "indent": None,
        "debug": False,
    }
    values.update(kwargs)
    return CliOptions(**values)  # type: ignore[arg-type]


class TestConvert:
    def test_markdown_to_component(self) -> None:
        result = convert("**bold**", _options())
        assert json.loads(result) == {"text": "bold", "bold": True}

    def test_component_to_markdown(self) -> None:
        result = convert('{"text": "bold", "bold": true}', _options("markdown"))
        assert result == "**bold**"

    def test_escaped(self) -> None:
        assert convert("**bold**", _options("escaped")) == "\\*\\*bold\\*\\*"

    def test_masked_links(self) -> None:
        source = '{"text": "x", "clickEvent": {"action": "open_url", "value": "https://a.com"}}'
        assert convert(source, _options("markdown", masked_links=True)) == "[x](<https://a.com>)"

    def test_no_escape(self) -> None:
        result = convert('"*raw*"', _options("markdown", escape_markdown=False))
        assert result == "*raw*"

    def test_indent(self) -> None:
        result = convert("hi", _options(indent=2))
        assert result == '{\n  "text": "hi"\n}'

    def test_debug_dumps_ast(self, capsys: pytest.CaptureFixture[str]) -> None:
        convert("**b**", _options(debug=True))
        err = capsys.readouterr().err
        assert "Message" in err
        assert "Style BOLD" in err

    def test_debug_dumps_runs(self, capsys: pytest.CaptureFixture[str]) -> None:
        convert('{"text": "b", "bold": true}', _options("markdown", debug=True))
        assert "Run 0 'b' [bold]" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# End-to-end via main()
# ---------------------------------------------------------------------------


class TestMain:
    def test_file_to_stdout(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        src = tmp_path / "msg.md"
        src.write_text("__u__", encoding="utf-8")
        assert main([str(src)]) == 0
        out = capsys.readouterr().out
        assert json.loads(out) == {"text": "u", "underlined": True}

    def test_output_file(self, tmp_path: Path) -> None:
        src = tmp_path / "msg.json"
        src.write_text('{"text": "x", "italic": true}', encoding="utf-8")
        dest = tmp_path / "out.md"
        assert main([str(src), "--to", "markdown", "-o", str(dest)]) == 0
        assert dest.read_text(encoding="utf-8") == "_x_\n"

    def test_stdin(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("sys.stdin", io.StringIO("~~s~~"))
        assert main(["-", "--to", "escaped"]) == 0
        assert capsys.readouterr().out == "\\~\\~s\\~\\~\n"

    def test_missing_input(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([str(tmp_path / "nope.md")]) == 2
        assert "error:" in capsys.readouterr().err

    def test_bad_json_exit_1(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        src = tmp_path / "msg.json"
        src.write_text("{oops", encoding="utf-8")
        assert main([str(src), "--to", "markdown"]) == 1
        assert "invalid JSON" in capsys.readouterr().err

    def test_bad_config_exit_1(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        (tmp_path / "reserializer.toml").write_text('[discord]\nmasked_links = "yes"\n')
        src = tmp_path / "msg.md"
        src.write_text("x", encoding="utf-8")
        assert main([str(src)]) == 1
        assert "discord.masked_links must be a boolean" in capsys.readouterr().err
