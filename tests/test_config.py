"""Tests for TOML config file loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from reserializer.cli import build_parser, load_config, resolve_options
from reserializer.errors import ConfigError


class TestLoadConfig:
    def test_missing_config_returns_empty(self, tmp_path: Path) -> None:
        assert load_config(None, tmp_path) == {}

    def test_explicit_path(self, tmp_path: Path) -> None:
        cfg = tmp_path / "custom.toml"
        cfg.write_text("[output]\nindent = 4\n")
        assert load_config(cfg, tmp_path) == {"output": {"indent": 4}}

    def test_auto_discover(self, tmp_path: Path) -> None:
        (tmp_path / "reserializer.toml").write_text("[discord]\nmasked_links = true\n")
        assert load_config(None, tmp_path) == {"discord": {"masked_links": True}}

    def test_invalid_toml(self, tmp_path: Path) -> None:
        cfg = tmp_path / "reserializer.toml"
        cfg.write_text("[discord\n")
        with pytest.raises(ConfigError):
            load_config(None, tmp_path)


class TestConfigMerge:
    def _resolve(self, tmp_path: Path, config: str, *flags: str):
        (tmp_path / "reserializer.toml").write_text(config)
        doc = tmp_path / "msg.md"
        doc.write_text("")
        return resolve_options(build_parser().parse_args([str(doc), *flags]))

    def test_defaults(self, tmp_path: Path) -> None:
        opts = self._resolve(tmp_path, "")
        assert opts.escape_markdown is True
        assert opts.masked_links is False
        assert opts.indent is None
        assert opts.debug is False

    def test_config_values(self, tmp_path: Path) -> None:
        opts = self._resolve(
            tmp_path,
            "[discord]\nescape_markdown = false\nmasked_links = true\n"
            "[minecraft]\ndebug = true\n[output]\nindent = 2\n",
        )
        assert opts.escape_markdown is False
        assert opts.masked_links is True
        assert opts.debug is True
        assert opts.indent == 2

    def test_cli_overrides_config(self, tmp_path: Path) -> None:
        opts = self._resolve(
            tmp_path,
            "[discord]\nescape_markdown = false\n[output]\nindent = 2\n",
            "--escape",
            "--indent",
            "4",
        )
        assert opts.escape_markdown is True
        assert opts.indent == 4

    def test_explicit_config_flag(self, tmp_path: Path) -> None:
        other = tmp_path / "other.toml"
        other.write_text("[discord]\nmasked_links = true\n")
        opts = self._resolve(tmp_path, "", "--config", str(other))
        assert opts.masked_links is True

    def test_non_table_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="must be a table"):
            self._resolve(tmp_path, 'discord = "on"\n')

    def test_bad_indent_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="indent"):
            self._resolve(tmp_path, "[output]\nindent = true\n")

    def test_stdin_uses_cwd_config(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "reserializer.toml").write_text("[discord]\nmasked_links = true\n")
        monkeypatch.chdir(tmp_path)
        opts = resolve_options(build_parser().parse_args(["-"]))
        assert opts.input_file is None
        assert opts.masked_links is True
