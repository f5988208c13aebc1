"""Tests for TOML config file loading."""

from __future__ import annotations

import argparse
from pathlib import Path

import pytest

from nudoc.body import MAX_BODY_LINES
from nudoc.cli import build_parser, load_config, resolve_options
from nudoc.render import OutputFormat


def _options(tmp_path: Path, *extra: str):
    doc = tmp_path / "post.nudoc"
    doc.write_text("")
    ns = build_parser().parse_args([str(doc), *extra])
    return resolve_options(ns)


class TestLoadConfig:
    def test_missing_config_returns_empty(self, tmp_path: Path) -> None:
        assert load_config(None, tmp_path) == {}

    def test_explicit_path(self, tmp_path: Path) -> None:
        cfg = tmp_path / "custom.toml"
        cfg.write_text('format = "text"\n')
        result = load_config(cfg, tmp_path)
        assert result["format"] == "text"

    def test_auto_discover_nudoc_toml(self, tmp_path: Path) -> None:
        cfg = tmp_path / "nudoc.toml"
        cfg.write_text('[render]\ndate_format = "%Y"\n')
        result = load_config(None, tmp_path)
        assert result["render"] == {"date_format": "%Y"}


class TestDefaults:
    def test_no_config(self, tmp_path: Path) -> None:
        opts = _options(tmp_path)
        assert opts.fmt is OutputFormat.HTML
        assert opts.template.date_format == "%Y-%m-%d"
        assert opts.template.tag_url is None
        assert opts.max_body_lines == MAX_BODY_LINES


class TestConfigMerge:
    def test_config_format(self, tmp_path: Path) -> None:
        (tmp_path / "nudoc.toml").write_text('format = "markdown"\n')
        assert _options(tmp_path).fmt is OutputFormat.MARKDOWN

    def test_cli_overrides_config_format(self, tmp_path: Path) -> None:
        (tmp_path / "nudoc.toml").write_text('format = "markdown"\n')
        assert _options(tmp_path, "-f", "text").fmt is OutputFormat.TEXT

    def test_config_render_section(self, tmp_path: Path) -> None:
        (tmp_path / "nudoc.toml").write_text(
            '[render]\ndate_format = "%d %b %Y"\ntag_url = "/tags/{tag}/"\n'
        )
        opts = _options(tmp_path)
        assert opts.template.date_format == "%d %b %Y"
        assert opts.template.tag_url == "/tags/{tag}/"

    def test_cli_overrides_render_section(self, tmp_path: Path) -> None:
        (tmp_path / "nudoc.toml").write_text('[render]\ntag_url = "/tags/{tag}/"\n')
        opts = _options(tmp_path, "--tag-url", "/t/{tag}")
        assert opts.template.tag_url == "/t/{tag}"

    def test_config_max_body_lines(self, tmp_path: Path) -> None:
        (tmp_path / "nudoc.toml").write_text("[parse]\nmax_body_lines = 500\n")
        assert _options(tmp_path).max_body_lines == 500

    def test_cli_overrides_max_body_lines(self, tmp_path: Path) -> None:
        (tmp_path / "nudoc.toml").write_text("[parse]\nmax_body_lines = 500\n")
        assert _options(tmp_path, "--max-body-lines", "20").max_body_lines == 20

    def test_wrongly_typed_values_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "nudoc.toml").write_text("format = 3\n[render]\ndate_format = 1\n")
        opts = _options(tmp_path)
        assert opts.fmt is OutputFormat.HTML
        assert opts.template.date_format == "%Y-%m-%d"
        assert opts.max_body_lines == MAX_BODY_LINES

    @pytest.mark.parametrize("value", ["true", '"many"', "1.5"])
    def test_non_integer_max_body_lines(self, tmp_path: Path, value: str) -> None:
        (tmp_path / "nudoc.toml").write_text(f"[parse]\nmax_body_lines = {value}\n")
        with pytest.raises(argparse.ArgumentTypeError, match="max_body_lines"):
            _options(tmp_path)

    def test_explicit_config_flag(self, tmp_path: Path) -> None:
        cfg = tmp_path / "alt.toml"
        cfg.write_text('format = "text"\n')
        assert _options(tmp_path, "--config", str(cfg)).fmt is OutputFormat.TEXT

    def test_malformed_toml(self, tmp_path: Path) -> None:
        (tmp_path / "nudoc.toml").write_text("format = \n")
        with pytest.raises(argparse.ArgumentTypeError, match="invalid config"):
            _options(tmp_path)
