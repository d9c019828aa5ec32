"""Tests for pagetop.config."""

from __future__ import annotations

import tomllib
from pathlib import Path

import pytest

from pagetop import config as config_module
from pagetop.config import (
    DEFAULT_CONFIG,
    ConfigError,
    apply_overrides,
    dump_default_config,
    load_config,
    validate_config,
)


@pytest.fixture(autouse=True)
def no_user_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the default location somewhere empty."""
    path = tmp_path / "home" / "config.toml"
    monkeypatch.setattr(config_module, "_DEFAULT_PATH", path)
    return path


class TestLoadConfigDefaults:
    def test_defaults_returned_when_no_file(self) -> None:
        cfg = load_config(None)
        assert cfg["page_size"] == 10
        assert cfg["disk_path"] == "/"
        assert cfg["process_order"] == "acquisition"

    def test_all_default_keys_present(self) -> None:
        cfg = load_config(None)
        assert set(cfg.keys()) == set(DEFAULT_CONFIG.keys())

    def test_default_location_used(self, no_user_config: Path) -> None:
        no_user_config.parent.mkdir(parents=True)
        no_user_config.write_text("page_size = 15\n")
        assert load_config(None)["page_size"] == 15

    def test_invalid_default_location_ignored(self, no_user_config: Path, capsys) -> None:
        no_user_config.parent.mkdir(parents=True)
        no_user_config.write_text("page_size = [\n")
        cfg = load_config(None)
        assert cfg == DEFAULT_CONFIG
        assert "ignoring invalid config" in capsys.readouterr().err


class TestTomlOverlay:
    def test_overrides_scalar(self, tmp_path: Path) -> None:
        toml_file = tmp_path / "config.toml"
        toml_file.write_text('page_size = 20\nprocess_order = "pid"\n')
        cfg = load_config(toml_file)
        assert cfg["page_size"] == 20
        assert cfg["process_order"] == "pid"
        # Others remain at defaults
        assert cfg["disk_path"] == "/"

    def test_unknown_key_ignored(self, tmp_path: Path, capsys) -> None:
        toml_file = tmp_path / "config.toml"
        toml_file.write_text("refresh_interval = 5\n")
        cfg = load_config(toml_file)
        assert "refresh_interval" not in cfg
        assert "unknown config key" in capsys.readouterr().err


class TestErrors:
    def test_missing_explicit_path_exits(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exc:
            load_config(tmp_path / "nope.toml")
        assert exc.value.code == 1

    def test_invalid_toml_exits(self, tmp_path: Path) -> None:
        toml_file = tmp_path / "config.toml"
        toml_file.write_text("page_size = = 3\n")
        with pytest.raises(SystemExit):
            load_config(toml_file)

    def test_invalid_value_exits(self, tmp_path: Path, capsys) -> None:
        toml_file = tmp_path / "config.toml"
        toml_file.write_text("page_size = 0\n")
        with pytest.raises(SystemExit):
            load_config(toml_file)
        assert "page_size" in capsys.readouterr().err

    @pytest.mark.parametrize(
        ("key", "value"),
        [
            ("page_size", 0),
            ("page_size", True),
            ("page_size", "10"),
            ("disk_path", ""),
            ("process_order", "cpu"),
            ("log_level", "LOUD"),
            ("log_file", 3),
        ],
    )
    def test_validate_rejects(self, key: str, value: object) -> None:
        with pytest.raises(ConfigError):
            validate_config({**DEFAULT_CONFIG, key: value})


class TestOverrides:
    def test_none_values_ignored(self) -> None:
        cfg = apply_overrides(dict(DEFAULT_CONFIG), {"page_size": None, "disk_path": "/tmp"})
        assert cfg["page_size"] == 10
        assert cfg["disk_path"] == "/tmp"

    def test_bad_override_exits(self) -> None:
        with pytest.raises(SystemExit):
            apply_overrides(dict(DEFAULT_CONFIG), {"page_size": -1})


class TestDumpDefaultConfig:
    def test_valid_toml(self) -> None:
        parsed = tomllib.loads(dump_default_config())
        assert parsed == DEFAULT_CONFIG

    def test_no_refresh_interval(self) -> None:
        assert "interval" not in dump_default_config()
