"""Configuration loading for pagetop.

Loads settings from TOML config files with sensible defaults.
Search order: explicit --config path → ~/.config/pagetop/config.toml → defaults only.
"""

from __future__ import annotations

import logging
import sys
import tomllib
from pathlib import Path
from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "page_size": 10,
    "disk_path": "/",
    "process_order": "acquisition",
    "log_level": "WARNING",
    "log_file": "",
}

PROCESS_ORDERS = ("acquisition", "pid")

_DEFAULT_PATH = Path.home() / ".config" / "pagetop" / "config.toml"


class ConfigError(ValueError):
    """A configuration value is out of range or of the wrong type."""


def _merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Merge overlay into base, ignoring keys pagetop does not know."""
    merged = dict(base)
    for key, value in overlay.items():
        if key not in base:
            print(f"pagetop: warning: unknown config key {key!r}", file=sys.stderr)
            continue
        merged[key] = value
    return merged


def validate_config(config: dict[str, Any]) -> dict[str, Any]:
    """Check every value, raising ConfigError on the first bad one."""
    page_size = config["page_size"]
    if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size < 1:
        raise ConfigError(f"page_size must be an integer >= 1, got {page_size!r}")
    if not isinstance(config["disk_path"], str) or not config["disk_path"]:
        raise ConfigError(f"disk_path must be a non-empty string, got {config['disk_path']!r}")
    if config["process_order"] not in PROCESS_ORDERS:
        raise ConfigError(
            f"process_order must be one of {', '.join(PROCESS_ORDERS)}, "
            f"got {config['process_order']!r}"
        )
    level = config["log_level"]
    if not isinstance(level, str) or not isinstance(logging.getLevelName(level.upper()), int):
        raise ConfigError(f"log_level must be a logging level name, got {level!r}")
    if not isinstance(config["log_file"], str):
        raise ConfigError(f"log_file must be a string, got {config['log_file']!r}")
    return config


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load configuration, merging user TOML over defaults.

    Args:
        path: Explicit config file path (from --config). If None, tries the
              default location ~/.config/pagetop/config.toml.

    Returns:
        Merged and validated configuration dict.

    Raises:
        SystemExit: If an explicit path doesn't exist, can't be parsed or
                    holds an invalid value.
    """
    if path is not None:
        if not path.is_file():
            print(f"pagetop: config file not found: {path}", file=sys.stderr)
            raise SystemExit(1)
        try:
            user_config = tomllib.loads(path.read_text(encoding="utf-8"))
            return validate_config(_merge(DEFAULT_CONFIG, user_config))
        except tomllib.TOMLDecodeError as e:
            print(f"pagetop: invalid TOML in {path}: {e}", file=sys.stderr)
            raise SystemExit(1) from e
        except ConfigError as e:
            print(f"pagetop: {path}: {e}", file=sys.stderr)
            raise SystemExit(1) from e

    # Try default location silently
    if _DEFAULT_PATH.is_file():
        try:
            user_config = tomllib.loads(_DEFAULT_PATH.read_text(encoding="utf-8"))
            return validate_config(_merge(DEFAULT_CONFIG, user_config))
        except (tomllib.TOMLDecodeError, ConfigError) as e:
            print(
                f"pagetop: warning: ignoring invalid config {_DEFAULT_PATH}: {e}",
                file=sys.stderr,
            )

    return dict(DEFAULT_CONFIG)


def apply_overrides(config: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Apply command-line values that were actually given (not None)."""
    merged = dict(config)
    merged.update({key: value for key, value in overrides.items() if value is not None})
    try:
        return validate_config(merged)
    except ConfigError as e:
        print(f"pagetop: {e}", file=sys.stderr)
        raise SystemExit(1) from e


def dump_default_config() -> str:
    """Return the default configuration as a TOML string."""
    lines = [
        "# pagetop configuration",
        "# Place this file at ~/.config/pagetop/config.toml",
        "",
        f"page_size = {DEFAULT_CONFIG['page_size']}",
        f'disk_path = "{DEFAULT_CONFIG["disk_path"]}"',
        f'# one of: {", ".join(PROCESS_ORDERS)}',
        f'process_order = "{DEFAULT_CONFIG["process_order"]}"',
        f'log_level = "{DEFAULT_CONFIG["log_level"]}"',
        "# empty: log to the Textual devtools console",
        f'log_file = "{DEFAULT_CONFIG["log_file"]}"',
    ]
    return "\n".join(lines) + "\n"
