from __future__ import annotations

import stat
from pathlib import Path
from typing import Any

import yaml

from ptail.config.schema import DEFAULT_LINES, TailConfig, TailDefaults
from ptail.selector.parse import parse_selection
from ptail.util.errors import ConfigError, InvalidSelectorError

_ALLOWED_KEYS = {"lines", "bytes", "quiet"}


def _count_text(name: str, value: Any) -> str | None:
    # YAML resolves +2, 0x10 and 1_000 to ints, losing the sign and the spelling.
    if value is None:
        return None
    if isinstance(value, str) and value.strip():
        return value
    raise ConfigError(f"{name} must be a quoted string such as \"+5\"")


def load_defaults(path: Path) -> TailDefaults:
    try:
        meta = path.stat()
    except FileNotFoundError as exc:
        raise ConfigError(f"config file not found: {path}") from exc
    except (OSError, RuntimeError) as exc:
        raise ConfigError(f"failed to read config file: {path}") from exc
    if not stat.S_ISREG(meta.st_mode):
        raise ConfigError(f"config file must be a regular file: {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except UnicodeError as exc:
        raise ConfigError(f"failed to decode config file as utf-8: {path}") from exc
    except OSError as exc:
        raise ConfigError(f"failed to read config file: {path}") from exc

    try:
        raw = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise ConfigError(f"failed to parse yaml: {exc}") from exc

    if raw is None:
        return TailDefaults()
    if not isinstance(raw, dict):
        raise ConfigError("config root must be a mapping")
    if any(not isinstance(key, str) for key in raw):
        raise ConfigError("config keys must be strings")
    unknown = set(raw.keys()) - _ALLOWED_KEYS
    if unknown:
        raise ConfigError(f"config contains unknown fields: {sorted(unknown)}")

    quiet = raw.get("quiet")
    if quiet is not None and not isinstance(quiet, bool):
        raise ConfigError("quiet must be a boolean")

    defaults = TailDefaults(
        lines=_count_text("lines", raw.get("lines")),
        bytes=_count_text("bytes", raw.get("bytes")),
        quiet=quiet,
    )
    if defaults.lines is not None and defaults.bytes is not None:
        raise ConfigError("lines and bytes cannot both be set")
    return defaults


def merge_options(
    defaults: TailDefaults, lines: str | None, bytes_: str | None, quiet: bool
) -> tuple[str | None, str | None, bool]:
    """Apply command-line options over file defaults; an explicit mode replaces the other."""
    if lines is not None and bytes_ is not None:
        raise ConfigError("--lines and --bytes cannot be used together")
    if lines is None and bytes_ is None:
        lines, bytes_ = defaults.lines, defaults.bytes
    return lines, bytes_, quiet or bool(defaults.quiet)


def build_config(
    files: list[str], lines: str | None, bytes_: str | None, quiet: bool = False
) -> TailConfig:
    if lines is not None and bytes_ is not None:
        raise ConfigError("--lines and --bytes cannot be used together")
    try:
        line_selection = parse_selection(DEFAULT_LINES if lines is None else lines)
    except InvalidSelectorError as exc:
        raise ConfigError(f"illegal line count -- {exc.text}") from exc
    byte_selection = None
    if bytes_ is not None:
        try:
            byte_selection = parse_selection(bytes_)
        except InvalidSelectorError as exc:
            raise ConfigError(f"illegal byte count -- {exc.text}") from exc
    return TailConfig(files=list(files), lines=line_selection, bytes=byte_selection, quiet=quiet)
