"""Configuration loaded from the config file and environment variables."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from syt.utils import config_dir, data_dir

_DEFAULT_HISTORY_DAYS = 90
_DEFAULT_TEE_MODE = "failures"
_DEFAULT_MIN_SIZE = 500
_DEFAULT_MAX_FILES = 20
_DEFAULT_MAX_FILE_SIZE = 1048576


def _default_tee_dir() -> str:
    return os.path.join(data_dir(), "tee")


@dataclass
class TrackingConfig:
    """SQLite tracking settings."""

    database_path: str = ""
    history_days: int = _DEFAULT_HISTORY_DAYS


@dataclass
class HooksConfig:
    """Hook-related settings."""

    exclude_commands: list[str] = field(default_factory=list)


@dataclass
class TeeConfig:
    """Settings for saving raw output of failed commands."""

    enabled: bool = True
    mode: str = _DEFAULT_TEE_MODE
    min_size: int = _DEFAULT_MIN_SIZE
    max_files: int = _DEFAULT_MAX_FILES
    max_file_size: int = _DEFAULT_MAX_FILE_SIZE
    directory: str = field(default_factory=_default_tee_dir)


@dataclass
class DisplayConfig:
    """Display settings."""

    colors: bool = True
    ultra_compact: bool = False


@dataclass
class Config:
    """Top-level configuration."""

    tracking: TrackingConfig = field(default_factory=TrackingConfig)
    hooks: HooksConfig = field(default_factory=HooksConfig)
    tee: TeeConfig = field(default_factory=TeeConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)


def _compatible(current: Any, value: Any) -> bool:
    if isinstance(current, bool):
        return isinstance(value, bool)
    if isinstance(current, int):
        return isinstance(value, int) and not isinstance(value, bool)
    if isinstance(current, str):
        return isinstance(value, str)
    if isinstance(current, list):
        return isinstance(value, list) and all(isinstance(v, str) for v in value)
    return False


def _merge_section(section: Any, table: dict[str, Any]) -> None:
    for f in fields(section):
        if f.name not in table:
            continue
        value = table[f.name]
        if _compatible(getattr(section, f.name), value):
            setattr(section, f.name, list(value) if isinstance(value, list) else value)


def _apply_document(cfg: Config, doc: dict[str, Any]) -> None:
    for f in fields(cfg):
        table = doc.get(f.name)
        if isinstance(table, dict):
            _merge_section(getattr(cfg, f.name), table)


def _restore_zero_values(cfg: Config) -> None:
    if cfg.tracking.history_days == 0:
        cfg.tracking.history_days = _DEFAULT_HISTORY_DAYS
    tee = cfg.tee
    if not tee.mode:
        tee.mode = _DEFAULT_TEE_MODE
    if tee.min_size == 0:
        tee.min_size = _DEFAULT_MIN_SIZE
    if tee.max_files == 0:
        tee.max_files = _DEFAULT_MAX_FILES
    if tee.max_file_size == 0:
        tee.max_file_size = _DEFAULT_MAX_FILE_SIZE
    if not tee.directory:
        tee.directory = _default_tee_dir()


def _apply_environment(cfg: Config) -> None:
    env = os.environ
    if value := env.get("SYT_DB_PATH", ""):
        cfg.tracking.database_path = value
    if env.get("SYT_TEE") == "0":
        cfg.tee.enabled = False
    if value := env.get("SYT_TEE_DIR", ""):
        cfg.tee.directory = value
    if value := env.get("SYT_TEE_MODE", ""):
        cfg.tee.mode = value
    if env.get("SYT_NO_COLOR") == "1":
        cfg.display.colors = False


def load() -> Config:
    """Read the config file, then apply environment overrides.

    Never raises: any problem with the file leaves the defaults in place.
    """
    cfg = Config()

    path = Path(config_dir()) / "config.toml"
    try:
        raw = path.read_bytes()
    except OSError:
        pass
    else:
        try:
            doc = tomllib.loads(raw.decode("utf-8"))
        except (tomllib.TOMLDecodeError, UnicodeDecodeError):
            doc = {}
        _apply_document(cfg, doc)
        _restore_zero_values(cfg)

    _apply_environment(cfg)

    if cfg.tracking.database_path and not os.path.isabs(cfg.tracking.database_path):
        cfg.tracking.database_path = ""
    if cfg.tee.directory and not os.path.isabs(cfg.tee.directory):
        cfg.tee.directory = _default_tee_dir()

    return cfg