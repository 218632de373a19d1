"""Text helpers and platform directory lookup."""

from __future__ import annotations

import os
import re
import sys
from pathlib import Path

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*[a-zA-Z]")

_APP_NAME = "syt"


def strip_ansi(s: str) -> str:
    """Remove all ANSI escape sequences from ``s``."""
    return _ANSI_RE.sub("", s)


def truncate(s: str, max_len: int) -> str:
    """Shorten ``s`` to ``max_len`` characters, ending in "..." when cut."""
    if len(s) <= max_len:
        return s
    if max_len <= 3:
        return s[:max_len]
    return s[: max_len - 3] + "..."


def count_tokens(s: str) -> int:
    """Approximate a token count by splitting on whitespace."""
    return len(s.split())


def format_tokens(n: int) -> str:
    """Format ``n`` as "1.2M", "59.2K" or "694"."""
    if n >= 1_000_000:
        return f"{n / 1_000_000:.1f}M"
    if n >= 1_000:
        return f"{n / 1_000:.1f}K"
    return str(n)


def format_savings_pct(pct: float) -> str:
    """Format a savings percentage as "87.3%"."""
    return f"{pct:.1f}%"


def combine_output(stdout: str, stderr: str) -> str:
    """Join stdout and stderr with a newline, skipping empty parts."""
    if not stderr:
        return stdout
    if not stdout:
        return stderr
    return f"{stdout}\n{stderr}"


def _windows_app_data() -> str:
    app_data = os.environ.get("APPDATA", "")
    if not app_data:
        app_data = os.path.join(str(Path.home()), "AppData", "Roaming")
    return app_data


def _platform_dir(xdg_var: str, fallback: tuple[str, ...]) -> str:
    if sys.platform.startswith("win"):
        return os.path.join(_windows_app_data(), _APP_NAME)
    if sys.platform == "darwin":
        return os.path.join(str(Path.home()), "Library", "Application Support", _APP_NAME)
    xdg = os.environ.get(xdg_var, "")
    if xdg:
        return os.path.join(xdg, _APP_NAME)
    return os.path.join(str(Path.home()), *fallback, _APP_NAME)


def data_dir() -> str:
    """Return the platform data directory for the application."""
    return _platform_dir("XDG_DATA_HOME", (".local", "share"))


def config_dir() -> str:
    """Return the platform configuration directory for the application."""
    return _platform_dir("XDG_CONFIG_HOME", (".config",))