"""Saving raw command output so that it can be recovered after a failure."""

from __future__ import annotations

import contextlib
import os
import re
import time
from dataclasses import dataclass
from pathlib import Path

_SLUG_RE = re.compile(r"[^a-z0-9]+")


def make_slug(cmd: str) -> str:
    """Make a safe file-name slug from a command name."""
    slug = _SLUG_RE.sub("_", cmd.lower()).strip("_")[:40]
    return slug or "cmd"


@dataclass
class Tee:
    """Writes raw output to rotating log files."""

    enabled: bool = True
    mode: str = "failures"
    min_size: int = 500
    max_files: int = 20
    max_file_size: int = 1048576
    directory: str = ""

    def save(self, raw: str, cmd_slug: str, exit_code: int) -> str | None:
        """Save ``raw`` if the settings call for it; return the file path or None."""
        if not self.enabled:
            return None
        if exit_code == 0 and self.mode != "always":
            return None

        data = raw.encode("utf-8")
        if len(data) < self.min_size:
            return None

        try:
            os.makedirs(self.directory, exist_ok=True)
        except OSError:
            return None

        filename = f"{int(time.time())}_{make_slug(cmd_slug)}.log"
        file_path = os.path.join(self.directory, filename)

        if len(data) > self.max_file_size:
            note = f"\n[truncated at {self.max_file_size} bytes]"
            data = data[: self.max_file_size] + note.encode("utf-8")

        try:
            Path(file_path).write_bytes(data)
        except OSError:
            return None

        self._rotate()
        return file_path

    def _rotate(self) -> None:
        """Delete the oldest log files beyond ``max_files``."""
        try:
            entries = list(os.scandir(self.directory))
        except OSError:
            return
        names = sorted(
            entry.name
            for entry in entries
            if not entry.is_dir() and entry.name.endswith(".log")
        )
        excess = len(names) - self.max_files
        if excess <= 0:
            return
        for name in names[:excess]:
            with contextlib.suppress(OSError):
                os.remove(os.path.join(self.directory, name))

    def hint(self, file_path: str) -> str:
        """Return the hint line, with the home directory shown as ~."""
        try:
            home = str(Path.home())
        except RuntimeError:
            home = ""
        if home and file_path.startswith(home):
            file_path = "~" + file_path[len(home):]
        return f"[full output: {file_path}]"