"""Finding commands in assistant session logs that could be optimised."""

from __future__ import annotations

import glob
import json
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from syt.registry import Category, Kind, classify_command

_MAX_LINE_BYTES = 1024 * 1024


@dataclass
class CommandCount:
    """A command and how often it was seen."""

    command: str
    count: int = 1
    syt_cmd: str = ""
    saves_pct: int = 0
    category: Category | None = None


@dataclass
class DiscoverResult:
    """Commands found in session logs, classified."""

    supported: list[CommandCount] = field(default_factory=list)
    unsupported: list[CommandCount] = field(default_factory=list)
    already_syt: list[CommandCount] = field(default_factory=list)
    total_cmds: int = 0
    since: datetime | None = None
    files_scanned: int = 0


@dataclass
class Options:
    """What to scan."""

    project_path: str = ""
    since: datetime | None = None
    all_projects: bool = False


class SessionProvider(ABC):
    """Source of session log files."""

    @abstractmethod
    def sessions(
        self, project_path: str, since: datetime | None, all_projects: bool
    ) -> list[str]:
        """Return the paths of session files matching the criteria."""


def _default_base_dir() -> str:
    return str(Path.home() / ".claude" / "projects")


@dataclass
class ClaudeCodeProvider(SessionProvider):
    """Reads sessions stored as ``<base_dir>/<project>/*.jsonl``."""

    base_dir: str = field(default_factory=_default_base_dir)

    def sessions(
        self, project_path: str, since: datetime | None, all_projects: bool
    ) -> list[str]:
        """Return JSONL session files, optionally limited to one project and by age."""
        if not os.path.exists(self.base_dir):
            return []

        base = glob.escape(self.base_dir)
        if all_projects or not project_path:
            pattern = os.path.join(base, "*", "*.jsonl")
        else:
            project = glob.escape(encode_project_path(project_path))
            pattern = os.path.join(base, project, "*.jsonl")
        files = sorted(glob.glob(pattern, include_hidden=True))

        if since is None:
            return files
        threshold = since.timestamp()
        kept = []
        for path in files:
            try:
                mtime = os.stat(path).st_mtime
            except OSError:
                continue
            if mtime > threshold:
                kept.append(path)
        return kept


def encode_project_path(path: str) -> str:
    """Encode a project path the way session directories are named."""
    path = path.replace(os.sep, "/").replace("/", "-")
    return path.removeprefix("-")


class _Mismatch(ValueError):
    """A JSON value has the wrong type for its field."""


def _field(obj: dict[str, Any], key: str, kind: type) -> Any:
    value = obj.get(key)
    if value is None:
        return kind()
    if not isinstance(value, kind):
        raise _Mismatch(key)
    return value


def _bash_commands(entry: dict[str, Any]) -> list[str]:
    entry_type = _field(entry, "type", str)
    name = _field(entry, "name", str)
    tool_input = _field(entry, "tool_input", dict)
    command = _field(tool_input, "command", str)
    _field(tool_input, "description", str)

    message = _field(entry, "message", dict)
    nested = []
    for item in _field(message, "content", list):
        if item is None:
            continue
        if not isinstance(item, dict):
            raise _Mismatch("content")
        nested.append(
            (
                _field(item, "type", str),
                _field(item, "name", str),
                _field(_field(item, "input", dict), "command", str),
            )
        )

    if entry_type == "tool_use" and name == "Bash" and command:
        return [command]
    return [cmd for kind, tool, cmd in nested if kind == "tool_use" and tool == "Bash" and cmd]


def extract_bash_commands(file_path: str | os.PathLike[str]) -> list[str]:
    """Return every Bash command recorded in a JSONL session file.

    Lines that are not valid entries are skipped. Raises OSError if the file
    cannot be read and ValueError if a line exceeds 1 MiB.
    """
    commands: list[str] = []
    with open(file_path, "rb") as fh:
        for raw in fh:
            line = raw.rstrip(b"\n").rstrip(b"\r")
            if len(line) > _MAX_LINE_BYTES:
                raise ValueError(f"{os.fspath(file_path)}: line too long")
            if not line:
                continue
            try:
                entry = json.loads(line)
            except ValueError:
                continue
            if not isinstance(entry, dict):
                continue
            try:
                commands.extend(_bash_commands(entry))
            except _Mismatch:
                continue
    return commands


def _bump(table: dict[str, CommandCount], key: str, make: CommandCount) -> None:
    if key in table:
        table[key].count += 1
    else:
        table[key] = make


def _by_count(table: dict[str, CommandCount]) -> list[CommandCount]:
    return sorted(table.values(), key=lambda c: c.count, reverse=True)


def analyze(provider: SessionProvider, opts: Options) -> DiscoverResult:
    """Scan the provider's session files and classify every Bash command."""
    files = provider.sessions(opts.project_path, opts.since, opts.all_projects)
    result = DiscoverResult(since=opts.since, files_scanned=len(files))

    supported: dict[str, CommandCount] = {}
    unsupported: dict[str, CommandCount] = {}
    already_syt: dict[str, CommandCount] = {}

    for path in files:
        try:
            commands = extract_bash_commands(path)
        except (OSError, ValueError):
            continue
        for cmd in commands:
            result.total_cmds += 1
            c = classify_command(cmd)
            if c.kind is Kind.SUPPORTED:
                key = c.syt_cmd or cmd
                _bump(
                    supported,
                    key,
                    CommandCount(
                        command=cmd,
                        syt_cmd=c.syt_cmd or "",
                        saves_pct=c.saves_pct,
                        category=c.category,
                    ),
                )
            elif c.kind is Kind.IGNORED:
                if c.syt_cmd:
                    _bump(already_syt, cmd, CommandCount(command=cmd))
            else:
                _bump(unsupported, cmd, CommandCount(command=cmd))

    result.supported = _by_count(supported)
    result.unsupported = _by_count(unsupported)
    result.already_syt = _by_count(already_syt)
    return result