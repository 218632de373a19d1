import json
import os
import time
from datetime import datetime, timedelta, timezone

import pytest

from syt.discover import (
    ClaudeCodeProvider,
    CommandCount,
    Options,
    SessionProvider,
    analyze,
    encode_project_path,
    extract_bash_commands,
)
from syt.registry import Category


def _direct(cmd):
    return json.dumps({"type": "tool_use", "name": "Bash", "tool_input": {"command": cmd}})


def _nested(*cmds):
    content = [{"type": "tool_use", "name": "Bash", "input": {"command": c}} for c in cmds]
    return json.dumps({"type": "assistant", "message": {"content": content}})


def _write(path, lines):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n")
    return path


class _FixedProvider(SessionProvider):
    def __init__(self, files):
        self.files = files
        self.calls = []

    def sessions(self, project_path, since, all_projects):
        self.calls.append((project_path, since, all_projects))
        return list(self.files)


def test_encode_project_path():
    assert encode_project_path("/home/u/proj") == "home-u-proj"
    assert encode_project_path("relative/dir") == "relative-dir"


def test_extract_direct_and_nested(tmp_path):
    path = _write(
        tmp_path / "s.jsonl",
        [_direct("git log"), "", _nested("ls", "pytest"), "not json", "[1, 2]"],
    )
    assert extract_bash_commands(path) == ["git log", "ls", "pytest"]


def test_extract_skips_other_tools_and_empty_commands(tmp_path):
    lines = [
        json.dumps({"type": "tool_use", "name": "Read", "tool_input": {"command": "x"}}),
        json.dumps({"type": "tool_use", "name": "Bash", "tool_input": {"command": ""}}),
        json.dumps({"message": {"content": [{"type": "text", "name": "Bash"}]}}),
    ]
    assert extract_bash_commands(_write(tmp_path / "s.jsonl", lines)) == []


def test_extract_skips_lines_with_wrong_types(tmp_path):
    lines = [
        json.dumps({"type": "tool_use", "name": "Bash", "tool_input": {"command": 5}}),
        json.dumps({"type": 1, "name": "Bash", "tool_input": {"command": "ls"}}),
        _direct("pwd"),
    ]
    assert extract_bash_commands(_write(tmp_path / "s.jsonl", lines)) == ["pwd"]


def test_extract_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        extract_bash_commands(tmp_path / "missing.jsonl")


def test_sessions_without_base_dir(tmp_path):
    provider = ClaudeCodeProvider(base_dir=str(tmp_path / "absent"))
    assert provider.sessions("", None, True) == []


def test_sessions_all_and_per_project(tmp_path):
    a = _write(tmp_path / "home-u-a" / "1.jsonl", [_direct("ls")])
    b = _write(tmp_path / "home-u-b" / "2.jsonl", [_direct("ls")])
    _write(tmp_path / "home-u-b" / "notes.txt", ["x"])
    provider = ClaudeCodeProvider(base_dir=str(tmp_path))

    assert provider.sessions("", None, False) == sorted([str(a), str(b)])
    assert provider.sessions("/home/u/a", None, False) == [str(a)]
    assert provider.sessions("/home/u/a", None, True) == sorted([str(a), str(b)])


def test_sessions_filters_by_mtime(tmp_path):
    old = _write(tmp_path / "p" / "old.jsonl", [_direct("ls")])
    new = _write(tmp_path / "p" / "new.jsonl", [_direct("ls")])
    past = time.time() - 2 * 24 * 3600
    os.utime(old, (past, past))
    provider = ClaudeCodeProvider(base_dir=str(tmp_path))
    since = datetime.now(timezone.utc) - timedelta(hours=1)
    assert provider.sessions("", since, True) == [str(new)]


def test_analyze_classifies_and_sorts(tmp_path):
    first = _write(
        tmp_path / "a.jsonl",
        [_direct("git log"), _direct("foo"), _direct("syt git log"), _direct("cd /tmp")],
    )
    second = _write(
        tmp_path / "b.jsonl",
        [_nested("git status", "git log", "foo", "foo")],
    )
    provider = _FixedProvider([first, second, tmp_path / "missing.jsonl"])
    since = datetime(2024, 1, 1, tzinfo=timezone.utc)
    result = analyze(provider, Options(project_path="/p", since=since))

    assert provider.calls == [("/p", since, False)]
    assert result.files_scanned == 3
    assert result.total_cmds == 8
    assert result.since == since

    assert [(c.syt_cmd, c.count) for c in result.supported] == [
        ("syt git log", 2),
        ("syt git status", 1),
    ]
    top = result.supported[0]
    assert top.category == Category.GIT
    assert top.saves_pct == 80

    assert result.unsupported == [CommandCount(command="foo", count=3)]
    assert result.already_syt == [CommandCount(command="syt git log", count=1)]


def test_analyze_counts_are_consistent(tmp_path):
    path = _write(tmp_path / "a.jsonl", [_direct(c) for c in ["ls", "ls", "make test", "x"]])
    result = analyze(_FixedProvider([path]), Options())
    counted = sum(c.count for c in result.supported + result.unsupported + result.already_syt)
    assert counted == result.total_cmds
    counts = [c.count for c in result.supported]
    assert counts == sorted(counts, reverse=True)