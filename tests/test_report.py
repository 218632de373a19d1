import json
from datetime import datetime, timezone

from syt.discover import CommandCount, DiscoverResult
from syt.registry import Category
from syt.report import format_json, format_text


def _result(**kwargs):
    base = dict(
        supported=[
            CommandCount("git log", 4, "syt git log", 80, Category.GIT),
        ],
        unsupported=[CommandCount("foo --bar", 2)],
        already_syt=[CommandCount("syt ls", 1)],
        total_cmds=7,
        files_scanned=2,
    )
    base.update(kwargs)
    return DiscoverResult(**base)


def test_text_header_and_counts():
    text = format_text(_result())
    lines = text.splitlines()
    assert lines[0] == "SaveYourTokens — Session Discovery Report"
    assert "Files scanned:  2" in lines
    assert "Total commands: 7" in lines


def test_text_sections():
    text = format_text(_result())
    assert "Commands that could use syt (token savings available):" in text
    assert "→ syt git log  (80% savings)" in text
    assert "Already using syt:" in text
    assert "Other commands (not yet supported):" in text
    supported_line = next(line for line in text.splitlines() if "syt git log" in line)
    assert supported_line.startswith("  git log ")


def test_text_truncates_long_commands():
    long_cmd = "x" * 60
    text = format_text(_result(supported=[CommandCount(long_cmd, 1, "syt x", 60)]))
    assert "x" * 47 + "..." in text
    assert "x" * 48 not in text


def test_text_hides_many_unsupported():
    many = [CommandCount(f"tool{i}", 1) for i in range(11)]
    text = format_text(_result(unsupported=many))
    assert "Other commands" not in text
    assert "tool0" not in text


def test_text_empty_result():
    text = format_text(DiscoverResult())
    assert "Files scanned:  0" in text
    assert "Already using syt" not in text
    assert "Commands that could use syt" not in text


def test_json_round_trip():
    since = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    doc = json.loads(format_json(_result(since=since)))
    assert doc["TotalCmds"] == 7
    assert doc["FilesScanned"] == 2
    assert doc["Since"] == "2024-01-02T03:04:05Z"
    assert doc["Supported"] == [
        {
            "Command": "git log",
            "Count": 4,
            "SytCmd": "syt git log",
            "SavesPct": 80,
            "Category": "git",
        }
    ]
    assert doc["Unsupported"][0]["Category"] == ""
    assert doc["AlreadySyt"][0]["Command"] == "syt ls"


def test_json_empty_lists_are_null_and_zero_time():
    doc = json.loads(format_json(DiscoverResult()))
    assert doc["Supported"] is None
    assert doc["Unsupported"] is None
    assert doc["AlreadySyt"] is None
    assert doc["Since"] == "0001-01-01T00:00:00Z"


def test_json_escapes_html_characters():
    out = format_json(_result(unsupported=[CommandCount("a<b && c>d", 1)]))
    assert "<" not in out
    assert ">" not in out
    assert "&" not in out
    assert json.loads(out)["Unsupported"][0]["Command"] == "a<b && c>d"


def test_json_is_indented():
    out = format_json(DiscoverResult())
    assert out.startswith("{\n  ")