"""Text and JSON reports of session discovery results."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

from syt.discover import CommandCount, DiscoverResult

_ZERO_TIME = "0001-01-01T00:00:00Z"
_MAX_CMD = 50


def _short(command: str) -> str:
    if len(command) > _MAX_CMD:
        return command[:47] + "..."
    return command


def format_text(result: DiscoverResult) -> str:
    """Format a discovery result as a readable report."""
    parts = [
        "SaveYourTokens — Session Discovery Report\n",
        "━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━\n",
        f"Files scanned:  {result.files_scanned}\n",
        f"Total commands: {result.total_cmds}\n\n",
    ]

    if result.supported:
        parts.append("Commands that could use syt (token savings available):\n")
        parts.extend(
            f"  {_short(c.command):<50}  {c.count:4d}×  → {c.syt_cmd}  ({c.saves_pct}% savings)\n"
            for c in result.supported
        )
        parts.append("\n")

    if result.already_syt:
        parts.append("Already using syt:\n")
        parts.extend(f"  {c.command:<50}  {c.count:4d}×\n" for c in result.already_syt)
        parts.append("\n")

    if 0 < len(result.unsupported) <= 10:
        parts.append("Other commands (not yet supported):\n")
        parts.extend(
            f"  {_short(c.command):<50}  {c.count:4d}×\n" for c in result.unsupported
        )

    return "".join(parts)


def _rfc3339(moment: datetime | None) -> str:
    if moment is None:
        return _ZERO_TIME
    if moment.tzinfo is None:
        moment = moment.astimezone()
    text = moment.strftime("%Y-%m-%dT%H:%M:%S")
    if moment.microsecond:
        text += f".{moment.microsecond:06d}".rstrip("0")
    offset = moment.utcoffset()
    if not offset:
        return text + "Z"
    total = int(offset.total_seconds())
    sign = "+" if total >= 0 else "-"
    hours, minutes = divmod(abs(total) // 60, 60)
    return f"{text}{sign}{hours:02d}:{minutes:02d}"


def _count_dict(c: CommandCount) -> dict[str, Any]:
    return {
        "Command": c.command,
        "Count": c.count,
        "SytCmd": c.syt_cmd,
        "SavesPct": c.saves_pct,
        "Category": str(c.category) if c.category else "",
    }


def _counts(items: list[CommandCount]) -> list[dict[str, Any]] | None:
    return [_count_dict(c) for c in items] or None


def format_json(result: DiscoverResult) -> str:
    """Format a discovery result as indented JSON."""
    doc = {
        "Supported": _counts(result.supported),
        "Unsupported": _counts(result.unsupported),
        "AlreadySyt": _counts(result.already_syt),
        "TotalCmds": result.total_cmds,
        "Since": _rfc3339(result.since),
        "FilesScanned": result.files_scanned,
    }
    text = json.dumps(doc, indent=2, ensure_ascii=False)
    for char, escaped in (
        ("&", "\\u0026"),
        ("<", "\\u003c"),
        (">", "\\u003e"),
        ("\u2028", "\\u2028"),
        ("\u2029", "\\u2029"),
    ):
        text = text.replace(char, escaped)
    return text