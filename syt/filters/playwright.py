"""Condensing Playwright test output to failures and the summary."""

from __future__ import annotations

import re

from syt.utils import combine_output, strip_ansi

_FAIL_RE = re.compile(r"^\s+\d+\)\s+", re.ASCII | re.IGNORECASE)
_SUMMARY_RE = re.compile(r"(\d+\s+passed|\d+\s+failed)", re.ASCII | re.IGNORECASE)

_PASS_MARK = "✓"
_BLOCK_MIN_LINES = 3


def filter_playwright(stdout: str, stderr: str) -> str:
    """Return the failure blocks and summary lines of a Playwright run."""
    combined = strip_ansi(combine_output(stdout, stderr))

    fail_blocks: list[list[str]] = []
    summary_lines: list[str] = []
    current: list[str] | None = None
    in_fail = False
    pass_count = 0

    for line in combined.split("\n"):
        stripped = line.strip()

        if _SUMMARY_RE.search(line) and ("passed" in line or "failed" in line):
            summary_lines.append(stripped)
            if in_fail and current is not None:
                fail_blocks.append(current)
                current = None
                in_fail = False
            continue

        if _FAIL_RE.match(line):
            if current is not None:
                fail_blocks.append(current)
            in_fail = True
            current = [stripped]
            continue

        if _PASS_MARK in line or "passed" in line:
            pass_count += 1
            continue

        if in_fail and current is not None:
            if not stripped and len(current) > _BLOCK_MIN_LINES:
                fail_blocks.append(current)
                current = None
                in_fail = False
            else:
                current.append(stripped)

    if current is not None:
        fail_blocks.append(current)

    if not fail_blocks:
        return f"{pass_count} tests passed ✓\n"

    parts = ["".join(f"{line}\n" for line in block) + "\n" for block in fail_blocks]
    parts.extend(f"{line}\n" for line in summary_lines)
    return "".join(parts)