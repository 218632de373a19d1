"""Condensing vitest output to failures and the summary."""

from __future__ import annotations

import re

from syt.utils import combine_output, strip_ansi

_FLAGS = re.ASCII | re.IGNORECASE
_FAIL_RE = re.compile(r"^\s*(FAIL|✗|×)\s", _FLAGS)
_PASS_RE = re.compile(r"^\s*(PASS|✓|√)\s", _FLAGS)
_SUMMARY_RE = re.compile(r"(Tests|Test Files)\s+\d+", _FLAGS)
_DURATION_RE = re.compile(r"Duration\s+[\d.]+\s*s", _FLAGS)

_BLOCK_MIN_LINES = 2


def filter_vitest(stdout: str, stderr: str) -> str:
    """Return failure blocks, summary and duration of a vitest run."""
    combined = strip_ansi(combine_output(stdout, stderr))

    fail_blocks: list[list[str]] = []
    summary_lines: list[str] = []
    duration_line = ""
    current: list[str] | None = None
    in_fail = False
    pass_count = 0
    fail_count = 0

    for line in combined.split("\n"):
        stripped = line.strip()

        if _SUMMARY_RE.search(line):
            summary_lines.append(stripped)
            in_fail = False
            if current is not None:
                fail_blocks.append(current)
                current = None
            continue

        if _DURATION_RE.search(line):
            duration_line = stripped
            continue

        if _FAIL_RE.match(line):
            if current is not None:
                fail_blocks.append(current)
            in_fail = True
            current = [stripped]
            fail_count += 1
            continue

        if _PASS_RE.match(line):
            pass_count += 1
            if in_fail:
                in_fail = False
                if current is not None:
                    fail_blocks.append(current)
                    current = None
            continue

        if in_fail and current is not None:
            if not stripped and len(current) > _BLOCK_MIN_LINES:
                fail_blocks.append(current)
                current = None
                in_fail = False
            else:
                current.append(line)

    if current is not None:
        fail_blocks.append(current)

    if fail_count == 0 and not fail_blocks:
        suffix = f" ({duration_line})" if duration_line else ""
        return f"{pass_count} tests passed ✓{suffix}\n"

    parts = ["".join(f"{line}\n" for line in block) + "\n" for block in fail_blocks]
    parts.extend(f"{line}\n" for line in summary_lines)
    if duration_line:
        parts.append(f"{duration_line}\n")
    return "".join(parts)