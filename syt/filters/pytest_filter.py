"""Condensing pytest output to failure details and the summary."""

from __future__ import annotations

import re
from enum import Enum, auto

from syt.utils import combine_output, strip_ansi

_COLLECT_RE = re.compile(r"^(collecting|collected)", re.ASCII | re.IGNORECASE)
_FAIL_RE = re.compile(r"^FAILED\s+", re.ASCII)
_PASS_RE = re.compile(r"^PASSED\s+", re.ASCII)
_SEP_RE = re.compile(r"^={5,}|^-{5,}", re.ASCII)
_SUMMARY_RE = re.compile(
    r"(\d+\s+passed|\d+\s+failed|\d+\s+error)", re.ASCII | re.IGNORECASE
)
_FAIL_HEAD_RE = re.compile(r"^_+\s+(.+)\s+_+\Z", re.ASCII)


class _State(Enum):
    COLLECTING = auto()
    RUNNING = auto()
    FAILURE_DETAIL = auto()
    SUMMARY = auto()


def filter_pytest(stdout: str, stderr: str) -> str:
    """Return the failure blocks and summary lines of a pytest run."""
    combined = strip_ansi(combine_output(stdout, stderr))

    state = _State.COLLECTING
    failure_blocks: list[list[str]] = []
    summary_lines: list[str] = []
    current: list[str] = []
    pass_count = 0
    fail_count = 0

    def flush() -> None:
        nonlocal current
        if current:
            failure_blocks.append(current)
        current = []

    for line in combined.split("\n"):
        upper = line.upper()
        if state is _State.COLLECTING:
            if _COLLECT_RE.match(line):
                continue
            if _SEP_RE.match(line):
                state = _State.RUNNING

        elif state is _State.RUNNING:
            if _COLLECT_RE.match(line):
                continue
            if _FAIL_RE.match(line):
                fail_count += 1
            elif _PASS_RE.match(line):
                pass_count += 1
            elif "FAILURES" in upper and _SEP_RE.match(line):
                state = _State.FAILURE_DETAIL
            elif _SUMMARY_RE.search(line):
                summary_lines.append(line.strip())
                state = _State.SUMMARY

        elif state is _State.FAILURE_DETAIL:
            if _FAIL_HEAD_RE.match(line):
                flush()
                current = [line.strip()]
            elif "SHORT TEST SUMMARY" in upper or _SUMMARY_RE.search(line):
                flush()
                summary_lines.append(line.strip())
                state = _State.SUMMARY
            elif _SEP_RE.match(line):
                if "PASS" in upper or "FAIL" in upper:
                    flush()
                    summary_lines.append(line.strip())
                    state = _State.SUMMARY
            else:
                current.append(line)

        elif line.strip():
            summary_lines.append(line.strip())

    flush()

    passed = f"{pass_count} passed ✓\n"
    if not failure_blocks and not summary_lines and fail_count == 0:
        return passed

    parts = ["".join(f"{line}\n" for line in block) + "\n" for block in failure_blocks]
    parts.extend(f"{line}\n" for line in summary_lines)
    return "".join(parts) or passed