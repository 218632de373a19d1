"""Numbering and truncating file contents."""

from __future__ import annotations


def filter_read(stdout: str, stderr: str, max_lines: int) -> str:
    """Number every line and cut the text after ``max_lines`` lines.

    A ``max_lines`` of zero or less means no limit. If there is only error
    output, it is returned unchanged.
    """
    if stderr and not stdout:
        return stderr

    lines = stdout.split("\n")
    truncated = 0 < max_lines < len(lines)
    if truncated:
        lines = lines[:max_lines]

    out = [f"{number:4d}\t{line}\n" for number, line in enumerate(lines, start=1)]
    if truncated:
        out.append(f"... [truncated at {max_lines} lines]\n")
    return "".join(out)