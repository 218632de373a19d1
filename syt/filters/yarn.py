"""Condensing yarn install, add and test output."""

from __future__ import annotations

from syt.utils import combine_output, strip_ansi

_ERROR_MARKS = ("error ", "err!")
_SKIPPED_PREFIXES = ("info ", "verbose ")
_BANNER_PREFIXES = ("yarn install v", "yarn add v")
_KEEP_WORDS = ("added", "removed", "done", "success", "warning", "package")


def _is_progress(line: str) -> bool:
    if line.startswith("[") and "/" in line:
        return True
    if line.lower().startswith(_SKIPPED_PREFIXES):
        return True
    return line.startswith(_BANNER_PREFIXES)


def filter_yarn_install(stdout: str, stderr: str) -> str:
    """Drop progress noise from yarn install/add, keeping summary lines.

    Output that mentions an error is returned whole.
    """
    combined = strip_ansi(combine_output(stdout, stderr))
    lower = combined.lower()
    if any(mark in lower for mark in _ERROR_MARKS):
        return combined

    kept = [
        line
        for line in (raw.strip() for raw in combined.split("\n"))
        if line
        and not _is_progress(line)
        and any(word in line.lower() for word in _KEEP_WORDS)
    ]
    if not kept:
        return "install ok ✓\n"
    return "\n".join(kept) + "\n"


def filter_yarn_test(stdout: str, stderr: str) -> str:
    """Drop the "> package@version script" banner lines of yarn test."""
    combined = strip_ansi(combine_output(stdout, stderr))
    kept = [
        line
        for line in combined.split("\n")
        if not (line.startswith("> ") and "@" in line)
    ]
    result = "\n".join(kept).strip()
    if not result:
        return combined
    return result + "\n"