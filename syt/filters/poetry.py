"""Condensing poetry install and add output."""

from __future__ import annotations

from syt.utils import combine_output, strip_ansi

_KEEP_WORDS = ("installing", "updating", "resolving", "warning", "package", "installed")


def _is_progress(lower: str) -> bool:
    return lower.startswith("downloading") or "progress" in lower


def _is_meaningful(line: str, lower: str) -> bool:
    if any(word in lower for word in _KEEP_WORDS):
        return True
    return lower.startswith("•") or line.startswith("Package operations")


def filter_poetry_install(stdout: str, stderr: str) -> str:
    """Drop download and progress lines, keeping the install summary.

    Output that mentions an error is returned whole.
    """
    combined = strip_ansi(combine_output(stdout, stderr))
    if "error" in combined.lower():
        return combined

    kept = []
    for raw in combined.split("\n"):
        line = raw.strip()
        if not line:
            continue
        lower = line.lower()
        if _is_progress(lower):
            continue
        if _is_meaningful(line, lower):
            kept.append(line)

    if not kept:
        return "install ok ✓\n"
    return "\n".join(kept) + "\n"