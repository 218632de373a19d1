"""Condensing pnpm list, install and outdated output."""

from __future__ import annotations

import re

from syt.utils import combine_output, strip_ansi

_TREE_CHAR_RE = re.compile(r"[├└│─\s]+", re.ASCII)
_PKG_RE = re.compile(r"([a-zA-Z@][a-zA-Z0-9/_\-.]*@[\w.\-]+)", re.ASCII)

_INSTALL_KEYWORDS = ("added", "removed", "done in", "packages")


def filter_pnpm_list(stdout: str, stderr: str) -> str:
    """Strip tree drawing and keep each distinct package@version once."""
    if stderr and not stdout:
        return stderr

    packages: dict[str, None] = {}
    for line in stdout.split("\n"):
        cleaned = _TREE_CHAR_RE.sub(" ", strip_ansi(line)).strip()
        if not cleaned:
            continue
        match = _PKG_RE.search(cleaned)
        if match:
            packages.setdefault(match.group(0))

    return "\n".join(packages) + "\n"


def filter_pnpm_install(stdout: str, stderr: str) -> str:
    """Keep summary lines, or everything if the output mentions an error."""
    combined = strip_ansi(combine_output(stdout, stderr))
    lower = combined.lower()
    if "error" in lower or "err!" in lower:
        return combined

    kept = [
        line
        for line in (raw.strip() for raw in combined.split("\n"))
        if line and any(word in line.lower() for word in _INSTALL_KEYWORDS)
    ]
    if not kept:
        return "install ok ✓\n"
    return "\n".join(kept) + "\n"


def filter_pnpm_outdated(stdout: str, stderr: str) -> str:
    """Return the outdated table without blank lines or padding."""
    if stderr and not stdout:
        return stderr

    kept = [line for line in (raw.strip() for raw in strip_ansi(stdout).split("\n")) if line]
    if not kept:
        return "all packages up to date ✓\n"
    return "\n".join(kept) + "\n"