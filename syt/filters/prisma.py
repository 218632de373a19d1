"""Condensing Prisma CLI output."""

from __future__ import annotations

import re

from syt.utils import combine_output, strip_ansi

_ASCII_ART_RE = re.compile(r"[\s*╔╗╚╝║═\-─│+|\\/]+", re.ASCII | re.IGNORECASE)

_LOGO_MARKS = ("◞", "◟", "Prisma is")


def _is_noise(line: str) -> bool:
    if _ASCII_ART_RE.fullmatch(line):
        return True
    return any(mark in line for mark in _LOGO_MARKS) or line.startswith("Prisma schema")


def filter_prisma(stdout: str, stderr: str) -> str:
    """Drop banner art and logo lines, keeping the meaningful output."""
    combined = strip_ansi(combine_output(stdout, stderr))
    kept = [
        line
        for line in (raw.strip() for raw in combined.split("\n"))
        if line and not _is_noise(line)
    ]
    if not kept:
        return "prisma ok ✓\n"
    return "\n".join(kept) + "\n"