"""Grouping TypeScript compiler errors by file."""

from __future__ import annotations

import re
from collections import defaultdict
from dataclasses import dataclass

from syt.utils import combine_output, strip_ansi

_ERROR_RE = re.compile(
    r"(.+)\((\d+),(\d+)\):\s+error\s+(TS\d+):\s+(.+)", re.ASCII
)


@dataclass(frozen=True)
class _TscError:
    file: str
    line: int
    col: int
    code: str
    message: str


def _parse(line: str) -> _TscError | None:
    match = _ERROR_RE.fullmatch(line)
    if match is None:
        return None
    file, line_no, col, code, message = match.groups()
    return _TscError(file, int(line_no), int(col), code, message)


def filter_tsc(stdout: str, stderr: str) -> str:
    """Summarise compiler errors as one line per file plus a total."""
    combined = strip_ansi(combine_output(stdout, stderr))
    errors = [e for e in map(_parse, combined.split("\n")) if e is not None]
    if not errors:
        return "no TypeScript errors ✓\n"

    by_file: dict[str, list[_TscError]] = defaultdict(list)
    for error in errors:
        by_file[error.file].append(error)

    lines = [
        f"{file}: {len(errs)} errors ({', '.join(sorted({e.code for e in errs}))})"
        for file, errs in sorted(by_file.items())
    ]
    lines.append(f"{len(errors)} errors in {len(by_file)} files")
    return "\n".join(lines) + "\n"