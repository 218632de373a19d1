"""Condensing ruff check and format output."""

from __future__ import annotations

from syt.utils import combine_output, strip_ansi, truncate

_MESSAGE_WIDTH = 60


def _looks_like_code(word: str) -> bool:
    return len(word) >= 2 and "A" <= word[0] <= "Z"


def filter_ruff_check(stdout: str, stderr: str) -> str:
    """Group violations by rule code, most frequent first, plus the summary line."""
    combined = strip_ansi(combine_output(stdout, stderr))

    counts: dict[str, int] = {}
    messages: dict[str, str] = {}
    summary = ""

    for raw in combined.split("\n"):
        line = raw.strip()
        if not line:
            continue
        parts = line.split(" ", 2)
        if len(parts) >= 2:
            for part in parts:
                if not _looks_like_code(part):
                    continue
                code = part
                colon = code.find(":")
                if colon > 0:
                    code = code[:colon]
                if not _looks_like_code(code):
                    continue
                counts[code] = counts.get(code, 0) + 1
                if not messages.get(code) and len(parts) >= 3:
                    messages[code] = truncate(parts[2], _MESSAGE_WIDTH)
        lower = line.lower()
        if "found" in lower or "error" in lower:
            summary = line

    if not counts:
        return "no ruff issues ✓\n"

    ranked = sorted(counts, key=counts.__getitem__, reverse=True)
    out = [f"  {code:<10}  {counts[code]}×  {messages.get(code, '')}\n" for code in ranked]
    if summary:
        out.append(f"{summary}\n")
    return "".join(out)


def filter_ruff_format(stdout: str, stderr: str) -> str:
    """List the non-blank lines of ruff format output."""
    combined = strip_ansi(combine_output(stdout, stderr))
    kept = [line for line in (raw.strip() for raw in combined.split("\n")) if line]
    if not kept:
        return "all files formatted ✓\n"
    return "\n".join(kept) + "\n"