"""Recording and checking the hash of the installed hook script."""

from __future__ import annotations

import hashlib
import json
import os
from pathlib import Path

_FILE_NAME = "hook-integrity.json"


def hash_script(content: str) -> str:
    """Return the SHA-256 hex digest of ``content``."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def store(data_dir: str | os.PathLike[str], hook_script: str) -> None:
    """Save the hash of ``hook_script`` in ``data_dir``."""
    os.makedirs(data_dir, exist_ok=True)
    payload = json.dumps({"sha256": hash_script(hook_script)}, indent=2)
    (Path(data_dir) / _FILE_NAME).write_text(payload, encoding="utf-8")


def load(data_dir: str | os.PathLike[str]) -> str:
    """Return the stored hash.

    Raises OSError if the file cannot be read and ValueError if it is malformed.
    """
    raw = (Path(data_dir) / _FILE_NAME).read_bytes()
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("integrity file is not a JSON object")
    digest = data.get("sha256")
    if digest is None:
        return ""
    if not isinstance(digest, str):
        raise ValueError("integrity hash is not a string")
    return digest


def verify(data_dir: str | os.PathLike[str], hook_script: str) -> bool:
    """Return True if ``hook_script`` matches the stored hash."""
    try:
        stored = load(data_dir)
    except (OSError, ValueError):
        return False
    return stored == hash_script(hook_script)