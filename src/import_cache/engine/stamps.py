"""Dependency stamps recorded in build traces."""

from __future__ import annotations

import hashlib
from pathlib import Path

CONTENT = "content"
EXISTS = "exists"

MISSING = "missing"
PRESENT = "present"
ABSENT = "absent"


def sha256_bytes(payload: bytes) -> str:
    """Return hex SHA-256 of an in-memory payload."""
    return hashlib.sha256(payload).hexdigest()


def sha256_file(path: Path) -> str:
    """Compute SHA-256 hash in deterministic chunked reads."""
    digest = hashlib.sha256()
    with path.open("rb") as handle:
        while True:
            chunk = handle.read(1024 * 128)
            if not chunk:
                break
            digest.update(chunk)
    return digest.hexdigest()


def content_stamp(path: Path) -> str:
    """Stamp a file by content hash, or MISSING when it is not a readable file."""
    if not path.is_file():
        return MISSING
    try:
        return sha256_file(path)
    except OSError:
        return MISSING


def exists_stamp(path: Path) -> str:
    """Stamp a path by regular-file existence only."""
    return PRESENT if path.is_file() else ABSENT


def current_stamp(project_root: Path, path: str, kind: str) -> str:
    """Recompute the stamp of a recorded dependency."""
    full_path = project_root / path
    if kind == EXISTS:
        return exists_stamp(full_path)
    if kind == CONTENT:
        return content_stamp(full_path)
    raise ValueError(f"Unknown dependency kind: {kind}")
