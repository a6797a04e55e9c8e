"""Digest helpers so files next to the project are only rewritten on change."""

from __future__ import annotations

import hashlib
from pathlib import Path

CHUNK_SIZE = 65536


def payload_digest(payload: bytes) -> str:
    return hashlib.sha256(payload).hexdigest()


def file_digest(path: Path) -> str | None:
    """Return the sha256 of ``path``, or None when there is no such file."""
    if not path.is_file():
        return None
    digest = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def write_if_changed(path: Path, payload: bytes) -> bool:
    """Write ``payload`` to ``path`` unless it already holds those bytes.

    Returns True when the file was (re)written.
    """
    if file_digest(path) == payload_digest(payload):
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(payload)
    return True


__all__ = ["file_digest", "payload_digest", "write_if_changed"]
