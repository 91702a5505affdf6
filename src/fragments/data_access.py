from __future__ import annotations

import hashlib
from pathlib import Path


class DataAccessError(Exception):
    pass


def resolve_input(*, data_root: Path, relpath: str) -> Path:
    """
    Resolve a source document path relative to an explicit data root.

    Absolute paths and anything resolving outside `data_root` are rejected.
    No environment variables are consulted.
    """

    norm = relpath.replace("\\", "/")
    if norm.startswith("/") or (len(norm) > 1 and norm[1] == ":"):
        raise DataAccessError(f"Expected a path relative to data_root, got: {relpath!r}")

    root = data_root.expanduser().resolve()
    candidate = (root / norm).resolve()
    if not candidate.is_relative_to(root):
        raise DataAccessError(f"Path escapes data_root: relpath={relpath!r}")
    if not candidate.is_file():
        raise DataAccessError(f"Input file not found under data_root: relpath={relpath!r}")
    return candidate


def sha256_file(path: Path, *, chunk_size: int = 1 << 20) -> str:
    """Hex SHA-256 of a resolved input, recorded in source meta for provenance."""

    digest = hashlib.sha256()
    with path.open("rb") as fh:
        while chunk := fh.read(chunk_size):
            digest.update(chunk)
    return digest.hexdigest()
