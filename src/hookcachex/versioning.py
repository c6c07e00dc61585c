"""Dependency fingerprints and per-item cache versions.

A version hash folds the byte contents of an ordered list of files
(manifests, lockfiles, extra configured dependencies) into a single
SHA-256 hex digest. Item versions combine that hash with per-call content
so that content-sensitive hooks invalidate when either input changes.
"""

__authors__ = ["Dominik Dahlem"]
__status__ = "Production"

import hashlib
import logging
import os
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 8192


def existing_files(
    paths: Iterable[str | os.PathLike], root: str | os.PathLike | None = None
) -> list[Path]:
    """Return the paths that exist, in their original order.

    Args:
        paths: Candidate file paths
        root: Directory relative paths are resolved against (default: cwd)

    Returns:
        Existing paths, resolved against ``root`` when given
    """
    base = Path(root) if root is not None else None
    found = []
    for path in paths:
        candidate = base / path if base is not None else Path(path)
        if candidate.is_file():
            found.append(candidate)
    return found


def create_version_hash(files: Iterable[str | os.PathLike]) -> str:
    """Hash the full contents of ``files`` in the given order.

    Missing files raise ``FileNotFoundError``; filter them out first with
    :func:`existing_files` when absence is acceptable.

    Args:
        files: Ordered file paths

    Returns:
        64-character lowercase hex digest
    """
    hasher = hashlib.sha256()
    count = 0
    for file in files:
        with open(file, "rb") as f:
            while chunk := f.read(_CHUNK_SIZE):
                hasher.update(chunk)
        count += 1

    digest = hasher.hexdigest()
    logger.debug(f"Version hash over {count} file(s): {digest}")
    return digest


def item_version(base: str, content: str | bytes) -> str:
    """Derive the version of a single item from ``base`` and its content."""
    if isinstance(content, str):
        content = content.encode("utf-8")
    hasher = hashlib.sha256()
    hasher.update(base.encode("utf-8"))
    hasher.update(content)
    return hasher.hexdigest()
