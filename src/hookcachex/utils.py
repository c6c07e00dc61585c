"""Utility functions for cache keys and entry serialization.

This module provides the key scheme used by the hook decorator and the
``{version, value}`` envelope the backend writes to the store.
"""

__authors__ = ["Dominik Dahlem"]
__status__ = "Production"

import json
from typing import Any

from .exceptions import CacheEntryError


def _strip_out_dir(module_id: str, out_dir: str | None) -> str:
    """Drop everything up to and including the last ``out_dir`` occurrence.

    Examples:
        >>> _strip_out_dir("/work/dist/src/a.js", "/work/dist")
        '/src/a.js'
        >>> _strip_out_dir("/src/a.js", None)
        '/src/a.js'
    """
    if not out_dir:
        return module_id
    return module_id.rsplit(out_dir, 1)[-1]


def generate_cache_key(
    hook: str,
    module_id: str,
    importer: str | None = None,
    *,
    out_dir: str | None = None,
) -> str:
    """Build the cache key for a hook invocation.

    ``resolve_id`` keys include the importer because resolution can depend
    on it; the pair is JSON-encoded so separators inside identifiers cannot
    make two different pairs collide. ``load`` and ``transform`` keys use
    the module identifier alone.

    Args:
        hook: Hook name (``resolve_id``, ``load`` or ``transform``)
        module_id: Module identifier, used verbatim unless ``out_dir`` is set
        importer: Importing module for ``resolve_id`` calls
        out_dir: Build output directory to strip from identifiers

    Returns:
        Cache key string, not yet namespaced

    Examples:
        >>> generate_cache_key("load", "/src/a.js")
        'load:/src/a.js'
        >>> generate_cache_key("resolve_id", "./b", "/src/a.js")
        'resolve_id:["./b", "/src/a.js"]'
    """
    module_id = _strip_out_dir(module_id, out_dir)
    if hook == "resolve_id":
        if importer is not None:
            importer = _strip_out_dir(importer, out_dir)
        return f"{hook}:{json.dumps([module_id, importer])}"
    return f"{hook}:{module_id}"


def _serialize_entry(version: str, value: Any) -> str:
    """Encode a cache entry as a JSON envelope.

    Args:
        version: Version the value was computed under
        value: JSON-serializable hook result (``None`` allowed)

    Returns:
        UTF-8 text envelope
    """
    try:
        return json.dumps({"version": version, "value": value})
    except (TypeError, ValueError) as e:
        raise CacheEntryError(
            f"Cannot serialize cache value of type {type(value).__name__}: {e}"
        ) from e


def _deserialize_entry(blob: str | bytes) -> tuple[str, Any]:
    """Decode a JSON envelope into ``(version, value)``.

    Args:
        blob: Raw payload read from the store

    Returns:
        Tuple of stored version and stored value
    """
    try:
        entry = json.loads(blob)
    except (TypeError, ValueError) as e:
        raise CacheEntryError(f"Corrupted cache entry: {e}") from e

    if not isinstance(entry, dict) or "version" not in entry or "value" not in entry:
        raise CacheEntryError("Corrupted cache entry: missing version envelope")

    return entry["version"], entry["value"]
