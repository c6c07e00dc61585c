"""Exceptions raised by the cache store layer."""

__authors__ = ["Dominik Dahlem"]
__status__ = "Production"


class CacheStoreError(Exception):
    """Raised when the key-value store cannot complete an operation."""


class CacheEntryError(CacheStoreError):
    """Raised when a stored entry cannot be encoded or decoded."""
