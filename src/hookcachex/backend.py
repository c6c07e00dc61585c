"""Version-gated cache backend on top of Redis.

Each backend instance owns one client connection and one key namespace
(the plugin name). Entries are stored as ``{version, value}`` envelopes;
a read only hits when the stored version equals the requested one.
"""

__authors__ = ["Dominik Dahlem"]
__status__ = "Production"

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import redis.asyncio as redis
from redis.exceptions import RedisError

from .exceptions import CacheStoreError
from .utils import _deserialize_entry, _serialize_entry

logger = logging.getLogger(__name__)


class _Missing:
    """Marker type for "no usable cache entry"."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()


@dataclass(frozen=True)
class StoreConfig:
    """Connection parameters for the Redis store.

    Args:
        host: Redis server hostname
        port: Redis server port
        db: Database number
        password: Optional password
        socket_timeout: Seconds before a socket operation fails (default: no timeout)
    """

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    password: str | None = None
    socket_timeout: float | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "StoreConfig":
        """Build a config from ``REDIS_HOST`` / ``REDIS_PORT``.

        Args:
            environ: Mapping to read from (default: ``os.environ``)

        Returns:
            StoreConfig with defaults for unset variables
        """
        environ = os.environ if environ is None else environ
        return cls(
            host=environ.get("REDIS_HOST", cls.host),
            port=int(environ.get("REDIS_PORT", cls.port)),
        )


class RedisCacheBackend:
    """Asynchronous key/version/value store namespaced by plugin name.

    The stored key is ``{namespace}:{key}``, so two backends with different
    namespaces never observe each other's entries.

    Args:
        namespace: Key prefix, normally the wrapped plugin's name
        config: Connection parameters (ignored when ``client`` is given)
        client: Pre-built async client exposing ``get``/``set``/``aclose``

    Example:
        >>> backend = RedisCacheBackend("babel", StoreConfig(port=6380))
        >>> await backend.set("load:/src/a.js", version, "export default 1")
        >>> await backend.get("load:/src/a.js", version)
        'export default 1'
        >>> await backend.close()
    """

    def __init__(
        self,
        namespace: str,
        config: StoreConfig | None = None,
        client: Any | None = None,
    ):
        self.namespace = namespace
        self.config = config or StoreConfig()
        if client is None:
            client = redis.Redis(
                host=self.config.host,
                port=self.config.port,
                db=self.config.db,
                password=self.config.password,
                socket_timeout=self.config.socket_timeout,
            )
        self._client = client
        self.closed = False

    def _make_key(self, key: str) -> str:
        """Create namespaced Redis key."""
        return f"{self.namespace}:{key}"

    async def get(self, key: str, version: str) -> Any:
        """Read an entry, or ``MISSING`` if absent or stored under another version.

        Args:
            key: Cache key
            version: Version the caller expects

        Returns:
            Stored value (possibly ``None``) or ``MISSING``
        """
        redis_key = self._make_key(key)
        try:
            blob = await self._client.get(redis_key)
        except RedisError as e:
            raise CacheStoreError(f"Redis get failed for {redis_key}: {e}") from e

        if blob is None:
            return MISSING

        stored_version, value = _deserialize_entry(blob)
        if stored_version != version:
            logger.debug(
                f"Version mismatch for {redis_key}: stored {stored_version}, "
                f"expected {version}"
            )
            return MISSING
        return value

    async def set(self, key: str, version: str, value: Any) -> None:
        """Write an entry, overwriting whatever is stored under ``key``.

        Args:
            key: Cache key
            version: Version the value was computed under
            value: JSON-serializable value (``None`` allowed)
        """
        redis_key = self._make_key(key)
        data = _serialize_entry(version, value)
        try:
            await self._client.set(redis_key, data)
        except RedisError as e:
            raise CacheStoreError(f"Redis set failed for {redis_key}: {e}") from e

    async def close(self) -> None:
        """Release the underlying connection."""
        if self.closed:
            logger.warning(f"Cache backend '{self.namespace}' already closed")
            return
        self.closed = True
        try:
            await self._client.aclose()
        except RedisError as e:
            raise CacheStoreError(
                f"Redis disconnect failed for namespace {self.namespace}: {e}"
            ) from e
