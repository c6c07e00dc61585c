"""Plugin decorator for transparent caching of build hooks.

This module wraps any :class:`~hookcachex.plugin.Plugin` so that its
``resolve_id``, ``load`` and ``transform`` hooks read through a
version-gated cache backend and write results back on a miss.
"""

__authors__ = ["Dominik Dahlem"]
__status__ = "Production"

import logging
from typing import Any

from .backend import MISSING, RedisCacheBackend
from .plugin import CACHEABLE_HOOKS, Hook, Plugin, call_hook
from .utils import generate_cache_key
from .versioning import item_version

logger = logging.getLogger(__name__)


class CachingPluginDecorator:
    """Wraps a Plugin to add read-through caching & write-back per hook call.

    For each cacheable hook the delegate implements, the decorator:
    - Builds a cache key from the module identifier (and importer for resolution)
    - Picks a version: the shared dependency hash for ``resolve_id``/``load``,
      a hash of dependency hash + source code for ``transform``
    - Returns the stored value on a hit without calling the delegate
    - Calls the delegate on a miss and stores its result, ``None`` included

    Hooks the delegate lacks stay absent on the wrapped plugin. ``build_end``
    is always present because it releases the backend connection.

    Assumptions:
    - Hook results are JSON-serializable
    - Identifiers are canonical; equivalent spellings are cached separately

    Args:
        plugin: Plugin to wrap
        cache_backend: Backend namespaced to this plugin, owned by the decorator
        version_hash: Dependency fingerprint shared across the build
        enabled: Whether caching is enabled (default: True)
        out_dir: Build output directory stripped from identifiers before keying

    Example:
        >>> backend = RedisCacheBackend("babel", StoreConfig())
        >>> cached = CachingPluginDecorator(babel, backend, version_hash).as_plugin()
        >>> cached.name
        'cached(babel)'
    """

    def __init__(
        self,
        plugin: Plugin,
        cache_backend: RedisCacheBackend,
        version_hash: str,
        enabled: bool = True,
        out_dir: str | None = None,
    ):
        self.plugin = plugin
        self.cache = cache_backend
        self.version_hash = version_hash
        self.enabled = enabled
        self.out_dir = out_dir

        logger.info(
            f"Decorated plugin: {plugin.name} "
            f"(namespace: {cache_backend.namespace}, enabled: {enabled})"
        )

    @property
    def name(self) -> str:
        return f"cached({self.plugin.name})"

    async def _read_through(
        self, key: str, version: str, handler: Hook, *args: Any
    ) -> Any:
        """Serve ``key`` from cache, or compute it with ``handler`` and store it."""
        if not self.enabled:
            return await call_hook(handler, *args)

        cached = await self.cache.get(key, version)
        if cached is not MISSING:
            logger.debug(f"Cache hit: {key} {version}")
            return cached

        logger.debug(f"Cache miss: {key} {version}")
        # Delegate failures propagate before anything is written
        result = await call_hook(handler, *args)
        await self.cache.set(key, version, result)
        return result

    async def build_start(self, ctx: Any, options: Any) -> None:
        if self.plugin.build_start is not None:
            await call_hook(self.plugin.build_start, ctx, options)

    async def build_end(self, ctx: Any, error: BaseException | None = None) -> None:
        """Close the backend, then run the delegate's ``build_end``.

        A close failure is raised once the delegate hook has run. If the
        delegate fails as well, its exception wins and carries the close
        failure as ``__context__``.
        """
        try:
            await self.cache.close()
        finally:
            if self.plugin.build_end is not None:
                await call_hook(self.plugin.build_end, ctx, error)

    async def resolve_id(
        self,
        ctx: Any,
        source: str,
        importer: str | None = None,
        options: Any = None,
    ) -> Any:
        key = generate_cache_key("resolve_id", source, importer, out_dir=self.out_dir)
        return await self._read_through(
            key,
            self.version_hash,
            self.plugin.resolve_id,
            ctx,
            source,
            importer,
            options,
        )

    async def load(self, ctx: Any, module_id: str) -> Any:
        key = generate_cache_key("load", module_id, out_dir=self.out_dir)
        return await self._read_through(
            key, self.version_hash, self.plugin.load, ctx, module_id
        )

    async def transform(self, ctx: Any, code: str, module_id: str) -> Any:
        # Output depends on the source, not just the module identity
        version = item_version(self.version_hash, code)
        key = generate_cache_key("transform", module_id, out_dir=self.out_dir)
        return await self._read_through(
            key, version, self.plugin.transform, ctx, code, module_id
        )

    def as_plugin(self) -> Plugin:
        """Build the wrapped plugin descriptor.

        Returns:
            Copy of the delegate with the name and hook handlers replaced
        """
        overrides: dict[str, Any] = {
            "name": self.name,
            "build_start": (
                self.build_start if self.plugin.build_start is not None else None
            ),
            "build_end": self.build_end,
        }
        for hook in CACHEABLE_HOOKS:
            if self.plugin.has_hook(hook):
                overrides[hook] = getattr(self, hook)
            else:
                overrides[hook] = None
        return self.plugin.replace(**overrides)


def cache_plugin(
    plugin: Plugin,
    cache_backend: RedisCacheBackend,
    version_hash: str,
    **kwargs: Any,
) -> Plugin:
    """Wrap ``plugin`` and return the cached plugin descriptor.

    Args:
        plugin: Plugin to wrap
        cache_backend: Backend namespaced to this plugin
        version_hash: Dependency fingerprint shared across the build
        **kwargs: Forwarded to :class:`CachingPluginDecorator`

    Returns:
        Plugin named ``cached(<name>)``
    """
    decorator = CachingPluginDecorator(plugin, cache_backend, version_hash, **kwargs)
    return decorator.as_plugin()
