"""hookcachex: Transparent caching for build-pipeline plugin hooks.

This library wraps the deterministic hooks of build plugins (module
resolution, loading and source transformation) with a Redis-backed,
version-keyed cache. Entries are invalidated by content: the version of
every entry is derived from a fingerprint of the project's manifest and
lock files, and for transforms also from the source being transformed.

Basic usage:
    >>> from hookcachex import CachingOptions, StoreConfig, add_plugin_caching_to_config
    >>>
    >>> config = add_plugin_caching_to_config(
    ...     {"input": "src/main.js", "plugins": [babel, commonjs, terser]},
    ...     CachingOptions(
    ...         dependencies=["babel.config.json"],
    ...         store=StoreConfig(host="localhost", port=6379),
    ...     ),
    ... )
    >>>
    >>> # babel and commonjs are now "cached(babel)" and "cached(commonjs)"
    >>> [p.name for p in config["plugins"]]
    ['cached(babel)', 'cached(commonjs)', 'terser']
"""

__authors__ = ["Dominik Dahlem"]
__status__ = "Production"
__version__ = "0.1.0"

from .backend import MISSING, RedisCacheBackend, StoreConfig
from .config import (
    DEFAULT_CACHEABLE_PLUGINS,
    DEFAULT_DEPENDENCIES,
    CachingOptions,
    PluginCacheSettings,
    add_plugin_caching_to_config,
)
from .decorator import CachingPluginDecorator, cache_plugin
from .exceptions import CacheEntryError, CacheStoreError
from .plugin import CACHEABLE_HOOKS, HOOK_NAMES, Plugin
from .versioning import create_version_hash, existing_files, item_version

__all__ = [
    "CACHEABLE_HOOKS",
    "DEFAULT_CACHEABLE_PLUGINS",
    "DEFAULT_DEPENDENCIES",
    "HOOK_NAMES",
    "MISSING",
    "CacheEntryError",
    "CacheStoreError",
    "CachingOptions",
    "CachingPluginDecorator",
    "Plugin",
    "PluginCacheSettings",
    "RedisCacheBackend",
    "StoreConfig",
    "__version__",
    "add_plugin_caching_to_config",
    "cache_plugin",
    "create_version_hash",
    "existing_files",
    "item_version",
]
