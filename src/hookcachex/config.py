"""Build-configuration wrapping with selective plugin caching.

:func:`add_plugin_caching_to_config` computes one dependency fingerprint per
configuration and replaces every plugin listed in the cacheable-plugin table
with a :class:`~hookcachex.decorator.CachingPluginDecorator` bound to its
own backend namespace. Plugins not in the table are never cached.
"""

__authors__ = ["Dominik Dahlem"]
__status__ = "Production"

import logging
import os
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

from .backend import RedisCacheBackend, StoreConfig
from .decorator import cache_plugin
from .plugin import Plugin
from .versioning import create_version_hash, existing_files

logger = logging.getLogger(__name__)

DEFAULT_DEPENDENCIES: tuple[str, ...] = (
    "package.json",
    "package-lock.json",
    "yarn.lock",
)


@dataclass(frozen=True)
class PluginCacheSettings:
    """Per-plugin overrides for the caching decorator.

    Args:
        enabled: Whether the plugin's hooks read and write the cache
        out_dir: Overrides ``CachingOptions.out_dir`` for this plugin
    """

    enabled: bool = True
    out_dir: str | None = None


DEFAULT_CACHEABLE_PLUGINS: Mapping[str, PluginCacheSettings] = MappingProxyType(
    {
        "babel": PluginCacheSettings(),
        "commonjs": PluginCacheSettings(),
        "node-resolve": PluginCacheSettings(),
    }
)


@dataclass(frozen=True)
class CachingOptions:
    """Options for :func:`add_plugin_caching_to_config`.

    Args:
        cache_root: Reserved for an on-disk cache mode; currently unused
        dependencies: Extra files folded into the version hash, after the defaults;
            relative paths are resolved against ``root`` like the defaults
        store: Redis connection parameters
        out_dir: Build output directory stripped from module identifiers
        root: Directory relative dependency files are resolved against (default: cwd)
        default_dependencies: Manifest/lock files hashed when present
        cacheable_plugins: Plugin name -> settings; other plugins pass through
        backend_factory: Builds the backend for a namespace (default: Redis)
    """

    cache_root: str | None = None
    dependencies: Sequence[str | os.PathLike] = ()
    store: StoreConfig = field(default_factory=StoreConfig)
    out_dir: str | None = None
    root: str | os.PathLike | None = None
    default_dependencies: Sequence[str] = DEFAULT_DEPENDENCIES
    cacheable_plugins: Mapping[str, PluginCacheSettings] = field(
        default_factory=lambda: dict(DEFAULT_CACHEABLE_PLUGINS)
    )
    backend_factory: Callable[[str], RedisCacheBackend] | None = None

    def make_backend(self, namespace: str) -> RedisCacheBackend:
        """Create the backend for ``namespace``, via ``backend_factory`` if set."""
        if self.backend_factory is not None:
            return self.backend_factory(namespace)
        return RedisCacheBackend(namespace, self.store)


def dependency_files(options: CachingOptions) -> list[str | os.PathLike]:
    """Ordered files for the version hash: existing defaults, then extras."""
    extras = list(options.dependencies)
    if options.root is not None:
        extras = [Path(options.root) / dep for dep in extras]
    return [
        *existing_files(options.default_dependencies, root=options.root),
        *extras,
    ]


def add_plugin_caching_to_config(
    build_config: Mapping[str, Any], options: CachingOptions | None = None
) -> dict[str, Any]:
    """Wrap a build configuration to enable selective caching of plugin hooks.

    Args:
        build_config: Host configuration with an optional ``plugins`` list
        options: Caching options (default: ``CachingOptions()``)

    Returns:
        New configuration with cacheable plugins replaced by cached ones

    Raises:
        FileNotFoundError: If an extra dependency file does not exist
    """
    options = options or CachingOptions()
    version_hash = create_version_hash(dependency_files(options))
    # TODO: fold plugin-specific config files (e.g. babel.config.json) into the hash

    plugins: list[Plugin | None] = []
    for plugin in build_config.get("plugins") or []:
        if plugin is None:
            plugins.append(plugin)
            continue

        settings = options.cacheable_plugins.get(plugin.name)
        if settings is None:
            logger.debug(f"Plugin '{plugin.name}' is not cacheable, passing through")
            plugins.append(plugin)
            continue

        plugins.append(
            cache_plugin(
                plugin,
                options.make_backend(plugin.name),
                version_hash,
                enabled=settings.enabled,
                out_dir=settings.out_dir or options.out_dir,
            )
        )

    return {**build_config, "plugins": plugins}
