"""Plugin descriptor shared by the host pipeline and the caching decorator.

A plugin is a name, an optional handler per lifecycle hook, and any extra
host-specific fields. A hook slot set to ``None`` means the plugin does not
implement that hook, which the host detects exactly as it would for an
unwrapped plugin.

Handlers receive the host's call-time context as their first argument:

- ``build_start(ctx, options)``
- ``build_end(ctx, error=None)``
- ``resolve_id(ctx, source, importer, options)``
- ``load(ctx, module_id)``
- ``transform(ctx, code, module_id)``

Handlers may be plain functions or coroutine functions. Hooks of a wrapped
(cached) plugin are always coroutine functions, while hooks of plugins left
uncached keep whatever form they were given, so a host sees a mix of both and
should invoke every hook through :func:`call_hook`.
"""

__authors__ = ["Dominik Dahlem"]
__status__ = "Production"

import dataclasses
import inspect
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

HOOK_NAMES = ("build_start", "build_end", "resolve_id", "load", "transform")
CACHEABLE_HOOKS = ("resolve_id", "load", "transform")

Hook = Callable[..., Any]


@dataclass(frozen=True)
class Plugin:
    """Capability record for a build plugin.

    Args:
        name: Plugin name, also used as the cache namespace
        build_start: Build-wide setup hook
        build_end: Build-wide teardown hook
        resolve_id: Module resolution hook
        load: Module loading hook
        transform: Source transformation hook
        extras: Additional host fields, passed through untouched
    """

    name: str
    build_start: Hook | None = None
    build_end: Hook | None = None
    resolve_id: Hook | None = None
    load: Hook | None = None
    transform: Hook | None = None
    extras: dict[str, Any] = field(default_factory=dict, hash=False, compare=False)

    @property
    def hooks(self) -> frozenset[str]:
        """Names of the hooks this plugin implements."""
        return frozenset(h for h in HOOK_NAMES if getattr(self, h) is not None)

    def has_hook(self, hook: str) -> bool:
        if hook not in HOOK_NAMES:
            raise ValueError(f"Unknown hook: {hook}")
        return getattr(self, hook) is not None

    def replace(self, **changes: Any) -> "Plugin":
        """Copy this plugin, substituting only the given fields."""
        unknown = set(changes) - {f.name for f in dataclasses.fields(self)}
        if unknown:
            raise TypeError(f"Unknown plugin fields: {sorted(unknown)}")
        if "extras" not in changes:
            changes["extras"] = dict(self.extras)
        return dataclasses.replace(self, **changes)


async def call_hook(handler: Hook, *args: Any) -> Any:
    """Invoke a sync or async hook handler and return its result."""
    result = handler(*args)
    if inspect.isawaitable(result):
        result = await result
    return result
