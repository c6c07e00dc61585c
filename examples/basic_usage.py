"""Basic usage examples for hookcachex.

This script demonstrates:
1. Wrapping a build configuration with selective plugin caching
2. Per-plugin settings and extra dependency files
3. Cache invalidation when a dependency file changes
"""

import asyncio
import logging
import tempfile
from pathlib import Path

from hookcachex import (
    CachingOptions,
    Plugin,
    PluginCacheSettings,
    StoreConfig,
    add_plugin_caching_to_config,
)


class BuildContext:
    """Stand-in for the host's per-call plugin context."""

    def warn(self, message):
        print(f"  warning: {message}")


def make_plugins(counter):
    def resolve_id(ctx, source, importer, options):
        counter["resolve_id"] += 1
        if source.startswith("."):
            return {"id": str(Path(importer).parent / source) + ".js"}
        return None

    def load(ctx, module_id):
        counter["load"] += 1
        return f"import x from './dep';\nexport default x; // {module_id}"

    async def transform(ctx, code, module_id):
        counter["transform"] += 1
        await asyncio.sleep(0.05)  # Simulate expensive work
        return {"code": code.replace("import", "const"), "map": None}

    return [
        Plugin(name="node-resolve", resolve_id=resolve_id),
        Plugin(name="commonjs", load=load),
        Plugin(name="babel", transform=transform, extras={"babelHelpers": "bundled"}),
        Plugin(name="terser", transform=lambda ctx, code, module_id: code),
    ]


async def build(config, ctx):
    plugins = config["plugins"]
    resolved = await plugins[0].resolve_id(ctx, "./dep", "/project/src/main.js", {})
    code = await plugins[1].load(ctx, resolved["id"])
    result = await plugins[2].transform(ctx, code, resolved["id"])
    for plugin in plugins:
        if plugin.build_end is not None:
            await plugin.build_end(ctx, None)
    return result


async def main():
    logging.basicConfig(level=logging.DEBUG)
    ctx = BuildContext()

    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        (root / "package.json").write_text('{"name": "demo", "version": "1.0.0"}')
        babel_config = root / "babel.config.json"
        babel_config.write_text('{"presets": ["@babel/preset-env"]}')

        options = CachingOptions(
            root=root,
            dependencies=[babel_config],
            store=StoreConfig.from_env(),
            cacheable_plugins={
                "node-resolve": PluginCacheSettings(),
                "commonjs": PluginCacheSettings(),
                "babel": PluginCacheSettings(out_dir=str(root / "dist")),
            },
        )

        counter = {"resolve_id": 0, "load": 0, "transform": 0}
        for attempt in range(2):
            config = add_plugin_caching_to_config(
                {"input": "src/main.js", "plugins": make_plugins(counter)}, options
            )
            print(f"Build {attempt + 1}: {[p.name for p in config['plugins']]}")
            await build(config, ctx)
            print(f"  delegate calls so far: {counter}")

        # Touching a dependency file invalidates every cached hook
        babel_config.write_text('{"presets": ["@babel/preset-env", "@babel/preset-react"]}')
        config = add_plugin_caching_to_config(
            {"input": "src/main.js", "plugins": make_plugins(counter)}, options
        )
        await build(config, ctx)
        print(f"After dependency change: {counter}")


if __name__ == "__main__":
    asyncio.run(main())
