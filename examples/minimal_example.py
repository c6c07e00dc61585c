"""Minimal working example for hookcachex.

Wrap a build configuration, run one transform twice, and watch the second
call come from Redis. Needs a Redis server on localhost:6379.
"""

import asyncio

from hookcachex import CachingOptions, Plugin, add_plugin_caching_to_config


# 1. A deterministic, expensive transform
def transform(ctx, code, module_id):
    print(f"  transforming {module_id}")
    return code.upper()


async def main():
    # 2. Wrap the configuration (babel is cacheable by default)
    config = add_plugin_caching_to_config(
        {"input": "src/main.js", "plugins": [Plugin(name="babel", transform=transform)]},
        CachingOptions(dependencies=[__file__]),
    )
    babel = config["plugins"][0]
    print(f"Plugin: {babel.name}")

    # 3. Two identical calls: only the first reaches the delegate
    for _ in range(2):
        print(await babel.transform(None, "export const x = 1;", "/src/main.js"))

    # 4. Release the Redis connection
    await babel.build_end(None, None)


if __name__ == "__main__":
    asyncio.run(main())
