"""Pytest configuration and fixtures for hookcachex tests."""
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from hookcachex import CachingOptions, Plugin, RedisCacheBackend


class InMemoryRedis:
    """Async stand-in for ``redis.asyncio.Redis`` covering get/set/aclose."""

    def __init__(self):
        self.data: dict[str, bytes] = {}
        self.gets = 0
        self.sets = 0
        self.closed = 0
        self.fail = False
        self.fail_close = False

    def _check(self):
        if self.fail:
            raise RedisConnectionError("Connection refused")

    async def get(self, key):
        self._check()
        self.gets += 1
        return self.data.get(key)

    async def set(self, key, value):
        self._check()
        self.sets += 1
        if isinstance(value, str):
            value = value.encode("utf-8")
        self.data[key] = value
        return True

    async def aclose(self):
        self.closed += 1
        if self.fail_close:
            raise RedisConnectionError("Connection reset")


class BuildContext:
    """Minimal call-time context handed to hooks."""

    def __init__(self):
        self.warnings = []

    def warn(self, message):
        self.warnings.append(message)


class CountingTransform:
    """Transform hook that upper-cases source and counts its calls."""

    def __init__(self):
        self.calls = 0
        self.contexts = []

    async def __call__(self, ctx, code, module_id):
        self.calls += 1
        self.contexts.append(ctx)
        ctx.warn(f"transformed {module_id}")
        return code.upper()


@pytest.fixture
def redis_client():
    """Shared in-memory store; every backend built from it sees the same data."""
    return InMemoryRedis()


@pytest.fixture
def make_backend(redis_client):
    def factory(namespace):
        return RedisCacheBackend(namespace, client=redis_client)

    return factory


@pytest.fixture
def ctx():
    return BuildContext()


@pytest.fixture
def project_dir(tmp_path):
    """Project directory with a fixed package.json."""
    (tmp_path / "package.json").write_text('{"name": "app", "version": "1.0.0"}')
    return tmp_path


@pytest.fixture
def caching_options(project_dir, make_backend):
    return CachingOptions(root=project_dir, backend_factory=make_backend)


@pytest.fixture
def counting_transform():
    return CountingTransform()


@pytest.fixture
def babel_plugin(counting_transform):
    """Plugin named "babel" with only a transform hook."""
    return Plugin(name="babel", transform=counting_transform)
