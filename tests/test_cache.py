"""
Tests for the access cache.
"""

import asyncio

import pytest

from authgraph.rbac.cache import AccessCache
from authgraph.rbac.resolver import AuthGraph


class GraphLoader:
    """Counts graph loads."""

    def __init__(self, graph: AuthGraph):
        self.graph = graph
        self.calls = 0

    async def __call__(self) -> AuthGraph:
        self.calls += 1
        return self.graph


@pytest.fixture
def loader() -> GraphLoader:
    return GraphLoader(AuthGraph.from_edges({"admin": ["editDoc"]}))


@pytest.mark.asyncio
async def test_disabled_cache_always_recomputes(loader):
    cache = AccessCache()

    assert await cache.get_or_compute("u1", {"admin"}, loader) == {"admin", "editDoc"}
    assert await cache.get_or_compute("u1", {"admin"}, loader) == {"admin", "editDoc"}

    assert loader.calls == 2
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_enabled_cache_memoizes(loader):
    cache = AccessCache()
    cache.enable()

    await cache.get_or_compute("u1", {"admin"}, loader)
    await cache.get_or_compute("u1", {"admin"}, loader)

    assert loader.calls == 1
    assert cache.hits == 1
    assert cache.misses == 1
    assert cache.get("u1") == {"admin", "editDoc"}


@pytest.mark.asyncio
async def test_enabled_cache_serves_stale_result(loader):
    cache = AccessCache(enabled=True)

    await cache.get_or_compute("u1", {"admin"}, loader)
    loader.graph = AuthGraph()

    # Underlying graph changed but the entry was not invalidated
    assert await cache.get_or_compute("u1", {"admin"}, loader) == {"admin", "editDoc"}

    cache.invalidate("u1")
    assert await cache.get_or_compute("u1", {"admin"}, loader) == {"admin"}


@pytest.mark.asyncio
async def test_keys_are_per_user(loader):
    cache = AccessCache(enabled=True)

    await cache.get_or_compute("u1", {"admin"}, loader)
    assert await cache.get_or_compute("u2", {"other"}, loader) == {"other"}
    assert len(cache) == 2


@pytest.mark.asyncio
async def test_disable_clears_entries(loader):
    cache = AccessCache(enabled=True)
    await cache.get_or_compute("u1", {"admin"}, loader)

    cache.disable()

    assert not cache.enabled
    assert len(cache) == 0
    assert cache.get("u1") is None


def test_invalidate_unknown_user_is_noop():
    cache = AccessCache(enabled=True)
    cache.invalidate("missing")
    cache.clear()
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_subjects_without_id_are_not_stored(loader):
    cache = AccessCache(enabled=True)

    assert await cache.get_or_compute(None, {"admin"}, loader) == {"admin", "editDoc"}
    assert await cache.get_or_compute(None, {"guest"}, loader) == {"guest"}

    assert len(cache) == 0
    assert cache.get(None) is None


@pytest.mark.asyncio
async def test_invalidate_during_load_is_not_lost():
    cache = AccessCache(enabled=True)
    release = asyncio.Event()
    graphs = [
        AuthGraph.from_edges({"admin": ["editDoc"]}),
        AuthGraph.from_edges({"admin": []}),
    ]

    async def slow_loader() -> AuthGraph:
        await release.wait()
        return graphs[0]

    async def new_loader() -> AuthGraph:
        return graphs[1]

    pending = asyncio.create_task(cache.get_or_compute("u1", {"admin"}, slow_loader))
    await asyncio.sleep(0)
    cache.invalidate("u1")
    release.set()

    assert await pending == {"admin", "editDoc"}
    assert cache.get("u1") is None
    assert await cache.get_or_compute("u1", {"admin"}, new_loader) == {"admin"}


@pytest.mark.asyncio
async def test_clear_during_load_is_not_lost():
    cache = AccessCache(enabled=True)
    release = asyncio.Event()

    async def slow_loader() -> AuthGraph:
        await release.wait()
        return AuthGraph.from_edges({"admin": ["editDoc"]})

    pending = asyncio.create_task(cache.get_or_compute("u1", {"admin"}, slow_loader))
    await asyncio.sleep(0)
    cache.clear()
    release.set()
    await pending

    assert len(cache) == 0
