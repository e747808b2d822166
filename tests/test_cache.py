"""Snapshot cache tests (fake clock, no sleeping)."""

import threading

import pytest

from quakeswarm.cache import SnapshotCache

from conftest import hours, make_eq


class CountingLoader:

    def __init__(self, batches):
        self.batches = list(batches)
        self.calls = 0

    def __call__(self):
        batch = self.batches[min(self.calls, len(self.batches) - 1)]
        self.calls += 1
        if isinstance(batch, Exception):
            raise batch
        return batch


@pytest.fixture
def events():
    return [make_eq(hours(i)) for i in range(3)]


class TestSnapshotCache:

    def test_first_get_loads(self, clock, events):
        loader = CountingLoader([events])
        cache = SnapshotCache(loader, ttl_seconds=60, clock=clock)

        assert cache.age() is None
        assert cache.get() == tuple(events)
        assert loader.calls == 1

    def test_snapshot_is_immutable_copy(self, clock, events):
        cache = SnapshotCache(lambda: events, clock=clock)
        snapshot = cache.get()
        events.append(make_eq())
        assert isinstance(snapshot, tuple)
        assert len(snapshot) == 3

    def test_served_from_cache_within_ttl(self, clock, events):
        loader = CountingLoader([events])
        cache = SnapshotCache(loader, ttl_seconds=60, clock=clock)

        cache.get()
        clock.advance(59)
        cache.get()

        assert loader.calls == 1
        assert cache.age() == 59
        assert not cache.is_stale()

    def test_reloads_after_ttl(self, clock, events):
        newer = events + [make_eq(hours(10))]
        loader = CountingLoader([events, newer])
        cache = SnapshotCache(loader, ttl_seconds=60, clock=clock)

        cache.get()
        clock.advance(60)
        assert cache.is_stale()

        assert cache.get() == tuple(newer)
        assert loader.calls == 2
        assert cache.age() == 0

    def test_default_ttl_is_one_hour(self, clock, events):
        loader = CountingLoader([events])
        cache = SnapshotCache(loader, clock=clock)
        cache.get()
        clock.advance(3599)
        cache.get()
        assert loader.calls == 1
        clock.advance(1)
        cache.get()
        assert loader.calls == 2

    def test_invalidate_forces_reload(self, clock, events):
        loader = CountingLoader([events, events[:1]])
        cache = SnapshotCache(loader, ttl_seconds=60, clock=clock)

        cache.get()
        cache.invalidate()

        assert cache.is_stale()
        assert len(cache.get()) == 1
        assert loader.calls == 2
        assert not cache.is_stale()

    def test_failed_refresh_serves_previous_snapshot(self, clock, events):
        loader = CountingLoader([events, OSError("disk gone")])
        cache = SnapshotCache(loader, ttl_seconds=60, clock=clock)

        cache.get()
        clock.advance(120)

        assert cache.get() == tuple(events)
        # Still stale, so the next call retries
        assert cache.is_stale()
        cache.get()
        assert loader.calls == 3

    def test_failed_first_load_raises(self, clock):
        cache = SnapshotCache(CountingLoader([OSError("disk gone")]), clock=clock)
        with pytest.raises(OSError):
            cache.get()

    def test_invalidate_during_load_is_not_lost(self, clock, events):
        cache = None
        calls = []

        def loader():
            calls.append(1)
            if len(calls) == 2:
                # Catalog changes again while this load is running
                cache.invalidate()
            return events

        cache = SnapshotCache(loader, ttl_seconds=60, clock=clock)
        cache.get()
        cache.invalidate()
        cache.get()

        assert cache.is_stale()
        cache.get()
        assert len(calls) == 3
        assert not cache.is_stale()

    def test_readers_see_previous_snapshot_during_refresh(self, clock, events):
        newer = [make_eq(hours(50))]
        started = threading.Event()
        release = threading.Event()
        calls = []

        def loader():
            calls.append(1)
            if len(calls) == 1:
                return events
            started.set()
            release.wait(timeout=5)
            return newer

        cache = SnapshotCache(loader, ttl_seconds=60, clock=clock)
        cache.get()
        clock.advance(61)

        results = {}
        refresher = threading.Thread(target=lambda: results.setdefault('refresher', cache.get()))
        refresher.start()
        assert started.wait(timeout=5)

        # Refresh in flight: this reader must not block or see a partial load
        assert cache.get() == tuple(events)

        release.set()
        refresher.join(timeout=5)
        assert results['refresher'] == tuple(newer)
        assert cache.get() == tuple(newer)
        assert len(calls) == 2
