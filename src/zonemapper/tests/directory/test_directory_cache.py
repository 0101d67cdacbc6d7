import threading
import time
from unittest.mock import Mock

from zonemapper.directory import DirectoryCache, MasterDirectory
from zonemapper.domain.models import PincodeRecord


def _directory():
    return MasterDirectory([PincodeRecord(110001, "N1")])


class TestDirectoryCache:
    """Memoised directory loading per source."""

    def test_loads_once(self):
        loader = Mock(return_value=_directory())
        cache = DirectoryCache(loader)

        first = cache.get("pincodes.json")
        second = cache.get("pincodes.json")

        assert first is second
        loader.assert_called_once_with("pincodes.json", force=False)
        assert cache.is_loaded("pincodes.json")

    def test_sources_are_independent(self):
        loader = Mock(side_effect=lambda source, force: _directory())
        cache = DirectoryCache(loader)
        assert cache.get("a") is not cache.get("b")
        assert loader.call_count == 2

    def test_refresh_forces_reload(self):
        loader = Mock(side_effect=lambda source, force: _directory())
        cache = DirectoryCache(loader)
        first = cache.get("a")
        refreshed = cache.refresh("a")

        assert refreshed is not first
        assert cache.get("a") is refreshed
        loader.assert_called_with("a", force=True)

    def test_clear(self):
        loader = Mock(side_effect=lambda source, force: _directory())
        cache = DirectoryCache(loader)
        cache.get("a")
        cache.clear()
        assert not cache.is_loaded("a")
        cache.get("a")
        assert loader.call_count == 2

    def test_concurrent_callers_share_one_load(self):
        calls = []

        def slow_loader(source, force):
            calls.append(source)
            time.sleep(0.05)
            return _directory()

        cache = DirectoryCache(slow_loader)
        barrier = threading.Barrier(8)
        results = []

        def worker():
            barrier.wait()
            results.append(cache.get("shared"))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert calls == ["shared"]
        assert len(results) == 8
        assert all(r is results[0] for r in results)
