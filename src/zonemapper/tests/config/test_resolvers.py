import pytest
from unittest.mock import patch

from zonemapper.config.resolvers import SCHEMA_VERSION, _resolve_cache_path, default_cache_path


class TestDefaultCachePath:

    def test_under_user_cache_dir(self, tmp_path):
        with patch("zonemapper.config.resolvers.user_cache_dir", return_value=str(tmp_path / "cache")):
            path = default_cache_path()
        assert path == tmp_path / "cache" / f"directory-v{SCHEMA_VERSION}.sqlite"
        assert path.parent.is_dir()


class TestResolveCachePath:
    """Choosing the directory snapshot DB for a run."""

    def test_cache_disabled(self):
        assert _resolve_cache_path(use_cache=False, fresh_cache=False, cache_path=None) is None

    def test_fresh_without_cache_rejected(self):
        with pytest.raises(ValueError, match="Cannot set fresh_cache=True when use_cache=False"):
            _resolve_cache_path(use_cache=False, fresh_cache=True, cache_path=None)

    def test_default_path(self, tmp_path):
        cache_file = tmp_path / "default.sqlite"
        with patch("zonemapper.config.resolvers.default_cache_path", return_value=cache_file):
            assert _resolve_cache_path(use_cache=True, fresh_cache=False, cache_path=None) == cache_file

    def test_custom_path_kept(self, tmp_path):
        cache_file = tmp_path / "custom.sqlite"
        cache_file.touch()
        result = _resolve_cache_path(use_cache=True, fresh_cache=False, cache_path=str(cache_file))
        assert result == cache_file
        assert cache_file.exists()

    def test_fresh_deletes_existing(self, tmp_path):
        cache_file = tmp_path / "custom.sqlite"
        cache_file.touch()
        result = _resolve_cache_path(use_cache=True, fresh_cache=True, cache_path=str(cache_file))
        assert result == cache_file
        assert not cache_file.exists()

    def test_fresh_missing_file(self, tmp_path):
        cache_file = tmp_path / "new.sqlite"
        assert _resolve_cache_path(use_cache=True, fresh_cache=True, cache_path=str(cache_file)) == cache_file
