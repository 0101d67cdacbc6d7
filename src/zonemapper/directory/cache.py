"""Process-wide memoisation of loaded directories."""

import logging
import threading
from typing import Callable, Dict

from zonemapper.directory.master import MasterDirectory

logger = logging.getLogger(__name__)

DirectoryLoader = Callable[..., MasterDirectory]


class DirectoryCache:
    """
    Memoises one MasterDirectory per logical source.

    Concurrent callers of `get` for the same source all receive the same
    instance; the loader runs at most once until `refresh` or `clear`.
    The loader is called as `loader(source, force=bool)`.
    """

    def __init__(self, loader: DirectoryLoader):
        self._loader = loader
        self._entries: Dict[str, MasterDirectory] = {}
        self._lock = threading.Lock()

    def get(self, source) -> MasterDirectory:
        key = str(source)
        directory = self._entries.get(key)
        if directory is not None:
            return directory
        with self._lock:
            directory = self._entries.get(key)
            if directory is None:
                directory = self._loader(key, force=False)
                self._entries[key] = directory
        return directory

    def refresh(self, source) -> MasterDirectory:
        """Reload `source`, bypassing both this cache and any snapshot."""
        key = str(source)
        with self._lock:
            directory = self._loader(key, force=True)
            self._entries[key] = directory
        logger.info("Refreshed master directory for %s", key)
        return directory

    def is_loaded(self, source) -> bool:
        return str(source) in self._entries

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
