"""Directory sources: local JSON files, HTTP endpoints and the sqlite snapshot."""

import json
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, List, Optional
from urllib.parse import urlparse

import httpx

from zonemapper.data import db, directory_repo, directory_schema
from zonemapper.directory.master import MasterDirectory
from zonemapper.domain.exceptions import DatabaseError, DirectoryLoadError
from zonemapper.domain.models import PincodeRecord
from zonemapper.utils.timing import timeit

logger = logging.getLogger(__name__)


def is_url(source: str) -> bool:
    return urlparse(str(source)).scheme in ("http", "https")


def _require_list(data: Any, source: str) -> List[Any]:
    if not isinstance(data, list):
        raise DirectoryLoadError(
            f"Directory source did not return a JSON array (got {type(data).__name__})",
            source=source,
        )
    return data


def read_json_records(path) -> List[Any]:
    """Raw records from a JSON array file."""
    p = Path(path)
    try:
        with p.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except FileNotFoundError as e:
        raise DirectoryLoadError(f"Directory file not found: {p}", source=str(p)) from e
    except (OSError, json.JSONDecodeError) as e:
        raise DirectoryLoadError(f"Failed to read directory file {p}: {e}", source=str(p)) from e
    return _require_list(data, str(p))


def fetch_json_records(url: str, timeout: float = 30.0) -> List[Any]:
    """Raw records from an HTTP endpoint serving a JSON array."""
    try:
        with httpx.Client(timeout=timeout, follow_redirects=True) as client:
            response = client.get(url)
    except httpx.TimeoutException as e:
        raise DirectoryLoadError(f"Timed out fetching directory from {url}", source=url) from e
    except httpx.HTTPError as e:
        raise DirectoryLoadError(f"Failed to fetch directory from {url}: {e}", source=url) from e

    if response.status_code != 200:
        raise DirectoryLoadError(
            f"Failed to load directory: HTTP {response.status_code}",
            source=url,
            status_code=response.status_code,
        )
    try:
        data = response.json()
    except ValueError as e:
        raise DirectoryLoadError(f"Directory response from {url} is not JSON", source=url) from e
    return _require_list(data, url)


@timeit(logger, "directory source load", logging.DEBUG)
def load_records(source: str, timeout: float = 30.0) -> List[Any]:
    if is_url(source):
        return fetch_json_records(source, timeout=timeout)
    return read_json_records(source)


class DirectorySourceLoader:
    """
    Loads a MasterDirectory for a source string.

    With a snapshot path configured, a stored snapshot is preferred over
    the source unless `force` is set, and every fresh load is written back.
    """

    def __init__(self, *, snapshot_path: Optional[Path] = None, timeout: float = 30.0):
        self.snapshot_path = snapshot_path
        self.timeout = timeout

    def __call__(self, source: str, force: bool = False) -> MasterDirectory:
        if self.snapshot_path and not force:
            records = self._try_snapshot(self.read_snapshot, source)
            if records:
                logger.info("Using directory snapshot for %s (%d records)", source, len(records))
                return MasterDirectory.load(records, source=source)

        logger.info("Loading master directory from %s", source)
        directory = MasterDirectory.load(load_records(source, timeout=self.timeout), source=source)

        if self.snapshot_path:
            self._try_snapshot(self.write_snapshot, source, directory)
        return directory

    @contextmanager
    def _snapshot(self, action: str) -> Iterator[sqlite3.Connection]:
        try:
            conn = db.connect(str(self.snapshot_path))
            try:
                directory_schema.create_directory_cache(conn)
                yield conn
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise DatabaseError(
                f"Cannot {action} directory snapshot: {e}",
                recoverable=True,
            ).add_context('path', str(self.snapshot_path)) from e

    def read_snapshot(self, source: str) -> Optional[List[PincodeRecord]]:
        """Stored records for `source`; raises DatabaseError if the snapshot DB is unusable."""
        with self._snapshot("read") as conn:
            return directory_repo.load_snapshot(conn, source)

    def write_snapshot(self, source: str, directory: MasterDirectory) -> str:
        with self._snapshot("store") as conn:
            records_hash = directory_repo.save_snapshot(conn, source=source, directory=directory)
        logger.debug("Stored directory snapshot %s for %s", records_hash[:12], source)
        return records_hash

    @staticmethod
    def _try_snapshot(op, *args):
        # a broken snapshot only costs a reload from the source
        try:
            return op(*args)
        except DatabaseError as e:
            logger.warning("%s", e.message)
            return None
