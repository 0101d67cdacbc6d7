import pytest

from zonemapper.data import directory_repo, directory_schema
from zonemapper.data.db import connect
from zonemapper.directory.master import MasterDirectory
from zonemapper.domain.models import PincodeRecord


@pytest.fixture
def conn():
    con = connect(":memory:")
    directory_schema.create_directory_cache(con)
    yield con
    con.close()


class TestSchema:

    def test_tables_created(self, conn):
        names = {r[0] for r in conn.execute("SELECT name FROM sqlite_master WHERE type IN ('table', 'index')")}
        assert {"snapshots", "pincodes", "idx_pincodes_source_zone"} <= names

    def test_idempotent(self, conn):
        directory_schema.create_directory_cache(conn)


class TestSnapshots:
    """Saving and loading directory snapshots."""

    def test_round_trip(self, conn, directory):
        records_hash = directory_repo.save_snapshot(conn, source="pincodes.json", directory=directory)
        loaded = directory_repo.load_snapshot(conn, "pincodes.json")

        assert records_hash == directory.fingerprint()
        assert loaded == directory.records()
        assert MasterDirectory(loaded).fingerprint() == records_hash

    def test_snapshot_info(self, conn, directory):
        directory_repo.save_snapshot(conn, source="pincodes.json", directory=directory)
        info = directory_repo.snapshot_info(conn, "pincodes.json")
        assert info["record_count"] == 18
        assert info["records_hash"] == directory.fingerprint()
        assert info["created_at"]

    def test_resave_replaces(self, conn, directory):
        directory_repo.save_snapshot(conn, source="src", directory=directory)
        smaller = MasterDirectory([PincodeRecord(110001, "N1")])
        directory_repo.save_snapshot(conn, source="src", directory=smaller)

        assert directory_repo.load_snapshot(conn, "src") == [PincodeRecord(110001, "N1")]
        assert directory_repo.snapshot_info(conn, "src")["record_count"] == 1

    def test_sources_kept_apart(self, conn, directory):
        directory_repo.save_snapshot(conn, source="a", directory=directory)
        directory_repo.save_snapshot(conn, source="b", directory=MasterDirectory([PincodeRecord(110001, "N9")]))
        assert len(directory_repo.load_snapshot(conn, "a")) == 18
        assert directory_repo.load_snapshot(conn, "b")[0].zone == "N9"

    def test_unknown_source(self, conn):
        assert directory_repo.load_snapshot(conn, "nope") is None
        assert directory_repo.snapshot_info(conn, "nope") is None

    def test_delete(self, conn, directory):
        directory_repo.save_snapshot(conn, source="src", directory=directory)
        directory_repo.delete_snapshot(conn, "src")
        assert directory_repo.load_snapshot(conn, "src") is None
        assert conn.execute("SELECT COUNT(*) FROM pincodes").fetchone()[0] == 0
