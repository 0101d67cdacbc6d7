# data/directory_repo.py
import sqlite3
from typing import Optional, Dict, Any, List

from zonemapper.domain.models import PincodeRecord
from zonemapper.directory.master import MasterDirectory

SNAPSHOT_UPSERT_SQL = """
INSERT INTO snapshots (source, records_hash, record_count, created_at)
VALUES (?, ?, ?, CURRENT_TIMESTAMP)
ON CONFLICT(source) DO UPDATE SET
    records_hash = excluded.records_hash,
    record_count = excluded.record_count,
    created_at   = CURRENT_TIMESTAMP;
"""

PINCODE_INSERT_SQL = """
INSERT INTO pincodes (source, pincode, zone, state, city)
VALUES (?, ?, ?, ?, ?);
"""

def save_snapshot(conn: sqlite3.Connection, *, source: str, directory: MasterDirectory) -> str:
    """Replace the stored snapshot for `source`. Returns the records hash."""
    records_hash = directory.fingerprint()
    with conn:  # single transaction
        conn.execute("DELETE FROM pincodes WHERE source = ?;", (source,))
        conn.execute(SNAPSHOT_UPSERT_SQL, (source, records_hash, len(directory)))
        conn.executemany(
            PINCODE_INSERT_SQL,
            ((source, r.pincode, r.zone, r.state, r.city) for r in directory.records()),
        )
    return records_hash

def load_snapshot(conn: sqlite3.Connection, source: str) -> Optional[List[PincodeRecord]]:
    """Stored records for `source`, or None if no snapshot exists."""
    if snapshot_info(conn, source) is None:
        return None
    cur = conn.execute(
        "SELECT pincode, zone, state, city FROM pincodes WHERE source = ? ORDER BY pincode;",
        (source,),
    )
    return [PincodeRecord(pincode=p, zone=z, state=s, city=c) for p, z, s, c in cur.fetchall()]

def snapshot_info(conn: sqlite3.Connection, source: str) -> Optional[Dict[str, Any]]:
    cur = conn.execute(
        "SELECT source, records_hash, record_count, created_at FROM snapshots WHERE source = ?;",
        (source,),
    )
    row = cur.fetchone()
    if row is None:
        return None
    col_names = [desc[0] for desc in cur.description]
    return dict(zip(col_names, row))

def delete_snapshot(conn: sqlite3.Connection, source: str) -> None:
    with conn:
        conn.execute("DELETE FROM pincodes WHERE source = ?;", (source,))
        conn.execute("DELETE FROM snapshots WHERE source = ?;", (source,))
