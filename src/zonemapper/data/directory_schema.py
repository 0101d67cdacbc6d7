"""Schema for the on-disk master directory snapshot."""
import sqlite3

def create_directory_cache(con) -> sqlite3.Connection:
    """Open or create the directory snapshot tables."""
    con.executescript("""
    -- One row per logical directory source (path or URL)
    CREATE TABLE IF NOT EXISTS snapshots (
        source        TEXT PRIMARY KEY,
        records_hash  TEXT NOT NULL,
        record_count  INTEGER NOT NULL,
        created_at    TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
    );

    CREATE TABLE IF NOT EXISTS pincodes (
        source   TEXT NOT NULL,
        pincode  INTEGER NOT NULL,
        zone     TEXT NOT NULL,
        state    TEXT NOT NULL DEFAULT '',
        city     TEXT NOT NULL DEFAULT '',
        PRIMARY KEY (source, pincode),
        FOREIGN KEY (source) REFERENCES snapshots(source) ON DELETE CASCADE
    );

    CREATE INDEX IF NOT EXISTS idx_pincodes_source_zone ON pincodes(source, zone);
    """)

    return con
