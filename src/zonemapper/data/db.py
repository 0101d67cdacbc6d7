import sqlite3

# snapshot writers may briefly contend when several CLI runs share one cache file
_COMMON = (
    ("foreign_keys", "ON"),
    ("busy_timeout", "30000"),
    ("synchronous", "NORMAL"),
)
_WAL = (("journal_mode", "WAL"),)
_ROLLBACK = (("journal_mode", "DELETE"), ("temp_store", "MEMORY"))


def connect(db_path: str, use_wal: bool = False) -> sqlite3.Connection:
    """Open a directory snapshot database with the project's pragmas applied."""
    conn = sqlite3.connect(db_path)
    for name, value in _COMMON + (_WAL if use_wal else _ROLLBACK):
        conn.execute(f"PRAGMA {name} = {value};")
    return conn
