# config/resolvers.py
from pathlib import Path
from typing import Optional
from platformdirs import user_cache_dir

APP = "zonemapper"
SCHEMA_VERSION = 1  # increment when the snapshot schema changes

def default_cache_path() -> Path:
    p = Path(user_cache_dir(APP))
    p.mkdir(parents=True, exist_ok=True)
    return p / f"directory-v{SCHEMA_VERSION}.sqlite"

def _resolve_cache_path(*, use_cache: bool, fresh_cache: bool, cache_path: Optional[str]) -> Optional[Path]:
    """
    Decide which directory snapshot DB this run uses:
    - use_cache=False: no snapshot at all.
    - fresh_cache=True: start from an empty DB at the given/default path.
    - otherwise: provided/default path, created on first write.
    """
    if not use_cache:
        if fresh_cache:
            raise ValueError("Cannot set fresh_cache=True when use_cache=False.")
        return None

    p = Path(cache_path) if cache_path else default_cache_path()
    if fresh_cache and p.exists():
        p.unlink()
    return p
