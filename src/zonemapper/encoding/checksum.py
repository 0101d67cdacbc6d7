"""Order-independent checksum over a serviceability array."""

from typing import Any, Iterable, Mapping, Tuple

from zonemapper.domain.models import ServiceabilityClaim

_MASK32 = 0xFFFFFFFF


def _entry_key(entry: Any) -> Tuple[int, str, bool]:
    if isinstance(entry, ServiceabilityClaim):
        return entry.pincode, (entry.claimed_zone or "").upper(), bool(entry.is_oda)
    if isinstance(entry, Mapping):
        is_oda = entry.get("isODA", entry.get("is_oda", False))
        return int(entry["pincode"]), str(entry.get("zone") or "").upper(), bool(is_oda)
    raise TypeError(f"Unsupported checksum entry: {type(entry).__name__}")


def rolling_hash(text: str) -> int:
    """32-bit `h * 31 + c` hash, returned as a signed 32-bit value."""
    h = 0
    for ch in text:
        h = ((h << 5) - h + ord(ch)) & _MASK32
    return h - (1 << 32) if h & 0x80000000 else h


def checksum(entries: Iterable[Any]) -> str:
    """
    Deterministic digest of `{pincode, zone, isODA}` entries.

    Entries are put in canonical order first, so any permutation of the
    same multiset yields the same 8-character hex string. Not
    cryptographically secure.
    """
    keys = sorted(_entry_key(e) for e in entries)
    text = "|".join(
        f"{pincode}:{zone}:{'true' if is_oda else 'false'}" for pincode, zone, is_oda in keys
    )
    return format(abs(rolling_hash(text)), "08x")
