"""Read-only master pincode directory."""

import hashlib
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from zonemapper.domain.models import PincodeRecord
from zonemapper.domain.exceptions import EmptyDirectoryError

logger = logging.getLogger(__name__)


def coerce_pincode(value: Any) -> Optional[int]:
    """Pincode from int, float or numeric string; None when not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        text = str(value).strip()
        if not text:
            return None
        return int(text) if text.isdigit() else int(round(float(text)))
    except (TypeError, ValueError, OverflowError):
        return None


def _normalise_record(raw: Any) -> Optional[PincodeRecord]:
    if isinstance(raw, PincodeRecord):
        zone = raw.zone.strip().upper()
        return PincodeRecord(raw.pincode, zone, raw.state, raw.city) if zone else None
    if not isinstance(raw, Mapping):
        return None
    pincode = coerce_pincode(raw.get("pincode"))
    zone = str(raw.get("zone") or "").strip().upper()
    if pincode is None or not zone:
        return None
    return PincodeRecord(
        pincode=pincode,
        zone=zone,
        state=str(raw.get("state") or ""),
        city=str(raw.get("city") or ""),
    )


class MasterDirectory:
    """
    Authoritative pincode -> (zone, state, city) table.

    Built once and never mutated, so one instance can be shared by any
    number of concurrent encodes. Duplicate pincodes resolve last-write-wins,
    which keeps every pincode in exactly one zone.
    """

    def __init__(self, records: Iterable[PincodeRecord]):
        by_pincode: Dict[int, PincodeRecord] = {}
        for record in records:
            by_pincode[record.pincode] = record

        zone_sets: Dict[str, List[int]] = {}
        for pincode, record in by_pincode.items():
            zone_sets.setdefault(record.zone, []).append(pincode)

        self._records = by_pincode
        self._pincode_to_zone: Dict[int, str] = {p: r.zone for p, r in by_pincode.items()}
        self._zone_to_pincodes: Dict[str, Tuple[int, ...]] = {
            zone: tuple(sorted(pins)) for zone, pins in zone_sets.items()
        }
        self._zone_sets = {zone: frozenset(pins) for zone, pins in self._zone_to_pincodes.items()}

    @classmethod
    def load(cls, records: Any, *, source: Optional[str] = None) -> "MasterDirectory":
        """
        Build a directory from raw records (mappings or PincodeRecord).

        Pincodes may arrive as strings or numbers. Rows with no usable
        pincode or zone are skipped.

        Raises:
            EmptyDirectoryError: `records` is not a list or yields no usable rows.
        """
        if not isinstance(records, (list, tuple)):
            raise EmptyDirectoryError(
                f"Master directory must be a list of records, got {type(records).__name__}",
                source=source,
            )
        if not records:
            raise EmptyDirectoryError(source=source)

        normalised = []
        skipped = 0
        for raw in records:
            record = _normalise_record(raw)
            if record is None:
                skipped += 1
                continue
            normalised.append(record)

        if not normalised:
            raise EmptyDirectoryError(
                f"Master directory has no usable records ({skipped} skipped)",
                source=source,
            )
        if skipped:
            logger.warning("Skipped %d directory rows without a usable pincode or zone", skipped)

        directory = cls(normalised)
        logger.info(
            "Loaded %d pincodes across %d zones", len(directory), len(directory.zones)
        )
        return directory

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, pincode: int) -> bool:
        return pincode in self._records

    @property
    def zones(self) -> Tuple[str, ...]:
        return tuple(sorted(self._zone_to_pincodes))

    def zone_pincodes(self, zone: str) -> List[int]:
        """Sorted pincodes of a zone; empty for unknown zones."""
        return list(self._zone_to_pincodes.get(zone.upper(), ()))

    def zone_pincode_set(self, zone: str) -> frozenset:
        return self._zone_sets.get(zone.upper(), frozenset())

    def zone_of(self, pincode: int) -> Optional[str]:
        return self._pincode_to_zone.get(pincode)

    def record(self, pincode: int) -> Optional[PincodeRecord]:
        return self._records.get(pincode)

    def records(self) -> List[PincodeRecord]:
        return [self._records[p] for p in sorted(self._records)]

    def fingerprint(self) -> str:
        """SHA-256 over the canonical record list, for snapshot change detection."""
        digest = hashlib.sha256()
        for r in self.records():
            digest.update(f"{r.pincode}\t{r.zone}\t{r.state}\t{r.city}\n".encode("utf-8"))
        return digest.hexdigest()
