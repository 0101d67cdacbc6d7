"""Read-back of encoded coverage: served sets and single-pincode lookups."""

from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Union

from zonemapper.directory.master import MasterDirectory
from zonemapper.domain.models import CoverageMode, UTSFDocument, ZoneCoverage
from zonemapper.encoding.ranges import expand_compressed


@dataclass(frozen=True)
class ServiceabilityCheck:
    pincode: int
    zone: Optional[str]
    is_serviceable: bool
    is_oda: bool
    reason: str


def served_pincodes(coverage: ZoneCoverage, zone_master: Iterable[int]) -> List[int]:
    """Reconstruct a zone's served set from its stored mode and payload."""
    mode = coverage.mode
    if mode is CoverageMode.FULL_ZONE:
        return sorted(set(zone_master))
    if mode is CoverageMode.FULL_MINUS_EXCEPTIONS:
        exceptions = set(expand_compressed(coverage.payload))
        return sorted(set(zone_master) - exceptions)
    if mode is CoverageMode.ONLY_SERVED:
        return expand_compressed(coverage.payload)
    return []


def _coverage_for(document: Union[UTSFDocument, Mapping[str, Any]], zone: str) -> Optional[ZoneCoverage]:
    if isinstance(document, UTSFDocument):
        return document.serviceability.get(zone)
    raw = (document.get("serviceability") or {}).get(zone)
    return ZoneCoverage.from_dict(zone, raw) if raw else None


def _is_oda(document: Union[UTSFDocument, Mapping[str, Any]], zone: str, pincode: int) -> bool:
    if isinstance(document, UTSFDocument):
        entry = document.oda.get(zone)
        return entry is not None and pincode in expand_compressed(entry.pincodes)
    raw = (document.get("oda") or {}).get(zone) or {}
    if pincode in (raw.get("odaSingles") or []):
        return True
    return any(int(r["s"]) <= pincode <= int(r["e"]) for r in raw.get("odaRanges") or [])


def is_serviceable(
    document: Union[UTSFDocument, Mapping[str, Any]],
    pincode: int,
    directory: MasterDirectory,
) -> ServiceabilityCheck:
    """Whether an encoded document serves `pincode`, resolved through the master zone."""
    zone = directory.zone_of(pincode)
    if zone is None:
        return ServiceabilityCheck(pincode, None, False, False, "UNKNOWN_PINCODE")

    coverage = _coverage_for(document, zone)
    if coverage is None:
        return ServiceabilityCheck(pincode, zone, False, False, "ZONE_NOT_ENCODED")

    mode = coverage.mode
    if mode is CoverageMode.NOT_SERVED:
        return ServiceabilityCheck(pincode, zone, False, False, "NOT_SERVED")
    if mode is CoverageMode.FULL_MINUS_EXCEPTIONS and pincode in expand_compressed(coverage.payload):
        return ServiceabilityCheck(pincode, zone, False, False, "EXCEPTION")
    if mode is CoverageMode.ONLY_SERVED and pincode not in expand_compressed(coverage.payload):
        return ServiceabilityCheck(pincode, zone, False, False, "NOT_IN_SERVED_LIST")

    return ServiceabilityCheck(pincode, zone, True, _is_oda(document, zone, pincode), "SERVED")
