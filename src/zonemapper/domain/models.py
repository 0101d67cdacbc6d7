"""Core domain models for serviceability encoding."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Dict, Any, List, Tuple, Mapping


class CoverageMode(Enum):
    """Stored encoding of one zone's served-pincode set."""
    FULL_ZONE = "FULL_ZONE"
    FULL_MINUS_EXCEPTIONS = "FULL_MINUS_EXCEPT"
    ONLY_SERVED = "ONLY_SERVED"
    NOT_SERVED = "NOT_SERVED"


@dataclass(frozen=True)
class PincodeRecord:
    """One row of the master directory."""
    pincode: int
    zone: str
    state: str = ""
    city: str = ""


@dataclass(frozen=True)
class ServiceabilityClaim:
    """A vendor's raw, unreconciled claim to serve a pincode."""
    pincode: int
    claimed_zone: Optional[str] = None
    is_oda: bool = False
    active: bool = True
    row: Optional[int] = None  # source row, for warnings


@dataclass(frozen=True)
class PincodeRange:
    """Inclusive run of consecutive pincodes."""
    start: int
    end: int

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"Range start {self.start} is after end {self.end}")

    @property
    def size(self) -> int:
        return self.end - self.start + 1

    def __contains__(self, pincode: int) -> bool:
        return self.start <= pincode <= self.end

    def to_dict(self) -> Dict[str, int]:
        return {"s": self.start, "e": self.end}

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "PincodeRange":
        return cls(start=int(d["s"]), end=int(d["e"]))


@dataclass(frozen=True)
class CompressedPincodes:
    """Ranges plus leftover singles, as produced by the range compressor."""
    ranges: Tuple[PincodeRange, ...] = ()
    singles: Tuple[int, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.ranges and not self.singles

    @property
    def count(self) -> int:
        # ranges and singles never overlap when produced by compress()
        return sum(r.size for r in self.ranges) + len(self.singles)

    def ranges_as_dicts(self) -> List[Dict[str, int]]:
        return [r.to_dict() for r in self.ranges]


@dataclass(frozen=True)
class ZoneCoverage:
    """Per-zone coverage entry of the serviceability section."""
    zone: str
    mode: CoverageMode
    total_in_zone: int
    served_count: int
    coverage_percent: float
    payload: CompressedPincodes = field(default_factory=CompressedPincodes)
    is_special: bool = False

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "mode": self.mode.value,
            "totalInZone": self.total_in_zone,
            "servedCount": self.served_count,
            "coveragePercent": self.coverage_percent,
        }
        if self.is_special:
            d["type"] = "special"
        if self.mode is CoverageMode.FULL_MINUS_EXCEPTIONS:
            d["exceptRanges"] = self.payload.ranges_as_dicts()
            d["exceptSingles"] = list(self.payload.singles)
        elif self.mode is CoverageMode.ONLY_SERVED:
            d["servedRanges"] = self.payload.ranges_as_dicts()
            d["servedSingles"] = list(self.payload.singles)
        return d

    @classmethod
    def from_dict(cls, zone: str, d: Mapping[str, Any]) -> "ZoneCoverage":
        mode = CoverageMode(d["mode"])
        if mode is CoverageMode.FULL_MINUS_EXCEPTIONS:
            raw_ranges, raw_singles = d.get("exceptRanges") or [], d.get("exceptSingles") or []
        elif mode is CoverageMode.ONLY_SERVED:
            raw_ranges, raw_singles = d.get("servedRanges") or [], d.get("servedSingles") or []
        else:
            raw_ranges, raw_singles = [], []
        return cls(
            zone=zone,
            mode=mode,
            total_in_zone=int(d.get("totalInZone", 0)),
            served_count=int(d.get("servedCount", 0)),
            coverage_percent=float(d.get("coveragePercent", 0.0)),
            payload=CompressedPincodes(
                ranges=tuple(PincodeRange.from_dict(r) for r in raw_ranges),
                singles=tuple(int(p) for p in raw_singles),
            ),
            is_special=d.get("type") == "special",
        )


@dataclass(frozen=True)
class OdaCoverage:
    """ODA pincodes of one zone."""
    zone: str
    pincodes: CompressedPincodes
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "odaRanges": self.pincodes.ranges_as_dicts(),
            "odaSingles": list(self.pincodes.singles),
            "odaCount": self.count,
        }


@dataclass(frozen=True)
class ZoneRemap:
    """Pincodes the vendor labels `claimed_zone` but the master files under `master_zone`."""
    claimed_zone: str
    master_zone: str
    count: int
    pincodes: CompressedPincodes

    def to_dict(self) -> Dict[str, Any]:
        return {
            "claimedZone": self.claimed_zone,
            "masterZone": self.master_zone,
            "count": self.count,
            "ranges": self.pincodes.ranges_as_dicts(),
            "singles": list(self.pincodes.singles),
        }


@dataclass(frozen=True)
class ZoneDiscrepancies:
    total_mismatched: int = 0
    remaps: Tuple[ZoneRemap, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalMismatched": self.total_mismatched,
            "remaps": [r.to_dict() for r in self.remaps],
        }


@dataclass(frozen=True)
class AuditEntry:
    """One append-only governance edit."""
    timestamp: str
    editor: str
    reason: str
    summary: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "timestamp": self.timestamp,
            "editor": self.editor,
            "reason": self.reason,
            "summary": self.summary,
        }


@dataclass(frozen=True)
class UTSFDocument:
    """
    Versioned, immutable serviceability snapshot for one vendor.

    `serviceability` and `oda` are keyed by zone code. Later edits are
    appended to `updates` through `with_update`, which returns a new
    document.
    """
    version: str
    generated_at: str
    meta: Dict[str, Any]
    pricing: Dict[str, Any]
    serviceability: Dict[str, ZoneCoverage]
    oda: Dict[str, OdaCoverage]
    stats: Dict[str, Any]
    zone_overrides: Dict[int, str] = field(default_factory=dict)
    zone_discrepancies: Optional[ZoneDiscrepancies] = None
    updates: Tuple[AuditEntry, ...] = ()
    source_format: str = "webapp"

    def with_update(self, entry: AuditEntry) -> "UTSFDocument":
        return replace(self, updates=self.updates + (entry,))

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "version": self.version,
            "generatedAt": self.generated_at,
            "sourceFormat": self.source_format,
            "meta": dict(self.meta),
            "pricing": self.pricing,
            "serviceability": {z: c.to_dict() for z, c in self.serviceability.items()},
            "oda": {z: o.to_dict() for z, o in self.oda.items()},
            "stats": dict(self.stats),
            "updates": [u.to_dict() for u in self.updates],
        }
        # JSON object keys are strings
        if self.zone_overrides:
            d["zoneOverrides"] = {str(p): z for p, z in sorted(self.zone_overrides.items())}
        if self.zone_discrepancies and self.zone_discrepancies.total_mismatched > 0:
            d["zoneDiscrepancies"] = self.zone_discrepancies.to_dict()
        return d


@dataclass
class EncodeResult:
    """Document plus the recoverable warnings raised while building it."""
    document: UTSFDocument
    warnings: List[Any] = field(default_factory=list)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)


@dataclass(frozen=True)
class ValidationReport:
    is_valid: bool
    errors: Tuple[str, ...] = ()
