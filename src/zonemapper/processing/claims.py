"""Boundary adapter from uploaded rows to normalised serviceability claims."""

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from zonemapper.directory.master import MasterDirectory
from zonemapper.domain.models import ServiceabilityClaim
from zonemapper.encoding.zones import region_by_prefix

logger = logging.getLogger(__name__)

PINCODE_FIELDS = ("pincode", "pin", "Pincode", "PINCODE", "pin_code", "postal_code")
ZONE_FIELDS = ("zone", "claimedZone", "vendorZone", "Zone")
ODA_FIELDS = ("isODA", "isOda", "is_oda", "oda", "ODA")
ACTIVE_FIELDS = ("active", "isActive", "is_active")

ODA_TRUE_VALUES = {"true", "yes", "1", "y", "oda", "remote"}
_VALID_LEAD = re.compile(r"^[1-8]")


def normalize_pincode(value: Any) -> Optional[int]:
    """
    Six-digit pincode from spreadsheet-style input, or None.

    Handles ints, floats (110001.0), scientific notation (1.10001e+5) and
    strings with separators. A longer digit run is cut to its first six
    digits. The pincode must start with 1-8.
    """
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    if not text:
        return None

    if "e" in text.lower() or "." in text:
        try:
            num = float(text)
        except ValueError:
            num = None
        if num is not None and math.isfinite(num):
            text = str(int(round(num)))

    digits = re.sub(r"[^0-9]", "", text)
    if len(digits) > 6:
        digits = digits[:6]
    if len(digits) == 6 and _VALID_LEAD.match(digits):
        return int(digits)
    return None


def parse_oda_value(value: Any) -> bool:
    if value is None or value == "":
        return False
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ODA_TRUE_VALUES


def _parse_active(value: Any) -> bool:
    if value is None or value == "":
        return True
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() not in {"false", "no", "0", "n", "inactive"}


def _first(row: Mapping[str, Any], names: Tuple[str, ...]) -> Any:
    for name in names:
        if name in row and row[name] not in (None, ""):
            return row[name]
    return None


@dataclass
class ClaimParseResult:
    claims: List[ServiceabilityClaim] = field(default_factory=list)
    invalid: List[Dict[str, Any]] = field(default_factory=list)
    duplicates: List[Dict[str, Any]] = field(default_factory=list)


class ClaimParser:
    """Turns loosely-shaped upload rows into one normalised claim shape."""

    def __init__(self, first_row: int = 1):
        self.first_row = first_row

    def parse(self, rows: Iterable[Any]) -> ClaimParseResult:
        """
        Normalise every row. Repeated pincodes are reported in `duplicates`
        but still become claims, so conflicting zones on repeats reach the
        reconciler.
        """
        result = ClaimParseResult()
        first_seen: Dict[int, int] = {}

        for i, row in enumerate(rows):
            line = i + self.first_row
            if not isinstance(row, Mapping):
                # bare values are treated as a pincode column
                row = {"pincode": row}

            raw_pincode = _first(row, PINCODE_FIELDS)
            pincode = normalize_pincode(raw_pincode)
            if pincode is None:
                result.invalid.append({
                    "row": line,
                    "pincode": "" if raw_pincode is None else str(raw_pincode),
                    "reason": "Invalid pincode format (must be 6 digits)",
                })
                continue

            if pincode in first_seen:
                result.duplicates.append({"row": line, "pincode": pincode, "first_row": first_seen[pincode]})
            else:
                first_seen[pincode] = line

            zone = _first(row, ZONE_FIELDS)
            result.claims.append(ServiceabilityClaim(
                pincode=pincode,
                claimed_zone=str(zone).strip().upper() if zone is not None else None,
                is_oda=parse_oda_value(_first(row, ODA_FIELDS)),
                active=_parse_active(_first(row, ACTIVE_FIELDS)),
                row=line,
            ))

        if result.invalid or result.duplicates:
            logger.info(
                "Parsed %d claims (%d invalid, %d duplicate rows)",
                len(result.claims), len(result.invalid), len(result.duplicates),
            )
        return result


@dataclass(frozen=True)
class ZoneSummary:
    zone_code: str
    region: str
    pincode_count: int
    states: Tuple[str, ...]
    cities: Tuple[str, ...]
    oda_count: int


def zone_summary(claims: Iterable[ServiceabilityClaim], directory: MasterDirectory) -> List[ZoneSummary]:
    """
    Per master-zone upload summary; pincodes unknown to the directory are left out.

    A repeated pincode counts once, described by its last row.
    """
    latest = {claim.pincode: claim for claim in claims}
    grouped: Dict[str, List[Tuple[ServiceabilityClaim, Any]]] = {}
    for claim in latest.values():
        record = directory.record(claim.pincode)
        if record is None:
            continue
        grouped.setdefault(record.zone, []).append((claim, record))

    summaries = []
    for zone in sorted(grouped):
        entries = grouped[zone]
        summaries.append(ZoneSummary(
            zone_code=zone,
            region=region_by_prefix(zone),
            pincode_count=len(entries),
            states=tuple(dict.fromkeys(r.state for _, r in entries if r.state)),
            cities=tuple(dict.fromkeys(r.city for _, r in entries if r.city)),
            oda_count=sum(1 for c, _ in entries if c.is_oda),
        ))
    return summaries
