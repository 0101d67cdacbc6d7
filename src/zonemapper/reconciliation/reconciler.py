"""Reconciliation of vendor claims against the master directory."""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple

from zonemapper.directory.master import MasterDirectory
from zonemapper.domain.exceptions import UnresolvableClaimWarning
from zonemapper.domain.models import ServiceabilityClaim, ZoneDiscrepancies, ZoneRemap
from zonemapper.encoding.ranges import compress, DEFAULT_RANGE_THRESHOLD

logger = logging.getLogger(__name__)


@dataclass
class ReconciliationResult:
    """Per-zone served sets plus everything learnt about zone disagreements."""
    served_by_zone: Dict[str, Set[int]] = field(default_factory=dict)
    oda_by_zone: Dict[str, Set[int]] = field(default_factory=dict)
    overrides: Dict[int, str] = field(default_factory=dict)
    discrepancies: ZoneDiscrepancies = field(default_factory=ZoneDiscrepancies)
    warnings: List[UnresolvableClaimWarning] = field(default_factory=list)
    unresolved_filed: int = 0
    zone_only: bool = False

    @property
    def claimed_zones(self) -> List[str]:
        return sorted(z for z, pins in self.served_by_zone.items() if pins)


class ZoneReconciler:
    """
    Files every claim under its master zone and records where the vendor disagrees.

    The vendor's own zone label is only used for pincodes the master
    directory does not know. A known pincode whose claimed zone differs
    from the master zone gets an override entry and lands in the
    `(claimed, master)` discrepancy bucket.
    """

    def __init__(self, directory: MasterDirectory, *, range_threshold: int = DEFAULT_RANGE_THRESHOLD):
        self.directory = directory
        self.range_threshold = range_threshold

    def reconcile(
        self,
        claims: Optional[Iterable[ServiceabilityClaim]],
        zone_only_codes: Optional[Iterable[str]] = None,
    ) -> ReconciliationResult:
        claims = list(claims or [])
        zone_codes = [z for z in (zone_only_codes or []) if z and str(z).strip()]

        if not claims and zone_codes:
            return self._reconcile_zone_only(zone_codes)
        if claims and zone_codes:
            logger.info(
                "Ignoring %d zone-only codes: explicit pincode claims take precedence",
                len(zone_codes),
            )
        return self._reconcile_claims(claims)

    def _reconcile_zone_only(self, zone_codes: List[str]) -> ReconciliationResult:
        result = ReconciliationResult(zone_only=True)
        logger.info("No pincode claims, deriving coverage from %d claimed zones", len(zone_codes))
        for code in zone_codes:
            zone = str(code).strip().upper()
            pincodes = self.directory.zone_pincode_set(zone)
            if not pincodes:
                logger.warning("Claimed zone %s has no pincodes in the master directory", zone)
                continue
            result.served_by_zone[zone] = set(pincodes)
            logger.debug("Zone %s: %d pincodes from master", zone, len(pincodes))
        return result

    def _reconcile_claims(self, claims: List[ServiceabilityClaim]) -> ReconciliationResult:
        result = ReconciliationResult()
        buckets: Dict[Tuple[str, str], Set[int]] = {}
        unresolved: Set[int] = set()

        for claim in claims:
            pincode = claim.pincode
            claimed_zone = (claim.claimed_zone or "").strip().upper()
            master_zone = self.directory.zone_of(pincode)
            file_zone = master_zone or claimed_zone

            if not file_zone:
                warning = UnresolvableClaimWarning(pincode, row=claim.row)
                logger.warning(warning.message)
                result.warnings.append(warning)
                continue

            if master_zone is None:
                unresolved.add(pincode)

            if claimed_zone and master_zone and claimed_zone != master_zone:
                result.overrides[pincode] = claimed_zone
                buckets.setdefault((claimed_zone, master_zone), set()).add(pincode)

            if not claim.active:
                continue
            result.served_by_zone.setdefault(file_zone, set()).add(pincode)
            if claim.is_oda:
                result.oda_by_zone.setdefault(file_zone, set()).add(pincode)

        result.unresolved_filed = len(unresolved)
        result.discrepancies = self._finalise_discrepancies(buckets)
        if result.overrides:
            logger.info(
                "Zone overrides: %d pincodes mapped differently by vendor", len(result.overrides)
            )
        return result

    def _finalise_discrepancies(self, buckets: Dict[Tuple[str, str], Set[int]]) -> ZoneDiscrepancies:
        remaps = [
            ZoneRemap(
                claimed_zone=claimed,
                master_zone=master,
                count=len(pins),
                pincodes=compress(pins, self.range_threshold),
            )
            for (claimed, master), pins in buckets.items()
        ]
        remaps.sort(key=lambda r: (-r.count, r.claimed_zone, r.master_zone))
        return ZoneDiscrepancies(
            total_mismatched=sum(r.count for r in remaps),
            remaps=tuple(remaps),
        )


def reconcile(
    claims: Optional[Iterable[ServiceabilityClaim]],
    zone_only_codes: Optional[Iterable[str]],
    directory: MasterDirectory,
) -> ReconciliationResult:
    return ZoneReconciler(directory).reconcile(claims, zone_only_codes)
