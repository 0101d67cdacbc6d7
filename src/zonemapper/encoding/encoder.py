"""UTSF encoder: reconcile, classify, compress and assemble one vendor document."""

import copy
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from zonemapper.classification.classifier import CoverageClassifier, CoverageDecision
from zonemapper.directory.master import MasterDirectory
from zonemapper.domain.exceptions import ValidationWarning
from zonemapper.domain.models import (
    EncodeResult,
    OdaCoverage,
    ServiceabilityClaim,
    UTSFDocument,
    ZoneCoverage,
)
from zonemapper.encoding.ranges import compress
from zonemapper.encoding.zones import REGIONS, SPECIAL_ZONES, encoding_zones, region_of
from zonemapper.processing.validation import DocumentValidator
from zonemapper.reconciliation.reconciler import ReconciliationResult, ZoneReconciler
from zonemapper.scoring.compliance import ComplianceScorer
from zonemapper.scoring.models import ComplianceResult

logger = logging.getLogger(__name__)

UTSF_VERSION = "3.0"
META_VERSION = "3.0.0"

# (dotted path, weight) used for the data completeness score
COMPLETENESS_FIELDS = (
    ("meta.companyName", 10),
    ("pricing.priceRate", 30),
    ("pricing.zoneRates", 30),
    ("serviceability", 30),
)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_meta(vendor_meta: Mapping[str, Any], now: str) -> Dict[str, Any]:
    """Meta section with governance headers. Unknown vendor keys are dropped."""
    customer_id = str(vendor_meta.get("customerID") or "").strip()
    is_temporary = bool(customer_id)
    pincode = vendor_meta.get("pincode")
    return {
        "id": "",
        "companyName": vendor_meta.get("companyName") or "Unknown",
        "vendorCode": vendor_meta.get("vendorCode") or None,
        "customerID": customer_id if is_temporary else None,
        "transporterType": "temporary" if is_temporary else "regular",
        "transportMode": vendor_meta.get("transportMode") or vendor_meta.get("serviceMode") or "LTL",
        "serviceMode": vendor_meta.get("serviceMode") or "FTL",
        "gstNo": vendor_meta.get("gstNo") or None,
        "address": vendor_meta.get("address") or None,
        "state": vendor_meta.get("state") or None,
        "city": vendor_meta.get("city") or None,
        "pincode": str(pincode) if pincode else None,
        "contactPersonName": vendor_meta.get("contactPersonName") or None,
        "vendorPhone": vendor_meta.get("vendorPhone") or None,
        "vendorEmail": vendor_meta.get("vendorEmail") or None,
        "rating": float(vendor_meta.get("rating") or 4.0),
        "vendorRatings": dict(vendor_meta.get("vendorRatings") or {
            "priceSupport": 0,
            "deliveryTime": 0,
            "tracking": 0,
            "salesSupport": 0,
            "damageLoss": 0,
        }),
        "isVerified": False,
        "approvalStatus": "pending",
        "created": {"by": vendor_meta.get("createdBy") or "WEBAPP_USER", "at": now, "source": "FE"},
        "version": META_VERSION,
        "updateCount": 0,
        "createdAt": now,
        "updatedAt": now,
    }


def data_completeness(sections: Mapping[str, Any]) -> float:
    """Weighted share of required fields that are present and non-empty, in percent."""
    total = sum(w for _, w in COMPLETENESS_FIELDS)
    achieved = 0
    for path, weight in COMPLETENESS_FIELDS:
        value: Any = sections
        for part in path.split("."):
            value = value.get(part) if isinstance(value, Mapping) else None
        if value:
            achieved += weight
    return round(achieved / total * 100, 1)


class UTSFEncoder:
    """
    Builds a fresh UTSFDocument per call.

    Holds no per-call state, so one encoder (and one directory) can serve
    concurrent encodes for different vendors.
    """

    def __init__(
        self,
        *,
        range_threshold: int = 3,
        coverage_threshold_percent: float = 50.0,
        version: str = UTSF_VERSION,
        source_format: str = "webapp",
        clock: Optional[Callable[[], str]] = None,
    ):
        self.range_threshold = range_threshold
        self.classifier = CoverageClassifier(coverage_threshold_percent)
        self.version = version
        self.source_format = source_format
        self._clock = clock or _utc_now

    @classmethod
    def from_settings(cls, settings) -> "UTSFEncoder":
        return cls(
            range_threshold=settings.range_threshold,
            coverage_threshold_percent=settings.coverage_threshold_percent,
            version=settings.utsf_version,
            source_format=settings.source_format,
        )

    def encode(
        self,
        vendor_meta: Mapping[str, Any],
        pricing: Optional[Mapping[str, Any]],
        claims: Optional[Iterable[ServiceabilityClaim]],
        zone_only_codes: Optional[Iterable[str]],
        directory: MasterDirectory,
    ) -> EncodeResult:
        now = self._clock()
        claims = list(claims or [])
        zone_only_codes = list(zone_only_codes or [])

        reconciled = ZoneReconciler(directory, range_threshold=self.range_threshold).reconcile(
            claims, zone_only_codes
        )
        serviceability = self._encode_serviceability(reconciled, directory)
        oda = self._encode_oda(reconciled)
        compliance = ComplianceScorer(directory).assess(reconciled.served_by_zone)

        meta = build_meta(vendor_meta or {}, now)
        pricing_section = copy.deepcopy(dict(pricing or {}))
        stats = self._calculate_stats(
            serviceability,
            oda,
            reconciled,
            compliance,
            completeness=data_completeness({
                "meta": meta if vendor_meta and vendor_meta.get("companyName") else {},
                "pricing": {
                    "priceRate": pricing_section.get("priceRate"),
                    "zoneRates": pricing_section.get("zoneRates") or pricing_section.get("priceChart"),
                },
                "serviceability": claims or zone_only_codes,
            }),
        )

        document = UTSFDocument(
            version=self.version,
            generated_at=now,
            meta=meta,
            pricing=pricing_section,
            serviceability=serviceability,
            oda=oda,
            stats=stats,
            zone_overrides=dict(reconciled.overrides),
            zone_discrepancies=reconciled.discrepancies if reconciled.discrepancies.total_mismatched else None,
            updates=(),
            source_format=self.source_format,
        )

        warnings: List[Any] = list(reconciled.warnings)
        report = DocumentValidator.validate(document)
        if not report.is_valid:
            logger.warning("Validation warnings for %s: %s", meta["companyName"], list(report.errors))
            warnings.append(ValidationWarning(list(report.errors)))

        return EncodeResult(document=document, warnings=warnings)

    def _encode_serviceability(
        self, reconciled: ReconciliationResult, directory: MasterDirectory
    ) -> Dict[str, ZoneCoverage]:
        serviceability: Dict[str, ZoneCoverage] = {}
        for zone in encoding_zones(directory.zones):
            zone_master = directory.zone_pincodes(zone)
            if not zone_master:
                continue  # nothing to encode relative to
            served = reconciled.served_by_zone.get(zone, set())
            decision = self.classifier.classify(served, zone_master)
            if decision.downgraded:
                logger.info(
                    "Strict delta: zone %s forced FULL_ZONE -> FULL_MINUS_EXCEPT (%d missing pincodes)",
                    zone, len(decision.payload_values),
                )
            serviceability[zone] = self._coverage_entry(zone, decision)
        return serviceability

    def _coverage_entry(self, zone: str, decision: CoverageDecision) -> ZoneCoverage:
        payload = compress(decision.payload_values, self.range_threshold)
        return ZoneCoverage(
            zone=zone,
            mode=decision.mode,
            total_in_zone=decision.total_in_zone,
            served_count=decision.served_count,
            coverage_percent=decision.coverage_percent,
            payload=payload,
            is_special=zone in SPECIAL_ZONES,
        )

    def _encode_oda(self, reconciled: ReconciliationResult) -> Dict[str, OdaCoverage]:
        oda: Dict[str, OdaCoverage] = {}
        for zone in sorted(reconciled.served_by_zone):
            if not reconciled.served_by_zone[zone]:
                continue
            zone_oda = reconciled.oda_by_zone.get(zone, set())
            oda[zone] = OdaCoverage(
                zone=zone,
                pincodes=compress(zone_oda, self.range_threshold),
                count=len(zone_oda),
            )
        return oda

    @staticmethod
    def _calculate_stats(
        serviceability: Mapping[str, ZoneCoverage],
        oda: Mapping[str, OdaCoverage],
        reconciled: ReconciliationResult,
        compliance: ComplianceResult,
        *,
        completeness: float,
    ) -> Dict[str, Any]:
        coverage_by_region: Dict[str, int] = {region: 0 for region in REGIONS}
        total_pincodes = 0
        covered_percents: List[float] = []

        for zone, coverage in serviceability.items():
            total_pincodes += coverage.served_count
            if coverage.served_count > 0:
                covered_percents.append(coverage.coverage_percent)
            region = region_of(zone)
            coverage_by_region[region] = coverage_by_region.get(region, 0) + coverage.served_count

        avg_coverage = sum(covered_percents) / len(covered_percents) if covered_percents else 0.0

        return {
            "totalPincodes": total_pincodes,
            "totalZones": len(covered_percents),
            "odaCount": sum(o.count for o in oda.values()),
            "coverageByRegion": coverage_by_region,
            "avgCoveragePercent": round(avg_coverage, 2),
            "dataCompleteness": completeness,
            "zoneDiscrepancyCount": reconciled.discrepancies.total_mismatched,
            "complianceScore": compliance.score,
            "complianceBin": compliance.bin,
            "unresolvedClaims": len(reconciled.warnings),
            "outOfMasterPincodes": reconciled.unresolved_filed,
        }


def encode(
    vendor_meta: Mapping[str, Any],
    pricing: Optional[Mapping[str, Any]],
    claims: Optional[Iterable[ServiceabilityClaim]],
    zone_only_codes: Optional[Iterable[str]],
    directory: MasterDirectory,
) -> EncodeResult:
    return UTSFEncoder().encode(vendor_meta, pricing, claims, zone_only_codes, directory)
