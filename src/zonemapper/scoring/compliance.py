# zonemapper/scoring/compliance.py
"""Strict set-difference compliance score."""

import logging
from typing import Iterable, Mapping

from zonemapper.directory.master import MasterDirectory

from .models import ComplianceResult

logger = logging.getLogger(__name__)

BIN_RULES = [
    ("healthy",  0.95),
    ("fair",     0.80),
    ("degraded", 0.50),
]

def compliance_bin(score: float) -> str:
    for label, thr in BIN_RULES:
        if score >= thr:
            return label
    return "critical"

class ComplianceScorer:
    """
    Scores how completely a vendor covers the zones it claims.

    Only zones present in `served_by_zone` count. Every master pincode
    of such a zone that the vendor does not serve is a forced exception,
    so a broad, partial claim scores lower than a narrow, complete one.
    Zones never claimed do not count against the vendor.
    """

    def __init__(self, directory: MasterDirectory):
        self.directory = directory

    def assess(self, served_by_zone: Mapping[str, Iterable[int]]) -> ComplianceResult:
        total_considered = 0
        forced_exceptions = 0
        zones_considered = 0

        for zone, served in served_by_zone.items():
            master = self.directory.zone_pincode_set(zone)
            if not master:
                continue
            zones_considered += 1
            total_considered += len(master)
            forced_exceptions += len(master - set(served))

        if total_considered == 0:
            score = 1.0
        else:
            score = round(1.0 - forced_exceptions / total_considered, 4)

        logger.info(
            "Compliance score: %s (%d forced exceptions / %d master pincodes)",
            score, forced_exceptions, total_considered,
        )
        return ComplianceResult(
            score=score,
            bin=compliance_bin(score),
            forced_exceptions=forced_exceptions,
            total_considered=total_considered,
            zones_considered=zones_considered,
        )

    def score(self, served_by_zone: Mapping[str, Iterable[int]]) -> float:
        return self.assess(served_by_zone).score

def score(served_by_zone: Mapping[str, Iterable[int]], directory: MasterDirectory) -> float:
    return ComplianceScorer(directory).score(served_by_zone)
