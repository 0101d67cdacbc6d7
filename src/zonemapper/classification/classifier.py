"""Rules for choosing the cheapest exact encoding of a zone's coverage."""
import logging
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from zonemapper.domain.exceptions import ParameterValidationError
from zonemapper.domain.models import CoverageMode

logger = logging.getLogger(__name__)

DEFAULT_COVERAGE_THRESHOLD = 50.0


@dataclass(frozen=True)
class CoverageDecision:
    """Chosen mode and the uncompressed pincodes its payload must hold."""
    mode: CoverageMode
    payload_values: Tuple[int, ...]
    total_in_zone: int
    served_count: int
    coverage_percent: float
    downgraded: bool = False


class CoverageClassifier:
    """
    Picks one of the four coverage modes for a zone.

    Coverage is measured on `served ∩ zone_master`, so pincodes filed
    under the zone but unknown to the master never inflate it. Whatever
    mode the percentage suggests, a FULL_ZONE result is re-checked against
    the actual set difference and downgraded when anything is missing.
    """

    def __init__(self, threshold_percent: float = DEFAULT_COVERAGE_THRESHOLD):
        if not 0.0 <= threshold_percent <= 100.0:
            raise ParameterValidationError("threshold_percent", threshold_percent, expected="within [0, 100]")
        self.threshold_percent = threshold_percent

    def classify(self, served: Iterable[int], zone_master: Iterable[int]) -> CoverageDecision:
        master = set(zone_master)
        served_set = set(served)
        total = len(master)

        if total == 0:
            return CoverageDecision(CoverageMode.NOT_SERVED, (), 0, 0, 0.0)

        in_zone = served_set & master
        served_count = len(in_zone)
        # nothing of the master is claimed: no payload could reproduce it
        if not served_set or served_count == 0:
            return CoverageDecision(CoverageMode.NOT_SERVED, (), total, 0, 0.0)

        coverage = served_count / total * 100
        missing: List[int] = sorted(master - served_set)

        if coverage >= 100.0:
            mode, values = CoverageMode.FULL_ZONE, ()
        elif coverage > self.threshold_percent:
            mode, values = CoverageMode.FULL_MINUS_EXCEPTIONS, tuple(missing)
        else:
            mode, values = CoverageMode.ONLY_SERVED, tuple(sorted(in_zone))

        downgraded = False
        if mode is CoverageMode.FULL_ZONE and missing:
            mode, values, downgraded = CoverageMode.FULL_MINUS_EXCEPTIONS, tuple(missing), True

        return CoverageDecision(
            mode=mode,
            payload_values=values,
            total_in_zone=total,
            served_count=served_count,
            coverage_percent=round(coverage, 2),
            downgraded=downgraded,
        )


def classify(
    served: Iterable[int],
    zone_master: Iterable[int],
    threshold_percent: float = DEFAULT_COVERAGE_THRESHOLD,
) -> CoverageDecision:
    return CoverageClassifier(threshold_percent).classify(served, zone_master)
