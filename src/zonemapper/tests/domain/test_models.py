import pytest
from dataclasses import FrozenInstanceError

from zonemapper.domain.models import (
    CompressedPincodes,
    CoverageMode,
    PincodeRange,
    PincodeRecord,
    ZoneCoverage,
    ZoneDiscrepancies,
    ZoneRemap,
)


class TestZoneCoverage:
    """Wire form of per-zone coverage."""

    def test_full_minus_round_trip(self):
        coverage = ZoneCoverage(
            zone="N1",
            mode=CoverageMode.FULL_MINUS_EXCEPTIONS,
            total_in_zone=10,
            served_count=6,
            coverage_percent=60.0,
            payload=CompressedPincodes(ranges=(PincodeRange(110007, 110009),), singles=(110010,)),
        )
        d = coverage.to_dict()

        assert d == {
            "mode": "FULL_MINUS_EXCEPT",
            "totalInZone": 10,
            "servedCount": 6,
            "coveragePercent": 60.0,
            "exceptRanges": [{"s": 110007, "e": 110009}],
            "exceptSingles": [110010],
        }
        assert ZoneCoverage.from_dict("N1", d) == coverage

    def test_only_served_keys(self):
        coverage = ZoneCoverage("X2", CoverageMode.ONLY_SERVED, 3, 1, 33.33,
                                CompressedPincodes(singles=(790005,)), is_special=True)
        d = coverage.to_dict()
        assert d["servedSingles"] == [790005]
        assert d["type"] == "special"
        assert ZoneCoverage.from_dict("X2", d).is_special

    def test_not_served_has_no_payload(self):
        d = ZoneCoverage("S1", CoverageMode.NOT_SERVED, 4, 0, 0.0).to_dict()
        assert set(d) == {"mode", "totalInZone", "servedCount", "coveragePercent"}


class TestDiscrepancies:

    def test_to_dict(self):
        remap = ZoneRemap("N2", "N1", 1, CompressedPincodes(singles=(110001,)))
        d = ZoneDiscrepancies(total_mismatched=1, remaps=(remap,)).to_dict()
        assert d == {
            "totalMismatched": 1,
            "remaps": [{"claimedZone": "N2", "masterZone": "N1", "count": 1, "ranges": [], "singles": [110001]}],
        }


class TestImmutability:

    def test_record_frozen(self):
        record = PincodeRecord(110001, "N1")
        with pytest.raises(FrozenInstanceError):
            record.zone = "N2"
