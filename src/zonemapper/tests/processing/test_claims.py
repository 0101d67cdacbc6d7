import pytest

from zonemapper.domain.models import ServiceabilityClaim
from zonemapper.processing import ClaimParser, normalize_pincode, parse_oda_value, zone_summary


class TestNormalizePincode:
    """Spreadsheet-style pincode cleanup."""

    @pytest.mark.parametrize("value,expected", [
        (110001, 110001),
        ("110001", 110001),
        (110001.0, 110001),
        ("110001.0", 110001),
        ("1.10001e+5", 110001),
        ("11 00 01", 110001),
        ("PIN-560001", 560001),
        ("1100011", 110001),
        ("012345", None),
        ("912345", None),
        ("11000", None),
        ("abc", None),
        ("", None),
        (None, None),
        (True, None),
    ])
    def test_normalize(self, value, expected):
        assert normalize_pincode(value) == expected


class TestParseOdaValue:

    @pytest.mark.parametrize("value", [True, "true", "Yes", "1", 1, "y", "ODA", "remote"])
    def test_truthy(self, value):
        assert parse_oda_value(value) is True

    @pytest.mark.parametrize("value", [False, "false", "no", "0", 0, "", None, "maybe"])
    def test_falsy(self, value):
        assert parse_oda_value(value) is False


class TestClaimParser:
    """Field-name reconciliation at the upload boundary."""

    def test_alternate_spellings(self):
        rows = [
            {"pincode": "110001", "zone": "n1", "isODA": "yes"},
            {"pin": 110002, "claimedZone": "N2", "oda": "remote"},
            {"Pincode": "110003", "vendorZone": "N1", "is_oda": False, "isActive": "no"},
            {"postal_code": 110004.0},
        ]
        result = ClaimParser().parse(rows)

        assert result.claims == [
            ServiceabilityClaim(110001, "N1", is_oda=True, active=True, row=1),
            ServiceabilityClaim(110002, "N2", is_oda=True, active=True, row=2),
            ServiceabilityClaim(110003, "N1", is_oda=False, active=False, row=3),
            ServiceabilityClaim(110004, None, is_oda=False, active=True, row=4),
        ]
        assert result.invalid == []

    def test_invalid_and_duplicate_rows(self):
        rows = [{"pincode": "110001"}, {"pincode": "99"}, {"pincode": 110001.0}, {"zone": "N1"}]
        result = ClaimParser(first_row=2).parse(rows)

        assert [(c.pincode, c.row) for c in result.claims] == [(110001, 2), (110001, 4)]
        assert result.duplicates == [{"row": 4, "pincode": 110001, "first_row": 2}]
        assert [bad["row"] for bad in result.invalid] == [3, 5]
        assert result.invalid[1]["pincode"] == ""

    def test_bare_values(self):
        result = ClaimParser().parse(["110001", 110002])
        assert [c.pincode for c in result.claims] == [110001, 110002]


class TestZoneSummary:

    def test_grouped_by_master_zone(self, directory):
        claims = [
            ServiceabilityClaim(110001, "N2", is_oda=True),
            ServiceabilityClaim(110002),
            ServiceabilityClaim(790001),
            ServiceabilityClaim(560001, "S1"),
        ]
        summaries = zone_summary(claims, directory)

        assert [s.zone_code for s in summaries] == ["N1", "X1"]
        n1 = summaries[0]
        assert n1.region == "North"
        assert n1.pincode_count == 2
        assert n1.states == ("Delhi",)
        assert n1.cities == ("New Delhi",)
        assert n1.oda_count == 1
        assert summaries[1].region == "Special"

    def test_repeated_pincode_counted_once(self, directory):
        claims = [ServiceabilityClaim(110001, is_oda=True), ServiceabilityClaim(110001, is_oda=False)]
        (n1,) = zone_summary(claims, directory)
        assert n1.pincode_count == 1
        assert n1.oda_count == 0
