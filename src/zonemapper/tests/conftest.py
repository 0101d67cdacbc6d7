import json
import pytest

from zonemapper.directory.master import MasterDirectory
from zonemapper.domain.models import PincodeRecord


def zone_records(zone, start, count, state="", city=""):
    return [PincodeRecord(start + i, zone, state, city) for i in range(count)]


@pytest.fixture
def directory():
    """N1: 110001-110010, N2: 120001-120005, X1: 790001-790003."""
    records = (
        zone_records("N1", 110001, 10, "Delhi", "New Delhi")
        + zone_records("N2", 120001, 5, "Haryana", "Gurugram")
        + zone_records("X1", 790001, 3, "Arunachal Pradesh", "Itanagar")
    )
    return MasterDirectory(records)


@pytest.fixture
def directory_rows():
    """Raw master rows as a directory source would serve them."""
    rows = [{"pincode": str(110001 + i), "zone": "N1", "state": "Delhi", "city": "New Delhi"} for i in range(10)]
    rows += [{"pincode": 120001 + i, "zone": "n2", "state": "Haryana", "city": "Gurugram"} for i in range(5)]
    return rows


@pytest.fixture
def directory_file(tmp_path, directory_rows):
    path = tmp_path / "pincodes.json"
    path.write_text(json.dumps(directory_rows), encoding="utf-8")
    return path


@pytest.fixture
def vendor_payload():
    return {
        "meta": {"companyName": "Acme Logistics", "vendorCode": "ACM01"},
        "pricing": {"priceRate": {"minWeight": 5}, "zoneRates": {"N1": {"N1": 10}}},
        "serviceability": [
            {"pincode": "110001", "zone": "N1", "isODA": "no"},
            {"pincode": "110002", "zone": "N1", "isODA": "yes"},
            {"pincode": "110003", "zone": "N1"},
            {"pincode": "110004", "zone": "N1"},
            {"pincode": "110005", "zone": "N1"},
            {"pincode": "110006", "zone": "N1"},
            {"pincode": 120001, "zone": "N1"},
        ],
        "selectedZones": [],
    }


@pytest.fixture
def vendor_file(tmp_path, vendor_payload):
    path = tmp_path / "acme.json"
    path.write_text(json.dumps(vendor_payload), encoding="utf-8")
    return path
