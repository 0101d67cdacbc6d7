"""Fixed zone and region tables."""

from typing import Dict, Tuple

ALL_ZONES: Tuple[str, ...] = (
    "N1", "N2", "N3", "N4",
    "S1", "S2", "S3", "S4",
    "E1", "E2",
    "W1", "W2", "W3",
    "C1", "C2",
    "NE1", "NE2",
    "X1", "X2", "X3",
)

REGIONS: Dict[str, Tuple[str, ...]] = {
    "North": ("N1", "N2", "N3", "N4"),
    "South": ("S1", "S2", "S3", "S4"),
    "East": ("E1", "E2"),
    "West": ("W1", "W2", "W3"),
    "Central": ("C1", "C2"),
    "North East": ("NE1", "NE2"),
    "Special": ("X1", "X2", "X3"),
}

SPECIAL_ZONES = frozenset({"X1", "X2", "X3"})

_ZONE_TO_REGION: Dict[str, str] = {
    zone: region for region, zones in REGIONS.items() for zone in zones
}


def region_of(zone: str) -> str:
    """Region from the fixed table, 'Other' for zones outside it."""
    return _ZONE_TO_REGION.get(zone.upper(), "Other")


def region_by_prefix(zone: str) -> str:
    """Coarse region from the zone code prefix, used for upload summaries."""
    zone = zone.upper()
    if zone.startswith("NE"):
        return "Northeast"
    for prefix, name in (("N", "North"), ("S", "South"), ("E", "East"),
                         ("W", "West"), ("C", "Central"), ("X", "Special")):
        if zone.startswith(prefix):
            return name
    return "Other"


def encoding_zones(directory_zones) -> Tuple[str, ...]:
    """Fixed zones first, then any extra zones the directory knows about."""
    extra = sorted(z for z in directory_zones if z not in _ZONE_TO_REGION)
    return ALL_ZONES + tuple(extra)
