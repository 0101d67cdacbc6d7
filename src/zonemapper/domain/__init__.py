"""Core domain models and business logic."""

from .models import (
    CoverageMode,
    PincodeRecord,
    ServiceabilityClaim,
    PincodeRange,
    CompressedPincodes,
    ZoneCoverage,
    OdaCoverage,
    ZoneRemap,
    ZoneDiscrepancies,
    AuditEntry,
    UTSFDocument,
    EncodeResult,
    ValidationReport,
)

__all__ = [
    "CoverageMode",
    "PincodeRecord",
    "ServiceabilityClaim",
    "PincodeRange",
    "CompressedPincodes",
    "ZoneCoverage",
    "OdaCoverage",
    "ZoneRemap",
    "ZoneDiscrepancies",
    "AuditEntry",
    "UTSFDocument",
    "EncodeResult",
    "ValidationReport",
]
