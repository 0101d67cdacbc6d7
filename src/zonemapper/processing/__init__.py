"""Input adaptation and document validation."""

from .claims import ClaimParser, ClaimParseResult, normalize_pincode, parse_oda_value, zone_summary
from .validation import DocumentValidator, validate_document

__all__ = [
    "ClaimParser",
    "ClaimParseResult",
    "normalize_pincode",
    "parse_oda_value",
    "zone_summary",
    "DocumentValidator",
    "validate_document",
]
