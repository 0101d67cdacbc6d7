"""Consistency checks for assembled UTSF documents."""

import logging
from typing import Any, List, Mapping, Union

from zonemapper.domain.models import CoverageMode, UTSFDocument, ValidationReport

logger = logging.getLogger(__name__)

REQUIRED_SECTIONS = ("meta", "pricing", "serviceability", "stats")
REQUIRED_META = ("companyName", "transporterType")
_KNOWN_MODES = {m.value for m in CoverageMode}


class DocumentValidator:
    """
    Catches encoder bugs in a finished document.

    A FULL_MINUS_EXCEPT zone without exceptions reads back as FULL_ZONE,
    and an ONLY_SERVED zone without served pincodes reads back as
    NOT_SERVED, so both are reported.
    """

    @staticmethod
    def validate(doc: Union[UTSFDocument, Mapping[str, Any]]) -> ValidationReport:
        if isinstance(doc, UTSFDocument):
            doc = doc.to_dict()
        errors: List[str] = []

        if not doc.get("version"):
            errors.append("Missing version field")

        for section in REQUIRED_SECTIONS:
            if section not in doc or doc[section] is None:
                errors.append(f"Missing required section: {section}")

        meta = doc.get("meta") or {}
        for name in REQUIRED_META:
            if not meta.get(name):
                errors.append(f"Meta missing required field: {name}")

        for zone, coverage in (doc.get("serviceability") or {}).items():
            errors.extend(DocumentValidator._check_coverage(zone, coverage))

        return ValidationReport(is_valid=not errors, errors=tuple(errors))

    @staticmethod
    def _check_coverage(zone: str, coverage: Mapping[str, Any]) -> List[str]:
        mode = coverage.get("mode")
        if not mode:
            return [f"Zone {zone} missing coverage mode"]
        if mode not in _KNOWN_MODES:
            return [f"Zone {zone} has unknown coverage mode {mode}"]
        if mode == CoverageMode.FULL_MINUS_EXCEPTIONS.value:
            if not coverage.get("exceptRanges") and not coverage.get("exceptSingles"):
                return [f"Zone {zone} FULL_MINUS_EXCEPT mode but no exceptions"]
        elif mode == CoverageMode.ONLY_SERVED.value:
            if not coverage.get("servedRanges") and not coverage.get("servedSingles"):
                return [f"Zone {zone} ONLY_SERVED mode but no served data"]
        return []


def validate_document(doc: Union[UTSFDocument, Mapping[str, Any]]) -> ValidationReport:
    return DocumentValidator.validate(doc)
