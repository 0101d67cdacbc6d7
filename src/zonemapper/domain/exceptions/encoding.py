"""Encoding exceptions and recoverable encode warnings."""

from typing import Optional, List
from .base import zonemapperError


class EncodingError(zonemapperError):
    """Raised when an encode run fails outside the recoverable paths."""

    default_error_code = "ENCODING_FAILED"

    def __init__(
        self,
        message: str,
        *,
        stage: Optional[str] = None,
        vendor: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if stage:
            self.add_context('encoding_stage', stage)
        if vendor:
            self.add_context('vendor', vendor)


class EncodingWarning(zonemapperError):
    """
    Recoverable condition found while encoding.

    These are collected and returned next to the document, never raised.
    """

    default_error_code = "ENCODING_WARNING"

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("recoverable", True)
        super().__init__(message, **kwargs)


class UnresolvableClaimWarning(EncodingWarning):
    """A claim whose pincode is not in the directory and has no claimed zone."""

    default_error_code = "UNRESOLVABLE_CLAIM"

    def __init__(self, pincode: int, *, row: Optional[int] = None, **kwargs):
        message = f"Pincode {pincode} is not in the master directory and has no claimed zone"
        super().__init__(message, **kwargs)
        self.pincode = pincode
        self.add_context('pincode', pincode)
        if row is not None:
            self.add_context('row', row)
        self.add_suggestion("Supply a zone for this pincode or remove the row")


class DuplicateClaimWarning(EncodingWarning):
    """A pincode that appears on more than one upload row. Every row is still encoded."""

    default_error_code = "DUPLICATE_CLAIM"

    def __init__(self, pincode: int, *, row: int, first_row: int, **kwargs):
        message = f"Pincode {pincode} on row {row} repeats row {first_row}"
        super().__init__(message, **kwargs)
        self.pincode = pincode
        self.add_context('pincode', pincode)
        self.add_context('row', row)
        self.add_context('first_row', first_row)
        self.add_suggestion("Keep one row per pincode unless the repeat is intentional")


class ValidationWarning(EncodingWarning):
    """The assembled document failed an internal consistency check."""

    default_error_code = "DOCUMENT_VALIDATION_FAILED"

    def __init__(self, errors: List[str], **kwargs):
        message = f"Document failed {len(errors)} consistency check(s)"
        super().__init__(message, **kwargs)
        self.errors = list(errors)
        self.add_context('errors', self.errors)
