"""Input validation exceptions."""

from typing import Optional, List, Any
from .base import zonemapperError


class ValidationError(zonemapperError):
    """Base class for validation errors."""

    default_error_code = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str,
        *,
        field_name: Optional[str] = None,
        field_value: Optional[Any] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if field_name:
            self.add_context('field_name', field_name)
        if field_value is not None:
            self.add_context('field_value', str(field_value))


class InvalidFileFormatError(ValidationError):
    """Raised when an input file cannot be parsed into the expected shape."""

    default_error_code = "INVALID_FILE_FORMAT"
    def __init__(
        self,
        file_path: str,
        expected_format: str,
        *,
        reason: Optional[str] = None,
        **kwargs
    ):
        message = f"Invalid file format for {file_path}. Expected: {expected_format}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, **kwargs)
        self.add_context('file_path', file_path)
        self.add_context('expected_format', expected_format)
        self.add_suggestion(f"Ensure {file_path} contains {expected_format}")


class ParameterValidationError(ValidationError):
    """Raised when parameter validation fails."""

    default_error_code = "PARAMETER_VALIDATION_FAILED"
    def __init__(
        self,
        parameter_name: str,
        parameter_value: Any,
        expected: Optional[str] = None,
        **kwargs
    ):
        message = f"Invalid parameter '{parameter_name}': {parameter_value}"
        super().__init__(message, field_name=parameter_name, field_value=parameter_value, **kwargs)
        if expected:
            self.add_context('expected', expected)
            self.add_suggestion(f"'{parameter_name}' must be {expected}")
