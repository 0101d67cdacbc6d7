"""Custom exceptions for the zonemapper package."""

# Base exceptions
from .base import (
    zonemapperError,
    ConfigurationError,
    ResourceError,
    DatabaseError,
    FileSystemError,
)

# Directory exceptions
from .directory import (
    DirectoryError,
    EmptyDirectoryError,
    DirectoryLoadError,
)

# Encoding exceptions and warnings
from .encoding import (
    EncodingError,
    EncodingWarning,
    UnresolvableClaimWarning,
    DuplicateClaimWarning,
    ValidationWarning,
)

# Validation exceptions
from .validation import (
    ValidationError,
    InvalidFileFormatError,
    ParameterValidationError,
)

__all__ = [
    # Base
    "zonemapperError",
    "ConfigurationError",
    "ResourceError",
    "DatabaseError",
    "FileSystemError",

    # Directory
    "DirectoryError",
    "EmptyDirectoryError",
    "DirectoryLoadError",

    # Encoding
    "EncodingError",
    "EncodingWarning",
    "UnresolvableClaimWarning",
    "DuplicateClaimWarning",
    "ValidationWarning",

    # Validation
    "ValidationError",
    "InvalidFileFormatError",
    "ParameterValidationError",
]
