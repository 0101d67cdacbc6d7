"""Master directory exceptions."""

from typing import Optional
from .base import zonemapperError


class DirectoryError(zonemapperError):
    """Base class for master directory failures. Always fatal to an encode."""

    default_error_code = "DIRECTORY_ERROR"

    def __init__(self, message: str, *, source: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        if source:
            self.add_context('source', source)


class EmptyDirectoryError(DirectoryError):
    """Raised when the master directory is empty or not list-shaped."""

    default_error_code = "EMPTY_DIRECTORY"

    def __init__(self, message: str = "Master directory is empty", **kwargs):
        super().__init__(message, **kwargs)
        self.add_suggestion("Check that the pincode source returns a non-empty JSON array")


class DirectoryLoadError(DirectoryError):
    """Raised when the directory source cannot be fetched or parsed."""

    default_error_code = "DIRECTORY_LOAD_FAILED"

    def __init__(self, message: str, *, status_code: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        if status_code is not None:
            self.add_context('status_code', status_code)
        self.add_suggestion("Verify the directory path or URL is reachable")
