from datetime import datetime
from typing import Any, Dict, List, Optional


class zonemapperError(Exception):
    """
    Root of every error and warning the package produces.

    Carries a stable ``error_code`` plus free-form ``context`` and
    ``suggestions`` so the CLI and warning sidecars can report more than the
    message. ``recoverable`` errors are reported and the run continues.
    """

    default_error_code = "ZONEMAPPER_ERROR"

    def __init__(
        self,
        message: str,
        *,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
        recoverable: bool = False
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.context: Dict[str, Any] = dict(context or {})
        self.suggestions: List[str] = list(suggestions or [])
        self.recoverable = recoverable
        self.timestamp = datetime.now()

    def add_context(self, key: str, value: Any) -> "zonemapperError":
        if key:
            self.context[key] = value
        return self

    def add_suggestion(self, suggestion: str) -> "zonemapperError":
        if suggestion:
            self.suggestions.append(suggestion)
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "context": dict(self.context),
            "recoverable": self.recoverable,
        }

    def _headline(self) -> str:
        return self.message or ""

    def __str__(self) -> str:
        text = self._headline()
        if not self.suggestions:
            return text
        return f"{text} -- Suggestions: {'; '.join(self.suggestions)}"


class ConfigurationError(zonemapperError):
    """Invalid settings or CLI arguments. ``config_field`` names the dotted setting."""

    default_error_code = "CONFIGURATION_ERROR"

    def __init__(self, message: str, *, config_field: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.config_field = config_field
        if config_field:
            self.add_context('config_field', config_field)

    def _headline(self) -> str:
        if self.config_field:
            return f"[{self.config_field}] {self.message}"
        return super()._headline()


class ResourceError(zonemapperError):
    default_error_code = "RESOURCE_ERROR"


class DatabaseError(ResourceError):
    default_error_code = "DATABASE_ERROR"


class FileSystemError(ResourceError):
    default_error_code = "FILE_SYSTEM_ERROR"

    def __init__(self, message: str, *, path: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        if path:
            self.add_context('path', path)
