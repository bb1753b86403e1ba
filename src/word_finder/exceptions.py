"""
Exception classes for the word finder system.

All exceptions inherit from WordFinderError and carry structured error
information: a machine-readable code, a human-readable message, and
optional details.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .models import DictionaryError


class WordFinderError(Exception):
    """Base exception for all word finder errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(WordFinderError):
    """Raised when dictionary content is malformed or has too few words."""

    pass


class NetworkError(WordFinderError):
    """Raised when fetching the dictionary fails at the transport or HTTP level."""

    @property
    def status_code(self) -> Optional[int]:
        """HTTP status code of the failed response, if there was one."""
        return self.details.get("status_code")


class StorageError(WordFinderError):
    """Raised when the local cache cannot be read or written."""

    pass


class SizeError(WordFinderError):
    """Raised when the dictionary payload exceeds the configured ceiling."""

    pass


class ConfigurationError(WordFinderError):
    """Raised when configuration is unusable (e.g. insecure source URL)."""

    pass


class RetryExhaustedError(WordFinderError):
    """Raised when every retry attempt failed with a retryable error."""

    def __init__(
        self,
        attempts: int,
        last_error: Optional[BaseException],
    ) -> None:
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            code="retries_exhausted",
            message=(
                f"Operation failed after {attempts} attempts. "
                f"Last error: {last_error}"
            ),
            details={
                "attempts": attempts,
                "last_error_type": type(last_error).__name__ if last_error else None,
            },
        )


class DictionaryLoadError(WordFinderError):
    """Raised when a dictionary load ends in the error state."""

    def __init__(self, error: "DictionaryError") -> None:
        self.error = error
        super().__init__(
            code=error.code or error.type.value,
            message=error.message,
            details={"type": error.type.value, "retryable": error.retryable},
        )
