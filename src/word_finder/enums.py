"""
Enumeration types for the word finder system.

These enums provide type-safe constants for loading states, error
categories, lifecycle events and logging levels.
"""

from enum import Enum


class DictionaryStatus(Enum):
    """Current status of the dictionary manager."""

    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    CACHED = "cached"
    ERROR = "error"


class DictionaryErrorType(Enum):
    """Category of a dictionary acquisition failure."""

    NETWORK = "network"
    VALIDATION = "validation"
    STORAGE = "storage"
    SIZE = "size"
    PROCESSING = "processing"


class FilterErrorType(Enum):
    """Category of a segment filter failure."""

    VALIDATION = "validation"
    CONSTRAINT = "constraint"
    PROCESSING = "processing"


class DictionaryEvent(Enum):
    """Lifecycle events emitted by the dictionary manager."""

    LOADING_STARTED = "loading-started"
    LOADING_PROGRESS = "loading-progress"
    LOADING_COMPLETED = "loading-completed"
    CACHE_LOADED = "cache-loaded"
    LOADING_FAILED = "loading-failed"
    CACHE_CLEARED = "cache-cleared"


class ContentValidationErrorCode(Enum):
    """Error codes for dictionary content validation failures."""

    EMPTY_CONTENT = "empty_content"
    CONTENT_ENCODING = "content_encoding"
    NO_WORDS = "no_words"
    INSUFFICIENT_WORDS = "insufficient_words"


class NetworkErrorCode(Enum):
    """Error codes for dictionary download failures."""

    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    HTTP_ERROR = "http_error"


class LogLevel(Enum):
    """Logging severity levels."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
