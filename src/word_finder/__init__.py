"""
Word Finder - segment-constrained dictionary word search.

This package downloads, validates and caches a word list, then finds every
word that splits into consecutive slices drawn from per-slice letter pools.
"""

__version__ = "0.1.0"
__author__ = "Word Finder Team"

from word_finder.exceptions import (
    WordFinderError,
    ValidationError,
    NetworkError,
    StorageError,
    SizeError,
    ConfigurationError,
    RetryExhaustedError,
    DictionaryLoadError,
)
from word_finder.enums import (
    DictionaryStatus,
    DictionaryErrorType,
    FilterErrorType,
    DictionaryEvent,
    ContentValidationErrorCode,
    NetworkErrorCode,
    LogLevel,
)
from word_finder.config import (
    CACHE_VERSION,
    RetryConfig,
    DictionaryConfig,
    FilterConfig,
    LoggingConfig,
    SystemConfig,
)
from word_finder.models import (
    Segment,
    CacheMetadata,
    DictionaryData,
    DictionaryError,
    LoadingState,
    DictionaryStats,
    DictionaryEventData,
    FilterErrorDetails,
    FilterError,
    FilterMetadata,
    FilterResult,
    SegmentValidationResult,
    SegmentMatchDetail,
)
from word_finder.audit_logger import (
    AuditLogger,
    LogEntry,
)
from word_finder.word_validator import (
    WordValidator,
    ValidationStats,
)
from word_finder.retry_manager import (
    RetryManager,
    RetryResult,
)
from word_finder.dictionary_client import (
    DictionaryClient,
)
from word_finder.cache_store import (
    CacheStore,
    KeyValueStorage,
    FileKeyValueStorage,
    MemoryKeyValueStorage,
    StorageResult,
)
from word_finder.events import (
    EventBus,
    EventListener,
)
from word_finder.dictionary_manager import (
    DictionaryManager,
    classify_error,
)
from word_finder.segment_filter import (
    SegmentFilterEngine,
)
from word_finder.filter_errors import (
    FilterErrorMessages,
    FilterErrorSuggestions,
    is_filter_error,
    extract_error_message,
)
from word_finder.i18n import (
    get_message,
    get_all_message_keys,
    has_translation,
    get_missing_translations,
    validate_translations,
    TRANSLATIONS,
    SUPPORTED_LANGUAGES,
    DEFAULT_LANGUAGE,
)
from word_finder.cli import (
    main as cli_main,
    create_parser,
    create_default_config,
    load_config_from_file,
    save_config_to_file,
    apply_env_overrides,
)

__all__ = [
    # Exceptions
    "WordFinderError",
    "ValidationError",
    "NetworkError",
    "StorageError",
    "SizeError",
    "ConfigurationError",
    "RetryExhaustedError",
    "DictionaryLoadError",
    # Enums
    "DictionaryStatus",
    "DictionaryErrorType",
    "FilterErrorType",
    "DictionaryEvent",
    "ContentValidationErrorCode",
    "NetworkErrorCode",
    "LogLevel",
    # Configuration
    "CACHE_VERSION",
    "RetryConfig",
    "DictionaryConfig",
    "FilterConfig",
    "LoggingConfig",
    "SystemConfig",
    # Models
    "Segment",
    "CacheMetadata",
    "DictionaryData",
    "DictionaryError",
    "LoadingState",
    "DictionaryStats",
    "DictionaryEventData",
    "FilterErrorDetails",
    "FilterError",
    "FilterMetadata",
    "FilterResult",
    "SegmentValidationResult",
    "SegmentMatchDetail",
    # Audit Logger
    "AuditLogger",
    "LogEntry",
    # Word Validator
    "WordValidator",
    "ValidationStats",
    # Retry Manager
    "RetryManager",
    "RetryResult",
    # Dictionary Client
    "DictionaryClient",
    # Cache Store
    "CacheStore",
    "KeyValueStorage",
    "FileKeyValueStorage",
    "MemoryKeyValueStorage",
    "StorageResult",
    # Events
    "EventBus",
    "EventListener",
    # Dictionary Manager
    "DictionaryManager",
    "classify_error",
    # Segment Filter
    "SegmentFilterEngine",
    "FilterErrorMessages",
    "FilterErrorSuggestions",
    "is_filter_error",
    "extract_error_message",
    # I18n
    "get_message",
    "get_all_message_keys",
    "has_translation",
    "get_missing_translations",
    "validate_translations",
    "TRANSLATIONS",
    "SUPPORTED_LANGUAGES",
    "DEFAULT_LANGUAGE",
    # CLI
    "cli_main",
    "create_parser",
    "create_default_config",
    "load_config_from_file",
    "save_config_to_file",
    "apply_env_overrides",
]
