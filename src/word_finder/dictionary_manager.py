"""
Dictionary Manager for the word finder system.

This module orchestrates dictionary acquisition. It integrates:
- Cache validation and loading
- Download with retry and exponential backoff
- Content validation and checksumming
- Best-effort cache persistence
- Lifecycle events and the loading state machine
- Sorted-array lookup of loaded words

State machine: idle -> loading -> {loaded | cached | error}. error -> loading
(retry) and loaded/cached -> loading (refresh) are the only re-entrant
transitions; clear_cache() resets to idle.
"""

import asyncio
import bisect
import time
from typing import Callable, Optional, Union

import httpx

from .audit_logger import AuditLogger
from .cache_store import CacheStore, FileKeyValueStorage
from .config import CACHE_VERSION, DEFAULT_CACHE_DIR, DictionaryConfig
from .dictionary_client import DictionaryClient
from .enums import DictionaryErrorType, DictionaryEvent, DictionaryStatus
from .events import EventBus, EventListener
from .exceptions import (
    ConfigurationError,
    DictionaryLoadError,
    NetworkError,
    RetryExhaustedError,
    SizeError,
    StorageError,
    ValidationError,
    WordFinderError,
)
from .models import (
    CacheMetadata,
    DictionaryData,
    DictionaryError,
    DictionaryStats,
    LoadingState,
)
from .retry_manager import RetryManager
from .word_validator import WordValidator


def classify_error(
    error: BaseException,
    operation: str = "loading",
) -> DictionaryError:
    """
    Map an exception raised during a dictionary operation onto the taxonomy.

    Args:
        error: The exception to classify
        operation: Name of the operation, used as a message prefix

    Returns:
        DictionaryError with type, retryability and details
    """
    if isinstance(error, RetryExhaustedError):
        inner = classify_error(error.last_error, operation) if error.last_error else None
        error_type = inner.type if inner else DictionaryErrorType.NETWORK
        details = dict(inner.details) if inner else {}
        details["attempts"] = error.attempts
        return DictionaryError(
            type=error_type,
            message=f"{operation}: {error.message}",
            retryable=True,
            code=error.code,
            details=details,
        )

    if isinstance(error, WordFinderError):
        details = dict(error.details)
        if isinstance(error, NetworkError):
            error_type = DictionaryErrorType.NETWORK
            status_code = error.status_code
            if status_code is not None:
                retryable = (
                    status_code >= 500
                    or status_code in RetryManager.RETRYABLE_STATUS_CODES
                )
            else:
                retryable = error.code in RetryManager.TRANSIENT_ERROR_CODES
        elif isinstance(error, SizeError):
            error_type, retryable = DictionaryErrorType.SIZE, False
        elif isinstance(error, StorageError):
            error_type, retryable = DictionaryErrorType.STORAGE, False
        elif isinstance(error, (ValidationError, ConfigurationError)):
            error_type, retryable = DictionaryErrorType.VALIDATION, False
        else:
            error_type, retryable = DictionaryErrorType.PROCESSING, False
        return DictionaryError(
            type=error_type,
            message=f"{operation}: {error.message}",
            retryable=retryable,
            code=error.code,
            details=details,
        )

    if isinstance(error, (httpx.TransportError, TimeoutError, ConnectionError)):
        return DictionaryError(
            type=DictionaryErrorType.NETWORK,
            message=f"{operation}: {error}",
            retryable=True,
            code=type(error).__name__,
        )

    return DictionaryError(
        type=DictionaryErrorType.PROCESSING,
        message=f"{operation}: {error}",
        retryable=False,
        code=type(error).__name__,
    )


class DictionaryManager:
    """
    Owns the dictionary word list and its loading state.

    One manager instance is constructed explicitly per application; its
    word list and loading state are only exposed as immutable snapshots.
    """

    # Coarse progress milestones reported while a download attempt runs
    PROGRESS_URL_CHECKED = 10
    PROGRESS_FETCHING = 30
    PROGRESS_READING = 50
    PROGRESS_VALIDATING = 70
    PROGRESS_CACHING = 90
    PROGRESS_DONE = 100

    def __init__(
        self,
        config: Optional[DictionaryConfig] = None,
        cache_store: Optional[CacheStore] = None,
        client_factory: Optional[Callable[[], DictionaryClient]] = None,
        retry_manager: Optional[RetryManager] = None,
        validator: Optional[WordValidator] = None,
        logger: Optional[AuditLogger] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize the dictionary manager.

        Args:
            config: Dictionary configuration
            cache_store: Optional cache store; defaults to a file-backed store
                under config.cache_dir
            client_factory: Optional factory for download clients
            retry_manager: Optional retry manager; defaults to one built from
                the config's retry settings
            validator: Optional word validator
            logger: Optional audit logger
            clock: Source of the current epoch time in seconds
        """
        self._config = config or DictionaryConfig()
        self._logger = logger
        self._clock = clock

        self._cache_store = cache_store or CacheStore(
            storage=FileKeyValueStorage(self._config.cache_dir or DEFAULT_CACHE_DIR),
            key_prefix=self._config.cache_key_prefix,
            expiry_seconds=self._config.cache_expiry_seconds,
            clock=clock,
            logger=logger,
        )
        self._client_factory = client_factory or self._default_client_factory
        self._retry_manager = retry_manager or RetryManager(
            self._config.retry_config(),
            logger=logger,
        )
        self._validator = validator or WordValidator(
            min_word_count=self._config.min_word_count,
            max_size=self._config.max_size,
            logger=logger,
        )
        self._events = EventBus(logger=logger, clock=clock)

        self._data: Optional[DictionaryData] = None
        self._state = LoadingState()

        # Bumped by clear_cache() so superseded loads never publish
        self._generation = 0
        self._inflight: Optional[asyncio.Task] = None
        self._inflight_generation = -1

    def _default_client_factory(self) -> DictionaryClient:
        return DictionaryClient(
            timeout=self._config.request_timeout_seconds,
            max_size=self._config.max_size,
            logger=self._logger,
            validator=self._validator,
        )

    # Consumer API

    async def initialize(self) -> LoadingState:
        """
        Load the dictionary from cache if valid, otherwise download it.

        A terminal load failure is recorded in the loading state rather
        than raised.

        Returns:
            Snapshot of the loading state after initialization
        """
        self._log_info("Initializing dictionary manager", {})

        if self.load_from_cache():
            return self.get_loading_state()

        try:
            await self.load_dictionary()
        except DictionaryLoadError as e:
            self._log_info(
                "Dictionary initialization ended in error state",
                {"error_type": e.error.type.value},
            )

        return self.get_loading_state()

    def load_from_cache(self) -> bool:
        """
        Publish the cached dictionary if it is current and intact.

        Never touches the network. On a miss the state is left unchanged.

        Returns:
            True if cached data was published
        """
        if not self._cache_store.is_valid():
            return False

        cached = self._cache_store.load()
        if cached is None:
            return False

        self._data = cached
        self._update_state(
            status=DictionaryStatus.CACHED,
            progress=self.PROGRESS_DONE,
            error=None,
            retry_count=0,
            last_attempt=self._clock(),
        )
        self._events.emit(
            DictionaryEvent.CACHE_LOADED,
            {"word_count": len(cached.words)},
        )
        self._log_info(
            "Using cached dictionary data",
            {"word_count": len(cached.words)},
        )
        return True

    async def load_dictionary(self) -> DictionaryData:
        """
        Download, validate and publish the dictionary.

        Only one load runs per manager; a call made while a load is in
        flight waits for that load instead of starting another.

        Returns:
            The newly loaded dictionary data

        Raises:
            DictionaryLoadError: If the load ended in the error state
        """
        task = self._inflight
        if (
            task is None
            or task.done()
            or self._inflight_generation != self._generation
        ):
            task = asyncio.ensure_future(self._load(self._generation))
            self._inflight = task
            self._inflight_generation = self._generation

        try:
            return await asyncio.shield(task)
        finally:
            if self._inflight is task and task.done():
                self._inflight = None

    async def refresh(self) -> DictionaryData:
        """Discard the cache and download the dictionary unconditionally."""
        self._log_info("Refreshing dictionary data", {})
        await self.clear_cache()
        return await self.load_dictionary()

    async def clear_cache(self) -> None:
        """
        Clear cached data and reset the manager to idle.

        Any load still in flight is orphaned; its result will not be
        published.

        Raises:
            StorageError: If the cache could not be cleared
        """
        self._log_info("Clearing dictionary cache", {})
        try:
            self._cache_store.clear()
        except StorageError as e:
            self._log_error("Failed to clear cache", e)
            raise

        self._generation += 1
        self._inflight = None
        self._data = None
        self._state = LoadingState()
        self._events.emit(DictionaryEvent.CACHE_CLEARED)

    def get_words(self) -> Optional[tuple[str, ...]]:
        """Get the loaded, sorted word list (None if nothing is loaded)."""
        return self._data.words if self._data else None

    def has_word(self, word: str) -> bool:
        """
        Check whether a word is in the loaded dictionary.

        Args:
            word: Word to look up; compared lower-cased and trimmed

        Returns:
            True if the word is present; False if absent or nothing is loaded
        """
        if self._data is None:
            return False

        target = WordValidator.normalize_word(word)
        if not target:
            return False

        words = self._data.words
        index = bisect.bisect_left(words, target)
        return index < len(words) and words[index] == target

    def get_loading_state(self) -> LoadingState:
        """Get a copy of the current loading state."""
        return self._state.copy()

    def get_stats(self) -> DictionaryStats:
        """Get an observability snapshot; has no side effects."""
        return DictionaryStats(
            word_count=len(self._data.words) if self._data else 0,
            loading_state=self.get_loading_state(),
            cache_size=self._cache_store.get_cache_size(),
            last_loaded=self._data.metadata.loaded_at if self._data else 0.0,
            source=self._config.source_url,
        )

    def subscribe(
        self,
        event: Union[DictionaryEvent, str],
        listener: EventListener,
    ) -> Callable[[], None]:
        """Register an event listener; returns its unsubscribe callable."""
        return self._events.subscribe(event, listener)

    def unsubscribe(
        self,
        event: Union[DictionaryEvent, str],
        listener: EventListener,
    ) -> bool:
        """Remove an event listener."""
        return self._events.unsubscribe(event, listener)

    @property
    def config(self) -> DictionaryConfig:
        return self._config

    @property
    def cache_store(self) -> CacheStore:
        return self._cache_store

    # Loading pipeline

    async def _load(self, generation: int) -> DictionaryData:
        self._update_state(
            status=DictionaryStatus.LOADING,
            progress=0,
            error=None,
            last_attempt=self._clock(),
        )
        self._events.emit(DictionaryEvent.LOADING_STARTED)
        start_time = time.perf_counter()
        source_url = self._config.source_url

        try:
            # Configuration errors are never retried
            if not WordValidator.validate_source_url(source_url):
                raise ConfigurationError(
                    code="invalid_source_url",
                    message=f"Invalid source URL: {source_url}",
                    details={"source_url": source_url},
                )
            data = await self._retry_manager.with_exponential_backoff(
                lambda: self._fetch_attempt(generation)
            )
        except Exception as e:
            error = classify_error(e)
            if generation == self._generation:
                self._update_state(
                    status=DictionaryStatus.ERROR,
                    error=error,
                    retry_count=self._state.retry_count + 1,
                    last_attempt=self._clock(),
                )
                self._events.emit(DictionaryEvent.LOADING_FAILED, {"error": error})
                self._log_error("Dictionary loading failed", e, {"source_url": source_url})
            raise DictionaryLoadError(error) from e

        if generation != self._generation:
            self._log_info(
                "Discarding superseded dictionary load",
                {"word_count": len(data.words)},
            )
            return data

        self._set_progress(generation, self.PROGRESS_CACHING)
        stored = self._cache_store.save(data)
        if not stored:
            self._log_info("Failed to store dictionary in cache, continuing", {})

        self._data = data
        self._update_state(
            status=DictionaryStatus.LOADED,
            progress=self.PROGRESS_DONE,
            error=None,
            retry_count=0,
            last_attempt=self._clock(),
        )
        self._events.emit(
            DictionaryEvent.LOADING_COMPLETED,
            {"word_count": len(data.words), "cached": bool(stored)},
        )
        self._log_info(
            "Dictionary loaded successfully",
            {
                "word_count": len(data.words),
                "cached": bool(stored),
                "duration_ms": (time.perf_counter() - start_time) * 1000,
            },
        )
        return data

    async def _fetch_attempt(self, generation: int) -> DictionaryData:
        """One download attempt: fetch, validate, checksum and sort."""
        source_url = self._config.source_url
        self._set_progress(generation, self.PROGRESS_URL_CHECKED)

        self._set_progress(generation, self.PROGRESS_FETCHING)
        async with self._client_factory() as client:
            content = await client.fetch_text(source_url)

        self._set_progress(generation, self.PROGRESS_READING)

        self._set_progress(generation, self.PROGRESS_VALIDATING)
        words = tuple(sorted(self._validator.validate(content)))

        metadata = CacheMetadata(
            version=CACHE_VERSION,
            source=source_url,
            loaded_at=self._clock(),
            size=len(words),
            checksum=self._validator.calculate_checksum(words),
        )
        return DictionaryData(words=words, metadata=metadata)

    def _set_progress(self, generation: int, progress: int) -> None:
        if generation != self._generation:
            return
        self._update_state(progress=progress)

    def _update_state(self, **changes) -> None:
        progress_changed = (
            "progress" in changes and changes["progress"] != self._state.progress
        )
        for name, value in changes.items():
            setattr(self._state, name, value)
        if progress_changed:
            self._events.emit(
                DictionaryEvent.LOADING_PROGRESS,
                {"progress": self._state.progress},
            )

    def _log_info(self, message: str, data: dict) -> None:
        """Log an info message if logger is available."""
        if self._logger:
            self._logger.info("DictionaryManager", message, data)

    def _log_error(
        self,
        message: str,
        error: BaseException,
        data: Optional[dict] = None,
    ) -> None:
        """Log an error message if logger is available."""
        if self._logger:
            self._logger.log_error(
                "DictionaryManager",
                message,
                error=error,
                additional_data=data,
            )
