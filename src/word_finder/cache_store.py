"""
Cache Store module for persistent dictionary data.

This module persists the word list and its integrity metadata in a local
key-value store. The two are written and read as one combined record, so a
reader never sees a word list paired with stale metadata. Loads verify the
record's structure and checksum; corrupt records are discarded.
"""

import json
import os
import re
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Protocol, runtime_checkable

from .audit_logger import AuditLogger
from .config import CACHE_VERSION, DEFAULT_CACHE_EXPIRY_SECONDS
from .exceptions import StorageError
from .models import CacheMetadata, DictionaryData
from .word_validator import WordValidator


@runtime_checkable
class KeyValueStorage(Protocol):
    """Protocol defining a string-keyed, string-valued local store."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...

    def size_of(self, key: str) -> int:
        ...


class MemoryKeyValueStorage:
    """In-process key-value storage; nothing survives the process."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = value

    def delete(self, key: str) -> None:
        self._items.pop(key, None)

    def size_of(self, key: str) -> int:
        value = self._items.get(key)
        return len(value.encode("utf-8")) if value is not None else 0


class FileKeyValueStorage:
    """
    Key-value storage backed by one JSON file per key in a directory.

    Writes go to a temporary file in the same directory and are moved into
    place with os.replace, so a key is either fully old or fully new.
    """

    _UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")

    def __init__(self, directory: Path) -> None:
        """
        Initialize the storage.

        Args:
            directory: Directory holding one file per key
        """
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        """Get the file path used for a key."""
        return self._directory / f"{self._UNSAFE_CHARS.sub('_', key)}.json"

    def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except OSError as e:
            raise StorageError(
                code="io_error",
                message=f"Failed to read cache file: {e}",
                details={"file_path": str(path)},
            )

    def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._directory, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StorageError(
                code="io_error",
                message=f"Failed to write cache file: {e}",
                details={"file_path": str(path)},
            )

    def delete(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(
                code="io_error",
                message=f"Failed to delete cache file: {e}",
                details={"file_path": str(path)},
            )

    def size_of(self, key: str) -> int:
        path = self.path_for(key)
        try:
            return path.stat().st_size
        except OSError:
            return 0


@dataclass
class StorageResult:
    """Outcome of a best-effort cache write."""

    success: bool
    error: Optional[StorageError] = None

    def __bool__(self) -> bool:
        return self.success


class CacheStore:
    """
    Dictionary cache with expiry, version and checksum validation.

    save() never raises: a failed write is logged and reported through a
    StorageResult so the caller can carry on without a cache.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key_prefix: str = "word-finder",
        expiry_seconds: float = DEFAULT_CACHE_EXPIRY_SECONDS,
        clock: Callable[[], float] = time.time,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        """
        Initialize the cache store.

        Args:
            storage: Backing key-value storage
            key_prefix: Application namespace prefix for keys
            expiry_seconds: Maximum age of a valid cache entry
            clock: Source of the current epoch time in seconds
            logger: Optional logger for cache diagnostics
        """
        self._storage = storage
        self._key_prefix = key_prefix
        self._expiry_seconds = expiry_seconds
        self._clock = clock
        self._logger = logger

    @property
    def data_key(self) -> str:
        """Key under which the combined word list and metadata record lives."""
        return f"{self._key_prefix}:dictionary:data"

    @property
    def storage(self) -> KeyValueStorage:
        return self._storage

    def save(self, data: DictionaryData) -> StorageResult:
        """
        Persist a word list and its metadata as one record.

        Args:
            data: Dictionary data to cache

        Returns:
            StorageResult; success is False if the write failed
        """
        try:
            record = {
                "words": list(data.words),
                "metadata": data.metadata.to_dict(),
            }
            serialized = json.dumps(record, separators=(",", ":"))
            self._storage.set(self.data_key, serialized)
        except StorageError as e:
            self._log_warn("Failed to store dictionary data", e)
            return StorageResult(success=False, error=e)
        except (OSError, TypeError, ValueError) as e:
            error = StorageError(
                code="write_failed",
                message=f"Failed to store dictionary data: {e}",
                details={"key": self.data_key},
            )
            self._log_warn("Failed to store dictionary data", error)
            return StorageResult(success=False, error=error)

        return StorageResult(success=True)

    def load(self) -> Optional[DictionaryData]:
        """
        Load and verify the cached record.

        Any structural failure or checksum mismatch clears the cache and
        yields None rather than partial data.

        Returns:
            DictionaryData if a sound record is cached, otherwise None
        """
        record = self._read_record()
        if record is None:
            return None

        metadata = self._parse_metadata(record["metadata"])
        words = tuple(record["words"])
        if metadata is None or metadata.size != len(words):
            self._discard("Invalid dictionary metadata in cache")
            return None

        if WordValidator.calculate_checksum(words) != metadata.checksum:
            self._discard("Dictionary cache checksum mismatch")
            return None

        # The checksum ignores order; lookups need strictly ascending words
        if any(first >= second for first, second in zip(words, words[1:])):
            self._discard("Dictionary cache words not sorted")
            return None

        return DictionaryData(words=words, metadata=metadata)

    def get_metadata(self) -> Optional[CacheMetadata]:
        """
        Get the cached metadata without verifying the word list checksum.

        Returns:
            CacheMetadata if a structurally sound record is cached
        """
        record = self._read_record()
        if record is None:
            return None
        metadata = self._parse_metadata(record["metadata"])
        if metadata is None:
            self._discard("Invalid dictionary metadata in cache")
        return metadata

    def is_valid(self) -> bool:
        """
        Check whether the cached record is current.

        Requires metadata to be present, its version to equal CACHE_VERSION
        and its age to be strictly below the expiry window.

        Returns:
            True if the cache may be used instead of a download
        """
        metadata = self.get_metadata()
        if metadata is None:
            return False

        if metadata.version != CACHE_VERSION:
            self._log_info(
                "Dictionary cache version mismatch",
                {"cached": metadata.version, "expected": CACHE_VERSION},
            )
            return False

        age = self._clock() - metadata.loaded_at
        if age >= self._expiry_seconds:
            self._log_info("Dictionary cache expired", {"age_seconds": age})
            return False

        return True

    def clear(self) -> None:
        """
        Remove the cached record.

        Raises:
            StorageError: If the backing storage cannot delete the record
        """
        self._storage.delete(self.data_key)

    def get_cache_size(self) -> int:
        """Get the size in bytes of the cached record (0 if absent)."""
        try:
            return self._storage.size_of(self.data_key)
        except StorageError:
            return 0

    def _read_record(self) -> Optional[dict]:
        try:
            raw = self._storage.get(self.data_key)
        except StorageError as e:
            self._log_warn("Failed to retrieve dictionary data", e)
            return None

        if raw is None:
            return None

        try:
            record = json.loads(raw)
        except json.JSONDecodeError:
            self._discard("Cached dictionary data is not valid JSON")
            return None

        if not WordValidator.validate_dictionary_data(record):
            self._discard("Invalid dictionary data structure in cache")
            return None

        return record

    @staticmethod
    def _parse_metadata(raw: dict) -> Optional[CacheMetadata]:
        version = raw.get("version")
        source = raw.get("source")
        loaded_at = raw.get("loaded_at")
        size = raw.get("size")
        checksum = raw.get("checksum")

        if not isinstance(version, str) or not isinstance(source, str):
            return None
        if isinstance(loaded_at, bool) or not isinstance(loaded_at, (int, float)):
            return None
        if isinstance(size, bool) or not isinstance(size, int):
            return None
        if not isinstance(checksum, str):
            return None

        return CacheMetadata(
            version=version,
            source=source,
            loaded_at=float(loaded_at),
            size=size,
            checksum=checksum,
        )

    def _discard(self, reason: str) -> None:
        self._log_info(reason, {"key": self.data_key})
        try:
            self.clear()
        except StorageError as e:
            self._log_warn("Failed to clear dictionary data", e)

    def _log_info(self, message: str, data: dict) -> None:
        if self._logger:
            self._logger.info("CacheStore", message, data)

    def _log_warn(self, message: str, error: Exception) -> None:
        if self._logger:
            self._logger.warn(
                "CacheStore",
                message,
                {"error_type": type(error).__name__, "error_message": str(error)},
            )
