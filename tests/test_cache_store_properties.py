"""
Property-based tests for the Cache Store module.

Uses Hypothesis for property-based testing to verify cache round-trips,
expiry, integrity checks and best-effort writes.
"""

import json
import tempfile
from pathlib import Path
from string import ascii_lowercase

from hypothesis import given, settings
from hypothesis import strategies as st

from word_finder.cache_store import (
    CacheStore,
    FileKeyValueStorage,
    KeyValueStorage,
    MemoryKeyValueStorage,
)
from word_finder.config import CACHE_VERSION
from word_finder.exceptions import StorageError
from word_finder.models import CacheMetadata, DictionaryData
from word_finder.word_validator import WordValidator


class FakeClock:
    """Settable clock returning epoch seconds."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class FailingStorage(MemoryKeyValueStorage):
    """Storage whose writes (and optionally deletes) always fail."""

    def __init__(self, fail_delete: bool = False) -> None:
        super().__init__()
        self._fail_delete = fail_delete

    def set(self, key: str, value: str) -> None:
        raise StorageError(code="io_error", message="disk full")

    def delete(self, key: str) -> None:
        if self._fail_delete:
            raise StorageError(code="io_error", message="read-only")
        super().delete(key)


def make_data(words: list[str], loaded_at: float, version: str = CACHE_VERSION) -> DictionaryData:
    ordered = tuple(sorted(set(words)))
    return DictionaryData(
        words=ordered,
        metadata=CacheMetadata(
            version=version,
            source="https://example.org/words.txt",
            loaded_at=loaded_at,
            size=len(ordered),
            checksum=WordValidator.calculate_checksum(ordered),
        ),
    )


# Strategies for generating test data

word_strategy = st.text(alphabet=st.sampled_from(ascii_lowercase), min_size=1, max_size=12)

word_list_strategy = st.lists(word_strategy, min_size=1, max_size=200)


class TestCacheRoundTripProperty:
    """
    Property-based tests for save/load round-trips.
    """

    @given(words=word_list_strategy)
    @settings(max_examples=100)
    def test_memory_round_trip(self, words: list[str]) -> None:
        """
        Property 1: Cache round-trip.

        *For any* word list, save() followed by load() SHALL yield an equal
        word list and equal metadata.
        """
        clock = FakeClock()
        store = CacheStore(MemoryKeyValueStorage(), clock=clock)
        data = make_data(words, loaded_at=clock.now)

        assert store.save(data)
        loaded = store.load()

        assert loaded == data

    @given(words=word_list_strategy)
    @settings(max_examples=30, deadline=None)
    def test_file_round_trip(self, words: list[str]) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            clock = FakeClock()
            store = CacheStore(FileKeyValueStorage(Path(tmpdir) / "cache"), clock=clock)
            data = make_data(words, loaded_at=clock.now)

            assert store.save(data)
            reopened = CacheStore(FileKeyValueStorage(Path(tmpdir) / "cache"), clock=clock)

            assert reopened.load() == data
            assert reopened.get_cache_size() > 0

    def test_key_prefix_scopes_record(self) -> None:
        storage = MemoryKeyValueStorage()
        first = CacheStore(storage, key_prefix="app-one")
        second = CacheStore(storage, key_prefix="app-two")

        first.save(make_data(["cat"], loaded_at=0.0))

        assert first.data_key == "app-one:dictionary:data"
        assert storage.get("app-one:dictionary:data") is not None
        assert second.load() is None

    def test_empty_cache_loads_none(self) -> None:
        store = CacheStore(MemoryKeyValueStorage())

        assert store.load() is None
        assert store.get_metadata() is None
        assert not store.is_valid()
        assert store.get_cache_size() == 0


class TestCacheExpiryProperty:
    """
    Property-based tests for cache validity windows.
    """

    @given(
        expiry=st.floats(min_value=1.0, max_value=7 * 24 * 3600.0),
        age_fraction=st.floats(min_value=0.0, max_value=3.0),
    )
    @settings(max_examples=100)
    def test_valid_iff_age_below_expiry(self, expiry: float, age_fraction: float) -> None:
        """
        Property 2: Cache expiry.

        *For any* expiry window and entry age, is_valid() SHALL be True
        exactly when age < expiry.
        """
        clock = FakeClock()
        loaded_at = clock.now
        store = CacheStore(MemoryKeyValueStorage(), expiry_seconds=expiry, clock=clock)
        store.save(make_data(["cat", "dog"], loaded_at=loaded_at))

        clock.now = loaded_at + expiry * age_fraction

        assert store.is_valid() == ((clock.now - loaded_at) < expiry)

    def test_exact_expiry_boundary_is_invalid(self) -> None:
        clock = FakeClock(now=1000.0)
        store = CacheStore(MemoryKeyValueStorage(), expiry_seconds=60.0, clock=clock)
        store.save(make_data(["cat"], loaded_at=1000.0))

        clock.now = 1059.0
        assert store.is_valid()

        clock.now = 1060.0
        assert not store.is_valid()

    def test_version_mismatch_is_invalid(self) -> None:
        clock = FakeClock()
        store = CacheStore(MemoryKeyValueStorage(), clock=clock)
        store.save(make_data(["cat"], loaded_at=clock.now, version="0.9.0"))

        assert not store.is_valid()


class TestCacheIntegrityProperty:
    """
    Property-based tests for corruption handling.
    """

    @given(words=st.lists(word_strategy, min_size=2, max_size=50, unique=True))
    @settings(max_examples=100)
    def test_checksum_mismatch_clears_cache(self, words: list[str]) -> None:
        """
        Property 3: Checksum verification.

        *For any* cached record whose word list no longer matches its
        checksum, load() SHALL return None and remove the record.
        """
        storage = MemoryKeyValueStorage()
        store = CacheStore(storage)
        data = make_data(words, loaded_at=0.0)
        store.save(data)

        record = json.loads(storage.get(store.data_key))
        record["words"][0] = record["words"][0] + "x"
        storage.set(store.data_key, json.dumps(record))

        assert store.load() is None
        assert storage.get(store.data_key) is None

    @given(
        words=st.lists(word_strategy, min_size=2, max_size=50, unique=True),
        data=st.data(),
    )
    @settings(max_examples=100)
    def test_unsorted_record_clears_cache(self, words: list[str], data) -> None:
        """
        Property 4: Sorted word list.

        *For any* cached record whose words are not strictly ascending, even
        with a matching checksum, load() SHALL return None and remove the
        record.
        """
        storage = MemoryKeyValueStorage()
        store = CacheStore(storage)
        ordered = sorted(words)
        shuffled = data.draw(st.permutations(ordered).filter(lambda p: list(p) != ordered))
        record = {
            "words": list(shuffled),
            "metadata": make_data(ordered, loaded_at=0.0).metadata.to_dict(),
        }
        storage.set(store.data_key, json.dumps(record))

        assert store.load() is None
        assert storage.get(store.data_key) is None

    def test_duplicate_words_clear_cache(self) -> None:
        storage = MemoryKeyValueStorage()
        store = CacheStore(storage)
        words = ["apple", "apple", "kiwi"]
        record = {
            "words": words,
            "metadata": {
                "version": CACHE_VERSION,
                "source": "https://example.org/words.txt",
                "loaded_at": 0.0,
                "size": len(words),
                "checksum": WordValidator.calculate_checksum(words),
            },
        }
        storage.set(store.data_key, json.dumps(record))

        assert store.load() is None
        assert storage.get(store.data_key) is None

    def test_invalid_json_clears_cache(self) -> None:
        storage = MemoryKeyValueStorage()
        store = CacheStore(storage)
        storage.set(store.data_key, "{not json")

        assert store.load() is None
        assert storage.get(store.data_key) is None

    def test_structural_corruption_clears_cache(self) -> None:
        storage = MemoryKeyValueStorage()
        store = CacheStore(storage)
        storage.set(store.data_key, json.dumps({"words": ["cat"], "metadata": {"version": "1.0.0"}}))

        assert store.load() is None
        assert storage.get(store.data_key) is None

    def test_size_mismatch_clears_cache(self) -> None:
        storage = MemoryKeyValueStorage()
        store = CacheStore(storage)
        data = make_data(["cat", "dog"], loaded_at=0.0)
        record = {"words": list(data.words), "metadata": data.metadata.to_dict()}
        record["metadata"]["size"] = 3
        storage.set(store.data_key, json.dumps(record))

        assert store.load() is None

    def test_wrongly_typed_metadata_rejected(self) -> None:
        storage = MemoryKeyValueStorage()
        store = CacheStore(storage)
        data = make_data(["cat"], loaded_at=0.0)
        record = {"words": list(data.words), "metadata": data.metadata.to_dict()}
        record["metadata"]["loaded_at"] = "yesterday"
        storage.set(store.data_key, json.dumps(record))

        assert store.get_metadata() is None
        assert not store.is_valid()


class TestBestEffortWrites:
    """
    Tests for storage failures.
    """

    def test_failed_save_returns_error_result(self) -> None:
        store = CacheStore(FailingStorage())

        result = store.save(make_data(["cat"], loaded_at=0.0))

        assert not result
        assert result.success is False
        assert isinstance(result.error, StorageError)

    def test_clear_propagates_storage_error(self) -> None:
        store = CacheStore(FailingStorage(fail_delete=True))

        try:
            store.clear()
        except StorageError as e:
            assert e.code == "io_error"
        else:
            raise AssertionError("clear() should raise StorageError")

    def test_file_storage_write_failure_wrapped(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            blocker = Path(tmpdir) / "blocked"
            blocker.write_text("not a directory", encoding="utf-8")
            storage = FileKeyValueStorage(blocker / "cache")

            result = CacheStore(storage).save(make_data(["cat"], loaded_at=0.0))

            assert not result
            assert result.error.code == "io_error"

    def test_file_storage_sanitizes_keys(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            storage = FileKeyValueStorage(Path(tmpdir))

            path = storage.path_for("word-finder:dictionary:data")

            assert path.parent == Path(tmpdir)
            assert path.name == "word-finder_dictionary_data.json"

    def test_storage_implementations_match_protocol(self) -> None:
        assert isinstance(MemoryKeyValueStorage(), KeyValueStorage)
        with tempfile.TemporaryDirectory() as tmpdir:
            assert isinstance(FileKeyValueStorage(Path(tmpdir)), KeyValueStorage)

    def test_clear_removes_record(self) -> None:
        store = CacheStore(MemoryKeyValueStorage())
        store.save(make_data(["cat"], loaded_at=0.0))

        store.clear()

        assert store.load() is None
        assert store.get_cache_size() == 0
