"""
Data models for the word finder system.

This module defines the data structures used for dictionary data and its
cache metadata, loading state, segment constraints and filter results.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Optional

from .enums import DictionaryErrorType, DictionaryStatus, FilterErrorType


@dataclass(frozen=True)
class Segment:
    """A letter pool and exact length governing one slice of a word."""

    available_letters: str  # Duplicates significant, order irrelevant
    target_length: int


@dataclass
class CacheMetadata:
    """Integrity metadata stored alongside a cached word list."""

    version: str
    source: str
    loaded_at: float  # Epoch seconds
    size: int
    checksum: str

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "source": self.source,
            "loaded_at": self.loaded_at,
            "size": self.size,
            "checksum": self.checksum,
        }


@dataclass
class DictionaryData:
    """A sorted word list together with its cache metadata."""

    words: tuple[str, ...]
    metadata: CacheMetadata


@dataclass
class DictionaryError:
    """Classified failure of a dictionary operation."""

    type: DictionaryErrorType
    message: str
    retryable: bool
    code: Optional[str] = None
    details: dict = field(default_factory=dict)


@dataclass
class LoadingState:
    """Finite-state record of the dictionary manager."""

    status: DictionaryStatus = DictionaryStatus.IDLE
    progress: int = 0
    error: Optional[DictionaryError] = None
    retry_count: int = 0
    last_attempt: float = 0.0

    def copy(self) -> "LoadingState":
        return replace(self)


@dataclass
class DictionaryStats:
    """Observability snapshot of the dictionary manager."""

    word_count: int
    loading_state: LoadingState
    cache_size: int
    last_loaded: float
    source: str


@dataclass
class DictionaryEventData:
    """Payload delivered to dictionary event listeners."""

    type: str
    timestamp: float
    data: dict = field(default_factory=dict)


@dataclass
class FilterErrorDetails:
    """Context about a filter error."""

    segment_index: Optional[int] = None
    constraint: Optional[str] = None
    provided_value: Any = None
    suggestion: Optional[str] = None


@dataclass
class FilterError:
    """Structured filter error with constraint details."""

    type: FilterErrorType
    message: str
    details: FilterErrorDetails = field(default_factory=FilterErrorDetails)


@dataclass
class FilterMetadata:
    """Performance metrics collected during a filter run."""

    processing_time_ms: float
    processed_words: int
    total_candidates: int
    segment_count: int


@dataclass
class FilterResult:
    """Result of a segment filter run."""

    words: list[str]
    metadata: FilterMetadata
    error: Optional[FilterError] = None


@dataclass
class SegmentValidationResult:
    """Outcome of validating a single segment."""

    is_valid: bool
    error: Optional[FilterError] = None
    normalized_segment: Optional[Segment] = None


@dataclass
class SegmentMatchDetail:
    """Per-segment explanation of how a word slice relates to its pool."""

    segment_index: int
    text: str
    matches: bool
    length_mismatch: bool = False
    unavailable_letters: list[str] = field(default_factory=list)
    excess_letters: list[str] = field(default_factory=list)
