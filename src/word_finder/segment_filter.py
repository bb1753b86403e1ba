"""
Segment Filter Engine for the word finder system.

Given an ordered list of segments, each a letter pool with an exact length,
the engine returns every dictionary word that splits into consecutive
slices where slice i has segment i's length and draws each letter at most
as often as segment i's pool holds it.

Filtering pipeline:
1. Structural validation of segments (short-circuits on failure)
2. Exact total-length pre-filter of the dictionary
3. Split each candidate by the segment lengths
4. Sub-multiset check per slice, failing fast on the first bad slice
5. Sort matches and apply the optional result limit

The engine holds no mutable state and is safe to run on a worker thread.
"""

import asyncio
import time
from typing import Any, Optional, Sequence

from .audit_logger import AuditLogger
from .config import FilterConfig
from .filter_errors import (
    create_dictionary_not_loaded_error,
    create_no_matching_words_error,
    create_unexpected_processing_error,
    create_validation_error,
)
from .letter_frequency import fits_within, letter_usage_details, pool_counts, segment_fits
from .models import (
    FilterError,
    FilterMetadata,
    FilterResult,
    Segment,
    SegmentMatchDetail,
    SegmentValidationResult,
)
from .segment_validation import normalize_segments, validate_segments_collection
from .word_splitting import extract_segment_lengths, split_word_into_segments


class SegmentFilterEngine:
    """
    Filters dictionary words by segment letter-pool constraints.

    Example:
        >>> engine = SegmentFilterEngine()
        >>> engine.filter([Segment("caat", 3)], ["cat", "act", "tac", "dog"]).words
        ['act', 'cat', 'tac']
    """

    def __init__(
        self,
        config: Optional[FilterConfig] = None,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        """
        Initialize the filter engine.

        Args:
            config: Filter configuration (segment limit)
            logger: Optional audit logger
        """
        self._config = config or FilterConfig()
        self._logger = logger

    def filter(
        self,
        segments: Sequence[Any],
        dictionary: Optional[Sequence[str]],
        max_results: Optional[int] = None,
    ) -> FilterResult:
        """
        Find every dictionary word matching the segment constraints.

        Args:
            segments: Ordered segments (Segment instances or mappings)
            dictionary: Word list to search; None if no dictionary is loaded
            max_results: Optional cap on the number of returned words,
                applied after sorting

        Returns:
            FilterResult with sorted matches, metadata and an optional error.
            Zero matches is reported as a constraint error, malformed input
            as a validation error and an internal failure as a processing
            error.
        """
        start_time = time.perf_counter()
        segment_count = len(segments) if isinstance(segments, (list, tuple)) else 0

        if dictionary is None:
            return self._result([], start_time, 0, 0, segment_count,
                                create_dictionary_not_loaded_error())

        validation = self.validate_segments(segments)
        for outcome in validation:
            if not outcome.is_valid:
                self._log_debug("Segment validation failed", {
                    "message": outcome.error.message,
                    "segment_index": outcome.error.details.segment_index,
                })
                return self._result([], start_time, 0, 0, segment_count, outcome.error)

        limit_error = self._validate_max_results(max_results)
        if limit_error:
            return self._result([], start_time, 0, 0, segment_count, limit_error)

        normalized = [outcome.normalized_segment for outcome in validation]

        try:
            total_length = self.calculate_total_length(normalized)
            candidates = [word for word in dictionary if len(word) == total_length]

            lengths = extract_segment_lengths(normalized)
            pools = [pool_counts(segment.available_letters) for segment in normalized]

            matches = [
                word for word in candidates
                if self._word_matches(word.lower(), lengths, pools)
            ]
            matches.sort()
        except Exception as e:
            if self._logger:
                self._logger.log_error(
                    "SegmentFilterEngine",
                    "Unexpected error during word filtering",
                    error=e,
                )
            return self._result([], start_time, 0, 0, segment_count,
                                create_unexpected_processing_error(e))

        if not matches:
            return self._result([], start_time, len(dictionary), len(candidates),
                                segment_count, create_no_matching_words_error())

        if max_results is not None:
            matches = matches[:max_results]

        result = self._result(matches, start_time, len(dictionary), len(candidates),
                              segment_count)
        self._log_debug("Filter completed", {
            "matches": len(matches),
            "candidates": len(candidates),
            "processing_time_ms": result.metadata.processing_time_ms,
        })
        return result

    async def filter_async(
        self,
        segments: Sequence[Any],
        dictionary: Optional[Sequence[str]],
        max_results: Optional[int] = None,
    ) -> FilterResult:
        """Run filter() on a worker thread so the event loop stays free."""
        return await asyncio.to_thread(self.filter, segments, dictionary, max_results)

    def validate_segments(self, segments: Sequence[Any]) -> list[SegmentValidationResult]:
        """
        Validate a segment collection.

        Args:
            segments: Segments to validate

        Returns:
            One failed result per structural error, or one successful result
            with the normalized segment per input segment
        """
        errors = validate_segments_collection(segments, self._config.max_segments)
        if errors:
            return [SegmentValidationResult(is_valid=False, error=error) for error in errors]

        return [
            SegmentValidationResult(is_valid=True, normalized_segment=segment)
            for segment in normalize_segments(segments)
        ]

    @staticmethod
    def calculate_total_length(segments: Sequence[Segment]) -> int:
        """Sum of the segments' target lengths."""
        return sum(segment.target_length for segment in segments)

    @staticmethod
    def split_word_into_segments(word: str, lengths: Sequence[int]) -> list[str]:
        return split_word_into_segments(word, lengths)

    @staticmethod
    def validate_segment_letters(
        segment_text: str,
        available_letters: str,
        target_length: int,
    ) -> bool:
        """
        Check one word slice against its segment.

        Args:
            segment_text: The word slice
            available_letters: The segment's letter pool
            target_length: The segment's required length

        Returns:
            True if the slice has the target length and each of its letters
            occurs no more often than in the pool
        """
        return segment_fits(segment_text, available_letters, target_length)

    def explain(self, word: str, segments: Sequence[Any]) -> list[SegmentMatchDetail]:
        """
        Describe how each slice of a word relates to its segment.

        Slices are cut at the segment offsets even when the word length
        differs from the total target length; short slices are flagged.

        Args:
            word: Word to explain
            segments: Ordered segments

        Returns:
            One SegmentMatchDetail per segment

        Raises:
            ValueError: If the segments are structurally invalid
        """
        validation = self.validate_segments(segments)
        for outcome in validation:
            if not outcome.is_valid:
                raise ValueError(outcome.error.message)

        text = word.strip().lower()
        details = []
        offset = 0
        for index, outcome in enumerate(validation):
            segment = outcome.normalized_segment
            piece = text[offset:offset + segment.target_length]
            offset += segment.target_length

            usage = letter_usage_details(piece, segment.available_letters)
            length_mismatch = len(piece) != segment.target_length
            details.append(
                SegmentMatchDetail(
                    segment_index=index,
                    text=piece,
                    matches=usage["is_valid"] and not length_mismatch,
                    length_mismatch=length_mismatch,
                    unavailable_letters=usage["unavailable_letters"],
                    excess_letters=usage["excess_letters"],
                )
            )

        return details

    @staticmethod
    def _word_matches(word: str, lengths: list[int], pools: list[list[int]]) -> bool:
        pieces = split_word_into_segments(word, lengths)
        for piece, pool in zip(pieces, pools):
            if not fits_within(piece, pool):
                return False
        return True

    @staticmethod
    def _validate_max_results(max_results: Optional[int]) -> Optional[FilterError]:
        if max_results is None:
            return None
        if isinstance(max_results, bool) or not isinstance(max_results, int) or max_results < 1:
            return create_validation_error(
                "max_results must be a positive integer",
                constraint="max_results must be positive integer",
                provided_value=max_results,
                suggestion="Provide a positive limit or omit it",
            )
        return None

    @staticmethod
    def _result(
        words: list[str],
        start_time: float,
        processed_words: int,
        total_candidates: int,
        segment_count: int,
        error: Optional[FilterError] = None,
    ) -> FilterResult:
        return FilterResult(
            words=words,
            metadata=FilterMetadata(
                processing_time_ms=(time.perf_counter() - start_time) * 1000,
                processed_words=processed_words,
                total_candidates=total_candidates,
                segment_count=segment_count,
            ),
            error=error,
        )

    def _log_debug(self, message: str, data: dict) -> None:
        if self._logger:
            self._logger.debug("SegmentFilterEngine", message, data)
