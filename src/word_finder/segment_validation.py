"""
Segment validation for the word finder.

Structural checks run before any filtering work. Each failure is a
validation-typed FilterError naming the segment index, the violated
constraint, the offending value and a suggested fix.

Per-segment checks run in this order:
1. The segment has available letters and a target length
2. The available letters are a non-empty string (after trimming)
3. The target length is an integer (bool rejected) of at least 1
4. The target length does not exceed the number of available letters

The collection must be a list or tuple of 1 to max_segments segments.
"""

import re
from collections.abc import Mapping
from typing import Any, Optional, Sequence

from .config import MAX_SEGMENTS, MAX_WORD_LENGTH
from .filter_errors import (
    FilterErrorMessages,
    FilterErrorSuggestions,
    create_validation_error,
)
from .models import FilterError, Segment

LETTERS_PATTERN = re.compile(r"[a-zA-Z]*")


def _segment_fields(segment: Any) -> Optional[tuple[Any, Any]]:
    if isinstance(segment, Segment):
        return segment.available_letters, segment.target_length
    if isinstance(segment, Mapping):
        return segment.get("available_letters"), segment.get("target_length")
    return None


def validate_segment_structure(segment: Any, index: int) -> Optional[FilterError]:
    """
    Validate one segment's structure and basic constraints.

    Args:
        segment: A Segment, or a mapping with available_letters and
            target_length keys
        index: Position of the segment in its collection

    Returns:
        FilterError if the segment is invalid, None if it is valid
    """
    fields = _segment_fields(segment)
    if fields is None:
        return create_validation_error(
            f"Segment at index {index} is not a valid segment",
            segment_index=index,
            constraint="segment structure",
            provided_value=segment,
            suggestion=FilterErrorSuggestions.CHECK_SEGMENT_STRUCTURE,
        )

    letters, target_length = fields

    if not isinstance(letters, str):
        return create_validation_error(
            f"Segment at index {index} has invalid available_letters",
            segment_index=index,
            constraint="available_letters must be non-empty string",
            provided_value=letters,
            suggestion="Provide a non-empty string of available letters",
        )

    letters = letters.strip()
    if not letters:
        return create_validation_error(
            f"Segment at index {index} has empty available_letters",
            segment_index=index,
            constraint="available_letters must not be empty",
            provided_value=fields[0],
            suggestion=FilterErrorSuggestions.PROVIDE_LETTERS,
        )

    if isinstance(target_length, bool) or not isinstance(target_length, int):
        return create_validation_error(
            f"Segment at index {index} has invalid target_length",
            segment_index=index,
            constraint="target_length must be positive integer",
            provided_value=target_length,
            suggestion=FilterErrorSuggestions.USE_POSITIVE_LENGTH,
        )

    if target_length <= 0:
        return create_validation_error(
            f"Segment at index {index} has non-positive target_length",
            segment_index=index,
            constraint="target_length must be positive",
            provided_value=target_length,
            suggestion="Provide a positive integer greater than 0",
        )

    total_letters = len(letters)
    if target_length > total_letters:
        return create_validation_error(
            (
                f"Segment at index {index}: target_length ({target_length}) "
                f"exceeds total available letters ({total_letters})"
            ),
            segment_index=index,
            constraint="target length cannot exceed available letter count",
            provided_value={"target_length": target_length, "total_letters": total_letters},
            suggestion=FilterErrorSuggestions.REDUCE_LENGTH_OR_ADD_LETTERS,
        )

    return None


def validate_segments_collection(
    segments: Any,
    max_segments: int = MAX_SEGMENTS,
) -> list[FilterError]:
    """
    Validate a segment collection and every segment in it.

    Args:
        segments: Collection of segments to validate
        max_segments: Largest number of segments allowed

    Returns:
        List of errors (empty if the collection is valid)
    """
    if not isinstance(segments, (list, tuple)):
        return [
            create_validation_error(
                FilterErrorMessages.INVALID_SEGMENTS,
                constraint="segments array structure",
                provided_value=type(segments).__name__,
                suggestion="Provide a list of segments",
            )
        ]

    if not segments:
        return [
            create_validation_error(
                FilterErrorMessages.EMPTY_SEGMENTS,
                constraint="minimum segments required",
                provided_value=0,
                suggestion=FilterErrorSuggestions.PROVIDE_SEGMENTS,
            )
        ]

    errors = []
    if len(segments) > max_segments:
        errors.append(
            create_validation_error(
                f"Too many segments: {len(segments)} (maximum {max_segments} allowed)",
                constraint="maximum segments limit",
                provided_value=len(segments),
                suggestion=f"Reduce number of segments to {max_segments} or fewer",
            )
        )

    for index, segment in enumerate(segments):
        error = validate_segment_structure(segment, index)
        if error:
            errors.append(error)

    return errors


def normalize_segment(segment: Any) -> Segment:
    """Trim and lower-case a structurally valid segment's letters."""
    letters, target_length = _segment_fields(segment)
    return Segment(available_letters=letters.strip().lower(), target_length=target_length)


def normalize_segments(segments: Sequence[Any]) -> list[Segment]:
    return [normalize_segment(segment) for segment in segments]


# Input-level checks used when segments are typed in by a user


def normalize_letters(text: str) -> str:
    """Lower-case input and drop everything that is not a letter a-z."""
    return re.sub(r"[^a-z]", "", text.lower())


def validate_available_letters(text: str) -> Optional[FilterError]:
    """Reject letter input containing anything other than a-z."""
    if not LETTERS_PATTERN.fullmatch(text):
        return create_validation_error(
            "Only letters (a-z) are allowed",
            constraint="available_letters",
            provided_value=text,
            suggestion=FilterErrorSuggestions.PROVIDE_LETTERS,
        )
    return None


def validate_target_length(
    length: Any,
    max_length: int = MAX_WORD_LENGTH,
) -> Optional[FilterError]:
    """Reject a target length that is not an integer in [1, max_length]."""
    if isinstance(length, bool) or not isinstance(length, int) or not 1 <= length <= max_length:
        return create_validation_error(
            f"Length must be between 1 and {max_length}",
            constraint="target_length",
            provided_value=length,
            suggestion=FilterErrorSuggestions.USE_POSITIVE_LENGTH,
        )
    return None


def validate_segment_count(
    count: int,
    max_segments: int = MAX_SEGMENTS,
) -> Optional[FilterError]:
    """Reject a segment count outside [1, max_segments]."""
    if count < 1:
        return create_validation_error(
            "At least one segment is required",
            constraint="segment_count",
            provided_value=count,
            suggestion=FilterErrorSuggestions.PROVIDE_SEGMENTS,
        )
    if count > max_segments:
        return create_validation_error(
            f"Maximum {max_segments} segments allowed",
            constraint="segment_count",
            provided_value=count,
            suggestion=f"Reduce number of segments to {max_segments} or fewer",
        )
    return None


def is_collection_valid(
    segments: Sequence[Any],
    max_segments: int = MAX_SEGMENTS,
) -> bool:
    """Check user input: segment count, letters-only pools and lengths in range."""
    if validate_segment_count(len(segments), max_segments):
        return False

    for segment in segments:
        fields = _segment_fields(segment)
        if fields is None:
            return False
        letters, target_length = fields
        if not isinstance(letters, str) or validate_available_letters(letters):
            return False
        if validate_target_length(target_length):
            return False

    return True
