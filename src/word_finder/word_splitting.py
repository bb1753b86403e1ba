"""
Word splitting utilities for segment-based matching.

A candidate word is cut into consecutive slices whose lengths follow the
segment order: slice i starts at the sum of the lengths before it.
"""

from typing import Sequence

from .models import Segment


def split_word_into_segments(word: str, lengths: Sequence[int]) -> list[str]:
    """
    Split a word into consecutive slices of the given lengths.

    Args:
        word: Word to split
        lengths: Slice lengths; must be positive and sum to len(word)

    Returns:
        List of slices, one per length

    Raises:
        ValueError: If the word is empty, lengths is empty, a length is not
            positive, or the lengths do not sum to the word length
    """
    if not isinstance(word, str) or not word:
        raise ValueError("Word must be a non-empty string")

    if not lengths:
        raise ValueError("Lengths must be a non-empty sequence")

    total_length = sum(lengths)
    if total_length != len(word):
        raise ValueError(
            f"Sum of lengths ({total_length}) does not match word length ({len(word)})"
        )

    slices = []
    offset = 0
    for length in lengths:
        if length <= 0:
            raise ValueError(
                f"Invalid segment length: {length}. All lengths must be positive"
            )
        slices.append(word[offset:offset + length])
        offset += length

    return slices


def validate_segment_lengths(lengths: Sequence[int]) -> tuple[bool, list[str], int]:
    """
    Check a sequence of slice lengths.

    Args:
        lengths: Slice lengths to check

    Returns:
        Tuple of (is_valid, error messages, total of the valid lengths)
    """
    if not lengths:
        return False, ["Lengths cannot be empty"], 0

    errors = []
    total_length = 0
    for index, length in enumerate(lengths):
        if isinstance(length, bool) or not isinstance(length, int):
            errors.append(f"Length at index {index} is not an integer: {length!r}")
            continue
        if length <= 0:
            errors.append(f"Length at index {index} is not positive: {length}")
            continue
        total_length += length

    return not errors, errors, total_length


def extract_segment_lengths(segments: Sequence[Segment]) -> list[int]:
    """Get the target length of each segment, in order."""
    return [segment.target_length for segment in segments]


def can_split_word(word: str, lengths: Sequence[int]) -> bool:
    """Check whether a word can be cut into slices of the given lengths."""
    is_valid, _, total_length = validate_segment_lengths(lengths)
    return is_valid and len(word) == total_length
