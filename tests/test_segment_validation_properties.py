"""
Property-based tests for segment validation.

Uses Hypothesis to verify structural segment checks, their ordering and
the input-level checks applied to typed-in segments.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from word_finder.enums import FilterErrorType
from word_finder.filter_errors import (
    FilterErrorMessages,
    create_no_matching_words_error,
    create_unexpected_processing_error,
    extract_error_message,
    is_filter_error,
)
from word_finder.models import Segment
from word_finder.segment_validation import (
    is_collection_valid,
    normalize_letters,
    normalize_segment,
    validate_available_letters,
    validate_segment_count,
    validate_segment_structure,
    validate_segments_collection,
    validate_target_length,
)


# Strategies for generating test data

pool_strategy = st.text(alphabet=st.sampled_from("abcdefgXYZ"), min_size=1, max_size=10)


@st.composite
def valid_segment_strategy(draw) -> Segment:
    letters = draw(pool_strategy)
    return Segment(letters, draw(st.integers(min_value=1, max_value=len(letters))))


class TestSegmentStructureProperty:
    """
    Property-based tests for single-segment validation.
    """

    @given(segment=valid_segment_strategy())
    @settings(max_examples=100)
    def test_valid_segments_pass(self, segment: Segment) -> None:
        """
        Property 1: Well-formed segments.

        *For any* segment with non-empty letters and 1 <= target_length <=
        len(letters), validation SHALL succeed, whether given as a Segment
        or as a mapping.
        """
        as_mapping = {
            "available_letters": segment.available_letters,
            "target_length": segment.target_length,
        }

        assert validate_segment_structure(segment, 0) is None
        assert validate_segment_structure(as_mapping, 0) is None

    @given(letters=pool_strategy, excess=st.integers(min_value=1, max_value=5), index=st.integers(0, 5))
    @settings(max_examples=100)
    def test_length_beyond_pool_rejected(self, letters: str, excess: int, index: int) -> None:
        """
        Property 2: Length bound.

        *For any* segment whose target length exceeds its letter count,
        validation SHALL fail with the letter-count constraint at that
        segment's index.
        """
        error = validate_segment_structure(Segment(letters, len(letters) + excess), index)

        assert error.type == FilterErrorType.VALIDATION
        assert error.details.segment_index == index
        assert error.details.constraint == "target length cannot exceed available letter count"
        assert error.details.provided_value == {
            "target_length": len(letters) + excess,
            "total_letters": len(letters),
        }

    @pytest.mark.parametrize("letters", ["", "   ", "\t\n"])
    def test_empty_letters_rejected(self, letters: str) -> None:
        error = validate_segment_structure(Segment(letters, 3), 2)

        assert error.message == "Segment at index 2 has empty available_letters"
        assert error.details.constraint == "available_letters must not be empty"

    def test_empty_letters_checked_before_length(self) -> None:
        error = validate_segment_structure(Segment(" ", 0), 0)

        assert error.details.constraint == "available_letters must not be empty"

    @pytest.mark.parametrize("target_length, constraint", [
        ("3", "target_length must be positive integer"),
        (2.0, "target_length must be positive integer"),
        (True, "target_length must be positive integer"),
        (None, "target_length must be positive integer"),
        (0, "target_length must be positive"),
        (-4, "target_length must be positive"),
    ])
    def test_bad_target_length(self, target_length, constraint: str) -> None:
        error = validate_segment_structure(
            {"available_letters": "abc", "target_length": target_length}, 1
        )

        assert error.details.constraint == constraint
        assert error.details.provided_value == target_length

    @pytest.mark.parametrize("segment", [42, "abc:3", None, ["abc", 3]])
    def test_non_segment_rejected(self, segment) -> None:
        error = validate_segment_structure(segment, 0)

        assert error.message == "Segment at index 0 is not a valid segment"

    def test_missing_letters_key_rejected(self) -> None:
        error = validate_segment_structure({"target_length": 3}, 0)

        assert error.message == "Segment at index 0 has invalid available_letters"

    def test_whitespace_trimmed_before_counting(self) -> None:
        assert validate_segment_structure(Segment("  ab  ", 2), 0) is None
        assert validate_segment_structure(Segment("  ab  ", 3), 0) is not None


class TestSegmentCollectionProperty:
    """
    Property-based tests for collection validation.
    """

    @given(segments=st.lists(valid_segment_strategy(), min_size=1, max_size=6))
    @settings(max_examples=100)
    def test_up_to_six_valid_segments_pass(self, segments: list[Segment]) -> None:
        assert validate_segments_collection(segments) == []
        assert validate_segments_collection(tuple(segments)) == []

    @given(segments=st.lists(valid_segment_strategy(), min_size=7, max_size=10))
    @settings(max_examples=50)
    def test_too_many_segments_rejected(self, segments: list[Segment]) -> None:
        """
        Property 3: Segment limit.

        *For any* collection of more than six segments, validation SHALL
        report the limit, naming the count.
        """
        errors = validate_segments_collection(segments)

        assert len(errors) == 1
        assert errors[0].message == f"Too many segments: {len(segments)} (maximum 6 allowed)"

    def test_limit_and_segment_errors_both_reported(self) -> None:
        segments = [Segment("abc", 2)] * 6 + [Segment("", 1)]

        errors = validate_segments_collection(segments)

        assert len(errors) == 2
        assert errors[1].details.segment_index == 6

    def test_custom_limit(self) -> None:
        segments = [Segment("abc", 2)] * 3

        assert validate_segments_collection(segments, max_segments=2)[0].details.provided_value == 3

    def test_empty_collection(self) -> None:
        errors = validate_segments_collection([])

        assert errors[0].message == FilterErrorMessages.EMPTY_SEGMENTS

    @pytest.mark.parametrize("segments", ["abc", None, {"available_letters": "abc"}, 3])
    def test_non_sequence_collection(self, segments) -> None:
        errors = validate_segments_collection(segments)

        assert len(errors) == 1
        assert errors[0].message == FilterErrorMessages.INVALID_SEGMENTS

    def test_every_invalid_segment_reported(self) -> None:
        errors = validate_segments_collection([Segment("", 1), Segment("ab", 2), Segment("a", 2)])

        assert [error.details.segment_index for error in errors] == [0, 2]


class TestInputChecksProperty:
    """
    Tests for checks applied to typed-in segments.
    """

    @given(text=st.text(max_size=20))
    @settings(max_examples=100)
    def test_normalize_letters_keeps_only_a_to_z(self, text: str) -> None:
        normalized = normalize_letters(text)

        assert all("a" <= char <= "z" for char in normalized)

    def test_normalize_letters(self) -> None:
        assert normalize_letters("A-b c1D") == "abcd"

    def test_normalize_segment(self) -> None:
        assert normalize_segment({"available_letters": " CaaT ", "target_length": 3}) == Segment("caat", 3)

    @pytest.mark.parametrize("text, valid", [
        ("abc", True),
        ("ABC", True),
        ("", True),
        ("ab1", False),
        ("a b", False),
        ("é", False),
    ])
    def test_validate_available_letters(self, text: str, valid: bool) -> None:
        assert (validate_available_letters(text) is None) == valid

    @given(length=st.integers(min_value=-10, max_value=60))
    @settings(max_examples=100)
    def test_validate_target_length(self, length: int) -> None:
        error = validate_target_length(length)

        assert (error is None) == (1 <= length <= 50)

    def test_validate_target_length_rejects_non_int(self) -> None:
        assert validate_target_length("5") is not None
        assert validate_target_length(True) is not None
        assert validate_target_length(5, max_length=4).message == "Length must be between 1 and 4"

    def test_validate_segment_count(self) -> None:
        assert validate_segment_count(0).message == "At least one segment is required"
        assert validate_segment_count(1) is None
        assert validate_segment_count(6) is None
        assert validate_segment_count(7).message == "Maximum 6 segments allowed"

    def test_is_collection_valid(self) -> None:
        assert is_collection_valid([Segment("abc", 3), Segment("de", 1)])
        assert not is_collection_valid([])
        assert not is_collection_valid([Segment("ab1", 2)])
        assert not is_collection_valid([Segment("abc", 51)])
        assert not is_collection_valid([42])


class TestFilterErrorHelpers:
    """
    Tests for filter error construction and inspection.
    """

    def test_no_matching_words_error(self) -> None:
        error = create_no_matching_words_error()

        assert error.type == FilterErrorType.CONSTRAINT
        assert error.message == "No dictionary words satisfy the provided segment constraints"
        assert error.details.constraint == "segment pattern matching"

    def test_unexpected_processing_error_keeps_message(self) -> None:
        error = create_unexpected_processing_error(KeyError("missing"))

        assert error.type == FilterErrorType.PROCESSING
        assert error.details.provided_value == "'missing'"

    def test_error_inspection(self) -> None:
        error = create_no_matching_words_error()

        assert is_filter_error(error)
        assert not is_filter_error("oops")
        assert extract_error_message(error) == error.message
        assert extract_error_message(ValueError("bad")) == "bad"
        assert extract_error_message("plain") == "plain"
        assert extract_error_message(42) == FilterErrorMessages.PROCESSING_ERROR
