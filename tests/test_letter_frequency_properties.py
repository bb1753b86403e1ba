"""
Property-based tests for the letter frequency and word splitting helpers.

Uses Hypothesis to compare the 26-slot multiset checks against
collections.Counter and to verify slicing by segment lengths.
"""

from collections import Counter
from string import ascii_lowercase

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from word_finder.letter_frequency import (
    ALPHABET_SIZE,
    fits_within,
    frequency_map,
    letter_usage_details,
    pool_counts,
    segment_fits,
)
from word_finder.models import Segment
from word_finder.word_splitting import (
    can_split_word,
    extract_segment_lengths,
    split_word_into_segments,
    validate_segment_lengths,
)


# Strategies for generating test data

small_alphabet = st.sampled_from("abcdef")

letters_strategy = st.text(alphabet=small_alphabet, min_size=0, max_size=12)

lengths_strategy = st.lists(st.integers(min_value=1, max_value=6), min_size=1, max_size=6)


def is_sub_multiset(text: str, pool: str) -> bool:
    needed = Counter(text)
    available = Counter(pool)
    return all(available[char] >= count for char, count in needed.items())


class TestPoolCountsProperty:
    """
    Property-based tests for pool counting.
    """

    @given(letters=st.text(max_size=30))
    @settings(max_examples=100)
    def test_counts_only_letters_a_to_z(self, letters: str) -> None:
        """
        Property 1: Pool counting.

        *For any* string, pool_counts SHALL count each lower-cased letter
        a-z and ignore every other character.
        """
        counts = pool_counts(letters)
        expected = Counter(char for char in letters.lower() if "a" <= char <= "z")

        assert len(counts) == ALPHABET_SIZE
        assert counts == [expected[char] for char in ascii_lowercase]

    def test_mixed_case_and_symbols(self) -> None:
        counts = pool_counts("AaB-1 ")

        assert counts[0] == 2
        assert counts[1] == 1
        assert sum(counts) == 3


class TestFitsWithinProperty:
    """
    Property-based tests for the sub-multiset check.
    """

    @given(text=letters_strategy, pool=letters_strategy)
    @settings(max_examples=200)
    def test_agrees_with_counter(self, text: str, pool: str) -> None:
        """
        Property 2: Sub-multiset law.

        *For any* slice and pool over a-z, fits_within SHALL hold exactly
        when every letter occurs in the slice no more often than in the
        pool.
        """
        assert fits_within(text, pool_counts(pool)) == is_sub_multiset(text, pool)

    @given(pool=letters_strategy, data=st.data())
    @settings(max_examples=100)
    def test_any_selection_from_pool_fits(self, pool: str, data) -> None:
        subset = data.draw(st.lists(st.sampled_from(range(len(pool))), unique=True)) if pool else []
        text = "".join(pool[index] for index in subset)

        assert fits_within(text, pool_counts(pool))

    @pytest.mark.parametrize("text", ["é", "a-b", "a b", "1", "A"])
    def test_non_letters_never_fit(self, text: str) -> None:
        assert not fits_within(text, pool_counts("abcdefghijklmnopqrstuvwxyz" * 2))

    def test_pool_need_not_be_used_up(self) -> None:
        assert fits_within("ab", pool_counts("abcd"))
        assert fits_within("", pool_counts("abcd"))

    def test_duplicates_are_significant(self) -> None:
        assert fits_within("aa", pool_counts("aab"))
        assert not fits_within("aaa", pool_counts("aab"))


class TestSegmentFitsProperty:
    """
    Property-based tests for the per-slice check.
    """

    @given(text=letters_strategy, pool=letters_strategy, length=st.integers(min_value=0, max_value=12))
    @settings(max_examples=100)
    def test_requires_exact_length(self, text: str, pool: str, length: int) -> None:
        """
        Property 3: Slice length.

        *For any* slice, segment_fits SHALL be False unless the slice has
        exactly the target length.
        """
        if len(text) != length:
            assert not segment_fits(text, pool, length)
        else:
            assert segment_fits(text, pool, length) == is_sub_multiset(text, pool)

    def test_case_insensitive(self) -> None:
        assert segment_fits("CAT", "tac", 3)
        assert segment_fits("cat", "TAC", 3)


class TestFrequencyDetailsProperty:
    """
    Tests for frequency maps and usage explanations.
    """

    @given(text=st.text(max_size=30))
    @settings(max_examples=100)
    def test_frequency_map_totals(self, text: str) -> None:
        frequencies = frequency_map(text)

        assert sum(frequencies.values()) == len(text.lower())
        assert frequencies == dict(Counter(text.lower()))

    def test_usage_details_reports_missing_and_excess(self) -> None:
        details = letter_usage_details("tatx", "tac")

        assert not details["is_valid"]
        assert details["unavailable_letters"] == ["x"]
        assert details["excess_letters"] == ["t"]
        assert details["used_frequency"] == {"t": 2, "a": 1, "x": 1}

    def test_usage_details_valid(self) -> None:
        details = letter_usage_details("cat", "caat")

        assert details["is_valid"]
        assert details["unavailable_letters"] == []
        assert details["excess_letters"] == []

    def test_usage_details_flags_non_letters(self) -> None:
        details = letter_usage_details("a-", "a-")

        assert details["unavailable_letters"] == ["-"]
        assert not details["is_valid"]


class TestWordSplittingProperty:
    """
    Property-based tests for cutting words by segment lengths.
    """

    @given(lengths=lengths_strategy, data=st.data())
    @settings(max_examples=100)
    def test_slices_reassemble_word(self, lengths: list[int], data) -> None:
        """
        Property 4: Lossless split.

        *For any* positive lengths and word of their total length, the
        slices SHALL have those lengths in order and concatenate back to
        the word.
        """
        word = data.draw(st.text(alphabet=small_alphabet, min_size=sum(lengths), max_size=sum(lengths)))

        pieces = split_word_into_segments(word, lengths)

        assert [len(piece) for piece in pieces] == lengths
        assert "".join(pieces) == word

    @given(lengths=lengths_strategy, extra=st.integers(min_value=1, max_value=3))
    @settings(max_examples=50)
    def test_length_mismatch_rejected(self, lengths: list[int], extra: int) -> None:
        word = "a" * (sum(lengths) + extra)

        with pytest.raises(ValueError):
            split_word_into_segments(word, lengths)
        assert not can_split_word(word, lengths)

    @pytest.mark.parametrize("word, lengths", [
        ("", [1]),
        ("abc", []),
        ("abc", [4, -1]),
        ("abc", [3, 0]),
    ])
    def test_invalid_split_arguments(self, word: str, lengths: list[int]) -> None:
        with pytest.raises(ValueError):
            split_word_into_segments(word, lengths)

    def test_validate_segment_lengths(self) -> None:
        assert validate_segment_lengths([2, 3]) == (True, [], 5)

        is_valid, errors, total = validate_segment_lengths([2, 0, True, 3])
        assert not is_valid
        assert len(errors) == 2
        assert total == 5

        assert validate_segment_lengths([]) == (False, ["Lengths cannot be empty"], 0)

    def test_extract_segment_lengths(self) -> None:
        segments = [Segment("ab", 2), Segment("cde", 1)]

        assert extract_segment_lengths(segments) == [2, 1]
        assert can_split_word("abc", [2, 1])
