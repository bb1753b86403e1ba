"""
Letter frequency utilities for the segment filter.

Letter pools and word slices are compared as multisets over the 26 letters
a-z. Counts are kept in a fixed 26-slot list indexed by ord(c) - ord("a");
any character outside a-z makes a slice unmatchable.
"""

ALPHABET_SIZE = 26
_ORD_A = ord("a")


def pool_counts(available_letters: str) -> list[int]:
    """
    Count a segment's available letters, ignoring characters outside a-z.

    Args:
        available_letters: The segment's letter pool

    Returns:
        26-slot count list
    """
    counts = [0] * ALPHABET_SIZE
    for char in available_letters.lower():
        if _is_letter(char):
            counts[ord(char) - _ORD_A] += 1
    return counts


def _is_letter(char: str) -> bool:
    return "a" <= char <= "z"


def frequency_map(text: str) -> dict[str, int]:
    """
    Build a character frequency map from a string.

    The text is lower-cased first. Absent keys mean a count of zero.

    Args:
        text: Any string

    Returns:
        Mapping from character to its number of occurrences
    """
    frequencies: dict[str, int] = {}
    for char in text.lower():
        frequencies[char] = frequencies.get(char, 0) + 1
    return frequencies


def fits_within(text: str, pool_counts: list[int]) -> bool:
    """
    Check that every letter of text is available in a pool.

    Each letter may be drawn at most as many times as it occurs in the pool;
    the pool need not be used up. Fails on the first excess letter.

    Args:
        text: Lower-cased word slice
        pool_counts: 26-slot counts of the segment's available letters

    Returns:
        True if text is a sub-multiset of the pool
    """
    used = [0] * ALPHABET_SIZE
    for char in text:
        index = ord(char) - _ORD_A
        if index < 0 or index >= ALPHABET_SIZE:
            return False
        used[index] += 1
        if used[index] > pool_counts[index]:
            return False
    return True


def segment_fits(text: str, available_letters: str, target_length: int) -> bool:
    """
    Check a word slice against one segment's length and letter pool.

    Args:
        text: The word slice
        available_letters: The segment's letter pool (duplicates significant)
        target_length: Required length of the slice

    Returns:
        True if the slice has the target length and fits within the pool
    """
    if len(text) != target_length:
        return False
    return fits_within(text.lower(), pool_counts(available_letters))


def letter_usage_details(text: str, available_letters: str) -> dict:
    """
    Describe how a word slice draws on a letter pool.

    Args:
        text: The word slice
        available_letters: The segment's letter pool

    Returns:
        Dict with is_valid, unavailable_letters (letters absent from the pool),
        excess_letters (letters used more often than available) and the two
        frequency maps
    """
    available = frequency_map(available_letters)
    used = frequency_map(text)

    unavailable = sorted(
        char for char in used
        if char not in available or not _is_letter(char)
    )
    excess = sorted(
        char for char, count in used.items()
        if _is_letter(char) and char in available and count > available[char]
    )

    return {
        "is_valid": not unavailable and not excess,
        "unavailable_letters": unavailable,
        "excess_letters": excess,
        "available_frequency": available,
        "used_frequency": used,
    }
