"""
Dictionary content validation module.

Parses raw dictionary text into a cleaned, deduplicated word list and
provides the integrity and source checks used by the acquisition pipeline.
"""

import re
from dataclasses import dataclass
from typing import Any, Iterable, Optional
from urllib.parse import urlparse

from word_finder.audit_logger import AuditLogger
from word_finder.config import DEFAULT_MAX_SIZE, MAX_WORD_LENGTH, MIN_WORD_LENGTH
from word_finder.enums import ContentValidationErrorCode
from word_finder.exceptions import ValidationError


# Letters and hyphens only
WORD_PATTERN = re.compile(r"[a-zA-Z-]+")

# Printable ASCII plus whitespace
TEXT_CONTENT_PATTERN = re.compile(r"[\x20-\x7E\s]*", re.ASCII)

LINE_SPLIT_PATTERN = re.compile(r"[\r\n]+")

# Number of rejected tokens echoed into the log
_REJECTED_SAMPLE_SIZE = 10

_METADATA_FIELDS = ("version", "source", "loaded_at", "size", "checksum")


@dataclass
class ValidationStats:
    """Token statistics for a block of dictionary content."""

    total_lines: int
    valid_words: int
    invalid_words: int
    duplicates: int
    content_size: int


def _tokens(content: str) -> Iterable[str]:
    for line in LINE_SPLIT_PATTERN.split(content):
        yield from line.split()


class WordValidator:
    """
    Validates raw dictionary content and individual words.

    Handles:
    - Rejection of empty or non-ASCII content
    - Per-token word rules (length, alphabet, hyphen placement)
    - Lower-casing and deduplication of accepted words
    - Minimum word count enforcement
    - Order-independent checksums for cache integrity
    """

    def __init__(
        self,
        min_word_count: int = 1000,
        max_size: int = DEFAULT_MAX_SIZE,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        """
        Initialize validator.

        Args:
            min_word_count: Fewest accepted words a dictionary may contain
            max_size: Largest accepted payload in bytes
            logger: Optional logger for rejected-token reports
        """
        self._min_word_count = min_word_count
        self._max_size = max_size
        self._logger = logger

    @property
    def min_word_count(self) -> int:
        return self._min_word_count

    @property
    def max_size(self) -> int:
        return self._max_size

    def validate(self, content: str) -> list[str]:
        """
        Validate and parse dictionary content from raw text.

        Args:
            content: Raw dictionary text, one or more words per line

        Returns:
            Deduplicated, lower-cased list of accepted words

        Raises:
            ValidationError: If content is empty, contains non-printable or
                non-ASCII characters, or yields too few valid words
        """
        if not isinstance(content, str) or not content:
            raise ValidationError(
                code=ContentValidationErrorCode.EMPTY_CONTENT.value,
                message="Dictionary content is empty",
                details={},
            )

        if not TEXT_CONTENT_PATTERN.fullmatch(content):
            raise ValidationError(
                code=ContentValidationErrorCode.CONTENT_ENCODING.value,
                message="Dictionary content contains invalid characters",
                details={"content_size": len(content)},
            )

        valid_words: list[str] = []
        rejected: list[str] = []
        for token in _tokens(content):
            if self.is_valid_word(token):
                valid_words.append(token.lower())
            else:
                rejected.append(token)

        if not valid_words and not rejected:
            raise ValidationError(
                code=ContentValidationErrorCode.NO_WORDS.value,
                message="No words found in dictionary content",
                details={"content_size": len(content)},
            )

        if rejected and self._logger:
            self._logger.warn(
                "WordValidator",
                f"Found {len(rejected)} invalid words",
                {"sample": rejected[:_REJECTED_SAMPLE_SIZE]},
            )

        # Order of first occurrence is kept; callers sort downstream
        unique_words = list(dict.fromkeys(valid_words))

        if len(unique_words) < self._min_word_count:
            raise ValidationError(
                code=ContentValidationErrorCode.INSUFFICIENT_WORDS.value,
                message=(
                    f"Insufficient valid words: found {len(unique_words)}, "
                    f"minimum required {self._min_word_count}"
                ),
                details={
                    "found": len(unique_words),
                    "minimum": self._min_word_count,
                    "rejected": len(rejected),
                },
            )

        return unique_words

    def is_valid_word(self, word: Any) -> bool:
        """
        Validate a single word against dictionary standards.

        Args:
            word: Candidate token

        Returns:
            True if the token is an acceptable dictionary word
        """
        if not isinstance(word, str) or not word:
            return False

        if not MIN_WORD_LENGTH <= len(word) <= MAX_WORD_LENGTH:
            return False

        if not WORD_PATTERN.fullmatch(word):
            return False

        # Also rejects hyphen-only tokens
        if word.startswith("-") or word.endswith("-"):
            return False

        if "--" in word:
            return False

        return True

    @staticmethod
    def calculate_checksum(words: Iterable[str]) -> str:
        """
        Calculate an order-independent checksum over a word list.

        Uses djb2 over the sorted words joined with '|', truncated to an
        unsigned 32-bit value.

        Args:
            words: Words to hash

        Returns:
            Lowercase hexadecimal checksum string
        """
        content = "|".join(sorted(words))

        checksum = 5381
        for char in content:
            checksum = ((checksum << 5) + checksum + ord(char)) & 0xFFFFFFFF

        return format(checksum, "x")

    def validate_file_size(self, size: Any) -> bool:
        """Check a payload size in bytes against the configured ceiling."""
        if isinstance(size, bool) or not isinstance(size, int) or size < 0:
            return False
        return size <= self._max_size

    @staticmethod
    def validate_source_url(url: Any) -> bool:
        """
        Check that a source URL is well-formed and uses HTTPS.

        Args:
            url: URL to check

        Returns:
            True if the URL may be used as a dictionary source
        """
        if not isinstance(url, str) or not url:
            return False

        try:
            parsed = urlparse(url)
        except ValueError:
            return False

        if parsed.scheme.lower() != "https":
            return False

        hostname = parsed.hostname or ""
        return len(hostname) >= 4

    @staticmethod
    def validate_dictionary_data(data: Any) -> bool:
        """
        Structurally validate a deserialized cache record.

        Args:
            data: Object decoded from the cache

        Returns:
            True if data has a list of non-empty strings under 'words' and a
            metadata mapping carrying every metadata field
        """
        if not isinstance(data, dict):
            return False

        words = data.get("words")
        if not isinstance(words, list):
            return False

        if not all(isinstance(word, str) and word for word in words):
            return False

        metadata = data.get("metadata")
        if not isinstance(metadata, dict):
            return False

        return all(name in metadata for name in _METADATA_FIELDS)

    @staticmethod
    def normalize_word(word: Any) -> str:
        """Lower-case and trim a word for lookup; non-strings become ''."""
        if not isinstance(word, str):
            return ""
        return word.lower().strip()

    def get_validation_stats(self, content: str) -> ValidationStats:
        """
        Summarize token statistics for dictionary content.

        Args:
            content: Raw dictionary text

        Returns:
            ValidationStats for the content
        """
        lines = [line for line in LINE_SPLIT_PATTERN.split(content) if line.strip()]

        all_words: list[str] = []
        valid_count = 0
        invalid_count = 0
        for token in _tokens(content):
            all_words.append(token.lower())
            if self.is_valid_word(token):
                valid_count += 1
            else:
                invalid_count += 1

        return ValidationStats(
            total_lines=len(lines),
            valid_words=valid_count,
            invalid_words=invalid_count,
            duplicates=len(all_words) - len(set(all_words)),
            content_size=len(content),
        )
