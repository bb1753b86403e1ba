"""
Configuration dataclasses for the word finder system.

This module defines all configuration structures used throughout the system:
dictionary acquisition, retry behavior, caching, filtering and logging.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


DEFAULT_SOURCE_URL = (
    "https://raw.githubusercontent.com/jesstess/Scrabble/master/scrabble/sowpods.txt"
)
DEFAULT_MAX_SIZE = 5 * 1024 * 1024  # 5 MiB
DEFAULT_CACHE_EXPIRY_SECONDS = 24 * 60 * 60
DEFAULT_CACHE_DIR = Path.home() / ".word_finder" / "cache"

# Bumped whenever the on-disk cache record layout changes
CACHE_VERSION = "1.0.0"

MIN_WORD_LENGTH = 1
MAX_WORD_LENGTH = 50

MAX_SEGMENTS = 6


@dataclass
class RetryConfig:
    """Retry behavior configuration."""

    max_retries: int = 3
    initial_delay_seconds: float = 1.0
    max_delay_seconds: float = 8.0
    jitter: float = 0.1


@dataclass
class DictionaryConfig:
    """Dictionary acquisition and cache configuration."""

    source_url: str = DEFAULT_SOURCE_URL
    max_size: int = DEFAULT_MAX_SIZE
    max_retries: int = 3
    initial_retry_delay_seconds: float = 1.0
    max_retry_delay_seconds: float = 8.0
    backoff_jitter: float = 0.1
    request_timeout_seconds: float = 5.0
    cache_key_prefix: str = "word-finder"
    cache_dir: Optional[Path] = None
    cache_expiry_seconds: float = DEFAULT_CACHE_EXPIRY_SECONDS
    min_word_count: int = 1000

    def retry_config(self) -> RetryConfig:
        """Build the retry configuration for dictionary downloads."""
        return RetryConfig(
            max_retries=self.max_retries,
            initial_delay_seconds=self.initial_retry_delay_seconds,
            max_delay_seconds=self.max_retry_delay_seconds,
            jitter=self.backoff_jitter,
        )


@dataclass
class FilterConfig:
    """Segment filter configuration."""

    max_segments: int = MAX_SEGMENTS


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "info"
    output_format: str = "text"  # 'json', 'text', 'both'


@dataclass
class SystemConfig:
    """Main system configuration combining all sub-configurations."""

    dictionary: DictionaryConfig = field(default_factory=DictionaryConfig)
    filter: FilterConfig = field(default_factory=FilterConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    language: str = "en"  # 'en' or 'de'
