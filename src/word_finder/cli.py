"""
Command-line interface for the word finder system.

This module provides the main CLI entry point with commands for:
- find: Find dictionary words matching letter-pool segments
- lookup: Check whether a word is in the dictionary
- load / refresh / clear-cache: Dictionary cache management
- stats: Dictionary statistics
- config: Configuration management

Configuration is read from a JSON file and then overridden by WORD_FINDER_*
environment variables (a .env file in the working directory is honored).
"""

import argparse
import asyncio
import copy
import json
import os
import sys
from dataclasses import asdict
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional

from dotenv import load_dotenv

from . import __version__
from .audit_logger import AuditLogger
from .config import (
    DEFAULT_CACHE_DIR,
    DictionaryConfig,
    FilterConfig,
    LoggingConfig,
    SystemConfig,
)
from .dictionary_manager import DictionaryManager
from .enums import DictionaryEvent, DictionaryStatus, LogLevel
from .exceptions import ConfigurationError, DictionaryLoadError, StorageError
from .i18n import SUPPORTED_LANGUAGES, get_message
from .models import DictionaryError, FilterResult, Segment
from .segment_filter import SegmentFilterEngine
from .segment_validation import validate_available_letters, validate_target_length
from .word_validator import WordValidator


DEFAULT_CONFIG_PATH = Path.home() / ".word_finder" / "config.json"

ENV_PREFIX = "WORD_FINDER_"

# Environment variable suffix -> (config section, attribute, converter)
ENV_OVERRIDES = {
    "SOURCE_URL": ("dictionary", "source_url", str),
    "MAX_SIZE": ("dictionary", "max_size", int),
    "MAX_RETRIES": ("dictionary", "max_retries", int),
    "REQUEST_TIMEOUT": ("dictionary", "request_timeout_seconds", float),
    "CACHE_DIR": ("dictionary", "cache_dir", Path),
    "CACHE_EXPIRY_SECONDS": ("dictionary", "cache_expiry_seconds", float),
    "MIN_WORD_COUNT": ("dictionary", "min_word_count", int),
    "LOG_LEVEL": ("logging", "level", str),
    "LOG_FORMAT": ("logging", "output_format", str),
    "LANGUAGE": (None, "language", str),
}


def create_default_config(
    language: str = "en",
    cache_dir: Optional[Path] = None,
) -> SystemConfig:
    """
    Create a default system configuration.

    Args:
        language: Output language ('en' or 'de')
        cache_dir: Directory for the dictionary cache

    Returns:
        SystemConfig with default settings
    """
    return SystemConfig(
        dictionary=DictionaryConfig(cache_dir=cache_dir or DEFAULT_CACHE_DIR),
        filter=FilterConfig(),
        logging=LoggingConfig(level="info", output_format="text"),
        language=language,
    )


def load_config_from_file(config_path: Path) -> Optional[SystemConfig]:
    """
    Load configuration from a JSON file.

    Missing sections and keys fall back to their defaults.

    Args:
        config_path: Path to the configuration file

    Returns:
        SystemConfig if successful, None otherwise
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        defaults = DictionaryConfig()
        dictionary_data = data.get("dictionary", {})
        cache_dir = dictionary_data.get("cache_dir")
        dictionary = DictionaryConfig(
            source_url=dictionary_data.get("source_url", defaults.source_url),
            max_size=dictionary_data.get("max_size", defaults.max_size),
            max_retries=dictionary_data.get("max_retries", defaults.max_retries),
            initial_retry_delay_seconds=dictionary_data.get(
                "initial_retry_delay_seconds", defaults.initial_retry_delay_seconds
            ),
            max_retry_delay_seconds=dictionary_data.get(
                "max_retry_delay_seconds", defaults.max_retry_delay_seconds
            ),
            backoff_jitter=dictionary_data.get("backoff_jitter", defaults.backoff_jitter),
            request_timeout_seconds=dictionary_data.get(
                "request_timeout_seconds", defaults.request_timeout_seconds
            ),
            cache_key_prefix=dictionary_data.get("cache_key_prefix", defaults.cache_key_prefix),
            cache_dir=Path(cache_dir) if cache_dir else None,
            cache_expiry_seconds=dictionary_data.get(
                "cache_expiry_seconds", defaults.cache_expiry_seconds
            ),
            min_word_count=dictionary_data.get("min_word_count", defaults.min_word_count),
        )

        filter_data = data.get("filter", {})
        filter_config = FilterConfig(
            max_segments=filter_data.get("max_segments", FilterConfig().max_segments),
        )

        logging_data = data.get("logging", {})
        logging_config = LoggingConfig(
            level=logging_data.get("level", "info"),
            output_format=logging_data.get("output_format", "text"),
        )

        return SystemConfig(
            dictionary=dictionary,
            filter=filter_config,
            logging=logging_config,
            language=data.get("language", "en"),
        )

    except (json.JSONDecodeError, AttributeError, KeyError, TypeError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return None
    except FileNotFoundError:
        return None


def save_config_to_file(config: SystemConfig, config_path: Path) -> bool:
    """
    Save configuration to a JSON file.

    Args:
        config: SystemConfig to save
        config_path: Path to save the configuration

    Returns:
        True if successful, False otherwise
    """
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)

        dictionary = asdict(config.dictionary)
        if config.dictionary.cache_dir is not None:
            dictionary["cache_dir"] = str(config.dictionary.cache_dir)

        data = {
            "dictionary": dictionary,
            "filter": asdict(config.filter),
            "logging": asdict(config.logging),
            "language": config.language,
        }

        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        return True

    except (OSError, TypeError) as e:
        print(f"Error saving config: {e}", file=sys.stderr)
        return False


def apply_env_overrides(
    config: SystemConfig,
    environ: Optional[Mapping[str, str]] = None,
) -> SystemConfig:
    """
    Apply WORD_FINDER_* environment variables on top of a configuration.

    When no mapping is given, a .env file is loaded into the process
    environment first and os.environ is used.

    Args:
        config: Base configuration (not modified)
        environ: Optional mapping to read variables from

    Returns:
        New SystemConfig with overrides applied

    Raises:
        ConfigurationError: If a numeric variable cannot be parsed
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    result = copy.deepcopy(config)
    for suffix, (section, attribute, convert) in ENV_OVERRIDES.items():
        name = ENV_PREFIX + suffix
        raw = environ.get(name)
        if raw is None or not raw.strip():
            continue

        try:
            value = convert(raw.strip())
        except ValueError:
            raise ConfigurationError(
                code="invalid_environment_value",
                message=f"Invalid value for {name}: {raw!r}",
                details={"variable": name},
            )

        target = getattr(result, section) if section else result
        setattr(target, attribute, value)

    return result


def validate_config(config: SystemConfig) -> list[str]:
    """
    Check a configuration for values the system cannot run with.

    Args:
        config: Configuration to check

    Returns:
        List of problems (empty if the configuration is valid)
    """
    problems = []
    dictionary = config.dictionary

    if not WordValidator.validate_source_url(dictionary.source_url):
        problems.append(f"dictionary.source_url must be an HTTPS URL: {dictionary.source_url}")
    if dictionary.max_size <= 0:
        problems.append("dictionary.max_size must be positive")
    if dictionary.max_retries < 0:
        problems.append("dictionary.max_retries must not be negative")
    if dictionary.initial_retry_delay_seconds < 0:
        problems.append("dictionary.initial_retry_delay_seconds must not be negative")
    if dictionary.max_retry_delay_seconds < dictionary.initial_retry_delay_seconds:
        problems.append("dictionary.max_retry_delay_seconds must be at least the initial delay")
    if not 0 <= dictionary.backoff_jitter < 1:
        problems.append("dictionary.backoff_jitter must be in [0, 1)")
    if dictionary.request_timeout_seconds <= 0:
        problems.append("dictionary.request_timeout_seconds must be positive")
    if not dictionary.cache_key_prefix:
        problems.append("dictionary.cache_key_prefix must not be empty")
    if dictionary.cache_expiry_seconds <= 0:
        problems.append("dictionary.cache_expiry_seconds must be positive")
    if dictionary.min_word_count < 1:
        problems.append("dictionary.min_word_count must be at least 1")

    if config.filter.max_segments < 1:
        problems.append("filter.max_segments must be at least 1")

    if config.logging.level.lower() not in {level.value for level in LogLevel}:
        problems.append(f"logging.level is not a known level: {config.logging.level}")
    if config.logging.output_format not in ("json", "text", "both"):
        problems.append(f"logging.output_format must be json, text or both: {config.logging.output_format}")

    if config.language not in SUPPORTED_LANGUAGES:
        problems.append(f"language must be one of {sorted(SUPPORTED_LANGUAGES)}: {config.language}")

    return problems


def parse_segment_arg(value: str) -> Segment:
    """
    Parse a LETTERS:LENGTH command line segment.

    Args:
        value: Raw argument, e.g. 'caat:3'

    Returns:
        Segment with lower-cased letters

    Raises:
        argparse.ArgumentTypeError: If the argument is malformed
    """
    letters, separator, length_text = value.rpartition(":")
    if not separator:
        raise argparse.ArgumentTypeError(get_message("cli.invalid_segment", value=value))

    letters = letters.strip()
    try:
        length = int(length_text)
    except ValueError:
        raise argparse.ArgumentTypeError(get_message("cli.invalid_segment", value=value))

    error = validate_available_letters(letters) or validate_target_length(length)
    if error:
        raise argparse.ArgumentTypeError(f"{value}: {error.message}")

    return Segment(available_letters=letters.lower(), target_length=length)


def filter_result_to_dict(result: FilterResult) -> dict:
    """Convert a FilterResult into a JSON-serializable dictionary."""
    def convert(value: Any) -> Any:
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, dict):
            return {key: convert(item) for key, item in value.items()}
        if isinstance(value, list):
            return [convert(item) for item in value]
        return value

    return convert(asdict(result))


def resolve_config(args: argparse.Namespace) -> Optional[SystemConfig]:
    """
    Build the effective configuration for a command.

    Order: config file (or defaults), environment overrides, then
    command line options.

    Returns:
        SystemConfig, or None if an explicitly given config file is unusable
    """
    config = None
    config_path = getattr(args, "config", None)
    if config_path:
        config = load_config_from_file(Path(config_path))
        if config is None:
            print(f"Error: Could not load config from {config_path}", file=sys.stderr)
            return None
    elif DEFAULT_CONFIG_PATH.exists():
        config = load_config_from_file(DEFAULT_CONFIG_PATH)

    if config is None:
        config = create_default_config()

    try:
        config = apply_env_overrides(config)
    except ConfigurationError as e:
        print(get_message("cli.config_error", config.language, message=e.message), file=sys.stderr)
        return None

    if getattr(args, "language", None):
        config.language = args.language

    return config


def create_logger(config: SystemConfig, verbose: bool) -> Optional[AuditLogger]:
    """Create the audit logger for verbose runs."""
    if not verbose:
        return None
    return AuditLogger.from_config(config.logging.level, config.logging.output_format)


def build_manager(
    config: SystemConfig,
    logger: Optional[AuditLogger] = None,
) -> DictionaryManager:
    """Create a dictionary manager from the system configuration."""
    return DictionaryManager(config=config.dictionary, logger=logger)


async def ensure_dictionary(
    manager: DictionaryManager,
    language: str,
    verbose: bool = False,
) -> bool:
    """
    Initialize the dictionary, printing progress and failures.

    Returns:
        True if a word list is available
    """
    unsubscribe = None
    if verbose:
        print(get_message("cli.loading_dictionary", language, source=manager.config.source_url),
              file=sys.stderr)
        unsubscribe = manager.subscribe(
            DictionaryEvent.LOADING_PROGRESS,
            lambda event: print(f"  {event.data['progress']}%", file=sys.stderr),
        )

    try:
        state = await manager.initialize()
    finally:
        if unsubscribe:
            unsubscribe()

    if state.status == DictionaryStatus.ERROR:
        print_load_error(state.error, language)
        return False

    if verbose:
        status_text = get_message(f"status.{state.status.value}", language)
        words = manager.get_words() or ()
        print(get_message("cli.dictionary_ready", language, count=len(words), status=status_text),
              file=sys.stderr)
    return True


def print_load_error(error: DictionaryError, language: str) -> None:
    """Print a classified dictionary error to stderr."""
    category = get_message(f"error.{error.type.value}", language)
    print(get_message("cli.load_failed", language, message=category), file=sys.stderr)
    print(f"  {error.message}", file=sys.stderr)
    if error.retryable:
        print(f"  {get_message('error.retry_hint', language)}", file=sys.stderr)


async def run_find(
    segments: list[Segment],
    config: SystemConfig,
    max_results: Optional[int] = None,
    as_json: bool = False,
    verbose: bool = False,
) -> int:
    """
    Find words matching the given segments.

    Returns:
        Exit code (0 if any word matched, 1 otherwise)
    """
    language = config.language
    logger = create_logger(config, verbose)
    manager = build_manager(config, logger)

    if not await ensure_dictionary(manager, language, verbose):
        return 1

    engine = SegmentFilterEngine(config=config.filter, logger=logger)
    result = await engine.filter_async(segments, manager.get_words(), max_results)

    if as_json:
        print(json.dumps(filter_result_to_dict(result), indent=2, ensure_ascii=False))
        return 0 if result.words else 1

    if result.words:
        print(get_message("cli.matches_found", language, count=len(result.words)))
        for word in result.words:
            print(word)
        if verbose:
            metadata = result.metadata
            print(f"  Candidates: {metadata.total_candidates}/{metadata.processed_words}", file=sys.stderr)
            print(f"  Duration: {metadata.processing_time_ms:.1f}ms", file=sys.stderr)
        return 0

    error = result.error
    print(get_message("cli.filter_error", language, message=error.message), file=sys.stderr)
    if error.details.suggestion:
        print(get_message("cli.suggestion", language, suggestion=error.details.suggestion),
              file=sys.stderr)
    return 1


async def run_lookup(word: str, config: SystemConfig, verbose: bool = False) -> int:
    """Check a single word. Exit code 0 if found."""
    language = config.language
    manager = build_manager(config, create_logger(config, verbose))

    if not await ensure_dictionary(manager, language, verbose):
        return 1

    if manager.has_word(word):
        print(get_message("cli.word_found", language, word=word.strip().lower()))
        return 0

    print(get_message("cli.word_not_found", language, word=word.strip().lower()))
    return 1


async def run_load(config: SystemConfig, refresh: bool = False, verbose: bool = False) -> int:
    """Load (or force-refresh) the dictionary and report the outcome."""
    language = config.language
    manager = build_manager(config, create_logger(config, verbose))

    if refresh:
        print(get_message("cli.refreshing", language))
        try:
            await manager.refresh()
        except DictionaryLoadError as e:
            print_load_error(e.error, language)
            return 1
        except StorageError as e:
            print(get_message("cli.cache_clear_failed", language, message=e.message), file=sys.stderr)
            return 1
    elif not await ensure_dictionary(manager, language, verbose):
        return 1

    state = manager.get_loading_state()
    status_text = get_message(f"status.{state.status.value}", language)
    print(get_message("cli.dictionary_ready", language,
                      count=len(manager.get_words() or ()), status=status_text))
    return 0


async def run_clear_cache(config: SystemConfig, verbose: bool = False) -> int:
    language = config.language
    manager = build_manager(config, create_logger(config, verbose))

    try:
        await manager.clear_cache()
    except StorageError as e:
        print(get_message("cli.cache_clear_failed", language, message=e.message), file=sys.stderr)
        return 1

    print(get_message("cli.cache_cleared", language))
    return 0


async def run_stats(config: SystemConfig, as_json: bool = False, verbose: bool = False) -> int:
    """Print dictionary statistics, using the cache only (no download)."""
    language = config.language
    manager = build_manager(config, create_logger(config, verbose))

    manager.load_from_cache()

    stats = manager.get_stats()

    if as_json:
        print(json.dumps({
            "word_count": stats.word_count,
            "status": stats.loading_state.status.value,
            "cache_size": stats.cache_size,
            "last_loaded": stats.last_loaded,
            "source": stats.source,
        }, indent=2))
        return 0

    if stats.last_loaded:
        last_loaded = datetime.fromtimestamp(stats.last_loaded, tz=timezone.utc).isoformat()
    else:
        last_loaded = get_message("stats.never", language)

    print(get_message("stats.title", language))
    print(f"  {get_message('stats.word_count', language)}: {stats.word_count}")
    print(f"  {get_message('stats.status', language)}: "
          f"{get_message(f'status.{stats.loading_state.status.value}', language)}")
    print(f"  {get_message('stats.cache_size', language)}: {stats.cache_size} bytes")
    print(f"  {get_message('stats.last_loaded', language)}: {last_loaded}")
    print(f"  {get_message('stats.source', language)}: {stats.source}")
    return 0


def cmd_find(args: argparse.Namespace) -> int:
    """Handle the 'find' command."""
    config = resolve_config(args)
    if config is None:
        return 1

    if not args.segment:
        print(get_message("cli.no_segments", config.language), file=sys.stderr)
        return 1

    return asyncio.run(run_find(
        segments=args.segment,
        config=config,
        max_results=args.max_results,
        as_json=args.json,
        verbose=args.verbose,
    ))


def cmd_lookup(args: argparse.Namespace) -> int:
    """Handle the 'lookup' command."""
    config = resolve_config(args)
    if config is None:
        return 1
    return asyncio.run(run_lookup(args.word, config, verbose=args.verbose))


def cmd_load(args: argparse.Namespace) -> int:
    """Handle the 'load' command."""
    config = resolve_config(args)
    if config is None:
        return 1
    return asyncio.run(run_load(config, refresh=False, verbose=args.verbose))


def cmd_refresh(args: argparse.Namespace) -> int:
    """Handle the 'refresh' command."""
    config = resolve_config(args)
    if config is None:
        return 1
    return asyncio.run(run_load(config, refresh=True, verbose=args.verbose))


def cmd_clear_cache(args: argparse.Namespace) -> int:
    """Handle the 'clear-cache' command."""
    config = resolve_config(args)
    if config is None:
        return 1
    return asyncio.run(run_clear_cache(config, verbose=args.verbose))


def cmd_stats(args: argparse.Namespace) -> int:
    """Handle the 'stats' command."""
    config = resolve_config(args)
    if config is None:
        return 1
    return asyncio.run(run_stats(config, as_json=args.json, verbose=args.verbose))


def cmd_config(args: argparse.Namespace) -> int:
    """Handle the 'config' command."""
    config_path = Path(args.path) if args.path else DEFAULT_CONFIG_PATH
    language = args.language or "en"

    if args.action == "show":
        config = load_config_from_file(config_path)
        if config is None:
            print(get_message("config.not_found", language, path=config_path))
            print(get_message("config.init_hint", language))
            return 1

        dictionary = config.dictionary
        print(f"Configuration from: {config_path}")
        print(f"  Language: {config.language}")
        print(f"  Source URL: {dictionary.source_url}")
        print(f"  Max size: {dictionary.max_size} bytes")
        print(f"  Max retries: {dictionary.max_retries}")
        print(f"  Retry delay: {dictionary.initial_retry_delay_seconds}s - "
              f"{dictionary.max_retry_delay_seconds}s")
        print(f"  Request timeout: {dictionary.request_timeout_seconds}s")
        print(f"  Cache dir: {dictionary.cache_dir or DEFAULT_CACHE_DIR}")
        print(f"  Cache expiry: {dictionary.cache_expiry_seconds}s")
        print(f"  Min word count: {dictionary.min_word_count}")
        print(f"  Max segments: {config.filter.max_segments}")
        print(f"  Log level: {config.logging.level}")
        return 0

    elif args.action == "init":
        if config_path.exists() and not args.force:
            print(get_message("config.exists", language, path=config_path))
            print(get_message("config.force_hint", language))
            return 1

        config = create_default_config(language=language)
        if save_config_to_file(config, config_path):
            print(get_message("config.created", language, path=config_path))
            return 0
        return 1

    elif args.action == "validate":
        config = load_config_from_file(config_path)
        if config is None:
            print(f"Error: Could not load config from {config_path}", file=sys.stderr)
            return 1

        problems = validate_config(config)
        if problems:
            print(get_message("config.invalid", language, path=config_path), file=sys.stderr)
            for problem in problems:
                print(f"  - {problem}", file=sys.stderr)
            return 1

        print(get_message("config.valid", language, path=config_path))
        return 0

    return 1


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config", "-c",
        help="Path to configuration file",
    )
    parser.add_argument(
        "--language", "-l",
        choices=sorted(SUPPORTED_LANGUAGES),
        default=None,
        help="Output language (default: from configuration)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="word-finder",
        description="Find dictionary words built from letter-pool segments",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # 'find' command
    find_parser = subparsers.add_parser(
        "find",
        help="Find words matching letter-pool segments",
    )
    find_parser.add_argument(
        "--segment", "-s",
        action="append",
        type=parse_segment_arg,
        metavar="LETTERS:LENGTH",
        help="Segment constraint, in word order (repeatable, e.g. -s caat:3)",
    )
    find_parser.add_argument(
        "--max-results", "-n",
        type=int,
        help="Return at most this many words",
    )
    find_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full result as JSON",
    )
    _add_common_arguments(find_parser)
    find_parser.set_defaults(func=cmd_find)

    # 'lookup' command
    lookup_parser = subparsers.add_parser(
        "lookup",
        help="Check whether a word is in the dictionary",
    )
    lookup_parser.add_argument(
        "word",
        help="Word to look up",
    )
    _add_common_arguments(lookup_parser)
    lookup_parser.set_defaults(func=cmd_lookup)

    # 'load' command
    load_parser = subparsers.add_parser(
        "load",
        help="Load the dictionary (from cache if valid)",
    )
    _add_common_arguments(load_parser)
    load_parser.set_defaults(func=cmd_load)

    # 'refresh' command
    refresh_parser = subparsers.add_parser(
        "refresh",
        help="Discard the cache and download the dictionary again",
    )
    _add_common_arguments(refresh_parser)
    refresh_parser.set_defaults(func=cmd_refresh)

    # 'clear-cache' command
    clear_parser = subparsers.add_parser(
        "clear-cache",
        help="Delete the cached dictionary",
    )
    _add_common_arguments(clear_parser)
    clear_parser.set_defaults(func=cmd_clear_cache)

    # 'stats' command
    stats_parser = subparsers.add_parser(
        "stats",
        help="Show dictionary statistics",
    )
    stats_parser.add_argument(
        "--json",
        action="store_true",
        help="Print statistics as JSON",
    )
    _add_common_arguments(stats_parser)
    stats_parser.set_defaults(func=cmd_stats)

    # 'config' command
    config_parser = subparsers.add_parser(
        "config",
        help="Configuration management",
    )
    config_parser.add_argument(
        "action",
        choices=["show", "init", "validate"],
        help="Configuration action",
    )
    config_parser.add_argument(
        "--path", "-p",
        help="Path to configuration file",
    )
    config_parser.add_argument(
        "--force", "-f",
        action="store_true",
        help="Force overwrite existing configuration",
    )
    config_parser.add_argument(
        "--language", "-l",
        choices=sorted(SUPPORTED_LANGUAGES),
        default=None,
        help="Language for messages and new configuration (default: en)",
    )
    config_parser.set_defaults(func=cmd_config)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
