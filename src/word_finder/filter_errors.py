"""
Structured errors for the segment filter.

Filter failures are reported as FilterError values inside a FilterResult
rather than raised: validation errors describe malformed segments, a
constraint error means no word matched, and a processing error wraps an
unexpected internal failure.
"""

from typing import Any, Optional

from .enums import FilterErrorType
from .models import FilterError, FilterErrorDetails


class FilterErrorMessages:
    """Standard messages for common filter failures."""

    EMPTY_SEGMENTS = "Segments array cannot be empty"
    INVALID_SEGMENTS = "Segments must be a list or tuple"
    INVALID_SEGMENT = "Invalid segment structure"
    EMPTY_AVAILABLE_LETTERS = "Available letters cannot be empty"
    INVALID_TARGET_LENGTH = "Target length must be a positive integer"
    TARGET_LENGTH_EXCEEDS_LETTERS = "Target length exceeds available letter count"
    TOO_MANY_SEGMENTS = "Too many segments (maximum 6 allowed)"
    DICTIONARY_NOT_LOADED = "Dictionary not loaded"
    NO_MATCHING_WORDS = "No dictionary words satisfy the provided segment constraints"
    PROCESSING_ERROR = "Unexpected error during word filtering"


class FilterErrorSuggestions:
    """Standard suggestions for common filter failures."""

    PROVIDE_SEGMENTS = "Provide at least one segment constraint"
    CHECK_SEGMENT_STRUCTURE = "Provide a valid segment with available letters and target length"
    PROVIDE_LETTERS = "Provide at least one available letter"
    USE_POSITIVE_LENGTH = "Provide a positive integer for target length"
    REDUCE_LENGTH_OR_ADD_LETTERS = "Reduce target length or provide more letters"
    REDUCE_SEGMENT_COUNT = "Reduce number of segments to 6 or fewer"
    WAIT_FOR_DICTIONARY = "Wait for dictionary to load before filtering"
    ADJUST_CONSTRAINTS = "Try adjusting available letters or segment lengths"
    CHECK_INPUT = "Check input data and try again"
    RETRY_OPERATION = "Retry the operation or refresh the dictionary"


def create_validation_error(
    message: str,
    segment_index: Optional[int] = None,
    constraint: Optional[str] = None,
    provided_value: Any = None,
    suggestion: Optional[str] = None,
) -> FilterError:
    """Create a validation-typed FilterError for malformed segment input."""
    return FilterError(
        type=FilterErrorType.VALIDATION,
        message=message,
        details=FilterErrorDetails(
            segment_index=segment_index,
            constraint=constraint,
            provided_value=provided_value,
            suggestion=suggestion,
        ),
    )


def create_constraint_error(
    message: str,
    constraint: Optional[str] = None,
    provided_value: Any = None,
    suggestion: Optional[str] = None,
) -> FilterError:
    """Create a constraint-typed FilterError for an empty match set."""
    return FilterError(
        type=FilterErrorType.CONSTRAINT,
        message=message,
        details=FilterErrorDetails(
            constraint=constraint,
            provided_value=provided_value,
            suggestion=suggestion,
        ),
    )


def create_processing_error(
    message: str,
    constraint: Optional[str] = None,
    provided_value: Any = None,
    suggestion: Optional[str] = None,
) -> FilterError:
    """Create a processing-typed FilterError for runtime failures."""
    return FilterError(
        type=FilterErrorType.PROCESSING,
        message=message,
        details=FilterErrorDetails(
            constraint=constraint,
            provided_value=provided_value,
            suggestion=suggestion,
        ),
    )


def create_no_matching_words_error() -> FilterError:
    return create_constraint_error(
        FilterErrorMessages.NO_MATCHING_WORDS,
        constraint="segment pattern matching",
        suggestion=FilterErrorSuggestions.ADJUST_CONSTRAINTS,
    )


def create_dictionary_not_loaded_error() -> FilterError:
    return create_processing_error(
        FilterErrorMessages.DICTIONARY_NOT_LOADED,
        constraint="dictionary availability",
        suggestion=FilterErrorSuggestions.WAIT_FOR_DICTIONARY,
    )


def create_unexpected_processing_error(original_error: Any = None) -> FilterError:
    """
    Wrap an unexpected exception as a processing error.

    Args:
        original_error: The exception (or other value) that was caught

    Returns:
        FilterError whose provided_value is the original error's message
    """
    return create_processing_error(
        FilterErrorMessages.PROCESSING_ERROR,
        constraint="processing error",
        provided_value=str(original_error),
        suggestion=FilterErrorSuggestions.CHECK_INPUT,
    )


def is_filter_error(value: Any) -> bool:
    """Check whether a value is a FilterError of a known type."""
    return isinstance(value, FilterError) and isinstance(value.type, FilterErrorType)


def extract_error_message(error: Any) -> str:
    """
    Extract a user-facing message from any error value.

    Args:
        error: A FilterError, an exception, a string or anything else

    Returns:
        The error's message, or the generic processing message
    """
    if is_filter_error(error):
        return error.message
    if isinstance(error, BaseException):
        return str(error) or FilterErrorMessages.PROCESSING_ERROR
    if isinstance(error, str):
        return error
    return FilterErrorMessages.PROCESSING_ERROR
