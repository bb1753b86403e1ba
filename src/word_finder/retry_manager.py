"""
Retry Manager for the word finder system.

This module provides retry logic with exponential backoff and jitter for
transient download errors. Each failure is classified before the next delay;
a non-retryable failure aborts immediately without consuming the remaining
attempts.
"""

from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Generic, Optional, TypeVar

import httpx

from .audit_logger import AuditLogger
from .config import RetryConfig
from .enums import NetworkErrorCode
from .exceptions import NetworkError, RetryExhaustedError

T = TypeVar("T")


@dataclass
class RetryResult(Generic[T]):
    """Result of a retry operation."""

    success: bool
    result: Optional[T]
    attempts: int
    last_error: Optional[Exception]
    delays: list[float] = field(default_factory=list)


class RetryManager:
    """
    Manages retry logic with exponential backoff and jitter.

    Attempt 0 runs immediately; every later attempt is preceded by a delay
    that doubles (times a random jitter factor) and is capped at the
    configured maximum.
    """

    # HTTP status codes that indicate transient errors (should retry)
    RETRYABLE_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})

    # Network error codes that indicate transient errors (should retry)
    TRANSIENT_ERROR_CODES = frozenset({
        NetworkErrorCode.NETWORK_ERROR.value,
        NetworkErrorCode.TIMEOUT.value,
    })

    def __init__(
        self,
        config: RetryConfig,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rng: Optional[random.Random] = None,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        """
        Initialize the retry manager.

        Args:
            config: Retry configuration with max_retries, delays and jitter
            sleep: Coroutine used to wait between attempts
            rng: Random source for jitter
            logger: Optional logger for retry reports
        """
        self._config = config
        self._sleep = sleep
        self._rng = rng or random.Random()
        self._logger = logger

    @property
    def config(self) -> RetryConfig:
        return self._config

    def _jitter_factor(self) -> float:
        spread = self._config.jitter
        return self._rng.uniform(1.0 - spread, 1.0 + spread)

    def calculate_next_delay(self, current_delay: float) -> float:
        """
        Calculate the delay that follows current_delay.

        delay(n+1) = min(delay(n) * 2 * jitter, max_delay)

        Args:
            current_delay: The delay in seconds used before the previous attempt

        Returns:
            The delay in seconds before the next retry
        """
        next_delay = current_delay * 2 * self._jitter_factor()
        return min(next_delay, self._config.max_delay_seconds)

    def is_retryable_error(self, error: BaseException) -> bool:
        """
        Classify an exception as transient or permanent.

        Network and timeout failures, HTTP 5xx, 408 and 429 are retryable.
        Other 4xx, validation, storage, size and configuration failures are
        not, and neither is anything unrecognized.

        Args:
            error: The exception raised by the failed attempt

        Returns:
            True if the operation should be retried
        """
        if isinstance(error, NetworkError):
            status_code = error.status_code
            if status_code is not None:
                return status_code >= 500 or status_code in self.RETRYABLE_STATUS_CODES
            return error.code in self.TRANSIENT_ERROR_CODES

        if isinstance(error, httpx.HTTPStatusError):
            status_code = error.response.status_code
            return status_code >= 500 or status_code in self.RETRYABLE_STATUS_CODES

        if isinstance(error, (httpx.TransportError, TimeoutError, ConnectionError)):
            return True

        return False

    async def execute_with_retry(
        self,
        operation: Callable[[], Awaitable[T]],
        is_retryable: Optional[Callable[[Exception], bool]] = None,
    ) -> RetryResult[T]:
        """
        Execute an operation with retry logic and exponential backoff.

        Args:
            operation: The async operation to execute
            is_retryable: Optional function to determine if an exception is
                retryable. Defaults to is_retryable_error.

        Returns:
            RetryResult containing success status, result, attempts, last
            error and the delays slept between attempts
        """
        classify = is_retryable or self.is_retryable_error
        last_error: Optional[Exception] = None
        delays: list[float] = []
        attempts = 0

        # Total attempts = 1 initial + max_retries
        max_attempts = self._config.max_retries + 1
        delay = min(self._config.initial_delay_seconds, self._config.max_delay_seconds)

        while attempts < max_attempts:
            if attempts > 0:
                delays.append(delay)
                await self._sleep(delay)
                delay = self.calculate_next_delay(delay)

            try:
                result = await operation()
                return RetryResult(
                    success=True,
                    result=result,
                    attempts=attempts + 1,
                    last_error=None,
                    delays=delays,
                )
            except Exception as e:
                last_error = e
                attempts += 1

                if not classify(e):
                    self._log_warn(
                        f"Non-retryable error on attempt {attempts}",
                        e,
                    )
                    break

                if attempts < max_attempts:
                    self._log_warn(
                        f"Attempt {attempts} failed, retrying in {delay:.2f}s",
                        e,
                    )

        return RetryResult(
            success=False,
            result=None,
            attempts=attempts,
            last_error=last_error,
            delays=delays,
        )

    async def with_exponential_backoff(
        self,
        operation: Callable[[], Awaitable[T]],
        is_retryable: Optional[Callable[[Exception], bool]] = None,
    ) -> T:
        """
        Execute an operation with retries, raising on failure.

        Args:
            operation: The async operation to execute
            is_retryable: Optional classifier, as for execute_with_retry

        Returns:
            The operation's result

        Raises:
            The original exception if it was not retryable, or
            RetryExhaustedError (chained to the last error) once every
            attempt has failed
        """
        classify = is_retryable or self.is_retryable_error
        outcome = await self.execute_with_retry(operation, classify)

        if outcome.success:
            return outcome.result  # type: ignore[return-value]

        last_error = outcome.last_error
        if last_error is not None and not classify(last_error):
            raise last_error

        raise RetryExhaustedError(outcome.attempts, last_error) from last_error

    def _log_warn(self, message: str, error: Exception) -> None:
        if self._logger:
            self._logger.warn(
                "RetryManager",
                message,
                {"error_type": type(error).__name__, "error_message": str(error)},
            )
