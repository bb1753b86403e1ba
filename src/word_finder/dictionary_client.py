"""
Dictionary download client.

This module provides an async HTTP client for fetching the raw dictionary
text with TLS enforcement, a hard per-request timeout and payload size
checks. Failures are raised as classified exceptions so the retry manager
can decide whether another attempt is worthwhile.
"""

import asyncio
import time
from typing import Optional

import httpx

from .audit_logger import AuditLogger
from .config import DEFAULT_MAX_SIZE
from .enums import NetworkErrorCode
from .exceptions import ConfigurationError, NetworkError, SizeError
from .word_validator import WordValidator


class DictionaryClient:
    """
    Async dictionary download client with TLS enforcement.

    The timeout passed to the constructor bounds a whole GET (connect,
    headers and body). Hitting it cancels only the in-flight request.
    """

    def __init__(
        self,
        timeout: float = 5.0,
        max_size: int = DEFAULT_MAX_SIZE,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Optional[AuditLogger] = None,
        validator: Optional[WordValidator] = None,
    ) -> None:
        """
        Initialize the dictionary client.

        Args:
            timeout: Hard timeout in seconds for one download attempt
            max_size: Largest accepted payload in bytes
            transport: Optional httpx transport (e.g. httpx.MockTransport)
            logger: Optional logger for response warnings
            validator: Size checker; defaults to a WordValidator for max_size
        """
        self._timeout = timeout
        self._validator = validator or WordValidator(max_size=max_size)
        self._transport = transport
        self._logger = logger
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "DictionaryClient":
        """Async context manager entry."""
        self._client = self._create_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            verify=True,  # TLS certificate verification enforced
            timeout=httpx.Timeout(self._timeout),
            follow_redirects=True,
            transport=self._transport,
        )

    def _validate_source_url(self, url: str) -> None:
        """
        Validate that the source URL is well-formed and uses HTTPS.

        Raises:
            ConfigurationError: If the URL is malformed or not HTTPS
        """
        if not WordValidator.validate_source_url(url):
            raise ConfigurationError(
                code="invalid_source_url",
                message=f"Dictionary source must be a valid HTTPS URL: {url}",
                details={"source_url": url},
            )

    def validate_response_headers(self, response: httpx.Response) -> None:
        """
        Validate status, content type and declared size of a response.

        Only headers are inspected, so this runs before any body bytes are
        read.

        Args:
            response: The HTTP response to check

        Raises:
            NetworkError: If the status is not 2xx
            SizeError: If content-length exceeds the size ceiling
        """
        if not response.is_success:
            raise NetworkError(
                code=NetworkErrorCode.HTTP_ERROR.value,
                message=f"HTTP {response.status_code}: {response.reason_phrase}",
                details={
                    "status_code": response.status_code,
                    "url": str(response.request.url),
                },
            )

        content_type = response.headers.get("content-type")
        if content_type and "text/" not in content_type and self._logger:
            self._logger.warn(
                "DictionaryClient",
                f"Unexpected content type: {content_type}",
                {"url": str(response.request.url)},
            )

        content_length = response.headers.get("content-length")
        if content_length:
            try:
                size = int(content_length)
            except ValueError:
                size = -1
            self._check_size(size, content_length)

    def _check_size(self, size: int, reported: object) -> None:
        if not self._validator.validate_file_size(size):
            raise SizeError(
                code="payload_too_large",
                message=(
                    f"File too large: {reported} bytes exceeds "
                    f"{self._validator.max_size} bytes"
                ),
                details={"content_length": reported, "max_size": self._validator.max_size},
            )

    async def _download(self, url: str) -> str:
        async with self._client.stream(
            "GET", url, headers={"Accept": "text/plain, text/*"}
        ) as response:
            self.validate_response_headers(response)

            body = bytearray()
            async for chunk in response.aiter_bytes():
                body.extend(chunk)
                # Chunked or mislabelled responses are cut off mid-stream
                self._check_size(len(body), len(body))

            encoding = response.charset_encoding or "utf-8"
            return body.decode(encoding, errors="replace")

    async def fetch_text(self, url: str) -> str:
        """
        Download the dictionary and return its body as text.

        Headers are checked before the body is streamed, and streaming
        stops as soon as the size ceiling is passed. The whole exchange runs
        under the hard timeout.

        Args:
            url: HTTPS URL of the dictionary

        Returns:
            Decoded response body

        Raises:
            ConfigurationError: If the URL is not a valid HTTPS URL
            NetworkError: On timeout, transport failure or non-2xx status
            SizeError: If the payload exceeds the size ceiling
        """
        self._validate_source_url(url)

        if self._client is None:
            self._client = self._create_client()

        start_time = time.perf_counter()
        try:
            text = await asyncio.wait_for(self._download(url), timeout=self._timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            raise NetworkError(
                code=NetworkErrorCode.TIMEOUT.value,
                message=f"Request timeout after {self._timeout}s",
                details={"url": url, "timeout_seconds": self._timeout},
            )
        except httpx.TransportError as e:
            raise NetworkError(
                code=NetworkErrorCode.NETWORK_ERROR.value,
                message=f"Network error: {e}",
                details={"url": url},
            ) from e

        if self._logger:
            self._logger.debug(
                "DictionaryClient",
                "Dictionary downloaded",
                {
                    "url": url,
                    "characters": len(text),
                    "elapsed_ms": (time.perf_counter() - start_time) * 1000,
                },
            )

        return text

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
