"""
DecoderCore Async Network Client
=================================

Async HTTP client built on **httpx** for pulling large remote datasets:

- Automatic retry with exponential backoff and jitter while opening
  the connection.
- Byte-level streaming so callers can report download progress and
  never hold a half-received response in an inconsistent state.
- Structured logging integration.

References:
    - Nygard, M. T. (2018). Release It!: Design and Deploy
      Production-Ready Software. 2nd ed. Pragmatic Bookshelf.
    - AWS Architecture Blog (2015). Exponential Backoff and Jitter.
    - RFC 9110 (2022). HTTP Semantics, Section 8.6 Content-Length.
"""

from __future__ import annotations

import asyncio
import logging
import random
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Optional

import httpx

logger = logging.getLogger("decodercore.network")


# ========================== Exception ======================================


class DecoderHTTPError(Exception):
    """Raised for transport failures, timeouts, exhausted retries and
    non-success HTTP statuses.
    """


# ========================== Streamed body ==================================


@dataclass
class StreamedBody:
    """An open response body.

    Attributes:
        content_length: Declared size in bytes, or ``None`` when the
                        server did not send a usable ``Content-Length``.
        chunks:         Async iterator over raw body chunks.
    """

    content_length: Optional[int]
    chunks: AsyncIterator[bytes]


# ========================== HTTP Client ====================================


class DecoderHTTP:
    """Async HTTP client with retry and streaming support.

    Usage::

        async with DecoderHTTP(timeout=60) as http:
            async with http.stream(url) as body:
                async for chunk in body.chunks:
                    ...

    Args:
        timeout:       Request timeout in seconds.
        max_retries:   Maximum retry attempts on transient errors.
        backoff_base:  Base delay (seconds) for exponential backoff.
        backoff_max:   Maximum delay cap (seconds).
        headers:       Default HTTP headers merged into every request.
        user_agent:    User-Agent header value.
        transport:     Optional httpx transport (e.g. ``httpx.MockTransport``).
    """

    # HTTP status codes eligible for retry (transient server errors + rate limit)
    _RETRYABLE_STATUS: frozenset[int] = frozenset({429, 500, 502, 503, 504})

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        max_retries: int = 2,
        backoff_base: float = 0.5,
        backoff_max: float = 10.0,
        headers: dict[str, str] | None = None,
        user_agent: str = "DecoderCore/1.0",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._max_retries = max_retries
        self._backoff_base = backoff_base
        self._backoff_max = backoff_max

        default_headers = {"User-Agent": user_agent}
        if headers:
            default_headers.update(headers)

        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers=default_headers,
            follow_redirects=True,
            transport=transport,
        )

    # ------------------------------------------------------------------ #
    #  Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> DecoderHTTP:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Gracefully close the underlying httpx client."""
        await self._client.aclose()

    # ------------------------------------------------------------------ #
    #  Streaming
    # ------------------------------------------------------------------ #

    @asynccontextmanager
    async def stream(
        self, url: str, *, chunk_size: int = 65_536
    ) -> AsyncIterator[StreamedBody]:
        """Open a streamed GET and yield its body.

        Retries apply only to opening the response; a connection that
        drops mid-body raises :class:`DecoderHTTPError`.

        Raises:
            DecoderHTTPError: On exhausted retries, HTTP errors or a
                broken stream.
        """
        response = await self._open(url)
        try:
            yield StreamedBody(
                content_length=_content_length(response),
                chunks=response.aiter_bytes(chunk_size),
            )
        except httpx.HTTPError as exc:
            raise DecoderHTTPError(f"Stream interrupted for {url}: {exc}") from exc
        finally:
            await response.aclose()

    async def _open(self, url: str) -> httpx.Response:
        """Send the GET with retry, returning an unread streaming response."""
        last_exc: BaseException | None = None
        attempts = self._max_retries + 1

        for attempt in range(attempts):
            try:
                request = self._client.build_request("GET", url)
                response = await self._client.send(request, stream=True)
            except httpx.TransportError as exc:
                last_exc = exc
                logger.warning(
                    "Transport error on GET %s (attempt %d/%d): %s",
                    url,
                    attempt + 1,
                    attempts,
                    exc,
                )
                if attempt < self._max_retries:
                    await self._backoff(attempt)
                    continue
                raise DecoderHTTPError(
                    f"All {attempts} attempts exhausted for {url}"
                ) from exc
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                raise DecoderHTTPError(f"Request to {url} failed: {exc}") from exc

            if response.status_code in self._RETRYABLE_STATUS:
                await response.aclose()
                logger.warning(
                    "HTTP %d on GET %s (attempt %d/%d)",
                    response.status_code,
                    url,
                    attempt + 1,
                    attempts,
                )
                last_exc = DecoderHTTPError(
                    f"HTTP {response.status_code} from {url}"
                )
                if attempt < self._max_retries:
                    await self._backoff(attempt)
                    continue
                raise last_exc

            if response.is_error:
                await response.aclose()
                raise DecoderHTTPError(
                    f"HTTP {response.status_code} "
                    f"{response.reason_phrase} from {url}"
                )

            return response

        # Should not be reached; satisfies type checker
        assert last_exc is not None
        raise DecoderHTTPError(str(last_exc))

    # ------------------------------------------------------------------ #
    #  Internal helpers
    # ------------------------------------------------------------------ #

    async def _backoff(self, attempt: int) -> None:
        """Sleep with exponential backoff and full jitter."""
        base_delay = min(self._backoff_max, self._backoff_base * (2 ** attempt))
        jittered = base_delay * random.random()
        logger.debug("Backing off %.2fs (attempt %d)", jittered, attempt + 1)
        await asyncio.sleep(jittered)


def _content_length(response: httpx.Response) -> Optional[int]:
    raw = response.headers.get("Content-Length")
    if raw is None:
        return None
    try:
        value = int(raw)
    except ValueError:
        return None
    return value if value > 0 else None
