"""
HTTP client utilities for pinbump.

This module provides an asynchronous HTTP client with retry logic, rate
limit handling and GitHub-specific error handling.
"""

from __future__ import annotations

import time
import httpx
import random
import asyncio
from typing import Any, Dict, List, Optional, cast

from pinbump.utils.logger import get_logger
from pinbump.__version__ import __version__
from pinbump.exceptions import GitHubError, NetworkError
from pinbump.constants import (
    DEFAULT_TIMEOUT,
    DEFAULT_MAX_RETRIES,
    DEFAULT_MAX_RATE_LIMIT_RETRIES,
    USER_AGENT_TEMPLATE,
)

logger = get_logger("http")


class HTTPClient:
    """Asynchronous HTTP client with retries and GitHub rate-limit handling.

    Args:
        timeout: Request timeout in seconds.
        max_retries: Maximum number of retry attempts for transient errors.
        max_rate_limit_retries: Maximum number of waits on rate limiting.
        token: Bearer token sent with every request.
        user_agent: Custom User-Agent header value.
        transport: Optional httpx transport (used by tests).

    Example:
        >>> async with HTTPClient(token=token) as client:
        ...     tags = await client.get_paginated(
        ...         "https://api.github.com/repos/apache/superset/tags"
        ...     )
    """

    def __init__(
        self,
        *,
        timeout: int = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        max_rate_limit_retries: int = DEFAULT_MAX_RATE_LIMIT_RETRIES,
        token: Optional[str] = None,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.timeout = timeout
        self.max_retries = max_retries
        self.max_rate_limit_retries = max_rate_limit_retries
        self.token = token
        self.user_agent = user_agent or USER_AGENT_TEMPLATE.format(version=__version__)
        self.transport = transport

        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "HTTPClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        await self.close()

    def _headers(self) -> Dict[str, str]:
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "application/vnd.github+json",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _ensure_client(self) -> None:
        """Initialize the underlying httpx client if needed."""
        if self._client is None:
            kwargs: Dict[str, Any] = {
                "timeout": httpx.Timeout(self.timeout),
                "follow_redirects": True,
                "headers": self._headers(),
            }
            if self.transport is not None:
                kwargs["transport"] = self.transport
            else:
                kwargs["http2"] = True
            self._client = httpx.AsyncClient(**kwargs)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @staticmethod
    def _rate_limit_wait(response: httpx.Response) -> Optional[float]:
        """Return how long to wait if ``response`` is a rate-limit rejection.

        GitHub answers 429, or 403 with either ``Retry-After`` (secondary
        limit) or ``X-RateLimit-Remaining: 0`` (primary limit).
        """
        status = response.status_code
        headers = response.headers
        if status not in (403, 429):
            return None

        retry_after = headers.get("Retry-After")
        if retry_after is not None:
            try:
                return max(float(retry_after), 0.0)
            except ValueError:
                return 1.0

        if headers.get("X-RateLimit-Remaining") == "0":
            reset = headers.get("X-RateLimit-Reset")
            if reset is not None:
                try:
                    return max(float(reset) - time.time(), 0.0) + 1.0
                except ValueError:
                    return 60.0
            return 60.0

        return 1.0 if status == 429 else None

    async def _request_with_retry(
        self,
        method: str,
        url: str,
        *,
        retry: bool = True,
        **kwargs: Any,
    ) -> httpx.Response:
        """Execute an HTTP request with retry and backoff logic.

        With ``retry=False`` timeouts, network errors and 5xx responses fail
        on the first attempt; rate-limit rejections are still waited out.
        """
        await self._ensure_client()
        assert self._client is not None

        clean_url = url.strip().strip("\"'")
        max_retries = self.max_retries if retry else 0
        last_exc: Optional[Exception] = None
        rate_limit_count = 0
        attempt = 0

        while attempt <= max_retries:
            try:
                response = await self._client.request(method, clean_url, **kwargs)

                wait = self._rate_limit_wait(response)
                if wait is not None:
                    rate_limit_count += 1
                    if rate_limit_count > self.max_rate_limit_retries:
                        raise NetworkError(
                            f"Rate limit exceeded after {self.max_rate_limit_retries} retries",
                            url=clean_url,
                            status_code=response.status_code,
                        )
                    logger.warning(
                        "Rate limited (%d), retrying after %.0fs (%d/%d)",
                        response.status_code,
                        wait,
                        rate_limit_count,
                        self.max_rate_limit_retries,
                    )
                    await asyncio.sleep(wait)
                    continue

                if response.status_code == 404:
                    raise GitHubError(
                        f"Resource not found: {clean_url}",
                        url=clean_url,
                        status_code=404,
                    )

                if response.status_code >= 400:
                    response.raise_for_status()

                return response

            except httpx.TimeoutException as exc:
                last_exc = exc
                logger.warning(
                    "Request timeout (%d/%d): %s",
                    attempt + 1,
                    max_retries + 1,
                    clean_url,
                )

            except httpx.NetworkError as exc:
                last_exc = exc
                logger.warning(
                    "Network error (%d/%d): %s",
                    attempt + 1,
                    max_retries + 1,
                    exc,
                )

            except httpx.HTTPStatusError as exc:
                if 400 <= exc.response.status_code < 500:
                    raise NetworkError(
                        f"HTTP {exc.response.status_code} error for {clean_url}",
                        url=clean_url,
                        status_code=exc.response.status_code,
                        response_body=exc.response.text,
                    ) from exc
                last_exc = exc
                logger.warning(
                    "HTTP %d error (%d/%d): %s",
                    exc.response.status_code,
                    attempt + 1,
                    max_retries + 1,
                    clean_url,
                )

            if attempt < max_retries:
                delay = (2**attempt) + random.uniform(0.0, 0.3)
                logger.debug("Retrying in %.2fs", delay)
                await asyncio.sleep(delay)
            attempt += 1

        raise NetworkError(
            f"Request failed after {max_retries + 1} attempt(s): {clean_url}",
            url=clean_url,
        ) from last_exc

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """Perform a GET request with retry logic."""
        return await self._request_with_retry("GET", url, **kwargs)

    async def post(
        self,
        url: str,
        *,
        retry: bool = False,
        **kwargs: Any,
    ) -> httpx.Response:
        """Perform a POST request.

        Timeouts, network errors and 5xx responses are only retried with
        ``retry=True``; pass it for idempotent endpoints only.
        """
        return await self._request_with_retry("POST", url, retry=retry, **kwargs)

    @staticmethod
    def _decode(response: httpx.Response, url: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise NetworkError(
                f"Invalid JSON response from {url}",
                url=url,
                response_body=response.text,
            ) from exc

    async def post_json(self, url: str, payload: Any, **kwargs: Any) -> Dict[str, Any]:
        """POST ``payload`` as JSON and return the decoded JSON object."""
        response = await self.post(url, json=payload, **kwargs)
        data = self._decode(response, url)

        if not isinstance(data, dict):
            raise NetworkError(
                f"Expected JSON object from {url}",
                url=url,
                response_body=response.text,
            )

        return cast(Dict[str, Any], data)

    async def get_paginated(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        max_pages: Optional[int] = None,
    ) -> List[Any]:
        """Collect every item of a paginated JSON array endpoint.

        Follows ``Link: <...>; rel="next"`` headers until the last page or
        ``max_pages`` pages.
        """
        items: List[Any] = []
        next_url: Optional[str] = url
        next_params = params
        pages = 0

        while next_url:
            response = await self.get(next_url, params=next_params)
            data = self._decode(response, next_url)
            if not isinstance(data, list):
                raise NetworkError(
                    f"Expected JSON array from {next_url}",
                    url=next_url,
                    response_body=response.text,
                )
            items.extend(data)
            pages += 1

            if max_pages is not None and pages >= max_pages:
                break

            next_link = response.links.get("next")
            next_url = next_link.get("url") if next_link else None
            # The next link already carries the query string
            next_params = None

        logger.debug("Fetched %d item(s) over %d page(s) from %s", len(items), pages, url)
        return items
