"""Cursor pagination over Bitbucket Server list endpoints.

Bitbucket pages carry their records under a named key (``values`` for
collections, ``lines`` for file content) and a ``nextPageStart`` cursor while
more data remains. The fetcher follows the cursor until the server stops
sending one, materialising every record in order.
"""

from __future__ import annotations

import dataclasses
import time
import typing as typ

import httpx
import msgspec

from bitport.logging import get_logger, log_debug, log_warning

from .errors import (
    BitbucketAPIError,
    BitbucketPaginationError,
    BitbucketResponseShapeError,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

logger = get_logger(__name__)

_HTTP_ERROR_STATUS_THRESHOLD = 400
_HTTP_RATE_LIMITED = 429
_HTTP_SERVER_ERROR_THRESHOLD = 500

Cursor: typ.TypeAlias = int | str
RawRecord: typ.TypeAlias = dict[str, typ.Any]


@dataclasses.dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Bounded retry with exponential backoff for a single page.

    Attributes
    ----------
    max_attempts
        Total requests made for one cursor before giving up.
    base_delay_s
        Delay after the first failed attempt; doubles on each retry.
    max_delay_s
        Ceiling applied to every computed delay.

    """

    max_attempts: int = 5
    base_delay_s: float = 0.5
    max_delay_s: float = 30.0

    def __post_init__(self) -> None:
        """Reject policies that could never make a request."""
        if self.max_attempts < 1:
            msg = f"max_attempts must be positive, got: {self.max_attempts}"
            raise ValueError(msg)

    def delay_for(self, attempt: int) -> float:
        """Return the sleep before retrying after failed ``attempt`` (1-based)."""
        return min(self.base_delay_s * 2 ** (attempt - 1), self.max_delay_s)


class _RetryablePageError(Exception):
    """Internal marker for responses worth retrying."""


def _is_retryable_status(status_code: int) -> bool:
    return (
        status_code == _HTTP_RATE_LIMITED
        or status_code >= _HTTP_SERVER_ERROR_THRESHOLD
    )


def _is_valid_cursor(cursor: object) -> bool:
    return not isinstance(cursor, bool) and isinstance(cursor, int | str)


class PaginatedFetcher:
    """Materialise every record behind a cursor-paginated endpoint."""

    def __init__(
        self,
        client: httpx.Client,
        *,
        retry: RetryPolicy | None = None,
        sleep: cabc.Callable[[float], None] = time.sleep,
    ) -> None:
        """Bind the fetcher to an HTTP client that already carries auth."""
        self._client = client
        self._retry = retry or RetryPolicy()
        self._sleep = sleep

    def fetch(
        self,
        base_url: str,
        *,
        page_size: int = 25,
        data_key: str = "values",
    ) -> list[RawRecord]:
        """Return all records under ``data_key`` across every page.

        Parameters
        ----------
        base_url
            Absolute URL of the list endpoint.
        page_size
            ``limit`` sent with each request.
        data_key
            Response key holding the page's records.

        Returns
        -------
        list[dict[str, Any]]
            Records in page order, then in-page order.

        Raises
        ------
        BitbucketPaginationError
            If a page keeps failing after the retry budget is spent.
        BitbucketAPIError
            If Bitbucket answers with a non-retryable client error.

        """
        records: list[RawRecord] = []
        cursor: Cursor | None = None
        pages = 0

        while True:
            page = self._fetch_page(base_url, cursor, page_size)
            pages += 1
            records.extend(_page_records(page, data_key, base_url))

            cursor = page.get("nextPageStart")
            if cursor is None:
                break

        log_debug(
            logger,
            "Fetched %d records from %s in %d pages",
            len(records),
            base_url,
            pages,
        )
        return records

    def _fetch_page(
        self, url: str, cursor: Cursor | None, page_size: int
    ) -> RawRecord:
        """Fetch one page, retrying transport and parse failures."""
        params: dict[str, Cursor] = {"limit": page_size}
        if cursor is not None:
            params["start"] = cursor

        attempt = 0
        while True:
            attempt += 1
            try:
                return self._request_page(url, params)
            except (
                httpx.TransportError,
                _RetryablePageError,
                BitbucketResponseShapeError,
                msgspec.DecodeError,
            ) as exc:
                if attempt >= self._retry.max_attempts:
                    raise BitbucketPaginationError(url, cursor, attempt) from exc
                delay = self._retry.delay_for(attempt)
                log_warning(
                    logger,
                    "Page fetch failed for %s (start=%s, attempt %d/%d): %s; "
                    "retrying in %.1fs",
                    url,
                    cursor,
                    attempt,
                    self._retry.max_attempts,
                    exc,
                    delay,
                )
                self._sleep(delay)

    def _request_page(self, url: str, params: dict[str, Cursor]) -> RawRecord:
        response = self._client.get(url, params=params)
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            if _is_retryable_status(response.status_code):
                msg = f"HTTP {response.status_code}"
                raise _RetryablePageError(msg)
            raise BitbucketAPIError.http_error(response.status_code, url)

        payload = msgspec.json.decode(response.content)
        if not isinstance(payload, dict):
            raise BitbucketResponseShapeError.not_an_object(
                url, type(payload).__name__
            )

        cursor = payload.get("nextPageStart")
        if cursor is not None and not _is_valid_cursor(cursor):
            raise BitbucketResponseShapeError.bad_cursor(url, cursor)
        return payload


def _page_records(page: RawRecord, data_key: str, url: str) -> list[RawRecord]:
    """Return the list stored under ``data_key``, or nothing when malformed."""
    if data_key not in page:
        log_warning(logger, "Page from %s has no %r key; skipping", url, data_key)
        return []

    values = page[data_key]
    if not isinstance(values, list):
        log_warning(
            logger,
            "Page from %s has non-list %r (%s); skipping",
            url,
            data_key,
            type(values).__name__,
        )
        return []
    return values
