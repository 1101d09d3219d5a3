"""Bitbucket Server REST client used by the sync."""

from __future__ import annotations

import dataclasses
import os
import time
import typing as typ
import urllib.parse

import httpx

from bitport.logging import get_logger, log_info

from .errors import BitbucketAPIError, BitbucketConfigError
from .pagination import PaginatedFetcher, RawRecord, RetryPolicy
from .readme import README_PAGE_SIZE, README_PATH, assemble_readme

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from types import TracebackType

logger = get_logger(__name__)

API_PATH = "/rest/api/1.0"
DEFAULT_PAGE_SIZE = 25
_HTTP_NOT_FOUND = 404


def _parse_positive_int(env_var: str, default: int) -> int:
    """Read a positive integer env var, falling back to a default."""
    raw = os.environ.get(env_var, "")
    if not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        msg = f"{env_var} must be an integer, got: {raw!r}"
        raise ValueError(msg) from exc
    if value < 1:
        msg = f"{env_var} must be positive, got: {value}"
        raise ValueError(msg)
    return value


def _required(env_var: str) -> str:
    value = os.environ.get(env_var, "").strip()
    if not value:
        raise BitbucketConfigError.missing(env_var)
    return value


@dataclasses.dataclass(frozen=True, slots=True)
class BitbucketConfig:
    """Connection settings for a Bitbucket Server instance.

    Attributes
    ----------
    host
        Base URL of the server, e.g. ``https://bitbucket.example.com``.
    username
        Account used for HTTP basic auth.
    app_password
        App password paired with ``username``.
    page_size
        ``limit`` used for collection endpoints.
    max_attempts
        Requests made per page before pagination gives up.

    """

    host: str
    username: str
    app_password: str = dataclasses.field(repr=False)
    page_size: int = DEFAULT_PAGE_SIZE
    max_attempts: int = 5
    timeout_s: float = 30.0
    user_agent: str = "bitport/0.1"

    @property
    def api_base(self) -> str:
        """Return the REST API root for this server."""
        return f"{self.host.rstrip('/')}{API_PATH}"

    @classmethod
    def from_env(cls) -> BitbucketConfig:
        """Build configuration from ``BITBUCKET_*`` environment variables.

        Raises
        ------
        BitbucketConfigError
            If the host, username or app password is unset.
        ValueError
            If ``BITBUCKET_PAGE_SIZE`` or ``BITBUCKET_MAX_ATTEMPTS`` is not a
            positive integer.

        """
        return cls(
            host=_required("BITBUCKET_HOST"),
            username=_required("BITBUCKET_USERNAME"),
            app_password=_required("BITBUCKET_APP_PASSWORD"),
            page_size=_parse_positive_int("BITBUCKET_PAGE_SIZE", DEFAULT_PAGE_SIZE),
            max_attempts=_parse_positive_int("BITBUCKET_MAX_ATTEMPTS", 5),
        )


def _quote(segment: str) -> str:
    return urllib.parse.quote(segment, safe="")


class BitbucketClient:
    """Read projects, repositories and README content from Bitbucket Server."""

    def __init__(
        self,
        config: BitbucketConfig,
        *,
        http_client: httpx.Client | None = None,
        sleep: cabc.Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialise the client; an owned ``httpx.Client`` is created if needed."""
        if not config.username.strip() or not config.app_password.strip():
            raise BitbucketConfigError.empty_credentials()

        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(
            auth=httpx.BasicAuth(config.username, config.app_password),
            timeout=config.timeout_s,
            headers={
                "User-Agent": config.user_agent,
                "Accept": "application/json",
            },
        )
        self._fetcher = PaginatedFetcher(
            self._client,
            retry=RetryPolicy(max_attempts=config.max_attempts),
            sleep=sleep,
        )

    def close(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> BitbucketClient:
        """Return the client for use in a ``with`` block."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Close owned resources on exit."""
        self.close()

    def projects_url(self) -> str:
        """Return the URL listing every project."""
        return f"{self._config.api_base}/projects"

    def repositories_url(self, project_key: str) -> str:
        """Return the URL listing a project's repositories."""
        return f"{self.projects_url()}/{_quote(project_key)}/repos"

    def readme_url(self, project_key: str, slug: str) -> str:
        """Return the ``browse`` URL for a repository's README."""
        repo_url = f"{self.repositories_url(project_key)}/{_quote(slug)}"
        return f"{repo_url}/browse/{README_PATH}"

    def list_projects(self) -> list[RawRecord]:
        """Return every project visible to the configured account."""
        return self._fetcher.fetch(
            self.projects_url(), page_size=self._config.page_size
        )

    def list_repositories(self, project_key: str) -> list[RawRecord]:
        """Return every repository in ``project_key``."""
        return self._fetcher.fetch(
            self.repositories_url(project_key), page_size=self._config.page_size
        )

    def readme_lines(self, project_key: str, slug: str) -> list[RawRecord]:
        """Return the raw line records of a repository's README."""
        return self._fetcher.fetch(
            self.readme_url(project_key, slug),
            page_size=README_PAGE_SIZE,
            data_key="lines",
        )

    def readme(self, project_key: str, slug: str) -> str:
        """Return a repository's README as text, or ``""`` when it has none."""
        try:
            lines = self.readme_lines(project_key, slug)
        except BitbucketAPIError as exc:
            if exc.status_code != _HTTP_NOT_FOUND:
                raise
            log_info(logger, "No %s in %s/%s", README_PATH, project_key, slug)
            return ""
        return assemble_readme(lines)
