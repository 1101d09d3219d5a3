"""Bitbucket Server client errors."""

from __future__ import annotations


class BitbucketError(RuntimeError):
    """Base class for Bitbucket client failures."""


class BitbucketAPIError(BitbucketError):
    """Raised when Bitbucket answers with a non-retryable error status."""

    def __init__(
        self, message: str, *, status_code: int | None = None, url: str | None = None
    ) -> None:
        """Initialise with a message, HTTP status code and request URL."""
        self.status_code = status_code
        self.url = url
        super().__init__(message)

    @classmethod
    def http_error(cls, status_code: int, url: str) -> BitbucketAPIError:
        """Return an error for a non-2xx response from ``url``."""
        return cls(
            f"Bitbucket HTTP {status_code} for {url}",
            status_code=status_code,
            url=url,
        )


class BitbucketResponseShapeError(BitbucketError):
    """Raised when a Bitbucket response body is not a JSON object."""

    @classmethod
    def not_an_object(cls, url: str, kind: str) -> BitbucketResponseShapeError:
        """Return an error for a body that decoded to ``kind``."""
        return cls(f"Bitbucket response from {url} is a {kind}, expected an object")

    @classmethod
    def bad_cursor(cls, url: str, cursor: object) -> BitbucketResponseShapeError:
        """Return an error for a ``nextPageStart`` that is not an int or str."""
        return cls(
            f"Bitbucket response from {url} has nextPageStart={cursor!r} "
            f"({type(cursor).__name__}), expected an int or str"
        )


class BitbucketPaginationError(BitbucketError):
    """Raised when a page cannot be fetched within the retry budget."""

    def __init__(self, url: str, cursor: int | str | None, attempts: int) -> None:
        """Initialise with the failing URL, cursor and attempts made."""
        self.url = url
        self.cursor = cursor
        self.attempts = attempts
        super().__init__(
            f"Giving up on {url} (start={cursor}) after {attempts} attempts"
        )


class BitbucketConfigError(BitbucketError):
    """Raised when Bitbucket connection settings are missing."""

    @classmethod
    def missing(cls, env_var: str) -> BitbucketConfigError:
        """Return an error for an unset environment variable."""
        return cls(f"{env_var} is required for the Bitbucket API")

    @classmethod
    def empty_credentials(cls) -> BitbucketConfigError:
        """Return an error when the username or app password is blank."""
        return cls("Bitbucket username and app password must be non-empty")
