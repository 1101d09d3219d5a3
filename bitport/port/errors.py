"""Port catalog client errors."""

from __future__ import annotations


class PortError(RuntimeError):
    """Base class for catalog client failures."""


class PortAPIError(PortError):
    """Raised when the catalog returns an error response."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, status_code: int, detail: str = "") -> PortAPIError:
        """Return an error for a non-2xx response."""
        message = f"Port API HTTP {status_code}"
        if detail:
            message = f"{message}: {detail}"
        return cls(message, status_code=status_code)

    @classmethod
    def network_error(cls, detail: str) -> PortAPIError:
        """Return an error for a request that never got a response."""
        return cls(f"Port API request failed: {detail}")


class PortAuthError(PortError):
    """Raised when an access token cannot be obtained."""

    @classmethod
    def rejected(cls, status_code: int) -> PortAuthError:
        """Return an error for a refused token request."""
        return cls(f"Port rejected the access token request (HTTP {status_code})")

    @classmethod
    def malformed(cls) -> PortAuthError:
        """Return an error for a token response without ``accessToken``."""
        return cls("Port access token response is missing accessToken")

    @classmethod
    def unreachable(cls, detail: str) -> PortAuthError:
        """Return an error when the token endpoint cannot be reached."""
        return cls(f"Port token endpoint unreachable: {detail}")


class PortConfigError(PortError):
    """Raised when catalog credentials are missing."""

    @classmethod
    def missing(cls, env_var: str) -> PortConfigError:
        """Return an error for an unset environment variable."""
        return cls(f"{env_var} is required for the Port API")
