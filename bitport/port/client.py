"""HTTP client for the Port catalog API."""

from __future__ import annotations

import dataclasses
import os
import typing as typ
import urllib.parse

import httpx
import msgspec

from .errors import PortAPIError, PortAuthError, PortConfigError
from .models import AccessTokenResponse, Entity, PortAccessToken

if typ.TYPE_CHECKING:
    from types import TracebackType

DEFAULT_API_URL = "https://api.getport.io"
_HTTP_ERROR_STATUS_THRESHOLD = 400
_UPSERT_PARAMS = {"upsert": "true", "merge": "true"}


@dataclasses.dataclass(frozen=True, slots=True)
class PortConfig:
    """Credentials and endpoint for the Port API."""

    client_id: str
    client_secret: str = dataclasses.field(repr=False)
    api_url: str = DEFAULT_API_URL
    timeout_s: float = 20.0
    user_agent: str = "bitport/0.1"

    @classmethod
    def from_env(cls) -> PortConfig:
        """Build configuration from ``PORT_*`` environment variables.

        Raises
        ------
        PortConfigError
            If ``PORT_CLIENT_ID`` or ``PORT_CLIENT_SECRET`` is unset.

        """
        client_id = os.environ.get("PORT_CLIENT_ID", "").strip()
        if not client_id:
            raise PortConfigError.missing("PORT_CLIENT_ID")
        client_secret = os.environ.get("PORT_CLIENT_SECRET", "").strip()
        if not client_secret:
            raise PortConfigError.missing("PORT_CLIENT_SECRET")
        api_url = os.environ.get("PORT_API_URL", "").strip() or DEFAULT_API_URL
        return cls(client_id=client_id, client_secret=client_secret, api_url=api_url)


def _response_detail(response: httpx.Response) -> str:
    """Return a short, single-line excerpt of an error body."""
    text = response.text.strip().replace("\n", " ")
    return text[:200]


class PortClient:
    """Thin wrapper over the two Port endpoints the sync needs."""

    def __init__(
        self,
        config: PortConfig,
        *,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialise the client; an owned ``httpx.Client`` is created if needed."""
        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(
            timeout=config.timeout_s,
            headers={"User-Agent": config.user_agent, "Accept": "application/json"},
        )
        self._base = config.api_url.rstrip("/")

    def close(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> PortClient:
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

    def authenticate(self) -> PortAccessToken:
        """Exchange the client credentials for a bearer token.

        Raises
        ------
        PortAuthError
            If the endpoint is unreachable, refuses the credentials, or
            answers without an ``accessToken``.

        """
        try:
            response = self._client.post(
                f"{self._base}/v1/auth/access_token",
                json={
                    "clientId": self._config.client_id,
                    "clientSecret": self._config.client_secret,
                },
            )
        except httpx.RequestError as exc:
            raise PortAuthError.unreachable(str(exc)) from exc

        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise PortAuthError.rejected(response.status_code)

        try:
            body = msgspec.json.decode(response.content, type=AccessTokenResponse)
        except msgspec.DecodeError as exc:
            raise PortAuthError.malformed() from exc
        if not body.accessToken:
            raise PortAuthError.malformed()
        return PortAccessToken(body.accessToken)

    def entities_url(self, blueprint: str) -> str:
        """Return the entity collection URL for ``blueprint``."""
        return (
            f"{self._base}/v1/blueprints/"
            f"{urllib.parse.quote(blueprint, safe='')}/entities"
        )

    def upsert_entity(
        self, token: PortAccessToken, blueprint: str, entity: Entity
    ) -> typ.Any:  # noqa: ANN401 - response body is passed through untouched
        """Create ``entity`` or merge it into the existing one.

        Returns
        -------
        Any
            The decoded response body, or ``None`` when it is empty.

        Raises
        ------
        PortAPIError
            If the request fails or Port answers with an error status.

        """
        try:
            response = self._client.post(
                self.entities_url(blueprint),
                params=_UPSERT_PARAMS,
                content=msgspec.json.encode(entity),
                headers={
                    "Authorization": token.authorization,
                    "Content-Type": "application/json",
                },
            )
        except httpx.RequestError as exc:
            raise PortAPIError.network_error(str(exc)) from exc

        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise PortAPIError.http_error(
                response.status_code, _response_detail(response)
            )
        if not response.content:
            return None
        try:
            return msgspec.json.decode(response.content)
        except msgspec.DecodeError:
            return response.text
