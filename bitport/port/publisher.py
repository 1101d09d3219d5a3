"""Deliver normalised entities to the catalog."""

from __future__ import annotations

import dataclasses
import typing as typ

from .errors import PortAPIError

if typ.TYPE_CHECKING:
    from bitport.sync.observability import SyncEventLogger

    from .client import PortClient
    from .models import Entity, PortAccessToken


@dataclasses.dataclass(frozen=True, slots=True)
class PublishOutcome:
    """Result of a single upsert."""

    blueprint: str
    identifier: str
    ok: bool
    response: typ.Any = None
    error: BaseException | None = None


class CatalogPublisher:
    """Upsert entities with a token obtained once for the whole run.

    Failures are logged and reported in the returned :class:`PublishOutcome`;
    they are never raised and never retried.
    """

    def __init__(
        self,
        client: PortClient,
        token: PortAccessToken,
        *,
        event_logger: SyncEventLogger,
    ) -> None:
        """Bind the publisher to a client, the run's token and its event log."""
        self._client = client
        self._token = token
        self._event_logger = event_logger

    def publish(self, blueprint: str, entity: Entity) -> PublishOutcome:
        """Upsert ``entity`` into ``blueprint``."""
        try:
            response = self._client.upsert_entity(self._token, blueprint, entity)
        except PortAPIError as exc:
            self._event_logger.log_publish_failed(blueprint, entity.identifier, exc)
            return PublishOutcome(
                blueprint=blueprint,
                identifier=entity.identifier,
                ok=False,
                error=exc,
            )

        self._event_logger.log_published(blueprint, entity.identifier)
        return PublishOutcome(
            blueprint=blueprint,
            identifier=entity.identifier,
            ok=True,
            response=response,
        )
