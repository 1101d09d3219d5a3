"""Port catalog client and entity publisher."""

from __future__ import annotations

from .client import PortClient, PortConfig
from .errors import PortAPIError, PortAuthError, PortConfigError, PortError
from .models import (
    PROJECT_BLUEPRINT,
    REPOSITORY_BLUEPRINT,
    Entity,
    PortAccessToken,
)
from .publisher import CatalogPublisher, PublishOutcome

__all__ = [
    "PROJECT_BLUEPRINT",
    "REPOSITORY_BLUEPRINT",
    "CatalogPublisher",
    "Entity",
    "PortAPIError",
    "PortAccessToken",
    "PortAuthError",
    "PortClient",
    "PortConfig",
    "PortConfigError",
    "PortError",
    "PublishOutcome",
]
