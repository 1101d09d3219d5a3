"""Catalog-side payloads."""

from __future__ import annotations

import dataclasses
import typing as typ

import msgspec

PROJECT_BLUEPRINT = "project"
REPOSITORY_BLUEPRINT = "repository"


class Entity(msgspec.Struct, kw_only=True):
    """A normalised catalog entity ready for upsert.

    Attributes
    ----------
    identifier : str
        Stable identifier, unique within the blueprint.
    title : str, optional
        Display title.
    properties : dict[str, Any]
        Blueprint-specific scalar fields.
    relations : dict[str, str]
        Relation name to related entity identifier.

    """

    identifier: str
    title: str | None = None
    properties: dict[str, typ.Any] = msgspec.field(default_factory=dict)
    relations: dict[str, str] = msgspec.field(default_factory=dict)


class AccessTokenResponse(msgspec.Struct):
    """Body returned by ``POST /v1/auth/access_token``."""

    accessToken: str  # noqa: N815 - wire name


@dataclasses.dataclass(frozen=True, slots=True)
class PortAccessToken:
    """Bearer token issued once per run."""

    value: str = dataclasses.field(repr=False)

    @property
    def authorization(self) -> str:
        """Return the ``Authorization`` header value."""
        return f"Bearer {self.value}"
