"""Errors raised while turning Bitbucket records into catalog entities."""

from __future__ import annotations


class EntityMappingError(ValueError):
    """Raised when a record cannot produce a valid catalog entity."""

    def __init__(self, blueprint: str, reason: str) -> None:
        """Initialise with the target blueprint and failure reason."""
        self.blueprint = blueprint
        self.reason = reason
        super().__init__(f"Cannot map {blueprint} entity: {reason}")

    @classmethod
    def empty_identifier(cls, blueprint: str, field: str) -> EntityMappingError:
        """Return an error for a record whose identifier field is blank."""
        return cls(blueprint, f"{field} is empty")
