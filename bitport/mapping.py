"""Projections from Bitbucket records to catalog entities.

Both mappers are pure: the same record always yields the same entity, which
keeps catalog upserts idempotent across runs.
"""

from __future__ import annotations

import typing as typ

from bitport.errors import EntityMappingError
from bitport.port.models import PROJECT_BLUEPRINT, REPOSITORY_BLUEPRINT, Entity

if typ.TYPE_CHECKING:
    from bitport.bitbucket.models import ProjectRecord, RepositoryRecord

SWAGGER_URL_TEMPLATE = "https://api.{slug}.com"


def swagger_url(slug: str) -> str:
    """Return the API documentation URL derived from a repository slug.

    Examples
    --------
    >>> swagger_url("svc-a")
    'https://api.svc-a.com'

    """
    return SWAGGER_URL_TEMPLATE.format(slug=slug)


def map_project(project: ProjectRecord) -> Entity:
    """Project a Bitbucket project onto the ``project`` blueprint.

    Raises
    ------
    EntityMappingError
        If the project key is blank.

    """
    if not project.key.strip():
        raise EntityMappingError.empty_identifier(PROJECT_BLUEPRINT, "key")

    return Entity(
        identifier=project.key,
        title=project.name,
        properties={
            "description": project.description,
            "type": project.type,
            "public": project.public,
            "link": project.link,
        },
        relations={},
    )


def map_repository(
    repo: RepositoryRecord,
    readme_text: str,
    *,
    project_key: str | None = None,
) -> Entity:
    """Project a Bitbucket repository onto the ``repository`` blueprint.

    Parameters
    ----------
    repo
        Repository record from the project's repository listing.
    readme_text
        Assembled README content; stored as ``documentation``.
    project_key
        Key of the project being walked, used when the record does not embed
        its parent project.

    Raises
    ------
    EntityMappingError
        If the repository slug is blank.

    """
    if not repo.slug.strip():
        raise EntityMappingError.empty_identifier(REPOSITORY_BLUEPRINT, "slug")

    parent = repo.project_key or project_key
    relations = {"project": parent} if parent else {}

    return Entity(
        identifier=repo.slug,
        title=repo.name,
        properties={
            "description": repo.description,
            "state": repo.state,
            "forkable": repo.forkable,
            "public": repo.public,
            "link": repo.link,
            "documentation": readme_text,
            "swagger_url": swagger_url(repo.slug),
        },
        relations=relations,
    )
