"""Traverse projects, their repositories and each repository's README.

A project is the unit of failure: if anything goes wrong while listing its
repositories, reading a README or mapping a record, every repository gathered
for that project is dropped and the walk moves on to the next project.
"""

from __future__ import annotations

import typing as typ

from bitport.bitbucket.models import repository_from_raw
from bitport.mapping import map_repository

from .observability import SyncEventLogger

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from bitport.bitbucket.client import BitbucketClient
    from bitport.bitbucket.models import ProjectRecord
    from bitport.port.models import Entity

    from .models import SyncResult


class HierarchyWalker:
    """Collect repository entities across a sequence of projects."""

    def __init__(
        self,
        client: BitbucketClient,
        *,
        event_logger: SyncEventLogger | None = None,
    ) -> None:
        """Bind the walker to a Bitbucket client."""
        self._client = client
        self._event_logger = event_logger or SyncEventLogger()

    def walk(
        self,
        projects: cabc.Sequence[ProjectRecord],
        *,
        result: SyncResult | None = None,
    ) -> list[Entity]:
        """Return repository entities for every project that succeeded.

        Parameters
        ----------
        projects
            Projects in the order they should be processed.
        result
            Optional run summary; keys of failed projects are appended to
            ``result.failed_projects``.

        Returns
        -------
        list[Entity]
            Entities in project order, then in the order Bitbucket lists each
            project's repositories.

        """
        entities: list[Entity] = []
        for project in projects:
            try:
                project_entities = self._walk_project(project)
            except Exception as exc:  # noqa: BLE001 - isolate one project
                self._event_logger.log_project_failed(project.key, exc)
                if result is not None:
                    result.failed_projects.append(project.key)
                continue
            entities.extend(project_entities)
        return entities

    def _walk_project(self, project: ProjectRecord) -> list[Entity]:
        """Map every repository of one project, raising on the first failure."""
        collected: list[Entity] = []
        for raw in self._client.list_repositories(project.key):
            repo = repository_from_raw(raw)
            readme = self._client.readme(project.key, repo.slug)
            collected.append(map_repository(repo, readme, project_key=project.key))
        return collected
