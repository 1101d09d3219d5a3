"""One full Bitbucket-to-Port synchronisation run.

The run is strictly sequential: authenticate once, publish every project,
then walk the hierarchy and publish every repository in traversal order.
Only failures to authenticate or to list projects abort the run; everything
narrower is logged and counted in the returned :class:`SyncResult`.
"""

from __future__ import annotations

import datetime as dt
import typing as typ

import msgspec

from bitport.bitbucket.models import project_from_raw
from bitport.errors import EntityMappingError
from bitport.mapping import map_project
from bitport.port.models import PROJECT_BLUEPRINT, REPOSITORY_BLUEPRINT
from bitport.port.publisher import CatalogPublisher

from .models import SyncResult
from .observability import SyncEventLogger
from .walker import HierarchyWalker

if typ.TYPE_CHECKING:
    from bitport.bitbucket.client import BitbucketClient
    from bitport.bitbucket.models import ProjectRecord
    from bitport.bitbucket.pagination import RawRecord
    from bitport.port.client import PortClient
    from bitport.port.models import Entity


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.UTC)


def _raw_reference(raw: RawRecord) -> str:
    """Return something identifying a raw record for log lines."""
    if isinstance(raw, dict):
        for field in ("key", "slug", "name"):
            value = raw.get(field)
            if isinstance(value, str) and value:
                return value
    return "<unknown>"


class SyncService:
    """Synchronise Bitbucket projects and repositories into Port."""

    def __init__(
        self,
        bitbucket: BitbucketClient,
        port: PortClient,
        *,
        event_logger: SyncEventLogger | None = None,
    ) -> None:
        """Create a service bound to both API clients."""
        self._bitbucket = bitbucket
        self._port = port
        self._event_logger = event_logger or SyncEventLogger()

    def run(self) -> SyncResult:
        """Execute one full sync.

        Raises
        ------
        PortAuthError
            If no access token can be obtained.
        BitbucketError
            If the project list cannot be fetched.

        """
        started_at = _utcnow()
        self._event_logger.log_run_started(started_at)
        try:
            result = self._run_inner()
        except Exception as exc:
            self._event_logger.log_run_failed(exc, _utcnow() - started_at)
            raise
        self._event_logger.log_run_completed(result, _utcnow() - started_at)
        return result

    def _run_inner(self) -> SyncResult:
        result = SyncResult()
        token = self._port.authenticate()
        publisher = CatalogPublisher(
            self._port, token, event_logger=self._event_logger
        )

        raw_projects = self._bitbucket.list_projects()
        result.projects_fetched = len(raw_projects)

        projects: list[ProjectRecord] = []
        for raw in raw_projects:
            mapped = self._map_project(raw, result)
            if mapped is None:
                continue
            project, entity = mapped
            projects.append(project)
            if publisher.publish(PROJECT_BLUEPRINT, entity).ok:
                result.projects_published += 1
            else:
                result.publish_failures += 1

        walker = HierarchyWalker(self._bitbucket, event_logger=self._event_logger)
        for entity in walker.walk(projects, result=result):
            if publisher.publish(REPOSITORY_BLUEPRINT, entity).ok:
                result.repositories_published += 1
            else:
                result.publish_failures += 1

        return result

    def _map_project(
        self, raw: RawRecord, result: SyncResult
    ) -> tuple[ProjectRecord, Entity] | None:
        """Convert and map one raw project, or log and skip it."""
        try:
            project = project_from_raw(raw)
            entity = map_project(project)
        except (msgspec.ValidationError, EntityMappingError) as exc:
            self._event_logger.log_entry_skipped(
                PROJECT_BLUEPRINT, _raw_reference(raw), exc
            )
            result.skipped_entries += 1
            return None
        return project, entity
