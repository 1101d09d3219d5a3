"""Run-level bookkeeping for a sync."""

from __future__ import annotations

import dataclasses


@dataclasses.dataclass(slots=True)
class SyncResult:
    """Summary of one full Bitbucket-to-Port synchronisation run.

    Partial failures are recorded here rather than raised, so a completed run
    always returns a result.
    """

    projects_fetched: int = 0
    projects_published: int = 0
    repositories_published: int = 0
    publish_failures: int = 0
    skipped_entries: int = 0
    failed_projects: list[str] = dataclasses.field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        """Return True when anything was skipped or failed to publish."""
        return bool(
            self.publish_failures or self.skipped_entries or self.failed_projects
        )
