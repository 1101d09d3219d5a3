"""Unit tests for the project/repository hierarchy walk."""

from __future__ import annotations

import typing as typ

from bitport.bitbucket import project_from_raw
from bitport.sync import HierarchyWalker, SyncResult
from tests.helpers.fake_servers import (
    engineering_repo,
    project_path,
    readme_path,
)

if typ.TYPE_CHECKING:
    from bitport.bitbucket import BitbucketClient, ProjectRecord
    from tests.helpers.fake_servers import FakeBitbucket
    from tests.helpers.recording_logger import RecordingLogger


def _projects(*keys: str) -> list[ProjectRecord]:
    return [project_from_raw({"key": key, "name": key.title()}) for key in keys]


def _repo(key: str, slug: str) -> dict[str, typ.Any]:
    return engineering_repo(slug=slug, name=slug.upper(), project={"key": key})


def test_walk_preserves_project_then_repository_order(
    fake_bitbucket: FakeBitbucket, bitbucket_client: BitbucketClient
) -> None:
    """Entities follow project order, then each project's listing order."""
    fake_bitbucket.add_repositories("A", _repo("A", "a2"), _repo("A", "a1"))
    fake_bitbucket.add_repositories("B", _repo("B", "b1"))
    fake_bitbucket.add_readme("A", "a2", "two")
    fake_bitbucket.add_readme("A", "a1", "one")
    fake_bitbucket.add_readme("B", "b1", "bee")

    entities = HierarchyWalker(bitbucket_client).walk(_projects("A", "B"))

    assert [e.identifier for e in entities] == ["a2", "a1", "b1"]
    assert [e.properties["documentation"] for e in entities] == [
        "two\n",
        "one\n",
        "bee\n",
    ]
    assert [e.relations["project"] for e in entities] == ["A", "A", "B"]


def test_failed_project_is_isolated(
    fake_bitbucket: FakeBitbucket,
    bitbucket_client: BitbucketClient,
    sync_logs: RecordingLogger,
) -> None:
    """A project whose listing fails is skipped and logged by key."""
    fake_bitbucket.add_repositories("P1", _repo("P1", "one"))
    fake_bitbucket.add_status(project_path("P2"), 500)
    fake_bitbucket.add_repositories("P3", _repo("P3", "three"))
    result = SyncResult()

    entities = HierarchyWalker(bitbucket_client).walk(
        _projects("P1", "P2", "P3"), result=result
    )

    assert [e.identifier for e in entities] == ["one", "three"]
    assert result.failed_projects == ["P2"]
    errors = sync_logs.messages("ERROR")
    assert len(errors) == 1, "Expected a single project failure event."
    assert "sync.project.failed" in errors[0]
    assert "project_key=P2" in errors[0]
    assert "error_category=transient" in errors[0]


def test_repository_failure_discards_whole_project(
    fake_bitbucket: FakeBitbucket,
    bitbucket_client: BitbucketClient,
    sync_logs: RecordingLogger,
) -> None:
    """One failing README drops repositories already collected for the project."""
    fake_bitbucket.add_repositories(
        "ENG", _repo("ENG", "first"), _repo("ENG", "second")
    )
    fake_bitbucket.add_readme("ENG", "first", "ok")
    fake_bitbucket.add_status(readme_path("ENG", "second"), 403)
    fake_bitbucket.add_repositories("OPS", _repo("OPS", "runbooks"))

    entities = HierarchyWalker(bitbucket_client).walk(_projects("ENG", "OPS"))

    assert [e.identifier for e in entities] == ["runbooks"]
    assert "project_key=ENG" in sync_logs.messages("ERROR")[0]


def test_malformed_repository_aborts_project(
    fake_bitbucket: FakeBitbucket,
    bitbucket_client: BitbucketClient,
    sync_logs: RecordingLogger,
) -> None:
    """A repository record that cannot be converted fails its project."""
    fake_bitbucket.add_repositories("ENG", _repo("ENG", "good"), {"name": "no slug"})
    fake_bitbucket.add_readme("ENG", "good", "fine")

    result = SyncResult()
    entities = HierarchyWalker(bitbucket_client).walk(
        _projects("ENG"), result=result
    )

    assert entities == []
    assert result.failed_projects == ["ENG"]
    assert "error_category=schema_drift" in sync_logs.messages("ERROR")[0]


def test_missing_readme_keeps_repository(
    fake_bitbucket: FakeBitbucket, bitbucket_client: BitbucketClient
) -> None:
    """A repository without a README is still mapped with empty documentation."""
    fake_bitbucket.add_repositories("ENG", _repo("ENG", "bare"))

    entities = HierarchyWalker(bitbucket_client).walk(_projects("ENG"))

    assert [e.properties["documentation"] for e in entities] == [""]


def test_empty_project_list_makes_no_requests(
    fake_bitbucket: FakeBitbucket, bitbucket_client: BitbucketClient
) -> None:
    """Walking nothing touches nothing."""
    assert HierarchyWalker(bitbucket_client).walk([]) == []
    assert fake_bitbucket.requests == []
