"""Behavioural tests for a full Bitbucket-to-Port sync."""

from __future__ import annotations

import typing as typ

import pytest
from pytest_bdd import given, parsers, scenario, then, when

from bitport.port import PortAuthError
from bitport.sync import SyncResult, SyncService
from tests.helpers.fake_servers import engineering_repo, project_path

if typ.TYPE_CHECKING:
    from bitport.bitbucket import BitbucketClient
    from bitport.port import PortClient
    from tests.helpers.fake_servers import FakeBitbucket, FakePort


_EXPECTED_BODIES: dict[str, dict[str, typ.Any]] = {
    "svc-a": {
        "identifier": "svc-a",
        "title": "Service A",
        "properties": {
            "description": "x",
            "state": "AVAILABLE",
            "forkable": True,
            "public": False,
            "link": "http://h/ENG/svc-a",
            "documentation": "# Service A\n",
            "swagger_url": "https://api.svc-a.com",
        },
        "relations": {"project": "ENG"},
    },
}


class SyncContext(typ.TypedDict, total=False):
    """Shared state used by BDD steps."""

    projects: list[dict[str, typ.Any]]
    repositories: dict[str, list[dict[str, typ.Any]]]
    result: SyncResult
    error: Exception


@scenario(
    "../repository_sync.feature",
    "A project and its repository are published in order",
)
def test_project_and_repository_published() -> None:
    """Behavioural test: the svc-a repository reaches the catalog."""


@scenario(
    "../repository_sync.feature",
    "A failing project does not stop the run",
)
def test_failing_project_isolated() -> None:
    """Behavioural test: other projects still sync."""


@scenario(
    "../repository_sync.feature",
    "Refused credentials stop the run before any fetch",
)
def test_refused_credentials_fatal() -> None:
    """Behavioural test: authentication failure is fatal."""


@pytest.fixture
def sync_context() -> SyncContext:
    """Return empty scenario state."""
    return {"projects": [], "repositories": {}}


def _published_index(fake_port: FakePort, blueprint: str, identifier: str) -> int:
    for index, (bp, body) in enumerate(fake_port.published()):
        if bp == blueprint and body["identifier"] == identifier:
            return index
    pytest.fail(f"{blueprint} {identifier!r} was not published")


def _published_repository(fake_port: FakePort, slug: str) -> dict[str, typ.Any]:
    index = _published_index(fake_port, "repository", slug)
    return fake_port.published()[index][1]


@given(parsers.parse('Bitbucket project "{key}" named "{name}"'))
def bitbucket_project(sync_context: SyncContext, key: str, name: str) -> None:
    """Queue a project for the project listing."""
    sync_context["projects"].append({"key": key, "name": name})


@given(parsers.parse('project "{key}" has repository "{slug}" named "{name}"'))
def bitbucket_repository(
    sync_context: SyncContext, key: str, slug: str, name: str
) -> None:
    """Queue a repository under ``key``."""
    repo = engineering_repo(
        slug=slug,
        name=name,
        project={"key": key},
        links={"self": [{"href": f"http://h/{key}/{slug}"}]},
    )
    sync_context["repositories"].setdefault(key, []).append(repo)


@given(parsers.parse('repository "{slug}" in "{key}" has a README starting "{line}"'))
def bitbucket_readme(
    fake_bitbucket: FakeBitbucket, slug: str, key: str, line: str
) -> None:
    """Serve a one-line README."""
    fake_bitbucket.add_readme(key, slug, line)


@given(parsers.parse('project "{key}" cannot list its repositories'))
def bitbucket_project_forbidden(fake_bitbucket: FakeBitbucket, key: str) -> None:
    """Answer the repository listing with 403."""
    fake_bitbucket.add_status(project_path(key), 403)


@given("the catalog refuses the sync credentials")
def port_refuses_credentials(fake_port: FakePort) -> None:
    """Make the token endpoint answer 401."""
    fake_port.token_status = 401


@when("the sync runs")
def run_sync(
    sync_context: SyncContext,
    fake_bitbucket: FakeBitbucket,
    bitbucket_client: BitbucketClient,
    port_client: PortClient,
) -> None:
    """Serve the queued listings and run one sync."""
    fake_bitbucket.add_projects(*sync_context["projects"])
    for key, repos in sync_context["repositories"].items():
        fake_bitbucket.add_repositories(key, *repos)

    try:
        sync_context["result"] = SyncService(bitbucket_client, port_client).run()
    except PortAuthError as exc:
        sync_context["error"] = exc


@then(
    parsers.parse(
        'the catalog received project "{key}" before repository "{slug}"'
    )
)
def project_before_repository(fake_port: FakePort, key: str, slug: str) -> None:
    """Assert publish ordering."""
    assert _published_index(fake_port, "project", key) < _published_index(
        fake_port, "repository", slug
    ), "Expected the project to be published before its repository."


@then(parsers.parse('repository "{slug}" is documented as "{line}"'))
def repository_documented(fake_port: FakePort, slug: str, line: str) -> None:
    """Assert the assembled README."""
    body = _published_repository(fake_port, slug)
    assert body["properties"]["documentation"] == f"{line}\n"


@then(parsers.parse('repository "{slug}" relates to project "{key}"'))
def repository_relation(fake_port: FakePort, slug: str, key: str) -> None:
    """Assert the project relation."""
    assert _published_repository(fake_port, slug)["relations"] == {"project": key}


@then(parsers.parse('repository "{slug}" has swagger URL "{url}"'))
def repository_swagger(fake_port: FakePort, slug: str, url: str) -> None:
    """Assert the derived swagger URL."""
    assert _published_repository(fake_port, slug)["properties"]["swagger_url"] == url


@then(
    parsers.parse('repository "{slug}" is published with its complete catalog body')
)
def repository_full_body(fake_port: FakePort, slug: str) -> None:
    """Assert the exact JSON body the catalog received."""
    assert _published_repository(fake_port, slug) == _EXPECTED_BODIES[slug]


@then(parsers.parse('project "{key}" is reported as failed'))
def project_reported_failed(sync_context: SyncContext, key: str) -> None:
    """Assert the run result names the failed project."""
    assert sync_context["result"].failed_projects == [key]


@then("the run fails with an authentication error")
def run_failed_auth(sync_context: SyncContext) -> None:
    """Assert the run raised PortAuthError."""
    assert isinstance(sync_context.get("error"), PortAuthError)
    assert "result" not in sync_context


@then("Bitbucket was never queried")
def bitbucket_untouched(fake_bitbucket: FakeBitbucket) -> None:
    """Assert no Bitbucket request was made."""
    assert fake_bitbucket.requests == []
