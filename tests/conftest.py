"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import typing as typ

import pytest

from tests.helpers.fake_servers import FakeBitbucket, FakePort
from tests.helpers.recording_logger import RecordingLogger

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from bitport.bitbucket import BitbucketClient
    from bitport.port import PortClient


@pytest.fixture
def fake_bitbucket() -> FakeBitbucket:
    """Return an empty fake Bitbucket server."""
    return FakeBitbucket()


@pytest.fixture
def fake_port() -> FakePort:
    """Return a fake Port API that accepts every upsert."""
    return FakePort()


@pytest.fixture
def bitbucket_client(
    fake_bitbucket: FakeBitbucket,
) -> cabc.Iterator[BitbucketClient]:
    """Return a Bitbucket client bound to the fake server."""
    client = fake_bitbucket.client()
    yield client
    client.close()


@pytest.fixture
def port_client(fake_port: FakePort) -> cabc.Iterator[PortClient]:
    """Return a Port client bound to the fake API."""
    client = fake_port.client()
    yield client
    client.close()


@pytest.fixture
def sync_logs(monkeypatch: pytest.MonkeyPatch) -> RecordingLogger:
    """Capture structured sync events."""
    recorder = RecordingLogger()
    monkeypatch.setattr("bitport.sync.observability.logger", recorder)
    return recorder


@pytest.fixture
def pagination_logs(monkeypatch: pytest.MonkeyPatch) -> RecordingLogger:
    """Capture pagination warnings."""
    recorder = RecordingLogger()
    monkeypatch.setattr("bitport.bitbucket.pagination.logger", recorder)
    return recorder
