"""Bitbucket Server client, pagination and record types."""

from __future__ import annotations

from .client import BitbucketClient, BitbucketConfig
from .errors import (
    BitbucketAPIError,
    BitbucketConfigError,
    BitbucketError,
    BitbucketPaginationError,
    BitbucketResponseShapeError,
)
from .models import (
    Link,
    Links,
    ProjectRecord,
    ProjectRef,
    ReadmeLine,
    RepositoryRecord,
    project_from_raw,
    repository_from_raw,
)
from .pagination import PaginatedFetcher, RetryPolicy
from .readme import assemble_readme

__all__ = [
    "BitbucketAPIError",
    "BitbucketClient",
    "BitbucketConfig",
    "BitbucketConfigError",
    "BitbucketError",
    "BitbucketPaginationError",
    "BitbucketResponseShapeError",
    "Link",
    "Links",
    "PaginatedFetcher",
    "ProjectRecord",
    "ProjectRef",
    "ReadmeLine",
    "RepositoryRecord",
    "RetryPolicy",
    "assemble_readme",
    "project_from_raw",
    "repository_from_raw",
]
