"""Structured log events for sync runs.

Every event is a single pre-formatted line starting with a bracketed event
type, followed by ``key=value`` pairs that log aggregators can parse.
"""

from __future__ import annotations

import enum
import typing as typ

import msgspec

from bitport.bitbucket.errors import (
    BitbucketAPIError,
    BitbucketConfigError,
    BitbucketPaginationError,
    BitbucketResponseShapeError,
)
from bitport.errors import EntityMappingError
from bitport.logging import (
    format_log_message,
    get_logger,
    log_debug,
    log_error,
    log_exception,
    log_info,
    log_warning,
)
from bitport.port.errors import PortAPIError, PortAuthError, PortConfigError

if typ.TYPE_CHECKING:
    import datetime as dt

    from .models import SyncResult

logger = get_logger(__name__)

_HTTP_RATE_LIMITED = 429
_HTTP_SERVER_ERROR_THRESHOLD = 500


class SyncEventType(enum.StrEnum):
    """Event types emitted during a sync run."""

    RUN_STARTED = "sync.run.started"
    RUN_COMPLETED = "sync.run.completed"
    RUN_FAILED = "sync.run.failed"
    PROJECT_FAILED = "sync.project.failed"
    ENTRY_SKIPPED = "sync.entry.skipped"
    ENTITY_PUBLISHED = "sync.entity.published"
    PUBLISH_FAILED = "sync.publish.failed"


class ErrorCategory(enum.StrEnum):
    """Coarse failure classes for alert routing."""

    TRANSIENT = "transient"
    CLIENT_ERROR = "client_error"
    SCHEMA_DRIFT = "schema_drift"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


_EXCEPTION_CATEGORY_MAP: tuple[tuple[type[BaseException], ErrorCategory], ...] = (
    (BitbucketPaginationError, ErrorCategory.TRANSIENT),
    (BitbucketResponseShapeError, ErrorCategory.SCHEMA_DRIFT),
    (msgspec.ValidationError, ErrorCategory.SCHEMA_DRIFT),
    (EntityMappingError, ErrorCategory.SCHEMA_DRIFT),
    (BitbucketConfigError, ErrorCategory.CONFIGURATION),
    (PortConfigError, ErrorCategory.CONFIGURATION),
    (PortAuthError, ErrorCategory.CONFIGURATION),
)


def _status_category(status_code: int | None) -> ErrorCategory:
    if status_code is None:
        return ErrorCategory.TRANSIENT
    if (
        status_code == _HTTP_RATE_LIMITED
        or status_code >= _HTTP_SERVER_ERROR_THRESHOLD
    ):
        return ErrorCategory.TRANSIENT
    return ErrorCategory.CLIENT_ERROR


def categorize_error(exc: BaseException) -> ErrorCategory:
    """Categorize an exception for alerting purposes."""
    # HTTP errors split on status code
    if isinstance(exc, BitbucketAPIError | PortAPIError):
        return _status_category(exc.status_code)

    for exc_type, category in _EXCEPTION_CATEGORY_MAP:
        if isinstance(exc, exc_type):
            return category

    return ErrorCategory.UNKNOWN


class SyncEventLogger:
    """Emit structured sync events through femtologging."""

    def log_run_started(self, started_at: dt.datetime) -> None:
        """Log the start of a run."""
        log_info(
            logger,
            "[%s] started_at=%s",
            SyncEventType.RUN_STARTED,
            started_at.isoformat(),
        )

    def log_run_completed(self, result: SyncResult, duration: dt.timedelta) -> None:
        """Log run completion with counts."""
        log_info(
            logger,
            "[%s] duration_seconds=%.3f projects_fetched=%d projects_published=%d "
            "repositories_published=%d publish_failures=%d skipped_entries=%d "
            "failed_projects=%s",
            SyncEventType.RUN_COMPLETED,
            duration.total_seconds(),
            result.projects_fetched,
            result.projects_published,
            result.repositories_published,
            result.publish_failures,
            result.skipped_entries,
            ",".join(result.failed_projects) or "-",
        )

    def log_run_failed(self, error: BaseException, duration: dt.timedelta) -> None:
        """Log a run aborted by a fatal error."""
        message = format_log_message(
            "[%s] duration_seconds=%.3f error_type=%s error_category=%s "
            "error_message=%s",
            SyncEventType.RUN_FAILED,
            duration.total_seconds(),
            type(error).__name__,
            categorize_error(error),
            error,
        )
        log_exception(logger, message, error)

    def log_project_failed(self, project_key: str, error: BaseException) -> None:
        """Log a project whose repositories were dropped."""
        message = format_log_message(
            "[%s] project_key=%s error_type=%s error_category=%s error_message=%s",
            SyncEventType.PROJECT_FAILED,
            project_key,
            type(error).__name__,
            categorize_error(error),
            error,
        )
        log_exception(logger, message, error)

    def log_entry_skipped(
        self, blueprint: str, reference: str, error: BaseException
    ) -> None:
        """Log a source record that could not be mapped."""
        log_warning(
            logger,
            "[%s] blueprint=%s reference=%s error_type=%s error_message=%s",
            SyncEventType.ENTRY_SKIPPED,
            blueprint,
            reference,
            type(error).__name__,
            error,
        )

    def log_published(self, blueprint: str, identifier: str) -> None:
        """Log a successful upsert."""
        log_debug(
            logger,
            "[%s] blueprint=%s identifier=%s",
            SyncEventType.ENTITY_PUBLISHED,
            blueprint,
            identifier,
        )

    def log_publish_failed(
        self, blueprint: str, identifier: str, error: BaseException
    ) -> None:
        """Log an upsert the catalog refused or never received."""
        log_error(
            logger,
            "[%s] blueprint=%s identifier=%s error_category=%s error_message=%s",
            SyncEventType.PUBLISH_FAILED,
            blueprint,
            identifier,
            categorize_error(error),
            error,
        )
