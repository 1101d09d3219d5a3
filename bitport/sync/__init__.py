"""Project/repository traversal and the full sync run."""

from __future__ import annotations

from .models import SyncResult
from .observability import (
    ErrorCategory,
    SyncEventLogger,
    SyncEventType,
    categorize_error,
)
from .service import SyncService
from .walker import HierarchyWalker

__all__ = [
    "ErrorCategory",
    "HierarchyWalker",
    "SyncEventLogger",
    "SyncEventType",
    "SyncResult",
    "SyncService",
    "categorize_error",
]
