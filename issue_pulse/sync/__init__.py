"""Incremental synchronization of a project mirror."""

from .orchestrator import SyncOrchestrator, SyncResult
from .policies import FailFast, FetchPolicy, RetryForever

__all__ = [
    "SyncOrchestrator",
    "SyncResult",
    "FetchPolicy",
    "RetryForever",
    "FailFast",
]
