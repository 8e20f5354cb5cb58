"""Domain port definitions for adapters."""

from __future__ import annotations

from .catalog import CatalogStore, ModelWriter, WriteResult
from .discovery import (
    AdapterRegistry,
    DiscoverOptions,
    DiscoveryAdapter,
    DiscoveryError,
    HealthChecker,
    UnknownProviderError,
)
from .review import ChangeSetReviewer, LLMClient
from .submission import ChangeSubmitter, SubmissionResult

__all__ = [
    "AdapterRegistry",
    "CatalogStore",
    "ChangeSetReviewer",
    "ChangeSubmitter",
    "DiscoverOptions",
    "DiscoveryAdapter",
    "DiscoveryError",
    "HealthChecker",
    "LLMClient",
    "ModelWriter",
    "SubmissionResult",
    "UnknownProviderError",
    "WriteResult",
]
