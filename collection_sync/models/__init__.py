"""Data models for collection sync."""

from .config import (
    Artifact,
    CacheEntry,
    CacheResolution,
    OutcomeKind,
    PinnedTarget,
    RemoteSummary,
    Resolution,
    SyncConfig,
    SyncOutcome,
    normalize_name,
)

__all__ = [
    "Artifact",
    "CacheEntry",
    "CacheResolution",
    "OutcomeKind",
    "PinnedTarget",
    "RemoteSummary",
    "Resolution",
    "SyncConfig",
    "SyncOutcome",
    "normalize_name",
]
