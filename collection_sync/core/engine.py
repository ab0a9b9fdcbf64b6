"""Reconcile a local collection with its remote counterpart."""

import logging

from ..models.config import (
    Artifact,
    CacheResolution,
    PinnedTarget,
    RemoteSummary,
    Resolution,
    SyncOutcome,
)
from .cache import IdentityCache
from .client import CollectionClient, RemoteError, RemoteNotFound

logger = logging.getLogger(__name__)


def pick_most_recent(matches: list[RemoteSummary]) -> RemoteSummary:
    """Select the most recently updated summary.

    Sorting is stable, so among equal timestamps the first listed wins.
    """
    return sorted(matches, key=lambda summary: summary.updated, reverse=True)[0]


class SyncEngine:
    """Decides between create and update and keeps the identity cache current."""

    # One initial attempt plus one self-heal retry after a stale uid
    MAX_ATTEMPTS = 2

    def __init__(self, client: CollectionClient, cache: IdentityCache) -> None:
        """Initialize the engine.

        Args:
            client: Remote collection client
            cache: Identity cache (loaded and saved once per sync)
        """
        self.client = client
        self.cache = cache

    def sync(self, artifact: Artifact, resolution: Resolution | None = None) -> SyncOutcome:
        """Sync one artifact to the remote service.

        Remote failures are returned as a failed outcome, never raised.

        Args:
            artifact: Named collection to upload
            resolution: PinnedTarget to force a uid, CacheResolution (default)
                to resolve through the cache and the remote listing

        Raises:
            ValueError: If the artifact has no name
        """
        if not artifact.name:
            raise ValueError("Cannot sync an artifact without a name")

        resolution = resolution or CacheResolution()
        if isinstance(resolution, PinnedTarget):
            return self._sync_pinned(artifact, resolution.uid)

        self.cache.load()
        try:
            return self._reconcile(artifact)
        finally:
            self.cache.save()

    def _sync_pinned(self, artifact: Artifact, uid: str) -> SyncOutcome:
        logger.debug("Updating '%s' against pinned uid %s", artifact.name, uid)
        try:
            new_uid = self.client.update(artifact, uid)
        except RemoteError as e:
            return SyncOutcome.failed(artifact.name, e.payload, uid=uid)
        return SyncOutcome.updated(artifact.name, new_uid)

    def _reconcile(self, artifact: Artifact) -> SyncOutcome:
        use_cache = True
        stale_payload = None

        for _ in range(self.MAX_ATTEMPTS):
            try:
                uid = self._resolve_identity(artifact.name, use_cache)
            except RemoteError as e:
                return SyncOutcome.failed(artifact.name, e.payload)

            if uid is None:
                return self._create(artifact)

            try:
                new_uid = self.client.update(artifact, uid)
            except RemoteNotFound as e:
                logger.info("Collection uid %s for '%s' no longer exists", uid, artifact.name)
                self.cache.remove(artifact.name)
                use_cache = False
                stale_payload = e.payload
                continue
            except RemoteError as e:
                return SyncOutcome.failed(artifact.name, e.payload, uid=uid)

            self.cache.put(artifact.name, new_uid)
            return SyncOutcome.updated(artifact.name, new_uid)

        return SyncOutcome.failed(artifact.name, stale_payload)

    def _resolve_identity(self, name: str, use_cache: bool) -> str | None:
        """Find the uid to update, or None when the collection must be created."""
        if use_cache:
            entry = self.cache.lookup(name)
            if entry is not None:
                logger.debug("Cache hit for '%s': %s", name, entry.uid)
                return entry.uid

        matches = self.client.find_by_name(name)
        if not matches:
            return None
        if len(matches) == 1:
            return matches[0].uid

        chosen = pick_most_recent(matches)
        logger.warning(
            "Multiple remote collections match '%s'; updating the most recent (%s)",
            name,
            chosen.uid,
        )
        return chosen.uid

    def _create(self, artifact: Artifact) -> SyncOutcome:
        try:
            uid = self.client.create(artifact)
        except RemoteError as e:
            return SyncOutcome.failed(artifact.name, e.payload)

        if uid:
            self.cache.put(artifact.name, uid)
        return SyncOutcome.created(artifact.name, uid)
