"""Core sync functionality."""

from .auth import ApiKeyAuth
from .cache import IdentityCache
from .client import CollectionClient, RemoteError, RemoteNotFound, RemoteResponse
from .engine import SyncEngine, pick_most_recent

__all__ = [
    "ApiKeyAuth",
    "CollectionClient",
    "IdentityCache",
    "RemoteError",
    "RemoteNotFound",
    "RemoteResponse",
    "SyncEngine",
    "pick_most_recent",
]
