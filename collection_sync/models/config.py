"""Configuration and data models for collection sync."""

import json
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml

DEFAULT_BASE_URL = "https://api.getpostman.com"
DEFAULT_CACHE_FILE = ".collection-sync.cache"
DEFAULT_TIMEOUT = 30.0


def normalize_name(name: str) -> str:
    """Normalize a collection name for remote matching.

    Removes all whitespace and lower-cases, so "Billing API" and "billingapi"
    compare equal.
    """
    return re.sub(r"\s", "", name).lower()


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp, falling back to the epoch minimum."""
    if not value or not isinstance(value, str):
        return datetime.min.replace(tzinfo=timezone.utc)
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return datetime.min.replace(tzinfo=timezone.utc)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


@dataclass
class Artifact:
    """A named collection document to be synchronized."""

    name: str
    body: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_collection(cls, body: dict[str, Any]) -> "Artifact":
        """Create from a collection document, using ``info.name`` as identity."""
        name = (body.get("info") or {}).get("name")
        if not name or not isinstance(name, str):
            raise ValueError("Collection has no info.name; cannot sync a nameless collection")
        return cls(name=name, body=body)

    @classmethod
    def load(cls, path: Path) -> "Artifact":
        """Load a collection JSON file from disk."""
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Collection file {path} does not contain a JSON object")
        return cls.from_collection(data)


@dataclass
class CacheEntry:
    """A cached name -> remote uid mapping."""

    name: str
    uid: str

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "uid": self.uid,
        }

    @classmethod
    def from_dict(cls, name: str, data: dict[str, Any]) -> "CacheEntry":
        """Create from dictionary, keyed by the cache name."""
        return cls(
            name=data.get("name") if isinstance(data.get("name"), str) else name,
            uid=str(data["uid"]),
        )


@dataclass(frozen=True)
class RemoteSummary:
    """A collection as returned by the remote listing."""

    uid: str
    name: str
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RemoteSummary":
        """Create from a listing item."""
        return cls(
            uid=_text(data.get("uid")),
            name=_text(data.get("name")),
            updated_at=_text(data.get("updatedAt")),
        )

    @property
    def updated(self) -> datetime:
        """Parsed ``updated_at`` used for recency ordering."""
        return parse_timestamp(self.updated_at)


class OutcomeKind:
    """Terminal states of a sync."""

    CREATED = "created"
    UPDATED = "updated"
    FAILED = "failed"


@dataclass(frozen=True)
class SyncOutcome:
    """Structured result of syncing one artifact."""

    kind: str
    name: str
    uid: str | None = None
    error: Any = None

    @property
    def ok(self) -> bool:
        return self.kind != OutcomeKind.FAILED

    @classmethod
    def created(cls, name: str, uid: str) -> "SyncOutcome":
        return cls(kind=OutcomeKind.CREATED, name=name, uid=uid)

    @classmethod
    def updated(cls, name: str, uid: str) -> "SyncOutcome":
        return cls(kind=OutcomeKind.UPDATED, name=name, uid=uid)

    @classmethod
    def failed(cls, name: str, error: Any, uid: str | None = None) -> "SyncOutcome":
        return cls(kind=OutcomeKind.FAILED, name=name, uid=uid, error=error)


@dataclass(frozen=True)
class CacheResolution:
    """Resolve the remote identity through the cache, then the remote listing."""


@dataclass(frozen=True)
class PinnedTarget:
    """Operator override: always update this uid, bypassing the cache."""

    uid: str


Resolution = CacheResolution | PinnedTarget


@dataclass
class SyncConfig:
    """Main configuration for collection sync.

    The API key is not part of the file; it comes from the environment
    (see ``ApiKeyAuth.from_env``).
    """

    base_url: str = DEFAULT_BASE_URL
    cache_file: str = DEFAULT_CACHE_FILE
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def load(cls, config_path: Path | None) -> "SyncConfig":
        """Load configuration from a YAML file, or defaults if it is absent.

        Raises:
            ValueError: If the file is not valid YAML or holds bad values
        """
        if config_path is None or not Path(config_path).exists():
            return cls()

        try:
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Config {config_path} is not valid YAML: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Config {config_path} must be a YAML mapping")

        base_url = data.get("base_url", DEFAULT_BASE_URL)
        cache_file = data.get("cache_file", DEFAULT_CACHE_FILE)
        if not isinstance(base_url, str) or not isinstance(cache_file, str):
            raise ValueError(f"Config {config_path}: base_url and cache_file must be strings")

        try:
            timeout = float(data.get("timeout", DEFAULT_TIMEOUT))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Config {config_path}: timeout must be a number") from e

        return cls(base_url=base_url, cache_file=cache_file, timeout=timeout)
