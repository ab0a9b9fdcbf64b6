"""HTTP client wrapper for the collection-hosting API."""

import logging
from dataclasses import dataclass
from typing import Any

import requests

from ..models.config import DEFAULT_TIMEOUT, Artifact, RemoteSummary, normalize_name
from .auth import ApiKeyAuth

logger = logging.getLogger(__name__)

# Error names the service uses when a uid no longer denotes a collection
NOT_FOUND_ERRORS = frozenset({"instanceNotFoundError", "collectionNotFoundError", "notFound"})


class RemoteError(Exception):
    """Exception raised when the service reports a failed call."""

    def __init__(self, message: str, payload: Any = None, status_code: int | None = None) -> None:
        super().__init__(message)
        self.payload = payload
        self.status_code = status_code


class RemoteNotFound(RemoteError):
    """The targeted uid no longer denotes a collection."""


@dataclass
class RemoteResponse:
    """Status-discriminated envelope for every API exchange."""

    status: str  # "success" or "fail"
    data: Any = None
    status_code: int | None = None

    @property
    def ok(self) -> bool:
        return self.status == "success"

    @property
    def error_name(self) -> str:
        """The ``error.name`` field of a failure payload, if any."""
        if isinstance(self.data, dict):
            error = self.data.get("error")
            if isinstance(error, dict):
                return str(error.get("name", ""))
        return ""

    @property
    def error_message(self) -> str:
        if isinstance(self.data, dict):
            error = self.data.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
        if self.status_code:
            return f"API error {self.status_code}"
        return "API request failed"

    def is_not_found(self) -> bool:
        return self.status_code == 404 or self.error_name in NOT_FOUND_ERRORS


def _collection_uid(data: Any) -> str:
    collection = data.get("collection") if isinstance(data, dict) else None
    if isinstance(collection, dict) and isinstance(collection.get("uid"), str):
        return collection["uid"]
    return ""


class CollectionClient:
    """HTTP client for the collection REST API with API key authentication."""

    def __init__(
        self,
        auth: ApiKeyAuth,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize client with authentication.

        Args:
            auth: ApiKeyAuth holding the credential
            timeout: Per-request timeout in seconds
            session: Optional requests session (created if not provided)
        """
        self.auth = auth
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(
        self,
        method: str,
        path: str,
        json_data: dict[str, Any] | None = None,
    ) -> RemoteResponse:
        """Make an authenticated request and wrap the result in an envelope.

        Transport failures are folded into a ``fail`` envelope rather than
        raised, so callers branch on ``status`` only.
        """
        url = self.auth.get_full_url(path)
        try:
            response = self.session.request(
                method=method,
                url=url,
                headers=self.auth.get_headers(),
                json=json_data if method in ("POST", "PUT", "PATCH") else None,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.debug("%s %s failed: %s", method, path, e)
            return RemoteResponse(
                status="fail",
                data={"error": {"name": "requestError", "message": f"Request failed: {e}"}},
            )

        try:
            data = response.json() if response.content else {}
        except ValueError:
            data = {"error": {"name": "invalidResponse", "message": response.text[:500]}}

        logger.debug("%s %s -> %s", method, path, response.status_code)
        if response.status_code >= 400:
            return RemoteResponse(status="fail", data=data, status_code=response.status_code)
        return RemoteResponse(status="success", data=data, status_code=response.status_code)

    # -------------------------------------------------------------------------
    # Collection Operations
    # -------------------------------------------------------------------------

    def create(self, artifact: Artifact) -> str:
        """Create a new collection.

        Args:
            artifact: Collection to upload

        Returns:
            uid assigned by the service

        Raises:
            RemoteError: On any failure
        """
        response = self._request("POST", "/collections", json_data={"collection": artifact.body})
        if not response.ok:
            raise RemoteError(response.error_message, response.data, response.status_code)
        return _collection_uid(response.data)

    def update(self, artifact: Artifact, uid: str) -> str:
        """Overwrite an existing collection.

        Args:
            artifact: Collection to upload
            uid: Remote collection uid

        Returns:
            uid echoed by the service

        Raises:
            RemoteNotFound: If the uid no longer denotes a collection
            RemoteError: On any other failure
        """
        response = self._request("PUT", f"/collections/{uid}", json_data={"collection": artifact.body})
        if not response.ok:
            if response.is_not_found():
                raise RemoteNotFound(response.error_message, response.data, response.status_code)
            raise RemoteError(response.error_message, response.data, response.status_code)
        return _collection_uid(response.data) or uid

    def list_collections(self) -> list[RemoteSummary]:
        """List every collection owned by the credential.

        Raises:
            RemoteError: On failure
        """
        response = self._request("GET", "/collections")
        if not response.ok:
            raise RemoteError(response.error_message, response.data, response.status_code)

        items = response.data.get("collections") if isinstance(response.data, dict) else None
        return [RemoteSummary.from_dict(item) for item in items or [] if isinstance(item, dict)]

    def find_by_name(self, name: str) -> list[RemoteSummary]:
        """Find collections whose normalized name matches ``name``.

        The service has no name filter, so this fetches the full listing and
        matches locally, ignoring whitespace and case.
        """
        wanted = normalize_name(name)
        return [
            summary
            for summary in self.list_collections()
            if summary.uid and summary.name and normalize_name(summary.name) == wanted
        ]

    # -------------------------------------------------------------------------
    # Health Check
    # -------------------------------------------------------------------------

    def verify_connection(self) -> bool:
        """Verify API connectivity and authentication.

        Raises:
            RemoteError: On connection or auth failure
        """
        self.list_collections()
        return True
