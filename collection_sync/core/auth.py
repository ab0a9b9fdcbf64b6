"""API key authentication for the collection-hosting service."""

import os

from dotenv import load_dotenv

from ..models.config import DEFAULT_BASE_URL


class ApiKeyAuth:
    """Holds the API key and builds authenticated request headers."""

    def __init__(self, api_key: str, base_url: str = DEFAULT_BASE_URL) -> None:
        """Initialize authentication with an explicit credential.

        Args:
            api_key: Service API key
            base_url: Service base URL
        """
        if not api_key:
            raise ValueError(
                "Missing Postman API key. Set POSTMAN_API_KEY environment "
                "variable or pass it directly."
            )
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")

    @classmethod
    def from_env(cls, base_url: str | None = None) -> "ApiKeyAuth":
        """Read the credential once from the environment (and .env file).

        Args:
            base_url: Overrides POSTMAN_BASE_URL when given
        """
        load_dotenv()
        return cls(
            api_key=os.getenv("POSTMAN_API_KEY", ""),
            base_url=base_url or os.getenv("POSTMAN_BASE_URL", DEFAULT_BASE_URL),
        )

    def get_headers(self, content_type: str = "application/json") -> dict[str, str]:
        """Generate authentication headers for an API request."""
        return {
            "X-API-Key": self.api_key,
            "Content-Type": content_type,
            "Accept": "application/json",
        }

    def get_full_url(self, path: str) -> str:
        """Build full URL from base URL and path.

        Args:
            path: API path (e.g., /collections)

        Returns:
            Full URL string
        """
        return f"{self.base_url}{path}"

    def masked_key(self) -> str:
        """API key with the middle hidden, for display."""
        if len(self.api_key) <= 12:
            return "*" * len(self.api_key)
        return f"{self.api_key[:8]}...{self.api_key[-4:]}"
