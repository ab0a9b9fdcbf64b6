#!/usr/bin/env python3
"""Standalone script to verify Postman API authentication.

Usage:
    python -m collection_sync.verify_auth
"""

import sys

from .core.auth import ApiKeyAuth
from .core.client import CollectionClient, RemoteError


def main() -> int:
    """Verify authentication and print results."""
    print("=" * 50)
    print("Postman API Authentication Verification")
    print("=" * 50)

    print("\n1. Checking credentials...")
    try:
        auth = ApiKeyAuth.from_env()
        print(f"   API Key: {auth.masked_key()}")
        print(f"   Base URL: {auth.base_url}")
        print("   [OK] Credentials loaded")
    except ValueError as e:
        print(f"   [FAIL] {e}")
        print("\n   Make sure you have created a .env file with:")
        print("     POSTMAN_API_KEY=your_key")
        return 1

    print("\n2. Testing API connection...")
    try:
        client = CollectionClient(auth)
        client.verify_connection()
        print("   [OK] API connection successful")
    except RemoteError as e:
        print(f"   [FAIL] API error: {e}")
        if e.status_code == 401:
            print("\n   Authentication failed. Check your API key.")
        elif e.status_code == 403:
            print("\n   Access denied. Check API key permissions.")
        return 1

    print("\n" + "=" * 50)
    print("All checks passed! Authentication is working.")
    print("=" * 50)

    return 0


if __name__ == "__main__":
    sys.exit(main())
