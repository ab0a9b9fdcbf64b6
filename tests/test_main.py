"""Tests for the command line interface."""

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from collection_sync import main as cli
from collection_sync.core.client import CollectionClient, RemoteError


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch.object(cli, "setup_logging"):
        yield


@pytest.fixture
def collection_file(tmp_path: Path) -> Path:
    path = tmp_path / "billing.json"
    path.write_text(json.dumps({"info": {"name": "Billing API"}, "item": []}), encoding="utf-8")
    return path


@pytest.fixture
def client() -> MagicMock:
    mock = MagicMock(spec=CollectionClient)
    mock.find_by_name.return_value = []
    return mock


class TestPush:
    """Tests for the push command."""

    def test_push_creates_and_caches(self, tmp_path: Path, collection_file: Path, client: MagicMock) -> None:
        cache_file = tmp_path / "cache.json"
        client.create.return_value = "123-new"

        with patch.object(cli, "build_client", return_value=client):
            code = cli.main(["--cache-file", str(cache_file), "push", str(collection_file)])

        assert code == 0
        assert json.loads(cache_file.read_text())["Billing API"]["uid"] == "123-new"

    def test_push_with_uid_pins_target(self, tmp_path: Path, collection_file: Path, client: MagicMock) -> None:
        cache_file = tmp_path / "cache.json"
        client.update.return_value = "pinned"

        with patch.object(cli, "build_client", return_value=client):
            code = cli.main(["--cache-file", str(cache_file), "push", str(collection_file), "--uid", "pinned"])

        assert code == 0
        assert client.update.call_args.args[1] == "pinned"
        assert not cache_file.exists()

    def test_push_failure_exit_code(self, tmp_path: Path, collection_file: Path, client: MagicMock) -> None:
        client.find_by_name.side_effect = RemoteError("Unauthorized", {"error": {"name": "AuthenticationError"}}, 401)

        with patch.object(cli, "build_client", return_value=client):
            code = cli.main(["--cache-file", str(tmp_path / "cache.json"), "push", str(collection_file)])

        assert code == 1

    def test_push_missing_file(self, tmp_path: Path) -> None:
        assert cli.main(["push", str(tmp_path / "missing.json")]) == 1

    def test_push_missing_api_key(self, collection_file: Path) -> None:
        with patch.object(cli, "build_client", side_effect=ValueError("Missing Postman API key")):
            assert cli.main(["push", str(collection_file)]) == 1

    def test_push_malformed_config(self, tmp_path: Path, collection_file: Path) -> None:
        config_file = tmp_path / "collection-sync.yaml"
        config_file.write_text("base_url: [unclosed\n")

        assert cli.main(["--config", str(config_file), "push", str(collection_file)]) == 1


class TestCacheCommands:
    """Tests for cache status/remove/clear."""

    def _seed(self, cache_file: Path) -> None:
        cache_file.write_text(json.dumps({
            "Billing API": {"name": "Billing API", "uid": "abc"},
            "Orders API": {"name": "Orders API", "uid": "def"},
        }))

    def test_status(self, tmp_path: Path) -> None:
        cache_file = tmp_path / "cache.json"
        self._seed(cache_file)

        assert cli.main(["--cache-file", str(cache_file), "cache", "status"]) == 0

    def test_remove(self, tmp_path: Path) -> None:
        cache_file = tmp_path / "cache.json"
        self._seed(cache_file)

        assert cli.main(["--cache-file", str(cache_file), "cache", "remove", "Billing API"]) == 0
        assert list(json.loads(cache_file.read_text())) == ["Orders API"]

    def test_remove_unknown(self, tmp_path: Path) -> None:
        cache_file = tmp_path / "cache.json"
        self._seed(cache_file)

        assert cli.main(["--cache-file", str(cache_file), "cache", "remove", "Payments API"]) == 1

    def test_clear(self, tmp_path: Path) -> None:
        cache_file = tmp_path / "cache.json"
        self._seed(cache_file)

        assert cli.main(["--cache-file", str(cache_file), "cache", "clear"]) == 0
        assert json.loads(cache_file.read_text()) == {}

    def test_status_empty_cache(self, tmp_path: Path) -> None:
        assert cli.main(["--cache-file", str(tmp_path / "cache.json"), "cache", "status"]) == 0

    @pytest.mark.parametrize("command", [["status"], ["remove", "Billing API"], ["clear"]])
    def test_malformed_config(self, tmp_path: Path, command: list[str]) -> None:
        config_file = tmp_path / "collection-sync.yaml"
        config_file.write_text("timeout: [1, 2]\n")

        assert cli.main(["--config", str(config_file), "cache", *command]) == 1


class TestVerifyAuth:
    """Tests for verify-auth."""

    def test_success(self, client: MagicMock) -> None:
        client.verify_connection.return_value = True

        with patch.object(cli, "build_client", return_value=client):
            assert cli.main(["verify-auth"]) == 0

    def test_failure(self, client: MagicMock) -> None:
        client.verify_connection.side_effect = RemoteError("API error 401", None, 401)

        with patch.object(cli, "build_client", return_value=client):
            assert cli.main(["verify-auth"]) == 1


class TestVerifyAuthScript:
    """Tests for the standalone verification script."""

    def test_missing_key(self) -> None:
        from collection_sync import verify_auth

        with patch.object(verify_auth.ApiKeyAuth, "from_env", side_effect=ValueError("Missing Postman API key")):
            assert verify_auth.main() == 1

    def test_listing_succeeds(self) -> None:
        from collection_sync import verify_auth

        auth = verify_auth.ApiKeyAuth(api_key="PMAK-1234567890abcdef")
        with patch.object(verify_auth.ApiKeyAuth, "from_env", return_value=auth), \
                patch.object(verify_auth.CollectionClient, "list_collections", return_value=[]):
            assert verify_auth.main() == 0

    def test_connection_failure(self) -> None:
        from collection_sync import verify_auth

        auth = verify_auth.ApiKeyAuth(api_key="PMAK-1234567890abcdef")
        error = RemoteError("API error 401", {"error": {"name": "AuthenticationError"}}, 401)
        with patch.object(verify_auth.ApiKeyAuth, "from_env", return_value=auth), \
                patch.object(verify_auth.CollectionClient, "verify_connection", side_effect=error):
            assert verify_auth.main() == 1
