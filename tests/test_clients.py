"""Unit tests for the Defender service clients."""

import base64
import hashlib
import io
import zipfile
from unittest.mock import AsyncMock, patch

import pytest

from clients import AdminClient, AutotaskClient, DefenderAPIError, RelayClient
from clients.autotask import secret_names, zip_folder
from config import DefenderConfig


@pytest.fixture
def defender_config():
    return DefenderConfig(api_key="key", api_secret="secret", api_url="http://api")


@pytest.fixture
def code_folder(tmp_path):
    folder = tmp_path / "watcher"
    (folder / "lib").mkdir(parents=True)
    (folder / "index.js").write_text("exports.handler = async () => {}\n")
    (folder / "lib" / "util.js").write_text("module.exports = {}\n")
    return folder


class TestDefenderAPIError:
    """Tests for DefenderAPIError."""

    def test_message_from_envelope(self):
        """Test that the platform message is exposed."""
        error = DefenderAPIError(401, {"message": "Unauthorized"}, "http://api/x")
        assert error.message == "Unauthorized"
        assert "401" in str(error)

    def test_message_missing(self):
        """Test bodies without a message."""
        assert DefenderAPIError(500, "oops").message is None
        assert DefenderAPIError(500, {"error": "x"}).message is None


class TestDefenderClient:
    """Tests for the shared client plumbing."""

    def test_base_url(self, defender_config):
        """Test that service paths are appended to the API URL."""
        assert RelayClient(defender_config).base_url == "http://api/relayer"
        assert AutotaskClient(defender_config).base_url == "http://api/autotask"

    def test_headers(self, defender_config):
        """Test that team credentials are sent."""
        headers = AdminClient(defender_config)._get_headers()
        assert headers["X-Api-Key"] == "key"
        assert headers["X-Api-Secret"] == "secret"


@pytest.mark.asyncio
class TestClientEndpoints:
    """Tests for endpoint routing."""

    async def test_relay_list_uses_summary(self, defender_config):
        """Test that relayers are listed from the summary endpoint."""
        client = RelayClient(defender_config)
        with patch.object(
            client, "_request", AsyncMock(return_value={"items": [{"relayerId": "r"}]})
        ) as request:
            result = await client.list()
        request.assert_awaited_once_with("GET", "/relayers/summary")
        assert result == {"items": [{"relayerId": "r"}]}

    async def test_create_key(self, defender_config):
        """Test that keys are created with their stack identity."""
        client = RelayClient(defender_config)
        with patch.object(client, "_request", AsyncMock(return_value={})) as request:
            await client.create_key("r-1", "svc-dev.main.a")
        method, path = request.await_args.args
        assert method == "POST"
        assert path == "/relayers/r-1/keys"
        assert request.await_args.kwargs["json"] == {"stackResourceId": "svc-dev.main.a"}

    async def test_create_secrets(self, defender_config):
        """Test the secrets upsert call."""
        client = AutotaskClient(defender_config)
        payload = {"deletes": [], "secrets": {"a": "1"}}
        with patch.object(client, "_request", AsyncMock(return_value={})) as request:
            await client.create_secrets(payload)
        request.assert_awaited_once_with("POST", "/secrets", json=payload)


class TestAutotaskCode:
    """Tests for autotask code packaging."""

    def test_zip_contains_all_files(self, code_folder):
        """Test that nested files are archived with relative names."""
        with zipfile.ZipFile(io.BytesIO(zip_folder(str(code_folder)))) as archive:
            assert archive.namelist() == ["index.js", "lib/util.js"]

    def test_zip_is_reproducible(self, code_folder):
        """Test that identical folders give identical archives."""
        assert zip_folder(str(code_folder)) == zip_folder(str(code_folder))

    def test_missing_folder(self, tmp_path):
        """Test that a missing code folder raises."""
        with pytest.raises(FileNotFoundError):
            zip_folder(str(tmp_path / "missing"))

    def test_digest_tracks_content(self, code_folder):
        """Test that the digest changes only with the code."""
        code = AutotaskClient.get_encoded_zipped_code_from_folder(str(code_folder))
        digest = AutotaskClient.get_code_digest(code)
        assert digest == base64.b64encode(
            hashlib.sha256(base64.b64decode(code)).digest()
        ).decode("ascii")

        (code_folder / "index.js").write_text("exports.handler = async () => 1\n")
        changed = AutotaskClient.get_encoded_zipped_code_from_folder(str(code_folder))
        assert AutotaskClient.get_code_digest(changed) != digest

    def test_secret_names(self):
        """Test reading secret names from a listing."""
        assert secret_names({"secretNames": ["a", "b"]}) == ["a", "b"]
        assert secret_names({}) == []
        assert secret_names(None) == []
