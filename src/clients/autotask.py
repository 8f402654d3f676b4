"""
Autotask Client - autotasks and team secrets.

Autotask code is uploaded as a base64-encoded zip of a local folder. The zip
is built with fixed timestamps so that identical folders give identical
digests across deploys.
"""

import base64
import hashlib
import io
import logging
import os
import zipfile
from typing import Any, Dict, List

from clients.base import DefenderClient

logger = logging.getLogger(__name__)

# Fixed entry timestamp for reproducible archives
ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)


def zip_folder(path: str) -> bytes:
    """
    Zip a folder's files in sorted order with fixed metadata.

    Args:
        path: Folder holding the autotask code (expects an index.js).

    Returns:
        The zip archive bytes.
    """
    if not os.path.isdir(path):
        raise FileNotFoundError(f"Autotask code folder not found: {path}")

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for root, dirs, files in os.walk(path):
            dirs.sort()
            for filename in sorted(files):
                full_path = os.path.join(root, filename)
                arcname = os.path.relpath(full_path, path).replace(os.sep, "/")
                info = zipfile.ZipInfo(arcname, date_time=ZIP_EPOCH)
                info.compress_type = zipfile.ZIP_DEFLATED
                info.external_attr = 0o644 << 16
                with open(full_path, "rb") as f:
                    archive.writestr(info, f.read())
    return buffer.getvalue()


class AutotaskClient(DefenderClient):
    """Client for the autotask service."""

    service_path = "/autotask"

    async def list(self) -> Dict[str, Any]:
        """List autotasks; the response carries an ``items`` list."""
        return await self._request("GET", "/autotasks")

    async def get(self, autotask_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/autotasks/{autotask_id}")

    async def create(self, autotask: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/autotasks", json=autotask)

    async def update(self, autotask: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", "/autotasks", json=autotask)

    async def delete(self, autotask_id: str) -> None:
        await self._request("DELETE", f"/autotasks/{autotask_id}")

    async def update_code(self, autotask_id: str, encoded_zipped_code: str) -> None:
        await self._request(
            "PUT",
            f"/autotasks/{autotask_id}/code",
            json={"autotaskId": autotask_id, "encodedZippedCode": encoded_zipped_code},
        )

    async def list_secrets(self) -> Dict[str, Any]:
        """List secret names; the response carries ``secretNames``."""
        return await self._request("GET", "/secrets")

    async def create_secrets(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Upsert and delete secrets in one call.

        Args:
            payload: ``{"deletes": [names], "secrets": {name: value}}``
        """
        return await self._request("POST", "/secrets", json=payload)

    @staticmethod
    def get_encoded_zipped_code_from_folder(path: str) -> str:
        return base64.b64encode(zip_folder(path)).decode("ascii")

    @staticmethod
    def get_code_digest(encoded_zipped_code: str) -> str:
        """SHA-256 digest of the encoded code, base64 encoded."""
        digest = hashlib.sha256(base64.b64decode(encoded_zipped_code)).digest()
        return base64.b64encode(digest).decode("ascii")


def secret_names(response: Dict[str, Any]) -> List[str]:
    return list((response or {}).get("secretNames") or [])
