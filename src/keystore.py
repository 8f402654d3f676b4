"""
Key Store - local persistence of created relayer API keys.

The platform only returns a key's secret at creation time, so each created
key is written to ``<output_dir>/relayer-keys/<key identity>.json``. The
output directory is expected to be excluded from version control.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class KeyStore:
    """Writes created API key payloads to the local keys directory."""

    def __init__(self, directory: str):
        self.directory = directory

    def path_for(self, identity: str) -> str:
        return os.path.join(self.directory, f"{identity}.json")

    def save(self, identity: str, payload: Dict[str, Any]) -> Optional[str]:
        """
        Persist a created key.

        A failed write is logged and does not raise: the key already exists
        remotely and the deploy result reports it as created either way.

        Args:
            identity: Stable identity of the key, used as the file name.
            payload: The key as returned by the platform.

        Returns:
            The written path, or None if the write failed.
        """
        path = self.path_for(identity)
        try:
            os.makedirs(self.directory, exist_ok=True)
            with open(path, "w") as f:
                json.dump(payload, f, indent=2)
        except OSError as e:
            logger.error(f"Could not store API key {identity} in {path}: {e}")
            return None

        logger.info(f"API Key details stored in {path}")
        return path
