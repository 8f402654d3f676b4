"""
Defender Client Base - HTTP plumbing shared by the platform service clients.

Clients raise DefenderAPIError for non-2xx responses, carrying the decoded
response body so callers can surface the platform's own error message.
"""

import logging
from typing import Any, Dict, Optional

import aiohttp

from config import DefenderConfig

logger = logging.getLogger(__name__)


class DefenderAPIError(Exception):
    """Raised when the platform API returns an error response."""

    def __init__(self, status: int, response_data: Any, url: str = ""):
        self.status = status
        self.response_data = response_data
        self.url = url
        super().__init__(f"Defender API error {status} for {url}: {response_data}")

    @property
    def message(self) -> Optional[str]:
        """The platform's error message, if the body carries one."""
        if isinstance(self.response_data, dict):
            message = self.response_data.get("message")
            if message:
                return str(message)
        return None


class DefenderClient:
    """
    Base HTTP client for one Defender service.

    Subclasses set ``service_path`` to the service prefix (e.g. '/relayer')
    and implement the service endpoints on top of ``_request``.
    """

    service_path: str = ""

    def __init__(self, config: DefenderConfig):
        self.config = config
        self.base_url = f"{config.api_url}{self.service_path}"

    def _get_headers(self) -> Dict[str, str]:
        """Get HTTP headers for platform API requests."""
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "X-Api-Key": self.config.api_key,
            "X-Api-Secret": self.config.api_secret,
        }

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Perform one API request and decode the JSON response.

        Raises:
            DefenderAPIError: If the response status is not 2xx.
        """
        url = f"{self.base_url}{path}"
        timeout = aiohttp.ClientTimeout(total=self.config.timeout)

        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.request(
                method,
                url,
                headers=self._get_headers(),
                json=json,
                params=params,
            ) as response:
                if response.status >= 400:
                    try:
                        data = await response.json(content_type=None)
                    except ValueError:
                        data = await response.text()
                    raise DefenderAPIError(response.status, data, url)

                if response.status == 204:
                    return None
                text = await response.text()
                if not text:
                    return None
                return await response.json(content_type=None)
