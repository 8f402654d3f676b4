"""Sentinel Client - sentinels and notification channels."""

from typing import Any, Dict, List

from clients.base import DefenderClient


class SentinelClient(DefenderClient):
    """Client for the sentinel service."""

    service_path = "/sentinel"

    async def list(self) -> Dict[str, Any]:
        """List sentinels; the response carries an ``items`` list."""
        return await self._request("GET", "/subscribers")

    async def create(self, sentinel: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/subscribers", json=sentinel)

    async def update(self, subscriber_id: str, sentinel: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", f"/subscribers/{subscriber_id}", json=sentinel)

    async def delete(self, subscriber_id: str) -> None:
        await self._request("DELETE", f"/subscribers/{subscriber_id}")

    async def list_notification_channels(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/notifications") or []

    async def create_notification_channel(
        self, notification: Dict[str, Any]
    ) -> Dict[str, Any]:
        path = f"/notifications/{notification['type']}"
        return await self._request("POST", path, json=notification)

    async def update_notification_channel(
        self, notification: Dict[str, Any]
    ) -> Dict[str, Any]:
        path = f"/notifications/{notification['type']}/{notification['notificationId']}"
        return await self._request("PUT", path, json=notification)

    async def delete_notification_channel(self, notification: Dict[str, Any]) -> None:
        path = f"/notifications/{notification['type']}/{notification['notificationId']}"
        await self._request("DELETE", path)
