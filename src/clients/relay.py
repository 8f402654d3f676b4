"""Relay Client - relayers and their API keys."""

from typing import Any, Dict, List

from clients.base import DefenderClient


class RelayClient(DefenderClient):
    """Client for the relayer service."""

    service_path = "/relayer"

    async def list(self) -> Dict[str, Any]:
        """List relayers; the response carries an ``items`` list."""
        return await self._request("GET", "/relayers/summary")

    async def create(self, relayer: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/relayers", json=relayer)

    async def update(self, relayer_id: str, relayer: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", f"/relayers/{relayer_id}", json=relayer)

    async def list_keys(self, relayer_id: str) -> List[Dict[str, Any]]:
        return await self._request("GET", f"/relayers/{relayer_id}/keys") or []

    async def create_key(self, relayer_id: str, stack_resource_id: str) -> Dict[str, Any]:
        return await self._request(
            "POST",
            f"/relayers/{relayer_id}/keys",
            json={"stackResourceId": stack_resource_id},
        )

    async def delete_key(self, relayer_id: str, key_id: str) -> None:
        await self._request("DELETE", f"/relayers/{relayer_id}/keys/{key_id}")
