"""Admin Client - imported contracts."""

from typing import Any, Dict, List

from clients.base import DefenderClient


class AdminClient(DefenderClient):
    """Client for the admin service."""

    service_path = "/admin"

    async def list_contracts(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/contracts") or []

    async def add_contract(self, contract: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", "/contracts", json=contract)

    async def delete_contract(self, contract_id: str) -> None:
        """Delete a contract by its ``<network>-<address>`` id."""
        await self._request("DELETE", f"/contracts/{contract_id}")
