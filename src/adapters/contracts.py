"""
Contracts Adapter - contracts imported into Defender Admin.

Contracts carry no stack identity; they are matched by network and address.
An already imported contract is left as is.
"""

import asyncio
import json
from typing import Any, Dict, List

from adapters.base import (
    DeployContext,
    LocalDeclaration,
    OperationResult,
    ResourceAdapter,
    drop_none,
)
from clients.admin import AdminClient


def contract_id(contract: Dict[str, Any]) -> str:
    return f"{contract['network']}-{contract['address']}"


class ContractsAdapter(ResourceAdapter):
    """Adapter for imported contracts."""

    def __init__(self, ctx: DeployContext, client: AdminClient):
        super().__init__(ctx)
        self.client = client

    @property
    def name(self) -> str:
        return "Contracts"

    async def fetch(self) -> List[Dict[str, Any]]:
        return await self.client.list_contracts()

    def match(self, remote: Any, declaration: LocalDeclaration) -> bool:
        spec = declaration.spec
        return (
            remote.get("address") == spec.get("address")
            and remote.get("network") == spec.get("network")
        )

    def describe(self, declaration: LocalDeclaration, remote: Any = None) -> str:
        if remote is not None:
            return remote.get("name", declaration.name)
        return self.identity_for(declaration)

    async def update(
        self, declaration: LocalDeclaration, remote: Dict[str, Any]
    ) -> OperationResult:
        return OperationResult(
            name=remote.get("name", declaration.name),
            id=contract_id(remote),
            success=False,
            notice=(
                f"Skipping import - contract {remote['address']} "
                f"already exists on {remote['network']}"
            ),
        )

    async def create(self, declaration: LocalDeclaration, identity: str) -> OperationResult:
        spec = declaration.spec
        abi = spec.get("abi")
        imported = await self.client.add_contract(
            drop_none(
                {
                    "name": spec["name"],
                    "network": spec["network"],
                    "address": spec["address"],
                    "abi": json.dumps(abi) if abi else None,
                    "natSpec": spec.get("nat-spec") or None,
                }
            )
        )
        return OperationResult(
            name=imported["name"],
            id=contract_id(imported),
            success=True,
            response=imported,
        )

    async def remove(self, entries: List[Dict[str, Any]]) -> None:
        await asyncio.gather(
            *(self.client.delete_contract(contract_id(c)) for c in entries)
        )
