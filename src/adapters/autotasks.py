"""
Autotasks Adapter - serverless functions run by Defender.

Code is only uploaded when its digest differs from the deployed one.
An autotask may reference a relayer of the same template by local name.
"""

import asyncio
from typing import Any, Dict, List

from adapters.base import (
    DeployContext,
    LocalDeclaration,
    OperationResult,
    ResourceAdapter,
    UnresolvedReference,
    drop_none,
)
from clients.autotask import AutotaskClient
from clients.relay import RelayClient


def autotask_trigger(spec: Dict[str, Any]) -> Dict[str, Any]:
    trigger = spec.get("trigger") or {}
    return drop_none(
        {
            "type": trigger.get("type"),
            "frequencyMinutes": trigger.get("frequency"),
            "cron": trigger.get("cron"),
        }
    )


class AutotasksAdapter(ResourceAdapter):
    """Adapter for autotasks."""

    def __init__(
        self,
        ctx: DeployContext,
        client: AutotaskClient,
        relay_client: RelayClient,
    ):
        super().__init__(ctx)
        self.client = client
        self.relay_client = relay_client

    @property
    def name(self) -> str:
        return "Autotasks"

    async def fetch(self) -> List[Dict[str, Any]]:
        return (await self.client.list()).get("items", [])

    async def update(
        self, declaration: LocalDeclaration, remote: Dict[str, Any]
    ) -> OperationResult:
        spec = declaration.spec
        autotask_id = remote["autotaskId"]

        code = await self._encoded_code(spec["path"])
        new_digest = self.client.get_code_digest(code)
        current = await self.client.get(autotask_id)

        updated = await self.client.update(
            drop_none(
                {
                    "autotaskId": autotask_id,
                    "name": spec.get("name"),
                    "paused": spec.get("paused"),
                    "trigger": autotask_trigger(spec),
                }
            )
        )

        if new_digest == current.get("codeDigest"):
            return OperationResult(
                name=remote["stackResourceId"],
                id=autotask_id,
                success=True,
                notice=(
                    "Skipping upload - code digest matches for autotask "
                    f"{remote['stackResourceId']}"
                ),
                response=updated,
            )

        await self.client.update_code(autotask_id, code)
        return OperationResult(
            name=remote["stackResourceId"],
            id=autotask_id,
            success=True,
            response=updated,
        )

    async def create(self, declaration: LocalDeclaration, identity: str) -> OperationResult:
        spec = declaration.spec
        try:
            relayers = (await self.relay_client.list()).get("items", [])
            relayer = self.resolve("relayer", spec.get("relayer"), relayers)
        except UnresolvedReference as e:
            return OperationResult(name=identity, id="", success=False, error=str(e))

        code = await self._encoded_code(spec["path"])
        created = await self.client.create(
            drop_none(
                {
                    "name": spec.get("name"),
                    "trigger": autotask_trigger(spec),
                    "encodedZippedCode": code,
                    "paused": spec.get("paused"),
                    "relayerId": relayer["relayerId"] if relayer else None,
                    "stackResourceId": identity,
                }
            )
        )
        return OperationResult(
            name=identity,
            id=created["autotaskId"],
            success=True,
            response=created,
        )

    async def remove(self, entries: List[Dict[str, Any]]) -> None:
        await asyncio.gather(*(self.client.delete(a["autotaskId"]) for a in entries))

    async def _encoded_code(self, path: str) -> str:
        # zipping reads the whole folder; keep it off the event loop
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None, self.client.get_encoded_zipped_code_from_folder, path
        )
