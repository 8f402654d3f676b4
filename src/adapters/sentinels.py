"""
Sentinels Adapter - block and Forta monitors.

Sentinels reference notification channels and autotasks of the same
template by local name. Both lists are refreshed on every fetch so that
references resolve against what earlier deploy steps created.
"""

import asyncio
import json
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
from clients.sentinel import SentinelClient


class SentinelsAdapter(ResourceAdapter):
    """Adapter for sentinels."""

    def __init__(
        self,
        ctx: DeployContext,
        client: SentinelClient,
        autotask_client: AutotaskClient,
    ):
        super().__init__(ctx)
        self.client = client
        self.autotask_client = autotask_client
        self._notifications: List[Dict[str, Any]] = []
        self._autotasks: List[Dict[str, Any]] = []

    @property
    def name(self) -> str:
        return "Sentinels"

    async def fetch(self) -> List[Dict[str, Any]]:
        self._notifications = await self.client.list_notification_channels()
        self._autotasks = (await self.autotask_client.list()).get("items", [])
        return (await self.client.list()).get("items", [])

    def construct_sentinel(self, spec: Dict[str, Any], identity: str) -> Dict[str, Any]:
        """
        Build the Defender payload for a sentinel.

        Raises:
            UnresolvedReference: If a referenced channel or autotask is missing.
        """
        notify_config = spec.get("notify-config") or {}
        channels = [
            self.resolve("notification", name, self._notifications)["notificationId"]
            for name in notify_config.get("channels") or []
        ]
        condition = self.resolve(
            "autotask", spec.get("autotask-condition"), self._autotasks
        )
        trigger = self.resolve("autotask", spec.get("autotask-trigger"), self._autotasks)

        threshold = spec.get("alert-threshold")
        abi = spec.get("abi")
        sentinel_type = spec.get("type", "BLOCK")

        payload = {
            "type": sentinel_type,
            "name": spec["name"],
            "network": spec.get("network"),
            "addresses": spec.get("addresses"),
            "abi": json.dumps(abi) if abi else None,
            "paused": bool(spec.get("paused", False)),
            "autotaskCondition": condition["autotaskId"] if condition else None,
            "autotaskTrigger": trigger["autotaskId"] if trigger else None,
            "alertThreshold": (
                {
                    "amount": threshold.get("amount"),
                    "windowSeconds": threshold.get("window-seconds"),
                }
                if threshold
                else None
            ),
            "alertTimeoutMs": notify_config.get("timeout"),
            "alertMessageBody": notify_config.get("message"),
            "notificationChannels": channels,
            "riskCategory": spec.get("risk-category"),
            "stackResourceId": identity,
        }

        if sentinel_type == "FORTA":
            payload.update(self._forta_fields(spec))
        else:
            payload.update(self._block_fields(spec))

        return drop_none(payload)

    def _block_fields(self, spec: Dict[str, Any]) -> Dict[str, Any]:
        conditions = spec.get("conditions") or {}
        return {
            "confirmLevel": spec.get("confirm-level"),
            "eventConditions": [
                drop_none(
                    {"eventSignature": c.get("signature"), "expression": c.get("expression")}
                )
                for c in conditions.get("event") or []
            ],
            "functionConditions": [
                drop_none(
                    {
                        "functionSignature": c.get("signature"),
                        "expression": c.get("expression"),
                    }
                )
                for c in conditions.get("function") or []
            ],
            "txCondition": conditions.get("transaction"),
        }

    def _forta_fields(self, spec: Dict[str, Any]) -> Dict[str, Any]:
        conditions = spec.get("conditions") or {}
        return {
            "agentIDs": spec.get("agent-ids"),
            "privateFortaNodeId": spec.get("forta-node-id"),
            "fortaConditions": drop_none(
                {
                    "alertIDs": conditions.get("alert-ids"),
                    "minimumScannerCount": conditions.get("min-scanner-count", 1),
                    "severity": conditions.get("severity"),
                }
            ),
        }

    async def update(
        self, declaration: LocalDeclaration, remote: Dict[str, Any]
    ) -> OperationResult:
        identity = remote["stackResourceId"]
        payload = self._payload_or_error(declaration, identity)
        if isinstance(payload, OperationResult):
            return payload

        updated = await self.client.update(remote["subscriberId"], payload)
        return OperationResult(
            name=updated.get("stackResourceId", identity),
            id=updated.get("subscriberId", remote["subscriberId"]),
            success=True,
            response=updated,
        )

    async def create(self, declaration: LocalDeclaration, identity: str) -> OperationResult:
        payload = self._payload_or_error(declaration, identity)
        if isinstance(payload, OperationResult):
            return payload

        created = await self.client.create(payload)
        return OperationResult(
            name=identity,
            id=created["subscriberId"],
            success=True,
            response=created,
        )

    async def remove(self, entries: List[Dict[str, Any]]) -> None:
        await asyncio.gather(*(self.client.delete(s["subscriberId"]) for s in entries))

    def _payload_or_error(self, declaration: LocalDeclaration, identity: str):
        try:
            return self.construct_sentinel(declaration.spec, identity)
        except UnresolvedReference as e:
            return OperationResult(name=identity, id="", success=False, error=str(e))
