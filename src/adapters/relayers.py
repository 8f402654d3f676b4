"""
Relayers Adapter - relayers and their API keys.

Relayers are never removed by a deploy: deleting one requires manual
interaction on Defender, so the deletion pass is skipped for this kind.
API keys declared under a relayer are reconciled as a nested collection.
"""

import logging
from typing import Any, Dict, List, Optional

from adapters.base import (
    DeployContext,
    LocalDeclaration,
    OperationResult,
    ResourceAdapter,
    UnresolvedReference,
    drop_none,
)
from clients.relay import RelayClient
from keystore import KeyStore
from nested import NestedCollectionReconciler
from report import DeployOutput

logger = logging.getLogger(__name__)


def relayer_policies(spec: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    policy = spec.get("policy")
    if not policy:
        return None
    return drop_none(
        {
            "whitelistReceivers": policy.get("whitelist-receivers"),
            "gasPriceCap": policy.get("gas-price-cap"),
            "EIP1559Pricing": policy.get("eip1559-pricing"),
        }
    )


class RelayersAdapter(ResourceAdapter):
    """Adapter for relayers, including their nested API keys."""

    def __init__(
        self,
        ctx: DeployContext,
        client: RelayClient,
        key_output: DeployOutput,
        keystore: Optional[KeyStore] = None,
    ):
        super().__init__(ctx)
        self.client = client
        self.key_output = key_output
        self.keys = NestedCollectionReconciler(ssot=ctx.ssot, keystore=keystore)

    @property
    def name(self) -> str:
        return "Relayers"

    async def fetch(self) -> List[Dict[str, Any]]:
        return (await self.client.list()).get("items", [])

    async def update(
        self, declaration: LocalDeclaration, remote: Dict[str, Any]
    ) -> OperationResult:
        spec = declaration.spec
        relayer_id = remote["relayerId"]
        updated = await self.client.update(
            relayer_id,
            drop_none(
                {
                    "name": spec.get("name"),
                    "minBalance": spec.get("min-balance"),
                    "policies": relayer_policies(spec),
                }
            ),
        )

        existing_keys = await self.client.list_keys(relayer_id)
        await self._reconcile_keys(
            relayer_id, remote["stackResourceId"], existing_keys, spec
        )

        return OperationResult(
            name=updated.get("stackResourceId", remote["stackResourceId"]),
            id=updated.get("relayerId", relayer_id),
            success=True,
            response=updated,
        )

    async def create(self, declaration: LocalDeclaration, identity: str) -> OperationResult:
        spec = declaration.spec
        try:
            source = self.resolve(
                "relayer", spec.get("address-from-relayer"), await self.fetch()
            )
        except UnresolvedReference as e:
            return OperationResult(name=identity, id="", success=False, error=str(e))

        created = await self.client.create(
            drop_none(
                {
                    "name": spec.get("name"),
                    "network": spec.get("network"),
                    "minBalance": spec.get("min-balance"),
                    "useAddressFromRelayerId": source["relayerId"] if source else None,
                    "policies": relayer_policies(spec),
                    "stackResourceId": identity,
                }
            )
        )

        await self._reconcile_keys(created["relayerId"], identity, [], spec)

        return OperationResult(
            name=identity,
            id=created["relayerId"],
            success=True,
            response=created,
        )

    async def _reconcile_keys(
        self,
        relayer_id: str,
        relayer_identity: str,
        existing_keys: List[Dict[str, Any]],
        spec: Dict[str, Any],
    ) -> None:
        async def create_key(key_identity: str) -> Dict[str, Any]:
            return await self.client.create_key(relayer_id, key_identity)

        async def delete_key(key: Dict[str, Any]) -> None:
            await self.client.delete_key(relayer_id, key["keyId"])

        await self.keys.reconcile(
            parent_identity=relayer_identity,
            remote_children=existing_keys,
            declared_names=spec.get("api-keys"),
            create_child=create_key,
            delete_child=delete_key,
            output=self.key_output,
        )
