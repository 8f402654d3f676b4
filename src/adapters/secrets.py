"""
Secrets Adapter - team secrets shared by autotasks.

Secrets are listed by name only, so they are matched by their local name
rather than by stack identity. Create and update are both an upsert.
"""

from typing import Any, List

from adapters.base import DeployContext, LocalDeclaration, OperationResult, ResourceAdapter
from clients.autotask import AutotaskClient, secret_names


class SecretsAdapter(ResourceAdapter):
    """Adapter for team secrets."""

    def __init__(self, ctx: DeployContext, client: AutotaskClient):
        super().__init__(ctx)
        self.client = client

    @property
    def name(self) -> str:
        return "Secrets"

    async def fetch(self) -> List[str]:
        return secret_names(await self.client.list_secrets())

    def match(self, remote: Any, declaration: LocalDeclaration) -> bool:
        return remote == declaration.name

    def describe(self, declaration: LocalDeclaration, remote: Any = None) -> str:
        return declaration.name

    async def update(self, declaration: LocalDeclaration, remote: str) -> OperationResult:
        return await self._upsert(remote, declaration.spec)

    async def create(self, declaration: LocalDeclaration, identity: str) -> OperationResult:
        return await self._upsert(declaration.name, declaration.spec)

    async def remove(self, entries: List[str]) -> None:
        await self.client.create_secrets({"deletes": list(entries), "secrets": {}})

    async def _upsert(self, secret_name: str, value: Any) -> OperationResult:
        entry = {secret_name: value}
        await self.client.create_secrets({"deletes": [], "secrets": entry})
        return OperationResult(
            name="Secret",
            id=secret_name,
            success=True,
            response=entry,
        )
