"""In-memory stand-ins for Defender used across the test suite."""

import itertools
from typing import Any, Dict, List, Optional, Set

from adapters.base import DeployContext, LocalDeclaration, OperationResult, ResourceAdapter


class InMemoryAdapter(ResourceAdapter):
    """Adapter over a list of remote dicts, with failure injection."""

    def __init__(
        self,
        ctx: DeployContext,
        remote: Optional[List[Dict[str, Any]]] = None,
        kind: str = "Widgets",
        fail_results: Optional[Set[str]] = None,
        raise_on: Optional[Set[str]] = None,
        fetch_error: Optional[Exception] = None,
        removable: bool = True,
    ):
        super().__init__(ctx)
        self.remote = list(remote or [])
        self.kind = kind
        self.fail_results = fail_results or set()
        self.raise_on = raise_on or set()
        self.fetch_error = fetch_error
        self.removable = removable
        self.fetch_count = 0
        self.calls: List[tuple] = []
        self._ids = itertools.count(1)

    @property
    def name(self) -> str:
        return self.kind

    @property
    def supports_remove(self) -> bool:
        return self.removable

    async def fetch(self) -> List[Dict[str, Any]]:
        self.fetch_count += 1
        if self.fetch_error is not None:
            raise self.fetch_error
        return [dict(entry) for entry in self.remote]

    async def create(self, declaration: LocalDeclaration, identity: str) -> OperationResult:
        self.calls.append(("create", declaration.name))
        if declaration.name in self.raise_on:
            raise RuntimeError(f"boom creating {declaration.name}")
        if declaration.name in self.fail_results:
            return OperationResult(
                name=identity, id="", success=False, error=f"rejected {declaration.name}"
            )
        entry = {
            "id": f"{self.kind.lower()}-{next(self._ids)}",
            "stackResourceId": identity,
            "spec": declaration.spec,
        }
        self.remote.append(entry)
        return OperationResult(name=identity, id=entry["id"], success=True, response=entry)

    async def update(
        self, declaration: LocalDeclaration, remote: Dict[str, Any]
    ) -> OperationResult:
        self.calls.append(("update", declaration.name))
        if declaration.name in self.raise_on:
            raise RuntimeError(f"boom updating {declaration.name}")
        if declaration.name in self.fail_results:
            return OperationResult(
                name=remote.get("stackResourceId", ""),
                id=remote["id"],
                success=False,
                error=f"rejected {declaration.name}",
            )
        for entry in self.remote:
            if entry["id"] == remote["id"]:
                entry["spec"] = declaration.spec
                return OperationResult(
                    name=entry.get("stackResourceId", ""),
                    id=entry["id"],
                    success=True,
                    response=dict(entry),
                )
        raise AssertionError("updated entry vanished")

    async def remove(self, entries: List[Dict[str, Any]]) -> None:
        self.calls.append(("remove", [e["id"] for e in entries]))
        ids = {e["id"] for e in entries}
        self.remote = [e for e in self.remote if e["id"] not in ids]


class FakeRelayClient:
    """Relay service double keeping relayers and keys in memory."""

    def __init__(self):
        self.relayers: List[Dict[str, Any]] = []
        self.keys: Dict[str, List[Dict[str, Any]]] = {}
        self._ids = itertools.count(1)

    async def list(self) -> Dict[str, Any]:
        return {"items": [dict(r) for r in self.relayers]}

    async def create(self, relayer: Dict[str, Any]) -> Dict[str, Any]:
        created = {**relayer, "relayerId": f"relayer-{next(self._ids)}"}
        self.relayers.append(created)
        self.keys[created["relayerId"]] = []
        return dict(created)

    async def update(self, relayer_id: str, relayer: Dict[str, Any]) -> Dict[str, Any]:
        for existing in self.relayers:
            if existing["relayerId"] == relayer_id:
                existing.update(relayer)
                return dict(existing)
        raise KeyError(relayer_id)

    async def list_keys(self, relayer_id: str) -> List[Dict[str, Any]]:
        return [dict(k) for k in self.keys.get(relayer_id, [])]

    async def create_key(self, relayer_id: str, stack_resource_id: str) -> Dict[str, Any]:
        key = {
            "keyId": f"key-{next(self._ids)}",
            "relayerId": relayer_id,
            "stackResourceId": stack_resource_id,
            "apiKey": "k",
            "secretKey": "s",
        }
        self.keys.setdefault(relayer_id, []).append(key)
        return dict(key)

    async def delete_key(self, relayer_id: str, key_id: str) -> None:
        self.keys[relayer_id] = [
            k for k in self.keys.get(relayer_id, []) if k["keyId"] != key_id
        ]
