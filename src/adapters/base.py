"""
Resource Adapter Base - Abstract interface for reconciled resource kinds.

Each resource kind (secrets, contracts, relayers, ...) is an adapter over a
platform client. The reconciliation engine is generic over this interface
and never needs to know which kind it is driving.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from identity import compute_identity, find_equivalent, matches_identity

logger = logging.getLogger(__name__)


class UnresolvedReference(Exception):
    """Raised when a template entry references an entry not on Defender."""

    def __init__(self, kind: str, local_name: str):
        self.kind = kind
        self.local_name = local_name
        super().__init__(f"Referenced {kind} '{local_name}' was not found on Defender")


def drop_none(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of a payload without None-valued fields."""
    return {k: v for k, v in payload.items() if v is not None}


@dataclass(frozen=True)
class LocalDeclaration:
    """One template entry for a resource kind, keyed by its local name."""

    name: str
    spec: Any


@dataclass
class OperationResult:
    """Outcome of a create or update, returned instead of raised."""

    name: str
    id: str
    success: bool = False
    response: Any = None
    notice: Optional[str] = None
    error: Optional[str] = None


@dataclass
class DeployContext:
    """Per-run deployment settings shared by the engine and adapters."""

    stack: str
    ssot: bool = False


class ResourceAdapter(ABC):
    """
    Abstract base class for resource kind adapters.

    Adapters fetch remote state and perform exactly one remote mutation per
    create/update call. Kinds that implement ``remove`` take part in the
    deletion pass; kinds that do not are skipped by it.
    """

    def __init__(self, ctx: DeployContext):
        self.ctx = ctx

    @property
    def supports_remove(self) -> bool:
        """Whether this kind overrides ``remove``."""
        return type(self).remove is not ResourceAdapter.remove

    @property
    @abstractmethod
    def name(self) -> str:
        """Display name of the resource kind (e.g. 'Relayers')."""
        pass

    @abstractmethod
    async def fetch(self) -> List[Any]:
        """
        Fetch the current remote entries of this kind.

        Returns:
            List of remote entries as returned by the platform.
        """
        pass

    @abstractmethod
    async def create(
        self, declaration: LocalDeclaration, identity: str
    ) -> OperationResult:
        """
        Create the remote counterpart of a declaration.

        Args:
            declaration: The template entry.
            identity: Stable identity to stamp on the new remote entry.

        Returns:
            OperationResult describing the outcome.
        """
        pass

    @abstractmethod
    async def update(
        self, declaration: LocalDeclaration, remote: Any
    ) -> OperationResult:
        """
        Update a remote entry to match its declaration.

        Args:
            declaration: The template entry.
            remote: The matched remote entry.

        Returns:
            OperationResult describing the outcome.
        """
        pass

    async def remove(self, entries: List[Any]) -> None:
        """
        Remove remote entries that no longer appear in the template.

        Args:
            entries: Remote entries to delete, as one batch.
        """
        raise NotImplementedError(f"{self.name} cannot be removed")

    def match(self, remote: Any, declaration: LocalDeclaration) -> bool:
        """
        Decide whether a remote entry corresponds to a declaration.

        Defaults to stable identity equality. Overrides must keep a remote
        entry matching at most one declaration.
        """
        return matches_identity(remote, self.identity_for(declaration))

    def identity_for(self, declaration: LocalDeclaration) -> str:
        """Stable identity of a declaration within the current stack."""
        return compute_identity(self.ctx.stack, declaration.name)

    def describe(self, declaration: LocalDeclaration, remote: Any = None) -> str:
        """Label used in progress logs for a declaration."""
        if isinstance(remote, dict) and remote.get("stackResourceId"):
            return remote["stackResourceId"]
        return self.identity_for(declaration)

    def resolve(
        self, kind: str, local_name: Optional[str], remote_entries: Iterable[Any]
    ) -> Optional[Dict[str, Any]]:
        """
        Resolve a reference to another template entry by its local name.

        Returns:
            The referenced remote entry, or None if ``local_name`` is empty.

        Raises:
            UnresolvedReference: If the referenced entry is not deployed.
        """
        if not local_name:
            return None
        entry = find_equivalent(self.ctx.stack, local_name, remote_entries)
        if entry is None:
            raise UnresolvedReference(kind, local_name)
        return entry
