"""
Resource adapters package.

One adapter per reconciled resource kind, all implementing ResourceAdapter.
"""

from adapters.autotasks import AutotasksAdapter
from adapters.base import (
    DeployContext,
    LocalDeclaration,
    OperationResult,
    ResourceAdapter,
    UnresolvedReference,
)
from adapters.contracts import ContractsAdapter
from adapters.notifications import NotificationsAdapter
from adapters.relayers import RelayersAdapter
from adapters.secrets import SecretsAdapter
from adapters.sentinels import SentinelsAdapter

__all__ = [
    "AutotasksAdapter",
    "ContractsAdapter",
    "DeployContext",
    "LocalDeclaration",
    "NotificationsAdapter",
    "OperationResult",
    "RelayersAdapter",
    "ResourceAdapter",
    "SecretsAdapter",
    "SentinelsAdapter",
    "UnresolvedReference",
]
