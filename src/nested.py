"""
Nested Collection Reconciler - child collections owned by a parent resource.

Used from a parent's update (and create) to converge a child collection,
such as a relayer's API keys. Child identities are derived from the parent's
identity, so keys of different relayers never collide.

Deletes and creates are each issued as one concurrent batch. A failure in a
batch propagates to the caller; there is no separate isolation boundary.
"""

import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from identity import compute_identity, matches_identity
from keystore import KeyStore
from report import DeployOutput

logger = logging.getLogger(__name__)

# (child identity) -> created child payload
CreateChild = Callable[[str], Awaitable[Dict[str, Any]]]
# (remote child) -> None
DeleteChild = Callable[[Dict[str, Any]], Awaitable[None]]


class NestedCollectionReconciler:
    """Reconciles one parent's child collection against declared child names."""

    def __init__(self, ssot: bool, keystore: Optional[KeyStore] = None):
        self.ssot = ssot
        self.keystore = keystore

    async def reconcile(
        self,
        parent_identity: str,
        remote_children: List[Dict[str, Any]],
        declared_names: Optional[List[str]],
        create_child: CreateChild,
        delete_child: DeleteChild,
        output: DeployOutput,
    ) -> None:
        """
        Delete undeclared children (SSOT only) and create missing ones.

        Args:
            parent_identity: Stable identity of the parent resource.
            remote_children: Current remote children of the parent.
            declared_names: Child names declared in the template.
            create_child: Creates one child given its identity.
            delete_child: Deletes one remote child.
            output: Nested output to record removed/created children in.
        """
        declared = [
            compute_identity(parent_identity, name) for name in declared_names or []
        ]

        to_delete = [
            child
            for child in remote_children
            if not any(matches_identity(child, identity) for identity in declared)
        ]
        if self.ssot and to_delete:
            logger.info("Unused API keys found on Defender:")
            logger.info(json.dumps(to_delete, indent=2, default=str))
            await asyncio.gather(*(delete_child(child) for child in to_delete))
            logger.info(f"Removed {len(to_delete)} API keys from Defender")
            output.removed.extend(to_delete)

        to_create = [
            identity
            for identity in declared
            if not any(matches_identity(child, identity) for child in remote_children)
        ]
        if to_create:
            await asyncio.gather(
                *(self._create(identity, create_child, output) for identity in to_create)
            )

    async def _create(
        self, identity: str, create_child: CreateChild, output: DeployOutput
    ) -> None:
        created = await create_child(identity)
        logger.info(f"Created API Key ({identity})")
        if self.keystore is not None:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, self.keystore.save, identity, created)
        output.created.append(created)
