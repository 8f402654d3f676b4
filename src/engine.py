"""
Reconciliation Engine - converges one resource kind toward the template.

For one kind at a time: fetch remote state, remove remote entries the
template no longer declares (SSOT only), then create or update every
declaration in template order. Failures are isolated to the kind.
"""

import json
import logging
from typing import Any, List, Optional

from adapters.base import DeployContext, LocalDeclaration, OperationResult, ResourceAdapter
from clients.base import DefenderAPIError
from report import DeployOutput

logger = logging.getLogger(__name__)


def extract_error_message(error: BaseException) -> Optional[str]:
    """
    Extract the platform's message from a structured API fault.

    Returns:
        The message, or None when the error carries no recognised envelope.
    """
    if isinstance(error, DefenderAPIError):
        return error.message
    return None


class ReconciliationEngine:
    """Drives one resource adapter through a reconciliation pass."""

    def __init__(self, ctx: DeployContext):
        self.ctx = ctx

    async def reconcile(
        self,
        adapter: ResourceAdapter,
        declarations: List[LocalDeclaration],
        output: DeployOutput,
    ) -> DeployOutput:
        """
        Reconcile one resource kind.

        Never raises: any error aborts this kind only. Entries already
        recorded in ``output`` are kept.

        Args:
            adapter: The resource kind adapter.
            declarations: Template entries of this kind, in template order.
            output: Output to record removed/created/updated responses in.

        Returns:
            The same ``output``.
        """
        try:
            logger.info(
                f"Initialising deployment of {adapter.name} on stack {self.ctx.stack}"
            )
            existing = await adapter.fetch()

            # only remove if template is the single source of truth
            if self.ctx.ssot and adapter.supports_remove:
                await self._remove_unmatched(adapter, declarations, existing, output)

            for declaration in declarations:
                # refresh every iteration; later entries may depend on earlier ones
                existing = await adapter.fetch()
                match = self._find_match(adapter, declaration, existing)

                if match is not None:
                    logger.info(f"Updating {adapter.describe(declaration, match)}")
                    result = await adapter.update(declaration, match)
                    self._record(result, "Updated", output.updated)
                else:
                    identity = adapter.identity_for(declaration)
                    logger.info(f"Creating {adapter.describe(declaration)}")
                    result = await adapter.create(declaration, identity)
                    self._record(result, "Created", output.created)

        except Exception as e:
            message = extract_error_message(e)
            if message:
                logger.error(f"{adapter.name}: {message}")
            else:
                logger.error(f"{adapter.name}: {e}", exc_info=True)

        return output

    def _find_match(
        self,
        adapter: ResourceAdapter,
        declaration: LocalDeclaration,
        existing: List[Any],
    ) -> Optional[Any]:
        for remote in existing:
            if adapter.match(remote, declaration):
                return remote
        return None

    async def _remove_unmatched(
        self,
        adapter: ResourceAdapter,
        declarations: List[LocalDeclaration],
        existing: List[Any],
        output: DeployOutput,
    ) -> None:
        unmatched = [
            remote
            for remote in existing
            if not any(adapter.match(remote, d) for d in declarations)
        ]
        if not unmatched:
            return

        logger.info(f"Unused {adapter.name} found on Defender:")
        logger.info(json.dumps(unmatched, indent=2, default=str))
        logger.info(f"Removing {adapter.name} from Defender")
        await adapter.remove(unmatched)
        logger.info(f"Removed {len(unmatched)} {adapter.name} from Defender")
        output.removed.extend(unmatched)

    def _record(
        self, result: OperationResult, verb: str, recorded: List[Any]
    ) -> None:
        if result.success:
            logger.info(f"{verb} {result.name} ({result.id})")
            recorded.append(result.response)
        if result.notice:
            logger.info(result.notice)
        if result.error:
            logger.error(result.error)
