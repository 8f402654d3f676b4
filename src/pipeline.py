"""
Deployment Pipeline - deploys every resource kind of a template in order.

Kinds run one after another because later kinds reference ids produced by
earlier ones:

    secrets -> contracts -> relayers (+ keys) -> autotasks
            -> notifications -> sentinels

A failing kind never stops the pipeline; the report is always produced.
"""

import logging
from typing import List, Optional, Tuple

from adapters import (
    AutotasksAdapter,
    ContractsAdapter,
    DeployContext,
    NotificationsAdapter,
    RelayersAdapter,
    ResourceAdapter,
    SecretsAdapter,
    SentinelsAdapter,
)
from clients import AdminClient, AutotaskClient, RelayClient, SentinelClient
from config import Config, DeployConfig
from engine import ReconciliationEngine
from keystore import KeyStore
from report import DeployOutput, DeployReport, append_deployment_log
from template import Template

logger = logging.getLogger(__name__)


def build_adapters(
    ctx: DeployContext,
    config: Config,
    report: DeployReport,
) -> List[Tuple[str, ResourceAdapter, DeployOutput]]:
    """
    Build the six adapters in deploy order, each paired with its output.

    Returns:
        List of ``(kind, adapter, output)`` tuples.
    """
    autotask_client = AutotaskClient(config.defender)
    relay_client = RelayClient(config.defender)
    sentinel_client = SentinelClient(config.defender)
    admin_client = AdminClient(config.defender)
    keystore = KeyStore(config.deploy.keys_dir)

    return [
        ("secrets", SecretsAdapter(ctx, autotask_client), report.secrets),
        ("contracts", ContractsAdapter(ctx, admin_client), report.contracts),
        (
            "relayers",
            RelayersAdapter(
                ctx, relay_client, report.relayers.relayer_keys, keystore=keystore
            ),
            report.relayers,
        ),
        (
            "autotasks",
            AutotasksAdapter(ctx, autotask_client, relay_client),
            report.autotasks,
        ),
        (
            "notifications",
            NotificationsAdapter(ctx, sentinel_client),
            report.notifications,
        ),
        (
            "sentinels",
            SentinelsAdapter(ctx, sentinel_client, autotask_client),
            report.sentinels,
        ),
    ]


class DeploymentPipeline:
    """Runs one reconciliation pass per resource kind and reports on all."""

    def __init__(self, template: Template, config: Config):
        self.template = template
        self.config = config
        self.ctx = DeployContext(
            stack=template.stack,
            ssot=template.ssot,
        )
        self.engine = ReconciliationEngine(self.ctx)

    async def deploy(
        self,
        adapters: Optional[List[Tuple[str, ResourceAdapter, DeployOutput]]] = None,
        report: Optional[DeployReport] = None,
    ) -> DeployReport:
        """
        Deploy all resource kinds and return the aggregate report.

        Args:
            adapters: Adapters to run, in order. Defaults to the six
                platform adapters from ``build_adapters``.
            report: Report to fill in. Must be the report the adapters'
                outputs belong to when ``adapters`` is given.

        Returns:
            The aggregate DeployReport.
        """
        report = report or DeployReport(stack=self.ctx.stack)
        if adapters is None:
            adapters = build_adapters(self.ctx, self.config, report)

        logger.info("=" * 56)
        logger.info(
            f"Running Defender Deploy on stack: {self.ctx.stack}"
            f" (ssot={'on' if self.ctx.ssot else 'off'})"
        )

        for kind, adapter, output in adapters:
            await self.engine.reconcile(
                adapter, self.template.declarations(kind), output
            )

        logger.info("=" * 56)
        return report


def write_report(report: DeployReport, deploy_config: DeployConfig) -> str:
    """
    Append a report to its stack's deployment log.

    Returns:
        The log file path.
    """
    path = deploy_config.deployment_log_path(report.stack)
    append_deployment_log(path, report)
    return path
