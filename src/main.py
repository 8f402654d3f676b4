#!/usr/bin/env python3
"""
Main entry point for the Defender stack deployer.

Provides a command line interface to deploy a template, validate it
without touching Defender, and inspect a stack's deployment history.
"""

import asyncio
import logging

import click
from tabulate import tabulate

from config import ConfigError, get_config
from pipeline import DeploymentPipeline, write_report
from report import read_deployment_log
from template import RESOURCE_KINDS, TemplateError, load_template

logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@click.group()
def cli():
    """Defender Deploy - reconcile a Defender stack with its template"""
    setup_logging(get_config().deploy.log_level)


@cli.command()
@click.argument("filename", type=click.Path(exists=True, dir_okay=False))
@click.option("--stage", "-s", default=None, help="Override provider.stage")
@click.option(
    "--ssot/--no-ssot",
    default=None,
    help="Treat the template as single source of truth (enables removals)",
)
def deploy(filename, stage, ssot):
    """Deploy a template to Defender"""
    config = get_config()

    try:
        config.defender.require_credentials()
        template = load_template(filename, stage=stage, ssot=ssot)
    except (ConfigError, TemplateError) as e:
        raise click.ClickException(str(e))

    pipeline = DeploymentPipeline(template, config)
    report = asyncio.run(pipeline.deploy())

    click.echo(report.to_json())
    path = write_report(report, config.deploy)
    logger.info(f"Deployment recorded in {path}")


@cli.command()
@click.argument("filename", type=click.Path(exists=True, dir_okay=False))
@click.option("--stage", "-s", default=None, help="Override provider.stage")
def validate(filename, stage):
    """Validate a template without deploying it"""
    try:
        template = load_template(filename, stage=stage)
    except TemplateError as e:
        raise click.ClickException(str(e))

    click.echo(f"Stack: {template.stack}")
    click.echo(f"Single source of truth: {'yes' if template.ssot else 'no'}")
    rows = []
    for kind in RESOURCE_KINDS:
        names = [d.name for d in template.declarations(kind)]
        rows.append([kind, len(names), ", ".join(names)])
    click.echo(tabulate(rows, headers=["Kind", "Count", "Names"], tablefmt="grid"))


@cli.command()
@click.argument("stack")
@click.option("--limit", "-l", default=10, help="Number of history entries to show")
def history(stack, limit):
    """Show deployment history for a stack"""
    config = get_config()
    records = read_deployment_log(config.deploy.deployment_log_path(stack), limit)

    if not records:
        click.echo(f"No deployments recorded for stack {stack}")
        return

    # created/updated/removed per kind
    headers = ["Time"] + [kind.capitalize() for kind in RESOURCE_KINDS]
    rows = []
    for record in records:
        row = [record.get("timestamp", "N/A")]
        for kind in RESOURCE_KINDS:
            output = record.get(kind, {})
            row.append(
                f"+{len(output.get('created', []))} "
                f"~{len(output.get('updated', []))} "
                f"-{len(output.get('removed', []))}"
            )
        rows.append(row)

    click.echo(tabulate(rows, headers=headers, tablefmt="grid"))


if __name__ == "__main__":
    cli()
