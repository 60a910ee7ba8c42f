"""Helpers shared by the deploy and redeploy commands."""
import logging
from dataclasses import dataclass, replace
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from aoctl.config import AOConfig, load_config
from aoctl.errors import AoctlError, ConfigurationError, UserCancelledError
from aoctl.modules.client import APIClient
from aoctl.modules.dispatch import Operation
from aoctl.modules.models import AggregateOutcome, DeploySelection
from aoctl.modules.registry import ClusterRegistry
from aoctl.modules.workflow import DeployWorkflow

logger = logging.getLogger("aoctl.commands")

console = Console()

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_NOTHING_TO_DO = 3


@dataclass(frozen=True)
class CliContext:
    """Global options, stored on ``ctx.obj`` by the root callback."""
    config_path: Optional[str] = None
    debug: bool = False


def get_context(ctx: typer.Context) -> CliContext:
    return ctx.obj if isinstance(ctx.obj, CliContext) else CliContext()


def default_api_client(config: AOConfig, registry: ClusterRegistry, selection: DeploySelection) -> APIClient:
    """Client used to resolve applications: the given cluster's API or the configured one."""
    token = selection.override_token or config.token
    if selection.cluster:
        cluster = registry.get(selection.cluster)
        if cluster is None:
            raise ConfigurationError(f"No such cluster {selection.cluster}")
        if not cluster.reachable:
            raise ConfigurationError(f"{selection.cluster} cluster is not reachable")
        return APIClient(cluster.url, selection.override_token or cluster.token, selection.affiliation)

    if not config.api_url:
        raise ConfigurationError("No API URL configured, set api_url in the config file or AOCTL_API_URL")
    return APIClient(config.api_url, token, selection.affiliation)


def results_table(outcome: AggregateOutcome, operation: Operation) -> Table:
    done = "Deployed" if operation is Operation.DEPLOY else "Redeployed"
    table = Table(show_header=True, header_style="bold")
    for column in ("STATUS", "APPLICATION", "NAMESPACE", "CLUSTER", "DEPLOY_ID", "MESSAGE"):
        table.add_column(column)
    for result in outcome.results:
        status = f"[green]{done}[/green]" if result.success else "[red]Failed[/red]"
        table.add_row(
            status, result.name, result.namespace, result.cluster,
            result.deploy_id, result.reason,
        )
    return table


def run_workflow(ctx: typer.Context, selection: DeploySelection, operation: Operation) -> None:
    """Run a workflow for the CLI and exit with a code derived from its outcome."""
    cli = get_context(ctx)
    try:
        config = load_config(cli.config_path)
        if not selection.affiliation:
            selection = replace(selection, affiliation=config.affiliation)
        registry = ClusterRegistry.from_config(config)
        api = default_api_client(config, registry, selection)
        outcome = DeployWorkflow(api, registry).run(selection, operation)
    except UserCancelledError as e:
        console.print(str(e))
        raise typer.Exit(EXIT_NOTHING_TO_DO)
    except AoctlError as e:
        logger.error(f"❌ {operation.value.capitalize()} failed: {e}", exc_info=cli.debug)
        raise typer.Exit(EXIT_FAILED)

    if outcome.is_empty:
        console.print(f"No applications to {operation.value}")
        raise typer.Exit(EXIT_NOTHING_TO_DO)

    console.print(results_table(outcome, operation))
    if not outcome.success:
        logger.error(f"❌ {len(outcome.failed)} of {len(outcome.results)} {operation.value}(s) failed")
        raise typer.Exit(EXIT_FAILED)

    logger.info(f"✅ {operation.value.capitalize()} of {len(outcome.results)} application(s) succeeded")
