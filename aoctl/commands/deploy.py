"""Application Deployment Command.

Deploys applications of the current affiliation. The command accepts a mixed
list of applications and environments; names may be shortened and are
searched for among the application deployment refs of the affiliation.
"""
import logging
from typing import List, Optional

import typer

from aoctl.commands.common import run_workflow
from aoctl.errors import AoctlError
from aoctl.modules.dispatch import Operation
from aoctl.modules.models import DeploySelection
from aoctl.modules.overrides import parse_overrides

logger = logging.getLogger("aoctl.deploy")


def deploy(
    ctx: typer.Context,
    applications: Optional[List[str]] = typer.Argument(
        None, help="Applications or environments to deploy, may be shortened"
    ),
    overrides: List[str] = typer.Option(
        [], '--overrides', '-o', help='Override in the form [env/]file:{<json override>}'
    ),
    deploy_all: bool = typer.Option(
        False, '--all', help='Deploy all applications of the affiliation'
    ),
    yes: bool = typer.Option(
        False, '--yes', '-y', '--no-prompt', help='Suppress prompts and accept the deploy'
    ),
    version: Optional[str] = typer.Option(
        None, '--version', '-v',
        help='Set the version of a single application before deploying it',
    ),
    affiliation: str = typer.Option('', '--affiliation', help='Overrides the logged in affiliation'),
    cluster: Optional[str] = typer.Option(None, '--cluster', '-c', help='Limit deploy to given cluster name'),
    excludes: List[str] = typer.Option(
        [], '--exclude', '-e', help='Regular expression of applications or environments to exclude'
    ),
    token: Optional[str] = typer.Option(None, '--token', help='Token used instead of the cluster tokens'),
) -> None:
    """Deploy applications for the current affiliation.

    Example:
        aoctl deploy dev/foo -o 'foo.json:{"replicas": 2}'
    """
    try:
        parsed_overrides = parse_overrides(overrides)
    except AoctlError as e:
        logger.error(f'❌ {e}')
        raise typer.Exit(1)

    selection = DeploySelection(
        search_terms=tuple(applications or ()),
        excludes=tuple(excludes),
        cluster=cluster,
        affiliation=affiliation,
        override_token=token,
        overrides=parsed_overrides,
        version=version,
        no_prompt=yes,
        deploy_all=deploy_all,
    )
    run_workflow(ctx, selection, Operation.DEPLOY)
