"""Redeploy running application deployments."""
import logging
from typing import List, Optional

import typer

from aoctl.commands.common import run_workflow
from aoctl.errors import AoctlError
from aoctl.modules.dispatch import Operation
from aoctl.modules.fuzzy import join_search_args
from aoctl.modules.models import DeploySelection

logger = logging.getLogger("aoctl.redeploy")


def redeploy(
    ctx: typer.Context,
    refs: List[str] = typer.Argument(
        ..., help="<env> <app>, or a single search term for application deployment refs"
    ),
    cluster: Optional[str] = typer.Option(None, '--cluster', '-c', help='Limit redeploy to given cluster name'),
    yes: bool = typer.Option(
        False, '--yes', '-y', '--no-prompt', help='Suppress prompts and accept redeploy'
    ),
    excludes: List[str] = typer.Option(
        [], '--exclude', '-e', help='Select applications or environments to exclude from redeploy'
    ),
    affiliation: str = typer.Option('', '--affiliation', help='Overrides the logged in affiliation', hidden=True),
    token: Optional[str] = typer.Option(None, '--token', help='Token used instead of the cluster tokens'),
) -> None:
    """Redeploy running application deployment(s) with the given reference."""
    try:
        search = join_search_args(refs)
    except AoctlError as e:
        logger.error(f'❌ {e}')
        raise typer.Exit(1)

    selection = DeploySelection(
        search_terms=(search,),
        excludes=tuple(excludes),
        cluster=cluster,
        affiliation=affiliation,
        override_token=token,
        no_prompt=yes,
    )
    run_workflow(ctx, selection, Operation.REDEPLOY)
