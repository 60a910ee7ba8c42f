import logging
from typing import Optional

import typer
from rich.console import Console

from aoctl.commands.common import default_api_client, get_context
from aoctl.config import load_config
from aoctl.errors import AoctlError
from aoctl.modules.fuzzy import find_matches
from aoctl.modules.models import DeploySelection
from aoctl.modules.prompt import application_table
from aoctl.modules.registry import ClusterRegistry

logger = logging.getLogger("aoctl.apps")
console = Console()


def apps(
    ctx: typer.Context,
    search: Optional[str] = typer.Argument(None, help="Only show refs containing this term"),
    affiliation: str = typer.Option('', '--affiliation', help='Overrides the logged in affiliation'),
):
    """List the application deployment refs of the affiliation."""
    cli = get_context(ctx)
    try:
        config = load_config(cli.config_path)
        selection = DeploySelection(affiliation=affiliation or config.affiliation)
        api = default_api_client(config, ClusterRegistry.from_config(config), selection)
        refs = api.get_file_names().application_deployment_refs()
    except AoctlError as e:
        logger.error(f"❌ {e}", exc_info=cli.debug)
        raise typer.Exit(1)

    if search:
        refs = find_matches(search, refs)
    console.print(application_table(refs))
