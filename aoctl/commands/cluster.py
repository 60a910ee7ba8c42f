import typer
from rich.console import Console
from rich.table import Table

from aoctl.commands.common import get_context
from aoctl.config import load_config, save_config
from aoctl.errors import AoctlError
from aoctl.modules.registry import ClusterRegistry, register_cluster

cluster_app = typer.Typer(help="Inspect and register deploy clusters")
console = Console()


def _load_registry(ctx: typer.Context) -> ClusterRegistry:
    try:
        return ClusterRegistry.from_config(load_config(get_context(ctx).config_path))
    except AoctlError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1)


@cluster_app.command("list")
def list_clusters(ctx: typer.Context):
    """List all registered clusters."""
    registry = _load_registry(ctx)
    table = Table(show_header=True, header_style="bold")
    table.add_column("CLUSTER")
    table.add_column("URL")
    table.add_column("REACHABLE")
    for cluster in registry:
        reachable = "[green]yes[/green]" if cluster.reachable else "[red]no[/red]"
        table.add_row(cluster.name, cluster.url, reachable)
    console.print(table)


@cluster_app.command("get")
def get_cluster(ctx: typer.Context, name: str = typer.Option(..., help="Cluster name")):
    """Show one cluster."""
    cluster = _load_registry(ctx).get(name)
    if cluster is None:
        typer.echo(f"❌ Cluster '{name}' not found.", err=True)
        raise typer.Exit(1)
    typer.echo(f"{cluster.name}: url={cluster.url} reachable={cluster.reachable}")


@cluster_app.command("register")
def register(
    ctx: typer.Context,
    name: str = typer.Option(..., help="Cluster name"),
    url: str = typer.Option(..., help="Base URL of the deploy API on the cluster"),
    token: str = typer.Option("", help="Bearer token for the cluster"),
    reachable: bool = typer.Option(True, "--reachable/--unreachable", help="Whether deploys may target it"),
):
    """Add or replace a cluster in the config file."""
    config_path = get_context(ctx).config_path
    try:
        config = register_cluster(load_config(config_path), name, url, token, reachable)
    except AoctlError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1)
    path = save_config(config, config_path)
    typer.echo(f"✅ Registered cluster {name} in {path}")


app = cluster_app
