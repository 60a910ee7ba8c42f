import logging
import sys
from typing import Optional

import typer

from aoctl.commands import apps, cluster, deploy, redeploy
from aoctl.commands.common import CliContext
from aoctl.config import Config
from aoctl.logging import setup_logger

app = typer.Typer(help="aoctl - deploy AuroraConfig applications to clusters")

# Global debug flag
debug_mode = False


# Configure logging
def setup_logging(debug: bool = False) -> logging.Logger:
    """Configure logging based on debug mode."""
    level = logging.DEBUG if debug else getattr(logging, Config.LOG_LEVEL, logging.INFO)
    return setup_logger("aoctl", level, log_file=Config.LOG_FILE or None)


# Add all commands
app.command("deploy")(deploy.deploy)
app.command("redeploy")(redeploy.redeploy)
app.command("apps")(apps.apps)
app.add_typer(cluster.app, name="cluster")


# Global options callback
@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
    config: Optional[str] = typer.Option(
        None, "--config", help="Config file, defaults to $AOCTL_CONFIG or ~/.aoctl.yaml"
    ),
):
    """aoctl - deploy and redeploy applications across clusters."""
    global debug_mode
    debug_mode = debug
    setup_logging(debug)
    try:
        Config.validate()
    except ValueError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1)
    ctx.obj = CliContext(config_path=config, debug=debug)
    if debug:
        logging.getLogger("aoctl").debug("Debug mode enabled")


if __name__ == "__main__":
    try:
        app()
    except Exception as e:
        logging.getLogger("aoctl").error(f"Error: {e}", exc_info=debug_mode)
        sys.exit(1)
