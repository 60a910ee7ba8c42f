"""Interactive confirmation and selection prompts."""
import logging
from typing import List, Optional, Sequence

import typer
from rich.console import Console
from rich.table import Table

from aoctl.errors import ValidationError
from aoctl.modules.models import DeploymentSpec, split_application_id

logger = logging.getLogger("aoctl.prompt")

console = Console()


def selection_table(specs: Sequence[DeploymentSpec]) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("CLUSTER")
    table.add_column("NAMESPACE")
    table.add_column("APPLICATION")
    for spec in sorted(specs, key=lambda s: s.name):
        table.add_row(spec.cluster, spec.namespace, spec.name)
    return table


def application_table(application_ids: Sequence[str]) -> Table:
    """Refs grouped by environment, the environment only printed once."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("ENVIRONMENT")
    table.add_column("APPLICATION")
    last = None
    for application_id in sorted(application_ids):
        env, app = split_application_id(application_id)
        table.add_row("" if env == last else env, app)
        last = env
    return table


def confirm_selection(
    specs: Sequence[DeploymentSpec],
    message: str,
    no_prompt: bool = False,
) -> bool:
    """Show the selection and ask whether to go ahead.

    A single application defaults to yes, anything larger needs an explicit yes.
    """
    console.print(selection_table(specs))
    if no_prompt:
        return True

    default = len(specs) == 1
    try:
        return typer.confirm(message, default=default)
    except typer.Abort:
        return False


def parse_indices(answer: str, count: int) -> List[int]:
    """Parse ``"1,3-4"`` into zero based indices below ``count``."""
    indices: List[int] = []
    for part in answer.replace(" ", "").split(","):
        if not part:
            continue
        start, sep, end = part.partition("-")
        try:
            first = int(start)
            last = int(end) if sep else first
        except ValueError as e:
            raise ValidationError(f"'{part}' is not a number or range") from e
        if first < 1 or last > count or first > last:
            raise ValidationError(f"'{part}' is outside 1-{count}")
        indices.extend(i - 1 for i in range(first, last + 1) if i - 1 not in indices)
    return indices


def select_matches(candidates: Sequence[str], message: Optional[str] = None) -> List[str]:
    """Let the user pick among the refs an ambiguous search matched."""
    candidates = sorted(candidates)
    console.print(application_table(candidates))

    if typer.confirm(message or f"Add all {len(candidates)} application(s)?", default=False):
        return list(candidates)

    for number, candidate in enumerate(candidates, 1):
        console.print(f"  [{number}] {candidate}")
    answer = typer.prompt("Which applications (e.g. 1,3-4)?", default="", show_default=False)
    selected = [candidates[i] for i in parse_indices(answer, len(candidates))]
    logger.debug(f"Selected {selected}")
    return selected
