"""Deploy and redeploy workflows.

This module wires the pipeline together:

    search terms -> resolve -> fetch specs -> partition -> confirm
                 -> dispatch -> aggregate

Everything up to the confirmation is synchronous and fatal on error. Once
dispatch starts, failures only show up as failed results.
"""
import logging
from dataclasses import replace
from typing import Callable, List, Optional, Sequence

from aoctl.errors import (
    AmbiguousError,
    ConfigurationError,
    TransportError,
    UserCancelledError,
    ValidationError,
)
from aoctl.modules import fuzzy
from aoctl.modules.client import APIClient, JsonPatchOp
from aoctl.modules.dispatch import ClientFactory, Operation, dispatch
from aoctl.modules.filenames import FileNames
from aoctl.modules.models import AggregateOutcome, DeploymentSpec, DeploySelection
from aoctl.modules.partition import create_partitions
from aoctl.modules.prompt import confirm_selection, select_matches
from aoctl.modules.results import aggregate
from aoctl.modules.registry import ClusterRegistry
from aoctl.utils import unique

logger = logging.getLogger("aoctl.workflow")

ConfirmFn = Callable[[Sequence[DeploymentSpec], str, bool], bool]
SelectFn = Callable[[Sequence[str]], List[str]]


class DeployWorkflow:
    """Runs one deploy or redeploy invocation."""

    def __init__(
        self,
        api: APIClient,
        registry: ClusterRegistry,
        get_client: Optional[ClientFactory] = None,
        confirm: ConfirmFn = confirm_selection,
        select: SelectFn = select_matches,
    ):
        """Initialize the workflow.

        Args:
            api: Client for the default API, used to resolve applications
            registry: Known clusters
            get_client: Builds the client used for each partition
            confirm: Confirmation gate
            select: Interactive pick among ambiguous matches
        """
        self.api = api
        self.registry = registry
        self.get_client = get_client
        self.confirm = confirm
        self.select = select

    def validate(self, selection: DeploySelection) -> None:
        """Checks that need no network access."""
        if selection.cluster and selection.cluster not in self.registry:
            raise ConfigurationError(f"No such cluster {selection.cluster}")
        fuzzy.compile_patterns(selection.excludes)
        if not selection.search_terms and not selection.deploy_all:
            raise ValidationError("No applications given")

    def resolve(self, selection: DeploySelection, file_names: FileNames) -> List[str]:
        """Resolve the search terms to application deployment refs."""
        candidates = file_names.application_deployment_refs()

        if selection.deploy_all:
            selected = list(candidates)
        else:
            selected = []
            for term in selection.search_terms:
                try:
                    selected.extend(
                        fuzzy.resolve(term, candidates, all_matches=selection.no_prompt)
                    )
                except AmbiguousError as e:
                    logger.debug(str(e))
                    selected.extend(self.select(e.candidates))

        return fuzzy.exclude(unique(selected), selection.excludes)

    def fetch_specs(self, selection: DeploySelection, application_ids: Sequence[str]) -> List[DeploymentSpec]:
        specs = self.api.get_deployment_specs(application_ids)
        if len(specs) != len(application_ids):
            raise TransportError(
                f"Expected {len(application_ids)} deployment spec(s), got {len(specs)}"
            )
        # One spec per requested ref, in request order
        specs = [replace(spec, ref=ref) for spec, ref in zip(specs, application_ids)]
        if selection.cluster:
            specs = [spec for spec in specs if spec.cluster == selection.cluster]
        return specs

    def update_version(self, selection: DeploySelection, specs: Sequence[DeploymentSpec], file_names: FileNames) -> None:
        """Set ``/version`` in the application file before deploying it."""
        file_name = file_names.find(specs[0].application_id)
        logger.info(f"Setting version {selection.version} in {file_name}")
        self.api.patch_file(
            file_name, JsonPatchOp(op="add", path="/version", value=selection.version)
        )

    def run(self, selection: DeploySelection, operation: Operation = Operation.DEPLOY) -> AggregateOutcome:
        """Run the whole pipeline for one selection.

        Returns:
            The aggregated outcome, empty when there was nothing to do

        Raises:
            AoctlError: For any failure before dispatch, including a declined
                confirmation (``UserCancelledError``)
        """
        self.validate(selection)
        if selection.version and operation is not Operation.DEPLOY:
            raise ValidationError("A version can only be given when deploying")

        file_names = self.api.get_file_names()
        application_ids = self.resolve(selection, file_names)
        if not application_ids:
            logger.info(f"No applications to {operation.value}")
            return AggregateOutcome()

        specs = self.fetch_specs(selection, application_ids)
        if not specs:
            logger.info(f"No applications to {operation.value}")
            return AggregateOutcome()

        if selection.version and len(specs) > 1:
            raise ValidationError("Deploy with version does only support one application")

        partitions = create_partitions(
            specs,
            self.registry,
            affiliation=selection.affiliation,
            override_token=selection.override_token,
        )

        message = (
            f"Do you want to {operation.value} {len(specs)} application(s) "
            f"in affiliation {selection.affiliation}?"
        )
        if not self.confirm(specs, message, selection.no_prompt):
            raise UserCancelledError(f"No applications to {operation.value}")

        if selection.version:
            self.update_version(selection, specs, file_names)

        overrides = selection.overrides if operation is Operation.DEPLOY else {}
        bundles = dispatch(partitions, operation, self.get_client, overrides)
        return aggregate(bundles)
