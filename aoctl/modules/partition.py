"""Grouping of deployment specs into independently dispatched partitions."""
import logging
from typing import Dict, Iterable, List, Optional

from aoctl.errors import ConfigurationError
from aoctl.modules.models import DeploymentSpec, DestinationKey, Partition
from aoctl.modules.registry import ClusterRegistry

logger = logging.getLogger("aoctl.partition")


def create_partitions(
    specs: Iterable[DeploymentSpec],
    registry: ClusterRegistry,
    affiliation: str = "",
    override_token: Optional[str] = None,
) -> List[Partition]:
    """Group specs by their ``(cluster, namespace)`` destination.

    Args:
        specs: Deployment specs to dispatch
        registry: Known clusters
        affiliation: AuroraConfig the partitions belong to
        override_token: Token to use instead of each cluster's own

    Returns:
        One partition per destination, in order of first appearance

    Raises:
        ConfigurationError: If a spec targets a cluster missing from the registry
    """
    partitions: Dict[DestinationKey, Partition] = {}

    for spec in specs:
        key = spec.destination
        if key not in partitions:
            cluster = registry.get(key.cluster)
            if cluster is None:
                raise ConfigurationError(f"No such cluster {key.cluster}")
            partitions[key] = Partition(
                key=key,
                cluster=cluster,
                affiliation=affiliation,
                override_token=override_token,
            )
        partitions[key].specs.append(spec)

    logger.debug(
        "Partitions: %s",
        ", ".join(f"{key} ({len(p)})" for key, p in partitions.items()),
    )
    return list(partitions.values())
