"""
Deploy pipeline modules.
"""
from .models import (
    AggregateOutcome,
    ApplicationRef,
    Cluster,
    DeployResult,
    DeploySelection,
    DeploymentSpec,
    DestinationKey,
    Partition,
    PartitionResult,
)
from .client import APIClient
from .dispatch import Operation, dispatch
from .partition import create_partitions
from .registry import ClusterRegistry
from .results import aggregate
from .workflow import DeployWorkflow

__all__ = [
    'AggregateOutcome',
    'ApplicationRef',
    'Cluster',
    'DeployResult',
    'DeploySelection',
    'DeploymentSpec',
    'DestinationKey',
    'Partition',
    'PartitionResult',
    'APIClient',
    'Operation',
    'dispatch',
    'create_partitions',
    'ClusterRegistry',
    'aggregate',
    'DeployWorkflow',
]
