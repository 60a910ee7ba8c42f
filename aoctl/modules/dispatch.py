"""Concurrent dispatch of deploy and redeploy calls, one task per partition.

Every task emits exactly one ``PartitionResult`` on a shared queue, whatever
happens inside it, and the caller collects exactly as many bundles as there
are partitions. Failures of one partition are turned into failed results for
that partition's applications and never reach the other tasks.
"""
import logging
import queue
import time
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Any, Callable, List, Mapping, Optional, Protocol, Sequence

from aoctl.errors import UnreachableClusterError
from aoctl.modules.client import APIClient, DeployPayload, RedeployPayload
from aoctl.modules.models import DeployResult, Partition, PartitionResult

logger = logging.getLogger("aoctl.dispatch")


class Operation(str, Enum):
    DEPLOY = "deploy"
    REDEPLOY = "redeploy"


class DeployClient(Protocol):
    """What the dispatcher needs from a client, see ``APIClient``."""

    def deploy(self, payload: DeployPayload) -> List[Mapping[str, Any]]: ...

    def redeploy(self, payload: RedeployPayload) -> List[Mapping[str, Any]]: ...

    def close(self) -> None: ...


ClientFactory = Callable[[Partition], DeployClient]


def failed_results(partition: Partition, reason: str) -> PartitionResult:
    """A bundle marking every application of the partition as failed."""
    return PartitionResult(
        partition=partition,
        results=[DeployResult.failed(spec, reason) for spec in partition.specs],
    )


def _call(
    client: DeployClient,
    operation: Operation,
    partition: Partition,
    overrides: Mapping[str, Any],
) -> List[DeployResult]:
    if operation is Operation.DEPLOY:
        payload = DeployPayload(
            application_ids=partition.application_ids,
            overrides=dict(overrides),
        )
        items = client.deploy(payload)
        return [DeployResult.from_deploy_item(item, partition) for item in items]

    payload = RedeployPayload.from_refs(partition.refs)
    items = client.redeploy(payload)
    return [DeployResult.from_redeploy_item(item, partition) for item in items]


def run_partition(
    partition: Partition,
    operation: Operation,
    get_client: ClientFactory,
    overrides: Mapping[str, Any],
) -> PartitionResult:
    """Deploy one partition. Never raises."""
    start_time = time.time()
    try:
        if not partition.cluster.reachable:
            raise UnreachableClusterError(partition.cluster.name)

        client = get_client(partition)
        try:
            results = _call(client, operation, partition, overrides)
        finally:
            client.close()
        bundle = PartitionResult(partition=partition, results=results)
    except UnreachableClusterError as e:
        logger.warning(f"⚠️  Skipping {partition.key}: {e}")
        bundle = failed_results(partition, str(e))
    except Exception as e:
        logger.error(f"❌ {operation.value} to {partition.key} failed: {e}")
        logger.debug("Traceback", exc_info=True)
        bundle = failed_results(partition, str(e) or type(e).__name__)

    status = "✅" if bundle.success else "❌"
    logger.info(
        f"{status} {partition.key}: {len(bundle.results)} result(s) "
        f"({(time.time() - start_time):.1f}s)"
    )
    return bundle


def dispatch(
    partitions: Sequence[Partition],
    operation: Operation = Operation.DEPLOY,
    get_client: Optional[ClientFactory] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> List[PartitionResult]:
    """Run every partition concurrently and collect one bundle per partition.

    Args:
        partitions: Partitions to dispatch
        operation: Deploy or redeploy
        get_client: Builds the client for a partition, defaults to ``APIClient.for_partition``
        overrides: Overrides shared by every deploy payload

    Returns:
        Bundles in completion order
    """
    if not partitions:
        return []

    get_client = get_client or APIClient.for_partition
    overrides = overrides or {}
    bundles: "queue.Queue[PartitionResult]" = queue.Queue()

    def task(partition: Partition) -> None:
        try:
            bundle = run_partition(partition, operation, get_client, overrides)
        except Exception as e:
            # The collecting loop waits for exactly one bundle per partition
            logger.error("❌ %s task for %s crashed", operation.value, partition.key, exc_info=True)
            bundle = failed_results(partition, type(e).__name__)
        bundles.put(bundle)

    total = len(partitions)
    logger.info(f"🚀 Starting {operation.value} to {total} destination(s)...")
    start_time = time.time()

    with ThreadPoolExecutor(max_workers=total, thread_name_prefix=operation.value) as executor:
        for partition in partitions:
            executor.submit(task, partition)

        collected: List[PartitionResult] = []
        for completed in range(1, total + 1):
            bundle = bundles.get()
            collected.append(bundle)
            logger.debug(f"[{completed}/{total}] received {bundle.partition.key}")

    logger.info(f"Dispatch finished in {(time.time() - start_time):.1f} seconds")
    return collected
