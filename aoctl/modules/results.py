"""Aggregation of per-partition results into the final report."""
import logging
from typing import Iterable

from aoctl.modules.models import AggregateOutcome, PartitionResult

logger = logging.getLogger("aoctl.results")


def aggregate(bundles: Iterable[PartitionResult]) -> AggregateOutcome:
    """Flatten all bundles and sort them by application name.

    The sort is stable, so results with equal names keep the order in which
    their bundles arrived.
    """
    results = [result for bundle in bundles for result in bundle.results]
    results.sort(key=lambda r: r.name)
    outcome = AggregateOutcome(results=tuple(results))

    logger.info(
        f"{len(results) - len(outcome.failed)} of {len(results)} application(s) succeeded"
    )
    return outcome
