"""
Concurrent Orchestrator

Runs independent producers at the same time and collects their Outcomes.
"""

import asyncio
import logging
from typing import Iterable, List

from shared.schemas import Outcome
from request_orchestrator.executor import RequestExecutor
from request_orchestrator.markers import Producer

logger = logging.getLogger(__name__)


async def run_concurrent(producers: Iterable[Producer], executor: RequestExecutor) -> List[Outcome]:
    """
    Execute producers concurrently.

    Every producer is invoked (with no previous outcome) before any request
    starts, so a failing producer raises without issuing requests. A failed
    request only affects its own Outcome.

    Args:
        producers: Independent producers
        executor: Request executor bound to the store

    Returns:
        Outcomes in the order of the producers
    """
    prepared = [executor.prepare(producer, None) for producer in producers]

    logger.debug(f"Starting {len(prepared)} concurrent requests")

    outcomes = await asyncio.gather(*(executor.send(call) for call in prepared))
    return list(outcomes)
