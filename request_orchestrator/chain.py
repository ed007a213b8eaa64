"""
Chain Orchestrator

Runs producers one after another, feeding each step the previous step's
whole Outcome.
"""

import logging
from typing import Iterable, Optional

from shared.schemas import Outcome
from request_orchestrator.executor import RequestExecutor
from request_orchestrator.markers import Producer

logger = logging.getLogger(__name__)


async def run_chain(producers: Iterable[Producer], executor: RequestExecutor) -> Optional[Outcome]:
    """
    Execute a chain of producers sequentially.

    A failed step does not stop the chain: its error Outcome is passed to the
    next producer like any other. Producers read it either by attribute
    (``previous.result``) or by key (``previous["result"]``).

    Args:
        producers: Producers in execution order
        executor: Request executor bound to the store

    Returns:
        The last step's Outcome, or None for an empty chain

    Raises:
        DescriptorError: If a producer returns an unusable action
        Exception: Whatever a producer raises
    """
    steps = [executor.bind(producer) for producer in producers]
    outcome = None

    for number, step in enumerate(steps, start=1):
        logger.debug(f"Chain step {number}/{len(steps)}")
        outcome = await step(outcome)

    return outcome
