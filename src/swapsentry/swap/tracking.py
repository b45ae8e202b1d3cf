"""Caller-side completion tracking for relay-submitted swaps.

The coordinator returns as soon as the relay accepts an order. Callers
that need the settled outcome poll the relay here until the task reaches
a terminal state.
"""

import asyncio
import logging

from swapsentry.errors import FailureReason
from swapsentry.relay.base import RelayProvider
from swapsentry.swap.models import SwapResult

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 5.0
MAX_POLL_ATTEMPTS = 60  # 5 minutes at the default interval


async def wait_for_completion(
    relay: RelayProvider,
    result: SwapResult,
    poll_interval: float = POLL_INTERVAL_SECONDS,
    max_attempts: int = MAX_POLL_ATTEMPTS,
) -> SwapResult:
    """Poll the relay until a submitted swap settles.

    Args:
        relay: Relay the order was submitted to
        result: SUBMITTED result from SwapExecutionCoordinator.execute()
        poll_interval: Seconds between status polls
        max_attempts: Polls before giving up

    Returns:
        Terminal SwapResult. RELAY_TIMEOUT means tracking gave up, not that
        the swap failed on-chain.
    """
    if result.is_terminal:
        return result
    if not result.relay_task_id:
        raise ValueError(f"Submitted swap {result.quote_id} has no relay task id")

    task_id = result.relay_task_id
    for attempt in range(1, max_attempts + 1):
        try:
            status = await relay.poll_task_status(task_id)
            logger.debug(f"Relay task {task_id} status: {status.state.value} (poll {attempt})")
            if status.is_terminal:
                settled = result.with_task_status(status)
                if settled.succeeded:
                    logger.info(f"Swap {result.quote_id} settled: {settled.transaction_hash}")
                else:
                    logger.warning(f"Swap {result.quote_id} failed on relay: {settled.message}")
                return settled
        except Exception as e:
            logger.error(f"Error checking relay task {task_id}: {type(e).__name__}: {e}")

        if attempt < max_attempts:
            await asyncio.sleep(poll_interval)

    logger.warning(f"Relay task {task_id} polling timeout after {max_attempts} attempts")
    return SwapResult.failed(
        result.quote_id,
        FailureReason.RELAY_TIMEOUT,
        "Relay task still pending. Check the relay dashboard for its status.",
        relay_task_id=task_id,
    )
