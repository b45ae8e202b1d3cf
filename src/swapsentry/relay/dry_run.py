"""Dry-run relay for simulated gasless swaps.

Accepts orders without touching any network and settles them after a fixed
number of status polls.
"""

import logging
import secrets
from typing import Optional

from swapsentry.errors import RelaySubmissionError
from swapsentry.relay.base import (
    RelayProvider,
    RelaySubmission,
    SignedOrder,
    TaskState,
    TaskStatus,
)

logger = logging.getLogger(__name__)


class DryRunRelay(RelayProvider):
    """Simulated relay that never broadcasts anything."""

    def __init__(
        self,
        polls_until_settled: int = 1,
        reject_with: Optional[str] = None,
        revert_with: Optional[str] = None,
    ):
        """Initialize dry-run relay.

        Args:
            polls_until_settled: Status polls reporting PENDING before settling
            reject_with: If set, every submission is rejected with this message
            revert_with: If set, tasks settle as FAILURE with this reason
        """
        self.polls_until_settled = polls_until_settled
        self.reject_with = reject_with
        self.revert_with = revert_with
        self.submitted: dict[str, SignedOrder] = {}
        self._polls: dict[str, int] = {}

    @property
    def name(self) -> str:
        return "DryRun"

    async def submit_gasless_order(self, order: SignedOrder) -> RelaySubmission:
        if self.reject_with:
            logger.info(f"[DRY RUN] Rejecting order {order.quote_id}: {self.reject_with}")
            raise RelaySubmissionError(self.reject_with, status_code=400)

        task_id = f"dryrun-{secrets.token_hex(16)}"
        self.submitted[task_id] = order
        self._polls[task_id] = 0
        logger.info(f"[DRY RUN] Accepted order {order.quote_id} as task {task_id}")
        return RelaySubmission(task_id=task_id, provider=self.name)

    async def poll_task_status(self, task_id: str) -> TaskStatus:
        if task_id not in self.submitted:
            return TaskStatus(task_id=task_id, state=TaskState.FAILURE, reason="Unknown task")

        self._polls[task_id] += 1
        if self._polls[task_id] <= self.polls_until_settled:
            return TaskStatus(task_id=task_id, state=TaskState.PENDING)

        if self.revert_with:
            return TaskStatus(task_id=task_id, state=TaskState.FAILURE, reason=self.revert_with)

        tx_hash = "0x" + secrets.token_hex(32)
        return TaskStatus(task_id=task_id, state=TaskState.SUCCESS, transaction_hash=tx_hash)
