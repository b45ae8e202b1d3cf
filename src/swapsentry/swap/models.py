"""Swap quote and result types."""

import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from swapsentry.errors import FailureReason
from swapsentry.relay.base import TaskState, TaskStatus


class ExecutionMode(str, Enum):
    """How a swap is executed. Only relay-paid (gasless) is supported."""

    GASLESS = "gasless"


@dataclass(frozen=True)
class SwapQuote:
    """A priced swap quote. Immutable once issued by the pricing service.

    Amounts are integer base units (wei, token atoms).
    """

    quote_id: str
    input_asset: str
    output_asset: str
    input_amount: int
    min_output_amount: int
    fee_basis_points: int
    fee_recipient: str
    expires_at: float  # unix timestamp
    chain_id: int = 1
    router_address: str = ""
    calldata: str = "0x"
    execution_mode: ExecutionMode = ExecutionMode.GASLESS

    def is_expired(self, now: Optional[float] = None) -> bool:
        """Check if the quote can no longer be executed."""
        now = time.time() if now is None else now
        return now >= self.expires_at

    def seconds_until_expiry(self, now: Optional[float] = None) -> float:
        """Get seconds until quote expires (negative if expired)."""
        now = time.time() if now is None else now
        return self.expires_at - now


class SwapStatus(str, Enum):
    """Status of one execution attempt.

    SUBMITTED means the relay accepted the order; it is not settlement.
    """

    SUBMITTED = "submitted"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class SwapResult:
    """Result of a swap execution attempt.

    SUCCESS and FAILURE are terminal: no further transitions happen.
    """

    status: SwapStatus
    quote_id: str
    relay_task_id: Optional[str] = None
    transaction_hash: Optional[str] = None
    failure_reason: Optional[FailureReason] = None
    message: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status != SwapStatus.SUBMITTED

    @property
    def succeeded(self) -> bool:
        return self.status == SwapStatus.SUCCESS

    @classmethod
    def submitted(cls, quote_id: str, task_id: str) -> "SwapResult":
        return cls(status=SwapStatus.SUBMITTED, quote_id=quote_id, relay_task_id=task_id)

    @classmethod
    def failed(
        cls,
        quote_id: str,
        reason: FailureReason,
        message: Optional[str] = None,
        relay_task_id: Optional[str] = None,
    ) -> "SwapResult":
        return cls(
            status=SwapStatus.FAILURE,
            quote_id=quote_id,
            relay_task_id=relay_task_id,
            failure_reason=reason,
            message=message,
        )

    def with_task_status(self, task: TaskStatus) -> "SwapResult":
        """Advance a submitted result using a relay task status.

        Returns self unchanged while the task is pending.

        Raises:
            ValueError: If this result is already terminal
        """
        if self.is_terminal:
            raise ValueError(f"Swap result for {self.quote_id} is already {self.status.value}")
        if task.state == TaskState.SUCCESS:
            return replace(self, status=SwapStatus.SUCCESS, transaction_hash=task.transaction_hash)
        if task.state == TaskState.FAILURE:
            return replace(
                self,
                status=SwapStatus.FAILURE,
                transaction_hash=task.transaction_hash,
                failure_reason=FailureReason.EXECUTION_REVERTED,
                message=task.reason or "Relay task failed",
            )
        return self

    def to_dict(self) -> dict:
        """Convert to dictionary for logging/storage."""
        return {
            "status": self.status.value,
            "quote_id": self.quote_id,
            "relay_task_id": self.relay_task_id,
            "transaction_hash": self.transaction_hash,
            "failure_reason": self.failure_reason.value if self.failure_reason else None,
            "message": self.message,
        }
