"""Abstract interface for gasless relay services.

A relay accepts a signed order, pays the on-chain gas itself and reports
completion asynchronously through a task identifier. Acceptance of an
order is NOT settlement: a task can still revert on-chain.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from swapsentry.errors import RelaySubmissionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignedOrder:
    """Swap order signed by the user's wallet, ready for relay submission."""

    quote_id: str
    chain_id: int
    target: str  # router contract executing the swap
    calldata: str
    owner_address: str
    signature: str
    typed_data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RelaySubmission:
    """Relay acknowledgement of an accepted order."""

    task_id: str
    provider: str


class TaskState(str, Enum):
    """Normalized relay task state."""

    PENDING = "pending"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class TaskStatus:
    """Snapshot of a relay task."""

    task_id: str
    state: TaskState
    transaction_hash: Optional[str] = None
    reason: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.state != TaskState.PENDING


class RelayProvider(ABC):
    """Abstract base class for gasless relay providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name identifier."""
        pass

    @abstractmethod
    async def submit_gasless_order(self, order: SignedOrder) -> RelaySubmission:
        """Submit a signed order for gasless execution.

        Args:
            order: Signed swap order

        Returns:
            RelaySubmission with the relay task id

        Raises:
            RelaySubmissionError: Relay rejected the order or was unreachable
        """
        pass

    @abstractmethod
    async def poll_task_status(self, task_id: str) -> TaskStatus:
        """Get the current status of a relay task.

        Args:
            task_id: Identifier returned by submit_gasless_order

        Returns:
            TaskStatus (PENDING until the relay reports a terminal state)
        """
        pass

    async def close(self) -> None:
        """Release any held connections."""
        return None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name})"


__all__ = [
    "RelayProvider",
    "RelaySubmission",
    "RelaySubmissionError",
    "SignedOrder",
    "TaskState",
    "TaskStatus",
]
