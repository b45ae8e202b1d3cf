"""Gasless relay collaborator boundary.

Providers:
- Gelato: SyncFee relay, fee deducted from swap output
- DryRun: simulated relay for development and tests
"""

from swapsentry.relay.base import (
    RelayProvider,
    RelaySubmission,
    SignedOrder,
    TaskState,
    TaskStatus,
)
from swapsentry.relay.dry_run import DryRunRelay
from swapsentry.relay.factory import create_relay
from swapsentry.relay.gelato import GelatoRelay

__all__ = [
    "RelayProvider",
    "RelaySubmission",
    "SignedOrder",
    "TaskState",
    "TaskStatus",
    "DryRunRelay",
    "GelatoRelay",
    "create_relay",
]
