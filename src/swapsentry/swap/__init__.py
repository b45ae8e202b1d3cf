"""Gasless swap execution.

Provides:
- SwapExecutionCoordinator: quote + credential -> relay submission
- wait_for_completion: caller-side relay task tracking
"""

from swapsentry.swap.coordinator import SwapExecutionCoordinator
from swapsentry.swap.models import ExecutionMode, SwapQuote, SwapResult, SwapStatus
from swapsentry.swap.orders import build_order_typed_data
from swapsentry.swap.tracking import wait_for_completion

__all__ = [
    "SwapExecutionCoordinator",
    "ExecutionMode",
    "SwapQuote",
    "SwapResult",
    "SwapStatus",
    "build_order_typed_data",
    "wait_for_completion",
]
