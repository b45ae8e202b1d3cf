"""SwapSentry - guarded gasless swaps and liquidation risk monitoring.

Components:
- CredentialSessionGuard: time-boxed unlocked trading credential
- SwapExecutionCoordinator: quote + credential -> submitted relay order
- PositionRiskMonitor: polls open positions and raises liquidation alerts
"""

from swapsentry.errors import ConfigurationInvalid, FailureReason
from swapsentry.positions import PositionRiskMonitor
from swapsentry.session import CredentialSessionGuard
from swapsentry.swap import SwapExecutionCoordinator

__version__ = "0.1.0"

__all__ = [
    "ConfigurationInvalid",
    "CredentialSessionGuard",
    "FailureReason",
    "PositionRiskMonitor",
    "SwapExecutionCoordinator",
]
