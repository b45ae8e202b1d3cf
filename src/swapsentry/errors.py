"""Shared error taxonomy.

Caller-facing swap failures are values (FailureReason on a SwapResult).
The exceptions below are raised only at collaborator boundaries and at
startup; the coordinator and the monitor convert them before they reach
the caller.
"""

from enum import Enum


class FailureReason(str, Enum):
    """Reason code carried by a failed SwapResult."""

    SESSION_LOCKED = "session_locked"
    QUOTE_EXPIRED = "quote_expired"
    CREDENTIAL_REJECTED = "credential_rejected"
    RELAY_SUBMISSION_FAILED = "relay_submission_failed"
    RELAY_TIMEOUT = "relay_timeout"
    EXECUTION_REVERTED = "execution_reverted"


class SwapSentryError(Exception):
    """Base exception for swapsentry."""

    pass


class ConfigurationInvalid(SwapSentryError):
    """Raised at startup when settings cannot be used."""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid configuration for '{field}': {reason}")


class IndexerFetchFailed(SwapSentryError):
    """Raised by a position indexer when open positions cannot be fetched."""

    def __init__(self, address: str, reason: str):
        self.address = address
        self.reason = reason
        super().__init__(f"Failed to fetch positions for {address}: {reason}")


class SigningError(SwapSentryError):
    """Raised when a signing handle cannot produce a signature."""

    pass


class CredentialRejectedError(SigningError):
    """Raised when the wallet refuses the supplied credential."""

    pass


class RelaySubmissionError(SwapSentryError):
    """Raised when the relay rejects or cannot accept a gasless order."""

    def __init__(self, message: str, status_code: int = 0):
        self.message = message
        self.status_code = status_code
        super().__init__(message)
