"""Credential session lifecycle."""

from swapsentry.session.guard import (
    Credential,
    CredentialSessionGuard,
    SessionState,
)

__all__ = [
    "Credential",
    "CredentialSessionGuard",
    "SessionState",
]
