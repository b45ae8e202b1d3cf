"""Wallet collaborator boundary.

Provides:
- WalletService / SigningHandle: interfaces the swap coordinator depends on
- KeystoreWallet: decrypts per-user keystores with the trading password
"""

from swapsentry.signing.base import SigningHandle, WalletService
from swapsentry.signing.keystore import (
    InMemoryKeystoreSource,
    KeystoreSource,
    KeystoreWallet,
    LocalSigningHandle,
)

__all__ = [
    "SigningHandle",
    "WalletService",
    "KeystoreSource",
    "InMemoryKeystoreSource",
    "KeystoreWallet",
    "LocalSigningHandle",
]
