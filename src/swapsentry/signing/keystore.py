"""Keystore-backed wallet.

Each user's trading key is stored as an encrypted JSON keystore (Web3
Secret Storage). The trading password decrypts it for the duration of one
swap; the decrypted account is never cached.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount

from swapsentry.errors import CredentialRejectedError, SigningError
from swapsentry.session import Credential
from swapsentry.signing.base import SigningHandle, WalletService

logger = logging.getLogger(__name__)


class KeystoreSource(ABC):
    """Data-access boundary for encrypted keystores."""

    @abstractmethod
    async def get_keystore(self, user_id: str) -> Optional[dict[str, Any]]:
        """Return the user's encrypted keystore, or None if the user has none."""
        pass


class InMemoryKeystoreSource(KeystoreSource):
    """Keystores held in a dict (tests, single-user tools)."""

    def __init__(self, keystores: Optional[dict[str, dict[str, Any]]] = None):
        self._keystores: dict[str, dict[str, Any]] = dict(keystores or {})

    def add(self, user_id: str, keystore: dict[str, Any]) -> None:
        self._keystores[user_id] = keystore

    async def get_keystore(self, user_id: str) -> Optional[dict[str, Any]]:
        return self._keystores.get(user_id)


class LocalSigningHandle(SigningHandle):
    """Signing handle around a decrypted eth_account LocalAccount."""

    def __init__(self, account: LocalAccount):
        self._account = account

    @property
    def address(self) -> str:
        return self._account.address

    def sign_typed_data(self, full_message: dict[str, Any]) -> str:
        try:
            signed = self._account.sign_typed_data(full_message=full_message)
        except Exception as e:
            raise SigningError(f"Failed to sign typed data: {type(e).__name__}: {e}") from e
        return "0x" + signed.signature.hex().removeprefix("0x")


class KeystoreWallet(WalletService):
    """Wallet service that decrypts per-user keystores with the credential."""

    def __init__(self, source: KeystoreSource):
        self.source = source

    async def resolve_signing_capability(
        self,
        user_id: str,
        credential: Credential,
    ) -> SigningHandle:
        keystore = await self.source.get_keystore(user_id)
        if keystore is None:
            raise CredentialRejectedError(f"No keystore for user {user_id}")

        try:
            # scrypt/pbkdf2 is CPU bound, keep it off the event loop
            private_key = await asyncio.to_thread(Account.decrypt, keystore, credential.reveal())
        except ValueError:
            logger.warning(f"Credential rejected for user {user_id}")
            raise CredentialRejectedError(f"Credential rejected for user {user_id}")
        except (KeyError, TypeError) as e:
            logger.error(f"Malformed keystore for user {user_id}: {type(e).__name__}")
            raise CredentialRejectedError(f"Unreadable keystore for user {user_id}") from e

        account = Account.from_key(private_key)
        logger.debug(f"Resolved signing handle for user {user_id}: {account.address}")
        return LocalSigningHandle(account)
