"""Base interfaces for the wallet collaborator.

Signing flow:
1. Caller obtains a live credential from the session guard
2. Wallet resolves a signing handle for (user, credential)
3. Handle signs the EIP-712 order payload
4. Only the signature leaves the wallet, never key material

Implementations must NEVER log or persist the raw credential.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

from swapsentry.errors import CredentialRejectedError, SigningError
from swapsentry.session import Credential

logger = logging.getLogger(__name__)


class SigningHandle(ABC):
    """Short-lived signing capability for one user.

    Held only for the duration of one swap execution.
    """

    @property
    @abstractmethod
    def address(self) -> str:
        """Address of the signing account."""
        pass

    @abstractmethod
    def sign_typed_data(self, full_message: dict[str, Any]) -> str:
        """Sign an EIP-712 full message.

        Args:
            full_message: Dict with types, primaryType, domain and message

        Returns:
            Signature as 0x-prefixed hex string

        Raises:
            SigningError: If the payload cannot be signed
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(address={self.address})"


class WalletService(ABC):
    """Abstract wallet/credential service."""

    @abstractmethod
    async def resolve_signing_capability(
        self,
        user_id: str,
        credential: Credential,
    ) -> SigningHandle:
        """Verify the credential and unwrap a signing handle for the user.

        Args:
            user_id: Platform user identifier
            credential: Live credential from the session guard

        Returns:
            SigningHandle for the user's trading account

        Raises:
            CredentialRejectedError: Wrong password or unknown user
        """
        pass

    async def health_check(self) -> bool:
        """Check if the wallet backend is available."""
        return True


__all__ = [
    "CredentialRejectedError",
    "SigningError",
    "SigningHandle",
    "WalletService",
]
