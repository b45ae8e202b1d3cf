"""Gasless swap execution.

Turns a priced quote plus a live credential into a relay-submitted order:
1. Reject expired quotes (no side effects)
2. Reject missing/locked credentials
3. Resolve the user's signing handle from the wallet
4. Sign the EIP-712 order
5. Submit to the relay in gasless mode, return the task id as SUBMITTED

Every failure is returned as a SwapResult, never raised. Submissions are
never retried here: without relay-side idempotency a retry could execute
the swap twice. Completion tracking lives in swapsentry.swap.tracking.
"""

import logging
import time
from typing import Callable, Optional

from swapsentry.config import Settings, get_settings, is_evm_address
from swapsentry.errors import (
    ConfigurationInvalid,
    CredentialRejectedError,
    FailureReason,
    RelaySubmissionError,
    SigningError,
)
from swapsentry.relay.base import RelayProvider, SignedOrder
from swapsentry.session import Credential
from swapsentry.signing.base import SigningHandle, WalletService
from swapsentry.swap.models import ExecutionMode, SwapQuote, SwapResult
from swapsentry.swap.orders import build_order_typed_data

logger = logging.getLogger(__name__)


class SwapExecutionCoordinator:
    """Submits signed gasless swap orders to a relay.

    Holds no per-execution state: concurrent execute() calls are independent.
    """

    def __init__(
        self,
        wallet: WalletService,
        relay: RelayProvider,
        settings: Optional[Settings] = None,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize coordinator.

        Args:
            wallet: Wallet collaborator resolving signing handles
            relay: Gasless relay collaborator
            settings: Settings (defaults to cached application settings)
            clock: Wall-clock source compared against quote expiry

        Raises:
            ConfigurationInvalid: If the configured fee recipient is malformed
        """
        self.settings = settings or get_settings()
        if not is_evm_address(self.settings.fee_recipient):
            raise ConfigurationInvalid(
                "fee_recipient", f"malformed address {self.settings.fee_recipient!r}"
            )
        if not 0 <= self.settings.max_fee_basis_points <= 10000:
            raise ConfigurationInvalid("max_fee_basis_points", "must be between 0 and 10000")
        self.wallet = wallet
        self.relay = relay
        self.fee_recipient = self.settings.fee_recipient
        self._clock = clock

    async def execute(
        self,
        quote: SwapQuote,
        user_id: str,
        credential: Optional[Credential],
    ) -> SwapResult:
        """Execute a swap quote for a user.

        Args:
            quote: Quote to execute
            user_id: Platform user identifier
            credential: Live credential from CredentialSessionGuard.get_credential()

        Returns:
            SUBMITTED result with the relay task id, or a FAILURE result
        """
        if quote.is_expired(self._clock()):
            logger.info(f"Quote {quote.quote_id} expired, not executing")
            return SwapResult.failed(
                quote.quote_id, FailureReason.QUOTE_EXPIRED, "Quote expired. Request a new quote."
            )

        if credential is None or credential.is_wiped:
            logger.info(f"Swap {quote.quote_id} blocked: credential session locked")
            return SwapResult.failed(
                quote.quote_id, FailureReason.SESSION_LOCKED, "Trading session locked. Unlock to continue."
            )

        if quote.execution_mode != ExecutionMode.GASLESS:
            logger.warning(f"Unsupported execution mode {quote.execution_mode} for {quote.quote_id}")

        if quote.fee_recipient.lower() != self.fee_recipient.lower():
            logger.warning(
                f"Quote {quote.quote_id} fee recipient {quote.fee_recipient} "
                f"differs from configured {self.fee_recipient}"
            )

        handle = await self._resolve_handle(quote, user_id, credential)
        if isinstance(handle, SwapResult):
            return handle

        try:
            typed_data = build_order_typed_data(quote, handle.address)
            signature = handle.sign_typed_data(typed_data)
        except SigningError as e:
            logger.warning(f"Signing failed for quote {quote.quote_id}: {e}")
            return SwapResult.failed(quote.quote_id, FailureReason.CREDENTIAL_REJECTED, str(e))
        except Exception as e:
            logger.error(f"Unexpected signing error for {quote.quote_id}: {type(e).__name__}: {e}")
            return SwapResult.failed(
                quote.quote_id, FailureReason.CREDENTIAL_REJECTED, f"{type(e).__name__}: {e}"
            )

        # The wallet call suspended; the quote may have expired meanwhile
        if quote.is_expired(self._clock()):
            logger.info(f"Quote {quote.quote_id} expired during signing, not submitting")
            return SwapResult.failed(
                quote.quote_id, FailureReason.QUOTE_EXPIRED, "Quote expired before submission."
            )

        order = SignedOrder(
            quote_id=quote.quote_id,
            chain_id=quote.chain_id,
            target=quote.router_address,
            calldata=quote.calldata,
            owner_address=handle.address,
            signature=signature,
            typed_data=typed_data,
        )

        logger.info(
            f"Submitting gasless swap {quote.quote_id} via {self.relay.name}: "
            f"{quote.input_amount} {quote.input_asset} -> >={quote.min_output_amount} {quote.output_asset}"
        )
        try:
            submission = await self.relay.submit_gasless_order(order)
        except RelaySubmissionError as e:
            logger.warning(f"Relay rejected swap {quote.quote_id}: {e.message}")
            return SwapResult.failed(quote.quote_id, FailureReason.RELAY_SUBMISSION_FAILED, e.message)
        except Exception as e:
            logger.error(f"Relay submission error for {quote.quote_id}: {type(e).__name__}: {e}")
            return SwapResult.failed(
                quote.quote_id, FailureReason.RELAY_SUBMISSION_FAILED, f"{type(e).__name__}: {e}"
            )

        logger.info(f"Swap {quote.quote_id} submitted, relay task {submission.task_id}")
        return SwapResult.submitted(quote.quote_id, submission.task_id)

    async def _resolve_handle(
        self,
        quote: SwapQuote,
        user_id: str,
        credential: Credential,
    ) -> "SigningHandle | SwapResult":
        try:
            return await self.wallet.resolve_signing_capability(user_id, credential)
        except CredentialRejectedError as e:
            logger.warning(f"Credential rejected for user {user_id}")
            return SwapResult.failed(quote.quote_id, FailureReason.CREDENTIAL_REJECTED, str(e))
        except Exception as e:
            logger.error(f"Wallet error for user {user_id}: {type(e).__name__}")
            return SwapResult.failed(
                quote.quote_id, FailureReason.CREDENTIAL_REJECTED, f"Wallet unavailable: {type(e).__name__}"
            )
