"""Gelato Relay integration.

Gelato executes the order on-chain, pays the gas, and takes its fee from the
swap output (SyncFee mode). Completion is reported per task id.
API docs: https://docs.gelato.network/web3-services/relay
"""

import logging
from typing import Any, Optional

import httpx

from swapsentry.errors import RelaySubmissionError
from swapsentry.relay.base import (
    RelayProvider,
    RelaySubmission,
    SignedOrder,
    TaskState,
    TaskStatus,
)

logger = logging.getLogger(__name__)

GELATO_API_URL = "https://api.gelato.digital"

# Native token placeholder used by Gelato for fee payment
NATIVE_FEE_TOKEN = "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE"

GELATO_SUCCESS_STATES = {"ExecSuccess"}
GELATO_FAILURE_STATES = {"Cancelled", "ExecReverted", "Blacklisted"}


def map_task_state(task_state: Optional[str]) -> TaskState:
    """Map a Gelato taskState to a normalized TaskState.

    CheckPending, ExecPending, WaitingForConfirmation and anything unknown
    are treated as still pending.
    """
    if task_state in GELATO_SUCCESS_STATES:
        return TaskState.SUCCESS
    if task_state in GELATO_FAILURE_STATES:
        return TaskState.FAILURE
    return TaskState.PENDING


class GelatoRelay(RelayProvider):
    """Gelato SyncFee relay provider."""

    def __init__(
        self,
        api_url: str = GELATO_API_URL,
        api_key: str = "",
        fee_token: str = NATIVE_FEE_TOKEN,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize Gelato relay.

        Args:
            api_url: Relay API base URL
            api_key: Optional sponsor API key
            fee_token: Token the relay fee is paid in
            timeout: HTTP timeout in seconds
            client: Pre-built HTTP client (tests inject a mock transport)
        """
        self.api_url = api_url.rstrip("/")
        self.api_key = api_key
        self.fee_token = fee_token
        self.timeout = timeout
        self._http_client = client

    @property
    def name(self) -> str:
        return "Gelato"

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout)
        return self._http_client

    def _build_payload(self, order: SignedOrder) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "chainId": str(order.chain_id),
            "target": order.target,
            "data": order.calldata,
            "feeToken": self.fee_token,
            "isRelayContext": True,
            "user": order.owner_address,
            "userSignature": order.signature,
            "metadata": {"quoteId": order.quote_id},
        }
        if self.api_key:
            payload["sponsorApiKey"] = self.api_key
        return payload

    async def submit_gasless_order(self, order: SignedOrder) -> RelaySubmission:
        client = await self._get_client()
        url = f"{self.api_url}/relays/v2/call-with-sync-fee"

        try:
            response = await client.post(url, json=self._build_payload(order))
        except httpx.HTTPError as e:
            logger.error(f"Gelato submission transport error: {type(e).__name__}: {e}")
            raise RelaySubmissionError(f"Relay unreachable: {type(e).__name__}")

        data = self._json(response)
        if response.status_code >= 400:
            message = data.get("message") or data.get("error") or f"HTTP {response.status_code}"
            logger.warning(f"Gelato rejected order {order.quote_id}: {message}")
            raise RelaySubmissionError(message, status_code=response.status_code)

        task_id = data.get("taskId")
        if not task_id:
            raise RelaySubmissionError("Relay response missing taskId", status_code=response.status_code)

        logger.info(f"Gelato task created: {task_id}")
        return RelaySubmission(task_id=task_id, provider=self.name)

    async def poll_task_status(self, task_id: str) -> TaskStatus:
        client = await self._get_client()
        response = await client.get(f"{self.api_url}/tasks/status/{task_id}")

        if response.status_code == 404:
            return TaskStatus(task_id=task_id, state=TaskState.PENDING)
        response.raise_for_status()

        task = self._json(response).get("task", {})
        state = map_task_state(task.get("taskState"))
        reason = None
        if state == TaskState.FAILURE:
            reason = task.get("lastCheckMessage") or f"Gelato task {task.get('taskState')}"

        return TaskStatus(
            task_id=task_id,
            state=state,
            transaction_hash=task.get("transactionHash"),
            reason=reason,
        )

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}

    async def close(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
