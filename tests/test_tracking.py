"""Tests for relay task completion tracking."""

import pytest

from swapsentry.errors import FailureReason
from swapsentry.relay.base import TaskState, TaskStatus
from swapsentry.swap import SwapResult, SwapStatus, wait_for_completion


def pending(task_id="task-123"):
    return TaskStatus(task_id=task_id, state=TaskState.PENDING)


class TestSwapResult:
    """Tests for result transitions."""

    def test_submitted_is_not_terminal(self):
        result = SwapResult.submitted("q-1", "task-123")
        assert not result.is_terminal
        assert not result.succeeded

    def test_pending_status_leaves_result_unchanged(self):
        result = SwapResult.submitted("q-1", "task-123")
        assert result.with_task_status(pending()) is result

    def test_success_carries_transaction_hash(self):
        result = SwapResult.submitted("q-1", "task-123")
        settled = result.with_task_status(
            TaskStatus(task_id="task-123", state=TaskState.SUCCESS, transaction_hash="0xabc")
        )

        assert settled.status == SwapStatus.SUCCESS
        assert settled.transaction_hash == "0xabc"
        assert settled.relay_task_id == "task-123"

    def test_terminal_result_cannot_transition(self):
        failed = SwapResult.failed("q-1", FailureReason.QUOTE_EXPIRED)

        with pytest.raises(ValueError):
            failed.with_task_status(TaskStatus(task_id="t", state=TaskState.SUCCESS))

    def test_to_dict(self):
        result = SwapResult.failed("q-1", FailureReason.SESSION_LOCKED, "locked")
        data = result.to_dict()

        assert data["status"] == "failure"
        assert data["failure_reason"] == "session_locked"
        assert data["message"] == "locked"


class TestWaitForCompletion:
    """Tests for polling a submitted swap to a terminal state."""

    @pytest.mark.asyncio
    async def test_settles_on_success(self, relay):
        relay.poll_task_status.side_effect = [
            pending(),
            pending(),
            TaskStatus(task_id="task-123", state=TaskState.SUCCESS, transaction_hash="0xfeed"),
        ]
        submitted = SwapResult.submitted("q-1", "task-123")

        result = await wait_for_completion(relay, submitted, poll_interval=0)

        assert result.status == SwapStatus.SUCCESS
        assert result.transaction_hash == "0xfeed"
        assert relay.poll_task_status.await_count == 3

    @pytest.mark.asyncio
    async def test_reverted_task(self, relay):
        relay.poll_task_status.side_effect = [
            TaskStatus(task_id="task-123", state=TaskState.FAILURE, reason="ExecReverted"),
        ]
        submitted = SwapResult.submitted("q-1", "task-123")

        result = await wait_for_completion(relay, submitted, poll_interval=0)

        assert result.status == SwapStatus.FAILURE
        assert result.failure_reason == FailureReason.EXECUTION_REVERTED
        assert result.message == "ExecReverted"

    @pytest.mark.asyncio
    async def test_timeout_keeps_task_id(self, relay):
        relay.poll_task_status.return_value = pending()
        submitted = SwapResult.submitted("q-1", "task-123")

        result = await wait_for_completion(relay, submitted, poll_interval=0, max_attempts=4)

        assert result.status == SwapStatus.FAILURE
        assert result.failure_reason == FailureReason.RELAY_TIMEOUT
        assert result.relay_task_id == "task-123"
        assert relay.poll_task_status.await_count == 4

    @pytest.mark.asyncio
    async def test_poll_errors_count_as_attempts(self, relay):
        relay.poll_task_status.side_effect = [
            ConnectionError("relay down"),
            TaskStatus(task_id="task-123", state=TaskState.SUCCESS, transaction_hash="0x1"),
        ]
        submitted = SwapResult.submitted("q-1", "task-123")

        result = await wait_for_completion(relay, submitted, poll_interval=0, max_attempts=2)

        assert result.succeeded

    @pytest.mark.asyncio
    async def test_persistent_poll_errors_time_out(self, relay):
        relay.poll_task_status.side_effect = ConnectionError("relay down")
        submitted = SwapResult.submitted("q-1", "task-123")

        result = await wait_for_completion(relay, submitted, poll_interval=0, max_attempts=3)

        assert result.failure_reason == FailureReason.RELAY_TIMEOUT
        assert relay.poll_task_status.await_count == 3

    @pytest.mark.asyncio
    async def test_terminal_result_returned_unchanged(self, relay):
        failed = SwapResult.failed("q-1", FailureReason.SESSION_LOCKED)

        result = await wait_for_completion(relay, failed, poll_interval=0)

        assert result is failed
        relay.poll_task_status.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_task_id_raises(self, relay):
        broken = SwapResult(status=SwapStatus.SUBMITTED, quote_id="q-1")

        with pytest.raises(ValueError):
            await wait_for_completion(relay, broken, poll_interval=0)
