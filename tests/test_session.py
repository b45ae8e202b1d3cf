"""Tests for the credential session guard."""

import asyncio

import pytest

from swapsentry.session import Credential, CredentialSessionGuard, SessionState


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TestCredential:
    """Tests for the zeroizable credential buffer."""

    def test_reveal_returns_secret(self):
        credential = Credential("hunter2")
        assert credential.reveal() == "hunter2"
        assert not credential.is_wiped

    def test_wipe_clears_secret(self):
        credential = Credential("hunter2")
        credential.wipe()

        assert credential.is_wiped
        assert credential.reveal() == ""

    def test_repr_never_shows_secret(self):
        credential = Credential("hunter2")
        assert "hunter2" not in repr(credential)
        assert "hunter2" not in str(credential)


class TestSessionLifecycle:
    """Tests for unlock/lock and lazy TTL enforcement (no event loop)."""

    def test_starts_locked(self):
        guard = CredentialSessionGuard()
        assert guard.get_credential() is None
        assert not guard.is_unlocked()
        assert guard.state == SessionState.LOCKED

    def test_unlock_within_ttl_returns_credential(self):
        clock = FakeClock()
        guard = CredentialSessionGuard(ttl=1800, clock=clock)

        guard.unlock("pw")
        clock.advance(1799)

        credential = guard.get_credential()
        assert credential is not None
        assert credential.reveal() == "pw"
        assert guard.state == SessionState.UNLOCKED

    def test_read_at_ttl_returns_none(self):
        """Expiry boundary is inclusive: elapsed == ttl is expired."""
        clock = FakeClock()
        guard = CredentialSessionGuard(ttl=1800, clock=clock)

        guard.unlock("pw")
        clock.advance(1800)

        assert guard.get_credential() is None

    def test_read_after_ttl_locks_and_wipes(self):
        """A late read forces the lock even if no timer fired."""
        clock = FakeClock()
        guard = CredentialSessionGuard(ttl=60, clock=clock)

        guard.unlock("pw")
        held = guard.get_credential()
        clock.advance(61)

        assert guard.get_credential() is None
        assert held.is_wiped
        # Stays locked when the clock is wound back
        clock.now -= 61
        assert guard.get_credential() is None

    def test_is_unlocked_has_no_side_effects(self):
        clock = FakeClock()
        guard = CredentialSessionGuard(ttl=60, clock=clock)

        guard.unlock("pw")
        held = guard.get_credential()
        clock.advance(120)

        assert not guard.is_unlocked()
        # Not wiped by the pure check
        assert not held.is_wiped
        assert guard.expires_in() == 0.0

    def test_expires_in_counts_down(self):
        clock = FakeClock()
        guard = CredentialSessionGuard(ttl=100, clock=clock)

        guard.unlock("pw")
        clock.advance(40)

        assert guard.expires_in() == pytest.approx(60)

    def test_lock_is_idempotent(self):
        guard = CredentialSessionGuard()
        guard.lock()
        guard.unlock("pw")
        held = guard.get_credential()

        guard.lock()
        guard.lock()

        assert guard.get_credential() is None
        assert held.is_wiped

    def test_empty_password_is_ignored(self):
        guard = CredentialSessionGuard()
        guard.unlock("")
        assert not guard.is_unlocked()

    def test_empty_password_keeps_existing_session(self):
        guard = CredentialSessionGuard()
        guard.unlock("pw")
        guard.unlock("")

        assert guard.get_credential().reveal() == "pw"

    def test_re_unlock_replaces_credential_and_restarts_ttl(self):
        clock = FakeClock()
        guard = CredentialSessionGuard(ttl=100, clock=clock)

        guard.unlock("old")
        old = guard.get_credential()
        clock.advance(90)
        guard.unlock("new")
        clock.advance(50)

        assert guard.get_credential().reveal() == "new"
        assert old.is_wiped

    def test_no_timer_without_running_loop(self):
        guard = CredentialSessionGuard()
        guard.unlock("pw")
        assert not guard.has_pending_timer


class TestAutoLock:
    """Tests for the scheduled auto-lock."""

    @pytest.mark.asyncio
    async def test_unlock_schedules_single_timer(self):
        guard = CredentialSessionGuard(ttl=60)
        guard.unlock("pw")

        assert guard.has_pending_timer
        guard.lock()
        assert not guard.has_pending_timer

    @pytest.mark.asyncio
    async def test_re_unlock_cancels_previous_timer(self):
        guard = CredentialSessionGuard(ttl=60)
        guard.unlock("first")
        first_timer = guard._timer

        guard.unlock("second")

        assert first_timer.cancelled()
        assert guard._timer is not first_timer
        assert guard.has_pending_timer
        guard.lock()

    @pytest.mark.asyncio
    async def test_auto_lock_fires_after_ttl(self):
        guard = CredentialSessionGuard(ttl=0.1)
        guard.unlock("pw")
        held = guard.get_credential()

        await asyncio.sleep(0.25)

        assert guard._credential is None
        assert held.is_wiped
        assert not guard.has_pending_timer

    @pytest.mark.asyncio
    async def test_stale_timer_does_not_lock_new_session(self):
        """Re-unlocking mid-session must not inherit the first deadline."""
        guard = CredentialSessionGuard(ttl=0.3)

        guard.unlock("first")
        await asyncio.sleep(0.15)
        guard.unlock("second")

        # Past the first session's deadline, inside the second's
        await asyncio.sleep(0.2)
        assert guard.is_unlocked()
        assert guard.get_credential().reveal() == "second"

        await asyncio.sleep(0.2)
        assert not guard.is_unlocked()
        assert guard.get_credential() is None

    @pytest.mark.asyncio
    async def test_lock_before_ttl_prevents_callback(self):
        guard = CredentialSessionGuard(ttl=0.1)
        guard.unlock("pw")
        guard.lock()
        guard.unlock("again")
        again = guard.get_credential()

        await asyncio.sleep(0.05)
        assert not again.is_wiped
        guard.lock()
