"""Time-boxed credential session.

The trading password is held in memory only between unlock() and the
earlier of lock() or TTL expiry. Expiry is enforced twice:
- a single auto-lock callback scheduled on the event loop
- lazily on every read, for when the callback is late (e.g. system sleep)

The guard owns exactly one timer handle. Every unlock() and lock() cancels
the current handle first, so a re-unlock never leaves a stale callback
behind that could lock the new session early.
"""

import asyncio
import logging
import time
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL = 30 * 60.0


class SessionState(str, Enum):
    """Credential session state."""

    LOCKED = "locked"
    UNLOCKED = "unlocked"


class Credential:
    """Secret held in a mutable buffer so it can be zeroized.

    Python cannot guarantee no other copy exists (reveal() creates a str),
    but the guard's own copy is overwritten on lock/expiry.
    """

    __slots__ = ("_buffer",)

    def __init__(self, secret: str):
        self._buffer = bytearray(secret.encode("utf-8"))

    def reveal(self) -> str:
        """Return the secret. Callers must not keep the result."""
        return self._buffer.decode("utf-8")

    def wipe(self) -> None:
        """Overwrite the secret with zeros and release it."""
        for i in range(len(self._buffer)):
            self._buffer[i] = 0
        self._buffer = bytearray()

    @property
    def is_wiped(self) -> bool:
        return len(self._buffer) == 0

    def __repr__(self) -> str:
        return "Credential(***)" if not self.is_wiped else "Credential(<wiped>)"

    __str__ = __repr__


class CredentialSessionGuard:
    """Gate-keeps access to a temporarily unlocked trading credential.

    Never raises: every operation only changes state or returns an
    optional value.

    Example:
        guard = CredentialSessionGuard(ttl=1800)
        guard.unlock(password)
        credential = guard.get_credential()
        if credential is None:
            ...  # session locked, ask for the password again
    """

    def __init__(
        self,
        ttl: float = DEFAULT_SESSION_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize a locked guard.

        Args:
            ttl: Seconds an unlocked credential remains valid
            clock: Monotonic time source (injectable for tests)
        """
        self.ttl = ttl
        self._clock = clock
        self._credential: Optional[Credential] = None
        self._unlocked_at: Optional[float] = None
        self._timer: Optional[asyncio.TimerHandle] = None

    @property
    def state(self) -> SessionState:
        return SessionState.UNLOCKED if self.is_unlocked() else SessionState.LOCKED

    def unlock(self, password: str) -> None:
        """Store the password as the live credential and restart the TTL.

        Calling unlock() while already unlocked replaces the credential and
        the auto-lock timer; only one timer is ever pending.
        """
        if not password:
            logger.warning("Ignoring unlock with empty password")
            return

        self._clear()
        self._credential = Credential(password)
        self._unlocked_at = self._clock()

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop: TTL is still enforced lazily on read
            loop = None

        if loop is not None:
            handle: Optional[asyncio.TimerHandle] = None

            def _auto_lock() -> None:
                # A cancelled handle never runs, but guard against a
                # callback that was already queued when it was replaced.
                if self._timer is handle:
                    logger.info("Credential session expired, auto-locking")
                    self.lock()

            handle = loop.call_later(self.ttl, _auto_lock)
            self._timer = handle

        logger.info(f"Credential session unlocked for {self.ttl:.0f}s")

    def lock(self) -> None:
        """Lock unconditionally. Safe to call any number of times."""
        was_unlocked = self._credential is not None
        self._clear()
        if was_unlocked:
            logger.info("Credential session locked")

    def get_credential(self) -> Optional[Credential]:
        """Return the live credential, or None when locked or expired.

        A TTL that elapsed without the timer firing forces a lock here.
        """
        if self._credential is None or self._unlocked_at is None:
            return None
        if self._clock() - self._unlocked_at >= self.ttl:
            logger.info("Credential session TTL elapsed on read, locking")
            self.lock()
            return None
        return self._credential

    def is_unlocked(self) -> bool:
        """Check state and live TTL without side effects."""
        if self._credential is None or self._unlocked_at is None:
            return False
        return self._clock() - self._unlocked_at < self.ttl

    def expires_in(self) -> float:
        """Seconds until the session locks (0 when locked)."""
        if not self.is_unlocked():
            return 0.0
        return self.ttl - (self._clock() - self._unlocked_at)

    @property
    def has_pending_timer(self) -> bool:
        return self._timer is not None and not self._timer.cancelled()

    def _clear(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._credential is not None:
            self._credential.wipe()
            self._credential = None
        self._unlocked_at = None

    def __repr__(self) -> str:
        return f"CredentialSessionGuard(state={self.state.value}, ttl={self.ttl})"
