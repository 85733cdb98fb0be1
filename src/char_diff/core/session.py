"""Request tracking for debounced, reactive diff computation.

A session owns the latest result and a small state machine::

    idle -> scheduled -> computing -> done | failed

Every :meth:`DiffSession.schedule` call issues a new token. A completion is
committed only when its token is still the latest one; older completions are
discarded, so a slow computation never overwrites a fresher result.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from enum import StrEnum
from typing import TYPE_CHECKING

from char_diff.core.calculator import DiffCalculator, DiffOutcome
from char_diff.core.models import DEBOUNCE_MS
from char_diff.core.navigation import ChangeNavigator, build_index

if TYPE_CHECKING:
    from char_diff.core.errors import DiffError
    from char_diff.core.models import DiffData

logger = logging.getLogger(__name__)

ERROR_HISTORY_SIZE = 10


class SessionState(StrEnum):
    """Lifecycle state of a diff session."""

    idle = "idle"
    scheduled = "scheduled"
    computing = "computing"
    done = "done"
    failed = "failed"


class DiffSession:
    """Holds the current DiffData and guards it against stale completions."""

    def __init__(
        self,
        calculator: DiffCalculator | None = None,
        *,
        quiet_period_ms: float = DEBOUNCE_MS,
    ) -> None:
        """Initialize an idle session.

        Args:
            calculator: Calculator used for computations.
                Defaults to DiffCalculator() if None.
            quiet_period_ms: Debounce delay applied by :meth:`request`.
        """
        self._calculator = calculator or DiffCalculator()
        self._quiet_period_ms = quiet_period_ms
        self._token = 0
        self._pending: tuple[str | bytes, str | bytes] | None = None
        self._state = SessionState.idle
        self._data: DiffData | None = None
        self._error: DiffError | None = None
        self._error_history: deque[DiffError] = deque(maxlen=ERROR_HISTORY_SIZE)
        self.navigator = ChangeNavigator()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def data(self) -> DiffData | None:
        return self._data

    @property
    def error(self) -> DiffError | None:
        return self._error

    @property
    def error_history(self) -> tuple[DiffError, ...]:
        """The most recent committed errors, oldest first."""
        return tuple(self._error_history)

    @property
    def latest_token(self) -> int:
        return self._token

    def schedule(self, left: str | bytes, right: str | bytes) -> int:
        """Record a new input pair and invalidate any older request."""
        self._token += 1
        self._pending = (left, right)
        self._state = SessionState.scheduled
        return self._token

    def is_current(self, token: int) -> bool:
        return token == self._token

    def commit(self, token: int, outcome: DiffOutcome) -> bool:
        """Apply an outcome if its token is still the latest.

        A failed outcome records the error but keeps the previous data.

        Returns:
            True if the outcome was committed, False if it was stale.
        """
        if not self.is_current(token):
            logger.debug("Discarding stale diff result %d (latest %d)", token, self._token)
            return False

        if outcome.ok:
            self._data = outcome.data
            self._error = None
            self._state = SessionState.done
            self.navigator.update(build_index(self._data))
        else:
            self._error = outcome.error
            if outcome.error is not None:
                self._error_history.append(outcome.error)
            self._state = SessionState.failed
        return True

    def _settled_state(self) -> SessionState:
        if self._error is not None:
            return SessionState.failed
        if self._data is not None:
            return SessionState.done
        return SessionState.idle

    def _take_pending(self) -> tuple[int, str | bytes, str | bytes] | None:
        if self._pending is None or self._state != SessionState.scheduled:
            return None
        left, right = self._pending
        self._pending = None
        self._state = SessionState.computing
        return self._token, left, right

    def run_pending(self) -> DiffOutcome | None:
        """Synchronously compute the scheduled pair, if any."""
        taken = self._take_pending()
        if taken is None:
            return None
        token, left, right = taken
        outcome = self._calculator.try_compute(left, right)
        self.commit(token, outcome)
        return outcome

    async def request(self, left: str | bytes, right: str | bytes) -> DiffOutcome | None:
        """Debounce, then compute in the default executor.

        If the task is cancelled while computing, the session returns to
        its last settled state and the cancellation propagates.

        Returns:
            The committed outcome, or None if a newer request superseded
            this one before or during computation.
        """
        token = self.schedule(left, right)
        await asyncio.sleep(self._quiet_period_ms / 1000)
        if not self.is_current(token):
            return None

        taken = self._take_pending()
        if taken is None:
            return None
        token, left, right = taken

        loop = asyncio.get_running_loop()
        try:
            outcome = await loop.run_in_executor(
                None, self._calculator.try_compute, left, right
            )
        except asyncio.CancelledError:
            # the worker thread runs on, but its result is never committed
            if self.is_current(token):
                self._state = self._settled_state()
            raise
        if not self.commit(token, outcome):
            return None
        return outcome

    def clear(self) -> None:
        """Drop the current result and invalidate in-flight requests."""
        self._token += 1
        self._pending = None
        self._data = None
        self._error = None
        self._state = SessionState.idle
        self.navigator.update(build_index(None))

    def clear_error_history(self) -> None:
        """Forget previously committed errors."""
        self._error_history.clear()
