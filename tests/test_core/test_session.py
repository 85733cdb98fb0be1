"""Tests for char_diff.core.session."""

from __future__ import annotations

import asyncio
import logging

import pytest

from char_diff.core.calculator import DiffCalculator, DiffOutcome
from char_diff.core.errors import ContentTooLargeError, DiffTimeoutError
from char_diff.core.models import DiffLimits
from char_diff.core.session import ERROR_HISTORY_SIZE, DiffSession, SessionState


class TestSessionSync:
    """Token bookkeeping without an event loop."""

    def test_initial_state(self) -> None:
        session = DiffSession()
        assert session.state == SessionState.idle
        assert session.data is None
        assert session.error is None
        assert session.latest_token == 0
        assert session.navigator.current is None

    def test_schedule_issues_increasing_tokens(self) -> None:
        session = DiffSession()
        first = session.schedule("a", "b")
        second = session.schedule("a", "bc")
        assert second > first
        assert session.state == SessionState.scheduled
        assert not session.is_current(first)
        assert session.is_current(second)

    def test_run_pending_commits_result(self) -> None:
        session = DiffSession()
        session.schedule("Hello", "Hello!")
        outcome = session.run_pending()
        assert outcome is not None
        assert outcome.ok
        assert session.state == SessionState.done
        assert session.data is outcome.data
        assert session.navigator.current == 0

    def test_run_pending_uses_latest_pair(self) -> None:
        session = DiffSession()
        session.schedule("a", "b")
        session.schedule("same", "same")
        session.run_pending()
        assert session.data is not None
        assert session.data.new_file.content == "same"
        assert session.navigator.current is None

    def test_run_pending_without_request(self) -> None:
        assert DiffSession().run_pending() is None

    def test_stale_commit_discarded(self, caplog: pytest.LogCaptureFixture) -> None:
        session = DiffSession()
        stale = session.schedule("a", "b")
        session.schedule("a", "c")
        outcome = DiffCalculator().try_compute("a", "b")
        with caplog.at_level(logging.DEBUG, logger="char_diff.core.session"):
            assert not session.commit(stale, outcome)
        assert session.data is None
        assert "stale" in caplog.text

    def test_failure_keeps_previous_data(self) -> None:
        session = DiffSession(DiffCalculator(DiffLimits(max_total_characters=10)))
        session.schedule("abc", "abd")
        session.run_pending()
        previous = session.data
        assert previous is not None

        session.schedule("x" * 20, "y")
        outcome = session.run_pending()
        assert outcome is not None
        assert not outcome.ok
        assert session.state == SessionState.failed
        assert isinstance(session.error, ContentTooLargeError)
        assert session.data is previous

    def test_success_clears_error(self) -> None:
        session = DiffSession()
        token = session.schedule("a", "b")
        session.commit(token, DiffOutcome(error=DiffTimeoutError(10)))
        assert session.error is not None
        session.schedule("a", "b")
        session.run_pending()
        assert session.error is None
        assert session.state == SessionState.done

    def test_clear(self) -> None:
        session = DiffSession()
        session.schedule("a", "b")
        session.run_pending()
        token = session.latest_token
        session.clear()
        assert session.state == SessionState.idle
        assert session.data is None
        assert session.navigator.current is None
        assert not session.is_current(token)


class TestErrorHistory:
    """Bounded history of committed errors."""

    def test_starts_empty(self) -> None:
        assert DiffSession().error_history == ()

    def test_failures_are_recorded_in_order(self) -> None:
        session = DiffSession()
        first = DiffTimeoutError(10)
        second = DiffTimeoutError(20)
        session.commit(session.schedule("a", "b"), DiffOutcome(error=first))
        session.commit(session.schedule("a", "c"), DiffOutcome(error=second))
        assert session.error_history == (first, second)

    def test_success_keeps_history(self) -> None:
        session = DiffSession()
        err = DiffTimeoutError(10)
        session.commit(session.schedule("a", "b"), DiffOutcome(error=err))
        session.schedule("a", "b")
        session.run_pending()
        assert session.error is None
        assert session.error_history == (err,)

    def test_stale_failure_not_recorded(self) -> None:
        session = DiffSession()
        stale = session.schedule("a", "b")
        session.schedule("a", "c")
        session.commit(stale, DiffOutcome(error=DiffTimeoutError(10)))
        assert session.error_history == ()

    def test_capped_at_last_ten(self) -> None:
        session = DiffSession()
        errors = [DiffTimeoutError(ms) for ms in range(1, 13)]
        for err in errors:
            session.commit(session.schedule("a", "b"), DiffOutcome(error=err))
        assert ERROR_HISTORY_SIZE == 10
        assert session.error_history == tuple(errors[-10:])

    def test_clear_error_history(self) -> None:
        session = DiffSession()
        session.commit(session.schedule("a", "b"), DiffOutcome(error=DiffTimeoutError(10)))
        session.clear_error_history()
        assert session.error_history == ()
        assert session.error is not None

    def test_clear_keeps_history(self) -> None:
        session = DiffSession()
        session.commit(session.schedule("a", "b"), DiffOutcome(error=DiffTimeoutError(10)))
        session.clear()
        assert len(session.error_history) == 1


class TestSessionAsync:
    """Debounced requests on an event loop."""

    @pytest.mark.asyncio
    async def test_request_computes_after_quiet_period(self) -> None:
        session = DiffSession(quiet_period_ms=1)
        outcome = await session.request("Hello", "Hello!")
        assert outcome is not None
        assert outcome.ok
        assert session.state == SessionState.done
        assert session.data is outcome.data

    @pytest.mark.asyncio
    async def test_newer_request_supersedes_older(self) -> None:
        session = DiffSession(quiet_period_ms=20)
        first = asyncio.create_task(session.request("a", "b"))
        await asyncio.sleep(0)
        second = asyncio.create_task(session.request("a", "bc"))
        results = await asyncio.gather(first, second)
        assert results[0] is None
        assert results[1] is not None
        assert session.data is not None
        assert session.data.new_file.content == "bc"

    @pytest.mark.asyncio
    async def test_slow_completion_cannot_overwrite_newer(self, slow_primitive) -> None:
        session = DiffSession(
            DiffCalculator(primitive=slow_primitive),
            quiet_period_ms=1,
        )
        slow = asyncio.create_task(session.request("old", "older"))
        # let the first request pass its quiet period and start computing
        await asyncio.sleep(0.02)
        session.schedule("new", "newer")
        assert await slow is None
        assert session.data is None
        assert session.run_pending() is not None
        assert session.data is not None
        assert session.data.new_file.content == "newer"

    @pytest.mark.asyncio
    async def test_failed_request_reports_error(self) -> None:
        session = DiffSession(
            DiffCalculator(DiffLimits(max_total_characters=5)),
            quiet_period_ms=1,
        )
        outcome = await session.request("abcdef", "g")
        assert outcome is not None
        assert isinstance(outcome.error, ContentTooLargeError)
        assert session.state == SessionState.failed


class TestSessionCancellation:
    """Cancelling a running request settles the session again."""

    @pytest.mark.asyncio
    async def test_cancel_while_computing_returns_to_idle(self, slow_primitive) -> None:
        slow_primitive.delay = 0.1
        session = DiffSession(DiffCalculator(primitive=slow_primitive), quiet_period_ms=1)
        task = asyncio.create_task(session.request("a", "b"))
        await asyncio.sleep(0.02)
        assert session.state == SessionState.computing
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert session.state == SessionState.idle
        # the abandoned worker finishing must not commit anything
        await asyncio.sleep(0.15)
        assert session.state == SessionState.idle
        assert session.data is None

    @pytest.mark.asyncio
    async def test_cancel_keeps_previous_result(self, slow_primitive) -> None:
        session = DiffSession(DiffCalculator(primitive=slow_primitive), quiet_period_ms=1)
        session.schedule("a", "b")
        session.run_pending()
        previous = session.data

        slow_primitive.delay = 0.1
        task = asyncio.create_task(session.request("a", "c"))
        await asyncio.sleep(0.02)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert session.state == SessionState.done
        assert session.data is previous

    @pytest.mark.asyncio
    async def test_cancel_after_failure_returns_to_failed(self, slow_primitive) -> None:
        session = DiffSession(DiffCalculator(primitive=slow_primitive), quiet_period_ms=1)
        session.commit(session.schedule("a", "b"), DiffOutcome(error=DiffTimeoutError(10)))

        slow_primitive.delay = 0.1
        task = asyncio.create_task(session.request("a", "c"))
        await asyncio.sleep(0.02)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert session.state == SessionState.failed

    @pytest.mark.asyncio
    async def test_new_request_after_cancel(self, slow_primitive) -> None:
        slow_primitive.delay = 0.1
        session = DiffSession(DiffCalculator(primitive=slow_primitive), quiet_period_ms=1)
        task = asyncio.create_task(session.request("a", "b"))
        await asyncio.sleep(0.02)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        slow_primitive.delay = 0.0
        outcome = await session.request("a", "bc")
        assert outcome is not None
        assert outcome.ok
        assert session.state == SessionState.done
