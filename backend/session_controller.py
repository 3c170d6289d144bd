"""Owner of a live workout session.

The controller keeps the current :class:`~backend.models.WorkoutSessionState`,
feeds every interaction through the reducer in :mod:`backend.workout_session`
and runs the one-second tickers for the rest countdown and the elapsed-time
display.  Both tickers are released on every way out of a session:
:meth:`SessionController.finish`, :meth:`SessionController.abandon`,
:meth:`SessionController.close` or leaving a ``with`` block.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from backend import settings
from backend import workout_session as ws
from backend.models import SessionSummary, WorkoutSessionState, WorkoutTemplate
from backend.rest_timer import TimerHandle

logger = logging.getLogger(__name__)


class SessionController:
    """Drive a workout session for the screen that displays it.

    ``rest_duration`` and ``carry_forward`` default to the user's settings.
    ``on_change`` receives every new state, ``on_rest_complete`` is called
    when a rest countdown reaches zero and ``on_elapsed`` receives the elapsed
    seconds once per second.
    """

    def __init__(
        self,
        workout: WorkoutTemplate,
        *,
        rest_duration: Optional[int] = None,
        carry_forward: Optional[bool] = None,
        clock=None,
        on_change: Optional[Callable[[WorkoutSessionState], None]] = None,
        on_rest_complete: Optional[Callable[[], None]] = None,
        on_elapsed: Optional[Callable[[int], None]] = None,
    ) -> None:
        defaults = settings.session_defaults()
        if rest_duration is None:
            rest_duration = defaults.rest_duration
        if carry_forward is None:
            carry_forward = defaults.carry_forward

        self.state = ws.start_session(
            workout, rest_duration=int(rest_duration), carry_forward=bool(carry_forward)
        )
        self.on_change = on_change
        self.on_rest_complete = on_rest_complete
        self.on_elapsed = on_elapsed
        self.finished = False
        self.abandoned = False
        self._clock = clock
        self._rest_ticker: Optional[TimerHandle] = None
        self._elapsed_ticker: Optional[TimerHandle] = TimerHandle(
            self._tick_elapsed, clock=clock
        )

    # ------------------------------------------------------------------
    # Lifetime
    # ------------------------------------------------------------------

    def __enter__(self) -> "SessionController":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    @property
    def timers_running(self) -> bool:
        return any(
            ticker is not None and ticker.running
            for ticker in (self._rest_ticker, self._elapsed_ticker)
        )

    def close(self) -> None:
        """Cancel both tickers.  Safe to call repeatedly."""
        if self._rest_ticker is not None:
            self._rest_ticker.cancel()
            self._rest_ticker = None
        if self._elapsed_ticker is not None:
            self._elapsed_ticker.cancel()
            self._elapsed_ticker = None

    def finish(self, overall_notes: Optional[str] = None) -> SessionSummary:
        """End the workout and return its summary for storage."""
        self._ensure_active()
        try:
            summary = ws.finish(self.state, overall_notes)
        finally:
            self.close()
        self.finished = True
        return summary

    def abandon(self) -> None:
        """End the workout without producing a summary."""
        self._ensure_active()
        self.close()
        self.abandoned = True
        logger.info("Abandoned session for %r", self.state.workout.name)

    @property
    def status(self) -> ws.SessionStatus:
        if self.finished:
            return ws.SessionStatus.FINISHED
        return ws.session_status(self.state)

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def _ensure_active(self) -> None:
        if self.finished or self.abandoned:
            raise RuntimeError("Session is no longer active")

    def dispatch(self, action: dict) -> WorkoutSessionState:
        """Apply ``action`` to the current state and return the new state."""
        self._ensure_active()
        self._set_state(ws.dispatch(self.state, action))
        return self.state

    def _set_state(self, new_state: WorkoutSessionState) -> None:
        if new_state is self.state:
            return
        self.state = new_state
        self._sync_rest_ticker()
        if self.on_change:
            self.on_change(new_state)

    def _sync_rest_ticker(self) -> None:
        timer = self.state.rest_timer
        should_run = timer.active and not timer.paused
        if should_run and self._rest_ticker is None:
            logger.debug("Rest timer running: %ss", timer.seconds)
            self._rest_ticker = TimerHandle(self._tick_rest, clock=self._clock)
        elif not should_run and self._rest_ticker is not None:
            self._rest_ticker.cancel()
            self._rest_ticker = None

    def _tick_rest(self, dt: float) -> None:
        new_state, rest_over = ws.tick_rest_timer(self.state)
        self._set_state(new_state)
        if rest_over:
            logger.info("Rest period complete")
            if self.on_rest_complete:
                self.on_rest_complete()

    def _tick_elapsed(self, dt: float) -> None:
        if self.on_elapsed:
            self.on_elapsed(ws.elapsed_seconds(self.state))

    # ------------------------------------------------------------------
    # Convenience wrappers used by the session screen
    # ------------------------------------------------------------------

    def toggle_set(self, exercise_index: int, set_index: int) -> WorkoutSessionState:
        return self.dispatch(
            {"type": "toggle_set", "exercise_index": exercise_index, "set_index": set_index}
        )

    def update_set(
        self, exercise_index: int, set_index: int, field: str, value
    ) -> WorkoutSessionState:
        return self.dispatch(
            {
                "type": "update_set",
                "exercise_index": exercise_index,
                "set_index": set_index,
                "field": field,
                "value": value,
            }
        )

    def add_set(self, exercise_index: int) -> WorkoutSessionState:
        return self.dispatch({"type": "add_set", "exercise_index": exercise_index})

    def remove_set(self, exercise_index: int) -> WorkoutSessionState:
        return self.dispatch({"type": "remove_set", "exercise_index": exercise_index})

    def advance_exercise(self) -> WorkoutSessionState:
        return self.dispatch({"type": "advance_exercise"})

    def pause_rest(self) -> WorkoutSessionState:
        return self.dispatch({"type": "pause_rest"})

    def resume_rest(self) -> WorkoutSessionState:
        return self.dispatch({"type": "resume_rest"})

    def skip_rest(self) -> WorkoutSessionState:
        return self.dispatch({"type": "skip_rest"})

    def add_rest_time(self, delta: int) -> WorkoutSessionState:
        return self.dispatch({"type": "add_rest_time", "delta": delta})

    def primary_action(self, focused_set_index: Optional[int] = None) -> ws.PrimaryAction:
        return ws.primary_action(self.state, focused_set_index)
