"""Rest timer state machine and the ticker that drives it.

The timer itself is a plain value (:class:`~backend.models.RestTimerState`)
updated by the pure functions below::

    Inactive --start--> Active --pause--> Paused --resume--> Active
    Active/Paused --skip--> Inactive
    Active --tick (reaches 0)--> Inactive

Ticks come from :class:`TimerHandle`, a one-second Kivy clock interval.
Whoever starts a handle owns it and must cancel it on every exit path; the
handle is a context manager so ``with`` does this automatically.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable

from kivy.clock import Clock

from backend.models import RestTimerState

logger = logging.getLogger(__name__)

TICK_INTERVAL = 1.0


def start_rest(timer: RestTimerState, seconds: int) -> RestTimerState:
    """Start a rest period.  A running period is restarted, not extended."""

    return RestTimerState(active=True, seconds=max(0, int(seconds)), paused=False)


def pause_rest(timer: RestTimerState) -> RestTimerState:
    if not timer.active or timer.paused:
        return timer
    return replace(timer, paused=True)


def resume_rest(timer: RestTimerState) -> RestTimerState:
    if not timer.active or not timer.paused:
        return timer
    return replace(timer, paused=False)


def skip_rest(timer: RestTimerState) -> RestTimerState:
    if not timer.active:
        return timer
    return RestTimerState()


def add_rest_time(timer: RestTimerState, delta: int) -> RestTimerState:
    """Add ``delta`` seconds to an active or paused rest period."""

    if not timer.active:
        return timer
    return replace(timer, seconds=max(0, timer.seconds + int(delta)))


def tick_rest(timer: RestTimerState) -> tuple[RestTimerState, bool]:
    """Advance ``timer`` by one second.

    Returns the new state and ``True`` when this tick finished the rest period.
    Inactive and paused timers are returned unchanged.
    """

    if not timer.active or timer.paused:
        return timer, False
    remaining = timer.seconds - 1
    if remaining <= 0:
        return RestTimerState(), True
    return replace(timer, seconds=remaining), False


def format_rest(seconds: int) -> str:
    """Return ``seconds`` as ``M:SS``."""

    m, s = divmod(max(0, int(seconds)), 60)
    return f"{m}:{s:02d}"


class TimerHandle:
    """A running one-second interval that can be cancelled exactly once.

    ``clock`` defaults to Kivy's global :data:`~kivy.clock.Clock`; any object
    with a compatible ``schedule_interval`` returning an event with
    ``cancel()`` can be supplied instead.
    """

    def __init__(
        self,
        callback: Callable[[float], object],
        interval: float = TICK_INTERVAL,
        clock=None,
    ) -> None:
        self._clock = clock if clock is not None else Clock
        self._event = self._clock.schedule_interval(callback, interval)

    @property
    def running(self) -> bool:
        return self._event is not None

    def cancel(self) -> None:
        """Stop the interval.  Safe to call more than once."""
        if self._event is not None:
            self._event.cancel()
            self._event = None

    def __enter__(self) -> "TimerHandle":
        return self

    def __exit__(self, *exc) -> None:
        self.cancel()
