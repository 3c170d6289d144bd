import pytest

from backend.models import RestTimerState
from backend.rest_timer import (
    TimerHandle,
    add_rest_time,
    format_rest,
    pause_rest,
    resume_rest,
    skip_rest,
    start_rest,
    tick_rest,
)

INACTIVE = RestTimerState()


def test_start_and_restart():
    timer = start_rest(INACTIVE, 90)
    assert timer == RestTimerState(active=True, seconds=90, paused=False)
    paused = pause_rest(tick_rest(timer)[0])
    assert paused.seconds == 89 and paused.paused
    # starting again resets rather than stacking
    assert start_rest(paused, 90) == RestTimerState(active=True, seconds=90, paused=False)


def test_pause_resume_only_when_applicable():
    assert pause_rest(INACTIVE) is INACTIVE
    assert resume_rest(INACTIVE) is INACTIVE

    running = start_rest(INACTIVE, 30)
    assert resume_rest(running) is running
    paused = pause_rest(running)
    assert pause_rest(paused) is paused
    assert resume_rest(paused) == running


def test_skip_always_deactivates():
    assert skip_rest(start_rest(INACTIVE, 60)) == INACTIVE
    assert skip_rest(pause_rest(start_rest(INACTIVE, 60))) == INACTIVE
    assert skip_rest(INACTIVE) is INACTIVE


def test_add_time_only_while_active_or_paused():
    assert add_rest_time(INACTIVE, 30) is INACTIVE
    assert add_rest_time(start_rest(INACTIVE, 60), 30).seconds == 90
    paused = pause_rest(start_rest(INACTIVE, 60))
    extended = add_rest_time(paused, 15)
    assert extended.seconds == 75 and extended.paused
    assert add_rest_time(start_rest(INACTIVE, 10), -30).seconds == 0


def test_tick_counts_down_to_completion():
    timer = start_rest(INACTIVE, 3)
    finished_flags = []
    for _ in range(3):
        timer, finished = tick_rest(timer)
        finished_flags.append(finished)
    assert finished_flags == [False, False, True]
    assert timer == INACTIVE


def test_tick_ignores_paused_and_inactive():
    paused = pause_rest(start_rest(INACTIVE, 5))
    assert tick_rest(paused) == (paused, False)
    assert tick_rest(INACTIVE) == (INACTIVE, False)


@pytest.mark.parametrize("seconds, text", [(0, "0:00"), (9, "0:09"), (90, "1:30"), (-4, "0:00")])
def test_format_rest(seconds, text):
    assert format_rest(seconds) == text


def test_timer_handle_cancel_is_idempotent(fake_clock):
    ticks = []
    handle = TimerHandle(ticks.append, clock=fake_clock)
    assert handle.running
    assert fake_clock.events[0].interval == 1.0
    fake_clock.advance(2)
    handle.cancel()
    handle.cancel()
    fake_clock.advance(2)
    assert ticks == [1.0, 1.0]
    assert not handle.running
    assert fake_clock.active_events == []


def test_timer_handle_released_on_error(fake_clock):
    with pytest.raises(RuntimeError):
        with TimerHandle(lambda dt: None, clock=fake_clock):
            raise RuntimeError("screen closed")
    assert fake_clock.active_events == []


def test_timer_handle_uses_kivy_clock_by_default():
    handle = TimerHandle(lambda dt: None)
    event = handle._event
    assert event.is_triggered
    handle.cancel()
    assert not event.is_triggered
