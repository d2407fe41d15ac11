"""Tests for the sequence scheduler."""

import pytest

from delux.errors import DeviceError, InvalidColor, InvalidSequenceConfig
from delux.sequence import (
    Emit,
    GeneratorSteps,
    MachineSteps,
    ManualClock,
    SchedulerState,
    SequenceScheduler,
    Signal,
    StaticSteps,
)


class Recorder:
    """Executor that records emits and can fail on chosen calls."""

    def __init__(self, fail_on=()):
        self.emits = []
        self.calls = 0
        self.fail_on = set(fail_on)

    def __call__(self, emit):
        self.calls += 1
        if self.calls in self.fail_on:
            raise DeviceError(f"call {self.calls} failed")
        self.emits.append(emit)


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def errors():
    return []


@pytest.fixture
def scheduler(clock, recorder, errors):
    return SequenceScheduler(clock, recorder, on_error=errors.append)


def looping(*colors):
    return StaticSteps([(color, 1) for color in colors], loop=True)


class TestTicking:

    def test_starts_idle(self, scheduler):
        assert scheduler.state is SchedulerState.IDLE
        assert not scheduler.is_running

    def test_first_tick_after_one_cycle(self, scheduler, clock, recorder):
        scheduler.start(looping("#F00"), 200)
        assert recorder.emits == []

        clock.advance(0.2)
        assert len(recorder.emits) == 1

    def test_tick_every_cycle(self, scheduler, clock, recorder):
        scheduler.start(looping("#F00", "#0F0"), 200)
        clock.advance(1.0)

        assert [e.color for e in recorder.emits] == ["#F00", "#0F0", "#F00", "#0F0", "#F00"]
        assert scheduler.tick_count == 5
        assert scheduler.is_running

    def test_one_pending_tick(self, scheduler, clock):
        scheduler.start(looping("#F00"), 100)
        clock.advance(0.35)
        assert clock.pending == 1

    def test_non_looping_completes(self, scheduler, clock, recorder):
        scheduler.start(StaticSteps([("#F00", 1), ("#0F0", 2)]), 100)
        clock.advance(1.0)

        assert len(recorder.emits) == 2
        assert scheduler.state is SchedulerState.COMPLETED
        assert scheduler.tick_count == 3
        assert clock.pending == 0

    def test_continue_sends_nothing(self, scheduler, clock, recorder):
        scheduler.start(GeneratorSteps(lambda position: True), 100)
        clock.advance(1.0)

        assert recorder.emits == []
        assert scheduler.tick_count == 10
        assert scheduler.is_running

    def test_stop_signal_completes(self, scheduler, clock):
        scheduler.start(GeneratorSteps(lambda position: position.index < 2), 100)
        clock.advance(1.0)

        assert scheduler.state is SchedulerState.COMPLETED
        assert scheduler.tick_count == 3

    def test_final_emit_completes_after_sending(self, scheduler, clock, recorder):
        scheduler.start(GeneratorSteps(lambda position: Emit("#F00", 1, final=True)), 100)
        clock.advance(1.0)

        assert len(recorder.emits) == 1
        assert scheduler.state is SchedulerState.COMPLETED


class TestImmediate:

    def test_zero_cycle_drains_synchronously(self, scheduler, clock, recorder):
        scheduler.start(StaticSteps([("#00F", 1), ("#FFF", 2), ("#F00", 3)]), 0)

        assert [e.color for e in recorder.emits] == ["#00F", "#FFF", "#F00"]
        assert scheduler.state is SchedulerState.COMPLETED
        assert clock.pending == 0

    def test_zero_cycle_looping_is_rejected(self, scheduler):
        with pytest.raises(InvalidSequenceConfig):
            scheduler.start(looping("#F00"), 0)
        assert scheduler.state is SchedulerState.IDLE

    def test_rejected_start_keeps_running_sequence(self, scheduler, clock, recorder):
        scheduler.start(looping("#F00"), 100)
        with pytest.raises(InvalidSequenceConfig):
            scheduler.start(looping("#0F0"), 0)

        clock.advance(0.1)
        assert [e.color for e in recorder.emits] == ["#F00"]

    def test_negative_cycle_is_rejected(self, scheduler):
        with pytest.raises(InvalidSequenceConfig):
            scheduler.start(StaticSteps([("#F00", 1)]), -5)

    def test_endless_immediate_sequence_is_halted(self, scheduler):
        scheduler.start(GeneratorSteps(lambda position: True, loop=False), 0)
        assert scheduler.state is SchedulerState.ERRORED
        assert isinstance(scheduler.error, InvalidSequenceConfig)


class TestCancellation:

    def test_start_replaces_running_sequence(self, scheduler, clock, recorder):
        scheduler.start(looping("#A00"), 100)
        clock.advance(0.25)
        scheduler.start(looping("#B00"), 100)
        clock.advance(1.0)

        colors = [e.color for e in recorder.emits]
        assert colors[:2] == ["#A00", "#A00"]
        assert set(colors[2:]) == {"#B00"}
        assert len(colors) == 12

    def test_stop_prevents_further_ticks(self, scheduler, clock, recorder):
        scheduler.start(looping("#F00"), 100)
        clock.advance(0.3)
        scheduler.stop()
        clock.advance(5.0)

        assert len(recorder.emits) == 3
        assert scheduler.state is SchedulerState.STOPPED
        assert clock.pending == 0

    def test_stop_right_after_start(self, scheduler, clock, recorder):
        scheduler.start(looping("#F00"), 100)
        scheduler.stop()
        clock.advance(5.0)

        assert recorder.emits == []
        assert scheduler.tick_count == 0

    def test_step_that_stops_its_sequence_sends_nothing(self, scheduler, clock, recorder):
        def stop_then_step(position):
            scheduler.stop()
            return ("#00F", 1)

        scheduler.start(GeneratorSteps(stop_then_step), 100)
        clock.advance(1.0)

        assert recorder.emits == []
        assert scheduler.state is SchedulerState.STOPPED
        assert clock.pending == 0

    def test_step_that_replaces_its_sequence(self, scheduler, clock, recorder):
        def replace_then_step(position):
            scheduler.start(StaticSteps([("#F00", 2), ("#0F0", 3)]), 100)
            return ("#00F", 1)

        scheduler.start(GeneratorSteps(replace_then_step), 100)
        clock.advance(1.0)

        assert [e.color for e in recorder.emits] == ["#F00", "#0F0"]
        assert scheduler.state is SchedulerState.COMPLETED

    def test_stop_is_idempotent(self, scheduler):
        scheduler.stop()
        assert scheduler.state is SchedulerState.IDLE

        scheduler.start(looping("#F00"), 100)
        scheduler.stop()
        scheduler.stop()
        assert scheduler.state is SchedulerState.STOPPED

    def test_stale_tick_is_ignored(self, scheduler, clock, recorder):
        scheduler.start(looping("#F00"), 100)
        stale_token = scheduler._token
        scheduler.start(looping("#0F0"), 100)

        scheduler._on_tick(stale_token)
        assert recorder.emits == []

    def test_restart_after_completion(self, scheduler, clock, recorder):
        scheduler.start(StaticSteps([("#F00", 1)]), 0)
        scheduler.start(StaticSteps([("#0F0", 1)]), 0)

        assert [e.color for e in recorder.emits] == ["#F00", "#0F0"]
        assert scheduler.state is SchedulerState.COMPLETED

    def test_machine_restarts_from_initial_state(self, scheduler, recorder):
        def count_to_two(state):
            if state < 2:
                return state + 1, Emit("#FFF", state + 1)
            return state, Signal.STOP

        source = MachineSteps(0, count_to_two, loop=False)
        scheduler.start(source, 0)
        scheduler.start(source, 0)

        assert [e.target for e in recorder.emits] == [1, 2, 1, 2]
        assert source.state == 2


class TestErrors:

    def test_device_error_on_third_tick_halts(self, clock, errors):
        recorder = Recorder(fail_on={3})
        scheduler = SequenceScheduler(clock, recorder, on_error=errors.append)

        scheduler.start(looping("#F00", "#0F0"), 100)
        clock.advance(0.3)

        assert scheduler.state is SchedulerState.ERRORED
        assert isinstance(scheduler.error, DeviceError)
        assert errors == [scheduler.error]

        clock.advance(5.0)
        assert recorder.calls == 3
        assert scheduler.tick_count == 3
        assert clock.pending == 0

    def test_invalid_color_halts_without_error_hook(self, scheduler, clock, errors):
        def bad_color(position):
            raise InvalidColor("nope")

        scheduler.start(GeneratorSteps(bad_color), 100)
        clock.advance(1.0)

        assert scheduler.state is SchedulerState.ERRORED
        assert isinstance(scheduler.error, InvalidColor)
        assert errors == []
        assert scheduler.tick_count == 1

    def test_unexpected_error_halts(self, scheduler, clock):
        scheduler.start(GeneratorSteps(lambda position: 1 / 0), 100)
        clock.advance(1.0)

        assert scheduler.state is SchedulerState.ERRORED
        assert isinstance(scheduler.error, ZeroDivisionError)

    def test_new_start_clears_error(self, clock, errors):
        scheduler = SequenceScheduler(clock, Recorder(fail_on={1}), on_error=errors.append)
        scheduler.start(looping("#F00"), 100)
        clock.advance(0.1)
        assert scheduler.state is SchedulerState.ERRORED

        scheduler.start(looping("#F00"), 100)
        assert scheduler.is_running
        assert scheduler.error is None


def test_manual_clock_orders_callbacks():
    clock = ManualClock()
    fired = []
    clock.call_later(0.2, fired.append, "b")
    clock.call_later(0.1, fired.append, "a")
    handle = clock.call_later(0.15, fired.append, "cancelled")
    handle.cancel()

    assert clock.advance(1.0) == 2
    assert fired == ["a", "b"]
    assert clock.time() == 1.0


def test_signal_values_are_distinct():
    assert len({Signal.CONTINUE, Signal.STOP, Signal.DONE}) == 3
