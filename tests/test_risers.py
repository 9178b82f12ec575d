import pytest

from m68kcore.exception_manager import ExceptionManager, ExceptionType
from m68kcore.risers import InterruptRiser, TraceRiser


class _Unit:
    def __init__(self) -> None:
        self.idle = True

    def __call__(self) -> bool:
        return self.idle


def test_interrupt_above_mask_is_raised_with_its_level():
    exman = ExceptionManager()
    riser = InterruptRiser(exman, 0)
    riser.cycle(3, 2)
    assert exman.is_raised(ExceptionType.INTERRUPT)
    assert exman.accept_interrupt() == 3


@pytest.mark.parametrize("ipl,ipm", [(0, 0), (2, 2), (1, 5), (6, 6)])
def test_interrupt_at_or_below_mask_is_not_raised(ipl, ipm):
    exman = ExceptionManager()
    riser = InterruptRiser(exman, 0)
    riser.cycle(ipl, ipm)
    assert not exman.is_raised(ExceptionType.INTERRUPT)


def test_level_seven_is_edge_triggered():
    exman = ExceptionManager()
    riser = InterruptRiser(exman, 0)
    riser.cycle(7, 7)
    assert exman.accept_interrupt() == 7
    riser.cycle(7, 7)
    assert not exman.is_raised(ExceptionType.INTERRUPT)


def test_level_seven_held_from_start_is_not_raised_when_masked():
    exman = ExceptionManager()
    riser = InterruptRiser(exman, 7)
    riser.cycle(7, 7)
    assert not exman.is_raised(ExceptionType.INTERRUPT)


def test_pending_interrupt_cleared_when_level_drops():
    exman = ExceptionManager()
    riser = InterruptRiser(exman, 0)
    riser.cycle(3, 0)
    riser.cycle(0, 0)
    assert not exman.is_raised(ExceptionType.INTERRUPT)


def test_pending_interrupt_replaced_when_level_rises():
    exman = ExceptionManager()
    riser = InterruptRiser(exman, 0)
    riser.cycle(3, 0)
    riser.cycle(5, 0)
    assert exman.accept_interrupt() == 5


def test_pending_interrupt_kept_while_level_is_stable():
    exman = ExceptionManager()
    riser = InterruptRiser(exman, 0)
    riser.cycle(4, 1)
    riser.cycle(4, 1)
    assert exman.accept_interrupt() == 4
    assert not exman.is_raised_any()


def test_trace_riser_requires_callback():
    with pytest.raises(ValueError):
        TraceRiser(ExceptionManager(), None)


def _run_instruction(riser: TraceRiser, unit: _Unit, trace: bool) -> None:
    unit.idle = True
    riser.cycle(trace)
    unit.idle = False
    riser.post_cycle()
    riser.cycle(trace)
    unit.idle = True
    riser.post_cycle()


def test_trace_raised_after_instruction_with_tracing():
    exman = ExceptionManager()
    unit = _Unit()
    riser = TraceRiser(exman, unit)
    _run_instruction(riser, unit, True)
    assert exman.is_raised(ExceptionType.TRACE)


def test_no_trace_without_tracing():
    exman = ExceptionManager()
    unit = _Unit()
    riser = TraceRiser(exman, unit)
    _run_instruction(riser, unit, False)
    assert not exman.is_raised(ExceptionType.TRACE)


def test_trace_flag_sampled_only_while_idle():
    exman = ExceptionManager()
    unit = _Unit()
    riser = TraceRiser(exman, unit)
    riser.cycle(False)
    unit.idle = False
    riser.post_cycle()
    riser.cycle(True)
    unit.idle = True
    riser.post_cycle()
    assert not exman.is_raised(ExceptionType.TRACE)


@pytest.mark.parametrize(
    "rise",
    [ExceptionManager.rise_illegal_instruction, ExceptionManager.rise_privilege_violations],
)
def test_no_trace_after_illegal_or_privilege_exception(rise):
    exman = ExceptionManager()
    unit = _Unit()
    riser = TraceRiser(exman, unit)
    rise(exman)
    _run_instruction(riser, unit, True)
    assert not exman.is_raised(ExceptionType.TRACE)


def test_reset_forgets_executing_instruction():
    exman = ExceptionManager()
    unit = _Unit()
    riser = TraceRiser(exman, unit)
    riser.cycle(True)
    unit.idle = False
    riser.post_cycle()
    riser.reset()
    unit.idle = True
    riser.post_cycle()
    assert not exman.is_raised(ExceptionType.TRACE)


def test_no_trace_when_unit_never_left_idle():
    exman = ExceptionManager()
    unit = _Unit()
    riser = TraceRiser(exman, unit)
    riser.cycle(True)
    riser.post_cycle()
    riser.post_cycle()
    assert not exman.is_raised_any()