import pytest

from m68kcore.errors import InternalError, NotImplementedFeature
from m68kcore.exception_manager import (
    AddressError,
    ExceptionGroup,
    ExceptionManager,
    ExceptionType,
    group_exceptions,
)


def test_fresh_manager_has_nothing_raised():
    exman = ExceptionManager()
    assert not exman.is_raised_any()
    assert all(not exman.is_raised(ex) for ex in ExceptionType)
    assert all(not exman.is_raised(g) for g in ExceptionGroup)


def test_groups_cover_every_exception_once():
    listed = [ex for g in ExceptionGroup for ex in group_exceptions(g)]
    assert len(listed) == len(set(listed))
    assert set(listed) == set(ExceptionType) - {ExceptionType.NONE}


def test_group_zero_priority_order():
    assert group_exceptions(ExceptionGroup.GROUP_0) == (
        ExceptionType.RESET,
        ExceptionType.ADDRESS_ERROR,
        ExceptionType.BUS_ERROR,
    )


def test_rise_and_accept():
    exman = ExceptionManager()
    exman.rise_trapv()
    assert exman.is_raised(ExceptionType.TRAPV)
    assert exman.is_raised(ExceptionGroup.GROUP_2)
    assert not exman.is_raised(ExceptionGroup.GROUP_1)
    assert exman.is_raised_any()
    exman.accept(ExceptionType.TRAPV)
    assert not exman.is_raised_any()


def test_accept_not_raised_fails():
    with pytest.raises(InternalError):
        ExceptionManager().accept(ExceptionType.TRACE)


@pytest.mark.parametrize(
    "ex",
    [
        ExceptionType.ADDRESS_ERROR,
        ExceptionType.BUS_ERROR,
        ExceptionType.INTERRUPT,
        ExceptionType.TRAP,
    ],
)
def test_generic_rise_refuses_exceptions_with_data(ex):
    exman = ExceptionManager()
    with pytest.raises(InternalError):
        exman.rise(ex)
    assert not exman.is_raised(ex)


def test_generic_rise():
    exman = ExceptionManager()
    exman.rise(ExceptionType.CHK_INSTRUCTION)
    assert exman.is_raised(ExceptionType.CHK_INSTRUCTION)


def test_double_rise_is_not_supported():
    exman = ExceptionManager()
    exman.rise_trace()
    with pytest.raises(NotImplementedFeature):
        exman.rise_trace()


def test_address_error_round_trip():
    exman = ExceptionManager()
    error = AddressError(address=0x1001, func_codes=5, rw=True, in_=False)
    exman.rise_address_error(error)
    assert exman.is_raised(ExceptionGroup.GROUP_0)
    assert exman.accept_address_error() == error
    assert not exman.is_raised(ExceptionType.ADDRESS_ERROR)


def test_bus_error_round_trip():
    exman = ExceptionManager()
    error = AddressError(address=0xFF0000, func_codes=2, rw=False, in_=True)
    exman.rise_bus_error(error)
    assert exman.accept_bus_error() == error


def test_trap_and_interrupt_payloads():
    exman = ExceptionManager()
    exman.rise_trap(35)
    exman.rise_interrupt(6)
    assert exman.accept_trap() == 35
    assert exman.accept_interrupt() == 6
    assert not exman.is_raised_any()


def test_accept_all_clears_everything():
    exman = ExceptionManager()
    exman.rise_reset()
    exman.rise_illegal_instruction()
    exman.rise_privilege_violations()
    exman.rise_line_1010_emulator()
    exman.rise_line_1111_emulator()
    exman.rise_division_by_zero()
    exman.accept_all()
    assert not exman.is_raised_any()
    # everything can be raised again afterwards
    exman.rise_reset()
    assert exman.is_raised(ExceptionType.RESET)