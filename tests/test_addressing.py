import pytest
from hypothesis import given, strategies as st

from m68kcore.addressing import (
    AddressingMode,
    EaModes,
    decode_mode,
    mode_is_supported,
    supported_modes,
)


@pytest.mark.parametrize(
    "ea, expected",
    [
        (0b000000, AddressingMode.DATA_REG),
        (0b001011, AddressingMode.ADDR_REG),
        (0b010000, AddressingMode.INDIR),
        (0b011000, AddressingMode.POSTINC),
        (0b100000, AddressingMode.PREDEC),
        (0b101000, AddressingMode.DISP_INDIR),
        (0b110000, AddressingMode.INDEX_INDIR),
        (0b111000, AddressingMode.ABS_SHORT),
        (0b111001, AddressingMode.ABS_LONG),
        (0b111010, AddressingMode.DISP_PC),
        (0b111011, AddressingMode.INDEX_PC),
        (0b111100, AddressingMode.IMM),
        (0b111101, AddressingMode.UNKNOWN),
        (0b111111, AddressingMode.UNKNOWN),
    ],
)
def test_decode_mode(ea, expected):
    assert decode_mode(ea) is expected


@given(st.integers(min_value=0, max_value=0b110111))
def test_register_modes_ignore_register_field(ea):
    assert decode_mode(ea) is decode_mode(ea & 0b111000)


@given(st.integers(min_value=0, max_value=0x3F), st.integers(min_value=1, max_value=3))
def test_bits_above_ea_field_are_ignored(ea, high):
    assert decode_mode(ea | (high << 6)) is decode_mode(ea)


def test_decode_covers_every_known_mode():
    decoded = {decode_mode(ea) for ea in range(64)}
    assert decoded == set(AddressingMode)


def test_none_group_is_empty():
    assert supported_modes(EaModes.NONE) == ()
    assert not any(mode_is_supported(EaModes.NONE, m) for m in AddressingMode)


def test_unknown_mode_never_supported():
    assert not any(mode_is_supported(g, AddressingMode.UNKNOWN) for g in EaModes)


def test_all_group_holds_every_known_mode():
    known = set(AddressingMode) - {AddressingMode.UNKNOWN}
    assert set(supported_modes(EaModes.ALL)) == known


def test_data_group_excludes_address_register():
    data = set(supported_modes(EaModes.DATA))
    assert data == set(supported_modes(EaModes.ALL)) - {AddressingMode.ADDR_REG}


def test_alterable_excludes_pc_relative_and_immediate():
    alterable = set(supported_modes(EaModes.ALTERABLE))
    excluded = {AddressingMode.DISP_PC, AddressingMode.INDEX_PC, AddressingMode.IMM}
    assert alterable == set(supported_modes(EaModes.ALL)) - excluded


def test_memory_alterable_excludes_register_direct():
    mem = set(supported_modes(EaModes.MEMORY_ALTERABLE))
    alterable = set(supported_modes(EaModes.ALTERABLE))
    assert mem == alterable - {AddressingMode.DATA_REG, AddressingMode.ADDR_REG}


def test_data_except_imm():
    assert set(supported_modes(EaModes.DATA_EXCEPT_IMM)) == set(
        supported_modes(EaModes.DATA)
    ) - {AddressingMode.IMM}


def test_data_alterable_is_intersection_of_data_and_alterable():
    assert set(supported_modes(EaModes.DATA_ALTERABLE)) == set(
        supported_modes(EaModes.DATA)
    ) & set(supported_modes(EaModes.ALTERABLE))


def test_control_has_no_register_or_increment_modes():
    control = set(supported_modes(EaModes.CONTROL))
    for mode in (
        AddressingMode.DATA_REG,
        AddressingMode.ADDR_REG,
        AddressingMode.POSTINC,
        AddressingMode.PREDEC,
        AddressingMode.IMM,
    ):
        assert mode not in control
    assert AddressingMode.DISP_PC in control


def test_move_specific_groups():
    assert mode_is_supported(EaModes.PREDECREMENT, AddressingMode.PREDEC)
    assert not mode_is_supported(EaModes.PREDECREMENT, AddressingMode.POSTINC)
    assert mode_is_supported(EaModes.POSTINCREMENT, AddressingMode.POSTINC)
    assert not mode_is_supported(EaModes.POSTINCREMENT, AddressingMode.PREDEC)


@pytest.mark.parametrize("group", list(EaModes))
def test_mode_is_supported_agrees_with_supported_modes(group):
    listed = set(supported_modes(group))
    for mode in AddressingMode:
        assert mode_is_supported(group, mode) == (mode in listed)