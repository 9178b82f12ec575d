"""Effective address modes and the groups of modes instructions accept."""

from enum import Enum


class AddressingMode(Enum):
    """Effective addressing mode."""

    DATA_REG = "Dn"
    ADDR_REG = "An"
    INDIR = "(An)"
    POSTINC = "(An)+"
    PREDEC = "-(An)"
    DISP_INDIR = "(d16,An)"
    INDEX_INDIR = "(d8,An,Xn)"
    ABS_SHORT = "(xxx).W"
    ABS_LONG = "(xxx).L"
    DISP_PC = "(d16,PC)"
    INDEX_PC = "(d8,PC,Xn)"
    IMM = "#<data>"
    UNKNOWN = "unknown"


class EaModes(Enum):
    """Named groups of addressing modes."""

    NONE = "none"
    ALL = "all"
    DATA = "data"
    DATA_ALTERABLE = "data_alterable"
    DATA_EXCEPT_IMM = "data_except_imm"
    ALTERABLE = "alterable"
    MEMORY_ALTERABLE = "memory_alterable"
    CONTROL = "control"
    PREDECREMENT = "predecrement"
    POSTINCREMENT = "postincrement"


_M = AddressingMode

_REGISTER_MODES = (
    _M.DATA_REG,
    _M.ADDR_REG,
    _M.INDIR,
    _M.POSTINC,
    _M.PREDEC,
    _M.DISP_INDIR,
    _M.INDEX_INDIR,
)

_SPECIAL_MODES = (
    _M.ABS_SHORT,
    _M.ABS_LONG,
    _M.DISP_PC,
    _M.INDEX_PC,
    _M.IMM,
)

_GROUPS: dict[EaModes, tuple[AddressingMode, ...]] = {
    EaModes.ALL: (
        _M.DATA_REG, _M.ADDR_REG, _M.INDIR, _M.POSTINC, _M.PREDEC, _M.DISP_INDIR,
        _M.INDEX_INDIR, _M.ABS_SHORT, _M.ABS_LONG, _M.DISP_PC, _M.INDEX_PC, _M.IMM,
    ),
    EaModes.DATA: (
        _M.DATA_REG, _M.INDIR, _M.POSTINC, _M.PREDEC, _M.DISP_INDIR, _M.INDEX_INDIR,
        _M.ABS_SHORT, _M.ABS_LONG, _M.DISP_PC, _M.INDEX_PC, _M.IMM,
    ),
    EaModes.DATA_ALTERABLE: (
        _M.DATA_REG, _M.INDIR, _M.POSTINC, _M.PREDEC, _M.DISP_INDIR, _M.INDEX_INDIR,
        _M.ABS_SHORT, _M.ABS_LONG,
    ),
    EaModes.DATA_EXCEPT_IMM: (
        _M.DATA_REG, _M.INDIR, _M.POSTINC, _M.PREDEC, _M.DISP_INDIR, _M.INDEX_INDIR,
        _M.ABS_SHORT, _M.ABS_LONG, _M.DISP_PC, _M.INDEX_PC,
    ),
    EaModes.ALTERABLE: (
        _M.DATA_REG, _M.ADDR_REG, _M.INDIR, _M.POSTINC, _M.PREDEC, _M.DISP_INDIR,
        _M.INDEX_INDIR, _M.ABS_SHORT, _M.ABS_LONG,
    ),
    EaModes.MEMORY_ALTERABLE: (
        _M.INDIR, _M.POSTINC, _M.PREDEC, _M.DISP_INDIR, _M.INDEX_INDIR,
        _M.ABS_SHORT, _M.ABS_LONG,
    ),
    EaModes.CONTROL: (
        _M.INDIR, _M.DISP_INDIR, _M.INDEX_INDIR, _M.ABS_SHORT, _M.ABS_LONG,
        _M.DISP_PC, _M.INDEX_PC,
    ),
    EaModes.PREDECREMENT: (
        _M.INDIR, _M.PREDEC, _M.DISP_INDIR, _M.INDEX_INDIR, _M.ABS_SHORT, _M.ABS_LONG,
    ),
    EaModes.POSTINCREMENT: (
        _M.INDIR, _M.POSTINC, _M.DISP_INDIR, _M.INDEX_INDIR, _M.ABS_SHORT,
        _M.ABS_LONG, _M.DISP_PC, _M.INDEX_PC,
    ),
}


def decode_mode(ea: int) -> AddressingMode:
    """Decode the 6-bit mode/register field of an effective address."""
    mode = (ea >> 3) & 0x7
    reg = ea & 0x7
    if mode < 0b111:
        return _REGISTER_MODES[mode]
    if reg < len(_SPECIAL_MODES):
        return _SPECIAL_MODES[reg]
    return AddressingMode.UNKNOWN


def supported_modes(modes: EaModes) -> tuple[AddressingMode, ...]:
    """Return the addressing modes that belong to the group ``modes``."""
    return _GROUPS.get(modes, ())


def mode_is_supported(modes: EaModes, addr_mode: AddressingMode) -> bool:
    """Tell whether ``addr_mode`` belongs to the group ``modes``."""
    if addr_mode is AddressingMode.UNKNOWN or modes is EaModes.NONE:
        return False
    return addr_mode in supported_modes(modes)