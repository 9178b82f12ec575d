"""Shifts, rotates, bit tests, condition codes and status register operations."""

from __future__ import annotations

from typing import Callable

from m68kcore.addressing import AddressingMode
from m68kcore.alu import StatusFlags, clear_unimplemented_flags, lsb, msb, value
from m68kcore.errors import InternalError
from m68kcore.instructions import InstType
from m68kcore.sizes import SizeType, size_in_bytes

_M = AddressingMode


def _bits(size: SizeType) -> int:
    return size_in_bytes(size) * 8


def _signed(val: int, size: SizeType) -> int:
    val = value(val, size)
    bits = _bits(size)
    return val - (1 << bits) if val & (1 << (bits - 1)) else val


def _set_nz(val: int, size: SizeType, flags: StatusFlags) -> None:
    flags.n = msb(val, size)
    flags.z = int(value(val, size) == 0)


# --- shifts and rotates ----------------------------------------------------


def asl(a: int, shift_count: int, size: SizeType, flags: StatusFlags) -> int:
    """Arithmetic shift left; V is set if the sign bit changed at any step."""
    val = value(a, size)
    shift_count %= 64

    flags.c = flags.v = 0
    for _ in range(shift_count):
        flags.c = flags.x = msb(val, size)
        val = (val << 1) & 0xFFFFFFFF
        flags.v |= flags.c ^ msb(val, size)

    val = value(val, size)
    _set_nz(val, size, flags)
    return val


def asr(a: int, shift_count: int, size: SizeType, flags: StatusFlags) -> int:
    """Arithmetic shift right, keeping the sign bit."""
    val = _signed(a, size)
    shift_count %= 64

    flags.c = flags.v = 0
    for _ in range(shift_count):
        flags.c = flags.x = lsb(val)
        val >>= 1

    val = value(val, size)
    _set_nz(val, size, flags)
    return val


def rol(a: int, shift_count: int, size: SizeType, flags: StatusFlags) -> int:
    """Rotate left; X is not affected."""
    val = value(a, size)
    shift_count %= 64
    bits = _bits(size)

    r = shift_count % bits
    val = value((val << r) | (val >> (bits - r)), size) if r else val

    flags.c = 0 if shift_count == 0 else lsb(val)
    _set_nz(val, size, flags)
    flags.v = 0
    return val


def ror(a: int, shift_count: int, size: SizeType, flags: StatusFlags) -> int:
    """Rotate right; X is not affected."""
    val = value(a, size)
    shift_count %= 64
    bits = _bits(size)

    r = shift_count % bits
    val = value((val >> r) | (val << (bits - r)), size) if r else val

    flags.c = 0 if shift_count == 0 else msb(val, size)
    _set_nz(val, size, flags)
    flags.v = 0
    return val


def roxl(a: int, shift_count: int, size: SizeType, flags: StatusFlags) -> int:
    """Rotate left through the extend flag."""
    val = value(a, size)
    shift_count %= 64

    flags.c = flags.x
    for _ in range(shift_count):
        flags.c = msb(val, size)
        val = value((val << 1) | flags.x, size)
        flags.x = flags.c

    _set_nz(val, size, flags)
    flags.v = 0
    return val


def roxr(a: int, shift_count: int, size: SizeType, flags: StatusFlags) -> int:
    """Rotate right through the extend flag."""
    val = value(a, size)
    shift_count %= 64
    top = _bits(size) - 1

    flags.c = flags.x
    for _ in range(shift_count):
        flags.c = lsb(val)
        val = (val >> 1) | (flags.x << top)
        flags.x = flags.c

    _set_nz(val, size, flags)
    flags.v = 0
    return val


def lsl(a: int, shift_count: int, size: SizeType, flags: StatusFlags) -> int:
    """Logical shift left."""
    val = value(a, size)
    shift_count %= 64

    if shift_count == 0:
        flags.c = 0
    else:
        flags.c = flags.x = msb(val << (shift_count - 1), size)

    val = value(val << shift_count, size)
    flags.v = 0
    _set_nz(val, size, flags)
    return val


def lsr(a: int, shift_count: int, size: SizeType, flags: StatusFlags) -> int:
    """Logical shift right."""
    val = value(a, size)
    shift_count %= 64

    if shift_count == 0:
        flags.c = 0
    else:
        flags.c = flags.x = lsb(val >> (shift_count - 1))

    val = value(val >> shift_count, size)
    flags.v = 0
    _set_nz(val, size, flags)
    return val


_Shift = Callable[[int, int, SizeType, StatusFlags], int]

_SHIFTS: dict[InstType, tuple[_Shift, _Shift]] = {
    InstType.ASLRreg: (asl, asr),
    InstType.ASLRmem: (asl, asr),
    InstType.ROLRreg: (rol, ror),
    InstType.ROLRmem: (rol, ror),
    InstType.LSLRreg: (lsl, lsr),
    InstType.LSLRmem: (lsl, lsr),
    InstType.ROXLRreg: (roxl, roxr),
    InstType.ROXLRmem: (roxl, roxr),
}


def shift(
    inst: InstType,
    src: int,
    shift_count: int,
    is_left_shift: bool,
    size: SizeType,
    flags: StatusFlags,
) -> int:
    """Run the shift or rotate of ``inst`` in the given direction."""
    try:
        left, right = _SHIFTS[inst]
    except KeyError:
        raise InternalError(f"{inst.name} is not a shift instruction") from None
    operation = left if is_left_shift else right
    return operation(src, shift_count, size, flags)


# --- bit operations --------------------------------------------------------


def bit_number(src: int, data_register: bool) -> int:
    """Bit index: modulo 32 for a data register, modulo 8 for memory."""
    if data_register:
        return value(src, SizeType.LONG) % 32
    return value(src, SizeType.BYTE) % 8


def _bit_value(dest: int, data_register: bool) -> int:
    return value(dest, SizeType.LONG if data_register else SizeType.BYTE)


def _test(src: int, dest: int, data_register: bool, flags: StatusFlags) -> tuple[int, int]:
    num = bit_number(src, data_register)
    dest_val = _bit_value(dest, data_register)
    flags.z = 0 if (dest_val >> num) & 1 else 1
    return num, dest_val


def btst(src: int, dest: int, data_register: bool, flags: StatusFlags) -> None:
    """Set Z to the inverse of the tested bit."""
    _test(src, dest, data_register, flags)


def bset(src: int, dest: int, data_register: bool, flags: StatusFlags) -> int:
    num, dest_val = _test(src, dest, data_register, flags)
    return dest_val | (1 << num)


def bclr(src: int, dest: int, data_register: bool, flags: StatusFlags) -> int:
    num, dest_val = _test(src, dest, data_register, flags)
    return dest_val & ~(1 << num)


def bchg(src: int, dest: int, data_register: bool, flags: StatusFlags) -> int:
    num, dest_val = _test(src, dest, data_register, flags)
    return dest_val ^ (1 << num)


_BIT_OPS = {
    InstType.BSETimm: bset,
    InstType.BSETreg: bset,
    InstType.BCLRimm: bclr,
    InstType.BCLRreg: bclr,
    InstType.BCHGimm: bchg,
    InstType.BCHGreg: bchg,
}


def bit(inst: InstType, src: int, dest: int, data_register: bool, flags: StatusFlags) -> int:
    """Run the bit-changing operation of ``inst``."""
    try:
        operation = _BIT_OPS[inst]
    except KeyError:
        raise InternalError(f"{inst.name} is not a bit instruction") from None
    return operation(src, dest, data_register, flags)


# --- checks and conditions -------------------------------------------------


def chk(src: int, dest: int, flags: StatusFlags) -> bool:
    """Check ``dest`` against the bound ``src``; return True if out of bounds."""
    src_val = _signed(src, SizeType.WORD)
    dest_val = _signed(dest, SizeType.WORD)

    lz = dest_val < 0
    mu = dest_val > src_val

    if lz:
        flags.n = 1
    elif mu:
        flags.n = 0

    flags.z = int(value(dest_val, SizeType.WORD) == 0)
    flags.v = flags.c = 0
    return lz or mu


def cond_test(cc: int, flags: StatusFlags) -> bool:
    """Evaluate the 4-bit condition code ``cc`` against ``flags``."""
    cc &= 0b1111
    n, z, v, c = flags.n, flags.z, flags.v, flags.c
    lt = (n == 1 and v == 0) or (n == 0 and v == 1)
    conditions = (
        True,                       # T
        False,                      # F
        c == 0 and z == 0,          # HI
        c == 1 or z == 1,           # LS
        c == 0,                     # CC
        c == 1,                     # CS
        z == 0,                     # NE
        z == 1,                     # EQ
        v == 0,                     # VC
        v == 1,                     # VS
        n == 0,                     # PL
        n == 1,                     # MI
        n == v,                     # GE
        lt,                         # LT
        z == 0 and n == v,          # GT
        z == 1 or lt,               # LE
    )
    return conditions[cc]


# --- status register -------------------------------------------------------


def andi_to_ccr(src: int, sr: int) -> int:
    return sr & 0xFFFF & (0xFFE0 | (src & 0xFF))


def andi_to_sr(src: int, sr: int) -> int:
    return sr & 0xFFFF & clear_unimplemented_flags(src & 0xFFFF)


def ori_to_ccr(src: int, sr: int) -> int:
    return (sr & 0xFFFF) | (src & 0b11111)


def ori_to_sr(src: int, sr: int) -> int:
    return (sr & 0xFFFF) | clear_unimplemented_flags(src & 0xFFFF)


def eori_to_ccr(src: int, sr: int) -> int:
    sr &= 0xFFFF
    res = (sr ^ (src & 0xFF)) & 0b11111
    return (sr & ~0b11111 & 0xFFFF) | res


def eori_to_sr(src: int, sr: int) -> int:
    return (sr & 0xFFFF) ^ clear_unimplemented_flags(src & 0xFFFF)


_TO_CCR = {
    InstType.ANDItoCCR: andi_to_ccr,
    InstType.ORItoCCR: ori_to_ccr,
    InstType.EORItoCCR: eori_to_ccr,
}

_TO_SR = {
    InstType.ANDItoSR: andi_to_sr,
    InstType.ORItoSR: ori_to_sr,
    InstType.EORItoSR: eori_to_sr,
}


def alu_to_ccr(inst: InstType, src: int, sr: int) -> int:
    """Return the status register after ANDI/ORI/EORI to CCR."""
    try:
        operation = _TO_CCR[inst]
    except KeyError:
        raise InternalError(f"{inst.name} does not operate on CCR") from None
    return operation(src & 0xFF, sr)


def alu_to_sr(inst: InstType, src: int, sr: int) -> int:
    """Return the status register after ANDI/ORI/EORI to SR."""
    try:
        operation = _TO_SR[inst]
    except KeyError:
        raise InternalError(f"{inst.name} does not operate on SR") from None
    return operation(src & 0xFFFF, sr)


def move_to_sr(src: int) -> int:
    return clear_unimplemented_flags(value(src, SizeType.WORD))


def move_to_ccr(src: int, sr: int) -> int:
    return (sr & 0xFF00) | (value(src, SizeType.BYTE) & 0b11111)


def ret(inst: InstType, new_sr: int, current_sr: int) -> int:
    """Status register restored by RTE or RTR."""
    if inst is InstType.RTE:
        return clear_unimplemented_flags(new_sr & 0xFFFF)
    if inst is InstType.RTR:
        return move_to_ccr(new_sr, current_sr)
    raise InternalError(f"{inst.name} is not a return instruction")


# --- program counter -------------------------------------------------------


def advance_pc(pc: int, mode: AddressingMode, size: SizeType) -> int:
    """PC after the extension words of an operand in ``mode``."""
    if mode in (_M.DATA_REG, _M.ADDR_REG, _M.INDIR, _M.POSTINC, _M.PREDEC):
        step = 0
    elif mode in (_M.DISP_INDIR, _M.INDEX_INDIR, _M.ABS_SHORT, _M.DISP_PC, _M.INDEX_PC):
        step = 2
    elif mode is _M.ABS_LONG:
        step = 4
    elif mode is _M.IMM:
        step = 4 if size is SizeType.LONG else 2
    else:
        raise InternalError(f"cannot advance PC for mode {mode.name}")
    return (pc + step) & 0xFFFFFFFF