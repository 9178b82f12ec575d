"""Extra cycles each instruction takes beyond its bus reads and writes."""

from __future__ import annotations

from m68kcore.addressing import AddressingMode
from m68kcore.errors import InternalError
from m68kcore.instructions import InstType
from m68kcore.sizes import SizeType

_M = AddressingMode


def _s16(val: int) -> int:
    val &= 0xFFFF
    return val - 0x10000 if val & 0x8000 else val


def _s32(val: int) -> int:
    val &= 0xFFFFFFFF
    return val - 0x100000000 if val & 0x80000000 else val


def _indirect_mode(mode: AddressingMode) -> bool:
    return mode not in (_M.DATA_REG, _M.ADDR_REG, _M.IMM)


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return -q if (a < 0) != (b < 0) else q


def add(mode: AddressingMode, opmode: int) -> int:
    """ADD, SUB, AND, OR and EOR with an effective address operand."""
    if opmode not in (0b010, 0b110):
        return 0
    indir = _indirect_mode(mode)
    if opmode == 0b110 and indir:
        return 0
    return 2 if indir else 4


def addi(mode: AddressingMode, size: SizeType) -> int:
    """ADDI, SUBI, ANDI, ORI and EORI."""
    if size is not SizeType.LONG or _indirect_mode(mode):
        return 0
    return 4


def addq(mode: AddressingMode, size: SizeType) -> int:
    """ADDQ and SUBQ."""
    if size is SizeType.BYTE or _indirect_mode(mode):
        return 0
    if size is SizeType.WORD:
        return 4 if mode is _M.ADDR_REG else 0
    if mode in (_M.DATA_REG, _M.IMM):
        return 4
    return 2


def adda(mode: AddressingMode, opmode: int) -> int:
    """ADDA and SUBA."""
    if opmode == 0b011 or not _indirect_mode(mode):
        return 4
    return 2


def cmp(opmode: int) -> int:
    """CMP; only the long register form takes extra cycles."""
    if opmode == 0b010:
        return 2
    return 0


def cmpi(mode: AddressingMode, size: SizeType) -> int:
    """CMPI, NEG, NEGX, NOT and CLR."""
    if size is SizeType.LONG and mode is _M.DATA_REG:
        return 2
    return 0


def cmpa() -> int:
    return 2


def move_from_sr(mode: AddressingMode) -> int:
    """MOVE from SR; a data register destination takes extra cycles."""
    if mode is _M.DATA_REG:
        return 2
    return 0


def move_to_sr() -> int:
    return 4


def move_to_ccr() -> int:
    return 4


def reg_shift(shift_count: int, size: SizeType) -> int:
    """Shift or rotate of a data register."""
    cycles = 2 * (shift_count % 64) + 2
    if size is SizeType.LONG:
        cycles += 2
    return cycles


def mulu(src: int) -> int:
    ones = bin(src & 0xFFFF).count("1")
    return (17 + ones) * 2


def muls(val: int) -> int:
    src = _s16(val) << 1
    m = 0
    for _ in range(17):
        if src & 0b11 in (0b01, 0b10):
            m += 1
        src >>= 1
    return (17 + m) * 2


def divu(dividend: int, divisor: int) -> int:
    dividend &= 0xFFFFFFFF
    divisor &= 0xFFFF
    if (dividend >> 16) >= divisor:
        return 6

    cycles = 36
    div = (divisor << 16) & 0xFFFFFFFF
    for _ in range(15):
        old_negative = bool(dividend & 0x80000000)
        dividend = (dividend << 1) & 0xFFFFFFFF
        if old_negative:
            dividend = (dividend - div) & 0xFFFFFFFF
        elif dividend >= div:
            dividend -= div
            cycles += 1
        else:
            cycles += 2
    return cycles * 2


def divs(dividend: int, divisor: int) -> int:
    """DIVS; operands may be given signed or as raw 32/16-bit values."""
    dividend = _s32(dividend)
    divisor = _s16(divisor)

    cycles = 4
    if dividend < 0:
        cycles += 1

    sdiv = _trunc_div(dividend, divisor)
    if not -0x8000 <= sdiv <= 0x7FFF:
        return (cycles + 2) * 2

    cycles += 55
    if divisor >= 0:
        cycles += -1 if dividend >= 0 else 1

    div = (abs(dividend) // abs(divisor)) & 0xFFFFFFFF
    for _ in range(15):
        if _s16(div) >= 0:
            cycles += 1
        div = (div << 1) & 0xFFFFFFFF
    return cycles * 2


def exg() -> int:
    return 2


def btst(mode: AddressingMode) -> int:
    """BTST; register and immediate operands take extra cycles."""
    if mode in (_M.DATA_REG, _M.IMM):
        return 2
    return 0


def bset(mode: AddressingMode, bit_number: int) -> int:
    """BSET and BCHG."""
    if mode in (_M.DATA_REG, _M.IMM):
        return 2 if bit_number < 16 else 4
    return 0


def bclr(mode: AddressingMode, bit_number: int) -> int:
    if mode in (_M.DATA_REG, _M.IMM):
        return 4 if bit_number < 16 else 6
    return 0


def chk(src: int, reg: int) -> int:
    src = _s16(src)
    reg = _s16(reg)
    if reg > src:
        return 1
    if reg < 0:
        return 3
    return 6


def bcc(test_result: bool) -> int:
    """Bcc; a taken branch is quicker."""
    if test_result:
        return 2
    return 4


def dbcc(test_result: bool) -> int:
    """DBcc; a true condition takes longer."""
    if test_result:
        return 4
    return 2


def scc(test_result: bool, mode: AddressingMode) -> int:
    """Scc; a true condition into a data register takes extra cycles."""
    if test_result and mode is _M.DATA_REG:
        return 2
    return 0


def bcd_reg() -> int:
    return 2


def bsr() -> int:
    return 2


def nbcd(mode: AddressingMode) -> int:
    """NBCD; a data register operand takes extra cycles."""
    if mode is _M.DATA_REG:
        return 2
    return 0


def reset() -> int:
    return 128


def lea(mode: AddressingMode) -> int:
    """LEA and PEA."""
    if mode in (_M.INDEX_INDIR, _M.INDEX_PC):
        return 2
    return 0


_ALU_MODE = {
    InstType.ADD: add,
    InstType.SUB: add,
    InstType.AND: add,
    InstType.OR: add,
    InstType.EOR: add,
    InstType.ADDA: adda,
    InstType.SUBA: adda,
}

_ALU_SIZE = {
    InstType.ADDI: addi,
    InstType.SUBI: addi,
    InstType.ANDI: addi,
    InstType.ORI: addi,
    InstType.EORI: addi,
    InstType.ADDQ: addq,
    InstType.SUBQ: addq,
    InstType.CMPI: cmpi,
    InstType.NEG: cmpi,
    InstType.NEGX: cmpi,
    InstType.NOT: cmpi,
    InstType.CLR: cmpi,
}


def alu_mode(inst: InstType, mode: AddressingMode, opmode: int) -> int:
    """Timing of an ALU instruction selected by its opmode field."""
    if inst is InstType.CMP:
        return cmp(opmode)
    if inst is InstType.CMPA:
        return cmpa()
    try:
        return _ALU_MODE[inst](mode, opmode)
    except KeyError:
        raise InternalError(f"no mode timing for {inst.name}") from None


def alu_size(inst: InstType, mode: AddressingMode, size: SizeType) -> int:
    """Timing of an ALU instruction selected by its operand size."""
    if inst is InstType.CMPM:
        return 0
    if inst is InstType.NBCD:
        return nbcd(mode)
    try:
        return _ALU_SIZE[inst](mode, size)
    except KeyError:
        raise InternalError(f"no size timing for {inst.name}") from None


def mul(inst: InstType, src: int) -> int:
    if inst is InstType.MULU:
        return mulu(src)
    if inst is InstType.MULS:
        return muls(src)
    raise InternalError(f"no multiply timing for {inst.name}")


def div(inst: InstType, dividend: int, divisor: int) -> int:
    if inst is InstType.DIVU:
        return divu(dividend, divisor)
    if inst is InstType.DIVS:
        return divs(dividend, divisor)
    raise InternalError(f"no divide timing for {inst.name}")


def bit(inst: InstType, mode: AddressingMode, bit_number: int) -> int:
    if inst in (InstType.BSETimm, InstType.BSETreg, InstType.BCHGimm, InstType.BCHGreg):
        return bset(mode, bit_number)
    if inst in (InstType.BCLRimm, InstType.BCLRreg):
        return bclr(mode, bit_number)
    raise InternalError(f"no bit timing for {inst.name}")