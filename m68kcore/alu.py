"""Arithmetic and logic operations on operand values and the condition codes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from m68kcore.errors import InternalError
from m68kcore.instructions import InstType
from m68kcore.sizes import SizeType

_MASK = {
    SizeType.BYTE: 0xFF,
    SizeType.WORD: 0xFFFF,
    SizeType.LONG: 0xFFFFFFFF,
}

_SIGN_BIT = {
    SizeType.BYTE: 0x80,
    SizeType.WORD: 0x8000,
    SizeType.LONG: 0x80000000,
}

_BITS = {
    SizeType.BYTE: 8,
    SizeType.WORD: 16,
    SizeType.LONG: 32,
}

_IMPLEMENTED_SR_FLAGS = 0b1010011100011111


@dataclass
class StatusFlags:
    """Condition code flags of the status register, each 0 or 1."""

    x: int = 0
    n: int = 0
    z: int = 0
    v: int = 0
    c: int = 0

    @property
    def ccr(self) -> int:
        """The flags packed as the low byte of the status register."""
        return (self.x << 4) | (self.n << 3) | (self.z << 2) | (self.v << 1) | self.c

    @classmethod
    def from_ccr(cls, ccr: int) -> StatusFlags:
        """Unpack the flags from the low byte of the status register."""
        return cls(
            x=(ccr >> 4) & 1,
            n=(ccr >> 3) & 1,
            z=(ccr >> 2) & 1,
            v=(ccr >> 1) & 1,
            c=ccr & 1,
        )


# --- value helpers ---------------------------------------------------------


def value(val: int, size: SizeType) -> int:
    """Return ``val`` truncated to ``size``."""
    return val & _MASK[size]


def msb(val: int, size: SizeType) -> int:
    """Return the most significant bit of ``val`` for ``size``."""
    return (val >> (_BITS[size] - 1)) & 1


def lsb(val: int) -> int:
    """Return the least significant bit of ``val``."""
    return val & 1


def sign_extend(val: int) -> int:
    """Sign-extend a 16-bit value to 32 bits."""
    val &= 0xFFFF
    return val | 0xFFFF0000 if val & 0x8000 else val


def clear_unimplemented_flags(sr: int) -> int:
    """Clear the status register bits the processor does not implement."""
    return sr & _IMPLEMENTED_SR_FLAGS


def _signed(val: int, size: SizeType) -> int:
    val = value(val, size)
    return val - (_MASK[size] + 1) if val & _SIGN_BIT[size] else val


def _in_signed_range(val: int, size: SizeType) -> bool:
    return -_SIGN_BIT[size] <= val < _SIGN_BIT[size]


def _set_nz(val: int, size: SizeType, flags: StatusFlags) -> None:
    flags.n = msb(val, size)
    flags.z = int(value(val, size) == 0)


def _set_logical(res: int, size: SizeType, flags: StatusFlags) -> None:
    flags.c = flags.v = 0
    _set_nz(res, size, flags)


def _set_carry_and_overflow(a: int, b: int, x: int, size: SizeType, flags: StatusFlags) -> None:
    mask = _MASK[size]
    flags.c = int((a & mask) + (b & mask) + x > mask)
    flags.v = int(not _in_signed_range(_signed(a, size) + _signed(b, size) + x, size))


def _set_borrow_and_overflow(a: int, b: int, x: int, size: SizeType, flags: StatusFlags) -> None:
    mask = _MASK[size]
    flags.c = int((a & mask) < (b & mask) + x)
    flags.v = int(not _in_signed_range(_signed(a, size) - _signed(b, size) - x, size))


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return -q if (a < 0) != (b < 0) else q


# --- addition and subtraction ---------------------------------------------


def add(a: int, b: int, size: SizeType, flags: StatusFlags) -> int:
    a, b = value(a, size), value(b, size)
    res = value(a + b, size)
    _set_carry_and_overflow(a, b, 0, size, flags)
    flags.x = flags.c
    _set_nz(res, size, flags)
    return res


def addx(a: int, b: int, size: SizeType, flags: StatusFlags) -> int:
    """Add with extend; Z is only ever cleared."""
    a, b = value(a, size), value(b, size)
    x = flags.x
    res = value(a + b + x, size)
    _set_carry_and_overflow(a, b, x, size, flags)
    flags.x = flags.c
    if res != 0:
        flags.z = 0
    flags.n = msb(res, size)
    return res


def adda(src: int, dest: int, size: SizeType) -> int:
    """Add to an address register; a word source is sign-extended. Flags are untouched."""
    if size is SizeType.WORD:
        return (sign_extend(src) + value(dest, SizeType.LONG)) & 0xFFFFFFFF
    return (value(src, size) + value(dest, size)) & 0xFFFFFFFF


def sub(a: int, b: int, size: SizeType, flags: StatusFlags) -> int:
    """Return ``a - b``."""
    a, b = value(a, size), value(b, size)
    res = value(a - b, size)
    _set_borrow_and_overflow(a, b, 0, size, flags)
    flags.x = flags.c
    _set_nz(res, size, flags)
    return res


def subx(a: int, b: int, size: SizeType, flags: StatusFlags) -> int:
    """Return ``a - b - X``; Z is only ever cleared."""
    a, b = value(a, size), value(b, size)
    x = flags.x
    res = value(a - b - x, size)
    _set_borrow_and_overflow(a, b, x, size, flags)
    flags.x = flags.c
    if res != 0:
        flags.z = 0
    flags.n = msb(res, size)
    return res


def suba(src: int, dest: int, size: SizeType) -> int:
    """Subtract from an address register; a word source is sign-extended."""
    if size is SizeType.WORD:
        return (value(dest, SizeType.LONG) - sign_extend(src)) & 0xFFFFFFFF
    return (value(dest, size) - value(src, size)) & 0xFFFFFFFF


def cmp(a: int, b: int, size: SizeType, flags: StatusFlags) -> int:
    """Compare ``a - b``; X is kept and ``a`` is returned unchanged."""
    old_x = flags.x
    sub(a, b, size, flags)
    flags.x = old_x
    return value(a, size)


def cmpa(src: int, dest: int, size: SizeType, flags: StatusFlags) -> int:
    """Compare an address register with a (sign-extended) source."""
    b = value(dest, SizeType.LONG)
    a = sign_extend(src) if size is SizeType.WORD else value(src, size)
    return cmp(b, a, SizeType.LONG, flags)


# --- logic -----------------------------------------------------------------


def and_op(a: int, b: int, size: SizeType, flags: StatusFlags) -> int:
    res = value(a, size) & value(b, size)
    _set_logical(res, size, flags)
    return res


def or_op(a: int, b: int, size: SizeType, flags: StatusFlags) -> int:
    res = value(a, size) | value(b, size)
    _set_logical(res, size, flags)
    return res


def eor(a: int, b: int, size: SizeType, flags: StatusFlags) -> int:
    res = value(a, size) ^ value(b, size)
    _set_logical(res, size, flags)
    return res


def neg(a: int, size: SizeType, flags: StatusFlags) -> int:
    return sub(0, a, size, flags)


def negx(a: int, size: SizeType, flags: StatusFlags) -> int:
    return subx(0, a, size, flags)


def not_op(a: int, size: SizeType, flags: StatusFlags) -> int:
    res = value(~value(a, size), size)
    _set_nz(res, size, flags)
    flags.v = flags.c = 0
    return res


# --- moves and tests -------------------------------------------------------


def move(src: int, size: SizeType, flags: StatusFlags) -> int:
    res = value(src, size)
    _set_nz(res, size, flags)
    flags.v = flags.c = 0
    return res


def movea(src: int, size: SizeType) -> int:
    """Value loaded into an address register; a word is sign-extended."""
    if size is SizeType.LONG:
        return value(src, size)
    return sign_extend(value(src, size))


def clr(flags: StatusFlags) -> int:
    flags.n = flags.v = flags.c = 0
    flags.z = 1
    return 0


def tst(src: int, size: SizeType, flags: StatusFlags) -> None:
    flags.v = flags.c = 0
    _set_nz(value(src, size), size, flags)


# --- multiplication and division -------------------------------------------


def mulu(a: int, b: int, flags: StatusFlags) -> int:
    res = (value(a, SizeType.WORD) * value(b, SizeType.WORD)) & 0xFFFFFFFF
    flags.v = flags.c = 0
    _set_nz(res, SizeType.LONG, flags)
    return res


def muls(a: int, b: int, flags: StatusFlags) -> int:
    res = (_signed(a, SizeType.WORD) * _signed(b, SizeType.WORD)) & 0xFFFFFFFF
    flags.v = flags.c = 0
    _set_nz(res, SizeType.LONG, flags)
    return res


def divu_zero_division(flags: StatusFlags) -> None:
    """Flags left by a division by zero."""
    flags.c = 0
    flags.n = flags.v = flags.z = 0


def divu(dest: int, src: int, flags: StatusFlags) -> int:
    """Unsigned 32/16 division; returns remainder in the high word, quotient in the low."""
    dest_val = value(dest, SizeType.LONG)
    src_val = value(src, SizeType.WORD)

    flags.c = 0
    if (dest_val >> 16) >= src_val:
        flags.v = 1
        return dest_val

    remainder = dest_val % src_val
    quotient = (dest_val - remainder) // src_val

    flags.v = 0
    _set_nz(quotient, SizeType.WORD, flags)
    return ((remainder & 0xFFFF) << 16) | (quotient & 0xFFFF)


def divs(dest: int, src: int, flags: StatusFlags) -> int:
    """Signed 32/16 division; returns remainder in the high word, quotient in the low."""
    dest_val = _signed(dest, SizeType.LONG)
    src_val = _signed(src, SizeType.WORD)
    if src_val == 0:
        raise ZeroDivisionError("signed division by zero")

    flags.c = 0
    quotient = _trunc_div(dest_val, src_val)
    if not _in_signed_range(quotient, SizeType.WORD):
        flags.v = 1
        return value(dest, SizeType.LONG)

    remainder = dest_val - quotient * src_val

    flags.v = 0
    _set_nz(quotient, SizeType.WORD, flags)
    return ((remainder & 0xFFFF) << 16) | (quotient & 0xFFFF)


# --- binary coded decimal --------------------------------------------------


def abcd(src: int, dest: int, flags: StatusFlags) -> int:
    """Add two packed BCD bytes with extend; Z is only ever cleared."""
    src_val = value(src, SizeType.BYTE)
    dest_val = value(dest, SizeType.BYTE)

    ss = (src_val + dest_val + flags.x) & 0xFF
    bc = ((src_val & dest_val) | (~ss & src_val) | (~ss & dest_val)) & 0x88
    dc = (((ss + 0x66) ^ ss) & 0x110) >> 1
    corf = ((bc | dc) - ((bc | dc) >> 2)) & 0xFF
    res = (ss + corf) & 0xFF

    flags.x = flags.c = ((bc | (ss & ~res)) >> 7) & 1
    if res != 0:
        flags.z = 0
    flags.n = msb(res, SizeType.BYTE)
    flags.v = int(msb(ss, SizeType.BYTE) == 0 and msb(res, SizeType.BYTE) == 1)
    return res


def sbcd(src: int, dest: int, flags: StatusFlags) -> int:
    """Return packed BCD ``dest - src - X``; Z is only ever cleared."""
    src_val = value(src, SizeType.BYTE)
    dest_val = value(dest, SizeType.BYTE)

    res = (dest_val - src_val - flags.x) & 0xFF
    msb_flag = msb(res, SizeType.BYTE)

    bc = ((~dest_val & src_val) | (res & ~dest_val) | (res & src_val)) & 0x88
    corf = (bc - (bc >> 2)) & 0xFF
    rr = (res - corf) & 0xFF

    flags.x = flags.c = ((bc | (~res & rr)) >> 7) & 1
    res = rr

    if res != 0:
        flags.z = 0
    flags.n = msb(res, SizeType.BYTE)
    flags.v = int(msb_flag == 1 and msb(res, SizeType.BYTE) == 0)
    return res


def nbcd(src: int, flags: StatusFlags) -> int:
    """Negate a packed BCD byte with extend."""
    return sbcd(src, 0, flags)


# --- miscellaneous ---------------------------------------------------------


def ext(a: int, size: SizeType, flags: StatusFlags) -> int:
    """Sign-extend a byte to a word, or a word to a long; ``size`` is the source size."""
    if size is SizeType.BYTE:
        res = _signed(a, SizeType.BYTE) & 0xFFFFFFFF
        _set_nz(res, SizeType.WORD, flags)
    else:
        res = _signed(a, SizeType.WORD) & 0xFFFFFFFF
        _set_nz(res, SizeType.LONG, flags)
    flags.v = flags.c = 0
    return res


def swap(a: int, flags: StatusFlags) -> int:
    """Exchange the two words of a long."""
    val = value(a, SizeType.LONG)
    res = ((val & 0xFFFF) << 16) | (val >> 16)
    _set_nz(res, SizeType.LONG, flags)
    flags.c = flags.v = 0
    return res


def tas(src: int, flags: StatusFlags) -> int:
    """Test a byte and set its high bit."""
    src_val = value(src, SizeType.BYTE)
    _set_nz(src_val, SizeType.BYTE, flags)
    flags.v = flags.c = 0
    return src_val | 0x80


# --- dispatch --------------------------------------------------------------

_Binary = Callable[[int, int, SizeType, StatusFlags], int]

_BINARY: dict[InstType, _Binary] = {
    InstType.ADD: add,
    InstType.ADDI: add,
    InstType.ADDA: lambda a, b, size, flags: adda(a, b, size),
    InstType.ADDX: addx,
    InstType.SUB: sub,
    InstType.SUBI: sub,
    InstType.SUBA: lambda a, b, size, flags: suba(a, b, size),
    InstType.SUBX: subx,
    InstType.AND: and_op,
    InstType.ANDI: and_op,
    InstType.OR: or_op,
    InstType.ORI: or_op,
    InstType.EOR: eor,
    InstType.EORI: eor,
    InstType.CMP: cmp,
    InstType.CMPI: cmp,
    InstType.CMPM: cmp,
    InstType.CMPA: cmpa,
    InstType.MULU: lambda a, b, size, flags: mulu(a, b, flags),
    InstType.MULS: lambda a, b, size, flags: muls(a, b, flags),
    InstType.DIVU: lambda a, b, size, flags: divu(a, b, flags),
    InstType.DIVS: lambda a, b, size, flags: divs(a, b, flags),
    InstType.ABCDreg: lambda a, b, size, flags: abcd(a, b, flags),
    InstType.ABCDmem: lambda a, b, size, flags: abcd(a, b, flags),
    InstType.SBCDreg: lambda a, b, size, flags: sbcd(a, b, flags),
    InstType.SBCDmem: lambda a, b, size, flags: sbcd(a, b, flags),
}

_UNARY: dict[InstType, Callable[[int, SizeType, StatusFlags], int]] = {
    InstType.NEG: neg,
    InstType.NEGX: negx,
    InstType.NOT: not_op,
    InstType.MOVE: move,
    InstType.CLR: lambda a, size, flags: clr(flags),
    InstType.NBCD: lambda a, size, flags: nbcd(a, flags),
}


def alu(inst: InstType, a: int, b: int, size: SizeType, flags: StatusFlags) -> int:
    """Run the two-operand operation of ``inst``."""
    try:
        operation = _BINARY[inst]
    except KeyError:
        raise InternalError(f"{inst.name} is not a two-operand ALU instruction") from None
    return operation(a, b, size, flags)


def unary(inst: InstType, a: int, size: SizeType, flags: StatusFlags) -> int:
    """Run the one-operand operation of ``inst``."""
    try:
        operation = _UNARY[inst]
    except KeyError:
        raise InternalError(f"{inst.name} is not a one-operand ALU instruction") from None
    return operation(a, size, flags)


def aluq(
    inst: InstType,
    src: int,
    dest: int,
    size: SizeType,
    flags: StatusFlags,
    address_register: bool = False,
) -> int:
    """ADDQ/SUBQ; an address register destination is a full long and leaves flags alone."""
    if inst is InstType.ADDQ:
        if address_register:
            return (value(src, size) + value(dest, SizeType.LONG)) & 0xFFFFFFFF
        return add(src, dest, size, flags)
    if inst is InstType.SUBQ:
        if address_register:
            return (value(dest, SizeType.LONG) - value(src, size)) & 0xFFFFFFFF
        return sub(dest, src, size, flags)
    raise InternalError(f"{inst.name} is not a quick ALU instruction")