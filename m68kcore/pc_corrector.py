"""Correction of the program counter pushed while handling an address error."""

from m68kcore.exception_manager import AddressError
from m68kcore.instructions import InstType
from m68kcore.opcodes import decode


def _is_predec_move(opcode: int) -> bool:
    return decode(opcode) is InstType.MOVE and (opcode >> 6) & 0x7 == 0b100


def correct_address_error(pc: int, sird: int, error: AddressError) -> int:
    """Return the PC to push for an address error raised by instruction ``sird``."""
    is_write = not error.rw
    if is_write and _is_predec_move(sird):
        return pc & 0xFFFFFFFF
    if error.in_:
        return (pc - 4) & 0xFFFFFFFF
    return (pc - 2) & 0xFFFFFFFF