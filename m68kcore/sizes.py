"""Operand sizes."""

from enum import Enum


class SizeType(Enum):
    """Size of an operand."""

    BYTE = "byte"
    WORD = "word"
    LONG = "long"


_BYTES = {
    SizeType.BYTE: 1,
    SizeType.WORD: 2,
    SizeType.LONG: 4,
}


def size_in_bytes(size: SizeType) -> int:
    """Return the number of bytes an operand of ``size`` occupies."""
    return _BYTES[size]