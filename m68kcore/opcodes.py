"""Opcode templates and the decoder that maps a 16-bit opcode to an instruction kind."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from m68kcore.addressing import AddressingMode, EaModes, decode_mode, mode_is_supported
from m68kcore.instructions import InstType

_TEMPLATE_LENGTH = 16

# Template placeholders:
#   0 / 1   -- a fixed bit
#   _       -- either 0 or 1
#   sz      -- any of 00, 01, 10
#   <-ea->  -- a 6-bit effective address accepted by the entry's addressing modes
_TOKENS = (
    ("1", "one"),
    ("0", "zero"),
    ("_", "any"),
    ("sz", "size"),
    ("<-ea->", "ea"),
)


@dataclass(frozen=True)
class Instruction:
    """One entry of the opcode table."""

    template: str
    inst: InstType
    src_ea_mode: EaModes = EaModes.NONE
    dst_ea_mode: EaModes = EaModes.NONE  # MOVE only


@dataclass(frozen=True)
class _EaField:
    bit_pos: int
    modes: EaModes
    swapped: bool
    sized: bool


@dataclass(frozen=True)
class _Compiled:
    mask: int
    value: int
    size_pos: int | None
    eas: tuple[_EaField, ...]


def _exact(opcode: int) -> str:
    """Template matching exactly one opcode."""
    return format(opcode, "016b")


def _tokenize(template: str):
    """Yield (token, bit position of its lowest bit) for every token of ``template``."""
    pos = 0
    while pos < len(template):
        for text, token in _TOKENS:
            if template.startswith(text, pos):
                pos += len(text)
                yield token, _TEMPLATE_LENGTH - pos
                break
        else:
            raise ValueError(f"unknown token in opcode template {template!r} at {pos}")


@lru_cache(maxsize=None)
def _compile(instruction: Instruction) -> _Compiled:
    template = instruction.template
    if len(template) != _TEMPLATE_LENGTH:
        raise ValueError(f"opcode template {template!r} must be {_TEMPLATE_LENGTH} characters long")

    mask = value = 0
    size_pos: int | None = None
    eas: list[_EaField] = []
    for token, bit_pos in _tokenize(template):
        if token in ("one", "zero"):
            mask |= 1 << bit_pos
            if token == "one":
                value |= 1 << bit_pos
        elif token == "size":
            size_pos = bit_pos
        elif token == "ea":
            if instruction.src_ea_mode is EaModes.NONE:
                raise ValueError(f"opcode template {template!r} has an ea field but no addressing modes")
            if not eas and instruction.dst_ea_mode is not EaModes.NONE:
                modes = instruction.dst_ea_mode
            else:
                modes = instruction.src_ea_mode
            # the destination ea of MOVE has its mode and register fields swapped
            swapped = bit_pos != 0 and instruction.inst is InstType.MOVE
            eas.append(_EaField(bit_pos, modes, swapped, size_pos is not None))
    return _Compiled(mask, value, size_pos, tuple(eas))


def _matches_compiled(opcode: int, compiled: _Compiled) -> bool:
    if opcode & compiled.mask != compiled.value:
        return False

    size = None
    if compiled.size_pos is not None:
        size = (opcode >> compiled.size_pos) & 0b11
        if size == 0b11:
            return False

    for field in compiled.eas:
        ea = (opcode >> field.bit_pos) & 0b111111
        if field.swapped:
            ea = ((ea & 0x7) << 3) | ((ea >> 3) & 0x7)
        mode = decode_mode(ea)
        # address register direct is never allowed with byte size
        if field.sized and size == 0b00 and mode is AddressingMode.ADDR_REG:
            return False
        if not mode_is_supported(field.modes, mode):
            return False
    return True


def matches(opcode: int, instruction: Instruction) -> bool:
    """Tell whether ``opcode`` fits the template of ``instruction``."""
    return _matches_compiled(opcode, _compile(instruction))


OPCODES: tuple[Instruction, ...] = (
    # ADD
    Instruction("1101___0sz<-ea->", InstType.ADD, EaModes.ALL),
    Instruction("1101___1sz<-ea->", InstType.ADD, EaModes.MEMORY_ALTERABLE),
    Instruction("1101____11<-ea->", InstType.ADDA, EaModes.ALL),
    Instruction("00000110sz<-ea->", InstType.ADDI, EaModes.DATA_ALTERABLE),
    Instruction("0101___0sz<-ea->", InstType.ADDQ, EaModes.ALTERABLE),
    Instruction("1101___1sz00____", InstType.ADDX),
    Instruction(_exact(0x023C), InstType.ANDItoCCR),
    Instruction(_exact(0x027C), InstType.ANDItoSR),
    # SUB
    Instruction("1001___0sz<-ea->", InstType.SUB, EaModes.ALL),
    Instruction("1001___1sz<-ea->", InstType.SUB, EaModes.MEMORY_ALTERABLE),
    Instruction("1001____11<-ea->", InstType.SUBA, EaModes.ALL),
    Instruction("00000100sz<-ea->", InstType.SUBI, EaModes.DATA_ALTERABLE),
    Instruction("0101___1sz<-ea->", InstType.SUBQ, EaModes.ALTERABLE),
    Instruction("1001___1sz00____", InstType.SUBX),
    # AND
    Instruction("1100___0sz<-ea->", InstType.AND, EaModes.DATA),
    Instruction("1100___1sz<-ea->", InstType.AND, EaModes.MEMORY_ALTERABLE),
    Instruction("00000010sz<-ea->", InstType.ANDI, EaModes.DATA_ALTERABLE),
    # OR
    Instruction("1000___0sz<-ea->", InstType.OR, EaModes.DATA),
    Instruction("1000___1sz<-ea->", InstType.OR, EaModes.MEMORY_ALTERABLE),
    Instruction("00000000sz<-ea->", InstType.ORI, EaModes.DATA_ALTERABLE),
    Instruction(_exact(0x003C), InstType.ORItoCCR),
    Instruction(_exact(0x007C), InstType.ORItoSR),
    # EOR
    Instruction("1011___1sz<-ea->", InstType.EOR, EaModes.DATA_ALTERABLE),
    Instruction("00001010sz<-ea->", InstType.EORI, EaModes.DATA_ALTERABLE),
    Instruction(_exact(0x0A3C), InstType.EORItoCCR),
    Instruction(_exact(0x0A7C), InstType.EORItoSR),
    # CMP
    Instruction("1011___0sz<-ea->", InstType.CMP, EaModes.ALL),
    Instruction("1011____11<-ea->", InstType.CMPA, EaModes.ALL),
    Instruction("00001100sz<-ea->", InstType.CMPI, EaModes.DATA_ALTERABLE),
    Instruction("1011___1sz001___", InstType.CMPM),
    # NEG
    Instruction("01000100sz<-ea->", InstType.NEG, EaModes.DATA_ALTERABLE),
    Instruction("01000000sz<-ea->", InstType.NEGX, EaModes.DATA_ALTERABLE),
    # NOT
    Instruction("01000110sz<-ea->", InstType.NOT, EaModes.DATA_ALTERABLE),
    # NOP
    Instruction(_exact(0x4E71), InstType.NOP),
    # MOVE
    Instruction("0001<-ea-><-ea->", InstType.MOVE, EaModes.DATA, EaModes.DATA_ALTERABLE),
    Instruction("0011<-ea-><-ea->", InstType.MOVE, EaModes.ALL, EaModes.DATA_ALTERABLE),
    Instruction("0010<-ea-><-ea->", InstType.MOVE, EaModes.ALL, EaModes.DATA_ALTERABLE),
    Instruction("001____001<-ea->", InstType.MOVEA, EaModes.ALL),
    Instruction("010010001_<-ea->", InstType.MOVEMtoMEM, EaModes.PREDECREMENT),
    Instruction("010011001_<-ea->", InstType.MOVEMtoREG, EaModes.POSTINCREMENT),
    Instruction("0100000011<-ea->", InstType.MOVEfromSR, EaModes.DATA_ALTERABLE),
    Instruction("0100011011<-ea->", InstType.MOVEtoSR, EaModes.DATA),
    Instruction("0100010011<-ea->", InstType.MOVEtoCCR, EaModes.DATA),
    Instruction("010011100110____", InstType.MOVE_USP),
    Instruction("0000___1__001___", InstType.MOVEP),
    Instruction("0111___0________", InstType.MOVEQ),
    # ASL/ASR/ROL/ROR/LSL/LSR
    Instruction("1110000_11<-ea->", InstType.ASLRmem, EaModes.MEMORY_ALTERABLE),
    Instruction("1110011_11<-ea->", InstType.ROLRmem, EaModes.MEMORY_ALTERABLE),
    Instruction("1110001_11<-ea->", InstType.LSLRmem, EaModes.MEMORY_ALTERABLE),
    Instruction("1110010_11<-ea->", InstType.ROXLRmem, EaModes.MEMORY_ALTERABLE),
    Instruction("1110____sz_00___", InstType.ASLRreg),
    Instruction("1110____sz_11___", InstType.ROLRreg),
    Instruction("1110____sz_01___", InstType.LSLRreg),
    Instruction("1110____sz_10___", InstType.ROXLRreg),
    # TST
    Instruction("01001010sz<-ea->", InstType.TST, EaModes.DATA_ALTERABLE),
    # CLR
    Instruction("01000010sz<-ea->", InstType.CLR, EaModes.DATA_ALTERABLE),
    # MULU/MULS
    Instruction("1100___011<-ea->", InstType.MULU, EaModes.DATA),
    Instruction("1100___111<-ea->", InstType.MULS, EaModes.DATA),
    # DIVU/DIVS
    Instruction("1000___011<-ea->", InstType.DIVU, EaModes.DATA),
    Instruction("1000___111<-ea->", InstType.DIVS, EaModes.DATA),
    # TRAP
    Instruction("010011100100____", InstType.TRAP),
    Instruction(_exact(0x4E76), InstType.TRAPV),
    # EXT
    Instruction("010010001_000___", InstType.EXT),
    # EXG
    Instruction("1100___101000___", InstType.EXG),
    Instruction("1100___101001___", InstType.EXG),
    Instruction("1100___110001___", InstType.EXG),
    # SWAP
    Instruction("0100100001000___", InstType.SWAP),
    # BIT
    Instruction("0000___100<-ea->", InstType.BTSTreg, EaModes.DATA),
    Instruction("0000100000<-ea->", InstType.BTSTimm, EaModes.DATA_EXCEPT_IMM),
    Instruction("0000___111<-ea->", InstType.BSETreg, EaModes.DATA_ALTERABLE),
    Instruction("0000100011<-ea->", InstType.BSETimm, EaModes.DATA_ALTERABLE),
    Instruction("0000___110<-ea->", InstType.BCLRreg, EaModes.DATA_ALTERABLE),
    Instruction("0000100010<-ea->", InstType.BCLRimm, EaModes.DATA_ALTERABLE),
    Instruction("0000___101<-ea->", InstType.BCHGreg, EaModes.DATA_ALTERABLE),
    Instruction("0000100001<-ea->", InstType.BCHGimm, EaModes.DATA_ALTERABLE),
    # RTE/RTR/RTS
    Instruction(_exact(0x4E73), InstType.RTE),
    Instruction(_exact(0x4E77), InstType.RTR),
    Instruction(_exact(0x4E75), InstType.RTS),
    # JMP
    Instruction("0100111011<-ea->", InstType.JMP, EaModes.CONTROL),
    # CHK
    Instruction("0100___110<-ea->", InstType.CHK, EaModes.DATA),
    # JSR/BSR
    Instruction("0100111010<-ea->", InstType.JSR, EaModes.CONTROL),
    Instruction("01100001________", InstType.BSR),
    # LEA/PEA
    Instruction("0100___111<-ea->", InstType.LEA, EaModes.CONTROL),
    Instruction("0100100001<-ea->", InstType.PEA, EaModes.CONTROL),
    # LINK/UNLK
    Instruction("0100111001010___", InstType.LINK),
    Instruction("0100111001011___", InstType.UNLK),
    # BCC/DBCC/SCC
    Instruction("0110____________", InstType.BCC),
    Instruction("0101____11001___", InstType.DBCC),
    Instruction("0101____11<-ea->", InstType.SCC, EaModes.DATA_ALTERABLE),
    # ABCD/SBCD/NBCD
    Instruction("1100___100000___", InstType.ABCDreg),
    Instruction("1100___100001___", InstType.ABCDmem),
    Instruction("1000___100000___", InstType.SBCDreg),
    Instruction("1000___100001___", InstType.SBCDmem),
    Instruction("0100100000<-ea->", InstType.NBCD, EaModes.DATA_ALTERABLE),
    # RESET
    Instruction(_exact(0x4E70), InstType.RESET),
    # TAS
    Instruction("0100101011<-ea->", InstType.TAS, EaModes.DATA_ALTERABLE),
    # STOP
    Instruction(_exact(0x4E72), InstType.STOP),
)


def _validate(table: tuple[Instruction, ...]) -> None:
    seen: set[str] = set()
    for entry in table:
        _compile(entry)
        if entry.template in seen:
            raise ValueError(f"duplicate opcode template {entry.template!r}")
        seen.add(entry.template)


_validate(OPCODES)


def build_opcode_map() -> list[InstType]:
    """Return the instruction kind of every opcode from 0 to 0xFFFF."""
    # every template fixes its top three bits, so split the table by them
    top_mask = 0b111 << 13
    buckets: list[list[tuple[_Compiled, InstType]]] = [[] for _ in range(8)]
    for entry in OPCODES:
        compiled = _compile(entry)
        for top, bucket in enumerate(buckets):
            if (top << 13) & compiled.mask & top_mask == compiled.value & top_mask:
                bucket.append((compiled, entry.inst))

    opcode_map = [InstType.NONE] * 0x10000
    for opcode in range(0x10000):
        for compiled, inst in buckets[opcode >> 13]:
            if _matches_compiled(opcode, compiled):
                opcode_map[opcode] = inst
                break
    return opcode_map


@lru_cache(maxsize=1)
def _opcode_table() -> tuple[InstType, ...]:
    return tuple(build_opcode_map())


def decode(opcode: int) -> InstType:
    """Return the instruction kind of ``opcode``; NONE for an illegal opcode."""
    if not 0 <= opcode <= 0xFFFF:
        raise ValueError(f"opcode out of range: {opcode:#x}")
    return _opcode_table()[opcode]