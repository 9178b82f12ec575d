"""Instruction kinds recognised by the opcode decoder."""

from enum import Enum, auto


class InstType(Enum):
    """Kind of a decoded instruction; NONE marks an illegal opcode."""

    NONE = auto()
    ADD = auto()
    ADDI = auto()
    ADDQ = auto()
    ADDA = auto()
    ADDX = auto()
    ANDItoCCR = auto()
    ANDItoSR = auto()
    SUB = auto()
    SUBI = auto()
    SUBQ = auto()
    SUBA = auto()
    SUBX = auto()
    AND = auto()
    ANDI = auto()
    OR = auto()
    ORI = auto()
    ORItoCCR = auto()
    ORItoSR = auto()
    EOR = auto()
    EORI = auto()
    EORItoCCR = auto()
    EORItoSR = auto()
    CMP = auto()
    CMPI = auto()
    CMPM = auto()
    CMPA = auto()
    NEG = auto()
    NEGX = auto()
    NOT = auto()
    NOP = auto()
    MOVEB = auto()
    MOVE = auto()
    MOVEQ = auto()
    MOVEA = auto()
    MOVEMtoREG = auto()
    MOVEMtoMEM = auto()
    MOVEP = auto()
    MOVEfromSR = auto()
    MOVEtoSR = auto()
    MOVE_USP = auto()
    MOVEtoCCR = auto()
    ASLRreg = auto()
    ASLRmem = auto()
    ROLRreg = auto()
    ROLRmem = auto()
    LSLRreg = auto()
    LSLRmem = auto()
    ROXLRreg = auto()
    ROXLRmem = auto()
    TST = auto()
    CLR = auto()
    MULU = auto()
    MULS = auto()
    TRAP = auto()
    TRAPV = auto()
    DIVU = auto()
    DIVS = auto()
    EXT = auto()
    EXG = auto()
    SWAP = auto()
    BTSTreg = auto()
    BTSTimm = auto()
    BSETreg = auto()
    BSETimm = auto()
    BCLRreg = auto()
    BCLRimm = auto()
    BCHGreg = auto()
    BCHGimm = auto()
    RTE = auto()
    RTR = auto()
    RTS = auto()
    JMP = auto()
    CHK = auto()
    JSR = auto()
    BSR = auto()
    LEA = auto()
    PEA = auto()
    LINK = auto()
    UNLK = auto()
    BCC = auto()
    DBCC = auto()
    SCC = auto()
    ABCDreg = auto()
    ABCDmem = auto()
    SBCDreg = auto()
    SBCDmem = auto()
    NBCD = auto()
    RESET = auto()
    TAS = auto()
    STOP = auto()