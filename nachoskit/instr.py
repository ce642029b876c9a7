"""Field extraction and opcode numbers for MIPS instruction words."""

from __future__ import annotations

from enum import IntEnum

NOP = 0
"""The all-zero instruction word, which does nothing."""

_MASK32 = 0xFFFFFFFF


class Opcode(IntEnum):
    """Primary opcodes, held in the top six bits of an instruction."""

    SPECIAL = 0o00
    BCOND = 0o01
    J = 0o02
    JAL = 0o03
    BEQ = 0o04
    BNE = 0o05
    BLEZ = 0o06
    BGTZ = 0o07
    ADDI = 0o10
    ADDIU = 0o11
    SLTI = 0o12
    SLTIU = 0o13
    ANDI = 0o14
    ORI = 0o15
    XORI = 0o16
    LUI = 0o17
    COP0 = 0o20
    COP1 = 0o21
    COP2 = 0o22
    COP3 = 0o23
    LB = 0o40
    LH = 0o41
    LWL = 0o42
    LW = 0o43
    LBU = 0o44
    LHU = 0o45
    LWR = 0o46
    SB = 0o50
    SH = 0o51
    SWL = 0o52
    SW = 0o53
    SWR = 0o56
    LWC0 = 0o60
    LWC1 = 0o61
    LWC2 = 0o62
    LWC3 = 0o63
    SWC0 = 0o70
    SWC1 = 0o71
    SWC2 = 0o72
    SWC3 = 0o73


class SpecialOpcode(IntEnum):
    """Function codes of SPECIAL instructions, held in the low six bits."""

    SLL = 0o00
    SRL = 0o02
    SRA = 0o03
    SLLV = 0o04
    SRLV = 0o06
    SRAV = 0o07
    JR = 0o10
    JALR = 0o11
    SYSCALL = 0o14
    BREAK = 0o15
    MFHI = 0o20
    MTHI = 0o21
    MFLO = 0o22
    MTLO = 0o23
    MULT = 0o30
    MULTU = 0o31
    DIV = 0o32
    DIVU = 0o33
    ADD = 0o40
    ADDU = 0o41
    SUB = 0o42
    SUBU = 0o43
    AND = 0o44
    OR = 0o45
    XOR = 0o46
    NOR = 0o47
    SLT = 0o52
    SLTU = 0o53


class BcondOpcode(IntEnum):
    """Branch kinds of BCOND instructions, held in the rt field."""

    BLTZ = 0o00
    BGEZ = 0o01
    BLTZAL = 0o20
    BGEZAL = 0o21


def rd(i: int) -> int:
    """Return the destination register field."""
    return (i >> 11) & 0x1F


def rt(i: int) -> int:
    """Return the target register field."""
    return (i >> 16) & 0x1F


def rs(i: int) -> int:
    """Return the source register field."""
    return (i >> 21) & 0x1F


def shamt(i: int) -> int:
    """Return the shift amount field."""
    return (i >> 6) & 0x1F


def immed(i: int) -> int:
    """Return the 16-bit immediate field, sign-extended."""
    if i & 0x8000:
        return (i & 0x7FFF) - 0x8000
    return i & 0x7FFF


def off26(i: int) -> int:
    """Return the 26-bit jump target field as a byte offset."""
    return (i & ((1 << 26) - 1)) << 2


def top4(i: int) -> int:
    """Return ``i`` with all but its top four of 32 bits cleared."""
    return i & _MASK32 & ~((1 << 28) - 1)


def off16(i: int) -> int:
    """Return the sign-extended immediate as a byte offset."""
    return immed(i) << 2


def extend(i: int, hibitmask: int) -> int:
    """Sign-extend ``i`` whose sign bit is ``hibitmask``."""
    if i & hibitmask:
        return i | -hibitmask
    return i