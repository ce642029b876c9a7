"""Turn MIPS instruction words into assembler text."""

from __future__ import annotations

from nachoskit.instr import (
    NOP,
    BcondOpcode,
    Opcode,
    SpecialOpcode,
    immed,
    off16,
    off26,
    rd,
    rs,
    rt,
    shamt,
    top4,
)

_MASK32 = 0xFFFFFFFF

_REGISTERS = (
    "0", "r1", "r2", "r3", "r4", "r5", "r6", "r7", "r8", "r9",
    "r10", "r11", "r12", "r13", "r14", "r15", "r16", "r17", "r18", "r19",
    "r20", "r21", "r22", "r23", "r24", "r25", "r26", "r27", "gp", "sp",
    "r30", "r31",
)

_NORMAL_OPS = (
    "special", "bcond", "j", "jal", "beq", "bne", "blez", "bgtz",
    "addi", "addiu", "slti", "sltiu", "andi", "ori", "xori", "lui",
    "cop0", "cop1", "cop2", "cop3", "024", "025", "026", "027",
    "030", "031", "032", "033", "034", "035", "036", "037",
    "lb", "lh", "lwl", "lw", "lbu", "lhu", "lwr", "047",
    "sb", "sh", "swl", "sw", "054", "055", "swr", "057",
    "lwc0", "lwc1", "lwc2", "lwc3", "064", "065", "066", "067",
    "swc0", "swc1", "swc2", "swc3", "074", "075", "076", "077",
)

_SPECIAL_OPS = (
    "sll", "001", "srl", "sra", "sllv", "005", "srlv", "srav",
    "jr", "jalr", "012", "013", "syscall", "break", "016", "017",
    "mfhi", "mthi", "mflo", "mtlo", "024", "025", "026", "027",
    "mult", "multu", "div", "divu", "034", "035", "036", "037",
    "add", "addu", "sub", "subu", "and", "or", "xor", "nor",
    "050", "051", "slt", "sltu", "054", "055", "056", "057",
    "060", "061", "062", "063", "064", "065", "066", "067",
    "070", "071", "072", "073", "074", "075", "076", "077",
)

_BCOND_NAMES = {
    BcondOpcode.BLTZ: "bltz",
    BcondOpcode.BGEZ: "bgez",
    BcondOpcode.BLTZAL: "bltzal",
    BcondOpcode.BGEZAL: "bgezal",
}

_S = SpecialOpcode
_SHIFT_IMMEDIATE = {_S.SLL, _S.SRL, _S.SRA}
_SHIFT_VARIABLE = {_S.SLLV, _S.SRLV, _S.SRAV}
_RS_ONLY = {_S.JR, _S.JALR, _S.MFLO, _S.MTLO}
_RD_ONLY = {_S.MFHI, _S.MTHI}
_RS_RT = {_S.MULT, _S.MULTU, _S.DIV, _S.DIVU}
_THREE_REG = {
    _S.ADD, _S.ADDU, _S.SUB, _S.SUBU, _S.AND, _S.OR,
    _S.XOR, _S.NOR, _S.SLT, _S.SLTU,
}

_O = Opcode
_JUMPS = {_O.J, _O.JAL}
_BRANCHES = {_O.BEQ, _O.BNE}
_IMMEDIATE_ARITH = {_O.ADDI, _O.ADDIU, _O.SLTI, _O.SLTIU, _O.ANDI, _O.ORI, _O.XORI}
_LOAD_STORE = {
    _O.LB, _O.LH, _O.LWL, _O.LW, _O.LBU, _O.LHU, _O.LWR,
    _O.SB, _O.SH, _O.SWL, _O.SW, _O.SWR,
    _O.LWC0, _O.LWC1, _O.LWC2, _O.LWC3,
    _O.SWC0, _O.SWC1, _O.SWC2, _O.SWC3,
}


def _hex8(value: int) -> str:
    return f"{value & _MASK32:08x}"


def _hex(value: int) -> str:
    return f"0x{value & _MASK32:x}"


def _check_field(value: int) -> int:
    if not 0 <= value < 64:
        raise ValueError(f"opcode field out of range: {value}")
    return value


def opcode_name(opcode: int) -> str:
    """Return the mnemonic of a primary opcode (0 to 63)."""
    return _NORMAL_OPS[_check_field(opcode)]


def special_name(function: int) -> str:
    """Return the mnemonic of a SPECIAL function code (0 to 63)."""
    return _SPECIAL_OPS[_check_field(function)]


def _special_operands(function: int, word: int) -> str:
    if function in _SHIFT_IMMEDIATE:
        return f"{_REGISTERS[rd(word)]},{_REGISTERS[rt(word)]},{_hex(shamt(word))}"
    if function in _SHIFT_VARIABLE:
        return f"{_REGISTERS[rd(word)]},{_REGISTERS[rt(word)]},{_REGISTERS[rs(word)]}"
    if function in _RS_ONLY:
        return _REGISTERS[rs(word)]
    if function in _RD_ONLY:
        return _REGISTERS[rd(word)]
    if function in _RS_RT:
        return f"{_REGISTERS[rs(word)]},{_REGISTERS[rt(word)]}"
    if function in _THREE_REG:
        return f"{_REGISTERS[rd(word)]},{_REGISTERS[rs(word)]},{_REGISTERS[rt(word)]}"
    return ""


def _normal_operands(opcode: int, word: int, pc: int) -> str:
    if opcode in _JUMPS:
        return _hex8(top4(pc) | off26(word))
    if opcode in _BRANCHES:
        target = off16(word) + pc + 4
        return f"{_REGISTERS[rt(word)]},{_REGISTERS[rs(word)]},{_hex8(target)}"
    if opcode in _IMMEDIATE_ARITH:
        return f"{_REGISTERS[rt(word)]},{_REGISTERS[rs(word)]},{_hex(immed(word))}"
    if opcode == Opcode.LUI:
        return f"{_REGISTERS[rt(word)]},{_hex(immed(word))}"
    if opcode in _LOAD_STORE:
        return f"{_REGISTERS[rt(word)]},{_hex(immed(word))}({_REGISTERS[rs(word)]})"
    return ""


def disassemble(instruction: int, pc: int, long_format: bool = True) -> str:
    """Return one line of assembler text for ``instruction`` at ``pc``.

    With ``long_format`` the line starts with the address and the raw word.
    """
    word = instruction & _MASK32
    prefix = f"{_hex8(pc)}: {word:08x}  " if long_format else ""
    opcode = word >> 26

    if word == NOP:
        body = "nop"
    elif opcode == Opcode.SPECIAL:
        function = word & 0x3F
        body = f"{special_name(function)}\t{_special_operands(function, word)}"
    elif opcode == Opcode.BCOND:
        name = _BCOND_NAMES.get(rt(word), "BCOND")
        body = f"{name}\t{_REGISTERS[rs(word)]},{_hex8(off16(word) + pc + 4)}"
    else:
        body = f"{opcode_name(opcode)}\t{_normal_operands(opcode, word, pc)}"
    return f"{prefix}\t{body}"