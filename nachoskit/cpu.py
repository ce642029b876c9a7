"""A MIPS instruction interpreter."""

from __future__ import annotations

import sys
from typing import TextIO

from nachoskit.disassembler import disassemble
from nachoskit.instr import BcondOpcode, Opcode, SpecialOpcode, immed, rd, rs, rt, shamt
from nachoskit.memory import Memory
from nachoskit.syscalls import ProgramExit, handle_break, handle_trap

_MASK32 = 0xFFFFFFFF


class UnimplementedInstruction(Exception):
    """Raised for an instruction the interpreter does not carry out."""


def _s32(value: int) -> int:
    return ((value & _MASK32) ^ 0x80000000) - 0x80000000


def _u32(value: int) -> int:
    return value & _MASK32


def _trunc_div(a: int, b: int) -> tuple[int, int]:
    q = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        q = -q
    return q, a - q * b


def ilog2(i: int) -> int:
    """Return the number of bits needed for ``i`` taken as unsigned."""
    return _u32(i).bit_length()


class Cpu:
    """Registers and execution state of one simulated processor."""

    def __init__(
        self,
        memory: Memory,
        trace: bool = False,
        reg_trace: bool = False,
        trap_trace: bool = False,
        out: TextIO | None = None,
    ) -> None:
        self.memory = memory
        self.trace = trace
        self.reg_trace = reg_trace
        self.trap_trace = trap_trace
        self.out = out if out is not None else sys.stdout
        self.registers = [0] * 32
        self.hi = 0
        self.lo = 0
        self.pc = memory.offset
        self.npc = self.pc + 4
        self.icount = 0

    def setup_arguments(self, argv: list[str]) -> None:
        """Set the stack pointer and lay out argc and argv for the program."""
        sp = self.memory.offset + self.memory.size - 1024
        self.registers[29] = _s32(sp)
        self.memory.store(sp, len(argv))
        aci = sp + 4
        ai = aci + 32
        for arg in argv:
            raw = arg.encode("latin-1") + b"\0"
            self.memory.write_bytes(ai, raw)
            self.memory.store(aci, ai)
            aci += 4
            ai += len(raw)

    def _set(self, reg: int, value: int) -> None:
        self.registers[reg] = _s32(value)

    def _branch(self, xpc: int, instr: int) -> None:
        self.npc = _u32(xpc + 4 + (immed(instr) << 2))

    def _special(self, instr: int, xpc: int) -> None:
        r = self.registers
        s, t, d = r[rs(instr)], r[rt(instr)], rd(instr)
        func = instr & 0x3F
        S = SpecialOpcode
        if func == S.SLL:
            self._set(d, t << shamt(instr))
        elif func == S.SRL:
            self._set(d, _u32(t) >> shamt(instr))
        elif func == S.SRA:
            self._set(d, t >> shamt(instr))
        elif func == S.SLLV:
            self._set(d, t << (s & 31))
        elif func == S.SRLV:
            self._set(d, _u32(t) >> (s & 31))
        elif func == S.SRAV:
            self._set(d, t >> (s & 31))
        elif func == S.JR:
            self.npc = _u32(s)
        elif func == S.JALR:
            self.npc = _u32(s)
            self._set(d, xpc + 8)
        elif func == S.SYSCALL:
            handle_trap(self)
        elif func == S.BREAK:
            handle_break(self)
        elif func == S.MFHI:
            self._set(d, self.hi)
        elif func == S.MTHI:
            self.hi = s
        elif func == S.MFLO:
            self._set(d, self.lo)
        elif func == S.MTLO:
            self.lo = s
        elif func in (S.MULT, S.MULTU):
            product = s * t if func == S.MULT else _u32(s) * _u32(t)
            self.lo = _s32(product)
            self.hi = _s32(product >> 32)
        elif func == S.DIV:
            q, rem = _trunc_div(s, t)
            self.lo, self.hi = _s32(q), _s32(rem)
        elif func == S.DIVU:
            self.lo = _s32(_u32(s) // _u32(t))
            self.hi = _s32(_u32(s) % _u32(t))
        elif func in (S.ADD, S.ADDU):
            self._set(d, s + t)
        elif func in (S.SUB, S.SUBU):
            self._set(d, s - t)
        elif func == S.AND:
            self._set(d, s & t)
        elif func == S.OR:
            self._set(d, s | t)
        elif func == S.XOR:
            self._set(d, s ^ t)
        elif func == S.NOR:
            self._set(d, ~(s | t))
        elif func == S.SLT:
            self._set(d, int(s < t))
        elif func == S.SLTU:
            self._set(d, int(_u32(s) < _u32(t)))
        else:
            raise UnimplementedInstruction("Unimplemented Instruction")

    def _bcond(self, instr: int, xpc: int) -> None:
        s = self.registers[rs(instr)]
        kind = rt(instr)
        if kind in (BcondOpcode.BLTZAL, BcondOpcode.BGEZAL):
            self._set(31, xpc + 8)
        if kind in (BcondOpcode.BLTZ, BcondOpcode.BLTZAL):
            if s < 0:
                self._branch(xpc, instr)
        elif kind in (BcondOpcode.BGEZ, BcondOpcode.BGEZAL):
            if s >= 0:
                self._branch(xpc, instr)
        else:
            raise UnimplementedInstruction("Unimplemented Instruction")

    def _execute(self, instr: int, xpc: int) -> None:
        r = self.registers
        mem = self.memory
        op = instr >> 26
        s = r[rs(instr)]
        t_reg = rt(instr)
        imm = immed(instr)
        addr = s + imm
        O = Opcode
        if op == O.SPECIAL:
            self._special(instr, xpc)
        elif op == O.BCOND:
            self._bcond(instr, xpc)
        elif op in (O.J, O.JAL):
            if op == O.JAL:
                self._set(31, xpc + 8)
            self.npc = (xpc & 0xF0000000) | ((instr & 0x03FFFFFF) << 2)
        elif op == O.BEQ:
            if s == r[t_reg]:
                self._branch(xpc, instr)
        elif op == O.BNE:
            if s != r[t_reg]:
                self._branch(xpc, instr)
        elif op == O.BLEZ:
            if s <= 0:
                self._branch(xpc, instr)
        elif op == O.BGTZ:
            if s > 0:
                self._branch(xpc, instr)
        elif op in (O.ADDI, O.ADDIU):
            self._set(t_reg, s + imm)
        elif op == O.SLTI:
            self._set(t_reg, int(s < imm))
        elif op == O.SLTIU:
            self._set(t_reg, int(_u32(s) < _u32(imm)))
        elif op == O.ANDI:
            self._set(t_reg, s & imm)
        elif op == O.ORI:
            self._set(t_reg, s | imm)
        elif op == O.XORI:
            self._set(t_reg, s ^ imm)
        elif op == O.LUI:
            self._set(t_reg, instr << 16)
        elif op == O.LB:
            self._set(t_reg, mem.cfetch(addr))
        elif op == O.LH:
            self._set(t_reg, mem.sfetch(addr))
        elif op == O.LWL:
            word = mem.fetch(addr & 0xFFFFFFFC)
            self._set(t_reg, r[t_reg] | (word << (8 * (addr & 3))))
        elif op == O.LW:
            self._set(t_reg, mem.fetch(addr))
        elif op == O.LBU:
            self._set(t_reg, mem.ucfetch(addr))
        elif op == O.LHU:
            self._set(t_reg, mem.usfetch(addr))
        elif op == O.LWR:
            value = r[t_reg] & (-1 << (8 * (addr & 3)))
            if addr & 3 == 0:
                value = 0
            word = mem.fetch(addr & 0xFFFFFFFC)
            self._set(t_reg, value | (word >> (8 * ((-addr) & 3))))
        elif op == O.SB:
            mem.cstore(addr, r[t_reg])
        elif op == O.SH:
            mem.sstore(addr, r[t_reg])
        elif op == O.SW:
            mem.store(addr, r[t_reg])
        elif op == O.SWL:
            raise UnimplementedInstruction("sorry, no SWL yet.")
        elif op == O.SWR:
            raise UnimplementedInstruction("sorry, no SWR yet.")
        elif O.COP0 <= op <= O.COP3 or O.LWC0 <= op <= O.LWC3 or O.SWC0 <= op <= O.SWC3:
            raise UnimplementedInstruction("Sorry, no coprocessors.")
        else:
            raise UnimplementedInstruction("Unimplemented Instruction")

    def step(self) -> None:
        """Fetch and carry out one instruction."""
        self.icount += 1
        xpc = self.pc
        self.pc = self.npc
        self.npc = _u32(self.pc + 4)
        instr = _u32(self.memory.fetch(xpc))
        self.registers[0] = 0
        if instr != 0:
            self._execute(instr, xpc)
        if self.trace:
            self.out.write(disassemble(instr, xpc) + "\n")
            if self.reg_trace:
                self.out.write(self.dump_registers())

    def run(self, start_pc: int, argv: list[str]) -> int:
        """Run from ``start_pc`` until the program exits; return its status."""
        self.pc = _u32(start_pc)
        self.npc = _u32(start_pc + 4)
        self.icount = 0
        self.setup_arguments(argv)
        try:
            while True:
                self.step()
        except ProgramExit as done:
            return done.status

    def dump_registers(self) -> str:
        """Return the registers as four lines of eight hex words."""
        lines = []
        for base in range(0, 32, 8):
            words = "".join(f" {_u32(v):08x}" for v in self.registers[base:base + 8])
            lines.append(f"{base:2d}:{words}\n")
        return "".join(lines)