"""System call handling for programs run by the interpreter."""

from __future__ import annotations

import mmap
import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from nachoskit.cpu import Cpu

SYS_EXIT = 1
SYS_READ = 3
SYS_WRITE = 4
SYS_OPEN = 5
SYS_CLOSE = 6
SYS_SBREAK = 17
SYS_LSEEK = 19
SYS_IOCTL = 54
SYS_FSTAT = 62
SYS_GETPAGESIZE = 64

_BREAK_UNIT = 8192


class ProgramExit(Exception):
    """Raised when the program asks to exit."""

    def __init__(self, status: int = 0) -> None:
        super().__init__(status)
        self.status = status


class UnknownSyscall(Exception):
    """Raised for a system call number that is not handled."""

    def __init__(self, number: int) -> None:
        super().__init__(f"Unknown System call {number}")
        self.number = number


def _write(cpu: Cpu, fd: int, data: bytes) -> int:
    if fd == 1:
        cpu.out.write(data.decode("latin-1"))
        return len(data)
    if fd == 2:
        sys.stderr.write(data.decode("latin-1"))
        return len(data)
    return os.write(fd, data)


def _os_call(func, *args) -> int:
    try:
        return func(*args)
    except OSError:
        return -1


def handle_trap(cpu: Cpu) -> None:
    """Carry out the system call whose number is in register 2."""
    regs = cpu.registers
    if cpu.trap_trace:
        cpu.out.write(f"**System call {regs[2]}\n")
        cpu.out.write(cpu.dump_registers())
    number, o0, o1, o2 = regs[2], regs[4], regs[5], regs[6]
    mem = cpu.memory

    if number == SYS_EXIT:
        cpu.out.flush()
        raise ProgramExit(0)
    if number == SYS_READ:
        try:
            data = os.read(o0, max(o2, 0))
        except OSError:
            result = -1
        else:
            mem.write_bytes(o1, data)
            result = len(data)
    elif number == SYS_WRITE:
        data = mem.read_bytes(o1, max(o2, 0))
        result = _os_call(_write, cpu, o0, data)
    elif number == SYS_OPEN:
        path = os.fsdecode(mem.read_cstring(o0))
        result = _os_call(os.open, path, o1, o2)
    elif number == SYS_CLOSE:
        result = 0
    elif number == SYS_SBREAK:
        result = (int(o0 / _BREAK_UNIT) + 1) * _BREAK_UNIT
    elif number == SYS_LSEEK:
        result = _os_call(os.lseek, o0, o1, o2)
    elif number == SYS_IOCTL:
        result = 0
    elif number == SYS_FSTAT:
        result = _os_call(lambda fd: os.fstat(fd) and 0, o1)
    elif number == SYS_GETPAGESIZE:
        result = mmap.PAGESIZE
    else:
        cpu.out.write(f"Unknown System call {number}\n")
        if not cpu.trap_trace:
            cpu.out.write(cpu.dump_registers())
        raise UnknownSyscall(number)

    regs[1] = ((result & 0xFFFFFFFF) ^ 0x80000000) - 0x80000000
    if cpu.trap_trace:
        cpu.out.write("**Afterwards:\n")
        cpu.out.write(cpu.dump_registers())


def handle_break(cpu: Cpu) -> None:
    """Handle a breakpoint instruction as a system call."""
    if cpu.trap_trace:
        cpu.out.write("**breakpoint ")
    handle_trap(cpu)