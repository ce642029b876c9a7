"""Load a MIPS COFF program into memory and run it."""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path

from nachoskit.coff import MIPSELMAGIC, CoffError, FileHeader, SectionHeader
from nachoskit.cpu import Cpu, UnimplementedInstruction
from nachoskit.memory import AddressError, Memory
from nachoskit.syscalls import UnknownSyscall

_LOAD_ORDER = (".text", ".rdata", ".data", ".sdata", ".sbss", ".bss")


class LoadError(ValueError):
    """Raised when a program cannot be loaded."""


def _read_sections(data: bytes, header: FileHeader) -> dict[str, SectionHeader]:
    offset = FileHeader.STRUCT.size + header.optional_header_size
    size = SectionHeader.STRUCT.size
    sections: dict[str, SectionHeader] = {}
    for n in range(header.num_sections):
        start = offset + n * size
        sec = SectionHeader.unpack(data[start:start + size])
        sections.setdefault(sec.name, sec)
    return sections


def load_program(
    data: bytes,
    memory: Memory,
    log: Callable[[str], None] | None = None,
) -> list[str]:
    """Copy the program's sections into memory; return the names loaded."""
    emit = log or (lambda _line: None)
    data = bytes(data)
    try:
        header = FileHeader.unpack(data)
        if header.magic != MIPSELMAGIC:
            raise LoadError("big-endian object file (little-endian interp)")
        sections = _read_sections(data, header)
    except CoffError as exc:
        raise LoadError(str(exc)) from exc

    loaded = []
    for name in _LOAD_ORDER:
        sec = sections.get(name)
        if sec is None:
            emit(f"{name[1:]} section header missing")
            continue
        if sec.file_pointer == 0:
            continue
        contents = data[sec.file_pointer:sec.file_pointer + sec.size]
        if len(contents) != sec.size:
            raise LoadError("File is too short")
        try:
            memory.load(sec.virtual_address, contents)
        except AddressError as exc:
            raise LoadError("MEMSIZE too small. Fix and recompile.") from exc
        loaded.append(name)
    return loaded


def main(argv: list[str] | None = None) -> int:
    """Run a program: [-t] [-T] [-r] [-m rows assoc line policy] [file [args]]."""
    args = list(sys.argv[1:] if argv is None else argv)
    me = "interpreter"
    trace = trap_trace = reg_trace = False
    while args and args[0].startswith("-"):
        flags = args.pop(0)[1:]
        for flag in flags:
            if flag == "t":
                trace = True
            elif flag == "T":
                trap_trace = True
            elif flag == "r":
                reg_trace = True
            elif flag == "m":
                del args[:4]

    filename = args[0] if args else "a.out"
    program_argv = args if args else ["a.out"]
    try:
        data = Path(filename).read_bytes()
    except OSError:
        print(f"{me}: Could not open '{filename}'", file=sys.stderr)
        return 0

    memory = Memory()
    try:
        load_program(data, memory, log=print)
    except LoadError as exc:
        if str(exc).startswith("MEMSIZE"):
            print(exc)
            return 1
        print(f"{me}: {exc}", file=sys.stderr)
        return 0

    cpu = Cpu(memory, trace=trace, reg_trace=reg_trace, trap_trace=trap_trace)
    try:
        return cpu.run(memory.offset, program_argv)
    except (UnimplementedInstruction, UnknownSyscall) as exc:
        if isinstance(exc, UnimplementedInstruction):
            print(exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())