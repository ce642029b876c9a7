"""Disassemble the text section of a MIPS COFF program."""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path

from nachoskit.coff import CoffError, FileHeader, SectionHeader
from nachoskit.disassembler import disassemble
from nachoskit.interpreter import LoadError, load_program
from nachoskit.memory import AddressError, Memory


def _text_size(data: bytes) -> int:
    header = FileHeader.unpack(data)
    offset = FileHeader.STRUCT.size + header.optional_header_size
    size = SectionHeader.STRUCT.size
    for n in range(header.num_sections):
        start = offset + n * size
        section = SectionHeader.unpack(data[start:start + size])
        if section.name == ".text":
            return section.size
    return 0


def _disassemble(data: bytes, log: Callable[[str], None] | None) -> list[str]:
    memory = Memory()
    load_program(data, memory, log=log)
    try:
        text_size = _text_size(bytes(data))
    except CoffError as exc:
        raise LoadError(str(exc)) from exc
    try:
        return [
            disassemble(memory.fetch(pc), pc, True)
            for pc in range(memory.offset, memory.offset + text_size, 4)
        ]
    except AddressError as exc:
        raise LoadError("MEMSIZE too small. Fix and recompile.") from exc


def disassemble_program(data: bytes) -> list[str]:
    """Load a COFF program and return one line of assembler per text word.

    Words are read from the start of memory for the size of the text section.
    """
    return _disassemble(data, None)


def main(argv: list[str] | None = None) -> int:
    """Disassemble the named program (default a.out) to standard output."""
    args = list(sys.argv[1:] if argv is None else argv)
    me = "disasm"
    while args and args[0].startswith("-"):
        args.pop(0)
    filename = args[0] if args else "a.out"
    try:
        data = Path(filename).read_bytes()
    except OSError:
        print(f"{me}: Could not open '{filename}'", file=sys.stderr)
        return 0
    try:
        lines = _disassemble(data, print)
    except LoadError as exc:
        if str(exc).startswith("MEMSIZE"):
            print(exc)
            return 1
        print(f"{me}: {exc}", file=sys.stderr)
        return 0
    for line in lines:
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())