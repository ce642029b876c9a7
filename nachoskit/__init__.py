"""MIPS interpreter and disassembler, COFF converters, file-system pieces and example stacks."""

__version__ = "0.1.0"

__all__ = [
    "intlist",
    "stacks",
    "boundedstack",
    "instr",
    "disassembler",
    "coff",
    "noff",
    "flat",
    "memory",
    "syscalls",
    "cpu",
    "interpreter",
    "disasm_tool",
    "directory",
    "filehdr",
    "openfile",
]