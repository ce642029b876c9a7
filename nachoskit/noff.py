"""The NOFF object format and conversion to it from MIPS COFF."""

from __future__ import annotations

import struct
import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar

from nachoskit.coff import CoffError, CoffFile

NOFFMAGIC = 0xBADFAD


class ConversionError(ValueError):
    """Raised when a COFF file cannot be expressed as NOFF."""


@dataclass
class Segment:
    """Where a segment lives in the address space and in the file."""

    virtual_addr: int = 0
    in_file_addr: int = 0
    size: int = 0


@dataclass
class NoffHeader:
    """The header at the start of a NOFF file."""

    magic: int = NOFFMAGIC
    code: Segment = field(default_factory=Segment)
    init_data: Segment = field(default_factory=Segment)
    uninit_data: Segment = field(default_factory=Segment)

    STRUCT: ClassVar[struct.Struct] = struct.Struct("<10i")

    def pack(self) -> bytes:
        """Return the header as little-endian bytes."""
        values = [self.magic]
        for seg in (self.code, self.init_data, self.uninit_data):
            values += [seg.virtual_addr, seg.in_file_addr, seg.size]
        return self.STRUCT.pack(*values)

    @classmethod
    def unpack(cls, data: bytes) -> NoffHeader:
        """Read a header from the start of ``data``."""
        if len(data) < cls.STRUCT.size:
            raise ConversionError("NOFF header is too short")
        magic, *rest = cls.STRUCT.unpack_from(data)
        code, init, uninit = (Segment(*rest[i:i + 3]) for i in (0, 3, 6))
        return cls(magic, code, init, uninit)


def coff_to_noff(data: bytes, log: Callable[[str], None] | None = None) -> bytes:
    """Convert COFF file contents to NOFF file contents.

    ``log`` receives a progress line for each step, if given.
    """
    emit = log or (lambda _line: None)
    coff = CoffFile.parse(data)
    count = len(coff.sections)
    emit(f"numsections {count} ")

    header = NoffHeader()
    body = bytearray()
    in_file = NoffHeader.STRUCT.size

    emit(f"Loading {count} sections:")
    for sec in coff.sections:
        emit(
            f'\t"{sec.name}", filepos 0x{sec.file_pointer & 0xFFFFFFFF:x}, '
            f"mempos 0x{sec.physical_address & 0xFFFFFFFF:x}, "
            f"size 0x{sec.size & 0xFFFFFFFF:x}"
        )
        if sec.size == 0:
            continue
        if sec.name == ".text":
            header.code = Segment(sec.physical_address, in_file, sec.size)
            body += coff.section_data(sec)
            in_file += sec.size
        elif sec.name in (".data", ".rdata"):
            if header.init_data.size != 0:
                raise ConversionError("Can't handle both data and rdata")
            header.init_data = Segment(sec.physical_address, in_file, sec.size)
            body += coff.section_data(sec)
            in_file += sec.size
        elif sec.name in (".bss", ".sbss"):
            uninit = header.uninit_data
            if uninit.size != 0:
                if sec.physical_address == uninit.virtual_addr + uninit.size:
                    raise ConversionError("Can't handle both bss and sbss")
                uninit.size += sec.size
            else:
                uninit.virtual_addr = sec.physical_address
                uninit.size = sec.size
        else:
            raise ConversionError(f"Unknown segment type: {sec.name}")

    return header.pack() + bytes(body)


def main(argv: list[str] | None = None) -> int:
    """Convert the COFF file named first into the NOFF file named second."""
    args = sys.argv[1:] if argv is None else argv
    if len(args) < 2:
        print("Usage: coff2noff <coffFileName> <noffFileName>", file=sys.stderr)
        return 1
    source, target = Path(args[0]), Path(args[1])
    try:
        data = source.read_bytes()
    except OSError as exc:
        print(f"{source}: {exc.strerror}", file=sys.stderr)
        return 1
    try:
        result = coff_to_noff(data, log=print)
    except (CoffError, ConversionError) as exc:
        print(exc, file=sys.stderr)
        target.unlink(missing_ok=True)
        return 1
    try:
        target.write_bytes(result)
    except OSError:
        print("Unable to write file", file=sys.stderr)
        target.unlink(missing_ok=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())