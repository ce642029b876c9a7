"""Readers for the headers of little-endian MIPS COFF object files."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import ClassVar

MIPSELMAGIC = 0x0162
OMAGIC = 0o407
SOMAGIC = 0x0701


class CoffError(ValueError):
    """Raised when a file is not a usable MIPS COFF file."""


def _require(data: bytes, size: int) -> None:
    if len(data) < size:
        raise CoffError("File is too short")


@dataclass(frozen=True)
class FileHeader:
    """The COFF file header."""

    magic: int
    num_sections: int
    timestamp: int
    symbol_pointer: int
    num_symbols: int
    optional_header_size: int
    flags: int

    STRUCT: ClassVar[struct.Struct] = struct.Struct("<HHiiiHH")

    @classmethod
    def unpack(cls, data: bytes) -> FileHeader:
        """Read a file header from the start of ``data``."""
        _require(data, cls.STRUCT.size)
        return cls(*cls.STRUCT.unpack_from(data))


@dataclass(frozen=True)
class AoutHeader:
    """The system (a.out) header that follows the file header."""

    magic: int
    version_stamp: int
    text_size: int
    data_size: int
    bss_size: int
    entry: int
    text_start: int
    data_start: int
    bss_start: int
    gpr_mask: int
    cpr_masks: tuple[int, int, int, int]
    gp_value: int

    STRUCT: ClassVar[struct.Struct] = struct.Struct("<hh13i")

    @classmethod
    def unpack(cls, data: bytes) -> AoutHeader:
        """Read a system header from the start of ``data``."""
        _require(data, cls.STRUCT.size)
        values = cls.STRUCT.unpack_from(data)
        return cls(*values[:10], cpr_masks=tuple(values[10:14]), gp_value=values[14])


@dataclass(frozen=True)
class SectionHeader:
    """One section header."""

    name: str
    physical_address: int
    virtual_address: int
    size: int
    file_pointer: int
    relocation_pointer: int
    line_number_pointer: int
    num_relocations: int
    num_line_numbers: int
    flags: int

    STRUCT: ClassVar[struct.Struct] = struct.Struct("<8s6iHHi")

    @classmethod
    def unpack(cls, data: bytes) -> SectionHeader:
        """Read a section header from the start of ``data``."""
        _require(data, cls.STRUCT.size)
        raw_name, *rest = cls.STRUCT.unpack_from(data)
        name = raw_name.split(b"\0", 1)[0].decode("latin-1")
        return cls(name, *rest)


@dataclass(frozen=True)
class CoffFile:
    """A parsed COFF file: its headers and the raw bytes they point into."""

    header: FileHeader
    aout: AoutHeader
    sections: tuple[SectionHeader, ...]
    data: bytes

    @classmethod
    def parse(cls, data: bytes) -> CoffFile:
        """Parse and check the headers of a MIPSEL OMAGIC COFF file."""
        data = bytes(data)
        header = FileHeader.unpack(data)
        if header.magic != MIPSELMAGIC:
            raise CoffError("File is not a MIPSEL COFF file")
        offset = FileHeader.STRUCT.size
        aout = AoutHeader.unpack(data[offset:])
        if aout.magic != OMAGIC:
            raise CoffError("File is not a OMAGIC file")
        offset += AoutHeader.STRUCT.size
        table_size = header.num_sections * SectionHeader.STRUCT.size
        table = data[offset:offset + table_size]
        _require(table, table_size)
        sections = tuple(
            SectionHeader.unpack(chunk)
            for chunk in (
                table[start:start + SectionHeader.STRUCT.size]
                for start in range(0, table_size, SectionHeader.STRUCT.size)
            )
        )
        return cls(header, aout, sections, data)

    def section_data(self, section: SectionHeader) -> bytes:
        """Return the raw contents of ``section`` from the file."""
        start, size = section.file_pointer, section.size
        if start < 0 or size < 0 or start + size > len(self.data):
            raise CoffError("File is too short")
        return self.data[start:start + size]