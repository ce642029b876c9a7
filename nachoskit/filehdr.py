"""The on-disk file header: which sectors hold a file's data."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import Protocol

_INT = struct.Struct("<i")
_COUNTS = struct.Struct("<ii")


class SectorDisk(Protocol):
    """A disk read and written one whole sector at a time."""

    sector_size: int

    def read_sector(self, sector: int) -> bytes: ...

    def write_sector(self, sector: int, data: bytes) -> None: ...


class FreeMap(Protocol):
    """A bitmap of disk sectors, set where a sector is in use."""

    def num_clear(self) -> int: ...

    def find(self) -> int: ...

    def test(self, bit: int) -> bool: ...

    def clear(self, bit: int) -> None: ...


def _div_round_up(n: int, s: int) -> int:
    return -(-n // s)


@dataclass
class FileHeader:
    """Length of a file and a direct table of its data sectors.

    The header fills exactly one disk sector of ``sector_size`` bytes.
    """

    sector_size: int
    num_bytes: int = 0
    data_sectors: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.sector_size < _COUNTS.size:
            raise ValueError("sector size too small for a file header")

    @property
    def num_sectors(self) -> int:
        """Number of data sectors the file uses."""
        return len(self.data_sectors)

    @property
    def num_direct(self) -> int:
        """How many sector numbers fit in one header."""
        return (self.sector_size - _COUNTS.size) // _INT.size

    @property
    def max_file_size(self) -> int:
        """The largest file one header can describe."""
        return self.num_direct * self.sector_size

    def allocate(self, free_map: FreeMap, file_size: int) -> bool:
        """Take data sectors for a new file of ``file_size`` bytes.

        Returns False, leaving the map alone, if too few sectors are free.
        Raises ValueError if the size is negative or beyond what one header holds.
        """
        if file_size < 0:
            raise ValueError("file size must not be negative")
        if file_size > self.max_file_size:
            raise ValueError(f"file size {file_size} exceeds {self.max_file_size}")
        needed = _div_round_up(file_size, self.sector_size)
        if free_map.num_clear() < needed:
            return False
        self.data_sectors = [free_map.find() for _ in range(needed)]
        self.num_bytes = file_size
        return True

    def deallocate(self, free_map: FreeMap) -> None:
        """Give this file's data sectors back to ``free_map``."""
        for sector in self.data_sectors:
            if not free_map.test(sector):
                raise ValueError(f"sector {sector} is not marked in use")
            free_map.clear(sector)

    def byte_to_sector(self, offset: int) -> int:
        """Return the disk sector holding byte ``offset`` of the file."""
        if offset < 0:
            raise IndexError("offset must not be negative")
        return self.data_sectors[offset // self.sector_size]

    def file_length(self) -> int:
        """Return the number of bytes in the file."""
        return self.num_bytes

    def to_bytes(self) -> bytes:
        """Return the header as one sector of little-endian bytes."""
        raw = _COUNTS.pack(self.num_bytes, self.num_sectors)
        raw += b"".join(_INT.pack(s) for s in self.data_sectors)
        return raw.ljust(self.sector_size, b"\0")

    @classmethod
    def from_bytes(cls, data: bytes) -> FileHeader:
        """Read a header from one sector's worth of bytes."""
        header = cls(len(data))
        header._load(bytes(data))
        return header

    def _load(self, data: bytes) -> None:
        num_bytes, num_sectors = _COUNTS.unpack_from(data)
        if not 0 <= num_sectors <= self.num_direct:
            raise ValueError(f"bad sector count in file header: {num_sectors}")
        self.num_bytes = num_bytes
        self.data_sectors = [
            _INT.unpack_from(data, _COUNTS.size + n * _INT.size)[0]
            for n in range(num_sectors)
        ]

    def fetch_from(self, disk: SectorDisk, sector: int) -> None:
        """Replace this header with the one stored in ``sector``."""
        data = disk.read_sector(sector)
        self.sector_size = len(data)
        self._load(data)

    def write_back(self, disk: SectorDisk, sector: int) -> None:
        """Store this header in ``sector``."""
        disk.write_sector(sector, self.to_bytes())

    def describe(self, disk: SectorDisk) -> str:
        """Return the header and the file's contents as readable text."""
        parts = [
            f"FileHeader contents.  File size: {self.num_bytes}.  File blocks:\n",
            "".join(f"{s} " for s in self.data_sectors),
            "\nFile contents:\n",
        ]
        remaining = self.num_bytes
        for sector in self.data_sectors:
            chunk = disk.read_sector(sector)[: max(remaining, 0)]
            remaining -= len(chunk)
            parts.append(
                "".join(chr(b) if 0x20 <= b <= 0x7E else f"\\{b:x}" for b in chunk)
            )
            parts.append("\n")
        return "".join(parts)