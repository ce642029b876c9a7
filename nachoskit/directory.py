"""A flat table of file names and the sectors holding their headers."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Protocol

FILE_NAME_MAX_LEN = 9
"""File names are cut to this many characters."""

_ENTRY = struct.Struct(f"<?3xi{FILE_NAME_MAX_LEN + 1}s2x")


class _File(Protocol):
    def read_at(self, num_bytes: int, position: int) -> bytes: ...

    def write_at(self, data: bytes, position: int) -> int: ...


def _key(name: str) -> bytes:
    return name.encode("latin-1")[:FILE_NAME_MAX_LEN]


@dataclass
class DirectoryEntry:
    """One slot of the directory."""

    in_use: bool = False
    sector: int = 0
    name: str = ""

    def pack(self) -> bytes:
        return _ENTRY.pack(self.in_use, self.sector, _key(self.name))

    @classmethod
    def unpack(cls, data: bytes) -> DirectoryEntry:
        in_use, sector, raw = _ENTRY.unpack(data)
        return cls(in_use, sector, raw.split(b"\0", 1)[0].decode("latin-1"))


class Directory:
    """A fixed number of entries, each naming a file and its header sector."""

    ENTRY_SIZE = _ENTRY.size

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError("directory size must not be negative")
        self.table = [DirectoryEntry() for _ in range(size)]

    def __len__(self) -> int:
        return len(self.table)

    def _find_index(self, name: str) -> int | None:
        key = _key(name)
        for index, entry in enumerate(self.table):
            if entry.in_use and _key(entry.name) == key:
                return index
        return None

    def find(self, name: str) -> int | None:
        """Return the header sector of ``name``, or None if it is absent."""
        index = self._find_index(name)
        return None if index is None else self.table[index].sector

    def add(self, name: str, sector: int) -> bool:
        """Add ``name`` with its header ``sector``.

        Returns False if the name is already present or no slot is free.
        """
        if self._find_index(name) is not None:
            return False
        for entry in self.table:
            if not entry.in_use:
                entry.in_use = True
                entry.name = _key(name).decode("latin-1")
                entry.sector = sector
                return True
        return False

    def remove(self, name: str) -> bool:
        """Remove ``name``; return False if it was not present."""
        index = self._find_index(name)
        if index is None:
            return False
        self.table[index].in_use = False
        return True

    def names(self) -> list[str]:
        """Return the names of all files in the directory, in table order."""
        return [entry.name for entry in self.table if entry.in_use]

    def to_bytes(self) -> bytes:
        """Return the table in its on-disk form."""
        return b"".join(entry.pack() for entry in self.table)

    def load_bytes(self, data: bytes) -> None:
        """Replace the table with the on-disk form in ``data``."""
        needed = len(self.table) * self.ENTRY_SIZE
        if len(data) < needed:
            raise ValueError("directory data is too short")
        self.table = [
            DirectoryEntry.unpack(data[start:start + self.ENTRY_SIZE])
            for start in range(0, needed, self.ENTRY_SIZE)
        ]

    def fetch_from(self, file: _File) -> None:
        """Read the table from the start of ``file``."""
        self.load_bytes(file.read_at(len(self.table) * self.ENTRY_SIZE, 0))

    def write_back(self, file: _File) -> None:
        """Write the table to the start of ``file``."""
        file.write_at(self.to_bytes(), 0)