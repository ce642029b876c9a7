"""An open file: a header in memory and a position for reads and writes."""

from __future__ import annotations

from enum import IntEnum

from nachoskit.filehdr import FileHeader, SectorDisk


class FileKind(IntEnum):
    """How a file was opened."""

    READ_WRITE = 0
    READ_ONLY = 1
    STDIN = 2
    STDOUT = 3


class OpenFile:
    """A file whose header is at ``sector``, read and written through ``disk``.

    Files have a fixed length; reads and writes past the end are cut short.
    """

    def __init__(
        self,
        disk: SectorDisk,
        sector: int,
        kind: FileKind = FileKind.READ_WRITE,
    ) -> None:
        self._disk = disk
        self.header = FileHeader(disk.sector_size)
        self.header.fetch_from(disk, sector)
        self.kind = FileKind(kind)
        self._position = 0

    def seek(self, position: int) -> None:
        """Set where the next read or write starts."""
        self._position = position

    def tell(self) -> int:
        """Return the current position."""
        return self._position

    def read(self, num_bytes: int) -> bytes:
        """Read up to ``num_bytes`` from the current position and advance it."""
        data = self.read_at(num_bytes, self._position)
        self._position += len(data)
        return data

    def write(self, data: bytes) -> int:
        """Write ``data`` at the current position; return the bytes written."""
        written = self.write_at(data, self._position)
        self._position += written
        return written

    def _span(self, num_bytes: int, position: int) -> int:
        if position < 0:
            raise ValueError("position must not be negative")
        length = self.length()
        if num_bytes <= 0 or position >= length:
            return 0
        return min(num_bytes, length - position)

    def _sector_of(self, index: int) -> int:
        return self.header.byte_to_sector(index * self._disk.sector_size)

    def read_at(self, num_bytes: int, position: int) -> bytes:
        """Read up to ``num_bytes`` starting at ``position``; no side effects."""
        count = self._span(num_bytes, position)
        if count == 0:
            return b""
        size = self._disk.sector_size
        first = position // size
        last = (position + count - 1) // size
        buf = b"".join(
            self._disk.read_sector(self._sector_of(i)) for i in range(first, last + 1)
        )
        start = position - first * size
        return buf[start:start + count]

    def write_at(self, data: bytes, position: int) -> int:
        """Write ``data`` starting at ``position``; return the bytes written."""
        count = self._span(len(data), position)
        if count == 0:
            return 0
        size = self._disk.sector_size
        first = position // size
        last = (position + count - 1) // size
        buf = bytearray((last - first + 1) * size)

        first_aligned = position == first * size
        last_aligned = position + count == (last + 1) * size
        if not first_aligned:
            buf[:size] = self._disk.read_sector(self._sector_of(first))
        if not last_aligned and (first != last or first_aligned):
            buf[-size:] = self._disk.read_sector(self._sector_of(last))

        start = position - first * size
        buf[start:start + count] = bytes(data[:count])
        for i in range(first, last + 1):
            offset = (i - first) * size
            self._disk.write_sector(self._sector_of(i), bytes(buf[offset:offset + size]))
        return count

    def length(self) -> int:
        """Return the number of bytes in the file."""
        return self.header.file_length()