"""Byte-addressed little-endian main memory for the MIPS interpreter."""

from __future__ import annotations

MEMSIZE = 1 << 24
MEMOFFSET = 0x10000000
_MASK32 = 0xFFFFFFFF


class AddressError(IndexError):
    """Raised when an access falls outside simulated memory."""


class Memory:
    """A block of memory that starts at ``offset`` in the address space."""

    def __init__(self, size: int = MEMSIZE, offset: int = MEMOFFSET) -> None:
        if size <= 0:
            raise ValueError("memory size must be positive")
        self.size = size
        self.offset = offset
        self._data = bytearray(size)

    def _index(self, addr: int, length: int) -> int:
        index = (addr & _MASK32) - self.offset
        if index < 0 or index + length > self.size:
            raise AddressError(f"address 0x{addr & _MASK32:08x} out of range")
        return index

    def _read(self, addr: int, length: int, signed: bool) -> int:
        index = self._index(addr, length)
        return int.from_bytes(self._data[index:index + length], "little", signed=signed)

    def _write(self, addr: int, length: int, value: int) -> None:
        index = self._index(addr, length)
        value &= (1 << (8 * length)) - 1
        self._data[index:index + length] = value.to_bytes(length, "little")

    def fetch(self, addr: int) -> int:
        """Return the signed 32-bit word at ``addr``."""
        return self._read(addr, 4, True)

    def sfetch(self, addr: int) -> int:
        """Return the signed 16-bit half word at ``addr``."""
        return self._read(addr, 2, True)

    def usfetch(self, addr: int) -> int:
        """Return the unsigned 16-bit half word at ``addr``."""
        return self._read(addr, 2, False)

    def cfetch(self, addr: int) -> int:
        """Return the signed byte at ``addr``."""
        return self._read(addr, 1, True)

    def ucfetch(self, addr: int) -> int:
        """Return the unsigned byte at ``addr``."""
        return self._read(addr, 1, False)

    def store(self, addr: int, value: int) -> None:
        """Store the low 32 bits of ``value`` at ``addr``."""
        self._write(addr, 4, value)

    def sstore(self, addr: int, value: int) -> None:
        """Store the low 16 bits of ``value`` at ``addr``."""
        self._write(addr, 2, value)

    def cstore(self, addr: int, value: int) -> None:
        """Store the low 8 bits of ``value`` at ``addr``."""
        self._write(addr, 1, value)

    def load(self, addr: int, data: bytes) -> None:
        """Copy a section image into memory at ``addr``."""
        self.write_bytes(addr, data)

    def read_bytes(self, addr: int, length: int) -> bytes:
        """Return ``length`` bytes starting at ``addr``."""
        if length < 0:
            raise ValueError("length must not be negative")
        index = self._index(addr, length)
        return bytes(self._data[index:index + length])

    def write_bytes(self, addr: int, data: bytes) -> None:
        """Write ``data`` starting at ``addr``."""
        index = self._index(addr, len(data))
        self._data[index:index + len(data)] = data

    def read_cstring(self, addr: int) -> bytes:
        """Return the NUL-terminated byte string at ``addr``, without the NUL."""
        start = self._index(addr, 0)
        end = self._data.find(b"\0", start)
        if end == -1:
            raise AddressError("unterminated string")
        return bytes(self._data[start:end])