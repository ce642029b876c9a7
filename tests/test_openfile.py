from types import SimpleNamespace

import pytest

from nachoskit.filehdr import FileHeader
from nachoskit.openfile import FileKind, OpenFile

SECTOR = 128
HEADER_SECTOR = 0


class MemoryDisk:
    def __init__(self, count=32, sector_size=SECTOR):
        self.sector_size = sector_size
        self.sectors = [bytes(sector_size) for _ in range(count)]
        self.writes = 0

    def read_sector(self, sector):
        return self.sectors[sector]

    def write_sector(self, sector, data):
        assert len(data) == self.sector_size
        self.writes += 1
        self.sectors[sector] = bytes(data)


def make_bitmap(bits):
    """A set-backed free map with the header sector already taken."""
    used = {HEADER_SECTOR}

    def num_clear():
        return bits - len(used)

    def find():
        for bit in range(bits):
            if bit not in used:
                used.add(bit)
                return bit
        return -1

    def is_set(bit):
        return bit in used

    def clear(bit):
        used.discard(bit)

    return SimpleNamespace(
        bits=bits,
        used=used,
        num_clear=num_clear,
        find=find,
        test=is_set,
        clear=clear,
    )


def make_file(size, kind=FileKind.READ_WRITE):
    disk = MemoryDisk()
    hdr = FileHeader(SECTOR)
    assert hdr.allocate(make_bitmap(32), size)
    hdr.write_back(disk, HEADER_SECTOR)
    return disk, OpenFile(disk, HEADER_SECTOR, kind)


def test_length_and_default_kind():
    _, f = make_file(300)
    assert f.length() == 300
    assert f.kind is FileKind.READ_WRITE
    assert f.tell() == 0


def test_kind_given():
    _, f = make_file(10, FileKind.STDOUT)
    assert f.kind is FileKind.STDOUT


def test_write_then_read_across_sectors():
    _, f = make_file(300)
    data = bytes(range(256)) + b"x" * 44
    assert f.write(data) == 300
    assert f.tell() == 300
    f.seek(0)
    assert f.read(300) == data


def test_partial_write_keeps_neighbours():
    _, f = make_file(300)
    f.write_at(b"A" * 300, 0)
    assert f.write_at(b"bcd", SECTOR - 1) == 3
    whole = f.read_at(300, 0)
    assert whole[: SECTOR - 1] == b"A" * (SECTOR - 1)
    assert whole[SECTOR - 1:SECTOR + 2] == b"bcd"
    assert whole[SECTOR + 2:] == b"A" * (300 - SECTOR - 2)


def test_write_inside_one_sector():
    _, f = make_file(SECTOR)
    f.write_at(b"-" * SECTOR, 0)
    f.write_at(b"mid", 10)
    assert f.read_at(SECTOR, 0) == b"-" * 10 + b"mid" + b"-" * (SECTOR - 13)


def test_write_is_cut_at_end_of_file():
    _, f = make_file(20)
    assert f.write_at(b"z" * 50, 10) == 10
    assert f.read_at(100, 0)[10:] == b"z" * 10


def test_read_past_end():
    _, f = make_file(20)
    assert f.read_at(5, 20) == b""
    assert f.read_at(0, 0) == b""
    assert f.write_at(b"q", 20) == 0


def test_read_advances_position():
    _, f = make_file(30)
    f.write(b"0123456789" * 3)
    f.seek(0)
    assert f.read(10) == b"0123456789"
    assert f.tell() == 10
    assert f.read(100) == b"0123456789" * 2
    assert f.tell() == 30
    assert f.read(5) == b""


def test_read_at_has_no_side_effects():
    _, f = make_file(30)
    f.seek(7)
    f.read_at(10, 0)
    assert f.tell() == 7


def test_aligned_write_only_writes_touched_sectors():
    disk, f = make_file(SECTOR * 3)
    before = disk.writes
    f.write_at(b"k" * SECTOR, SECTOR)
    assert disk.writes - before == 1
    assert f.read_at(SECTOR, SECTOR) == b"k" * SECTOR


def test_negative_position_raises():
    _, f = make_file(30)
    with pytest.raises(ValueError):
        f.read_at(5, -1)
    with pytest.raises(ValueError):
        f.write_at(b"a", -3)


def test_reopen_sees_data():
    disk, f = make_file(200)
    f.write(b"persist" * 10)
    again = OpenFile(disk, HEADER_SECTOR)
    assert again.read(70) == b"persist" * 10