import pytest

from nachoskit.memory import MEMOFFSET, AddressError, Memory


@pytest.fixture
def mem():
    return Memory(size=4096)


def test_word_round_trip(mem):
    mem.store(MEMOFFSET + 8, 0x12345678)
    assert mem.fetch(MEMOFFSET + 8) == 0x12345678


def test_little_endian_layout(mem):
    mem.store(MEMOFFSET, 0x12345678)
    assert mem.read_bytes(MEMOFFSET, 4) == b"\x78\x56\x34\x12"
    assert mem.ucfetch(MEMOFFSET) == 0x78


def test_signed_and_unsigned_fetches(mem):
    mem.store(MEMOFFSET, -1)
    assert mem.fetch(MEMOFFSET) == -1
    assert mem.sfetch(MEMOFFSET) == -1
    assert mem.usfetch(MEMOFFSET) == 0xFFFF
    assert mem.cfetch(MEMOFFSET) == -1
    assert mem.ucfetch(MEMOFFSET) == 0xFF


def test_narrow_stores_truncate(mem):
    mem.sstore(MEMOFFSET, 0x12345)
    mem.cstore(MEMOFFSET + 2, 0x1FF)
    assert mem.usfetch(MEMOFFSET) == 0x2345
    assert mem.ucfetch(MEMOFFSET + 2) == 0xFF


def test_out_of_range(mem):
    with pytest.raises(AddressError):
        mem.fetch(MEMOFFSET + 4094)
    with pytest.raises(AddressError):
        mem.fetch(0)
    with pytest.raises(AddressError):
        mem.load(MEMOFFSET + 4000, bytes(200))


def test_cstring(mem):
    mem.write_bytes(MEMOFFSET + 10, b"hello\0world")
    assert mem.read_cstring(MEMOFFSET + 10) == b"hello"
    assert mem.read_cstring(MEMOFFSET + 16) == b"world"