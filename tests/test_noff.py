import struct

import pytest

from nachoskit.coff import CoffError
from nachoskit.noff import (
    NOFFMAGIC,
    ConversionError,
    NoffHeader,
    Segment,
    coff_to_noff,
    main,
)

FILEHDR = struct.Struct("<HHiiiHH")
AOUT = struct.Struct("<hh13i")
SCN = struct.Struct("<8s6iHHi")
HEADER_SIZE = NoffHeader.STRUCT.size


def build_coff(sections, magic=0x0162):
    offset = FILEHDR.size + AOUT.size + SCN.size * len(sections)
    headers = bytearray()
    body = bytearray()
    for name, paddr, size, payload in sections:
        pointer = 0
        if payload is not None:
            pointer = offset + len(body)
            body += payload
        headers += SCN.pack(name.encode(), paddr, paddr, size, pointer, 0, 0, 0, 0, 0)
    out = bytearray(FILEHDR.pack(magic, len(sections), 0, 0, 0, AOUT.size, 0))
    out += AOUT.pack(0o407, 0, *([0] * 13))
    return bytes(out + headers + body)


def test_header_round_trip():
    header = NoffHeader(NOFFMAGIC, Segment(0, 40, 100), Segment(100, 140, 20), Segment(120, 0, 8))
    packed = header.pack()
    assert len(packed) == 40
    assert NoffHeader.unpack(packed) == header


def test_header_starts_with_little_endian_magic():
    assert NoffHeader().pack()[:4] == NOFFMAGIC.to_bytes(4, "little")


def test_unpack_short_rejected():
    with pytest.raises(ConversionError):
        NoffHeader.unpack(b"\x00" * 8)


def test_text_data_bss_converted():
    text = bytes(range(16))
    data = b"hello!!!"
    coff = build_coff([
        (".text", 0, len(text), text),
        (".data", 0x100, len(data), data),
        (".bss", 0x200, 32, None),
    ])
    out = coff_to_noff(coff)
    header = NoffHeader.unpack(out)
    assert header.magic == NOFFMAGIC
    assert header.code == Segment(0, HEADER_SIZE, len(text))
    assert header.init_data == Segment(0x100, HEADER_SIZE + len(text), len(data))
    assert header.uninit_data.virtual_addr == 0x200
    assert header.uninit_data.size == 32
    assert out[HEADER_SIZE:] == text + data


def test_empty_sections_are_skipped():
    text = b"abcd"
    coff = build_coff([(".rdata", 0x80, 0, None), (".text", 0, 4, text)])
    header = NoffHeader.unpack(coff_to_noff(coff))
    assert header.init_data.size == 0
    assert header.code.size == len(text)


def test_data_and_rdata_together_rejected():
    coff = build_coff([(".data", 0x100, 4, b"aaaa"), (".rdata", 0x104, 4, b"bbbb")])
    with pytest.raises(ConversionError, match="data and rdata"):
        coff_to_noff(coff)


def test_contiguous_bss_and_sbss_rejected():
    coff = build_coff([(".sbss", 0x200, 16, None), (".bss", 0x210, 16, None)])
    with pytest.raises(ConversionError, match="bss and sbss"):
        coff_to_noff(coff)


def test_non_contiguous_bss_sizes_add_up():
    coff = build_coff([(".sbss", 0x200, 16, None), (".bss", 0x300, 24, None)])
    header = NoffHeader.unpack(coff_to_noff(coff))
    assert header.uninit_data.virtual_addr == 0x200
    assert header.uninit_data.size == 16 + 24


def test_unknown_segment_rejected():
    coff = build_coff([(".lit8", 0, 8, b"12345678")])
    with pytest.raises(ConversionError, match="Unknown segment type: .lit8"):
        coff_to_noff(coff)


def test_bad_coff_rejected():
    with pytest.raises(CoffError):
        coff_to_noff(build_coff([], magic=0x1234))


def test_log_lines():
    lines = []
    coff_to_noff(build_coff([(".text", 0, 4, b"abcd")]), log=lines.append)
    assert lines[0] == "numsections 1 "
    assert lines[1] == "Loading 1 sections:"
    assert lines[2].startswith('\t".text", filepos 0x')
    assert len(lines) == 3


def test_main_writes_noff(tmp_path):
    coff = build_coff([(".text", 0, 8, b"12345678")])
    source = tmp_path / "prog.coff"
    target = tmp_path / "prog.noff"
    source.write_bytes(coff)
    assert main([str(source), str(target)]) == 0
    assert target.read_bytes() == coff_to_noff(coff)


def test_main_removes_output_on_error(tmp_path):
    source = tmp_path / "bad.coff"
    target = tmp_path / "bad.noff"
    source.write_bytes(build_coff([(".weird", 0, 4, b"abcd")]))
    target.write_bytes(b"old")
    assert main([str(source), str(target)]) == 1
    assert not target.exists()


def test_main_usage_and_missing_input(tmp_path):
    assert main([]) == 1
    assert main([str(tmp_path / "missing"), str(tmp_path / "out")]) == 1