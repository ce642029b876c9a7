import struct

import pytest

from nachoskit.coff import AoutHeader, FileHeader, SectionHeader
from nachoskit.interpreter import LoadError, load_program, main
from nachoskit.memory import MEMOFFSET, Memory

PROGRAM = struct.pack("<II", (0o11 << 26) | (2 << 16) | 1, 0o14)


def build_coff(code=PROGRAM, magic=0x162, vaddr=MEMOFFSET):
    header = FileHeader.STRUCT.pack(magic, 1, 0, 0, 0, AoutHeader.STRUCT.size, 0)
    aout = AoutHeader.STRUCT.pack(0o407, 0, *([0] * 13))
    ptr = len(header) + len(aout) + SectionHeader.STRUCT.size
    section = SectionHeader.STRUCT.pack(b".text", vaddr, vaddr, len(code), ptr, 0, 0, 0, 0, 0)
    return header + aout + section + code


def test_load_program_places_text():
    mem = Memory(size=0x10000)
    lines = []
    loaded = load_program(build_coff(), mem, log=lines.append)
    assert loaded == [".text"]
    assert mem.read_bytes(MEMOFFSET, len(PROGRAM)) == PROGRAM
    assert "rdata section header missing" in lines
    assert len(lines) == 5


def test_wrong_magic():
    with pytest.raises(LoadError):
        load_program(build_coff(magic=0x160), Memory(size=0x1000))


def test_too_small_memory():
    with pytest.raises(LoadError):
        load_program(build_coff(vaddr=MEMOFFSET + 0xFFC), Memory(size=0x1000))


def test_main_runs_program(tmp_path):
    path = tmp_path / "prog.coff"
    path.write_bytes(build_coff())
    assert main([str(path)]) == 0


def test_main_unimplemented_exits_two(tmp_path, capsys):
    path = tmp_path / "bad.coff"
    path.write_bytes(build_coff(code=struct.pack("<I", 0o20 << 26)))
    assert main([str(path)]) == 2
    assert "no coprocessors" in capsys.readouterr().out


def test_main_missing_file(tmp_path, capsys):
    missing = tmp_path / "nothing"
    assert main([str(missing)]) == 0
    assert "Could not open" in capsys.readouterr().err