"""Convert a MIPS COFF file into a flat memory image."""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path

from nachoskit.coff import CoffError, CoffFile

STACK_SIZE = 1024
_UNCOPIED = (".bss", ".sbss")


def coff_to_flat(
    data: bytes,
    stack_size: int = STACK_SIZE,
    log: Callable[[str], None] | None = None,
) -> bytes:
    """Return a flat image of the COFF file's sections followed by a stack.

    Initialised sections are written one after another; a zero word marks
    the end of the stack area.
    """
    emit = log or (lambda _line: None)
    coff = CoffFile.parse(data)
    image = bytearray()
    top = 0

    emit(f"Loading {len(coff.sections)} sections:")
    for sec in coff.sections:
        emit(
            f'\t"{sec.name}", filepos 0x{sec.file_pointer & 0xFFFFFFFF:x}, '
            f"mempos 0x{sec.physical_address & 0xFFFFFFFF:x}, "
            f"size 0x{sec.size & 0xFFFFFFFF:x}"
        )
        top = max(top, sec.physical_address + sec.size)
        if sec.name not in _UNCOPIED:
            image += coff.section_data(sec)

    emit(f"Adding stack of size: {stack_size}")
    end_marker = top + stack_size - 4
    if end_marker < 0:
        raise ValueError("stack size too small for the end marker")
    if len(image) < end_marker:
        image.extend(bytes(end_marker - len(image)))
    image[end_marker:end_marker + 4] = bytes(4)
    return bytes(image)


def main(argv: list[str] | None = None) -> int:
    """Convert the COFF file named first into the flat file named second."""
    args = sys.argv[1:] if argv is None else argv
    if len(args) < 2:
        print("Usage: coff2flat <coffFileName> <flatFileName>", file=sys.stderr)
        return 1
    source, target = Path(args[0]), Path(args[1])
    try:
        data = source.read_bytes()
    except OSError as exc:
        print(f"{source}: {exc.strerror}", file=sys.stderr)
        return 1
    try:
        image = coff_to_flat(data, log=print)
    except CoffError as exc:
        print(exc, file=sys.stderr)
        return 1
    try:
        target.write_bytes(image)
    except OSError:
        print("Unable to write file", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())