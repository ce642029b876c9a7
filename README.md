# nachoskit

Tools and building blocks for a small teaching operating system that runs
MIPS user programs:

- `nachoskit.cpu`, `nachoskit.memory`, `nachoskit.syscalls` and
  `nachoskit.interpreter`: a little-endian MIPS interpreter with a minimal
  system-call layer
- `nachoskit.instr` and `nachoskit.disassembler`: instruction field
  decoding and a MIPS disassembler; `nachoskit.disasm_tool` disassembles a
  whole program
- `nachoskit.coff`, `nachoskit.noff` and `nachoskit.flat`: reading MIPS
  COFF object files and converting them to NOFF files or flat memory images
- `nachoskit.directory`, `nachoskit.filehdr` and `nachoskit.openfile`:
  file-system pieces — a fixed-size directory, file headers (i-nodes) and
  open files with a current position
- `nachoskit.intlist`, `nachoskit.stacks` and `nachoskit.boundedstack`:
  small example data structures — a linked list of integers, array- and
  list-backed stacks, and a bounded stack of arbitrary values

The package has no runtime dependencies.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Command-line tools

Convert a COFF executable (little-endian MIPS, OMAGIC) to a NOFF file.
Sections `.text`, `.data`/`.rdata` and `.bss`/`.sbss` are accepted; any
other non-empty section, or both `.data` and `.rdata`, is an error and the
output file is removed:

```
coff2noff program.coff program.noff
```

Convert a COFF executable to a flat memory image: initialised sections are
written one after another and a zero word marks the end of a 1024-byte
stack area:

```
coff2flat program.coff program.flat
```

Run a MIPS COFF program in the interpreter. The file name defaults to
`a.out`; arguments after it are passed to the program. `-t` traces every
instruction, `-r` adds a register dump to each traced instruction and `-T`
traces system calls; `-m` is accepted and its four following arguments are
skipped:

```
nachos-mips -t a.out
```

The command exits with the status the program ends with, or 2 if the
program uses an unimplemented instruction or an unknown system call.

Disassemble a COFF program: words are read from the start of the loaded
memory for the size of the `.text` section, one line each:

```
nachos-disasm a.out
```

Run the stack demonstrations, which push a sequence of values (from 17,
and for the bounded stack also from `a`) and pop them back off:

```
nachos-stack-demo
nachos-template-stack-demo
```

## Library use

Decoding and disassembling instructions:

```python
from nachoskit.instr import rs, rt, rd, immed
from nachoskit.disassembler import disassemble

word = 0x00851021            # addu r2,r4,r5
print(rs(word), rt(word), rd(word))
print(disassemble(word, 0x10000000, True))
```

Reading a COFF file and producing a NOFF image:

```python
from pathlib import Path
from nachoskit.coff import CoffFile
from nachoskit.noff import NoffHeader, coff_to_noff

data = Path("program.coff").read_bytes()
coff = CoffFile.parse(data)
noff_image = coff_to_noff(data, print)
header = NoffHeader.unpack(noff_image)
```

`coff_to_flat(data, stack_size, log)` in `nachoskit.flat` returns a flat
image the same way. Errors in the input raise `CoffError` and
`ConversionError`; problems while loading a program with
`nachoskit.interpreter.load_program` raise `LoadError`.

Running a program from Python:

```python
from nachoskit.memory import Memory
from nachoskit.cpu import Cpu
from nachoskit.interpreter import load_program

memory = Memory()
load_program(data, memory)
status = Cpu(memory).run(memory.offset, ["a.out"])
```

Working with the stacks and the list:

```python
from nachoskit.stacks import ArrayStack, ListStack, StackFullError
from nachoskit.boundedstack import BoundedStack

stack = ArrayStack(2)
stack.push(1)
stack.push(2)
assert stack.is_full()
assert stack.pop() == 2

chars = BoundedStack(3)
chars.push("a")
```

Pushing onto a full `ArrayStack` or `BoundedStack` raises `StackFullError`;
popping an empty stack raises `StackEmptyError`. A `ListStack` is never
full. `self_test` returns the push and pop log lines as a list.

File-system pieces: a `Directory` maps names (cut to nine characters) to
header sectors and serialises with `to_bytes` / `load_bytes`, or through a
file with `fetch_from` / `write_back`; a `FileHeader` allocates data sectors
from a free-sector map, translates byte offsets to sectors and reads and
writes itself as one sector; an `OpenFile` reads and writes through a disk
with a current position (`seek`, `tell`, `read`, `write`, `read_at`,
`write_at`, `length`). Reads and writes never go past the file's fixed
length.

## What the package does not do

- It has no simulated disk and no free-sector bitmap. `FileHeader` and
  `OpenFile` work with objects you supply: a disk with `sector_size`,
  `read_sector(sector)` and `write_sector(sector, data)`, and a map with
  `num_clear()`, `find()`, `test(bit)` and `clear(bit)`.
- It has no file-system layer that creates, opens or removes files by name;
  the directory, header and open-file pieces are to be combined by the
  caller.
- The interpreter handles only the system calls exit, read, write, open,
  close, break (sbrk), lseek, ioctl, fstat and getpagesize; close and ioctl
  do nothing but return 0. There are no coprocessor instructions and no
  `swl`/`swr`.