# armtoolkit

A small toolkit for a subset of the AArch64 instruction set. It has two parts:

- an **assembler**. It turns assembly source into a flat binary of 32-bit
  instruction words, stored little-endian.
- an **emulator**. It loads such a binary at address 0 of 2 MiB of memory and
  runs it until it reaches the halt word `0x8a000000`. It then prints the 31
  general purpose registers, the PC, the PSTATE flags and every non-zero
  32-bit memory word.

The package has no dependencies outside the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Command line

Assemble a source file into a binary:

```
armtoolkit-assemble program.s program.bin
```

The command exits with status 1 in these cases:

- it is not given exactly two arguments
- the source cannot be read
- a line uses an unknown mnemonic
- the output cannot be written

Run a binary and print the final machine state to standard output:

```
armtoolkit-emulate program.bin
```

Write the state to a file instead:

```
armtoolkit-emulate program.bin state.out
```

The emulator exits with these statuses:

- 0 on a normal halt
- 1 if the input binary cannot be read or does not fit in memory
- 2 if an instruction cannot be fetched, decoded or executed. The error and the
  machine state are printed to standard output.
- 11 if the output file cannot be opened

## Supported assembly

- Arithmetic: `add`, `adds`, `sub`, `subs`, `cmp`, `cmn`, `neg`, `negs`
- Logic: `and`, `ands`, `bic`, `bics`, `eor`, `eon`, `orr`, `orn`, `tst`, `mvn`, `mov`
- Shifted register operands: `lsl`, `lsr`, `asr`, and `ror` for the logical instructions
- Wide moves: `movn`, `movk`, `movz`, with an optional `lsl #n` shift
- Multiply: `madd`, `msub`, `mul`, `mneg`
- Branches: `b`, `br`, `b.eq`, `b.ne`, `b.ge`, `b.lt`, `b.gt`, `b.le`, `b.al`
- Loads and stores: `ldr` and `str`, with these addressing modes:
  - literal
  - unsigned offset
  - register offset
  - pre-indexed
  - post-indexed
- The `.int` directive

Registers are written as `x0`–`x30` (64-bit) or `w0`–`w30` (32-bit). The zero
register is written `xzr` or `wzr`. Immediates are written `#n` in decimal or
`#0x...` in hexadecimal.

A label is a first word ending in `:`. It takes the address of the next
instruction. When the same label is defined twice, the first definition is kept.

Comments may be written as `// ...` or `/* ... */`. A block comment may span
several lines.

## Library use

```python
from armtoolkit.assembler.assemble import assemble, to_bytes
from armtoolkit.emulator.processor import Processor
from armtoolkit.emulator.emulate import run, format_state

words = assemble([
    "movz x0, #5",
    "add x1, x0, #3",
    "and x0, x0, x0",
])

cpu = Processor()
cpu.load(to_bytes(words))
run(cpu)
print(format_state(cpu))
```

The `and x0, x0, x0` instruction encodes as `0x8a000000`, which is the word
that halts the emulator.

Other functions you may find useful:

- `armtoolkit.assembler.assemble.assemble_file(source, destination)` assembles
  a text file into a binary file.
- `armtoolkit.assembler.assemble.parse_line(line, addr, symbols)` encodes a
  single instruction.
- `armtoolkit.assembler.reader.read_symbols(lines)` runs only the label pass
  and returns a `SymbolTable`.
- `armtoolkit.assembler.funtable.get_bin_function(mnemonic)` returns the
  encoder for a mnemonic. It raises `UnknownMnemonicError` for anything else.
- `Processor` has the following methods:
  - `read_register` and `write_register`, which read and write registers in
    32-bit or 64-bit mode
  - `read_memory` and `write_memory`, which read and write memory in 32-bit or
    64-bit mode
  - `load`, which copies an image into memory
- `run(cpu)` raises `EmulationError` when an instruction cannot be fetched,
  decoded or executed.

## What it does not do

- Only the instructions listed above are supported. There are no
  floating-point, SIMD or system instructions.
- The emulator runs a program to its halt word in one go. It has no debugger,
  breakpoints or interactive stepping.
- The assembler produces a flat binary only. It has no object files,
  sections, relocation or linking.