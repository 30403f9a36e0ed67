"""Two-pass assembler: source lines in, little-endian instruction words out."""

from __future__ import annotations

import struct
import sys
from collections.abc import Iterable, Sequence
from pathlib import Path

from armtoolkit.assembler.funtable import UnknownMnemonicError, get_bin_function
from armtoolkit.assembler.reader import iter_instructions, read_symbols
from armtoolkit.assembler.symtable import SymbolTable
from armtoolkit.assembler.tokenizer import TokenizedLine, tokenize


def parse_line(line: str, addr: int, symbols: SymbolTable) -> int:
    """Encode one instruction line at ``addr``, replacing label operands by ``#address``."""
    tokens = tokenize(line)
    args = [f"#{symbols.address_of(arg)}" if arg in symbols else arg for arg in tokens.args]
    encoder = get_bin_function(tokens.inst)
    return encoder(TokenizedLine(tokens.inst, args), addr)


def assemble(lines: Iterable[str]) -> list[int]:
    """Assemble source lines into a list of 32-bit instruction words."""
    source = list(lines)
    symbols = read_symbols(source)
    return [parse_line(line, addr, symbols) for addr, line in iter_instructions(source)]


def to_bytes(words: Sequence[int]) -> bytes:
    """Pack instruction words as consecutive little-endian 32-bit values."""
    return struct.pack(f"<{len(words)}I", *words)


def assemble_file(source: str | Path, destination: str | Path) -> None:
    """Assemble the text file ``source`` into the binary file ``destination``."""
    with open(source, encoding="utf-8") as handle:
        words = assemble(handle)
    Path(destination).write_bytes(to_bytes(words))


def main(argv: Sequence[str] | None = None) -> int:
    """Command entry point: ``assemble <source> <output>``."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 2:
        print("Error: invalid arguments!, ", file=sys.stderr)
        return 1
    source, destination = args

    try:
        with open(source, encoding="utf-8") as handle:
            words = assemble(handle)
    except OSError:
        print(f"Error: can't open {source}", file=sys.stderr)
        return 1
    except (UnknownMnemonicError, ValueError) as error:
        print(f"Error: {error}", file=sys.stderr)
        return 1

    try:
        Path(destination).write_bytes(to_bytes(words))
    except OSError:
        print(f"Error: can't open {destination}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())