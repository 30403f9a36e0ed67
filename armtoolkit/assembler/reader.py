"""Reading assembly source: comment removal, label detection and the two passes."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from armtoolkit.assembler.symtable import SymbolTable

INSTRUCTION_SIZE = 4

_BLOCK_OPEN = "/*"
_BLOCK_CLOSE = "*/"
_LINE_COMMENT = "//"


class CommentStripper:
    """Removes ``/* ... */`` and ``//`` comments, remembering open block comments across lines."""

    def __init__(self) -> None:
        self.in_block = False

    def strip(self, line: str) -> str:
        """Return ``line`` with its comments removed."""
        kept: list[str] = []
        pos = 0
        while True:
            if self.in_block:
                end = line.find(_BLOCK_CLOSE, pos)
                if end < 0:
                    break
                pos = end + len(_BLOCK_CLOSE)
                self.in_block = False
            else:
                start = line.find(_BLOCK_OPEN, pos)
                if start < 0:
                    kept.append(line[pos:])
                    break
                kept.append(line[pos:start])
                pos = start + len(_BLOCK_OPEN)
                self.in_block = True
        text = "".join(kept)
        if not self.in_block:
            text = text.partition(_LINE_COMMENT)[0]
        return text


def split_label(line: str) -> str | None:
    """Return the label defined by ``line`` without its colon, or None if it defines none.

    A label is a first space-separated word ending in ``:``; anything after it
    on the same line is ignored.
    """
    word = line.partition(" ")[0]
    if word.endswith(":"):
        return word[:-1]
    return None


def clean_lines(lines: Iterable[str]) -> Iterator[str]:
    """Yield each line without its newline and comments, skipping lines left blank."""
    stripper = CommentStripper()
    for raw in lines:
        line = stripper.strip(raw.partition("\n")[0])
        if line.strip():
            yield line


def read_symbols(lines: Iterable[str]) -> SymbolTable:
    """First pass: give every label the address of the instruction that follows it."""
    table = SymbolTable()
    addr = 0
    for line in clean_lines(lines):
        label = split_label(line)
        if label is None:
            addr += INSTRUCTION_SIZE
        else:
            table.store(label, addr)
    return table


def iter_instructions(lines: Iterable[str]) -> Iterator[tuple[int, str]]:
    """Second pass: yield ``(address, line)`` for every instruction line."""
    addr = 0
    for line in clean_lines(lines):
        if split_label(line) is None:
            yield addr, line
            addr += INSTRUCTION_SIZE