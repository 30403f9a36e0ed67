"""Fetch-decode-execute loop, state dump and the emulator command."""

from __future__ import annotations

import struct
import sys
from collections.abc import Callable, Sequence
from typing import TextIO

from armtoolkit.emulator.branch import decode_branch
from armtoolkit.emulator.dataprocess import decode_data_immediate, decode_data_register
from armtoolkit.emulator.datatransfer import decode_data_transfer
from armtoolkit.emulator.processor import (
    MEMORY_SIZE,
    NUM_GENERAL_REGISTERS,
    EmulationError,
    Processor,
)

HALT_INSTRUCTION = 0x8A000000

_FETCH_ERROR = 2
_DECODE_ERROR = 8

Decoder = Callable[[Processor, int], None]


class _CycleError(EmulationError):
    """An emulation error tagged with the exit code of the stage that failed."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(message)
        self.code = code


def _select_decoder(op0: int) -> tuple[Decoder, int]:
    if op0 & 0b1110 == 0b1010:
        return decode_branch, 4
    if op0 & 0b1110 == 0b1000:
        return decode_data_immediate, 5
    if op0 & 0b111 == 0b101:
        return decode_data_register, 6
    if op0 & 0b101 == 0b100:
        return decode_data_transfer, 7
    raise LookupError(op0)


def run(cpu: Processor) -> None:
    """Execute instructions from the PC until the halt instruction is reached.

    Raises EmulationError if an instruction cannot be fetched, decoded or executed.
    """
    while True:
        pc = cpu.pc
        if not 0 <= pc <= MEMORY_SIZE - 4:
            raise _CycleError(
                _FETCH_ERROR, f"fetch failed on nonexistent memory location with pc value: {pc}"
            )
        word = cpu.read_memory(False, pc)
        if word == HALT_INSTRUCTION:
            return

        op0 = (word >> 25) & 0b1111
        try:
            decoder, code = _select_decoder(op0)
        except LookupError:
            raise _CycleError(
                _DECODE_ERROR,
                f"decode failed on non-matching op0 value: {op0}, with word value: {word}",
            ) from None
        try:
            decoder(cpu, word)
        except _CycleError:
            raise
        except EmulationError as error:
            raise _CycleError(code, str(error)) from error


def _iter_nonzero_words(memory: bytes):
    for index, (word,) in enumerate(struct.iter_unpack("<I", memory)):
        if word:
            yield index * 4, word


def format_state(cpu: Processor) -> str:
    """Return the registers, PSTATE and non-zero memory words as text."""
    lines = ["Registers:"]
    lines.extend(
        f"X{index:02d}    = {cpu.registers[index]:016x}"
        for index in range(NUM_GENERAL_REGISTERS)
    )
    lines.append(f"PC     = {cpu.pc:016x}")

    flags = cpu.pstate
    pstate = "".join(
        letter if value else "-"
        for letter, value in zip("NZCV", (flags.negative, flags.zero, flags.carry, flags.overflow))
    )
    lines.append(f"PSTATE : {pstate}")

    lines.append("Non-Zero Memory:")
    lines.extend(
        f"0x{address:08x} : {word:08x}" for address, word in _iter_nonzero_words(cpu.memory)
    )
    return "\n".join(lines) + "\n"


def _write_state(cpu: Processor, stream: TextIO) -> None:
    stream.write(format_state(cpu))


def main(argv: Sequence[str] | None = None) -> int:
    """Command entry point: ``emulate [<binary> [<output>]]``."""
    args = list(sys.argv[1:] if argv is None else argv)
    cpu = Processor()

    if args:
        try:
            with open(args[0], "rb") as handle:
                cpu.load(handle.read())
        except (OSError, EmulationError):
            print("Can't read given input file", file=sys.stderr)
            print(f"binary file loader failed on file {args[0]}")
            return 1

    try:
        run(cpu)
    except EmulationError as error:
        code = error.code if isinstance(error, _CycleError) else _FETCH_ERROR
        print(error)
        print(f"FDE cycle failed with error code {code}")
        _write_state(cpu, sys.stdout)
        return 2

    if len(args) > 1:
        try:
            with open(args[1], "w", encoding="utf-8") as out:
                _write_state(cpu, out)
        except OSError:
            print("Can't read given output file", file=sys.stderr)
            return 11
    else:
        _write_state(cpu, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())