"""Processor state: registers, memory, program counter and condition flags."""

from __future__ import annotations

from dataclasses import dataclass, field

MEMORY_SIZE = 2 << 20
NUM_GENERAL_REGISTERS = 31
ZERO_REGISTER = 31
BYTE_SIZE = 8
INSTRUCTION_SIZE = 4

MASK_32 = (1 << 32) - 1
MASK_64 = (1 << 64) - 1


class EmulationError(Exception):
    """Raised when an instruction cannot be executed."""


@dataclass
class PState:
    """Condition flags of the processor state register."""

    negative: bool = False
    zero: bool = True
    carry: bool = False
    overflow: bool = False


def get_mask(start: int, end: int) -> int:
    """Return a 64-bit mask of ones from bit ``start`` to bit ``end``.

    Gives 0 when ``start`` is not below ``end``; bits below 0 are dropped.
    """
    if start >= end:
        return 0
    low = max(start, 0)
    return (((2 << (end - low)) - 1) << low) & MASK_64


@dataclass
class Processor:
    """Memory, 31 general purpose registers, the program counter and PSTATE."""

    memory: bytearray = field(default_factory=lambda: bytearray(MEMORY_SIZE))
    registers: list[int] = field(default_factory=lambda: [0] * NUM_GENERAL_REGISTERS)
    pc: int = 0
    pstate: PState = field(default_factory=PState)

    def __init__(self) -> None:
        self.memory = bytearray(MEMORY_SIZE)
        self.registers = [0] * NUM_GENERAL_REGISTERS
        self.pc = 0
        self.pstate = PState()

    def increment_pc(self) -> None:
        """Advance the program counter to the next instruction."""
        self.pc += INSTRUCTION_SIZE

    @staticmethod
    def _check_register(register: int) -> None:
        if not 0 <= register < NUM_GENERAL_REGISTERS:
            raise EmulationError(f"invalid register number: {register}")

    @staticmethod
    def _check_address(address: int, size: int) -> None:
        if not (0 <= address and address + size <= MEMORY_SIZE):
            raise EmulationError(f"memory address out of range: {address:#x}")

    def read_register(self, in_64bit_mode: bool, register: int) -> int:
        """Return a register's value, its low 32 bits unless in 64-bit mode.

        The zero register always reads as 0.
        """
        if register == ZERO_REGISTER:
            return 0
        self._check_register(register)
        value = self.registers[register]
        return value if in_64bit_mode else value & MASK_32

    def write_register(self, in_64bit_mode: bool, register: int, data: int) -> None:
        """Store ``data`` in a register, cut to 32 bits unless in 64-bit mode.

        Writes to the zero register are discarded.
        """
        if register == ZERO_REGISTER:
            return
        self._check_register(register)
        self.registers[register] = data & (MASK_64 if in_64bit_mode else MASK_32)

    def read_memory(self, in_64bit_mode: bool, address: int) -> int:
        """Return the little-endian 32- or 64-bit value at ``address``."""
        size = 8 if in_64bit_mode else 4
        self._check_address(address, size)
        return int.from_bytes(self.memory[address:address + size], "little")

    def write_memory(self, in_64bit_mode: bool, address: int, data: int) -> None:
        """Store ``data`` little-endian as 32 or 64 bits at ``address``."""
        size = 8 if in_64bit_mode else 4
        self._check_address(address, size)
        value = data & ((1 << (BYTE_SIZE * size)) - 1)
        self.memory[address:address + size] = value.to_bytes(size, "little")

    def load(self, data: bytes) -> None:
        """Copy a binary image into memory starting at address 0."""
        if len(data) > MEMORY_SIZE:
            raise EmulationError(f"image of {len(data)} bytes does not fit in memory")
        self.memory[:len(data)] = data