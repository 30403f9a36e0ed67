"""Execution of branch instructions."""

from __future__ import annotations

from armtoolkit.emulator.processor import (
    MASK_32,
    MEMORY_SIZE,
    EmulationError,
    PState,
    Processor,
)

_BRANCH_GROUP = 0b0101

_EQ = 0b0000
_NE = 0b0001
_GE = 0b1010
_LT = 0b1011
_GT = 0b1100
_LE = 0b1101
_AL = 0b1110


def _signed(value: int, width: int) -> int:
    return value - (1 << width) if (value >> (width - 1)) & 1 else value


def _jump(cpu: Processor, target: int) -> None:
    if not 0 <= target < MEMORY_SIZE:
        raise EmulationError(f"branch target out of range: {target:#x}")
    cpu.pc = target


def _condition_holds(flags: PState, code: int) -> bool:
    """Return whether the condition ``code`` is satisfied by ``flags``."""
    n_equals_v = flags.negative == flags.overflow
    if code == _EQ:
        return flags.zero
    if code == _NE:
        return not flags.zero
    if code == _GE:
        return n_equals_v
    if code == _LT:
        return not n_equals_v
    if code == _GT:
        return not flags.zero and n_equals_v
    if code == _LE:
        return not (not flags.zero and n_equals_v)
    if code == _AL:
        return True
    raise EmulationError(f"undefined condition encoding given with value: {code}")


def _conditional(cpu: Processor, operand: int) -> None:
    top = operand >> 24
    simm19 = (operand >> 5) & 0xFFFFF
    bit4 = (operand >> 4) & 0b1
    condition = operand & 0b1111
    if top or bit4:
        raise EmulationError(f"malformed conditional branch operand: {operand:#x}")

    if _condition_holds(cpu.pstate, condition):
        _jump(cpu, cpu.pc + _signed(simm19 & 0x7FFFF, 19) * 4)
    else:
        cpu.increment_pc()


def decode_branch(cpu: Processor, word: int) -> None:
    """Execute an unconditional, register or conditional branch.

    Raises EmulationError if the word is not a branch or its target lies
    outside memory.
    """
    word &= MASK_32
    sf = (word >> 31) & 0b1
    bit30 = (word >> 30) & 0b1
    group = (word >> 26) & 0b1111
    operand = word & ((1 << 26) - 1)

    if group != _BRANCH_GROUP:
        raise EmulationError(f"not a branch instruction: {word:#010x}")

    if not sf and not bit30:
        _jump(cpu, cpu.pc + _signed(operand, 26) * 4)
    elif sf and bit30:
        register = (operand >> 5) & 0b11111
        _jump(cpu, cpu.read_register(True, register))
    elif bit30:
        _conditional(cpu, operand)
    else:
        raise EmulationError(
            f"No branch instruction matching bit 31 and bit 30 values: {sf}, {bit30}"
        )