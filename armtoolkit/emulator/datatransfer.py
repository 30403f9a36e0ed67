"""Execution of load and store instructions."""

from __future__ import annotations

from armtoolkit.emulator.processor import (
    MASK_32,
    MASK_64,
    MEMORY_SIZE,
    EmulationError,
    Processor,
)

_LAST_TARGET_REGISTER = 30


def _signed(value: int, width: int) -> int:
    return value - (1 << width) if (value >> (width - 1)) & 1 else value


def _check_register(register: int, role: str) -> None:
    if not 0 <= register <= _LAST_TARGET_REGISTER:
        raise EmulationError(f"invalid {role} register for a load or store: {register}")


def _check_address(address: int) -> None:
    if not 0 <= address < MEMORY_SIZE:
        raise EmulationError(f"load or store address out of range: {address:#x}")


def _load_or_store(cpu: Processor, load: bool, sf: bool, rt: int, address: int) -> None:
    """Load memory at ``address`` into ``rt``, or store ``rt`` there."""
    if load:
        cpu.write_register(sf, rt, cpu.read_memory(sf, address))
    else:
        cpu.write_memory(sf, address, cpu.read_register(sf, rt))


def _load_literal(cpu: Processor, sf: bool, operand: int, rt: int) -> None:
    _check_register(rt, "target")
    offset = _signed((operand * 4) & 0x7FFFF, 19)
    address = cpu.pc + offset
    _check_address(address)
    _load_or_store(cpu, True, sf, rt, address)


def _single_transfer(cpu: Processor, sf: bool, unsigned: bool, operand: int, rt: int) -> None:
    load = bool((operand >> 17) & 0b1)
    offset = (operand >> 5) & 0xFFF
    xn = operand & 0b11111

    _check_register(rt, "target")
    _check_register(xn, "base")
    base = cpu.read_register(True, xn)

    if unsigned:
        scaled = offset * (8 if sf else 4)
        address = (base + scaled) & MASK_32
        _check_address(address)
        _load_or_store(cpu, load, sf, rt, address)
        return

    register_offset = bool(offset >> 11)
    simm9 = (offset >> 2) & 0x1FF
    pre_indexed = bool((offset >> 1) & 0b1)

    if register_offset:
        xm = (simm9 >> 4) & 0b11111
        _check_register(xm, "offset")
        address = (cpu.read_register(True, xm) + base) & MASK_64
        _check_address(address)
        _load_or_store(cpu, load, sf, rt, address)
        return

    displacement = _signed(simm9, 9)
    _check_address(base)
    updated = (base + displacement) & MASK_64
    if pre_indexed:
        _load_or_store(cpu, load, sf, rt, updated)
    else:
        _load_or_store(cpu, load, sf, rt, base)
    cpu.write_register(True, xn, updated)


def decode_data_transfer(cpu: Processor, word: int) -> None:
    """Execute a load or store instruction and advance the PC.

    Raises EmulationError if the word is not such an instruction or touches
    memory or registers it may not.
    """
    word &= MASK_32
    bit31 = (word >> 31) & 0b1
    sf = bool((word >> 30) & 0b1)
    bit29 = (word >> 29) & 0b1
    unsigned = bool((word >> 24) & 0b1)
    operand = (word >> 5) & ((1 << 18) - 1)
    rt = word & 0b11111

    if bit31 and bit29:
        _single_transfer(cpu, sf, unsigned, operand, rt)
    elif not (bit31 or bit29 or unsigned):
        _load_literal(cpu, sf, operand, rt)
    else:
        raise EmulationError(
            "No load or store instruction matching bit 31, 29 and U values: "
            f"{bit31}, {bit29}, {int(unsigned)}"
        )
    cpu.increment_pc()