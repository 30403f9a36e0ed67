"""Execution of data processing instructions, immediate and register forms."""

from __future__ import annotations

from armtoolkit.emulator.processor import (
    MASK_32,
    MASK_64,
    EmulationError,
    Processor,
    get_mask,
)

# Arithmetic opc values
_ADD = 0b00
_ADDS = 0b01
_SUB = 0b10
_SUBS = 0b11

# Logical opc values
_AND = 0b00
_ORR = 0b01
_EOR = 0b10
_ANDS = 0b11

# Wide move opc values
_MOVN = 0b00
_MOVZ = 0b10
_MOVK = 0b11

# Shift types
_LSL = 0b00
_LSR = 0b01
_ASR = 0b10

# Immediate opi values
_OPI_ARITHMETIC = 0b010
_OPI_WIDE_MOVE = 0b101

_IMMEDIATE_GROUP = 0b100


def _signed(value: int, width: int) -> int:
    return value - (1 << width) if (value >> (width - 1)) & 1 else value


def _fits_signed(value: int, width: int) -> bool:
    return -(1 << (width - 1)) <= value < (1 << (width - 1))


def _shift_left(value: int, amount: int) -> int:
    return value << amount if amount >= 0 else value >> -amount


def _process_arithmetic(cpu: Processor, opc: int, rn: int, op2: int, sf: bool, rd: int) -> None:
    """Add or subtract ``op2`` from ``rn`` into ``rd``, setting flags for the ``s`` forms."""
    rn &= MASK_64
    op2 &= MASK_64
    width = 64 if sf else 32
    result = (rn + op2 if opc in (_ADD, _ADDS) else rn - op2) & MASK_64

    if opc in (_ADDS, _SUBS):
        flags = cpu.pstate
        flags.negative = bool((result >> (width - 1)) & 1)
        flags.zero = result == 0
        mask = MASK_64 if sf else MASK_32
        a, b = rn & mask, op2 & mask
        sa, sb = _signed(a, width), _signed(b, width)
        if opc == _ADDS:
            flags.carry = a + b > mask
            flags.overflow = not _fits_signed(sa + sb, width)
        else:
            flags.carry = a >= b
            flags.overflow = not _fits_signed(sa - sb, width)

    cpu.write_register(sf, rd, result)


def _arithmetic_immediate(cpu: Processor, sf: bool, opc: int, operand: int, rd: int) -> None:
    shifted = operand >> 17
    imm12 = (operand >> 5) & 0xFFF
    rn = operand & 0b11111
    op2 = imm12 << 12 if shifted else imm12
    _process_arithmetic(cpu, opc, cpu.read_register(sf, rn), op2, sf, rd)


def _wide_move(cpu: Processor, sf: bool, opc: int, operand: int, rd: int) -> None:
    hw = operand >> 16
    imm16 = operand & 0xFFFF
    sh = hw * 16
    op = (imm16 << sh) & MASK_64

    if opc == _MOVN:
        result = ~op & MASK_64
    elif opc == _MOVZ:
        result = op
    elif opc == _MOVK:
        current = cpu.read_register(sf, rd)
        result = (current & get_mask(sh + 16, 63)) + op + (current & get_mask(0, sh - 1))
    else:
        result = 0
    cpu.write_register(sf, rd, result)


def _shift(value: int, amount: int, kind: int, sf: bool) -> int:
    """Shift ``value`` by ``amount`` bits with the given shift type."""
    top = 63 if sf else 31
    if kind == _LSL:
        result = value << amount
    elif kind == _LSR:
        result = value >> amount
    elif kind == _ASR:
        result = value >> amount
        if (value >> top) & 1:
            result += get_mask(top - (amount - 1), top)
    else:
        result = value >> amount
        result += _shift_left(value & get_mask(0, amount - 1), top - (amount - 1))
    return result & (MASK_64 if sf else MASK_32)


def _logical(cpu: Processor, opc: int, rd: int, rn: int, op: int, sf: bool, negate: bool) -> None:
    if negate:
        op = ~op & MASK_64
    if opc == _AND:
        cpu.write_register(sf, rd, rn & op)
    elif opc == _ORR:
        cpu.write_register(sf, rd, rn | op)
    elif opc == _EOR:
        cpu.write_register(sf, rd, rn ^ op)
    else:
        value = rn & op
        cpu.write_register(sf, rd, value)
        flags = cpu.pstate
        flags.negative = bool(value >> (63 if sf else 31))
        flags.zero = value == 0
        flags.carry = False
        flags.overflow = False


def decode_data_immediate(cpu: Processor, word: int) -> None:
    """Execute a data processing (immediate) instruction and advance the PC.

    Raises EmulationError if the word is not such an instruction.
    """
    word &= MASK_32
    sf = bool(word >> 31)
    opc = (word >> 29) & 0b11
    group = (word >> 26) & 0b111
    opi = (word >> 23) & 0b111
    operand = (word >> 5) & ((2 << 17) - 1)
    rd = word & 0b11111

    if group != _IMMEDIATE_GROUP:
        raise EmulationError(f"not a data processing (immediate) instruction: {word:#010x}")

    if opi == _OPI_ARITHMETIC:
        _arithmetic_immediate(cpu, sf, opc, operand, rd)
    elif opi == _OPI_WIDE_MOVE:
        _wide_move(cpu, sf, opc, operand, rd)
    else:
        raise EmulationError(
            f"No data processing (immediate) instruction matching opi value: {opi}"
        )
    cpu.increment_pc()


def decode_data_register(cpu: Processor, word: int) -> None:
    """Execute a data processing (register) instruction and advance the PC.

    Raises EmulationError if the word is not such an instruction.
    """
    word &= MASK_32
    sf = bool(word >> 31)
    opc = (word >> 29) & 0b11
    m = (word >> 28) & 0b1
    group = (word >> 26) & 0b11
    one = (word >> 25) & 0b1
    opr = (word >> 21) & 0b1111
    rm = (word >> 16) & 0b11111
    operand = (word >> 10) & 0b111111
    rn = (word >> 5) & 0b11111
    rd = word & 0b11111

    if group != 0b10 or one != 1:
        raise EmulationError(f"not a data processing (register) instruction: {word:#010x}")

    if m == 1 and opr == 0b1000:
        ra = operand & 0b11111
        subtract = bool(operand >> 5)
        product = cpu.read_register(sf, rn) * cpu.read_register(sf, rm)
        accumulator = cpu.read_register(sf, ra)
        result = accumulator - product if subtract else accumulator + product
        cpu.write_register(sf, rd, result & MASK_64)
    elif m == 0 and opr >> 3 == 0:
        kind = (opr >> 1) & 0b11
        negate = bool(opr & 0b1)
        op2 = _shift(cpu.read_register(sf, rm), operand, kind, sf)
        _logical(cpu, opc, rd, cpu.read_register(sf, rn), op2, sf, negate)
    elif m == 0 and (opr & 0b1001) == 0b1000:
        kind = (opr >> 1) & 0b11
        op2 = _shift(cpu.read_register(sf, rm), operand, kind, sf)
        _process_arithmetic(cpu, opc, cpu.read_register(sf, rn), op2, sf, rd)
    else:
        raise EmulationError(
            "No data processing (register) instruction matching M and opr values: "
            f"{m}, {opr}"
        )
    cpu.increment_pc()