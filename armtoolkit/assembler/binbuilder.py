"""Encoders that turn a tokenized assembly line into a 32-bit instruction word."""

from __future__ import annotations

from armtoolkit.assembler.encoding import calc_num, calc_offset, check_sf, reg_to_bin
from armtoolkit.assembler.tokenizer import TokenizedLine

_WORD_MASK = 0xFFFFFFFF
_ZERO_REG = "rzr"

_LOGIC_OPS = {
    # mnemonic: (opc, negate bit)
    "and": (0b00, 0),
    "bic": (0b00, 1),
    "orr": (0b01, 0),
    "orn": (0b01, 1),
    "eor": (0b10, 0),
    "eon": (0b10, 1),
}

_WIDE_MOVE_OPC = {"movn": 0b00, "movz": 0b10, "movk": 0b11}

_CONDITIONS = {
    "eq": 0b0000,
    "ne": 0b0001,
    "ge": 0b1010,
    "lt": 0b1011,
    "gt": 0b1100,
    "le": 0b1101,
}
_ALWAYS = 0b1110


def _arg(line: TokenizedLine, index: int) -> str:
    """Return operand ``index`` of ``line``, or an empty string past the end."""
    return line.args[index] if 0 <= index < len(line.args) else ""


def _word(value: int) -> int:
    return value & _WORD_MASK


def _shift_amount(shift: str) -> int:
    # "lsl #12": the amount starts after the mnemonic, the space and the '#'.
    return calc_num(False, 6, shift[5:])


def _load_literal(rt: str, literal: str, addr: int) -> int:
    result = check_sf(rt, "") << 30
    result += reg_to_bin(rt)
    result += calc_offset(True, 19, literal[1:], addr) << 5
    result += 0b11 << 27
    return _word(result)


def _multiply(inst: str, rd: str, rn: str, rm: str, ra: str) -> int:
    result = check_sf(rd, rn) << 31
    result += reg_to_bin(rd)
    result += reg_to_bin(rn) << 5
    result += reg_to_bin(rm) << 16
    result += reg_to_bin(ra) << 10
    result += (inst == "msub") << 15
    result += 0b11011 << 24
    return _word(result)


def _immediate_arith(is_sub: bool, flags: bool, rd: str, rn: str, shift: str, num: str) -> int:
    is_shift = len(shift) == len("xxx #12")
    result = reg_to_bin(rd)
    result += reg_to_bin(rn) << 5
    result += calc_num(False, 12, num[1:]) << 10
    result += is_shift << 22
    result += 0b100010 << 23
    result += ((int(is_sub) << 1) + int(flags)) << 29
    result += check_sf(rd, rn) << 31
    return _word(result)


def _reg_arith(inst: str, rd: str, rn: str, rm: str, shift: str, flags: bool) -> int:
    opr = 0b1000
    operand = 0
    if shift:
        operand = _shift_amount(shift)
        if shift.startswith("lsr"):
            opr += 0b10
        elif shift.startswith("asr"):
            opr += 0b100

    result = reg_to_bin(rd)
    result += reg_to_bin(rn) << 5
    result += reg_to_bin(rm) << 16
    result += operand << 10
    result += opr << 21
    result += 0b101 << 25
    result += ((int(inst == "sub") << 1) + int(flags)) << 29
    result += check_sf(rd, rn) << 31
    return _word(result)


def _reg_logic(inst: str, rd: str, rn: str, rm: str, shift: str, flags: bool) -> int:
    opc, opr = _LOGIC_OPS.get(inst, (0, 0))
    opc += 0b11 * int(flags)

    operand = 0
    if shift:
        operand = _shift_amount(shift)
        if shift.startswith("lsr"):
            opr += 0b10
        elif shift.startswith("asr"):
            opr += 0b100
        elif shift.startswith("ror"):
            opr += 0b110

    result = reg_to_bin(rd)
    result += reg_to_bin(rn) << 5
    result += reg_to_bin(rm) << 16
    result += operand << 10
    result += opr << 21
    result += 0b101 << 25
    result += opc << 29
    result += check_sf(rd, rn) << 31
    return _word(result)


def _wide_move(inst: str, rd: str, shift: str, num_str: str) -> int:
    hw = calc_num(False, 64, shift[5:]) // 16 if shift else 0
    opc = _WIDE_MOVE_OPC.get(inst, 0)

    result = reg_to_bin(rd)
    result += calc_num(False, 16, num_str[1:]) << 5
    result += hw << 21
    result += 0b100101 << 23
    result += opc << 29
    result += check_sf(rd, "") << 31
    return _word(result)


def data_process(line: TokenizedLine, addr: int) -> int:
    """Encode an arithmetic, logical, move or multiply instruction."""
    inst = line.inst
    flags = inst.endswith("s")
    if flags:
        inst = inst[:-1]

    args = list(line.args)
    shift = ""
    if len(args) >= 2 and args[-2][1:2] in ("s", "o"):
        shift = f"{args[-2]} {args[-1]}"
        args = args[:-2]

    if len(args) == 2:
        first, second = args
        if inst == "cmp":
            if second.startswith("#"):
                return _immediate_arith(True, True, _ZERO_REG, first, shift, second)
            return _reg_arith("sub", _ZERO_REG, first, second, shift, True)
        if inst == "cmn":
            if second.startswith("#"):
                return _immediate_arith(False, True, _ZERO_REG, first, shift, second)
            return _reg_arith("add", _ZERO_REG, first, second, shift, True)
        if inst == "neg":
            return _immediate_arith(True, flags, first, _ZERO_REG, shift, second)
        if inst == "tst":
            return _reg_logic("and", _ZERO_REG, first, second, shift, True)
        if inst == "mvn":
            return _reg_logic("orn", first, _ZERO_REG, second, shift, False)
        if inst == "mov":
            return _reg_logic("orr", first, _ZERO_REG, second, "", False)
        return _wide_move(inst, first, shift, second)

    if len(args) == 3:
        rd, rn, op = args
        if op.startswith("#"):
            return _immediate_arith(inst == "sub", flags, rd, rn, shift, op)
        if inst == "mul":
            return _multiply("madd", rd, rn, op, _ZERO_REG)
        if inst == "mneg":
            return _multiply("msub", rd, rn, op, _ZERO_REG)
        if inst in ("add", "sub"):
            return _reg_arith(inst, rd, rn, op, shift, flags)
        return _reg_logic(inst, rd, rn, op, shift, flags)

    if len(args) == 4:
        return _multiply(inst, *args)

    return 0


def load_store(line: TokenizedLine, addr: int) -> int:
    """Encode an ``ldr`` or ``str`` instruction in any of its addressing modes."""
    rt = _arg(line, 0)
    base = _arg(line, 1)
    if not base.startswith("["):
        return _load_literal(rt, base, addr)

    sf = rt.startswith("x")
    result = sf << 30
    result += reg_to_bin(rt)
    result += (line.inst == "ldr") << 22
    result += 0b10111 << 27

    index = _arg(line, 2)
    offset = 0
    if not index:
        unsigned = True
    elif index.endswith("!"):
        unsigned = False
        offset += 0b11
        offset += calc_num(True, 9, index[1:]) << 2
    elif not index.startswith("#"):
        unsigned = False
        offset += 1 << 11
        offset += 0b011010
        offset += reg_to_bin(index) << 6
    elif index.endswith("]"):
        unsigned = True
        offset = calc_num(False, 12, index[1:]) // (4 + 4 * sf)
    else:
        unsigned = False
        offset += 0b01
        offset += calc_num(True, 9, index[1:]) << 2

    result += offset << 10
    result += unsigned << 24
    result += reg_to_bin(base[1:]) << 5
    return _word(result)


def unc_branch(line: TokenizedLine, addr: int) -> int:
    """Encode an unconditional ``b`` to the address in the first operand."""
    result = 0b101 << 26
    result += calc_offset(True, 26, _arg(line, 0)[1:], addr)
    return _word(result)


def reg_branch(line: TokenizedLine, addr: int) -> int:
    """Encode a ``br`` to the address held in a register."""
    result = 0b1101011000011111 << 16
    result += reg_to_bin(_arg(line, 0)) << 5
    return _word(result)


def con_branch(line: TokenizedLine, addr: int) -> int:
    """Encode a conditional ``b.<cond>``; unknown conditions mean always."""
    cond = _CONDITIONS.get(line.inst[2:], _ALWAYS)
    result = 0b10101 << 26
    result += calc_offset(True, 19, _arg(line, 0)[1:], addr) << 5
    result += cond
    return _word(result)


def dot_int(line: TokenizedLine, addr: int) -> int:
    """Return the 32-bit value given by a ``.int`` directive."""
    return calc_num(True, 32, _arg(line, 0))