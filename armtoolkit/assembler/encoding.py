"""Helpers for turning assembly operands into instruction bit fields."""

from __future__ import annotations

import re

HEX_BASE = 16
DEC_BASE = 10
ZERO_REGISTER = 0b11111

_WORD_MASK = 0xFFFFFFFF
_WHITESPACE = " \t\n\v\f\r"
_DIGITS = {
    DEC_BASE: re.compile(r"[0-9]*"),
    HEX_BASE: re.compile(r"[0-9a-fA-F]*"),
}


def _mask_of_size(num_bits: int) -> int:
    return (1 << num_bits) - 1


def _to_int32(value: int) -> int:
    """Wrap an integer into the signed 32-bit range."""
    value &= _WORD_MASK
    return value - (1 << 32) if value & 0x80000000 else value


def _parse_long(text: str, base: int) -> int:
    """Parse the leading integer of ``text``; 0 when there is none."""
    s = text.lstrip(_WHITESPACE)
    sign = 1
    if s.startswith(("+", "-")):
        if s[0] == "-":
            sign = -1
        s = s[1:]
    if base == HEX_BASE and s[:2].lower() == "0x" and s[2:3] and s[2] in "0123456789abcdefABCDEF":
        s = s[2:]
    digits = _DIGITS[base].match(s).group(0)
    return sign * int(digits, base) if digits else 0


def reg_to_bin(reg: str) -> int:
    """Return the register number encoded by a name such as ``x3`` or ``wzr``."""
    if reg[1:] == "zr":
        return ZERO_REGISTER
    return _parse_long(reg[1:], DEC_BASE) & _WORD_MASK


def calc_num(is_signed: bool, num_bits: int, num_str: str) -> int:
    """Return the unsigned encoding of a decimal or ``0x`` hexadecimal literal.

    Negative values of signed fields are truncated to ``num_bits`` bits.
    """
    base = HEX_BASE if num_str.startswith("0x") else DEC_BASE
    num = _to_int32(_parse_long(num_str, base))
    if not is_signed or num >= 0:
        return num & _WORD_MASK
    return num & _mask_of_size(num_bits)


def calc_offset(is_signed: bool, num_bits: int, num_str: str, addr: int) -> int:
    """Return the word offset from ``addr`` to the address in ``num_str``, in ``num_bits`` bits."""
    target = _to_int32(calc_num(is_signed, num_bits, num_str))
    difference = (target - addr) & _WORD_MASK
    return (difference // 4) & _mask_of_size(num_bits)


def check_sf(r1: str, r2: str) -> bool:
    """Return True if either register is a 64-bit (``x``) register."""
    return r1[:1] == "x" or r2[:1] == "x"