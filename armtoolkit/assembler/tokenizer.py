"""Splitting of an assembly line into a mnemonic and its operands."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

MAX_TOKENS = 5

_OPERAND_SEPARATORS = re.compile(r"[ ,]+")


@dataclass
class TokenizedLine:
    """A mnemonic and the operands that follow it."""

    inst: str
    args: list[str] = field(default_factory=list)


def tokenize(line: str) -> TokenizedLine:
    """Split ``line`` into its mnemonic and at most ``MAX_TOKENS`` operands.

    The mnemonic is separated by spaces; operands by spaces and commas.
    Raises ValueError if the line holds no mnemonic.
    """
    stripped = line.lstrip(" ")
    if not stripped:
        raise ValueError("cannot tokenize an empty line")
    inst, _, rest = stripped.partition(" ")
    args = [tok for tok in _OPERAND_SEPARATORS.split(rest) if tok]
    return TokenizedLine(inst, args[:MAX_TOKENS])