"""Lookup from an assembly mnemonic to the encoder that builds its word."""

from __future__ import annotations

from typing import Callable

from armtoolkit.assembler.binbuilder import (
    con_branch,
    data_process,
    dot_int,
    load_store,
    reg_branch,
    unc_branch,
)
from armtoolkit.assembler.tokenizer import TokenizedLine

Encoder = Callable[[TokenizedLine, int], int]

_DATA_PROCESSING = (
    "add", "adds", "sub", "subs", "cmp", "cmn", "neg", "negs",
    "and", "ands", "bic", "bics", "eor", "eon", "orr", "orn",
    "tst", "mvn", "mov", "movn", "movk", "movz",
    "madd", "msub", "mul", "mneg",
)
_CONDITIONAL_BRANCHES = ("b.eq", "b.ne", "b.ge", "b.lt", "b.gt", "b.le", "b.al")

ENCODERS: dict[str, Encoder] = {
    **{mnemonic: data_process for mnemonic in _DATA_PROCESSING},
    "b": unc_branch,
    "br": reg_branch,
    **{mnemonic: con_branch for mnemonic in _CONDITIONAL_BRANCHES},
    "ldr": load_store,
    "str": load_store,
    ".int": dot_int,
}


class UnknownMnemonicError(LookupError):
    """Raised when no encoder exists for a mnemonic."""

    def __init__(self, mnemonic: str) -> None:
        super().__init__(f"unknown mnemonic: {mnemonic!r}")
        self.mnemonic = mnemonic


def get_bin_function(mnemonic: str) -> Encoder:
    """Return the encoder for ``mnemonic``; raise UnknownMnemonicError if there is none."""
    try:
        return ENCODERS[mnemonic]
    except KeyError:
        raise UnknownMnemonicError(mnemonic) from None