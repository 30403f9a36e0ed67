import pytest

from armtoolkit.assembler.binbuilder import (
    con_branch,
    data_process,
    dot_int,
    load_store,
    reg_branch,
    unc_branch,
)
from armtoolkit.assembler.tokenizer import TokenizedLine


def bits(word, lo, width):
    return (word >> lo) & ((1 << width) - 1)


def signed(value, width):
    return value - (1 << width) if value & (1 << (width - 1)) else value


def line(inst, *args):
    return TokenizedLine(inst, list(args))


def test_halt_instruction_encoding():
    assert data_process(line("and", "x0", "x0", "x0"), 0) == 0x8A000000


def test_add_immediate_fields():
    word = data_process(line("add", "x1", "x2", "#5"), 0)
    assert bits(word, 0, 5) == 1
    assert bits(word, 5, 5) == 2
    assert bits(word, 10, 12) == 5
    assert bits(word, 22, 1) == 0
    assert bits(word, 23, 6) == 0b100010
    assert bits(word, 29, 2) == 0
    assert bits(word, 31, 1) == 1


def test_add_immediate_with_shift_sets_sh():
    word = data_process(line("add", "x1", "x2", "#5", "lsl", "#12"), 0)
    assert bits(word, 22, 1) == 1
    assert bits(word, 10, 12) == 5


def test_subs_immediate_32bit():
    word = data_process(line("subs", "w3", "w4", "#7"), 0)
    assert bits(word, 29, 2) == 0b11
    assert bits(word, 31, 1) == 0
    assert bits(word, 0, 5) == 3
    assert bits(word, 5, 5) == 4


def test_cmp_immediate_uses_zero_register():
    word = data_process(line("cmp", "x1", "#4"), 0)
    assert bits(word, 0, 5) == 0b11111
    assert bits(word, 5, 5) == 1
    assert bits(word, 29, 2) == 0b11


def test_cmn_register():
    word = data_process(line("cmn", "x1", "x2"), 0)
    assert bits(word, 0, 5) == 0b11111
    assert bits(word, 29, 2) == 0b01
    assert bits(word, 21, 4) == 0b1000


def test_add_register_with_lsr_shift():
    word = data_process(line("add", "x0", "x1", "x2", "lsr", "#3"), 0)
    assert bits(word, 10, 6) == 3
    assert bits(word, 21, 4) == 0b1010
    assert bits(word, 16, 5) == 2
    assert bits(word, 25, 3) == 0b101


def test_sub_register_opc():
    word = data_process(line("sub", "w0", "w1", "w2", "asr", "#4"), 0)
    assert bits(word, 29, 2) == 0b10
    assert bits(word, 21, 4) == 0b1100
    assert bits(word, 31, 1) == 0


@pytest.mark.parametrize(
    "inst, opc, negate",
    [
        ("and", 0b00, 0),
        ("bic", 0b00, 1),
        ("orr", 0b01, 0),
        ("orn", 0b01, 1),
        ("eor", 0b10, 0),
        ("eon", 0b10, 1),
        ("ands", 0b11, 0),
        ("bics", 0b11, 1),
    ],
)
def test_logical_register_opcodes(inst, opc, negate):
    word = data_process(line(inst, "x0", "x1", "x2"), 0)
    assert bits(word, 29, 2) == opc
    assert bits(word, 21, 1) == negate
    assert bits(word, 24, 1) == 0


def test_logical_ror_shift():
    word = data_process(line("eor", "x0", "x1", "x2", "ror", "#7"), 0)
    assert bits(word, 22, 2) == 0b11
    assert bits(word, 10, 6) == 7


def test_mov_register():
    word = data_process(line("mov", "x1", "x2"), 0)
    assert bits(word, 0, 5) == 1
    assert bits(word, 5, 5) == 0b11111
    assert bits(word, 16, 5) == 2
    assert bits(word, 29, 2) == 0b01


def test_mvn_negates():
    word = data_process(line("mvn", "w1", "w2"), 0)
    assert bits(word, 21, 1) == 1
    assert bits(word, 5, 5) == 0b11111
    assert bits(word, 31, 1) == 0


def test_tst_sets_flags_and_discards():
    word = data_process(line("tst", "x3", "x4"), 0)
    assert bits(word, 0, 5) == 0b11111
    assert bits(word, 29, 2) == 0b11
    assert bits(word, 5, 5) == 3


def test_neg_and_negs():
    neg = data_process(line("neg", "x1", "#3"), 0)
    negs = data_process(line("negs", "x1", "#3"), 0)
    assert bits(neg, 5, 5) == 0b11111
    assert bits(neg, 29, 2) == 0b10
    assert bits(negs, 29, 2) == 0b11


def test_movz_with_shift():
    word = data_process(line("movz", "x1", "#0x10", "lsl", "#16"), 0)
    assert bits(word, 5, 16) == 0x10
    assert bits(word, 21, 2) == 1
    assert bits(word, 23, 6) == 0b100101
    assert bits(word, 29, 2) == 0b10
    assert bits(word, 31, 1) == 1


@pytest.mark.parametrize("inst, opc", [("movn", 0b00), ("movz", 0b10), ("movk", 0b11)])
def test_wide_move_opcodes(inst, opc):
    word = data_process(line(inst, "w2", "#9"), 0)
    assert bits(word, 29, 2) == opc
    assert bits(word, 31, 1) == 0
    assert bits(word, 21, 2) == 0


def test_mul_and_mneg():
    mul = data_process(line("mul", "x1", "x2", "x3"), 0)
    mneg = data_process(line("mneg", "x1", "x2", "x3"), 0)
    assert bits(mul, 10, 5) == 0b11111
    assert bits(mul, 15, 1) == 0
    assert bits(mneg, 15, 1) == 1
    assert bits(mul, 24, 5) == 0b11011
    assert bits(mul, 16, 5) == 3


def test_madd_and_msub_with_accumulator():
    madd = data_process(line("madd", "w1", "w2", "w3", "w4"), 0)
    msub = data_process(line("msub", "w1", "w2", "w3", "w4"), 0)
    assert bits(madd, 10, 5) == 4
    assert bits(madd, 31, 1) == 0
    assert msub ^ madd == 1 << 15


def test_load_literal_forward():
    word = load_store(line("ldr", "x1", "#8"), 0)
    assert bits(word, 5, 19) == 2
    assert bits(word, 27, 2) == 0b11
    assert bits(word, 30, 1) == 1
    assert bits(word, 0, 5) == 1


def test_load_literal_backward():
    word = load_store(line("ldr", "w1", "#0"), 8)
    assert signed(bits(word, 5, 19), 19) == -2
    assert bits(word, 30, 1) == 0


def test_zero_offset():
    word = load_store(line("ldr", "w1", "[x2]"), 0)
    assert bits(word, 10, 12) == 0
    assert bits(word, 24, 1) == 1
    assert bits(word, 5, 5) == 2
    assert bits(word, 22, 1) == 1
    assert bits(word, 27, 5) == 0b10111


def test_unsigned_offset_scaled_by_size():
    wide = load_store(line("ldr", "x1", "[x2", "#16]"), 0)
    narrow = load_store(line("ldr", "w1", "[x2", "#16]"), 0)
    assert bits(wide, 10, 12) == 16 // 8
    assert bits(narrow, 10, 12) == 16 // 4
    assert bits(wide, 24, 1) == 1


def test_pre_indexed_store():
    word = load_store(line("str", "x1", "[x2", "#-8]!"), 0)
    assert bits(word, 10, 2) == 0b11
    assert signed(bits(word, 12, 9), 9) == -8
    assert bits(word, 24, 1) == 0
    assert bits(word, 22, 1) == 0


def test_post_indexed_load():
    word = load_store(line("ldr", "x1", "[x2]", "#8"), 0)
    assert bits(word, 10, 2) == 0b01
    assert signed(bits(word, 12, 9), 9) == 8
    assert bits(word, 5, 5) == 2


def test_register_offset():
    word = load_store(line("ldr", "x1", "[x2", "x3]"), 0)
    assert bits(word, 21, 1) == 1
    assert bits(word, 16, 5) == 3
    assert bits(word, 10, 6) == 0b011010
    assert bits(word, 24, 1) == 0


def test_unconditional_branch():
    forward = unc_branch(line("b", "#8"), 0)
    backward = unc_branch(line("b", "#0"), 12)
    assert bits(forward, 26, 6) == 0b101
    assert bits(forward, 0, 26) == 2
    assert signed(bits(backward, 0, 26), 26) == -3


def test_register_branch():
    word = reg_branch(line("br", "x5"), 0)
    assert bits(word, 5, 5) == 5
    assert word & ~(0b11111 << 5) == 0b1101011000011111 << 16


@pytest.mark.parametrize(
    "inst, cond",
    [
        ("b.eq", 0b0000),
        ("b.ne", 0b0001),
        ("b.ge", 0b1010),
        ("b.lt", 0b1011),
        ("b.gt", 0b1100),
        ("b.le", 0b1101),
        ("b.al", 0b1110),
    ],
)
def test_conditional_branch_codes(inst, cond):
    word = con_branch(line(inst, "#16"), 4)
    assert bits(word, 0, 4) == cond
    assert bits(word, 5, 19) == 3
    assert bits(word, 26, 6) == 0b10101


def test_dot_int_values():
    assert dot_int(line(".int", "0x1234"), 0) == 0x1234
    assert dot_int(line(".int", "42"), 0) == 42
    assert dot_int(line(".int", "-1"), 0) == 0xFFFFFFFF


@pytest.mark.parametrize(
    "tokenized",
    [
        line("add", "x1", "x2", "#4095"),
        line("orr", "x30", "x29", "x28", "ror", "#63"),
        line("movk", "x1", "#0xffff", "lsl", "#48"),
        line("msub", "x30", "x30", "x30", "x30"),
    ],
)
def test_results_fit_in_a_word(tokenized):
    word = data_process(tokenized, 0)
    assert 0 <= word <= 0xFFFFFFFF