import pytest

from armtoolkit.assembler.encoding import calc_num, calc_offset, check_sf, reg_to_bin


@pytest.mark.parametrize("n", [0, 1, 5, 17, 30])
def test_reg_to_bin_numbered(n):
    assert reg_to_bin(f"x{n}") == n
    assert reg_to_bin(f"w{n}") == n


@pytest.mark.parametrize("reg", ["xzr", "wzr", "rzr"])
def test_reg_to_bin_zero_register(reg):
    assert reg_to_bin(reg) == 0b11111


def test_reg_to_bin_stops_at_non_digit():
    assert reg_to_bin("x7]") == 7


@pytest.mark.parametrize("n", [0, 1, 42, 4095])
def test_calc_num_decimal_round_trip(n):
    assert calc_num(False, 12, str(n)) == n


@pytest.mark.parametrize("n", [0, 0x10, 0xABC, 0xFFFF])
def test_calc_num_hex_round_trip(n):
    assert calc_num(False, 16, hex(n)) == n


@pytest.mark.parametrize("bits,n", [(9, -1), (9, -5), (19, -100), (26, -3)])
def test_calc_num_signed_negative_is_twos_complement(bits, n):
    result = calc_num(True, bits, str(n))
    assert 0 <= result < (1 << bits)
    assert result - (1 << bits) == n


def test_calc_num_positive_signed_unchanged():
    assert calc_num(True, 9, "200") == 200


def test_calc_num_without_digits_is_zero():
    assert calc_num(False, 12, "abc") == 0


@pytest.mark.parametrize("addr,k", [(0, 1), (8, 3), (100, 0), (40, 1000)])
def test_calc_offset_forward(addr, k):
    assert calc_offset(True, 19, str(addr + 4 * k), addr) == k


@pytest.mark.parametrize("bits,addr,k", [(19, 40, 2), (26, 400, 50), (19, 8, 2)])
def test_calc_offset_backward(bits, addr, k):
    result = calc_offset(True, bits, str(addr - 4 * k), addr)
    assert 0 <= result < (1 << bits)
    assert result - (1 << bits) == -k


def test_check_sf():
    assert check_sf("x0", "")
    assert check_sf("w0", "x1")
    assert not check_sf("w0", "w1")
    assert not check_sf("rzr", "")