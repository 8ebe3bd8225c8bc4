from src.rvasm.utils import u32, mask, sign_extend, parse_int, to_bin, to_bin32, to_hex32, hexa, split_bits

def test_split_bits():
    x = 0b1101_0010
    # campos: [7:5]=110, [3:1]=001
    assert split_bits(x, ((7,5),(3,1))) == (6, 1)

def test_u32_and_formats():
    assert u32(-1) == 0xFFFFFFFF
    assert to_bin32(1) == "0"*31 + "1"
    assert to_hex32(0x1234, prefix=True) == "0x00001234"
    assert to_hex32(0xFFFFFFFF) == "0xffffffff"
    assert to_bin(-8, 13) == "1111111111000"
    assert mask(-1, 8) == 0xFF

def test_hexa_uppercase_padding():
    assert hexa(0) == "0x0"
    assert hexa(0x10000000) == "0x10000000"
    assert hexa(0xa00293, 8) == "0x00A00293"
    assert hexa(0xff, 2) == "0xFF"

def test_sign_extend():
    assert sign_extend(0x80, 8) == -128
    assert sign_extend(0x7F, 8) == 127

def test_parse_int():
    assert parse_int("10") == 10
    assert parse_int("-10") == -10
    assert parse_int("0x1F") == 31
    assert parse_int("0XfF") == 255
    assert parse_int("-0x10") == -16
    assert parse_int("12abc") is None
    assert parse_int("loop") is None
    assert parse_int("0b101") is None
