import pytest
from src.rvasm.lexer import (
    strip_comment, split_label, is_directive,
    split_mnemonic_operands, tokenize, string_payload,
)

# --- strip_comment ---
@pytest.mark.parametrize("src, expected", [
    ("add x1,x2,x3 # cmt", "add x1,x2,x3"),
    ("mv a0,a1 // trailing", "mv a0,a1"),
    ("# full comment", ""),
    ("// full comment", ""),
    ("   add x1,x2,x3   ", "add x1,x2,x3"),
    ('.asciz "a#b" # real', '.asciz "a#b"'),
    ('.asciz "q\\"#" # c', '.asciz "q\\"#"'),
    ("", ""),
])
def test_strip_comment(src, expected):
    assert strip_comment(src) == expected

# --- split_label ---
@pytest.mark.parametrize("src, label, rest", [
    ("loop: add x1,x2,x3", "loop", "add x1,x2,x3"),
    ("_start:   ", "_start", ""),
    (".L1: beq x0,x0,.L1", ".L1", "beq x0,x0,.L1"),
    ("  nope: add x1,x2,x3", None, "  nope: add x1,x2,x3"),
    ("notlabel :", None, "notlabel :"),
])
def test_split_label(src, label, rest):
    got_label, got_rest = split_label(src)
    assert got_label == label
    assert got_rest == rest

@pytest.mark.parametrize("src, expected", [
    (".text", True),
    ("  .data", True),
    ("add x1,x2,x3", False),
    ("", False),
])
def test_is_directive(src, expected):
    assert is_directive(src) == expected

@pytest.mark.parametrize("src, mn, tail", [
    ("ADD x1, x2, x3", "add", "x1, x2, x3"),
    ("ecall", "ecall", ""),
    ("   ", "", ""),
])
def test_split_mnemonic_operands(src, mn, tail):
    got_mn, got_tail = split_mnemonic_operands(src)
    assert got_mn == mn
    assert got_tail == tail

@pytest.mark.parametrize("src, expected", [
    ("x1,x2,x3", ["x1", "x2", "x3"]),
    (" x1 , x2 , x3 ", ["x1", "x2", "x3"]),
    ("a0, 8(sp)", ["a0", "8", "sp"]),
    ("ra, -8(s0)", ["ra", "-8", "s0"]),
    ("t0, (t1)", ["t0", "t1"]),
    ("", []),
])
def test_tokenize(src, expected):
    assert tokenize(src) == expected

@pytest.mark.parametrize("src, expected", [
    ('.asciz "hi"', b"hi"),
    ('"a\\nb"', b"a\nb"),
    ('"\\x41\\0"', b"A\x00"),
    ('"say \\"x\\""', b'say "x"'),
    ('""', b""),
    ("no quotes", None),
])
def test_string_payload(src, expected):
    assert string_payload(src) == expected

def test_hex_escape_is_one_byte():
    assert string_payload('"\\xff\\x80"') == b"\xff\x80"
    assert string_payload('"ñ\\xff"') == "ñ".encode("utf-8") + b"\xff"

def test_bad_hex_escape_is_kept_literally():
    assert string_payload('"\\xg1"') == b"\\xg1"
