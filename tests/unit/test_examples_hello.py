from src.rvasm.assembler import assemble_text, main
from src.rvasm.encoding import ErrorKind, SENTINEL_WORD
from src.rvasm.writers import to_hex_lines, to_listing

def test_e2e_hello():
    src = """
    .text
    start:
      addi a0, x0, 1
      addi a1, a0, 41
      add  a0, a0, a1
      beq  a0, x0, start
      jal  x0, start
    """
    prog = assemble_text(src, filename="hello.s")
    assert not prog.diagnostics
    hex_lines = to_hex_lines(prog.words)
    assert hex_lines[0] == "0x00100513"  # addi a0,x0,1
    assert hex_lines[-1] == "0xff1ff06f"  # jal x0,-16
    assert [i.address for i in prog.instructions] == [0, 4, 8, 12, 16]
    assert prog.end_address == 20

def test_loop_label_negative_branch():
    src = "loop: add x1,x1,x1\n  addi x2,x2,1\n  beq x1,x0,loop\n"
    prog = assemble_text(src)
    assert prog.symtab["loop"] == 0
    beq = prog.instructions[2]
    assert beq.address == 8 and beq.offset == -8
    assert beq.word == 0xFE008CE3

def test_undefined_label_only_poisons_its_instruction():
    src = "addi x1,x0,1\nbeq x1,x0,nowhere\naddi x2,x0,2\n"
    prog = assemble_text(src)
    assert prog.words == [0x00100093, SENTINEL_WORD, 0x00200113]
    bad = prog.instructions[1]
    assert not bad.ok and bad.error.kind is ErrorKind.UNDEFINED_LABEL
    errors = [d for d in prog.diagnostics if d.is_error]
    assert len(errors) == 1 and errors[0].line == 2 and errors[0].kind == "undefined_label"
    assert prog.end_address == 12

def test_asciz_in_data_segment():
    prog = assemble_text('.data\nmsg: .asciz "hi"\nnext: .byte 1\n')
    assert prog.symtab["msg"] == 0x10000000
    assert prog.symtab["next"] == 0x10000003
    assert prog.data[0].text == b"hi" and prog.data[0].width == 3

def test_unknown_mnemonic_is_skipped_without_address():
    src = "addi x1,x0,1\nfrob x1,x2\ntarget: addi x2,x0,2\njal x0,target\n"
    prog = assemble_text(src)
    assert [i.mnemonic for i in prog.instructions] == ["addi", "addi", "jal"]
    assert prog.symtab["target"] == 4
    assert [i.address for i in prog.instructions] == [0, 4, 8]
    assert prog.words[2] == 0xFFDFF06F
    warns = [d for d in prog.diagnostics if d.kind == "unknown_mnemonic"]
    assert len(warns) == 1 and warns[0].severity == "advertencia"
    assert not prog.has_errors

def test_bad_operands_keep_address_slot():
    prog = assemble_text("add x1, x2\nl: addi x1,x0,1\nbeq x0,x0,l\n")
    assert prog.words[0] == SENTINEL_WORD
    assert prog.instructions[0].error.kind is ErrorKind.BAD_OPERAND
    assert prog.instructions[2].offset == -4
    assert prog.has_errors

def test_malformed_literal_is_zero_with_warning():
    prog = assemble_text("addi x1, x0, 12abc\n")
    assert prog.words == [0x00000093]
    assert [d.kind for d in prog.diagnostics] == ["bad_literal"]
    assert not prog.has_errors

def test_addresses_agree_between_passes():
    src = """
    .text
    a: addi x1,x0,1
       .globl a
    b: frob
       sw x1, 0(sp)
    .data
    v: .word 1, 2
    .text
    c: jal ra, a
    """
    prog = assemble_text(src)
    assert not any("desincronizada" in d.message for d in prog.diagnostics)
    by_line = {i.line: i.address for i in prog.instructions}
    assert by_line[3] == prog.symtab["a"]
    assert by_line[6] == prog.symtab["b"]
    assert by_line[10] == prog.symtab["c"]

def test_assembling_twice_is_identical():
    src = "start: addi x1,x0,1\nbeq x1,x0,end\nend: jal x0,start\n.data\ns: .asciz \"ok\"\n"
    assert to_listing(assemble_text(src)) == to_listing(assemble_text(src))

def test_cli_writes_listing_and_words(tmp_path):
    asm = tmp_path / "prog.asm"
    asm.write_text("addi x5, x0, 10\n.data\nv: .word 7\n", encoding="utf-8")
    out = tmp_path / "output.mc"
    hexf = tmp_path / "prog.hex"
    binf = tmp_path / "prog.bin"
    rc = main([str(asm), "-o", str(out), "--hex", str(hexf), "--bin", str(binf)])
    assert rc == 0
    assert out.read_text(encoding="utf-8").splitlines() == [
        "0x0 0x00A00293 , addi x5,x0,10 # 0010011-000-NULL-00101-00000-000000001010",
        "0x4 0xENDDC0DE End of text segment",
        "",
        "0x10000000 0x00000007",
    ]
    assert hexf.read_text(encoding="utf-8") == "0x00a00293\n"
    assert binf.read_text(encoding="utf-8") == "00000000101000000000001010010011\n"

def test_cli_errors_still_write_output(tmp_path):
    asm = tmp_path / "bad.asm"
    asm.write_text("beq x0, x0, nowhere\n", encoding="utf-8")
    out = tmp_path / "bad.mc"
    assert main([str(asm), "-o", str(out)]) == 1
    assert "0xDEADBEEF" in out.read_text(encoding="utf-8")

def test_cli_missing_source_is_fatal(tmp_path):
    out = tmp_path / "never.mc"
    assert main([str(tmp_path / "nope.asm"), "-o", str(out)]) == 2
    assert not out.exists()

def test_cli_custom_bases(tmp_path):
    asm = tmp_path / "p.asm"
    asm.write_text("nop_here: addi x0,x0,0\n", encoding="utf-8")
    out = tmp_path / "p.mc"
    assert main([str(asm), "-o", str(out), "--text-base", "0x400"]) == 0
    assert out.read_text(encoding="utf-8").startswith("0x400 0x00000013")
