from __future__ import annotations
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence

from .data import DataRecord
from .isa import ISpec
from .operands import Operands, OperandShape
from .regs import is_reg
from .utils import hexa, to_bin, to_bin32, to_hex32

if TYPE_CHECKING:
    from .assembler import AssembledInstruction, Program

# Marca final del segmento de texto: no es hexadecimal válido, no choca con ninguna palabra
END_MARKER = "0xENDDC0DE"
NULL = "NULL"

# Anchos de campo en el comentario de depuración
REG_BITS = 5
IMM_I_BITS = 12
OFFSET_SB_BITS = 13
IMM_U_BITS = 20
OFFSET_UJ_BITS = 21

# ---------- Palabras sueltas ----------

def to_hex_lines(words: Iterable[int]) -> List[str]:
    return [to_hex32(w) for w in words]

def to_bin_lines(words: Iterable[int]) -> List[str]:
    return [to_bin32(w) for w in words]

def write_hex(words: Iterable[int], path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        for line in to_hex_lines(words):
            f.write(line + "\n")

def write_bin(words: Iterable[int], path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        for line in to_bin_lines(words):
            f.write(line + "\n")

# ---------- Listado ----------

def reassemble(mnemonic: str, tokens: Sequence[str], shape: Optional[OperandShape] = None) -> str:
    """Sintaxis canónica: 'mn a,b,c' o 'mn a,imm(base)' para cargas/almacenes."""
    if not tokens:
        return mnemonic
    if shape in (OperandShape.MEMORY_INDEXED, OperandShape.STORE):
        if len(tokens) == 2:
            return f"{mnemonic} {tokens[0]},0({tokens[1]})"
        if len(tokens) == 3:
            # jalr rd, rs1, imm
            if is_reg(tokens[1]) and not is_reg(tokens[2]):
                return f"{mnemonic} {tokens[0]},{tokens[2]}({tokens[1]})"
            return f"{mnemonic} {tokens[0]},{tokens[1]}({tokens[2]})"
    return f"{mnemonic} " + ",".join(tokens)

def _opt_bits(value: Optional[int], bits: int) -> str:
    return NULL if value is None else to_bin(value, bits)

def debug_fields(spec: ISpec, ops: Operands, offset: int = 0) -> str:
    """Campos de la codificación separados por '-'.

    opcode-funct3-funct7-rd-rs1-rs2-imm para R/S/SB;
    I/U/UJ no llevan rs2. 'offset' es el que calculó el codificador.
    """
    rd = rs1 = rs2 = imm = NULL
    if spec.fmt == "R":
        rd, rs1, rs2 = (to_bin(r, REG_BITS) for r in (ops.rd, ops.rs1, ops.rs2))
    elif spec.fmt == "I":
        rd, rs1 = to_bin(ops.rd, REG_BITS), to_bin(ops.rs1, REG_BITS)
        imm = to_bin(ops.imm or 0, IMM_I_BITS)
    elif spec.fmt == "S":
        rs1, rs2 = to_bin(ops.rs1, REG_BITS), to_bin(ops.rs2, REG_BITS)
        imm = to_bin(ops.imm or 0, IMM_I_BITS)
    elif spec.fmt == "SB":
        rs1, rs2 = to_bin(ops.rs1, REG_BITS), to_bin(ops.rs2, REG_BITS)
        imm = to_bin(offset, OFFSET_SB_BITS)
    elif spec.fmt == "U":
        rd = to_bin(ops.rd, REG_BITS)
        imm = to_bin(ops.imm or 0, IMM_U_BITS)
    elif spec.fmt == "UJ":
        rd = to_bin(ops.rd, REG_BITS)
        imm = to_bin(offset, OFFSET_UJ_BITS)

    head = [to_bin(spec.opcode, 7), _opt_bits(spec.funct3, 3), _opt_bits(spec.funct7, 7), rd, rs1]
    if spec.fmt in ("I", "U", "UJ"):
        return "# " + "-".join(head + [imm])
    return "# " + "-".join(head + [rs2, imm])

def instruction_line(ins: "AssembledInstruction") -> str:
    shape = ins.operands.shape if ins.operands is not None else None
    asm = reassemble(ins.mnemonic, ins.tokens, shape)
    err = ins.error
    if err is not None:
        comment = f"# ERROR: {err.message}"
    else:
        comment = debug_fields(ins.spec, ins.operands, ins.offset)
    return f"{hexa(ins.address)} {hexa(ins.word, 8)} , {asm} {comment}"

def end_marker_line(address: int) -> str:
    return f"{hexa(address)} {END_MARKER} End of text segment"

_BYTE_ESCAPES = {0x0A: "\\n", 0x09: "\\t", 0x0D: "\\r", 0x00: "\\0", 0x22: '\\"', 0x5C: "\\\\"}

def _escape(text: bytes) -> str:
    """Byte a byte: ASCII imprimible tal cual, el resto como '\\xNN'."""
    out = []
    for b in text:
        if b in _BYTE_ESCAPES:
            out.append(_BYTE_ESCAPES[b])
        elif 0x20 <= b < 0x7F:
            out.append(chr(b))
        else:
            out.append(f"\\x{b:02x}")
    return "".join(out)

def data_line(rec: DataRecord) -> str:
    if rec.is_string:
        term = "\\0" if rec.terminated else ""
        return f'{hexa(rec.address)} "{_escape(rec.text)}{term}"'
    return f"{hexa(rec.address)} {hexa(rec.value, rec.width * 2)}"

def to_listing(program: "Program") -> List[str]:
    """Texto, marca de fin y, tras una línea en blanco, los datos."""
    lines = [instruction_line(ins) for ins in program.instructions]
    lines.append(end_marker_line(program.end_address))
    if program.data:
        lines.append("")
        lines.extend(data_line(rec) for rec in program.data)
    return lines

def write_listing(program: "Program", path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        for line in to_listing(program):
            f.write(line + "\n")
