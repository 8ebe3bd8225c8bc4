# src/rvasm/encoding.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Mapping, NamedTuple, Union

from .isa import ISpec
from .operands import Operands, OperandShape
from .utils import u32, sign_extend, split_bits

# ---------------- Resultados de codificación ----------------

class ErrorKind(str, Enum):
    UNDEFINED_LABEL = "undefined_label"
    UNKNOWN_MNEMONIC = "unknown_mnemonic"
    BAD_LITERAL = "bad_literal"
    BAD_OPERAND = "bad_operand"

# Palabra reservada que sustituye a una instrucción que no se pudo codificar
SENTINEL_WORD = 0xDEADBEEF

@dataclass(frozen=True)
class Encoded:
    """Codificación correcta. 'offset' es el desplazamiento PC-relativo (SB/UJ), 0 en otro caso."""
    word: int
    offset: int = 0

@dataclass(frozen=True)
class EncodeError:
    """Fallo al codificar una instrucción concreta."""
    kind: ErrorKind
    subject: str     # etiqueta o mnemónico culpable
    message: str

EncodeResult = Union[Encoded, EncodeError]
SymbolTable = Mapping[str, int]

# ---------------- Helpers de empaquetado de bits ----------------

def _pack_R(f7: int, rs2: int, rs1: int, f3: int, rd: int, opc: int) -> int:
    return u32((f7 & 0x7F) << 25 |
               (rs2 & 0x1F) << 20 |
               (rs1 & 0x1F) << 15 |
               (f3 & 0x7)  << 12 |
               (rd & 0x1F) << 7  |
               (opc & 0x7F))

def _pack_I(imm12: int, rs1: int, f3: int, rd: int, opc: int) -> int:
    return u32((imm12 & 0xFFF) << 20 |
               (rs1  & 0x1F)  << 15 |
               (f3   & 0x7)   << 12 |
               (rd   & 0x1F)  << 7  |
               (opc  & 0x7F))

def _pack_S(imm12: int, rs2: int, rs1: int, f3: int, opc: int) -> int:
    return u32(((imm12 >> 5) & 0x7F) << 25 |
               (rs2 & 0x1F) << 20 |
               (rs1 & 0x1F) << 15 |
               (f3  & 0x7)  << 12 |
               (imm12 & 0x1F) << 7 |
               (opc & 0x7F))

def _pack_SB(offset: int, rs1: int, rs2: int, f3: int, opc: int) -> int:
    b12   = (offset >> 12) & 0x1
    b11   = (offset >> 11) & 0x1
    b10_5 = (offset >> 5)  & 0x3F
    b4_1  = (offset >> 1)  & 0xF
    return u32((b12 << 31) | (b10_5 << 25) |
               ((rs2 & 0x1F) << 20) |
               ((rs1 & 0x1F) << 15) |
               ((f3 & 0x7) << 12) |
               (b4_1 << 8) | (b11 << 7) | (opc & 0x7F))

def _pack_U(imm20: int, rd: int, opc: int) -> int:
    return u32(((imm20 & 0xFFFFF) << 12) |
               ((rd & 0x1F) << 7) |
               (opc & 0x7F))

def _pack_UJ(offset: int, rd: int, opc: int) -> int:
    i20    = (offset >> 20) & 0x1
    i19_12 = (offset >> 12) & 0xFF
    i11    = (offset >> 11) & 0x1
    i10_1  = (offset >> 1)  & 0x3FF
    return u32((i20 << 31) | (i10_1 << 21) | (i11 << 20) | (i19_12 << 12) |
               ((rd & 0x1F) << 7) | (opc & 0x7F))

# ---------------- Resolución PC-relativa ----------------

def _pc_relative(ops: Operands, pc: int, symtab: SymbolTable) -> Union[int, EncodeError]:
    """Desplazamiento destino - pc; un destino numérico ya es relativo."""
    if ops.target is None:
        return ops.imm or 0
    addr = symtab.get(ops.target)
    if addr is None:
        return EncodeError(ErrorKind.UNDEFINED_LABEL, ops.target, f"Etiqueta no definida: {ops.target}")
    return addr - pc

def _shape_error(spec: ISpec, ops: Operands) -> EncodeError:
    return EncodeError(ErrorKind.BAD_OPERAND, ops.shape.value,
                       f"Forma de operandos {ops.shape.value} no válida para formato {spec.fmt}")

# ---------------- Codificadores por formato ----------------

def encode_r(spec: ISpec, ops: Operands, pc: int, symtab: SymbolTable) -> EncodeResult:
    if ops.shape is not OperandShape.ARITHMETIC:
        return _shape_error(spec, ops)
    return Encoded(_pack_R(spec.funct7 or 0, ops.rs2, ops.rs1, spec.funct3 or 0, ops.rd, spec.opcode))

def encode_i(spec: ISpec, ops: Operands, pc: int, symtab: SymbolTable) -> EncodeResult:
    # Aritmética (rd, rs1, imm) y carga (rd, imm(rs1)) llegan ya normalizadas
    if ops.shape not in (OperandShape.IMMEDIATE, OperandShape.MEMORY_INDEXED):
        return _shape_error(spec, ops)
    return Encoded(_pack_I(ops.imm or 0, rs1=ops.rs1, f3=spec.funct3 or 0, rd=ops.rd, opc=spec.opcode))

def encode_s(spec: ISpec, ops: Operands, pc: int, symtab: SymbolTable) -> EncodeResult:
    if ops.shape is not OperandShape.STORE:
        return _shape_error(spec, ops)
    return Encoded(_pack_S(ops.imm or 0, rs2=ops.rs2, rs1=ops.rs1, f3=spec.funct3 or 0, opc=spec.opcode))

def encode_sb(spec: ISpec, ops: Operands, pc: int, symtab: SymbolTable) -> EncodeResult:
    if ops.shape is not OperandShape.BRANCH:
        return _shape_error(spec, ops)
    offset = _pc_relative(ops, pc, symtab)
    if isinstance(offset, EncodeError):
        return offset
    return Encoded(_pack_SB(offset, rs1=ops.rs1, rs2=ops.rs2, f3=spec.funct3 or 0, opc=spec.opcode),
                   offset=offset)

def encode_u(spec: ISpec, ops: Operands, pc: int, symtab: SymbolTable) -> EncodeResult:
    if ops.shape is not OperandShape.UPPER_IMMEDIATE:
        return _shape_error(spec, ops)
    return Encoded(_pack_U(ops.imm or 0, rd=ops.rd, opc=spec.opcode))

def encode_uj(spec: ISpec, ops: Operands, pc: int, symtab: SymbolTable) -> EncodeResult:
    if ops.shape is not OperandShape.JUMP:
        return _shape_error(spec, ops)
    offset = _pc_relative(ops, pc, symtab)
    if isinstance(offset, EncodeError):
        return offset
    return Encoded(_pack_UJ(offset, rd=ops.rd, opc=spec.opcode), offset=offset)

Encoder = Callable[[ISpec, Operands, int, SymbolTable], EncodeResult]

ENCODERS: Dict[str, Encoder] = {
    "R": encode_r,
    "I": encode_i,
    "S": encode_s,
    "SB": encode_sb,
    "U": encode_u,
    "UJ": encode_uj,
}

def encode_instruction(spec: ISpec, ops: Operands, pc: int, symtab: SymbolTable) -> EncodeResult:
    """Despacha al codificador del formato del descriptor."""
    return ENCODERS[spec.fmt](spec, ops, pc, symtab)

# ---------------- Lectura de campos ----------------

class Fields(NamedTuple):
    opcode: int
    rd: int
    funct3: int
    rs1: int
    rs2: int
    funct7: int

def decode_fields(word: int) -> Fields:
    """Campos fijos de una palabra de 32 bits (sin interpretar el formato)."""
    f7, rs2, rs1, f3, rd, opc = split_bits(word, ((31, 25), (24, 20), (19, 15), (14, 12), (11, 7), (6, 0)))
    return Fields(opcode=opc, rd=rd, funct3=f3, rs1=rs1, rs2=rs2, funct7=f7)

def i_immediate(word: int) -> int:
    return sign_extend(word >> 20, 12)

def s_immediate(word: int) -> int:
    hi, lo = split_bits(word, ((31, 25), (11, 7)))
    return sign_extend((hi << 5) | lo, 12)

def u_immediate(word: int) -> int:
    return (word >> 12) & 0xFFFFF

def branch_offset(word: int) -> int:
    """Desplazamiento con signo de una palabra SB (13 bits, bit 0 implícito a 0)."""
    b12, b10_5, b4_1, b11 = split_bits(word, ((31, 31), (30, 25), (11, 8), (7, 7)))
    return sign_extend((b12 << 12) | (b11 << 11) | (b10_5 << 5) | (b4_1 << 1), 13)

def jump_offset(word: int) -> int:
    """Desplazamiento con signo de una palabra UJ (21 bits, bit 0 implícito a 0)."""
    i20, i10_1, i11, i19_12 = split_bits(word, ((31, 31), (30, 21), (20, 20), (19, 12)))
    return sign_extend((i20 << 20) | (i19_12 << 12) | (i11 << 11) | (i10_1 << 1), 21)
