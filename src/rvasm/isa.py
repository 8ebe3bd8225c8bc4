'''
tabla formal de instrucciones (opcodes, funct3/7, formato)
'''

from __future__ import annotations
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, FrozenSet, Literal, Mapping, Optional

# Formatos de codificación soportados
Format = Literal["R", "I", "S", "SB", "U", "UJ"]

@dataclass(frozen=True)
class ISpec:
    """Descriptor de codificación de una instrucción.

    - fmt: 'R','I','S','SB','U','UJ'
    - opcode: campo de 7 bits
    - funct3: 3 bits; None en U/UJ
    - funct7: 7 bits; sólo en R
    """
    fmt: Format
    opcode: int
    funct3: Optional[int] = None
    funct7: Optional[int] = None

# Constantes de opcode
OP_R      = 0b0110011  # 0x33
OP_R_W    = 0b0111011  # 0x3B (variantes de 32 bits en RV64)
OP_I_ALU  = 0b0010011  # 0x13
OP_I_W    = 0b0011011  # 0x1B
OP_I_JALR = 0b1100111  # 0x67
OP_LOAD   = 0b0000011  # 0x03
OP_STORE  = 0b0100011  # 0x23
OP_BRANCH = 0b1100011  # 0x63
OP_LUI    = 0b0110111  # 0x37
OP_AUIPC  = 0b0010111  # 0x17
OP_JAL    = 0b1101111  # 0x6F

F7_BASE = 0b0000000
F7_ALT  = 0b0100000   # sub/sra
F7_MUL  = 0b0000001   # extensión M

_SPEC: Dict[str, ISpec] = {}

def _add(name: str, spec: ISpec) -> None:
    _SPEC[name] = spec

# Tipo R
_add("add",  ISpec("R", OP_R,   funct3=0b000, funct7=F7_BASE))
_add("addw", ISpec("R", OP_R_W, funct3=0b000, funct7=F7_BASE))
_add("and",  ISpec("R", OP_R,   funct3=0b111, funct7=F7_BASE))
_add("or",   ISpec("R", OP_R,   funct3=0b110, funct7=F7_BASE))
_add("sll",  ISpec("R", OP_R,   funct3=0b001, funct7=F7_BASE))
_add("slt",  ISpec("R", OP_R,   funct3=0b010, funct7=F7_BASE))
_add("sra",  ISpec("R", OP_R,   funct3=0b101, funct7=F7_ALT))
_add("srl",  ISpec("R", OP_R,   funct3=0b101, funct7=F7_BASE))
_add("sub",  ISpec("R", OP_R,   funct3=0b000, funct7=F7_ALT))
_add("subw", ISpec("R", OP_R_W, funct3=0b000, funct7=F7_ALT))
_add("xor",  ISpec("R", OP_R,   funct3=0b100, funct7=F7_BASE))

# Extensión M (multiplicación/división)
_add("mul",  ISpec("R", OP_R,   funct3=0b000, funct7=F7_MUL))
_add("mulw", ISpec("R", OP_R_W, funct3=0b000, funct7=F7_MUL))
_add("div",  ISpec("R", OP_R,   funct3=0b100, funct7=F7_MUL))
_add("divw", ISpec("R", OP_R_W, funct3=0b100, funct7=F7_MUL))
_add("rem",  ISpec("R", OP_R,   funct3=0b110, funct7=F7_MUL))
_add("remw", ISpec("R", OP_R_W, funct3=0b110, funct7=F7_MUL))

# Tipo I (ALU inmediatos)
_add("addi",  ISpec("I", OP_I_ALU, funct3=0b000))
_add("addiw", ISpec("I", OP_I_W,   funct3=0b000))
_add("andi",  ISpec("I", OP_I_ALU, funct3=0b111))
_add("ori",   ISpec("I", OP_I_ALU, funct3=0b110))

# Cargas
_add("lb", ISpec("I", OP_LOAD, funct3=0b000))
_add("lh", ISpec("I", OP_LOAD, funct3=0b001))
_add("lw", ISpec("I", OP_LOAD, funct3=0b010))
_add("ld", ISpec("I", OP_LOAD, funct3=0b011))

# JALR (sintaxis de carga: rd, imm(rs1))
_add("jalr", ISpec("I", OP_I_JALR, funct3=0b000))

# Almacenes (tipo S)
_add("sb", ISpec("S", OP_STORE, funct3=0b000))
_add("sh", ISpec("S", OP_STORE, funct3=0b001))
_add("sw", ISpec("S", OP_STORE, funct3=0b010))
_add("sd", ISpec("S", OP_STORE, funct3=0b011))

# Saltos condicionales (tipo SB)
_add("beq", ISpec("SB", OP_BRANCH, funct3=0b000))
_add("bne", ISpec("SB", OP_BRANCH, funct3=0b001))
_add("blt", ISpec("SB", OP_BRANCH, funct3=0b100))
_add("bge", ISpec("SB", OP_BRANCH, funct3=0b101))

# Tipo U
_add("lui",   ISpec("U", OP_LUI))
_add("auipc", ISpec("U", OP_AUIPC))

# Tipo UJ
_add("jal", ISpec("UJ", OP_JAL))

# Vista inmutable del catálogo
SPEC: Mapping[str, ISpec] = MappingProxyType(_SPEC)

# Mnemónicos de tipo I con sintaxis de memoria: rd, imm(rs1)
LOAD_LIKE: FrozenSet[str] = frozenset({"lb", "ld", "lh", "lw", "jalr"})
# Almacenes: rs2, imm(rs1)
STORE_LIKE: FrozenSet[str] = frozenset({"sb", "sh", "sw", "sd"})

def lookup(mnemonic: str) -> Optional[ISpec]:
    """Devuelve el descriptor del mnemónico o None si no está en el catálogo."""
    return SPEC.get(mnemonic.lower())

def spec(mnemonic: str) -> ISpec:
    """Devuelve la especificación de una instrucción por mnemónico."""
    found = lookup(mnemonic)
    if found is None:
        raise KeyError(f"Instrucción desconocida: {mnemonic}")
    return found
