'''
clasificación de operandos: forma (shape) y significado posicional de cada token
'''

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .isa import ISpec, LOAD_LIKE
from .regs import ABI_NAMES, is_reg, reg_num
from .utils import parse_int

class OperandShape(Enum):
    """Disposición de los operandos en el fuente."""
    ARITHMETIC = "arithmetic"            # rd, rs1, rs2
    IMMEDIATE = "immediate"              # rd, rs1, imm
    MEMORY_INDEXED = "memory_indexed"    # rd, imm(rs1)
    STORE = "store"                      # rs2, imm(rs1)
    BRANCH = "branch"                    # rs1, rs2, destino
    UPPER_IMMEDIATE = "upper_immediate"  # rd, imm
    JUMP = "jump"                        # rd, destino

class OperandError(ValueError):
    """Operandos que no encajan con la forma del mnemónico."""

@dataclass(frozen=True)
class Operands:
    """Operandos ya clasificados.

    Para BRANCH/JUMP el destino es 'target' (etiqueta) o, si el fuente da un
    número, 'imm' con el desplazamiento relativo en bytes.
    'warnings' recoge literales mal formados que se tomaron como 0.
    """
    shape: OperandShape
    tokens: Tuple[str, ...]
    rd: Optional[int] = None
    rs1: Optional[int] = None
    rs2: Optional[int] = None
    imm: Optional[int] = None
    target: Optional[str] = None
    warnings: Tuple[str, ...] = ()

_SHAPE_BY_FORMAT = {
    "R": OperandShape.ARITHMETIC,
    "I": OperandShape.IMMEDIATE,
    "S": OperandShape.STORE,
    "SB": OperandShape.BRANCH,
    "U": OperandShape.UPPER_IMMEDIATE,
    "UJ": OperandShape.JUMP,
}

_USAGE = {
    OperandShape.ARITHMETIC: "rd, rs1, rs2",
    OperandShape.IMMEDIATE: "rd, rs1, imm",
    OperandShape.MEMORY_INDEXED: "rd, imm(rs1)",
    OperandShape.STORE: "rs2, imm(rs1)",
    OperandShape.BRANCH: "rs1, rs2, etiqueta",
    OperandShape.UPPER_IMMEDIATE: "rd, imm",
    OperandShape.JUMP: "rd, etiqueta",
}

RA = ABI_NAMES["ra"]

def shape_of(mnemonic: str, spec: ISpec) -> OperandShape:
    if spec.fmt == "I" and mnemonic.lower() in LOAD_LIKE:
        return OperandShape.MEMORY_INDEXED
    return _SHAPE_BY_FORMAT[spec.fmt]

def usage(shape: OperandShape) -> str:
    return _USAGE[shape]

def _reg(tok: str) -> int:
    try:
        return reg_num(tok)
    except ValueError as ex:
        raise OperandError(str(ex)) from ex

def _imm(tok: str, warnings: List[str]) -> int:
    value = parse_int(tok)
    if value is None:
        warnings.append(f"Literal numérico inválido '{tok}'; se usa 0")
        return 0
    return value

def _target(tok: str) -> Tuple[Optional[str], Optional[int]]:
    value = parse_int(tok)
    if value is not None:
        return None, value
    return tok, None

def classify(mnemonic: str, spec: ISpec, tokens: Sequence[str]) -> Operands:
    """Asigna a cada token su papel según la forma del mnemónico.

    Lanza OperandError si el número de operandos no cuadra o un registro no es válido.
    """
    shape = shape_of(mnemonic, spec)
    toks = tuple(tokens)
    warnings: List[str] = []
    n = len(toks)

    def bad() -> OperandError:
        return OperandError(f"{mnemonic} espera {usage(shape)} (recibió {n} operandos)")

    if shape is OperandShape.ARITHMETIC:
        if n != 3:
            raise bad()
        return Operands(shape, toks, rd=_reg(toks[0]), rs1=_reg(toks[1]), rs2=_reg(toks[2]))

    if shape is OperandShape.IMMEDIATE:
        if n != 3:
            raise bad()
        return Operands(shape, toks, rd=_reg(toks[0]), rs1=_reg(toks[1]),
                        imm=_imm(toks[2], warnings), warnings=tuple(warnings))

    if shape is OperandShape.MEMORY_INDEXED:
        if n == 2:
            # rd, (rs1)
            return Operands(shape, toks, rd=_reg(toks[0]), rs1=_reg(toks[1]), imm=0)
        if n != 3:
            raise bad()
        if mnemonic == "jalr" and is_reg(toks[1]) and not is_reg(toks[2]):
            # jalr rd, rs1, imm
            return Operands(shape, toks, rd=_reg(toks[0]), rs1=_reg(toks[1]),
                            imm=_imm(toks[2], warnings), warnings=tuple(warnings))
        return Operands(shape, toks, rd=_reg(toks[0]), imm=_imm(toks[1], warnings),
                        rs1=_reg(toks[2]), warnings=tuple(warnings))

    if shape is OperandShape.STORE:
        if n == 2:
            return Operands(shape, toks, rs2=_reg(toks[0]), rs1=_reg(toks[1]), imm=0)
        if n != 3:
            raise bad()
        return Operands(shape, toks, rs2=_reg(toks[0]), imm=_imm(toks[1], warnings),
                        rs1=_reg(toks[2]), warnings=tuple(warnings))

    if shape is OperandShape.BRANCH:
        if n != 3:
            raise bad()
        target, offset = _target(toks[2])
        return Operands(shape, toks, rs1=_reg(toks[0]), rs2=_reg(toks[1]), imm=offset, target=target)

    if shape is OperandShape.UPPER_IMMEDIATE:
        if n != 2:
            raise bad()
        return Operands(shape, toks, rd=_reg(toks[0]), imm=_imm(toks[1], warnings),
                        warnings=tuple(warnings))

    # JUMP
    if n == 1:
        target, offset = _target(toks[0])
        return Operands(shape, toks, rd=RA, imm=offset, target=target)
    if n != 2:
        raise bad()
    target, offset = _target(toks[1])
    return Operands(shape, toks, rd=_reg(toks[0]), imm=offset, target=target)
