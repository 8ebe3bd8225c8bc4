'''
dataclases de las sentencias del fuente (Label, Directive, Instruction)
'''

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple, Union

SECTIONS = (".text", ".data")

@dataclass(frozen=True)
class Label:
    """Etiqueta en el código fuente (p.ej., 'loop:')."""
    name: str
    line: int
    col: int

@dataclass(frozen=True)
class Directive:
    """Directiva del ensamblador (p.ej., .text, .word 5, .asciz "hola").

    'args' son los tokens tras el nombre; 'payload' guarda los bytes de un
    literal entre comillas cuando la línea lo tiene.
    """
    name: str
    args: Tuple[str, ...]
    line: int
    col: int
    payload: Optional[bytes] = None

    @property
    def is_section(self) -> bool:
        return self.name in SECTIONS

@dataclass(frozen=True)
class Instruction:
    """Instrucción: mnemónico y operandos como tokens de texto."""
    mnemonic: str
    operands: Tuple[str, ...]
    line: int
    col: int

Node = Union[Label, Directive, Instruction]
