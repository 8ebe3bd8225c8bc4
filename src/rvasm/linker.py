# src/rvasm/linker.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from .ast import Label, Directive, Instruction, Node
from .data import data_size, is_data_directive
from .diagnostics import Diagnostic, error
from .isa import lookup

logger = logging.getLogger(__name__)

# ---------- Configuración de memoria ----------

@dataclass(frozen=True)
class Layout:
    """Direcciones base de cada segmento."""
    text_base: int = 0x0000_0000
    data_base: int = 0x1000_0000

INSTR_BYTES = 4

# ---------- Contadores de posición ----------

class LocationCounters:
    """Estado de segmento y contadores de una pasada.

    Cada pasada crea los suyos con fresh(); nunca se comparten entre pasadas.
    """

    def __init__(self, layout: Layout) -> None:
        self.layout = layout
        self.in_text = True
        self.text = layout.text_base
        self.data = layout.data_base

    @classmethod
    def fresh(cls, layout: Optional[Layout] = None) -> "LocationCounters":
        return cls(layout or Layout())

    @property
    def section(self) -> str:
        return ".text" if self.in_text else ".data"

    def switch(self, section: str) -> None:
        self.in_text = section == ".text"

    def here(self) -> int:
        return self.text if self.in_text else self.data

    def advance(self, nbytes: int) -> None:
        if self.in_text:
            self.text += nbytes
        else:
            self.data += nbytes

def occupies_slot(ins: Instruction) -> bool:
    """Una línea de .text ocupa 4 bytes sólo si su mnemónico está en el catálogo.

    Ambas pasadas usan este mismo criterio, así las direcciones de la tabla de
    símbolos coinciden con las de las palabras codificadas.
    """
    return lookup(ins.mnemonic) is not None

# ---------- Resultado de la pasada 1 ----------

@dataclass(frozen=True)
class LinkResult:
    symtab: Mapping[str, int]
    text_base: int
    data_base: int
    text_size: int
    data_size: int
    diagnostics: List[Diagnostic]

# ---------- Pasada 1 (símbolos y tamaños de segmento) ----------

def first_pass(
    nodes: List[Node],
    *,
    layout: Optional[Layout] = None,
    filename: Optional[str] = None,
) -> LinkResult:
    layout = layout or Layout()
    lc = LocationCounters.fresh(layout)
    symtab: Dict[str, int] = {}
    diags: List[Diagnostic] = []

    for n in nodes:
        if isinstance(n, Directive) and n.is_section:
            lc.switch(n.name)
            continue

        if isinstance(n, Label):
            if n.name in symtab:
                diags.append(error(f"Etiqueta redefinida: {n.name}", line=n.line, col=n.col, file=filename,
                                   hint=f"ya vale {symtab[n.name]:#x}; se conserva la primera definición",
                                   kind="duplicate_label"))
            else:
                symtab[n.name] = lc.here()
            continue

        if lc.in_text:
            # Directivas en .text no ocupan espacio; la pasada 2 las avisa
            if isinstance(n, Instruction) and occupies_slot(n):
                lc.advance(INSTR_BYTES)
            continue

        if isinstance(n, Directive) and is_data_directive(n.name):
            lc.advance(data_size(n))

    logger.debug("pasada 1: %d símbolos, .text=%d bytes, .data=%d bytes",
                 len(symtab), lc.text - layout.text_base, lc.data - layout.data_base)

    return LinkResult(
        symtab=MappingProxyType(symtab),
        text_base=layout.text_base,
        data_base=layout.data_base,
        text_size=lc.text - layout.text_base,
        data_size=lc.data - layout.data_base,
        diagnostics=diags,
    )
