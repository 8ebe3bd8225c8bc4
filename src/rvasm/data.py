'''
directivas de datos: anchos (pasada 1) y registros emitidos (pasada 2)
'''

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .ast import Directive
from .diagnostics import Diagnostic, error, warning
from .utils import mask, parse_int

# Directivas escalares -> ancho en bytes por valor
DATA_DIRS_SIZED: Dict[str, int] = {
    ".byte": 1,
    ".half": 2,
    ".word": 4,
    ".dword": 8,
}
# Directivas de texto -> ¿añaden terminador NUL?
DATA_DIRS_TEXT: Dict[str, bool] = {
    ".asciz": True,
    ".string": True,
    ".ascii": False,
}

@dataclass(frozen=True)
class DataRecord:
    """Un valor del segmento de datos en su dirección.

    Escalares: 'value' ya enmascarado a 'width' bytes.
    Cadenas: 'text' sin terminador; 'width' incluye el NUL si 'terminated'.
    """
    address: int
    width: int
    line: int
    value: Optional[int] = None
    text: Optional[bytes] = None
    terminated: bool = False

    @property
    def is_string(self) -> bool:
        return self.text is not None

def is_data_directive(name: str) -> bool:
    return name in DATA_DIRS_SIZED or name in DATA_DIRS_TEXT

def data_size(d: Directive) -> int:
    """Bytes que ocupa la directiva; sólo mira el nombre, los argumentos y el literal."""
    if d.name in DATA_DIRS_SIZED:
        return DATA_DIRS_SIZED[d.name] * len(d.args)
    if d.name in DATA_DIRS_TEXT:
        if d.payload is None:
            return 0
        return len(d.payload) + (1 if DATA_DIRS_TEXT[d.name] else 0)
    return 0

def emit_data(d: Directive, address: int, *, file: Optional[str] = None) -> Tuple[List[DataRecord], List[Diagnostic]]:
    """Registros de datos de una directiva a partir de 'address'.

    La suma de anchos coincide siempre con data_size(d).
    """
    diags: List[Diagnostic] = []
    records: List[DataRecord] = []

    if d.name in DATA_DIRS_TEXT:
        if d.payload is None:
            diags.append(error(f"{d.name} requiere una cadena entre comillas", line=d.line, col=d.col,
                               file=file, kind="bad_operand"))
            return records, diags
        term = DATA_DIRS_TEXT[d.name]
        records.append(DataRecord(address=address, width=len(d.payload) + (1 if term else 0),
                                  line=d.line, text=d.payload, terminated=term))
        return records, diags

    if d.name in DATA_DIRS_SIZED:
        width = DATA_DIRS_SIZED[d.name]
        if not d.args:
            diags.append(error(f"{d.name} requiere al menos un valor", line=d.line, col=d.col,
                               file=file, kind="bad_operand"))
        for tok in d.args:
            value = parse_int(tok)
            if value is None:
                diags.append(warning(f"Literal numérico inválido '{tok}' en {d.name}; se usa 0",
                                     line=d.line, col=d.col, file=file, kind="bad_literal"))
                value = 0
            records.append(DataRecord(address=address, width=width, line=d.line,
                                      value=mask(value, width * 8)))
            address += width
        return records, diags

    diags.append(warning(f"Directiva no soportada en .data: {d.name}", line=d.line, col=d.col, file=file))
    return records, diags
