'''
clase Diagnostic y helpers (línea/columna, severidad, volcado a logging)
'''

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Iterable, Literal, Optional

Severity = Literal["error", "advertencia", "nota"]

_SEV_TO_LABEL = {
    "error": "ERROR",
    "advertencia": "ADVERTENCIA",
    "nota": "NOTA",
}

_SEV_TO_LEVEL = {
    "error": logging.ERROR,
    "advertencia": logging.WARNING,
    "nota": logging.INFO,
}

@dataclass(frozen=True)
class Diagnostic:
    """Problema detectado durante el ensamblado.

    Errores, advertencias y notas, con ubicación opcional (archivo, línea y columna),
    una pista para orientar la corrección y, cuando aplica, el tipo de fallo
    (p.ej. 'undefined_label') para que el llamador pueda filtrar.
    """
    severity: Severity
    message: str
    line: Optional[int] = None
    col: Optional[int] = None
    hint: Optional[str] = None
    file: Optional[str] = None
    kind: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.severity == "error"

    def __str__(self) -> str:
        loc = ""
        if self.file is not None:
            loc += f"{self.file}:"
        if self.line is not None:
            loc += f"{self.line}"
            if self.col is not None:
                loc += f":{self.col}"
        if loc:
            loc += ": "
        sev = _SEV_TO_LABEL.get(self.severity, str(self.severity).upper())
        core = f"{sev}: {self.message}"
        if self.hint:
            core += f"  (pista: {self.hint})"
        return loc + core

def error(message: str, *, line: int | None = None, col: int | None = None,
          file: str | None = None, hint: str | None = None,
          kind: str | None = None) -> Diagnostic:
    """Crea un diagnóstico de tipo error."""
    return Diagnostic("error", message, line, col, hint, file, kind)

def warning(message: str, *, line: int | None = None, col: int | None = None,
            file: str | None = None, hint: str | None = None,
            kind: str | None = None) -> Diagnostic:
    """Crea un diagnóstico de tipo advertencia."""
    return Diagnostic("advertencia", message, line, col, hint, file, kind)

def has_errors(diags: Iterable[Diagnostic]) -> bool:
    return any(d.is_error for d in diags)

def log_diagnostics(logger: logging.Logger, diags: Iterable[Diagnostic]) -> None:
    """Vuelca cada diagnóstico al logger con el nivel de su severidad."""
    for d in diags:
        logger.log(_SEV_TO_LEVEL.get(d.severity, logging.WARNING), "%s", d)
