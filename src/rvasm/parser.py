# src/rvasm/parser.py
from __future__ import annotations
from typing import List, Optional, Tuple

from .lexer import (
    strip_comment,
    split_label,
    is_directive,
    split_mnemonic_operands,
    tokenize,
    string_payload,
)
from .ast import Label, Directive, Instruction, Node
from .diagnostics import error, Diagnostic

def _label_colon(core: str) -> int:
    """Posición de un ':' que precede a cualquier literal entre comillas, o -1."""
    colon = core.find(':')
    quote = core.find('"')
    if colon == -1 or (quote != -1 and quote < colon):
        return -1
    return colon

def _directive(core: str, lineno: int, col: int) -> Directive:
    name, tail = split_mnemonic_operands(core)
    payload = string_payload(tail) if '"' in tail else None
    args = () if payload is not None else tuple(tokenize(tail))
    return Directive(name=name, args=args, line=lineno, col=col, payload=payload)

def parse(text: str, *, filename: Optional[str] = None) -> Tuple[List[Node], List[Diagnostic]]:
    """
    Devuelve (nodes, diagnostics) donde nodes es una lista plana de:
      - Label(name, line, col)
      - Directive(name, args, line, col, payload)
      - Instruction(mnemonic, operands, line, col)

    Reglas:
      - Comentarios: '#' o '//' hasta fin de línea (fuera de comillas).
      - Etiquetas: 'name:' al inicio de línea; el resto de la línea se procesa normalmente.
      - Directivas: lo que empieza con '.' ('.text', '.data', '.word', '.asciz', ...).
      - Instrucciones: resto (mnemónico + operandos; ',', '(' y ')' separan tokens).
    """
    nodes: List[Node] = []
    diags: List[Diagnostic] = []

    for lineno, raw in enumerate(text.splitlines(), start=1):
        core = strip_comment(raw)
        if not core:
            continue
        col = len(raw) - len(raw.lstrip()) + 1

        # 1) 'label:' y 'label: <resto>'
        if _label_colon(core) != -1:
            label, rest = split_label(core)
            if label is None:
                bad = core[:_label_colon(core)].strip()
                diags.append(error(f"Etiqueta inválida: '{bad}'", line=lineno, col=col, file=filename,
                                   hint="use letras, dígitos, '_', '.' o '$' sin empezar por dígito"))
                rest = core[_label_colon(core) + 1:].strip()
            else:
                nodes.append(Label(name=label, line=lineno, col=col))
            if not rest:
                continue
            core = rest

        # 2) Directivas
        if is_directive(core):
            nodes.append(_directive(core, lineno, col))
            continue

        # 3) Instrucción: mnemónico + operandos
        mnemonic, op_str = split_mnemonic_operands(core)
        nodes.append(Instruction(mnemonic=mnemonic, operands=tuple(tokenize(op_str)),
                                 line=lineno, col=col))

    return nodes, diags
