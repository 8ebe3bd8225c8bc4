from __future__ import annotations
import argparse
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional, Set, Tuple

from .ast import Label, Directive, Instruction, Node
from .data import DataRecord, data_size, emit_data, is_data_directive
from .diagnostics import Diagnostic, error, warning, has_errors, log_diagnostics
from .encoding import (
    Encoded, EncodeError, EncodeResult, ErrorKind, SENTINEL_WORD, encode_instruction,
)
from .isa import ISpec, lookup
from .linker import INSTR_BYTES, Layout, LinkResult, LocationCounters, first_pass
from .operands import Operands, OperandError, classify
from .parser import parse
from .writers import write_listing, write_hex, write_bin

logger = logging.getLogger(__name__)

# ---------------- Resultados de la pasada 2 ----------------

@dataclass(frozen=True)
class AssembledInstruction:
    """Instrucción de .text ya procesada, correcta o no."""
    address: int
    mnemonic: str
    tokens: Tuple[str, ...]
    spec: ISpec
    operands: Optional[Operands]
    result: EncodeResult
    line: int

    @property
    def ok(self) -> bool:
        return isinstance(self.result, Encoded)

    @property
    def word(self) -> int:
        """Palabra a emitir; la centinela si la codificación falló."""
        return self.result.word if isinstance(self.result, Encoded) else SENTINEL_WORD

    @property
    def offset(self) -> int:
        return self.result.offset if isinstance(self.result, Encoded) else 0

    @property
    def error(self) -> Optional[EncodeError]:
        return self.result if isinstance(self.result, EncodeError) else None

@dataclass(frozen=True)
class SecondPassResult:
    instructions: List[AssembledInstruction]
    data: List[DataRecord]
    end_address: int
    diagnostics: List[Diagnostic]

@dataclass(frozen=True)
class Program:
    """Salida completa del ensamblado de un fuente."""
    instructions: List[AssembledInstruction]
    data: List[DataRecord]
    end_address: int
    symtab: Mapping[str, int]
    diagnostics: List[Diagnostic]

    @property
    def words(self) -> List[int]:
        return [ins.word for ins in self.instructions]

    @property
    def has_errors(self) -> bool:
        return has_errors(self.diagnostics)

# ---------------- Pasada 2 ----------------

def _assemble_one(n: Instruction, spec: ISpec, pc: int, symtab: Mapping[str, int],
                  diags: List[Diagnostic], filename: Optional[str]) -> AssembledInstruction:
    ops: Optional[Operands] = None
    try:
        ops = classify(n.mnemonic, spec, n.operands)
    except OperandError as ex:
        result: EncodeResult = EncodeError(ErrorKind.BAD_OPERAND, n.mnemonic, str(ex))
    else:
        for msg in ops.warnings:
            diags.append(warning(msg, line=n.line, col=n.col, file=filename, kind=ErrorKind.BAD_LITERAL.value))
        result = encode_instruction(spec, ops, pc, symtab)

    if isinstance(result, EncodeError):
        diags.append(error(result.message, line=n.line, col=n.col, file=filename, kind=result.kind.value,
                           hint=f"se emite {SENTINEL_WORD:#010x} en {pc:#x}"))
    return AssembledInstruction(address=pc, mnemonic=n.mnemonic, tokens=n.operands, spec=spec,
                                operands=ops, result=result, line=n.line)

def second_pass(
    nodes: List[Node],
    link: LinkResult,
    *,
    layout: Optional[Layout] = None,
    filename: Optional[str] = None,
) -> SecondPassResult:
    """Codifica .text y emite .data con contadores propios, leyendo la tabla congelada."""
    lc = LocationCounters.fresh(layout or Layout(link.text_base, link.data_base))
    diags: List[Diagnostic] = []
    instructions: List[AssembledInstruction] = []
    data: List[DataRecord] = []
    seen: Set[str] = set()

    for n in nodes:
        if isinstance(n, Directive) and n.is_section:
            lc.switch(n.name)
            continue

        if isinstance(n, Label):
            # Las dos pasadas deben ver la misma dirección para cada etiqueta
            if n.name not in seen and link.symtab.get(n.name) != lc.here():
                diags.append(error(f"Dirección de '{n.name}' desincronizada entre pasadas",
                                   line=n.line, col=n.col, file=filename))
            seen.add(n.name)
            continue

        if lc.in_text:
            if isinstance(n, Directive):
                diags.append(warning(f"Directiva ignorada en .text: {n.name}", line=n.line, col=n.col, file=filename))
                continue
            spec = lookup(n.mnemonic)
            if spec is None:
                diags.append(warning(f"Instrucción desconocida, se omite: '{n.mnemonic}'", line=n.line, col=n.col,
                                     file=filename, kind=ErrorKind.UNKNOWN_MNEMONIC.value))
                continue
            instructions.append(_assemble_one(n, spec, lc.here(), link.symtab, diags, filename))
            lc.advance(INSTR_BYTES)
            continue

        if isinstance(n, Instruction):
            diags.append(warning(f"Instrucción fuera de .text, se omite: '{n.mnemonic}'",
                                 line=n.line, col=n.col, file=filename))
            continue
        records, ddiags = emit_data(n, lc.here(), file=filename)
        data.extend(records)
        diags.extend(ddiags)
        if is_data_directive(n.name):
            lc.advance(data_size(n))

    return SecondPassResult(instructions=instructions, data=data, end_address=lc.text, diagnostics=diags)

# ---------------- Orquestación ----------------

def assemble_text(text: str, *, filename: str | None = None, layout: Optional[Layout] = None) -> Program:
    """Parsea, hace PASADA 1 (tabla de símbolos) y PASADA 2 (codificación).

    Los errores por instrucción no abortan: quedan en Program.diagnostics.
    """
    layout = layout or Layout()
    nodes, diags_parse = parse(text, filename=filename)

    logger.info("Pasada 1: construyendo tabla de símbolos")
    link = first_pass(nodes, layout=layout, filename=filename)
    for name, addr in link.symtab.items():
        logger.debug("  %s: %#x", name, addr)

    logger.info("Pasada 2: generando código máquina")
    enc = second_pass(nodes, link, layout=layout, filename=filename)

    diags = list(diags_parse) + list(link.diagnostics) + list(enc.diagnostics)
    return Program(instructions=enc.instructions, data=enc.data, end_address=enc.end_address,
                   symtab=link.symtab, diagnostics=diags)

def assemble_file(path: str | Path, *, layout: Optional[Layout] = None) -> Program:
    """Lee y ensambla un fichero; OSError/UnicodeDecodeError si no se puede leer."""
    text = Path(path).read_text(encoding="utf-8")
    return assemble_text(text, filename=str(path), layout=layout)

# ---------------- CLI ----------------

def _int_auto(s: str) -> int:
    try:
        return int(s, 0)
    except ValueError as ex:
        raise argparse.ArgumentTypeError(f"dirección inválida: {s}") from ex

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(prog="rvasm", description="Ensamblador RISC-V de dos pasadas")
    ap.add_argument("source", help="archivo .asm/.s de entrada")
    ap.add_argument("-o", "--output", default="output.mc", help="listado de salida (por defecto output.mc)")
    ap.add_argument("--hex", dest="out_hex", help="archivo con las palabras en hexadecimal")
    ap.add_argument("--bin", dest="out_bin", help="archivo con las palabras en binario ASCII")
    ap.add_argument("--text-base", type=_int_auto, default=Layout.text_base, help="dirección base de .text")
    ap.add_argument("--data-base", type=_int_auto, default=Layout.data_base, help="dirección base de .data")
    ap.add_argument("-v", "--verbose", action="store_true", help="trazas de depuración")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s" if args.verbose else "%(message)s",
    )

    try:
        program = assemble_file(args.source, layout=Layout(args.text_base, args.data_base))
    except (OSError, UnicodeDecodeError) as ex:
        logger.error("ERROR: no pude leer %s: %s", args.source, ex)
        return 2

    log_diagnostics(logger, program.diagnostics)

    try:
        write_listing(program, args.output)
        if args.out_hex:
            write_hex(program.words, args.out_hex)
        if args.out_bin:
            write_bin(program.words, args.out_bin)
    except OSError as ex:
        logger.error("ERROR al escribir salidas: %s", ex)
        return 3

    logger.info("OK: %d instrucciones -> %s", len(program.instructions), args.output)
    return 1 if program.has_errors else 0

if __name__ == "__main__":
    raise SystemExit(main())
