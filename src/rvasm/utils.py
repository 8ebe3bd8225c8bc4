'''
 bit-twiddling (u32, sign_extend, campos de bits, literales)
'''

from __future__ import annotations
import re
from typing import Optional, Tuple

# Máscara para 32 bits sin signo
U32_MASK = 0xFFFFFFFF

HEX_LIT_RE = re.compile(r"^[+-]?0[xX][0-9a-fA-F]+$")
DEC_LIT_RE = re.compile(r"^[+-]?\d+$")

def u32(x: int) -> int:
    """Fuerza el valor al rango de 32 bits sin signo."""
    return x & U32_MASK

def mask(x: int, bits: int) -> int:
    """Conserva los 'bits' bits bajos de x (complemento a dos para negativos)."""
    return x & ((1 << bits) - 1)

def sign_extend(x: int, bits: int) -> int:
    """Extiende el signo de x, asumiendo que cabe en 'bits' bits (complemento a dos)."""
    if bits <= 0:
        raise ValueError("bits debe ser positivo")
    x = mask(x, bits)
    sign_bit = 1 << (bits - 1)
    return (x ^ sign_bit) - sign_bit

def parse_int(token: str) -> Optional[int]:
    """Literal decimal o hexadecimal con prefijo 0x; None si no es válido."""
    t = token.strip()
    if HEX_LIT_RE.match(t):
        neg = t.startswith("-")
        value = int(t.lstrip("+-")[2:], 16)
        return -value if neg else value
    if DEC_LIT_RE.match(t):
        return int(t, 10)
    return None

def to_bin(x: int, bits: int) -> str:
    """Campo de 'bits' bits como cadena binaria (negativos en complemento a dos)."""
    return format(mask(x, bits), f"0{bits}b")

def to_bin32(x: int) -> str:
    """Representación binaria de 32 bits (cadena)."""
    return to_bin(x, 32)

def to_hex32(x: int, *, prefix: bool = True) -> str:
    """Representación hexadecimal de 32 bits (cadena), con o sin prefijo 0x."""
    s = format(u32(x), "08x")
    return ("0x" + s) if prefix else s

def hexa(value: int, digits: int = 0) -> str:
    """Hexadecimal en mayúsculas con prefijo 0x, rellenado a 'digits' cifras."""
    if digits > 0:
        return "0x" + format(value, f"0{digits}X")
    return "0x" + format(value, "X")

def split_bits(value: int, positions: Tuple[Tuple[int, int], ...]) -> tuple[int, ...]:
    """Extrae campos de bits dados como rangos (hi, lo) inclusivos (base 0)."""
    out = []
    for hi, lo in positions:
        if hi < lo or hi < 0 or lo < 0:
            raise ValueError("rango de bits inválido")
        width = hi - lo + 1
        field = (value >> lo) & ((1 << width) - 1)
        out.append(field)
    return tuple(out)
