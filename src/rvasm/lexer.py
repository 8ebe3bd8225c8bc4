from __future__ import annotations
import re
from typing import List, Optional, Tuple

COMMENT_STARTS = ("#", "//")

def strip_comment(line: str) -> str:
    """Remove comments starting with '#' or '//' (outside string literals) and trim."""
    in_str = False
    i = 0
    while i < len(line):
        ch = line[i]
        if in_str:
            if ch == "\\":
                i += 2
                continue
            if ch == '"':
                in_str = False
        elif ch == '"':
            in_str = True
        elif line.startswith(COMMENT_STARTS, i):
            return line[:i].strip()
        i += 1
    return line.strip()

LABEL_RE = re.compile(r"^([A-Za-z_.$][A-Za-z0-9_.$]*):\s*(.*)$")

def split_label(line: str) -> Tuple[Optional[str], str]:
    """Return (label, rest) if line has 'label:', else (None, line)."""
    m = LABEL_RE.match(line)
    if not m:
        return None, line
    return m.group(1), m.group(2).strip()

def is_directive(line: str) -> bool:
    return line.strip().startswith('.')

def split_mnemonic_operands(line: str) -> Tuple[str, str]:
    s = line.strip()
    if not s:
        return "", ""
    parts = s.split(None, 1)
    if len(parts) == 1:
        return parts[0].lower(), ""
    return parts[0].lower(), parts[1].strip()

OPERAND_DELIMS = str.maketrans({",": " ", "(": " ", ")": " "})

def tokenize(op_str: str) -> List[str]:
    """Split operands after turning ',', '(' and ')' into whitespace.

    'x1, 8(sp)' -> ['x1', '8', 'sp']
    """
    return op_str.translate(OPERAND_DELIMS).split()

_ESCAPES = {"n": 0x0A, "t": 0x09, "r": 0x0D, "0": 0x00, "\\": 0x5C, '"': 0x22}
_HEX_ESCAPE = re.compile(r"[0-9a-fA-F]{2}")

def _unescape(inner: str) -> bytes:
    # '\xNN' es un único byte; el resto del texto va en UTF-8
    out = bytearray()
    i = 0
    while i < len(inner):
        ch = inner[i]
        if ch == "\\" and i + 1 < len(inner):
            nxt = inner[i + 1]
            if nxt == "x" and _HEX_ESCAPE.fullmatch(inner[i + 2:i + 4]):
                out.append(int(inner[i + 2:i + 4], 16))
                i += 4
                continue
            if nxt in _ESCAPES:
                out.append(_ESCAPES[nxt])
                i += 2
                continue
        out += ch.encode("utf-8")
        i += 1
    return bytes(out)

def string_payload(line: str) -> Optional[bytes]:
    """Bytes between the first and last double quote, escapes decoded.

    None when the line holds no quoted literal.
    """
    first = line.find('"')
    last = line.rfind('"')
    if first == -1 or last == first:
        return None
    return _unescape(line[first + 1:last])
