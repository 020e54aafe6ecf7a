from __future__ import annotations
import re

COMMENT_SPLIT_RE = re.compile(r"//")

def strip_comment(line: str) -> str:
    """Remove everything after '//' and surrounding whitespace."""
    return COMMENT_SPLIT_RE.split(line, maxsplit=1)[0].strip()

def split_words(line: str):
    """Split a cleaned line on whitespace runs."""
    return line.split()

def split_opcode_operands(line: str):
    """Return (opcode, operands) for a raw source line; ('', []) if blank."""
    words = split_words(strip_comment(line))
    if not words:
        return "", []
    return words[0], words[1:]

NAME_RE = re.compile(r"^[A-Za-z_.:$][A-Za-z0-9_.:$]*$")

def is_name(token: str) -> bool:
    """Valid symbol for labels and functions (letters, digits, _ . : $; no leading digit)."""
    return bool(NAME_RE.match(token))
