'''
enteros de la CPU Hack (rango de constantes, parseo decimal estricto)
'''

from __future__ import annotations

# Mayor constante que cabe en una instrucción A (15 bits)
MAX_CONSTANT = 0x7FFF

def is_constant15(x: int) -> bool:
    """Devuelve True si x puede cargarse con '@x' (0..32767)."""
    return 0 <= x <= MAX_CONSTANT

def parse_int(token: str) -> int:
    """Entero decimal con signo opcional; ValueError si no lo es.

    A diferencia de int(), no acepta '_' ni espacios internos.
    """
    t = token.strip()
    body = t[1:] if t[:1] in "+-" else t
    if not body.isdigit() or not body.isascii():
        raise ValueError(f"Entero inválido: {token}")
    return int(t)

def to_bin16(x: int) -> str:
    """Representación binaria de 16 bits (cadena)."""
    return format(x & 0xFFFF, "016b")
