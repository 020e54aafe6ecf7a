'''
segmentos de la VM: base indirecta (LCL/ARG/THIS/THAT) o dirección directa
'''

from __future__ import annotations
from typing import Dict, Literal

Segment = Literal["constant", "local", "argument", "this", "that", "pointer", "temp", "static"]

SEGMENTS = ("constant", "local", "argument", "this", "that", "pointer", "temp", "static")

# Segmentos cuya base está guardada en una celda con nombre
INDIRECT_BASE: Dict[str, str] = {
    "local": "LCL",
    "argument": "ARG",
    "this": "THIS",
    "that": "THAT",
}

# Segmentos con base absoluta; static se resuelve por archivo (<stem>.<i>)
DIRECT_BASE: Dict[str, int] = {
    "pointer": 3,
    "temp": 5,
}

POINTER_SYMBOL = ("THIS", "THAT")

# Índice máximo (inclusive) por segmento; None = sin límite
MAX_INDEX: Dict[str, int | None] = {
    "pointer": 1,
    "temp": 7,
}

# Convención del curso: 16..255 para estáticos
STATIC_SLOTS = 240

def is_segment(token: str) -> bool:
    """Indica si el token nombra un segmento válido."""
    return token in SEGMENTS

def is_indirect(segment: str) -> bool:
    return segment in INDIRECT_BASE

def is_direct(segment: str) -> bool:
    return segment in DIRECT_BASE

def base_symbol(segment: str) -> str:
    """Celda que guarda el puntero base de un segmento indirecto ('LCL', ...)."""
    try:
        return INDIRECT_BASE[segment]
    except KeyError:
        raise ValueError(f"Segmento sin base indirecta: {segment}") from None

def direct_address(segment: str, index: int) -> str:
    """Operando de la instrucción A para pointer/temp.

    pointer 0/1 -> 'THIS'/'THAT'; temp i -> '5+i' como entero.
    """
    if segment == "pointer":
        return POINTER_SYMBOL[index]
    if segment == "temp":
        return str(DIRECT_BASE["temp"] + index)
    raise ValueError(f"Segmento sin dirección directa: {segment}")

def static_symbol(stem: str, index: int) -> str:
    """Símbolo de la ranura estática de un archivo: '<stem>.<index>'."""
    return f"{stem}.{index}"

def check_index(segment: str, index: int) -> str | None:
    """Devuelve un mensaje de error si el índice no es válido para el segmento."""
    if index < 0:
        return f"Índice negativo en segmento {segment}: {index}"
    hi = MAX_INDEX.get(segment)
    if hi is not None and index > hi:
        return f"Índice fuera de rango para {segment} (0..{hi}): {index}"
    return None
