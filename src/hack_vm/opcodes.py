'''
tabla formal de la VM (opcodes, tipo, operandos)
'''

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional

@dataclass(frozen=True)
class OpSpec:
    """Especificación de un comando de la VM.

    - kind: 'MEM','ALU','CMP','BRANCH','FUNC','CALL','RET'
    - operands: número exacto de operandos tras el opcode
    - jump: mnemónico de salto de la CPU Hack (solo CMP)
    - forms: forma de los operandos a nivel textual (solo forma, no rango)
    """
    kind: str
    operands: int
    jump: Optional[str] = None
    forms: Optional[List[str]] = None

SPEC: Dict[str, OpSpec] = {}

def _add(name: str, spec: OpSpec, forms: List[str]):
    SPEC[name] = OpSpec(**{**spec.__dict__, "forms": forms})

# Acceso a memoria
_add("push", OpSpec("MEM", 2), ["segment index"])
_add("pop",  OpSpec("MEM", 2), ["segment index"])

# Aritmética y lógica
_add("add", OpSpec("ALU", 0), [""])
_add("sub", OpSpec("ALU", 0), [""])
_add("neg", OpSpec("ALU", 0), [""])
_add("and", OpSpec("ALU", 0), [""])
_add("or",  OpSpec("ALU", 0), [""])
_add("not", OpSpec("ALU", 0), [""])

# Comparaciones (consumen id)
_add("eq", OpSpec("CMP", 0, jump="JEQ"), [""])
_add("gt", OpSpec("CMP", 0, jump="JGT"), [""])
_add("lt", OpSpec("CMP", 0, jump="JLT"), [""])

# Saltos
_add("label",   OpSpec("BRANCH", 1), ["name"])
_add("goto",    OpSpec("BRANCH", 1), ["name"])
_add("if-goto", OpSpec("BRANCH", 1), ["name"])

# Funciones
_add("function", OpSpec("FUNC", 2), ["name nlocals"])
_add("call",     OpSpec("CALL", 2), ["name nargs"])
_add("return",   OpSpec("RET", 0),  [""])

def spec(opcode: str) -> OpSpec:
    """Devuelve la especificación de un comando por su opcode."""
    if opcode not in SPEC:
        raise KeyError(f"Comando desconocido: {opcode}")
    return SPEC[opcode]

def usage(opcode: str) -> str:
    """Forma esperada de la línea, para pistas de error ('push segment index')."""
    form = (spec(opcode).forms or [""])[0]
    return f"{opcode} {form}".strip()
