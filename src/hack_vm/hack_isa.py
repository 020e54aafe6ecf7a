'''
tabla formal de la CPU Hack (campos comp/dest/jump, símbolos predefinidos)
'''

from __future__ import annotations
from typing import Dict

# Instrucción C: 111 a cccccc ddd jjj
C_PREFIX = 0b111

# Campo comp (a + c1..c6); a=1 selecciona M en lugar de A
COMP: Dict[str, int] = {
    "0":   0b0101010,
    "1":   0b0111111,
    "-1":  0b0111010,
    "D":   0b0001100,
    "A":   0b0110000,
    "!D":  0b0001101,
    "!A":  0b0110001,
    "-D":  0b0001111,
    "-A":  0b0110011,
    "D+1": 0b0011111,
    "A+1": 0b0110111,
    "D-1": 0b0001110,
    "A-1": 0b0110010,
    "D+A": 0b0000010,
    "D-A": 0b0010011,
    "A-D": 0b0000111,
    "D&A": 0b0000000,
    "D|A": 0b0010101,
    "M":   0b1110000,
    "!M":  0b1110001,
    "-M":  0b1110011,
    "M+1": 0b1110111,
    "M-1": 0b1110010,
    "D+M": 0b1000010,
    "D-M": 0b1010011,
    "M-D": 0b1000111,
    "D&M": 0b1000000,
    "D|M": 0b1010101,
}

DEST: Dict[str, int] = {
    "":    0b000,
    "M":   0b001,
    "D":   0b010,
    "MD":  0b011,
    "A":   0b100,
    "AM":  0b101,
    "AD":  0b110,
    "AMD": 0b111,
}

JUMP: Dict[str, int] = {
    "":    0b000,
    "JGT": 0b001,
    "JEQ": 0b010,
    "JGE": 0b011,
    "JLT": 0b100,
    "JNE": 0b101,
    "JLE": 0b110,
    "JMP": 0b111,
}

PREDEFINED: Dict[str, int] = {
    **{f"R{i}": i for i in range(16)},
    "SP": 0,
    "LCL": 1,
    "ARG": 2,
    "THIS": 3,
    "THAT": 4,
    "SCREEN": 0x4000,
    "KBD": 0x6000,
}

# Primera celda libre para variables; la RAM de datos termina donde empieza la pantalla
VARIABLE_BASE = 16
DATA_END = PREDEFINED["SCREEN"]

# Tamaño de la ROM (direcciones de 15 bits)
ROM_SIZE = 0x8000

def encode_c(dest: str, comp: str, jump: str) -> int:
    """Palabra de 16 bits de una instrucción C; KeyError si algún campo no existe."""
    return (C_PREFIX << 13) | (COMP[comp] << 6) | (DEST[dest] << 3) | JUMP[jump]
