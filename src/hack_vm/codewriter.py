# src/hack_vm/codewriter.py
from __future__ import annotations
from typing import Iterable, List

from .ast import (
    Instruction,
    PushConst, PushSegment, PopSegment, PushStatic, PopStatic,
    Add, Sub, Neg, And, Or, Not, Eq, Gt, Lt,
    Label, Goto, IfGoto, Function, Call, Return,
)
from .opcodes import spec as op_spec
from .segments import is_indirect, is_direct, base_symbol, direct_address, static_symbol

# Valor histórico del curso: el emulador espera SP=261 tras el bootstrap
BOOTSTRAP_SP = 261

# Celdas de la pila de llamada que se guardan/restauran en call/return
FRAME = ("LCL", "ARG", "THIS", "THAT")

# ---------------- Buffer de salida ----------------

class CodeWriter:
    """Acumula líneas de ensamblador Hack, cada una terminada en '\\n'."""

    def __init__(self) -> None:
        self._lines: List[str] = []

    def writeln(self, *lines: str) -> None:
        for line in lines:
            self._lines.append(line + "\n")

    def comment(self, text: str) -> None:
        self.writeln(f"// {text}")

    @property
    def lines(self) -> List[str]:
        return [l[:-1] for l in self._lines]

    def getvalue(self) -> str:
        return "".join(self._lines)

# ---------------- Primitivas de pila ----------------

def _push_d(cw: CodeWriter) -> None:
    # *SP = D; SP++
    cw.writeln("@SP", "A=M", "M=D", "@SP", "M=M+1")

def _pop_d(cw: CodeWriter) -> None:
    # SP--; D = *SP  (A queda en SP-1)
    cw.writeln("@SP", "AM=M-1", "D=M")

def _top(cw: CodeWriter) -> None:
    cw.writeln("@SP", "A=M-1")

def _pop_to_r15_address(cw: CodeWriter) -> None:
    # D trae la dirección destino
    cw.writeln("@R15", "M=D")
    _pop_d(cw)
    cw.writeln("@R15", "A=M", "M=D")

def _binary(cw: CodeWriter, comp: str) -> None:
    _pop_d(cw)
    cw.writeln("A=A-1", f"M={comp}")

def _unary(cw: CodeWriter, comp: str) -> None:
    _top(cw)
    cw.writeln(f"M={comp}")

# ---------------- Bootstrap ----------------

def write_bootstrap(cw: CodeWriter, *, sp_init: int = BOOTSTRAP_SP) -> None:
    """SP=sp_init, bases a 0 y salto a Sys.init."""
    cw.comment("bootstrap")
    cw.writeln(f"@{sp_init}", "D=A", "@SP", "M=D")
    for reg in FRAME:
        cw.writeln(f"@{reg}", "M=0")
    cw.writeln("@Sys.init", "0;JMP")

# ---------------- Emisión por instrucción ----------------

def emit(ins: Instruction, cw: CodeWriter) -> None:
    """Escribe el comentario '// <pretty>' y el cuerpo de una instrucción."""
    cw.comment(ins.pretty())

    # ---- Memoria ----
    if isinstance(ins, PushConst):
        cw.writeln(f"@{ins.value}", "D=A")
        _push_d(cw)

    elif isinstance(ins, PushSegment):
        if is_indirect(ins.segment):
            cw.writeln(f"@{base_symbol(ins.segment)}", "D=M", f"@{ins.index}", "A=D+A", "D=M")
        elif is_direct(ins.segment):
            cw.writeln(f"@{direct_address(ins.segment, ins.index)}", "D=M")
        else:
            raise ValueError(f"Segmento no soportado: {ins.pretty()}")
        _push_d(cw)

    elif isinstance(ins, PopSegment):
        if is_indirect(ins.segment):
            cw.writeln(f"@{base_symbol(ins.segment)}", "D=M", f"@{ins.index}", "D=D+A")
        elif is_direct(ins.segment):
            cw.writeln(f"@{direct_address(ins.segment, ins.index)}", "D=A")
        else:
            raise ValueError(f"Segmento no soportado: {ins.pretty()}")
        _pop_to_r15_address(cw)

    elif isinstance(ins, PushStatic):
        cw.writeln(f"@{static_symbol(ins.stem, ins.index)}", "D=M")
        _push_d(cw)

    elif isinstance(ins, PopStatic):
        cw.writeln(f"@{static_symbol(ins.stem, ins.index)}", "D=A")
        _pop_to_r15_address(cw)

    # ---- Aritmética / lógica ----
    elif isinstance(ins, Add):
        _binary(cw, "D+M")
    elif isinstance(ins, Sub):
        _binary(cw, "M-D")
    elif isinstance(ins, And):
        _binary(cw, "D&M")
    elif isinstance(ins, Or):
        _binary(cw, "D|M")
    elif isinstance(ins, Neg):
        _unary(cw, "-M")
    elif isinstance(ins, Not):
        _unary(cw, "!M")

    elif isinstance(ins, (Eq, Gt, Lt)):
        op = ins.pretty()
        jump = op_spec(op).jump
        n = ins.id
        _pop_d(cw)
        cw.writeln("A=A-1", "D=M-D")          # D = segundo - tope
        cw.writeln(f"@is-{op}-{n}", f"D;{jump}")
        cw.writeln(f"@end-{n}", "D=0;JMP")
        cw.writeln(f"(is-{op}-{n})", "D=-1")
        cw.writeln(f"(end-{n})")
        _top(cw)
        cw.writeln("M=D")

    # ---- Flujo de control ----
    elif isinstance(ins, Label):
        cw.writeln(f"({ins.symbol})")

    elif isinstance(ins, Goto):
        cw.writeln(f"@{ins.symbol}", "0;JMP")

    elif isinstance(ins, IfGoto):
        # salta si el tope != 0; la etiqueta $id es la continuación local
        cont = f"{ins.symbol}${ins.id}"
        _pop_d(cw)
        cw.writeln(f"@{cont}", "D;JEQ")
        cw.writeln(f"@{ins.symbol}", "0;JMP")
        cw.writeln(f"({cont})")

    # ---- Funciones ----
    elif isinstance(ins, Function):
        cw.writeln(f"({ins.name})")
        cw.writeln("@SP", "D=M", "@LCL", "AM=D")
        for _ in range(ins.nlocals):
            cw.writeln("M=0", "A=A+1")
        cw.writeln("D=A", "@SP", "M=D")

    elif isinstance(ins, Call):
        nargs = ins.nargs
        if nargs == 0:
            # argumento ficticio: ARG[0] sigue existiendo para el valor de retorno
            cw.writeln("@0", "D=A")
            _push_d(cw)
            nargs = 1
        cw.writeln(f"@{ins.return_label}", "D=A")
        _push_d(cw)
        for reg in FRAME:
            cw.writeln(f"@{reg}", "D=M")
            _push_d(cw)
        cw.writeln(f"@{nargs + 5}", "D=A", "@SP", "D=M-D", "@ARG", "M=D")
        cw.writeln(f"@{ins.name}", "0;JMP")
        cw.writeln(f"({ins.return_label})")

    elif isinstance(ins, Return):
        # *ARG = *(SP-1)
        _top(cw)
        cw.writeln("D=M", "@ARG", "A=M", "M=D")
        # SP = LCL
        cw.writeln("@LCL", "D=M", "@SP", "M=D")
        # R14 = ARG+1 (SP del llamador)
        cw.writeln("@ARG", "D=M+1", "@R14", "M=D")
        for reg in reversed(FRAME):
            _pop_d(cw)
            cw.writeln(f"@{reg}", "M=D")
        _pop_d(cw)
        cw.writeln("@R15", "M=D")
        cw.writeln("@R14", "D=M", "@SP", "M=D")
        cw.writeln("@R15", "A=M;JMP")

    else:
        raise TypeError(f"Instrucción no soportada: {ins!r}")

# ---------------- Programa completo ----------------

def write(instructions: Iterable[Instruction], *, bootstrap: bool = True,
          sp_init: int = BOOTSTRAP_SP) -> str:
    """Bootstrap opcional + cada instrucción en orden. Texto con LF final."""
    cw = CodeWriter()
    if bootstrap:
        write_bootstrap(cw, sp_init=sp_init)
    for ins in instructions:
        emit(ins, cw)
    return cw.getvalue()
