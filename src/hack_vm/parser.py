# src/hack_vm/parser.py
from __future__ import annotations
from typing import List, Optional, Sequence, Tuple

from .lexer import split_opcode_operands, is_name
from .opcodes import spec as op_spec, usage
from .segments import is_segment, check_index, STATIC_SLOTS
from .utils import is_constant15, parse_int, MAX_CONSTANT
from .diagnostics import Diagnostic, error, warning
from .ast import (
    Instruction,
    PushConst, PushSegment, PopSegment, PushStatic, PopStatic,
    Add, Sub, Neg, And, Or, Not, Eq, Gt, Lt,
    Label, Goto, IfGoto, Function, Call, Return,
)

_ALU = {"add": Add, "sub": Sub, "neg": Neg, "and": And, "or": Or, "not": Not}
_CMP = {"eq": Eq, "gt": Gt, "lt": Lt}
_BRANCH = {"label": Label, "goto": Goto}

class Parser:
    """Parser con estado de una unidad de traducción.

    Una misma instancia consume todos los .vm de un directorio: el contador
    de ids y la función activa se conservan entre archivos, así que las
    etiquetas generadas (is-eq-n, f$ret.n, ...) nunca colisionan.
    """

    def __init__(self) -> None:
        self.instructions: List[Instruction] = []
        self.diagnostics: List[Diagnostic] = []
        self.next_id = 0
        self.function = ""

    def parse(self, text: str, *, stem: str, filename: Optional[str] = None) -> List[Diagnostic]:
        """Parsea el texto de un .vm y acumula sus instrucciones.

        - stem: nombre del archivo sin extensión; prefijo de los estáticos.
        - Devuelve los diagnósticos de este texto (también quedan en
          self.diagnostics).
        """
        diags: List[Diagnostic] = []
        for lineno, raw in enumerate(text.splitlines(), start=1):
            opcode, operands = split_opcode_operands(raw)
            if not opcode:
                continue
            ins = self._parse_line(opcode, operands, raw.strip(), lineno,
                                   stem=stem, filename=filename, diags=diags)
            if ins is not None:
                self.instructions.append(ins)
            # el id avanza con cada línea no vacía, válida o no
            self.next_id += 1
        self.diagnostics.extend(diags)
        return diags

    def _parse_line(self, opcode: str, ops: Sequence[str], source: str, lineno: int, *,
                    stem: str, filename: Optional[str], diags: List[Diagnostic]) -> Optional[Instruction]:
        def _err(msg: str, hint: str | None = None) -> None:
            diags.append(error(msg, line=lineno, file=filename, hint=hint, source=source))

        def _int(tok: str, what: str) -> Optional[int]:
            try:
                val = parse_int(tok)
            except ValueError:
                _err(f"{what} no entero: '{tok}'")
                return None
            if val < 0:
                _err(f"{what} negativo: {val}")
                return None
            return val

        def _name(tok: str) -> str:
            if not is_name(tok):
                diags.append(warning(f"Nombre de símbolo no estándar: '{tok}'", line=lineno,
                                     file=filename, source=source,
                                     hint="letras, dígitos, '_', '.', ':', '$'; sin dígito inicial"))
            return tok

        try:
            sp = op_spec(opcode)
        except KeyError:
            _err(f"Comando desconocido: {opcode}")
            return None

        if len(ops) != sp.operands:
            _err(f"{opcode} espera {sp.operands} operando(s), recibió {len(ops)}", hint=usage(opcode))
            return None

        loc = {"line": lineno, "file": filename}

        if sp.kind == "MEM":
            segment, idx_tok = ops
            if not is_segment(segment):
                _err(f"Segmento inválido: {segment}")
                return None
            try:
                index = parse_int(idx_tok)
            except ValueError:
                _err(f"Índice no entero: '{idx_tok}'")
                return None

            if segment == "constant":
                if opcode == "pop":
                    _err("No se puede hacer pop sobre constant")
                    return None
                if not is_constant15(index):
                    _err(f"Constante fuera de rango (0..{MAX_CONSTANT}): {index}",
                         hint="para negativos use 'push constant n' seguido de 'neg'")
                    return None
                return PushConst(index, **loc)

            msg = check_index(segment, index)
            if msg:
                _err(msg)
                return None

            if segment == "static":
                if index >= STATIC_SLOTS:
                    diags.append(warning(f"Índice estático {index} supera las {STATIC_SLOTS} ranuras del curso",
                                         line=lineno, file=filename, source=source))
                cls = PushStatic if opcode == "push" else PopStatic
                return cls(stem, index, **loc)

            cls = PushSegment if opcode == "push" else PopSegment
            return cls(segment, index, **loc)

        if sp.kind == "ALU":
            return _ALU[opcode](**loc)

        if sp.kind == "CMP":
            return _CMP[opcode](self.next_id, **loc)

        if sp.kind == "BRANCH":
            name = _name(ops[0])
            if opcode == "if-goto":
                return IfGoto(name, self.next_id, self.function, **loc)
            return _BRANCH[opcode](name, self.function, **loc)

        if sp.kind == "FUNC":
            name = _name(ops[0])
            nlocals = _int(ops[1], "Número de locales")
            if nlocals is None:
                return None
            self.function = name
            return Function(name, nlocals, **loc)

        if sp.kind == "CALL":
            name = _name(ops[0])
            nargs = _int(ops[1], "Número de argumentos")
            if nargs is None:
                return None
            return Call(name, nargs, self.next_id, **loc)

        if sp.kind == "RET":
            return Return(**loc)

        _err(f"Tipo de comando no soportado: {sp.kind}")
        return None

def parse(text: str, *, stem: str = "", filename: Optional[str] = None) -> Tuple[List[Instruction], List[Diagnostic]]:
    """
    Devuelve (instrucciones, diagnostics) de un único texto .vm.

    Reglas:
      - Comentarios: '//' hasta fin de línea; líneas vacías se ignoran.
      - Tokens separados por espacios (se toleran varios seguidos).
      - Cada línea no vacía consume un id (monótono dentro del texto).
    """
    p = Parser()
    p.parse(text, stem=stem, filename=filename)
    return p.instructions, p.diagnostics
