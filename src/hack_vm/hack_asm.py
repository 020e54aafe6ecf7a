'''
ensamblador Hack en dos pasadas: .asm -> .hack (una palabra binaria por línea)
'''

from __future__ import annotations
import argparse, re, sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from .hack_isa import COMP, DEST, JUMP, PREDEFINED, VARIABLE_BASE, DATA_END, ROM_SIZE, encode_c
from .lexer import strip_comment
from .utils import is_constant15, to_bin16, MAX_CONSTANT
from .writers import output_path, write_text
from .diagnostics import Diagnostic, TranslationError, error, warning, has_errors

# Como los nombres de la VM, más '-' (etiquetas is-eq-n generadas por el traductor)
SYMBOL_RE = re.compile(r"^[A-Za-z_.:$][A-Za-z0-9_.:$\-]*$")

# [dest=]comp[;jump]
C_RE = re.compile(r"^(?:(?P<dest>[^=;]*)=)?(?P<comp>[^=;]*)(?:;(?P<jump>[^=;]*))?$")

# ---------- Nodos ----------

@dataclass(frozen=True)
class LabelDef:
    """(NAME): no ocupa ROM, nombra la dirección de la siguiente instrucción."""
    name: str
    line: int = field(default=0, compare=False)
    file: Optional[str] = field(default=None, compare=False)

@dataclass(frozen=True)
class AInstr:
    """@valor: constante decimal o símbolo."""
    value: Union[int, str]
    line: int = field(default=0, compare=False)
    file: Optional[str] = field(default=None, compare=False)

@dataclass(frozen=True)
class CInstr:
    dest: str
    comp: str
    jump: str
    line: int = field(default=0, compare=False)
    file: Optional[str] = field(default=None, compare=False)

AsmNode = Union[LabelDef, AInstr, CInstr]

# ---------- Parser ----------

def parse_asm(text: str, *, filename: Optional[str] = None) -> Tuple[List[AsmNode], List[Diagnostic]]:
    """
    Devuelve (nodos, diagnostics).

    Reglas:
      - '//' hasta fin de línea; los espacios dentro de la línea se ignoran
        ('D = M' equivale a 'D=M').
      - Una instrucción o etiqueta por línea.
    """
    nodes: List[AsmNode] = []
    diags: List[Diagnostic] = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = "".join(strip_comment(raw).split())
        if not line:
            continue
        loc = {"line": lineno, "file": filename}

        def _err(msg: str, hint: str | None = None) -> None:
            diags.append(error(msg, hint=hint, source=raw.strip(), **loc))

        if line.startswith("("):
            name = line[1:-1] if line.endswith(")") else ""
            if not SYMBOL_RE.match(name):
                _err(f"Etiqueta inválida: {line}", hint="(NOMBRE) con letras, dígitos, '_', '.', ':', '$', '-'")
                continue
            nodes.append(LabelDef(name, **loc))
            continue

        if line.startswith("@"):
            tok = line[1:]
            if tok.isdigit() and tok.isascii():
                value = int(tok)
                if not is_constant15(value):
                    _err(f"Constante fuera de rango (0..{MAX_CONSTANT}): {value}")
                    continue
                nodes.append(AInstr(value, **loc))
            elif SYMBOL_RE.match(tok):
                nodes.append(AInstr(tok, **loc))
            else:
                _err(f"Símbolo inválido: '{tok}'")
            continue

        m = C_RE.match(line)
        if not m:
            _err(f"Instrucción no reconocida: {line}", hint="dest=comp;jump")
            continue
        dest, comp, jump = m.group("dest"), m.group("comp"), m.group("jump")
        bad = False
        if dest is not None and dest not in DEST or dest == "":
            _err(f"Campo dest inválido: '{dest}'")
            bad = True
        if comp not in COMP:
            _err(f"Campo comp inválido: '{comp}'")
            bad = True
        if jump is not None and jump not in JUMP or jump == "":
            _err(f"Campo jump inválido: '{jump}'")
            bad = True
        if not bad:
            nodes.append(CInstr(dest or "", comp, jump or "", **loc))
    return nodes, diags

# ---------- Pasada 1 (etiquetas) ----------

@dataclass(frozen=True)
class AsmLayout:
    symtab: Dict[str, int]          # predefinidos + etiquetas
    size: int                       # instrucciones que ocupan ROM
    diagnostics: List[Diagnostic]

def first_pass(nodes: List[AsmNode]) -> AsmLayout:
    symtab: Dict[str, int] = dict(PREDEFINED)
    labels: Dict[str, int] = {}
    diags: List[Diagnostic] = []
    pc = 0
    for n in nodes:
        if isinstance(n, LabelDef):
            if n.name in PREDEFINED:
                diags.append(error(f"Etiqueta redefinida: {n.name}", line=n.line, file=n.file,
                                   hint="es un símbolo predefinido"))
            elif n.name in symtab:
                diags.append(error(f"Etiqueta redefinida: {n.name}", line=n.line, file=n.file,
                                   hint=f"ya definida en la línea {labels[n.name]}"))
            else:
                symtab[n.name] = pc
                labels[n.name] = n.line
            continue
        pc += 1
    if pc > ROM_SIZE:
        diags.append(error(f"Programa demasiado largo: {pc} instrucciones (máximo {ROM_SIZE})"))
    return AsmLayout(symtab=symtab, size=pc, diagnostics=diags)

# ---------- Pasada 2 (codificación) ----------

@dataclass(frozen=True)
class AsmResult:
    words: List[int]
    variables: Dict[str, int]       # símbolo -> dirección RAM asignada
    diagnostics: List[Diagnostic]

def encode(nodes: List[AsmNode], symtab: Dict[str, int]) -> AsmResult:
    """Codifica A y C; los símbolos sin etiqueta son variables desde la RAM 16."""
    words: List[int] = []
    variables: Dict[str, int] = {}
    diags: List[Diagnostic] = []
    next_var = VARIABLE_BASE
    for n in nodes:
        if isinstance(n, LabelDef):
            continue
        if isinstance(n, AInstr):
            if isinstance(n.value, int):
                words.append(n.value)
                continue
            if n.value in symtab:
                words.append(symtab[n.value])
                continue
            if n.value not in variables:
                if next_var >= DATA_END:
                    diags.append(warning(f"Variable {n.value} asignada en {next_var}, fuera de la RAM de datos",
                                         line=n.line, file=n.file))
                variables[n.value] = next_var
                next_var += 1
            words.append(variables[n.value])
        elif isinstance(n, CInstr):
            words.append(encode_c(n.dest, n.comp, n.jump))
        else:
            raise TypeError(f"Nodo no soportado: {n!r}")
    return AsmResult(words=words, variables=variables, diagnostics=diags)

# ---------- API ----------

def assemble_text(text: str, *, filename: str | None = None) -> Tuple[str, List[Diagnostic]]:
    """Ensambla un texto .asm.
    Devuelve (hack, diagnostics); lanza TranslationError si hay errores."""
    nodes, diags = parse_asm(text, filename=filename)
    layout = first_pass(nodes)
    diags += layout.diagnostics
    if has_errors(diags):
        raise TranslationError(diags)
    res = encode(nodes, layout.symtab)
    diags += res.diagnostics
    return "".join(to_bin16(w) + "\n" for w in res.words), diags

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(prog="hack-asm", description="Ensamblador Hack de dos pasadas (.asm -> .hack)")
    ap.add_argument("path", help="archivo .asm de entrada")
    ap.add_argument("-o", "--output", help="archivo .hack de salida (por defecto junto a la entrada)")
    ap.add_argument("--force", action="store_true", help="sobrescribir la salida si ya existe")
    args = ap.parse_args(argv)

    src = Path(args.path)
    if not src.is_file():
        print(f"ERROR: no existe el archivo: {src}", file=sys.stderr)
        return 2
    if src.suffix != ".asm":
        print(f"ERROR: tipo de archivo inválido, se esperaba '.asm', se obtuvo '{src.suffix}'", file=sys.stderr)
        return 2

    out = Path(args.output) if args.output else output_path(src, ".hack")
    if out.exists() and not args.force:
        print(f"ERROR: la salida ya existe: {out}  (pista: use --force)", file=sys.stderr)
        return 2

    try:
        text = src.read_text(encoding="utf-8")
    except OSError as ex:
        print(f"ERROR: no pude leer {src}: {ex}", file=sys.stderr)
        return 2

    try:
        hack, diags = assemble_text(text, filename=str(src))
    except TranslationError as ex:
        for d in ex.diagnostics:
            print(d, file=sys.stderr)
        return 1

    for d in diags:
        print(d, file=sys.stderr)

    try:
        write_text(hack, out, overwrite=args.force)
    except OSError as ex:
        print(f"ERROR al escribir salida: {ex}", file=sys.stderr)
        return 3

    nwords = hack.count("\n")
    print(f"OK: {nwords} instrucciones → {out}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
