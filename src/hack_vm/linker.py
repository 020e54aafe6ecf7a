# src/hack_vm/linker.py
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

from .ast import Instruction, Function
from .parser import Parser
from .diagnostics import Diagnostic, error, warning, note

ENTRY_POINT = "Sys.init"

# ---------- Resultado del enlace ----------

@dataclass(frozen=True)
class Source:
    """Un .vm ya leído: stem (prefijo de estáticos), texto y nombre para diagnósticos."""
    stem: str
    text: str
    filename: str

@dataclass(frozen=True)
class LinkResult:
    instructions: List[Instruction]
    functions: Dict[str, Tuple[str | None, int]]   # nombre -> (archivo, línea)
    files: List[str]
    diagnostics: List[Diagnostic]

# ---------- Descubrimiento de fuentes ----------

def collect_sources(directory: str | Path, *, sys_first: bool = False) -> Tuple[List[Path], List[Diagnostic]]:
    """Lista los *.vm de un directorio en orden alfabético.

    Con sys_first=True, Sys.vm pasa al frente (el ensamblador resuelve
    @Sys.init en cualquier orden; esto solo cambia la disposición del .asm).
    """
    diags: List[Diagnostic] = []
    d = Path(directory)
    files = sorted(p for p in d.glob("*.vm") if p.is_file())
    if not files:
        diags.append(warning(f"No hay archivos .vm en {d}; la salida solo tendrá el bootstrap", file=str(d)))
        return files, diags
    if sys_first:
        idx = next((i for i, p in enumerate(files) if p.name.lower() == "sys.vm"), None)
        if idx is None:
            diags.append(warning("--sys-first pedido pero no existe Sys.vm", file=str(d)))
        elif idx > 0:
            files.insert(0, files.pop(idx))
            diags.append(note("Sys.vm movido al inicio de la unidad de traducción", file=str(d)))
    return files, diags

def read_sources(paths: Sequence[str | Path]) -> List[Source]:
    out: List[Source] = []
    for p in paths:
        path = Path(p)
        with open(path, "r", encoding="utf-8") as f:
            out.append(Source(stem=path.stem, text=f.read(), filename=str(path)))
    return out

# ---------- Comprobaciones de enlace ----------

def check(instructions: Sequence[Instruction], *, require_entry: bool = True) -> Tuple[Dict[str, Tuple[str | None, int]], List[Diagnostic]]:
    """Tabla de funciones definidas y diagnósticos de enlace.

    - función definida dos veces -> error (la etiqueta '(f)' quedaría duplicada)
    - sin Sys.init cuando se emite bootstrap -> advertencia
    """
    functions: Dict[str, Tuple[str | None, int]] = {}
    diags: List[Diagnostic] = []
    for ins in instructions:
        if isinstance(ins, Function):
            if ins.name in functions:
                prev_file, prev_line = functions[ins.name]
                diags.append(error(f"Función redefinida: {ins.name}", line=ins.line, file=ins.file,
                                   hint=f"ya definida en {prev_file}:{prev_line}"))
            else:
                functions[ins.name] = (ins.file, ins.line)
    if require_entry and ENTRY_POINT not in functions:
        diags.append(warning(f"No se definió {ENTRY_POINT}; el bootstrap saltará a una etiqueta inexistente",
                             hint="incluya Sys.vm en el directorio"))
    return functions, diags

# ---------- Enlace de varios archivos ----------

def link(sources: Sequence[Source], *, require_entry: bool = True) -> LinkResult:
    """Un único Parser para todos los fuentes, en el orden dado.

    El contador de ids y la función activa persisten entre archivos; los
    estáticos de cada archivo usan su propio stem.
    """
    parser = Parser()
    for src in sources:
        parser.parse(src.text, stem=src.stem, filename=src.filename)
    # sin fuentes no hay punto de entrada que exigir
    functions, link_diags = check(parser.instructions, require_entry=require_entry and bool(sources))
    return LinkResult(
        instructions=parser.instructions,
        functions=functions,
        files=[s.filename for s in sources],
        diagnostics=list(parser.diagnostics) + link_diags,
    )
