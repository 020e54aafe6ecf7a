from __future__ import annotations
import argparse, sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from .parser import Parser
from .linker import collect_sources, read_sources, link
from .codewriter import write
from .writers import output_path, write_text
from .diagnostics import Diagnostic, TranslationError, error, has_errors

PathLike = Union[str, Path]

def translate_text(text: str, *, stem: str, filename: str | None = None,
                   bootstrap: bool = False) -> Tuple[str, List[Diagnostic]]:
    """Traduce un único texto .vm.
    Devuelve (asm, diagnostics); lanza TranslationError si hay errores."""
    p = Parser()
    diags = p.parse(text, stem=stem, filename=filename)
    if has_errors(diags):
        raise TranslationError(diags)
    return write(p.instructions, bootstrap=bootstrap), diags

def _resolve_inputs(paths: Union[PathLike, Sequence[PathLike]], *, sys_first: bool) -> Tuple[List[Path], bool, List[Diagnostic]]:
    """(archivos, modo_directorio, diagnostics) a partir de un path o una lista."""
    if isinstance(paths, (str, Path)):
        p = Path(paths)
        if p.is_dir():
            files, diags = collect_sources(p, sys_first=sys_first)
            return files, True, diags
        return [p], False, []
    files = [Path(p) for p in paths]
    return files, len(files) > 1, []

def translate(paths: Union[PathLike, Sequence[PathLike]], *, bootstrap: Optional[bool] = None,
              sys_first: bool = False) -> Tuple[str, List[Diagnostic]]:
    """Traduce un .vm, un directorio de .vm o una lista de .vm a un único asm.

    - bootstrap=None: solo en modo directorio/varios archivos.
    - Lanza FileNotFoundError/OSError al leer y TranslationError si algún
      diagnóstico es error. Devuelve (asm, diagnostics no fatales).
    """
    files, dir_mode, diags = _resolve_inputs(paths, sys_first=sys_first)
    for f in files:
        if f.suffix != ".vm":
            diags.append(error(f"Tipo de archivo inválido, se esperaba '.vm', se obtuvo '{f.suffix}'", file=str(f)))
    if has_errors(diags):
        raise TranslationError(diags)

    if bootstrap is None:
        bootstrap = dir_mode
    res = link(read_sources(files), require_entry=bootstrap)
    diags += res.diagnostics
    if has_errors(diags):
        raise TranslationError(diags)
    return write(res.instructions, bootstrap=bootstrap), diags

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(prog="hack-vm", description="Traductor VM -> ensamblador Hack")
    ap.add_argument("path", help="archivo .vm o directorio con archivos .vm")
    ap.add_argument("-o", "--output", help="archivo .asm de salida (por defecto junto a la entrada)")
    boot = ap.add_mutually_exclusive_group()
    boot.add_argument("--bootstrap", dest="bootstrap", action="store_true", default=None,
                      help="emitir el bootstrap también en modo archivo")
    boot.add_argument("--no-bootstrap", dest="bootstrap", action="store_false",
                      help="no emitir el bootstrap en modo directorio")
    ap.add_argument("--sys-first", action="store_true", help="traducir Sys.vm antes que el resto")
    ap.add_argument("--force", action="store_true", help="sobrescribir la salida si ya existe")
    args = ap.parse_args(argv)

    src = Path(args.path)
    if not src.exists():
        print(f"ERROR: no existe el archivo o directorio: {src}", file=sys.stderr)
        return 2
    if src.is_file() and src.suffix != ".vm":
        print(f"ERROR: tipo de archivo inválido, se esperaba '.vm', se obtuvo '{src.suffix}'", file=sys.stderr)
        return 2

    out = Path(args.output) if args.output else output_path(src)
    if out.exists() and not args.force:
        print(f"ERROR: la salida ya existe: {out}  (pista: use --force)", file=sys.stderr)
        return 2

    try:
        asm, diags = translate(src, bootstrap=args.bootstrap, sys_first=args.sys_first)
    except TranslationError as ex:
        for d in ex.diagnostics:
            print(d, file=sys.stderr)
        return 1
    except OSError as ex:
        print(f"ERROR: no pude leer {src}: {ex}", file=sys.stderr)
        return 2

    for d in diags:
        # advertencias y notas; los errores ya abortaron arriba
        print(d, file=sys.stderr)

    try:
        write_text(asm, out, overwrite=args.force)
    except FileExistsError:
        print(f"ERROR: la salida ya existe: {out}", file=sys.stderr)
        return 2
    except OSError as ex:
        print(f"ERROR al escribir salida: {ex}", file=sys.stderr)
        return 3

    nlines = asm.count("\n")
    print(f"OK: {nlines} líneas → {out}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
