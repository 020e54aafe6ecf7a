from __future__ import annotations
import argparse, sys
from pathlib import Path
from typing import List

from .jack_parser import parse_jack
from .writers import output_path, write_text
from .diagnostics import has_errors

AST_EXT = ".ast"

def _sources(path: Path) -> List[Path]:
    if path.is_dir():
        return sorted(p for p in path.glob("*.jack") if p.is_file())
    return [path]

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(prog="jack-parse", description="Parser de Jack: imprime el árbol de cada clase")
    ap.add_argument("path", help="archivo .jack o directorio con archivos .jack")
    ap.add_argument("--force", action="store_true", help="sobrescribir salidas existentes")
    args = ap.parse_args(argv)

    src = Path(args.path)
    if not src.exists():
        print(f"ERROR: no existe el archivo o directorio: {src}", file=sys.stderr)
        return 2
    if src.is_file() and src.suffix != ".jack":
        print(f"ERROR: tipo de archivo inválido, se esperaba '.jack', se obtuvo '{src.suffix}'", file=sys.stderr)
        return 2

    files = _sources(src)
    if not files:
        print(f"ERROR: no hay archivos .jack en {src}", file=sys.stderr)
        return 2

    # se parsea todo antes de escribir: un error no deja salidas a medias
    trees = []
    had_error = False
    for f in files:
        try:
            text = f.read_text(encoding="utf-8")
        except OSError as ex:
            print(f"ERROR: no pude leer {f}: {ex}", file=sys.stderr)
            return 2
        cls, diags = parse_jack(text, filename=str(f))
        for d in diags:
            print(d, file=sys.stderr)
        if has_errors(diags):
            had_error = True
            continue
        trees.append((f, cls))

    if had_error:
        return 1

    outs = [output_path(f, AST_EXT) for f, _ in trees]
    existing = [o for o in outs if o.exists()]
    if existing and not args.force:
        for o in existing:
            print(f"ERROR: la salida ya existe: {o}  (pista: use --force)", file=sys.stderr)
        return 2

    try:
        for (f, cls), out in zip(trees, outs):
            write_text(str(cls), out, overwrite=args.force)
    except OSError as ex:
        print(f"ERROR al escribir salida: {ex}", file=sys.stderr)
        return 3

    print(f"OK: {len(trees)} clase(s) → {', '.join(str(o) for o in outs)}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
