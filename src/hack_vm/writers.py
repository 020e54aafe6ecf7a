from __future__ import annotations
from pathlib import Path

def output_path(source: str | Path, ext: str = ".asm") -> Path:
    """File -> '<stem><ext>' beside it; directory -> '<dir>/<dirname><ext>'."""
    p = Path(source)
    if p.is_dir():
        return p / (p.resolve().name + ext)
    return p.with_suffix(ext)

def write_text(text: str, path: str | Path, *, overwrite: bool = False) -> None:
    """Write text with LF endings; refuse to replace an existing file unless overwrite.

    A failed write removes the half-written file.
    """
    mode = "w" if overwrite else "x"
    with open(path, mode, encoding="utf-8", newline="\n") as f:
        try:
            f.write(text)
        except OSError:
            f.close()
            Path(path).unlink(missing_ok=True)
            raise
