'''
clase Diagnostic, helpers y TranslationError (archivo/línea, severidad)
'''

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Optional, Literal

# Severidad de los diagnósticos (en español)
Severity = Literal["error", "advertencia", "nota"]

_SEV_TO_LABEL = {
    "error": "ERROR",
    "advertencia": "ADVERTENCIA",
    "nota": "NOTA",
}

@dataclass(frozen=True)
class Diagnostic:
    """Problema detectado al traducir o parsear.

    Lleva ubicación opcional (archivo y línea), el texto de la línea fuente
    cuando se conoce y una pista para orientar la corrección.
    """
    severity: Severity
    message: str
    line: Optional[int] = None
    col: Optional[int] = None
    hint: Optional[str] = None
    file: Optional[str] = None
    source: Optional[str] = None

    def __str__(self) -> str:
        # archivo:línea:col, omitiendo las partes desconocidas
        parts = [str(p) for p in (self.file, self.line) if p is not None]
        if self.line is not None and self.col is not None:
            parts.append(str(self.col))
        loc = ":".join(parts)
        if loc:
            loc += ": "
        sev = _SEV_TO_LABEL.get(self.severity, str(self.severity).upper())
        core = f"{sev}: {self.message}"
        if self.source:
            core += f" -> '{self.source}'"
        if self.hint:
            core += f"  (pista: {self.hint})"
        return loc + core

def error(message: str, *, line: int | None = None, col: int | None = None,
          file: str | None = None, hint: str | None = None,
          source: str | None = None) -> Diagnostic:
    """Crea un diagnóstico de tipo error."""
    return Diagnostic("error", message, line, col, hint, file, source)

def warning(message: str, *, line: int | None = None, col: int | None = None,
            file: str | None = None, hint: str | None = None,
            source: str | None = None) -> Diagnostic:
    """Crea un diagnóstico de tipo advertencia."""
    return Diagnostic("advertencia", message, line, col, hint, file, source)

def note(message: str, *, line: int | None = None, col: int | None = None,
         file: str | None = None, hint: str | None = None,
         source: str | None = None) -> Diagnostic:
    """Crea un diagnóstico de tipo nota."""
    return Diagnostic("nota", message, line, col, hint, file, source)

def has_errors(diags: Iterable[Diagnostic]) -> bool:
    return any(d.severity == "error" for d in diags)

class TranslationError(Exception):
    """La traducción se abortó: al menos un diagnóstico es un error."""

    def __init__(self, diagnostics: List[Diagnostic]):
        self.diagnostics = list(diagnostics)
        errors = [d for d in self.diagnostics if d.severity == "error"]
        first = str(errors[0]) if errors else "error de traducción"
        if len(errors) > 1:
            first += f" (+{len(errors) - 1} errores más)"
        super().__init__(first)
