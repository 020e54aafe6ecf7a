'''
tokenizador de Jack (palabras clave, símbolos, enteros, cadenas, identificadores)
'''

from __future__ import annotations
import re
from dataclasses import dataclass
from typing import List, Literal, Optional, Tuple

from .diagnostics import Diagnostic, error
from .utils import MAX_CONSTANT

TokenType = Literal["KEYWORD", "SYMBOL", "INT", "STRING", "IDENT", "EOF"]

KEYWORDS = frozenset({
    "class", "constructor", "function", "method", "field", "static", "var",
    "int", "char", "boolean", "void", "true", "false", "null", "this",
    "let", "do", "if", "else", "while", "return",
})

SYMBOLS = frozenset("{}()[].,;+-*/&|<>=~")

@dataclass(frozen=True)
class Token:
    """Token con su línea de origen (1-based)."""
    type: TokenType
    literal: str
    line: int

    def is_(self, type_: str, literal: Optional[str] = None) -> bool:
        return self.type == type_ and (literal is None or self.literal == literal)

TOKEN_RE = re.compile(r"""
    (?P<ws>[ \t\r\n]+)
  | (?P<line_comment>//[^\n]*)
  | (?P<block_comment>/\*.*?\*/)
  | (?P<open_comment>/\*)
  | (?P<int>\d+)
  | (?P<string>"[^"\n]*")
  | (?P<ident>[A-Za-z_][A-Za-z0-9_]*)
  | (?P<symbol>[{}()\[\].,;+\-*/&|<>=~])
""", re.VERBOSE | re.DOTALL)

def tokenize(text: str, *, filename: Optional[str] = None) -> Tuple[List[Token], List[Diagnostic]]:
    """Devuelve (tokens, diagnostics); la lista termina siempre en un token EOF.

    Los caracteres no reconocidos generan un error y se saltan, para poder
    informar de todos en una sola pasada.
    """
    tokens: List[Token] = []
    diags: List[Diagnostic] = []
    pos, line = 0, 1
    while pos < len(text):
        m = TOKEN_RE.match(text, pos)
        if not m:
            ch = text[pos]
            if ch == '"':
                diags.append(error("Cadena sin cerrar", line=line, file=filename,
                                   hint="las cadenas Jack no pueden contener saltos de línea"))
                nl = text.find("\n", pos)
                pos = len(text) if nl < 0 else nl
                continue
            else:
                diags.append(error(f"Carácter inválido: {ch!r}", line=line, file=filename))
            pos += 1
            continue

        kind = m.lastgroup
        lexeme = m.group()
        if kind == "open_comment":
            diags.append(error("Comentario /* sin cerrar", line=line, file=filename))
            break
        if kind == "int":
            if int(lexeme) > MAX_CONSTANT:
                diags.append(error(f"Entero fuera de rango (0..{MAX_CONSTANT}): {lexeme}", line=line, file=filename))
            tokens.append(Token("INT", lexeme, line))
        elif kind == "string":
            tokens.append(Token("STRING", lexeme[1:-1], line))
        elif kind == "ident":
            tokens.append(Token("KEYWORD" if lexeme in KEYWORDS else "IDENT", lexeme, line))
        elif kind == "symbol":
            tokens.append(Token("SYMBOL", lexeme, line))
        # ws y comentarios solo avanzan la línea
        line += lexeme.count("\n")
        pos = m.end()

    tokens.append(Token("EOF", "", line))
    return tokens, diags
