'''
dataclases de instrucciones de la VM (una por operación)
'''

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Union

from .segments import Segment

# ---- Ubicación en el fuente (no participa en la igualdad) ----

def _loc():
    return field(default=0, compare=False)

def _file():
    return field(default=None, compare=False)

def qualified(function: str, name: str) -> str:
    """Nombre de etiqueta calificado por la función que la contiene."""
    return f"{function}.{name}"

# ---- Acceso a memoria ----

@dataclass(frozen=True)
class PushConst:
    """push constant v"""
    value: int
    line: int = _loc()
    file: Optional[str] = _file()

    def pretty(self) -> str:
        return f"push constant {self.value}"

@dataclass(frozen=True)
class PushSegment:
    """push <segmento> i para local/argument/this/that/pointer/temp."""
    segment: Segment
    index: int
    line: int = _loc()
    file: Optional[str] = _file()

    def pretty(self) -> str:
        return f"push {self.segment} {self.index}"

@dataclass(frozen=True)
class PopSegment:
    segment: Segment
    index: int
    line: int = _loc()
    file: Optional[str] = _file()

    def pretty(self) -> str:
        return f"pop {self.segment} {self.index}"

@dataclass(frozen=True)
class PushStatic:
    """push static i; 'stem' es el nombre del .vm sin extensión."""
    stem: str
    index: int
    line: int = _loc()
    file: Optional[str] = _file()

    def pretty(self) -> str:
        return f"push static {self.index}"

@dataclass(frozen=True)
class PopStatic:
    stem: str
    index: int
    line: int = _loc()
    file: Optional[str] = _file()

    def pretty(self) -> str:
        return f"pop static {self.index}"

# ---- Aritmética / lógica ----

@dataclass(frozen=True)
class Add:
    line: int = _loc()
    file: Optional[str] = _file()

    def pretty(self) -> str:
        return "add"

@dataclass(frozen=True)
class Sub:
    line: int = _loc()
    file: Optional[str] = _file()

    def pretty(self) -> str:
        return "sub"

@dataclass(frozen=True)
class Neg:
    line: int = _loc()
    file: Optional[str] = _file()

    def pretty(self) -> str:
        return "neg"

@dataclass(frozen=True)
class And:
    line: int = _loc()
    file: Optional[str] = _file()

    def pretty(self) -> str:
        return "and"

@dataclass(frozen=True)
class Or:
    line: int = _loc()
    file: Optional[str] = _file()

    def pretty(self) -> str:
        return "or"

@dataclass(frozen=True)
class Not:
    line: int = _loc()
    file: Optional[str] = _file()

    def pretty(self) -> str:
        return "not"

# Comparaciones: el id hace únicas las etiquetas is-<op>-n / end-n

@dataclass(frozen=True)
class Eq:
    id: int
    line: int = _loc()
    file: Optional[str] = _file()

    def pretty(self) -> str:
        return "eq"

@dataclass(frozen=True)
class Gt:
    id: int
    line: int = _loc()
    file: Optional[str] = _file()

    def pretty(self) -> str:
        return "gt"

@dataclass(frozen=True)
class Lt:
    id: int
    line: int = _loc()
    file: Optional[str] = _file()

    def pretty(self) -> str:
        return "lt"

# ---- Flujo de control ----

@dataclass(frozen=True)
class Label:
    """label name, ligada a la función activa al parsear."""
    name: str
    function: str
    line: int = _loc()
    file: Optional[str] = _file()

    @property
    def symbol(self) -> str:
        return qualified(self.function, self.name)

    def pretty(self) -> str:
        return f"label {self.symbol}"

@dataclass(frozen=True)
class Goto:
    name: str
    function: str
    line: int = _loc()
    file: Optional[str] = _file()

    @property
    def symbol(self) -> str:
        return qualified(self.function, self.name)

    def pretty(self) -> str:
        return f"goto {self.symbol}"

@dataclass(frozen=True)
class IfGoto:
    name: str
    id: int
    function: str
    line: int = _loc()
    file: Optional[str] = _file()

    @property
    def symbol(self) -> str:
        return qualified(self.function, self.name)

    def pretty(self) -> str:
        return f"if-goto {self.symbol}"

# ---- Funciones ----

@dataclass(frozen=True)
class Function:
    name: str
    nlocals: int
    line: int = _loc()
    file: Optional[str] = _file()

    def pretty(self) -> str:
        return f"function {self.name} {self.nlocals}"

@dataclass(frozen=True)
class Call:
    """call name nargs; id forma la etiqueta de retorno name$ret.id."""
    name: str
    nargs: int
    id: int
    line: int = _loc()
    file: Optional[str] = _file()

    @property
    def return_label(self) -> str:
        return f"{self.name}$ret.{self.id}"

    def pretty(self) -> str:
        return f"call {self.name} {self.nargs}"

@dataclass(frozen=True)
class Return:
    line: int = _loc()
    file: Optional[str] = _file()

    def pretty(self) -> str:
        return "return"

Instruction = Union[
    PushConst, PushSegment, PopSegment, PushStatic, PopStatic,
    Add, Sub, Neg, And, Or, Not, Eq, Gt, Lt,
    Label, Goto, IfGoto, Function, Call, Return,
]
