'''
dataclases del árbol de Jack e impresión legible (str)
'''

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Union

INDENT = "    "

# ---- Expresiones ----

@dataclass(frozen=True)
class IntLiteral:
    value: int

    def __str__(self) -> str:
        return str(self.value)

@dataclass(frozen=True)
class StringLiteral:
    value: str

    def __str__(self) -> str:
        return f'"{self.value}"'

@dataclass(frozen=True)
class KeywordConstant:
    """true | false | null | this"""
    value: str

    def __str__(self) -> str:
        return self.value

@dataclass(frozen=True)
class Identifier:
    name: str

    def __str__(self) -> str:
        return self.name

@dataclass(frozen=True)
class IndexIdentifier:
    """name[index]"""
    name: str
    index: "Expression"

    def __str__(self) -> str:
        return f"{self.name}[{bare(self.index)}]"

@dataclass(frozen=True)
class SubroutineCall:
    """(receiver.)?name(args); receiver es una clase o una variable."""
    name: str
    args: List["Expression"] = field(default_factory=list)
    receiver: Optional[str] = None

    def __str__(self) -> str:
        prefix = f"{self.receiver}." if self.receiver else ""
        return f"{prefix}{self.name}({', '.join(bare(a) for a in self.args)})"

@dataclass(frozen=True)
class UnaryOp:
    op: str
    operand: "Expression"

    def __str__(self) -> str:
        return f"({self.op}{self.operand})"

@dataclass(frozen=True)
class BinaryOp:
    """Operación binaria; Jack asocia de izquierda a derecha sin precedencia."""
    op: str
    left: "Expression"
    right: "Expression"

    def __str__(self) -> str:
        return f"({bare(self)})"

Expression = Union[IntLiteral, StringLiteral, KeywordConstant, Identifier,
                   IndexIdentifier, SubroutineCall, UnaryOp, BinaryOp]

def bare(exp: Expression) -> str:
    """Expresión sin el paréntesis exterior de una operación binaria."""
    if isinstance(exp, BinaryOp):
        return f"{exp.left} {exp.op} {exp.right}"
    return str(exp)

# ---- Sentencias ----

@dataclass(frozen=True)
class LetStatement:
    target: Union[Identifier, IndexIdentifier]
    value: Expression
    line: int = field(default=0, compare=False)

    def lines(self) -> List[str]:
        return [f"let {self.target} = {bare(self.value)};"]

@dataclass(frozen=True)
class DoStatement:
    call: SubroutineCall
    line: int = field(default=0, compare=False)

    def lines(self) -> List[str]:
        return [f"do {self.call};"]

@dataclass(frozen=True)
class ReturnStatement:
    value: Optional[Expression] = None
    line: int = field(default=0, compare=False)

    def lines(self) -> List[str]:
        if self.value is None:
            return ["return;"]
        return [f"return {bare(self.value)};"]

@dataclass(frozen=True)
class WhileStatement:
    condition: Expression
    body: List["Statement"] = field(default_factory=list)
    line: int = field(default=0, compare=False)

    def lines(self) -> List[str]:
        return [f"while ({bare(self.condition)}) {{", *_block(self.body), "}"]

@dataclass(frozen=True)
class IfStatement:
    condition: Expression
    then: List["Statement"] = field(default_factory=list)
    otherwise: Optional[List["Statement"]] = None
    line: int = field(default=0, compare=False)

    def lines(self) -> List[str]:
        out = [f"if ({bare(self.condition)}) {{", *_block(self.then)]
        if self.otherwise is not None:
            out += ["} else {", *_block(self.otherwise)]
        out.append("}")
        return out

Statement = Union[LetStatement, DoStatement, ReturnStatement, WhileStatement, IfStatement]

def _block(stmts: List[Statement]) -> List[str]:
    return [INDENT + l for s in stmts for l in s.lines()]

# ---- Declaraciones ----

@dataclass(frozen=True)
class ClassVarDec:
    """static|field <type> a, b;"""
    kind: str
    type: str
    names: List[str]

    def lines(self) -> List[str]:
        return [f"{self.kind} {self.type} {', '.join(self.names)};"]

@dataclass(frozen=True)
class VarDec:
    type: str
    names: List[str]

    def lines(self) -> List[str]:
        return [f"var {self.type} {', '.join(self.names)};"]

@dataclass(frozen=True)
class Parameter:
    type: str
    name: str

    def __str__(self) -> str:
        return f"{self.type} {self.name}"

@dataclass(frozen=True)
class SubroutineDec:
    kind: str               # constructor | function | method
    return_type: str
    name: str
    params: List[Parameter] = field(default_factory=list)
    locals: List[VarDec] = field(default_factory=list)
    body: List[Statement] = field(default_factory=list)

    def lines(self) -> List[str]:
        head = f"{self.kind} {self.return_type} {self.name}({', '.join(str(p) for p in self.params)}) {{"
        inner = [l for v in self.locals for l in v.lines()] + [l for s in self.body for l in s.lines()]
        return [head, *(INDENT + l for l in inner), "}"]

@dataclass(frozen=True)
class ClassDec:
    name: str
    vars: List[ClassVarDec] = field(default_factory=list)
    subroutines: List[SubroutineDec] = field(default_factory=list)

    def lines(self) -> List[str]:
        inner = [l for v in self.vars for l in v.lines()] + [l for s in self.subroutines for l in s.lines()]
        return [f"class {self.name} {{", *(INDENT + l for l in inner), "}"]

    def __str__(self) -> str:
        return "\n".join(self.lines()) + "\n"
