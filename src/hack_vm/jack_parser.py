# src/hack_vm/jack_parser.py
from __future__ import annotations
from typing import List, Optional, Tuple

from .jack_lexer import Token, tokenize
from .diagnostics import Diagnostic, error, has_errors
from .jack_ast import (
    Expression, Statement,
    IntLiteral, StringLiteral, KeywordConstant, Identifier, IndexIdentifier,
    SubroutineCall, UnaryOp, BinaryOp,
    LetStatement, DoStatement, ReturnStatement, WhileStatement, IfStatement,
    ClassVarDec, VarDec, Parameter, SubroutineDec, ClassDec,
)

BINARY_OPS = frozenset("+-*/&|<>=")
UNARY_OPS = frozenset("-~")
KEYWORD_CONSTANTS = frozenset({"true", "false", "null", "this"})
PRIMITIVE_TYPES = frozenset({"int", "char", "boolean"})

_KIND_NAMES = {"IDENT": "identificador", "INT": "entero", "STRING": "cadena", "KEYWORD": "palabra clave"}

class JackSyntaxError(Exception):
    """Primer error de sintaxis; el parser no intenta recuperarse."""

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(str(diagnostic))

def _describe(tok: Token) -> str:
    return "fin de archivo" if tok.type == "EOF" else f"'{tok.literal}'"

class JackParser:
    """Parser descendente recursivo sobre la lista de tokens (un token de lookahead,
    dos para distinguir name / name[...] / name(...) / name.f(...))."""

    def __init__(self, tokens: List[Token], *, filename: Optional[str] = None):
        self.tokens = tokens
        self.pos = 0
        self.filename = filename

    # ---- helpers ----

    @property
    def cur(self) -> Token:
        return self.tokens[self.pos]

    def peek(self, k: int = 1) -> Token:
        return self.tokens[min(self.pos + k, len(self.tokens) - 1)]

    def advance(self) -> Token:
        tok = self.cur
        if tok.type != "EOF":
            self.pos += 1
        return tok

    def check(self, type_: str, literal: Optional[str] = None) -> bool:
        return self.cur.is_(type_, literal)

    def accept(self, type_: str, literal: Optional[str] = None) -> Optional[Token]:
        if self.check(type_, literal):
            return self.advance()
        return None

    def fail(self, expected: str) -> JackSyntaxError:
        tok = self.cur
        return JackSyntaxError(error(f"se esperaba {expected}, se obtuvo {_describe(tok)}",
                                     line=tok.line, file=self.filename))

    def expect(self, type_: str, literal: Optional[str] = None) -> Token:
        tok = self.accept(type_, literal)
        if tok is None:
            raise self.fail(f"'{literal}'" if literal else _KIND_NAMES.get(type_, type_.lower()))
        return tok

    def symbol(self, s: str) -> Token:
        return self.expect("SYMBOL", s)

    def ident(self) -> str:
        return self.expect("IDENT").literal

    # ---- estructura del programa ----

    def parse_class(self) -> ClassDec:
        """class <name> { classVarDec* subroutineDec* } EOF"""
        self.expect("KEYWORD", "class")
        name = self.ident()
        self.symbol("{")
        vars_: List[ClassVarDec] = []
        while self.check("KEYWORD", "static") or self.check("KEYWORD", "field"):
            vars_.append(self.class_var_dec())
        subs: List[SubroutineDec] = []
        while self.cur.type == "KEYWORD" and self.cur.literal in ("constructor", "function", "method"):
            subs.append(self.subroutine_dec())
        self.symbol("}")
        if self.cur.type != "EOF":
            raise self.fail("fin de archivo")
        return ClassDec(name, vars_, subs)

    def type_name(self, *, allow_void: bool = False) -> str:
        tok = self.cur
        if tok.type == "KEYWORD" and (tok.literal in PRIMITIVE_TYPES or (allow_void and tok.literal == "void")):
            return self.advance().literal
        if tok.type == "IDENT":
            return self.advance().literal
        raise self.fail("int | char | boolean | nombre de clase" + (" | void" if allow_void else ""))

    def _names(self) -> List[str]:
        names = [self.ident()]
        while self.accept("SYMBOL", ","):
            names.append(self.ident())
        self.symbol(";")
        return names

    def class_var_dec(self) -> ClassVarDec:
        kind = self.advance().literal
        type_ = self.type_name()
        return ClassVarDec(kind, type_, self._names())

    def subroutine_dec(self) -> SubroutineDec:
        kind = self.advance().literal
        ret = self.type_name(allow_void=True)
        name = self.ident()
        self.symbol("(")
        params = self.parameter_list()
        self.symbol(")")
        self.symbol("{")
        locals_: List[VarDec] = []
        while self.accept("KEYWORD", "var"):
            type_ = self.type_name()
            locals_.append(VarDec(type_, self._names()))
        body = self.statements()
        self.symbol("}")
        return SubroutineDec(kind, ret, name, params, locals_, body)

    def parameter_list(self) -> List[Parameter]:
        params: List[Parameter] = []
        if self.check("SYMBOL", ")"):
            return params
        while True:
            type_ = self.type_name()
            params.append(Parameter(type_, self.ident()))
            if not self.accept("SYMBOL", ","):
                return params

    # ---- sentencias ----

    def statements(self) -> List[Statement]:
        out: List[Statement] = []
        while True:
            tok = self.cur
            if tok.is_("KEYWORD", "let"):
                out.append(self.let_statement())
            elif tok.is_("KEYWORD", "if"):
                out.append(self.if_statement())
            elif tok.is_("KEYWORD", "while"):
                out.append(self.while_statement())
            elif tok.is_("KEYWORD", "do"):
                out.append(self.do_statement())
            elif tok.is_("KEYWORD", "return"):
                out.append(self.return_statement())
            else:
                return out

    def let_statement(self) -> LetStatement:
        line = self.advance().line
        name = self.ident()
        target: Identifier | IndexIdentifier = Identifier(name)
        if self.accept("SYMBOL", "["):
            target = IndexIdentifier(name, self.expression())
            self.symbol("]")
        self.symbol("=")
        value = self.expression()
        self.symbol(";")
        return LetStatement(target, value, line=line)

    def _block(self) -> List[Statement]:
        self.symbol("{")
        body = self.statements()
        self.symbol("}")
        return body

    def _condition(self) -> Expression:
        self.symbol("(")
        cond = self.expression()
        self.symbol(")")
        return cond

    def if_statement(self) -> IfStatement:
        line = self.advance().line
        cond = self._condition()
        then = self._block()
        otherwise = self._block() if self.accept("KEYWORD", "else") else None
        return IfStatement(cond, then, otherwise, line=line)

    def while_statement(self) -> WhileStatement:
        line = self.advance().line
        cond = self._condition()
        return WhileStatement(cond, self._block(), line=line)

    def do_statement(self) -> DoStatement:
        line = self.advance().line
        if self.cur.type != "IDENT":
            raise self.fail("llamada a subrutina")
        call = self.subroutine_call()
        self.symbol(";")
        return DoStatement(call, line=line)

    def return_statement(self) -> ReturnStatement:
        line = self.advance().line
        if self.accept("SYMBOL", ";"):
            return ReturnStatement(None, line=line)
        value = self.expression()
        self.symbol(";")
        return ReturnStatement(value, line=line)

    # ---- expresiones ----

    def expression(self) -> Expression:
        """term (op term)*, asociando a la izquierda."""
        exp = self.term()
        while self.cur.type == "SYMBOL" and self.cur.literal in BINARY_OPS:
            op = self.advance().literal
            exp = BinaryOp(op, exp, self.term())
        return exp

    def term(self) -> Expression:
        tok = self.cur
        if tok.type == "INT":
            self.advance()
            return IntLiteral(int(tok.literal))
        if tok.type == "STRING":
            self.advance()
            return StringLiteral(tok.literal)
        if tok.type == "KEYWORD" and tok.literal in KEYWORD_CONSTANTS:
            self.advance()
            return KeywordConstant(tok.literal)
        if tok.type == "IDENT":
            nxt = self.peek()
            if nxt.is_("SYMBOL", "(") or nxt.is_("SYMBOL", "."):
                return self.subroutine_call()
            self.advance()
            if self.accept("SYMBOL", "["):
                index = self.expression()
                self.symbol("]")
                return IndexIdentifier(tok.literal, index)
            return Identifier(tok.literal)
        if tok.is_("SYMBOL", "("):
            self.advance()
            inner = self.expression()
            self.symbol(")")
            return inner
        if tok.type == "SYMBOL" and tok.literal in UNARY_OPS:
            self.advance()
            return UnaryOp(tok.literal, self.term())
        raise self.fail("un término")

    def subroutine_call(self) -> SubroutineCall:
        first = self.ident()
        receiver = None
        name = first
        if self.accept("SYMBOL", "."):
            receiver, name = first, self.ident()
        self.symbol("(")
        args: List[Expression] = []
        if not self.check("SYMBOL", ")"):
            args.append(self.expression())
            while self.accept("SYMBOL", ","):
                args.append(self.expression())
        self.symbol(")")
        return SubroutineCall(name, args, receiver)

def parse_jack(text: str, *, filename: Optional[str] = None) -> Tuple[Optional[ClassDec], List[Diagnostic]]:
    """
    Devuelve (clase, diagnostics). Si hay errores léxicos o de sintaxis la
    clase es None; se informa solo el primer error de sintaxis.
    """
    tokens, diags = tokenize(text, filename=filename)
    if has_errors(diags):
        return None, diags
    try:
        cls = JackParser(tokens, filename=filename).parse_class()
    except JackSyntaxError as ex:
        diags.append(ex.diagnostic)
        return None, diags
    return cls, diags
