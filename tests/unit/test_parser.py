import pytest
from src.hack_vm.parser import Parser, parse
from src.hack_vm.ast import (
    PushConst, PushSegment, PopSegment, PushStatic, PopStatic,
    Add, Sub, Neg, And, Or, Not, Eq, Gt, Lt,
    Label, Goto, IfGoto, Function, Call, Return,
)

def _one(line: str, stem: str = "Foo"):
    nodes, diags = parse(line, stem=stem, filename="Foo.vm")
    assert not [d for d in diags if d.severity == "error"], diags
    assert len(nodes) == 1
    return nodes[0]

@pytest.mark.parametrize("line, expected", [
    ("push constant 3", PushConst(3)),
    ("push local 3", PushSegment("local", 3)),
    (" push  local  3 ", PushSegment("local", 3)),
    ("push local 3 // hello world", PushSegment("local", 3)),
    ("pop that 5", PopSegment("that", 5)),
    ("push pointer 1", PushSegment("pointer", 1)),
    ("pop temp 7", PopSegment("temp", 7)),
    ("push static 2", PushStatic("Foo", 2)),
    ("pop static 0", PopStatic("Foo", 0)),
    ("add", Add()), ("sub", Sub()), ("neg", Neg()),
    ("and", And()), ("or", Or()), ("not", Not()),
    ("return", Return()),
])
def test_parse_single_line(line, expected):
    assert _one(line) == expected

def test_location_is_recorded_but_not_compared():
    ins = _one("\n\npush constant 1")
    assert ins.line == 3 and ins.file == "Foo.vm"
    assert ins == PushConst(1)

def test_ids_advance_per_non_blank_line():
    src = "push constant 1\n\n// comentario\npush constant 2\neq\nlt\n"
    nodes, diags = parse(src)
    assert not diags
    eq, lt = nodes[2], nodes[3]
    assert eq == Eq(2) and lt == Lt(3)

def test_function_context_binds_labels():
    src = """
    label before
    function f.main 0
    label loop
    goto loop
    if-goto loop
    function g.other 2
    goto end
    """
    nodes, diags = parse(src)
    assert not diags
    assert nodes[0] == Label("before", "")
    assert nodes[1] == Function("f.main", 0)
    assert nodes[2] == Label("loop", "f.main")
    assert nodes[3] == Goto("loop", "f.main")
    assert isinstance(nodes[4], IfGoto) and nodes[4].function == "f.main" and nodes[4].id == 4
    assert nodes[6] == Goto("end", "g.other")

def test_call_takes_id():
    nodes, diags = parse("push constant 1\ncall Math.abs 1\n")
    assert not diags
    assert nodes[1] == Call("Math.abs", 1, 1)
    assert nodes[1].return_label == "Math.abs$ret.1"

def test_parser_state_spans_several_texts():
    p = Parser()
    p.parse("function A.f 0\neq\n", stem="A", filename="A.vm")
    p.parse("label x\ngt\npush static 1\n", stem="B", filename="B.vm")
    ins = p.instructions
    assert ins[1] == Eq(1)
    # la función activa sigue siendo A.f en el segundo archivo
    assert ins[2] == Label("x", "A.f")
    assert ins[3] == Gt(3)
    assert ins[4] == PushStatic("B", 1)
    assert ins[4].file == "B.vm"
    assert p.next_id == 5

@pytest.mark.parametrize("line, fragment", [
    ("pish local 3", "Comando desconocido"),
    ("push local", "espera 2 operando"),
    ("add 3", "espera 0 operando"),
    ("label", "espera 1 operando"),
    ("push heap 3", "Segmento inválido"),
    ("push local x", "Índice no entero"),
    ("push local -1", "Índice negativo"),
    ("pop constant 3", "pop sobre constant"),
    ("push constant 32768", "Constante fuera de rango"),
    ("push constant -1", "Constante fuera de rango"),
    ("push pointer 2", "fuera de rango para pointer"),
    ("pop temp 8", "fuera de rango para temp"),
    ("function f x", "Número de locales no entero"),
    ("call f -2", "Número de argumentos negativo"),
])
def test_syntax_errors(line, fragment):
    nodes, diags = parse(line, filename="bad.vm")
    assert nodes == []
    errs = [d for d in diags if d.severity == "error"]
    assert len(errs) == 1
    assert fragment in errs[0].message
    assert errs[0].line == 1 and errs[0].file == "bad.vm"
    assert errs[0].source == line

def test_all_bad_lines_are_reported():
    nodes, diags = parse("push constant 1\nfoo\npush local\nadd\n")
    assert [d.line for d in diags] == [2, 3]
    assert len(nodes) == 2

def test_boundary_constants_accepted():
    nodes, diags = parse("push constant 0\npush constant 32767\n")
    assert not diags
    assert nodes == [PushConst(0), PushConst(32767)]

def test_static_slot_warning():
    nodes, diags = parse("push static 240", stem="Big")
    assert nodes == [PushStatic("Big", 240)]
    assert [d.severity for d in diags] == ["advertencia"]

def test_nonstandard_name_warning():
    nodes, diags = parse("function 1bad 0")
    assert nodes == [Function("1bad", 0)]
    assert diags[0].severity == "advertencia"
