import pytest
from src.hack_vm.codewriter import CodeWriter, emit, write, write_bootstrap
from src.hack_vm.parser import parse
from src.hack_vm.ast import (
    PushConst, PushSegment, PopSegment, PushStatic, PopStatic,
    Add, Sub, Neg, And, Or, Not, Eq, Gt, Lt,
    Label, Goto, IfGoto, Function, Call, Return,
)

PUSH = ["@SP", "A=M", "M=D", "@SP", "M=M+1"]
POP = ["@SP", "AM=M-1", "D=M"]

def _emit(ins):
    cw = CodeWriter()
    emit(ins, cw)
    return cw.lines

def _body(ins):
    lines = _emit(ins)
    assert lines[0] == f"// {ins.pretty()}"
    return lines[1:]

def test_push_constant():
    assert _body(PushConst(8)) == ["@8", "D=A", *PUSH]

@pytest.mark.parametrize("segment, base", [
    ("local", "LCL"), ("argument", "ARG"), ("this", "THIS"), ("that", "THAT"),
])
def test_push_pop_indirect(segment, base):
    assert _body(PushSegment(segment, 2)) == [f"@{base}", "D=M", "@2", "A=D+A", "D=M", *PUSH]
    assert _body(PopSegment(segment, 4)) == [
        f"@{base}", "D=M", "@4", "D=D+A", "@R15", "M=D", *POP, "@R15", "A=M", "M=D",
    ]

@pytest.mark.parametrize("segment, index, addr", [
    ("pointer", 0, "THIS"), ("pointer", 1, "THAT"), ("temp", 0, "5"), ("temp", 7, "12"),
])
def test_push_pop_direct(segment, index, addr):
    assert _body(PushSegment(segment, index)) == [f"@{addr}", "D=M", *PUSH]
    assert _body(PopSegment(segment, index)) == [
        f"@{addr}", "D=A", "@R15", "M=D", *POP, "@R15", "A=M", "M=D",
    ]

def test_static_uses_file_symbol():
    assert _body(PushStatic("Foo", 3)) == ["@Foo.3", "D=M", *PUSH]
    assert _body(PopStatic("Foo", 3)) == ["@Foo.3", "D=A", "@R15", "M=D", *POP, "@R15", "A=M", "M=D"]

@pytest.mark.parametrize("ins, comp", [
    (Add(), "D+M"), (Sub(), "M-D"), (And(), "D&M"), (Or(), "D|M"),
])
def test_binary_ops(ins, comp):
    assert _body(ins) == [*POP, "A=A-1", f"M={comp}"]

@pytest.mark.parametrize("ins, comp", [(Neg(), "-M"), (Not(), "!M")])
def test_unary_ops(ins, comp):
    assert _body(ins) == ["@SP", "A=M-1", f"M={comp}"]

@pytest.mark.parametrize("ins, op, jump", [
    (Eq(1234), "eq", "JEQ"), (Gt(1234), "gt", "JGT"), (Lt(1234), "lt", "JLT"),
])
def test_comparisons(ins, op, jump):
    assert _body(ins) == [
        *POP, "A=A-1", "D=M-D",
        f"@is-{op}-1234", f"D;{jump}",
        "@end-1234", "D=0;JMP",
        f"(is-{op}-1234)", "D=-1",
        "(end-1234)",
        "@SP", "A=M-1", "M=D",
    ]

def test_label_goto_qualified_by_function():
    assert _body(Label("loop", "f.main")) == ["(f.main.loop)"]
    assert _body(Goto("loop", "f.main")) == ["@f.main.loop", "0;JMP"]

def test_label_outside_function():
    assert _body(Label("top", "")) == ["(.top)"]

def test_if_goto():
    assert _body(IfGoto("loop", 9, "f.main")) == [
        *POP, "@f.main.loop$9", "D;JEQ", "@f.main.loop", "0;JMP", "(f.main.loop$9)",
    ]

def test_function_zeroes_locals():
    assert _body(Function("f.mul", 2)) == [
        "(f.mul)", "@SP", "D=M", "@LCL", "AM=D",
        "M=0", "A=A+1", "M=0", "A=A+1",
        "D=A", "@SP", "M=D",
    ]

def test_function_without_locals():
    assert _body(Function("f.id", 0)) == ["(f.id)", "@SP", "D=M", "@LCL", "AM=D", "D=A", "@SP", "M=D"]

def test_call_without_arguments_pushes_placeholder():
    assert _body(Call("g.foo", 0, 7)) == [
        "@0", "D=A", *PUSH,
        "@g.foo$ret.7", "D=A", *PUSH,
        "@LCL", "D=M", *PUSH,
        "@ARG", "D=M", *PUSH,
        "@THIS", "D=M", *PUSH,
        "@THAT", "D=M", *PUSH,
        "@6", "D=A", "@SP", "D=M-D", "@ARG", "M=D",
        "@g.foo", "0;JMP",
        "(g.foo$ret.7)",
    ]

def test_call_with_arguments():
    body = _body(Call("Math.multiply", 2, 3))
    assert body[:2] == ["@Math.multiply$ret.3", "D=A"]
    assert "@7" in body
    assert body[-3:] == ["@Math.multiply", "0;JMP", "(Math.multiply$ret.3)"]

def test_return():
    body = _body(Return())
    assert body[:17] == [
        "@SP", "A=M-1", "D=M", "@ARG", "A=M", "M=D",
        "@LCL", "D=M", "@SP", "M=D",
        "@ARG", "D=M+1", "@R14", "M=D",
        *POP,
    ]
    targets = [body[i] for i in range(len(body) - 1) if body[i + 1] == "M=D" and body[i - 1] == "D=M"
               and body[i - 2] == "AM=M-1"]
    assert targets == ["@THAT", "@THIS", "@ARG", "@LCL", "@R15"]
    assert body[-6:] == ["@R14", "D=M", "@SP", "M=D", "@R15", "A=M;JMP"]

def test_bootstrap():
    cw = CodeWriter()
    write_bootstrap(cw)
    assert cw.lines == [
        "// bootstrap", "@261", "D=A", "@SP", "M=D",
        "@LCL", "M=0", "@ARG", "M=0", "@THIS", "M=0", "@THAT", "M=0",
        "@Sys.init", "0;JMP",
    ]

def test_bootstrap_custom_sp():
    cw = CodeWriter()
    write_bootstrap(cw, sp_init=256)
    assert cw.lines[1] == "@256"

def test_unknown_instruction_is_type_error():
    class Bogus:
        def pretty(self):
            return "bogus"
    with pytest.raises(TypeError):
        emit(Bogus(), CodeWriter())

def test_write_empty_program():
    assert write([], bootstrap=False) == ""
    out = write([], bootstrap=True)
    assert out.startswith("// bootstrap\n@261\n") and out.endswith("0;JMP\n")

def test_write_every_line_ends_with_lf():
    out = write([PushConst(1), PushConst(2), Add()], bootstrap=False)
    assert out.endswith("\n") and "\r" not in out
    assert out.splitlines()[0] == "// push constant 1"

# ---- Escenarios completos ----

def _asm(src: str, stem: str = "Main") -> list:
    nodes, diags = parse(src, stem=stem)
    assert not diags
    return [l for l in write(nodes, bootstrap=False).splitlines() if not l.startswith("//")]

def test_scenario_push_add_pop_this():
    lines = _asm("push constant 8\npush local 2\nadd\npop this 4\n")
    assert lines == [
        "@8", "D=A", *PUSH,
        "@LCL", "D=M", "@2", "A=D+A", "D=M", *PUSH,
        *POP, "A=A-1", "M=D+M",
        "@THIS", "D=M", "@4", "D=D+A", "@R15", "M=D", *POP, "@R15", "A=M", "M=D",
    ]

def test_scenario_loop_inside_function():
    lines = _asm("function f.main 0\nlabel loop\ngoto loop\n")
    assert "(f.main.loop)" in lines
    i = lines.index("@f.main.loop")
    assert lines[i + 1] == "0;JMP"

def test_comparison_labels_are_unique():
    lines = _asm("push constant 1\npush constant 1\neq\npush constant 2\npush constant 1\ngt\neq\n")
    defined = [l for l in lines if l.startswith("(")]
    assert defined == ["(is-eq-2)", "(end-2)", "(is-gt-5)", "(end-5)", "(is-eq-6)", "(end-6)"]

def test_return_label_defined_and_referenced_once():
    lines = _asm("function Main.main 0\ncall Math.abs 1\ncall Math.abs 1\nreturn\n")
    for label in ("Math.abs$ret.1", "Math.abs$ret.2"):
        assert lines.count(f"({label})") == 1
        assert lines.count(f"@{label}") == 1

def test_comments_and_whitespace_do_not_change_output():
    plain = "function f 1\npush argument 0\npop local 0\nreturn\n"
    noisy = "// encabezado\nfunction   f 1   // inicio\n\n\tpush argument 0\npop local 0\n// fin\nreturn"
    a, _ = parse(plain, stem="X")
    b, _ = parse(noisy, stem="X")
    assert write(a, bootstrap=False) == write(b, bootstrap=False)

@pytest.mark.parametrize("ins", [PushSegment("static", 0), PopSegment("constant", 1)])
def test_segment_without_address_is_rejected(ins):
    with pytest.raises(ValueError):
        emit(ins, CodeWriter())
