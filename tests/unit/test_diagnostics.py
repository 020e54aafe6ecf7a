import pytest
from src.hack_vm.diagnostics import error, warning, note, has_errors, TranslationError

def test_error_str():
    d = error("Comando desconocido: pish", line=3, file="Main.vm", hint="revise el opcode", source="pish local 3")
    s = str(d)
    assert s.startswith("Main.vm:3: ")
    assert "ERROR: Comando desconocido: pish" in s
    assert "-> 'pish local 3'" in s
    assert "(pista: revise el opcode)" in s

def test_severity_labels_and_has_errors():
    assert str(warning("w")).startswith("ADVERTENCIA: ")
    assert str(note("n")).startswith("NOTA: ")
    assert not has_errors([warning("w"), note("n")])
    assert has_errors([note("n"), error("e")])

def test_translation_error_summarizes_first_error():
    diags = [warning("solo aviso"), error("primero", line=1), error("segundo", line=2)]
    with pytest.raises(TranslationError) as info:
        raise TranslationError(diags)
    msg = str(info.value)
    assert "primero" in msg and "+1 errores más" in msg
    assert info.value.diagnostics == diags

@pytest.mark.parametrize("kwargs, prefix", [
    ({"file": "Prog"}, "Prog: ERROR: x"),
    ({"line": 4}, "4: ERROR: x"),
    ({"file": "A.vm", "line": 4, "col": 2}, "A.vm:4:2: ERROR: x"),
    ({}, "ERROR: x"),
])
def test_location_prefix(kwargs, prefix):
    assert str(error("x", **kwargs)) == prefix
