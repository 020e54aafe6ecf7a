import pytest
from src.hack_vm.utils import is_constant15, parse_int, MAX_CONSTANT

def test_constant_range():
    assert MAX_CONSTANT == 32767
    assert is_constant15(0)
    assert is_constant15(32767)
    assert not is_constant15(32768)
    assert not is_constant15(-1)

@pytest.mark.parametrize("tok, expected", [
    ("0", 0), ("17", 17), ("-1", -1), ("+5", 5), ("007", 7),
])
def test_parse_int_ok(tok, expected):
    assert parse_int(tok) == expected

@pytest.mark.parametrize("tok", ["", "x", "1_000", "0x10", "3.5", "-", "٣"])
def test_parse_int_rejects(tok):
    with pytest.raises(ValueError):
        parse_int(tok)
