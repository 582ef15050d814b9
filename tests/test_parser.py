import pytest
from hypothesis import given
from hypothesis import strategies as st

from uplctool.ast import (
    Apply,
    BoolConstant,
    Builtin,
    ByteStringConstant,
    Con,
    Delay,
    ErrorTerm,
    Force,
    IntegerConstant,
    Lambda,
    Name,
    Program,
    StringConstant,
    UnitConstant,
    Var,
)
from uplctool.builtins import DefaultFunction
from uplctool.parser import ParseError, parse_program


def test_parse_program():
    code = """
        (program 11.22.33
            (con integer 11)
        )
        """
    assert parse_program(code) == Program((11, 22, 33), Con(IntegerConstant(11)))


@pytest.mark.parametrize(
    "source, constant",
    [
        ("(con integer -42)", IntegerConstant(-42)),
        ("(con bytestring #00ff10)", ByteStringConstant(b"\x00\xff\x10")),
        ("(con bytestring #)", ByteStringConstant(b"")),
        ('(con string "hello there")', StringConstant("hello there")),
        ("(con unit ())", UnitConstant()),
        ("(con bool True)", BoolConstant(True)),
        ("(con bool False)", BoolConstant(False)),
    ],
)
def test_constants(source, constant):
    program = parse_program(f"(program 1.0.0 {source})")
    assert program.term == Con(constant)


def test_builtin():
    program = parse_program("(program 1.0.0 (builtin addInteger))")
    assert program.term == Builtin(DefaultFunction.ADD_INTEGER)


def test_error_delay_force():
    program = parse_program("(program 1.0.0 (force (delay (error))))")
    assert program.term == Force(Delay(ErrorTerm()))


def test_lambda_uniques_follow_first_appearance():
    program = parse_program("(program 1.0.0 (lam x (lam y [x y])))")
    outer = program.term
    assert outer.parameter_name == Name("x", 0)
    inner = outer.body
    assert inner.parameter_name == Name("y", 1)
    assert inner.body == Apply(Var(Name("x", 0)), Var(Name("y", 1)))
    assert inner.body.function.name.text == "x"


def test_same_text_shares_unique():
    program = parse_program("(program 1.0.0 [(lam x x) (lam x x)])")
    uniques = {
        program.term.function.parameter_name.unique,
        program.term.function.body.name.unique,
        program.term.argument.parameter_name.unique,
        program.term.argument.body.name.unique,
    }
    assert uniques == {0}


def test_apply_folds_left():
    program = parse_program("(program 1.0.0 [f a b])")
    f, a, b = Name("f", 0), Name("a", 1), Name("b", 2)
    assert program.term == Apply(Apply(Var(f), Var(a)), Var(b))


def test_apply_needs_an_argument():
    with pytest.raises(ParseError):
        parse_program("(program 1.0.0 [f])")


def test_unknown_builtin():
    with pytest.raises(ParseError, match="Default Function not found - nope"):
        parse_program("(program 1.0.0 (builtin nope))")


def test_invalid_hex():
    with pytest.raises(ParseError, match="bytestring"):
        parse_program("(program 1.0.0 (con bytestring #abc))")


def test_integer_out_of_range():
    with pytest.raises(ParseError):
        parse_program(f"(program 1.0.0 (con integer {2**63}))")


def test_tab_is_not_whitespace():
    with pytest.raises(ParseError):
        parse_program("(program\t1.0.0 (error))")


def test_trailing_text_rejected():
    with pytest.raises(ParseError):
        parse_program("(program 1.0.0 (error)) extra")


def test_error_position_single_line():
    with pytest.raises(ParseError) as info:
        parse_program("(program 1.0.0 (con integer 1)")
    assert (info.value.line, info.value.column) == (1, 31)
    assert "')'" in info.value.expected


def test_error_position_multi_line():
    with pytest.raises(ParseError) as info:
        parse_program("(program 1.0.0\n(con integer 1)")
    assert (info.value.line, info.value.column) == (2, 16)


@given(st.integers(min_value=-(2**63), max_value=2**63 - 1))
def test_any_isize_integer(value):
    program = parse_program(f"(program 11.22.33 (con integer {value}))")
    assert program == Program((11, 22, 33), Con(IntegerConstant(value)))


@given(st.text(alphabet=st.characters(blacklist_characters='"')))
def test_any_string_without_quotes(text):
    program = parse_program(f'(program 11.22.33 (con string "{text}"))')
    assert program.term == Con(StringConstant(text))