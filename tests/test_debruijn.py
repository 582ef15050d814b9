import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from uplctool.ast import (
    FAKE_NAME,
    Apply,
    BoolConstant,
    Builtin,
    Con,
    Delay,
    ErrorTerm,
    FakeNamedDeBruijn,
    Force,
    IntegerConstant,
    Lambda,
    Name,
    NamedDeBruijn,
    Program,
    Var,
)
from uplctool.builtins import DefaultFunction
from uplctool.debruijn import (
    Converter,
    DeBruijnError,
    FreeIndexError,
    FreeUniqueError,
    debruijn_from_name,
    debruijn_from_named_debruijn,
    fake_from_named_debruijn,
    name_from_debruijn,
    name_from_named_debruijn,
    named_debruijn_from_debruijn,
    named_debruijn_from_fake,
    named_debruijn_from_name,
)

VERSION = (1, 2, 3)


def _identity(text="x", unique=0):
    return Lambda(Name(text, unique), Var(Name(text, unique)))


def _names(term):
    match term:
        case Var(name):
            yield name
        case Lambda(param, body):
            yield param
            yield from _names(body)
        case Delay(inner) | Force(inner):
            yield from _names(inner)
        case Apply(function, argument):
            yield from _names(function)
            yield from _names(argument)


@st.composite
def closed_debruijn(draw, depth=0, size=5):
    leaves = ["con", "error", "builtin"] + (["var"] if depth else [])
    nodes = ["lam", "apply", "delay", "force"] if size > 0 else []
    kind = draw(st.sampled_from(leaves + nodes))
    if kind == "var":
        return Var(draw(st.integers(min_value=1, max_value=depth)))
    if kind == "con":
        return Con(IntegerConstant(draw(st.integers(-100, 100))))
    if kind == "error":
        return ErrorTerm()
    if kind == "builtin":
        return Builtin(draw(st.sampled_from(list(DefaultFunction))))
    if kind == "lam":
        return Lambda(0, draw(closed_debruijn(depth + 1, size - 1)))
    if kind == "apply":
        return Apply(
            draw(closed_debruijn(depth, size - 1)), draw(closed_debruijn(depth, size - 1))
        )
    inner = draw(closed_debruijn(depth, size - 1))
    return Delay(inner) if kind == "delay" else Force(inner)


def test_identity_to_debruijn():
    result = debruijn_from_name(Program(VERSION, _identity()))
    assert result == Program(VERSION, Lambda(0, Var(1)))


def test_version_is_preserved():
    result = named_debruijn_from_name(Program((11, 22, 33), _identity()))
    assert result.version == (11, 22, 33)


def test_free_unique_raises():
    with pytest.raises(FreeUniqueError) as info:
        debruijn_from_name(Program(VERSION, Var(Name("y", 7))))
    assert info.value.unique == 7
    assert isinstance(info.value, DeBruijnError)


def test_free_index_raises():
    with pytest.raises(FreeIndexError) as info:
        name_from_debruijn(Program(VERSION, Lambda(0, Var(5))))
    assert info.value.index == 5


def test_free_unique_message():
    with pytest.raises(FreeUniqueError, match="Free Unique `3`"):
        Converter().name_to_named_debruijn(Var(Name("z", 3)))


def test_shadowing_is_alpha_equivalent():
    shadowed = Lambda(Name("x", 0), Lambda(Name("x", 0), Var(Name("x", 0))))
    distinct = Lambda(Name("a", 4), Lambda(Name("b", 5), Var(Name("b", 5))))
    assert Converter().name_to_debruijn(shadowed) == Converter().name_to_debruijn(distinct)


def test_outer_reference_differs_from_inner():
    outer = Lambda(Name("a", 0), Lambda(Name("b", 1), Var(Name("a", 0))))
    inner = Lambda(Name("a", 0), Lambda(Name("b", 1), Var(Name("b", 1))))
    assert Converter().name_to_debruijn(outer) != Converter().name_to_debruijn(inner)


def test_named_debruijn_keeps_texts_and_matches_indices():
    term = Apply(_identity("foo", 0), Lambda(Name("bar", 1), Con(BoolConstant(True))))
    named = Converter().name_to_named_debruijn(term)
    assert [n.text for n in _names(named)] == [n.text for n in _names(term)]
    plain = Converter().name_to_debruijn(term)
    assert Converter().named_debruijn_to_debruijn(named) == plain


def test_sibling_lambdas_round_trip():
    term = Apply(_identity("x", 0), _identity("y", 1))
    program = Program(VERSION, term)
    back = debruijn_from_name(name_from_debruijn(debruijn_from_name(program)))
    assert back == debruijn_from_name(program)


def test_generated_names_follow_unique():
    program = Program(VERSION, Lambda(0, Lambda(0, Apply(Var(1), Var(2)))))
    named = name_from_debruijn(program)
    names = list(_names(named.term))
    assert all(name.text == f"i_{name.unique}" for name in names)
    assert len({name.unique for name in names}) == 2


def test_named_debruijn_to_name_keeps_texts():
    term = Lambda(NamedDeBruijn("foo", 0), Var(NamedDeBruijn("foo", 1)))
    named = name_from_named_debruijn(Program(VERSION, term))
    texts = [name.text for name in _names(named.term)]
    assert texts == ["foo", "foo"]
    assert named_debruijn_from_name(named) == Program(VERSION, term)


def test_debruijn_to_named_uses_placeholder_text():
    result = named_debruijn_from_debruijn(Program(VERSION, Lambda(0, Var(1))))
    assert all(name.text == FAKE_NAME for name in _names(result.term))
    assert debruijn_from_named_debruijn(result) == Program(VERSION, Lambda(0, Var(1)))


def test_fake_round_trip():
    term = Lambda(NamedDeBruijn("foo", 0), Delay(Var(NamedDeBruijn("foo", 1))))
    program = Program(VERSION, term)
    fake = fake_from_named_debruijn(program)
    assert all(isinstance(name, FakeNamedDeBruijn) for name in _names(fake.term))
    back = named_debruijn_from_fake(fake)
    assert back == program
    assert [n.text for n in _names(back.term)] == ["foo", "foo"]


def test_leaves_pass_through():
    term = Apply(Force(Builtin(DefaultFunction.ADD_INTEGER)), Delay(ErrorTerm()))
    assert Converter().name_to_debruijn(term) == term
    assert Converter().debruijn_to_name(term) == term


@settings(max_examples=100)
@given(closed_debruijn())
def test_debruijn_name_round_trip(term):
    program = Program(VERSION, term)
    assert debruijn_from_name(name_from_debruijn(program)) == program


@settings(max_examples=100)
@given(closed_debruijn())
def test_debruijn_named_round_trip(term):
    program = Program(VERSION, term)
    named = named_debruijn_from_debruijn(program)
    assert debruijn_from_named_debruijn(named) == program
    assert debruijn_from_named_debruijn(named_debruijn_from_fake(
        fake_from_named_debruijn(named)
    )) == program