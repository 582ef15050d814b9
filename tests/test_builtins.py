import pytest

from uplctool.bitstream import FlatDecodeError
from uplctool.builtins import DefaultFunction


@pytest.mark.parametrize("function", list(DefaultFunction))
def test_tag_round_trip(function):
    assert DefaultFunction.from_tag(int(function)) is function


@pytest.mark.parametrize("function", list(DefaultFunction))
def test_name_round_trip(function):
    assert DefaultFunction.from_name(str(function)) is function


def test_pinned_tags():
    assert DefaultFunction.from_tag(0) is DefaultFunction.ADD_INTEGER
    assert int(DefaultFunction.from_name("verifyEcdsaSecp256k1Signature")) == 52
    assert int(DefaultFunction.from_name("serialiseData")) == 51
    assert int(DefaultFunction.from_name("mkNilPairData")) == 50


def test_textual_names():
    assert str(DefaultFunction.from_tag(0)) == "addInteger"
    assert str(DefaultFunction.from_tag(18)) == "sha2_256"
    assert f"{DefaultFunction.from_tag(45)}" == "unIData"


def test_tags_are_unique_and_cover_range():
    functions = [DefaultFunction.from_tag(tag) for tag in range(54)]
    assert len(set(functions)) == 54
    with pytest.raises(FlatDecodeError):
        DefaultFunction.from_tag(54)


def test_names_are_unique():
    names = [str(DefaultFunction.from_tag(tag)) for tag in range(54)]
    assert len(set(names)) == len(names)
    assert [DefaultFunction.from_name(name) for name in names] == [
        DefaultFunction.from_tag(tag) for tag in range(54)
    ]


def test_unknown_tag_raises():
    with pytest.raises(FlatDecodeError, match="Default Function not found - 120"):
        DefaultFunction.from_tag(120)


def test_unknown_name_raises():
    with pytest.raises(ValueError, match="Default Function not found - nope"):
        DefaultFunction.from_name("nope")


def test_name_lookup_is_case_sensitive():
    with pytest.raises(ValueError):
        DefaultFunction.from_name("AddInteger")