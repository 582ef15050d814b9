import pytest
from hypothesis import given
from hypothesis import strategies as st

from uplctool.zigzag import to_signed, to_unsigned


def test_convert_negative_round_trip():
    n = -12
    assert to_signed(to_unsigned(n)) == n


@pytest.mark.parametrize(
    "signed, unsigned",
    [(0, 0), (-1, 1), (1, 2), (-2, 3), (2, 4), (-12, 23)],
)
def test_known_values(signed, unsigned):
    assert to_unsigned(signed) == unsigned
    assert to_signed(unsigned) == signed


@given(st.integers())
def test_round_trip(n):
    assert to_signed(to_unsigned(n)) == n


@given(st.integers())
def test_unsigned_is_non_negative(n):
    assert to_unsigned(n) >= 0


def test_to_signed_rejects_negative():
    with pytest.raises(ValueError):
        to_signed(-1)