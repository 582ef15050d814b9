"""Syntax tree of Untyped Plutus Core programs.

Terms are generic in the binder type: ``Name`` when parsed from text,
``NamedDeBruijn``, ``FakeNamedDeBruijn`` or a plain ``int`` de Bruijn
index after conversion.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Generic, Tuple, TypeVar

from .builtins import DefaultFunction

B = TypeVar("B")

Version = Tuple[int, int, int]

#: Name given to binders that only carry a de Bruijn index.
FAKE_NAME = "i"


@dataclass(frozen=True, eq=False)
class Name:
    """A textual name with the unique id assigned by interning.

    Two names are equal when their uniques are equal.
    """

    text: str
    unique: int = 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Name):
            return NotImplemented
        return self.unique == other.unique

    def __hash__(self) -> int:
        return hash(self.unique)


@dataclass(frozen=True, eq=False)
class NamedDeBruijn:
    """A textual name together with a de Bruijn index.

    Two values are equal when their indices are equal.
    """

    text: str
    index: int

    @classmethod
    def from_index(cls, index: int) -> NamedDeBruijn:
        """Wrap a bare index, injecting a placeholder name."""
        return cls(FAKE_NAME, index)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NamedDeBruijn):
            return NotImplemented
        return self.index == other.index

    def __hash__(self) -> int:
        return hash(self.index)


@dataclass(frozen=True)
class FakeNamedDeBruijn:
    """A named de Bruijn index whose name is not part of the flat encoding."""

    named: NamedDeBruijn

    @classmethod
    def from_index(cls, index: int) -> FakeNamedDeBruijn:
        """Wrap a bare index, injecting a placeholder name."""
        return cls(NamedDeBruijn.from_index(index))

    @property
    def index(self) -> int:
        return self.named.index

    @property
    def text(self) -> str:
        return self.named.text


class Constant:
    """Base of the constant values a term may hold."""


@dataclass(frozen=True)
class IntegerConstant(Constant):
    value: int


@dataclass(frozen=True)
class ByteStringConstant(Constant):
    value: bytes


@dataclass(frozen=True)
class StringConstant(Constant):
    value: str


@dataclass(frozen=True)
class CharConstant(Constant):
    value: str


@dataclass(frozen=True)
class UnitConstant(Constant):
    pass


@dataclass(frozen=True)
class BoolConstant(Constant):
    value: bool


class Term(Generic[B]):
    """Base of all terms; ``TAG`` is the term's flat constructor tag."""

    TAG: ClassVar[int]


@dataclass(frozen=True)
class Var(Term[B]):
    TAG: ClassVar[int] = 0
    name: B


@dataclass(frozen=True)
class Delay(Term[B]):
    TAG: ClassVar[int] = 1
    term: Term[B]


@dataclass(frozen=True)
class Lambda(Term[B]):
    TAG: ClassVar[int] = 2
    parameter_name: B
    body: Term[B]


@dataclass(frozen=True)
class Apply(Term[B]):
    TAG: ClassVar[int] = 3
    function: Term[B]
    argument: Term[B]


@dataclass(frozen=True)
class Con(Term[B]):
    TAG: ClassVar[int] = 4
    constant: Constant


@dataclass(frozen=True)
class Force(Term[B]):
    TAG: ClassVar[int] = 5
    term: Term[B]


@dataclass(frozen=True)
class ErrorTerm(Term[B]):
    TAG: ClassVar[int] = 6


@dataclass(frozen=True)
class Builtin(Term[B]):
    TAG: ClassVar[int] = 7
    function: DefaultFunction


@dataclass(frozen=True)
class Program(Generic[B]):
    """A version triple and a term."""

    version: Version
    term: Term[B] = field()