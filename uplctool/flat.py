"""Flat serialisation of Untyped Plutus Core programs."""

from __future__ import annotations

from enum import Enum
from typing import Any

from . import bitstream
from .ast import (
    Apply,
    BoolConstant,
    ByteStringConstant,
    CharConstant,
    Con,
    Constant,
    Delay,
    ErrorTerm,
    FakeNamedDeBruijn,
    Force,
    IntegerConstant,
    Lambda,
    Name,
    NamedDeBruijn,
    Program,
    StringConstant,
    Term,
    UnitConstant,
    Var,
    Builtin,
)
from .bitstream import Decoder, Encoder, FlatDecodeError, FlatEncodeError
from .builtins import DefaultFunction

BUILTIN_TAG_WIDTH = 7
CONST_TAG_WIDTH = 4
TERM_TAG_WIDTH = 4


class Binder(Enum):
    """The form a program's variables and lambda parameters take."""

    NAME = "name"
    NAMED_DEBRUIJN = "named_debruijn"
    DEBRUIJN = "debruijn"
    FAKE_NAMED_DEBRUIJN = "fake_named_debruijn"

    @classmethod
    def of(cls, value: Any) -> Binder:
        """Return the binder form that ``value`` belongs to."""
        if isinstance(value, Name):
            return cls.NAME
        if isinstance(value, NamedDeBruijn):
            return cls.NAMED_DEBRUIJN
        if isinstance(value, FakeNamedDeBruijn):
            return cls.FAKE_NAMED_DEBRUIJN
        if isinstance(value, int) and not isinstance(value, bool):
            return cls.DEBRUIJN
        raise FlatEncodeError(f"not a binder: {value!r}")

    def encode_var(self, value: Any, encoder: Encoder) -> None:
        """Write a variable occurrence."""
        match self:
            case Binder.NAME:
                encoder.utf8(value.text)
                encoder.integer(value.unique)
            case Binder.NAMED_DEBRUIJN:
                encoder.utf8(value.text)
                encoder.word(value.index)
            case Binder.DEBRUIJN:
                encoder.word(value)
            case Binder.FAKE_NAMED_DEBRUIJN:
                encoder.word(value.index)

    def decode_var(self, decoder: Decoder) -> Any:
        """Read a variable occurrence."""
        match self:
            case Binder.NAME:
                text = decoder.utf8()
                return Name(text, decoder.integer())
            case Binder.NAMED_DEBRUIJN:
                text = decoder.utf8()
                return NamedDeBruijn(text, decoder.word())
            case Binder.DEBRUIJN:
                return decoder.word()
            case Binder.FAKE_NAMED_DEBRUIJN:
                return FakeNamedDeBruijn.from_index(decoder.word())

    def encode_binder(self, value: Any, encoder: Encoder) -> None:
        """Write a lambda parameter."""
        match self:
            case Binder.NAME:
                self.encode_var(value, encoder)
            case Binder.NAMED_DEBRUIJN:
                encoder.utf8(value.text)
            case Binder.DEBRUIJN | Binder.FAKE_NAMED_DEBRUIJN:
                pass

    def decode_binder(self, decoder: Decoder) -> Any:
        """Read a lambda parameter; index forms always get index 0."""
        match self:
            case Binder.NAME:
                return self.decode_var(decoder)
            case Binder.NAMED_DEBRUIJN:
                return NamedDeBruijn(decoder.utf8(), 0)
            case Binder.DEBRUIJN:
                return 0
            case Binder.FAKE_NAMED_DEBRUIJN:
                return FakeNamedDeBruijn.from_index(0)


def to_flat(program: Program) -> bytes:
    """Serialise a program to flat bytes."""
    encoder = Encoder()
    for part in program.version:
        encoder.word(part)
    encode_term(program.term, encoder)
    encoder.filler()
    return bytes(encoder.buffer)


def flat_hex(program: Program) -> str:
    """Serialise a program to flat bytes, as lower-case hex."""
    return to_flat(program).hex()


def from_flat(data: bytes, binder: Binder = Binder.DEBRUIJN) -> Program:
    """Deserialise a program whose variables take the given binder form."""

    def read(decoder: Decoder) -> Program:
        version = (decoder.word(), decoder.word(), decoder.word())
        return Program(version, decode_term(decoder, binder))

    return bitstream.decode(data, read)


def encode_term(term: Term, encoder: Encoder) -> None:
    """Write a term and everything below it."""
    match term:
        case Var(name):
            _encode_term_tag(Var.TAG, encoder)
            Binder.of(name).encode_var(name, encoder)
        case Delay(inner):
            _encode_term_tag(Delay.TAG, encoder)
            encode_term(inner, encoder)
        case Lambda(param, body):
            _encode_term_tag(Lambda.TAG, encoder)
            Binder.of(param).encode_binder(param, encoder)
            encode_term(body, encoder)
        case Apply(function, argument):
            _encode_term_tag(Apply.TAG, encoder)
            encode_term(function, encoder)
            encode_term(argument, encoder)
        case Con(constant):
            _encode_term_tag(Con.TAG, encoder)
            _encode_constant_value(constant, encoder)
        case Force(inner):
            _encode_term_tag(Force.TAG, encoder)
            encode_term(inner, encoder)
        case ErrorTerm():
            _encode_term_tag(ErrorTerm.TAG, encoder)
        case Builtin(function):
            _encode_term_tag(Builtin.TAG, encoder)
            encoder.bits(BUILTIN_TAG_WIDTH, int(function))
        case _:
            raise FlatEncodeError(f"not a term: {term!r}")


def decode_term(decoder: Decoder, binder: Binder) -> Term:
    """Read a term whose variables take the given binder form."""
    tag = decoder.bits8(TERM_TAG_WIDTH)
    if tag == Var.TAG:
        return Var(binder.decode_var(decoder))
    if tag == Delay.TAG:
        return Delay(decode_term(decoder, binder))
    if tag == Lambda.TAG:
        param = binder.decode_binder(decoder)
        return Lambda(param, decode_term(decoder, binder))
    if tag == Apply.TAG:
        function = decode_term(decoder, binder)
        return Apply(function, decode_term(decoder, binder))
    if tag == Con.TAG:
        return Con(_decode_constant_value(decoder))
    if tag == Force.TAG:
        return Force(decode_term(decoder, binder))
    if tag == ErrorTerm.TAG:
        return ErrorTerm()
    if tag == Builtin.TAG:
        return Builtin(DefaultFunction.from_tag(decoder.bits8(BUILTIN_TAG_WIDTH)))
    raise FlatDecodeError(f"Unknown term constructor tag: {tag}")


def encode_constant(tag: int, encoder: Encoder) -> None:
    """Write a constant's type tag as a one-item list of 4-bit tags."""
    encoder.encode_list_with([tag], encode_constant_tag)


def decode_constant(decoder: Decoder) -> int:
    """Read a constant's type tag written by :func:`encode_constant`."""
    tags = decoder.decode_list_with(decode_constant_tag)
    if len(tags) > 1:
        raise FlatDecodeError(
            "Improper encoding on constant tag. "
            "Should be list of one item encoded in 4 bits"
        )
    if not tags:
        raise FlatDecodeError("Missing constant tag")
    return tags[0]


def encode_constant_tag(tag: int, encoder: Encoder) -> None:
    """Write one 4-bit constant tag."""
    _safe_encode_bits(CONST_TAG_WIDTH, tag, encoder)


def decode_constant_tag(decoder: Decoder) -> int:
    """Read one 4-bit constant tag."""
    return decoder.bits8(CONST_TAG_WIDTH)


def _encode_term_tag(tag: int, encoder: Encoder) -> None:
    _safe_encode_bits(TERM_TAG_WIDTH, tag, encoder)


def _safe_encode_bits(num_bits: int, value: int, encoder: Encoder) -> None:
    if 2**num_bits < value:
        raise FlatEncodeError(
            f"Overflow detected, cannot fit {value} in {num_bits} bits."
        )
    encoder.bits(num_bits, value)


def _encode_constant_value(constant: Constant, encoder: Encoder) -> None:
    match constant:
        case IntegerConstant(value):
            encode_constant(0, encoder)
            encoder.integer(value)
        case ByteStringConstant(value):
            encode_constant(1, encoder)
            encoder.bytes(value)
        case StringConstant(value):
            encode_constant(2, encoder)
            encoder.utf8(value)
        case CharConstant(value):
            # characters have no constant tag of their own
            encoder.bytes(value.encode("utf-8"))
        case UnitConstant():
            encode_constant(3, encoder)
        case BoolConstant(value):
            encode_constant(4, encoder)
            encoder.bool(value)
        case _:
            raise FlatEncodeError(f"not a constant: {constant!r}")


def _decode_constant_value(decoder: Decoder) -> Constant:
    tag = decode_constant(decoder)
    if tag == 0:
        return IntegerConstant(decoder.integer())
    if tag == 1:
        return ByteStringConstant(decoder.bytes())
    if tag == 2:
        return StringConstant(decoder.utf8())
    if tag == 3:
        return UnitConstant()
    if tag == 4:
        return BoolConstant(decoder.bool())
    raise FlatDecodeError(f"Unknown constant constructor tag: {tag}")