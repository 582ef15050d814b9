"""Parser for the textual form of Untyped Plutus Core."""

from __future__ import annotations

import re
from functools import reduce
from typing import Callable, TypeVar

from .ast import (
    Apply,
    BoolConstant,
    Builtin,
    ByteStringConstant,
    Con,
    Constant,
    Delay,
    ErrorTerm,
    Force,
    IntegerConstant,
    Lambda,
    Name,
    Program,
    StringConstant,
    Term,
    UnitConstant,
    Var,
)
from .builtins import DefaultFunction

T = TypeVar("T")

_IDENT = re.compile(r"[A-Za-z0-9_]+")
_HEX_CHARS = re.compile(r"[A-Za-z0-9_]*")
_NUMBER = re.compile(r"-*[0-9]+")
_STRING_BODY = re.compile(r'[^"]*')
_BOOL = re.compile(r"True|False")
_WHITESPACE = " \n"
_ISIZE_MIN = -(2**63)
_ISIZE_MAX = 2**63 - 1


class ParseError(ValueError):
    """Raised when source text is not a valid program."""

    def __init__(
        self, message: str, line: int, column: int, expected: frozenset[str] = frozenset()
    ) -> None:
        super().__init__(f"{line}:{column}: {message}")
        self.line = line
        self.column = column
        self.expected = expected


class _Backtrack(Exception):
    pass


def parse_program(src: str) -> Program[Name]:
    """Parse a program, giving every distinct name text its own unique."""
    program = _Parser(src).parse()
    return Program(program.version, _Interner().term(program.term))


class _Parser:
    def __init__(self, src: str) -> None:
        self._src = src
        self._pos = 0
        self._fail_pos = 0
        self._expected: set[str] = set()

    def parse(self) -> Program[Name]:
        try:
            return self._program()
        except _Backtrack:
            expected = frozenset(self._expected)
            message = "expected one of " + ", ".join(sorted(expected))
            raise self._error(message, self._fail_pos, expected) from None

    # helpers

    def _error(
        self, message: str, pos: int, expected: frozenset[str] = frozenset()
    ) -> ParseError:
        line = self._src.count("\n", 0, pos) + 1
        column = pos - (self._src.rfind("\n", 0, pos) + 1) + 1
        return ParseError(message, line, column, expected)

    def _fail(self, what: str) -> None:
        if self._pos > self._fail_pos:
            self._fail_pos = self._pos
            self._expected = {what}
        elif self._pos == self._fail_pos:
            self._expected.add(what)
        raise _Backtrack

    def _lit(self, text: str) -> None:
        if self._src.startswith(text, self._pos):
            self._pos += len(text)
        else:
            self._fail(repr(text))

    def _regex(self, pattern: re.Pattern[str], what: str) -> str:
        match = pattern.match(self._src, self._pos)
        if match is None:
            self._fail(what)
        self._pos = match.end()
        return match.group()

    def _ws(self) -> None:
        while self._pos < len(self._src) and self._src[self._pos] in _WHITESPACE:
            self._pos += 1

    def _ws1(self) -> None:
        start = self._pos
        self._ws()
        if self._pos == start:
            self._fail("whitespace")

    def _choice(self, *alternatives: Callable[[], T]) -> T:
        start = self._pos
        for alternative in alternatives:
            try:
                return alternative()
            except _Backtrack:
                self._pos = start
        raise _Backtrack

    def _open(self, keyword: str) -> None:
        self._lit("(")
        self._ws()
        self._lit(keyword)

    def _close(self) -> None:
        self._ws()
        self._lit(")")

    # grammar

    def _program(self) -> Program[Name]:
        self._ws()
        self._open("program")
        self._ws1()
        version = self._version()
        self._ws1()
        term = self._term()
        self._close()
        self._ws()
        if self._pos != len(self._src):
            self._fail("EOF")
        return Program(version, term)

    def _version(self) -> tuple[int, int, int]:
        start = self._pos
        major = self._number()
        self._lit(".")
        minor = self._number()
        self._lit(".")
        patch = self._number()
        if min(major, minor, patch) < 0:
            raise self._error("version numbers must be non-negative", start)
        return (major, minor, patch)

    def _number(self) -> int:
        start = self._pos
        text = self._regex(_NUMBER, "number")
        try:
            value = int(text)
        except ValueError:
            value = None
        if value is None or not _ISIZE_MIN <= value <= _ISIZE_MAX:
            self._pos = start
            self._fail("isize")
        return value

    def _ident(self) -> str:
        return self._regex(_IDENT, "identifier")

    def _term(self) -> Term[Name]:
        return self._choice(
            self._constant,
            self._builtin,
            self._var,
            self._lambda,
            self._apply,
            self._delay,
            self._force,
            self._error_term,
        )

    def _constant(self) -> Term[Name]:
        self._open("con")
        self._ws1()
        constant = self._choice(
            self._integer, self._bytestring, self._string, self._unit, self._bool
        )
        self._close()
        return Con(constant)

    def _builtin(self) -> Term[Name]:
        self._open("builtin")
        self._ws1()
        start = self._pos
        name = self._ident()
        self._close()
        try:
            return Builtin(DefaultFunction.from_name(name))
        except ValueError as exc:
            raise self._error(str(exc), start) from None

    def _var(self) -> Term[Name]:
        return Var(Name(self._ident()))

    def _lambda(self) -> Term[Name]:
        self._open("lam")
        self._ws1()
        parameter = Name(self._ident())
        self._ws1()
        body = self._term()
        self._close()
        return Lambda(parameter, body)

    def _apply(self) -> Term[Name]:
        self._lit("[")
        self._ws()
        initial = self._term()
        self._ws1()
        arguments = [self._term()]
        self._ws()
        while True:
            save = self._pos
            try:
                arguments.append(self._term())
            except _Backtrack:
                self._pos = save
                break
            self._ws()
        self._lit("]")
        return reduce(Apply, arguments, initial)

    def _delay(self) -> Term[Name]:
        self._open("delay")
        self._ws1()
        term = self._term()
        self._close()
        return Delay(term)

    def _force(self) -> Term[Name]:
        self._open("force")
        self._ws1()
        term = self._term()
        self._close()
        return Force(term)

    def _error_term(self) -> Term[Name]:
        self._open("error")
        self._close()
        return ErrorTerm()

    def _integer(self) -> Constant:
        self._lit("integer")
        self._ws1()
        return IntegerConstant(self._number())

    def _bytestring(self) -> Constant:
        self._lit("bytestring")
        self._ws1()
        self._lit("#")
        start = self._pos
        digits = self._regex(_HEX_CHARS, "hex digits")
        try:
            return ByteStringConstant(bytes.fromhex(digits))
        except ValueError:
            raise self._error(f"invalid bytestring literal #{digits}", start) from None

    def _string(self) -> Constant:
        self._lit("string")
        self._ws1()
        self._lit('"')
        text = self._regex(_STRING_BODY, "string characters")
        self._lit('"')
        return StringConstant(text)

    def _unit(self) -> Constant:
        self._lit("unit")
        self._ws1()
        self._lit("()")
        return UnitConstant()

    def _bool(self) -> Constant:
        self._lit("bool")
        self._ws1()
        return BoolConstant(self._regex(_BOOL, "True or False") == "True")


class _Interner:
    """Assigns uniques to name texts in order of first appearance."""

    def __init__(self) -> None:
        self._ids: dict[str, int] = {}

    def _intern(self, name: Name) -> Name:
        return Name(name.text, self._ids.setdefault(name.text, len(self._ids)))

    def term(self, term: Term[Name]) -> Term[Name]:
        match term:
            case Var(name):
                return Var(self._intern(name))
            case Delay(inner):
                return Delay(self.term(inner))
            case Lambda(param, body):
                new_param = self._intern(param)
                return Lambda(new_param, self.term(body))
            case Apply(function, argument):
                new_function = self.term(function)
                return Apply(new_function, self.term(argument))
            case Force(inner):
                return Force(self.term(inner))
            case _:
                return term