"""Pretty printing of named Untyped Plutus Core programs.

Layout follows a Wadler-style document algebra rendered at a width of
80 columns: a group is printed flat when it fits, and broken otherwise.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .ast import (
    Apply,
    BoolConstant,
    Builtin,
    ByteStringConstant,
    CharConstant,
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

WIDTH = 80


@dataclass(frozen=True)
class _Text:
    text: str


@dataclass(frozen=True)
class _Line:
    """A line break, or ``flat`` when its group is laid out flat."""

    flat: str


@dataclass(frozen=True)
class _Nest:
    indent: int
    doc: "_Doc"


@dataclass(frozen=True)
class _Group:
    doc: "_Doc"


@dataclass(frozen=True)
class _Concat:
    parts: tuple["_Doc", ...]


_Doc = Union[_Text, _Line, _Nest, _Group, _Concat]

_LINE = _Line(" ")
_SOFT_LINE = _Line("")


def _cat(*parts: _Doc | str) -> _Concat:
    return _Concat(tuple(_Text(p) if isinstance(p, str) else p for p in parts))


def _width(text: str) -> int:
    return len(text.encode("utf-8"))


def to_pretty(program: Program[Name]) -> str:
    """Render a named program as source text.

    Lines holding nothing but whitespace are emptied.
    """
    rendered = _render(_program_doc(program), WIDTH)
    return "\n".join(
        "" if not line.strip() else line for line in rendered.split("\n")
    )


def _program_doc(program: Program[Name]) -> _Doc:
    version = ".".join(str(part) for part in program.version)
    return _cat(
        _Nest(2, _cat("(", "program", _LINE, version, _LINE, _term_doc(program.term))),
        _SOFT_LINE,
        ")",
    )


def _keyword_form(keyword: str, *rest: _Doc | str) -> _Doc:
    return _cat("(", _Nest(2, _cat(keyword, _LINE, *rest)), _SOFT_LINE, ")")


def _term_doc(term: Term[Name]) -> _Doc:
    match term:
        case Var(name):
            doc: _Doc = _Text(name.text)
        case Delay(inner):
            doc = _keyword_form("delay", _term_doc(inner))
        case Lambda(param, body):
            doc = _keyword_form("lam", param.text, _LINE, _term_doc(body))
        case Apply(function, argument):
            doc = _cat(
                "[",
                _Nest(
                    2,
                    _cat(
                        _LINE,
                        _Group(_cat(_term_doc(function), _LINE, _term_doc(argument))),
                    ),
                ),
                _LINE,
                "]",
            )
        case Con(constant):
            doc = _keyword_form("con", _constant_doc(constant))
        case Force(inner):
            doc = _keyword_form("force", _term_doc(inner))
        case ErrorTerm():
            doc = _cat("(", _Nest(2, _Text("error")), _LINE, _SOFT_LINE, ")")
        case Builtin(function):
            doc = _keyword_form("builtin", str(function))
        case _:
            raise TypeError(f"not a term: {term!r}")
    return _Group(doc)


def _constant_doc(constant: Constant) -> _Doc:
    match constant:
        case IntegerConstant(value):
            return _cat("integer", _LINE, str(value))
        case ByteStringConstant(value):
            return _cat("bytestring", _LINE, "#", value.hex())
        case StringConstant(value):
            return _cat("string", _LINE, '"', value, '"')
        case CharConstant(value):
            raise ValueError(f"char constant {value!r} has no textual form")
        case UnitConstant():
            return _cat("unit", _LINE, "()")
        case BoolConstant(value):
            return _cat("bool", _LINE, "true" if value else "false")
        case _:
            raise TypeError(f"not a constant: {constant!r}")


_Entry = tuple[int, bool, _Doc]


def _render(doc: _Doc, width: int) -> str:
    out: list[str] = []
    pos = 0
    stack: list[_Entry] = [(0, False, doc)]
    while stack:
        indent, flat, current = stack.pop()
        match current:
            case _Text(text):
                out.append(text)
                pos += _width(text)
            case _Line(alt):
                if flat:
                    out.append(alt)
                    pos += _width(alt)
                else:
                    out.append("\n" + " " * indent)
                    pos = indent
            case _Nest(extra, inner):
                stack.append((indent + extra, flat, inner))
            case _Group(inner):
                fits = flat or _fits(inner, stack, width - pos)
                stack.append((indent, fits, inner))
            case _Concat(parts):
                stack.extend((indent, flat, part) for part in reversed(parts))
    return "".join(out)


def _fits(doc: _Doc, stack: list[_Entry], remaining: int) -> bool:
    """Whether ``doc`` laid out flat, and what follows up to the next break, fits."""
    pending: list[tuple[bool, _Doc]] = [(True, doc)]
    below = len(stack)
    while True:
        if pending:
            flat, current = pending.pop()
        elif below == 0:
            return True
        else:
            below -= 1
            _, flat, current = stack[below]
        match current:
            case _Text(text):
                remaining -= _width(text)
                if remaining < 0:
                    return False
            case _Line(alt):
                if not flat:
                    return True
                remaining -= _width(alt)
                if remaining < 0:
                    return False
            case _Nest(_, inner) | _Group(inner):
                pending.append((flat, inner))
            case _Concat(parts):
                pending.extend((flat, part) for part in reversed(parts))