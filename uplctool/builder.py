"""Fluent construction of named Untyped Plutus Core programs.

``Builder.start`` returns a :class:`TermBuilder` that expects one term.
Each ``with_*`` call either supplies that term or opens a wrapper such as
a lambda or an application that expects more terms. Once the top-level
term is complete, the call returns a :class:`Builder` ready for
:meth:`Builder.build_named`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from .ast import (
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
    Term,
    UnitConstant,
    Var,
    Version,
)
from .builtins import DefaultFunction


@dataclass
class _Context:
    """Hands out one unique per distinct name text, in order of first use."""

    names: dict[str, int] = field(default_factory=dict)

    def get_name(self, text: str) -> Name:
        unique = self.names.setdefault(text, len(self.names))
        return Name(text, unique)


@dataclass(frozen=True)
class Builder:
    """A completed program: a version and its top-level term."""

    version: Version
    term: Term[Name]

    @staticmethod
    def start(major: int, minor: int, patch: int) -> TermBuilder:
        """Begin a program with the given version; the result expects its term."""
        version = (major, minor, patch)
        for part in version:
            if part < 0:
                raise ValueError(f"version numbers must be non-negative, got {part}")
        return TermBuilder(_Context(), lambda term: Builder(version, term))

    def build_named(self) -> Program[Name]:
        """Return the program in named form."""
        return Program(self.version, self.term)


class TermBuilder:
    """A position in a program under construction that expects one term."""

    def __init__(self, context: _Context, complete: Callable[[Term[Name]], Any]) -> None:
        self._context = context
        self._complete = complete

    def _nested(self, complete: Callable[[Term[Name]], Any]) -> TermBuilder:
        return TermBuilder(self._context, complete)

    # terms

    def with_int(self, value: int) -> Any:
        """Supply an integer constant."""
        return self._complete(Con(IntegerConstant(value)))

    def with_byte_string(self, data: bytes) -> Any:
        """Supply a bytestring constant."""
        return self._complete(Con(ByteStringConstant(bytes(data))))

    def with_string(self, text: str) -> Any:
        """Supply a string constant."""
        return self._complete(Con(StringConstant(text)))

    def with_unit(self) -> Any:
        """Supply the unit constant."""
        return self._complete(Con(UnitConstant()))

    def with_bool(self, value: bool) -> Any:
        """Supply a boolean constant."""
        return self._complete(Con(BoolConstant(bool(value))))

    def with_builtin(self, builtin: DefaultFunction) -> Any:
        """Supply a builtin function."""
        return self._complete(Builtin(builtin))

    def with_error(self) -> Any:
        """Supply the error term."""
        return self._complete(ErrorTerm())

    def with_var(self, name: str) -> Any:
        """Supply a variable reference."""
        return self._complete(Var(self._context.get_name(name)))

    # wrappers

    def with_lambda(self, name: str) -> TermBuilder:
        """Open a lambda binding ``name``; the result expects its body."""
        parameter = self._context.get_name(name)
        return self._nested(lambda body: self._complete(Lambda(parameter, body)))

    def with_apply(self) -> TermBuilder:
        """Open an application; the result expects the function, then the argument."""

        def function_done(function: Term[Name]) -> TermBuilder:
            return self._nested(
                lambda argument: self._complete(Apply(function, argument))
            )

        return self._nested(function_done)

    def with_delay(self) -> TermBuilder:
        """Open a delay; the result expects the delayed term."""
        return self._nested(lambda term: self._complete(Delay(term)))

    def with_force(self) -> TermBuilder:
        """Open a force; the result expects the forced term."""
        return self._nested(lambda term: self._complete(Force(term)))

    def with_identity(self, name: str) -> Any:
        """Supply the identity function ``(lam name name)``."""
        return self.with_lambda(name).with_var(name)