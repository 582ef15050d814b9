"""Conversion of terms between named and de Bruijn binder forms.

De Bruijn indices are plain ints; the innermost enclosing binder has index 1
and a binder position itself always carries index 0.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, ContextManager, Iterator

from .ast import (
    Apply,
    Builtin,
    Con,
    Delay,
    ErrorTerm,
    FakeNamedDeBruijn,
    Force,
    Lambda,
    Name,
    NamedDeBruijn,
    Program,
    Term,
    Var,
)


class DeBruijnError(ValueError):
    """Raised when a term cannot be converted between binder forms."""


class FreeUniqueError(DeBruijnError):
    """A variable refers to a unique that no enclosing lambda binds."""

    def __init__(self, unique: int) -> None:
        super().__init__(f"Free Unique `{unique}`")
        self.unique = unique


class FreeIndexError(DeBruijnError):
    """A variable refers to an index that no enclosing lambda binds."""

    def __init__(self, index: int) -> None:
        super().__init__(f"Free Index `{index}`")
        self.index = index


class _BiMap:
    """Two-way mapping between uniques and levels within one scope."""

    def __init__(self) -> None:
        self.by_unique: dict[int, int] = {}
        self.by_level: dict[int, int] = {}

    def insert(self, unique: int, level: int) -> None:
        self.by_unique[unique] = level
        self.by_level[level] = unique

    def remove(self, unique: int, level: int) -> None:
        self.by_unique.pop(unique, None)
        self.by_level.pop(level, None)


_Binder = Callable[[object], ContextManager[object]]


def _mapping(convert: Callable[[object], object]) -> _Binder:
    @contextmanager
    def bind(param: object) -> Iterator[object]:
        yield convert(param)

    return bind


class Converter:
    """Tracks binder scopes while rewriting a single term."""

    def __init__(self) -> None:
        self._level = 0
        self._levels: list[_BiMap] = [_BiMap()]
        self._next_unique = 0

    def name_to_named_debruijn(self, term: Term[Name]) -> Term[NamedDeBruijn]:
        """Replace uniques with indices, keeping the texts."""

        @contextmanager
        def bind(param: Name) -> Iterator[NamedDeBruijn]:
            with self._enter_unique(param.unique) as index:
                yield NamedDeBruijn(param.text, index)

        return self._walk(
            term, lambda name: NamedDeBruijn(name.text, self._get_index(name.unique)), bind
        )

    def name_to_debruijn(self, term: Term[Name]) -> Term[int]:
        """Replace names with bare indices."""

        @contextmanager
        def bind(param: Name) -> Iterator[int]:
            with self._enter_unique(param.unique) as index:
                yield index

        return self._walk(term, lambda name: self._get_index(name.unique), bind)

    def named_debruijn_to_name(self, term: Term[NamedDeBruijn]) -> Term[Name]:
        """Replace indices with fresh uniques, keeping the texts."""

        @contextmanager
        def bind(param: NamedDeBruijn) -> Iterator[Name]:
            with self._enter_binder(param.index) as unique:
                yield Name(param.text, unique)

        return self._walk(
            term, lambda name: Name(name.text, self._get_unique(name.index)), bind
        )

    def debruijn_to_name(self, term: Term[int]) -> Term[Name]:
        """Replace indices with fresh names of the form ``i_<unique>``."""

        def var(index: int) -> Name:
            unique = self._get_unique(index)
            return Name(f"i_{unique}", unique)

        @contextmanager
        def bind(param: int) -> Iterator[Name]:
            with self._enter_binder(param) as unique:
                yield Name(f"i_{unique}", unique)

        return self._walk(term, var, bind)

    def named_debruijn_to_debruijn(self, term: Term[NamedDeBruijn]) -> Term[int]:
        """Drop the texts, keeping the indices."""
        convert = lambda name: name.index  # noqa: E731
        return self._walk(term, convert, _mapping(convert))

    def debruijn_to_named_debruijn(self, term: Term[int]) -> Term[NamedDeBruijn]:
        """Attach the placeholder text to every index."""
        return self._walk(
            term, NamedDeBruijn.from_index, _mapping(NamedDeBruijn.from_index)
        )

    def fake_named_debruijn_to_named_debruijn(
        self, term: Term[FakeNamedDeBruijn]
    ) -> Term[NamedDeBruijn]:
        """Unwrap fake named indices."""
        convert = lambda name: name.named  # noqa: E731
        return self._walk(term, convert, _mapping(convert))

    def named_debruijn_to_fake_named_debruijn(
        self, term: Term[NamedDeBruijn]
    ) -> Term[FakeNamedDeBruijn]:
        """Wrap named indices as fake named indices."""
        return self._walk(term, FakeNamedDeBruijn, _mapping(FakeNamedDeBruijn))

    def _walk(self, term: Term, var: Callable[[object], object], bind: _Binder) -> Term:
        match term:
            case Var(name):
                return Var(var(name))
            case Delay(inner):
                return Delay(self._walk(inner, var, bind))
            case Lambda(param, body):
                with bind(param) as new_param:
                    new_body = self._walk(body, var, bind)
                return Lambda(new_param, new_body)
            case Apply(function, argument):
                return Apply(
                    self._walk(function, var, bind), self._walk(argument, var, bind)
                )
            case Force(inner):
                return Force(self._walk(inner, var, bind))
            case Con() | ErrorTerm() | Builtin():
                return term
            case _:
                raise TypeError(f"not a term: {term!r}")

    @contextmanager
    def _enter_unique(self, unique: int) -> Iterator[int]:
        self._levels[self._level].insert(unique, self._level)
        index = self._get_index(unique)
        self._start_scope()
        yield index
        self._end_scope()
        self._levels[self._level].remove(unique, self._level)

    @contextmanager
    def _enter_binder(self, index: int) -> Iterator[int]:
        self._levels[self._level].insert(self._next_unique, self._level)
        self._next_unique += 1
        unique = self._get_unique(index)
        self._start_scope()
        yield unique
        self._end_scope()

    def _get_index(self, unique: int) -> int:
        for scope in reversed(self._levels):
            found = scope.by_unique.get(unique)
            if found is not None:
                return self._level - found
        raise FreeUniqueError(unique)

    def _get_unique(self, index: int) -> int:
        level = self._level - index
        for scope in reversed(self._levels):
            found = scope.by_level.get(level)
            if found is not None:
                return found
        raise FreeIndexError(index)

    def _start_scope(self) -> None:
        self._level += 1
        self._levels.append(_BiMap())

    def _end_scope(self) -> None:
        self._level -= 1
        self._levels.pop()


def debruijn_from_name(program: Program[Name]) -> Program[int]:
    """Convert a parsed program to de Bruijn form."""
    return Program(program.version, Converter().name_to_debruijn(program.term))


def named_debruijn_from_name(program: Program[Name]) -> Program[NamedDeBruijn]:
    """Convert a parsed program to named de Bruijn form."""
    return Program(program.version, Converter().name_to_named_debruijn(program.term))


def name_from_debruijn(program: Program[int]) -> Program[Name]:
    """Convert a de Bruijn program to named form with generated names."""
    return Program(program.version, Converter().debruijn_to_name(program.term))


def name_from_named_debruijn(program: Program[NamedDeBruijn]) -> Program[Name]:
    """Convert a named de Bruijn program to named form."""
    return Program(program.version, Converter().named_debruijn_to_name(program.term))


def debruijn_from_named_debruijn(program: Program[NamedDeBruijn]) -> Program[int]:
    """Drop the names from a named de Bruijn program."""
    return Program(program.version, Converter().named_debruijn_to_debruijn(program.term))


def named_debruijn_from_debruijn(program: Program[int]) -> Program[NamedDeBruijn]:
    """Attach placeholder names to a de Bruijn program."""
    return Program(program.version, Converter().debruijn_to_named_debruijn(program.term))


def fake_from_named_debruijn(
    program: Program[NamedDeBruijn],
) -> Program[FakeNamedDeBruijn]:
    """Wrap the binders of a named de Bruijn program as fake names."""
    return Program(
        program.version, Converter().named_debruijn_to_fake_named_debruijn(program.term)
    )


def named_debruijn_from_fake(
    program: Program[FakeNamedDeBruijn],
) -> Program[NamedDeBruijn]:
    """Unwrap the binders of a fake named program."""
    return Program(
        program.version, Converter().fake_named_debruijn_to_named_debruijn(program.term)
    )