# uplctool

Tools for Untyped Plutus Core (UPLC) programs:

- a parser for the textual form (`uplctool.parser`),
- a pretty-printer (`uplctool.pretty`),
- conversion between named and de Bruijn binder forms (`uplctool.debruijn`),
- an encoder and decoder for the compact `flat` binary format
  (`uplctool.flat`, built on the bit-level `uplctool.bitstream`),
- a fluent program builder (`uplctool.builder`).

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Command line

The `uplctool` command has a `uplc` group with three subcommands.

Encode a textual program to flat bytes. By default this writes
`<stem>.flat` in the current directory; `-o/--out` picks another path, and
`-p/--print` shows the bytes in binary instead of writing a file, four bytes
per line:

```
uplctool uplc flat program.uplc
uplctool uplc flat program.uplc --out program.bin
uplctool uplc flat program.uplc --print
```

Decode flat bytes back to text, written to `<stem>.uplc` in the current
directory (or the `--out` path), or printed with `--print`. Decoded variables
get generated names of the form `i_<n>`:

```
uplctool uplc unflat program.flat
uplctool uplc unflat program.flat --print
```

Reformat a textual program in place:

```
uplctool uplc fmt program.uplc
```

`uplctool --version` prints the installed version. On a read, parse,
conversion or encoding failure the command prints `Error: ...` to standard
error and exits with status 1.

## Library use

```python
from uplctool.parser import parse_program
from uplctool.debruijn import debruijn_from_name, name_from_debruijn
from uplctool.flat import Binder, flat_hex, from_flat, to_flat
from uplctool.pretty import to_pretty

program = parse_program("(program 11.22.33 (con integer 11))")
debruijn = debruijn_from_name(program)

encoded = to_flat(debruijn)
print(flat_hex(debruijn))  # 0b16214805 81

decoded = from_flat(encoded, Binder.DEBRUIJN)
print(to_pretty(name_from_debruijn(decoded)))
```

`from_flat` takes the binder form the data was written in: `Binder.DEBRUIJN`
(the default, plain `int` indices), `Binder.NAMED_DEBRUIJN`, `Binder.NAME` or
`Binder.FAKE_NAMED_DEBRUIJN`. `to_flat` works out the form from the program
itself.

The syntax tree lives in `uplctool.ast`: `Program`, the terms `Var`, `Delay`,
`Lambda`, `Apply`, `Con`, `Force`, `ErrorTerm` and `Builtin`, the constants
`IntegerConstant`, `ByteStringConstant`, `StringConstant`, `CharConstant`,
`UnitConstant` and `BoolConstant`, and the binder types `Name`,
`NamedDeBruijn` and `FakeNamedDeBruijn`. Builtins are members of
`uplctool.builtins.DefaultFunction`, looked up with `from_name` or `from_tag`.

Programs can also be assembled with the builder, which gives each distinct
name one unique id:

```python
from uplctool.builder import Builder

program = (
    Builder.start(1, 2, 3)
    .with_apply()
    .with_lambda("x")
    .with_var("x")
    .with_int(1)
    .build_named()
)
```

`with_identity(name)` is shorthand for a lambda whose body is its own
parameter.

Errors are raised as exceptions, all subclasses of `ValueError`:
`ParseError` for bad source text, `FreeUniqueError` and `FreeIndexError`
(both `DeBruijnError`) for unbound variables, and `FlatEncodeError` and
`FlatDecodeError` for the binary format.

## Limitations

- Programs are not evaluated or type-checked; the package only reads,
  writes, converts and prints them.
- The parser accepts integer, bytestring, string, unit and bool constants.
  String literals have no escapes and cannot contain `"`.
- Character constants cannot be printed, and have no flat tag to be decoded
  from.
- The printer writes booleans as `true`/`false`, while the parser reads only
  `True`/`False`, so programs holding boolean constants do not survive
  `uplctool uplc fmt` twice.