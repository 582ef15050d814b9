"""Command-line entry point: ``uplctool uplc flat|unflat|fmt``."""

from __future__ import annotations

import argparse
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Sequence

from .debruijn import debruijn_from_name, name_from_debruijn
from .flat import Binder, from_flat, to_flat
from .parser import parse_program
from .pretty import to_pretty


def format_bits(data: bytes) -> str:
    """Show bytes in binary, four per line, each followed by a separator."""
    return "".join(
        f"{byte:08b}" + ("\n" if index % 4 == 0 else " ")
        for index, byte in enumerate(data, start=1)
    )


def _output_path(args: argparse.Namespace, suffix: str) -> Path:
    return Path(args.out) if args.out else Path(f"{args.input.stem}{suffix}")


def _flat(args: argparse.Namespace) -> None:
    program = debruijn_from_name(parse_program(args.input.read_text(encoding="utf-8")))
    data = to_flat(program)
    if args.print_:
        print(format_bits(data))
    else:
        _output_path(args, ".flat").write_bytes(data)


def _unflat(args: argparse.Namespace) -> None:
    program = name_from_debruijn(from_flat(args.input.read_bytes(), Binder.DEBRUIJN))
    pretty = to_pretty(program)
    if args.print_:
        print(pretty)
    else:
        _output_path(args, ".uplc").write_text(pretty, encoding="utf-8")


def _fmt(args: argparse.Namespace) -> None:
    program = parse_program(args.input.read_text(encoding="utf-8"))
    args.input.write_text(to_pretty(program), encoding="utf-8")


def _package_version() -> str:
    try:
        return version("uplctool")
    except PackageNotFoundError:
        return "unknown"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="uplctool", description="Cardano smart contract toolchain"
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {_package_version()}"
    )
    groups = parser.add_subparsers(dest="group", required=True, metavar="COMMAND")
    uplc = groups.add_parser(
        "uplc",
        help="A subcommand for working with Untyped Plutus Core",
        description="Commands for working with Untyped Plutus Core",
    )
    commands = uplc.add_subparsers(dest="command", required=True, metavar="COMMAND")

    for name, help_text, handler in (
        ("flat", "Encode textual Untyped Plutus Core to flat bytes", _flat),
        ("unflat", "Decode flat bytes to textual Untyped Plutus Core", _unflat),
    ):
        command = commands.add_parser(name, help=help_text, description=help_text)
        command.add_argument("input", type=Path)
        command.add_argument("-p", "--print", action="store_true", dest="print_")
        command.add_argument("-o", "--out")
        command.set_defaults(handler=handler)

    fmt = commands.add_parser(
        "fmt",
        help="Format an Untyped Plutus Core program",
        description="Format an Untyped Plutus Core program",
    )
    fmt.add_argument("input", type=Path)
    fmt.set_defaults(handler=_fmt)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line; return the process exit status."""
    args = _build_parser().parse_args(argv)
    try:
        args.handler(args)
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())