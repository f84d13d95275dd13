"""Command line editor for Intel HEX files."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from tihex.hexfile import HexError, HexFile, _parse_hex

_VERSION = "2022.03.02.001"


class _ArgumentError(ValueError):
    """Bad command line arguments."""

    def __init__(self, message: str, to_stdout: bool = False, show_help: bool = False) -> None:
        super().__init__(message)
        self.to_stdout = to_stdout
        self.show_help = show_help


@dataclass
class Options:
    """Parsed command line options."""

    stdin: bool = False
    stdout: bool = False
    filename: str = ""
    data: list[tuple[int, bytes]] = field(default_factory=list)
    address_set: bool = False
    show_help: bool = False
    show_version: bool = False


def help_text() -> str:
    """Return the usage message."""
    return "\n".join(
        [
            "Textual Intel Hex Editor",
            "file processing:\ttihex [options] [input filename]",
            "stdin:\t\t\ttihex [options] -i ",
            "--help or -h: this help message.",
            "--stdin or -i: process stdin.",
            "--stdout or -o: show final data on stdout.",
            "--address or -a: set address to overwrite, hexadecimal 0 to "
            'FFFFFFFFFFFFFFFF. E.g. "-a EAF00F1".',
            '--data or -d: define data, hex values comma separated. E.g. "-d 0,0,1a,95,AB".',
            "--version or -v: show version.",
        ]
    )


def version_text() -> str:
    """Return the version message."""
    return f"Textual Intel Hex Editor\nVersion: {_VERSION}"


def _parse_bytes(text: str) -> list[str]:
    parts = text.split(",")
    if parts[-1] == "":
        parts.pop()
    return parts


def parse_args(argv: Sequence[str]) -> Options:
    """Parse arguments; raise ValueError on invalid ones."""
    options = Options()
    last_address = 0
    args = iter(argv)
    for arg in args:
        if arg in ("-i", "--stdin"):
            options.stdin = True
        elif arg in ("-o", "--stdout"):
            options.stdout = True
        elif arg in ("-a", "--address"):
            value = next(args, None)
            if value is None:
                raise _ArgumentError(
                    "Address switch must have a hexadecimal value as following argument.",
                    to_stdout=True,
                    show_help=True,
                )
            try:
                last_address = _parse_hex(value)
            except ValueError:
                raise _ArgumentError(f"invalid hexadecimal value: on {value}") from None
            options.address_set = True
        elif arg in ("-d", "--data"):
            value = next(args, None)
            if value is None:
                raise _ArgumentError(
                    "Data switch must have a comma separated list as following argument.",
                    show_help=True,
                )
            items = _parse_bytes(value)
            start = last_address
            last_address += len(items)
            values = bytearray()
            for item in items:
                try:
                    byte = _parse_hex(item)
                except ValueError:
                    raise _ArgumentError(f"invalid hexadecimal value: on {item}") from None
                if byte > 0xFF:
                    raise _ArgumentError(
                        f"{item} is greater than 0xFF. Use byte values only.", to_stdout=True
                    )
                values.append(byte)
            options.data.append((start, bytes(values)))
        elif arg in ("-h", "--help"):
            options.show_help = True
            return options
        elif arg in ("-v", "--version"):
            options.show_version = True
            return options
        else:
            options.filename = arg
    return options


def _load(hexfile: HexFile, lines: Iterable[str]) -> bool:
    for number, raw in enumerate(lines, start=1):
        line = raw.rstrip("\n")
        if not line or line[0] in "\r\n":
            continue
        try:
            hexfile.append(line)
        except HexError as exc:
            print(
                f"Error '{exc.kind.value}' while parsing line {number}: '{line}'",
                file=sys.stderr,
            )
            return False
    return True


def main(argv: Sequence[str] | None = None) -> int:
    """Run the editor and return the exit status."""
    if argv is None:
        argv = sys.argv[1:]
    try:
        options = parse_args(argv)
    except _ArgumentError as exc:
        print(exc, file=sys.stdout if exc.to_stdout else sys.stderr)
        if exc.show_help:
            print(help_text())
        return -1

    if options.show_help:
        print(help_text())
        return 0
    if options.show_version:
        print(version_text())
        return 0

    hexfile = HexFile()
    if options.stdin:
        if not _load(hexfile, sys.stdin):
            return -1
    elif options.filename:
        try:
            with open(options.filename, encoding="latin-1", newline="") as stream:
                if not _load(hexfile, stream):
                    return -1
        except OSError as exc:
            print(
                f"Error '{exc.strerror}' while opening file: {options.filename}",
                file=sys.stderr,
            )
            return exc.errno or -1

    if options.address_set:
        for start, values in options.data:
            for address, byte in enumerate(values, start=start):
                try:
                    hexfile.overwrite(address, byte)
                except HexError:
                    print(f"Data address {address:x} could not be overwritten.", file=sys.stderr)
                    return -1

    if options.stdout:
        sys.stdout.write(hexfile.dumps())
    return 0


if __name__ == "__main__":
    sys.exit(main())