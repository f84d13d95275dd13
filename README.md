# tihex

A textual Intel HEX editor. It reads Intel HEX records line by line, lets you
overwrite individual data bytes by absolute address, and prints the records
back out. It keeps the original record layout: the byte counts, record
addresses and record order stay as they were. The checksums of the records
whose bytes you change are recalculated.

## Installation

```
pip install .
```

## Command line

```
tihex [options] [input filename]
tihex [options] -i
```

Options:

- `-h`, `--help`: show the help message and exit.
- `-v`, `--version`: show the version and exit.
- `-i`, `--stdin`: read the HEX data from standard input instead of a file.
- `-o`, `--stdout`: print the resulting HEX data on standard output.
- `-a`, `--address ADDR`: set the hexadecimal start address for the `-d`
  data that follows. The range is `0` to `FFFFFFFFFFFFFFFF`.
- `-d`, `--data LIST`: comma-separated hexadecimal byte values, for example
  `-d 0,0,1a,95,AB`. Each value must be at most `FF`. After a `-d` block the
  address moves past that block, so a second `-d` carries on from there.

The bytes given with `-d` are only written when `-a` appears somewhere on the
command line. The input file is never changed; use `-o` and redirect the
output to save the result.

Example: patch two bytes at `0x0100` and print the result.

```
tihex firmware.hex -a 100 -d DE,AD -o
```

Empty lines in the input are skipped. If a line cannot be parsed, the command
prints the error kind and line number on standard error and exits with a
non-zero status. It does the same when an address given with `-a`/`-d` is not
covered by a data record, and when the input file cannot be opened.

## Library

```python
from tihex.hexfile import HexFile, HexError

hexfile = HexFile()
with open("firmware.hex") as fh:
    for line in fh:
        if line.strip():
            hexfile.append(line.rstrip("\r\n"))

print(hexfile.get_value(0x0100))
hexfile.overwrite(0x0100, 0xDE)
print(hexfile.dumps())
```

`HexFile.append()` takes one record line. Leading spaces, tabs and `:` are
ignored. Data records (type `00`) are indexed by their absolute address;
extended segment (`02`) and extended linear (`04`) address records move the
current address; other record types are kept as they are. A line that is not
well formed is not kept.

`HexFile` keeps each record as an `Entry` (`byte_count`, `address`,
`record_type`, `data`, `checksum`, `start_code`) in its original order.
Iterating over a `HexFile` yields the entries, `Entry.line()` renders one
record as text, and `dumps()` renders all of them, one per line.

- `len(hexfile)` gives the number of records; `program_size()` gives the
  number of data bytes in data records.
- `address in hexfile` tells whether a data record starts at an absolute
  address, and `hexfile[address]` returns that record (or raises `KeyError`).
- `current_address()` is where the next data record would be placed;
  `empty()` is true when no data record is stored; `clear()` drops everything.
- `get_value()` and `overwrite()` read and replace one data byte;
  `overwrite()` fixes the record checksum unless `calculate_checksum=False`.
  `fix_checksum()` recomputes an entry's checksum.
- `lower_address()` and `upper_address()` find the data record start
  addresses just below and just above a given address.
- `HexFile(max_jump=...)` rejects records whose 16-bit address is above the
  limit; the default `0xFFFF` accepts every address.

A failure raises `HexError`, whose `kind` attribute is an `ErrorKind` member.

## Limitations

- Only existing data bytes can be changed. Records cannot be added, removed,
  grown or moved.
- Record checksums are not verified when a file is read.