"""In-memory model of an Intel HEX file that keeps the original record layout."""

from __future__ import annotations

import re
from bisect import bisect_left, bisect_right, insort
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

MAX_JUMP_DEFAULT = 0xFFFF
"""Largest record address accepted by default (0xFFFF means no limit)."""

_MASK64 = (1 << 64) - 1

_HEX_RE = re.compile(r"\s*([+-]?)(?:0[xX](?=[0-9a-fA-F]))?([0-9a-fA-F]+)")


def _parse_hex(text: str, bits: int = 64) -> int:
    """Parse a leading hexadecimal number, truncated to ``bits`` bits."""
    match = _HEX_RE.match(text)
    if match is None:
        raise ValueError(f"invalid hexadecimal value: {text!r}")
    value = int(match.group(2), 16)
    if value > _MASK64:
        raise ValueError(f"hexadecimal value out of range: {text!r}")
    if match.group(1) == "-":
        value = -value
    return value & ((1 << bits) - 1)


class ErrorKind(Enum):
    """Reasons an operation on a :class:`HexFile` can fail."""

    NONE = "None"
    MALFORMED = "Malformed"
    INVALID_JUMP_SIZE = "InvalidJumpSize"
    INVALID_DATA_SIZE = "InvalidDataSize"
    CHECKSUM = "Checksum"
    ADDRESS_NOT_FOUND = "AddressNotFound"
    LOWER_ADDRESS_NOT_FOUND = "LowerAddressNotFound"
    UPPER_ADDRESS_NOT_FOUND = "UpperAddressNotFound"
    OVERFLOW = "Overflow"
    UNKNOWN = "Unknown"


class HexError(Exception):
    """Raised when a record cannot be processed or an address is missing."""

    def __init__(self, kind: ErrorKind) -> None:
        super().__init__(kind.value)
        self.kind = kind


@dataclass
class Entry:
    """One record of an Intel HEX file."""

    byte_count: int
    address: int
    record_type: int
    data: bytearray = field(default_factory=bytearray)
    checksum: int = 0
    start_code: str = ":"

    def line(self) -> str:
        """Render the record as a text line, without a line terminator."""
        return (
            f"{self.start_code}{self.byte_count:02X}{self.address:04X}"
            f"{self.record_type:02X}{self.data.hex().upper()}{self.checksum:02X}"
        )


class HexFile:
    """Records of an Intel HEX file, indexed by their absolute address."""

    def __init__(self, max_jump: int = MAX_JUMP_DEFAULT) -> None:
        self.max_jump = max_jump
        self._entries: list[Entry] = []
        self._by_address: dict[int, Entry] = {}
        self._addresses: list[int] = []
        self._address_pointer = 0
        self._program_counter = 0

    def append(self, line: str) -> None:
        """Append one complete record line; nothing is kept if it is not well formed."""
        text = line.lstrip(" \t:")
        if len(text) < 5 * 2:
            raise HexError(ErrorKind.MALFORMED)

        try:
            address = _parse_hex(text[2:6], 16)
        except ValueError:
            raise HexError(ErrorKind.MALFORMED) from None

        if self._address_pointer & 0xFFFF != address:
            self._address_pointer = (self._address_pointer & ~0xFFFF & _MASK64) | address

        try:
            byte_count = _parse_hex(text[0:2], 8)
        except ValueError:
            raise HexError(ErrorKind.MALFORMED) from None

        rest = text[8:]
        if 2 * (byte_count + 1) > len(rest):
            raise HexError(ErrorKind.MALFORMED)
        if address > self.max_jump:
            raise HexError(ErrorKind.INVALID_JUMP_SIZE)

        try:
            record_type = _parse_hex(text[6:8], 8)
        except ValueError:
            raise HexError(ErrorKind.MALFORMED) from None

        data_text = rest[: 2 * byte_count]
        if len(data_text) // 2 != byte_count:
            raise HexError(ErrorKind.INVALID_DATA_SIZE)
        try:
            data = bytearray(
                _parse_hex(data_text[pos : pos + 2], 8) for pos in range(0, len(data_text), 2)
            )
            checksum = _parse_hex(rest[2 * byte_count : 2 * byte_count + 2], 8)
        except ValueError:
            raise HexError(ErrorKind.MALFORMED) from None

        entry = Entry(byte_count, address, record_type, data, checksum)
        pointer = self._address_pointer

        if record_type == 0x00:
            new_pointer = pointer + byte_count
            if new_pointer > _MASK64:
                if pointer in self._by_address:
                    del self._by_address[pointer]
                    self._addresses.remove(pointer)
                raise HexError(ErrorKind.OVERFLOW)
            if pointer not in self._by_address:
                insort(self._addresses, pointer)
            self._by_address[pointer] = entry
            self._program_counter += len(data)
        elif record_type == 0x02:
            new_pointer = (int.from_bytes(data, "big") << 4) & _MASK64
        elif record_type == 0x04:
            new_pointer = (int.from_bytes(data, "big") << 32) & _MASK64
        else:
            new_pointer = pointer + byte_count
            if new_pointer > _MASK64:
                raise HexError(ErrorKind.OVERFLOW)

        self._entries.append(entry)
        self._address_pointer = new_pointer

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, address: object) -> bool:
        return address in self._by_address

    def __getitem__(self, address: int) -> Entry:
        try:
            return self._by_address[address]
        except KeyError:
            raise KeyError(f"invalid address: {address:#x}") from None

    def clear(self) -> None:
        """Drop all records and reset the current address to zero."""
        self._entries.clear()
        self._by_address.clear()
        self._addresses.clear()
        self._address_pointer = 0
        self._program_counter = 0

    def current_address(self) -> int:
        """Address at which the next data record would be placed."""
        return self._address_pointer

    def empty(self) -> bool:
        """True when no data record has been stored."""
        return not self._by_address

    def program_size(self) -> int:
        """Number of data bytes held by data records."""
        return self._program_counter

    def fix_checksum(self, entry: Entry) -> None:
        """Recompute the checksum of ``entry`` in place."""
        total = (
            entry.byte_count
            + (entry.address >> 8)
            + (entry.address & 0xFF)
            + entry.record_type
            + sum(entry.data)
        )
        entry.checksum = -total & 0xFF

    def _locate(self, address: int) -> tuple[Entry, int]:
        index = bisect_right(self._addresses, address)
        if index == 0:
            raise HexError(ErrorKind.ADDRESS_NOT_FOUND)
        start = self._addresses[index - 1]
        entry = self._by_address[start]
        offset = address - start
        if offset >= len(entry.data):
            raise HexError(ErrorKind.ADDRESS_NOT_FOUND)
        return entry, offset

    def get_value(self, address: int) -> int:
        """Return the data byte stored at ``address``."""
        entry, offset = self._locate(address)
        return entry.data[offset]

    def lower_address(self, address: int) -> int:
        """Return the greatest record address strictly below ``address``."""
        index = bisect_left(self._addresses, address)
        if index == 0:
            raise HexError(ErrorKind.LOWER_ADDRESS_NOT_FOUND)
        return self._addresses[index - 1]

    def upper_address(self, address: int) -> int:
        """Return the smallest record address strictly above ``address``."""
        index = bisect_right(self._addresses, address)
        if index == len(self._addresses):
            raise HexError(ErrorKind.UPPER_ADDRESS_NOT_FOUND)
        return self._addresses[index]

    def overwrite(self, address: int, byte: int, calculate_checksum: bool = True) -> None:
        """Replace the data byte at ``address``, optionally fixing the record checksum."""
        entry, offset = self._locate(address)
        entry.data[offset] = byte
        if calculate_checksum:
            self.fix_checksum(entry)

    def dumps(self) -> str:
        """Render all records in their original order, one per line."""
        return "".join(f"{entry.line()}\n" for entry in self._entries)