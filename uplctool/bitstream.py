"""Bit-level encoder and decoder for the flat serialisation format."""

from __future__ import annotations

from typing import Any, Callable, Iterable, TypeVar

from . import zigzag

T = TypeVar("T")

_MAX_BLOCK = 255


class FlatEncodeError(ValueError):
    """Raised when a value cannot be written in flat form."""


class FlatDecodeError(ValueError):
    """Raised when flat data cannot be read."""


def _check_byte(value: int) -> None:
    if not 0 <= value <= 0xFF:
        raise ValueError(f"value {value} does not fit in one byte")


class Encoder:
    """Accumulates bits, most significant bit first, into ``buffer``."""

    def __init__(self) -> None:
        self.buffer = bytearray()
        self._used_bits = 0
        self._current_byte = 0

    def u8(self, x: int) -> Encoder:
        """Write eight bits."""
        _check_byte(x)
        if self._used_bits == 0:
            self._current_byte = x
            self._next_word()
        else:
            self.buffer.append(self._current_byte | (x >> self._used_bits))
            self._current_byte = (x << (8 - self._used_bits)) & 0xFF
        return self

    def bool(self, x: bool) -> Encoder:
        """Write a single bit."""
        if x:
            self._one()
        else:
            self._zero()
        return self

    def bytes(self, x: bytes) -> Encoder:
        """Pad to a byte boundary with a filler, then write a block array."""
        self.filler()
        return self.byte_array(x)

    def byte_array(self, arr: bytes) -> Encoder:
        """Write ``arr`` as length-prefixed blocks of at most 255 bytes."""
        if self._used_bits != 0:
            raise FlatEncodeError("Buffer is not byte aligned")
        data = bytes(arr)
        pos = 0
        while True:
            block = data[pos : pos + _MAX_BLOCK]
            self.buffer.append(len(block))
            if not block:
                break
            self.buffer.extend(block)
            pos += len(block)
        return self

    def integer(self, i: int) -> Encoder:
        """Write a signed integer as a zigzag-mapped word."""
        return self.word(zigzag.to_unsigned(i))

    def char(self, c: str) -> Encoder:
        """Write a single character as its code point."""
        if len(c) != 1:
            raise ValueError(f"expected a single character, got {c!r}")
        return self.word(ord(c))

    def string(self, s: str) -> Encoder:
        """Write a string as a list of characters."""
        for ch in s:
            self._one()
            self.char(ch)
        self._zero()
        return self

    def utf8(self, s: str) -> Encoder:
        """Write a string as its UTF-8 bytes."""
        return self.bytes(s.encode("utf-8"))

    def word(self, c: int) -> Encoder:
        """Write a natural number in 7-bit groups, least significant first."""
        if c < 0:
            raise ValueError(f"word must be non-negative, got {c}")
        while True:
            w = c & 0x7F
            c >>= 7
            if c:
                w |= 0x80
            self.bits(8, w)
            if not c:
                return self

    def encode_list_with(
        self, items: Iterable[T], encode_item: Callable[[T, Encoder], Any]
    ) -> Encoder:
        """Write each item preceded by a one bit, then a closing zero bit."""
        for item in items:
            self._one()
            encode_item(item, self)
        self._zero()
        return self

    def bits(self, num_bits: int, val: int) -> Encoder:
        """Write the low ``num_bits`` bits of ``val``."""
        _check_byte(val)
        if num_bits == 1 and val < 2:
            self.bool(bool(val))
            return self
        if num_bits == 2 and val < 4:
            self.bool(bool(val & 2))
            self.bool(bool(val & 1))
            return self

        self._used_bits += num_bits
        unused = 8 - self._used_bits
        if unused > 0:
            self._current_byte |= (val << unused) & 0xFF
        elif unused == 0:
            self._current_byte |= val
            self._next_word()
        else:
            used = -unused
            self._current_byte |= val >> used
            self._next_word()
            self._current_byte = (val << (8 - used)) & 0xFF
            self._used_bits = used
        return self

    def filler(self) -> Encoder:
        """Close the current byte with zero bits followed by a one bit."""
        self._current_byte |= 1
        self._next_word()
        return self

    def _zero(self) -> None:
        if self._used_bits == 7:
            self._next_word()
        else:
            self._used_bits += 1

    def _one(self) -> None:
        if self._used_bits == 7:
            self._current_byte |= 1
            self._next_word()
        else:
            self._current_byte |= 0x80 >> self._used_bits
            self._used_bits += 1

    def _next_word(self) -> None:
        self.buffer.append(self._current_byte)
        self._current_byte = 0
        self._used_bits = 0


class Decoder:
    """Reads bits, most significant bit first, from a byte string."""

    def __init__(self, data: bytes) -> None:
        self.buffer = bytes(data)
        self.pos = 0
        self.used_bits = 0

    def integer(self) -> int:
        """Read a zigzag-mapped signed integer."""
        return zigzag.to_signed(self.word())

    def bool(self) -> bool:
        """Read a single bit."""
        return self._bit()

    def u8(self) -> int:
        """Read eight bits."""
        return self.bits8(8)

    def bytes(self) -> bytes:
        """Skip a filler, then read a block array."""
        self.filler()
        return self._byte_array()

    def char(self) -> str:
        """Read a character from its code point."""
        code = self.word()
        if code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
            raise FlatDecodeError(f"Decoding u32 to char {code}")
        return chr(code)

    def string(self) -> str:
        """Read a string written as a list of characters."""
        chars = []
        while self._bit():
            chars.append(self.char())
        return "".join(chars)

    def utf8(self) -> str:
        """Read a string written as UTF-8 bytes."""
        try:
            return self.bytes().decode("utf-8")
        except UnicodeDecodeError as exc:
            raise FlatDecodeError(str(exc)) from exc

    def filler(self) -> None:
        """Skip zero bits up to and including the next one bit."""
        while not self._bit():
            pass

    def word(self) -> int:
        """Read a natural number written in 7-bit groups."""
        result = 0
        shift = 0
        while True:
            byte = self.bits8(8)
            result |= (byte & 0x7F) << shift
            shift += 7
            if not byte & 0x80:
                return result

    def decode_list_with(self, decode_item: Callable[[Decoder], T]) -> list[T]:
        """Read items while each is preceded by a one bit."""
        items = []
        while self._bit():
            items.append(decode_item(self))
        return items

    def bits8(self, num_bits: int) -> int:
        """Read up to eight bits as an unsigned value."""
        if num_bits > 8:
            raise FlatDecodeError("Incorrect value of num_bits, must be less than 9")
        self._ensure_bits(num_bits)
        unused = 8 - self.used_bits
        leading_zeroes = 8 - num_bits
        value = ((self.buffer[self.pos] << self.used_bits) & 0xFF) >> leading_zeroes
        if num_bits > unused:
            value |= self.buffer[self.pos + 1] >> (unused + leading_zeroes)
        self._drop_bits(num_bits)
        return value

    def _bit(self) -> bool:
        if self.pos >= len(self.buffer):
            raise FlatDecodeError("Reached end of buffer")
        bit = bool(self.buffer[self.pos] & (0x80 >> self.used_bits))
        if self.used_bits == 7:
            self.pos += 1
            self.used_bits = 0
        else:
            self.used_bits += 1
        return bit

    def _byte_array(self) -> bytes:
        if self.used_bits != 0:
            raise FlatDecodeError("Buffer is not byte aligned")
        self._ensure_bytes(1)
        block_len = self.buffer[self.pos]
        self.pos += 1
        out = bytearray()
        while block_len:
            self._ensure_bytes(block_len + 1)
            out.extend(self.buffer[self.pos : self.pos + block_len])
            self.pos += block_len
            block_len = self.buffer[self.pos]
            self.pos += 1
        return bytes(out)

    def _ensure_bytes(self, required: int) -> None:
        if required > len(self.buffer) - self.pos:
            raise FlatDecodeError(f"Not enough data available, required {required} bytes")

    def _ensure_bits(self, required: int) -> None:
        if required > (len(self.buffer) - self.pos) * 8 - self.used_bits:
            raise FlatDecodeError(f"Not enough data available, required {required} bits")

    def _drop_bits(self, num_bits: int) -> None:
        total = num_bits + self.used_bits
        self.used_bits = total % 8
        self.pos += total // 8


def _encode_value(value: Any, encoder: Encoder) -> None:
    if isinstance(value, bool):
        encoder.bool(value)
    elif isinstance(value, int):
        encoder.word(value)
    elif isinstance(value, str):
        encoder.utf8(value)
    elif isinstance(value, (bytes, bytearray, memoryview)):
        encoder.bytes(bytes(value))
    elif hasattr(value, "flat_encode"):
        value.flat_encode(encoder)
    else:
        raise FlatEncodeError(f"cannot encode value of type {type(value).__name__}")


def encode(value: Any) -> bytes:
    """Encode ``value`` and close the stream with a filler.

    Booleans are bits, non-negative ints are words, strings are UTF-8,
    byte strings are block arrays; other objects must provide
    ``flat_encode(encoder)``.
    """
    encoder = Encoder()
    _encode_value(value, encoder)
    encoder.filler()
    return bytes(encoder.buffer)


def decode(data: bytes, decode_value: Callable[[Decoder], T]) -> T:
    """Read one value with ``decode_value`` and then the closing filler."""
    decoder = Decoder(data)
    value = decode_value(decoder)
    decoder.filler()
    return value