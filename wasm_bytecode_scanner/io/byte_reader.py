"""
Bounded byte reader for WebAssembly bytecode.

This module provides a ByteReader class that walks a borrowed buffer with an
explicit end bound, so a length read from the module can never send the
cursor past the region it describes. All reads return views into the
original buffer; nothing is copied.
"""

from typing import Optional, Tuple, Union

from ..errors import TruncatedInputError, VarintOverflowError

BytesLike = Union[bytes, bytearray, memoryview]

# A varuint32 is at most 5 bytes; the 5th byte may only carry 4 value bits.
VARUINT32_MAX_BYTES = 5
VARUINT32_MAX = 0xFFFFFFFF


def as_byte_view(data: BytesLike) -> memoryview:
    """Return a read-only, byte-formatted memoryview over *data*."""
    view = data if isinstance(data, memoryview) else memoryview(data)
    if view.format != 'B':
        view = view.cast('B')
    return view.toreadonly()


def decode_varuint32(data: BytesLike, pos: int = 0, end: Optional[int] = None) -> Tuple[int, int]:
    """
    Decode an unsigned LEB128 integer that must fit in 32 bits.

    Args:
        data: Buffer to read from
        pos: Offset of the first byte of the encoding
        end: Exclusive read bound (defaults to the buffer length)

    Returns:
        Tuple of (value, position after the last byte read)

    Raises:
        TruncatedInputError: If the bound is reached before a terminating byte
        VarintOverflowError: If the encoding needs more than 5 bytes or 32 bits
    """
    if end is None:
        end = len(data)

    result = 0
    shift = 0
    for _ in range(VARUINT32_MAX_BYTES):
        if pos >= end:
            raise TruncatedInputError(f"varint runs past end of input at offset {pos}")
        byte = data[pos]
        pos += 1
        if shift == 28 and byte > 0x0F:
            raise VarintOverflowError(f"varint exceeds 32 bits at offset {pos - 1}")
        result |= (byte & 0x7F) << shift
        if (byte & 0x80) == 0:
            return result, pos
        shift += 7

    # Unreachable: the 5th byte either terminates or trips the overflow check.
    raise VarintOverflowError(f"varint longer than {VARUINT32_MAX_BYTES} bytes")


def encode_varuint32(value: int) -> bytes:
    """Encode *value* as an unsigned LEB128 varuint32."""
    if not 0 <= value <= VARUINT32_MAX:
        raise ValueError(f"value out of range for varuint32: {value}")

    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


class ByteReader:
    """
    Forward-only cursor over a borrowed byte buffer.

    The reader never mutates or copies the buffer. Views returned by
    read_bytes() and read_name() keep the underlying buffer alive for as
    long as they are referenced.

    Attributes:
        view: Read-only memoryview over the whole original buffer
    """

    def __init__(self, data: BytesLike, start: int = 0, end: Optional[int] = None):
        """
        Initialize a ByteReader.

        Args:
            data: The buffer to read
            start: Initial cursor position
            end: Exclusive read bound (defaults to the buffer length)
        """
        self.view = as_byte_view(data)
        if end is None:
            end = len(self.view)
        if not 0 <= start <= end <= len(self.view):
            raise ValueError(f"invalid reader bounds [{start}, {end}) for {len(self.view)} bytes")
        self._pos = start
        self._end = end

    # ========== Position and Length ==========

    @property
    def position(self) -> int:
        """Get current cursor position."""
        return self._pos

    @property
    def end(self) -> int:
        """Get the exclusive read bound."""
        return self._end

    @property
    def remaining(self) -> int:
        """Number of bytes left before the bound."""
        return self._end - self._pos

    def at_end(self) -> bool:
        return self._pos >= self._end

    # ========== Primitive Readers ==========

    def read_byte(self) -> int:
        """Read an unsigned byte."""
        if self._pos >= self._end:
            raise TruncatedInputError(f"unexpected end of input at offset {self._pos}")
        value = self.view[self._pos]
        self._pos += 1
        return value

    def read_bytes(self, count: int) -> memoryview:
        """Read *count* raw bytes as a borrowed view."""
        self.require(count)
        start = self._pos
        self._pos += count
        return self.view[start:self._pos]

    def skip(self, count: int) -> None:
        """Advance the cursor by *count* bytes."""
        self.require(count)
        self._pos += count

    def read_varuint32(self) -> int:
        """Read an unsigned LEB128 encoded 32-bit integer."""
        value, self._pos = decode_varuint32(self.view, self._pos, self._end)
        return value

    def read_name(self) -> memoryview:
        """Read a length-prefixed byte string (vec(byte))."""
        length = self.read_varuint32()
        return self.read_bytes(length)

    def sub_reader(self, size: int) -> 'ByteReader':
        """
        Split off a reader over the next *size* bytes and skip past them.

        Args:
            size: Length of the region, usually a declared section size

        Returns:
            A ByteReader bounded to [position, position + size)
        """
        self.require(size)
        start = self._pos
        self._pos += size
        return ByteReader(self.view, start, self._pos)

    def require(self, count: int) -> None:
        """Raise TruncatedInputError unless *count* more bytes are available."""
        if count > self._end - self._pos:
            raise TruncatedInputError(
                f"{count} bytes requested at offset {self._pos}, "
                f"only {self._end - self._pos} available"
            )
