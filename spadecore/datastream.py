"""Little-endian binary stream used to build and parse game packets."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Any, Union

BytesLike = Union[bytes, bytearray, memoryview]


class StreamError(Exception):
    """Raised when a read or write would go past the end of the stream."""


@dataclass(frozen=True)
class Color:
    """An ARGB colour; on the wire its bytes are ordered b, g, r[, a]."""

    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 0

    @property
    def raw(self) -> int:
        """The colour packed as a 32-bit integer (b in the lowest byte)."""
        return self.b | (self.g << 8) | (self.r << 16) | (self.a << 24)

    @classmethod
    def from_raw(cls, raw: int) -> "Color":
        """Build a colour from its packed 32-bit form."""
        return cls(
            r=(raw >> 16) & 0xFF,
            g=(raw >> 8) & 0xFF,
            b=raw & 0xFF,
            a=(raw >> 24) & 0xFF,
        )


class DataStream:
    """A fixed-size buffer with a cursor for reading and writing values.

    The stream is created either from existing bytes or from a length, in
    which case it starts zero-filled. Accesses that would cross the end of
    the buffer raise :class:`StreamError` and leave the cursor untouched.
    """

    def __init__(self, data: BytesLike | int) -> None:
        if isinstance(data, int):
            if data < 0:
                raise ValueError("stream length must not be negative")
            self._data = bytearray(data)
        else:
            self._data = bytearray(data)
        self.position = 0

    def __len__(self) -> int:
        return len(self._data)

    def left(self) -> int:
        """Number of bytes between the cursor and the end."""
        return max(len(self._data) - self.position, 0)

    def skip(self, count: int) -> None:
        """Advance the cursor, stopping at the end of the stream."""
        self.position = min(self.position + count, len(self._data))

    def _take(self, count: int) -> bytes:
        if self.position + count > len(self._data):
            raise StreamError(
                f"cannot read {count} bytes at offset {self.position} "
                f"of a {len(self._data)}-byte stream"
            )
        chunk = bytes(self._data[self.position : self.position + count])
        self.position += count
        return chunk

    def _put(self, chunk: BytesLike) -> None:
        count = len(chunk)
        if self.position + count > len(self._data):
            raise StreamError(
                f"cannot write {count} bytes at offset {self.position} "
                f"of a {len(self._data)}-byte stream"
            )
        self._data[self.position : self.position + count] = chunk
        self.position += count

    def read_u8(self) -> int:
        return self._take(1)[0]

    def read_u16(self) -> int:
        return struct.unpack("<H", self._take(2))[0]

    def read_u32(self) -> int:
        return struct.unpack("<I", self._take(4))[0]

    def read_float(self) -> float:
        return struct.unpack("<f", self._take(4))[0]

    def read_color_rgb(self) -> Color:
        b, g, r = self._take(3)
        return Color(r=r, g=g, b=b, a=0)

    def read_color_argb(self) -> Color:
        b, g, r, a = self._take(4)
        return Color(r=r, g=g, b=b, a=a)

    def read_bytes(self, length: int) -> bytes:
        return self._take(length)

    def write_u8(self, value: int) -> None:
        self._put(struct.pack("<B", value & 0xFF))

    def write_u16(self, value: int) -> None:
        self._put(struct.pack("<H", value & 0xFFFF))

    def write_u32(self, value: int) -> None:
        self._put(struct.pack("<I", value & 0xFFFFFFFF))

    def write_float(self, value: float) -> None:
        self._put(struct.pack("<f", value))

    def write_vector3f(self, vector: Any) -> None:
        """Write three floats taken from ``x``/``y``/``z`` or a 3-sequence."""
        if all(hasattr(vector, name) for name in ("x", "y", "z")):
            x, y, z = vector.x, vector.y, vector.z
        else:
            x, y, z = vector
        self._put(struct.pack("<3f", x, y, z))

    def write_color_rgb(self, color: Color) -> None:
        self._put(bytes((color.b & 0xFF, color.g & 0xFF, color.r & 0xFF)))

    def write_color_argb(self, color: Color) -> None:
        self._put(
            bytes((color.b & 0xFF, color.g & 0xFF, color.r & 0xFF, color.a & 0xFF))
        )

    def write_bytes(self, data: BytesLike) -> None:
        self._put(bytes(data))

    def getvalue(self) -> bytes:
        """The whole buffer, regardless of the cursor."""
        return bytes(self._data)