"""
Bounds-checked big-endian reads over an in-memory buffer.
"""

import struct

from .errors import TruncatedInput


_U2 = struct.Struct(">H")
_U4 = struct.Struct(">I")
_U8 = struct.Struct(">Q")
_I4 = struct.Struct(">i")
_I8 = struct.Struct(">q")
_F4 = struct.Struct(">f")
_F8 = struct.Struct(">d")


class ByteCursor:
    """A read position over a borrowed buffer.

    Every read checks that the whole field is present before consuming it;
    a short read raises :class:`TruncatedInput` and leaves ``pos`` unchanged.
    """

    __slots__ = ("data", "pos")

    def __init__(self, data: bytes, pos: int = 0):
        self.data = data
        self.pos = pos

    def __len__(self) -> int:
        return len(self.data)

    @property
    def remaining(self) -> int:
        return len(self.data) - self.pos

    def _require(self, width: int):
        if width > self.remaining:
            raise TruncatedInput(self.pos, width, self.remaining)

    def _unpack(self, fmt: struct.Struct):
        self._require(fmt.size)
        val = fmt.unpack_from(self.data, self.pos)[0]
        self.pos += fmt.size
        return val

    def read_u1(self) -> int:
        self._require(1)
        val = self.data[self.pos]
        self.pos += 1
        return val

    def read_u2(self) -> int:
        return self._unpack(_U2)

    def read_u4(self) -> int:
        return self._unpack(_U4)

    def read_u8(self) -> int:
        return self._unpack(_U8)

    def read_i4(self) -> int:
        return self._unpack(_I4)

    def read_i8(self) -> int:
        return self._unpack(_I8)

    def read_f4(self) -> float:
        return self._unpack(_F4)

    def read_f8(self) -> float:
        return self._unpack(_F8)

    def read_bytes(self, length: int) -> bytes:
        self._require(length)
        val = bytes(self.data[self.pos:self.pos + length])
        self.pos += length
        return val
