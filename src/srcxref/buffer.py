# Copyright (C) 2025 The srcxref Authors
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.


"""
Growable byte accumulator that every piece of markup is written through.
"""

from typing import BinaryIO, Final, Union

INITIAL_SIZE: Final[int] = 80
"""
Capacity, in bytes, of a freshly created `Buffer`.
"""

EXPAND_SIZE: Final[int] = 80
"""
Smallest number of bytes added to a `Buffer` each time it has to grow.
"""

ENCODING: Final[str] = "utf-8"
ERRORS: Final[str] = "surrogateescape"

Data = Union[str, bytes, bytearray, memoryview]


def encode(data: Data) -> bytes:
    """
    Convert text to bytes, preserving undecodable input bytes.
    """
    if isinstance(data, str):
        return data.encode(ENCODING, ERRORS)
    return bytes(data)


def decode(data: bytes) -> str:
    """
    Inverse of `encode`.
    """
    return data.decode(ENCODING, ERRORS)


def put(stream: BinaryIO, data: Data) -> None:
    """
    Write text or bytes to an output stream.
    """
    stream.write(encode(data))


def put_nl(stream: BinaryIO, data: Data) -> None:
    """
    Write text or bytes to an output stream, followed by a newline.
    """
    stream.write(encode(data))
    stream.write(b"\n")


class Buffer:
    """
    Owned, contiguous byte region with a logical length and a physical
    capacity.

    When an append does not fit, the capacity grows by the larger of the
    missing amount and `expand_size`. The workload is dominated by tiny
    appends (one escaped character at a time) so a fixed increment is used
    rather than doubling. The buffer never shrinks; `clear` only resets the
    length.
    """

    __slots__ = ("_data", "_length", "expand_size")

    _data: bytearray
    _length: int
    expand_size: int

    def __init__(
        self,
        initial_size: int = INITIAL_SIZE,
        expand_size: int = EXPAND_SIZE,
    ) -> None:
        if initial_size < 0:
            raise ValueError("initial_size must not be negative")
        if expand_size < 1:
            raise ValueError("expand_size must be positive")

        self._data = bytearray(initial_size)
        self._length = 0
        self.expand_size = expand_size

    def __len__(self) -> int:
        """
        Return the logical length of the buffer.
        """
        return self._length

    def __repr__(self) -> str:
        """
        Textual representation of this instance.
        """
        return (
            f"{self.__class__.__name__}("
            f"length={self._length}, capacity={self.capacity})"
        )

    @property
    def capacity(self) -> int:
        """
        Number of bytes that fit without growing.
        """
        return len(self._data)

    def empty(self) -> bool:
        """
        `True` when nothing has been written since the last `clear`.
        """
        return self._length == 0

    def reserve(self, min_capacity: int) -> None:
        """
        Make sure at least `min_capacity` bytes fit without growing.
        """
        if min_capacity > self.capacity:
            self._grow(min_capacity - self.capacity)

    def _grow(self, excess: int) -> None:
        self._data.extend(bytes(max(excess, self.expand_size)))

    def _make_room(self, size: int) -> int:
        start = self._length
        needed = start + size
        if needed > self.capacity:
            self._grow(needed - self.capacity)
        return start

    def append(self, data: Data) -> None:
        """
        Append text or raw bytes.
        """
        raw = encode(data)
        start = self._make_room(len(raw))
        self._data[start : start + len(raw)] = raw
        self._length = start + len(raw)

    def append_slice(self, data: Union[bytes, bytearray], length: int) -> None:
        """
        Append exactly `length` bytes of `data`, embedded zero bytes
        included.
        """
        if length < 0 or length > len(data):
            raise ValueError(
                f"slice of {length} bytes from {len(data)} available"
            )
        start = self._make_room(length)
        self._data[start : start + length] = data[:length]
        self._length = start + length

    def push_back(self, byte: int) -> None:
        """
        Append a single byte.
        """
        if not 0 <= byte <= 0xFF:
            raise ValueError(f"not a byte: {byte}")
        start = self._make_room(1)
        self._data[start] = byte
        self._length = start + 1

    def append_number(self, value: int, width: int = 0) -> None:
        """
        Append `value` in decimal, right aligned in a field of `width`
        characters.
        """
        negative = value < 0
        magnitude = -value if negative else value

        digits = 1
        probe = magnitude
        while probe >= 10:
            probe //= 10
            digits += 1

        size = digits + (1 if negative else 0)
        padding = max(width - size, 0)
        start = self._make_room(padding + size)

        cursor = start
        for _ in range(padding):
            self._data[cursor] = 0x20
            cursor += 1
        if negative:
            self._data[cursor] = 0x2D
            cursor += 1

        end = cursor + digits
        position = end
        while True:
            position -= 1
            self._data[position] = 0x30 + magnitude % 10
            magnitude //= 10
            if position == cursor:
                break

        self._length = end

    def clear(self) -> None:
        """
        Forget the contents, keeping the allocated capacity.
        """
        self._length = 0

    def value(self) -> bytes:
        """
        Copy of the current contents.
        """
        return bytes(self._data[: self._length])

    def as_null_terminated_view(self) -> bytes:
        """
        Current contents followed by one zero byte. The length is not
        changed.
        """
        self.reserve(self._length + 1)
        self._data[self._length] = 0
        return bytes(self._data[: self._length + 1])

    def text(self) -> str:
        """
        Current contents, decoded.
        """
        return decode(self.value())
