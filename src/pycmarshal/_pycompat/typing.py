from __future__ import annotations

from array import array
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from typing_extensions import Buffer as Buffer
    from typing_extensions import TypeAlias, TypeGuard

else:
    try:
        from collections.abc import Buffer
    except ImportError:
        from abc import ABC, abstractmethod

        class Buffer(ABC):
            """An alias of [`collections.abc.Buffer`](`collections.abc.Buffer`)."""

            @abstractmethod
            def __buffer__(self, flags: int) -> memoryview: ...


ReadableBinary: TypeAlias = Union["bytes | bytearray | memoryview | array[int]"]
"""
Binary data such as `bytes`, `bytearray`, `array.array` and `memoryview`.

Indexing must produce unsigned byte values, so `memoryview` and `array` values
must use the `B` format.
"""


def is_readable_binary(buffer: Buffer) -> TypeGuard[ReadableBinary]:
    """Return True if a binary value can be read without wrapping in a `memoryview`."""
    if isinstance(buffer, (bytes, bytearray)):
        return True
    if isinstance(buffer, memoryview):
        return buffer.format == "B" and buffer.ndim == 1
    if isinstance(buffer, array):
        return buffer.typecode == "B"
    return False


def get_buffer(buffer: Buffer) -> memoryview:
    """Get a bytes-format memoryview of a value supporting the Buffer protocol.

    Returns
    -------
    :
        A memoryview with itemsize 1, 1 dimension and `B` (uint8) format.
    """
    buf = memoryview(buffer)  # type: ignore[arg-type]
    if not (buf.format == "B" and buf.ndim == 1 and buf.itemsize == 1):
        buf = buf.cast("B")
    return buf
