from __future__ import annotations

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, cast

from pycmarshal._pycompat.typing import ReadableBinary

if TYPE_CHECKING:
    from pycmarshal.constants import MarshalTag


@dataclass(init=False)
class MarshalError(Exception):
    """The base class that all pycmarshal errors are subclasses of."""

    if not TYPE_CHECKING:
        message: str  # needed to have dataclass include message in the repr, etc

    def __init__(self, message: str, *args: object) -> None:
        super().__init__(message, *args)

    @property
    def message(self) -> str:
        return cast(str, self.args[0])

    def __str__(self) -> str:
        field_values = [
            (f.name, getattr(self, f.name))
            for f in fields(self)
            if f.name not in ("message", "data")
        ]
        values_fmt = ", ".join(f"{f}={v!r}" for (f, v) in field_values)

        if values_fmt:
            return f"{self.message}: {values_fmt}"
        return self.message


@dataclass(init=False)
class DecodeMarshalError(MarshalError, ValueError):
    """
    The data being decoded is not well-formed marshal data.

    `position` is the byte offset in `data` at which the problem was detected.
    """

    position: int
    data: ReadableBinary

    def __init__(
        self, message: str, *args: object, position: int, data: ReadableBinary
    ) -> None:
        super().__init__(message, *args)
        self.position = position
        self.data = data


@dataclass(init=False)
class UnsupportedVariantDecodeMarshalError(DecodeMarshalError):
    """
    The data contains a valid `MarshalTag` which pycmarshal does not decode.

    These are `TYPE_LONG`, the textual `TYPE_FLOAT` and `TYPE_COMPLEX` and
    `TYPE_SLICE`. The `position` is the offset of the type byte.
    """

    if not TYPE_CHECKING:
        tag: MarshalTag

    def __init__(
        self,
        message: str,
        *args: object,
        tag: MarshalTag,
        position: int,
        data: ReadableBinary,
    ) -> None:
        super().__init__(message, tag, *args, position=position, data=data)

    @property
    def tag(self) -> MarshalTag:
        return cast("MarshalTag", self.args[1])


@dataclass(init=False)
class UnknownTagDecodeMarshalError(DecodeMarshalError):
    """A type byte (with the reference flag removed) is not a known `MarshalTag`."""

    value: int

    def __init__(
        self,
        message: str,
        *args: object,
        value: int,
        position: int,
        data: ReadableBinary,
    ) -> None:
        super().__init__(message, *args, position=position, data=data)
        self.value = value


@dataclass(init=False)
class MalformedLengthDecodeMarshalError(DecodeMarshalError):
    """A length or count is negative or larger than the data that remains."""

    length: int

    def __init__(
        self,
        message: str,
        *args: object,
        length: int,
        position: int,
        data: ReadableBinary,
    ) -> None:
        super().__init__(message, *args, position=position, data=data)
        self.length = length


@dataclass(init=False)
class TruncatedInputDecodeMarshalError(DecodeMarshalError):
    """The data ends before a fixed-width value could be read."""

    expected: int
    available: int

    def __init__(
        self,
        message: str,
        *args: object,
        expected: int,
        available: int,
        position: int,
        data: ReadableBinary,
    ) -> None:
        super().__init__(message, *args, position=position, data=data)
        self.expected = expected
        self.available = available


@dataclass(init=False)
class DepthExceededDecodeMarshalError(DecodeMarshalError):
    """Objects are nested more deeply than the decoder's `max_depth` allows."""

    max_depth: int

    def __init__(
        self,
        message: str,
        *args: object,
        max_depth: int,
        position: int,
        data: ReadableBinary,
    ) -> None:
        super().__init__(message, *args, position=position, data=data)
        self.max_depth = max_depth


@dataclass(init=False)
class TextDecodeMarshalError(DecodeMarshalError):
    """
    The bytes of a string object are not valid UTF-8.

    The `UnicodeDecodeError` is the `__cause__` of this error.
    """


@dataclass(init=False)
class ReferenceIndexMarshalError(MarshalError, KeyError):
    """A back-reference index does not identify a registered object."""

    index: int

    def __init__(self, message: str, *args: object, index: int) -> None:
        super().__init__(message, *args)
        self.index = index
