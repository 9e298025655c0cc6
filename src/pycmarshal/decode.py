"""Decode the CPython marshal format into trees of `pycmarshal.objects` types."""

from __future__ import annotations

import codecs
import logging
import struct
import warnings
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import (
    TYPE_CHECKING,
    Final,
    Generator,
    Literal,
    NamedTuple,
    Protocol,
    cast,
)

from pycmarshal._errors import (
    DepthExceededDecodeMarshalError,
    MalformedLengthDecodeMarshalError,
    TextDecodeMarshalError,
    TruncatedInputDecodeMarshalError,
    UnknownTagDecodeMarshalError,
    UnsupportedVariantDecodeMarshalError,
)
from pycmarshal._pycompat.dataclasses import slots_if310
from pycmarshal._pycompat.typing import (
    Buffer,
    ReadableBinary,
    get_buffer,
    is_readable_binary,
)
from pycmarshal._references import ReferenceTable
from pycmarshal.constants import (
    DEFAULT_MAX_DEPTH,
    FLAG_REF,
    PYC_HEADER_SIZE,
    PYTHON_CONSTANT_TAGS,
    PYTHON_INT_TAGS,
    PYTHON_SEQUENCE_TAGS,
    PYTHON_SHORT_STR_TAGS,
    PYTHON_STR_TAGS,
    REFERENCEABLE_TAGS,
    UNSUPPORTED_TAGS,
    MarshalTag,
    TagConstraint,
)
from pycmarshal.objects import (
    MarshalBytes,
    MarshalCode,
    MarshalComplex,
    MarshalConstant,
    MarshalDict,
    MarshalDictItem,
    MarshalFloat,
    MarshalInt,
    MarshalObject,
    MarshalRef,
    MarshalSequence,
    MarshalStr,
)
from pycmarshal.pyc import CodeLayoutWarning, PycFile, PycHeader

if TYPE_CHECKING:
    from typing_extensions import Never

    from _typeshed import SupportsRead

logger = logging.getLogger(__name__)

_INT32: Final = struct.Struct("<i")
_UINT32: Final = struct.Struct("<I")
_INT64: Final = struct.Struct("<q")
_DOUBLE: Final = struct.Struct("<d")


class TypeByte(NamedTuple):
    """A type byte split into its tag and reference flag."""

    tag: MarshalTag
    flag_ref: bool


@dataclass(**slots_if310())
class ReadableTagStream:
    """
    A cursor over marshal data, with methods to read the primitive values.

    All values are little-endian. Reads advance `pos`, and raise a
    `DecodeMarshalError` subclass rather than reading past the end of `data`.
    """

    data: ReadableBinary
    pos: int = field(default=0)
    references: ReferenceTable = field(default_factory=ReferenceTable)

    @property
    def eof(self) -> bool:
        return self.pos == len(self.data)

    @property
    def remaining(self) -> int:
        return max(0, len(self.data) - self.pos)

    def ensure_capacity(self, count: int) -> None:
        if self.pos + count > len(self.data):
            raise TruncatedInputDecodeMarshalError(
                f"Data truncated: Expected {count} bytes at position {self.pos} but "
                f"{self.remaining} available",
                expected=count,
                available=self.remaining,
                position=self.pos,
                data=self.data,
            )

    def read_type_byte(self) -> TypeByte:
        """Read a type byte, separating the reference flag from the tag.

        The flag never affects how the tag's data is read.
        """
        code = self.read_uint8()
        value = code & ~FLAG_REF
        if value not in MarshalTag:
            self.pos -= 1
            raise UnknownTagDecodeMarshalError(
                f"Expected a type byte at position {self.pos} but found "
                f"{code:#04x} (not a valid tag)",
                value=value,
                position=self.pos,
                data=self.data,
            )
        return TypeByte(MarshalTag(value), bool(code & FLAG_REF))

    def read_bytes(self, count: int) -> ReadableBinary:
        self.ensure_capacity(count)
        self.pos += count
        return self.data[self.pos - count : self.pos]

    def read_uint8(self) -> int:
        self.ensure_capacity(1)
        value = self.data[self.pos]
        self.pos += 1
        return value

    def _unpack(self, fmt: struct.Struct) -> int | float:
        self.ensure_capacity(fmt.size)
        (value,) = fmt.unpack_from(self.data, self.pos)
        self.pos += fmt.size
        return cast("int | float", value)

    def read_int32(self) -> int:
        return cast(int, self._unpack(_INT32))

    def read_uint32(self) -> int:
        return cast(int, self._unpack(_UINT32))

    def read_int64(self) -> int:
        return cast(int, self._unpack(_INT64))

    def read_double(self) -> float:
        return cast(float, self._unpack(_DOUBLE))

    def read_length(self, *, short: bool = False) -> int:
        """
        Read the length of a string or the item count of a container.

        Short lengths are a single unsigned byte, others are signed 32-bit.
        Negative lengths, and lengths larger than the remaining data, are
        malformed. Every item of a container needs at least one byte, so counts
        are checked the same way.
        """
        start = self.pos
        length = self.read_uint8() if short else self.read_int32()
        if length < 0:
            raise MalformedLengthDecodeMarshalError(
                f"Length at position {start} is negative",
                length=length,
                position=start,
                data=self.data,
            )
        if length > self.remaining:
            raise MalformedLengthDecodeMarshalError(
                f"Length at position {start} exceeds the {self.remaining} bytes "
                f"available",
                length=length,
                position=start,
                data=self.data,
            )
        return length

    def read_string(self, *, short: bool = False) -> bytes:
        """Read a byte string, prefixed with its length."""
        length = self.read_length(short=short)
        return bytes(self.read_bytes(length))

    def read_text(self, *, short: bool = False) -> str:
        """
        Decode a length-prefixed string of UTF-8 text.

        The text is decoded strictly. CPython writes strings containing lone
        surrogates with the `surrogatepass` error handler, so `marshal.dumps()`
        of such a string cannot be decoded here.

        Raises
        ------
        TextDecodeMarshalError
            If the bytes are not valid UTF-8, including encoded surrogates.
        """
        length = self.read_length(short=short)
        try:
            # Not all ReadableBinary types have a decode method.
            value = codecs.decode(self.read_bytes(length), "utf-8")
        except UnicodeDecodeError as e:
            self.pos -= length
            raise TextDecodeMarshalError(
                f"String at position {self.pos} is not valid UTF-8 data",
                position=self.pos,
                data=self.data,
            ) from e
        return cast(str, value)

    def read_objects(
        self, ctx: DecodeContext, count: int
    ) -> Generator[MarshalObject, None, int]:
        """Decode `count` consecutive objects."""
        if count < 0:
            raise MalformedLengthDecodeMarshalError(
                f"Object count is negative: {count}",
                length=count,
                position=self.pos,
                data=self.data,
            )
        for _ in range(count):
            yield ctx.decode_object()
        return count

    def read_dict_items(
        self, ctx: DecodeContext
    ) -> Generator[MarshalDictItem, None, int]:
        """
        Decode key-value pairs until a NULL key.

        There's no count, the pairs end with a `TYPE_NULL` in the position of a
        key, and no value follows it. A NULL value does not end the dict.
        """
        actual_count = 0
        while (key := ctx.decode_object()).tag is not MarshalTag.TYPE_NULL:
            yield MarshalDictItem(key, ctx.decode_object())
            actual_count += 1
        return actual_count

    def read_code(self, ctx: DecodeContext) -> MarshalCode:
        # The arguments are evaluated in order, which is the encoded field order.
        return MarshalCode(
            argcount=self.read_int32(),
            posonlyargcount=self.read_int32(),
            kwonlyargcount=self.read_int32(),
            stacksize=self.read_int32(),
            flags=self.read_int32(),
            code=ctx.decode_object(),
            consts=ctx.decode_object(),
            names=ctx.decode_object(),
            localsplusnames=ctx.decode_object(),
            localspluskinds=ctx.decode_object(),
            filename=ctx.decode_object(),
            name=ctx.decode_object(),
            qualname=ctx.decode_object(),
            firstlineno=self.read_uint32(),
            linetable=ctx.decode_object(),
            exceptiontable=ctx.decode_object(),
        )

    def read_header(self) -> PycHeader:
        """Read the fixed-size pyc header preceding the marshal data.

        The fields are not validated.
        """
        self.ensure_capacity(PYC_HEADER_SIZE)
        header = PycHeader(
            magic=self.read_uint32(),
            flags=bytes(self.read_bytes(4)),
            timestamp=self.read_uint32(),
            length=self.read_uint32(),
        )
        logger.debug(
            "Read pyc header: magic=%s, python_version=%s, flags=%r",
            header.magic_hex,
            header.python_version,
            header.pyc_flags,
        )
        return header


class TagReaderFn(Protocol):
    """
    The type of a function that reads tags on behalf of a `TagReader`.

    Typically this is an unbound method of `TagReader`. It's called with the
    stream positioned just after the type byte.
    """

    def __call__(
        self,
        tag_reader: TagReader,
        tag: MarshalTag,
        ctx: DecodeContext,
        /,
    ) -> MarshalObject: ...


@dataclass(init=False, **slots_if310())
class TagReaderRegistry:
    """
    A registry of `MarshalTag`s and the functions that can read them.

    `TagReader` uses this to dispatch decode calls to an appropriate function.
    """

    index: Mapping[MarshalTag, TagReaderFn]
    _index: dict[MarshalTag, TagReaderFn]

    def __init__(self, entries: TagReaderRegistry | None = None) -> None:
        self._index = {}
        self.index = MappingProxyType(self._index)
        if entries:
            self.register_all(entries)

    def register(
        self, tag: MarshalTag | TagConstraint, tag_reader: TagReaderFn
    ) -> None:
        """Associate a function with a tag, so that `match()` will return it."""
        if isinstance(tag, TagConstraint):
            for t in sorted(tag.allowed_tags):
                self._index[t] = tag_reader
        else:
            self._index[tag] = tag_reader

    def register_all(self, registry: TagReaderRegistry) -> None:
        """
        Copy the registrations of another registry into this one.

        Existing registrations that also occur in `registry` are overwritten.
        """
        self._index.update(registry.index)

    def match(self, tag: MarshalTag) -> TagReaderFn | None:
        """Get the `TagReaderFn` function registered for a tag, or `None`."""
        return self._index.get(tag)


class DecodeContext(Protocol):
    if TYPE_CHECKING:

        @property
        def stream(self) -> ReadableTagStream:
            """The `ReadableTagStream` this context reads from."""

    else:
        stream: ReadableTagStream
        """The `ReadableTagStream` this context reads from."""

    def decode_object(self) -> MarshalObject:
        """
        Read one object, including all of its children, from the stream.

        The object's `tag` is the tag read from its type byte, with the
        reference flag removed.

        Raises
        ------
        DecodeMarshalError
            If the data is not well-formed, or contains an unsupported type.
        """


@dataclass(init=False, **slots_if310())
class TagReader:
    """
    Controls how marshal data is converted to `pycmarshal.objects` values.

    Every `MarshalTag` except `TYPE_UNKNOWN` has a reader function. The readers
    for the variants pycmarshal does not support ([UNSUPPORTED_TAGS]) raise
    `UnsupportedVariantDecodeMarshalError`.

    [UNSUPPORTED_TAGS]: `pycmarshal.constants.UNSUPPORTED_TAGS`

    Parameters
    ----------
    tag_readers
        Override the default tag reader functions. Default: no overrides.
    """

    tag_readers: TagReaderRegistry

    def __init__(self, tag_readers: TagReaderRegistry | None = None) -> None:
        self.tag_readers = TagReaderRegistry()
        self.register_tag_readers(self.tag_readers)
        if tag_readers:
            self.tag_readers.register_all(tag_readers)

    def register_tag_readers(self, tag_readers: TagReaderRegistry) -> None:
        r = tag_readers.register

        r(PYTHON_CONSTANT_TAGS, TagReader.deserialize_constant)
        r(PYTHON_INT_TAGS, TagReader.deserialize_int)
        r(MarshalTag.TYPE_BINARY_FLOAT, TagReader.deserialize_float)
        r(MarshalTag.TYPE_BINARY_COMPLEX, TagReader.deserialize_complex)
        r(MarshalTag.TYPE_STRING, TagReader.deserialize_bytes)
        r(PYTHON_STR_TAGS, TagReader.deserialize_str)
        r(PYTHON_SHORT_STR_TAGS, TagReader.deserialize_str)
        r(MarshalTag.TYPE_SMALL_TUPLE, TagReader.deserialize_sequence)
        r(PYTHON_SEQUENCE_TAGS, TagReader.deserialize_sequence)
        r(MarshalTag.TYPE_DICT, TagReader.deserialize_dict)
        r(MarshalTag.TYPE_CODE, TagReader.deserialize_code)
        r(MarshalTag.TYPE_REF, TagReader.deserialize_ref)
        r(UNSUPPORTED_TAGS, TagReader.deserialize_unsupported)

    def read(self, tag: MarshalTag, ctx: DecodeContext) -> MarshalObject:
        read_tag = self.tag_readers.match(tag)
        if not read_tag:
            stream = ctx.stream
            raise UnknownTagDecodeMarshalError(
                f"No tag reader is able to read the tag {tag.name}",
                value=tag,
                position=stream.pos - 1,
                data=stream.data,
            )
        return read_tag(self, tag, ctx)

    def deserialize_constant(
        self, tag: MarshalTag, ctx: DecodeContext
    ) -> MarshalConstant:
        return MarshalConstant(tag)

    def deserialize_int(self, tag: MarshalTag, ctx: DecodeContext) -> MarshalInt:
        if tag is MarshalTag.TYPE_INT64:
            return MarshalInt(ctx.stream.read_int64(), tag)
        return MarshalInt(ctx.stream.read_int32(), tag)

    def deserialize_float(
        self, tag: Literal[MarshalTag.TYPE_BINARY_FLOAT], ctx: DecodeContext
    ) -> MarshalFloat:
        return MarshalFloat(ctx.stream.read_double())

    def deserialize_complex(
        self, tag: Literal[MarshalTag.TYPE_BINARY_COMPLEX], ctx: DecodeContext
    ) -> MarshalComplex:
        real = ctx.stream.read_double()
        imag = ctx.stream.read_double()
        return MarshalComplex(real, imag)

    def deserialize_bytes(
        self, tag: Literal[MarshalTag.TYPE_STRING], ctx: DecodeContext
    ) -> MarshalBytes:
        return MarshalBytes(ctx.stream.read_string())

    def deserialize_str(self, tag: MarshalTag, ctx: DecodeContext) -> MarshalStr:
        # The short forms are limited to 255 bytes by their 1-byte length.
        short = tag in PYTHON_SHORT_STR_TAGS
        return MarshalStr(ctx.stream.read_text(short=short), tag)

    def deserialize_sequence(
        self, tag: MarshalTag, ctx: DecodeContext
    ) -> MarshalSequence:
        # Every item is at least a type byte, so counts are bounded by the
        # remaining data before anything is decoded.
        count = ctx.stream.read_length(short=tag is MarshalTag.TYPE_SMALL_TUPLE)
        return MarshalSequence(tuple(ctx.stream.read_objects(ctx, count)), tag)

    def deserialize_dict(
        self, tag: Literal[MarshalTag.TYPE_DICT], ctx: DecodeContext
    ) -> MarshalDict:
        return MarshalDict(tuple(ctx.stream.read_dict_items(ctx)))

    def deserialize_code(
        self, tag: Literal[MarshalTag.TYPE_CODE], ctx: DecodeContext
    ) -> MarshalCode:
        return ctx.stream.read_code(ctx)

    def deserialize_ref(
        self, tag: Literal[MarshalTag.TYPE_REF], ctx: DecodeContext
    ) -> MarshalRef:
        return MarshalRef(ctx.stream.read_uint32())

    def deserialize_unsupported(
        self, tag: MarshalTag, ctx: DecodeContext
    ) -> Never:
        # The type byte has been read, report its position.
        raise UnsupportedVariantDecodeMarshalError(
            f"Stream contains a {tag.name} object which is not supported",
            tag=tag,
            position=ctx.stream.pos - 1,
            data=ctx.stream.data,
        )


@dataclass(init=False, **slots_if310())
class DefaultDecodeContext(DecodeContext):
    """
    The default implementation of [`DecodeContext`].

    Objects nested more than `max_depth` levels deep are not decoded, a
    `DepthExceededDecodeMarshalError` is raised instead.

    [`DecodeContext`]: `pycmarshal.decode.DecodeContext`
    """

    stream: ReadableTagStream
    tag_reader: TagReader
    max_depth: int
    depth: int

    def __init__(
        self,
        *,
        data: ReadableBinary | None = None,
        stream: ReadableTagStream | None = None,
        tag_reader: TagReader | None = None,
        max_depth: int | None = None,
    ) -> None:
        if stream is None:
            if data is None:
                raise ValueError("data or stream must be provided")
            stream = ReadableTagStream(data)
        elif data is not None:
            raise ValueError("data and stream cannot both be provided")

        self.stream = stream
        self.tag_reader = default_tag_reader if tag_reader is None else tag_reader
        self.max_depth = DEFAULT_MAX_DEPTH if max_depth is None else max_depth
        self.depth = 0

    def decode_object(self) -> MarshalObject:
        if self.depth >= self.max_depth:
            self._report_depth_exceeded()
        self.depth += 1
        try:
            tag, flag_ref = self.stream.read_type_byte()
            # Indexes are allocated when the type byte is read, so containers
            # are numbered before their children.
            ref_index = (
                self.stream.references.reserve()
                if flag_ref and tag in REFERENCEABLE_TAGS
                else None
            )
            obj = self.tag_reader.read(tag, self)
            if ref_index is not None:
                self.stream.references.fill(ref_index, obj)
            return obj
        finally:
            self.depth -= 1

    def _report_depth_exceeded(
        self, *, cause: BaseException | None = None
    ) -> Never:
        raise DepthExceededDecodeMarshalError(
            f"Objects are nested more than {self.max_depth} levels deep",
            max_depth=self.max_depth,
            position=self.stream.pos,
            data=self.stream.data,
        ) from cause


default_tag_reader: Final = TagReader()
"""A [`TagReader`](`pycmarshal.TagReader`) with no reader functions overridden."""


@dataclass(init=False)
class Decoder:
    """
    A re-usable configuration for decoding pyc files and marshal data.

    Parameters
    ----------
    max_depth
        The maximum nesting depth of decoded objects. Default:
        [DEFAULT_MAX_DEPTH].
    tag_reader
        The [TagReader] that creates objects for each tag. Default: a
        `TagReader()`.

    [DEFAULT_MAX_DEPTH]: `pycmarshal.constants.DEFAULT_MAX_DEPTH`
    [TagReader]: `pycmarshal.TagReader`
    """

    max_depth: int
    """The maximum nesting depth of decoded objects."""
    tag_reader: TagReader

    def __init__(
        self, max_depth: int | None = None, tag_reader: TagReader | None = None
    ) -> None:
        if max_depth is not None and max_depth < 1:
            raise ValueError(f"max_depth must be at least 1: {max_depth}")
        self.max_depth = DEFAULT_MAX_DEPTH if max_depth is None else max_depth
        self.tag_reader = default_tag_reader if tag_reader is None else tag_reader

    def _create_context(self, data: ReadableBinary | Buffer) -> DefaultDecodeContext:
        return DefaultDecodeContext(
            stream=ReadableTagStream(
                data if is_readable_binary(data) else get_buffer(data)
            ),
            tag_reader=self.tag_reader,
            max_depth=self.max_depth,
        )

    def _decode_top_level(self, ctx: DefaultDecodeContext) -> MarshalObject:
        start = ctx.stream.pos
        try:
            obj = ctx.decode_object()
        except RecursionError as e:
            # max_depth was set higher than the interpreter's stack allows.
            ctx._report_depth_exceeded(cause=e)
        logger.debug(
            "Decoded %s object from %d bytes at position %d, %d referenceable "
            "objects",
            obj.tag.name,
            ctx.stream.pos - start,
            start,
            len(ctx.stream.references),
        )
        return obj

    def _decode_pyc(
        self, data: ReadableBinary | Buffer, *, stacklevel: int
    ) -> PycFile:
        # stacklevel counts frames up from here to the caller's code.
        ctx = self._create_context(data)
        header = ctx.stream.read_header()
        if header.supports_code_layout is False:
            warnings.warn(
                CodeLayoutWarning(
                    f"pyc magic {header.magic_hex} was written by CPython "
                    f"{header.python_version}, whose code objects are not laid "
                    f"out as pycmarshal expects. Code objects will not decode "
                    f"correctly."
                ),
                stacklevel=stacklevel,
            )
        obj = self._decode_top_level(ctx)
        return PycFile(header=header, object=obj, references=ctx.stream.references)

    def decode(self, fp: SupportsRead[bytes]) -> MarshalObject:
        """
        Decode the top-level object of a pyc file.

        Parameters
        ----------
        fp
            The binary file-like object to read and decode.

        Returns
        -------
        :
            The object following the pyc header, normally a `MarshalCode`.
        """
        return self._decode_pyc(fp.read(), stacklevel=3).object

    def decodes(self, data: ReadableBinary | Buffer) -> MarshalObject:
        """
        Decode the top-level object of a pyc file from a bytes-like object.

        The header is read, then exactly one object.
        """
        return self._decode_pyc(data, stacklevel=3).object

    def decodes_pyc(self, data: ReadableBinary | Buffer) -> PycFile:
        """
        Decode a pyc file's header and top-level object.

        Returns
        -------
        :
            The header, object and the `ReferenceTable` that resolves the
            `MarshalRef` objects in it.
        """
        return self._decode_pyc(data, stacklevel=3)

    def decodes_marshal(self, data: ReadableBinary | Buffer) -> MarshalObject:
        """
        Decode marshal data without a pyc header.

        This is the format written by the standard library's `marshal.dumps()`.
        """
        ctx = self._create_context(data)
        return self._decode_top_level(ctx)


def loads(
    data: ReadableBinary | Buffer,
    *,
    max_depth: int | None = None,
    tag_reader: TagReader | None = None,
) -> MarshalObject:
    """Decode the top-level object of a pyc file.

    Parameters
    ----------
    data
        The bytes to decode as a bytes-like object such as `bytes`,
        `bytearray`, `memoryview`.
    max_depth
        The maximum nesting depth of decoded objects. Default:
        [DEFAULT_MAX_DEPTH].
    tag_reader
        The [TagReader] that creates objects for each tag.

    [DEFAULT_MAX_DEPTH]: `pycmarshal.constants.DEFAULT_MAX_DEPTH`
    [TagReader]: `pycmarshal.TagReader`

    Returns
    -------
    :
        The object following the header, normally a `MarshalCode` for the
        module.

    Raises
    ------
    DecodeMarshalError
        When `data` is not a well-formed pyc file, or contains objects
        pycmarshal does not support. The subclass of the error identifies the
        problem.

    Examples
    --------
    >>> from pycmarshal import loads
    >>> header = bytes.fromhex("cb0d0d0a 00000000 00000000 00000000")
    >>> loads(header + b"i" + (42).to_bytes(4, "little"))
    MarshalInt(value=42, tag=<MarshalTag.TYPE_INT: 105>)
    """
    decoder = Decoder(max_depth=max_depth, tag_reader=tag_reader)
    return decoder._decode_pyc(data, stacklevel=3).object


def load(
    fp: SupportsRead[bytes],
    *,
    max_depth: int | None = None,
    tag_reader: TagReader | None = None,
) -> MarshalObject:
    """Decode the top-level object of a pyc file read from a binary file.

    The arguments are the same as [`loads()`](`pycmarshal.loads`).
    """
    decoder = Decoder(max_depth=max_depth, tag_reader=tag_reader)
    return decoder._decode_pyc(fp.read(), stacklevel=3).object


def loads_pyc(
    data: ReadableBinary | Buffer,
    *,
    max_depth: int | None = None,
    tag_reader: TagReader | None = None,
) -> PycFile:
    """Decode a pyc file, returning its header and back-reference table too.

    The arguments are the same as [`loads()`](`pycmarshal.loads`).
    """
    decoder = Decoder(max_depth=max_depth, tag_reader=tag_reader)
    return decoder._decode_pyc(data, stacklevel=3)


def loads_marshal(
    data: ReadableBinary | Buffer,
    *,
    max_depth: int | None = None,
    tag_reader: TagReader | None = None,
) -> MarshalObject:
    """Decode marshal data without a pyc header, as written by `marshal.dumps()`.

    The arguments are the same as [`loads()`](`pycmarshal.loads`).

    Examples
    --------
    >>> loads_marshal(b"\\xa9\\x02\\xe9\\x01\\x00\\x00\\x00N")
    MarshalSequence(items=(MarshalInt(value=1, tag=<MarshalTag.TYPE_INT: 105>), \
MarshalConstant(tag=<MarshalTag.TYPE_NONE: 78>)), tag=<MarshalTag.TYPE_SMALL_TUPLE: 41>)
    """
    return Decoder(max_depth=max_depth, tag_reader=tag_reader).decodes_marshal(data)
