"""
Python types representing the objects decoded from marshal data.

Each decoded object is an immutable dataclass carrying the `MarshalTag` it
was decoded from (without the reference flag bit). Container objects hold
their children in the order they were encoded, and own them exclusively.
"""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Final, Iterator, Literal, NamedTuple, overload

from pycmarshal._pycompat.dataclasses import slots_if310
from pycmarshal.constants import (
    INT32_RANGE,
    PYTHON_CONSTANT_TAGS,
    PYTHON_INT_TAGS,
    PYTHON_INTERNED_STR_TAGS,
    PYTHON_SEQUENCE_TAGS,
    PYTHON_SHORT_STR_TAGS,
    PYTHON_STR_TAGS,
    UINT32_RANGE,
    CodeFlag,
    MarshalTag,
    TagInfo,
    lookup_tag,
)

if TYPE_CHECKING:
    from typing_extensions import TypeAlias

    from pycmarshal._references import ReferenceTable


class MarshalNullEnum(Enum):
    """Defines the NULL enum value."""

    NULL = "NULL"
    """Represents `TYPE_NULL`, the marshal value that is not a Python object."""

    def __repr__(self) -> str:
        return self.name

    def __str__(self) -> str:
        return self.name


MarshalNullType: TypeAlias = Literal[MarshalNullEnum.NULL]
NULL: Final[MarshalNullType] = MarshalNullEnum.NULL
"""The value of a `TYPE_NULL` constant. It terminates dicts."""

_CONSTANT_VALUES: Final[dict[MarshalTag, object]] = {
    MarshalTag.TYPE_NULL: NULL,
    MarshalTag.TYPE_NONE: None,
    MarshalTag.TYPE_FALSE: False,
    MarshalTag.TYPE_TRUE: True,
    MarshalTag.TYPE_STOPITER: StopIteration,
    MarshalTag.TYPE_ELLIPSIS: Ellipsis,
}


class MarshalObject(ABC):
    """The base class of every decoded marshal object."""

    __slots__ = ()

    if TYPE_CHECKING:

        @property
        def tag(self) -> MarshalTag: ...

    @property
    def tag_info(self) -> TagInfo:
        """The symbolic name and description of this object's tag."""
        return lookup_tag(self.tag)

    def children(self) -> Iterator[tuple[str, MarshalObject]]:
        """
        Iterate over the objects contained in this object, in encoded order.

        Each child is paired with the path segment that addresses it from this
        object, e.g. `items[2]` or `consts`.
        """
        return iter(())


def _check_tag(obj: MarshalObject, allowed: object) -> None:
    if obj.tag not in allowed:  # type: ignore[operator]
        raise ValueError(f"{type(obj).__name__} cannot have tag {obj.tag!r}")


@dataclass(frozen=True, **slots_if310())
class MarshalConstant(MarshalObject):
    """None, True, False, StopIteration, Ellipsis or NULL. The tag is the value."""

    tag: MarshalTag

    def __post_init__(self) -> None:
        _check_tag(self, PYTHON_CONSTANT_TAGS)

    @property
    def value(self) -> object:
        """The Python object the tag stands for ([NULL] for `TYPE_NULL`).

        [NULL]: `pycmarshal.objects.NULL`
        """
        return _CONSTANT_VALUES[self.tag]


@dataclass(frozen=True, **slots_if310())
class MarshalInt(MarshalObject):
    """A fixed-width signed integer: 32-bit `TYPE_INT` or 64-bit `TYPE_INT64`."""

    value: int
    tag: MarshalTag = MarshalTag.TYPE_INT

    def __post_init__(self) -> None:
        _check_tag(self, PYTHON_INT_TAGS)
        if self.tag is MarshalTag.TYPE_INT and self.value not in INT32_RANGE:
            raise ValueError(f"value is out of {INT32_RANGE} for TYPE_INT")

    @property
    def bits(self) -> Literal[32, 64]:
        return 32 if self.tag is MarshalTag.TYPE_INT else 64


@dataclass(frozen=True, **slots_if310())
class MarshalFloat(MarshalObject):
    """A 64-bit IEEE-754 double (`TYPE_BINARY_FLOAT`)."""

    value: float
    tag: MarshalTag = MarshalTag.TYPE_BINARY_FLOAT

    def __post_init__(self) -> None:
        _check_tag(self, {MarshalTag.TYPE_BINARY_FLOAT})


@dataclass(frozen=True, **slots_if310())
class MarshalComplex(MarshalObject):
    """A complex number as two 64-bit doubles (`TYPE_BINARY_COMPLEX`)."""

    real: float
    imag: float
    tag: MarshalTag = MarshalTag.TYPE_BINARY_COMPLEX

    def __post_init__(self) -> None:
        _check_tag(self, {MarshalTag.TYPE_BINARY_COMPLEX})

    @property
    def value(self) -> complex:
        return complex(self.real, self.imag)


@dataclass(frozen=True, **slots_if310())
class MarshalBytes(MarshalObject):
    """An opaque byte string (`TYPE_STRING`), such as bytecode or a line table."""

    value: bytes
    tag: MarshalTag = MarshalTag.TYPE_STRING

    def __post_init__(self) -> None:
        _check_tag(self, {MarshalTag.TYPE_STRING})


@dataclass(frozen=True, **slots_if310())
class MarshalStr(MarshalObject):
    """
    Text, from any of the string tags.

    The tag records which of the encoding-optimised string forms was used:
    ASCII or not, a 1-byte (short) or 4-byte length, and interned or not.
    """

    value: str
    tag: MarshalTag = MarshalTag.TYPE_UNICODE

    def __post_init__(self) -> None:
        _check_tag(
            self,
            PYTHON_STR_TAGS.allowed_tags | PYTHON_SHORT_STR_TAGS.allowed_tags,
        )

    @property
    def interned(self) -> bool:
        return self.tag in PYTHON_INTERNED_STR_TAGS

    @property
    def short(self) -> bool:
        """True if the string's length was encoded as a single byte."""
        return self.tag in PYTHON_SHORT_STR_TAGS


@dataclass(frozen=True, **slots_if310())
class MarshalSequence(MarshalObject):
    """
    A tuple, list, set or frozenset.

    Items are in encoded order. Sets are not de-duplicated or re-ordered; the
    representation is the same for all the sequence tags.
    """

    items: tuple[MarshalObject, ...]
    tag: MarshalTag = MarshalTag.TYPE_TUPLE

    def __post_init__(self) -> None:
        _check_tag(
            self,
            PYTHON_SEQUENCE_TAGS.allowed_tags | {MarshalTag.TYPE_SMALL_TUPLE},
        )

    def __len__(self) -> int:
        return len(self.items)

    @overload
    def __getitem__(self, index: int) -> MarshalObject: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[MarshalObject, ...]: ...

    def __getitem__(
        self, index: int | slice
    ) -> MarshalObject | tuple[MarshalObject, ...]:
        return self.items[index]

    def __iter__(self) -> Iterator[MarshalObject]:
        return iter(self.items)

    def children(self) -> Iterator[tuple[str, MarshalObject]]:
        for i, item in enumerate(self.items):
            yield f"items[{i}]", item


class MarshalDictItem(NamedTuple):
    key: MarshalObject
    value: MarshalObject


@dataclass(frozen=True, **slots_if310())
class MarshalDict(MarshalObject):
    """
    A dict, as its key-value pairs in encoded order.

    Keys are not de-duplicated or checked for hashability, the format does not
    guarantee either.
    """

    items: tuple[MarshalDictItem, ...]
    tag: MarshalTag = MarshalTag.TYPE_DICT

    def __post_init__(self) -> None:
        _check_tag(self, {MarshalTag.TYPE_DICT})

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[MarshalDictItem]:
        return iter(self.items)

    def children(self) -> Iterator[tuple[str, MarshalObject]]:
        for i, (key, value) in enumerate(self.items):
            yield f"items[{i}].key", key
            yield f"items[{i}].value", value


CODE_FIELD_NAMES: Final = (
    "argcount",
    "posonlyargcount",
    "kwonlyargcount",
    "stacksize",
    "flags",
    "code",
    "consts",
    "names",
    "localsplusnames",
    "localspluskinds",
    "filename",
    "name",
    "qualname",
    "firstlineno",
    "linetable",
    "exceptiontable",
)
"""The fields of a `TYPE_CODE` record, in the order they are encoded."""

CODE_OBJECT_FIELD_NAMES: Final = tuple(
    name
    for name in CODE_FIELD_NAMES
    if name
    not in {
        "argcount",
        "posonlyargcount",
        "kwonlyargcount",
        "stacksize",
        "flags",
        "firstlineno",
    }
)
"""The `CODE_FIELD_NAMES` holding nested objects rather than integers."""


@dataclass(frozen=True, **slots_if310())
class MarshalCode(MarshalObject):
    """
    A code object, in the CPython 3.11+ layout.

    The dataclass fields are declared in the order they are encoded. The
    nested objects are kept as decoded, the bytecode is not interpreted.
    Typically `code`, `linetable` and `exceptiontable` are `MarshalBytes`,
    `consts`, `names` and `localsplusnames` are tuples, and `filename`, `name`
    and `qualname` are strings.
    """

    argcount: int
    posonlyargcount: int
    kwonlyargcount: int
    stacksize: int
    flags: int
    code: MarshalObject
    consts: MarshalObject
    names: MarshalObject
    localsplusnames: MarshalObject
    localspluskinds: MarshalObject
    filename: MarshalObject
    name: MarshalObject
    qualname: MarshalObject
    firstlineno: int
    linetable: MarshalObject
    exceptiontable: MarshalObject
    tag: MarshalTag = MarshalTag.TYPE_CODE

    def __post_init__(self) -> None:
        _check_tag(self, {MarshalTag.TYPE_CODE})
        if self.firstlineno not in UINT32_RANGE:
            raise ValueError(f"firstlineno is out of {UINT32_RANGE}")

    @property
    def code_flags(self) -> CodeFlag:
        """The `flags` field as `CodeFlag` bits."""
        return CodeFlag(self.flags)

    def children(self) -> Iterator[tuple[str, MarshalObject]]:
        for name in CODE_OBJECT_FIELD_NAMES:
            yield name, getattr(self, name)


@dataclass(frozen=True, **slots_if310())
class MarshalRef(MarshalObject):
    """
    A back-reference to an object that occurred earlier in the data.

    The `index` is opaque: the decoded tree does not substitute the object it
    refers to. Resolve it with the `ReferenceTable` returned by
    [`loads_pyc()`](`pycmarshal.loads_pyc`).
    """

    index: int
    tag: MarshalTag = MarshalTag.TYPE_REF

    def __post_init__(self) -> None:
        _check_tag(self, {MarshalTag.TYPE_REF})
        if self.index not in UINT32_RANGE:
            raise ValueError(f"index is out of {UINT32_RANGE}")

    def resolve(self, references: ReferenceTable) -> MarshalObject:
        """Look up the object this reference refers to.

        Raises
        ------
        ReferenceIndexMarshalError
            If no object was registered at this reference's index.
        """
        return references.get(self.index)

