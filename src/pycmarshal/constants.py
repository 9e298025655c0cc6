"""Constant values related to the CPython marshal format."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, AbstractSet, Final, NamedTuple

from pycmarshal._pycompat.dataclasses import slots_if310
from pycmarshal._pycompat.enum import IntEnum, IterableIntFlag

if TYPE_CHECKING:
    from typing_extensions import TypeGuard

FLAG_REF: Final = 0x80
"""The top bit of a type byte. Marks the object for registration as a
back-reference target."""

INT32_RANGE: Final = range(-(2**31), 2**31)
UINT32_RANGE: Final = range(0, 2**32)

DEFAULT_MAX_DEPTH: Final = 128
"""The default limit on the nesting depth of decoded objects.

CPython's own limit (`MAX_MARSHAL_STACK_DEPTH`) is 2000, but each level of
nesting costs several Python stack frames here, so the default keeps well
clear of the interpreter's recursion limit.
"""

PYC_HEADER_SIZE: Final = 16


class MarshalTag(IntEnum):
    """1-byte type codes used to identify the type of the next value.

    Notes
    -----
    These are the `TYPE_*` definitions from [`Python/marshal.c`](\
https://github.com/python/cpython/blob/main/Python/marshal.c) in the CPython
    source. The high bit ([FLAG_REF](`pycmarshal.constants.FLAG_REF`)) is not
    part of the tag and is removed before a value is looked up here.
    """

    TYPE_NULL = ord("0")
    TYPE_NONE = ord("N")
    TYPE_FALSE = ord("F")
    TYPE_TRUE = ord("T")
    TYPE_STOPITER = ord("S")
    TYPE_ELLIPSIS = ord(".")
    # Version 0 uses TYPE_FLOAT instead.
    TYPE_BINARY_FLOAT = ord("g")
    # Version 0 uses TYPE_COMPLEX instead.
    TYPE_BINARY_COMPLEX = ord("y")
    # Arbitrary precision, 15-bit digits. See also TYPE_INT.
    TYPE_LONG = ord("l")
    # Bytes. (The name comes from Python 2.)
    TYPE_STRING = ord("s")
    # See also TYPE_SMALL_TUPLE.
    TYPE_TUPLE = ord("(")
    TYPE_LIST = ord("[")
    TYPE_DICT = ord("{")
    TYPE_CODE = ord("c")
    TYPE_UNICODE = ord("u")
    TYPE_UNKNOWN = ord("?")
    # Added in version 2
    TYPE_SET = ord("<")
    TYPE_FROZENSET = ord(">")
    # Added in version 5
    TYPE_SLICE = ord(":")

    # Special cases for unicode strings, added in version 4 (except
    # TYPE_INTERNED, version 1+).
    TYPE_INTERNED = ord("t")
    TYPE_ASCII = ord("a")
    TYPE_ASCII_INTERNED = ord("A")
    TYPE_SHORT_ASCII = ord("z")
    TYPE_SHORT_ASCII_INTERNED = ord("Z")

    # Special cases for small objects. 32-bit int in all versions.
    TYPE_INT = ord("i")
    # Version 4+
    TYPE_SMALL_TUPLE = ord(")")

    # Supported for backwards compatibility. Only generated by version 0.
    TYPE_COMPLEX = ord("x")
    TYPE_FLOAT = ord("f")
    # Not generated any more.
    TYPE_INT64 = ord("I")

    # References, added in version 3. index:uint32
    TYPE_REF = ord("r")


class TagInfo(NamedTuple):
    """The symbolic name and description of a `MarshalTag`."""

    name: str
    description: str


UNKNOWN_TAG_INFO: Final = TagInfo("unknown", "Unknown type")

# fmt: off
_TAG_INFO: Final[dict[int, TagInfo]] = {
    MarshalTag.TYPE_NULL: TagInfo("null", "Not a Python object"),
    MarshalTag.TYPE_NONE: TagInfo("None", "Python None"),
    MarshalTag.TYPE_FALSE: TagInfo("False", "Python False"),
    MarshalTag.TYPE_TRUE: TagInfo("True", "Python True"),
    MarshalTag.TYPE_STOPITER: TagInfo("StopIteration", "StopIteration exception"),
    MarshalTag.TYPE_ELLIPSIS: TagInfo("Ellipsis", "Ellipsis object"),
    MarshalTag.TYPE_BINARY_FLOAT: TagInfo("binary_float", "Binary float"),
    MarshalTag.TYPE_BINARY_COMPLEX: TagInfo("binary_complex", "Binary complex"),
    MarshalTag.TYPE_LONG: TagInfo("long", "Long integer (arbitrary precision)"),
    MarshalTag.TYPE_STRING: TagInfo("string", "Byte string"),
    MarshalTag.TYPE_TUPLE: TagInfo("tuple", "Tuple"),
    MarshalTag.TYPE_LIST: TagInfo("list", "List"),
    MarshalTag.TYPE_DICT: TagInfo("dict", "Dictionary"),
    MarshalTag.TYPE_CODE: TagInfo("code", "Code object"),
    MarshalTag.TYPE_UNICODE: TagInfo("unicode", "Unicode string"),
    MarshalTag.TYPE_UNKNOWN: UNKNOWN_TAG_INFO,
    MarshalTag.TYPE_SET: TagInfo("set", "Set"),
    MarshalTag.TYPE_FROZENSET: TagInfo("frozenset", "Frozen set"),
    MarshalTag.TYPE_SLICE: TagInfo("slice", "Slice object"),
    MarshalTag.TYPE_INTERNED: TagInfo("interned", "Interned unicode string"),
    MarshalTag.TYPE_ASCII: TagInfo("ascii", "ASCII unicode string"),
    MarshalTag.TYPE_ASCII_INTERNED: TagInfo("ascii_interned", "Interned ASCII unicode string"),  # noqa: E501
    MarshalTag.TYPE_SHORT_ASCII: TagInfo("short_ascii", "Short ASCII unicode string"),
    MarshalTag.TYPE_SHORT_ASCII_INTERNED: TagInfo("short_ascii_interned", "Interned short ASCII unicode string"),  # noqa: E501
    MarshalTag.TYPE_INT: TagInfo("int", "Integer"),
    MarshalTag.TYPE_SMALL_TUPLE: TagInfo("small_tuple", "Small tuple"),
    MarshalTag.TYPE_COMPLEX: TagInfo("complex", "Complex number"),
    MarshalTag.TYPE_FLOAT: TagInfo("float", "Float number"),
    MarshalTag.TYPE_INT64: TagInfo("int64", "64-bit integer"),
    MarshalTag.TYPE_REF: TagInfo("ref", "Reference to an earlier object"),
}
# fmt: on


def lookup_tag(value: int) -> TagInfo:
    """
    Get the symbolic name and description of a type byte.

    The reference flag bit is ignored. Values that are not marshal tags map to
    an "unknown" entry rather than failing.

    >>> lookup_tag(ord("i"))
    TagInfo(name='int', description='Integer')
    >>> lookup_tag(ord("i") | FLAG_REF).name
    'int'
    >>> lookup_tag(0x01).name
    'unknown'
    """
    return _TAG_INFO.get(value & ~FLAG_REF, UNKNOWN_TAG_INFO)


@dataclass(frozen=True, **slots_if310())
class TagConstraint:
    """A named set of `MarshalTag`s."""

    name: str
    """A description of the tags allowed by this constraint."""
    allowed_tags: AbstractSet[MarshalTag]
    """The set of tags allowed by this constraint."""

    def __contains__(self, tag: object) -> TypeGuard[MarshalTag]:
        """Return True if `tag` is allowed by the constraint."""
        return tag in self.allowed_tags

    @property
    def allowed_tag_names(self) -> str:
        """A human-readable list of `MarshalTag`s allowed by this constraint."""
        return ", ".join(sorted(t.name for t in self.allowed_tags))

    def __str__(self) -> str:
        return f"{self.name}: {self.allowed_tag_names}"


PYTHON_CONSTANT_TAGS: Final = TagConstraint(
    name="Python constants",
    allowed_tags=frozenset(
        {
            MarshalTag.TYPE_NULL,
            MarshalTag.TYPE_NONE,
            MarshalTag.TYPE_FALSE,
            MarshalTag.TYPE_TRUE,
            MarshalTag.TYPE_STOPITER,
            MarshalTag.TYPE_ELLIPSIS,
        }
    ),
)
"""Tags which have no data after the type byte. The tag alone is the value."""

PYTHON_INT_TAGS: Final = TagConstraint(
    name="Fixed-width integers",
    allowed_tags=frozenset({MarshalTag.TYPE_INT, MarshalTag.TYPE_INT64}),
)

PYTHON_STR_TAGS: Final = TagConstraint(
    name="Strings with 32-bit lengths",
    allowed_tags=frozenset(
        {
            MarshalTag.TYPE_UNICODE,
            MarshalTag.TYPE_INTERNED,
            MarshalTag.TYPE_ASCII,
            MarshalTag.TYPE_ASCII_INTERNED,
        }
    ),
)

PYTHON_SHORT_STR_TAGS: Final = TagConstraint(
    name="Strings with 8-bit lengths",
    allowed_tags=frozenset(
        {MarshalTag.TYPE_SHORT_ASCII, MarshalTag.TYPE_SHORT_ASCII_INTERNED}
    ),
)

PYTHON_INTERNED_STR_TAGS: Final = TagConstraint(
    name="Interned strings",
    allowed_tags=frozenset(
        {
            MarshalTag.TYPE_INTERNED,
            MarshalTag.TYPE_ASCII_INTERNED,
            MarshalTag.TYPE_SHORT_ASCII_INTERNED,
        }
    ),
)

PYTHON_SEQUENCE_TAGS: Final = TagConstraint(
    name="Sequences with 32-bit counts",
    allowed_tags=frozenset(
        {
            MarshalTag.TYPE_TUPLE,
            MarshalTag.TYPE_LIST,
            MarshalTag.TYPE_SET,
            MarshalTag.TYPE_FROZENSET,
        }
    ),
)
"""
Sequence-like containers.

Sets and frozensets are kept in their encoded order, their items are not
de-duplicated. (`TYPE_SMALL_TUPLE` is also a sequence, but its count is a
single byte.)
"""

UNSUPPORTED_TAGS: Final = TagConstraint(
    name="Unsupported variants",
    allowed_tags=frozenset(
        {
            MarshalTag.TYPE_LONG,
            MarshalTag.TYPE_FLOAT,
            MarshalTag.TYPE_COMPLEX,
            MarshalTag.TYPE_SLICE,
        }
    ),
)
"""Valid marshal tags that this package does not decode."""

REFERENCEABLE_TAGS: Final = TagConstraint(
    name="Referenceable objects",
    allowed_tags=frozenset(MarshalTag)
    - PYTHON_CONSTANT_TAGS.allowed_tags
    - {MarshalTag.TYPE_REF, MarshalTag.TYPE_UNKNOWN},
)
"""
Tags of objects which are registered for back-references when flagged.

CPython never registers singletons (None, True, etc.) or references
themselves, even if the flag bit is set on them.
"""


class PycFlag(IterableIntFlag):
    """
    The bit field following the magic number in a pyc header.

    Notes
    -----
    Defined by [PEP 552](https://peps.python.org/pep-0552/).
    """

    HashBased = 1
    """The timestamp and size fields hold a SipHash of the source file."""
    CheckSource = 2
    """For hash-based pycs, the import system checks the hash against the
    source."""


class CodeFlag(IterableIntFlag):
    """The `co_flags` bits of a code object (`CO_*` in CPython's `code.h`)."""

    OPTIMIZED = 0x0001
    NEWLOCALS = 0x0002
    VARARGS = 0x0004
    VARKEYWORDS = 0x0008
    NESTED = 0x0010
    GENERATOR = 0x0020
    NOFREE = 0x0040
    COROUTINE = 0x0080
    ITERABLE_COROUTINE = 0x0100
    ASYNC_GENERATOR = 0x0200
