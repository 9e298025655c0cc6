from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from pycmarshal.constants import CodeFlag, MarshalTag, TagInfo
from pycmarshal.objects import (
    CODE_FIELD_NAMES,
    CODE_OBJECT_FIELD_NAMES,
    NULL,
    MarshalBytes,
    MarshalCode,
    MarshalConstant,
    MarshalDict,
    MarshalDictItem,
    MarshalInt,
    MarshalRef,
    MarshalSequence,
    MarshalStr,
)

NONE = MarshalConstant(MarshalTag.TYPE_NONE)


def make_code(**kwargs: object) -> MarshalCode:
    fields: dict[str, object] = {
        "argcount": 0,
        "posonlyargcount": 0,
        "kwonlyargcount": 0,
        "stacksize": 1,
        "flags": 0,
        "code": MarshalBytes(b"\x97\x00"),
        "consts": MarshalSequence((NONE,), MarshalTag.TYPE_SMALL_TUPLE),
        "names": MarshalSequence((), MarshalTag.TYPE_SMALL_TUPLE),
        "localsplusnames": MarshalSequence((), MarshalTag.TYPE_SMALL_TUPLE),
        "localspluskinds": MarshalBytes(b""),
        "filename": MarshalStr("<test>", MarshalTag.TYPE_SHORT_ASCII),
        "name": MarshalStr("<module>", MarshalTag.TYPE_SHORT_ASCII_INTERNED),
        "qualname": MarshalRef(1),
        "firstlineno": 1,
        "linetable": MarshalBytes(b""),
        "exceptiontable": MarshalBytes(b""),
    }
    fields.update(kwargs)
    return MarshalCode(**fields)  # type: ignore[arg-type]


def test_objects_are_immutable() -> None:
    with pytest.raises(FrozenInstanceError):
        MarshalInt(1).value = 2  # type: ignore[misc]


def test_MarshalConstant() -> None:
    assert MarshalConstant(MarshalTag.TYPE_NULL).value is NULL
    assert MarshalConstant(MarshalTag.TYPE_ELLIPSIS).value is Ellipsis
    assert str(NULL) == "NULL"

    with pytest.raises(ValueError, match="MarshalConstant cannot have tag"):
        MarshalConstant(MarshalTag.TYPE_INT)


def test_MarshalInt() -> None:
    assert MarshalInt(-(2**31)).bits == 32
    assert MarshalInt(2**40, MarshalTag.TYPE_INT64).bits == 64

    with pytest.raises(ValueError, match="out of"):
        MarshalInt(2**31)
    with pytest.raises(ValueError):
        MarshalInt(1, MarshalTag.TYPE_LONG)


def test_MarshalStr() -> None:
    s = MarshalStr("x", MarshalTag.TYPE_SHORT_ASCII_INTERNED)
    assert s.interned
    assert s.short
    assert not MarshalStr("x").interned
    assert not MarshalStr("x", MarshalTag.TYPE_ASCII).short

    with pytest.raises(ValueError):
        MarshalStr("x", MarshalTag.TYPE_STRING)


def test_tag_info() -> None:
    assert MarshalStr("x", MarshalTag.TYPE_ASCII).tag_info == TagInfo(
        "ascii", "ASCII unicode string"
    )
    assert MarshalRef(0).tag_info.name == "ref"


def test_MarshalSequence() -> None:
    seq = MarshalSequence((MarshalInt(1), NONE), MarshalTag.TYPE_SET)

    assert len(seq) == 2
    assert seq[1] == NONE
    assert seq[:1] == (MarshalInt(1),)
    assert list(seq) == [MarshalInt(1), NONE]
    assert list(seq.children()) == [("items[0]", MarshalInt(1)), ("items[1]", NONE)]

    with pytest.raises(ValueError):
        MarshalSequence((), MarshalTag.TYPE_DICT)


def test_MarshalDict() -> None:
    d = MarshalDict((MarshalDictItem(MarshalStr("a"), MarshalInt(1)),))

    assert len(d) == 1
    assert list(d) == [(MarshalStr("a"), MarshalInt(1))]
    assert list(d.children()) == [
        ("items[0].key", MarshalStr("a")),
        ("items[0].value", MarshalInt(1)),
    ]


def test_MarshalCode() -> None:
    code = make_code(flags=0x0023)

    assert code.code_flags == (
        CodeFlag.OPTIMIZED | CodeFlag.NEWLOCALS | CodeFlag.GENERATOR
    )
    assert list(code.children())[0] == ("code", MarshalBytes(b"\x97\x00"))
    assert tuple(name for name, _ in code.children()) == CODE_OBJECT_FIELD_NAMES
    assert "firstlineno" not in CODE_OBJECT_FIELD_NAMES


def test_MarshalCode__field_order() -> None:
    assert tuple(MarshalCode.__dataclass_fields__)[:-1] == CODE_FIELD_NAMES


def test_MarshalCode__firstlineno_is_unsigned() -> None:
    assert make_code(firstlineno=2**32 - 1).firstlineno == 2**32 - 1

    with pytest.raises(ValueError, match="firstlineno"):
        make_code(firstlineno=-1)


def test_MarshalRef() -> None:
    with pytest.raises(ValueError):
        MarshalRef(-1)
    assert MarshalRef(2**32 - 1).index == 2**32 - 1
