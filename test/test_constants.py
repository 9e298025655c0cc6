from __future__ import annotations

import pytest

from pycmarshal.constants import (
    FLAG_REF,
    PYTHON_CONSTANT_TAGS,
    PYTHON_SEQUENCE_TAGS,
    REFERENCEABLE_TAGS,
    UNKNOWN_TAG_INFO,
    UNSUPPORTED_TAGS,
    CodeFlag,
    MarshalTag,
    PycFlag,
    TagInfo,
    lookup_tag,
)


def test_MarshalTag() -> None:
    assert int(MarshalTag.TYPE_INT) in MarshalTag
    assert ord("i") in MarshalTag
    assert -1 not in MarshalTag
    assert 0x01 not in MarshalTag
    assert ord("i") | FLAG_REF not in MarshalTag
    assert MarshalTag(ord("c")) is MarshalTag.TYPE_CODE


def test_MarshalTag__flag_bit_is_unused() -> None:
    assert all(t & FLAG_REF == 0 for t in MarshalTag)


@pytest.mark.parametrize(
    "value, expected",
    [
        (ord("N"), TagInfo("None", "Python None")),
        (ord("z"), TagInfo("short_ascii", "Short ASCII unicode string")),
        (ord("z") | FLAG_REF, TagInfo("short_ascii", "Short ASCII unicode string")),
        (ord("r"), TagInfo("ref", "Reference to an earlier object")),
        (ord("?"), UNKNOWN_TAG_INFO),
        (0x00, UNKNOWN_TAG_INFO),
        (0xFF, UNKNOWN_TAG_INFO),
    ],
)
def test_lookup_tag(value: int, expected: TagInfo) -> None:
    assert lookup_tag(value) == expected


def test_lookup_tag__all_tags_have_names() -> None:
    for t in MarshalTag:
        if t is MarshalTag.TYPE_UNKNOWN:
            continue
        info = lookup_tag(t)
        assert info != UNKNOWN_TAG_INFO
        assert lookup_tag(t | FLAG_REF) == info


def test_lookup_tag__names_are_unique() -> None:
    names = [lookup_tag(t).name for t in MarshalTag]
    assert len(set(names)) == len(names)


def test_TagConstraint() -> None:
    assert MarshalTag.TYPE_TUPLE in PYTHON_SEQUENCE_TAGS
    assert MarshalTag.TYPE_SMALL_TUPLE not in PYTHON_SEQUENCE_TAGS
    assert str(UNSUPPORTED_TAGS) == (
        "Unsupported variants: TYPE_COMPLEX, TYPE_FLOAT, TYPE_LONG, TYPE_SLICE"
    )


def test_REFERENCEABLE_TAGS() -> None:
    assert MarshalTag.TYPE_REF not in REFERENCEABLE_TAGS
    assert MarshalTag.TYPE_UNKNOWN not in REFERENCEABLE_TAGS
    assert not (PYTHON_CONSTANT_TAGS.allowed_tags & REFERENCEABLE_TAGS.allowed_tags)
    assert MarshalTag.TYPE_CODE in REFERENCEABLE_TAGS
    assert MarshalTag.TYPE_SHORT_ASCII_INTERNED in REFERENCEABLE_TAGS


def test_PycFlag() -> None:
    assert PycFlag(3) == PycFlag.HashBased | PycFlag.CheckSource
    assert set(PycFlag(3)) == {PycFlag.HashBased, PycFlag.CheckSource}
    assert PycFlag.HashBased not in PycFlag(0)


def test_CodeFlag() -> None:
    flags = CodeFlag(0x0003)
    assert CodeFlag.OPTIMIZED in flags
    assert CodeFlag.NEWLOCALS in flags
    assert CodeFlag.GENERATOR not in flags
    assert CodeFlag.ASYNC_GENERATOR == 0x0200
