from __future__ import annotations

import pytest

from pycmarshal._errors import ReferenceIndexMarshalError
from pycmarshal._references import ReferenceTable
from pycmarshal.objects import MarshalInt, MarshalStr


def test_ReferenceTable() -> None:
    table = ReferenceTable()
    first = table.reserve()
    second = table.reserve()

    assert (first, second) == (0, 1)
    assert len(table) == 2

    table.fill(second, MarshalStr("b"))
    table.fill(first, MarshalInt(1))

    assert table.get(0) == MarshalInt(1)
    assert table.get(1) == MarshalStr("b")
    assert list(table) == [MarshalInt(1), MarshalStr("b")]


def test_ReferenceTable__get_unfilled() -> None:
    table = ReferenceTable()
    index = table.reserve()

    with pytest.raises(ReferenceIndexMarshalError, match="not fully decoded"):
        table.get(index)


@pytest.mark.parametrize("index", [-1, 1, 2**32 - 1])
def test_ReferenceTable__get_unregistered(index: int) -> None:
    table = ReferenceTable()
    table.fill(table.reserve(), MarshalInt(1))

    with pytest.raises(ReferenceIndexMarshalError) as exc_info:
        table.get(index)
    assert exc_info.value.index == index


def test_ReferenceTable__fill() -> None:
    table = ReferenceTable()

    with pytest.raises(ReferenceIndexMarshalError):
        table.fill(0, MarshalInt(1))  # type: ignore[arg-type]

    index = table.reserve()
    table.fill(index, MarshalInt(1))
    with pytest.raises(ValueError, match="already filled"):
        table.fill(index, MarshalInt(2))
