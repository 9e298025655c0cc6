from __future__ import annotations

from pycmarshal._pycompat.enum import IntEnum, IterableIntFlag


class Colour(IntEnum):
    RED = 1
    GREEN = 2


class Perm(IterableIntFlag):
    R = 4
    W = 2
    X = 1


def test_IntEnum_contains_values() -> None:
    assert 1 in Colour
    assert Colour.GREEN in Colour
    assert 3 not in Colour
    assert -1 not in Colour


def test_IterableIntFlag_iter() -> None:
    assert set(Perm.R | Perm.X) == {Perm.R, Perm.X}
    assert list(Perm(0)) == []
