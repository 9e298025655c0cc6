from __future__ import annotations

import sys
from enum import EnumMeta, IntFlag
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from typing_extensions import Self


class ContainsValueEnumMeta(EnumMeta):
    def __contains__(cls, value: object) -> bool:
        return value in cls._value2member_map_


if sys.version_info < (3, 11):

    class IterableIntFlag(IntFlag):
        def __iter__(self) -> Iterator[Self]:
            for flag in type(self):
                if self & flag:
                    yield flag

else:

    class IterableIntFlag(IntFlag):
        pass


# From py3.12 `0x69 in SomeIntEnum` returns True/False. Earlier versions raise
# TypeError for non-member values.
if sys.version_info < (3, 12):
    from enum import IntEnum as _IntEnum

    class IntEnum(_IntEnum, metaclass=ContainsValueEnumMeta):
        def __str__(self) -> str:
            return str(self._value_)

else:
    from enum import IntEnum as IntEnum  # noqa: F401  # re-export
