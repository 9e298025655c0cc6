from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, NewType

from pycmarshal._errors import ReferenceIndexMarshalError
from pycmarshal._pycompat.dataclasses import slots_if310

if TYPE_CHECKING:
    from pycmarshal.objects import MarshalObject

RefIndex = NewType("RefIndex", int)


@dataclass(init=False, **slots_if310())
class ReferenceTable:
    """The objects registered for back-references while decoding marshal data.

    Objects whose type byte has the reference flag set are appended in the
    order their type bytes occur, so a container is registered before its
    children. A slot is reserved when the type byte is read and filled once
    the object has been decoded. `TYPE_REF` objects name a slot by its index.

    The table only ever looks objects up, it never owns them: the decoded tree
    owns every object, and a resolved reference is a shared view of an object
    that lives elsewhere in the tree.
    """

    _objects: list[MarshalObject | None]

    def __init__(self) -> None:
        self._objects = []

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[MarshalObject | None]:
        return iter(self._objects)

    def reserve(self) -> RefIndex:
        """Allocate the next index for an object that is about to be decoded."""
        index = RefIndex(len(self._objects))
        self._objects.append(None)
        return index

    def fill(self, index: RefIndex, obj: MarshalObject) -> None:
        if not 0 <= index < len(self._objects):
            raise ReferenceIndexMarshalError(
                "Reference index has not been reserved", index=index
            )
        if self._objects[index] is not None:
            raise ValueError(f"Reference index {index} is already filled")
        self._objects[index] = obj

    def get(self, index: int) -> MarshalObject:
        """
        Get the object registered at `index`.

        Raises
        ------
        ReferenceIndexMarshalError
            If `index` was never registered, or refers to an object whose
            decoding did not complete (a reference from inside the object to
            itself, which the tree cannot represent).
        """
        if not 0 <= index < len(self._objects):
            raise ReferenceIndexMarshalError(
                "Reference index has not been registered", index=index
            )
        obj = self._objects[index]
        if obj is None:
            raise ReferenceIndexMarshalError(
                "Reference index refers to an object that was not fully decoded",
                index=index,
            )
        return obj
