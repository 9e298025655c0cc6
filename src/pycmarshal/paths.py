"""Address the objects inside a decoded tree by dotted paths.

Paths name each object by the chain of fields and indexes leading to it from
the root, for example `object.consts.items[2]` or `object.items[0].key`.
"""

from __future__ import annotations

from typing import Final, Iterator

from pycmarshal.objects import MarshalObject

DEFAULT_ROOT: Final = "object"


def iter_paths(
    obj: MarshalObject, root: str = DEFAULT_ROOT
) -> Iterator[tuple[str, MarshalObject]]:
    """
    Iterate over every object in a tree with its path, in pre-order.

    Children are visited in encoded order, so the paths are produced in the
    same order as the objects occur in the data.

    >>> from pycmarshal.objects import MarshalInt, MarshalSequence
    >>> tree = MarshalSequence((MarshalInt(1), MarshalSequence((MarshalInt(2),))))
    >>> [path for path, _ in iter_paths(tree)]
    ['object', 'object.items[0]', 'object.items[1]', 'object.items[1].items[0]']
    """
    stack = [(root, obj)]
    while stack:
        path, current = stack.pop()
        yield path, current
        children = [(f"{path}.{name}", child) for name, child in current.children()]
        stack.extend(reversed(children))


def get_path(
    obj: MarshalObject, path: str, root: str = DEFAULT_ROOT
) -> MarshalObject:
    """
    Get the object at a path produced by `iter_paths()`.

    Raises
    ------
    KeyError
        If the path does not lead to an object.

    >>> from pycmarshal.objects import MarshalInt, MarshalSequence
    >>> tree = MarshalSequence((MarshalInt(1), MarshalInt(2)))
    >>> get_path(tree, "object.items[1]")
    MarshalInt(value=2, tag=<MarshalTag.TYPE_INT: 105>)
    """
    if not path.startswith(root):
        raise KeyError(path)
    rest = path[len(root) :]
    current = obj
    while rest:
        for name, child in current.children():
            segment = f".{name}"
            # A segment must end at a separator: items[1] is not items[10].
            if rest.startswith(segment) and rest[len(segment) : len(segment) + 1] in (
                "",
                ".",
            ):
                current = child
                rest = rest[len(segment) :]
                break
        else:
            raise KeyError(path)
    return current
