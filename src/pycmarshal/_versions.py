from __future__ import annotations

from typing import Final

from packaging.version import Version

PYC_MAGIC_SUFFIX: Final = b"\r\n"

# The range of magic numbers used by each CPython release, including its
# alphas and betas. From Lib/importlib/_bootstrap_external.py.
_MAGIC_NUMBER_RANGES: Final = (
    (range(3400, 3414), Version("3.8")),
    (range(3420, 3426), Version("3.9")),
    (range(3430, 3440), Version("3.10")),
    (range(3450, 3496), Version("3.11")),
    (range(3500, 3532), Version("3.12")),
    (range(3550, 3572), Version("3.13")),
)

CODE_LAYOUT_VERSION: Final = Version("3.11")
"""The first CPython release using the code record layout decoded here."""


def magic_number(magic: int) -> int | None:
    """
    Get the 16-bit magic number from a pyc header's 32-bit magic field.

    The field is the number followed by `b"\\r\\n"`, so the number is the
    low 16 bits when the field is read as a little-endian integer.

    >>> magic_number(int.from_bytes((3531).to_bytes(2, "little") + b"\\r\\n", "little"))
    3531
    >>> magic_number(0xDEADBEEF) is None
    True
    """
    if (magic >> 16).to_bytes(2, "little") != PYC_MAGIC_SUFFIX:
        return None
    return magic & 0xFFFF


def python_version_for_magic(magic: int) -> Version | None:
    """
    Get the CPython release that writes pyc files with a magic field.

    Returns
    -------
    :
        The `major.minor` version, or None if the magic field is not one that a
        known CPython release writes.

    >>> python_version_for_magic(0x0A0D0DCB)
    <Version('3.12')>
    >>> python_version_for_magic(0x0A0D0000) is None
    True
    """
    number = magic_number(magic)
    if number is None:
        return None
    for numbers, version in _MAGIC_NUMBER_RANGES:
        if number in numbers:
            return version
    return None
