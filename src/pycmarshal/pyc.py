"""The header of a pyc file and the result of decoding a whole pyc file."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from pycmarshal._pycompat.dataclasses import slots_if310
from pycmarshal._versions import (
    CODE_LAYOUT_VERSION,
    magic_number,
    python_version_for_magic,
)
from pycmarshal.constants import PycFlag

if TYPE_CHECKING:
    from packaging.version import Version

    from pycmarshal._references import ReferenceTable
    from pycmarshal.objects import MarshalObject


class CodeLayoutWarning(UserWarning):
    """A pyc header indicates a CPython release with a different code layout."""


@dataclass(frozen=True, **slots_if310())
class PycHeader:
    """
    The 16-byte header preceding the marshal data in a pyc file.

    None of the fields are validated. In particular `length` is reported as
    found, it's not compared with the size of the data.
    """

    magic: int
    """The magic field: a 16-bit number identifying the bytecode version, then
    `\\r\\n`."""
    flags: bytes
    """The 4 bytes of the [PEP 552](https://peps.python.org/pep-0552/) bit
    field."""
    timestamp: int
    """The source file's modification time in Unix seconds."""
    length: int
    """The declared size of the source file."""

    @property
    def magic_hex(self) -> str:
        """
        The magic field as hex.

        >>> PycHeader(0x0A0D0DCB, bytes(4), 0, 0).magic_hex
        '0x0a0d0dcb'
        """
        return f"0x{self.magic:08x}"

    @property
    def magic_number(self) -> int | None:
        return magic_number(self.magic)

    @property
    def python_version(self) -> Version | None:
        """The CPython release that writes this magic field, if known."""
        return python_version_for_magic(self.magic)

    @property
    def supports_code_layout(self) -> bool | None:
        """
        Whether this pyc's code objects use the layout decoded by pycmarshal.

        None if the CPython release can't be identified from the magic field.
        """
        version = self.python_version
        if version is None:
            return None
        return version >= CODE_LAYOUT_VERSION

    @property
    def pyc_flags(self) -> PycFlag:
        return PycFlag(int.from_bytes(self.flags, "little"))

    @property
    def hash_based(self) -> bool:
        return PycFlag.HashBased in self.pyc_flags

    @property
    def modified(self) -> datetime:
        """The `timestamp` field as a UTC datetime.

        Only meaningful when the pyc is not hash-based.
        """
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)

    @property
    def source_hash(self) -> bytes | None:
        """
        The source hash of a hash-based pyc, otherwise None.

        Hash-based pycs store an 8-byte hash in place of the timestamp and
        length fields.
        """
        if not self.hash_based:
            return None
        return self.timestamp.to_bytes(4, "little") + self.length.to_bytes(
            4, "little"
        )


@dataclass(frozen=True, **slots_if310())
class PycFile:
    """A decoded pyc file."""

    header: PycHeader
    object: MarshalObject
    """The top-level object, normally the module's `MarshalCode`."""
    references: ReferenceTable
    """The objects registered for back-references, to resolve `MarshalRef`s."""
