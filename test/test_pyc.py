from __future__ import annotations

import importlib.util
import io
import py_compile
import sys
import warnings
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

import pytest
from marshal_bytes import NONE, pyc_header
from packaging.version import Version

from pycmarshal._versions import magic_number, python_version_for_magic
from pycmarshal.constants import MarshalTag, PycFlag
from pycmarshal.decode import Decoder, load, loads, loads_pyc
from pycmarshal.objects import MarshalCode, MarshalConstant, MarshalStr
from pycmarshal.pyc import CodeLayoutWarning, PycHeader

PY310_MAGIC = int.from_bytes((3439).to_bytes(2, "little") + b"\r\n", "little")


@pytest.mark.parametrize(
    "number, version",
    [
        (3413, Version("3.8")),
        (3425, Version("3.9")),
        (3439, Version("3.10")),
        (3495, Version("3.11")),
        (3531, Version("3.12")),
        (3571, Version("3.13")),
        (3399, None),
        (9999, None),
    ],
)
def test_python_version_for_magic(number: int, version: Version | None) -> None:
    magic = int.from_bytes(number.to_bytes(2, "little") + b"\r\n", "little")

    assert magic_number(magic) == number
    assert python_version_for_magic(magic) == version


def test_python_version_for_magic__running_interpreter() -> None:
    magic = int.from_bytes(importlib.util.MAGIC_NUMBER, "little")
    version = python_version_for_magic(magic)

    assert version in (None, Version(f"{sys.version_info[0]}.{sys.version_info[1]}"))


def test_magic_number__without_suffix() -> None:
    assert magic_number(0x00000DCB) is None


def test_PycHeader() -> None:
    header = PycHeader(
        magic=0x0A0D0DCB, flags=bytes(4), timestamp=1_700_000_000, length=42
    )

    assert header.magic_hex == "0x0a0d0dcb"
    assert header.magic_number == 3531
    assert header.python_version == Version("3.12")
    assert header.supports_code_layout
    assert header.pyc_flags == PycFlag(0)
    assert not header.hash_based
    assert header.modified == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)
    assert header.source_hash is None


def test_PycHeader__hash_based() -> None:
    header = PycHeader(
        magic=0x0A0D0DCB,
        flags=b"\x03\x00\x00\x00",
        timestamp=0x04030201,
        length=0x08070605,
    )

    assert header.hash_based
    assert header.pyc_flags == PycFlag.HashBased | PycFlag.CheckSource
    assert header.source_hash == bytes(range(1, 9))


def test_PycHeader__unknown_magic() -> None:
    header = PycHeader(magic=0xDEADBEEF, flags=bytes(4), timestamp=0, length=0)

    assert header.magic_number is None
    assert header.python_version is None
    assert header.supports_code_layout is None


def test_loads__warns_for_old_code_layout() -> None:
    with pytest.warns(CodeLayoutWarning, match="0x0a0d0d6f"):
        result = loads_pyc(pyc_header(magic=PY310_MAGIC) + NONE)

    assert result.header.supports_code_layout is False
    assert result.object == MarshalConstant(MarshalTag.TYPE_NONE)


@pytest.mark.parametrize(
    "decode",
    [
        loads,
        lambda data: load(io.BytesIO(data)),
        loads_pyc,
        lambda data: Decoder().decode(io.BytesIO(data)),
        lambda data: Decoder().decodes(data),
        lambda data: Decoder().decodes_pyc(data),
    ],
)
def test_code_layout_warning_points_at_caller(
    decode: Callable[[bytes], object]
) -> None:
    with warnings.catch_warnings(record=True) as w:
        warnings.simplefilter("always")
        decode(pyc_header(magic=PY310_MAGIC) + NONE)

    assert len(w) == 1
    assert issubclass(w[0].category, CodeLayoutWarning)
    assert w[0].filename == __file__


@pytest.mark.parametrize("magic", [0x0A0D0DCB, 0xDEADBEEF])
def test_loads__no_warning(magic: int) -> None:
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        loads(pyc_header(magic=magic) + NONE)


@pytest.mark.skipif(
    sys.version_info < (3, 11), reason="code objects use the 3.11+ layout"
)
def test_load__compiled_module(tmp_path: Path) -> None:
    source = tmp_path / "example.py"
    source.write_text("GREETING = 'hello'\n\ndef greet():\n    return GREETING\n")
    pyc = Path(
        py_compile.compile(
            str(source),
            cfile=str(tmp_path / "example.pyc"),
            doraise=True,
            invalidation_mode=py_compile.PycInvalidationMode.TIMESTAMP,
        )
    )

    with open(pyc, "rb") as fp:
        obj = load(fp)
    result = loads_pyc(pyc.read_bytes())

    assert isinstance(obj, MarshalCode)
    assert obj == result.object
    assert result.header.magic == int.from_bytes(importlib.util.MAGIC_NUMBER, "little")
    assert result.header.length == source.stat().st_size
    assert result.header.timestamp == int(source.stat().st_mtime) & 0xFFFFFFFF

    name = obj.name
    if not isinstance(name, MarshalStr):
        name = name.resolve(result.references)  # type: ignore[attr-defined]
    assert name == MarshalStr("<module>", name.tag)  # type: ignore[attr-defined]
