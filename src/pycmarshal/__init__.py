"""The main public API of pycmarshal."""

from __future__ import annotations

from pycmarshal._errors import DecodeMarshalError as DecodeMarshalError
from pycmarshal._errors import (
    DepthExceededDecodeMarshalError as DepthExceededDecodeMarshalError,
)
from pycmarshal._errors import (
    MalformedLengthDecodeMarshalError as MalformedLengthDecodeMarshalError,
)
from pycmarshal._errors import MarshalError as MarshalError
from pycmarshal._errors import (
    ReferenceIndexMarshalError as ReferenceIndexMarshalError,
)
from pycmarshal._errors import TextDecodeMarshalError as TextDecodeMarshalError
from pycmarshal._errors import (
    TruncatedInputDecodeMarshalError as TruncatedInputDecodeMarshalError,
)
from pycmarshal._errors import (
    UnknownTagDecodeMarshalError as UnknownTagDecodeMarshalError,
)
from pycmarshal._errors import (
    UnsupportedVariantDecodeMarshalError as UnsupportedVariantDecodeMarshalError,
)
from pycmarshal._pycompat.typing import Buffer as Buffer
from pycmarshal._pycompat.typing import ReadableBinary as ReadableBinary
from pycmarshal._references import ReferenceTable as ReferenceTable
from pycmarshal.constants import FLAG_REF as FLAG_REF
from pycmarshal.constants import CodeFlag as CodeFlag
from pycmarshal.constants import MarshalTag as MarshalTag
from pycmarshal.constants import PycFlag as PycFlag
from pycmarshal.constants import TagInfo as TagInfo
from pycmarshal.constants import lookup_tag as lookup_tag
from pycmarshal.decode import Decoder as Decoder
from pycmarshal.decode import TagReader as TagReader
from pycmarshal.decode import TagReaderRegistry as TagReaderRegistry
from pycmarshal.decode import default_tag_reader as default_tag_reader
from pycmarshal.decode import load as load
from pycmarshal.decode import loads as loads
from pycmarshal.decode import loads_marshal as loads_marshal
from pycmarshal.decode import loads_pyc as loads_pyc
from pycmarshal.objects import NULL as NULL
from pycmarshal.objects import MarshalBytes as MarshalBytes
from pycmarshal.objects import MarshalCode as MarshalCode
from pycmarshal.objects import MarshalComplex as MarshalComplex
from pycmarshal.objects import MarshalConstant as MarshalConstant
from pycmarshal.objects import MarshalDict as MarshalDict
from pycmarshal.objects import MarshalDictItem as MarshalDictItem
from pycmarshal.objects import MarshalFloat as MarshalFloat
from pycmarshal.objects import MarshalInt as MarshalInt
from pycmarshal.objects import MarshalObject as MarshalObject
from pycmarshal.objects import MarshalRef as MarshalRef
from pycmarshal.objects import MarshalSequence as MarshalSequence
from pycmarshal.objects import MarshalStr as MarshalStr
from pycmarshal.paths import get_path as get_path
from pycmarshal.paths import iter_paths as iter_paths
from pycmarshal.pyc import CodeLayoutWarning as CodeLayoutWarning
from pycmarshal.pyc import PycFile as PycFile
from pycmarshal.pyc import PycHeader as PycHeader
