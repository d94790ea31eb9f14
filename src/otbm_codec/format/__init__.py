"""Low-level OTBM byte format: constants, errors, cursors and escaping."""

from .constants import (
    ACCEPTED_IDENTIFIERS,
    MAGIC_NULL,
    MAGIC_OTBM,
    NODE_END,
    NODE_ESC,
    NODE_START,
    AttributeTag,
    NodeKind,
    ZoneFlag,
)
from .cursor import ByteReader, ByteWriter
from .errors import (
    EncodeError,
    FormatError,
    MalformedNodeError,
    OTBMError,
    UnknownAttributeTagError,
)
from .escape import escape, unescape

__all__ = [
    "ACCEPTED_IDENTIFIERS",
    "MAGIC_NULL",
    "MAGIC_OTBM",
    "NODE_END",
    "NODE_ESC",
    "NODE_START",
    "AttributeTag",
    "NodeKind",
    "ZoneFlag",
    "ByteReader",
    "ByteWriter",
    "EncodeError",
    "FormatError",
    "MalformedNodeError",
    "OTBMError",
    "UnknownAttributeTagError",
    "escape",
    "unescape",
]
