"""
otbm_codec: OTBM tile-map container codec for map editing tools

Reads and writes OTBM documents to and from typed node trees, and rewrites
tile areas of large maps one subtree at a time.
"""

__version__ = "0.1.0"
__author__ = "otbm_codec Contributors"

# Codec operations
from .maps import (
    decode_node,
    encode_node,
    iter_transform,
    read,
    transform,
    write,
)
from .format import (
    EncodeError,
    FormatError,
    MalformedNodeError,
    OTBMError,
    UnknownAttributeTagError,
    escape,
    unescape,
)

# Data models
from .maps.models import (
    AttributeSet,
    CodecConfig,
    DEFAULT_CONFIG,
    HouseTile,
    Item,
    MapData,
    MapDocument,
    Node,
    Opaque,
    Position,
    RootHeader,
    Tile,
    TileArea,
    Town,
    Towns,
    Waypoint,
    Waypoints,
    ZoneFlags,
)

# Settings and logging
from .settings import AppSettings
from .utils.logging_config import setup_logging

__all__ = [
    # Operations
    "read",
    "write",
    "transform",
    "iter_transform",
    "decode_node",
    "encode_node",
    "escape",
    "unescape",

    # Errors
    "OTBMError",
    "FormatError",
    "MalformedNodeError",
    "UnknownAttributeTagError",
    "EncodeError",

    # Data models
    "AttributeSet",
    "CodecConfig",
    "DEFAULT_CONFIG",
    "HouseTile",
    "Item",
    "MapData",
    "MapDocument",
    "Node",
    "Opaque",
    "Position",
    "RootHeader",
    "Tile",
    "TileArea",
    "Town",
    "Towns",
    "Waypoint",
    "Waypoints",
    "ZoneFlags",

    # Settings and logging
    "AppSettings",
    "setup_logging",
]
