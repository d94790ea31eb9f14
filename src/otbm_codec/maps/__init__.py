"""Map document models and the OTBM node tree codec."""

from .models import (
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
from .tree import TreeDecoder, TreeEncoder, decode_node, encode_node
from .document import read, write
from .stream import iter_transform, transform

__all__ = [
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
    "TreeDecoder",
    "TreeEncoder",
    "decode_node",
    "encode_node",
    "read",
    "write",
    "iter_transform",
    "transform",
]
