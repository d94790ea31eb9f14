"""
Node payload codec.

Maps an unescaped node payload (kind tag, fixed fields, optional attribute
block) to a typed node and back. Children are not handled here; the tree
codec attaches and emits them.
"""

import logging
from typing import Any, Callable, Dict, Type

from ..format.constants import NodeKind
from ..format.cursor import ByteReader, ByteWriter
from ..format.errors import EncodeError
from ..format.escape import escape
from .attributes import decode_attributes, encode_attributes
from .models import (
    DEFAULT_CONFIG,
    CodecConfig,
    HouseTile,
    Item,
    MapData,
    Node,
    Opaque,
    RootHeader,
    Tile,
    TileArea,
    Town,
    Towns,
    Waypoint,
    Waypoints,
)

logger = logging.getLogger(__name__)

_PayloadDecoder = Callable[[ByteReader, CodecConfig], Node]
_PayloadEncoder = Callable[[ByteWriter, Any, CodecConfig], None]


# =============================================================================
# Decoding
# =============================================================================


def _decode_map_data(reader: ByteReader, config: CodecConfig) -> Node:
    return MapData(attributes=decode_attributes(reader, config))


def _decode_tile_area(reader: ByteReader, config: CodecConfig) -> Node:
    return TileArea(
        x=reader.read_u16("tile area x"),
        y=reader.read_u16("tile area y"),
        z=reader.read_u8("tile area z"),
    )


def _decode_tile(reader: ByteReader, config: CodecConfig) -> Node:
    x = reader.read_u8("tile x")
    y = reader.read_u8("tile y")
    return Tile(x=x, y=y, attributes=decode_attributes(reader, config))


def _decode_item(reader: ByteReader, config: CodecConfig) -> Node:
    item_id = reader.read_u16("item id")
    return Item(id=item_id, attributes=decode_attributes(reader, config))


def _decode_house_tile(reader: ByteReader, config: CodecConfig) -> Node:
    x = reader.read_u8("house tile x")
    y = reader.read_u8("house tile y")
    house_id = reader.read_u32("house id")
    return HouseTile(
        x=x, y=y, house_id=house_id, attributes=decode_attributes(reader, config)
    )


def _decode_towns(reader: ByteReader, config: CodecConfig) -> Node:
    return Towns()


def _decode_town(reader: ByteReader, config: CodecConfig) -> Node:
    town_id = reader.read_u32("town id")
    name = reader.read_string(config.string_encoding, "town name")
    return Town(
        id=town_id,
        name=name,
        x=reader.read_u16("town x"),
        y=reader.read_u16("town y"),
        z=reader.read_u8("town z"),
    )


def _decode_waypoints(reader: ByteReader, config: CodecConfig) -> Node:
    return Waypoints()


def _decode_waypoint(reader: ByteReader, config: CodecConfig) -> Node:
    name = reader.read_string(config.string_encoding, "waypoint name")
    return Waypoint(
        name=name,
        x=reader.read_u16("waypoint x"),
        y=reader.read_u16("waypoint y"),
        z=reader.read_u8("waypoint z"),
    )


_DECODERS: Dict[int, _PayloadDecoder] = {
    NodeKind.MAP_DATA: _decode_map_data,
    NodeKind.TILE_AREA: _decode_tile_area,
    NodeKind.TILE: _decode_tile,
    NodeKind.ITEM: _decode_item,
    NodeKind.HOUSE_TILE: _decode_house_tile,
    NodeKind.TOWNS: _decode_towns,
    NodeKind.TOWN: _decode_town,
    NodeKind.WAYPOINTS: _decode_waypoints,
    NodeKind.WAYPOINT: _decode_waypoint,
}


def decode_payload(
    payload: bytes, config: CodecConfig = DEFAULT_CONFIG, offset: int = 0
) -> Node:
    """Decode an unescaped node payload into a typed node without children.

    Unknown kind tags produce an ``Opaque`` node holding the payload verbatim.
    Bytes left over after a kind's fixed fields and attributes are dropped
    and logged at WARNING.

    Args:
        payload: Unescaped payload, starting with the kind tag
        config: Codec options
        offset: Absolute offset of the payload, for error messages

    Returns:
        Typed node

    Raises:
        MalformedNodeError: If the payload is shorter than the kind's layout
        UnknownAttributeTagError: If the attribute block holds an unknown tag
    """
    if not payload:
        return Opaque(payload=b"")

    decoder = _DECODERS.get(payload[0])
    if decoder is None:
        logger.debug(f"Keeping node with unknown kind 0x{payload[0]:02X} as opaque")
        return Opaque(payload=bytes(payload))

    reader = ByteReader(payload, position=1, base_offset=offset)
    node = decoder(reader, config)
    if reader.remaining:
        logger.warning(
            f"Ignoring {reader.remaining} trailing byte(s) in {type(node).__name__} payload "
            f"at offset {reader.base_offset + reader.position}"
        )
    return node


def decode_root_payload(
    payload: bytes, config: CodecConfig = DEFAULT_CONFIG, offset: int = 0
) -> RootHeader:
    """Decode the root node payload into a RootHeader.

    Raises:
        MalformedNodeError: If the payload is shorter than the header layout
    """
    reader = ByteReader(payload, base_offset=offset)
    tag = reader.read_u8("root tag")
    if tag != NodeKind.ROOT_HEADER:
        logger.warning(f"Root node has kind 0x{tag:02X}, expected 0x00; reading it as header")

    header = RootHeader(
        version=reader.read_u32("version"),
        width=reader.read_u16("map width"),
        height=reader.read_u16("map height"),
        items_major_version=reader.read_u32("items major version"),
        items_minor_version=reader.read_u32("items minor version"),
    )
    if reader.remaining:
        logger.warning(f"Ignoring {reader.remaining} trailing byte(s) in root header")
    return header


# =============================================================================
# Encoding
# =============================================================================


def _encode_root_header(writer: ByteWriter, node: RootHeader, config: CodecConfig) -> None:
    writer.write_u32(node.version, "version")
    writer.write_u16(node.width, "width")
    writer.write_u16(node.height, "height")
    writer.write_u32(node.items_major_version, "items_major_version")
    writer.write_u32(node.items_minor_version, "items_minor_version")


def _encode_map_data(writer: ByteWriter, node: MapData, config: CodecConfig) -> None:
    encode_attributes(writer, node.attributes, config)


def _encode_tile_area(writer: ByteWriter, node: TileArea, config: CodecConfig) -> None:
    writer.write_u16(node.x, "x")
    writer.write_u16(node.y, "y")
    writer.write_u8(node.z, "z")


def _encode_tile(writer: ByteWriter, node: Tile, config: CodecConfig) -> None:
    writer.write_u8(node.x, "x")
    writer.write_u8(node.y, "y")
    encode_attributes(writer, node.attributes, config)


def _encode_item(writer: ByteWriter, node: Item, config: CodecConfig) -> None:
    writer.write_u16(node.id, "id")
    encode_attributes(writer, node.attributes, config)


def _encode_house_tile(writer: ByteWriter, node: HouseTile, config: CodecConfig) -> None:
    writer.write_u8(node.x, "x")
    writer.write_u8(node.y, "y")
    writer.write_u32(node.house_id, "house_id")
    encode_attributes(writer, node.attributes, config)


def _encode_nothing(writer: ByteWriter, node: Node, config: CodecConfig) -> None:
    pass


def _encode_town(writer: ByteWriter, node: Town, config: CodecConfig) -> None:
    writer.write_u32(node.id, "id")
    writer.write_string(node.name, config.string_encoding, "name")
    writer.write_u16(node.x, "x")
    writer.write_u16(node.y, "y")
    writer.write_u8(node.z, "z")


def _encode_waypoint(writer: ByteWriter, node: Waypoint, config: CodecConfig) -> None:
    writer.write_string(node.name, config.string_encoding, "name")
    writer.write_u16(node.x, "x")
    writer.write_u16(node.y, "y")
    writer.write_u8(node.z, "z")


_ENCODERS: Dict[Type[Node], _PayloadEncoder] = {
    RootHeader: _encode_root_header,
    MapData: _encode_map_data,
    TileArea: _encode_tile_area,
    Tile: _encode_tile,
    Item: _encode_item,
    HouseTile: _encode_house_tile,
    Towns: _encode_nothing,
    Town: _encode_town,
    Waypoints: _encode_nothing,
    Waypoint: _encode_waypoint,
}


def build_payload(node: Node, config: CodecConfig = DEFAULT_CONFIG) -> bytes:
    """Serialize a node's own payload (tag, fixed fields, attributes), unescaped.

    Raises:
        EncodeError: If the node type is unknown or a required field is
            missing or out of range
    """
    if isinstance(node, Opaque):
        return bytes(node.payload)

    encoder = _ENCODERS.get(type(node))
    if encoder is None or node.KIND is None:
        raise EncodeError(f"Don't know how to encode node of type {type(node).__name__}")

    writer = ByteWriter(context=type(node).__name__)
    writer.write_u8(node.KIND, "kind")
    encoder(writer, node, config)
    return writer.getvalue()


def encode_payload(node: Node, config: CodecConfig = DEFAULT_CONFIG) -> bytes:
    """Serialize a node's own payload and escape its structural bytes."""
    return escape(build_payload(node, config))
