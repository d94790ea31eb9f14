"""
Attribute (TLV) block codec.

An attribute block has no overall length prefix: it runs from the end of a
node's fixed fields to the end of the node's own payload. Each entry is one
tag byte followed by a tag-specific value. Decoding stops once fewer than two
bytes remain.
"""

from ..format.constants import AttributeTag
from ..format.cursor import ByteReader, ByteWriter
from ..format.errors import UnknownAttributeTagError
from .models import DEFAULT_CONFIG, AttributeSet, CodecConfig, Position, ZoneFlags


def decode_attributes(
    reader: ByteReader, config: CodecConfig = DEFAULT_CONFIG
) -> AttributeSet:
    """Decode the attribute block from the reader's position to the end.

    Args:
        reader: Reader positioned right after a node's fixed fields
        config: Codec options (string encoding, description separator)

    Returns:
        Decoded AttributeSet

    Raises:
        UnknownAttributeTagError: If a tag is not in the attribute table
        MalformedNodeError: If a value runs past the end of the payload
    """
    attrs = AttributeSet()
    encoding = config.string_encoding

    while reader.remaining >= 2:
        tag_offset = reader.base_offset + reader.position
        raw_tag = reader.read_u8("attribute tag")
        try:
            tag = AttributeTag(raw_tag)
        except ValueError:
            raise UnknownAttributeTagError(raw_tag, tag_offset) from None

        if tag in (AttributeTag.TEXT, AttributeTag.DESC):
            attrs.text = reader.read_string(encoding, "text")
        elif tag == AttributeTag.DESCRIPTION:
            value = reader.read_string(encoding, "description")
            if attrs.description is None:
                attrs.description = value
            else:
                attrs.description = f"{attrs.description}{config.description_separator}{value}"
        elif tag == AttributeTag.EXT_SPAWN_FILE:
            attrs.spawn_file = reader.read_string(encoding, "spawn file")
        elif tag == AttributeTag.EXT_HOUSE_FILE:
            attrs.house_file = reader.read_string(encoding, "house file")
        elif tag == AttributeTag.HOUSE_DOOR_ID:
            attrs.house_door_id = reader.read_u8("house door id")
        elif tag == AttributeTag.DEPOT_ID:
            attrs.depot_id = reader.read_u16("depot id")
        elif tag == AttributeTag.TILE_FLAGS:
            attrs.zones = ZoneFlags.from_mask(reader.read_u32("tile flags"))
        elif tag == AttributeTag.RUNE_CHARGES:
            attrs.rune_charges = reader.read_u16("rune charges")
        elif tag == AttributeTag.COUNT:
            attrs.count = reader.read_u8("count")
        elif tag == AttributeTag.ITEM:
            attrs.item_id = reader.read_u16("item id")
        elif tag == AttributeTag.ACTION_ID:
            attrs.action_id = reader.read_u16("action id")
        elif tag == AttributeTag.UNIQUE_ID:
            attrs.unique_id = reader.read_u16("unique id")
        elif tag == AttributeTag.TELE_DEST:
            attrs.teleport_destination = Position(
                x=reader.read_u16("teleport x"),
                y=reader.read_u16("teleport y"),
                z=reader.read_u8("teleport z"),
            )

    return attrs


def encode_attributes(
    writer: ByteWriter, attrs: AttributeSet, config: CodecConfig = DEFAULT_CONFIG
) -> None:
    """Append every populated attribute to the writer in canonical order.

    The order is: description, spawn file, house file, tile flags, item id,
    count, rune charges, action id, unique id, text, teleport destination,
    depot id, house door id. Text is always written with the TEXT tag.

    Raises:
        EncodeError: If a value does not fit its attribute width
    """
    encoding = config.string_encoding

    if attrs.description is not None:
        writer.write_u8(AttributeTag.DESCRIPTION)
        writer.write_string(attrs.description, encoding, "description")
    if attrs.spawn_file is not None:
        writer.write_u8(AttributeTag.EXT_SPAWN_FILE)
        writer.write_string(attrs.spawn_file, encoding, "spawn_file")
    if attrs.house_file is not None:
        writer.write_u8(AttributeTag.EXT_HOUSE_FILE)
        writer.write_string(attrs.house_file, encoding, "house_file")
    if attrs.zones is not None:
        writer.write_u8(AttributeTag.TILE_FLAGS)
        writer.write_u32(attrs.zones.to_mask(), "zones")
    if attrs.item_id is not None:
        writer.write_u8(AttributeTag.ITEM)
        writer.write_u16(attrs.item_id, "item_id")
    if attrs.count is not None:
        writer.write_u8(AttributeTag.COUNT)
        writer.write_u8(attrs.count, "count")
    if attrs.rune_charges is not None:
        writer.write_u8(AttributeTag.RUNE_CHARGES)
        writer.write_u16(attrs.rune_charges, "rune_charges")
    if attrs.action_id is not None:
        writer.write_u8(AttributeTag.ACTION_ID)
        writer.write_u16(attrs.action_id, "action_id")
    if attrs.unique_id is not None:
        writer.write_u8(AttributeTag.UNIQUE_ID)
        writer.write_u16(attrs.unique_id, "unique_id")
    if attrs.text is not None:
        writer.write_u8(AttributeTag.TEXT)
        writer.write_string(attrs.text, encoding, "text")
    if attrs.teleport_destination is not None:
        dest = attrs.teleport_destination
        writer.write_u8(AttributeTag.TELE_DEST)
        writer.write_u16(dest.x, "teleport_destination.x")
        writer.write_u16(dest.y, "teleport_destination.y")
        writer.write_u8(dest.z, "teleport_destination.z")
    if attrs.depot_id is not None:
        writer.write_u8(AttributeTag.DEPOT_ID)
        writer.write_u16(attrs.depot_id, "depot_id")
    if attrs.house_door_id is not None:
        writer.write_u8(AttributeTag.HOUSE_DOOR_ID)
        writer.write_u8(attrs.house_door_id, "house_door_id")
