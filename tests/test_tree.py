"""Tests for the recursive tree decoder and encoder."""

import pytest

from otbm_codec.format.errors import EncodeError, MalformedNodeError
from otbm_codec.maps.models import (
    AttributeSet,
    CodecConfig,
    HouseTile,
    Item,
    MapData,
    Opaque,
    Position,
    Tile,
    TileArea,
    Town,
    Towns,
    Waypoint,
    Waypoints,
    ZoneFlags,
)
from otbm_codec.maps.tree import TreeDecoder, decode_node, encode_node

from .builders import node, tile_area_payload, tile_payload, u16


def sample_map_data() -> MapData:
    return MapData(
        attributes=AttributeSet(description="sample", spawn_file="spawn.xml"),
        features=[
            TileArea(
                x=1024,
                y=1024,
                z=7,
                tiles=[
                    Tile(x=3, y=1, attributes=AttributeSet(item_id=106)),
                    Tile(
                        x=1,
                        y=1,
                        items=[
                            Item(
                                id=1987,
                                content=[Item(id=2148, attributes=AttributeSet(count=100))],
                            ),
                            Item(
                                id=1387,
                                attributes=AttributeSet(
                                    teleport_destination=Position(1000, 1000, 8)
                                ),
                            ),
                        ],
                    ),
                    HouseTile(
                        x=2,
                        y=1,
                        house_id=4,
                        attributes=AttributeSet(zones=ZoneFlags(protection=True)),
                        items=[Item(id=1209, attributes=AttributeSet(house_door_id=1))],
                    ),
                ],
            ),
            Towns(towns=[Town(id=1, name="Thais", x=32369, y=32241, z=7)]),
            Waypoints(nodes=[Waypoint(name="temple", x=32369, y=32241, z=7)]),
            Opaque(payload=b"\x42\xff\x00"),
        ],
    )


class TestTreeDecoder:
    """Test decoding subtrees from the wire format."""

    def test_consumed_length_stops_at_matching_end(self) -> None:
        """Test the consumed length includes the end byte and nothing after it."""
        data = node(b"\x0f") + b"trailing"
        decoded, consumed = decode_node(data)
        assert decoded == Waypoints()
        assert consumed == 3

    def test_decode_at_offset(self) -> None:
        """Test decoding a subtree in the middle of a buffer."""
        data = b"\x00\x00" + node(tile_area_payload(1, 2, 3)) + b"\x00"
        decoded, consumed = decode_node(data, offset=2)
        assert decoded == TileArea(x=1, y=2, z=3)
        assert consumed == len(data) - 3

    def test_children_go_to_kind_slot(self) -> None:
        """Test children land in the collection named by the parent kind."""
        data = node(tile_area_payload(0, 0, 7), node(tile_payload(5, 5)), node(tile_payload(6, 5)))
        decoded, _ = decode_node(data)
        assert isinstance(decoded, TileArea)
        assert [t.x for t in decoded.tiles] == [5, 6]

    def test_child_order_is_preserved(self) -> None:
        """Test children keep their file order."""
        data = node(b"\x0c", *(node(b"\x0d" + bytes(4) + u16(1) + bytes([n]) + bytes(5)) for n in b"cab"))
        decoded, _ = decode_node(data)
        assert [t.name for t in decoded.children] == ["c", "a", "b"]

    def test_escaped_structural_bytes_in_payload(self) -> None:
        """Test escaped start/end bytes inside a payload are data, not structure."""
        data = node(b"\x06" + u16(0xFFFE) + b"\x06" + u16(2) + b"\xfe\xff")
        decoded, consumed = decode_node(data)
        assert decoded == Item(id=0xFFFE, attributes=AttributeSet(text="\xfe\xff"))
        assert consumed == len(data)

    def test_truncated_before_final_end(self) -> None:
        """Test input ending before the last end byte is malformed."""
        data = node(b"\x02", node(tile_area_payload(0, 0, 7)))
        with pytest.raises(MalformedNodeError) as excinfo:
            decode_node(data[:-1])
        assert excinfo.value.offset is not None
        assert excinfo.value.offset <= len(data) - 1

    def test_truncated_inside_payload(self) -> None:
        """Test input ending inside a payload is malformed."""
        with pytest.raises(MalformedNodeError):
            decode_node(b"\xfe\x04\x00\x00")

    def test_truncated_after_escape(self) -> None:
        """Test an escape byte as the last input byte is malformed."""
        with pytest.raises(MalformedNodeError):
            decode_node(b"\xfe\x06\xfd")

    def test_must_start_with_start_byte(self) -> None:
        """Test decoding somewhere other than a start byte fails."""
        with pytest.raises(MalformedNodeError):
            decode_node(b"\x06\x00\x00\xff")

    def test_data_between_children(self) -> None:
        """Test plain bytes after a child and before the next marker are malformed."""
        with pytest.raises(MalformedNodeError, match="between child nodes"):
            decode_node(b"\xfe\x0c" + node(b"\x0c") + b"\x41\xff")

    def test_max_depth(self) -> None:
        """Test nesting deeper than configured is malformed."""
        data = node(b"\x06\x01\x00", node(b"\x06\x01\x00", node(b"\x06\x01\x00", node(b"\x06\x01\x00"))))
        with pytest.raises(MalformedNodeError, match="depth"):
            decode_node(data, config=CodecConfig(max_depth=2))
        decoded, _ = decode_node(data, config=CodecConfig(max_depth=3))
        assert isinstance(decoded, Item)

    def test_skip_matches_decode(self) -> None:
        """Test skipping a subtree ends where decoding it ends."""
        data = encode_node(sample_map_data()) + b"\xfe"
        decoder = TreeDecoder(data)
        _, end = decoder.decode(0)
        assert decoder.skip(0) == end

    def test_peek_kind(self) -> None:
        """Test reading a kind tag without decoding."""
        decoder = TreeDecoder(node(b"\x04\x00") + node(b"") + node(b"\xfe"))
        assert decoder.peek_kind(0) == 0x04
        assert decoder.peek_kind(4) is None
        assert decoder.peek_kind(6) == 0xFE


class TestTreeEncoder:
    """Test encoding node trees."""

    def test_round_trip(self) -> None:
        """Test decode(encode(tree)) is structurally equal to the tree."""
        tree = sample_map_data()
        decoded, consumed = decode_node(encode_node(tree))
        assert decoded == tree

    def test_encoded_length_is_consumed_length(self) -> None:
        """Test the decoder consumes exactly the encoded bytes."""
        encoded = encode_node(sample_map_data())
        _, consumed = decode_node(encoded)
        assert consumed == len(encoded)

    def test_text_with_start_byte(self) -> None:
        """Test a 0xFE byte in text is escaped and decodes back exactly."""
        item = Item(id=100, attributes=AttributeSet(text="a\xfeb"))
        encoded = encode_node(item)
        assert b"a\xfd\xfeb" in encoded
        decoded, _ = decode_node(encoded)
        assert isinstance(decoded, Item)
        assert decoded.attributes.text == "a\xfeb"
        assert decoded.attributes.text.encode("latin-1") == b"a\xfeb"

    def test_wire_layout(self) -> None:
        """Test start byte, payload, children in order, end byte."""
        area = TileArea(x=0, y=0, z=7, tiles=[Tile(x=5, y=5), Tile(x=4, y=5)])
        assert encode_node(area) == node(
            tile_area_payload(0, 0, 7), node(tile_payload(5, 5)), node(tile_payload(4, 5))
        )

    def test_opaque_subtree_reproduces_bytes(self) -> None:
        """Test an unknown kind re-encodes to its exact original bytes."""
        raw = b"\xfe\x99\x01\xfd\xfe\x02" + node(tile_area_payload(0, 0, 7)) + b"\xff"
        decoded, _ = decode_node(raw)
        assert decoded == Opaque(payload=b"\x99\x01\xfe\x02", nodes=[TileArea(x=0, y=0, z=7)])
        assert encode_node(decoded) == raw

    def test_missing_field_in_child(self) -> None:
        """Test a broken descendant fails the whole encode."""
        area = TileArea(x=0, y=0, z=7, tiles=[Tile(x=1)])
        with pytest.raises(EncodeError, match="Tile"):
            encode_node(area)

    def test_max_depth(self) -> None:
        """Test nesting deeper than configured fails to encode."""
        item = Item(id=1, content=[Item(id=2, content=[Item(id=3)])])
        with pytest.raises(EncodeError):
            encode_node(item, CodecConfig(max_depth=1))


class TestNodeModel:
    """Test node helpers."""

    def test_children_alias(self) -> None:
        """Test children reads and writes the kind's own collection."""
        tile = Tile(x=0, y=0)
        tile.children = [Item(id=1)]
        assert tile.items == [Item(id=1)]
        assert Towns(towns=[Town()]).children == [Town()]

    def test_walk_is_depth_first(self) -> None:
        """Test walk yields nodes in file order."""
        tree = sample_map_data()
        kinds = [type(n).__name__ for n in tree.walk()][:6]
        assert kinds == ["MapData", "TileArea", "Tile", "Tile", "Item", "Item"]

    def test_attribute_set_is_empty(self) -> None:
        """Test is_empty treats zero values as present."""
        assert AttributeSet().is_empty()
        assert not AttributeSet(unique_id=0).is_empty()
