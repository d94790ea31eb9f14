"""
Byte-level constants of the OTBM container format.

Node kind tags and attribute tags live in separate numeric namespaces:
a node kind tag is always the first byte of a node payload, while an
attribute tag only ever appears inside the attribute region that follows
a node's fixed fields. The two enums are therefore never merged.
"""

from enum import IntEnum, IntFlag


# =============================================================================
# Container
# =============================================================================

MAGIC_NULL = 0x00000000
"""Identifier written by older map editors."""

MAGIC_OTBM = 0x4D42544F
"""ASCII "OTBM" read as a little-endian u32."""

ACCEPTED_IDENTIFIERS = (MAGIC_NULL, MAGIC_OTBM)

IDENTIFIER_SIZE = 4


# =============================================================================
# Structural bytes
# =============================================================================

NODE_ESC = 0xFD
NODE_START = 0xFE
NODE_END = 0xFF


# =============================================================================
# Node kinds
# =============================================================================


class NodeKind(IntEnum):
    """Node kind tags (first byte of a node payload)."""

    ROOT_HEADER = 0x00
    MAP_DATA = 0x02
    TILE_AREA = 0x04
    TILE = 0x05
    ITEM = 0x06
    TOWNS = 0x0C
    TOWN = 0x0D
    HOUSE_TILE = 0x0E
    WAYPOINTS = 0x0F
    WAYPOINT = 0x10


# =============================================================================
# Attributes
# =============================================================================


class AttributeTag(IntEnum):
    """Attribute tags inside a node's TLV block."""

    DESCRIPTION = 0x01
    TILE_FLAGS = 0x03
    ACTION_ID = 0x04
    UNIQUE_ID = 0x05
    TEXT = 0x06
    DESC = 0x07  # alias of TEXT
    TELE_DEST = 0x08
    ITEM = 0x09
    DEPOT_ID = 0x0A
    EXT_SPAWN_FILE = 0x0B
    EXT_HOUSE_FILE = 0x0D
    HOUSE_DOOR_ID = 0x0E
    COUNT = 0x0F
    RUNE_CHARGES = 0x16


class ZoneFlag(IntFlag):
    """Bit positions of the tile-flags bitmask."""

    NONE = 0x0000
    PROTECTION_ZONE = 0x0001
    NO_PVP = 0x0004
    NO_LOGOUT = 0x0008
    PVP_ZONE = 0x0010
    REFRESH = 0x0020
