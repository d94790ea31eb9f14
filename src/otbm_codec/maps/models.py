"""
Data models for OTBM map documents.

Every node kind is a dataclass deriving from ``Node``. A node's kind alone
decides which single child collection it owns (``CHILD_ROLE``): tile areas
own ``tiles``, tiles and house tiles own ``items``, items own ``content``,
the towns list owns ``towns``, map data owns ``features`` and everything else
owns generic ``nodes``. Child order is file-significant and is preserved as
given.

Optional values are modeled as ``None`` and never inferred from zero.
"""

from dataclasses import dataclass, field, fields
from typing import ClassVar, Iterator, List, Optional

from ..format.constants import MAGIC_OTBM, NodeKind, ZoneFlag


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True)
class CodecConfig:
    """Immutable options threaded through read, write and transform calls."""

    identifier: int = MAGIC_OTBM
    """Container identifier used when a document does not carry one."""

    description_separator: str = " "
    """Joiner for repeated Description attributes."""

    string_encoding: str = "latin-1"
    """Codec for length-prefixed strings; latin-1 maps all 256 byte values."""

    max_depth: int = 64
    """Deepest node nesting accepted when decoding or encoding."""


DEFAULT_CONFIG = CodecConfig()


# =============================================================================
# Attribute values
# =============================================================================


@dataclass(frozen=True)
class Position:
    """Absolute map position (teleport destinations)."""

    x: int
    y: int
    z: int


@dataclass
class ZoneFlags:
    """The five tile zone flags packed into the tile-flags bitmask."""

    protection: bool = False
    no_pvp: bool = False
    no_logout: bool = False
    pvp_zone: bool = False
    refresh: bool = False

    _BITS: ClassVar[dict[str, ZoneFlag]] = {
        "protection": ZoneFlag.PROTECTION_ZONE,
        "no_pvp": ZoneFlag.NO_PVP,
        "no_logout": ZoneFlag.NO_LOGOUT,
        "pvp_zone": ZoneFlag.PVP_ZONE,
        "refresh": ZoneFlag.REFRESH,
    }

    @classmethod
    def from_mask(cls, mask: int) -> "ZoneFlags":
        """Unpack a bitmask. Bits outside the five known flags are dropped."""
        return cls(**{name: bool(mask & bit) for name, bit in cls._BITS.items()})

    def to_mask(self) -> int:
        """Pack the flags into a bitmask."""
        mask = ZoneFlag.NONE
        for name, bit in self._BITS.items():
            if getattr(self, name):
                mask |= bit
        return int(mask)


@dataclass
class AttributeSet:
    """Optional attributes carried by map data, tiles, house tiles and items.

    A field left at ``None`` is absent from the file. A field set to ``0`` or
    ``""`` is present and is written back.
    """

    text: Optional[str] = None
    description: Optional[str] = None
    spawn_file: Optional[str] = None
    house_file: Optional[str] = None
    house_door_id: Optional[int] = None
    depot_id: Optional[int] = None
    zones: Optional[ZoneFlags] = None
    rune_charges: Optional[int] = None
    count: Optional[int] = None
    item_id: Optional[int] = None
    action_id: Optional[int] = None
    unique_id: Optional[int] = None
    teleport_destination: Optional[Position] = None

    def is_empty(self) -> bool:
        """Check whether no attribute is set."""
        return all(getattr(self, f.name) is None for f in fields(self))


# =============================================================================
# Nodes
# =============================================================================


@dataclass
class Node:
    """Base class of all node kinds."""

    KIND: ClassVar[Optional[NodeKind]] = None
    CHILD_ROLE: ClassVar[str] = "nodes"
    HAS_ATTRIBUTES: ClassVar[bool] = False

    @property
    def children(self) -> List["Node"]:
        """The node's single child collection, whatever its role name."""
        return getattr(self, self.CHILD_ROLE)

    @children.setter
    def children(self, value: List["Node"]) -> None:
        setattr(self, self.CHILD_ROLE, value)

    def walk(self) -> Iterator["Node"]:
        """Yield this node and every descendant depth-first, in file order."""
        stack: List[Node] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


@dataclass
class RootHeader(Node):
    """Root node: map format version, map size and item list versions."""

    KIND: ClassVar[Optional[NodeKind]] = NodeKind.ROOT_HEADER

    version: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None
    items_major_version: Optional[int] = None
    items_minor_version: Optional[int] = None
    nodes: List[Node] = field(default_factory=list)


@dataclass
class MapData(Node):
    """Top-level map feature container (tile areas, towns, waypoints)."""

    KIND: ClassVar[Optional[NodeKind]] = NodeKind.MAP_DATA
    CHILD_ROLE: ClassVar[str] = "features"
    HAS_ATTRIBUTES: ClassVar[bool] = True

    attributes: AttributeSet = field(default_factory=AttributeSet)
    features: List[Node] = field(default_factory=list)


@dataclass
class TileArea(Node):
    """Block of tiles sharing a coarse coordinate origin."""

    KIND: ClassVar[Optional[NodeKind]] = NodeKind.TILE_AREA
    CHILD_ROLE: ClassVar[str] = "tiles"

    x: Optional[int] = None
    y: Optional[int] = None
    z: Optional[int] = None
    tiles: List[Node] = field(default_factory=list)


@dataclass
class Tile(Node):
    """Tile at an offset inside its parent tile area."""

    KIND: ClassVar[Optional[NodeKind]] = NodeKind.TILE
    CHILD_ROLE: ClassVar[str] = "items"
    HAS_ATTRIBUTES: ClassVar[bool] = True

    x: Optional[int] = None
    y: Optional[int] = None
    attributes: AttributeSet = field(default_factory=AttributeSet)
    items: List[Node] = field(default_factory=list)


@dataclass
class HouseTile(Node):
    """Tile belonging to a house."""

    KIND: ClassVar[Optional[NodeKind]] = NodeKind.HOUSE_TILE
    CHILD_ROLE: ClassVar[str] = "items"
    HAS_ATTRIBUTES: ClassVar[bool] = True

    x: Optional[int] = None
    y: Optional[int] = None
    house_id: Optional[int] = None
    attributes: AttributeSet = field(default_factory=AttributeSet)
    items: List[Node] = field(default_factory=list)


@dataclass
class Item(Node):
    """Item on a tile or inside a container item."""

    KIND: ClassVar[Optional[NodeKind]] = NodeKind.ITEM
    CHILD_ROLE: ClassVar[str] = "content"
    HAS_ATTRIBUTES: ClassVar[bool] = True

    id: Optional[int] = None
    attributes: AttributeSet = field(default_factory=AttributeSet)
    content: List[Node] = field(default_factory=list)


@dataclass
class Towns(Node):
    KIND: ClassVar[Optional[NodeKind]] = NodeKind.TOWNS
    CHILD_ROLE: ClassVar[str] = "towns"

    towns: List[Node] = field(default_factory=list)


@dataclass
class Town(Node):
    KIND: ClassVar[Optional[NodeKind]] = NodeKind.TOWN

    id: Optional[int] = None
    name: Optional[str] = None
    x: Optional[int] = None
    y: Optional[int] = None
    z: Optional[int] = None
    nodes: List[Node] = field(default_factory=list)


@dataclass
class Waypoints(Node):
    KIND: ClassVar[Optional[NodeKind]] = NodeKind.WAYPOINTS

    nodes: List[Node] = field(default_factory=list)


@dataclass
class Waypoint(Node):
    KIND: ClassVar[Optional[NodeKind]] = NodeKind.WAYPOINT

    name: Optional[str] = None
    x: Optional[int] = None
    y: Optional[int] = None
    z: Optional[int] = None
    nodes: List[Node] = field(default_factory=list)


@dataclass
class Opaque(Node):
    """Node of a kind the codec does not interpret.

    ``payload`` is the unescaped node payload including its kind tag and is
    written back verbatim.
    """

    payload: bytes = b""
    nodes: List[Node] = field(default_factory=list)

    @property
    def tag(self) -> Optional[int]:
        """Kind tag byte, or None for an empty payload."""
        return self.payload[0] if self.payload else None


# =============================================================================
# Document
# =============================================================================


@dataclass
class MapDocument:
    """A decoded OTBM file: container identifier plus the root node."""

    root: RootHeader
    identifier: Optional[int] = None

    @property
    def header(self) -> RootHeader:
        """Root header record (the root node itself)."""
        return self.root

    @property
    def map_data(self) -> Optional[MapData]:
        """First map data node under the root, if any."""
        for node in self.root.nodes:
            if isinstance(node, MapData):
                return node
        return None
