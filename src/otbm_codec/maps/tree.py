"""
Tree codec for the nested OTBM node stream.

A node on the wire is ``NODE_START``, its escaped payload, its children
(each a complete node) and ``NODE_END``. Escape bytes are never structural:
an escape byte and the byte after it always travel together as payload.

Decoding walks the buffer with a single monotonic position. Every decode
call takes the position of a start byte and returns the position just past
the matching end byte, so no offsets are recomputed across recursion levels.
"""

import re
from typing import List, Optional, Tuple, Union, cast

from ..format.constants import NODE_END, NODE_ESC, NODE_START
from ..format.errors import EncodeError, MalformedNodeError
from ..format.escape import unescape
from .models import DEFAULT_CONFIG, CodecConfig, Node, RootHeader
from .nodes import decode_payload, decode_root_payload, encode_payload

Buffer = Union[bytes, bytearray, memoryview]

_SPECIAL = re.compile(rb"[\xfd\xfe\xff]")


class TreeDecoder:
    """Recursive-descent decoder over a fully buffered node stream."""

    def __init__(self, data: Buffer, config: CodecConfig = DEFAULT_CONFIG):
        """Create a decoder.

        Args:
            data: The whole byte stream; offsets are relative to its start
            config: Codec options
        """
        self.data = bytes(data) if isinstance(data, memoryview) else data
        self.config = config
        self.nodes_decoded = 0

    # === SCANNING ===

    def _expect_start(self, position: int) -> None:
        if position >= len(self.data):
            raise MalformedNodeError("Expected node start, found end of input", position)
        if self.data[position] != NODE_START:
            raise MalformedNodeError(
                f"Expected node start byte, found 0x{self.data[position]:02X}", position
            )

    def scan_payload(self, position: int) -> int:
        """Find the end of a node's own payload.

        Args:
            position: Offset of the first payload byte (just after the start byte)

        Returns:
            Offset of the first unescaped start or end byte

        Raises:
            MalformedNodeError: If the input ends first
        """
        data = self.data
        while True:
            match = _SPECIAL.search(data, position)
            if match is None:
                raise MalformedNodeError("Node is not closed before end of input", len(data))
            position = match.start()
            if data[position] != NODE_ESC:
                return position
            if position + 1 >= len(data):
                raise MalformedNodeError("Escape byte at end of input", position)
            position += 2

    def skip(self, position: int) -> int:
        """Skip over a complete subtree without decoding it.

        Args:
            position: Offset of the subtree's start byte

        Returns:
            Offset just past the subtree's matching end byte

        Raises:
            MalformedNodeError: If the subtree is not closed before end of input
        """
        self._expect_start(position)
        depth = 1
        position += 1
        while depth:
            position = self.scan_payload(position)
            if self.data[position] == NODE_START:
                depth += 1
            else:
                depth -= 1
            position += 1
        return position

    # === DECODING ===

    def read_payload(self, position: int) -> Tuple[bytes, int]:
        """Read the unescaped payload of the node starting at ``position``.

        Returns:
            Tuple of (unescaped payload, offset of the first structural byte)
        """
        self._expect_start(position)
        end = self.scan_payload(position + 1)
        return unescape(bytes(self.data[position + 1:end])), end

    def decode(self, position: int = 0, depth: int = 0) -> Tuple[Node, int]:
        """Decode the subtree whose start byte is at ``position``.

        Returns:
            Tuple of (node, offset just past its end byte)

        Raises:
            MalformedNodeError: On unterminated or overly deep input
            UnknownAttributeTagError: On an unknown attribute tag
        """
        return self._decode(position, depth, root=False)

    def decode_root(self, position: int) -> Tuple[RootHeader, int]:
        """Decode the root subtree, reading its payload as the root header."""
        node, end = self._decode(position, 0, root=True)
        return cast(RootHeader, node), end

    def _decode(self, position: int, depth: int, root: bool) -> Tuple[Node, int]:
        if depth > self.config.max_depth:
            raise MalformedNodeError(
                f"Node nesting exceeds maximum depth {self.config.max_depth}", position
            )

        payload, cursor = self.read_payload(position)
        payload_offset = position + 1
        children: List[Node] = []

        marker = self.data[cursor]
        while marker == NODE_START:
            child, cursor = self._decode(cursor, depth + 1, root=False)
            children.append(child)
            marker = self.expect_marker(cursor)

        if root:
            node: Node = decode_root_payload(payload, self.config, payload_offset)
        else:
            node = decode_payload(payload, self.config, payload_offset)
        node.children = children
        self.nodes_decoded += 1
        return node, cursor + 1

    def expect_marker(self, position: int) -> int:
        """Return the start or end byte expected at ``position``.

        Raises:
            MalformedNodeError: At end of input or on a plain data byte
        """
        if position >= len(self.data):
            raise MalformedNodeError("Node is not closed before end of input", position)
        if self.data[position] not in (NODE_START, NODE_END):
            raise MalformedNodeError(
                f"Unexpected data byte 0x{self.data[position]:02X} between child nodes",
                position,
            )
        return self.data[position]

    def peek_kind(self, position: int) -> Optional[int]:
        """Return the kind tag of the node starting at ``position`` without decoding it.

        Returns None for a node with an empty payload.
        """
        self._expect_start(position)
        tag_position = position + 1
        if tag_position < len(self.data):
            first = self.data[tag_position]
            if first in (NODE_START, NODE_END):
                return None
            if first == NODE_ESC:
                tag_position += 1
        if tag_position >= len(self.data):
            raise MalformedNodeError("Node is not closed before end of input", len(self.data))
        return self.data[tag_position]


def decode_node(
    data: Buffer, offset: int = 0, config: CodecConfig = DEFAULT_CONFIG
) -> Tuple[Node, int]:
    """Decode one subtree.

    Args:
        data: Byte buffer holding the subtree
        offset: Offset of the subtree's start byte
        config: Codec options

    Returns:
        Tuple of (node, number of bytes consumed including the end byte)
    """
    node, end = TreeDecoder(data, config).decode(offset)
    return node, end - offset


# =============================================================================
# Encoding
# =============================================================================


class TreeEncoder:
    """Depth-first encoder appending whole subtrees to one buffer."""

    def __init__(self, config: CodecConfig = DEFAULT_CONFIG):
        self.config = config
        self.buffer = bytearray()
        self.nodes_encoded = 0

    def encode(self, node: Node, depth: int = 0) -> None:
        """Append ``node`` and all its descendants to the buffer.

        Raises:
            EncodeError: If any node in the subtree cannot be serialized
        """
        if depth > self.config.max_depth:
            raise EncodeError(f"Node nesting exceeds maximum depth {self.config.max_depth}")

        self.buffer.append(NODE_START)
        self.buffer += encode_payload(node, self.config)
        for child in node.children:
            self.encode(child, depth + 1)
        self.buffer.append(NODE_END)
        self.nodes_encoded += 1

    def getvalue(self) -> bytes:
        return bytes(self.buffer)


def encode_node(node: Node, config: CodecConfig = DEFAULT_CONFIG) -> bytes:
    """Encode one subtree (start byte, escaped payload, children, end byte)."""
    encoder = TreeEncoder(config)
    encoder.encode(node)
    return encoder.getvalue()
