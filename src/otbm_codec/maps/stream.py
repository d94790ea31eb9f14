"""
Streaming transform of tile areas.

Only the path root -> map data -> tile area is walked. Each tile area
directly under a map data node is decoded on its own, handed to a callback,
re-encoded and spliced into the output in place of the original bytes.
Everything else (identifier, root header, map data attributes, towns,
waypoints, unknown nodes) is copied through byte for byte without being
decoded. At most one decoded tile area exists at a time.

Output is produced as a sequence of chunks. If the callback or the codec
fails part way, chunks already yielded stay with the consumer; there is no
rollback.
"""

import logging
from typing import Callable, Iterator

from ..format.constants import IDENTIFIER_SIZE, NODE_START, NodeKind
from ..format.errors import EncodeError
from .document import read_identifier
from .models import DEFAULT_CONFIG, CodecConfig, TileArea
from .tree import Buffer, TreeDecoder, TreeEncoder

logger = logging.getLogger(__name__)

TileAreaCallback = Callable[[TileArea], TileArea]

# root -> map data -> tile area
_TILE_AREA_DEPTH = 2


def iter_transform(
    source: Buffer,
    callback: TileAreaCallback,
    config: CodecConfig = DEFAULT_CONFIG,
) -> Iterator[bytes]:
    """Transform every tile area of a document, yielding output chunks in order.

    Args:
        source: Whole OTBM file contents
        callback: Called once per tile area; must return the tile area to write
        config: Codec options

    Yields:
        Consecutive chunks of the transformed document

    Raises:
        FormatError: If the identifier is not recognized
        MalformedNodeError: If the node stream is broken
        UnknownAttributeTagError: If a tile area holds an unknown attribute tag
        EncodeError: If the callback result cannot be encoded
    """
    read_identifier(source)
    decoder = TreeDecoder(source, config)
    data = decoder.data

    # Start of the byte range not yet copied to the output
    pending = 0
    areas = 0

    _, cursor = decoder.read_payload(IDENTIFIER_SIZE)
    while data[cursor] == NODE_START:
        if decoder.peek_kind(cursor) != NodeKind.MAP_DATA:
            cursor = decoder.skip(cursor)
            decoder.expect_marker(cursor)
            continue

        _, cursor = decoder.read_payload(cursor)
        while data[cursor] == NODE_START:
            if decoder.peek_kind(cursor) != NodeKind.TILE_AREA:
                cursor = decoder.skip(cursor)
                decoder.expect_marker(cursor)
                continue

            if cursor > pending:
                yield data[pending:cursor]

            area, end = decoder.decode(cursor, depth=_TILE_AREA_DEPTH)
            result = callback(area)
            if not isinstance(result, TileArea):
                raise EncodeError(
                    f"Transform callback must return a TileArea, got {type(result).__name__}"
                )

            encoder = TreeEncoder(config)
            encoder.encode(result, depth=_TILE_AREA_DEPTH)
            chunk = encoder.getvalue()
            logger.debug(
                f"Tile area at offset {cursor} ({result.x}, {result.y}, {result.z}): "
                f"{end - cursor} -> {len(chunk)} bytes"
            )
            yield chunk

            areas += 1
            pending = cursor = end
            decoder.expect_marker(cursor)

        # Past the map data end byte
        cursor += 1
        decoder.expect_marker(cursor)

    if pending < len(data):
        yield data[pending:]

    logger.info(f"Transformed {areas} tile area(s)")


def transform(
    source: Buffer,
    callback: TileAreaCallback,
    config: CodecConfig = DEFAULT_CONFIG,
) -> bytes:
    """Transform every tile area of a document and return the whole result.

    See ``iter_transform`` for behavior and errors.
    """
    return b"".join(iter_transform(source, callback, config))
