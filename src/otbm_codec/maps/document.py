"""
Whole-document read and write.

Both operations work on fully buffered bytes; reading a file into memory
or memory-mapping it is left to the caller.
"""

import logging
import struct

from ..format.constants import ACCEPTED_IDENTIFIERS, IDENTIFIER_SIZE
from ..format.errors import EncodeError, FormatError
from .models import DEFAULT_CONFIG, CodecConfig, MapDocument, RootHeader
from .tree import Buffer, TreeDecoder, TreeEncoder

logger = logging.getLogger(__name__)

_IDENTIFIER = struct.Struct("<I")


def read_identifier(data: Buffer) -> int:
    """Read and check the 4-byte container identifier.

    Raises:
        FormatError: If the buffer is too short or the identifier is unknown
    """
    if len(data) < IDENTIFIER_SIZE:
        raise FormatError(f"Input is {len(data)} bytes, too short for an OTBM identifier")

    identifier = _IDENTIFIER.unpack_from(data, 0)[0]
    if identifier not in ACCEPTED_IDENTIFIERS:
        raise FormatError(f"Unknown OTBM format: unexpected magic bytes 0x{identifier:08X}", 0)
    return identifier


def read(data: Buffer, config: CodecConfig = DEFAULT_CONFIG) -> MapDocument:
    """Decode a complete OTBM document.

    Args:
        data: Whole file contents
        config: Codec options

    Returns:
        Decoded MapDocument

    Raises:
        FormatError: If the identifier is not recognized
        MalformedNodeError: If the node stream is broken
        UnknownAttributeTagError: If an attribute block holds an unknown tag
    """
    identifier = read_identifier(data)
    decoder = TreeDecoder(data, config)
    root, end = decoder.decode_root(IDENTIFIER_SIZE)

    if end < len(data):
        logger.warning(f"Ignoring {len(data) - end} byte(s) after the root node")

    logger.info(
        f"Read OTBM v{root.version} map {root.width}x{root.height} "
        f"({decoder.nodes_decoded} nodes, {end} bytes)"
    )
    return MapDocument(root=root, identifier=identifier)


def write(document: MapDocument, config: CodecConfig = DEFAULT_CONFIG) -> bytes:
    """Encode a complete OTBM document.

    The document's own identifier is used when set, otherwise
    ``config.identifier``.

    Raises:
        EncodeError: If the identifier is invalid, the root is not a
            RootHeader, or any node cannot be serialized
    """
    identifier = document.identifier if document.identifier is not None else config.identifier
    if identifier not in ACCEPTED_IDENTIFIERS:
        raise EncodeError(f"Refusing to write unknown identifier 0x{identifier:08X}")
    if not isinstance(document.root, RootHeader):
        raise EncodeError(
            f"Document root must be a RootHeader, got {type(document.root).__name__}"
        )

    encoder = TreeEncoder(config)
    encoder.buffer += _IDENTIFIER.pack(identifier)
    encoder.encode(document.root)
    output = encoder.getvalue()

    logger.info(f"Wrote OTBM document ({encoder.nodes_encoded} nodes, {len(output)} bytes)")
    return output
