"""
Exceptions raised by the OTBM codec.
"""

from typing import Optional


class OTBMError(Exception):
    """Base class for all codec errors."""

    def __init__(self, message: str, offset: Optional[int] = None):
        self.offset = offset
        if offset is not None:
            message = f"{message} (at offset {offset})"
        super().__init__(message)


class FormatError(OTBMError):
    """Raised when the container identifier at offset 0 is not recognized."""
    pass


class MalformedNodeError(OTBMError):
    """Raised when the node stream is structurally broken.

    Covers a subtree that never reaches its closing byte, a payload that is
    shorter than its kind's fixed layout, and nesting deeper than allowed.
    """
    pass


class UnknownAttributeTagError(OTBMError):
    """Raised when an attribute block contains a tag outside the known table."""

    def __init__(self, tag: int, offset: Optional[int] = None):
        self.tag = tag
        super().__init__(f"Unknown attribute tag 0x{tag:02X}", offset)


class EncodeError(OTBMError):
    """Raised when a node cannot be serialized.

    Either a field required by the node's fixed layout is missing or out of
    range, or the node's type is not one the encoder knows.
    """
    pass
