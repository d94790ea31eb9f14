"""
Escaping of structural bytes inside node payloads.
"""

import re

_SPECIAL = re.compile(rb"([\xfd\xfe\xff])")
_ESCAPED = re.compile(rb"\xfd(.?)", re.DOTALL)


def escape(data: bytes) -> bytes:
    """Prefix every escape/start/end byte in ``data`` with an escape byte."""
    return _SPECIAL.sub(b"\xfd\\1", data)


def unescape(data: bytes) -> bytes:
    """Drop every escape byte and keep the byte that follows it literally.

    A dangling escape byte at the very end of ``data`` is dropped.
    """
    return _ESCAPED.sub(rb"\1", data)
