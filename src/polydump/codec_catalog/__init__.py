"""
Codecs package for polydump.

This package holds the fixed catalog of codecs a byte stream can be rendered
with (integers, floats, hexadecimal, ASCII and UTF-8 text) and the rune
decoder shared by the UTF-8 based codecs.
"""

from .catalog import (
    CATALOG,
    CODEC_NAMES,
    DEFAULT_CODEC_NAMES,
    CodecDescriptor,
    UnknownCodecError,
    get_codec,
    select_codecs
)
from .runes import decode_rune

__all__ = [
    'CATALOG',
    'CODEC_NAMES',
    'DEFAULT_CODEC_NAMES',
    'CodecDescriptor',
    'UnknownCodecError',
    'get_codec',
    'select_codecs',
    'decode_rune'
]
