"""
Codec catalog.

This module defines the fixed table of codecs polydump can render a byte
stream with. Each codec is described by an immutable CodecDescriptor that
carries its name, how many bytes one token consumes, how wide a token may get
once rendered, the separator placed between tokens and a pure decode function.

Numeric codecs read little-endian values through ``struct``; the UTF-8 family
delegates to the rune decoder in ``polydump.codec_catalog.runes``.
"""

import struct
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple

from polydump.codec_catalog.runes import ascii_glyph, decode_rune, unicode_glyph

# (rendered text, bytes consumed, significant)
DecodeResult = Tuple[str, int, bool]
DecodeFunc = Callable[..., DecodeResult]

# Token length used by codecs whose tokens span a variable number of bytes
VARIABLE_LENGTH = 0

# Magnitude under which a 16-bit value is considered meaningful
SMALL_INT_LIMIT = 8192

DEFAULT_CODEC_NAMES = ("hex", "utf8", "u8")


class UnknownCodecError(ValueError):
    """Raised when a codec name is not part of the catalog"""
    pass


@dataclass(frozen=True)
class CodecDescriptor:
    """Immutable description of one codec"""
    name: str
    token_length: int
    max_width: int
    separator: str
    description: str
    decode: DecodeFunc

    @property
    def step(self) -> int:
        """Window size used for each decode attempt."""
        return max(self.token_length, 1)

    @property
    def is_variable(self) -> bool:
        return self.token_length == VARIABLE_LENGTH


def _int_decoder(fmt: str, significant: Optional[Callable[[int], bool]] = None) -> DecodeFunc:
    unpacker = struct.Struct(fmt)

    def decode(window: bytes, final: bool = False) -> DecodeResult:
        value = unpacker.unpack(bytes(window[:unpacker.size]))[0]
        flag = significant(value) if significant else True
        return str(value), unpacker.size, flag

    return decode


def _float_decoder(fmt: str) -> DecodeFunc:
    unpacker = struct.Struct(fmt)

    def decode(window: bytes, final: bool = False) -> DecodeResult:
        value = unpacker.unpack(bytes(window[:unpacker.size]))[0]
        return format(value, ".6g"), unpacker.size, True

    return decode


def decode_hex(window: bytes, final: bool = False) -> DecodeResult:
    return format(window[0], "02x"), 1, True


def decode_ascii(window: bytes, final: bool = False) -> DecodeResult:
    glyph, printable = ascii_glyph(window[0])
    return glyph, 1, printable


def decode_utf8(window: bytes, final: bool = False) -> DecodeResult:
    char, consumed = decode_rune(window, final)
    if char is None:
        return "", consumed, False
    return unicode_glyph(char), consumed, True


def decode_utf8_hex(window: bytes, final: bool = False) -> DecodeResult:
    char, consumed = decode_rune(window, final)
    if char is None:
        return "", consumed, False
    return format(ord(char), "x"), consumed, True


def decode_utf8_int(window: bytes, final: bool = False) -> DecodeResult:
    char, consumed = decode_rune(window, final)
    if char is None:
        return "", consumed, False
    return str(ord(char)), consumed, True


CATALOG: Tuple[CodecDescriptor, ...] = (
    CodecDescriptor("i8", 1, 4, ",", "Signed 8-bit integer", _int_decoder("<b")),
    CodecDescriptor("u8", 1, 3, ",", "Unsigned 8-bit integer", _int_decoder("<B")),
    CodecDescriptor(
        "i16", 2, 6, ",", "Signed 16-bit integer",
        _int_decoder("<h", lambda v: -SMALL_INT_LIMIT < v < SMALL_INT_LIMIT),
    ),
    CodecDescriptor(
        "u16", 2, 6, ",", "Unsigned 16-bit integer",
        _int_decoder("<H", lambda v: v < SMALL_INT_LIMIT),
    ),
    CodecDescriptor("i32", 4, 11, ",", "Signed 32-bit integer", _int_decoder("<i")),
    CodecDescriptor("u32", 4, 11, ",", "Unsigned 32-bit integer", _int_decoder("<I")),
    CodecDescriptor(
        "f32", 4, 12, ",",
        "IEEE 754 single-precision binary floating-point format: "
        "sign bit, 8 bits exponent, 23 bits mantissa",
        _float_decoder("<f"),
    ),
    CodecDescriptor("i64", 8, 20, ",", "Signed 64-bit integer", _int_decoder("<q")),
    CodecDescriptor("u64", 8, 20, ",", "Unsigned 64-bit integer", _int_decoder("<Q")),
    CodecDescriptor(
        "f64", 8, 13, ",",
        "IEEE 754 double-precision binary floating-point format: "
        "sign bit, 11 bits exponent, 52 bits mantissa",
        _float_decoder("<d"),
    ),
    CodecDescriptor("hex", 1, 2, ",", "Hexadecimal encoding", decode_hex),
    CodecDescriptor(
        "utf8h", VARIABLE_LENGTH, 3, ",",
        "Unicode code points of UTF-8 encoded text. Hexadecimal.",
        decode_utf8_hex,
    ),
    CodecDescriptor(
        "utf8i", VARIABLE_LENGTH, 3, ",",
        "Unicode code points of UTF-8 encoded text. Decimal.",
        decode_utf8_int,
    ),
    CodecDescriptor(
        "ascii", 1, 1, "",
        "ASCII encoded text. Non-printable characters are represented as a dot "
        "and the following characters are replaced with their unicode "
        "equivalents: \\n, \\t, \\r, \\v, \\f, \\b, \\a, \\x00, \\x1b",
        decode_ascii,
    ),
    CodecDescriptor(
        "utf8", VARIABLE_LENGTH, 1, "",
        "UTF-8 encoded text. Replaces control characters with unicode symbol "
        "equivalents (mostly).",
        decode_utf8,
    ),
)

CODEC_NAMES = tuple(codec.name for codec in CATALOG)


def get_codec(name: str) -> CodecDescriptor:
    """
    Look up a codec by name.

    Raises:
        UnknownCodecError: If the catalog has no codec with that name
    """
    for codec in CATALOG:
        if codec.name == name:
            return codec
    raise UnknownCodecError(f"Unknown encoding: {name}. Choose from: {', '.join(CODEC_NAMES)}")


def select_codecs(names: Optional[Iterable[str]] = None) -> List[CodecDescriptor]:
    """
    Resolve the enabled codecs, in catalog order.

    Falls back to the default subset when no names are given.

    Args:
        names: Codec names to enable

    Returns:
        List of descriptors, never empty

    Raises:
        UnknownCodecError: If any name is not in the catalog
    """
    wanted = set(names or ())
    for name in wanted:
        get_codec(name)
    if not wanted:
        wanted = set(DEFAULT_CODEC_NAMES)
    return [codec for codec in CATALOG if codec.name in wanted]
