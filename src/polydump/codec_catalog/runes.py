"""
Rune decoding helpers for the UTF-8 family of codecs.

A "rune" is one Unicode scalar value. The helpers in this module take a raw
byte window (as handed over by a column encoder) and resolve the next rune
from it, degrading malformed input to U+FFFD so a stream never stalls.

They also provide the glyph tables used to make control characters visible
in the text columns.
"""

import codecs
import unicodedata
from typing import Optional, Tuple

# Longest possible UTF-8 sequence
UTF_MAX = 4

REPLACEMENT_CHAR = "\ufffd"

# Stand-ins used by the strict ASCII column
ASCII_GLYPHS = {
    0x00: "␀",  # null
    0x07: "␇",  # bell
    0x08: "⌫",  # backspace
    0x09: "⇥",  # tab
    0x0A: "⏎",  # line feed
    0x0B: "↴",  # vertical tab
    0x0C: "↵",  # form feed
    0x0D: "↵",  # carriage return
    0x1B: "⎋",  # escape
}

ASCII_PLACEHOLDER = "."

# Stand-ins used by the Unicode aware text column
UNICODE_GLYPHS = {
    "\x00": "␀",
    "\x07": "␇",
    "\x08": "⌫",
    "\x09": "⇥",
    "\x0a": "⏎",
    "\x0b": "⏎",
    "\x0c": "⏎",
    "\x0d": "⏎",
    "\x85": "⏎",
    "\u2028": "⏎",
    "\u2029": "⏎",
    "\x1b": "⎋",
}

UNICODE_PLACEHOLDER = "␀"


def is_rune_start(byte: int) -> bool:
    """Return True unless ``byte`` is a UTF-8 continuation byte."""
    return byte & 0xC0 != 0x80


def _invalid_run_length(window: bytes) -> int:
    # Skip up to the next lead byte, never more than one maximal sequence
    limit = min(len(window), UTF_MAX)
    for i in range(1, limit):
        if is_rune_start(window[i]):
            return i
    return max(limit, 1)


def decode_rune(window: bytes, final: bool = False) -> Tuple[Optional[str], int]:
    """
    Resolve the next rune from the start of a byte window.

    Args:
        window: Raw bytes; only the first ``UTF_MAX`` are looked at
        final: True when no more bytes will ever follow this window

    Returns:
        Tuple of (character, bytes consumed). ``(None, 0)`` means the window
        is empty or holds an incomplete sequence and more bytes are needed.
        Invalid sequences yield U+FFFD consuming at least one byte.
    """
    if not window:
        return None, 0

    head = bytes(window[:UTF_MAX])
    decoder = codecs.getincrementaldecoder("utf-8")()
    try:
        text = decoder.decode(head, final=final)
    except UnicodeDecodeError as e:
        if e.start > 0:
            # A complete rune precedes the broken bytes
            text = head[:e.start].decode("utf-8")
        else:
            return REPLACEMENT_CHAR, _invalid_run_length(head)

    if not text:
        return None, 0

    char = text[0]
    return char, len(char.encode("utf-8"))


def ascii_glyph(byte: int) -> Tuple[str, bool]:
    """
    Render a single byte for the strict ASCII column.

    Returns:
        Tuple of (glyph, printable flag)
    """
    if 32 <= byte <= 126:
        return chr(byte), True
    return ASCII_GLYPHS.get(byte, ASCII_PLACEHOLDER), False


def unicode_glyph(char: str) -> str:
    """Replace control characters with visible symbols, keep everything else."""
    glyph = UNICODE_GLYPHS.get(char)
    if glyph is not None:
        return glyph
    if unicodedata.category(char) == "Cc":
        return UNICODE_PLACEHOLDER
    return char
