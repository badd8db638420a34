"""
Streaming column encoder.

A ColumnEncoder turns the chunks of a byte stream into one aligned text
column for a single codec. A token belongs to the line holding its first
byte: given a lookahead of the next chunk, a multi-byte value or rune split
by a chunk boundary is read to its end and rendered on that line. Bytes that
still cannot be decoded are carried over to the next chunk, so every line of
a dump has the same visible width no matter where the chunk boundaries fall.

Usage:
    encoder = ColumnEncoder(get_codec("u16"), buffer_width=8)
    line = encoder.encode(chunk, lookahead=next_chunk)
    ...
    tail = encoder.encode(b"")  # flush at end of stream
"""

import logging
from typing import List, Optional

import wcwidth

from polydump.codec_catalog.catalog import CodecDescriptor

logger = logging.getLogger(__name__)

# Foreground colors cycled through by color band
TERM_COLORS = ["31", "33", "32", "36", "34", "35"]

BOLD = "1"
FAINT = "2"

DEFAULT_COLOR_WIDTH = 2


def display_width(text: str) -> int:
    """Number of terminal cells ``text`` occupies."""
    width = 0
    for char in text:
        cells = wcwidth.wcwidth(char)
        if cells > 0:
            width += cells
    return width


def column_width(codec: CodecDescriptor, buffer_width: int, offsets: bool = False) -> int:
    """
    Declared width of a codec's column for lines of ``buffer_width`` bytes.

    Args:
        codec: Codec rendered in the column
        buffer_width: Number of bytes per line
        offsets: Whether a token is attempted at every byte offset

    Returns:
        Width in terminal cells
    """
    entries = buffer_width if offsets else buffer_width // codec.step
    return codec.max_width * entries + (entries - 1) * len(codec.separator)


def colorize(token: str, band: int, significant: bool) -> str:
    """Prefix a token with the SGR sequence of its color band."""
    weight = BOLD if significant else FAINT
    return f"\x1b[{weight};{TERM_COLORS[band % len(TERM_COLORS)]}m{token}"


class ColumnEncoder:
    """
    Stateful encoder for one codec column.

    Attributes:
        codec: Codec applied to the stream
        buffer_width: Declared number of bytes per line
        offsets: Attempt a token at every byte offset instead of every token boundary
        colors: Emit color band escape sequences
        color_width: Number of bytes sharing one color band
        pending: Buffered bytes not consumed yet
        total_consumed: Bytes permanently consumed so far
        padding_debt: Signed padding carried to the next rendered token
        skip_next: Bytes at the start of the next chunk already rendered on this line
    """

    def __init__(
        self,
        codec: CodecDescriptor,
        buffer_width: int,
        offsets: bool = False,
        colors: bool = True,
        color_width: int = DEFAULT_COLOR_WIDTH
    ):
        self.codec = codec
        self.buffer_width = buffer_width
        self.offsets = offsets
        self.colors = colors
        self.color_width = color_width
        self.pending = bytearray()
        self.total_consumed = 0
        self.padding_debt = 0
        self.skip_next = 0

    def column_width(self, buffer_width: Optional[int] = None) -> int:
        if buffer_width is None:
            buffer_width = self.buffer_width
        return column_width(self.codec, buffer_width, self.offsets)

    def encode(self, chunk: bytes, lookahead: Optional[bytes] = None) -> str:
        """
        Consume a chunk and render the tokens that start inside it.

        An empty chunk marks the end of the stream: bytes still pending are
        decoded as final, so truncated runes come out as replacement glyphs.

        When ``lookahead`` holds the bytes of the next chunk, a token starting
        near the end of this chunk may read into them, so it is rendered on
        the line holding its first byte. The lookahead bytes it consumes are
        skipped at the start of the next call. An empty ``lookahead`` means
        nothing follows the chunk; ``None`` means the next bytes are unknown
        and unfinished tokens wait in the buffer.

        Args:
            chunk: Next bytes of the stream
            lookahead: Bytes that follow the chunk, if known

        Returns:
            Column text padded to the declared width, or an empty string when
            no token was rendered
        """
        final = len(chunk) == 0
        if self.skip_next and not final:
            chunk = chunk[self.skip_next:]
            self.skip_next = 0

        # Cells for carried bytes were already padded on the previous line
        carried = 0 if final else len(self.pending)
        self.pending.extend(chunk)
        self.padding_debt = 0

        region = len(self.pending)
        data = bytes(self.pending) + (lookahead or b"")
        at_end = final or (lookahead is not None and len(lookahead) == 0)

        codec = self.codec
        step = codec.step
        cell = codec.max_width + len(codec.separator)
        tokens: List[str] = []
        visible = 0
        start = 0
        end = step

        while start < region and end <= len(data):
            text, consumed, significant = codec.decode(
                data[start:end], final=at_end and end == len(data)
            )

            if text:
                units = 1
                if codec.is_variable and not self.offsets:
                    units = max(min(start + consumed, region) - max(start, carried), 1)
                slot = codec.max_width + min(self.padding_debt, (units - 1) * cell)
                padding = slot - display_width(text)
                if padding >= 0:
                    token = " " * padding + text
                    self.padding_debt = 0
                else:
                    # Let the following tokens absorb the overflow
                    token = text
                    self.padding_debt = padding
                visible += display_width(token)
                if self.colors:
                    band = (self.total_consumed + start) // self.color_width
                    token = colorize(token, band, significant)
                tokens.append(token)
            else:
                self.padding_debt += cell

            if consumed == 0:
                end += step
            else:
                start += 1 if self.offsets else consumed
                end = start + step

        if start >= region:
            self.skip_next = start - region
            self.pending.clear()
        else:
            del self.pending[:start]
        self.total_consumed += start

        if final and self.pending:
            logger.debug(
                f"{codec.name}: {len(self.pending)} trailing byte(s) too short for a token"
            )

        if not tokens:
            return ""

        visible += (len(tokens) - 1) * len(codec.separator)
        padding = max(self.column_width() - visible, 0)
        return codec.separator.join(tokens) + " " * padding
