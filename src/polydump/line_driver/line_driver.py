"""
Line driver for polydump.

This module reads the input stream in fixed-size chunks, hands every chunk
to one ColumnEncoder per enabled codec together with a lookahead of the next
chunk, and writes the resulting columns side by side, one line per chunk:

    position  u8                               hex                      utf8
    ------------------------------------------------------------------------------
           0   72,101,108,108,111, 44, 32,119  48,65,6c,6c,6f,2c,20,77  Hello, w

At the end of the stream the short final chunk is processed with an empty
lookahead, followed by one empty chunk that flushes whatever the codecs still
buffer.
"""

import io
import logging
import sys
from pathlib import Path
from typing import BinaryIO, List, Optional, TextIO

from polydump.codec_catalog.catalog import CATALOG, select_codecs
from polydump.column_encoder.column_encoder import ColumnEncoder
from polydump.dump_config.dump_config import (
    ConfigError,
    DumpConfig,
    build_config,
    build_parser,
    create_sample_config,
    validate_config
)
from polydump.logger_utils.logger_utils import setup_logger

logger = logging.getLogger(__name__)

GUTTER = "  "
POSITION_LABEL = "position"
POSITION_DIGITS = 8
RESET = "\x1b[0m"

# Bytes discarded per read when the input cannot seek
SKIP_BLOCK_SIZE = 65536


def build_encoders(config: DumpConfig) -> List[ColumnEncoder]:
    """Create one encoder per enabled codec, in catalog order."""
    encoders = []
    for codec in select_codecs(config.encodings):
        if not config.offsets and config.width % codec.step:
            logger.warning(
                f"Width {config.width} is not a multiple of the {codec.name} token size "
                f"({codec.step} bytes); its column will not line up"
            )
        encoders.append(ColumnEncoder(
            codec,
            config.width,
            offsets=config.offsets,
            colors=config.colors,
            color_width=config.color_width
        ))
    return encoders


def format_header(encoders: List[ColumnEncoder], config: DumpConfig) -> List[str]:
    """
    Build the header: one label line and a rule line of the same length.

    Returns:
        The two header lines
    """
    label = ""
    if config.position:
        label += f"{POSITION_LABEL:<{POSITION_DIGITS}}{GUTTER}"
    for encoder in encoders:
        label += f"{encoder.codec.name:<{encoder.column_width()}}{GUTTER}"
    return [label, "-" * len(label)]


def process_line(
    encoders: List[ColumnEncoder],
    chunk: bytes,
    position: int,
    config: DumpConfig,
    lookahead: Optional[bytes] = None
) -> Optional[str]:
    """
    Encode one chunk with every encoder and assemble the output line.

    Args:
        encoders: Encoders of the enabled codecs
        chunk: Bytes of this line; empty to flush at end of stream
        position: Stream offset of the first byte of the chunk
        config: Dump configuration
        lookahead: Bytes of the next chunk (empty at end of stream, None if unknown)

    Returns:
        The line, or None when no encoder rendered anything
    """
    columns = [encoder.encode(chunk, lookahead) for encoder in encoders]
    if not any(columns):
        return None

    # Keep the other columns in place when one codec is still waiting for bytes
    columns = [
        column if column else " " * encoder.column_width()
        for encoder, column in zip(encoders, columns)
    ]

    line = ""
    if config.position:
        line += f"{position:>{POSITION_DIGITS}}{GUTTER}"
    line += GUTTER.join(columns)
    if config.colors:
        line += RESET
    return line


def read_chunk(reader: BinaryIO, size: int) -> bytes:
    """
    Read exactly ``size`` bytes, fewer only when the stream ends.

    Raises:
        OSError: If reading fails
    """
    chunk = bytearray()
    while len(chunk) < size:
        data = reader.read(size - len(chunk))
        if not data:
            break
        chunk.extend(data)
    return bytes(chunk)


def skip_bytes(reader: BinaryIO, count: int) -> int:
    """
    Skip ``count`` bytes of the input, seeking when the stream allows it.

    Returns:
        Number of bytes actually skipped
    """
    if count <= 0:
        return 0

    try:
        if reader.seekable():
            current = reader.tell()
            end = reader.seek(0, io.SEEK_END)
            target = min(current + count, end)
            reader.seek(target)
            return target - current
    except (AttributeError, OSError):
        logger.debug("Input is not seekable, discarding bytes instead")

    skipped = 0
    while skipped < count:
        data = reader.read(min(SKIP_BLOCK_SIZE, count - skipped))
        if not data:
            break
        skipped += len(data)
    return skipped


def dump_stream(reader: BinaryIO, config: DumpConfig, out: Optional[TextIO] = None) -> int:
    """
    Dump a binary stream as aligned columns.

    Args:
        reader: Binary input stream
        config: Validated dump configuration
        out: Text stream the lines are written to (stdout by default)

    Returns:
        Number of bytes dumped

    Raises:
        OSError: If reading the input fails
    """
    if out is None:
        out = sys.stdout

    encoders = build_encoders(config)
    logger.debug(f"Enabled encodings: {', '.join(e.codec.name for e in encoders)}")

    for header_line in format_header(encoders, config):
        out.write(header_line + "\n")

    skipped = skip_bytes(reader, config.start)
    if skipped < config.start:
        logger.warning(f"Input ended after {skipped} bytes, before start offset {config.start}")

    position = config.start
    limit = config.start + config.length if config.length > 0 else None

    def next_chunk(offset: int) -> bytes:
        size = config.width
        if limit is not None:
            size = min(size, limit - offset)
        return read_chunk(reader, size) if size > 0 else b""

    # One chunk is read ahead so tokens split by a line boundary can be completed
    chunk = next_chunk(position)
    while chunk:
        following = b""
        if len(chunk) == config.width:
            following = next_chunk(position + len(chunk))

        line = process_line(encoders, chunk, position, config, lookahead=following)
        if line is not None:
            out.write(line + "\n")
        position += len(chunk)
        chunk = following

    line = process_line(encoders, b"", position, config)
    if line is not None:
        out.write(line + "\n")

    dumped = position - config.start
    logger.debug(f"Dumped {dumped} bytes")
    return dumped


def list_encodings(out: Optional[TextIO] = None) -> None:
    """Print the codec catalog."""
    if out is None:
        out = sys.stdout
    for codec in CATALOG:
        length = "var" if codec.is_variable else str(codec.token_length)
        out.write(f"{codec.name:<6} {length:>3}  {codec.description}\n")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run polydump from the command line.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Process exit code: 0 on success, 1 on a fatal error
    """
    args = build_parser().parse_args(argv)
    setup_logger("line_driver", console_level="DEBUG" if args.verbose else None)

    if args.list_encodings:
        list_encodings()
        return 0

    if args.create_config:
        try:
            create_sample_config(Path(args.create_config))
        except OSError as e:
            logger.error(f"Error writing sample configuration to {args.create_config}: {e}")
            return 1
        print(f"Sample configuration written to {args.create_config}")
        return 0

    try:
        config = build_config(args)
    except ConfigError as e:
        logger.error(str(e))
        return 1

    errors = validate_config(config)
    if errors:
        for error in errors:
            logger.error(error)
        return 1

    try:
        if config.input_file:
            try:
                reader = open(config.input_file, 'rb')
            except OSError as e:
                logger.error(f"Error opening {config.input_file}: {e}")
                return 1
            with reader:
                dump_stream(reader, config)
        else:
            dump_stream(sys.stdin.buffer, config)
    except OSError as e:
        logger.error(f"error reading input: {e}")
        return 1
    except KeyboardInterrupt:
        return 130

    return 0
