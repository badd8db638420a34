"""
Line driver package for polydump.

This package reads the input in fixed-size chunks, feeds every chunk to the
column encoders and writes the aligned lines, header and positions.
"""

from .line_driver import (
    build_encoders,
    format_header,
    process_line,
    read_chunk,
    skip_bytes,
    dump_stream,
    list_encodings,
    main
)

__all__ = [
    'build_encoders',
    'format_header',
    'process_line',
    'read_chunk',
    'skip_bytes',
    'dump_stream',
    'list_encodings',
    'main'
]
