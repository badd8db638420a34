"""
Column encoder package for polydump.

This package turns a stream of byte chunks into aligned text columns, one
ColumnEncoder per enabled codec.
"""

from .column_encoder import (
    ColumnEncoder,
    column_width,
    display_width,
    colorize,
    TERM_COLORS
)

__all__ = [
    'ColumnEncoder',
    'column_width',
    'display_width',
    'colorize',
    'TERM_COLORS'
]
