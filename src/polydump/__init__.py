"""
polydump: render a byte stream as aligned columns of several encodings.

Every line of a dump shows the same bytes decoded side by side as integers,
floats, hexadecimal, ASCII or UTF-8 text, e.g.:

    polydump -f firmware.bin --u16 --hex --ascii
"""

__version__ = "0.1.0"
