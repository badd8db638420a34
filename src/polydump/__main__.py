#!/usr/bin/env python3
"""
Entry point for running polydump with python -m polydump.

This allows the package to be executed directly via:
python -m polydump [options]
"""

import sys

from polydump.line_driver.line_driver import main


def run_module():
    """Execute polydump with the command-line arguments and return its exit code."""
    return main(sys.argv[1:])


if __name__ == "__main__":
    sys.exit(run_module())
