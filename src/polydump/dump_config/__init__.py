"""
Configuration package for polydump.

This package provides the DumpConfig settings object together with loading
from JSON/YAML files, validation and the command line parser.
"""

from .dump_config import (
    DumpConfig,
    DumpError,
    ConfigError,
    validate_config,
    config_from_dict,
    load_config,
    create_sample_config,
    build_parser,
    build_config
)

__all__ = [
    'DumpConfig',
    'DumpError',
    'ConfigError',
    'validate_config',
    'config_from_dict',
    'load_config',
    'create_sample_config',
    'build_parser',
    'build_config'
]
