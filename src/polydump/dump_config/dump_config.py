"""
Dump configuration.

This module holds the settings of a polydump run. Settings come from three
places, later ones overriding earlier ones:
1. The DumpConfig defaults
2. An optional JSON or YAML configuration file (``--config``)
3. Options given explicitly on the command line
"""

import argparse
import json
import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from polydump.codec_catalog.catalog import CATALOG, CODEC_NAMES

logger = logging.getLogger(__name__)

ENCODING = "utf-8"
YAML_SUFFIXES = (".yaml", ".yml")

DEFAULT_WIDTH = 8
DEFAULT_COLOR_WIDTH = 2


@dataclass
class DumpConfig:
    """Settings of one dump run"""
    encodings: List[str] = field(default_factory=list)
    input_file: Optional[str] = None
    start: int = 0
    length: int = 0
    width: int = DEFAULT_WIDTH
    colors: bool = True
    color_width: int = DEFAULT_COLOR_WIDTH
    offsets: bool = False
    position: bool = True


class DumpError(Exception):
    """Base exception for dump-related errors"""
    pass


class ConfigError(DumpError):
    """Configuration-related errors"""
    pass


def validate_config(config: DumpConfig) -> List[str]:
    """
    Validate the configuration with detailed error messages.

    Args:
        config: Dump configuration object

    Returns:
        List of validation error messages (empty if config is valid)
    """
    validation_errors = []

    if not isinstance(config.width, int) or config.width <= 0:
        validation_errors.append("width must be >0")

    if not isinstance(config.color_width, int) or config.color_width <= 0:
        validation_errors.append("color width must be >0")

    if not isinstance(config.start, int) or config.start < 0:
        validation_errors.append(f"Invalid start offset: {config.start}")

    if not isinstance(config.length, int) or config.length < 0:
        validation_errors.append(f"Invalid length: {config.length}")

    for name in ("colors", "offsets", "position"):
        value = getattr(config, name)
        if not isinstance(value, bool):
            validation_errors.append(f"{name} must be true or false, got {value!r}")

    if config.input_file is not None and not isinstance(config.input_file, str):
        validation_errors.append(f"Invalid input file: {config.input_file!r}")

    unknown = [str(name) for name in config.encodings if name not in CODEC_NAMES]
    if unknown:
        validation_errors.append(
            f"Unknown encodings: {', '.join(unknown)}. Choose from: {', '.join(CODEC_NAMES)}"
        )

    return validation_errors


def config_from_dict(data: Dict[str, Any]) -> DumpConfig:
    """
    Build a DumpConfig from a plain mapping.

    Raises:
        ConfigError: If the mapping has unknown keys or a malformed encodings list
    """
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping of settings")

    known = {f.name for f in fields(DumpConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    encodings = data.get("encodings", [])
    if isinstance(encodings, str):
        encodings = [encodings]
    if not isinstance(encodings, list):
        raise ConfigError("'encodings' must be a list of encoding names")

    values = dict(data)
    values["encodings"] = list(encodings)
    return DumpConfig(**values)


def load_config(config_path: Union[str, Path]) -> DumpConfig:
    """
    Load configuration from a JSON or YAML file.

    Args:
        config_path: Path to the configuration file

    Returns:
        DumpConfig built from the file contents

    Raises:
        ConfigError: If the file is missing, unreadable or malformed
    """
    path = Path(config_path)
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        with open(path, 'r', encoding=ENCODING) as f:
            if path.suffix.lower() in YAML_SUFFIXES:
                data = yaml.safe_load(f) or {}
            else:
                data = json.load(f)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load configuration from {path}: {e}") from e

    logger.info(f"Loaded configuration from {path}")
    return config_from_dict(data)


def create_sample_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Create a sample configuration with default values.

    If a path is provided the configuration is saved there, as YAML when the
    suffix asks for it and as JSON otherwise.

    Args:
        config_path: Optional path to save the sample configuration to

    Returns:
        The sample configuration dictionary
    """
    sample_config = asdict(DumpConfig(encodings=["u8", "hex", "utf8"]))

    if config_path:
        path = Path(config_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding=ENCODING) as f:
            if path.suffix.lower() in YAML_SUFFIXES:
                yaml.safe_dump(sample_config, f, sort_keys=False)
            else:
                json.dump(sample_config, f, indent=4)
        logger.info(f"Sample configuration written to {path}")

    return sample_config


def build_parser() -> argparse.ArgumentParser:
    """Create the command line parser; option defaults are None so file values can show through."""
    parser = argparse.ArgumentParser(
        prog="polydump",
        description="Render a byte stream as aligned columns of several encodings at once."
    )

    group = parser.add_argument_group("encodings")
    for codec in CATALOG:
        group.add_argument(
            f"--{codec.name}",
            dest="encodings",
            action="append_const",
            const=codec.name,
            help=codec.description
        )
    group.add_argument("--list-encodings", action="store_true",
                       help="List the available encodings and exit")

    parser.add_argument("-f", "--file", dest="input_file", default=None,
                        help="File to read input from (stdin by default)")
    parser.add_argument("-s", "--start", type=int, default=None,
                        help="Start position in bytes")
    parser.add_argument("-l", "--length", type=int, default=None,
                        help="Length in bytes to read (0 reads everything)")
    parser.add_argument("-w", "--width", type=int, default=None,
                        help="Width of each output line in bytes")
    parser.add_argument("-C", "--no-color", dest="colors", action="store_false", default=None,
                        help="Disable colors")
    parser.add_argument("--color-width", type=int, default=None,
                        help="Width of each color band in bytes")
    parser.add_argument("-o", "--offsets", action="store_true", default=None,
                        help="Show all offsets for multi-byte data types")
    parser.add_argument("-P", "--no-position", dest="position", action="store_false", default=None,
                        help="Hide the position column")
    parser.add_argument("-c", "--config", default=None,
                        help="JSON or YAML configuration file")
    parser.add_argument("--create-config", metavar="PATH", default=None,
                        help="Write a sample configuration file and exit")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log debug information to stderr")
    return parser


def build_config(args: argparse.Namespace) -> DumpConfig:
    """
    Merge the configuration file (if any) with explicit command line options.

    Raises:
        ConfigError: If the configuration file cannot be loaded
    """
    config = load_config(args.config) if args.config else DumpConfig()

    for f in fields(DumpConfig):
        value = getattr(args, f.name, None)
        if value is not None:
            setattr(config, f.name, value)

    return config
