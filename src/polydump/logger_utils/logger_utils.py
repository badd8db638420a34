#!/usr/bin/env python3
import json
import logging
import sys
import importlib
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Dict, Any

# Constants
ENCODING = "utf-8"
DEFAULT_CONFIG_FILE = "module_config.json"
VALID_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Initialize paths - handling both frozen (PyInstaller) and regular Python execution
if getattr(sys, 'frozen', False):
    # Running as compiled executable
    MODULE_DIR = Path(sys._MEIPASS)
else:
    # Running as script
    MODULE_DIR = Path(__file__).parent.absolute()

DEFAULT_LOGGING_CONFIG = {
    "logging": {
        "console": {"level": "WARNING"},
        "file": {"enabled": False, "level": "INFO"}
    }
}


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load logging configuration from the specified path or default location.
    Search for the config file in multiple locations for better flexibility.

    Args:
        config_path: Optional path to the config file

    Returns:
        Dict containing the logging configuration
    """
    if config_path is None:
        # Try multiple possible locations in order of preference
        possible_config_paths = [
            MODULE_DIR / DEFAULT_CONFIG_FILE,  # In logger_utils directory
            MODULE_DIR / "config" / DEFAULT_CONFIG_FILE,  # In logger_utils/config directory
            MODULE_DIR.parent / DEFAULT_CONFIG_FILE,  # In package directory
        ]

        # Use the first config file that exists
        for path in possible_config_paths:
            if path.exists():
                config_path = path
                break

        if config_path is None:
            return DEFAULT_LOGGING_CONFIG

    try:
        with open(config_path, 'r', encoding=ENCODING) as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError):
        # If we can't load the config, use basic defaults
        return DEFAULT_LOGGING_CONFIG


def get_module_dir(module_name: str) -> Path:
    """
    Get the directory of the specified module.

    Args:
        module_name: Name of the module

    Returns:
        Path to the module's directory
    """
    module_parts = module_name.split('.')
    try:
        module = importlib.import_module(f"polydump.{module_name}")
        return Path(module.__file__).parent
    except (ModuleNotFoundError, AttributeError, TypeError):
        # Not an importable subpackage; fall back to a directory named after it
        return MODULE_DIR.parent / module_parts[0]


def _level(name: Optional[str], fallback: str) -> int:
    name = (name or fallback).upper()
    if name not in VALID_LEVELS:
        name = fallback
    return getattr(logging, name)


def setup_logger(
    module_name: str,
    config_path: Optional[Path] = None,
    log_dir: Optional[Path] = None,
    console_level: Optional[str] = None
) -> logging.Logger:
    """
    Set up the ``polydump`` logger for a module using the configuration.

    The console handler writes to stderr so it never mixes with a dump on
    stdout. A rotating file handler is added only when file logging is
    enabled in the configuration.

    Args:
        module_name: Name of the module (used for the logger name and module-specific settings)
        config_path: Optional path to the config file
        log_dir: Optional custom log directory path
        console_level: Optional console level overriding the configuration

    Returns:
        Configured logger instance
    """
    # Load configuration
    config = load_config(config_path)
    logging_config = config.get("logging", {})

    # Get module-specific settings
    module_config = logging_config.get("modules", {}).get(
        module_name,
        logging_config.get("modules", {}).get("default", {})
    )

    # Handlers live on the package logger so every polydump module shares them
    logger = logging.getLogger("polydump")
    logger.setLevel(logging.DEBUG)  # Set to DEBUG to allow all levels, handlers will filter
    logger.propagate = False

    # Clear any existing handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # Console Handler
    console_config = logging_config.get("console", {})
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(_level(console_level or console_config.get("level"), "WARNING"))
    console_handler.setFormatter(logging.Formatter(
        console_config.get("format", "%(levelname)s: %(message)s"),
        console_config.get("date_format", "%H:%M:%S")
    ))
    logger.addHandler(console_handler)

    # File Handler
    file_config = logging_config.get("file", {})
    if file_config.get("enabled", False):
        module_dir = get_module_dir(module_name)
        logs_dir = Path(log_dir) if log_dir else module_dir / "logs"
        logs_dir.mkdir(parents=True, exist_ok=True)
        log_file = logs_dir / module_config.get("log_filename", file_config.get("log_filename", "polydump.log"))

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=file_config.get("max_size_bytes", 1048576),
            backupCount=file_config.get("backup_count", 5),
            encoding=file_config.get("encoding", ENCODING)
        )
        file_handler.setLevel(_level(module_config.get("level", file_config.get("level")), "INFO"))
        file_handler.setFormatter(logging.Formatter(
            file_config.get("format", "%(asctime)s - %(name)s - %(levelname)s - [%(module)s:%(lineno)d] - %(message)s"),
            file_config.get("date_format", "%Y-%m-%d %H:%M:%S")
        ))
        logger.addHandler(file_handler)

        # Log file location after logger is configured
        logger.info(f"Using log file: {log_file}")

    return logging.getLogger(f"polydump.{module_name}")

# Example usage in other modules:
# from polydump.logger_utils.logger_utils import setup_logger
# logger = setup_logger("line_driver")
