from .logger_utils import setup_logger, load_config, ENCODING

__all__ = ['setup_logger', 'load_config', 'ENCODING']
