"""
Utilities package
"""

from src.utils.logger import setup_logger
from src.utils.error_handler import ErrorHandler, ErrorType, NotFoundError
from src.utils.config_helper import ConfigHelper, get_config

__all__ = ['setup_logger', 'ErrorHandler', 'ErrorType', 'NotFoundError', 'ConfigHelper', 'get_config']
