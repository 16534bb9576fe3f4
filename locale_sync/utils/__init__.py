"""Utility modules."""

from .colors import Colors
from .config import (
    Config,
    ConfigValidationError,
    ConfigValidationWarning,
    TranslationConfig,
    create_default_config,
)
from .logging import get_logger, configure_logging, reset_logger

__all__ = [
    'Colors',
    'Config',
    'ConfigValidationError',
    'ConfigValidationWarning',
    'TranslationConfig',
    'create_default_config',
    'get_logger',
    'configure_logging',
    'reset_logger',
]
