"""Structured logging for locale-sync."""

import logging
import sys
from typing import Optional
from pathlib import Path
from .colors import Colors

LOGGER_NAME = 'locale_sync'


class ColoredFormatter(logging.Formatter):
    """
    Formatter that colors console output by log level.

    File handlers use a plain formatter so log files stay free of ANSI codes.
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.OKCYAN,
        logging.INFO: '',
        logging.WARNING: Colors.WARNING,
        logging.ERROR: Colors.FAIL,
        logging.CRITICAL: Colors.FAIL + Colors.BOLD,
    }

    LEVEL_PREFIXES = {
        logging.WARNING: 'warning: ',
        logging.ERROR: 'error: ',
        logging.CRITICAL: 'fatal: ',
    }

    def __init__(self, fmt: Optional[str] = None, use_colors: bool = True, use_prefixes: bool = False):
        """
        Initialize the formatter.

        Args:
            fmt: Format string for log messages
            use_colors: Whether to use ANSI colors
            use_prefixes: Whether to prefix warnings and errors with their level
        """
        super().__init__(fmt)
        self.use_colors = use_colors
        self.use_prefixes = use_prefixes

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors if enabled."""
        message = super().format(record)

        if self.use_prefixes:
            message = f"{self.LEVEL_PREFIXES.get(record.levelno, '')}{message}"

        if self.use_colors:
            color = self.LEVEL_COLORS.get(record.levelno, '')
            if color:
                message = f"{color}{message}{Colors.ENDC}"

        return message


class Logger:
    """
    Main logger for locale-sync.

    Wraps the ``locale_sync`` standard-library logger with a colored console
    handler, an optional file handler, and a few styled helpers.
    """

    _instance: Optional['Logger'] = None
    _initialized: bool = False

    def __new__(cls) -> 'Logger':
        """Singleton pattern to ensure single logger instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize the logger (only once due to singleton)."""
        if Logger._initialized:
            return

        self._logger = logging.getLogger(LOGGER_NAME)
        self._logger.setLevel(logging.DEBUG)
        self._logger.propagate = False
        self._logger.handlers = []

        self._console_handler = self._create_console_handler()
        self._logger.addHandler(self._console_handler)

        self._file_handler: Optional[logging.FileHandler] = None

        Logger._initialized = True

    def _create_console_handler(
        self,
        level: int = logging.INFO,
        use_colors: bool = True
    ) -> logging.StreamHandler:
        """
        Create a console handler.

        Args:
            level: Minimum log level for console output
            use_colors: Whether to use ANSI colors

        Returns:
            Configured StreamHandler
        """
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(ColoredFormatter(
            fmt='%(message)s',
            use_colors=use_colors,
            use_prefixes=True
        ))

        return handler

    def _create_file_handler(
        self,
        file_path: Path,
        level: int = logging.DEBUG
    ) -> logging.FileHandler:
        """
        Create a file handler.

        Args:
            file_path: Path to log file
            level: Minimum log level for file output

        Returns:
            Configured FileHandler
        """
        file_path.parent.mkdir(parents=True, exist_ok=True)

        handler = logging.FileHandler(file_path, encoding='utf-8')
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(
            fmt='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))

        return handler

    def configure(
        self,
        verbose: bool = False,
        quiet: bool = False,
        log_file: Optional[Path] = None,
        use_colors: bool = True
    ) -> None:
        """
        Configure the logger settings.

        Args:
            verbose: Enable verbose (DEBUG) console output
            quiet: Enable quiet mode (WARNING+ only)
            log_file: Optional file path for logging
            use_colors: Whether to use colors in console
        """
        if quiet:
            console_level = logging.WARNING
        elif verbose:
            console_level = logging.DEBUG
        else:
            console_level = logging.INFO

        self._logger.removeHandler(self._console_handler)
        self._console_handler = self._create_console_handler(
            level=console_level,
            use_colors=use_colors
        )
        self._logger.addHandler(self._console_handler)

        if log_file:
            if self._file_handler:
                self._logger.removeHandler(self._file_handler)
                self._file_handler.close()
            self._file_handler = self._create_file_handler(Path(log_file))
            self._logger.addHandler(self._file_handler)

    def debug(self, msg: str, *args, **kwargs) -> None:
        """Log debug message."""
        self._logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        """Log info message."""
        self._logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        """Log warning message."""
        self._logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs) -> None:
        """Log error message."""
        self._logger.error(msg, *args, **kwargs)

    def success(self, msg: str) -> None:
        """Log success message with a check mark."""
        self._logger.info(f"✓ {msg}")

    def fail(self, msg: str) -> None:
        """Log failure message with a cross (ERROR level, red on the console)."""
        self._logger.error(f"✗ {msg}")

    def hint(self, msg: str) -> None:
        """Log a follow-up suggestion for the user."""
        self._logger.info(f"💡 {msg}")


_logger: Optional[Logger] = None


def get_logger() -> Logger:
    """Get the global logger instance."""
    global _logger
    if _logger is None:
        _logger = Logger()
    return _logger


def configure_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[Path] = None,
    use_colors: bool = True
) -> None:
    """
    Configure the global logger.

    Args:
        verbose: Enable verbose (DEBUG) console output
        quiet: Enable quiet mode (WARNING+ only)
        log_file: Optional file path for logging
        use_colors: Whether to use colors in console
    """
    get_logger().configure(
        verbose=verbose,
        quiet=quiet,
        log_file=log_file,
        use_colors=use_colors
    )


def reset_logger() -> None:
    """Reset the global logger (mainly for testing)."""
    global _logger
    if _logger is not None:
        for handler in _logger._logger.handlers[:]:
            handler.close()
            _logger._logger.removeHandler(handler)
    _logger = None
    Logger._instance = None
    Logger._initialized = False
