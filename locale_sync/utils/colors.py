"""ANSI color codes for terminal output."""


class Colors:
    """ANSI color codes for terminal output."""

    OKCYAN = '\033[96m'
    OKGREEN = '\033[92m'
    WARNING = '\033[93m'
    FAIL = '\033[91m'
    DIM = '\033[2m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'

    @classmethod
    def success(cls, text: str) -> str:
        """Return text in green color."""
        return f"{cls.OKGREEN}{text}{cls.ENDC}"

    @classmethod
    def error(cls, text: str) -> str:
        """Return text in red color."""
        return f"{cls.FAIL}{text}{cls.ENDC}"

    @classmethod
    def warning(cls, text: str) -> str:
        """Return text in yellow color."""
        return f"{cls.WARNING}{text}{cls.ENDC}"

    @classmethod
    def dim(cls, text: str) -> str:
        """Return text dimmed (used for key lists in summaries)."""
        return f"{cls.DIM}{text}{cls.ENDC}"

    @classmethod
    def bold(cls, text: str) -> str:
        """Return text in bold."""
        return f"{cls.BOLD}{text}{cls.ENDC}"
