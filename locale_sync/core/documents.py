"""JSON locale file storage."""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import LoadError


class LocaleStore:
    """
    Reads and writes the JSON locale files of one locale directory.

    Files are named ``<language code>.json`` (e.g. ``en.json``, ``pt-BR.json``).
    """

    def __init__(self, directory: Path, indent: int = 2):
        """
        Initialize the store.

        Args:
            directory: Directory containing the locale files
            indent: JSON indentation used when saving
        """
        self.directory = Path(directory)
        self.indent = indent

    def path_for(self, filename: str) -> Path:
        """Return the full path of a file inside the locale directory."""
        return self.directory / filename

    def load(self, path: Path) -> Dict[str, Any]:
        """
        Load a locale document.

        Raises:
            LoadError: File is unreadable, not valid JSON, or not a JSON object
        """
        path = Path(path)

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError) as e:
            raise LoadError(path, str(e)) from e
        except json.JSONDecodeError as e:
            raise LoadError(path, f"invalid JSON ({e})") from e

        if not isinstance(data, dict):
            raise LoadError(path, f"expected a JSON object, got {type(data).__name__}")

        return data

    def save(self, path: Path, document: Dict[str, Any]) -> None:
        """
        Save a locale document.

        Key order is kept as is. The content goes to a temporary file in the
        same directory first and then replaces the target.
        """
        path = Path(path)
        content = json.dumps(document, ensure_ascii=False, indent=self.indent) + '\n'

        fd, tmp_name = tempfile.mkstemp(prefix=f'.{path.name}.', suffix='.tmp', dir=path.parent)
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(content)
            os.replace(tmp_name, path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def discover(self, exclude: Optional[str] = None) -> Dict[str, Path]:
        """
        Find locale files in the directory.

        Args:
            exclude: File name to leave out (the base-language file)

        Returns:
            ``{language_code: path}`` sorted by file name
        """
        if not self.directory.is_dir():
            return {}

        return {
            path.stem: path
            for path in sorted(self.directory.glob('*.json'))
            if path.is_file() and path.name != exclude
        }
