"""Access to the previous committed revision of locale files through git."""

import json
import subprocess
from pathlib import Path
from typing import Any, Dict, List

from .errors import HistoryError


class GitHistory:
    """
    Reads files as they were in an earlier git revision.

    The default revision, ``HEAD^``, is the parent of the current commit,
    which is what a post-commit CI job compares against.
    """

    def __init__(self, revision: str = 'HEAD^'):
        self.revision = revision

    def previous_revision(self, path: Path) -> Dict[str, Any]:
        """
        Load the JSON document at ``path`` as of ``self.revision``.

        Args:
            path: Path of the file in the working tree

        Returns:
            The previous document, or ``{}`` if the file did not exist then

        Raises:
            HistoryError: git is unavailable, the revision is unknown,
                or the old content is not a JSON object
        """
        path = Path(path)
        workdir = path.parent.resolve()

        listing = self._git(['ls-tree', '-r', self.revision, '--', path.name], workdir, path)
        if not listing.strip():
            return {}

        content = self._git(['show', f'{self.revision}:./{path.name}'], workdir, path)

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise HistoryError(path, f"invalid JSON in {self.revision} ({e})") from e

        if not isinstance(data, dict):
            raise HistoryError(path, f"expected a JSON object in {self.revision}")

        return data

    def _git(self, args: List[str], cwd: Path, path: Path) -> str:
        """Run a git command and return its stdout."""
        try:
            result = subprocess.run(
                ['git', *args],
                cwd=cwd,
                capture_output=True,
                text=True,
                encoding='utf-8',
                check=True,
            )
        except FileNotFoundError as e:
            raise HistoryError(path, f"git executable not found ({e})") from e
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or '').strip()
            raise HistoryError(path, f"git {args[0]} failed: {stderr or e}") from e
        except OSError as e:
            raise HistoryError(path, str(e)) from e

        return result.stdout
