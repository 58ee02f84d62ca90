"""Scratch files for inline page content.

The external tool only reads files and URLs, so inline HTML is written to
temporary files that live for exactly one invocation.
"""

import logging
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


class ScratchFiles:
    """Tracks temporary files and removes them when the scope ends.

    Usage:
        with ScratchFiles() as scratch:
            path = scratch.write("<p>Hello</p>")
            ...
        # every file written above is gone here, whatever happened inside

    Attributes:
        directory: Where files are created (default: system temp dir)
    """

    def __init__(self, directory: Path | None = None):
        self.directory = directory
        self._paths: list[Path] = []

    @property
    def paths(self) -> list[Path]:
        return list(self._paths)

    def write(self, content: str) -> Path:
        """Persist content to a new scratch file and register it for cleanup.

        Args:
            content: HTML text to write

        Returns:
            Path of the new file
        """
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            prefix="pd4ml-",
            suffix=".html",
            dir=self.directory,
            delete=False,
        ) as handle:
            self._paths.append(Path(handle.name))
            handle.write(content)
        logger.debug(f"Wrote scratch file {handle.name}")
        return Path(handle.name)

    def release(self) -> None:
        """Delete all registered files.

        Failures are logged and never raised, so they cannot hide the
        outcome of the invocation that used the files.
        """
        while self._paths:
            path = self._paths.pop()
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                logger.warning(f"Failed to remove scratch file {path}: {e}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()
        return False
