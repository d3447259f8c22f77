"""Scoped temporary files for downloads and raw payloads."""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from fileforge.core.errors import ScratchFileError

logger = logging.getLogger(__name__)


class TempFileFactory:
    """Creates temporary files that are removed when their scope exits.

    Parameters
    ----------
    temp_dir:
        Directory for temporary files.  ``None`` uses the system default.
    """

    def __init__(self, temp_dir: Path | None = None) -> None:
        self._temp_dir = Path(temp_dir) if temp_dir is not None else None
        if self._temp_dir is not None:
            self._temp_dir.mkdir(parents=True, exist_ok=True)

    @property
    def temp_dir(self) -> Path | None:
        return self._temp_dir

    @contextmanager
    def create(self, prefix: str) -> Iterator[Path]:
        """Yield the path of a new empty file, removing it on every exit path."""
        try:
            fd, name = tempfile.mkstemp(prefix=prefix, dir=self._temp_dir)
        except OSError as exc:
            raise ScratchFileError(f"failed to create a temporary file: {exc}") from exc
        os.close(fd)
        path = Path(name)
        logger.debug("Created temporary file %s", path)
        try:
            yield path
        finally:
            try:
                path.unlink(missing_ok=True)
            except OSError:
                logger.exception("Failed to remove temporary file %s", path)
