"""
File-backed owners.

CreateFile and OpenFile wrap a path and hand the operation an open
binary file object. Failure to open is logged and reported as a setup
failure (no context), so the operation never runs.
"""

import logging
import os
from pathlib import Path
from typing import BinaryIO, Optional, Union

from .config import get_config
from .context import ScopedContext

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


class FileContext(ScopedContext[BinaryIO]):
    """Base for owners whose context is an open file."""

    mode = "rb"

    def __init__(self, path: PathLike):
        self.path = Path(path)

    def _open(self) -> BinaryIO:
        return open(self.path, self.mode)

    def setup(self) -> Optional[BinaryIO]:
        try:
            return self._open()
        except OSError as e:
            logger.warning("%s: cannot open %s: %s", type(self).__name__, self.path, e)
            return None

    def cleanup(self, context: BinaryIO) -> None:
        try:
            if not context.closed and context.writable():
                context.flush()
        except OSError as e:
            logger.error("%s: flush failed for %s: %s", type(self).__name__, self.path, e)

        # close() flushes again and can fail on its own
        try:
            context.close()
        except OSError as e:
            logger.error("%s: close failed for %s: %s", type(self).__name__, self.path, e)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.path)!r})"


class CreateFile(FileContext):
    """Create (or truncate) a file for reading and writing."""

    mode = "w+b"

    def __init__(self, path: PathLike, create_parents: Optional[bool] = None):
        super().__init__(path)
        if create_parents is None:
            create_parents = get_config().resources.create_parents
        self.create_parents = create_parents

    def _open(self) -> BinaryIO:
        if self.create_parents:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        return super()._open()


class OpenFile(FileContext):
    """Open an existing file for reading."""

    mode = "rb"
