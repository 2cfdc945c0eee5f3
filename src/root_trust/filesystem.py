"""Filesystem primitives used by the trust backends."""

import logging
import os
import shutil
from pathlib import Path
from typing import List, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class Filesystem:
    """
    Thin wrapper over pathlib/shutil.

    Backends only touch the disk through this class so tests can swap in a
    filesystem rooted in a temporary directory.
    """

    def resolve(self, path: PathLike) -> Path:
        """Map a store path to the real path on disk."""
        return Path(path)

    def exists(self, path: PathLike) -> bool:
        try:
            return self.resolve(path).exists()
        except OSError:
            return False

    def is_file(self, path: PathLike) -> bool:
        try:
            return self.resolve(path).is_file()
        except OSError:
            return False

    def is_dir(self, path: PathLike) -> bool:
        try:
            return self.resolve(path).is_dir()
        except OSError:
            return False

    def list_dir(self, path: PathLike) -> List[str]:
        """Entry names directly under a directory, sorted."""
        return sorted(os.listdir(self.resolve(path)))

    def copy(self, src: PathLike, dst: PathLike) -> None:
        logger.debug(f"Copying {src} -> {dst}")
        shutil.copyfile(self.resolve(src), self.resolve(dst))

    def remove(self, path: PathLike) -> None:
        logger.debug(f"Removing {path}")
        self.resolve(path).unlink()


default_filesystem = Filesystem()
