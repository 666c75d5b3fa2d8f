"""Locked, atomic replacement of files written by the editor."""
import logging
import os
import shutil
import tempfile
from contextlib import contextmanager, suppress
from pathlib import Path
from typing import Optional, Union

from filelock import FileLock

logger = logging.getLogger(__name__)

LOCK_SUFFIX = ".lock"
BACKUP_SUFFIX = ".bak"


class SafeFileOperation:
    """Replace one file under a lock, rolling back if the block fails.

    The lock file sits next to the target. An existing target is copied
    aside first, and the new content goes to a temporary file in the same
    directory so that ``atomic_replace`` is a single ``os.replace``.
    """

    def __init__(
        self, file_path: Union[str, Path], timeout: float = 30, create_backup: bool = True
    ):
        """
        Args:
            file_path: File that will be replaced
            timeout: Seconds to wait for the lock
            create_backup: Copy an existing target aside before writing
        """
        self.file_path = Path(file_path)
        self.timeout = timeout
        self.create_backup = create_backup
        self.lock_path = self.file_path.with_name(self.file_path.name + LOCK_SUFFIX)
        self.backup_path = self.file_path.with_name(
            f".{self.file_path.name}.{os.getpid()}{BACKUP_SUFFIX}"
        )
        self.temp_path: Optional[Path] = None
        self.lock: Optional[FileLock] = None

    def __enter__(self):
        # A lock timeout propagates before anything needs undoing.
        lock = FileLock(self.lock_path, timeout=self.timeout)
        lock.acquire()
        self.lock = lock
        logger.debug(f"Locked {self.lock_path}")

        try:
            if self.create_backup and self.file_path.exists():
                shutil.copy2(self.file_path, self.backup_path)
                logger.debug(f"Backed up {self.file_path} to {self.backup_path}")
        except OSError as e:
            logger.error(f"Cannot back up {self.file_path}: {e}")
            self._release()
            raise

        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is None:
                if self.backup_path.exists():
                    os.remove(self.backup_path)
            else:
                logger.info(f"Rolling back {self.file_path}: {exc_val}")
                self._restore_from_backup()
        finally:
            if self.temp_path is not None and self.temp_path.exists():
                os.remove(self.temp_path)
            self._release()

    def _release(self):
        if self.lock is None:
            return
        self.lock.release()
        logger.debug(f"Unlocked {self.lock_path}")
        if not self.lock.is_locked:
            # Unix locks leave their file behind.
            with suppress(OSError):
                os.remove(self.lock_path)
        self.lock = None

    def _restore_from_backup(self):
        if self.backup_path.exists():
            shutil.move(self.backup_path, self.file_path)
            logger.info(f"Restored {self.file_path} from {self.backup_path}")

    def get_temp_file(self) -> Path:
        """Temporary file beside the target, created on first call."""
        if self.temp_path is None:
            fd, name = tempfile.mkstemp(
                dir=self.file_path.parent, prefix=f".{self.file_path.name}.", suffix=".tmp"
            )
            os.close(fd)
            self.temp_path = Path(name)
        return self.temp_path

    def atomic_replace(self, source: Union[str, Path]):
        """Move ``source`` over the target in one step.

        Raises:
            FileNotFoundError: If ``source`` does not exist
        """
        source = Path(source)
        if not source.exists():
            raise FileNotFoundError(f"Source file not found: {source}")
        os.replace(source, self.file_path)
        logger.debug(f"Replaced {self.file_path}")


@contextmanager
def safe_edit_context(file_path: Union[str, Path], timeout: float = 30):
    """Shorthand for ``SafeFileOperation(file_path, timeout)``."""
    with SafeFileOperation(file_path, timeout) as safe_op:
        yield safe_op
