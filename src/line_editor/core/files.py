"""File collaborators: load a document from disk and write it back."""
import logging
import os
import stat
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import TextIO, Union

from filelock import Timeout

from .errors import EditorIOError
from .safety import SafeFileOperation

logger = logging.getLogger(__name__)

# Lines are split on "\n" only; undecodable bytes survive a load/write cycle.
NEWLINE = "\n"
ERRORS = "surrogateescape"


def line_size(text: str, encoding: str = "utf-8") -> int:
    """Bytes one line occupies on disk, including its newline."""
    return len(text.encode(encoding, ERRORS)) + 1


def iter_file_lines(file_path: Union[str, Path], encoding: str = "utf-8") -> Iterator[str]:
    """Read a file line by line.

    Args:
        file_path: Path to the file
        encoding: File encoding

    Yields:
        Lines without their trailing newline
    """
    with open(file_path, encoding=encoding, errors=ERRORS, newline=NEWLINE) as f:
        for line in f:
            yield line[:-1] if line.endswith(NEWLINE) else line


def iter_stream_lines(stream: TextIO) -> Iterator[str]:
    """Yield lines from an open text stream, newline stripped."""
    for line in stream:
        yield line[:-1] if line.endswith(NEWLINE) else line


def read_lines(file_path: Union[str, Path], encoding: str = "utf-8") -> tuple[list[str], int]:
    """Load a whole file.

    Args:
        file_path: Path to the file
        encoding: File encoding

    Returns:
        Tuple of (lines, byte count)

    Raises:
        EditorIOError: If the file cannot be opened or decoded
    """
    try:
        lines = list(iter_file_lines(file_path, encoding))
    except (OSError, UnicodeError) as e:
        logger.info(f"Cannot open {file_path}: {e}")
        raise EditorIOError("cannot open input file") from e

    size = sum(line_size(line, encoding) for line in lines)
    logger.info(f"Read {len(lines)} lines ({size} bytes) from {file_path}")
    return lines, size


def _default_mode() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_lines(
    file_path: Union[str, Path],
    lines: Iterable[str],
    encoding: str = "utf-8",
    timeout: float = 30,
) -> int:
    """Write lines, newline-terminated, replacing the file atomically.

    Args:
        file_path: Destination path
        lines: Lines to write
        encoding: File encoding
        timeout: Lock timeout in seconds

    Returns:
        Number of bytes written

    Raises:
        EditorIOError: If the file cannot be created or locked
    """
    file_path = Path(file_path)
    size = 0

    if not file_path.parent.is_dir():
        logger.info(f"Cannot write {file_path}: no such directory")
        raise EditorIOError("cannot write to file")

    try:
        with SafeFileOperation(file_path, timeout=timeout) as safe_op:
            temp_file = safe_op.get_temp_file()

            with open(temp_file, "w", encoding=encoding, errors=ERRORS, newline=NEWLINE) as out:
                for line in lines:
                    out.write(line + NEWLINE)
                    size += line_size(line, encoding)

            if file_path.exists():
                os.chmod(temp_file, stat.S_IMODE(file_path.stat().st_mode))
            else:
                os.chmod(temp_file, _default_mode())

            safe_op.atomic_replace(temp_file)

    except Timeout as e:
        logger.info(f"Timed out waiting for lock on {file_path}")
        raise EditorIOError("file is locked") from e
    except (OSError, UnicodeError) as e:
        logger.info(f"Cannot write {file_path}: {e}")
        raise EditorIOError("cannot write to file") from e

    logger.info(f"Wrote {size} bytes to {file_path}")
    return size
