"""In-memory line buffer with 1-based addressing."""
import logging
from collections.abc import Iterable, Iterator
from typing import Optional

logger = logging.getLogger(__name__)


class Document:
    """Ordered, mutable sequence of text lines.

    Lines are stored without their terminating newline. Addresses are
    1-based and contiguous; the last address equals ``len(document)``.
    Insertion is expressed as "after line N", where N may be 0 for the top
    of the document.
    """

    def __init__(self, lines: Optional[Iterable[str]] = None):
        """Initialize document.

        Args:
            lines: Initial content, one string per line
        """
        self._lines: list[str] = list(lines) if lines is not None else []

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[str]:
        return iter(self._lines)

    def __eq__(self, other) -> bool:
        if isinstance(other, Document):
            return self._lines == other._lines
        return NotImplemented

    def __repr__(self) -> str:
        return f"Document({self._lines!r})"

    @property
    def last(self) -> int:
        """Address of the last line (0 when empty)."""
        return len(self._lines)

    def is_empty(self) -> bool:
        return not self._lines

    def _check(self, line_num: int):
        if line_num < 1 or line_num > len(self._lines):
            raise IndexError(f"Line {line_num} out of range")

    def get_line(self, line_num: int) -> str:
        """Get a specific line.

        Args:
            line_num: Line number (1-based)

        Returns:
            Line content
        """
        self._check(line_num)
        return self._lines[line_num - 1]

    def get_lines(self, start: int, end: int) -> list[str]:
        """Get range of lines.

        Args:
            start: First line number (1-based, inclusive)
            end: Last line number (1-based, inclusive)

        Returns:
            List of lines
        """
        if start > end:
            return []
        self._check(start)
        self._check(end)
        return self._lines[start - 1 : end]

    def iter_lines(self, start: int = 1, end: Optional[int] = None) -> Iterator[tuple[int, str]]:
        """Iterate over ``(line_number, text)`` pairs in ``[start, end]``."""
        if end is None:
            end = len(self._lines)
        for line_num in range(max(start, 1), min(end, len(self._lines)) + 1):
            yield line_num, self._lines[line_num - 1]

    def insert_after(self, line_num: int, lines: Iterable[str]) -> int:
        """Insert lines after a given line.

        Args:
            line_num: Line to insert after (0 inserts at the top)
            lines: Lines to insert

        Returns:
            Number of lines inserted
        """
        if line_num < 0 or line_num > len(self._lines):
            raise IndexError(f"Line {line_num} out of range")

        new_lines = list(lines)
        self._lines[line_num:line_num] = new_lines
        logger.debug(f"Inserted {len(new_lines)} lines after line {line_num}")
        return len(new_lines)

    def delete_lines(self, start: int, end: Optional[int] = None) -> list[str]:
        """Delete lines from the document.

        Args:
            start: First line to delete (1-based)
            end: Last line to delete (inclusive, None for just start)

        Returns:
            The removed lines, in order
        """
        if end is None:
            end = start
        removed = self.get_lines(start, end)
        del self._lines[start - 1 : end]
        logger.debug(f"Deleted lines {start}-{end}")
        return removed

    def replace_line(self, line_num: int, new_content: str):
        """Replace a specific line.

        Args:
            line_num: Line number to replace (1-based)
            new_content: New line content
        """
        self._check(line_num)
        self._lines[line_num - 1] = new_content

    def replace_all(self, lines: Iterable[str]):
        """Swap in entirely new content."""
        self._lines = list(lines)
