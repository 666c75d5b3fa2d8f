"""Cyclic regular-expression line search."""
import logging
import re
from collections.abc import Iterator
from re import Pattern
from typing import Optional

from .buffer import Document
from .errors import NoMatchError, PatternError

logger = logging.getLogger(__name__)


def compile_pattern(source: str, flags: int = 0) -> Pattern:
    """Compile a user-supplied regular expression.

    Raises:
        PatternError: If the expression does not compile
    """
    try:
        return re.compile(source, flags)
    except re.error as e:
        raise PatternError("invalid pattern") from e


def cyclic_addresses(count: int, current: int, forward: bool = True) -> Iterator[int]:
    """Yield every address once, starting next to ``current`` and wrapping.

    The current line itself comes last.

    Args:
        count: Number of lines in the document
        current: Current line (1-based)
        forward: Walk towards the end of the document when True

    Yields:
        Line numbers (1-based)
    """
    step = 1 if forward else -1
    for offset in range(1, count + 1):
        yield (current - 1 + step * offset) % count + 1


def cyclic_search(
    document: Document, current: int, pattern: Optional[Pattern], forward: bool = True
) -> int:
    """Find the nearest line matching ``pattern`` around ``current``.

    Args:
        document: Document to search
        current: Line the search starts next to
        pattern: Compiled pattern, None if nothing was compiled yet
        forward: Search direction (``/`` is forward, ``?`` is backward)

    Returns:
        Address of the first matching line

    Raises:
        PatternError: If there is no pattern to search with
        NoMatchError: If no line matches
    """
    if pattern is None:
        raise PatternError("no previous pattern")

    for line_num in cyclic_addresses(len(document), current, forward):
        if pattern.search(document.get_line(line_num)):
            logger.debug(f"Pattern {pattern.pattern!r} matched line {line_num}")
            return line_num

    raise NoMatchError()
