"""The ``s`` command: regex replacement over a line range."""
import logging
import re
from re import Pattern
from typing import Optional

from ..core.buffer import Document
from ..core.errors import CommandSyntaxError, PatternError
from ..core.search import compile_pattern

logger = logging.getLogger(__name__)

DEFAULT_DELIMITER = "/"
FLAGS = "gip"


def split_fields(text: str, delimiter: str) -> list[list[str]]:
    """Split ``text`` on unescaped delimiters.

    Each field comes back as a list of tokens so that an escaped delimiter
    (the two-character token ``\\<delimiter>``) can be told apart from the
    field separators. Other backslash pairs are kept whole as well.
    """
    fields: list[list[str]] = [[]]
    i = 0
    while i < len(text):
        char = text[i]
        if char == "\\" and i + 1 < len(text):
            fields[-1].append(text[i : i + 2])
            i += 2
            continue
        if char == delimiter:
            fields.append([])
        else:
            fields[-1].append(char)
        i += 1
    return fields


class Substitution:
    """A parsed ``s/pattern/replacement/flags`` command.

    An empty pattern means "reuse the last pattern". The replacement uses
    ``re`` template syntax (``\\1``, ``\\g<name>``).
    """

    def __init__(
        self,
        pattern: str,
        replacement: str = "",
        flags: str = "",
        auto_print: bool = False,
    ):
        self.pattern = pattern
        self.replacement = replacement
        self.flags = flags
        self.auto_print = auto_print or "p" in flags

    @property
    def replace_all(self) -> bool:
        return "g" in self.flags

    @property
    def ignore_case(self) -> bool:
        return "i" in self.flags

    def __repr__(self) -> str:
        return (
            f"Substitution(pattern={self.pattern!r}, replacement={self.replacement!r}, "
            f"flags={self.flags!r}, auto_print={self.auto_print!r})"
        )

    def compile(self, previous: Optional[Pattern]) -> Pattern:
        """Compile the pattern, falling back to ``previous`` when empty.

        Raises:
            PatternError: If the pattern is invalid, or empty with no previous
        """
        flags = re.IGNORECASE if self.ignore_case else 0

        if self.pattern:
            return compile_pattern(self.pattern, flags)

        if previous is None:
            raise PatternError("no previous pattern")
        if flags and not previous.flags & flags:
            return compile_pattern(previous.pattern, previous.flags | flags)
        return previous

    def apply(self, document: Document, start: int, end: int, pattern: Pattern) -> list[int]:
        """Replace matches in lines ``start`` through ``end``.

        Every new line is computed before any is stored, so a bad
        replacement template leaves the document untouched.

        Returns:
            Line numbers that changed

        Raises:
            PatternError: If the replacement template is invalid
        """
        count = 0 if self.replace_all else 1
        updates = []

        try:
            for line_num, text in document.iter_lines(start, end):
                new_text = pattern.sub(self.replacement, text, count=count)
                if new_text != text:
                    updates.append((line_num, new_text))
        except re.error as e:
            raise PatternError("invalid replacement") from e

        for line_num, new_text in updates:
            document.replace_line(line_num, new_text)

        logger.debug(f"Substituted on {len(updates)} of lines {start}-{end}")
        return [line_num for line_num, _ in updates]


def parse_substitution(text: str) -> Substitution:
    """Parse the text of an ``s`` command, verb included.

    The character after ``s`` is the delimiter (``/`` when there is none).
    The command splits into 2 to 4 parts: ``s``, pattern, replacement,
    flags. With exactly three parts the result is printed afterwards.

    Raises:
        PatternError: For a whitespace or backslash delimiter
        CommandSyntaxError: For a wrong part count or unknown flags
    """
    delimiter = text[1] if len(text) > 1 else DEFAULT_DELIMITER
    if delimiter.isspace() or delimiter == "\\":
        raise PatternError("invalid pattern delimiter")

    fields = split_fields(text, delimiter)
    if not 2 <= len(fields) <= 4:
        raise CommandSyntaxError("invalid command syntax")

    escaped = "\\" + delimiter

    def unescape(field: list[str], literal: str) -> str:
        return "".join(literal if token == escaped else token for token in field)

    pattern = unescape(fields[1], re.escape(delimiter))
    replacement = unescape(fields[2], delimiter) if len(fields) > 2 else ""
    flags = "".join(fields[3]) if len(fields) > 3 else ""

    if any(flag not in FLAGS for flag in flags):
        raise CommandSyntaxError("invalid command suffix")

    return Substitution(pattern, replacement, flags, auto_print=len(fields) == 3)
