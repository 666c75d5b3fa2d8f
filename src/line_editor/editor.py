"""Command dispatcher and editor state."""
import enum
import logging
import sys
from collections.abc import Iterable
from re import Pattern
from types import MappingProxyType
from typing import Optional, TextIO

from .commands.address import resolve_addresses
from .commands.substitute import parse_substitution
from .core.buffer import Document
from .core.errors import (
    AddressError,
    CommandSyntaxError,
    EditorError,
    EditorIOError,
    ModifiedWarning,
    UnknownCommandError,
)
from .core.files import iter_stream_lines, read_lines, write_lines

logger = logging.getLogger(__name__)

EX_SUCCESS = 0

DEFAULT_PROMPT = "*"
INPUT_TERMINATOR = "."

# Verbs that operate on existing lines and so need a non-empty document.
LINE_VERBS = frozenset("pnldcs")
# Verbs that take no text after the verb character.
BARE_VERBS = frozenset("pnldaichqQH")

ESCAPES = str.maketrans(
    {
        "\\": "\\\\",
        "\t": "\\t",
        "\a": "\\a",
        "\b": "\\b",
        "\r": "\\r",
        "\n": "\\n",
    }
)


def escape_line(text: str) -> str:
    """Render a line for the ``l`` command."""
    return text.translate(ESCAPES) + "$"


class CommandOutcome(enum.Enum):
    CONTINUE = "continue"
    TERMINATE = "terminate"


class Editor:
    """Line editor driven by ed-style commands.

    Commands are executed one line at a time with ``execute``. Any
    ``EditorError`` raised while resolving or running a command is turned
    into a ``?`` on the output, and its message is kept for ``h``.
    Quitting does not exit the process; ``execute`` returns
    ``CommandOutcome.TERMINATE`` and the caller decides what to do.
    """

    def __init__(
        self,
        input_lines: Optional[Iterable[str]] = None,
        output: Optional[TextIO] = None,
        encoding: str = "utf-8",
        lock_timeout: float = 30,
        prompt: Optional[str] = None,
        verbose: bool = False,
    ):
        """Initialize editor.

        Args:
            input_lines: Source of commands and inserted text (stdin if None)
            output: Stream printed lines go to (stdout if None)
            encoding: Encoding for reading and writing files
            lock_timeout: Seconds to wait for the lock when writing
            prompt: Command prompt shown by ``run``; None shows none
            verbose: Print error messages after ``?``
        """
        self.document = Document()
        self.filename: Optional[str] = None
        self.line = 0
        self.modified = False
        self.last_error: Optional[str] = None
        self.pattern: Optional[Pattern] = None

        self.encoding = encoding
        self.lock_timeout = lock_timeout
        self.prompt = prompt
        self.verbose = verbose
        self._prompt_text = prompt or DEFAULT_PROMPT

        self.output = output if output is not None else sys.stdout
        self._input = iter(input_lines) if input_lines is not None else iter_stream_lines(sys.stdin)

        self.commands = MappingProxyType(
            {
                "p": self._print_lines,
                "n": self._print_lines,
                "l": self._print_lines,
                "i": self._insert,
                "a": self._insert,
                "d": self._delete,
                "c": self._change,
                "e": self._edit,
                "E": self._edit,
                "s": self._substitute,
                "w": self._write,
                "f": self._filename,
                "h": self._help,
                "H": self._toggle_help,
                "P": self._toggle_prompt,
                "q": self._quit,
                "Q": self._quit,
            }
        )

    # Input and output

    def _emit(self, text):
        print(text, file=self.output)

    def read_line(self) -> Optional[str]:
        """Next input line, or None at end of input."""
        return next(self._input, None)

    def read_block(self) -> list[str]:
        """Read lines up to a lone ``.`` or end of input."""
        lines = []
        while True:
            line = self.read_line()
            if line is None or line == INPUT_TERMINATOR:
                return lines
            lines.append(line)

    # Driving

    def run(self) -> int:
        """Read and execute commands until quit or end of input.

        Returns:
            Process exit status
        """
        while True:
            if self.prompt:
                self.output.write(self.prompt)
                self.output.flush()

            command = self.read_line()
            if command is None:
                return EX_SUCCESS

            if self.execute(command) is CommandOutcome.TERMINATE:
                return EX_SUCCESS

    def execute(self, command: str) -> CommandOutcome:
        """Execute one command line.

        Args:
            command: Command text without its newline

        Returns:
            Whether the editor should keep going
        """
        try:
            outcome = self._dispatch(command)
        except EditorError as e:
            self._fail(command, e)
            return CommandOutcome.CONTINUE
        return outcome or CommandOutcome.CONTINUE

    def open(self, filename: str) -> bool:
        """Load a file unconditionally, reporting failure like a command.

        Returns:
            True if the file was loaded
        """
        try:
            self._load(filename)
        except EditorError as e:
            self._fail(f"E {filename}", e)
            return False
        return True

    def _dispatch(self, command: str) -> Optional[CommandOutcome]:
        saved_line = self.line
        try:
            addresses = resolve_addresses(self, command)
            handler = self.commands.get(addresses.verb)
            if handler is None:
                raise UnknownCommandError()
            self._check_range(addresses.start, addresses.end, addresses.verb)
        except EditorError:
            self.line = saved_line
            raise

        logger.debug(f"Dispatching {addresses.verb!r} on {addresses.start},{addresses.end}")
        try:
            return handler(addresses.start, addresses.end, addresses.verb, addresses.text)
        except EditorError:
            self.line = saved_line
            raise

    def _check_range(self, start: int, end: int, verb: str):
        if start > end:
            raise AddressError()
        if verb in LINE_VERBS and (start < 1 or self.document.is_empty()):
            raise AddressError()

    def _fail(self, command: str, error: EditorError):
        self.last_error = str(error)
        logger.info(f"Command {command!r} failed: {error}")
        self._emit("?")
        if self.verbose:
            self._emit(self.last_error)

    # Helpers shared by handlers

    def _set_line(self, line: int):
        """Move the current line, clamped to the document."""
        if self.document.is_empty():
            self.line = 0
        else:
            self.line = max(1, min(line, self.document.last))

    def _check_suffix(self, verb: str, text: str):
        if verb in BARE_VERBS and text[1:].strip():
            raise CommandSyntaxError("invalid command suffix")

    def _check_modified(self):
        """Refuse once when there are unsaved changes."""
        if self.modified:
            self.modified = False
            raise ModifiedWarning()

    def _argument(self, verb: str, text: str) -> Optional[str]:
        words = text.split(None, 1)
        if words[0] != verb:
            raise CommandSyntaxError("invalid command suffix")
        if len(words) > 1:
            return words[1].strip()
        return None

    def _load(self, filename: str):
        lines, size = read_lines(filename, self.encoding)
        self.document.replace_all(lines)
        self.filename = filename
        self.line = self.document.last
        self.modified = False
        self._emit(size)

    # Handlers: (start, end, verb, text) -> Optional[CommandOutcome]

    def _print_lines(self, start, end, verb, text):
        self._check_suffix(verb, text)
        for line_num, line in self.document.iter_lines(start, end):
            if verb == "n":
                self._emit(f"{line_num}\t{line}")
            elif verb == "l":
                self._emit(escape_line(line))
            else:
                self._emit(line)
        self.line = end

    def _insert(self, start, end, verb, text):
        self._check_suffix(verb, text)
        lines = self.read_block()

        if verb == "a":
            after = end
        elif end == 0:
            # Address 0 inserts at the top of an empty document and after
            # the last line of a non-empty one.
            after = self.document.last
        else:
            after = min(end - 1, self.document.last)

        count = self.document.insert_after(after, lines)
        if count:
            self.modified = True
            self._set_line(after + count)
        else:
            self._set_line(end)

    def _delete(self, start, end, verb, text):
        self._check_suffix(verb, text)
        self.document.delete_lines(start, end)
        self._set_line(start)
        self.modified = True

    def _change(self, start, end, verb, text):
        self._check_suffix(verb, text)
        self._delete(start, end, "d", "d")
        self._insert(start, start, "i", "i")

    def _edit(self, start, end, verb, text):
        filename = self._argument(verb, text)
        if not filename:
            raise CommandSyntaxError("filename expected")
        if verb == "e":
            self._check_modified()
        self._load(filename)

    def _write(self, start, end, verb, text):
        words = text.split(None, 1)
        if words[0] not in ("w", "wq"):
            raise CommandSyntaxError("unexpected command suffix")

        filename = words[1].strip() if len(words) > 1 else self.filename
        if not filename:
            raise EditorIOError("no current filename")

        size = write_lines(filename, self.document, self.encoding, self.lock_timeout)
        if self.filename is None:
            self.filename = filename
        self.modified = False
        self._emit(size)

        if words[0] == "wq":
            return CommandOutcome.TERMINATE
        return None

    def _filename(self, start, end, verb, text):
        filename = self._argument(verb, text)
        if filename:
            self.filename = filename
        if not self.filename:
            raise EditorIOError("no current filename")
        self._emit(self.filename)

    def _substitute(self, start, end, verb, text):
        substitution = parse_substitution(text)
        pattern = substitution.compile(self.pattern)
        if substitution.pattern:
            self.pattern = pattern

        changed = substitution.apply(self.document, start, end, pattern)
        self.line = end
        self.modified = True

        if substitution.auto_print:
            self._emit(self.document.get_line(changed[-1] if changed else end))

    def _help(self, start, end, verb, text):
        self._check_suffix(verb, text)
        if self.last_error:
            self._emit(self.last_error)

    def _toggle_help(self, start, end, verb, text):
        self._check_suffix(verb, text)
        self.verbose = not self.verbose
        if self.verbose and self.last_error:
            self._emit(self.last_error)

    def _toggle_prompt(self, start, end, verb, text):
        prompt = self._argument(verb, text)
        if prompt:
            self._prompt_text = self.prompt = prompt
        else:
            self.prompt = None if self.prompt else self._prompt_text

    def _quit(self, start, end, verb, text):
        self._check_suffix(verb, text)
        if verb == "q":
            self._check_modified()
        return CommandOutcome.TERMINATE
