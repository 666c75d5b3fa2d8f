"""Line-address resolution for command text.

Turns the leading address part of a command such as ``1,/foo/-2p`` into a
``(start, end)`` pair and hands back whatever follows it (the verb and its
arguments).

Grammar, per comma/semicolon separated component:

- ``N`` absolute line number (first token only)
- ``.`` current line, ``$`` last line (first token only)
- ``+N``, ``-N``, ``+``, ``-`` offset from the value so far
- ``/re/`` and ``?re?`` forward and backward cyclic search (first token only)
- ``%`` or a leading ``,`` for ``1,$``; a leading ``;`` for ``.,$``

A ``;`` separator moves the current line to the address on its left before
the next component is read.
"""
import logging
import re
from typing import NamedTuple, Optional

from ..core.errors import AddressError, EditorError
from ..core.search import compile_pattern, cyclic_search

logger = logging.getLogger(__name__)

DIGITS = "0123456789"
BLANKS = " \t"


class AddressRange(NamedTuple):
    """Resolved addresses plus the unparsed command text."""

    start: int
    end: int
    text: str

    @property
    def verb(self) -> str:
        return self.text[:1]


class ParserState:
    """Two-cursor scanner over a command line.

    ``speculative`` moves as characters are looked at; ``committed`` only
    moves when a token has been recognized. ``rewind`` throws away a partial
    match.
    """

    def __init__(self, text: str):
        self.text = text
        self.committed = 0
        self.speculative = 0

    def commit(self):
        self.committed = self.speculative

    def rewind(self):
        self.speculative = self.committed

    def look_ahead(self) -> Optional[str]:
        if self.speculative >= len(self.text):
            return None
        return self.text[self.speculative]

    def consume(self):
        if self.speculative < len(self.text):
            self.speculative += 1

    def match(self, char: str) -> bool:
        if self.look_ahead() == char:
            self.consume()
            return True
        return False

    def skip_blanks(self):
        while self.look_ahead() is not None and self.look_ahead() in BLANKS:
            self.consume()
        self.commit()

    @property
    def remainder(self) -> str:
        return self.text[self.committed :]


class AddressContext:
    """Per-command resolution state threaded through the parse functions."""

    def __init__(self, state: ParserState, editor):
        self.state = state
        self.editor = editor
        self.first = editor.line
        self.second = editor.line
        self.count = 0


def _is_digit(char: Optional[str]) -> bool:
    return char is not None and char in DIGITS


def _read_int(ctx: AddressContext) -> Optional[int]:
    state = ctx.state
    begin = state.speculative
    while _is_digit(state.look_ahead()):
        state.consume()

    if state.speculative == begin:
        state.rewind()
        return None

    value = int(state.text[begin : state.speculative])
    state.commit()
    return value


def read_delimited(state: ParserState, delimiter: str) -> Optional[str]:
    """Read a pattern enclosed in ``delimiter``.

    The closing delimiter may be missing at end of input. ``\\<delimiter>``
    stands for the delimiter itself; any other escape is kept for the regex.

    Returns:
        The pattern source, or None if the text does not open with
        ``delimiter``
    """
    if not state.match(delimiter):
        state.rewind()
        return None

    chars = []
    while True:
        char = state.look_ahead()
        if char is None:
            break
        state.consume()

        if char == "\\":
            escaped = state.look_ahead()
            if escaped == delimiter:
                state.consume()
                chars.append(re.escape(delimiter))
                continue
            chars.append(char)
            if escaped is not None:
                state.consume()
                chars.append(escaped)
            continue

        if char == delimiter:
            break
        chars.append(char)

    state.commit()
    return "".join(chars)


def _next_address(ctx: AddressContext) -> int:
    state = ctx.state
    editor = ctx.editor
    state.skip_blanks()

    addr = editor.line
    first = True

    while True:
        char = state.look_ahead()

        if _is_digit(char):
            if not first:
                raise AddressError()
            addr = _read_int(ctx)

        elif char in ("+", "-", " ", "\t"):
            state.consume()
            state.skip_blanks()
            if _is_digit(state.look_ahead()):
                offset = _read_int(ctx)
                addr += -offset if char == "-" else offset
            elif char == "+":
                addr += 1
            elif char == "-":
                addr -= 1

        elif char in (".", "$"):
            if not first:
                raise AddressError()
            state.consume()
            state.commit()
            addr = editor.line if char == "." else editor.document.last

        elif char in ("/", "?"):
            if not first:
                raise AddressError()
            source = read_delimited(state, char)
            if source:
                editor.pattern = compile_pattern(source)
            addr = cyclic_search(
                editor.document, editor.line, editor.pattern, forward=char == "/"
            )

        elif char in ("%", ",", ";") and first:
            state.consume()
            state.commit()
            ctx.count += 1
            ctx.second = editor.line if char == ";" else 1
            addr = editor.document.last

        else:
            # 0 resolves on any document; the dispatcher decides which verbs take it.
            if addr < 0 or addr > editor.document.last:
                raise AddressError()
            ctx.count += 1
            return addr

        first = False


def _address_range(ctx: AddressContext) -> int:
    state = ctx.state
    editor = ctx.editor
    ctx.count = 0
    ctx.first = ctx.second = editor.line

    while True:
        addr = _next_address(ctx)
        ctx.first, ctx.second = ctx.second, addr

        char = state.look_ahead()
        if char not in (",", ";"):
            break
        if char == ";":
            editor.line = addr
        state.consume()
        state.commit()

    if ctx.count == 1:
        ctx.first = ctx.second
    return ctx.count


def resolve_addresses(editor, text: str) -> AddressRange:
    """Resolve the address prefix of a command line.

    ``editor`` supplies ``document``, ``line`` and ``pattern``. A ``;``
    separator and pattern addresses update ``editor.line`` and
    ``editor.pattern``; the line is put back if resolution fails.

    Args:
        editor: Editor whose state the addresses refer to
        text: Raw command line

    Returns:
        AddressRange with the verb and its arguments as ``text``

    Raises:
        AddressError: For malformed or out-of-range addresses
        PatternError: For invalid or missing search patterns
        NoMatchError: When a search finds nothing
    """
    if not text:
        addr = editor.line + 1
        if addr > editor.document.last:
            raise AddressError()
        return AddressRange(addr, addr, "p")

    ctx = AddressContext(ParserState(text), editor)
    saved_line = editor.line
    try:
        count = _address_range(ctx)
    except EditorError:
        editor.line = saved_line
        raise

    remainder = ctx.state.remainder or "p"
    logger.debug(f"Resolved {text!r} to {ctx.first},{ctx.second} ({count} addresses)")
    return AddressRange(ctx.first, ctx.second, remainder)
